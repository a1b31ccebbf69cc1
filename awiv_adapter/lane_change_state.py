"""Lane change status assembled from the behavior planner's reports."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Optional, Protocol

from awiv_adapter.messages import AutowareInfo

logger = logging.getLogger(__name__)


class _Clock(Protocol):
    def now(self) -> float: ...


@dataclass
class LaneChangeStatus:
    """Snapshot of the lane change state as published by the API."""

    stamp: float = 0.0
    frame_id: str = "base_link"
    force_lane_change_available: bool = False
    lane_change_ready: bool = False
    candidate_path: Any = None


class LaneChangeStatePublisher:
    """Builds lane change status messages from the inputs in AutowareInfo.

    ``lane_change_available`` and ``lane_change_ready`` are read from their
    ``status`` attribute; ``lane_change_candidate`` is passed on as the
    candidate path.
    """

    def __init__(
        self,
        clock: _Clock,
        publish: Optional[Callable[[LaneChangeStatus], None]] = None,
    ) -> None:
        self._clock = clock
        self._publish = publish

    def build_status(self, aw_info: AutowareInfo) -> LaneChangeStatus:
        """Assemble a status from every input that has arrived."""
        status = LaneChangeStatus(stamp=self._clock.now())
        if aw_info.lane_change_available is None:
            logger.debug("lane change available is missing")
        else:
            status.force_lane_change_available = aw_info.lane_change_available.status
        if aw_info.lane_change_ready is None:
            logger.debug("lane change ready is missing")
        else:
            status.lane_change_ready = aw_info.lane_change_ready.status
        if aw_info.lane_change_candidate is None:
            logger.debug("lane_change_candidate_path is missing")
        else:
            status.candidate_path = aw_info.lane_change_candidate
        return status

    def publish_state(self, aw_info: AutowareInfo) -> LaneChangeStatus:
        """Build a status, hand it to the publish callback and return it."""
        status = self.build_status(aw_info)
        if self._publish is not None:
            self._publish(status)
        return status