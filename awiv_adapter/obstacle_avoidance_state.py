"""Obstacle avoidance status assembled from the behavior planner's reports."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Optional, Protocol

from awiv_adapter.messages import AutowareInfo, Trajectory

logger = logging.getLogger(__name__)


class _Clock(Protocol):
    def now(self) -> float: ...


@dataclass
class ObstacleAvoidanceStatus:
    """Snapshot of the obstacle avoidance state as published by the API."""

    stamp: float = 0.0
    frame_id: str = "base_link"
    obstacle_avoidance_ready: bool = False
    candidate_path: Optional[Trajectory] = None


class ObstacleAvoidanceStatePublisher:
    """Builds obstacle avoidance status messages from AutowareInfo.

    ``obstacle_avoid_ready`` is read from its ``is_avoidance_possible``
    attribute; ``obstacle_avoid_candidate`` is passed on as the candidate path.
    """

    def __init__(
        self,
        clock: _Clock,
        publish: Optional[Callable[[ObstacleAvoidanceStatus], None]] = None,
    ) -> None:
        self._clock = clock
        self._publish = publish

    def build_status(self, aw_info: AutowareInfo) -> ObstacleAvoidanceStatus:
        """Assemble a status from every input that has arrived."""
        status = ObstacleAvoidanceStatus(stamp=self._clock.now())
        if aw_info.obstacle_avoid_ready is None:
            logger.debug("obstacle_avoidance_ready is missing")
        else:
            status.obstacle_avoidance_ready = aw_info.obstacle_avoid_ready.is_avoidance_possible
        if aw_info.obstacle_avoid_candidate is None:
            logger.debug("obstacle_avoidance_candidate_path is missing")
        else:
            status.candidate_path = aw_info.obstacle_avoid_candidate
        return status

    def publish_state(self, aw_info: AutowareInfo) -> ObstacleAvoidanceStatus:
        """Build a status, hand it to the publish callback and return it."""
        status = self.build_status(aw_info)
        if self._publish is not None:
            self._publish(status)
        return status