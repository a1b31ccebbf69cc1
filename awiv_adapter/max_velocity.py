"""Maximum velocity command derived from the API limit and temporary stops."""

from __future__ import annotations

import struct
from typing import Any, Callable, Optional


def _to_float32(value: float) -> float:
    return struct.unpack("f", struct.pack("f", value))[0]


class MaxVelocityPublisher:
    """Combines the requested velocity limit with the temporary stop flag.

    ``max_velocity`` inputs carry a ``max_velocity`` attribute and
    ``temporary_stop`` inputs a ``stop`` attribute. Published values are
    passed to ``publish`` and the last one is kept, as a latched topic would.
    """

    def __init__(
        self,
        default_max_velocity: float,
        publish: Optional[Callable[[float], None]] = None,
    ) -> None:
        self.default_max_velocity = default_max_velocity
        self._publish = publish
        self.last_published: Optional[float] = None

    def calc_max_velocity(self, max_velocity: Any, temporary_stop: Any) -> Optional[float]:
        """Return the velocity limit, or None when neither input has arrived."""
        if max_velocity is None and temporary_stop is None:
            return None
        if temporary_stop is not None and temporary_stop.stop:
            return 0.0
        limit = (
            max_velocity.max_velocity if max_velocity is not None else self.default_max_velocity
        )
        return _to_float32(limit)

    def publish_state(self, aw_info: Any) -> Optional[float]:
        """Publish the limit for the current inputs and return it, if any."""
        value = self.calc_max_velocity(aw_info.max_velocity, aw_info.temporary_stop)
        if value is None:
            return None
        self.last_published = value
        if self._publish is not None:
            self._publish(value)
        return value