"""API for pausing driving and setting the velocity limit."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Optional, Protocol

from awiv_adapter.messages import ResponseStatus, response_error, response_success

API_VELOCITY_TOPIC = "/api/autoware/get/velocity_limit"
PLANNING_VELOCITY_TOPIC = "/planning/scenario_planning/max_velocity_default"

VELOCITY_EPSILON = 1e-5
NOT_READY_MESSAGE = "It is not ready to set velocity."


class _Clock(Protocol):
    def now(self) -> float: ...


@dataclass(frozen=True)
class VelocityLimit:
    """A timestamped maximum velocity."""

    max_velocity: float = 0.0
    stamp: float = 0.0


class VelocityApi:
    """Turns pause and limit requests into planning velocity limits.

    Requests are refused until the planner has reported its current limit.
    The last positive limit reported is remembered so that releasing a
    pause restores it. ``publish`` is called as ``publish(topic, limit)``;
    the last limit sent to each topic is kept in ``latched``.
    """

    def __init__(
        self,
        clock: _Clock,
        publish: Optional[Callable[[str, VelocityLimit], None]] = None,
    ) -> None:
        self._clock = clock
        self._publish = publish
        self.is_ready = False
        self.velocity_limit = 0.0
        self.latched: dict[str, VelocityLimit] = {}

    def set_pause_driving(self, pause: bool) -> ResponseStatus:
        """Stop the vehicle, or restore the remembered limit."""
        if not self.is_ready:
            return response_error(NOT_READY_MESSAGE)
        self._send(PLANNING_VELOCITY_TOPIC, 0.0 if pause else self.velocity_limit)
        return response_success()

    def set_velocity_limit(self, velocity: float) -> ResponseStatus:
        """Request a new maximum velocity."""
        if not self.is_ready:
            return response_error(NOT_READY_MESSAGE)
        self._send(PLANNING_VELOCITY_TOPIC, velocity)
        return response_success()

    def on_velocity_limit(self, max_velocity: float) -> VelocityLimit:
        """Handle the planner's current limit and republish it on the API."""
        if VELOCITY_EPSILON < max_velocity:
            self.velocity_limit = max_velocity
        self.is_ready = True
        return self._send(API_VELOCITY_TOPIC, max_velocity)

    def _send(self, topic: str, velocity: float) -> VelocityLimit:
        msg = VelocityLimit(max_velocity=velocity, stamp=self._clock.now())
        self.latched[topic] = msg
        if self._publish is not None:
            self._publish(topic, msg)
        return msg