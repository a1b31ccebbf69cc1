"""Adapter that gathers internal topics and publishes the API status messages."""

from __future__ import annotations

import logging
from dataclasses import fields
from typing import Any, Callable, Optional, Protocol

from awiv_adapter.autoware_state import AutowareStatePublisher
from awiv_adapter.lane_change_state import LaneChangeStatePublisher
from awiv_adapter.max_velocity import MaxVelocityPublisher
from awiv_adapter.messages import AutowareInfo, PoseStamped, StopReasonArray
from awiv_adapter.obstacle_avoidance_state import ObstacleAvoidanceStatePublisher
from awiv_adapter.stop_reason_aggregator import StopReasonAggregator
from awiv_adapter.v2x_aggregator import (
    InfrastructureCommandArray,
    V2XAggregator,
    VirtualTrafficLightStateArray,
)
from awiv_adapter.vehicle_state import VehicleStatePublisher

logger = logging.getLogger(__name__)

VEHICLE_STATUS_TOPIC = "output/vehicle_status"
AUTOWARE_STATUS_TOPIC = "output/autoware_status"
LANE_CHANGE_STATUS_TOPIC = "output/lane_change_status"
OBSTACLE_AVOID_STATUS_TOPIC = "output/obstacle_avoid_status"
MAX_VELOCITY_TOPIC = "output/max_velocity"
V2X_COMMAND_TOPIC = "output/v2x_command"
V2X_STATE_TOPIC = "output/v2x_state"

_INFO_FIELDS = frozenset(f.name for f in fields(AutowareInfo))


class _Clock(Protocol):
    def now(self) -> float: ...


class AutowareIvAdapter:
    """Keeps the latest value of every input and publishes API statuses.

    Inputs arrive through :meth:`update` (or the dedicated ``on_*``
    handlers for inputs that need aggregation). :meth:`timer_callback` is
    meant to be called every :attr:`period` seconds; it refreshes the
    current pose from ``pose_source`` and publishes every status message.
    ``publish`` is called as ``publish(topic, message)``.

    ``pose_source`` returns the pose of the vehicle in the map frame and
    raises ``LookupError`` when it is not available; the last known pose is
    then kept.
    """

    def __init__(
        self,
        clock: _Clock,
        publish: Optional[Callable[[str, Any], None]] = None,
        pose_source: Optional[Callable[[], PoseStamped]] = None,
        *,
        status_pub_hz: float = 5.0,
        stop_reason_timeout: float = 0.5,
        stop_reason_thresh_dist: float = 100.0,
        default_max_velocity: float = 0.0,
        emergency_stop: bool = False,
    ) -> None:
        if status_pub_hz <= 0:
            raise ValueError("status_pub_hz must be positive")
        self._clock = clock
        self._publish = publish
        self._pose_source = pose_source
        self.status_pub_hz = status_pub_hz
        self.stop_reason_timeout = stop_reason_timeout
        self.stop_reason_thresh_dist = stop_reason_thresh_dist
        self.aw_info = AutowareInfo()

        self._check_emergency_param(emergency_stop)

        self.vehicle_state_publisher = VehicleStatePublisher(
            clock, lambda msg: self._emit(VEHICLE_STATUS_TOPIC, msg)
        )
        self.autoware_state_publisher = AutowareStatePublisher(
            clock, lambda msg: self._emit(AUTOWARE_STATUS_TOPIC, msg)
        )
        self.stop_reason_aggregator = StopReasonAggregator(
            clock, stop_reason_timeout, stop_reason_thresh_dist
        )
        self.v2x_aggregator = V2XAggregator(clock)
        self.lane_change_state_publisher = LaneChangeStatePublisher(
            clock, lambda msg: self._emit(LANE_CHANGE_STATUS_TOPIC, msg)
        )
        self.obstacle_avoidance_state_publisher = ObstacleAvoidanceStatePublisher(
            clock, lambda msg: self._emit(OBSTACLE_AVOID_STATUS_TOPIC, msg)
        )
        self.max_velocity_publisher = MaxVelocityPublisher(
            default_max_velocity, lambda value: self._emit(MAX_VELOCITY_TOPIC, value)
        )

        self._handlers: dict[str, Callable[[Any], Any]] = {
            "stop_reason": self.on_stop_reason,
            "v2x_command": self.on_v2x_command,
            "v2x_state": self.on_v2x_state,
            "max_velocity": self.on_max_velocity,
            "temporary_stop": self.on_temporary_stop,
        }

    @property
    def period(self) -> float:
        """Seconds between two timer callbacks."""
        return 1.0 / self.status_pub_hz

    @staticmethod
    def _check_emergency_param(emergency_stop: bool) -> None:
        if not emergency_stop:
            logger.warning("parameter[check_external_emergency_heartbeat] is false.")
            logger.warning("autoware/put/emergency is not valid")

    def _emit(self, topic: str, message: Any) -> None:
        if self._publish is not None:
            self._publish(topic, message)

    def _refresh_pose(self) -> None:
        if self._pose_source is None:
            return
        try:
            self.aw_info.current_pose = self._pose_source()
        except LookupError:
            logger.debug("cannot get self pose")

    def timer_callback(self) -> dict[str, Any]:
        """Publish every status message and return them keyed by topic."""
        self._refresh_pose()
        published: dict[str, Any] = {
            VEHICLE_STATUS_TOPIC: self.vehicle_state_publisher.publish_state(self.aw_info),
            AUTOWARE_STATUS_TOPIC: self.autoware_state_publisher.publish_state(self.aw_info),
            LANE_CHANGE_STATUS_TOPIC: self.lane_change_state_publisher.publish_state(
                self.aw_info
            ),
            OBSTACLE_AVOID_STATUS_TOPIC: self.obstacle_avoidance_state_publisher.publish_state(
                self.aw_info
            ),
        }
        if self.aw_info.v2x_command is not None:
            self._emit(V2X_COMMAND_TOPIC, self.aw_info.v2x_command)
            published[V2X_COMMAND_TOPIC] = self.aw_info.v2x_command
        if self.aw_info.v2x_state is not None:
            self._emit(V2X_STATE_TOPIC, self.aw_info.v2x_state)
            published[V2X_STATE_TOPIC] = self.aw_info.v2x_state
        return published

    def update(self, field: str, msg: Any) -> Any:
        """Record a received message for the named input.

        Inputs that need aggregation are routed to their handler; the value
        the handler returns is passed back.
        """
        if field not in _INFO_FIELDS:
            raise ValueError(f"unknown input: {field!r}")
        handler = self._handlers.get(field)
        if handler is not None:
            return handler(msg)
        setattr(self.aw_info, field, msg)
        return msg

    def on_stop_reason(self, msg: StopReasonArray) -> StopReasonArray:
        """Merge a stop reason array into the aggregated stop reasons."""
        self.aw_info.stop_reason = self.stop_reason_aggregator.update(msg, self.aw_info)
        return self.aw_info.stop_reason

    def on_v2x_command(self, msg: InfrastructureCommandArray) -> InfrastructureCommandArray:
        """Merge received infrastructure commands."""
        self.aw_info.v2x_command = self.v2x_aggregator.update_commands(msg)
        return self.aw_info.v2x_command

    def on_v2x_state(self, msg: VirtualTrafficLightStateArray) -> VirtualTrafficLightStateArray:
        """Merge received virtual traffic light states."""
        self.aw_info.v2x_state = self.v2x_aggregator.update_states(msg)
        return self.aw_info.v2x_state

    def on_max_velocity(self, msg: Any) -> Optional[float]:
        """Record the requested velocity limit and publish the resulting limit."""
        self.aw_info.max_velocity = msg
        return self.max_velocity_publisher.publish_state(self.aw_info)

    def on_temporary_stop(self, msg: Any) -> Optional[float]:
        """Record a temporary stop request; a repeat of the last one is ignored."""
        previous = self.aw_info.temporary_stop
        if previous is not None and previous.stop == msg.stop:
            return None
        self.aw_info.temporary_stop = msg
        return self.max_velocity_publisher.publish_state(self.aw_info)