"""Relay of internal messages onto the legacy API topics."""

from __future__ import annotations

from typing import Any, Callable, Optional

from awiv_adapter.messages import AutowareState, MrmState

STATE_TOPIC = "/api/iv_msgs/autoware/state"
CONTROL_MODE_TOPIC = "/api/iv_msgs/vehicle/status/control_mode"
TRAJECTORY_TOPIC = "/api/iv_msgs/planning/scenario_planning/trajectory"
DYNAMIC_OBJECTS_TOPIC = "/api/iv_msgs/perception/object_recognition/tracking/objects"


def _identity(message: Any) -> Any:
    return message


class IVMsgsRelay:
    """Republishes state, control mode, trajectory and objects on API topics.

    ``publish`` is called as ``publish(topic, message)``. The reported
    system state is replaced by EMERGENCY while a minimal risk maneuver is
    anything other than NORMAL. Trajectories and tracked objects pass
    through the given converters before they are published.
    """

    def __init__(
        self,
        publish: Callable[[str, Any], None],
        convert_trajectory: Optional[Callable[[Any], Any]] = None,
        convert_tracked_objects: Optional[Callable[[Any], Any]] = None,
    ) -> None:
        self._publish = publish
        self._convert_trajectory = convert_trajectory or _identity
        self._convert_tracked_objects = convert_tracked_objects or _identity
        self.is_emergency = False

    def on_state(self, state: AutowareState) -> AutowareState:
        """Publish the system state, overridden while in emergency."""
        output = AutowareState.EMERGENCY if self.is_emergency else state
        self._publish(STATE_TOPIC, output)
        return output

    def on_emergency(self, mrm_state: MrmState) -> None:
        """Record whether a minimal risk maneuver is in progress."""
        self.is_emergency = mrm_state != MrmState.NORMAL

    def on_control_mode(self, message: Any) -> Any:
        """Publish the control mode unchanged."""
        self._publish(CONTROL_MODE_TOPIC, message)
        return message

    def on_trajectory(self, message: Any) -> Any:
        """Publish the converted trajectory."""
        output = self._convert_trajectory(message)
        self._publish(TRAJECTORY_TOPIC, output)
        return output

    def on_tracked_objects(self, message: Any) -> Any:
        """Publish the converted tracked objects."""
        output = self._convert_tracked_objects(message)
        self._publish(DYNAMIC_OBJECTS_TOPIC, output)
        return output