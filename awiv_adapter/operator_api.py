"""API for choosing who operates the vehicle and where remote commands come from."""

from __future__ import annotations

import logging
from enum import IntEnum
from typing import Any, Callable, Optional

from awiv_adapter.messages import (
    ControlMode,
    GateMode,
    ResponseStatus,
    response_error,
    response_success,
)

logger = logging.getLogger(__name__)

GATE_MODE_TOPIC = "/control/gate_mode_cmd"
OPERATOR_TOPIC = "/api/autoware/get/operator"
OBSERVER_TOPIC = "/api/autoware/get/observer"

INVALID_PARAMETER_MESSAGE = "Invalid parameter."
EMERGENCY_IGNORED_MESSAGE = "ignored request because the status is emergency."


class OperatorMode(IntEnum):
    """Who is in charge of driving."""

    DRIVER = 1
    AUTONOMOUS = 2
    OBSERVER = 3


class ObserverMode(IntEnum):
    """Where external commands are taken from."""

    LOCAL = 1
    REMOTE = 2


class ServiceCallError(Exception):
    """Raised by a service client when the call itself could not be made."""

    def __init__(self, message: str, status: Optional[ResponseStatus] = None) -> None:
        super().__init__(message)
        self.status = status if status is not None else response_error(message)


def _call(client: Callable[[Any], tuple[bool, str]], request: Any) -> ResponseStatus:
    try:
        success, message = client(request)
    except ServiceCallError as exc:
        return exc.status
    return response_success(message) if success else response_error(message)


class OperatorApi:
    """Handles operator and observer requests and reports the current ones.

    ``change_autoware_control(engage)`` and ``select_external_command(mode)``
    return ``(success, message)`` and raise :class:`ServiceCallError` when
    the service cannot be reached. ``publish`` is called as
    ``publish(topic, message)``. :meth:`on_timer` is meant to run every
    0.2 seconds.
    """

    def __init__(
        self,
        change_autoware_control: Callable[[bool], tuple[bool, str]],
        select_external_command: Callable[[ObserverMode], tuple[bool, str]],
        publish: Optional[Callable[[str, Any], None]] = None,
        *,
        send_engage_in_emergency: bool = False,
    ) -> None:
        self._change_autoware_control = change_autoware_control
        self._select_external_command = select_external_command
        self._publish = publish
        self.send_engage_in_emergency = send_engage_in_emergency
        self.external_select: Optional[int] = None
        self.gate_mode: Optional[int] = None
        self.vehicle_control_mode: Optional[int] = None
        self.emergency: Optional[bool] = None

    def _emit(self, topic: str, message: Any) -> None:
        if self._publish is not None:
            self._publish(topic, message)

    def set_operator(self, mode: int) -> ResponseStatus:
        """Hand driving to the driver, the autonomous system or an observer."""
        try:
            operator = OperatorMode(mode)
        except ValueError:
            return response_error(INVALID_PARAMETER_MESSAGE)

        if operator is OperatorMode.DRIVER:
            return self._set_vehicle_engage(False)
        if operator is OperatorMode.AUTONOMOUS:
            if not self.send_engage_in_emergency and self.emergency:
                return response_error(EMERGENCY_IGNORED_MESSAGE)
            self._emit(GATE_MODE_TOPIC, GateMode.AUTO)
            return self._set_vehicle_engage(True)
        self._emit(GATE_MODE_TOPIC, GateMode.EXTERNAL)
        return self._set_vehicle_engage(True)

    def set_observer(self, mode: int) -> ResponseStatus:
        """Select whether external commands come from a local or remote source."""
        try:
            observer = ObserverMode(mode)
        except ValueError:
            return response_error(INVALID_PARAMETER_MESSAGE)
        return _call(self._select_external_command, observer)

    def on_external_select(self, mode: int) -> None:
        """Record the current external command selector mode."""
        self.external_select = mode

    def on_gate_mode(self, mode: int) -> None:
        """Record the current control gate mode."""
        self.gate_mode = mode

    def on_vehicle_control_mode(self, mode: int) -> None:
        """Record the control mode reported by the vehicle."""
        self.vehicle_control_mode = mode

    def on_emergency_status(self, emergency: bool) -> None:
        """Record whether the system is in emergency."""
        self.emergency = emergency

    def on_timer(self) -> tuple[Optional[OperatorMode], Optional[ObserverMode]]:
        """Publish the current operator and observer and return them."""
        return self._publish_operator(), self._publish_observer()

    def _publish_operator(self) -> Optional[OperatorMode]:
        if self.vehicle_control_mode is None or self.gate_mode is None:
            return None
        if self.vehicle_control_mode == ControlMode.MANUAL:
            operator = OperatorMode.DRIVER
        elif self.gate_mode == GateMode.AUTO:
            operator = OperatorMode.AUTONOMOUS
        elif self.gate_mode == GateMode.EXTERNAL:
            operator = OperatorMode.OBSERVER
        else:
            logger.error("Unknown operator.")
            return None
        self._emit(OPERATOR_TOPIC, operator)
        return operator

    def _publish_observer(self) -> Optional[ObserverMode]:
        if self.external_select is None:
            return None
        try:
            observer = ObserverMode(self.external_select)
        except ValueError:
            logger.error("Unknown observer.")
            return None
        self._emit(OBSERVER_TOPIC, observer)
        return observer

    def _set_vehicle_engage(self, engage: bool) -> ResponseStatus:
        return _call(self._change_autoware_control, engage)