"""Autoware status assembled from system state, diagnostics and planning."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from typing import Any, Callable, Optional, Protocol, Sequence

from awiv_adapter.diagnostics_filter import extract_leaf_diagnostics
from awiv_adapter.messages import (
    AutowareInfo,
    AutowareState,
    ControlMode,
    DiagnosticStatus,
    GateMode,
    MrmState,
    StopReasonArray,
)

logger = logging.getLogger(__name__)

_EMERGENCY_MRM_STATES = frozenset(
    {MrmState.MRM_OPERATING, MrmState.MRM_SUCCEEDED, MrmState.MRM_FAILED}
)


class _Clock(Protocol):
    def now(self) -> float: ...


@dataclass
class AutowareStatus:
    """Snapshot of the overall system status as published by the API."""

    stamp: float = 0.0
    frame_id: str = "base_link"
    autoware_state: Optional[AutowareState] = None
    control_mode: Optional[ControlMode] = None
    gate_mode: Optional[GateMode] = None
    emergency_stopped: bool = False
    current_max_velocity: float = 0.0
    hazard_level: int = 0
    hazard_emergency: bool = False
    diagnostics_spf: list[DiagnosticStatus] = field(default_factory=list)
    diagnostics_lf: list[DiagnosticStatus] = field(default_factory=list)
    diagnostics_sf: list[DiagnosticStatus] = field(default_factory=list)
    diagnostics_nf: list[DiagnosticStatus] = field(default_factory=list)
    stop_reason: Optional[StopReasonArray] = None
    diagnostics: list[DiagnosticStatus] = field(default_factory=list)
    error_diagnostics: list[DiagnosticStatus] = field(default_factory=list)
    arrived_goal: bool = False


def _prefixed(
    diagnostics: Sequence[DiagnosticStatus], prefix: str, level: Optional[int] = None
) -> list[DiagnosticStatus]:
    return [
        replace(
            diag,
            message=prefix + diag.message,
            level=diag.level if level is None else level,
        )
        for diag in diagnostics
    ]


class AutowareStatePublisher:
    """Builds system status messages from the inputs held in AutowareInfo.

    ``current_max_velocity`` is read from its ``max_velocity`` attribute.
    ``hazard_status`` carries ``level``, ``emergency`` and the fault lists
    ``diag_single_point_fault``, ``diag_latent_fault``, ``diag_safe_fault``
    and ``diag_no_fault``. The goal flag is remembered across calls.
    """

    def __init__(
        self,
        clock: _Clock,
        publish: Optional[Callable[[AutowareStatus], None]] = None,
    ) -> None:
        self._clock = clock
        self._publish = publish
        self._arrived_goal = False
        self._prev_state: Optional[AutowareState] = None

    def is_goal(self, state: AutowareState) -> bool:
        """Update and return whether the vehicle has arrived at its goal."""
        if state == AutowareState.ARRIVAL_GOAL:
            self._arrived_goal = True
        elif (
            self._prev_state == AutowareState.DRIVING
            and state == AutowareState.WAITING_FOR_ROUTE
        ):
            self._arrived_goal = True

        if state in (AutowareState.WAITING_FOR_ENGAGE, AutowareState.DRIVING):
            self._arrived_goal = False

        self._prev_state = state
        return self._arrived_goal

    def build_status(self, aw_info: AutowareInfo) -> AutowareStatus:
        """Assemble a status from every input that has arrived."""
        status = AutowareStatus(stamp=self._clock.now())
        self._fill_autoware_state(aw_info, status)
        if aw_info.control_mode is None:
            logger.debug("control mode is missing")
        else:
            status.control_mode = aw_info.control_mode
        if aw_info.gate_mode is None:
            logger.debug("gate mode is missing")
        else:
            status.gate_mode = aw_info.gate_mode
        if aw_info.mrm_state is None:
            logger.debug("mrm_state is missing")
        else:
            status.emergency_stopped = aw_info.mrm_state in _EMERGENCY_MRM_STATES
        if aw_info.current_max_velocity is None:
            logger.debug("current_max_velocity is missing")
        else:
            status.current_max_velocity = aw_info.current_max_velocity.max_velocity
        self._fill_hazard_status(aw_info, status)
        if aw_info.stop_reason is None:
            logger.debug("stop reason is missing")
        else:
            status.stop_reason = aw_info.stop_reason
        if aw_info.diagnostics is None:
            logger.debug("diagnostics is missing")
        else:
            status.diagnostics = extract_leaf_diagnostics(aw_info.diagnostics)
        self._fill_error_diagnostics(aw_info, status)
        return status

    def publish_state(self, aw_info: AutowareInfo) -> AutowareStatus:
        """Build a status, hand it to the publish callback and return it."""
        status = self.build_status(aw_info)
        if self._publish is not None:
            self._publish(status)
        return status

    def _fill_autoware_state(self, aw_info: AutowareInfo, status: AutowareStatus) -> None:
        if aw_info.autoware_state is None:
            logger.debug("autoware_state is missing")
            return
        status.autoware_state = aw_info.autoware_state
        status.arrived_goal = self.is_goal(aw_info.autoware_state)

    @staticmethod
    def _fill_hazard_status(aw_info: AutowareInfo, status: AutowareStatus) -> None:
        if aw_info.autoware_state is None:
            logger.debug("autoware_state is missing")
            return
        if aw_info.control_mode is None:
            logger.debug("control_mode is missing")
            return
        hazard: Any = aw_info.hazard_status
        if hazard is None:
            logger.debug("hazard_status is missing")
            return
        status.hazard_level = hazard.level
        status.hazard_emergency = hazard.emergency
        status.diagnostics_spf = extract_leaf_diagnostics(hazard.diag_single_point_fault)
        status.diagnostics_lf = extract_leaf_diagnostics(hazard.diag_latent_fault)
        status.diagnostics_sf = extract_leaf_diagnostics(hazard.diag_safe_fault)
        status.diagnostics_nf = extract_leaf_diagnostics(hazard.diag_no_fault)

    @staticmethod
    def _fill_error_diagnostics(aw_info: AutowareInfo, status: AutowareStatus) -> None:
        if aw_info.autoware_state is None:
            logger.debug("autoware_state is missing")
            return
        if aw_info.control_mode is None:
            logger.debug("control mode is missing")
            return
        if aw_info.diagnostics is None:
            logger.debug("diagnostics is missing")
            return
        hazard: Any = aw_info.hazard_status
        if hazard is None:
            logger.debug("hazard_status is missing")
            return
        error_diagnostics = (
            _prefixed(hazard.diag_single_point_fault, "[Single Point Fault]")
            + _prefixed(hazard.diag_latent_fault, "[Latent Fault]")
            + _prefixed(hazard.diag_safe_fault, "[Safe Fault]")
            + _prefixed(hazard.diag_no_fault, "[No Fault]", DiagnosticStatus.OK)
        )
        status.error_diagnostics = extract_leaf_diagnostics(error_diagnostics)