"""Message types shared by the adapter components."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import Enum, IntEnum
from typing import Any, ClassVar, Optional, Sequence


@dataclass(frozen=True)
class Point:
    """A point in 3D space."""

    x: float = 0.0
    y: float = 0.0
    z: float = 0.0


@dataclass(frozen=True)
class Quaternion:
    """An orientation expressed as a unit quaternion."""

    x: float = 0.0
    y: float = 0.0
    z: float = 0.0
    w: float = 1.0


@dataclass(frozen=True)
class Pose:
    """Position and orientation."""

    position: Point = field(default_factory=Point)
    orientation: Quaternion = field(default_factory=Quaternion)


@dataclass(frozen=True)
class PoseStamped:
    """A pose with a timestamp (seconds) and a frame."""

    pose: Pose = field(default_factory=Pose)
    stamp: float = 0.0
    frame_id: str = ""


@dataclass(frozen=True)
class TrajectoryPoint:
    """One point of a planned trajectory."""

    pose: Pose = field(default_factory=Pose)
    longitudinal_velocity_mps: float = 0.0


@dataclass(frozen=True)
class Trajectory:
    """A sequence of trajectory points."""

    points: Sequence[TrajectoryPoint] = ()
    stamp: float = 0.0
    frame_id: str = ""


@dataclass(frozen=True)
class DiagnosticStatus:
    """Status of one diagnostic; names are slash-separated hierarchies."""

    OK: ClassVar[int] = 0
    WARN: ClassVar[int] = 1
    ERROR: ClassVar[int] = 2
    STALE: ClassVar[int] = 3

    name: str = ""
    level: int = 0
    message: str = ""
    hardware_id: str = ""
    values: Sequence[tuple[str, str]] = ()


@dataclass(frozen=True)
class StopFactor:
    """A place where the vehicle stops and how far away it is."""

    stop_pose: Pose = field(default_factory=Pose)
    dist_to_stop_pose: float = 0.0
    stop_factor_points: Sequence[Point] = ()


@dataclass(frozen=True)
class StopReason:
    """A named reason to stop together with its stop factors."""

    reason: str = ""
    stop_factors: Sequence[StopFactor] = ()


@dataclass(frozen=True)
class StopReasonArray:
    """A timestamped collection of stop reasons."""

    stop_reasons: Sequence[StopReason] = ()
    stamp: float = 0.0
    frame_id: str = ""


class AutowareState(str, Enum):
    """Overall state of the autonomous driving system."""

    INITIALIZING_VEHICLE = "InitializingVehicle"
    WAITING_FOR_ROUTE = "WaitingForRoute"
    PLANNING = "Planning"
    WAITING_FOR_ENGAGE = "WaitingForEngage"
    DRIVING = "Driving"
    ARRIVAL_GOAL = "ArrivedGoal"
    EMERGENCY = "Emergency"
    FINALIZING = "Finalizing"


class MrmState(IntEnum):
    """State of the minimal risk maneuver."""

    UNKNOWN = 0
    NORMAL = 1
    MRM_OPERATING = 2
    MRM_SUCCEEDED = 3
    MRM_FAILED = 4


class GateMode(IntEnum):
    """Which command source the control gate passes through."""

    AUTO = 0
    EXTERNAL = 1


class ControlMode(IntEnum):
    """Control mode reported by the vehicle."""

    NO_COMMAND = 0
    AUTONOMOUS = 1
    AUTONOMOUS_STEER_ONLY = 2
    AUTONOMOUS_VELOCITY_ONLY = 3
    MANUAL = 4
    DISENGAGED = 5
    NOT_READY = 6


@dataclass(frozen=True)
class ResponseStatus:
    """Result of an API request."""

    SUCCESS: ClassVar[int] = 0
    IGNORED: ClassVar[int] = 1
    WARN: ClassVar[int] = 2
    ERROR: ClassVar[int] = 3

    code: int = 0
    message: str = ""

    @property
    def success(self) -> bool:
        return self.code == self.SUCCESS


def response_success(message: str = "") -> ResponseStatus:
    """Build a successful response status."""
    return ResponseStatus(code=ResponseStatus.SUCCESS, message=message)


def response_error(message: str = "") -> ResponseStatus:
    """Build an error response status."""
    return ResponseStatus(code=ResponseStatus.ERROR, message=message)


@dataclass
class AutowareInfo:
    """Latest value received on every input; None until something arrives."""

    current_pose: Optional[PoseStamped] = None
    steer: Optional[Any] = None
    vehicle_cmd: Optional[Any] = None
    turn_indicators: Optional[Any] = None
    hazard_lights: Optional[Any] = None
    odometry: Optional[Any] = None
    gear: Optional[Any] = None
    battery: Optional[Any] = None
    nav_sat: Optional[Any] = None
    autoware_state: Optional[AutowareState] = None
    control_mode: Optional[ControlMode] = None
    gate_mode: Optional[GateMode] = None
    mrm_state: Optional[MrmState] = None
    hazard_status: Optional[Any] = None
    stop_reason: Optional[StopReasonArray] = None
    v2x_command: Optional[Any] = None
    v2x_state: Optional[Any] = None
    diagnostics: Optional[Sequence[DiagnosticStatus]] = None
    lane_change_available: Optional[Any] = None
    lane_change_ready: Optional[Any] = None
    lane_change_candidate: Optional[Any] = None
    obstacle_avoid_ready: Optional[Any] = None
    obstacle_avoid_candidate: Optional[Trajectory] = None
    max_velocity: Optional[Any] = None
    current_max_velocity: Optional[Any] = None
    temporary_stop: Optional[Any] = None
    autoware_planning_trajectory: Optional[Trajectory] = None


class ManualClock:
    """A clock whose time, in seconds, only moves when told to."""

    def __init__(self, start: float = 0.0) -> None:
        self._time = float(start)

    def now(self) -> float:
        return self._time

    def advance(self, seconds: float) -> float:
        """Move the clock forward and return the new time."""
        if seconds < 0:
            raise ValueError("a clock cannot move backwards")
        self._time += seconds
        return self._time


def euler_ypr(q: Quaternion) -> tuple[float, float, float]:
    """Return (yaw, pitch, roll) of a quaternion, handling gimbal lock."""
    sqx, sqy, sqz, sqw = q.x * q.x, q.y * q.y, q.z * q.z, q.w * q.w
    sarg = -2.0 * (q.x * q.z - q.w * q.y)
    if sarg <= -0.99999:
        return 2.0 * math.atan2(q.x, -q.y), -0.5 * math.pi, 0.0
    if sarg >= 0.99999:
        return 2.0 * math.atan2(-q.x, q.y), 0.5 * math.pi, 0.0
    pitch = math.asin(sarg)
    roll = math.atan2(2.0 * (q.y * q.z + q.w * q.x), sqw - sqx - sqy + sqz)
    yaw = math.atan2(2.0 * (q.x * q.y + q.w * q.z), sqw + sqx - sqy - sqz)
    return yaw, pitch, roll


def yaw_from_quaternion(q: Quaternion) -> float:
    """Return the yaw angle of a quaternion."""
    return euler_ypr(q)[0]