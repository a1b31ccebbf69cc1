"""Vehicle status assembled from the latest vehicle reports."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, ClassVar, Optional, Protocol

from awiv_adapter.messages import AutowareInfo, Pose, PoseStamped, euler_ypr
from awiv_adapter.planning_util import lowpass_filter

logger = logging.getLogger(__name__)

_MIN_DT = 1e-3

_TURN_INDICATORS_ENABLE_LEFT = 2
_TURN_INDICATORS_ENABLE_RIGHT = 3
_HAZARD_LIGHTS_ENABLE = 2


class _Clock(Protocol):
    def now(self) -> float: ...


@dataclass
class VehicleStatus:
    """Snapshot of the vehicle state as published by the API."""

    TURN_NONE: ClassVar[int] = 0
    TURN_LEFT: ClassVar[int] = 1
    TURN_RIGHT: ClassVar[int] = 2
    TURN_HAZARD: ClassVar[int] = 3

    stamp: float = 0.0
    frame_id: str = "base_link"
    pose: Pose = field(default_factory=Pose)
    yaw: float = 0.0
    pitch: float = 0.0
    roll: float = 0.0
    steering: float = 0.0
    steering_velocity: float = 0.0
    target_acceleration: float = 0.0
    target_velocity: float = 0.0
    target_steering: float = 0.0
    target_steering_velocity: float = 0.0
    turn_signal: int = 0
    velocity: float = 0.0
    angular_velocity: float = 0.0
    acceleration: float = 0.0
    gear: Any = None
    energy_level: float = -1.0
    latitude: float = 0.0
    longitude: float = 0.0
    altitude: float = 0.0


def _turn_signal(turn_indicators: Any, hazard_lights: Any) -> int:
    if hazard_lights.report == _HAZARD_LIGHTS_ENABLE:
        return VehicleStatus.TURN_HAZARD
    if turn_indicators.report == _TURN_INDICATORS_ENABLE_LEFT:
        return VehicleStatus.TURN_LEFT
    if turn_indicators.report == _TURN_INDICATORS_ENABLE_RIGHT:
        return VehicleStatus.TURN_RIGHT
    return VehicleStatus.TURN_NONE


class VehicleStatePublisher:
    """Builds vehicle status messages from the inputs held in AutowareInfo.

    Inputs are read by attribute:

    * ``steer``: ``steering_tire_angle``, ``stamp``
    * ``vehicle_cmd``: ``longitudinal.acceleration``, ``longitudinal.speed``,
      ``lateral.steering_tire_angle``, ``lateral.steering_tire_rotation_rate``
    * ``turn_indicators`` / ``hazard_lights``: ``report``
    * ``odometry``: ``twist.linear.x``, ``twist.angular.z``, ``stamp``
    * ``gear``: ``report``; ``battery``: ``energy_level``
    * ``nav_sat``: ``latitude``, ``longitude``, ``altitude``

    Steering velocity and acceleration are differentiated from consecutive
    reports and smoothed with a low-pass filter.
    """

    accel_lowpass_gain: float = 0.2
    steer_vel_lowpass_gain: float = 0.2

    def __init__(
        self,
        clock: _Clock,
        publish: Optional[Callable[[VehicleStatus], None]] = None,
    ) -> None:
        self._clock = clock
        self._publish = publish
        self._previous_odometry: Any = None
        self._previous_steer: Any = None
        self._prev_accel = 0.0
        self._prev_steer_vel = 0.0

    def build_status(self, aw_info: AutowareInfo) -> VehicleStatus:
        """Assemble a status from every input that has arrived."""
        status = VehicleStatus(stamp=self._clock.now())
        self._fill_pose(aw_info.current_pose, status)
        self._fill_steer(aw_info.steer, status)
        self._fill_vehicle_cmd(aw_info.vehicle_cmd, status)
        self._fill_turn_signal(aw_info.turn_indicators, aw_info.hazard_lights, status)
        self._fill_twist(aw_info.odometry, status)
        self._fill_gear(aw_info.gear, status)
        self._fill_battery(aw_info.battery, status)
        self._fill_gps(aw_info.nav_sat, status)
        return status

    def publish_state(self, aw_info: AutowareInfo) -> VehicleStatus:
        """Build a status, hand it to the publish callback and return it."""
        status = self.build_status(aw_info)
        if self._publish is not None:
            self._publish(status)
        return status

    def _fill_pose(self, pose: Optional[PoseStamped], status: VehicleStatus) -> None:
        if pose is None:
            logger.debug("current pose is missing")
            return
        status.pose = pose.pose
        status.yaw, status.pitch, status.roll = euler_ypr(pose.pose.orientation)

    def _fill_steer(self, steer: Any, status: VehicleStatus) -> None:
        if steer is None:
            logger.debug("steer is missing")
            return
        status.steering = steer.steering_tire_angle
        if self._previous_steer is not None:
            ds = steer.steering_tire_angle - self._previous_steer.steering_tire_angle
            dt = max(steer.stamp - self._previous_steer.stamp, _MIN_DT)
            filtered = lowpass_filter(ds / dt, self._prev_steer_vel, self.steer_vel_lowpass_gain)
            self._prev_steer_vel = filtered
            status.steering_velocity = filtered
        self._previous_steer = steer

    @staticmethod
    def _fill_vehicle_cmd(cmd: Any, status: VehicleStatus) -> None:
        if cmd is None:
            logger.debug("vehicle cmd is missing")
            return
        status.target_acceleration = cmd.longitudinal.acceleration
        status.target_velocity = cmd.longitudinal.speed
        status.target_steering = cmd.lateral.steering_tire_angle
        status.target_steering_velocity = cmd.lateral.steering_tire_rotation_rate

    @staticmethod
    def _fill_turn_signal(turn_indicators: Any, hazard_lights: Any, status: VehicleStatus) -> None:
        if turn_indicators is None:
            logger.debug("turn indicators is missing")
            return
        if hazard_lights is None:
            logger.debug("hazard lights is missing")
            return
        status.turn_signal = _turn_signal(turn_indicators, hazard_lights)

    def _fill_twist(self, odometry: Any, status: VehicleStatus) -> None:
        if odometry is None:
            logger.debug("odometry is missing")
            return
        status.velocity = odometry.twist.linear.x
        status.angular_velocity = odometry.twist.angular.z
        if self._previous_odometry is not None:
            dv = odometry.twist.linear.x - self._previous_odometry.twist.linear.x
            dt = max(odometry.stamp - self._previous_odometry.stamp, _MIN_DT)
            filtered = lowpass_filter(dv / dt, self._prev_accel, self.accel_lowpass_gain)
            self._prev_accel = filtered
            status.acceleration = filtered
        self._previous_odometry = odometry

    @staticmethod
    def _fill_gear(gear: Any, status: VehicleStatus) -> None:
        if gear is None:
            logger.debug("gear is missing")
            return
        status.gear = gear.report

    @staticmethod
    def _fill_battery(battery: Any, status: VehicleStatus) -> None:
        if battery is None:
            logger.debug("battery is missing")
            return
        status.energy_level = battery.energy_level

    @staticmethod
    def _fill_gps(nav_sat: Any, status: VehicleStatus) -> None:
        if nav_sat is None:
            logger.debug("nav_sat(gps) is missing")
            return
        status.latitude = nav_sat.latitude
        status.longitude = nav_sat.longitude
        status.altitude = nav_sat.altitude