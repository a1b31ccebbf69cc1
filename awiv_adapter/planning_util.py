"""Geometry helpers for trajectories and signal filtering."""

from __future__ import annotations

import math
import sys
from typing import Optional

from awiv_adapter.messages import Point, Pose, Trajectory, yaw_from_quaternion


def lowpass_filter(current_value: float, prev_value: float, gain: float) -> float:
    """First-order low-pass filter; gain weights the previous value."""
    return gain * prev_value + (1.0 - gain) * current_value


def calc_dist_2d(a: Point, b: Point) -> float:
    """Planar distance between two points."""
    return math.hypot(a.x - b.x, a.y - b.y)


def normalize_euler_angle(euler: float) -> float:
    """Wrap an angle into [-pi, pi]."""
    while euler > math.pi:
        euler -= 2.0 * math.pi
    while euler < -math.pi:
        euler += 2.0 * math.pi
    return euler


def closest_index(
    trajectory: Trajectory,
    pose: Pose,
    dist_thr: float = 10.0,
    angle_thr: float = math.pi / 2.0,
) -> Optional[int]:
    """Index of the nearest point within both thresholds, or None."""
    yaw_pose = yaw_from_quaternion(pose.orientation)
    best: Optional[int] = None
    dist_min = sys.float_info.max
    for idx, point in enumerate(trajectory.points):
        dist = calc_dist_2d(point.pose.position, pose.position)
        if dist > dist_thr:
            continue
        yaw_diff = normalize_euler_angle(yaw_pose - yaw_from_quaternion(point.pose.orientation))
        if abs(yaw_diff) > angle_thr:
            continue
        if dist < dist_min:
            dist_min = dist
            best = idx
    return best


def arc_length_between(trajectory: Trajectory, src_idx: int, dst_idx: int) -> float:
    """Length of the polyline from point src_idx to point dst_idx."""
    if src_idx >= dst_idx:
        return 0.0
    points = trajectory.points
    if src_idx < 0 or dst_idx >= len(points):
        raise IndexError(f"index {dst_idx} out of range for {len(points)} points")
    segment = points[src_idx : dst_idx + 1]
    return sum(
        calc_dist_2d(a.pose.position, b.pose.position) for a, b in zip(segment, segment[1:])
    )


def distance_along_trajectory(
    trajectory: Trajectory, current_pose: Pose, target_pose: Pose
) -> float:
    """Arc length from the current pose to the target pose along a trajectory.

    Returns the largest float when either pose cannot be matched to a point.
    """
    self_idx = closest_index(trajectory, current_pose)
    stop_idx = closest_index(trajectory, target_pose)
    if self_idx is None or stop_idx is None:
        return sys.float_info.max
    return arc_length_between(trajectory, self_idx, stop_idx)