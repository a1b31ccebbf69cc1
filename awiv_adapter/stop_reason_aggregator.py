"""Aggregation of stop reasons coming from several planning modules."""

from __future__ import annotations

from dataclasses import replace
from typing import Protocol

from awiv_adapter.messages import (
    AutowareInfo,
    StopReason,
    StopReasonArray,
)
from awiv_adapter.planning_util import distance_along_trajectory


class _Clock(Protocol):
    def now(self) -> float: ...


def _shares_reason(new: StopReasonArray, stored: StopReasonArray) -> bool:
    stored_reasons = {reason.reason for reason in stored.stop_reasons}
    return any(reason.reason in stored_reasons for reason in new.stop_reasons)


class StopReasonAggregator:
    """Keeps the latest stop reasons of every module and merges them.

    An incoming array replaces every stored array that shares a reason with
    it; stored arrays older than ``timeout`` seconds are dropped. When the
    current pose and the planned trajectory are known, each stop factor gets
    its distance along the trajectory and only those closer than
    ``thresh_dist_to_stop_pose`` are kept.
    """

    def __init__(self, clock: _Clock, timeout: float, thresh_dist_to_stop_pose: float) -> None:
        self._clock = clock
        self.timeout = timeout
        self.thresh_dist_to_stop_pose = thresh_dist_to_stop_pose
        self._arrays: list[StopReasonArray] = []

    def update(self, msg: StopReasonArray, aw_info: AutowareInfo) -> StopReasonArray:
        """Store a received array and return the merged, filtered result."""
        self._apply_update(msg)
        self._apply_timeout()
        return self._make_array(aw_info)

    def _apply_update(self, msg: StopReasonArray) -> None:
        self._arrays = [stored for stored in self._arrays if not _shares_reason(msg, stored)]
        self._arrays.append(msg)

    def _apply_timeout(self) -> None:
        now = self._clock.now()
        self._arrays = [a for a in self._arrays if now - a.stamp <= self.timeout]

    def _has_geometry(self, aw_info: AutowareInfo) -> bool:
        return (
            aw_info.autoware_planning_trajectory is not None
            and aw_info.current_pose is not None
        )

    def _with_distances(self, stop_reason: StopReason, aw_info: AutowareInfo) -> StopReason:
        if not self._has_geometry(aw_info):
            return stop_reason
        trajectory = aw_info.autoware_planning_trajectory
        current_pose = aw_info.current_pose.pose
        factors = tuple(
            replace(
                factor,
                dist_to_stop_pose=distance_along_trajectory(
                    trajectory, current_pose, factor.stop_pose
                ),
            )
            for factor in stop_reason.stop_factors
        )
        return replace(stop_reason, stop_factors=factors)

    def _near_only(self, stop_reason: StopReason, aw_info: AutowareInfo) -> StopReason:
        if not self._has_geometry(aw_info):
            return stop_reason
        factors = tuple(
            factor
            for factor in stop_reason.stop_factors
            if factor.dist_to_stop_pose < self.thresh_dist_to_stop_pose
        )
        return StopReason(reason=stop_reason.reason, stop_factors=factors)

    def _make_array(self, aw_info: AutowareInfo) -> StopReasonArray:
        merged: list[StopReason] = []
        for stored in self._arrays:
            for stop_reason in stored.stop_reasons:
                near = self._near_only(self._with_distances(stop_reason, aw_info), aw_info)
                if not near.stop_factors:
                    continue
                for pos, existing in enumerate(merged):
                    if existing.reason == near.reason:
                        merged[pos] = replace(
                            existing,
                            stop_factors=tuple(existing.stop_factors) + tuple(near.stop_factors),
                        )
                        break
                else:
                    merged.append(replace(near, stop_factors=tuple(near.stop_factors)))
        return StopReasonArray(
            stop_reasons=tuple(merged), stamp=self._clock.now(), frame_id="map"
        )