import math

import pytest

from awiv_adapter.messages import (
    AutowareInfo,
    ManualClock,
    Point,
    Pose,
    PoseStamped,
    StopFactor,
    StopReason,
    StopReasonArray,
    Trajectory,
    TrajectoryPoint,
)
from awiv_adapter.stop_reason_aggregator import StopReasonAggregator


def _pose(x: float) -> Pose:
    return Pose(position=Point(x=x, y=0.0))


def _factor(x: float = 0.0) -> StopFactor:
    return StopFactor(stop_pose=_pose(x))


def _array(stamp: float, *reasons: StopReason) -> StopReasonArray:
    return StopReasonArray(stop_reasons=reasons, stamp=stamp)


@pytest.fixture
def clock():
    return ManualClock(10.0)


@pytest.fixture
def aggregator(clock):
    return StopReasonAggregator(clock, timeout=0.5, thresh_dist_to_stop_pose=100.0)


def test_pass_through_without_geometry(aggregator, clock):
    reason = StopReason(reason="Crosswalk", stop_factors=(_factor(3.0),))
    result = aggregator.update(_array(clock.now(), reason), AutowareInfo())
    assert result.frame_id == "map"
    assert result.stamp == clock.now()
    assert [r.reason for r in result.stop_reasons] == ["Crosswalk"]
    assert result.stop_reasons[0].stop_factors == (_factor(3.0),)


def test_same_reason_replaces_previous(aggregator, clock):
    first = StopReason(reason="Crosswalk", stop_factors=(_factor(1.0),))
    second = StopReason(reason="Crosswalk", stop_factors=(_factor(2.0),))
    aggregator.update(_array(clock.now(), first), AutowareInfo())
    result = aggregator.update(_array(clock.now(), second), AutowareInfo())
    assert len(result.stop_reasons) == 1
    assert result.stop_reasons[0].stop_factors == (_factor(2.0),)


def test_different_reasons_accumulate_in_arrival_order(aggregator, clock):
    a = StopReason(reason="Crosswalk", stop_factors=(_factor(),))
    b = StopReason(reason="Intersection", stop_factors=(_factor(),))
    aggregator.update(_array(clock.now(), a), AutowareInfo())
    result = aggregator.update(_array(clock.now(), b), AutowareInfo())
    assert [r.reason for r in result.stop_reasons] == ["Crosswalk", "Intersection"]


def test_old_arrays_time_out(aggregator, clock):
    a = StopReason(reason="Crosswalk", stop_factors=(_factor(),))
    b = StopReason(reason="Intersection", stop_factors=(_factor(),))
    aggregator.update(_array(clock.now(), a), AutowareInfo())
    clock.advance(1.0)
    result = aggregator.update(_array(clock.now(), b), AutowareInfo())
    assert [r.reason for r in result.stop_reasons] == ["Intersection"]


def test_reason_without_factors_is_dropped(aggregator, clock):
    empty = StopReason(reason="Crosswalk")
    full = StopReason(reason="Intersection", stop_factors=(_factor(),))
    result = aggregator.update(_array(clock.now(), empty, full), AutowareInfo())
    assert [r.reason for r in result.stop_reasons] == ["Intersection"]


def test_duplicate_reasons_are_merged(aggregator, clock):
    a1 = StopReason(reason="Crosswalk", stop_factors=(_factor(1.0),))
    a2 = StopReason(reason="Crosswalk", stop_factors=(_factor(2.0),))
    result = aggregator.update(_array(clock.now(), a1, a2), AutowareInfo())
    assert len(result.stop_reasons) == 1
    assert result.stop_reasons[0].stop_factors == (_factor(1.0), _factor(2.0))


def test_distances_computed_and_far_factors_removed(clock):
    aggregator = StopReasonAggregator(clock, timeout=0.5, thresh_dist_to_stop_pose=6.0)
    trajectory = Trajectory(
        points=tuple(TrajectoryPoint(pose=_pose(float(x))) for x in range(11))
    )
    info = AutowareInfo(
        current_pose=PoseStamped(pose=_pose(0.0)),
        autoware_planning_trajectory=trajectory,
    )
    reason = StopReason(reason="Obstacle", stop_factors=(_factor(5.0), _factor(9.0)))
    result = aggregator.update(_array(clock.now(), reason), info)
    factors = result.stop_reasons[0].stop_factors
    assert len(factors) == 1
    assert factors[0].stop_pose == _pose(5.0)
    assert math.isclose(factors[0].dist_to_stop_pose, 5.0)


def test_unmatched_stop_pose_is_dropped(clock):
    aggregator = StopReasonAggregator(clock, timeout=0.5, thresh_dist_to_stop_pose=100.0)
    trajectory = Trajectory(points=(TrajectoryPoint(pose=_pose(0.0)),))
    info = AutowareInfo(
        current_pose=PoseStamped(pose=_pose(0.0)),
        autoware_planning_trajectory=trajectory,
    )
    reason = StopReason(reason="Obstacle", stop_factors=(_factor(500.0),))
    result = aggregator.update(_array(clock.now(), reason), info)
    assert result.stop_reasons == ()