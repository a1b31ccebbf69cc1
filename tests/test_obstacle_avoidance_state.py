from types import SimpleNamespace

from awiv_adapter.messages import AutowareInfo, ManualClock, Trajectory, TrajectoryPoint
from awiv_adapter.obstacle_avoidance_state import ObstacleAvoidanceStatePublisher


def test_missing_inputs_leave_defaults():
    clock = ManualClock(start=4.0)
    status = ObstacleAvoidanceStatePublisher(clock).build_status(AutowareInfo())
    assert status.stamp == clock.now()
    assert status.frame_id == "base_link"
    assert status.obstacle_avoidance_ready is False
    assert status.candidate_path is None


def test_inputs_are_copied():
    path = Trajectory(points=(TrajectoryPoint(),))
    info = AutowareInfo(
        obstacle_avoid_ready=SimpleNamespace(is_avoidance_possible=True),
        obstacle_avoid_candidate=path,
    )
    status = ObstacleAvoidanceStatePublisher(ManualClock()).build_status(info)
    assert status.obstacle_avoidance_ready is True
    assert status.candidate_path == path


def test_publish_state_hands_status_to_callback():
    published = []
    publisher = ObstacleAvoidanceStatePublisher(ManualClock(), publish=published.append)
    info = AutowareInfo(obstacle_avoid_ready=SimpleNamespace(is_avoidance_possible=True))
    result = publisher.publish_state(info)
    assert published == [result]
    assert published[0].obstacle_avoidance_ready is True