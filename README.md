# awiv_adapter

A library that turns the many status messages of an autonomous-driving stack into
a small set of API-level reports, and that handles the operator, observer and
velocity requests of an external API.

All state lives in plain Python objects. Time comes from any object with a
`now()` method returning seconds, such as `messages.ManualClock`, so every
aggregator and publisher can be driven deterministically. Output is handed to
callbacks you supply, usually called as `publish(topic, message)`.

## Modules

- `awiv_adapter.messages`: message types (`Point`, `Quaternion`, `Pose`,
  `PoseStamped`, `TrajectoryPoint`, `Trajectory`, `DiagnosticStatus`,
  `StopFactor`, `StopReason`, `StopReasonArray`, `ResponseStatus`), the enums
  `AutowareState`, `MrmState`, `GateMode` and `ControlMode`, the `AutowareInfo`
  snapshot of the latest value of every input, `ManualClock` (`now()`,
  `advance(seconds)`, which refuses to go backwards), the quaternion helpers
  `euler_ypr` and `yaw_from_quaternion`, and `response_success` /
  `response_error`.
- `awiv_adapter.diagnostics_filter`: works on slash-separated diagnostic names.
  `extract_leaf_diagnostics` keeps only entries that are not an ancestor of
  another entry; `extract_leaf_children_diagnostics` keeps the leaves below a
  given parent. Also `split_by_last_slash`, `parent_names`, `is_child`.
- `awiv_adapter.planning_util`: `lowpass_filter`, `calc_dist_2d`,
  `normalize_euler_angle`, `closest_index` (nearest trajectory point within a
  distance and heading threshold, or `None`), `arc_length_between` and
  `distance_along_trajectory` (the largest float when a pose matches no point).
- `awiv_adapter.stop_reason_aggregator.StopReasonAggregator`: `update(msg,
  aw_info)` replaces stored arrays sharing a reason with the new one, drops
  arrays older than the timeout and, when pose and trajectory are known, keeps
  only stop factors nearer than the distance threshold.
- `awiv_adapter.v2x_aggregator`: `InfrastructureCommand(Array)`,
  `VirtualTrafficLightState(Array)` and `V2XAggregator`, which keeps the latest
  item per type and id and returns those no older than 5 s and no more than
  300 s in the future.
- `awiv_adapter.max_velocity.MaxVelocityPublisher`: the velocity limit to send;
  0 during a temporary stop, the default when no limit was requested, `None`
  when neither input has arrived.
- Status publishers, each with `build_status(aw_info)` and
  `publish_state(aw_info)`: `vehicle_state.VehicleStatePublisher`
  (`VehicleStatus`, with low-pass filtered acceleration and steering velocity),
  `autoware_state.AutowareStatePublisher` (`AutowareStatus`, goal detection via
  `is_goal`, leaf and error diagnostics), `lane_change_state.LaneChangeStatePublisher`
  (`LaneChangeStatus`) and `obstacle_avoidance_state.ObstacleAvoidanceStatePublisher`
  (`ObstacleAvoidanceStatus`).
- `awiv_adapter.adapter.AutowareIvAdapter`: ties the pieces together. Feed it
  inputs with `update(field, msg)` (field names are those of `AutowareInfo`;
  an unknown name raises `ValueError`) or the `on_*` handlers, and call
  `timer_callback()` every `period` seconds; it returns the published messages
  keyed by topic.
- `awiv_adapter.iv_msgs.IVMsgsRelay`: republishes state, control mode,
  trajectories and tracked objects on API topics, reporting `EMERGENCY` while a
  minimal risk maneuver is active. Trajectory and object converters are
  optional callables; without them messages pass through unchanged.
- `awiv_adapter.velocity_api.VelocityApi`: pause and velocity-limit requests,
  refused until the planner has reported its current limit.
- `awiv_adapter.operator_api.OperatorApi`: operator (`OperatorMode`) and
  observer (`ObserverMode`) requests, delegated to service callables that
  return `(success, message)` or raise `ServiceCallError`.

## Examples

```python
from awiv_adapter.messages import DiagnosticStatus
from awiv_adapter.diagnostics_filter import extract_leaf_diagnostics

diags = [
    DiagnosticStatus(name="/autoware"),
    DiagnosticStatus(name="/autoware/sensing"),
    DiagnosticStatus(name="/autoware/sensing/lidar"),
]
print([d.name for d in extract_leaf_diagnostics(diags)])  # ['/autoware/sensing/lidar']
```

```python
from awiv_adapter.adapter import AutowareIvAdapter
from awiv_adapter.messages import AutowareState, ManualClock

clock = ManualClock()
topics = []
adapter = AutowareIvAdapter(clock, lambda topic, msg: topics.append(topic), emergency_stop=True)
adapter.update("autoware_state", AutowareState.DRIVING)
published = adapter.timer_callback()
print(published["output/autoware_status"].autoware_state)  # AutowareState.DRIVING
```

## What it does not do

The package has no messaging transport, no command-line program and no
scheduler. It does not subscribe to or publish on any network; topics are
plain strings passed to your callbacks, and `timer_callback` / `on_timer` run
only when you call them. The vehicle pose comes from a `pose_source` callable
you provide, and parameters are constructor arguments rather than values read
from a parameter server.

## Running the tests

```
pip install -e .[test]
pytest
```