import pytest

from awiv_adapter.messages import ControlMode, GateMode, ResponseStatus
from awiv_adapter.operator_api import (
    EMERGENCY_IGNORED_MESSAGE,
    GATE_MODE_TOPIC,
    INVALID_PARAMETER_MESSAGE,
    OBSERVER_TOPIC,
    OPERATOR_TOPIC,
    ObserverMode,
    OperatorApi,
    OperatorMode,
    ServiceCallError,
)


class _Recorder:
    def __init__(self, result=(True, "ok")):
        self.calls = []
        self.result = result

    def __call__(self, request):
        self.calls.append(request)
        if isinstance(self.result, Exception):
            raise self.result
        return self.result


def _make(engage_result=(True, "ok"), select_result=(True, "ok"), **kwargs):
    engage = _Recorder(engage_result)
    select = _Recorder(select_result)
    published = []
    api = OperatorApi(engage, select, lambda t, m: published.append((t, m)), **kwargs)
    return api, engage, select, published


def test_driver_disengages_without_gate_change():
    api, engage, _, published = _make()
    status = api.set_operator(OperatorMode.DRIVER)
    assert status.success
    assert engage.calls == [False]
    assert published == []


def test_autonomous_sets_gate_auto_and_engages():
    api, engage, _, published = _make()
    status = api.set_operator(OperatorMode.AUTONOMOUS)
    assert status.success
    assert published == [(GATE_MODE_TOPIC, GateMode.AUTO)]
    assert engage.calls == [True]


def test_observer_sets_gate_external_and_engages():
    api, engage, _, published = _make()
    api.set_operator(OperatorMode.OBSERVER)
    assert published == [(GATE_MODE_TOPIC, GateMode.EXTERNAL)]
    assert engage.calls == [True]


def test_invalid_operator_mode_is_error():
    api, engage, _, _ = _make()
    status = api.set_operator(99)
    assert status.code == ResponseStatus.ERROR
    assert status.message == INVALID_PARAMETER_MESSAGE
    assert engage.calls == []


def test_autonomous_refused_in_emergency():
    api, engage, _, published = _make()
    api.on_emergency_status(True)
    status = api.set_operator(OperatorMode.AUTONOMOUS)
    assert status.code == ResponseStatus.ERROR
    assert status.message == EMERGENCY_IGNORED_MESSAGE
    assert engage.calls == []
    assert published == []


def test_autonomous_allowed_in_emergency_when_configured():
    api, engage, _, _ = _make(send_engage_in_emergency=True)
    api.on_emergency_status(True)
    assert api.set_operator(OperatorMode.AUTONOMOUS).success
    assert engage.calls == [True]


def test_service_failure_message_is_passed_through():
    api, _, _, _ = _make(engage_result=(False, "rejected"))
    status = api.set_operator(OperatorMode.DRIVER)
    assert status.code == ResponseStatus.ERROR
    assert status.message == "rejected"


def test_service_success_message_is_passed_through():
    api, _, _, _ = _make(engage_result=(True, "done"))
    status = api.set_operator(OperatorMode.DRIVER)
    assert status.success
    assert status.message == "done"


def test_unreachable_service_returns_its_status():
    api, _, _, _ = _make(engage_result=ServiceCallError("unavailable"))
    status = api.set_operator(OperatorMode.DRIVER)
    assert status.code == ResponseStatus.ERROR
    assert status.message == "unavailable"


@pytest.mark.parametrize("mode", [ObserverMode.LOCAL, ObserverMode.REMOTE])
def test_set_observer_selects_command_source(mode):
    api, _, select, _ = _make()
    assert api.set_observer(mode).success
    assert select.calls == [mode]


def test_invalid_observer_mode_is_error():
    api, _, select, _ = _make()
    status = api.set_observer(42)
    assert status.message == INVALID_PARAMETER_MESSAGE
    assert select.calls == []


def test_timer_publishes_nothing_without_inputs():
    api, _, _, published = _make()
    assert api.on_timer() == (None, None)
    assert published == []


def test_timer_reports_driver_when_manual():
    api, _, _, published = _make()
    api.on_vehicle_control_mode(ControlMode.MANUAL)
    api.on_gate_mode(GateMode.AUTO)
    operator, _ = api.on_timer()
    assert operator is OperatorMode.DRIVER
    assert published == [(OPERATOR_TOPIC, OperatorMode.DRIVER)]


@pytest.mark.parametrize(
    "gate, expected",
    [(GateMode.AUTO, OperatorMode.AUTONOMOUS), (GateMode.EXTERNAL, OperatorMode.OBSERVER)],
)
def test_timer_reports_operator_from_gate(gate, expected):
    api, _, _, _ = _make()
    api.on_vehicle_control_mode(ControlMode.AUTONOMOUS)
    api.on_gate_mode(gate)
    assert api.on_timer()[0] is expected


def test_timer_unknown_gate_publishes_nothing():
    api, _, _, published = _make()
    api.on_vehicle_control_mode(ControlMode.AUTONOMOUS)
    api.on_gate_mode(7)
    assert api.on_timer() == (None, None)
    assert published == []


def test_timer_reports_observer():
    api, _, _, published = _make()
    api.on_external_select(ObserverMode.REMOTE)
    assert api.on_timer() == (None, ObserverMode.REMOTE)
    assert published == [(OBSERVER_TOPIC, ObserverMode.REMOTE)]


def test_timer_unknown_observer_publishes_nothing():
    api, _, _, published = _make()
    api.on_external_select(0)
    assert api.on_timer() == (None, None)
    assert published == []