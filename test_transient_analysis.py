"""
Transient analysis tests.
"""

import math

import numpy as np
import pytest

from circuit_builders import rc_lowpass, rc_parallel_caps, rl_series, voltage_divider, wire
from circuit_engine import CircuitSimulator, IntegrationMethod
from circuit_engine.core.analysis.transient_analysis import parse_method, step_count
from circuit_engine.exceptions import ValidationError


def run_transient(circuit, **kwargs):
    return CircuitSimulator(*circuit).run_transient_analysis(**kwargs)


def test_step_count_tolerates_round_up():
    assert step_count(1e-3, 1e-4) == 10
    assert step_count(0.3, 0.1) == 3
    assert step_count(1.05e-3, 1e-4) == 11


def test_parse_method():
    assert parse_method("trapezoidal") is IntegrationMethod.TRAPEZOIDAL
    assert parse_method("Backward_Euler") is IntegrationMethod.BACKWARD_EULER
    assert parse_method(IntegrationMethod.BACKWARD_EULER) is IntegrationMethod.BACKWARD_EULER
    with pytest.raises(ValidationError):
        parse_method("gear2")


def test_sample_times():
    result = run_transient(rc_lowpass(), duration=1e-3, time_step=1e-4)

    assert result.success
    assert len(result.samples) == 11
    assert np.allclose(result.times, np.arange(11) * 1e-4)


def test_initial_sample_is_zero_state():
    result = run_transient(rc_lowpass(voltage=5.0, resistance=1000.0), duration=1e-4, time_step=1e-5)
    first = result.samples[0]

    assert first.time == 0.0
    assert first.node_voltages[1] == pytest.approx(5.0)
    assert first.node_voltages[2] == pytest.approx(0.0, abs=1e-9)
    assert first.component_currents["C1"] == pytest.approx(5e-3, rel=1e-6)
    assert "GND" not in first.component_currents


@pytest.mark.parametrize("method", ["trapezoidal", "backward_euler"])
def test_rc_charging_after_five_time_constants(method):
    tau = 1000.0 * 1e-6
    result = run_transient(rc_lowpass(voltage=5.0, resistance=1000.0, capacitance=1e-6),
                           duration=5 * tau, time_step=1e-5, method=method)

    expected = 5.0 * (1 - math.exp(-5))
    assert result.samples[-1].time == pytest.approx(5 * tau)
    assert result.waveform(2)[-1] == pytest.approx(expected, rel=0.01)


def test_rc_waveform_tracks_exponential():
    tau = 1e-3
    result = run_transient(rc_lowpass(voltage=1.0), duration=3 * tau, time_step=1e-5)
    expected = 1 - np.exp(-result.times / tau)
    assert np.max(np.abs(result.waveform(2) - expected)) < 5e-3


def test_backward_euler_capacitor_current_is_difference_quotient():
    dt = 1e-5
    result = run_transient(rc_lowpass(voltage=2.0), duration=2e-4, time_step=dt, method="backward_euler")

    v = result.waveform(2)
    i = result.current_waveform("C1")
    assert np.allclose(i[1:], 1e-6 * np.diff(v) / dt, rtol=1e-6, atol=1e-12)


def test_backward_euler_inductor_current_accumulates_voltage():
    dt = 1e-6
    result = run_transient(rl_series(voltage=1.0, resistance=10.0, inductance=1e-3),
                           duration=5e-5, time_step=dt, method="backward_euler")

    v = result.waveform(2)
    i = result.current_waveform("L1")
    assert np.allclose(i[1:], i[:-1] + v[1:] * dt / 1e-3, rtol=1e-6, atol=1e-12)


@pytest.mark.parametrize("method", ["trapezoidal", "backward_euler"])
def test_rl_current_rise(method):
    tau = 1e-3 / 10.0
    result = run_transient(rl_series(voltage=1.0, resistance=10.0, inductance=1e-3),
                           duration=5 * tau, time_step=1e-6, method=method)

    current = result.current_waveform("L1")
    assert current[0] == 0.0
    assert result.waveform(2)[0] == pytest.approx(1.0)
    assert current[-1] == pytest.approx(0.1 * (1 - math.exp(-5)), rel=0.01)


def test_resistive_circuit_is_constant():
    result = run_transient(voltage_divider(voltage=10.0), duration=1e-5, time_step=1e-6)
    assert np.allclose(result.waveform(2), 5.0)
    assert np.allclose(result.current_waveform("R1"), 5e-3)


def test_runs_do_not_share_history():
    simulator = CircuitSimulator(*rc_lowpass())
    first = simulator.run_transient_analysis(duration=1e-3, time_step=1e-5)
    second = simulator.run_transient_analysis(duration=1e-3, time_step=1e-5)
    assert first.to_dict() == second.to_dict()


@pytest.mark.parametrize("kwargs", [
    {"duration": 0.0},
    {"time_step": -1e-6},
    {"method": "runge_kutta"},
])
def test_invalid_parameters_return_failure(kwargs):
    result = run_transient(rc_lowpass(), **kwargs)
    assert not result.success
    assert result.error


def test_progress_and_cancel():
    progress = []
    result = run_transient(rc_lowpass(), duration=4e-5, time_step=1e-5, progress_callback=progress.append)
    assert result.success
    assert progress == [25, 50, 75, 100]

    calls = []

    def cancel_after_two():
        calls.append(1)
        return len(calls) > 2

    cancelled = run_transient(rc_lowpass(), duration=1e-3, time_step=1e-5, cancel_check=cancel_after_two)
    assert not cancelled.success
    assert cancelled.error == "cancelled"


def test_transient_to_dict():
    data = run_transient(rc_lowpass(), duration=2e-5, time_step=1e-5, method="backward_euler").to_dict()

    assert data["success"] is True
    assert data["method"] == "backward_euler"
    assert data["timeStep"] == 1e-5
    assert [sample["time"] for sample in data["results"]] == pytest.approx([0.0, 1e-5, 2e-5])
    assert set(data["results"][0]) == {"time", "nodeVoltages", "componentCurrents"}


def test_capacitor_across_source_jumps_at_start():
    components = [
        {"id": "V1", "type": "voltage_source", "value": 5.0},
        {"id": "C1", "type": "capacitor", "value": 1e-6},
        {"id": "GND", "type": "ground"},
    ]
    connections = [
        wire("V1", 0, "C1", 0),
        wire("C1", 1, "GND", 0),
        wire("V1", 1, "GND", 0),
    ]
    result = run_transient((components, connections), duration=5e-5, time_step=1e-5)

    assert result.success
    assert result.regularized_pivots == 0
    assert any("inconsistent" in w and "C1" in w for w in result.warnings)
    assert result.samples[0].time == 0.0
    assert np.allclose(result.waveform(1), 5.0)
    # Charged to the source at t=0, nothing flows afterwards
    assert np.allclose(result.current_waveform("C1"), 0.0, atol=1e-5)


@pytest.mark.parametrize("method", ["trapezoidal", "backward_euler"])
def test_parallel_capacitors_match_their_sum(method):
    pair = run_transient(rc_parallel_caps(capacitances=(1e-6, 1e-6)), duration=1e-4, time_step=1e-5, method=method)
    single = run_transient(rc_lowpass(voltage=1.0, capacitance=2e-6), duration=1e-4, time_step=1e-5, method=method)

    assert pair.success
    assert pair.regularized_pivots == 0
    assert not any("inconsistent" in w for w in pair.warnings)

    v = pair.waveform(2)
    assert v[0] == pytest.approx(0.0, abs=1e-9)
    assert v[1] > v[0]
    assert np.allclose(v, single.waveform(2), rtol=1e-6, atol=1e-9)
    assert np.allclose(pair.current_waveform("C1") + pair.current_waveform("C2"),
                       single.current_waveform("C1"), rtol=1e-6, atol=1e-12)


def test_parallel_capacitors_share_current_by_capacitance():
    result = run_transient(rc_parallel_caps(capacitances=(1e-6, 3e-6)), duration=1e-4, time_step=1e-5)

    i1 = result.current_waveform("C1")
    i2 = result.current_waveform("C2")
    assert i1[0] + i2[0] == pytest.approx(1e-3, rel=1e-6)
    assert np.allclose(i2, 3 * i1, rtol=1e-6, atol=1e-12)
