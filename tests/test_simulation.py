"""Tests for the Simulation lifecycle."""

import numpy as np
import pytest

from pendulab import Simulation, SimplePendulum
from pendulab.core.errors import NumericalDivergenceError, SimulationNotInitializedError
from pendulab.physics import EulerIntegrator

from conftest import make_oscillator


def test_step_before_initialize() -> None:
    sim = Simulation(SimplePendulum())
    assert not sim.initialized
    with pytest.raises(SimulationNotInitializedError):
        sim.step()
    with pytest.raises(SimulationNotInitializedError):
        sim.reset()


def test_fixed_timestep_wins() -> None:
    sim = Simulation(SimplePendulum())
    sim.initialize()
    sim.step(1 / 60)
    assert sim.time == pytest.approx(1 / 240)


def test_variable_timestep(oscillator_cls) -> None:
    sim = Simulation(oscillator_cls())
    sim.initialize()
    with pytest.raises(ValueError):
        sim.step()
    sim.step(0.01)
    assert sim.time == pytest.approx(0.01)
    assert sim.state[0] == pytest.approx(np.cos(0.01), rel=1e-9)


def test_configured_integration_method() -> None:
    sim = Simulation(make_oscillator(method="euler")())
    assert isinstance(sim.integrator, EulerIntegrator)
    sim.initialize(x0=2.0)
    sim.step(0.1)
    np.testing.assert_allclose(sim.state, [2.0, -0.2])


def test_reset_is_deterministic() -> None:
    calls = []
    sim = Simulation(SimplePendulum(), on_reset=lambda: calls.append(1))
    sim.initialize(initial_angle=1.0)
    run1 = []
    for _ in range(500):
        sim.step()
        run1.append(sim.state)
    sim.reset()
    assert sim.time == 0.0
    np.testing.assert_array_equal(sim.state, [1.0, 0.0])
    run2 = []
    for _ in range(500):
        sim.step()
        run2.append(sim.state)
    np.testing.assert_array_equal(np.array(run1), np.array(run2))
    assert calls == [1]


def test_recording_off_by_default() -> None:
    sim = Simulation(SimplePendulum())
    sim.initialize()
    for _ in range(10):
        sim.step()
    assert not sim.recording
    assert len(sim.export()) == 0


def test_export_after_recording() -> None:
    sim = Simulation(SimplePendulum())
    sim.initialize()
    sim.enable_recording(True)
    for _ in range(1000):
        sim.step(1 / 60)
    data = sim.export()
    assert len(data) == 1000
    assert data.meta.id == "simple-pendulum"
    assert data.params["length"] == 2.0
    t = np.array(data.time_series.time)
    np.testing.assert_allclose(np.diff(t), 1 / 240, atol=1e-12)
    assert len(data.phase_space) == 1
    assert len(data.phase_space[0]) == 1000


def test_enable_recording_clears_history() -> None:
    sim = Simulation(SimplePendulum())
    sim.initialize()
    sim.enable_recording(True)
    for _ in range(5):
        sim.step()
    sim.enable_recording(True)
    assert len(sim.history) == 0
    sim.step()
    sim.initialize()
    assert len(sim.history) == 0


def test_export_does_not_alias_history() -> None:
    sim = Simulation(SimplePendulum())
    sim.initialize()
    sim.enable_recording(True)
    for _ in range(3):
        sim.step()
    data = sim.export()
    for _ in range(3):
        sim.step()
    assert len(data) == 3
    assert len(sim.export()) == 6


def test_state_is_a_copy() -> None:
    sim = Simulation(SimplePendulum())
    sim.initialize()
    state = sim.state
    state[0] = 99.0
    assert sim.state[0] != 99.0


def test_divergence_detection() -> None:
    sim = Simulation(make_oscillator(fixed_timestep=0.01)())
    sim.initialize(blow_up=True)
    assert sim.is_finite()
    sim.step()
    assert not sim.is_finite()
    with pytest.raises(NumericalDivergenceError):
        sim.check_finite()


def test_state_dict() -> None:
    sim = Simulation(SimplePendulum())
    sim.initialize()
    sim.step()
    d = sim.state_dict()
    assert d["time"] == pytest.approx(1 / 240)
    assert d["recording"] is False


def test_initialize_keeps_model_params() -> None:
    sim = Simulation(SimplePendulum({"length": 3.0, "damping": 0.2}))
    sim.initialize()
    assert sim.params.length == 3.0
    assert sim.params.damping == 0.2
    sim.initialize(initial_angle=0.5)
    assert sim.params.length == 3.0
    assert sim.params.initial_angle == 0.5


def test_initialize_with_mapping_starts_from_defaults() -> None:
    sim = Simulation(SimplePendulum({"length": 3.0}))
    sim.initialize({"mass": 2.0})
    assert sim.params.mass == 2.0
    assert sim.params.length == 2.0
