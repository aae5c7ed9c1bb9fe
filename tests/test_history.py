"""Tests for the bounded history and trail buffers."""

import numpy as np
import pytest

from pendulab import DoublePendulum, Simulation, SimplePendulum
from pendulab.core.history import SimulationHistory, TrailBuffer
from pendulab.core.signals import EnergyState, PhysicsState, Vector3


def _sample(t: float) -> PhysicsState:
    return PhysicsState(time=t, positions=[Vector3(t, 0.0, 0.0)], velocities=[Vector3(0.0, 0.0, 0.0)])


def test_trim_keeps_newest() -> None:
    history = SimulationHistory(max_length=10, trim_margin=3)
    energy = EnergyState.from_components(0.0, 0.0)
    for k in range(10):
        history.append(_sample(float(k)), energy)
    assert len(history) == 10
    history.append(_sample(10.0), energy)
    assert len(history) == 8
    np.testing.assert_array_equal(history.time, [3.0, 4.0, 5.0, 6.0, 7.0, 8.0, 9.0, 10.0])


@pytest.mark.parametrize("max_length, trim_margin", [(1, 0), (10, 0), (10, 10), (10, -1)])
def test_invalid_bounds(max_length, trim_margin) -> None:
    with pytest.raises(ValueError):
        SimulationHistory(max_length, trim_margin)


def test_simulation_history_is_bounded() -> None:
    sim = Simulation(SimplePendulum(), max_history_length=100, history_trim_margin=10)
    sim.initialize()
    sim.enable_recording(True)
    for _ in range(250):
        sim.step()
        assert len(sim.history) <= 100
    assert 90 <= len(sim.history) <= 100
    assert sim.history.time[-1] == pytest.approx(sim.time)


def test_trail_hard_cap() -> None:
    trail = TrailBuffer(max_length=5, max_age=None)
    for k in range(12):
        trail.append(float(k), k)
    assert trail.items() == [7, 8, 9, 10, 11]


def test_trail_age_purge() -> None:
    trail = TrailBuffer(max_length=100, max_age=1.0, cleanup_interval=1)
    for k in range(11):
        trail.append(0.5 * k, k)
    assert trail.times() == [4.0, 4.5, 5.0]
    trail.clear()
    assert len(trail) == 0


def test_trail_purge_is_periodic() -> None:
    trail = TrailBuffer(max_length=100, max_age=1.0, cleanup_interval=4)
    for k in range(7):
        trail.append(float(k), k)
    # last purge ran at the fourth append (t=3)
    assert trail.times() == [2.0, 3.0, 4.0, 5.0, 6.0]


def test_export_arrays() -> None:
    sim = Simulation(DoublePendulum())
    sim.initialize()
    sim.enable_recording(True)
    for _ in range(7):
        sim.step()
    arrays = sim.export().to_numpy()
    assert arrays["time"].shape == (7,)
    assert arrays["positions"].shape == (7, 2, 3)
    assert arrays["velocities"].shape == (7, 2, 3)
    assert arrays["energy"].shape == (7, 3)
    assert arrays["phase"].shape == (2, 7, 2)
