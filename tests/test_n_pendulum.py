"""Tests for the N-segment chain."""

import math

import numpy as np
import pytest

from pendulab import NPendulum, Simulation
from pendulab.core.errors import InvalidParameterError


@pytest.mark.parametrize("n", range(2, 11))
def test_state_size(n) -> None:
    sim = Simulation(NPendulum())
    sim.initialize(n=n)
    assert sim.model.state_size == 2 * n
    assert sim.state.shape == (2 * n,)
    assert len(sim.current_physics().positions) == n
    sim.step()
    assert sim.is_finite()


@pytest.mark.parametrize("n", [1, 11])
def test_segment_count_rejected(n) -> None:
    sim = Simulation(NPendulum())
    with pytest.raises(InvalidParameterError):
        sim.initialize(n=n)


def test_initial_angles_taper() -> None:
    model = NPendulum({"n": 4, "initial_spread": 0.8})
    state = model.create_initial_state()
    np.testing.assert_allclose(state[:4], [0.8, 0.6, 0.4, 0.2])
    np.testing.assert_array_equal(state[4:], 0.0)


def test_hanging_chain() -> None:
    model = NPendulum({"n": 5, "segment_length": 0.5})
    state = np.zeros(10)
    physics = model.state_to_physics(state, 0.0)
    assert physics.positions[-1].x == pytest.approx(0.0)
    assert physics.positions[-1].y == pytest.approx(-2.5)
    energy = model.energy(state)
    assert energy.kinetic == 0.0
    assert energy.potential == pytest.approx(0.0, abs=1e-12)


def test_small_oscillations_stay_bounded() -> None:
    sim = Simulation(NPendulum())
    sim.initialize(n=3, initial_spread=0.01, damping=0.0)
    amplitude = np.abs(sim.state[:3]).max()
    peak = amplitude
    for _ in range(2400):
        sim.step()
        peak = max(peak, np.abs(sim.state[:3]).max())
    assert peak <= 1.01 * amplitude


def test_defaults_stay_finite() -> None:
    sim = Simulation(NPendulum())
    sim.initialize()
    for _ in range(960):
        sim.step()
    assert sim.is_finite()
    assert sim.time == pytest.approx(2.0)


def test_phase_space_tracking() -> None:
    sim = Simulation(NPendulum())
    sim.initialize(n=4)
    assert len(sim.get_phase_space()) == 4
    sim.initialize(n=4, track_phase_space=False)
    assert sim.get_phase_space() is None


def test_energy_reference_matches_spread() -> None:
    model = NPendulum({"n": 2, "segment_length": 1.0, "segment_mass": 1.0, "gravity": 10.0})
    state = np.array([math.pi / 2, 0.0, 0.0, 0.0])
    # first bob lifted by L, second bob lifted by L
    assert model.energy(state).potential == pytest.approx(20.0)
