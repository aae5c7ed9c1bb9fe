"""Tests for trajectory divergence and Lyapunov estimates."""

import numpy as np
import pytest

from pendulab.core.errors import InvalidParameterError
from pendulab.simulation import (
    DoublePendulum,
    SimplePendulum,
    divergence_curve,
    estimate_lyapunov_exponent,
    phase_distance,
)


def test_phase_distance() -> None:
    assert phase_distance([0.0, 0.0], [3.0, 4.0]) == 5.0


def test_divergence_curve_sampling() -> None:
    times, distances = divergence_curve(DoublePendulum, duration=1.0, sample_every=48)
    assert times.shape == distances.shape
    np.testing.assert_allclose(times, np.arange(11) * 0.1, atol=1e-9)


def test_simple_pendulum_separation_stays_small() -> None:
    times, distances = divergence_curve(SimplePendulum, parameter="initial_angle", duration=5.0)
    assert distances.max() < 1e-4


def test_unknown_parameter() -> None:
    with pytest.raises(InvalidParameterError):
        divergence_curve(SimplePendulum, parameter="initial_angle1")


def test_lyapunov_fit() -> None:
    t = np.linspace(0.0, 5.0, 50)
    d = 1e-8 * np.exp(0.7 * t)
    assert estimate_lyapunov_exponent(t, d) == pytest.approx(0.7)


def test_lyapunov_ignores_saturated_samples() -> None:
    t = np.linspace(0.0, 10.0, 101)
    d = np.minimum(1e-6 * np.exp(1.5 * t), 1.0)
    d[0] = 0.0
    assert estimate_lyapunov_exponent(t, d, saturation=0.5) == pytest.approx(1.5)


def test_lyapunov_needs_two_points() -> None:
    with pytest.raises(ValueError):
        estimate_lyapunov_exponent([0.0, 1.0], [0.0, np.nan])


def test_double_pendulum_exponent_positive() -> None:
    times, distances = divergence_curve(DoublePendulum, duration=5.0)
    assert estimate_lyapunov_exponent(times, distances, saturation=1e-2) > 0.0
