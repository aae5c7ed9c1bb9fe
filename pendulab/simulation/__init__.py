"""
Simulation: the pendulum models and the tools that run and analyse them.

Models live in _simple, _double and _chain; driver turns frame deltas into
fixed steps; chaos measures trajectory divergence; _utils plots exported runs
(matplotlib optional).
"""

from pendulab.simulation._chain import NPendulum, NPendulumParams
from pendulab.simulation._double import DoublePendulum, DoublePendulumParams
from pendulab.simulation._simple import SimplePendulum, SimplePendulumParams
from pendulab.simulation._utils import plot_energy, plot_phase_portrait, plot_positions_vs_time
from pendulab.simulation.chaos import divergence_curve, estimate_lyapunov_exponent, phase_distance
from pendulab.simulation.driver import FixedStepDriver, FrameResult

MODELS = {
    SimplePendulum.config.meta.id: SimplePendulum,
    DoublePendulum.config.meta.id: DoublePendulum,
    NPendulum.config.meta.id: NPendulum,
}

__all__ = [
    "SimplePendulum",
    "SimplePendulumParams",
    "DoublePendulum",
    "DoublePendulumParams",
    "NPendulum",
    "NPendulumParams",
    "MODELS",
    "FixedStepDriver",
    "FrameResult",
    "divergence_curve",
    "estimate_lyapunov_exponent",
    "phase_distance",
    "plot_phase_portrait",
    "plot_energy",
    "plot_positions_vs_time",
]
