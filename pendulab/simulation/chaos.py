"""
Sensitivity to initial conditions: divergence of two nearby trajectories
and a finite-time Lyapunov exponent estimated from it.
"""

from typing import Any, Mapping, Optional, Tuple, Type

import numpy as np

from pendulab.core.component import DynamicalModel
from pendulab.core.errors import InvalidParameterError
from pendulab.core.system import Simulation


def phase_distance(a: np.ndarray, b: np.ndarray) -> float:
    """Euclidean distance between two state vectors."""
    return float(np.linalg.norm(np.asarray(a, dtype=float) - np.asarray(b, dtype=float)))


def divergence_curve(
    model_cls: Type[DynamicalModel],
    params: Optional[Mapping[str, Any]] = None,
    parameter: str = "initial_angle1",
    perturbation: float = 1e-6,
    duration: float = 5.0,
    sample_every: int = 48,
) -> Tuple[np.ndarray, np.ndarray]:
    """
    Run a reference and a perturbed copy of the same model side by side.

    Args:
        model_cls: model class (must have a fixed timestep).
        params: parameters shared by both runs.
        parameter: name of the parameter to perturb.
        perturbation: amount added to that parameter in the second run.
        duration: simulated time (s).
        sample_every: distance is sampled every this many steps.

    Returns:
        (times, distances), with the initial distance at t = 0.
    """
    reference = Simulation(model_cls())
    reference.initialize(params)
    base = reference.params
    if parameter not in base.schema():
        raise InvalidParameterError(f"{model_cls.__name__} has no parameter {parameter!r}")
    perturbed = Simulation(model_cls())
    perturbed.initialize(base.replace(**{parameter: getattr(base, parameter) + perturbation}))

    dt = reference.fixed_timestep
    if dt is None:
        raise ValueError(f"{model_cls.__name__} has no fixed timestep")
    n_steps = int(round(duration / dt))

    times = [0.0]
    distances = [phase_distance(reference.state, perturbed.state)]
    for k in range(1, n_steps + 1):
        reference.step()
        perturbed.step()
        if k % sample_every == 0 or k == n_steps:
            times.append(reference.time)
            distances.append(phase_distance(reference.state, perturbed.state))
    return np.array(times), np.array(distances)


def estimate_lyapunov_exponent(
    times: np.ndarray,
    distances: np.ndarray,
    saturation: Optional[float] = None,
) -> float:
    """
    Slope of log(distance) vs time (least squares).

    Samples that are zero, non-finite or above saturation (separation no
    longer small) are ignored.
    """
    t = np.asarray(times, dtype=float)
    d = np.asarray(distances, dtype=float)
    mask = np.isfinite(d) & (d > 0)
    if saturation is not None:
        mask &= d < saturation
    if mask.sum() < 2:
        raise ValueError("Need at least two usable samples to fit an exponent")
    slope, _ = np.polyfit(t[mask], np.log(d[mask]), 1)
    return float(slope)
