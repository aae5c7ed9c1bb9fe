"""
Plot helpers for exported runs: phase portrait, energy vs time, positions vs time.

All functions accept an ExportData. Matplotlib is optional
(pip install pendulab[plot]); without it they raise ImportError.
"""

from typing import Any, List, Optional

import numpy as np

from pendulab.core.history import ExportData
from pendulab.physics.kinematics import normalize_angle


def _pyplot() -> Any:
    try:
        import matplotlib.pyplot as plt
    except ImportError:
        raise ImportError("matplotlib is required for plotting (pip install pendulab[plot]).")
    return plt


def plot_phase_portrait(
    data: ExportData,
    body: int = 0,
    wrap: bool = False,
    ax: Optional[Any] = None,
    title: str = "Phase portrait",
    **kwargs: Any,
) -> Any:
    """
    Plot angle vs angular velocity of one body.

    Args:
        data: export with phase space.
        body: index of the body.
        wrap: wrap angles to [-pi, pi] (breaks the line at each wrap).
        ax: matplotlib axes (if None, creates a new figure).
        **kwargs: passed to ax.plot().
    """
    plt = _pyplot()
    if not data.phase_space:
        raise ValueError(f"Export of {data.meta.id} has no phase space data.")
    points = data.phase_space[body]
    angle = np.array([p.angle for p in points])
    omega = np.array([p.angular_velocity for p in points])
    if wrap:
        angle = np.array([normalize_angle(a) for a in angle])
        jumps = np.where(np.abs(np.diff(angle)) > np.pi)[0] + 1
        angle = np.insert(angle, jumps, np.nan)
        omega = np.insert(omega, jumps, np.nan)
    if ax is None:
        _, ax = plt.subplots(1, 1, figsize=(6, 5))
    ax.plot(angle, omega, **kwargs)
    ax.set_xlabel(f"theta{body} (rad)")
    ax.set_ylabel(f"omega{body} (rad/s)")
    ax.set_title(title)
    ax.grid(True, alpha=0.3)
    return ax


def plot_energy(
    data: ExportData,
    ax: Optional[Any] = None,
    title: str = "Energy",
    **kwargs: Any,
) -> Any:
    """Kinetic, potential and total energy vs time."""
    plt = _pyplot()
    arrays = data.to_numpy()
    t, energy = arrays["time"], arrays["energy"]
    if ax is None:
        _, ax = plt.subplots(1, 1, figsize=(8, 4))
    for i, label in enumerate(("kinetic", "potential", "total")):
        ax.plot(t, energy[:, i], label=label, **kwargs)
    ax.set_xlabel("time (s)")
    ax.set_ylabel("energy (J)")
    ax.set_title(title)
    ax.legend(loc="upper right", fontsize=8)
    ax.grid(True, alpha=0.3)
    return ax


def plot_positions_vs_time(
    data: ExportData,
    bodies: Optional[List[int]] = None,
    title: str = "Positions vs time",
    **kwargs: Any,
) -> Any:
    """One subplot per body with its x and y coordinate vs time."""
    plt = _pyplot()
    arrays = data.to_numpy()
    t, pos = arrays["time"], arrays["positions"]
    bodies = list(range(data.num_bodies)) if bodies is None else bodies
    fig, axes = plt.subplots(max(len(bodies), 1), 1, sharex=True, figsize=(8, max(2 * len(bodies), 4)))
    axes = np.atleast_1d(axes)
    for a, i in zip(axes, bodies):
        a.plot(t, pos[:, i, 0], label=f"x{i}", **kwargs)
        a.plot(t, pos[:, i, 1], label=f"y{i}", **kwargs)
        a.set_ylabel(f"body {i} (m)")
        a.legend(loc="upper right", fontsize=8)
        a.grid(True, alpha=0.3)
    axes[-1].set_xlabel("time (s)")
    if title:
        fig.suptitle(title)
    fig.tight_layout()
    return fig
