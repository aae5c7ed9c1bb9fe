"""
Example: sensitivity to initial conditions of the double pendulum.

Two runs differ by 1e-6 rad in the first angle. The phase-space distance is
sampled every 0.1 s and a finite-time Lyapunov exponent is fitted to it.
Energy drift of the reference run is reported as a check on the integrator.
Plot requires: pip install pendulab[plot]
"""

import sys
from pathlib import Path

import numpy as np

ROOT = Path(__file__).resolve().parents[2]
sys.path.insert(0, str(ROOT))

from pendulab import DoublePendulum, Simulation
from pendulab.logging_config import setup_logging
from pendulab.simulation import divergence_curve, estimate_lyapunov_exponent


def main() -> None:
    setup_logging()

    # --- Divergence of nearby trajectories ---
    times, distances = divergence_curve(
        DoublePendulum,
        params={"initial_angle1": 2.0, "initial_angle2": 2.0},
        parameter="initial_angle1",
        perturbation=1e-6,
        duration=10.0,
        sample_every=48,
    )
    lam = estimate_lyapunov_exponent(times, distances, saturation=1e-1)
    print(f"Initial separation: {distances[0]:.3e}")
    print(f"Separation at t={times[-1]:.1f}s: {distances[-1]:.3e}")
    print(f"Finite-time Lyapunov exponent: {lam:.3f} 1/s")

    # --- Energy conservation of the reference run ---
    sim = Simulation(DoublePendulum())
    sim.initialize({"initial_angle1": 2.0, "initial_angle2": 2.0})
    e0 = sim.get_energy().total
    for _ in range(4800):
        sim.step()
    e1 = sim.get_energy().total
    print(f"Relative energy drift over 10 s: {abs(e1 - e0) / abs(e0):.2e}")

    try:
        import matplotlib.pyplot as plt
        _, ax = plt.subplots(1, 1, figsize=(7, 4))
        ax.semilogy(times, np.maximum(distances, 1e-300))
        ax.set_xlabel("time (s)")
        ax.set_ylabel("phase-space distance")
        ax.set_title("Double pendulum: divergence of nearby trajectories")
        ax.grid(True, alpha=0.3)
        plt.tight_layout()
        # plt.savefig("double_pendulum_divergence.png", dpi=120)
        plt.close()
    except ImportError:
        print("matplotlib not available, skip plot")


if __name__ == "__main__":
    main()
