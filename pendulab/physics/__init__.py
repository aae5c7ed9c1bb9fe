"""
Numerical level of the simulator.

  - integrators: fixed-step Euler, velocity Verlet, RK4 with pre-allocated workspaces
  - kinematics: polar/cartesian conversion and energy helpers
"""

from pendulab.physics.integrators import (
    MAX_STATE_SIZE,
    EulerIntegrator,
    IntegratorWorkspace,
    RK4Integrator,
    VerletIntegrator,
    euler_step,
    get_integrator,
    rk4_step,
    verlet_step,
)
from pendulab.physics.kinematics import normalize_angle, polar_to_cartesian

__all__ = [
    "MAX_STATE_SIZE",
    "IntegratorWorkspace",
    "EulerIntegrator",
    "VerletIntegrator",
    "RK4Integrator",
    "euler_step",
    "verlet_step",
    "rk4_step",
    "get_integrator",
    "normalize_angle",
    "polar_to_cartesian",
]
