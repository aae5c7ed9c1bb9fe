"""
Simple pendulum: point mass on a rigid massless rod, planar motion,
frictionless pivot, uniform gravity, optional linear damping.
"""

import math
from dataclasses import dataclass
from typing import List, Optional

import numpy as np

from pendulab.core.component import DynamicalModel
from pendulab.core.config import ModelParams, PhysicsSettings, SimulationConfig, SimulationMeta, param
from pendulab.core.signals import EnergyState, PhasePoint, PhysicsState, Vector3
from pendulab.physics.kinematics import kinetic_energy, polar_to_cartesian, potential_energy, tangential_velocity


@dataclass(frozen=True)
class SimplePendulumParams(ModelParams):
    length: float = param(2.0, "Length", "m", 0.1, 10.0, 0.1, constraint="positive")
    mass: float = param(1.0, "Mass", "kg", 0.1, 10.0, 0.1, constraint="positive")
    gravity: float = param(9.81, "Gravity", "m/s^2", 0.1, 25.0, 0.01)
    damping: float = param(0.0, "Damping", "1/s", 0.0, 1.0, 0.01, constraint="nonnegative")
    initial_angle: float = param(math.pi / 4, "Initial angle", "rad", -math.pi, math.pi, 0.01)
    initial_velocity: float = param(0.0, "Initial velocity", "rad/s", -10.0, 10.0, 0.1)


class SimplePendulum(DynamicalModel):
    """
    State [theta, omega].

    dtheta/dt = omega
    domega/dt = -(g/L) sin(theta) - damping * omega
    """

    config = SimulationConfig(
        meta=SimulationMeta(
            id="simple-pendulum",
            name="Simple Pendulum",
            description="Point-mass pendulum on a rigid massless rod.",
            tags=("pendulum", "oscillator"),
        ),
        physics=PhysicsSettings(integration_method="rk4", fixed_timestep=1 / 240),
    )
    params_type = SimplePendulumParams
    has_phase_space = True

    def _configured(self) -> None:
        self._deriv = np.zeros(2)

    @property
    def state_size(self) -> int:
        return 2

    def create_initial_state(self) -> np.ndarray:
        p = self.params
        return np.array([p.initial_angle, p.initial_velocity], dtype=float)

    def compute_derivatives(self, t: float, state: np.ndarray) -> np.ndarray:
        p = self.params
        theta, omega = state[0], state[1]
        self._deriv[0] = omega
        self._deriv[1] = -(p.gravity / p.length) * math.sin(theta) - p.damping * omega
        return self._deriv

    def state_to_physics(self, state: np.ndarray, t: float) -> PhysicsState:
        p = self.params
        theta, omega = float(state[0]), float(state[1])
        x, y = polar_to_cartesian(p.length, theta)
        vx, vy = tangential_velocity(p.length, theta, omega)
        return PhysicsState(
            time=t,
            positions=[Vector3(x, y, 0.0)],
            velocities=[Vector3(vx, vy, 0.0)],
        )

    def energy(self, state: np.ndarray) -> EnergyState:
        p = self.params
        theta, omega = float(state[0]), float(state[1])
        kinetic = kinetic_energy(p.mass, p.length * omega)
        # height above the lowest point
        potential = potential_energy(p.mass, p.gravity, p.length * (1.0 - math.cos(theta)))
        return EnergyState.from_components(kinetic, potential)

    def phase_space(self, state: np.ndarray, t: float) -> List[PhasePoint]:
        return [PhasePoint(float(state[0]), float(state[1]), t)]

    def theoretical_period(self) -> float:
        """Small-angle period 2 pi sqrt(L/g)."""
        p = self.params
        return 2 * math.pi * math.sqrt(p.length / p.gravity)

    def large_amplitude_period(self, amplitude: Optional[float] = None) -> float:
        """
        Exact undamped period for a release from rest at the given amplitude
        (default: initial_angle): T = 4 sqrt(L/g) K(sin(amplitude/2)),
        with the complete elliptic integral K from the arithmetic-geometric mean.
        """
        p = self.params
        theta0 = abs(p.initial_angle if amplitude is None else amplitude)
        if theta0 >= math.pi:
            return math.inf
        k = math.sin(theta0 / 2)
        a, b = 1.0, math.sqrt(1.0 - k * k)
        for _ in range(64):
            if abs(a - b) <= 1e-15 * a:
                break
            a, b = 0.5 * (a + b), math.sqrt(a * b)
        K = math.pi / (2 * a)
        return 4 * math.sqrt(p.length / p.gravity) * K
