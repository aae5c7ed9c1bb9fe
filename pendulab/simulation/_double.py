"""
Double pendulum: two point masses on rigid massless rods, Lagrangian equations
of motion. Chaotic for large amplitudes.
"""

import math
from dataclasses import dataclass
from typing import List

import numpy as np

from pendulab.core.component import DynamicalModel
from pendulab.core.config import ModelParams, PhysicsSettings, SimulationConfig, SimulationMeta, param
from pendulab.core.signals import EnergyState, PhasePoint, PhysicsState, Vector3


@dataclass(frozen=True)
class DoublePendulumParams(ModelParams):
    length1: float = param(1.5, "Length 1", "m", 0.1, 5.0, 0.1, constraint="positive")
    length2: float = param(1.5, "Length 2", "m", 0.1, 5.0, 0.1, constraint="positive")
    mass1: float = param(1.0, "Mass 1", "kg", 0.1, 10.0, 0.1, constraint="positive")
    mass2: float = param(1.0, "Mass 2", "kg", 0.1, 10.0, 0.1, constraint="positive")
    gravity: float = param(9.81, "Gravity", "m/s^2", 0.1, 25.0, 0.01)
    damping: float = param(0.0, "Damping", "1/s", 0.0, 0.5, 0.01, constraint="nonnegative")
    initial_angle1: float = param(math.pi / 2, "Initial angle 1", "rad", -math.pi, math.pi, 0.01)
    initial_angle2: float = param(math.pi / 2, "Initial angle 2", "rad", -math.pi, math.pi, 0.01)
    initial_velocity1: float = param(0.0, "Initial velocity 1", "rad/s", -10.0, 10.0, 0.1)
    initial_velocity2: float = param(0.0, "Initial velocity 2", "rad/s", -10.0, 10.0, 0.1)


class DoublePendulum(DynamicalModel):
    """
    State [theta1, theta2, omega1, omega2], angles from the downward vertical.

    With delta = theta1 - theta2 and D = 2 m1 + m2 - m2 cos(2 delta):

    alpha1 = (-g (2 m1 + m2) sin(theta1) - m2 g sin(theta1 - 2 theta2)
              - 2 sin(delta) m2 (omega2^2 L2 + omega1^2 L1 cos(delta))) / (L1 D)
    alpha2 = 2 sin(delta) (omega1^2 L1 (m1 + m2) + g (m1 + m2) cos(theta1)
              + omega2^2 L2 m2 cos(delta)) / (L2 D)

    Damping subtracts damping * omega_i from alpha_i directly; this is not a
    physical friction model.
    """

    config = SimulationConfig(
        meta=SimulationMeta(
            id="double-pendulum",
            name="Double Pendulum",
            description="Coupled two-mass pendulum exhibiting chaotic motion.",
            tags=("pendulum", "chaos", "lagrangian"),
        ),
        physics=PhysicsSettings(integration_method="rk4", fixed_timestep=1 / 480),
    )
    params_type = DoublePendulumParams
    has_phase_space = True

    def _configured(self) -> None:
        self._deriv = np.zeros(4)

    @property
    def state_size(self) -> int:
        return 4

    def create_initial_state(self) -> np.ndarray:
        p = self.params
        return np.array(
            [p.initial_angle1, p.initial_angle2, p.initial_velocity1, p.initial_velocity2],
            dtype=float,
        )

    def compute_derivatives(self, t: float, state: np.ndarray) -> np.ndarray:
        p = self.params
        L1, L2, m1, m2, g = p.length1, p.length2, p.mass1, p.mass2, p.gravity
        theta1, theta2, omega1, omega2 = state[0], state[1], state[2], state[3]

        delta = theta1 - theta2
        sin_d = math.sin(delta)
        cos_d = math.cos(delta)
        den = 2 * m1 + m2 - m2 * math.cos(2 * delta)

        alpha1 = (
            -g * (2 * m1 + m2) * math.sin(theta1)
            - m2 * g * math.sin(theta1 - 2 * theta2)
            - 2 * sin_d * m2 * (omega2 * omega2 * L2 + omega1 * omega1 * L1 * cos_d)
        ) / (L1 * den) - p.damping * omega1
        alpha2 = (
            2
            * sin_d
            * (
                omega1 * omega1 * L1 * (m1 + m2)
                + g * (m1 + m2) * math.cos(theta1)
                + omega2 * omega2 * L2 * m2 * cos_d
            )
        ) / (L2 * den) - p.damping * omega2

        self._deriv[0] = omega1
        self._deriv[1] = omega2
        self._deriv[2] = alpha1
        self._deriv[3] = alpha2
        return self._deriv

    def state_to_physics(self, state: np.ndarray, t: float) -> PhysicsState:
        p = self.params
        theta1, theta2, omega1, omega2 = (float(v) for v in state[:4])

        x1 = p.length1 * math.sin(theta1)
        y1 = -p.length1 * math.cos(theta1)
        x2 = x1 + p.length2 * math.sin(theta2)
        y2 = y1 - p.length2 * math.cos(theta2)

        vx1 = p.length1 * omega1 * math.cos(theta1)
        vy1 = p.length1 * omega1 * math.sin(theta1)
        vx2 = vx1 + p.length2 * omega2 * math.cos(theta2)
        vy2 = vy1 + p.length2 * omega2 * math.sin(theta2)

        return PhysicsState(
            time=t,
            positions=[Vector3(x1, y1, 0.0), Vector3(x2, y2, 0.0)],
            velocities=[Vector3(vx1, vy1, 0.0), Vector3(vx2, vy2, 0.0)],
        )

    def energy(self, state: np.ndarray) -> EnergyState:
        p = self.params
        L1, L2, m1, m2, g = p.length1, p.length2, p.mass1, p.mass2, p.gravity
        theta1, theta2, omega1, omega2 = (float(v) for v in state[:4])

        y1 = -L1 * math.cos(theta1)
        y2 = y1 - L2 * math.cos(theta2)

        v1_sq = (L1 * omega1) ** 2
        v2_sq = v1_sq + (L2 * omega2) ** 2 + 2 * L1 * L2 * omega1 * omega2 * math.cos(theta1 - theta2)

        kinetic = 0.5 * m1 * v1_sq + 0.5 * m2 * v2_sq
        # zero with both rods hanging straight down
        potential = m1 * g * (y1 + L1) + m2 * g * (y2 + L1 + L2)
        return EnergyState.from_components(kinetic, potential)

    def phase_space(self, state: np.ndarray, t: float) -> List[PhasePoint]:
        return [
            PhasePoint(float(state[0]), float(state[2]), t),
            PhasePoint(float(state[1]), float(state[3]), t),
        ]
