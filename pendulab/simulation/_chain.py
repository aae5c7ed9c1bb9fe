"""
N-segment pendulum chain with an approximate nearest-neighbor coupling.

This is NOT the full N-body Lagrangian: each segment feels gravity scaled by
the number of segments from it to the free end, plus coupling terms from its
immediate neighbors. It stays numerically stable and bounded but does not
conserve energy as tightly as DoublePendulum.
"""

import math
from dataclasses import dataclass
from typing import List, Optional

import numpy as np

from pendulab.core.component import DynamicalModel
from pendulab.core.config import ModelParams, PhysicsSettings, SimulationConfig, SimulationMeta, param
from pendulab.core.signals import EnergyState, PhasePoint, PhysicsState, Vector3

MIN_SEGMENTS = 2
MAX_SEGMENTS = 10


@dataclass(frozen=True)
class NPendulumParams(ModelParams):
    n: int = param(3, "Number of segments", "", MIN_SEGMENTS, MAX_SEGMENTS, 1, constraint="bounded")
    segment_length: float = param(0.8, "Segment length", "m", 0.1, 2.0, 0.1, constraint="positive")
    segment_mass: float = param(1.0, "Segment mass", "kg", 0.1, 5.0, 0.1, constraint="positive")
    gravity: float = param(9.81, "Gravity", "m/s^2", 0.1, 25.0, 0.01)
    damping: float = param(0.01, "Damping", "1/s", 0.0, 0.5, 0.01, constraint="nonnegative")
    initial_spread: float = param(math.pi / 6, "Initial spread", "rad", 0.0, math.pi, 0.01)
    track_phase_space: bool = param(True, "Track phase space")


class NPendulum(DynamicalModel):
    """
    State [theta_0..theta_{n-1}, omega_0..omega_{n-1}].

    alpha_i = -(g/L) sin(theta_i) (n - i)
              + omega_{i-1}^2 sin(theta_i - theta_{i-1}) / 2      (i > 0)
              - omega_{i+1}^2 sin(theta_{i+1} - theta_i) / 2      (i < n - 1)
              - damping * omega_i
    """

    config = SimulationConfig(
        meta=SimulationMeta(
            id="n-pendulum",
            name="N-Pendulum Chain",
            description="Chain of equal segments with approximate nearest-neighbor coupling.",
            tags=("pendulum", "chain", "approximate"),
        ),
        physics=PhysicsSettings(integration_method="rk4", fixed_timestep=1 / 480),
    )
    params_type = NPendulumParams
    has_phase_space = True

    def _configured(self) -> None:
        self.n = self.params.n
        self._deriv = np.zeros(2 * self.n)

    @property
    def state_size(self) -> int:
        return 2 * self.n

    def create_initial_state(self) -> np.ndarray:
        n = self.n
        state = np.zeros(2 * n)
        for i in range(n):
            state[i] = self.params.initial_spread * (1 - i / n)
        return state

    def compute_derivatives(self, t: float, state: np.ndarray) -> np.ndarray:
        p = self.params
        n = self.n
        g_over_l = p.gravity / p.segment_length
        deriv = self._deriv

        for i in range(n):
            theta_i = state[i]
            omega_i = state[n + i]
            alpha = -g_over_l * math.sin(theta_i) * (n - i)
            if i > 0:
                omega_prev = state[n + i - 1]
                alpha += omega_prev * omega_prev * math.sin(theta_i - state[i - 1]) / 2
            if i < n - 1:
                omega_next = state[n + i + 1]
                alpha -= omega_next * omega_next * math.sin(state[i + 1] - theta_i) / 2
            alpha -= p.damping * omega_i
            deriv[i] = omega_i
            deriv[n + i] = alpha
        return deriv

    def state_to_physics(self, state: np.ndarray, t: float) -> PhysicsState:
        L = self.params.segment_length
        n = self.n
        positions = []
        velocities = []
        x = y = vx = vy = 0.0
        for i in range(n):
            theta = float(state[i])
            omega = float(state[n + i])
            x += L * math.sin(theta)
            y -= L * math.cos(theta)
            vx += L * omega * math.cos(theta)
            vy += L * omega * math.sin(theta)
            positions.append(Vector3(x, y, 0.0))
            velocities.append(Vector3(vx, vy, 0.0))
        return PhysicsState(time=t, positions=positions, velocities=velocities)

    def energy(self, state: np.ndarray) -> EnergyState:
        p = self.params
        L, m, g = p.segment_length, p.segment_mass, p.gravity
        n = self.n
        kinetic = potential = 0.0
        y = vx = vy = 0.0
        for i in range(n):
            theta = float(state[i])
            omega = float(state[n + i])
            y -= L * math.cos(theta)
            vx += L * omega * math.cos(theta)
            vy += L * omega * math.sin(theta)
            kinetic += 0.5 * m * (vx * vx + vy * vy)
            # zero with every segment hanging straight down
            potential += m * g * (y + (i + 1) * L)
        return EnergyState.from_components(kinetic, potential)

    def phase_space(self, state: np.ndarray, t: float) -> Optional[List[PhasePoint]]:
        if not self.params.track_phase_space:
            return None
        n = self.n
        return [PhasePoint(float(state[i]), float(state[n + i]), t) for i in range(n)]
