"""Shared test models."""

from dataclasses import dataclass
from typing import Optional

import numpy as np
import pytest

from pendulab.core import (
    DynamicalModel,
    EnergyState,
    ModelParams,
    PhysicsSettings,
    PhysicsState,
    SimulationConfig,
    SimulationMeta,
    Vector3,
    param,
)


@dataclass(frozen=True)
class OscillatorParams(ModelParams):
    omega: float = param(1.0, "Angular frequency", "rad/s", constraint="positive")
    x0: float = param(1.0, "Initial position", "m")
    blow_up: bool = param(False, "Return infinite derivatives")


def make_oscillator(method: str = "rk4", fixed_timestep: Optional[float] = None):
    """Harmonic oscillator x'' = -omega^2 x with a configurable integrator."""

    class HarmonicOscillator(DynamicalModel):
        config = SimulationConfig(
            meta=SimulationMeta(id="oscillator", name="Harmonic oscillator", category="other"),
            physics=PhysicsSettings(integration_method=method, fixed_timestep=fixed_timestep),
        )
        params_type = OscillatorParams

        @property
        def state_size(self) -> int:
            return 2

        def create_initial_state(self) -> np.ndarray:
            return np.array([self.params.x0, 0.0])

        def compute_derivatives(self, t: float, state: np.ndarray) -> np.ndarray:
            if self.params.blow_up:
                return np.array([np.inf, np.inf])
            return np.array([state[1], -self.params.omega ** 2 * state[0]])

        def state_to_physics(self, state: np.ndarray, t: float) -> PhysicsState:
            return PhysicsState(
                time=t,
                positions=[Vector3(float(state[0]), 0.0, 0.0)],
                velocities=[Vector3(float(state[1]), 0.0, 0.0)],
            )

        def energy(self, state: np.ndarray) -> EnergyState:
            kinetic = 0.5 * state[1] ** 2
            potential = 0.5 * self.params.omega ** 2 * state[0] ** 2
            return EnergyState.from_components(float(kinetic), float(potential))

    return HarmonicOscillator


@pytest.fixture
def oscillator_cls():
    return make_oscillator()
