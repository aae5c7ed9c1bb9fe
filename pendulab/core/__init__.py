"""Core: ciclo di vita della simulazione, configurazione, history ed export."""

from pendulab.core.component import DynamicalModel
from pendulab.core.config import (
    ModelParams,
    ParameterSpec,
    PhysicsSettings,
    SimulationConfig,
    SimulationMeta,
    param,
)
from pendulab.core.errors import (
    InvalidParameterError,
    NumericalDivergenceError,
    PendulabError,
    SimulationNotInitializedError,
    StateCapacityError,
)
from pendulab.core.history import ExportData, SimulationHistory, TimeSeries, TrailBuffer
from pendulab.core.signals import EnergyState, PhasePoint, PhysicsState, Vector3
from pendulab.core.system import Simulation

__all__ = [
    "DynamicalModel",
    "Simulation",
    "ModelParams",
    "ParameterSpec",
    "PhysicsSettings",
    "SimulationConfig",
    "SimulationMeta",
    "param",
    "PendulabError",
    "InvalidParameterError",
    "StateCapacityError",
    "SimulationNotInitializedError",
    "NumericalDivergenceError",
    "SimulationHistory",
    "TimeSeries",
    "ExportData",
    "TrailBuffer",
    "PhysicsState",
    "EnergyState",
    "PhasePoint",
    "Vector3",
]
