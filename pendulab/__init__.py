"""
pendulab: fixed-timestep simulation of simple, double and N-segment pendulums.
"""

import logging

__version__ = "0.1.0"

from pendulab.core.component import DynamicalModel
from pendulab.core.history import ExportData
from pendulab.core.signals import EnergyState, PhasePoint, PhysicsState, Vector3
from pendulab.core.system import Simulation
from pendulab.simulation import DoublePendulum, NPendulum, SimplePendulum

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "__version__",
    "Simulation",
    "DynamicalModel",
    "SimplePendulum",
    "DoublePendulum",
    "NPendulum",
    "PhysicsState",
    "EnergyState",
    "PhasePoint",
    "Vector3",
    "ExportData",
]
