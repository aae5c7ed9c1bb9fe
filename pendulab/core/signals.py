"""Prodotti dati del core: stato fisico, energia, punto nello spazio delle fasi."""

from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple


@dataclass(frozen=True)
class Vector3:
    """Vettore cartesiano 3D (z = 0 per moto piano)."""

    x: float = 0.0
    y: float = 0.0
    z: float = 0.0

    def as_tuple(self) -> Tuple[float, float, float]:
        return (self.x, self.y, self.z)

    def to_dict(self) -> Dict[str, float]:
        return {"x": self.x, "y": self.y, "z": self.z}


@dataclass
class PhysicsState:
    """
    Stato fisico prodotto da ogni step: tempo, posizioni e velocità
    cartesiane (una per massa), accelerazioni opzionali.
    """

    time: float
    positions: List[Vector3]
    velocities: List[Vector3]
    accelerations: Optional[List[Vector3]] = None

    @property
    def num_bodies(self) -> int:
        return len(self.positions)


@dataclass(frozen=True)
class EnergyState:
    """Energia cinetica, potenziale e totale (stesse unità, J)."""

    kinetic: float
    potential: float
    total: float

    @classmethod
    def from_components(cls, kinetic: float, potential: float) -> "EnergyState":
        return cls(kinetic=kinetic, potential=potential, total=kinetic + potential)

    def to_dict(self) -> Dict[str, float]:
        return {"kinetic": self.kinetic, "potential": self.potential, "total": self.total}


@dataclass(frozen=True)
class PhasePoint:
    """Coppia (angolo, velocità angolare) campionata al tempo time."""

    angle: float
    angular_velocity: float
    time: float

    def to_dict(self) -> Dict[str, float]:
        return {
            "angle": self.angle,
            "angular_velocity": self.angular_velocity,
            "time": self.time,
        }
