"""History in memoria (limitata) ed ExportData per l'export scientifico."""

import logging
from dataclasses import dataclass
from typing import Any, Dict, Generic, List, Optional, Sequence, Tuple, TypeVar

import numpy as np

from pendulab.core.config import SimulationMeta
from pendulab.core.signals import EnergyState, PhasePoint, PhysicsState, Vector3

logger = logging.getLogger(__name__)

DEFAULT_MAX_HISTORY = 10000
DEFAULT_TRIM_MARGIN = 1000


@dataclass(frozen=True)
class TimeSeries:
    """Serie temporali parallele, tutte della stessa lunghezza."""

    time: Tuple[float, ...]
    positions: Tuple[Tuple[Vector3, ...], ...]
    velocities: Tuple[Tuple[Vector3, ...], ...]
    energy: Tuple[EnergyState, ...]

    def __len__(self) -> int:
        return len(self.time)


@dataclass(frozen=True)
class ExportData:
    """
    Snapshot immutabile: metadati, parametri usati e history registrata.
    phase_space[i][k] è il campione k del corpo i (None se il modello non lo espone).
    """

    meta: SimulationMeta
    params: Dict[str, Any]
    time_series: TimeSeries
    phase_space: Optional[Tuple[Tuple[PhasePoint, ...], ...]] = None

    def __len__(self) -> int:
        return len(self.time_series)

    @property
    def num_bodies(self) -> int:
        if not self.time_series.positions:
            return 0
        return len(self.time_series.positions[0])

    def to_dict(self) -> Dict[str, Any]:
        """Documento annidato (pronto per JSON)."""
        ts = self.time_series
        doc: Dict[str, Any] = {
            "meta": self.meta.to_dict(),
            "params": dict(self.params),
            "time_series": {
                "time": list(ts.time),
                "positions": [[p.to_dict() for p in row] for row in ts.positions],
                "velocities": [[v.to_dict() for v in row] for row in ts.velocities],
                "energy": [e.to_dict() for e in ts.energy],
            },
        }
        if self.phase_space is not None:
            doc["phase_space"] = [[p.to_dict() for p in body] for body in self.phase_space]
        return doc

    def to_numpy(self) -> Dict[str, np.ndarray]:
        """
        Array numpy: time (T,), positions/velocities (T, bodies, 3),
        energy (T, 3) [kinetic, potential, total], phase (bodies, T, 2).
        """
        ts = self.time_series
        n = len(ts)
        bodies = self.num_bodies
        out = {
            "time": np.asarray(ts.time, dtype=float),
            "positions": np.array(
                [[p.as_tuple() for p in row] for row in ts.positions], dtype=float
            ).reshape(n, bodies, 3),
            "velocities": np.array(
                [[v.as_tuple() for v in row] for row in ts.velocities], dtype=float
            ).reshape(n, bodies, 3),
            "energy": np.array(
                [(e.kinetic, e.potential, e.total) for e in ts.energy], dtype=float
            ).reshape(n, 3),
        }
        if self.phase_space is not None:
            out["phase"] = np.array(
                [[(p.angle, p.angular_velocity) for p in body] for body in self.phase_space],
                dtype=float,
            ).reshape(len(self.phase_space), n, 2)
        return out


class SimulationHistory:
    """
    Buffer in memoria per tempo, posizioni, velocità, energia e fasi.

    Quando la lunghezza raggiunge max_length i buffer vengono tagliati
    agli ultimi (max_length - trim_margin) campioni prima di aggiungere:
    il taglio è raro e il costo per step resta O(1) ammortizzato.
    """

    def __init__(
        self,
        max_length: int = DEFAULT_MAX_HISTORY,
        trim_margin: int = DEFAULT_TRIM_MARGIN,
    ) -> None:
        """
        Args:
            max_length: numero massimo di campioni.
            trim_margin: campioni scartati in più a ogni taglio (0 < trim_margin < max_length).
        """
        if max_length < 2:
            raise ValueError(f"max_length must be >= 2, got {max_length}")
        if not 0 < trim_margin < max_length:
            raise ValueError(f"trim_margin must be in (0, {max_length}), got {trim_margin}")
        self.max_length = max_length
        self.trim_margin = trim_margin
        self.clear()

    @property
    def retained_length(self) -> int:
        return self.max_length - self.trim_margin

    def clear(self) -> None:
        """Svuota la history."""
        self._time: List[float] = []
        self._positions: List[Tuple[Vector3, ...]] = []
        self._velocities: List[Tuple[Vector3, ...]] = []
        self._energy: List[EnergyState] = []
        self._phase: List[Tuple[PhasePoint, ...]] = []

    def append(
        self,
        physics: PhysicsState,
        energy: EnergyState,
        phase: Optional[Sequence[PhasePoint]] = None,
    ) -> None:
        """Aggiunge un campione a tutti i buffer."""
        if len(self._time) >= self.max_length:
            self._trim()
        self._time.append(physics.time)
        self._positions.append(tuple(physics.positions))
        self._velocities.append(tuple(physics.velocities))
        self._energy.append(energy)
        if phase is not None:
            self._phase.append(tuple(phase))

    def _trim(self) -> None:
        keep = self.retained_length
        logger.debug("History full (%d samples), keeping newest %d", len(self._time), keep)
        self._time = self._time[-keep:]
        self._positions = self._positions[-keep:]
        self._velocities = self._velocities[-keep:]
        self._energy = self._energy[-keep:]
        self._phase = self._phase[-keep:]

    def __len__(self) -> int:
        return len(self._time)

    @property
    def time(self) -> np.ndarray:
        return np.array(self._time)

    def snapshot(self) -> Tuple[TimeSeries, Optional[Tuple[Tuple[PhasePoint, ...], ...]]]:
        """Copia dei buffer; la fase è trasposta per corpo."""
        series = TimeSeries(
            time=tuple(self._time),
            positions=tuple(self._positions),
            velocities=tuple(self._velocities),
            energy=tuple(self._energy),
        )
        phase = None
        if self._phase:
            phase = tuple(tuple(body) for body in zip(*self._phase))
        return series, phase


T = TypeVar("T")


class TrailBuffer(Generic[T]):
    """
    Buffer per scie in tempo reale (driver): limite rigido di lunghezza
    più eliminazione periodica dei campioni più vecchi di max_age secondi.
    """

    def __init__(
        self,
        max_length: int = 500,
        max_age: Optional[float] = 30.0,
        cleanup_interval: int = 60,
    ) -> None:
        if max_length < 1:
            raise ValueError(f"max_length must be >= 1, got {max_length}")
        self.max_length = max_length
        self.max_age = max_age
        self.cleanup_interval = max(1, cleanup_interval)
        self._items: List[Tuple[float, T]] = []
        self._appends = 0

    def append(self, time: float, item: T) -> None:
        self._items.append((time, item))
        self._appends += 1
        if self.max_age is not None and self._appends % self.cleanup_interval == 0:
            self.purge_older_than(time - self.max_age)
        if len(self._items) > self.max_length:
            self._items = self._items[-self.max_length:]

    def purge_older_than(self, cutoff: float) -> None:
        """Elimina i campioni con tempo < cutoff (i tempi sono crescenti)."""
        start = 0
        while start < len(self._items) and self._items[start][0] < cutoff:
            start += 1
        if start:
            self._items = self._items[start:]

    def clear(self) -> None:
        self._items = []
        self._appends = 0

    def items(self) -> List[T]:
        return [item for _, item in self._items]

    def times(self) -> List[float]:
        return [t for t, _ in self._items]

    def __len__(self) -> int:
        return len(self._items)
