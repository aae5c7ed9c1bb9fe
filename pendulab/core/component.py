"""Interfaccia base (capability) per i modelli dinamici."""

from abc import ABC, abstractmethod
from typing import Any, List, Mapping, Optional, Type, Union

import numpy as np

from pendulab.core.config import ModelParams, SimulationConfig
from pendulab.core.signals import EnergyState, PhasePoint, PhysicsState


class DynamicalModel(ABC):
    """
    Equazioni del moto di un sistema: stato iniziale, derivate,
    conversione in stato cartesiano, energia e (opzionale) spazio delle fasi.

    Il modello non possiede lo stato: riceve il vettore di stato come argomento.
    Il ciclo di vita (step, reset, history, export) è in core.system.Simulation.
    """

    config: SimulationConfig
    params_type: Type[ModelParams]
    has_phase_space: bool = False

    def __init__(self, params: Optional[Union[ModelParams, Mapping[str, Any]]] = None) -> None:
        self.params = self.params_type()
        self.configure(params)

    def configure(
        self,
        params: Optional[Union[ModelParams, Mapping[str, Any]]] = None,
        **overrides: Any,
    ) -> ModelParams:
        """
        Imposta i parametri (uniti ai default) e li valida.

        Raises:
            InvalidParameterError: parametri non validi.
        """
        if isinstance(params, self.params_type) and not overrides:
            new_params = params
        elif isinstance(params, ModelParams):
            new_params = self.params_type.from_mapping(params.to_dict(), **overrides)
        else:
            new_params = self.params_type.from_mapping(params, **overrides)
        self.params = new_params
        self._configured()
        return new_params

    def _configured(self) -> None:
        """Hook chiamato dopo configure() (es. per allocare buffer)."""

    @property
    @abstractmethod
    def state_size(self) -> int:
        """Lunghezza del vettore di stato (2 x numero di corpi)."""

    @abstractmethod
    def create_initial_state(self) -> np.ndarray:
        """Vettore di stato iniziale derivato dai parametri."""

    @abstractmethod
    def compute_derivatives(self, t: float, state: np.ndarray) -> np.ndarray:
        """
        d(state)/dt. Può restituire un buffer interno riutilizzato:
        il chiamante deve copiarlo prima della chiamata successiva.
        """

    @abstractmethod
    def state_to_physics(self, state: np.ndarray, t: float) -> PhysicsState:
        """Posizioni e velocità cartesiane di ogni massa."""

    @abstractmethod
    def energy(self, state: np.ndarray) -> EnergyState:
        """Energia calcolata dallo stato passato (mai in cache)."""

    def phase_space(self, state: np.ndarray, t: float) -> Optional[List[PhasePoint]]:
        """Un PhasePoint per coordinata angolare; None se non significativo."""
        return None
