"""Simulation lifecycle: fixed-timestep stepping, reset, recording and export."""

import logging
from typing import Any, Callable, Dict, List, Mapping, Optional, Union

import numpy as np

from pendulab.core.component import DynamicalModel
from pendulab.core.config import ModelParams, SimulationConfig
from pendulab.core.errors import NumericalDivergenceError, SimulationNotInitializedError
from pendulab.core.history import (
    DEFAULT_MAX_HISTORY,
    DEFAULT_TRIM_MARGIN,
    ExportData,
    SimulationHistory,
)
from pendulab.core.signals import EnergyState, PhasePoint, PhysicsState
from pendulab.physics.integrators import MAX_STATE_SIZE, get_integrator

logger = logging.getLogger(__name__)


class Simulation:
    """
    Shared lifecycle around a DynamicalModel.

    The model supplies the equations of motion; the simulation owns the state
    vector, the time, the integrator (with its scratch workspace) and the
    history. Lifecycle: initialize -> step* -> reset -> step* ...
    """

    def __init__(
        self,
        model: DynamicalModel,
        integrator: Optional[Any] = None,
        max_history_length: int = DEFAULT_MAX_HISTORY,
        history_trim_margin: int = DEFAULT_TRIM_MARGIN,
        on_reset: Optional[Callable[[], None]] = None,
    ) -> None:
        """
        Args:
            model: equations of motion.
            integrator: object with step(state, t, dt, derivative_fn).
                Default: the model's configured integration method.
            max_history_length: history capacity while recording.
            history_trim_margin: samples dropped beyond the capacity at each trim.
            on_reset: called after every reset() (e.g. a driver clearing its trails).
        """
        self.model = model
        self.integrator = integrator or get_integrator(
            model.config.physics.integration_method, MAX_STATE_SIZE
        )
        self.history = SimulationHistory(max_history_length, history_trim_margin)
        self._on_reset = on_reset
        self._time: float = 0.0
        self._state: Optional[np.ndarray] = None
        self._initial_state: Optional[np.ndarray] = None
        self._recording = False

    @property
    def config(self) -> SimulationConfig:
        return self.model.config

    @property
    def fixed_timestep(self) -> Optional[float]:
        return self.model.config.physics.fixed_timestep

    def initialize(
        self,
        params: Optional[Union[ModelParams, Mapping[str, Any]]] = None,
        **overrides: Any,
    ) -> None:
        """
        Configure the model, rebuild the initial state, clear history.
        Can be called again with new parameters.

        A mapping is merged over the model defaults. Without params the
        model keeps its current parameters and overrides are applied on top.

        Raises:
            InvalidParameterError: params rejected by the model.
        """
        if params is None:
            params = self.model.params
        self.model.configure(params, **overrides)
        self._time = 0.0
        self._state = np.array(self.model.create_initial_state(), dtype=float)
        self._initial_state = self._state.copy()
        self.history.clear()
        logger.info(
            "Initialized %s (state size %d, %s, dt=%s)",
            self.config.meta.id,
            self._state.size,
            self.config.physics.integration_method,
            self.fixed_timestep,
        )

    @property
    def initialized(self) -> bool:
        return self._state is not None

    def _require_state(self) -> np.ndarray:
        if self._state is None:
            raise SimulationNotInitializedError(
                "Simulation not initialized: call initialize() before using it."
            )
        return self._state

    def step(self, dt: Optional[float] = None) -> PhysicsState:
        """
        Advance by one timestep. The model's fixed timestep wins over dt when configured.

        Args:
            dt: caller timestep, used only when the model has no fixed timestep.

        Returns:
            PhysicsState after the step.
        """
        state = self._require_state()
        actual_dt = self.fixed_timestep or dt
        if actual_dt is None:
            raise ValueError(f"{self.config.meta.id} has no fixed timestep: pass dt to step().")
        self._state = self.integrator.step(state, self._time, actual_dt, self.model.compute_derivatives)
        self._time += actual_dt
        physics = self.model.state_to_physics(self._state, self._time)
        if self._recording:
            self.history.append(physics, self.get_energy(), self.get_phase_space())
        return physics

    def current_physics(self) -> PhysicsState:
        """PhysicsState of the current state, without stepping."""
        return self.model.state_to_physics(self._require_state(), self._time)

    def get_energy(self) -> EnergyState:
        """Energy of the current state, computed fresh."""
        return self.model.energy(self._require_state())

    def get_phase_space(self) -> Optional[List[PhasePoint]]:
        """Phase-space points of the current state (None if the model has none)."""
        return self.model.phase_space(self._require_state(), self._time)

    def reset(self) -> None:
        """Restore the state captured at the last initialize(), time 0, empty history."""
        if self._initial_state is None:
            raise SimulationNotInitializedError("Nothing to reset: call initialize() first.")
        self._time = 0.0
        self._state = self._initial_state.copy()
        self.history.clear()
        if self._on_reset is not None:
            self._on_reset()

    def enable_recording(self, enabled: bool) -> None:
        """
        Toggle history recording (off by default to bound memory during playback).
        Enabling clears previous history.
        """
        self._recording = bool(enabled)
        if self._recording:
            self.history.clear()
        logger.debug("Recording %s for %s", "enabled" if enabled else "disabled", self.config.meta.id)

    @property
    def recording(self) -> bool:
        return self._recording

    def export(self) -> ExportData:
        """Snapshot of metadata, parameters and recorded history (no shared buffers)."""
        series, phase = self.history.snapshot()
        return ExportData(
            meta=self.config.meta,
            params=self.model.params.to_dict(),
            time_series=series,
            phase_space=phase,
        )

    def is_finite(self) -> bool:
        """False when the state vector holds NaN or Inf."""
        return bool(np.all(np.isfinite(self._require_state())))

    def check_finite(self) -> None:
        """
        Raises:
            NumericalDivergenceError: state not finite.
        """
        if not self.is_finite():
            raise NumericalDivergenceError(
                f"{self.config.meta.id} diverged at t={self._time:.6f}: state {self._state.tolist()}"
            )

    @property
    def time(self) -> float:
        return self._time

    @property
    def state(self) -> Optional[np.ndarray]:
        """Copy of the current state vector."""
        return self._state.copy() if self._state is not None else None

    @property
    def params(self) -> ModelParams:
        return self.model.params

    def state_dict(self) -> Dict[str, Any]:
        return {
            "time": self._time,
            "state": self.state,
            "initial_state": self._initial_state.copy() if self._initial_state is not None else None,
            "params": self.model.params.to_dict(),
            "recording": self._recording,
            "history_length": len(self.history),
        }
