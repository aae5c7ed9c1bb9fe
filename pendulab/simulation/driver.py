"""
Reference driver: turns variable frame deltas into whole fixed-timestep steps.

The frame delta is capped (max_frame_delta) before scaling by the playback
speed, so a stall never triggers a runaway catch-up loop. After each frame the
state is checked for NaN/Inf; on divergence playback halts and on_divergence
is called.
"""

import logging
import math
from dataclasses import dataclass
from typing import Any, Callable, List, Mapping, Optional, Union

from pendulab.core.component import DynamicalModel
from pendulab.core.config import ModelParams
from pendulab.core.history import ExportData, TrailBuffer
from pendulab.core.signals import EnergyState, PhasePoint, PhysicsState, Vector3
from pendulab.core.system import Simulation
from pendulab.physics.kinematics import clamp

logger = logging.getLogger(__name__)

MIN_SPEED = 0.1
MAX_SPEED = 10.0


@dataclass
class FrameResult:
    """Output of one driver tick: state after the last step and how many steps ran."""

    physics: PhysicsState
    energy: EnergyState
    phase: Optional[List[PhasePoint]]
    steps: int


class FixedStepDriver:
    """
    Owns a Simulation and advances it from an external render/update loop.
    Trails (per-body positions and phase points) are kept in TrailBuffers and
    cleared whenever the simulation is reset.
    """

    def __init__(
        self,
        model: DynamicalModel,
        params: Optional[Union[ModelParams, Mapping[str, Any]]] = None,
        speed: float = 1.0,
        max_frame_delta: float = 0.05,
        record_trails: bool = True,
        trail_length: int = 500,
        trail_max_age: Optional[float] = 30.0,
        on_divergence: Optional[Callable[[Simulation], None]] = None,
    ) -> None:
        """
        Args:
            model: equations of motion to drive.
            params: initial parameters (merged over the model defaults).
            speed: playback speed, clamped to [0.1, 10].
            max_frame_delta: cap on the wall-clock delta of a single frame (s).
            record_trails: keep per-body position and phase trails.
            trail_length: hard cap on each trail.
            trail_max_age: trail samples older than this (simulated s) are purged.
            on_divergence: called with the simulation when its state stops being finite.
        """
        if max_frame_delta <= 0:
            raise ValueError(f"max_frame_delta must be > 0, got {max_frame_delta}")
        self.simulation = Simulation(model, on_reset=self._clear_trails)
        self.max_frame_delta = max_frame_delta
        self.speed = clamp(speed, MIN_SPEED, MAX_SPEED)
        self.record_trails = record_trails
        self.trail_length = trail_length
        self.trail_max_age = trail_max_age
        self.on_divergence = on_divergence
        self.playing = False
        self.diverged = False
        self.trails: List[TrailBuffer[Vector3]] = []
        self.phase_trails: List[TrailBuffer[PhasePoint]] = []
        self.simulation.initialize(params)

    def play(self) -> None:
        self.playing = True

    def pause(self) -> None:
        self.playing = False

    def set_speed(self, speed: float) -> None:
        self.speed = clamp(speed, MIN_SPEED, MAX_SPEED)

    def steps_for(self, frame_delta: float) -> int:
        """Number of fixed steps covering frame_delta (after cap and speed)."""
        dt = min(frame_delta, self.max_frame_delta) * self.speed
        if dt <= 0:
            return 0
        fixed = self.simulation.fixed_timestep
        if fixed is None:
            return 1
        # tolerance for deltas that are exact multiples of the fixed step
        return max(1, math.ceil(dt / fixed - 1e-9))

    def advance(self, frame_delta: float) -> Optional[FrameResult]:
        """
        Run the steps for one frame.

        Returns:
            FrameResult, or None when paused, diverged or frame_delta <= 0.
        """
        if not self.playing or self.diverged:
            return None
        n_steps = self.steps_for(frame_delta)
        if n_steps == 0:
            return None
        dt = min(frame_delta, self.max_frame_delta) * self.speed
        physics = None
        for _ in range(n_steps):
            physics = self.simulation.step(dt)

        if not self.simulation.is_finite():
            self._halt()
            return None

        energy = self.simulation.get_energy()
        phase = self.simulation.get_phase_space()
        if self.record_trails:
            self._record_trails(physics, phase)
        return FrameResult(physics=physics, energy=energy, phase=phase, steps=n_steps)

    def current_frame(self) -> FrameResult:
        """Frame for the current state without stepping (e.g. right after initialization)."""
        return FrameResult(
            physics=self.simulation.current_physics(),
            energy=self.simulation.get_energy(),
            phase=self.simulation.get_phase_space(),
            steps=0,
        )

    def reset(self) -> None:
        """Stop playback and restore the initial condition."""
        self.playing = False
        self.diverged = False
        self.simulation.reset()

    def update_params(
        self,
        params: Optional[Union[ModelParams, Mapping[str, Any]]] = None,
        **overrides: Any,
    ) -> None:
        """
        Re-initialize with new parameters (between frames, never during one).
        Values not given keep their current setting.
        """
        if isinstance(params, ModelParams):
            merged = params.to_dict()
        else:
            merged = self.simulation.params.to_dict()
            merged.update(params or {})
        self.simulation.initialize(merged, **overrides)
        self.diverged = False
        self._clear_trails()

    def record(self, num_steps: int, dt: Optional[float] = None) -> ExportData:
        """
        Export run: enable recording (clears history), run num_steps steps and
        export. Recording is switched off again if it was off before.
        """
        sim = self.simulation
        was_recording = sim.recording
        sim.enable_recording(True)
        try:
            for _ in range(num_steps):
                sim.step(dt)
            return sim.export()
        finally:
            if not was_recording:
                sim.enable_recording(False)

    def _halt(self) -> None:
        sim = self.simulation
        self.playing = False
        self.diverged = True
        logger.warning("%s diverged at t=%.6f, playback halted", sim.config.meta.id, sim.time)
        if self.on_divergence is not None:
            self.on_divergence(sim)

    def _record_trails(self, physics: PhysicsState, phase: Optional[List[PhasePoint]]) -> None:
        while len(self.trails) < len(physics.positions):
            self.trails.append(TrailBuffer(self.trail_length, self.trail_max_age))
        for trail, pos in zip(self.trails, physics.positions):
            trail.append(physics.time, pos)
        if phase:
            while len(self.phase_trails) < len(phase):
                self.phase_trails.append(TrailBuffer(self.trail_length, self.trail_max_age))
            for trail, point in zip(self.phase_trails, phase):
                trail.append(point.time, point)

    def _clear_trails(self) -> None:
        self.trails = []
        self.phase_trails = []
