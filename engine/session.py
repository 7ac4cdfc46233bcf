"""
session.py — Sorting Session
=============================
The live application state behind one visualizer: which algorithm is
selected, the input data, the playback controller over the generated
steps, and the time-travel store that records all of it.

Every user-facing mutation goes through this object and is followed by
a snapshot, so the history reflects exactly what the user did.  Timer-
driven advances update `current_data` but are not snapshotted.

    session = SortingSession(settings, scheduler)
    session.set_data([5, 3, 1])
    session.start_sorting()           # generate → load → play
    session.pause()
    session.restore_snapshot(session.store.snapshots[0].id)
"""

import logging
from typing import Optional, Sequence

from config import Settings
from errors import InvalidInputError, StateConflictError
from algorithms import generate_steps, require_algorithm
from algorithms.step import Step
from engine.player import Listeners, PlaybackController, PlayerState, estimate_playback_duration
from engine.snapshots import CapturedState, Snapshot, SnapshotStore

log = logging.getLogger(__name__)


class SortingSession:
    """
    Attributes:
        settings           : The Settings this session was built with.
        selected_algorithm : Registry key of the chosen algorithm.
        original_data      : Input as the user entered it.
        current_data       : Array shown at the current step.
        controller         : PlaybackController over the generated steps.
        store              : SnapshotStore recording this session.
    """

    def __init__(self, settings: Settings, scheduler, renderer=None, render_config=None):
        self.settings = settings
        require_algorithm(settings.default_algorithm)

        self.selected_algorithm: str = settings.default_algorithm
        self.original_data: tuple    = tuple(settings.default_data)
        self.current_data:  tuple    = tuple(settings.default_data)

        self.controller = PlaybackController(
            settings,
            scheduler,
            renderer=renderer,
            render_config=render_config,
            listeners=Listeners(on_step=self._on_step),
        )
        self.store = SnapshotStore(
            settings.max_snapshots,
            capture=self.capture,
            apply=self.apply_captured,
        )

    # ------------------------------------------------------------------
    # Configuration
    # ------------------------------------------------------------------
    def set_data(self, data: Sequence[int]) -> None:
        self._reject_while_playing("change data")
        for v in data:
            if isinstance(v, bool) or not isinstance(v, int):
                raise InvalidInputError(f"Not an integer: {v!r}")
        values = tuple(data)
        if not values:
            raise InvalidInputError("Input data must not be empty")
        self.original_data = values
        self.reset_playback()
        self.store.save_snapshot("Set data", f"[{', '.join(map(str, values))}]")

    def select_algorithm(self, algo_key: str) -> None:
        self._reject_while_playing("change algorithm")
        require_algorithm(algo_key)
        self.selected_algorithm = algo_key
        self.reset_playback()
        self.store.save_snapshot("Select algorithm", algo_key)

    def reset_playback(self) -> None:
        self.controller.unload()
        self.current_data = self.original_data

    # ------------------------------------------------------------------
    # Playback
    # ------------------------------------------------------------------
    def start_sorting(self) -> None:
        """Generate the full step list for the current data, load it and play."""
        self._reject_while_playing("start a new run")
        steps = generate_steps(self.selected_algorithm, self.original_data)
        self.current_data = self.original_data
        self.controller.load_steps(steps)
        self.controller.play()
        self.store.save_snapshot("Start sorting", self.selected_algorithm)

    def play(self) -> None:
        before = self.controller.state
        self.controller.play()
        if self.controller.state is not before:
            self.store.save_snapshot("Play", f"from step {self.controller.current_index + 1}")

    def resume(self) -> None:
        if self.controller.state is PlayerState.PAUSED:
            self.play()

    def pause(self) -> None:
        if self.controller.state is PlayerState.PLAYING:
            self.controller.pause()
            self.store.save_snapshot("Pause", f"at step {self.controller.current_index + 1}")

    def stop(self) -> None:
        self.controller.stop()
        self.current_data = self.original_data
        self.store.save_snapshot("Stop", "reset to the initial state")

    def next_step(self) -> None:
        self.controller.next_step()
        self.store.save_snapshot("Next step", f"step {self.controller.current_index + 1}")

    def previous_step(self) -> None:
        self.controller.previous_step()
        self.store.save_snapshot("Previous step", f"step {self.controller.current_index + 1}")

    def jump_to_step(self, index: int) -> None:
        self.controller.jump_to_step(index)
        self.store.save_snapshot("Jump to step", f"step {index + 1}")

    def set_speed(self, speed: float) -> None:
        self.controller.set_speed(speed)
        self.store.save_snapshot("Change speed", f"{self.controller.speed:.1f}x")

    def set_loop(self, enabled: bool) -> None:
        self.controller.set_loop(enabled)
        self.store.save_snapshot("Loop", "on" if enabled else "off")

    # ------------------------------------------------------------------
    # Time travel
    # ------------------------------------------------------------------
    def restore_snapshot(self, snapshot_id: str) -> Snapshot:
        """Rejected while playing; pause first."""
        self._reject_while_playing("restore a snapshot")
        return self.store.restore_snapshot(snapshot_id)

    def capture(self) -> CapturedState:
        return CapturedState(
            selected_algorithm=self.selected_algorithm,
            original_data=self.original_data,
            current_data=self.current_data,
            current_index=self.controller.current_index,
            state=self.controller.state,
            steps=self.controller.steps,
        )

    def apply_captured(self, captured: CapturedState) -> None:
        require_algorithm(captured.selected_algorithm)
        self.controller.restore(captured.steps, captured.current_index, captured.state)
        self.selected_algorithm = captured.selected_algorithm
        self.original_data = captured.original_data
        # restore() re-renders and fires on_step; the captured array wins
        self.current_data = captured.current_data

    # ------------------------------------------------------------------
    # Read-only views
    # ------------------------------------------------------------------
    @property
    def current_step(self) -> Optional[Step]:
        return self.controller.current_step

    def state_dict(self) -> dict:
        ctl = self.controller
        step = ctl.current_step
        return {
            "selectedAlgorithm": self.selected_algorithm,
            "originalData":      list(self.original_data),
            "currentData":       list(self.current_data),
            "playerState":       ctl.state.value,
            "currentStep":       ctl.current_index,
            "totalSteps":        ctl.total_steps,
            "speed":             ctl.speed,
            "loop":              ctl.loop,
            "delayMs":           ctl.delay_ms,
            "estimatedPlaybackMs": estimate_playback_duration(
                ctl.total_steps, ctl.speed, self.settings.base_delay_ms
            ),
            "step":              step.to_dict() if step else None,
            "snapshotCount":     len(self.store),
            "currentSnapshot":   self.store.current_index,
        }

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------
    def _reject_while_playing(self, action: str) -> None:
        if self.controller.state is PlayerState.PLAYING:
            raise StateConflictError(f"Cannot {action} while playing")

    def _on_step(self, index: int, total: int, step: Step) -> None:
        self.current_data = step.data
        log.debug("step %d/%d: %s", index + 1, total, step.operation.description)


__all__ = ["SortingSession"]
