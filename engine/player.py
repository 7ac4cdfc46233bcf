"""
player.py — Step Playback Controller
=====================================
The PlaybackController turns a fully generated, immutable list of Steps
into an interactive session: a cursor that can be moved by hand or
advanced on a timer, at a variable speed, optionally looping.

State machine:
    IDLE      →  play()                 →  PLAYING
    PAUSED    →  play()                 →  PLAYING
    PLAYING   →  pause()                →  PAUSED
    PLAYING   →  (last step reached)    →  COMPLETED
    COMPLETED →  play()  [loop only]    →  PLAYING  (from step 0)
    COMPLETED →  (loop restart delay)   →  IDLE → PLAYING
    any       →  stop()                 →  IDLE     (back to step 0)

Timing:
  At most ONE advance is ever pending.  Every path that schedules goes
  through _schedule(), which cancels the previous Timer first; pause,
  stop and speed changes go through _cancel().  A Timer that fires after
  being replaced is ignored because it is no longer `self._pending`.

Thread safety:
  This class is NOT thread-safe.  Drive it from a single thread (or an
  event loop) together with its scheduler.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Optional, Sequence, Tuple

from config import Settings
from errors import IndexOutOfRangeError, InvalidArgumentError, StateConflictError
from algorithms.step import Step
from engine.scheduler import Timer

log = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# States
# ---------------------------------------------------------------------------
class PlayerState(Enum):
    IDLE      = "idle"
    PLAYING   = "playing"
    PAUSED    = "paused"
    COMPLETED = "completed"


# ---------------------------------------------------------------------------
# Speed presets (multipliers)
# ---------------------------------------------------------------------------
SPEED_PRESETS = {
    "slow":   0.5,    # teaching mode
    "normal": 1.0,
    "fast":   2.0,    # demo mode
    "turbo":  5.0,
}


@dataclass
class Listeners:
    """Optional callbacks.  The UI hooks its re-render into on_step."""

    on_step:         Optional[Callable[[int, int, Step], None]] = None
    on_state_change: Optional[Callable[[PlayerState], None]]    = None
    on_complete:     Optional[Callable[[], None]]                = None


# ---------------------------------------------------------------------------
# PlaybackController
# ---------------------------------------------------------------------------
class PlaybackController:
    """
    Attributes:
        state         : Current PlayerState.
        steps         : The loaded, immutable Step list.
        current_index : Index into `steps` that is currently displayed.
        speed         : Multiplier in [settings.min_speed, settings.max_speed].
        loop          : Restart from step 0 after completing.
    """

    def __init__(
        self,
        settings: Settings,
        scheduler,
        renderer=None,
        render_config: Any = None,
        listeners: Optional[Listeners] = None,
    ):
        self._settings  = settings
        self._scheduler = scheduler
        self._renderer  = renderer
        self._render_config = render_config
        self.listeners  = listeners or Listeners()

        self.steps:         Tuple[Step, ...] = ()
        self.current_index: int              = 0
        self.state:         PlayerState      = PlayerState.IDLE
        self.speed:         float            = settings.default_speed
        self.loop:          bool             = settings.loop

        self._pending: Optional[Timer] = None

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------
    def load_steps(self, steps: Sequence[Step]) -> None:
        """Replace the step list, rewind to step 0 and show it."""
        if self.state is PlayerState.PLAYING:
            raise StateConflictError("Cannot load steps while playing")
        if not steps:
            raise InvalidArgumentError("Step list must not be empty")

        self._cancel()
        self.steps = tuple(steps)
        self.current_index = 0
        self._set_state(PlayerState.IDLE)
        self._render_current()
        log.info("loaded %d steps", len(self.steps))

        if self._settings.auto_play:
            self.play()

    def unload(self) -> None:
        """Drop the step list entirely (data or algorithm changed)."""
        self._cancel()
        self.steps = ()
        self.current_index = 0
        self._set_state(PlayerState.IDLE)

    def reset(self) -> None:
        """Back to step 0 in IDLE, keeping the steps."""
        self._cancel()
        self.current_index = 0
        self._set_state(PlayerState.IDLE)
        self._render_current()

    def restore(self, steps: Sequence[Step], index: int, state: PlayerState) -> None:
        """
        Put the controller into an exact previous position (time travel).
        A PLAYING state is restored as PAUSED: restoring never starts a timer.
        """
        if self.state is PlayerState.PLAYING:
            raise StateConflictError("Cannot restore while playing")
        steps = tuple(steps)
        if steps and not 0 <= index < len(steps):
            raise IndexOutOfRangeError(f"Step index out of range: {index}")

        self._cancel()
        self.steps = steps
        self.current_index = index if steps else 0
        if state is PlayerState.PLAYING:
            state = PlayerState.PAUSED
        elif state is PlayerState.COMPLETED and self.current_index != len(steps) - 1:
            state = PlayerState.PAUSED
        self._set_state(state if steps else PlayerState.IDLE)
        self._render_current()

    def dispose(self) -> None:
        self._cancel()
        if self._renderer is not None:
            self._renderer.dispose()
            self._renderer = None
        self.steps = ()
        self.current_index = 0
        self._set_state(PlayerState.IDLE)

    # ------------------------------------------------------------------
    # Play / Pause / Stop
    # ------------------------------------------------------------------
    def play(self) -> None:
        if self.state is PlayerState.PLAYING:
            return
        self._require_steps()
        if self.state is PlayerState.COMPLETED:
            if not self.loop:
                return
            self.current_index = 0
            self._render_current()

        self._set_state(PlayerState.PLAYING)
        self._schedule(self.delay_ms)

    def pause(self) -> None:
        if self.state is not PlayerState.PLAYING:
            return
        self._cancel()
        self._set_state(PlayerState.PAUSED)

    def toggle_play(self) -> None:
        if self.state is PlayerState.PLAYING:
            self.pause()
        else:
            self.play()

    def stop(self) -> None:
        self._cancel()
        self.current_index = 0
        self._set_state(PlayerState.IDLE)
        self._render_current()

    # ------------------------------------------------------------------
    # Navigation
    # ------------------------------------------------------------------
    def next_step(self) -> None:
        """One step forward; at the last step this completes instead."""
        self._require_navigable()
        if self.current_index < len(self.steps) - 1:
            self._goto(self.current_index + 1)
        else:
            self._complete()

    def previous_step(self) -> None:
        self._require_navigable()
        if self.current_index > 0:
            self._goto(self.current_index - 1)

    def jump_to_step(self, index: int) -> None:
        self._require_navigable()
        if isinstance(index, bool) or not isinstance(index, int):
            raise InvalidArgumentError(f"Step index must be an integer, got {index!r}")
        if not 0 <= index < len(self.steps):
            raise IndexOutOfRangeError(
                f"Step index {index} outside [0, {len(self.steps) - 1}]"
            )
        self._goto(index)

    # ------------------------------------------------------------------
    # Speed / loop
    # ------------------------------------------------------------------
    def set_speed(self, speed: float) -> None:
        lo, hi = self._settings.min_speed, self._settings.max_speed
        if not lo <= speed <= hi:
            raise InvalidArgumentError(f"Speed must be between {lo}x and {hi}x, got {speed}")
        self.speed = float(speed)
        if self.state is PlayerState.PLAYING:
            # replace the pending advance; the displayed step does not change
            self._schedule(self.delay_ms)
        log.debug("speed set to %.2fx", self.speed)

    def set_speed_preset(self, preset: str) -> None:
        if preset not in SPEED_PRESETS:
            raise InvalidArgumentError(f"Unknown speed preset: {preset}")
        self.set_speed(SPEED_PRESETS[preset])

    def set_loop(self, enabled: bool) -> None:
        self.loop = bool(enabled)
        if not self.loop and self.state is PlayerState.COMPLETED:
            self._cancel()

    # ------------------------------------------------------------------
    # Read-only accessors
    # ------------------------------------------------------------------
    @property
    def delay_ms(self) -> float:
        return self._settings.base_delay_ms / self.speed

    @property
    def current_step(self) -> Optional[Step]:
        if 0 <= self.current_index < len(self.steps):
            return self.steps[self.current_index]
        return None

    @property
    def total_steps(self) -> int:
        return len(self.steps)

    @property
    def has_pending_advance(self) -> bool:
        return self._pending is not None and self._pending.active

    @property
    def is_playing(self) -> bool:
        return self.state is PlayerState.PLAYING

    @property
    def is_completed(self) -> bool:
        return self.state is PlayerState.COMPLETED

    def step_info(self) -> dict:
        total = len(self.steps)
        return {
            "currentStep": self.current_index,
            "totalSteps":  total,
            "step":        self.current_step,
            "progress":    (self.current_index + 1) / total if total else 0.0,
        }

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------
    def _require_steps(self) -> None:
        if not self.steps:
            raise StateConflictError("No steps loaded")

    def _require_navigable(self) -> None:
        if self.state is PlayerState.PLAYING:
            raise StateConflictError("Cannot navigate while playing")
        self._require_steps()

    def _goto(self, index: int) -> None:
        self.current_index = index
        if self.state is PlayerState.COMPLETED and index != len(self.steps) - 1:
            self._cancel()
            self._set_state(PlayerState.PAUSED)
        self._render_current()

    def _advance(self) -> None:
        """Timer callback: one step forward while PLAYING."""
        self._pending = None
        if self.state is not PlayerState.PLAYING:
            return
        last = len(self.steps) - 1
        if self.current_index < last:
            self.current_index += 1
            self._render_current()
        if self.current_index >= last:
            self._complete()
        else:
            self._schedule(self.delay_ms)

    def _complete(self) -> None:
        self._cancel()
        self._set_state(PlayerState.COMPLETED)
        log.info("playback completed at step %d/%d", self.current_index + 1, len(self.steps))
        if self.listeners.on_complete:
            self.listeners.on_complete()
        if self.loop:
            self._schedule(self._settings.loop_restart_delay_ms, self._restart)

    def _restart(self) -> None:
        self._pending = None
        if self.state is not PlayerState.COMPLETED or not self.loop:
            return
        log.debug("looping back to step 0")
        self.reset()
        self.play()

    def _schedule(self, delay_ms: float, callback: Optional[Callable[[], None]] = None) -> None:
        self._cancel()
        target = callback or self._advance
        timer: Optional[Timer] = None

        def fire():
            # a replaced timer must never act
            if timer is self._pending:
                target()

        timer = self._scheduler.call_later(delay_ms, fire)
        self._pending = timer

    def _cancel(self) -> None:
        if self._pending is not None:
            self._pending.cancel()
            self._pending = None

    def _set_state(self, new_state: PlayerState) -> None:
        if self.state is not new_state:
            log.debug("state %s → %s", self.state.value, new_state.value)
            self.state = new_state
            if self.listeners.on_state_change:
                self.listeners.on_state_change(new_state)

    def _render_current(self) -> None:
        step = self.current_step
        if step is None:
            return
        if self._renderer is not None:
            self._renderer.render_step(step, self._render_config)
        if self.listeners.on_step:
            self.listeners.on_step(self.current_index, len(self.steps), step)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------
def estimate_playback_duration(step_count: int, speed: float = 1.0, base_delay_ms: int = 600) -> float:
    """Milliseconds an uninterrupted play-through would take."""
    return step_count * base_delay_ms / speed


def format_playback_time(ms: float) -> str:
    seconds = int(ms // 1000)
    minutes, rest = divmod(seconds, 60)
    if minutes:
        return f"{minutes}:{rest:02d}"
    return f"{rest}s"


__all__ = [
    "PlayerState",
    "PlaybackController",
    "Listeners",
    "SPEED_PRESETS",
    "estimate_playback_duration",
    "format_playback_time",
]
