"""
renderer.py — Renderer Protocol & Backend Selection
=====================================================
The PlaybackController hands every displayed Step to exactly one
renderer and never asks which kind it is.  Choosing a backend (and
falling back when the preferred one is unavailable) happens here, before
the controller is built.

    renderer = select_renderer([SvgRenderer(), TextRenderer()], surface={})
    controller = PlaybackController(settings, scheduler, renderer=renderer)
"""

import logging
from typing import Any, List, Optional, Protocol, Sequence

from errors import StateConflictError
from algorithms.step import Step
from ui.canvas import bar_role

log = logging.getLogger(__name__)


class Renderer(Protocol):
    def initialize(self, surface: Any, config: Any = None) -> bool: ...
    def render_step(self, step: Step, config: Any = None) -> None: ...
    def capability_supported(self) -> bool: ...
    def dispose(self) -> None: ...


# ---------------------------------------------------------------------------
# Plain-text fallback
# ---------------------------------------------------------------------------
_MARKS = {
    "swapping":    "!",
    "comparing":   "?",
    "highlighted": "*",
    "sorted":      "=",
    "default":     " ",
}


def render_text(step: Step) -> str:
    """One line per value: index, mark, value and a bar of '#'."""
    values = step.data
    span = max(max((abs(v) for v in values), default=1), 1)
    lines = [f"#{step.sequence_number} [{step.operation.type.value}] {step.operation.description}"]
    for i, value in enumerate(values):
        mark = _MARKS[bar_role(step, i)]
        bar = "#" * max(1, round(abs(value) / span * 30))
        lines.append(f"{i:>3} {mark} {value:>6} {bar}")
    return "\n".join(lines)


class TextRenderer:
    """Software fallback: always available, draws into a list of frames."""

    name = "text"

    def __init__(self):
        self.frames:  List[str]      = []
        self.surface: Optional[Any]  = None

    def capability_supported(self) -> bool:
        return True

    def initialize(self, surface: Any, config: Any = None) -> bool:
        self.surface = surface
        self.frames = []
        return True

    def render_step(self, step: Step, config: Any = None) -> None:
        frame = render_text(step)
        self.frames.append(frame)
        if isinstance(self.surface, dict):
            self.surface["frame"] = frame

    @property
    def last_frame(self) -> str:
        return self.frames[-1] if self.frames else ""

    def dispose(self) -> None:
        self.frames = []
        self.surface = None


# ---------------------------------------------------------------------------
# Selection
# ---------------------------------------------------------------------------
def select_renderer(candidates: Sequence[Renderer], surface: Any, config: Any = None) -> Renderer:
    """Return the first candidate that is supported and initializes."""
    for renderer in candidates:
        name = getattr(renderer, "name", type(renderer).__name__)
        if not renderer.capability_supported():
            log.info("renderer %s not supported here, trying next", name)
            continue
        if renderer.initialize(surface, config):
            log.info("using renderer %s", name)
            return renderer
        log.warning("renderer %s failed to initialize", name)
    raise StateConflictError("No renderer could be initialized")


__all__ = ["Renderer", "TextRenderer", "render_text", "select_renderer"]
