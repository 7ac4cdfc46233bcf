"""
canvas.py — SVG Bar Renderer
==============================
Pure rendering function: Step → SVG string.

The renderer consumes:
  • step       – the current Step (array values, highlights, sorted regions)
  • config     – visual config (canvas size, colors, fonts, …)

And produces an SVG string ready to inject into the DOM.

Design decisions:
  - NO mutation.  render_canvas() is stateless — the caller passes in
    everything it needs and gets back a string.
  - Bar colour priority: swapping > comparing > highlighted > sorted >
    default.  The role colours come from the Step's own visual hints so a
    custom mapping shows up without touching this file.
  - Bar heights are scaled to the largest |value| in the step; negative
    values hang below a zero baseline.
  - SvgRenderer wraps render_canvas() behind the Renderer protocol and
    keeps the last frame for the HTTP layer to serve.
"""

from typing import Dict, Optional

from algorithms.step import Step


# ---------------------------------------------------------------------------
# Visual config: palette, dimensions, fonts
# ---------------------------------------------------------------------------
class CanvasConfig:
    # canvas
    width:  int = 900
    height: int = 420
    bg:     str = "#0d1117"
    padding: int = 24

    # bar colors (role → fill); comparing/swapping/sorted are overridden
    # by the step's visual hints when present
    bar_colors: Dict[str, str] = {
        "default":     "#30363d",
        "highlighted": "#06b6d4",   # teal
        "comparing":   "#3B82F6",
        "swapping":    "#EF4444",
        "sorted":      "#8B5CF6",
    }

    # bars
    bar_gap:           int = 6
    bar_radius:        int = 3
    min_bar_height:    int = 4
    value_label_color: str = "#e6edf3"
    value_label_size:  int = 13
    index_label_color: str = "#7d8590"
    index_label_size:  int = 11

    # caption (operation description)
    caption_color: str = "#e6edf3"
    caption_size:  int = 14


CONFIG = CanvasConfig()

_FONT = "'DM Sans', sans-serif"


# ---------------------------------------------------------------------------
# Main Render Function
# ---------------------------------------------------------------------------
def render_canvas(step: Optional[Step] = None, config: CanvasConfig = CONFIG) -> str:
    """
    Returns an SVG string.

    Args:
        step   : Current algorithm step (or None for an empty canvas).
        config : Visual config.
    """
    svg_parts = [
        f'<svg width="{config.width}" height="{config.height}" '
        f'viewBox="0 0 {config.width} {config.height}" '
        f'xmlns="http://www.w3.org/2000/svg" style="background: {config.bg};">',
        f'<rect width="{config.width}" height="{config.height}" fill="{config.bg}"/>',
    ]

    if step is not None and step.data:
        svg_parts.append(_render_caption(step, config))
        svg_parts.append(_render_bars(step, config))

    svg_parts.append("</svg>")
    return "\n".join(svg_parts)


# ---------------------------------------------------------------------------
# Bar Rendering
# ---------------------------------------------------------------------------
def bar_role(step: Step, index: int) -> str:
    """Which colour role the bar at `index` takes in this step."""
    state = step.array_state
    if state.swap_pair is not None and index in state.swap_pair:
        return "swapping"
    if state.comparison_pair is not None and index in state.comparison_pair:
        return "comparing"
    if index in state.highlighted_indices:
        return "highlighted"
    if any(r.start <= index <= r.end for r in state.sorted_regions):
        return "sorted"
    return "default"


def _render_bars(step: Step, config: CanvasConfig) -> str:
    values = step.data
    n = len(values)
    colors = dict(config.bar_colors)
    colors.update(step.visual_hints.color_map)

    top = config.padding + 30                      # room for the caption
    bottom = config.height - config.padding - 20   # room for index labels
    span = max(max(abs(v) for v in values), 1)
    has_negative = min(values) < 0
    baseline = (top + bottom) / 2 if has_negative else bottom
    usable = (baseline - top)

    slot = (config.width - 2 * config.padding) / n
    bar_w = max(slot - config.bar_gap, 2)

    parts = ['<g class="bars">']
    for i, value in enumerate(values):
        role = bar_role(step, i)
        fill = colors.get(role, colors["default"])
        h = max(abs(value) / span * usable, config.min_bar_height)
        x = config.padding + i * slot + config.bar_gap / 2
        y = baseline - h if value >= 0 else baseline
        label_y = y - 6 if value >= 0 else y + h + config.value_label_size
        cx = x + bar_w / 2

        parts.append(f'<g class="bar {role}" data-index="{i}">')
        parts.append(
            f'  <rect x="{x:.1f}" y="{y:.1f}" width="{bar_w:.1f}" height="{h:.1f}" '
            f'rx="{config.bar_radius}" fill="{fill}"/>'
        )
        parts.append(
            f'  <text x="{cx:.1f}" y="{label_y:.1f}" text-anchor="middle" '
            f'font-size="{config.value_label_size}" font-family="{_FONT}" '
            f'fill="{config.value_label_color}" font-weight="600">{value}</text>'
        )
        parts.append(
            f'  <text x="{cx:.1f}" y="{config.height - config.padding:.1f}" text-anchor="middle" '
            f'font-size="{config.index_label_size}" font-family="\'JetBrains Mono\', monospace" '
            f'fill="{config.index_label_color}">{i}</text>'
        )
        parts.append('</g>')
    parts.append('</g>')
    return "\n".join(parts)


def _render_caption(step: Step, config: CanvasConfig) -> str:
    text = _escape(step.operation.description)
    return (
        f'<text class="caption" x="{config.padding}" y="{config.padding + 8}" '
        f'font-size="{config.caption_size}" font-family="{_FONT}" '
        f'fill="{config.caption_color}">#{step.sequence_number} {text}</text>'
    )


def _escape(text: str) -> str:
    return (
        text.replace("&", "&amp;")
            .replace("<", "&lt;")
            .replace(">", "&gt;")
            .replace('"', "&quot;")
    )


# ---------------------------------------------------------------------------
# Renderer backend
# ---------------------------------------------------------------------------
class SvgRenderer:
    """
    The rich backend.  `surface` is any mutable mapping; the latest frame
    is also written to surface["frame"] so the caller can pick it up.
    """

    name = "svg"

    def __init__(self):
        self.frame:   str                  = ""
        self.config:  CanvasConfig         = CONFIG
        self.surface: Optional[dict]       = None
        self.frames_rendered: int          = 0

    def capability_supported(self) -> bool:
        return True

    def initialize(self, surface, config=None) -> bool:
        if surface is None:
            return False
        self.surface = surface
        if config is not None:
            self.config = config
        self.frame = render_canvas(None, self.config)
        self.surface["frame"] = self.frame
        return True

    def render_step(self, step: Step, config=None) -> None:
        self.frame = render_canvas(step, config or self.config)
        self.frames_rendered += 1
        if self.surface is not None:
            self.surface["frame"] = self.frame

    def dispose(self) -> None:
        self.surface = None
        self.frame = ""
