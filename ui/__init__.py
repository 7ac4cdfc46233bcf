"""
ui/
---
Presentation layer.

    from ui import render_canvas, select_renderer
    from ui import playback_controls, algorithm_selector, …
"""

from ui.canvas import render_canvas, CanvasConfig, SvgRenderer
from ui.renderer import Renderer, TextRenderer, render_text, select_renderer

from ui.controls import (
    playback_controls,
    algorithm_selector,
    step_info_panel,
    timeline_panel,
    analytics_panel,
    comparison_panel,
    pseudocode_viewer,
)

__all__ = [
    "render_canvas",
    "CanvasConfig",
    "SvgRenderer",
    "Renderer",
    "TextRenderer",
    "render_text",
    "select_renderer",
    "playback_controls",
    "algorithm_selector",
    "step_info_panel",
    "timeline_panel",
    "analytics_panel",
    "comparison_panel",
    "pseudocode_viewer",
]
