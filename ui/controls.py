"""
controls.py — UI Control Panels
=================================
Every UI panel is a pure function that takes state and returns HTML.

Panels:
  • playback_controls   – play/pause/step/stop, speed slider, loop toggle
  • algorithm_selector  – dropdown + data input + run button
  • step_info_panel     – current operation, complexity label, progress
  • timeline_panel      – snapshot history with restore buttons
  • analytics_panel     – step / comparison / write counts of a run
  • comparison_panel    – side-by-side metrics of two runs
  • pseudocode_viewer   – the selected algorithm's pseudocode

Design:
  - All panels are stateless render functions.
  - State is passed in as kwargs.
  - Output is raw HTML strings (no templating engine).
  - The main app stitches them together.
"""

from typing import List, Optional, Sequence

from algorithms import AlgoInfo
from algorithms.step import Step
from engine import ComparisonResult, PlayerState, RunMetrics, SPEED_PRESETS
from engine.player import format_playback_time


def _escape(text: str) -> str:
    return str(text).replace("&", "&amp;").replace("<", "&lt;").replace(">", "&gt;")


# ---------------------------------------------------------------------------
# Playback Controls
# ---------------------------------------------------------------------------
def playback_controls(
    state: PlayerState = PlayerState.IDLE,
    current_step: int = 0,
    total_steps: int = 0,
    speed: float = 1.0,
    loop: bool = False,
    min_speed: float = 0.1,
    max_speed: float = 5.0,
) -> str:
    is_playing = state is PlayerState.PLAYING
    play_icon = "⏸" if is_playing else "▶"
    play_label = "Pause" if is_playing else "Play"
    nav_disabled = "disabled" if is_playing or not total_steps else ""
    shown = current_step + 1 if total_steps else 0

    presets = "".join(
        f'<button class="speed-preset" data-speed="{value}">{name.capitalize()}</button>'
        for name, value in SPEED_PRESETS.items()
    )

    return f"""
    <div class="panel playback-controls">
      <h3>⏯ Playback</h3>
      <div class="button-row">
        <button id="btn-stop" title="Stop and rewind">⏹</button>
        <button id="btn-prev" title="Previous step" {nav_disabled}>◀</button>
        <button id="btn-play" title="{play_label}">{play_icon}</button>
        <button id="btn-next" title="Next step" {nav_disabled}>▶</button>
      </div>
      <div class="step-info">
        Step <span id="current-step">{shown}</span> / <span id="total-steps">{total_steps}</span>
        <span class="state-badge state-{state.value}">{state.value.upper()}</span>
      </div>
      <div class="speed-control">
        <label>Speed: <span id="speed-value">{speed:.1f}x</span></label>
        <input type="range" id="speed-slider" min="{min_speed}" max="{max_speed}" step="0.1" value="{speed}">
        <div class="speed-presets">{presets}</div>
      </div>
      <label class="loop-toggle">
        <input type="checkbox" id="loop-toggle" {'checked' if loop else ''}> Loop
      </label>
    </div>
    """


# ---------------------------------------------------------------------------
# Algorithm Selector
# ---------------------------------------------------------------------------
def algorithm_selector(
    algorithms: List[AlgoInfo],
    selected_key: str = "bubble_sort",
    data: Sequence[int] = (),
    max_length: int = 20,
) -> str:
    options = []
    for algo in algorithms:
        sel = 'selected' if algo.key == selected_key else ''
        stable = "stable" if algo.is_stable else "not stable"
        options.append(
            f'<option value="{algo.key}" {sel}>{algo.label} — {algo.complexity.average_case}, {stable}</option>'
        )

    return f"""
    <div class="panel algorithm-selector">
      <h3>🧠 Algorithm</h3>
      <select id="algo-selector">
        {''.join(options)}
      </select>
      <label>Values (up to {max_length}):
        <input type="text" id="data-input" value="{', '.join(str(v) for v in data)}">
      </label>
      <button id="btn-set-data" class="btn-secondary">Set Data</button>
      <button id="btn-run" class="btn-primary">▶ Start Sorting</button>
    </div>
    """


# ---------------------------------------------------------------------------
# Step Info
# ---------------------------------------------------------------------------
def step_info_panel(step: Optional[Step] = None, current_step: int = 0, total_steps: int = 0) -> str:
    if step is None:
        return """
        <div class="panel step-info-panel">
          <h3>🔍 Current Step</h3>
          <p class="placeholder">Start sorting to see each operation.</p>
        </div>
        """

    op = step.operation
    progress = (current_step + 1) / total_steps * 100 if total_steps else 0.0
    return f"""
    <div class="panel step-info-panel">
      <h3>🔍 Step {step.sequence_number}</h3>
      <table>
        <tr><td>Operation:</td><td><strong class="op-{op.type.value}">{op.type.value}</strong></td></tr>
        <tr><td>Description:</td><td>{_escape(op.description)}</td></tr>
        <tr><td>Time:</td><td><code>{op.complexity.time}</code></td></tr>
        <tr><td>Space:</td><td><code>{op.complexity.space}</code></td></tr>
        <tr><td>Array:</td><td><code>[{', '.join(str(v) for v in step.data)}]</code></td></tr>
      </table>
      <div class="progress"><div class="progress-bar" style="width: {progress:.1f}%"></div></div>
    </div>
    """


# ---------------------------------------------------------------------------
# Timeline (time travel)
# ---------------------------------------------------------------------------
def timeline_panel(summaries: List[dict], current_index: int = -1, can_restore: bool = True) -> str:
    if not summaries:
        return """
        <div class="panel timeline-panel">
          <h3>🕰 Timeline</h3>
          <p class="placeholder">No snapshots yet.</p>
          <ul class="snapshot-list"></ul>
        </div>
        """

    rows = []
    # newest first
    for i in range(len(summaries) - 1, -1, -1):
        item = summaries[i]
        current = 'current' if i == current_index else ''
        disabled = '' if can_restore else 'disabled'
        rows.append(
            f'<li class="snapshot {current}" data-id="{item["id"]}">'
            f'<span class="snapshot-desc">{_escape(item["description"])}</span> '
            f'<span class="snapshot-step">step {item["step"] + 1}</span> '
            f'<button class="btn-restore" data-id="{item["id"]}" {disabled}>Restore</button>'
            f'</li>'
        )

    return f"""
    <div class="panel timeline-panel">
      <h3>🕰 Timeline ({len(summaries)})</h3>
      <ul class="snapshot-list">
        {''.join(rows)}
      </ul>
      <div class="button-row">
        <button id="btn-export" class="btn-secondary">Export</button>
        <button id="btn-import" class="btn-secondary">Import</button>
        <button id="btn-clear-history" class="btn-secondary">Clear</button>
      </div>
    </div>
    """


# ---------------------------------------------------------------------------
# Analytics Panel
# ---------------------------------------------------------------------------
def analytics_panel(metrics: Optional[RunMetrics] = None) -> str:
    if not metrics:
        return """
        <div class="panel analytics-panel">
          <h3>📊 Analytics</h3>
          <p class="placeholder">Run an algorithm to see metrics.</p>
        </div>
        """

    return f"""
    <div class="panel analytics-panel">
      <h3>📊 Analytics — {metrics.algo_label}</h3>
      <table>
        <tr><td>Input Size:</td><td><strong>{metrics.input_size}</strong></td></tr>
        <tr><td>Total Steps:</td><td><strong>{metrics.total_steps}</strong></td></tr>
        <tr><td>Comparisons:</td><td><strong>{metrics.comparisons}</strong></td></tr>
        <tr><td>Swaps:</td><td><strong>{metrics.swaps}</strong></td></tr>
        <tr><td>Inserts:</td><td><strong>{metrics.inserts}</strong></td></tr>
        <tr><td>Playback (1x):</td><td><strong>{format_playback_time(metrics.estimated_playback_ms)}</strong></td></tr>
        <tr><td>Stable:</td><td><strong>{'yes' if metrics.is_stable else 'no'}</strong></td></tr>
      </table>
    </div>
    """


# ---------------------------------------------------------------------------
# Comparison Panel (side-by-side)
# ---------------------------------------------------------------------------
def comparison_panel(comp: Optional[ComparisonResult] = None) -> str:
    if not comp:
        return """
        <div class="panel comparison-panel">
          <h3>⚖️ Comparison Mode</h3>
          <p class="placeholder">Run two algorithms on the same data to compare.</p>
        </div>
        """

    left = comp.left
    right = comp.right

    def winner_badge(winner_label):
        if winner_label == "tie":
            return "🟰 Tie"
        return f"👑 {winner_label}"

    def row(label, l_val, r_val, winner):
        return f"<tr><td>{label}</td><td>{l_val}</td><td>{r_val}</td><td>{winner_badge(winner)}</td></tr>"

    return f"""
    <div class="panel comparison-panel">
      <h3>⚖️ Comparison: {left.algo_label} vs {right.algo_label}</h3>
      <table class="comparison-table">
        <thead>
          <tr><th>Metric</th><th>{left.algo_label}</th><th>{right.algo_label}</th><th>Winner</th></tr>
        </thead>
        <tbody>
          {row("Steps", left.total_steps, right.total_steps, comp.winner_steps)}
          {row("Comparisons", left.comparisons, right.comparisons, comp.winner_comparisons)}
          {row("Writes", left.writes, right.writes, comp.winner_writes)}
        </tbody>
      </table>
    </div>
    """


# ---------------------------------------------------------------------------
# Pseudocode Viewer
# ---------------------------------------------------------------------------
def pseudocode_viewer(pseudocode_lines: List[str], algo_label: str = "") -> str:
    if not pseudocode_lines:
        return """
        <div class="code-block">
          <div class="placeholder">Select an algorithm to view pseudocode</div>
        </div>
        """

    lines_html = [
        f'<div class="code-line" data-line="{i}">{_escape(line)}</div>'
        for i, line in enumerate(pseudocode_lines)
    ]
    return f"""
    <div class="code-block" title="{algo_label}">
      {''.join(lines_html)}
    </div>
    """
