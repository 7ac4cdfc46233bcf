"""
main.py — Sorting Algorithm Visualizer Flask App
==================================================
The web server that powers the visualizer.

Routes:
  GET  /                        – main UI
  GET  /api/state               – current session state (polled while playing)
  GET  /api/algorithms          – registry cards
  POST /api/data                – set the input values
  POST /api/algorithm           – select the algorithm
  POST /api/run                 – generate steps and start playing
  POST /api/play                – play / resume
  POST /api/pause               – pause
  POST /api/stop                – stop and rewind
  POST /api/step/next           – one step forward
  POST /api/step/prev           – one step back
  POST /api/step/goto           – jump to step N
  POST /api/speed               – set speed (value or preset)
  POST /api/loop                – toggle looping
  GET  /api/timeline            – snapshot history
  POST /api/timeline/restore    – time travel to a snapshot
  GET  /api/timeline/export     – history bundle
  POST /api/timeline/import     – replace history from a bundle
  POST /api/timeline/clear      – drop the history
  POST /api/compare             – run two algorithms on the same data

State management:
  One SortingSession per app, kept in app.extensions.  Timers live in
  the session's scheduler; with the default MonotonicScheduler every
  request first ticks it, so a playing session advances as the page
  polls /api/state.  Run single-threaded (threaded=False): the session
  is not thread-safe.
"""

import logging
import re
from typing import Any, List, Mapping, Optional

from flask import Blueprint, Flask, current_app, jsonify, render_template_string, request

from config import Settings, configure_logging
from errors import InvalidArgumentError, InvalidInputError, VisualizerError
from algorithms import list_algorithms, require_algorithm
from engine import MonotonicScheduler, Recorder, SortingSession, SPEED_PRESETS, compare
from ui import (
    SvgRenderer,
    TextRenderer,
    algorithm_selector,
    analytics_panel,
    comparison_panel,
    playback_controls,
    pseudocode_viewer,
    render_canvas,
    select_renderer,
    step_info_panel,
    timeline_panel,
)

log = logging.getLogger(__name__)

EXTENSION_KEY = "sortviz"

bp = Blueprint("visualizer", __name__)


# ---------------------------------------------------------------------------
# Input parsing
# ---------------------------------------------------------------------------
_SEPARATORS = re.compile(r"[,\s]+")


def parse_values(text: str, max_length: int = 20) -> List[int]:
    """'5, 3 1' → [5, 3, 1].  Empty, non-integer or too long input is rejected."""
    tokens = [t for t in _SEPARATORS.split(text.strip()) if t]
    values = []
    for token in tokens:
        try:
            values.append(int(token))
        except ValueError:
            raise InvalidInputError(f"Not an integer: {token!r}") from None
    return check_values(values, max_length)


def check_values(values: Any, max_length: int = 20) -> List[int]:
    if not isinstance(values, list):
        raise InvalidInputError("Values must be a list of integers")
    for v in values:
        if isinstance(v, bool) or not isinstance(v, int):
            raise InvalidInputError(f"Not an integer: {v!r}")
    if not values:
        raise InvalidInputError("Enter at least one number")
    if len(values) > max_length:
        raise InvalidInputError(f"At most {max_length} numbers are allowed, got {len(values)}")
    return values


# ---------------------------------------------------------------------------
# Request helpers
# ---------------------------------------------------------------------------
def _session() -> SortingSession:
    return current_app.extensions[EXTENSION_KEY]["session"]


def _settings() -> Settings:
    return current_app.extensions[EXTENSION_KEY]["settings"]


def _body() -> Mapping[str, Any]:
    body = request.get_json(silent=True)
    return body if isinstance(body, Mapping) else {}


def _arg(body: Mapping[str, Any], key: str, convert):
    if key not in body:
        raise InvalidArgumentError(f"Missing field: {key}")
    value = body[key]
    if isinstance(value, bool) and convert is not bool:
        raise InvalidArgumentError(f"Invalid {key}: {value!r}")
    try:
        return convert(value)
    except (TypeError, ValueError):
        raise InvalidArgumentError(f"Invalid {key}: {value!r}") from None


def _values_from(body: Mapping[str, Any]) -> List[int]:
    limit = _settings().max_input_length
    if "values" in body:
        return check_values(body["values"], limit)
    if "text" in body:
        return parse_values(str(body["text"]), limit)
    raise InvalidArgumentError("Send either 'values' or 'text'")


def _frame() -> str:
    ext = current_app.extensions[EXTENSION_KEY]
    if _session().controller.total_steps and ext["surface"].get("frame"):
        return ext["surface"]["frame"]
    return render_canvas(None)


def _state_response(**extra):
    session = _session()
    payload = session.state_dict()
    payload["svg"] = _frame()
    payload.update(extra)
    return jsonify(payload)


# ---------------------------------------------------------------------------
# Main UI Route
# ---------------------------------------------------------------------------
@bp.route("/")
def index():
    session = _session()
    settings = _settings()
    ctl = session.controller
    algo_info = require_algorithm(session.selected_algorithm)

    html = render_template_string(INDEX_TEMPLATE,
        svg=_frame(),
        playback=playback_controls(
            state=ctl.state,
            current_step=ctl.current_index,
            total_steps=ctl.total_steps,
            speed=ctl.speed,
            loop=ctl.loop,
            min_speed=settings.min_speed,
            max_speed=settings.max_speed,
        ),
        algo_selector=algorithm_selector(
            algorithms=list_algorithms(),
            selected_key=session.selected_algorithm,
            data=session.original_data,
            max_length=settings.max_input_length,
        ),
        step_info=step_info_panel(session.current_step, ctl.current_index, ctl.total_steps),
        timeline=timeline_panel(
            session.store.summary(), session.store.current_index, session.store.can_time_travel
        ),
        analytics=analytics_panel(),
        comparison=comparison_panel(),
        pseudocode=pseudocode_viewer(algo_info.pseudocode, algo_info.label),
    )
    return html


# ---------------------------------------------------------------------------
# API: State & configuration
# ---------------------------------------------------------------------------
@bp.route("/api/state")
def api_state():
    return _state_response()


@bp.route("/api/algorithms")
def api_algorithms():
    return jsonify({"algorithms": [a.to_dict() for a in list_algorithms()]})


@bp.route("/api/data", methods=["POST"])
def api_data():
    values = _values_from(_body())
    _session().set_data(values)
    return _state_response()


@bp.route("/api/algorithm", methods=["POST"])
def api_algorithm():
    key = _arg(_body(), "algo_key", str)
    _session().select_algorithm(key)
    info = require_algorithm(key)
    return _state_response(pseudocode=pseudocode_viewer(info.pseudocode, info.label))


# ---------------------------------------------------------------------------
# API: Playback
# ---------------------------------------------------------------------------
@bp.route("/api/run", methods=["POST"])
def api_run():
    session = _session()
    body = _body()
    if "values" in body or "text" in body:
        session.set_data(_values_from(body))
    session.start_sorting()
    return _state_response()


@bp.route("/api/play", methods=["POST"])
def api_play():
    _session().play()
    return _state_response()


@bp.route("/api/pause", methods=["POST"])
def api_pause():
    _session().pause()
    return _state_response()


@bp.route("/api/stop", methods=["POST"])
def api_stop():
    _session().stop()
    return _state_response()


@bp.route("/api/step/next", methods=["POST"])
def api_step_next():
    _session().next_step()
    return _state_response()


@bp.route("/api/step/prev", methods=["POST"])
def api_step_prev():
    _session().previous_step()
    return _state_response()


@bp.route("/api/step/goto", methods=["POST"])
def api_step_goto():
    index = _arg(_body(), "index", int)
    _session().jump_to_step(index)
    return _state_response()


@bp.route("/api/speed", methods=["POST"])
def api_speed():
    session = _session()
    body = _body()
    if "preset" in body:
        preset = str(body["preset"])
        if preset not in SPEED_PRESETS:
            raise InvalidArgumentError(f"Unknown speed preset: {preset}")
        session.set_speed(SPEED_PRESETS[preset])
    else:
        session.set_speed(_arg(body, "speed", float))
    return _state_response()


@bp.route("/api/loop", methods=["POST"])
def api_loop():
    enabled = _body().get("enabled")
    if not isinstance(enabled, bool):
        raise InvalidArgumentError("Field 'enabled' must be true or false")
    _session().set_loop(enabled)
    return _state_response()


# ---------------------------------------------------------------------------
# API: Time travel
# ---------------------------------------------------------------------------
@bp.route("/api/timeline")
def api_timeline():
    store = _session().store
    return jsonify({
        "snapshots":     store.summary(),
        "currentIndex":  store.current_index,
        "canTimeTravel": store.can_time_travel,
    })


@bp.route("/api/timeline/restore", methods=["POST"])
def api_timeline_restore():
    snapshot_id = _arg(_body(), "id", str)
    snapshot = _session().restore_snapshot(snapshot_id)
    return _state_response(restored=snapshot.summary())


@bp.route("/api/timeline/export")
def api_timeline_export():
    return jsonify(_session().store.export_history())


@bp.route("/api/timeline/import", methods=["POST"])
def api_timeline_import():
    bundle = request.get_json(silent=True)
    if not isinstance(bundle, Mapping):
        raise InvalidArgumentError("Request body must be a history bundle object")
    count = _session().store.import_history(bundle)
    return jsonify({"imported": count})


@bp.route("/api/timeline/clear", methods=["POST"])
def api_timeline_clear():
    _session().store.clear()
    return jsonify({"snapshots": [], "currentIndex": -1})


# ---------------------------------------------------------------------------
# API: Comparison
# ---------------------------------------------------------------------------
@bp.route("/api/compare", methods=["POST"])
def api_compare():
    body = _body()
    session = _session()
    left_key = _arg(body, "left", str)
    right_key = _arg(body, "right", str)
    values = (
        _values_from(body) if ("values" in body or "text" in body)
        else list(session.original_data)
    )

    recorders = []
    for key in (left_key, right_key):
        rec = Recorder(base_delay_ms=_settings().base_delay_ms)
        rec.start(key, values)
        rec.run_to_completion()
        recorders.append(rec)

    result = compare(*recorders)
    payload = result.to_dict()
    payload["html"] = comparison_panel(result)
    return jsonify(payload)


# ---------------------------------------------------------------------------
# App factory
# ---------------------------------------------------------------------------
def create_app(settings: Optional[Settings] = None, scheduler=None) -> Flask:
    settings = settings or Settings.from_env()
    scheduler = scheduler if scheduler is not None else MonotonicScheduler()

    surface: dict = {}
    renderer = select_renderer([SvgRenderer(), TextRenderer()], surface)
    session = SortingSession(settings, scheduler, renderer=renderer)

    app = Flask(__name__)
    app.extensions[EXTENSION_KEY] = {
        "settings":  settings,
        "scheduler": scheduler,
        "session":   session,
        "surface":   surface,
    }

    @app.before_request
    def _tick_scheduler():
        tick = getattr(scheduler, "tick", None)
        if tick is not None:
            tick()

    @app.errorhandler(VisualizerError)
    def _visualizer_error(exc: VisualizerError):
        log.warning("%s %s rejected: %s", request.method, request.path, exc)
        return jsonify({"error": str(exc), "type": type(exc).__name__}), exc.status_code

    app.register_blueprint(bp)
    return app


INDEX_TEMPLATE = """
<!DOCTYPE html>
<html lang="en">
<head>
  <meta charset="UTF-8">
  <meta name="viewport" content="width=device-width, initial-scale=1.0">
  <title>Sorting Algorithm Visualizer</title>
  <style>
    * { margin: 0; padding: 0; box-sizing: border-box; }
    :root {
      --bg-dark: #0d1117;
      --bg-darker: #010409;
      --bg-panel: #161b22;
      --border: #30363d;
      --text-primary: #e6edf3;
      --text-secondary: #7d8590;
      --accent-cyan: #0ea5e9;
    }
    body {
      font-family: 'DM Sans', -apple-system, BlinkMacSystemFont, sans-serif;
      background: var(--bg-darker);
      color: var(--text-primary);
      display: flex;
      height: 100vh;
      overflow: hidden;
    }
    #sidebar {
      width: 340px;
      background: var(--bg-dark);
      border-right: 1px solid var(--border);
      overflow-y: auto;
      padding: 24px 16px;
    }
    #main { flex: 1; display: flex; flex-direction: column; overflow-y: auto; }
    #canvas-container { padding: 24px; display: flex; justify-content: center; }
    #bottom-panel { display: flex; gap: 16px; padding: 0 24px 24px; }
    #bottom-panel > div { flex: 1; }
    .panel {
      background: var(--bg-panel);
      border: 1px solid var(--border);
      border-radius: 8px;
      padding: 14px;
      margin-bottom: 14px;
    }
    .panel h3 { font-size: 14px; margin-bottom: 10px; color: var(--accent-cyan); }
    .placeholder { color: var(--text-secondary); font-size: 13px; }
    button {
      background: var(--bg-dark); color: var(--text-primary);
      border: 1px solid var(--border); border-radius: 6px;
      padding: 6px 10px; cursor: pointer;
    }
    button:disabled { opacity: 0.4; cursor: default; }
    .btn-primary { background: var(--accent-cyan); border-color: var(--accent-cyan); }
    .button-row { display: flex; gap: 6px; margin: 8px 0; }
    input[type=text], select { width: 100%; padding: 6px; margin: 6px 0;
      background: var(--bg-dark); color: var(--text-primary); border: 1px solid var(--border); }
    .snapshot-list { list-style: none; max-height: 260px; overflow-y: auto; font-size: 12px; }
    .snapshot { display: flex; justify-content: space-between; gap: 6px; padding: 4px 0; }
    .snapshot.current { color: var(--accent-cyan); }
    .code-line { font-family: 'JetBrains Mono', monospace; font-size: 12px; white-space: pre; }
    .progress { height: 4px; background: var(--border); margin-top: 8px; }
    .progress-bar { height: 4px; background: var(--accent-cyan); }
    #error { color: #f43f5e; font-size: 13px; min-height: 18px; }
    table { font-size: 13px; width: 100%; }
  </style>
</head>
<body>
  <div id="sidebar">
    <div id="algo-panel">{{ algo_selector|safe }}</div>
    <div id="playback">{{ playback|safe }}</div>
    <div id="timeline">{{ timeline|safe }}</div>
    <div id="error"></div>
  </div>

  <div id="main">
    <div id="canvas-container">
      <div id="canvas-svg">{{ svg|safe }}</div>
    </div>
    <div id="bottom-panel">
      <div id="step-info">{{ step_info|safe }}</div>
      <div id="pseudocode">{{ pseudocode|safe }}</div>
      <div>
        <div id="analytics">{{ analytics|safe }}</div>
        <div id="comparison">{{ comparison|safe }}</div>
      </div>
    </div>
  </div>

  <script>
    let pollTimer = null;
    let snapshotCount = null;

    async function call(method, url, data) {
      const opts = {method, headers: {'Content-Type': 'application/json'}};
      if (data !== undefined) opts.body = JSON.stringify(data);
      const res = await fetch(url, opts);
      const body = await res.json();
      document.getElementById('error').textContent = body.error || '';
      return body;
    }
    const post = (url, data) => call('POST', url, data || {});

    function apply(state) {
      if (state.svg) document.getElementById('canvas-svg').innerHTML = state.svg;
      if (state.pseudocode) document.getElementById('pseudocode').innerHTML = state.pseudocode;
      if (state.totalSteps !== undefined) {
        document.getElementById('current-step').textContent = state.totalSteps ? state.currentStep + 1 : 0;
        document.getElementById('total-steps').textContent = state.totalSteps;
      }
      // a looping run waits in 'completed' for its restart timer, which only
      // fires when a request ticks the server's scheduler
      const live = state.playerState === 'playing' ||
                   (state.playerState === 'completed' && state.loop);
      if (live && !pollTimer) {
        pollTimer = setInterval(async () => apply(await call('GET', '/api/state')), 100);
      } else if (state.playerState && !live && pollTimer) {
        clearInterval(pollTimer);
        pollTimer = null;
      }
      if (state.snapshotCount !== undefined && state.snapshotCount !== snapshotCount) {
        snapshotCount = state.snapshotCount;
        refreshTimeline();
      }
    }

    async function refreshTimeline() {
      const t = await call('GET', '/api/timeline');
      const list = document.querySelector('#timeline .snapshot-list');
      if (!list) return;
      list.innerHTML = t.snapshots.slice().reverse().map(s =>
        `<li class="snapshot"><span>${s.description}</span>` +
        `<button class="btn-restore" data-id="${s.id}">Restore</button></li>`).join('');
    }

    const on = (id, fn) => document.getElementById(id)?.addEventListener('click', fn);
    on('btn-run', async () => apply(await post('/api/run', {text: document.getElementById('data-input').value})));
    on('btn-set-data', async () => apply(await post('/api/data', {text: document.getElementById('data-input').value})));
    on('btn-play', async () => {
      const s = await call('GET', '/api/state');
      apply(await post(s.playerState === 'playing' ? '/api/pause' : '/api/play'));
    });
    on('btn-stop', async () => apply(await post('/api/stop')));
    on('btn-next', async () => apply(await post('/api/step/next')));
    on('btn-prev', async () => apply(await post('/api/step/prev')));
    on('btn-clear-history', async () => { await post('/api/timeline/clear'); refreshTimeline(); });

    document.getElementById('algo-selector')?.addEventListener('change', async (e) => {
      apply(await post('/api/algorithm', {algo_key: e.target.value}));
    });
    document.getElementById('speed-slider')?.addEventListener('change', async (e) => {
      document.getElementById('speed-value').textContent = (+e.target.value).toFixed(1) + 'x';
      apply(await post('/api/speed', {speed: +e.target.value}));
    });
    document.getElementById('loop-toggle')?.addEventListener('change', async (e) => {
      apply(await post('/api/loop', {enabled: e.target.checked}));
    });
    document.addEventListener('click', async (e) => {
      if (e.target.classList.contains('speed-preset')) {
        apply(await post('/api/speed', {speed: +e.target.dataset.speed}));
      }
      if (e.target.classList.contains('btn-restore')) {
        apply(await post('/api/timeline/restore', {id: e.target.dataset.id}));
      }
    });
  </script>
</body>
</html>
"""


# ---------------------------------------------------------------------------
# Run
# ---------------------------------------------------------------------------
if __name__ == "__main__":
    settings = Settings.from_env()
    configure_logging(settings.log_level)
    log.info("Sorting Algorithm Visualizer on http://localhost:5000")
    create_app(settings).run(debug=False, port=5000, threaded=False)
