"""
recorder.py — Run Recorder & Analytics
========================================
Records a complete sorting run (all Steps), then computes the analytics
the UI shows next to the player and in Comparison Mode.

Usage:
    rec = Recorder()
    rec.start(algo_key="bubble_sort", data=[5, 3, 1])
    rec.run_to_completion()          # materialises every step
    metrics = rec.get_metrics()      # the analytics card
    rec.export()                     # serialisable run for save/replay

Comparison Mode:
    The UI holds two Recorders (one per algorithm), runs both on the
    SAME input, then calls compare(rec1, rec2) → ComparisonResult.
"""

import time
from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Optional, Sequence

from algorithms import AlgoInfo, generate_steps, require_algorithm
from algorithms.step import OperationType, Step
from algorithms.validator import validate_result, validate_sequence
from engine.player import estimate_playback_duration, format_playback_time


# ---------------------------------------------------------------------------
# Metrics shown in the analytics panel
# ---------------------------------------------------------------------------
@dataclass
class RunMetrics:
    algo_key:              str   = ""
    algo_label:            str   = ""
    input_size:            int   = 0
    total_steps:           int   = 0      # number of Steps yielded
    comparisons:           int   = 0      # COMPARE steps carrying a comparison pair
    swaps:                 int   = 0
    inserts:               int   = 0
    wall_time_ms:          float = 0.0    # time to generate every step
    estimated_playback_ms: float = 0.0    # at 1.0x
    playback_time:         str   = ""
    is_stable:             bool  = False
    valid:                 bool  = False  # sequence well-formed and result sorted

    @property
    def writes(self) -> int:
        return self.swaps + self.inserts


# ---------------------------------------------------------------------------
# Side-by-side comparison
# ---------------------------------------------------------------------------
@dataclass
class ComparisonResult:
    left:  RunMetrics = field(default_factory=RunMetrics)
    right: RunMetrics = field(default_factory=RunMetrics)
    # derived
    winner_steps:       str = ""   # which algorithm needed fewer steps
    winner_comparisons: str = ""
    winner_writes:      str = ""   # swaps + inserts

    def to_dict(self) -> dict:
        return {
            "left":              asdict(self.left),
            "right":             asdict(self.right),
            "winnerSteps":       self.winner_steps,
            "winnerComparisons": self.winner_comparisons,
            "winnerWrites":      self.winner_writes,
        }


# ---------------------------------------------------------------------------
# Recorder
# ---------------------------------------------------------------------------
class Recorder:
    """
    Attributes:
        steps   : Full list of Steps from the run.
        metrics : Computed RunMetrics (available after run_to_completion).
    """

    def __init__(self, base_delay_ms: int = 600):
        self.steps:   List[Step]           = []
        self.metrics: Optional[RunMetrics] = None

        self._base_delay_ms = base_delay_ms
        self._algo_info: Optional[AlgoInfo] = None
        self._data:      List[int]          = []

    # ------------------------------------------------------------------
    # Setup & run
    # ------------------------------------------------------------------
    def start(self, algo_key: str, data: Sequence[int]) -> None:
        self._algo_info = require_algorithm(algo_key)
        self._data      = list(data)
        self.steps      = []
        self.metrics    = None

    def run_to_completion(self) -> RunMetrics:
        """Generate every step, record it, compute metrics."""
        if self._algo_info is None:
            raise RuntimeError("Call start() first.")

        started = time.monotonic()
        self.steps = generate_steps(self._algo_info.key, self._data)
        wall_ms = (time.monotonic() - started) * 1000

        self.metrics = self._compute_metrics(wall_ms)
        return self.metrics

    def get_metrics(self) -> Optional[RunMetrics]:
        return self.metrics

    # ------------------------------------------------------------------
    # Export (serialisable run)
    # ------------------------------------------------------------------
    def export(self) -> Dict[str, Any]:
        return {
            "algoKey": self._algo_info.key if self._algo_info else "",
            "input":   list(self._data),
            "metrics": asdict(self.metrics) if self.metrics else {},
            "steps":   [s.to_dict() for s in self.steps],
        }

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------
    def _compute_metrics(self, wall_ms: float) -> RunMetrics:
        info = self._algo_info
        counts = {op: 0 for op in OperationType}
        comparisons = 0
        for s in self.steps:
            counts[s.operation.type] += 1
            if s.array_state.comparison_pair is not None:
                comparisons += 1

        playback_ms = estimate_playback_duration(len(self.steps), 1.0, self._base_delay_ms)
        return RunMetrics(
            algo_key=info.key if info else "",
            algo_label=info.label if info else "",
            input_size=len(self._data),
            total_steps=len(self.steps),
            comparisons=comparisons,
            swaps=counts[OperationType.SWAP],
            inserts=counts[OperationType.INSERT],
            wall_time_ms=round(wall_ms, 2),
            estimated_playback_ms=playback_ms,
            playback_time=format_playback_time(playback_ms),
            is_stable=info.is_stable if info else False,
            valid=validate_sequence(self.steps) and validate_result(self._data, self.steps),
        )


# ---------------------------------------------------------------------------
# Comparison helper
# ---------------------------------------------------------------------------
def compare(left: Recorder, right: Recorder) -> ComparisonResult:
    """Given two completed Recorders, produce a ComparisonResult."""
    l = left.metrics  or RunMetrics()
    r = right.metrics or RunMetrics()

    def winner(l_val, r_val):
        if l_val == r_val:
            return "tie"
        return l.algo_label if l_val < r_val else r.algo_label

    return ComparisonResult(
        left=l,
        right=r,
        winner_steps=winner(l.total_steps, r.total_steps),
        winner_comparisons=winner(l.comparisons, r.comparisons),
        winner_writes=winner(l.writes, r.writes),
    )


__all__ = ["Recorder", "RunMetrics", "ComparisonResult", "compare"]
