"""
mapping.py — Operation → Visual / Complexity Lookup Tables
===========================================================
Static tables the generators consult while building Steps:

  • DEFAULT_MAPPING   – colour, animation and duration per operation role
  • COMPLEXITY_INFO   – best/average/worst/space and stability per algorithm
  • OPERATION_COST    – the fixed complexity label stamped on each Step,
                        keyed by (algorithm, operation type)

Stability is a fixed fact about each algorithm, recorded here rather
than derived from any particular run.
"""

import itertools
from dataclasses import dataclass
from typing import Callable, Dict, Mapping, Tuple

from algorithms.step import AnimationType, Complexity, OperationType, StepBuilder, VisualHints


@dataclass(frozen=True)
class RoleStyle:
    color:       str
    animation:   AnimationType
    duration_ms: int


# role → style; "sorted" is a colour role only, never an operation type
DEFAULT_MAPPING: Dict[str, RoleStyle] = {
    "compare": RoleStyle("#3B82F6", AnimationType.HIGHLIGHT, 300),   # blue
    "swap":    RoleStyle("#EF4444", AnimationType.SLIDE,     500),   # red
    "insert":  RoleStyle("#10B981", AnimationType.FADE,      400),   # green
    "merge":   RoleStyle("#F59E0B", AnimationType.SLIDE,     450),   # amber
    "sorted":  RoleStyle("#8B5CF6", AnimationType.FADE,      200),   # purple
}


def visual_hints_for(
    op_type: OperationType,
    mapping: Mapping[str, RoleStyle] = DEFAULT_MAPPING,
) -> VisualHints:
    style = mapping[op_type.value]
    return VisualHints(
        animation_type=style.animation,
        duration_ms=style.duration_ms,
        colors={
            "comparing": mapping["compare"].color,
            "swapping":  mapping["swap"].color,
            "sorted":    mapping["sorted"].color,
        },
    )


# ---------------------------------------------------------------------------
# Per-algorithm complexity card
# ---------------------------------------------------------------------------
@dataclass(frozen=True)
class ComplexityInfo:
    best_case:    str
    average_case: str
    worst_case:   str
    space:        str
    is_stable:    bool
    is_in_place:  bool

    def to_dict(self) -> dict:
        return {
            "bestCase":    self.best_case,
            "averageCase": self.average_case,
            "worstCase":   self.worst_case,
            "space":       self.space,
            "isStable":    self.is_stable,
            "isInPlace":   self.is_in_place,
        }


COMPLEXITY_INFO: Dict[str, ComplexityInfo] = {
    "bubble_sort":    ComplexityInfo("O(n)",  "O(n²)", "O(n²)", "O(1)", is_stable=True,  is_in_place=True),
    "selection_sort": ComplexityInfo("O(n²)", "O(n²)", "O(n²)", "O(1)", is_stable=False, is_in_place=True),
    "insertion_sort": ComplexityInfo("O(n)",  "O(n²)", "O(n²)", "O(1)", is_stable=True,  is_in_place=True),
}


# (algorithm, operation) → total cost of that operation kind over one run
OPERATION_COST: Dict[Tuple[str, OperationType], Complexity] = {
    ("bubble_sort",    OperationType.COMPARE): Complexity("O(n²)", "O(1)"),
    ("bubble_sort",    OperationType.SWAP):    Complexity("O(n²)", "O(1)"),
    ("selection_sort", OperationType.COMPARE): Complexity("O(n²)", "O(1)"),
    ("selection_sort", OperationType.SWAP):    Complexity("O(n)",  "O(1)"),
    ("insertion_sort", OperationType.COMPARE): Complexity("O(n²)", "O(1)"),
    ("insertion_sort", OperationType.INSERT):  Complexity("O(n²)", "O(1)"),
}

_UNKNOWN_COST = Complexity("O(1)", "O(1)")


def operation_complexity(algo_key: str, op_type: OperationType) -> Complexity:
    return OPERATION_COST.get((algo_key, op_type), _UNKNOWN_COST)


def is_stable(algo_key: str) -> bool:
    info = COMPLEXITY_INFO.get(algo_key)
    return bool(info and info.is_stable)


# ---------------------------------------------------------------------------
# Step ids
# ---------------------------------------------------------------------------
def step_id_factory(algo_key: str) -> Callable[[], str]:
    """Return a callable producing BUBBLE_SORT_0001, BUBBLE_SORT_0002, …"""
    prefix  = algo_key.upper()
    counter = itertools.count(1)
    return lambda: f"{prefix}_{next(counter):04d}"


def new_builder(algo_key: str, mapping: Mapping[str, RoleStyle] = DEFAULT_MAPPING) -> StepBuilder:
    """StepBuilder wired to this algorithm's ids, hints and cost labels."""
    return StepBuilder(
        next_id=step_id_factory(algo_key),
        hints_for=lambda op: visual_hints_for(op, mapping),
        complexity_for=lambda op: operation_complexity(algo_key, op),
    )


__all__ = [
    "new_builder",
    "RoleStyle",
    "DEFAULT_MAPPING",
    "visual_hints_for",
    "ComplexityInfo",
    "COMPLEXITY_INFO",
    "OPERATION_COST",
    "operation_complexity",
    "is_stable",
    "step_id_factory",
]
