"""
algorithms/__init__.py — Algorithm Registry
============================================
Single source of truth for every sorting algorithm the visualizer knows
about.

    from algorithms import REGISTRY, get_algorithm, generate_steps

REGISTRY is a dict:
    {
        "bubble_sort": AlgoInfo(key, label, fn, pseudocode, complexity, …),
        …
    }

AlgoInfo is a lightweight dataclass.  The engine and UI both consume it
so adding a new algorithm is: write the generator, add one entry here.
"""

import logging
import time
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Mapping, Optional, Sequence

from errors import InvalidArgumentError
from algorithms.step import Step
from algorithms.mapping import COMPLEXITY_INFO, DEFAULT_MAPPING, ComplexityInfo, RoleStyle

# ---------------------------------------------------------------------------
# Import all algorithm modules
# ---------------------------------------------------------------------------
from algorithms.bubble_sort    import bubble_sort    as _bubble,    PSEUDOCODE as _bubble_pc
from algorithms.selection_sort import selection_sort as _selection, PSEUDOCODE as _selection_pc
from algorithms.insertion_sort import insertion_sort as _insertion, PSEUDOCODE as _insertion_pc

log = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# AlgoInfo: metadata card for each algorithm
# ---------------------------------------------------------------------------
@dataclass
class AlgoInfo:
    key:          str                    # registry key, e.g. "bubble_sort"
    label:        str                    # human label, e.g. "Bubble Sort"
    fn:           Callable               # the generator function
    pseudocode:   List[str]              # lines for the side-panel
    complexity:   ComplexityInfo
    description:  str       = ""         # one-liner for the UI card
    use_cases:    List[str] = field(default_factory=list)

    @property
    def is_stable(self) -> bool:
        return self.complexity.is_stable

    def to_dict(self) -> dict:
        return {
            "key":         self.key,
            "label":       self.label,
            "description": self.description,
            "useCases":    list(self.use_cases),
            "pseudocode":  list(self.pseudocode),
            "complexity":  self.complexity.to_dict(),
        }


# ---------------------------------------------------------------------------
# THE REGISTRY
# ---------------------------------------------------------------------------
REGISTRY: Dict[str, AlgoInfo] = {

    "bubble_sort": AlgoInfo(
        key="bubble_sort", label="Bubble Sort", fn=_bubble, pseudocode=_bubble_pc,
        complexity=COMPLEXITY_INFO["bubble_sort"],
        description="Repeatedly swaps adjacent out-of-order pairs; the largest value bubbles to the end.",
        use_cases=["teaching", "tiny inputs", "nearly sorted data"],
    ),

    "selection_sort": AlgoInfo(
        key="selection_sort", label="Selection Sort", fn=_selection, pseudocode=_selection_pc,
        complexity=COMPLEXITY_INFO["selection_sort"],
        description="Picks the smallest remaining value and moves it to the end of the sorted prefix.",
        use_cases=["few writes", "tiny inputs"],
    ),

    "insertion_sort": AlgoInfo(
        key="insertion_sort", label="Insertion Sort", fn=_insertion, pseudocode=_insertion_pc,
        complexity=COMPLEXITY_INFO["insertion_sort"],
        description="Takes each value in turn and shifts it left into the sorted prefix.",
        use_cases=["nearly sorted data", "online input", "tiny inputs"],
    ),
}


# ---------------------------------------------------------------------------
# Lookup helpers
# ---------------------------------------------------------------------------
def get_algorithm(key: str) -> Optional[AlgoInfo]:
    """Return AlgoInfo by key, or None."""
    return REGISTRY.get(key)


def require_algorithm(key: str) -> AlgoInfo:
    info = REGISTRY.get(key)
    if info is None:
        raise InvalidArgumentError(f"Unknown algorithm: {key}")
    return info


def list_algorithms() -> List[AlgoInfo]:
    """Return all registered algorithms in insertion order."""
    return list(REGISTRY.values())


def stable_algorithms() -> List[AlgoInfo]:
    return [a for a in REGISTRY.values() if a.is_stable]


def generate_steps(
    algo_key: str,
    data: Sequence[int],
    mapping: Mapping[str, RoleStyle] = DEFAULT_MAPPING,
) -> List[Step]:
    """Run the algorithm to completion and return every Step it yields."""
    info = require_algorithm(algo_key)
    started = time.monotonic()
    steps = list(info.fn(data, mapping))
    log.info(
        "%s: generated %d steps for %d values in %.1f ms",
        algo_key, len(steps), len(steps[-1].data), (time.monotonic() - started) * 1000,
    )
    return steps


__all__ = [
    "AlgoInfo",
    "REGISTRY",
    "get_algorithm",
    "require_algorithm",
    "list_algorithms",
    "stable_algorithms",
    "generate_steps",
]
