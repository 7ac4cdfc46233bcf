"""
step.py — Sorting Step Snapshot
================================
Every sorting algorithm is a generator that yields Step objects.
A Step is a frozen-in-time picture of everything a renderer needs to
draw one frame:

    • The whole array at this moment (an independent copy)
    • Which indices are highlighted / compared / swapped
    • Which index ranges are already in their final place
    • The operation that produced the frame, with a plain-English
      description and a fixed complexity label
    • Visual hints (animation type, duration, colour roles)

Design decisions:
  - Every type here is a frozen dataclass built from tuples, so a Step
    can be shared between the live session and any number of stored
    snapshots without aliasing.
  - Shape is checked ONCE, in __post_init__.  Anything holding a Step
    may rely on its indices being in range and its sorted regions being
    disjoint; nobody re-validates downstream.
  - to_dict() / from_dict() use the camelCase field names of the export
    bundle; those names are the stable wire contract.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, FrozenSet, Iterable, List, Mapping, Optional, Sequence, Tuple

from errors import InvalidArgumentError


class OperationType(Enum):
    COMPARE = "compare"
    SWAP    = "swap"
    INSERT  = "insert"
    MERGE   = "merge"


class AnimationType(Enum):
    HIGHLIGHT = "highlight"
    SLIDE     = "slide"
    FADE      = "fade"


# ---------------------------------------------------------------------------
# Value types
# ---------------------------------------------------------------------------
@dataclass(frozen=True, order=True)
class SortedRegion:
    """Closed index interval [start, end] whose elements are final."""

    start: int
    end:   int

    def __post_init__(self):
        if self.start < 0 or self.end < self.start:
            raise InvalidArgumentError(f"Invalid sorted region [{self.start}, {self.end}]")

    def to_dict(self) -> dict:
        return {"start": self.start, "end": self.end}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "SortedRegion":
        return cls(start=int(data["start"]), end=int(data["end"]))


@dataclass(frozen=True)
class ArrayState:
    """
    Attributes:
        data                : The array values at this step.
        highlighted_indices : Indices the renderer should emphasise.
        comparison_pair     : (i, j) being compared, if any.
        swap_pair           : (i, j) about to be swapped, if any.
        sorted_regions      : Disjoint closed intervals already in final order.
    """

    data:                Tuple[int, ...]
    highlighted_indices: FrozenSet[int]                   = frozenset()
    comparison_pair:     Optional[Tuple[int, int]]        = None
    swap_pair:           Optional[Tuple[int, int]]        = None
    sorted_regions:      Tuple[SortedRegion, ...]         = ()

    def __post_init__(self):
        # normalise containers so callers may pass lists
        object.__setattr__(self, "data", tuple(self.data))
        object.__setattr__(self, "highlighted_indices", frozenset(self.highlighted_indices))
        object.__setattr__(self, "sorted_regions", tuple(sorted(self.sorted_regions)))
        object.__setattr__(self, "comparison_pair", _pair(self.comparison_pair, "comparison_pair"))
        object.__setattr__(self, "swap_pair", _pair(self.swap_pair, "swap_pair"))

        size = len(self.data)
        referenced = list(self.highlighted_indices)
        for pair in (self.comparison_pair, self.swap_pair):
            if pair is not None:
                referenced.extend(pair)
        for region in self.sorted_regions:
            referenced.extend((region.start, region.end))
        for idx in referenced:
            if not 0 <= idx < size:
                raise InvalidArgumentError(f"Index {idx} outside array of length {size}")

        for left, right in zip(self.sorted_regions, self.sorted_regions[1:]):
            if right.start <= left.end:
                raise InvalidArgumentError(
                    f"Sorted regions [{left.start}, {left.end}] and "
                    f"[{right.start}, {right.end}] overlap"
                )

    def to_dict(self) -> dict:
        return {
            "data":               list(self.data),
            "highlightedIndices": sorted(self.highlighted_indices),
            "comparisonPair":     list(self.comparison_pair) if self.comparison_pair else None,
            "swapPair":           list(self.swap_pair) if self.swap_pair else None,
            "sortedRegions":      [r.to_dict() for r in self.sorted_regions],
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ArrayState":
        return cls(
            data=tuple(int(v) for v in data["data"]),
            highlighted_indices=frozenset(int(i) for i in data.get("highlightedIndices", [])),
            comparison_pair=data.get("comparisonPair"),
            swap_pair=data.get("swapPair"),
            sorted_regions=tuple(SortedRegion.from_dict(r) for r in data.get("sortedRegions", [])),
        )


@dataclass(frozen=True)
class Complexity:
    time:  str
    space: str


@dataclass(frozen=True)
class Operation:
    type:        OperationType
    description: str
    complexity:  Complexity

    def to_dict(self) -> dict:
        return {
            "type":        self.type.value,
            "description": self.description,
            "complexity":  {"time": self.complexity.time, "space": self.complexity.space},
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Operation":
        complexity = data.get("complexity", {})
        return cls(
            type=OperationType(data["type"]),
            description=str(data.get("description", "")),
            complexity=Complexity(
                time=str(complexity.get("time", "")),
                space=str(complexity.get("space", "")),
            ),
        )


@dataclass(frozen=True)
class VisualHints:
    animation_type: AnimationType
    duration_ms:    int
    colors:         Tuple[Tuple[str, str], ...] = ()    # (role, colour) pairs

    def __post_init__(self):
        if isinstance(self.colors, Mapping):
            object.__setattr__(self, "colors", tuple(sorted(self.colors.items())))
        if self.duration_ms < 0:
            raise InvalidArgumentError("duration_ms must not be negative")

    @property
    def color_map(self) -> Dict[str, str]:
        return dict(self.colors)

    def to_dict(self) -> dict:
        return {
            "animationType": self.animation_type.value,
            "durationMs":    self.duration_ms,
            "colors":        self.color_map,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "VisualHints":
        return cls(
            animation_type=AnimationType(data["animationType"]),
            duration_ms=int(data["durationMs"]),
            colors=dict(data.get("colors", {})),
        )


# ---------------------------------------------------------------------------
# Step
# ---------------------------------------------------------------------------
@dataclass(frozen=True)
class Step:
    """
    Attributes:
        step_id         : Opaque id, unique within one generated sequence.
        sequence_number : 1-based position in the sequence.
        array_state     : The array and its highlight / region markers.
        operation       : What happened, in words, with a complexity label.
        visual_hints    : How a renderer should animate this frame.
    """

    step_id:         str
    sequence_number: int
    array_state:     ArrayState
    operation:       Operation
    visual_hints:    VisualHints

    def __post_init__(self):
        if not self.step_id:
            raise InvalidArgumentError("step_id must not be empty")
        if self.sequence_number < 1:
            raise InvalidArgumentError(f"sequence_number must be >= 1, got {self.sequence_number}")

    @property
    def data(self) -> Tuple[int, ...]:
        return self.array_state.data

    @property
    def operation_type(self) -> OperationType:
        return self.operation.type

    def to_dict(self) -> dict:
        return {
            "stepId":         self.step_id,
            "sequenceNumber": self.sequence_number,
            "arrayState":     self.array_state.to_dict(),
            "operation":      self.operation.to_dict(),
            "visualHints":    self.visual_hints.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Step":
        """Parse one serialised step; any malformed field raises InvalidArgumentError."""
        try:
            return cls(
                step_id=str(data["stepId"]),
                sequence_number=int(data["sequenceNumber"]),
                array_state=ArrayState.from_dict(data["arrayState"]),
                operation=Operation.from_dict(data["operation"]),
                visual_hints=VisualHints.from_dict(data["visualHints"]),
            )
        except InvalidArgumentError:
            raise
        except (KeyError, TypeError, ValueError) as exc:
            raise InvalidArgumentError(f"Malformed step: {exc}") from exc


def _pair(value: Optional[Sequence[int]], name: str) -> Optional[Tuple[int, int]]:
    if value is None:
        return None
    pair = tuple(int(v) for v in value)
    if len(pair) != 2:
        raise InvalidArgumentError(f"{name} must have exactly two indices, got {pair}")
    return pair


# ---------------------------------------------------------------------------
# Convenience builder so algorithms don't have to spell out every kwarg
# ---------------------------------------------------------------------------
class StepBuilder:
    """
    Scratch-pad that algorithms use to emit Steps cleanly.  It owns the
    sequence counter and the id factory, so every Step it builds has the
    next sequence number and a fresh id.

    Usage inside an algorithm generator:
        sb = StepBuilder("bubble_sort", next_id, hints_for, complexity_for)
        yield sb.build(values, OperationType.COMPARE, "Compare 5 and 3",
                       highlighted=(0, 1), comparison_pair=(0, 1))
    """

    def __init__(
        self,
        next_id:        Callable[[], str],
        hints_for:      Callable[[OperationType], VisualHints],
        complexity_for: Callable[[OperationType], Complexity],
    ):
        self._next_id        = next_id
        self._hints_for      = hints_for
        self._complexity_for = complexity_for
        self.sequence_number = 0

    def build(
        self,
        values:          Sequence[int],
        op_type:         OperationType,
        description:     str,
        highlighted:     Iterable[int] = (),
        comparison_pair: Optional[Tuple[int, int]] = None,
        swap_pair:       Optional[Tuple[int, int]] = None,
        sorted_regions:  Iterable[SortedRegion] = (),
    ) -> Step:
        self.sequence_number += 1
        return Step(
            step_id=self._next_id(),
            sequence_number=self.sequence_number,
            array_state=ArrayState(
                data=tuple(values),
                highlighted_indices=frozenset(highlighted),
                comparison_pair=comparison_pair,
                swap_pair=swap_pair,
                sorted_regions=tuple(sorted_regions),
            ),
            operation=Operation(
                type=op_type,
                description=description,
                complexity=self._complexity_for(op_type),
            ),
            visual_hints=self._hints_for(op_type),
        )


def steps_from_dicts(items: Iterable[Mapping[str, Any]]) -> List[Step]:
    return [Step.from_dict(item) for item in items]
