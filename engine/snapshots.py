"""
snapshots.py — Time-Travel Snapshot Store
==========================================
Records the whole session after every meaningful mutation and can put
the session back into any recorded state.

    store = SnapshotStore(max_snapshots=100, capture=session.capture,
                          apply=session.apply_captured)
    store.save_snapshot("Set data", "[5, 3, 1]")
    store.restore_snapshot(store.snapshots[0].id)
    bundle = store.export_history()        # JSON-ready dict
    store.import_history(bundle)           # replaces history wholesale

Design decisions:
  - CapturedState holds only tuples and frozen Steps, so a snapshot can
    never alias the live session.  clone() still builds fresh containers
    so the copy is explicit at the two crossing points (save, restore).
  - The store knows nothing about the session's shape beyond the two
    callables it is given: capture() → CapturedState and
    apply(CapturedState).
  - A single `restoring` flag is the re-entrancy guard: while apply() runs,
    any save_snapshot() call it triggers is ignored.
  - History is a bounded list; the oldest entry is evicted first and the
    current-snapshot pointer is shifted down with it.
"""

import logging
import time
import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Callable, List, Mapping, Optional, Sequence, Tuple

from errors import InvalidArgumentError, NotFoundError
from algorithms.step import Step
from engine.player import PlayerState

log = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Captured session state
# ---------------------------------------------------------------------------
@dataclass(frozen=True)
class CapturedState:
    selected_algorithm: str
    original_data:      Tuple[int, ...]
    current_data:       Tuple[int, ...]
    current_index:      int
    state:              PlayerState
    steps:              Tuple[Step, ...]

    def __post_init__(self):
        upper = max(len(self.steps), 1)
        if not 0 <= self.current_index < upper:
            raise InvalidArgumentError(
                f"current step {self.current_index} outside a {len(self.steps)}-step timeline"
            )

    def clone(self) -> "CapturedState":
        return CapturedState(
            selected_algorithm=self.selected_algorithm,
            original_data=tuple(self.original_data),
            current_data=tuple(self.current_data),
            current_index=self.current_index,
            state=self.state,
            steps=tuple(self.steps),
        )

    def to_dict(self) -> dict:
        return {
            "selectedAlgorithm": self.selected_algorithm,
            "originalData":      list(self.original_data),
            "currentData":       list(self.current_data),
            "currentStep":       self.current_index,
            "playerState":       self.state.value,
            "steps":             [s.to_dict() for s in self.steps],
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "CapturedState":
        current = tuple(int(v) for v in data["currentData"])
        return cls(
            selected_algorithm=str(data["selectedAlgorithm"]),
            original_data=tuple(int(v) for v in data.get("originalData", current)),
            current_data=current,
            current_index=int(data["currentStep"]),
            state=PlayerState(data["playerState"]),
            steps=tuple(Step.from_dict(s) for s in data.get("steps", [])),
        )


@dataclass(frozen=True)
class Snapshot:
    id:          str
    timestamp:   int              # epoch milliseconds
    description: str
    captured:    CapturedState

    def to_dict(self) -> dict:
        return {
            "id":          self.id,
            "timestamp":   self.timestamp,
            "description": self.description,
            "state":       self.captured.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Snapshot":
        try:
            return cls(
                id=str(data["id"]),
                timestamp=int(data["timestamp"]),
                description=str(data.get("description", "")),
                captured=CapturedState.from_dict(data["state"]),
            )
        except InvalidArgumentError:
            raise
        except (KeyError, TypeError, ValueError) as exc:
            raise InvalidArgumentError(f"Malformed snapshot: {exc}") from exc

    def summary(self) -> dict:
        return {
            "id":          self.id,
            "timestamp":   self.timestamp,
            "description": self.description,
            "step":        self.captured.current_index,
            "algorithm":   self.captured.selected_algorithm,
        }


def _new_snapshot_id() -> str:
    return f"snapshot-{uuid.uuid4().hex[:12]}"


# ---------------------------------------------------------------------------
# Store
# ---------------------------------------------------------------------------
class SnapshotStore:
    """
    Attributes:
        snapshots     : Oldest-first list of Snapshots (at most max_snapshots).
        current_index : Position of the most recently saved / restored
                        snapshot, -1 when empty.
        restoring     : True only while a restore is being applied.
    """

    def __init__(
        self,
        max_snapshots: int,
        capture: Callable[[], CapturedState],
        apply: Callable[[CapturedState], None],
        clock: Callable[[], float] = time.time,
        id_factory: Callable[[], str] = _new_snapshot_id,
    ):
        if max_snapshots < 1:
            raise InvalidArgumentError("max_snapshots must be at least 1")
        self.max_snapshots = max_snapshots
        self._capture      = capture
        self._apply        = apply
        self._clock        = clock
        self._id_factory   = id_factory

        self.snapshots:     List[Snapshot] = []
        self.current_index: int            = -1
        self.restoring:     bool           = False

    # ------------------------------------------------------------------
    # Save / restore
    # ------------------------------------------------------------------
    def save_snapshot(self, description: str, details: Optional[str] = None) -> Optional[Snapshot]:
        """Capture the session now.  Returns None when called during a restore."""
        if self.restoring:
            return None

        snapshot = Snapshot(
            id=self._id_factory(),
            timestamp=int(self._clock() * 1000),
            description=f"{description}: {details}" if details else description,
            captured=self._capture().clone(),
        )
        self.snapshots.append(snapshot)
        self.current_index = len(self.snapshots) - 1

        if len(self.snapshots) > self.max_snapshots:
            evicted = self.snapshots.pop(0)
            self.current_index -= 1
            log.debug("evicted oldest snapshot %s", evicted.id)

        log.debug("saved snapshot %s (%s)", snapshot.id, snapshot.description)
        return snapshot

    def restore_snapshot(self, snapshot_id: str) -> Snapshot:
        index = self._index_of(snapshot_id)
        snapshot = self.snapshots[index]

        self.restoring = True
        try:
            self._apply(snapshot.captured.clone())
            self.current_index = index
        finally:
            self.restoring = False

        log.info("restored snapshot %s (%s)", snapshot.id, snapshot.description)
        return snapshot

    def get(self, snapshot_id: str) -> Snapshot:
        return self.snapshots[self._index_of(snapshot_id)]

    # ------------------------------------------------------------------
    # History management
    # ------------------------------------------------------------------
    def clear(self) -> None:
        self.snapshots = []
        self.current_index = -1

    def export_history(self) -> dict:
        return {
            "snapshots":  [s.to_dict() for s in self.snapshots],
            "totalCount": len(self.snapshots),
            "exportTime": datetime.now(timezone.utc).isoformat(),
        }

    def import_history(self, bundle: Mapping[str, Any]) -> int:
        """
        Replace the history with the bundle's snapshots.  The bundle is
        parsed completely before anything is replaced, so a malformed
        bundle leaves the current history untouched.
        """
        if not isinstance(bundle, Mapping) or not isinstance(bundle.get("snapshots"), Sequence):
            raise InvalidArgumentError("History bundle must contain a 'snapshots' list")

        parsed = [Snapshot.from_dict(item) for item in bundle["snapshots"]]
        if len({s.id for s in parsed}) != len(parsed):
            raise InvalidArgumentError("History bundle contains duplicate snapshot ids")
        if len(parsed) > self.max_snapshots:
            parsed = parsed[-self.max_snapshots:]

        self.snapshots = parsed
        self.current_index = len(parsed) - 1
        log.info("imported %d snapshots", len(parsed))
        return len(parsed)

    # ------------------------------------------------------------------
    # Read-only accessors
    # ------------------------------------------------------------------
    def __len__(self) -> int:
        return len(self.snapshots)

    @property
    def can_time_travel(self) -> bool:
        return bool(self.snapshots) and not self.restoring

    @property
    def current(self) -> Optional[Snapshot]:
        if 0 <= self.current_index < len(self.snapshots):
            return self.snapshots[self.current_index]
        return None

    def summary(self) -> List[dict]:
        return [s.summary() for s in self.snapshots]

    def _index_of(self, snapshot_id: str) -> int:
        for i, snapshot in enumerate(self.snapshots):
            if snapshot.id == snapshot_id:
                return i
        raise NotFoundError(f"Snapshot not found: {snapshot_id}")


__all__ = ["CapturedState", "Snapshot", "SnapshotStore"]
