import itertools
import json

import pytest

from errors import InvalidArgumentError, NotFoundError
from algorithms import generate_steps
from engine import CapturedState, PlayerState, SnapshotStore


def _state(index=0, steps=()):
    return CapturedState(
        selected_algorithm="bubble_sort",
        original_data=(2, 1),
        current_data=(2, 1),
        current_index=index,
        state=PlayerState.IDLE,
        steps=tuple(steps),
    )


def _store(max_snapshots=100, capture=None, apply=None):
    ids = itertools.count(1)
    return SnapshotStore(
        max_snapshots,
        capture=capture or _state,
        apply=apply or (lambda captured: None),
        clock=lambda: 1_700_000_000.5,
        id_factory=lambda: f"s{next(ids)}",
    )


def test_save_appends_and_tracks_current():
    store = _store()
    snap = store.save_snapshot("Set data", "[2, 1]")
    assert snap.description == "Set data: [2, 1]"
    assert snap.timestamp == 1_700_000_000_500
    assert len(store) == 1
    assert store.current is snap


def test_overflow_evicts_the_oldest():
    store = _store(max_snapshots=100)
    for i in range(101):
        store.save_snapshot(f"action {i}")
    assert len(store) == 100
    assert store.snapshots[0].id == "s2"
    assert store.snapshots[-1].id == "s101"
    assert store.current_index == 99


def test_restore_applies_a_copy_and_guards_reentry():
    applied = []
    store = None

    def apply(captured):
        applied.append(captured)
        # a session mutation during restore must not record a snapshot
        assert store.restoring
        assert store.save_snapshot("nested") is None

    store = _store(apply=apply)
    first = store.save_snapshot("first")
    store.save_snapshot("second")
    restored = store.restore_snapshot(first.id)

    assert restored is first
    assert applied == [first.captured]
    assert len(store) == 2
    assert store.current_index == 0
    assert store.restoring is False


def test_restore_guard_is_cleared_when_apply_fails():
    def apply(captured):
        raise InvalidArgumentError("bad state")

    store = _store(apply=apply)
    snap = store.save_snapshot("first")
    with pytest.raises(InvalidArgumentError):
        store.restore_snapshot(snap.id)
    assert store.restoring is False
    assert store.save_snapshot("after") is not None


def test_unknown_snapshot_id_raises_not_found():
    store = _store()
    store.save_snapshot("first")
    with pytest.raises(NotFoundError):
        store.restore_snapshot("missing")
    with pytest.raises(NotFoundError):
        store.get("missing")


def test_captured_index_must_lie_inside_the_steps():
    steps = generate_steps("bubble_sort", [1, 2])
    _state(2, steps)
    with pytest.raises(InvalidArgumentError):
        _state(3, steps)


def test_export_clear_import_round_trip():
    steps = generate_steps("selection_sort", [3, 1, 2])
    store = _store(capture=lambda: _state(4, steps))
    for name in ("Set data", "Start sorting", "Pause"):
        store.save_snapshot(name)

    bundle = json.loads(json.dumps(store.export_history()))
    assert bundle["totalCount"] == 3
    assert "exportTime" in bundle
    originals = list(store.snapshots)

    store.clear()
    assert len(store) == 0 and store.current_index == -1

    assert store.import_history(bundle) == 3
    assert [s.description for s in store.snapshots] == [s.description for s in originals]
    assert [s.captured for s in store.snapshots] == [s.captured for s in originals]
    assert store.current_index == 2


def test_malformed_import_leaves_history_untouched():
    store = _store()
    store.save_snapshot("keep me")
    bundle = store.export_history()
    bundle["snapshots"].append({"id": "broken"})
    with pytest.raises(InvalidArgumentError):
        store.import_history(bundle)
    with pytest.raises(InvalidArgumentError):
        store.import_history({"totalCount": 0})
    assert [s.description for s in store.snapshots] == ["keep me"]


def test_import_rejects_duplicate_ids():
    store = _store()
    store.save_snapshot("one")
    bundle = store.export_history()
    bundle["snapshots"] = bundle["snapshots"] * 2
    with pytest.raises(InvalidArgumentError):
        store.import_history(bundle)


def test_import_keeps_the_newest_entries_when_over_the_bound():
    source = _store(max_snapshots=10)
    for i in range(5):
        source.save_snapshot(f"action {i}")
    small = _store(max_snapshots=3)
    small.import_history(source.export_history())
    assert [s.description for s in small.snapshots] == ["action 2", "action 3", "action 4"]


def test_summary_lists_each_entry():
    store = _store()
    store.save_snapshot("first")
    assert store.summary() == [{
        "id": "s1",
        "timestamp": 1_700_000_000_500,
        "description": "first",
        "step": 0,
        "algorithm": "bubble_sort",
    }]
    assert store.can_time_travel
