import pytest

from errors import InvalidArgumentError
from engine import Recorder, compare


def _run(key, data):
    rec = Recorder()
    rec.start(key, data)
    rec.run_to_completion()
    return rec


def test_metrics_count_operations():
    rec = _run("bubble_sort", [3, 2, 1])
    m = rec.get_metrics()
    assert m.total_steps == 9
    assert m.comparisons == 3
    assert m.swaps == 3
    assert m.inserts == 0
    assert m.estimated_playback_ms == 9 * 600
    assert m.is_stable is True
    assert m.valid is True


def test_insertion_metrics():
    m = _run("insertion_sort", [3, 2, 1]).metrics
    assert m.total_steps == 13
    assert m.comparisons == 3
    assert m.inserts == 5
    assert m.writes == 5


def test_run_requires_start():
    with pytest.raises(RuntimeError):
        Recorder().run_to_completion()
    with pytest.raises(InvalidArgumentError):
        Recorder().start("nope", [1])


def test_export_contains_every_step():
    rec = _run("selection_sort", [2, 1])
    out = rec.export()
    assert out["algoKey"] == "selection_sort"
    assert out["input"] == [2, 1]
    assert len(out["steps"]) == out["metrics"]["total_steps"]


def test_compare_picks_winners():
    result = compare(_run("bubble_sort", [3, 2, 1]), _run("insertion_sort", [3, 2, 1]))
    assert result.winner_steps == "Bubble Sort"
    assert result.winner_comparisons == "tie"
    assert result.winner_writes == "Bubble Sort"
    assert result.to_dict()["left"]["algo_key"] == "bubble_sort"
