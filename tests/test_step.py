import pytest

from errors import InvalidArgumentError
from algorithms import generate_steps
from algorithms.step import ArrayState, SortedRegion, Step, steps_from_dicts


def test_index_outside_array_is_rejected():
    with pytest.raises(InvalidArgumentError):
        ArrayState(data=(1, 2), highlighted_indices={2})
    with pytest.raises(InvalidArgumentError):
        ArrayState(data=(1, 2), comparison_pair=(0, 5))


def test_overlapping_sorted_regions_are_rejected():
    with pytest.raises(InvalidArgumentError):
        ArrayState(data=(1, 2, 3), sorted_regions=(SortedRegion(0, 1), SortedRegion(1, 2)))


def test_pairs_must_have_two_indices():
    with pytest.raises(InvalidArgumentError):
        ArrayState(data=(1, 2, 3), swap_pair=(0, 1, 2))


def test_step_dict_uses_wire_names_and_parses_back():
    step = generate_steps("bubble_sort", [2, 1])[1]
    wire = step.to_dict()
    assert wire["sequenceNumber"] == 2
    assert wire["operation"]["type"] == "swap"
    assert wire["arrayState"]["swapPair"] == [0, 1]
    assert wire["visualHints"]["animationType"] == "slide"
    assert Step.from_dict(wire) == step


def test_malformed_step_dict_raises_invalid_argument():
    wire = generate_steps("bubble_sort", [2, 1])[0].to_dict()
    del wire["operation"]
    with pytest.raises(InvalidArgumentError):
        Step.from_dict(wire)
    with pytest.raises(InvalidArgumentError):
        steps_from_dicts([{"stepId": "x", "sequenceNumber": "zero"}])
