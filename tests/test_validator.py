from dataclasses import replace

from algorithms import generate_steps
from algorithms.validator import validate_result, validate_sequence


def test_generated_sequence_is_valid():
    steps = generate_steps("insertion_sort", [5, 2, 4])
    assert validate_sequence(steps) is True
    assert validate_result([5, 2, 4], steps) is True


def test_empty_sequence_is_invalid():
    assert validate_sequence([]) is False
    assert validate_result([1], []) is False


def test_gap_in_sequence_numbers_is_invalid():
    steps = generate_steps("bubble_sort", [3, 1, 2])
    assert validate_sequence(steps[:1] + steps[2:]) is False


def test_duplicate_sequence_number_is_invalid():
    steps = generate_steps("bubble_sort", [3, 1, 2])
    broken = list(steps)
    broken[1] = replace(broken[1], sequence_number=1)
    assert validate_sequence(broken) is False


def test_duplicate_step_id_is_invalid():
    steps = generate_steps("bubble_sort", [3, 1, 2])
    broken = list(steps)
    broken[2] = replace(broken[2], step_id=broken[0].step_id)
    assert validate_sequence(broken) is False


def test_result_must_match_sorted_input():
    steps = generate_steps("selection_sort", [3, 1, 2])
    assert validate_result([3, 1, 2], steps) is True
    assert validate_result([3, 1, 2, 0], steps) is False
    # a truncated run ends on an unsorted array
    assert validate_result([3, 1, 2], steps[:1]) is False
