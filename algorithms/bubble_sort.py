"""
bubble_sort.py — Bubble Sort
=============================
Generator-based bubble sort.  Yields a Step at every meaningful event:
  1. Compare two neighbours            →  COMPARE, pair highlighted
  2. Neighbours out of order           →  SWAP (array shown BEFORE the swap)
  3. End of a pass                     →  the new fixed suffix is marked sorted
  4. Final step                        →  whole range marked sorted

Stops early once a pass performs no swap.  Equal values are never
swapped, so the sort is stable.
"""

import logging
from typing import Generator, List, Mapping, Sequence

from errors import InvalidInputError
from algorithms.step import Step, OperationType, SortedRegion
from algorithms.mapping import DEFAULT_MAPPING, RoleStyle, new_builder

log = logging.getLogger(__name__)

KEY = "bubble_sort"

PSEUDOCODE: List[str] = [
    "def bubble_sort(a):",                          # 0
    "    for i in 0 .. n-2:",                       # 1
    "        swapped ← false",                      # 2
    "        for j in 0 .. n-i-2:",                 # 3
    "            if a[j] > a[j+1]:",                # 4
    "                swap(a[j], a[j+1])",           # 5
    "                swapped ← true",               # 6
    "        if not swapped: break",                # 7
    "    return a",                                 # 8
]


def bubble_sort(
    data: Sequence[int],
    mapping: Mapping[str, RoleStyle] = DEFAULT_MAPPING,
) -> Generator[Step, None, None]:
    """
    Yields Step snapshots for every event during bubble sort.

    Raises:
        InvalidInputError – when `data` is empty.
    """
    values = list(data)
    n = len(values)
    if n == 0:
        raise InvalidInputError("Cannot sort an empty sequence")

    sb = new_builder(KEY, mapping)
    log.debug("bubble_sort input=%s", values)

    for i in range(n - 1):
        swapped = False
        fixed = [SortedRegion(n - i, n - 1)] if i > 0 else []

        for j in range(n - i - 1):
            yield sb.build(
                values, OperationType.COMPARE,
                f"Compare {values[j]} and {values[j + 1]}",
                highlighted=(j, j + 1),
                comparison_pair=(j, j + 1),
                sorted_regions=fixed,
            )

            if values[j] > values[j + 1]:
                yield sb.build(
                    values, OperationType.SWAP,
                    f"Swap {values[j]} and {values[j + 1]}",
                    highlighted=(j, j + 1),
                    swap_pair=(j, j + 1),
                    sorted_regions=fixed,
                )
                values[j], values[j + 1] = values[j + 1], values[j]
                swapped = True

        # -- end of pass: the largest remaining value has bubbled into place --
        last = n - i - 1
        yield sb.build(
            values, OperationType.COMPARE,
            f"Pass {i + 1} complete: {values[last]} is in its final position",
            highlighted=(last,),
            sorted_regions=[SortedRegion(last, n - 1)],
        )

        if not swapped:
            log.debug("bubble_sort: no swaps in pass %d, stopping early", i + 1)
            break

    yield sb.build(
        values, OperationType.COMPARE,
        "Bubble sort complete",
        sorted_regions=[SortedRegion(0, n - 1)],
    )
