"""
insertion_sort.py — Insertion Sort
===================================
Generator-based insertion sort.  For every element after the first:
  1. Extract the key                    →  COMPARE, key highlighted
  2. Left neighbour strictly greater    →  COMPARE, then INSERT showing
                                           the neighbour shifted right
                                           (key not yet written back)
  3. Loop exits                         →  INSERT placing the key
  4. Round complete                     →  prefix [0, i] marked sorted

Equal values stop the shift, so the sort is stable.
"""

import logging
from typing import Generator, List, Mapping, Sequence

from errors import InvalidInputError
from algorithms.step import Step, OperationType, SortedRegion
from algorithms.mapping import DEFAULT_MAPPING, RoleStyle, new_builder

log = logging.getLogger(__name__)

KEY = "insertion_sort"

PSEUDOCODE: List[str] = [
    "def insertion_sort(a):",                       # 0
    "    for i in 1 .. n-1:",                       # 1
    "        key ← a[i]",                           # 2
    "        j ← i - 1",                            # 3
    "        while j ≥ 0 and a[j] > key:",          # 4
    "            a[j+1] ← a[j]",                    # 5
    "            j ← j - 1",                        # 6
    "        a[j+1] ← key",                         # 7
    "    return a",                                 # 8
]


def insertion_sort(
    data: Sequence[int],
    mapping: Mapping[str, RoleStyle] = DEFAULT_MAPPING,
) -> Generator[Step, None, None]:
    """Yields Step snapshots for every event during insertion sort."""
    values = list(data)
    n = len(values)
    if n == 0:
        raise InvalidInputError("Cannot sort an empty sequence")

    sb = new_builder(KEY, mapping)
    log.debug("insertion_sort input=%s", values)

    for i in range(1, n):
        key = values[i]
        j = i - 1
        settled = [SortedRegion(0, i)]

        yield sb.build(
            values, OperationType.COMPARE,
            f"Extract {key} to insert into the sorted prefix",
            highlighted=(i,),
            sorted_regions=[SortedRegion(0, i - 1)],
        )

        while j >= 0 and values[j] > key:
            yield sb.build(
                values, OperationType.COMPARE,
                f"{values[j]} is greater than {key}, shift it right",
                highlighted=(j, j + 1),
                comparison_pair=(j, j + 1),
                sorted_regions=settled,
            )
            values[j + 1] = values[j]
            yield sb.build(
                values, OperationType.INSERT,
                f"Shift {values[j + 1]} one position right",
                highlighted=(j + 1,),
                sorted_regions=settled,
            )
            j -= 1

        values[j + 1] = key
        yield sb.build(
            values, OperationType.INSERT,
            f"Insert {key} at position {j + 1}",
            highlighted=(j + 1,),
            sorted_regions=settled,
        )

        yield sb.build(
            values, OperationType.COMPARE,
            f"Round {i} complete: first {i + 1} elements are sorted",
            sorted_regions=settled,
        )

    yield sb.build(
        values, OperationType.COMPARE,
        "Insertion sort complete",
        sorted_regions=[SortedRegion(0, n - 1)],
    )
