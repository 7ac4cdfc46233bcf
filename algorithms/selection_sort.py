"""
selection_sort.py — Selection Sort
===================================
Generator-based selection sort.  For every output position:
  1. Scan the unsorted tail             →  COMPARE per candidate
  2. Strictly smaller value found       →  extra step naming the new minimum
  3. Minimum not already in place       →  SWAP (array shown BEFORE the swap)
  4. Position settled                   →  sorted prefix grows by one

Not stable: the long-distance swap can carry an element past an equal
one.  That is a property of the algorithm, listed in COMPLEXITY_INFO.
"""

import logging
from typing import Generator, List, Mapping, Sequence

from errors import InvalidInputError
from algorithms.step import Step, OperationType, SortedRegion
from algorithms.mapping import DEFAULT_MAPPING, RoleStyle, new_builder

log = logging.getLogger(__name__)

KEY = "selection_sort"

PSEUDOCODE: List[str] = [
    "def selection_sort(a):",                       # 0
    "    for i in 0 .. n-2:",                       # 1
    "        min ← i",                              # 2
    "        for j in i+1 .. n-1:",                 # 3
    "            if a[j] < a[min]: min ← j",        # 4
    "        if min ≠ i: swap(a[i], a[min])",       # 5
    "    return a",                                 # 6
]


def selection_sort(
    data: Sequence[int],
    mapping: Mapping[str, RoleStyle] = DEFAULT_MAPPING,
) -> Generator[Step, None, None]:
    """Yields Step snapshots for every event during selection sort."""
    values = list(data)
    n = len(values)
    if n == 0:
        raise InvalidInputError("Cannot sort an empty sequence")

    sb = new_builder(KEY, mapping)
    log.debug("selection_sort input=%s", values)

    for i in range(n - 1):
        prefix = [SortedRegion(0, i - 1)] if i > 0 else []
        min_idx = i

        for j in range(i + 1, n):
            yield sb.build(
                values, OperationType.COMPARE,
                f"Compare current minimum {values[min_idx]} with {values[j]}",
                highlighted=(min_idx, j),
                comparison_pair=(min_idx, j),
                sorted_regions=prefix,
            )

            # a[min] > a[j], written with the shared strict greater-than
            if values[min_idx] > values[j]:
                min_idx = j
                yield sb.build(
                    values, OperationType.COMPARE,
                    f"New minimum found: {values[min_idx]}",
                    highlighted=(min_idx,),
                    sorted_regions=prefix,
                )

        if min_idx != i:
            yield sb.build(
                values, OperationType.SWAP,
                f"Swap minimum {values[min_idx]} into position {i}",
                highlighted=(i, min_idx),
                swap_pair=(i, min_idx),
                sorted_regions=prefix,
            )
            values[i], values[min_idx] = values[min_idx], values[i]

        yield sb.build(
            values, OperationType.COMPARE,
            f"Position {i} settled with {values[i]}",
            highlighted=(i,),
            sorted_regions=[SortedRegion(0, i)],
        )

    yield sb.build(
        values, OperationType.COMPARE,
        "Selection sort complete",
        sorted_regions=[SortedRegion(0, n - 1)],
    )
