"""
validator.py — Step Sequence Checks
====================================
Two yes/no checks over a generated sequence.  Neither raises: a bad
sequence is reported as False and the reason is logged.
"""

import logging
from typing import Sequence

from algorithms.step import Step

log = logging.getLogger(__name__)


def validate_sequence(steps: Sequence[Step]) -> bool:
    """True iff sequence numbers run exactly 1..N and every step id is unique."""
    if not steps:
        log.debug("validate_sequence: empty sequence")
        return False

    for expected, step in enumerate(steps, start=1):
        if step.sequence_number != expected:
            log.warning(
                "validate_sequence: expected sequence number %d, found %d",
                expected, step.sequence_number,
            )
            return False

    if len({s.step_id for s in steps}) != len(steps):
        log.warning("validate_sequence: duplicate step ids")
        return False

    return True


def validate_result(original: Sequence[int], steps: Sequence[Step]) -> bool:
    """True iff the last step's data equals `original` sorted ascending."""
    if not steps:
        return False
    return list(steps[-1].data) == sorted(original)


__all__ = ["validate_sequence", "validate_result"]
