"""
2-out-of-3 Voter
================

Triple modular redundancy (TMR) voting over three sensor readings.

Algorithm:
    1. Compute the pairwise absolute differences |a-b|, |b-c|, |a-c|
    2. All three within tolerance -> ALL_HEALTHY, mean of all three
    3. Otherwise take the FIRST agreeing pair in the order
       (a,b), (b,c), (a,c) -> ONE_FAULTY, mean of that pair,
       the remaining reading is rejected
    4. No agreeing pair -> NO_CONSENSUS, consensus 0.0, all rejected

A difference exactly equal to the tolerance counts as agreement.

The pair order only matters when the tolerance relation is not
transitive (e.g. a~b and b~c but not a~c). The order is kept for
compatibility with existing consumers; it carries no further meaning.
"""

import math
from typing import Sequence

from edge_kernels.errors import EdgeKernelError
from edge_kernels.models.vote import FaultStatus, VoteResult


# Readings closer than this are treated as the same value
TOLERANCE = 1.0

REQUIRED_READINGS = 3


class InvalidReadingCount(EdgeKernelError):
    """Raised when a vote is requested on anything but three readings."""

    def __init__(self, count: int) -> None:
        self.count = count
        super().__init__(
            f"exactly {REQUIRED_READINGS} readings required for 2oo3 voting, "
            f"got {count}"
        )


def _agree(x: float, y: float, tolerance: float) -> bool:
    # NaN compares false, so a NaN reading never agrees with anything
    return math.fabs(x - y) <= tolerance


def _mean(*values: float) -> float:
    total = values[0]
    for value in values[1:]:
        total += value
    mean = total / len(values)
    if math.isfinite(mean):
        return mean

    # The sum overflowed; scale first so readings near float max still average
    n = len(values)
    mean = values[0] / n
    for value in values[1:]:
        mean += value / n
    return mean


def vote(readings: Sequence[float], tolerance: float = TOLERANCE) -> VoteResult:
    """
    Perform 2-out-of-3 voting.

    Args:
        readings: Exactly three readings
        tolerance: Maximum absolute difference for two readings to agree

    Returns:
        VoteResult with consensus, rejected readings and fault status

    Raises:
        InvalidReadingCount: If len(readings) != 3
    """
    if len(readings) != REQUIRED_READINGS:
        raise InvalidReadingCount(len(readings))

    a, b, c = (float(r) for r in readings)

    ab = _agree(a, b, tolerance)
    bc = _agree(b, c, tolerance)
    ac = _agree(a, c, tolerance)

    if ab and bc and ac:
        return VoteResult(
            consensus=_mean(a, b, c),
            rejected=(),
            fault_status=FaultStatus.ALL_HEALTHY,
        )

    # (agrees, first, second, outlier) in evaluation order
    pairs = (
        (ab, a, b, c),
        (bc, b, c, a),
        (ac, a, c, b),
    )
    for agrees, first, second, outlier in pairs:
        if agrees:
            return VoteResult(
                consensus=_mean(first, second),
                rejected=(outlier,),
                fault_status=FaultStatus.ONE_FAULTY,
            )

    return VoteResult(
        consensus=0.0,
        rejected=(a, b, c),
        fault_status=FaultStatus.NO_CONSENSUS,
    )
