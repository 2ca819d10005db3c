"""
Vote Models
===========

Result types for 2-out-of-3 redundant sensor voting.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Tuple


class FaultStatus(str, Enum):
    """
    Fault classification of a voting round.

    Attributes:
        ALL_HEALTHY: All three readings agree
        ONE_FAULTY: Two readings agree, the third is rejected
        NO_CONSENSUS: No two readings agree, the result must not be trusted
    """

    ALL_HEALTHY = "AllHealthy"
    ONE_FAULTY = "OneFaulty"
    NO_CONSENSUS = "NoConsensus"


# Number of rejected readings that each status implies
_REJECTED_COUNT = {
    FaultStatus.ALL_HEALTHY: 0,
    FaultStatus.ONE_FAULTY: 1,
    FaultStatus.NO_CONSENSUS: 3,
}


@dataclass(frozen=True, slots=True)
class VoteResult:
    """
    Outcome of one voting round.

    Attributes:
        consensus: Mean of the accepted readings (0.0 when NO_CONSENSUS)
        rejected: Readings excluded from the consensus, in input order
        fault_status: Classification of the round
    """

    consensus: float
    rejected: Tuple[float, ...] = field(default_factory=tuple)
    fault_status: FaultStatus = FaultStatus.ALL_HEALTHY

    def __post_init__(self) -> None:
        """Validate invariants."""
        expected = _REJECTED_COUNT[self.fault_status]
        if len(self.rejected) != expected:
            raise ValueError(
                f"{self.fault_status.value} requires {expected} rejected "
                f"readings, got {len(self.rejected)}"
            )
        if self.fault_status is FaultStatus.NO_CONSENSUS and self.consensus != 0.0:
            raise ValueError("NoConsensus result must carry a 0.0 consensus")

    @property
    def trusted(self) -> bool:
        """Whether the consensus value may be used."""
        return self.fault_status is not FaultStatus.NO_CONSENSUS

    def to_dict(self) -> dict:
        """Export as dictionary for JSON serialization."""
        return {
            "consensus": self.consensus,
            "rejected": list(self.rejected),
            "fault_status": self.fault_status.value,
        }
