"""
Candidate Filter for the Similarity Engine

Implements hard tolerance filters for comparable selection:
- Required attributes (area, market value, land value, year built)
- Improvement area (relative difference)
- Market value (relative difference)
- Land value (relative difference)
- Year built (absolute difference in years)
"""

import logging
from typing import List, Sequence

from .models import Cutoffs, PropertyRecord


logger = logging.getLogger(__name__)


def rel_diff(a: float, b: float) -> float:
    """
    Relative difference of two positive numbers.

    |a - b| / max(a, b): symmetric, zero iff equal, and always in [0, 1)
    for positive inputs. Undefined when both are zero.
    """
    return abs(a - b) / max(a, b)


class CandidateFilter:
    """
    Applies per-attribute tolerance cutoffs to candidate records.

    A candidate must pass ALL cutoffs to be scored.
    """

    def __init__(self, cutoffs: Cutoffs):
        """
        Initialize filter with tolerance cutoffs.

        Args:
            cutoffs: Maximum allowed differences against the target
        """
        self._cutoffs = cutoffs

    @property
    def cutoffs(self) -> Cutoffs:
        return self._cutoffs

    def filter_candidates(
        self,
        target: PropertyRecord,
        candidates: Sequence[PropertyRecord],
    ) -> List[PropertyRecord]:
        """
        Filter candidates to those within tolerance of the target.

        Order is preserved. A target that is itself missing a scoring
        attribute cannot be compared against, so nothing is admitted.

        Args:
            target: The parcel comparables are sought for
            candidates: All parcels in the target's subdivision

        Returns:
            Admitted candidates, in input order
        """
        if not target.has_scoring_attributes:
            logger.warning(
                "Target %s is missing scoring attributes; no candidates admitted",
                target.id,
            )
            return []

        admitted = [c for c in candidates if self.is_eligible(target, c)]

        logger.debug(
            "Filtered %d candidates to %d for target %s",
            len(candidates),
            len(admitted),
            target.id,
        )
        return admitted

    def is_eligible(self, target: PropertyRecord, candidate: PropertyRecord) -> bool:
        """Check a single candidate against every cutoff."""
        if not candidate.has_scoring_attributes:
            return False

        cutoffs = self._cutoffs

        if rel_diff(candidate.area, target.area) > cutoffs.area_pct:
            return False

        if rel_diff(candidate.market_value, target.market_value) > cutoffs.market_pct:
            return False

        if rel_diff(candidate.land_value, target.land_value) > cutoffs.land_pct:
            return False

        if abs(candidate.year_built - target.year_built) > cutoffs.year_diff:
            return False

        return True
