"""
Similarity Engine pipeline

Pipeline order:
1. FILTER - Apply per-attribute tolerance cutoffs
2. SCORE - Weighted dissimilarity plus optional price bias
3. RANK - Ascending by score, truncated to the requested limit
"""

import logging
from typing import Sequence

from .filters import CandidateFilter
from .models import AlgorithmConfig, ComparisonResult, PropertyRecord
from .ranking import DEFAULT_LIMIT, rank_candidates
from .scoring import SimilarityScorer, availability_factor


logger = logging.getLogger(__name__)


class SimilarityEngine:
    """
    Ranks candidate parcels by similarity to a target parcel.

    Pure computation over in-memory records: fetching the target and its
    subdivision peers is the caller's job.
    """

    def __init__(self, algorithm: AlgorithmConfig):
        """
        Initialize engine with a resolved configuration.

        Args:
            algorithm: Weights, cutoffs and price-bias parameters
        """
        self._algorithm = algorithm
        self._filter = CandidateFilter(algorithm.cutoffs)
        self._scorer = SimilarityScorer(algorithm.weights, algorithm.price_bias)

    @property
    def algorithm(self) -> AlgorithmConfig:
        return self._algorithm

    def compare(
        self,
        target: PropertyRecord,
        candidates: Sequence[PropertyRecord],
        limit: int = DEFAULT_LIMIT,
    ) -> ComparisonResult:
        """
        Find the most similar candidates to a target.

        Args:
            target: The parcel comparables are sought for
            candidates: Every parcel in the target's subdivision, excluding
                the target itself
            limit: Maximum number of comparables to return

        Returns:
            ComparisonResult with counts and ranked comparables
        """
        # Availability uses the raw count, not the filtered one
        availability = availability_factor(len(candidates), self._algorithm.price_bias)

        admitted = self._filter.filter_candidates(target, candidates)

        scored = [
            self._scorer.score(target, candidate, availability)
            for candidate in admitted
        ]
        comps = rank_candidates(scored, limit)

        logger.info(
            "Target %s: %d candidates, %d within cutoffs, %d returned",
            target.id,
            len(candidates),
            len(admitted),
            len(comps),
        )

        return ComparisonResult(
            target=target,
            subdivision_code=target.subdivision_code,
            total_candidates=len(candidates),
            filtered_candidates=len(admitted),
            comps=comps,
        )
