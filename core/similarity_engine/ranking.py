"""
Ranker for the Similarity Engine.
"""

from typing import List, Sequence

from .models import ScoredCandidate


DEFAULT_LIMIT = 10


def rank_candidates(
    scored: Sequence[ScoredCandidate],
    limit: int = DEFAULT_LIMIT,
) -> List[ScoredCandidate]:
    """
    Order candidates from most to least similar and keep the first `limit`.

    The sort is stable: candidates with equal scores keep their input order.
    """
    ranked = sorted(scored, key=lambda c: c.similarity)
    return ranked[: max(0, limit)]
