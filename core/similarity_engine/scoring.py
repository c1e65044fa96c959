"""
Similarity Scorer for the Similarity Engine

Computes a weighted dissimilarity score per candidate:
- Area, market value and land value contribute their relative difference
- Year built contributes the absolute year gap divided by 100
- An optional price-bias penalty is added for pricier candidates

Lower scores mean more similar parcels.
"""

from .filters import rel_diff
from .models import PriceBias, PropertyRecord, ScoredCandidate, Weights


# Fixed divisor applied to the year gap before weighting
YEAR_SCALE = 100


def availability_factor(candidate_count: int, price_bias: PriceBias) -> float:
    """
    Fraction of the full price-bias strength to apply.

    Computed from the raw (pre-filter) candidate count, so the bias tracks
    how many comparables exist in the subdivision rather than how many pass
    the cutoffs. Zero when price bias is disabled; saturates at 1. A zero
    threshold saturates immediately; a negative one is applied as given.

    Args:
        candidate_count: Number of candidates before filtering
        price_bias: Price-bias parameters

    Returns:
        Availability factor, at most 1
    """
    if not price_bias.enabled:
        return 0.0

    if price_bias.full_bias_at == 0:
        return 1.0

    return min(1.0, candidate_count / price_bias.full_bias_at)


class SimilarityScorer:
    """
    Scores candidates against a target using fixed weights.

    The price-bias term can only increase a candidate's score: candidates
    priced above the target are pushed down the ranking, those at or below
    the target's price are left untouched.
    """

    def __init__(self, weights: Weights, price_bias: PriceBias):
        self._weights = weights
        self._price_bias = price_bias

    def base_similarity(self, target: PropertyRecord, candidate: PropertyRecord) -> float:
        """Weighted dissimilarity before any price bias."""
        w = self._weights
        year_gap = abs(candidate.year_built - target.year_built)

        return (
            w.area * rel_diff(candidate.area, target.area)
            + w.market * rel_diff(candidate.market_value, target.market_value)
            + w.land * rel_diff(candidate.land_value, target.land_value)
            + w.year * (year_gap / YEAR_SCALE)
        )

    def score(
        self,
        target: PropertyRecord,
        candidate: PropertyRecord,
        availability: float,
    ) -> ScoredCandidate:
        """
        Score one candidate.

        Args:
            target: The parcel comparables are sought for
            candidate: An admitted candidate
            availability: Availability factor for this request

        Returns:
            ScoredCandidate with final and base similarity
        """
        base = self.base_similarity(target, candidate)

        contribution = 0.0
        adjustment = 0.0
        if self._price_bias.enabled:
            price_ratio = candidate.market_value / target.market_value
            contribution = max(0.0, price_ratio - 1)
            adjustment = availability * self._price_bias.weight * contribution

        return ScoredCandidate(
            record=candidate,
            similarity=base + adjustment,
            base_similarity=base,
            price_bias_contribution=contribution,
            price_bias_adjustment=adjustment,
        )
