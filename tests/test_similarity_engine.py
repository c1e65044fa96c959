"""
Tests for Similarity Engine v1.0

Verifies:
- Relative difference bounds and symmetry
- Cutoff filtering is an order-preserving subsequence
- Missing and zero attributes exclude a candidate
- Weighted score, including the fixed year scale
- Price bias only penalises pricier candidates
- Availability factor uses the pre-filter candidate count
- Ranking is stable and truncated to the limit
"""

import pytest
from dataclasses import replace
from pathlib import Path
import sys

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from core.similarity_engine import (
    FALLBACK_ALGORITHM,
    AlgorithmConfig,
    CandidateFilter,
    Cutoffs,
    PriceBias,
    PropertyRecord,
    ScoredCandidate,
    SimilarityEngine,
    SimilarityScorer,
    Weights,
    availability_factor,
    rank_candidates,
    rel_diff,
)


# =============================================================================
# Test Fixtures
# =============================================================================

@pytest.fixture
def target():
    """Standard target parcel."""
    return PropertyRecord(
        id="T1",
        area=2000,
        market_value=300000,
        land_value=50000,
        year_built=2005,
        subdivision_code="S100",
    )


@pytest.fixture
def create_record():
    """Factory fixture for candidate parcels close to the target."""
    def _create(
        record_id: str = "C1",
        area: float = 2050,
        market_value: float = 310000,
        land_value: float = 51000,
        year_built: int = 2006,
    ) -> PropertyRecord:
        return PropertyRecord(
            id=record_id,
            area=area,
            market_value=market_value,
            land_value=land_value,
            year_built=year_built,
        )
    return _create


@pytest.fixture
def no_bias_algorithm():
    """Default configuration with price bias disabled."""
    return replace(
        FALLBACK_ALGORITHM,
        price_bias=replace(FALLBACK_ALGORITHM.price_bias, enabled=False),
    )


def expected_base(target, candidate, weights=FALLBACK_ALGORITHM.weights):
    return (
        weights.area * abs(candidate.area - target.area) / max(candidate.area, target.area)
        + weights.market * abs(candidate.market_value - target.market_value)
        / max(candidate.market_value, target.market_value)
        + weights.land * abs(candidate.land_value - target.land_value)
        / max(candidate.land_value, target.land_value)
        + weights.year * abs(candidate.year_built - target.year_built) / 100
    )


# =============================================================================
# Test: Relative Difference
# =============================================================================

class TestRelDiff:
    """Tests for the bounded relative difference."""

    @pytest.mark.parametrize("a,b", [
        (1, 2),
        (2000, 2050),
        (0.5, 1000000),
        (300000, 310000),
    ])
    def test_bounded_and_symmetric(self, a, b):
        """Result lies in [0, 1) and does not depend on argument order."""
        assert 0 <= rel_diff(a, b) < 1
        assert rel_diff(a, b) == rel_diff(b, a)

    def test_equal_values_are_zero(self):
        """Identical values have no difference."""
        assert rel_diff(2000, 2000) == 0

    def test_divides_by_larger_value(self):
        """Denominator is the larger of the two values."""
        assert rel_diff(50, 100) == pytest.approx(0.5)
        assert rel_diff(100, 50) == pytest.approx(0.5)


# =============================================================================
# Test: Candidate Filter
# =============================================================================

class TestCandidateFilter:
    """Tests for per-attribute tolerance cutoffs."""

    def test_close_candidate_admitted(self, target, create_record):
        """Candidate within every cutoff is admitted."""
        flt = CandidateFilter(FALLBACK_ALGORITHM.cutoffs)

        assert flt.filter_candidates(target, [create_record()]) == [create_record()]

    @pytest.mark.parametrize("overrides", [
        {"area": 2300},            # area relDiff ~0.13 > 0.1
        {"market_value": 400000},  # market relDiff 0.25 > 0.2
        {"land_value": 80000},     # land relDiff 0.375 > 0.3
        {"year_built": 2016},      # 11 years > 10
    ])
    def test_each_cutoff_rejects(self, target, create_record, overrides):
        """Exceeding any single cutoff rejects the candidate."""
        flt = CandidateFilter(FALLBACK_ALGORITHM.cutoffs)

        assert flt.filter_candidates(target, [create_record(**overrides)]) == []

    def test_boundary_values_admitted(self, target, create_record):
        """A difference exactly at the cutoff is admitted."""
        flt = CandidateFilter(FALLBACK_ALGORITHM.cutoffs)
        candidate = create_record(year_built=2015, market_value=375000)

        # market relDiff = 75000 / 375000 = 0.2 exactly
        assert flt.is_eligible(target, candidate)

    @pytest.mark.parametrize("field_name", ["area", "market_value", "land_value", "year_built"])
    def test_missing_attribute_excluded(self, target, create_record, field_name):
        """A candidate with an absent attribute is never admitted."""
        candidate = replace(create_record(), **{field_name: None})
        flt = CandidateFilter(Cutoffs(area_pct=1, market_pct=1, land_pct=1, year_diff=1000))

        assert flt.filter_candidates(target, [candidate]) == []

    def test_zero_land_value_treated_as_missing(self, target, create_record):
        """Zero is distinct from absent but still excludes the candidate."""
        candidate = create_record(land_value=0)
        flt = CandidateFilter(Cutoffs(area_pct=1, market_pct=1, land_pct=1, year_diff=1000))

        assert not candidate.has_scoring_attributes
        assert flt.filter_candidates(target, [candidate]) == []

    def test_output_is_ordered_subsequence(self, target, create_record):
        """Admitted records keep their input order."""
        candidates = [
            create_record("A"),
            create_record("B", area=5000),
            create_record("C", area=1990),
            create_record("D", year_built=None),
            create_record("E", market_value=299000),
        ]
        flt = CandidateFilter(FALLBACK_ALGORITHM.cutoffs)

        admitted = flt.filter_candidates(target, candidates)

        assert [r.id for r in admitted] == ["A", "C", "E"]

    def test_incomplete_target_admits_nothing(self, target, create_record):
        """A target without all scoring attributes cannot be compared."""
        flt = CandidateFilter(FALLBACK_ALGORITHM.cutoffs)
        incomplete = replace(target, year_built=None)

        assert flt.filter_candidates(incomplete, [create_record()]) == []


# =============================================================================
# Test: Similarity Scorer
# =============================================================================

class TestSimilarityScorer:
    """Tests for the weighted score and price bias."""

    def test_worked_example_without_bias(self, target, create_record, no_bias_algorithm):
        """Close candidate scores the weighted sum of its differences."""
        scorer = SimilarityScorer(no_bias_algorithm.weights, no_bias_algorithm.price_bias)
        candidate = create_record()

        scored = scorer.score(target, candidate, availability=1.0)

        # 0.4*50/2050 + 0.2*10000/310000 + 0.1*1000/51000 + 0.3*1/100
        assert scored.base_similarity == pytest.approx(0.021168, abs=1e-5)
        assert scored.similarity == scored.base_similarity
        assert scored.price_bias_contribution == 0
        assert scored.price_bias_adjustment == 0

    def test_year_gap_is_scaled_not_relative(self, target, create_record):
        """Year term is |gap| / 100, regardless of the year magnitudes."""
        weights = Weights(area=0, market=0, land=0, year=1)
        scorer = SimilarityScorer(weights, PriceBias(enabled=False, weight=0, full_bias_at=50))

        scored = scorer.score(target, create_record(year_built=2012), availability=0)

        assert scored.base_similarity == pytest.approx(0.07)

    def test_pricier_candidate_penalised(self, target, create_record):
        """Price bias adds availability * weight * (ratio - 1)."""
        scorer = SimilarityScorer(FALLBACK_ALGORITHM.weights, FALLBACK_ALGORITHM.price_bias)
        candidate = create_record(market_value=330000)

        scored = scorer.score(target, candidate, availability=0.5)

        assert scored.price_bias_contribution == pytest.approx(0.1)
        assert scored.price_bias_adjustment == pytest.approx(0.5 * 0.15 * 0.1)
        assert scored.similarity == pytest.approx(scored.base_similarity + 0.0075)

    def test_cheaper_candidate_not_penalised(self, target, create_record):
        """Candidates at or below the target price get no bias term."""
        scorer = SimilarityScorer(FALLBACK_ALGORITHM.weights, FALLBACK_ALGORITHM.price_bias)

        for price in (270000, 300000):
            scored = scorer.score(target, create_record(market_value=price), availability=1.0)
            assert scored.price_bias_contribution == 0
            assert scored.similarity == scored.base_similarity

    def test_disabled_bias_ignores_price(self, target, create_record, no_bias_algorithm):
        """With bias disabled, similarity equals base similarity at any price."""
        scorer = SimilarityScorer(no_bias_algorithm.weights, no_bias_algorithm.price_bias)

        for price in (250000, 300000, 360000):
            scored = scorer.score(target, create_record(market_value=price), availability=1.0)
            assert scored.similarity == scored.base_similarity
            assert scored.price_bias_contribution == 0


# =============================================================================
# Test: Availability Factor
# =============================================================================

class TestAvailabilityFactor:
    """Tests for liquidity scaling of the price bias."""

    def test_half_of_full_bias(self):
        """25 raw candidates with fullBiasAt=50 gives 0.5."""
        assert availability_factor(25, FALLBACK_ALGORITHM.price_bias) == pytest.approx(0.5)

    def test_saturates_at_one(self):
        """Counts above fullBiasAt are capped."""
        assert availability_factor(500, FALLBACK_ALGORITHM.price_bias) == 1.0

    def test_zero_when_disabled(self):
        """Disabled bias has no availability."""
        bias = PriceBias(enabled=False, weight=0.15, full_bias_at=50)

        assert availability_factor(25, bias) == 0.0

    def test_zero_full_bias_at_saturates(self):
        """A zero threshold applies the full bias."""
        bias = PriceBias(enabled=True, weight=0.15, full_bias_at=0)

        assert availability_factor(3, bias) == 1.0

    def test_negative_full_bias_at_not_corrected(self):
        """An out-of-range threshold flows through the formula unchanged."""
        bias = PriceBias(enabled=True, weight=0.15, full_bias_at=-50)

        assert availability_factor(25, bias) == pytest.approx(-0.5)


# =============================================================================
# Test: Ranker
# =============================================================================

def _scored(record_id: str, similarity: float) -> ScoredCandidate:
    return ScoredCandidate(
        record=PropertyRecord(id=record_id),
        similarity=similarity,
        base_similarity=similarity,
    )


class TestRanker:
    """Tests for ordering and truncation."""

    def test_ascending_by_similarity(self):
        """Lower scores rank first."""
        ranked = rank_candidates([_scored("A", 0.3), _scored("B", 0.1), _scored("C", 0.2)])

        assert [c.record.id for c in ranked] == ["B", "C", "A"]

    def test_ties_keep_input_order(self):
        """Equal scores preserve their original order."""
        ranked = rank_candidates([
            _scored("A", 0.2),
            _scored("B", 0.1),
            _scored("C", 0.2),
            _scored("D", 0.1),
        ])

        assert [c.record.id for c in ranked] == ["B", "D", "A", "C"]

    def test_truncated_to_limit(self):
        """Output length is min(limit, input length)."""
        scored = [_scored(str(i), i / 100) for i in range(15)]

        assert len(rank_candidates(scored, 5)) == 5
        assert len(rank_candidates(scored[:3], 5)) == 3

    def test_default_limit_is_ten(self):
        """Unspecified limit returns at most ten."""
        scored = [_scored(str(i), i / 100) for i in range(15)]

        assert len(rank_candidates(scored)) == 10


# =============================================================================
# Test: Engine Pipeline
# =============================================================================

class TestSimilarityEngine:
    """Tests for the full filter, score, rank pipeline."""

    def test_counts_and_ordering(self, target, create_record, no_bias_algorithm):
        """Result carries raw and filtered counts and ascending scores."""
        candidates = [
            create_record("far", area=4000),
            create_record("close", area=2010, market_value=301000, land_value=50100),
            create_record("mid"),
            create_record("missing", land_value=None),
        ]
        engine = SimilarityEngine(no_bias_algorithm)

        result = engine.compare(target, candidates, limit=10)

        assert result.total_candidates == 4
        assert result.filtered_candidates == 2
        assert [c.record.id for c in result.comps] == ["close", "mid"]
        scores = [c.similarity for c in result.comps]
        assert scores == sorted(scores)
        assert result.subdivision_code == "S100"

    def test_filtered_count_before_truncation(self, target, create_record, no_bias_algorithm):
        """filtered_candidates counts every admitted record, not just those returned."""
        candidates = [create_record(f"C{i}", area=2000 + i) for i in range(8)]
        engine = SimilarityEngine(no_bias_algorithm)

        result = engine.compare(target, candidates, limit=3)

        assert result.filtered_candidates == 8
        assert result.comp_count == 3

    def test_availability_from_raw_count(self, target, create_record):
        """Bias strength depends on all 25 candidates, not the few admitted."""
        pricier = create_record("pricier", market_value=330000)
        rejects = [create_record(f"R{i}", area=9000) for i in range(24)]
        engine = SimilarityEngine(FALLBACK_ALGORITHM)

        result = engine.compare(target, [pricier] + rejects)

        assert result.total_candidates == 25
        assert result.filtered_candidates == 1
        comp = result.comps[0]
        assert comp.price_bias_adjustment == pytest.approx(0.5 * 0.15 * 0.1)

    def test_bias_reorders_equal_base_scores(self, target, create_record):
        """Of two equally similar candidates, the pricier one ranks lower."""
        above = create_record("above", market_value=310000)
        below = create_record("below", market_value=290000)
        algorithm = AlgorithmConfig(
            weights=Weights(area=0, market=0, land=0, year=1),
            cutoffs=FALLBACK_ALGORITHM.cutoffs,
            price_bias=FALLBACK_ALGORITHM.price_bias,
        )

        result = SimilarityEngine(algorithm).compare(target, [above, below])

        assert [c.record.id for c in result.comps] == ["below", "above"]

    def test_no_candidates(self, target):
        """An empty subdivision yields an empty, well-formed result."""
        result = SimilarityEngine(FALLBACK_ALGORITHM).compare(target, [])

        assert result.total_candidates == 0
        assert result.filtered_candidates == 0
        assert result.comps == []


# =============================================================================
# Test: Output Format
# =============================================================================

class TestOutputFormat:
    """Tests for JSON output shape."""

    def test_to_dict_contains_required_fields(self, target, create_record, no_bias_algorithm):
        """Result dict uses the caller-facing key names."""
        result = SimilarityEngine(no_bias_algorithm).compare(target, [create_record()])

        data = result.to_dict()

        assert set(data) == {
            "target", "subdivisionCode", "totalCandidates", "filteredCandidates", "comps",
        }
        comp = data["comps"][0]
        for key in ("id", "area", "marketValue", "landValue", "yearBuilt",
                    "similarity", "baseSimilarity", "priceBias"):
            assert key in comp
        assert data["target"]["id"] == "T1"
