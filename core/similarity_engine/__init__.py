"""
Similarity Engine v1.0

Finds the most similar parcels within a target parcel's legal subdivision,
ranked by a weighted-difference score over improvement area, market value,
land value and year built, with an optional price-bias penalty.
"""

from .models import (
    PropertyRecord,
    Weights,
    Cutoffs,
    PriceBias,
    AlgorithmConfig,
    ScoredCandidate,
    ComparisonResult,
)
from .errors import (
    SimilarityEngineError,
    MissingParameter,
    InvalidParameter,
    TargetNotFound,
)
from .algorithm import (
    FALLBACK_ALGORITHM,
    resolve_algorithm,
    load_default_algorithm,
    get_default_algorithm,
)
from .filters import CandidateFilter, rel_diff
from .scoring import SimilarityScorer, availability_factor
from .ranking import DEFAULT_LIMIT, rank_candidates
from .engine import SimilarityEngine

__all__ = [
    # Models
    "PropertyRecord",
    "Weights",
    "Cutoffs",
    "PriceBias",
    "AlgorithmConfig",
    "ScoredCandidate",
    "ComparisonResult",
    # Errors
    "SimilarityEngineError",
    "MissingParameter",
    "InvalidParameter",
    "TargetNotFound",
    # Configuration
    "FALLBACK_ALGORITHM",
    "resolve_algorithm",
    "load_default_algorithm",
    "get_default_algorithm",
    # Engine
    "CandidateFilter",
    "rel_diff",
    "SimilarityScorer",
    "availability_factor",
    "DEFAULT_LIMIT",
    "rank_candidates",
    "SimilarityEngine",
]

__version__ = "1.0"
