"""
Subdivision Comparable Finder - Core Business Logic

This module provides the comparable search pipeline:
1. Configuration Resolution (default algorithm + caller override)
2. Candidate Filtering (per-attribute tolerance cutoffs)
3. Similarity Scoring (weighted dissimilarity + price bias)
4. Ranking (ascending score, truncated to the requested limit)
"""

# Similarity Engine v1.0
from .similarity_engine import (
    PropertyRecord,
    Weights,
    Cutoffs,
    PriceBias,
    AlgorithmConfig,
    ScoredCandidate,
    ComparisonResult,
    SimilarityEngineError,
    MissingParameter,
    InvalidParameter,
    TargetNotFound,
    FALLBACK_ALGORITHM,
    resolve_algorithm,
    get_default_algorithm,
    CandidateFilter,
    SimilarityScorer,
    SimilarityEngine,
)

# Request pipeline
from .comparables import (
    ComparisonRequest,
    SimilarPropertyFinder,
    get_similar_property_finder,
)

__all__ = [
    # Similarity Engine v1.0
    "PropertyRecord",
    "Weights",
    "Cutoffs",
    "PriceBias",
    "AlgorithmConfig",
    "ScoredCandidate",
    "ComparisonResult",
    "SimilarityEngineError",
    "MissingParameter",
    "InvalidParameter",
    "TargetNotFound",
    "FALLBACK_ALGORITHM",
    "resolve_algorithm",
    "get_default_algorithm",
    "CandidateFilter",
    "SimilarityScorer",
    "SimilarityEngine",
    # Request pipeline
    "ComparisonRequest",
    "SimilarPropertyFinder",
    "get_similar_property_finder",
]
