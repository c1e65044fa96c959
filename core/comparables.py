"""
Similar Property Finder - Request Pipeline

Resolves the algorithm configuration, fetches the target parcel and its
subdivision peers from the property data provider, and runs the
Similarity Engine over them.
"""

import logging
from dataclasses import dataclass
from typing import Any, Mapping, Optional, Union

from .similarity_engine import (
    AlgorithmConfig,
    ComparisonResult,
    DEFAULT_LIMIT,
    InvalidParameter,
    MissingParameter,
    SimilarityEngine,
    TargetNotFound,
    get_default_algorithm,
    resolve_algorithm,
)


logger = logging.getLogger(__name__)


@dataclass
class ComparisonRequest:
    """
    Caller-facing request for comparables.

    custom_algorithm may be a JSON object or a JSON string; it is merged
    onto the default configuration per group.
    """
    property_id: Optional[str]
    limit: Optional[int] = None
    custom_algorithm: Union[str, Mapping[str, Any], None] = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ComparisonRequest":
        """Parse the wire form: {propertyId, limit, customAlgorithm}."""
        return cls(
            property_id=data.get("propertyId"),
            limit=data.get("limit"),
            custom_algorithm=data.get("customAlgorithm"),
        )


class SimilarPropertyFinder:
    """
    Finds the most similar parcels in a target parcel's subdivision.

    Pipeline order:
    1. VALIDATE - Property id present, limit usable
    2. CONFIGURE - Merge caller override onto the default configuration
    3. FETCH - Target parcel, then its subdivision peers
    4. COMPARE - Filter, score and rank with the Similarity Engine
    """

    def __init__(
        self,
        source,
        base_algorithm: Optional[AlgorithmConfig] = None,
        default_limit: int = DEFAULT_LIMIT,
    ):
        """
        Initialize the finder.

        Args:
            source: PropertyRecordSource to fetch parcels from
            base_algorithm: Configuration to merge overrides onto
                (default: the process-wide default configuration)
            default_limit: Result limit used when a request omits one
        """
        self._source = source
        self._base_algorithm = base_algorithm
        self._default_limit = default_limit

    @property
    def base_algorithm(self) -> AlgorithmConfig:
        if self._base_algorithm is not None:
            return self._base_algorithm
        return get_default_algorithm()

    def _validate(self, request: ComparisonRequest) -> tuple[str, int]:
        property_id = request.property_id
        if property_id is None or not str(property_id).strip():
            raise MissingParameter("propertyId")

        limit = request.limit
        if isinstance(limit, bool) or (limit is not None and not isinstance(limit, int)):
            raise InvalidParameter("limit", "must be an integer")
        if limit is not None and limit < 0:
            raise InvalidParameter("limit", "must be positive")

        return str(property_id).strip(), limit or self._default_limit

    async def find(self, request: ComparisonRequest) -> ComparisonResult:
        """
        Run a full comparable search.

        Args:
            request: Property id, optional limit and algorithm override

        Returns:
            ComparisonResult for the target parcel

        Raises:
            MissingParameter: If the property id is absent.
            InvalidParameter: If the limit is not a non-negative integer.
            TargetNotFound: If the provider has no such parcel.
            requests.RequestException, ProviderError: If a provider fetch fails.
        """
        property_id, limit = self._validate(request)

        algorithm = resolve_algorithm(self.base_algorithm, request.custom_algorithm)

        target = await self._source.fetch_target(property_id)
        if target is None:
            raise TargetNotFound(property_id)

        if not target.subdivision_code:
            logger.warning(
                "Target %s has no subdivision code; no candidates to compare",
                property_id,
            )
            candidates = []
        else:
            candidates = await self._source.fetch_candidates(
                target.subdivision_code,
                property_id,
            )

        engine = SimilarityEngine(algorithm)
        return engine.compare(target, candidates, limit)


# Singleton instance for the application
_similar_property_finder: Optional[SimilarPropertyFinder] = None


def get_similar_property_finder() -> SimilarPropertyFinder:
    """Get the finder singleton, wired to the configured Socrata source."""
    global _similar_property_finder
    if _similar_property_finder is None:
        from provider import SocrataPropertyRecordSource
        from utils.config import Config

        config = Config.load()
        source = SocrataPropertyRecordSource(
            resource_url=config.property_data_url,
            app_token=config.socrata_app_token,
            timeout=config.request_timeout,
            candidate_limit=config.candidate_fetch_limit,
        )
        # Prime the default configuration from the configured source
        get_default_algorithm(config.default_algorithm_source or None)
        _similar_property_finder = SimilarPropertyFinder(
            source,
            default_limit=config.default_result_limit,
        )
    return _similar_property_finder
