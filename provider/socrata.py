"""
Socrata property record source.

Queries the Texas open-data appraisal roll (data.texas.gov) through the
Socrata SODA API. Each lookup is a single bounded request:
- Target: exact match on propid
- Candidates: exact match on legalabssubcode, excluding the target
"""

import asyncio
import logging
from typing import Any, Callable, Dict, List, Optional

import requests

from core.similarity_engine import PropertyRecord

from .base import (
    COLUMN_ID,
    COLUMN_SUBDIVISION,
    SCORING_COLUMNS,
    PropertyRecordSource,
    ProviderError,
    record_from_row,
)


logger = logging.getLogger(__name__)


# =============================================================================
# Configuration
# =============================================================================

DEFAULT_RESOURCE_URL = "https://data.texas.gov/resource/nne4-8riu.json"
USER_AGENT = "SubdivisionComps/1.0"
REQUEST_TIMEOUT_SECONDS = 30
CANDIDATE_FETCH_LIMIT = 5000

TARGET_SELECT = ",".join(SCORING_COLUMNS + (COLUMN_SUBDIVISION,))
CANDIDATE_SELECT = ",".join((COLUMN_ID,) + SCORING_COLUMNS)


def soql_quote(value: str) -> str:
    """Quote a string literal for a SoQL $where clause."""
    return "'" + str(value).replace("'", "''") + "'"


class SocrataPropertyRecordSource(PropertyRecordSource):
    """
    Property record source backed by a Socrata resource endpoint.

    Features:
    - One bounded request per lookup ($limit), no pagination
    - Optional app token for higher rate limits
    - Blocking HTTP runs in a worker thread

    Each query opens its own session, so one source can serve concurrent
    requests from several worker threads.
    """

    def __init__(
        self,
        resource_url: str = DEFAULT_RESOURCE_URL,
        app_token: str = "",
        timeout: float = REQUEST_TIMEOUT_SECONDS,
        candidate_limit: int = CANDIDATE_FETCH_LIMIT,
        session_factory: Callable[[], requests.Session] = requests.Session,
    ):
        self._resource_url = resource_url
        self._timeout = timeout
        self._candidate_limit = candidate_limit
        self._session_factory = session_factory
        self._headers = {
            "User-Agent": USER_AGENT,
            "Accept": "application/json",
        }
        if app_token:
            self._headers["X-App-Token"] = app_token

    @property
    def resource_url(self) -> str:
        return self._resource_url

    def _get_rows(self, params: Dict[str, Any]) -> List[Dict[str, Any]]:
        """
        Run one SODA query.

        Raises:
            requests.RequestException: On network or HTTP errors.
            ProviderError: If the response is not a JSON list of rows.
        """
        logger.debug("Querying %s with %s", self._resource_url, params)

        session = self._session_factory()
        try:
            session.headers.update(self._headers)
            response = session.get(
                self._resource_url,
                params=params,
                timeout=self._timeout,
            )
            response.raise_for_status()
            payload = response.json()
        finally:
            session.close()

        if not isinstance(payload, list):
            raise ProviderError(f"Expected list payload from {self._resource_url}")
        return payload

    def query_target(self, property_id: str) -> Optional[PropertyRecord]:
        """Synchronous target lookup."""
        rows = self._get_rows({
            "$select": TARGET_SELECT,
            "$where": f"{COLUMN_ID}={soql_quote(property_id)}",
            "$limit": 1,
        })
        if not rows:
            return None
        return record_from_row(rows[0], property_id=property_id)

    def query_candidates(self, subdivision_code: str, exclude_id: str) -> List[PropertyRecord]:
        """Synchronous candidate lookup."""
        rows = self._get_rows({
            "$select": CANDIDATE_SELECT,
            "$where": (
                f"{COLUMN_SUBDIVISION}={soql_quote(subdivision_code)}"
                f" AND {COLUMN_ID}!={soql_quote(exclude_id)}"
            ),
            "$limit": self._candidate_limit,
        })

        if len(rows) >= self._candidate_limit:
            logger.warning(
                "Candidate fetch for subdivision %s hit the %d row limit",
                subdivision_code,
                self._candidate_limit,
            )

        return [record_from_row(row) for row in rows]

    async def fetch_target(self, property_id: str) -> Optional[PropertyRecord]:
        return await asyncio.to_thread(self.query_target, property_id)

    async def fetch_candidates(
        self,
        subdivision_code: str,
        exclude_id: str,
    ) -> List[PropertyRecord]:
        return await asyncio.to_thread(self.query_candidates, subdivision_code, exclude_id)
