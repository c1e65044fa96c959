"""
Base property record source interface.
"""

from abc import ABC, abstractmethod
from typing import Any, List, Mapping, Optional

from core.similarity_engine import PropertyRecord


# Provider column names (Texas appraisal district open data)
COLUMN_ID = "propid"
COLUMN_AREA = "imprvmainarea"
COLUMN_MARKET_VALUE = "prevvalmarket"
COLUMN_LAND_VALUE = "prevvalland"
COLUMN_YEAR_BUILT = "imprvyearbuilt"
COLUMN_SUBDIVISION = "legalabssubcode"

SCORING_COLUMNS = (
    COLUMN_AREA,
    COLUMN_MARKET_VALUE,
    COLUMN_LAND_VALUE,
    COLUMN_YEAR_BUILT,
)


class ProviderError(ValueError):
    """The provider answered, but not with usable rows."""


class PropertyRecordSource(ABC):
    """Abstract base class for property record providers."""

    @abstractmethod
    async def fetch_target(self, property_id: str) -> Optional[PropertyRecord]:
        """
        Look up one parcel by identifier.

        Args:
            property_id: Provider identifier of the parcel.

        Returns:
            PropertyRecord with the scoring attributes and subdivision code,
            or None if no such parcel exists.
        """
        pass

    @abstractmethod
    async def fetch_candidates(
        self,
        subdivision_code: str,
        exclude_id: str,
    ) -> List[PropertyRecord]:
        """
        Fetch every parcel in a subdivision except one.

        Args:
            subdivision_code: Legal subdivision code to match exactly.
            exclude_id: Identifier to leave out (the target).

        Returns:
            PropertyRecords with identifier and scoring attributes.
        """
        pass


def _to_float(value: Any) -> Optional[float]:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value)
    text = str(value).strip().replace(",", "")
    if not text:
        return None
    try:
        return float(text)
    except ValueError:
        return None


def _to_int(value: Any) -> Optional[int]:
    number = _to_float(value)
    return int(number) if number is not None else None


def record_from_row(row: Mapping[str, Any], property_id: Optional[str] = None) -> PropertyRecord:
    """
    Normalise one provider row into a PropertyRecord.

    The provider serialises numbers as strings; values that cannot be
    parsed are treated as absent.

    Args:
        row: Raw provider row.
        property_id: Identifier to use when the row does not carry one
            (target lookups do not select it).
    """
    raw_id = row.get(COLUMN_ID, property_id)
    subdivision = row.get(COLUMN_SUBDIVISION)

    return PropertyRecord(
        id=str(raw_id) if raw_id is not None else "",
        area=_to_float(row.get(COLUMN_AREA)),
        market_value=_to_float(row.get(COLUMN_MARKET_VALUE)),
        land_value=_to_float(row.get(COLUMN_LAND_VALUE)),
        year_built=_to_int(row.get(COLUMN_YEAR_BUILT)),
        subdivision_code=str(subdivision) if subdivision is not None else None,
    )
