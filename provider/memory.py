"""
In-memory property record source for offline runs and testing.
Serves records from a list or a JSON file without external requests.
"""

import json
from pathlib import Path
from typing import Any, Iterable, List, Mapping, Optional, Union

from core.similarity_engine import PropertyRecord

from .base import PropertyRecordSource, record_from_row


class InMemoryPropertyRecordSource(PropertyRecordSource):
    """Property record source over a fixed set of parcels."""

    def __init__(self, records: Iterable[PropertyRecord] = ()):
        """
        Initialize the source.

        Args:
            records: Parcels to serve. Each must carry its subdivision code
                to be found by a candidate lookup.
        """
        self._records: List[PropertyRecord] = list(records)

    @classmethod
    def from_rows(cls, rows: Iterable[Mapping[str, Any]]) -> "InMemoryPropertyRecordSource":
        """Build a source from provider-shaped rows (propid, imprvmainarea, ...)."""
        return cls(record_from_row(row) for row in rows)

    @classmethod
    def from_file(cls, path: Union[str, Path]) -> "InMemoryPropertyRecordSource":
        """
        Load provider-shaped rows from a JSON file.

        Raises:
            OSError: If the file cannot be read.
            ValueError: If the file is not a JSON list.
        """
        rows = json.loads(Path(path).read_text(encoding="utf-8"))
        if not isinstance(rows, list):
            raise ValueError(f"Expected a JSON list of records in {path}")
        return cls.from_rows(rows)

    def __len__(self) -> int:
        return len(self._records)

    async def fetch_target(self, property_id: str) -> Optional[PropertyRecord]:
        for record in self._records:
            if record.id == property_id:
                return record
        return None

    async def fetch_candidates(
        self,
        subdivision_code: str,
        exclude_id: str,
    ) -> List[PropertyRecord]:
        return [
            record for record in self._records
            if record.subdivision_code == subdivision_code
            and record.id != exclude_id
        ]
