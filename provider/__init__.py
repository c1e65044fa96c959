"""
Provider module for fetching property records.

Available sources:
- InMemoryPropertyRecordSource: Offline runs/testing from a list or JSON file
- SocrataPropertyRecordSource: Live appraisal roll from data.texas.gov
"""

from .base import PropertyRecordSource, ProviderError, record_from_row
from .memory import InMemoryPropertyRecordSource
from .socrata import SocrataPropertyRecordSource, soql_quote

__all__ = [
    "PropertyRecordSource",
    "ProviderError",
    "record_from_row",
    "InMemoryPropertyRecordSource",
    "SocrataPropertyRecordSource",
    "soql_quote",
]
