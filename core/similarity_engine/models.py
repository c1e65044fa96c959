"""
Data models for the Similarity Engine.

Defines parcel records as returned by the property data provider, the
three-group algorithm configuration, and the scored/ranked output.
"""

from dataclasses import dataclass, field, replace
from typing import Any, ClassVar, Dict, List, Mapping, Optional


def is_present(value: Optional[float]) -> bool:
    """
    Whether a scoring attribute counts as present.

    Absent (None) and zero are distinct values, but both are treated as
    "not present" for eligibility: a parcel with a zero land value is
    excluded the same way as one with no land value at all.
    """
    return value is not None and value != 0


@dataclass
class PropertyRecord:
    """
    One parcel as returned by the property data provider.

    Read-only and sourced per request. The subdivision code may be absent
    on candidates but is required on the target.
    """
    id: str
    area: Optional[float] = None
    market_value: Optional[float] = None
    land_value: Optional[float] = None
    year_built: Optional[int] = None
    subdivision_code: Optional[str] = None

    @property
    def has_scoring_attributes(self) -> bool:
        """All four scoring attributes are present and non-zero."""
        return all(
            is_present(value)
            for value in (self.area, self.market_value, self.land_value, self.year_built)
        )

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON output."""
        return {
            "id": self.id,
            "area": self.area,
            "marketValue": self.market_value,
            "landValue": self.land_value,
            "yearBuilt": self.year_built,
            "subdivisionCode": self.subdivision_code,
        }


# =============================================================================
# Algorithm Configuration
# =============================================================================

class _ConfigGroup:
    """
    Shared behaviour for the fixed-field configuration groups.

    Subclasses are frozen dataclasses that declare WIRE_KEYS, a mapping of
    JSON key -> attribute name.
    """

    WIRE_KEYS: ClassVar[Dict[str, str]] = {}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]):
        """
        Build a group from its JSON form.

        Raises:
            KeyError: If any key of the group is missing.
        """
        return cls(**{attr: data[key] for key, attr in cls.WIRE_KEYS.items()})

    def to_dict(self) -> dict:
        return {key: getattr(self, attr) for key, attr in self.WIRE_KEYS.items()}

    def merged(self, overrides: Mapping[str, Any]):
        """
        Return a copy with the known keys of `overrides` applied.

        Keys absent from `overrides` keep their current value. Values are
        taken as given; no range validation is performed.
        """
        changes = {
            self.WIRE_KEYS[key]: value
            for key, value in overrides.items()
            if key in self.WIRE_KEYS
        }
        return replace(self, **changes)

    @classmethod
    def unknown_keys(cls, overrides: Mapping[str, Any]) -> List[str]:
        return [key for key in overrides if key not in cls.WIRE_KEYS]


@dataclass(frozen=True)
class Weights(_ConfigGroup):
    """Relative contribution of each attribute to the similarity score."""
    area: float
    market: float
    land: float
    year: float

    WIRE_KEYS: ClassVar[Dict[str, str]] = {
        "area": "area",
        "market": "market",
        "land": "land",
        "year": "year",
    }


@dataclass(frozen=True)
class Cutoffs(_ConfigGroup):
    """
    Per-attribute tolerances beyond which a candidate is excluded.

    The percentage cutoffs are fractions compared against a relative
    difference; year_diff is an absolute number of years.
    """
    area_pct: float
    market_pct: float
    land_pct: float
    year_diff: int

    WIRE_KEYS: ClassVar[Dict[str, str]] = {
        "areaPct": "area_pct",
        "marketPct": "market_pct",
        "landPct": "land_pct",
        "yearDiff": "year_diff",
    }


@dataclass(frozen=True)
class PriceBias(_ConfigGroup):
    """
    Penalty applied to candidates priced above the target.

    The penalty ramps up linearly with the raw candidate count and
    saturates once full_bias_at candidates are available.
    """
    enabled: bool
    weight: float
    full_bias_at: int

    WIRE_KEYS: ClassVar[Dict[str, str]] = {
        "enabled": "enabled",
        "weight": "weight",
        "fullBiasAt": "full_bias_at",
    }


@dataclass(frozen=True)
class AlgorithmConfig:
    """Weights, cutoffs and price-bias parameters for one request."""
    weights: Weights
    cutoffs: Cutoffs
    price_bias: PriceBias

    GROUPS: ClassVar[Dict[str, str]] = {
        "weights": "weights",
        "cutoffs": "cutoffs",
        "priceBias": "price_bias",
    }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "AlgorithmConfig":
        """
        Build a complete configuration from its JSON form.

        Raises:
            KeyError: If a group or a key within a group is missing.
            TypeError: If a group is not a JSON object.
        """
        return cls(
            weights=Weights.from_dict(data["weights"]),
            cutoffs=Cutoffs.from_dict(data["cutoffs"]),
            price_bias=PriceBias.from_dict(data["priceBias"]),
        )

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON output."""
        return {
            key: getattr(self, attr).to_dict()
            for key, attr in self.GROUPS.items()
        }


# =============================================================================
# Scoring Output
# =============================================================================

@dataclass
class ScoredCandidate:
    """
    A candidate record with its similarity score.

    Lower similarity means more similar. base_similarity is the weighted
    dissimilarity before price bias; price_bias_contribution is the raw
    max(0, price_ratio - 1) term and price_bias_adjustment the amount that
    was actually added to the score.
    """
    record: PropertyRecord
    similarity: float
    base_similarity: float
    price_bias_contribution: float = 0.0
    price_bias_adjustment: float = 0.0

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON output."""
        data = self.record.to_dict()
        data.update({
            "similarity": self.similarity,
            "baseSimilarity": self.base_similarity,
            "priceBias": self.price_bias_contribution,
            "priceBiasAdjustment": self.price_bias_adjustment,
        })
        return data


@dataclass
class ComparisonResult:
    """
    Complete result of a comparable search for one target parcel.

    total_candidates counts every record sharing the target's subdivision
    (before filtering); filtered_candidates counts those that passed the
    cutoffs, before truncation to the requested limit.
    """
    target: PropertyRecord
    subdivision_code: Optional[str]
    total_candidates: int
    filtered_candidates: int
    comps: List[ScoredCandidate] = field(default_factory=list)

    @property
    def comp_count(self) -> int:
        """Number of comparables returned."""
        return len(self.comps)

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON output."""
        return {
            "target": self.target.to_dict(),
            "subdivisionCode": self.subdivision_code,
            "totalCandidates": self.total_candidates,
            "filteredCandidates": self.filtered_candidates,
            "comps": [c.to_dict() for c in self.comps],
        }
