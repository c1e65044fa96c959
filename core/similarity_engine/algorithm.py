"""
Algorithm configuration for the Similarity Engine

Provides:
- The hardcoded fallback configuration
- Resolution of a base configuration against a caller override
- The process-wide default configuration, loaded at most once
"""

import json
import logging
import threading
from pathlib import Path
from typing import Any, Mapping, Optional, Union

import requests

from .models import AlgorithmConfig, Cutoffs, PriceBias, Weights


logger = logging.getLogger(__name__)


# =============================================================================
# Configuration Constants
# =============================================================================

FALLBACK_ALGORITHM = AlgorithmConfig(
    weights=Weights(area=0.4, market=0.2, land=0.1, year=0.3),
    cutoffs=Cutoffs(area_pct=0.1, market_pct=0.2, land_pct=0.3, year_diff=10),
    price_bias=PriceBias(enabled=True, weight=0.15, full_bias_at=50),
)

PACKAGED_ALGORITHM_PATH = Path(__file__).parent / "default_algorithm.json"

# Seconds to wait when the default configuration lives behind a URL
DEFAULT_SOURCE_TIMEOUT = 10


Override = Union[str, Mapping[str, Any], None]


# =============================================================================
# Resolution
# =============================================================================

def resolve_algorithm(base: AlgorithmConfig, override: Override = None) -> AlgorithmConfig:
    """
    Merge a caller override onto a base configuration.

    Each group present in the override has its keys applied onto the
    matching base group; keys the override does not mention keep their base
    value, and groups it does not mention are untouched. Values are not
    range-checked: negative weights or cutoffs above 1 are accepted and
    flow into scoring as given.

    A string override must be JSON. If it cannot be parsed, or does not
    decode to an object, the whole override is dropped with a warning and
    `base` is returned. This function never raises.

    Args:
        base: Configuration to start from
        override: JSON object or JSON string, or None

    Returns:
        Resolved configuration
    """
    if override is None or override == "":
        return base

    if isinstance(override, str):
        try:
            override = json.loads(override)
        except ValueError as e:
            logger.warning("Invalid custom algorithm JSON, using defaults: %s", e)
            return base

    if not isinstance(override, Mapping):
        logger.warning(
            "Custom algorithm must be a JSON object, got %s; using defaults",
            type(override).__name__,
        )
        return base

    groups = {}
    for key, attr in AlgorithmConfig.GROUPS.items():
        current = getattr(base, attr)
        group_override = override.get(key)

        if group_override is None:
            groups[attr] = current
            continue

        if not isinstance(group_override, Mapping):
            logger.warning("Ignoring custom algorithm group %r: not an object", key)
            groups[attr] = current
            continue

        unknown = current.unknown_keys(group_override)
        if unknown:
            logger.debug("Ignoring unknown %s keys: %s", key, ", ".join(unknown))

        groups[attr] = current.merged(group_override)

    return AlgorithmConfig(**groups)


# =============================================================================
# Default Configuration Source
# =============================================================================

def read_algorithm_source(source: Union[str, Path]) -> AlgorithmConfig:
    """
    Read a complete configuration from a JSON file path or http(s) URL.

    Raises:
        requests.RequestException: If a URL cannot be fetched.
        OSError: If a file cannot be read.
        ValueError: If the document is not valid JSON.
        KeyError, TypeError: If a group or key is missing or malformed.
    """
    source = str(source)

    if source.startswith(("http://", "https://")):
        response = requests.get(source, timeout=DEFAULT_SOURCE_TIMEOUT)
        response.raise_for_status()
        data = response.json()
    else:
        data = json.loads(Path(source).read_text(encoding="utf-8"))

    return AlgorithmConfig.from_dict(data)


def load_default_algorithm(source: Union[str, Path, None] = None) -> AlgorithmConfig:
    """
    Load the default configuration, substituting the fallback on failure.

    Args:
        source: File path or URL (default: the packaged JSON document)

    Returns:
        Loaded configuration, or FALLBACK_ALGORITHM if loading failed
    """
    source = source or PACKAGED_ALGORITHM_PATH

    try:
        return read_algorithm_source(source)
    except (requests.RequestException, OSError, ValueError, KeyError, TypeError) as e:
        logger.error(
            "Failed to load default algorithm from %s, using fallback defaults: %s",
            source,
            e,
        )
        return FALLBACK_ALGORITHM


class DefaultAlgorithm:
    """
    Init-once holder for the process-wide default configuration.

    The first call to get() loads the configuration under a lock; later
    calls, including ones racing the first, return the same value. The
    value is never reloaded.
    """

    def __init__(self, source: Union[str, Path, None] = None):
        self._source = source
        self._lock = threading.Lock()
        self._value: Optional[AlgorithmConfig] = None

    @property
    def is_loaded(self) -> bool:
        return self._value is not None

    def get(self) -> AlgorithmConfig:
        value = self._value
        if value is not None:
            return value

        with self._lock:
            if self._value is None:
                self._value = load_default_algorithm(self._source)
            return self._value


_default_algorithm: Optional[DefaultAlgorithm] = None
_default_algorithm_lock = threading.Lock()


def get_default_algorithm(source: Union[str, Path, None] = None) -> AlgorithmConfig:
    """
    Get the process-wide default configuration.

    `source` is only consulted by the call that creates the holder.
    """
    global _default_algorithm
    if _default_algorithm is None:
        with _default_algorithm_lock:
            if _default_algorithm is None:
                _default_algorithm = DefaultAlgorithm(source)
    return _default_algorithm.get()


def reset_default_algorithm() -> None:
    """Forget the cached default configuration (useful for testing)."""
    global _default_algorithm
    with _default_algorithm_lock:
        _default_algorithm = None
