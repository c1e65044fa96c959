"""
Errors raised by the Similarity Engine.

Parameter and lookup errors abort a request. Configuration problems are
never raised; they are logged and the engine falls back to a base
configuration instead.
"""


class SimilarityEngineError(Exception):
    """Base class for all similarity engine failures."""


class MissingParameter(SimilarityEngineError):
    """The request lacks a required parameter (e.g. the property id)."""

    def __init__(self, parameter: str):
        self.parameter = parameter
        super().__init__(f"{parameter} is required")


class InvalidParameter(SimilarityEngineError):
    """A request parameter is present but unusable."""

    def __init__(self, parameter: str, reason: str):
        self.parameter = parameter
        self.reason = reason
        super().__init__(f"Invalid {parameter}: {reason}")


class TargetNotFound(SimilarityEngineError):
    """The data provider returned no record for the target property id."""

    def __init__(self, property_id: str):
        self.property_id = property_id
        super().__init__(f"Target property not found: {property_id}")
