from __future__ import annotations


class ChartDataError(ValueError):
    """Raised when series data handed to the engine is malformed."""


class MissingDataError(ChartDataError):
    """Raised when a series provider has no usable points at all."""
