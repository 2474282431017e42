"""Error types for the analytics engine.

Insufficient data is never an error: it is a normal result state. These
exceptions signal that the caller broke an input contract and are not
caught inside the engine.
"""


class AnalyticsContractError(ValueError):
    """Raised when a caller passes input that violates the engine's contract."""


class WindowLengthError(AnalyticsContractError):
    """Raised when a rolling-window series is longer than the window it feeds."""


class SeriesGapError(AnalyticsContractError):
    """Raised when a daily series is not a consecutive, gap-filled date axis."""


class InvalidAlphaError(AnalyticsContractError):
    """Raised when an EMA smoothing factor is outside (0, 1]."""
