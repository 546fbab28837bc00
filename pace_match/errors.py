"""Central error types used across the package."""

from __future__ import annotations


class PaceMatchError(RuntimeError):
    """Base error for PaceMatch failures."""


class ReportFormatError(PaceMatchError, ValueError):
    """Raised when a raw location report cannot be interpreted at all."""


class SessionLimitError(PaceMatchError):
    """Raised when no movement session slot can be freed for a new user."""


__all__ = [
    "PaceMatchError",
    "ReportFormatError",
    "SessionLimitError",
]
