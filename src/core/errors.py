"""tsvpivot exception hierarchy.

This module defines traceable domain errors with clear boundaries.
Each subsystem raises a specific error type for debuggability.
"""

from __future__ import annotations


class PivotError(Exception):
    """Base exception for all tsvpivot failures."""


class PivotConfigError(PivotError):
    """Raised for invalid runtime configuration."""


class PivotIngestError(PivotError):
    """Raised when a file load must be aborted."""


class PivotStateError(PivotError):
    """Raised when a session is queried before a successful load."""


class PivotInternalError(PivotError):
    """Raised when an internal invariant is violated."""
