"""Accrual exception hierarchy.

This module defines traceable domain errors with clear boundaries.
Each failure mode raises a specific error type for debuggability.
"""

from __future__ import annotations


class AccrualError(Exception):
    """Base exception for all Accrual failures."""


class AccrualConfigError(AccrualError):
    """Raised for invalid runtime configuration."""


class AccrualInvalidArgumentError(AccrualError):
    """Raised when a store operation receives an unusable argument."""


class AccrualUnsupportedFormatError(AccrualError):
    """Raised for export format names outside the supported set."""


class AccrualSessionError(AccrualError):
    """Raised for unreadable or malformed session payloads."""


class AccrualDependencyError(AccrualError):
    """Raised when an optional runtime dependency is missing."""


class AccrualExportError(AccrualError):
    """Raised when exported text cannot be written to its destination."""
