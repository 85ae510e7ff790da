"""csv-to-mtx exception hierarchy.

This module defines traceable domain errors with clear boundaries.
Each pipeline stage raises a specific error type for debuggability.
"""

from __future__ import annotations


class MtxError(Exception):
    """Base exception for all conversion failures."""


class MtxConfigError(MtxError):
    """Raised for invalid runtime configuration."""


class MtxIngestError(MtxError):
    """Raised when an input or zone authority file cannot be read."""


class MtxWriteError(MtxError):
    """Raised when the output container cannot be created or written."""


class MtxFormatError(MtxError):
    """Raised when a file is not a valid MTX container."""
