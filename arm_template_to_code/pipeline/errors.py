"""
Error kinds raised by the import pipeline.

All of them are fatal: the import stops at the first one and no partial
output is written.
"""

from __future__ import annotations


class ArmImportError(Exception):
    """Base class for every failure of an import run."""

    pass


class RetrievalError(ArmImportError):
    """Raised when a schema document cannot be fetched or parsed.

    This can happen when:
    - The HTTP transport fails or the server answers with a non-success status
    - A local schema file does not exist or cannot be read
    - The retrieved bytes are not valid JSON
    """

    pass


class ResolutionError(ArmImportError):
    """Raised when the bundler cannot locate a referenced document or definition."""

    pass


class GenerationError(ArmImportError):
    """Raised when the type generator rejects a construct or the final emission."""

    pass
