"""
Custom exceptions for the corresponding.io module.

Purpose
- Provide IO-layer error types for configuration, source loading, and rendering.
- Keep corresponding.core as the source of truth for schema errors
  (SchemaError, DuplicateFieldError).

Notes
- These exceptions do not perform any IO and are stdlib-only.
"""

from __future__ import annotations

from corresponding.core.errors import CorrespondingError


class IoError(CorrespondingError):
    """
    Base class for IO-related errors in corresponding.io.

    Notes:
        Use this as a catch-all for IO-layer failures, distinct from core errors.
    """


class IoConfigError(IoError):
    """
    Raised when generator configuration is invalid or unsupported.

    Examples:
        - Explicit config path that does not exist
        - Negative indent
    """


class IoSourceError(IoError):
    """
    Raised when schemas cannot be loaded from a Python module or manifest.

    Notes:
        Wraps SyntaxError, YAML/JSON decode errors and pydantic validation errors.
    """


class RenderError(IoError):
    """
    Raised when OperationDescriptors cannot be rendered into Python source.

    Examples:
        - Two operations render to the same function name
    """
