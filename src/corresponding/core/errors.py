"""
Core exception types raised by schema indexing and scope validation.

Provides typed exceptions for core-domain failures:
- SchemaError for scope-level structural faults (e.g., two schemas sharing a name).
- DuplicateFieldError when a schema declares the same field name twice.

Notes:
    - Shape mismatches and missing default constructors are never errors; they
      compute to fewer (or no) correspondences and operations.
    - This module uses only the Python standard library and has no side effects.

Examples:
    >>> from corresponding.core.errors import DuplicateFieldError
    >>> err = DuplicateFieldError("A", "x")
    >>> err.schema_name, err.field_name
    ('A', 'x')
"""

from __future__ import annotations

__all__ = [
    "CorrespondingError",
    "SchemaError",
    "DuplicateFieldError",
]


class CorrespondingError(Exception):
    """Base class for all errors raised by corresponding."""


class SchemaError(CorrespondingError, ValueError):
    """Structural schema or scope violation."""


class DuplicateFieldError(SchemaError):
    """A schema declares two fields with the same name."""

    def __init__(self, schema_name: str, field_name: str) -> None:
        super().__init__(f"schema {schema_name!r} declares field {field_name!r} more than once")
        self.schema_name = schema_name
        self.field_name = field_name
