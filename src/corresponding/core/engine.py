"""
Generation pass over one scope of schemas.

``generate`` indexes every schema, then emits, for every ordered pair
(target, source) of indexed schemas, the move operation and, when the target is
default-constructible, the conversion operation. The returned sequence is
ordered by target declaration order, then source declaration order, with the
move before the conversion of the same pair.

Error isolation
- A schema that fails indexing (DuplicateFieldError) is left out of every pair,
  as target and as source. The error is logged and kept in
  ``GenerationResult.errors``; other schemas are processed normally.
- ``strict=True`` raises the first indexing error instead.
- Two schemas with the same name make the scope itself ambiguous and always raise
  SchemaError.

Examples:
    >>> from corresponding.core.engine import generate
    >>> from corresponding.core.schema import FieldDescriptor, Schema
    >>> a = Schema(name="A", fields=[FieldDescriptor(name="a", type="int")], default_constructible=True)
    >>> b = Schema(name="B", fields=[FieldDescriptor(name="a", type="Optional[int]")])
    >>> [(op.kind.value, op.source_schema, op.target_schema) for op in generate([a, b]).operations]
    [('move', 'A', 'A'), ('convert', 'A', 'A'), ('move', 'B', 'A'), ('convert', 'B', 'A'), ('move', 'A', 'B'), ('move', 'B', 'B')]
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass

from .constants import DEFAULT_OPTIONAL_MARKER
from .errors import DuplicateFieldError, SchemaError
from .grammar import OperationKind
from .operations import OperationDescriptor, build_conversion, build_move
from .schema import Schema, SchemaIndex

__all__ = [
    "GenerationResult",
    "index_schemas",
    "generate",
]

logger = logging.getLogger(__name__)


@dataclass(slots=True, frozen=True)
class GenerationResult:
    """Ordered operations for one scope plus the schemas that were isolated."""

    operations: tuple[OperationDescriptor, ...]
    errors: tuple[SchemaError, ...] = ()
    schemas: tuple[str, ...] = ()

    @property
    def ok(self) -> bool:
        return not self.errors

    def moves(self) -> tuple[OperationDescriptor, ...]:
        return tuple(op for op in self.operations if op.kind is OperationKind.MOVE)

    def conversions(self) -> tuple[OperationDescriptor, ...]:
        return tuple(op for op in self.operations if op.kind is OperationKind.CONVERT)

    def find(self, kind: OperationKind, source: str, target: str) -> OperationDescriptor | None:
        """Return the operation for (kind, source, target), or None if it was not emitted."""
        for op in self.operations:
            if op.kind is kind and op.source_schema == source and op.target_schema == target:
                return op
        return None


def index_schemas(
    schemas: Iterable[Schema],
    optional_marker: str = DEFAULT_OPTIONAL_MARKER,
) -> list[SchemaIndex]:
    """
    Index every schema of a scope, failing on the first structural error.

    Raises:
        SchemaError: If two schemas share a name.
        DuplicateFieldError: If a schema declares a field twice.
    """
    indexes, errors = _index_isolated(list(schemas), optional_marker)
    if errors:
        raise errors[0]
    return indexes


def generate(
    schemas: Iterable[Schema],
    *,
    optional_marker: str = DEFAULT_OPTIONAL_MARKER,
    self_moves: bool = True,
    self_conversions: bool = True,
    strict: bool = False,
) -> GenerationResult:
    """
    Generate move and conversion operations for every ordered pair of schemas.

    Args:
        schemas (Iterable[Schema]): Schemas of one scope, in declaration order.
        optional_marker (str): Outer name of the optional wrapper.
        self_moves (bool): Emit move operations for (S, S) pairs.
        self_conversions (bool): Emit conversion operations for (D, D) pairs.
        strict (bool): Raise the first DuplicateFieldError instead of isolating it.

    Returns:
        GenerationResult: Operations ordered by (target, source) declaration order.

    Raises:
        SchemaError: If two schemas share a name, or (strict) a schema is invalid.
    """
    schema_list = list(schemas)
    indexes, errors = _index_isolated(schema_list, optional_marker)
    if errors and strict:
        raise errors[0]

    operations: list[OperationDescriptor] = []
    for target in indexes:
        for source in indexes:
            self_pair = source.name == target.name
            move = build_move(source, target)
            if self_moves or not self_pair:
                operations.append(move)
            if self_pair and not self_conversions:
                continue
            conversion = build_conversion(source, target, move)
            if conversion is not None:
                operations.append(conversion)

    logger.debug(
        "generated %d operations for %d schemas (%d isolated)",
        len(operations),
        len(indexes),
        len(errors),
    )
    return GenerationResult(
        operations=tuple(operations),
        errors=tuple(errors),
        schemas=tuple(idx.name for idx in indexes),
    )


def _index_isolated(
    schemas: list[Schema], optional_marker: str
) -> tuple[list[SchemaIndex], list[SchemaError]]:
    seen: set[str] = set()
    for schema in schemas:
        if schema.name in seen:
            raise SchemaError(f"schema name {schema.name!r} appears more than once in scope")
        seen.add(schema.name)

    indexes: list[SchemaIndex] = []
    errors: list[SchemaError] = []
    for schema in schemas:
        try:
            indexes.append(SchemaIndex.build(schema, optional_marker))
        except DuplicateFieldError as exc:
            logger.warning("skipping schema %s: %s", schema.name, exc)
            errors.append(exc)
    return indexes, errors
