"""
Pydantic v2 models for record-type schemas and the per-schema lookup index.

Responsibilities
- Define FieldDescriptor and Schema, the read-only input handed to the engine.
- Build SchemaIndex once per schema: O(1) field lookup by name plus the
  classified TypeShape of every field.
- Reject schemas that declare a field name twice (DuplicateFieldError).

Style
- Zero-IO (stdlib + pydantic only).
- Field order is preserved as declared; it only drives output ordering.

Examples:
    >>> from corresponding.core.schema import FieldDescriptor, Schema, SchemaIndex
    >>> a = Schema(name="A", fields=[FieldDescriptor(name="a", type="Optional[int]")])
    >>> idx = SchemaIndex.build(a)
    >>> str(idx.shape("a"))
    'Optional(int)'
    >>> idx.field("missing") is None
    True
"""

from __future__ import annotations

import keyword
from dataclasses import dataclass
from typing import Any

from pydantic import BaseModel, ConfigDict, field_validator

from .constants import DEFAULT_OPTIONAL_MARKER
from .errors import DuplicateFieldError
from .shapes import TypeExpr, TypeShape, classify

__all__ = [
    "FieldDescriptor",
    "Schema",
    "SchemaIndex",
]


class FieldDescriptor(BaseModel):
    """
    One declared field of a record type.

    Attributes:
        name (str): Field identifier; unique within its schema.
        type (TypeExpr): Declared type token. Strings are parsed with TypeExpr.parse.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    name: str
    type: TypeExpr

    @field_validator("name")
    @classmethod
    def _identifier(cls, v: str) -> str:
        if not v.isidentifier() or keyword.iskeyword(v):
            raise ValueError(f"field name must be a non-keyword identifier (got {v!r})")
        return v

    @field_validator("type", mode="before")
    @classmethod
    def _parse_text(cls, v: Any) -> Any:
        if isinstance(v, str):
            return TypeExpr.parse(v)
        return v


class Schema(BaseModel):
    """
    Structural description of a record type for matching purposes.

    Attributes:
        name (str): Record type name; unique within a scope.
        fields (tuple[FieldDescriptor, ...]): Fields in declaration order.
        default_constructible (bool): Whether the target language can build a
            default instance (gates conversion operations targeting this schema).

    Notes:
        Duplicate field names are accepted here and rejected by SchemaIndex.build,
        so a bad schema can be isolated without failing the whole scope.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    name: str
    fields: tuple[FieldDescriptor, ...] = ()
    default_constructible: bool = False

    @field_validator("name")
    @classmethod
    def _identifier(cls, v: str) -> str:
        if not v.isidentifier() or keyword.iskeyword(v):
            raise ValueError(f"schema name must be a non-keyword identifier (got {v!r})")
        return v

    def field_names(self) -> tuple[str, ...]:
        return tuple(f.name for f in self.fields)


@dataclass(slots=True, frozen=True)
class SchemaIndex:
    """Schema plus name-keyed field and shape maps, built once per generation pass."""

    schema: Schema
    by_name: dict[str, FieldDescriptor]
    shapes: dict[str, TypeShape]

    @property
    def name(self) -> str:
        return self.schema.name

    def field(self, name: str) -> FieldDescriptor | None:
        return self.by_name.get(name)

    def shape(self, name: str) -> TypeShape:
        try:
            return self.shapes[name]
        except KeyError as exc:
            raise KeyError(f"schema {self.name!r} has no field {name!r}") from exc

    @classmethod
    def build(cls, schema: Schema, marker: str = DEFAULT_OPTIONAL_MARKER) -> SchemaIndex:
        """
        Index a schema by field name and classify every field type.

        Args:
            schema (Schema): Schema to index.
            marker (str): Optional wrapper name passed to the classifier.

        Returns:
            SchemaIndex: Read-only index.

        Raises:
            DuplicateFieldError: If two fields share a name.
        """
        by_name: dict[str, FieldDescriptor] = {}
        shapes: dict[str, TypeShape] = {}
        for f in schema.fields:
            if f.name in by_name:
                raise DuplicateFieldError(schema.name, f.name)
            by_name[f.name] = f
            shapes[f.name] = classify(f.type, marker)
        return cls(schema=schema, by_name=by_name, shapes=shapes)
