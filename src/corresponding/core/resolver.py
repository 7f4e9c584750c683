"""
Correspondence resolution between two indexed schemas.

For every target field (in target declaration order) the resolver looks up the
source field of the same name and applies the matching table from
``corresponding.core.grammar``. A pair whose inner types differ produces no
correspondence; the target field is simply left alone by the generated code.

Notes:
    - Inner-type equality is exact TypeExpr equality.
    - Resolving a schema against itself yields one correspondence per field
      (plain_to_plain or optional_to_optional).

Examples:
    >>> from corresponding.core.schema import FieldDescriptor, Schema, SchemaIndex
    >>> from corresponding.core.resolver import resolve
    >>> a = Schema(name="A", fields=[FieldDescriptor(name="b", type="int")])
    >>> b = Schema(name="B", fields=[FieldDescriptor(name="b", type="Optional[int]")])
    >>> [c.kind.value for c in resolve(SchemaIndex.build(b), SchemaIndex.build(a))]
    ['optional_to_plain']
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict

from .grammar import MatchKind, match_kind_for
from .schema import SchemaIndex
from .shapes import TypeShape

__all__ = [
    "Correspondence",
    "match_shapes",
    "resolve",
]


class Correspondence(BaseModel):
    """
    A matched field pair eligible for value transfer.

    Attributes:
        source_field (str): Field read from the source instance.
        target_field (str): Field written on the target instance.
        kind (MatchKind): Assignment rule.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    source_field: str
    target_field: str
    kind: MatchKind


def match_shapes(source: TypeShape, target: TypeShape) -> MatchKind | None:
    """
    Classify a shape pair, or return None when the fields do not correspond.

    Args:
        source (TypeShape): Shape of the source field.
        target (TypeShape): Shape of the target field.

    Returns:
        MatchKind | None: Entry of the matching table when inner types are equal.
    """
    if source.inner != target.inner:
        return None
    return match_kind_for(source_optional=source.optional, target_optional=target.optional)


def resolve(source: SchemaIndex, target: SchemaIndex) -> tuple[Correspondence, ...]:
    """
    Compute the correspondences for moving ``source`` into ``target``.

    Args:
        source (SchemaIndex): Schema the values are read from.
        target (SchemaIndex): Schema the values are written to.

    Returns:
        tuple[Correspondence, ...]: Ordered by the target's field declaration order.
    """
    out: list[Correspondence] = []
    for t_field in target.schema.fields:
        if source.field(t_field.name) is None:
            continue
        kind = match_shapes(source.shape(t_field.name), target.shape(t_field.name))
        if kind is None:
            continue
        out.append(Correspondence(source_field=t_field.name, target_field=t_field.name, kind=kind))
    return tuple(out)
