"""
Move and conversion operation generators.

An OperationDescriptor is the unrendered description of one generated function:

- ``move``: mutate a target instance in place, applying each correspondence per
  its MatchKind. Fields without a correspondence keep their value.
- ``convert``: default-construct the target, then apply the move for the same
  (source, target) pair. Only built when the target is default-constructible.

Descriptors carry every matching decision, so a back end renders them without
re-deriving anything.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict

from .grammar import OperationKind
from .resolver import Correspondence, resolve
from .schema import SchemaIndex

__all__ = [
    "OperationDescriptor",
    "build_move",
    "build_conversion",
]


class OperationDescriptor(BaseModel):
    """
    One generated move or conversion function.

    Attributes:
        kind (OperationKind): ``move`` or ``convert``.
        source_schema (str): Name of the schema read from.
        target_schema (str): Name of the schema written to (or constructed).
        correspondences (tuple[Correspondence, ...]): Ordered field assignments.

    Notes:
        A conversion with zero correspondences yields the target's default value.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    kind: OperationKind
    source_schema: str
    target_schema: str
    correspondences: tuple[Correspondence, ...] = ()

    @property
    def is_self_pair(self) -> bool:
        return self.source_schema == self.target_schema

    def as_move(self) -> OperationDescriptor:
        """Return the move this operation applies (itself when already a move)."""
        if self.kind is OperationKind.MOVE:
            return self
        return self.model_copy(update={"kind": OperationKind.MOVE})


def build_move(source: SchemaIndex, target: SchemaIndex) -> OperationDescriptor:
    """Build the move operation for (source, target); self-pairs are allowed."""
    return OperationDescriptor(
        kind=OperationKind.MOVE,
        source_schema=source.name,
        target_schema=target.name,
        correspondences=resolve(source, target),
    )


def build_conversion(
    source: SchemaIndex,
    target: SchemaIndex,
    move: OperationDescriptor | None = None,
) -> OperationDescriptor | None:
    """
    Build the conversion "construct target from source", gated on the target.

    Args:
        source (SchemaIndex): Schema converted from.
        target (SchemaIndex): Schema constructed; must be default-constructible.
        move (OperationDescriptor | None): Previously built move for the same pair,
            reused instead of resolving again.

    Returns:
        OperationDescriptor | None: None when the target is not default-constructible.

    Raises:
        ValueError: If ``move`` belongs to a different pair.
    """
    if not target.schema.default_constructible:
        return None
    if move is None:
        move = build_move(source, target)
    elif (move.source_schema, move.target_schema) != (source.name, target.name):
        raise ValueError(
            f"move {move.source_schema}->{move.target_schema} does not match "
            f"conversion {source.name}->{target.name}"
        )
    return OperationDescriptor(
        kind=OperationKind.CONVERT,
        source_schema=source.name,
        target_schema=target.name,
        correspondences=move.correspondences,
    )
