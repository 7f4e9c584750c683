"""
Runtime application of OperationDescriptors.

Interprets a move or conversion on live objects instead of rendering code. Field
access uses attributes, or item access for mappings. Presence is ``is not None``.

Examples:
    >>> from dataclasses import dataclass
    >>> from corresponding.core.grammar import MatchKind, OperationKind
    >>> from corresponding.core.operations import OperationDescriptor
    >>> from corresponding.core.resolver import Correspondence
    >>> op = OperationDescriptor(
    ...     kind=OperationKind.MOVE, source_schema="B", target_schema="A",
    ...     correspondences=[Correspondence(source_field="x", target_field="x",
    ...                                     kind=MatchKind.OPTIONAL_TO_PLAIN)])
    >>> apply_move(op, {"x": 1}, {"x": None})
    {'x': 1}
"""

from __future__ import annotations

from collections.abc import Callable, Mapping, MutableMapping
from typing import Any, TypeVar

from corresponding.core.grammar import OperationKind
from corresponding.core.operations import OperationDescriptor

__all__ = [
    "apply_move",
    "apply_conversion",
]

T = TypeVar("T")


def _read(obj: Any, name: str) -> Any:
    if isinstance(obj, Mapping):
        return obj[name]
    return getattr(obj, name)


def _write(obj: Any, name: str, value: Any) -> None:
    if isinstance(obj, MutableMapping):
        obj[name] = value
    else:
        setattr(obj, name, value)


def _apply(op: OperationDescriptor, target: T, source: Any) -> T:
    for c in op.correspondences:
        value = _read(source, c.source_field)
        if c.kind.requires_presence and value is None:
            continue
        _write(target, c.target_field, value)
    return target


def apply_move(op: OperationDescriptor, target: T, source: Any) -> T:
    """
    Apply a move operation to ``target`` in place.

    Args:
        op (OperationDescriptor): Move operation.
        target: Instance of the target schema; mutated.
        source: Instance of the source schema; only read.

    Returns:
        The mutated target.

    Raises:
        ValueError: If ``op`` is not a move.
    """
    if op.kind is not OperationKind.MOVE:
        raise ValueError(f"expected a move operation, got {op.kind.value!r}")
    return _apply(op, target, source)


def apply_conversion(op: OperationDescriptor, source: Any, factory: Callable[[], T]) -> T:
    """
    Build a new target via ``factory`` and overlay the source's corresponding fields.

    Args:
        op (OperationDescriptor): Conversion operation.
        source: Instance of the source schema.
        factory: Zero-argument constructor producing the target's default value.

    Raises:
        ValueError: If ``op`` is not a conversion.
    """
    if op.kind is not OperationKind.CONVERT:
        raise ValueError(f"expected a convert operation, got {op.kind.value!r}")
    return _apply(op, factory(), source)
