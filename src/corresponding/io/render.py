"""
Python back end for OperationDescriptors.

Renders a GenerationResult into a Python module:

- move ``(source=B, target=A)`` becomes ``move_corresponding_b_into_a(lhs, rhs)``;
- conversion ``(source=B, target=A)`` becomes ``a_from_b(rhs)``, which builds
  ``A()`` and applies the move.

Presence is ``is not None``. Rendered code only ever assigns values read from
the source; it never writes ``None`` into a target field.

Notes
- The rendered module references schema classes by name. Pass ``import_from``
  to emit ``from <module> import ...``; otherwise the code expects to run in the
  namespace that defines the classes.
- Function names derive from lower_snake schema names; collisions raise RenderError.
"""

from __future__ import annotations

from collections.abc import Iterable

from corresponding.core.engine import GenerationResult
from corresponding.core.grammar import OperationKind, to_lower_snake
from corresponding.core.operations import OperationDescriptor
from corresponding.core.resolver import Correspondence

from .config import GeneratorSettings
from .errors import RenderError

__all__ = [
    "function_name",
    "render_operation",
    "render_module",
]

_HEADER = "# Generated by corresponding. Do not edit."


def function_name(op: OperationDescriptor, settings: GeneratorSettings | None = None) -> str:
    """Name of the rendered function for an operation."""
    s = settings or GeneratorSettings()
    src = to_lower_snake(op.source_schema)
    tgt = to_lower_snake(op.target_schema)
    if op.kind is OperationKind.MOVE:
        return f"{s.move_prefix}_{src}_into_{tgt}"
    return f"{tgt}_{s.convert_infix}_{src}"


def _assignment(c: Correspondence, pad: str, lhs: str = "lhs", rhs: str = "rhs") -> list[str]:
    read = f"{rhs}.{c.source_field}"
    write = f"{lhs}.{c.target_field} = {read}"
    if c.kind.requires_presence:
        return [f"{pad}if {read} is not None:", f"{pad}{pad}{write}"]
    return [f"{pad}{write}"]


def _move_body(op: OperationDescriptor, pad: str) -> list[str]:
    lines: list[str] = []
    for c in op.correspondences:
        lines.extend(_assignment(c, pad))
    return lines or [f"{pad}pass"]


def render_operation(
    op: OperationDescriptor,
    settings: GeneratorSettings | None = None,
    *,
    move_names: dict[tuple[str, str], str] | None = None,
) -> str:
    """
    Render one operation as a Python function definition.

    Args:
        op (OperationDescriptor): Move or conversion to render.
        settings (GeneratorSettings | None): Naming and indentation settings.
        move_names (dict | None): Rendered move names keyed by (source, target).
            A conversion calls the matching move when present and inlines the
            assignments otherwise.

    Returns:
        str: Function source without a trailing newline.
    """
    s = settings or GeneratorSettings()
    pad = " " * s.indent
    name = function_name(op, s)

    if op.kind is OperationKind.MOVE:
        head = f"def {name}(lhs: {op.target_schema}, rhs: {op.source_schema}) -> None:"
        return "\n".join([head, *_move_body(op, pad)])

    head = f"def {name}(rhs: {op.source_schema}) -> {op.target_schema}:"
    body = [f"{pad}lhs = {op.target_schema}()"]
    move_name = (move_names or {}).get((op.source_schema, op.target_schema))
    if move_name is not None:
        body.append(f"{pad}{move_name}(lhs, rhs)")
    else:
        for c in op.correspondences:
            body.extend(_assignment(c, pad))
    body.append(f"{pad}return lhs")
    return "\n".join([head, *body])


def _check_unique(names: Iterable[str]) -> None:
    seen: set[str] = set()
    for n in names:
        if n in seen:
            raise RenderError(f"two operations render to the same function name {n!r}")
        seen.add(n)


def render_module(
    result: GenerationResult,
    settings: GeneratorSettings | None = None,
    *,
    import_from: str | None = None,
) -> str:
    """
    Render every operation of a generation pass into one Python module.

    Args:
        result (GenerationResult): Output of corresponding.core.engine.generate.
        settings (GeneratorSettings | None): Naming and indentation settings.
        import_from (str | None): Module to import the schema classes from.

    Returns:
        str: Module source ending with a newline.

    Raises:
        RenderError: If two operations map to the same function name.
    """
    s = settings or GeneratorSettings()
    names = [function_name(op, s) for op in result.operations]
    _check_unique(names)
    move_names = {
        (op.source_schema, op.target_schema): name
        for op, name in zip(result.operations, names)
        if op.kind is OperationKind.MOVE
    }

    out: list[str] = [_HEADER, "from __future__ import annotations", ""]
    if import_from and result.schemas:
        out.append(f"from {import_from} import {', '.join(result.schemas)}")
        out.append("")
    out.append("__all__ = [")
    out.extend(f'{" " * s.indent}"{n}",' for n in names)
    out.append("]")

    for op in result.operations:
        out.extend(["", ""])
        out.append(render_operation(op, s, move_names=move_names))
    return "\n".join(out) + "\n"
