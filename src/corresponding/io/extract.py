"""
Schema extraction from Python source.

Reads a module with ``ast`` (no import, no execution) and returns one Schema per
top-level record class, in declaration order:

- classes decorated with ``@dataclass`` / ``@dataclasses.dataclass`` (bare or called);
- classes deriving from ``BaseModel`` (pydantic) by name, or from a model class
  declared earlier in the same module.

Fields are the annotated assignments of the class body; ``ClassVar`` and
``InitVar`` annotations are skipped. Fields of bases that are record classes
declared earlier in the same module come first, in dataclass order (a field
redeclared by the subclass keeps its position and takes the new type). Bases
imported from other modules contribute nothing. ``X | None`` is normalized to the
optional marker form so it classifies like ``Optional[X]``. ``Literal`` arguments
and ``Annotated`` metadata stay opaque tokens.

A schema is default-constructible when every field has a default (a plain value,
``field(default=...)``/``field(default_factory=...)``, or a pydantic ``Field``
with a default), or when the class body (or an inherited record) sets
``__corresponding_default__`` explicitly to True or False.

Nested classes and other modules are not scanned.
"""

from __future__ import annotations

import ast
import logging
import os
from dataclasses import dataclass
from pathlib import Path

from pydantic import ValidationError

from corresponding.core.constants import DEFAULT_OPTIONAL_MARKER
from corresponding.core.schema import FieldDescriptor, Schema
from corresponding.core.shapes import TypeExpr

from .errors import IoSourceError

__all__ = [
    "DEFAULT_MARKER_ATTR",
    "type_expr_from_ast",
    "extract_schemas",
    "extract_module",
]

logger = logging.getLogger(__name__)

# Class attribute overriding default-constructibility detection.
DEFAULT_MARKER_ATTR = "__corresponding_default__"

_SKIPPED_ANNOTATIONS = {"ClassVar", "InitVar"}
_FIELD_FACTORIES = {"field", "Field"}
# Subscripts whose arguments (after the first, for Annotated) are values, not types.
_OPAQUE_ARGS = {"Literal"}
_METADATA_ARGS = {"Annotated"}


def _dotted(node: ast.expr) -> str | None:
    if isinstance(node, ast.Name):
        return node.id
    if isinstance(node, ast.Attribute):
        base = _dotted(node.value)
        return f"{base}.{node.attr}" if base else None
    return None


def _head(node: ast.expr) -> str | None:
    name = _dotted(node)
    return name.rsplit(".", 1)[-1] if name else None


def _union_members(node: ast.expr) -> list[ast.expr]:
    if isinstance(node, ast.BinOp) and isinstance(node.op, ast.BitOr):
        return _union_members(node.left) + _union_members(node.right)
    return [node]


def _forward_ref(text: str, marker: str) -> TypeExpr:
    try:
        return TypeExpr.parse(text, marker)
    except ValueError:
        return TypeExpr(name=repr(text))


def _opaque(node: ast.expr) -> TypeExpr:
    return TypeExpr(name=ast.unparse(node))


def type_expr_from_ast(node: ast.expr, marker: str = DEFAULT_OPTIONAL_MARKER) -> TypeExpr:
    """
    Convert an annotation node into a TypeExpr.

    String constants are forward references when they stand for a whole type
    (the annotation itself or a type argument). ``Literal`` arguments and
    ``Annotated`` metadata are values, not types, and are kept as opaque tokens.

    Args:
        node (ast.expr): Annotation expression.
        marker (str): Wrapper name used when normalizing ``X | None``.

    Returns:
        TypeExpr: Syntactic token. Unrecognized constructs become an opaque token
        named by their source text.
    """
    if isinstance(node, ast.Constant):
        if isinstance(node.value, str):
            return _forward_ref(node.value, marker)
        if node.value is None:
            return TypeExpr(name="None")
        if node.value is Ellipsis:
            return TypeExpr(name="...")
        return TypeExpr(name=repr(node.value))

    name = _dotted(node)
    if name is not None:
        return TypeExpr(name=name)

    if isinstance(node, ast.Subscript):
        outer = _dotted(node.value)
        if outer is None:
            return _opaque(node)
        elts = node.slice.elts if isinstance(node.slice, ast.Tuple) else [node.slice]
        head = outer.rsplit(".", 1)[-1]
        if head in _OPAQUE_ARGS:
            args = tuple(_opaque(e) for e in elts)
        elif head in _METADATA_ARGS:
            args = (type_expr_from_ast(elts[0], marker), *(_opaque(e) for e in elts[1:]))
        else:
            args = tuple(type_expr_from_ast(e, marker) for e in elts)
        return TypeExpr(name=outer, args=args)

    if isinstance(node, ast.BinOp) and isinstance(node.op, ast.BitOr):
        members = [type_expr_from_ast(m, marker) for m in _union_members(node)]
        non_none = [m for m in members if m != TypeExpr(name="None")]
        if len(members) == 2 and len(non_none) == 1:
            return TypeExpr.optional_of(non_none[0], marker)
        return TypeExpr(name="Union", args=tuple(members))

    return _opaque(node)


@dataclass(slots=True)
class _Record:
    """Fields collected for one record class, kept so subclasses can inherit them."""

    name: str
    fields: dict[str, tuple[FieldDescriptor, bool]]
    explicit: bool | None
    model: bool

    def schema(self) -> Schema:
        defaulted = all(has_default for _, has_default in self.fields.values())
        return Schema(
            name=self.name,
            fields=tuple(f for f, _ in self.fields.values()),
            default_constructible=defaulted if self.explicit is None else self.explicit,
        )


def _is_dataclass(cls: ast.ClassDef) -> bool:
    for deco in cls.decorator_list:
        target = deco.func if isinstance(deco, ast.Call) else deco
        if _head(target) == "dataclass":
            return True
    return False


def _is_model(cls: ast.ClassDef, records: dict[str, _Record]) -> bool:
    for base in cls.bases:
        if _head(base) == "BaseModel":
            return True
        rec = records.get(_dotted(base) or "")
        if rec is not None and rec.model:
            return True
    return False


def _has_default(value: ast.expr | None) -> bool:
    if value is None:
        return False
    if isinstance(value, ast.Call) and _head(value.func) in _FIELD_FACTORIES:
        if any(kw.arg in ("default", "default_factory") for kw in value.keywords):
            return True
        if value.args:
            first = value.args[0]
            return not (isinstance(first, ast.Constant) and first.value is Ellipsis)
        return False
    return True


def _explicit_default_flag(cls: ast.ClassDef) -> bool | None:
    for stmt in cls.body:
        targets: list[ast.expr] = []
        value: ast.expr | None = None
        if isinstance(stmt, ast.Assign):
            targets, value = stmt.targets, stmt.value
        elif isinstance(stmt, ast.AnnAssign):
            targets, value = [stmt.target], stmt.value
        for t in targets:
            if isinstance(t, ast.Name) and t.id == DEFAULT_MARKER_ATTR:
                if isinstance(value, ast.Constant) and isinstance(value.value, bool):
                    return value.value
    return None


def _record_from_class(
    cls: ast.ClassDef, marker: str, records: dict[str, _Record], *, model: bool
) -> _Record:
    fields: dict[str, tuple[FieldDescriptor, bool]] = {}
    explicit: bool | None = None
    # Later bases first so earlier bases win, as in the MRO.
    for base in reversed(cls.bases):
        inherited = records.get(_dotted(base) or "")
        if inherited is None:
            continue
        fields.update(inherited.fields)
        if inherited.explicit is not None:
            explicit = inherited.explicit

    for stmt in cls.body:
        if not isinstance(stmt, ast.AnnAssign) or not isinstance(stmt.target, ast.Name):
            continue
        if stmt.target.id == DEFAULT_MARKER_ATTR:
            continue
        annotation = stmt.annotation
        outer = annotation.value if isinstance(annotation, ast.Subscript) else annotation
        if _head(outer) in _SKIPPED_ANNOTATIONS:
            continue
        descriptor = FieldDescriptor(
            name=stmt.target.id, type=type_expr_from_ast(annotation, marker)
        )
        fields[descriptor.name] = (descriptor, _has_default(stmt.value))

    own = _explicit_default_flag(cls)
    return _Record(
        name=cls.name,
        fields=fields,
        explicit=explicit if own is None else own,
        model=model,
    )


def extract_schemas(
    source: str,
    *,
    filename: str = "<source>",
    optional_marker: str = DEFAULT_OPTIONAL_MARKER,
) -> list[Schema]:
    """
    Extract record schemas from Python source text.

    Args:
        source (str): Module source.
        filename (str): Name used in error messages.
        optional_marker (str): Optional wrapper name for ``X | None`` normalization.

    Returns:
        list[Schema]: One schema per top-level record class, in declaration order.

    Raises:
        IoSourceError: If the source does not parse or declares invalid names/types.
    """
    try:
        tree = ast.parse(source, filename=filename)
    except SyntaxError as exc:
        raise IoSourceError(f"cannot parse {filename}: {exc}") from exc

    records: dict[str, _Record] = {}
    schemas: list[Schema] = []
    for node in tree.body:
        if not isinstance(node, ast.ClassDef):
            continue
        model = _is_model(node, records)
        if not model and not _is_dataclass(node):
            continue
        try:
            record = _record_from_class(node, optional_marker, records, model=model)
            schema = record.schema()
        except (ValidationError, ValueError) as exc:
            raise IoSourceError(f"{filename}:{node.lineno}: class {node.name}: {exc}") from exc
        logger.debug(
            "extracted %s (%d fields, default=%s)",
            schema.name,
            len(schema.fields),
            schema.default_constructible,
        )
        records[node.name] = record
        schemas.append(schema)
    return schemas


def extract_module(
    path: str | os.PathLike[str], *, optional_marker: str = DEFAULT_OPTIONAL_MARKER
) -> list[Schema]:
    """Read a Python module from disk and extract its record schemas."""
    p = Path(path)
    try:
        text = p.read_text(encoding="utf-8")
    except OSError as exc:
        raise IoSourceError(f"cannot read {p}: {exc}") from exc
    return extract_schemas(text, filename=str(p), optional_marker=optional_marker)
