"""
Type tokens and the type-shape classifier.

A field's declared type is carried as a ``TypeExpr``: the syntactic, opaque
token produced by an extractor (``Optional[int]``, ``dict[str, list[int]]``,
``pkg.Money``). Two tokens are equal only when they are written the same way;
no alias resolution or numeric widening happens here.

``classify`` reduces a token to a ``TypeShape``: ``Plain(T)`` or ``Optional(T)``.
Exactly one wrapper level is recognized, so ``Optional[Optional[int]]`` becomes
``Optional(Optional[int])`` and its inner token is compared opaquely.

Examples:
    >>> from corresponding.core.shapes import TypeExpr, classify
    >>> classify(TypeExpr.parse("Optional[int]"))
    TypeShape(optional=True, inner=TypeExpr(name='int', args=()))
    >>> str(classify(TypeExpr.parse("Optional[Optional[int]]")))
    'Optional(Optional[int])'
    >>> str(classify(TypeExpr.parse("int | None")))
    'Optional(int)'
"""

from __future__ import annotations

import re
from typing import Final

from pydantic import BaseModel, ConfigDict, field_validator

from .constants import DEFAULT_OPTIONAL_MARKER

__all__ = [
    "TypeExpr",
    "TypeShape",
    "classify",
]

_TOKEN_RE: Final[re.Pattern[str]] = re.compile(
    r"""\s*(?:
        (?P<name>[A-Za-z_][A-Za-z0-9_]*(?:\s*\.\s*[A-Za-z_][A-Za-z0-9_]*)*)
      | (?P<literal>'[^']*'|"[^"]*"|-?\d+(?:\.\d+)?|\.\.\.)
      | (?P<punct>[\[\],|])
    )""",
    re.VERBOSE,
)


class TypeExpr(BaseModel):
    """
    Syntactic type token: an outer (possibly dotted) name plus generic arguments.

    Attributes:
        name (str): Outer name as written, e.g. "Optional", "typing.Optional", "int".
        args (tuple[TypeExpr, ...]): Generic arguments in source order.

    Notes:
        Equality and hashing are structural. ``render`` is the canonical textual form.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    name: str
    args: tuple[TypeExpr, ...] = ()

    @field_validator("name")
    @classmethod
    def _non_empty(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("type name must be non-empty")
        return v.strip()

    @property
    def head(self) -> str:
        """Last dotted segment of the outer name."""
        return self.name.rsplit(".", 1)[-1]

    def render(self) -> str:
        if not self.args:
            return self.name
        return f"{self.name}[{', '.join(a.render() for a in self.args)}]"

    def __str__(self) -> str:
        return self.render()

    @classmethod
    def optional_of(cls, inner: TypeExpr, marker: str = DEFAULT_OPTIONAL_MARKER) -> TypeExpr:
        """Wrap ``inner`` in the optional marker."""
        return cls(name=marker, args=(inner,))

    @classmethod
    def parse(cls, text: str, marker: str = DEFAULT_OPTIONAL_MARKER) -> TypeExpr:
        """
        Parse the textual form of a type.

        Args:
            text (str): e.g. "Optional[int]", "dict[str, list[int]]", "int | None".
            marker (str): Wrapper name used when normalizing ``X | None``.

        Returns:
            TypeExpr: Parsed token.

        Raises:
            ValueError: If the text is not a well-formed type expression.

        Notes:
            ``X | None`` and ``None | X`` normalize to ``marker[X]``; other unions
            become ``Union[...]``.
        """
        tokens = _tokenize(text)
        parser = _Parser(tokens, marker)
        expr = parser.union()
        if parser.pos != len(tokens):
            raise ValueError(f"unexpected trailing input in type {text!r}")
        return expr


TypeExpr.model_rebuild()


class TypeShape(BaseModel):
    """
    Classified shape of a field type.

    Attributes:
        optional (bool): True for Optional(T), False for Plain(T).
        inner (TypeExpr): T. For Plain shapes this is the whole token.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    optional: bool
    inner: TypeExpr

    def __str__(self) -> str:
        return f"{'Optional' if self.optional else 'Plain'}({self.inner.render()})"


def classify(type_expr: TypeExpr, marker: str = DEFAULT_OPTIONAL_MARKER) -> TypeShape:
    """
    Classify a type token as Plain(T) or Optional(T).

    Args:
        type_expr (TypeExpr): Token to classify.
        marker (str): Optional wrapper name. Compared against the last dotted
            segment, so "Optional" matches both ``Optional`` and ``typing.Optional``.

    Returns:
        TypeShape: Optional(arg) when the token is ``marker[arg]`` with exactly one
        argument; Plain(type_expr) otherwise.
    """
    if type_expr.head == marker.rsplit(".", 1)[-1] and len(type_expr.args) == 1:
        return TypeShape(optional=True, inner=type_expr.args[0])
    return TypeShape(optional=False, inner=type_expr)


# ============================================================================
# Parser
# ============================================================================


def _tokenize(text: str) -> list[str]:
    tokens: list[str] = []
    pos = 0
    stripped = text.rstrip()
    while pos < len(stripped):
        match = _TOKEN_RE.match(stripped, pos)
        if match is None or match.end() == pos:
            raise ValueError(f"invalid type expression {text!r} at offset {pos}")
        if match.group("name") is not None:
            tokens.append(re.sub(r"\s+", "", match.group("name")))
        else:
            tokens.append(match.group("literal") or match.group("punct"))
        pos = match.end()
    if not tokens:
        raise ValueError("empty type expression")
    return tokens


class _Parser:
    def __init__(self, tokens: list[str], marker: str) -> None:
        self.tokens = tokens
        self.pos = 0
        self.marker = marker

    def _peek(self) -> str | None:
        return self.tokens[self.pos] if self.pos < len(self.tokens) else None

    def _take(self) -> str:
        tok = self._peek()
        if tok is None:
            raise ValueError("unexpected end of type expression")
        self.pos += 1
        return tok

    def union(self) -> TypeExpr:
        members = [self.atom()]
        while self._peek() == "|":
            self._take()
            members.append(self.atom())
        if len(members) == 1:
            return members[0]
        non_none = [m for m in members if not (m.name == "None" and not m.args)]
        if len(members) == 2 and len(non_none) == 1:
            return TypeExpr.optional_of(non_none[0], self.marker)
        return TypeExpr(name="Union", args=tuple(members))

    def atom(self) -> TypeExpr:
        tok = self._take()
        if tok in ("[", "]", ",", "|"):
            raise ValueError(f"unexpected {tok!r} in type expression")
        if self._peek() != "[":
            return TypeExpr(name=tok)
        self._take()
        args: list[TypeExpr] = []
        if self._peek() == "]":
            self._take()
            return TypeExpr(name=tok, args=())
        while True:
            args.append(self.union())
            sep = self._take()
            if sep == "]":
                break
            if sep != ",":
                raise ValueError(f"expected ',' or ']' but found {sep!r}")
        return TypeExpr(name=tok, args=tuple(args))
