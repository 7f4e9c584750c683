"""
Canonical corresponding grammar and helpers.

Defines match kinds and operation kinds, plus zero-IO naming helpers used by the
engine and the Python back end.

Responsibilities
- Define the enums whose serialized values appear in reports and manifests.
- Hold the matching table that maps (source optional?, target optional?) to a MatchKind.
- Provide lower_snake validation and identifier normalization for rendered names.

Design principles
-----------------
1) One naming standard:
   - Enum classes: PascalCase
   - Enum member names: UPPER_SNAKE (Python constants)
   - Enum serialized values (reports/manifests): lower_snake

2) Presence only flows forward:
   - Every MatchKind assigns. None of them clears a target.
   - An optional source only assigns when present.

Matching table
--------------
| source shape | target shape | MatchKind            | assignment
|--------------|--------------|----------------------|---------------------------------
| Plain(T)     | Plain(T)     | plain_to_plain       | always
| Plain(T)     | Optional(T)  | plain_to_optional    | always, wrapped as present
| Optional(T)  | Plain(T)     | optional_to_plain    | only if source present
| Optional(T)  | Optional(T)  | optional_to_optional | only if source present

Examples
--------
>>> from corresponding.core.grammar import MatchKind, match_kind_for, to_lower_snake
>>> match_kind_for(source_optional=True, target_optional=False) is MatchKind.OPTIONAL_TO_PLAIN
True
>>> MatchKind.OPTIONAL_TO_PLAIN.requires_presence
True
>>> to_lower_snake("UserUpdate")
'user_update'

Tags
----
grammar, enums, matching, lower_snake, helpers
"""

from __future__ import annotations

import re
from collections.abc import Iterable
from enum import Enum
from typing import Final

__all__ = [
    "MatchKind",
    "OperationKind",
    "match_kind_for",
    "match_kind_from_value",
    "operation_kind_from_value",
    "is_lower_snake",
    "assert_lower_snake",
    "to_lower_snake",
    "ensure_all_enum_values_lower_snake",
]

# ============================================================================
# MATCH KINDS
# ============================================================================


class MatchKind(Enum):
    """
    How one source field is written into its corresponding target field.

    Serialized values are used in:
      - Correspondence.kind (core.resolver.Correspondence)
      - correspondence reports (io.report.correspondence_frame)
    """

    PLAIN_TO_PLAIN = "plain_to_plain"
    PLAIN_TO_OPTIONAL = "plain_to_optional"
    OPTIONAL_TO_PLAIN = "optional_to_plain"
    OPTIONAL_TO_OPTIONAL = "optional_to_optional"

    @property
    def requires_presence(self) -> bool:
        """True when the source is optional and only a present value is assigned."""
        return self in (MatchKind.OPTIONAL_TO_PLAIN, MatchKind.OPTIONAL_TO_OPTIONAL)

    @property
    def wraps(self) -> bool:
        """True when the target is optional, so the assigned value is stored as present."""
        return self in (MatchKind.PLAIN_TO_OPTIONAL, MatchKind.OPTIONAL_TO_OPTIONAL)


class OperationKind(Enum):
    """Generated operation flavor."""

    MOVE = "move"
    CONVERT = "convert"


_MATCH_TABLE: Final[dict[tuple[bool, bool], MatchKind]] = {
    (False, False): MatchKind.PLAIN_TO_PLAIN,
    (False, True): MatchKind.PLAIN_TO_OPTIONAL,
    (True, False): MatchKind.OPTIONAL_TO_PLAIN,
    (True, True): MatchKind.OPTIONAL_TO_OPTIONAL,
}


def match_kind_for(*, source_optional: bool, target_optional: bool) -> MatchKind:
    """
    Look up the MatchKind for a pair of shapes whose inner types are already equal.

    Args:
      source_optional (bool): Whether the source field is Optional(T).
      target_optional (bool): Whether the target field is Optional(T).

    Returns:
      MatchKind: Entry from the matching table.
    """
    return _MATCH_TABLE[(source_optional, target_optional)]


# ============================================================================
# Helpers & Validators (zero I/O)
# ============================================================================

_LOWER_SNAKE_RE: Final[re.Pattern[str]] = re.compile(r"^[a-z0-9]+(?:_[a-z0-9]+)*$")
_CAMEL_BOUNDARY_RE: Final[re.Pattern[str]] = re.compile(r"(?<=[a-z0-9])(?=[A-Z])|(?<=[A-Z])(?=[A-Z][a-z])")
_NON_IDENT_RE: Final[re.Pattern[str]] = re.compile(r"[^0-9a-zA-Z]+")


def is_lower_snake(value: str) -> bool:
    """
    Check whether a string is lower_snake.

    Args:
      value (str): Candidate string to validate.

    Returns:
      bool: True if value matches lower_snake (e.g., "plain_to_plain"), False otherwise.

    Examples:
      >>> is_lower_snake("plain_to_plain")
      True
      >>> is_lower_snake("PlainToPlain")
      False
    """
    return bool(_LOWER_SNAKE_RE.match(value or ""))


def assert_lower_snake(value: str, what: str = "value") -> None:
    """
    Validate that a string is lower_snake.

    Raises:
      ValueError: If value is not lower_snake.
    """
    if not is_lower_snake(value):
        raise ValueError(f"{what} must be lower_snake (got: {value!r})")


def match_kind_from_value(s: str) -> MatchKind:
    """
    Parse a lower_snake match kind string into a MatchKind.

    Raises:
      ValueError: If s is not lower_snake or is not a known match kind.
    """
    assert_lower_snake(s, "match_kind")
    return MatchKind(s)


def operation_kind_from_value(s: str) -> OperationKind:
    """
    Parse a lower_snake operation kind string into an OperationKind.

    Raises:
      ValueError: If s is not lower_snake or is not a known operation kind.
    """
    assert_lower_snake(s, "operation_kind")
    return OperationKind(s)


def to_lower_snake(name: str) -> str:
    """
    Normalize a schema identifier to lower_snake for use in rendered function names.

    Args:
      name (str): Identifier such as "UserKey", "HTTPHeader" or "user-key".

    Returns:
      str: Lower_snake form ("user_key", "http_header", "user_key").

    Examples:
      >>> to_lower_snake("HTTPHeader")
      'http_header'
    """
    spaced = _CAMEL_BOUNDARY_RE.sub("_", name)
    return _NON_IDENT_RE.sub("_", spaced).strip("_").lower()


def ensure_all_enum_values_lower_snake(enums: Iterable[type[Enum]]) -> None:
    """
    Assert that every enum member's value is lower_snake.

    Raises:
      AssertionError: If any enum member has a non-lower_snake value.

    Examples:
      >>> ensure_all_enum_values_lower_snake([MatchKind, OperationKind])
    """
    for E in enums:
        for m in E:
            if not is_lower_snake(m.value):
                raise AssertionError(
                    f"{E.__name__}.{m.name} has non-lower_snake value: {m.value!r}"
                )
