"""
Engine-facing defaults for corresponding.

Defines the optional-wrapper marker and the naming prefixes consumed by the
Python back end. This module is zero-IO and uses only the Python standard
library.

Notes:
    - ``DEFAULT_OPTIONAL_MARKER`` is the outer name recognized by the type-shape
      classifier (``Optional[T]`` and ``typing.Optional[T]`` both match).
    - Changes here flow into ``corresponding.io.config.GeneratorSettings`` defaults.
"""

from __future__ import annotations

__all__ = [
    "DEFAULT_OPTIONAL_MARKER",
    "MOVE_PREFIX",
    "CONVERT_INFIX",
    "DEFAULT_INDENT",
]

# Outer generic name treated as the single-level nullable wrapper.
DEFAULT_OPTIONAL_MARKER: str = "Optional"

# Rendered move function: move_corresponding_<source>_into_<target>.
MOVE_PREFIX: str = "move_corresponding"

# Rendered conversion function: <target>_from_<source>.
CONVERT_INFIX: str = "from"

# Spaces per indentation level in rendered modules.
DEFAULT_INDENT: int = 4
