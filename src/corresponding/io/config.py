"""
Configuration for corresponding generation passes.

Defines GeneratorSettings, a frozen dataclass carrying the options of one
generation pass and of the Python back end. Defaults are sourced from
corresponding.core.constants (the single source of truth).

Source of truth
- corresponding.core.constants.DEFAULT_OPTIONAL_MARKER, MOVE_PREFIX, CONVERT_INFIX, DEFAULT_INDENT

Import DAG discipline
- Depends only on stdlib and corresponding.core.
- Does not import the CLI.

Notes
- Precedence: environment > TOML > defaults.
- TOML search order: ./corresponding.toml ([generator] table or top-level keys),
  then ./pyproject.toml under [tool.corresponding].
"""

from __future__ import annotations

import os
import tomllib
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any

from corresponding.core.constants import CONVERT_INFIX as CORE_CONVERT_INFIX
from corresponding.core.constants import DEFAULT_INDENT as CORE_INDENT
from corresponding.core.constants import DEFAULT_OPTIONAL_MARKER as CORE_OPTIONAL_MARKER
from corresponding.core.constants import MOVE_PREFIX as CORE_MOVE_PREFIX

from .errors import IoConfigError

_TRUTHY = {"1", "true", "t", "yes", "y", "on"}


def _bool(v: Any) -> bool:
    if isinstance(v, bool):
        return v
    if isinstance(v, (int, float)):
        return bool(v)
    if isinstance(v, str):
        return v.strip().lower() in _TRUTHY
    return False


@dataclass(frozen=True)
class GeneratorSettings:
    """
    Runtime settings for a generation pass.

    Attributes:
        optional_marker (str): Outer generic name treated as the optional wrapper.
        self_moves (bool): Emit move operations for a schema paired with itself.
        self_conversions (bool): Emit conversions for a default-constructible schema
            paired with itself.
        strict (bool): Raise on the first invalid schema instead of isolating it.
        move_prefix (str): Prefix of rendered move functions.
        convert_infix (str): Infix of rendered conversion functions (``<target>_from_<source>``).
        indent (int): Spaces per indentation level in rendered code (>=1).

    Examples:
        >>> from corresponding.io.config import GeneratorSettings
        >>> GeneratorSettings(strict=True)  # doctest: +ELLIPSIS
        GeneratorSettings(...)
    """

    optional_marker: str = CORE_OPTIONAL_MARKER
    self_moves: bool = True
    self_conversions: bool = True
    strict: bool = False
    move_prefix: str = CORE_MOVE_PREFIX
    convert_infix: str = CORE_CONVERT_INFIX
    indent: int = CORE_INDENT

    def engine_options(self) -> dict[str, Any]:
        """Keyword arguments for corresponding.core.engine.generate."""
        return {
            "optional_marker": self.optional_marker,
            "self_moves": self.self_moves,
            "self_conversions": self.self_conversions,
            "strict": self.strict,
        }

    # Configuration loaders (env/TOML) with precedence: env > TOML > defaults.

    @classmethod
    def _apply_mapping(
        cls, base: GeneratorSettings, cfg: dict[str, Any] | None
    ) -> GeneratorSettings:
        """Apply a loose config mapping onto GeneratorSettings, returning a new instance."""
        if not isinstance(cfg, dict):
            return base

        s = base

        for key in ("optional_marker", "move_prefix", "convert_infix"):
            if key in cfg and isinstance(cfg[key], str) and cfg[key].strip():
                s = replace(s, **{key: cfg[key].strip()})

        for key in ("self_moves", "self_conversions", "strict"):
            if key in cfg:
                s = replace(s, **{key: _bool(cfg[key])})

        if "indent" in cfg:
            try:
                indent = int(cfg["indent"])
            except (TypeError, ValueError):
                indent = s.indent
            if indent >= 1:
                s = replace(s, indent=indent)

        return s

    @classmethod
    def from_env(
        cls, base: GeneratorSettings | None = None, prefix: str = "CORRESPONDING_"
    ) -> GeneratorSettings:
        """
        Build GeneratorSettings from environment variables. Precedence is env > base > defaults.

        Recognized variables:
            - CORRESPONDING_OPTIONAL_MARKER
            - CORRESPONDING_SELF_MOVES (1/0/true/false/yes/no/on/off)
            - CORRESPONDING_SELF_CONVERSIONS
            - CORRESPONDING_STRICT
            - CORRESPONDING_MOVE_PREFIX
            - CORRESPONDING_CONVERT_INFIX
            - CORRESPONDING_INDENT
        """
        s = base or cls()

        mapping: dict[str, Any] = {}
        for key in (
            "optional_marker",
            "self_moves",
            "self_conversions",
            "strict",
            "move_prefix",
            "convert_infix",
            "indent",
        ):
            v = os.getenv(prefix + key.upper())
            if v:
                mapping[key] = v

        return cls._apply_mapping(s, mapping)

    @classmethod
    def from_toml(cls, path: str | os.PathLike[str] | None = None) -> GeneratorSettings:
        """
        Build GeneratorSettings from a TOML file.

        Search order when `path` is None:
            1) ./corresponding.toml (with either a [generator] table or direct keys)
            2) ./pyproject.toml under [tool.corresponding]

        Returns defaults if no file is present.

        Raises:
            IoConfigError: If an explicit `path` does not exist or is not valid TOML.
        """
        s = cls()

        cand: list[Path] = []
        if path is not None:
            explicit = Path(path)
            if not explicit.exists():
                raise IoConfigError(f"config file not found: {explicit}")
            cand.append(explicit)
        else:
            cand.append(Path.cwd() / "corresponding.toml")
            cand.append(Path.cwd() / "pyproject.toml")

        cfg: dict[str, Any] | None = None
        for p in cand:
            if not p.exists():
                continue
            try:
                with p.open("rb") as fh:
                    data = tomllib.load(fh)
            except tomllib.TOMLDecodeError as exc:
                raise IoConfigError(f"invalid TOML in {p}: {exc}") from exc
            if p.name == "pyproject.toml":
                tool = data.get("tool", {})
                cfg = tool.get("corresponding") if isinstance(tool, dict) else None
            elif isinstance(data.get("generator"), dict):
                cfg = data["generator"]
            else:
                cfg = data
            if cfg:
                break

        return cls._apply_mapping(s, cfg)

    @classmethod
    def load(cls, path: str | os.PathLike[str] | None = None) -> GeneratorSettings:
        """
        Load GeneratorSettings applying precedence: environment > TOML > defaults.

        Args:
            path: Optional explicit TOML path. If None, search defaults
                (corresponding.toml, pyproject.toml).
        """
        s = cls.from_toml(path)
        s = cls.from_env(base=s)
        return s
