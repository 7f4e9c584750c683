"""
corresponding.io — Collaborators around the zero-IO engine.

## Responsibilities
- Load schema lists from Python modules (ast extraction) or JSON/YAML manifests.
- Carry generation settings (env > TOML > defaults).
- Render OperationDescriptors into Python source, or apply them at runtime.
- Tabulate correspondences with polars for inspection.

## Public API
- GeneratorSettings — configuration for a generation pass and the Python back end.
- load_schemas — dispatch on file suffix to extract_module or load_manifest.

## Import DAG discipline
- Depends only on stdlib, pydantic, polars, pyyaml and corresponding.core.
- MUST NOT import corresponding.cli.
"""

from __future__ import annotations

import os
from pathlib import Path

from corresponding.core.schema import Schema

from .config import GeneratorSettings
from .errors import IoSourceError
from .extract import extract_module
from .manifest import MANIFEST_SUFFIXES, load_manifest

__all__ = [
    "GeneratorSettings",
    "load_schemas",
]


def load_schemas(
    path: str | os.PathLike[str], settings: GeneratorSettings | None = None
) -> list[Schema]:
    """
    Load the schemas of one scope from a .py module or a .json/.yaml/.yml manifest.

    Raises:
        IoSourceError: On unsupported suffixes or unreadable/invalid sources.
    """
    s = settings or GeneratorSettings()
    p = Path(path)
    suffix = p.suffix.lower()
    if suffix == ".py":
        return extract_module(p, optional_marker=s.optional_marker)
    if suffix in MANIFEST_SUFFIXES:
        return load_manifest(p, optional_marker=s.optional_marker)
    raise IoSourceError(f"unsupported schema source {p} (expected .py, .json, .yaml or .yml)")
