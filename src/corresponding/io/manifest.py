"""
Schema manifests (JSON / YAML).

A manifest lists the schemas of one scope without Python source:

```yaml
schemas:
  - name: A
    default_constructible: true
    fields:
      - {name: a, type: int}
      - {name: b, type: "Optional[int]"}
```

Field ``type`` values use the textual form accepted by ``TypeExpr.parse``; they
are parsed with the configured optional marker, so ``int | None`` classifies the
same way as in extracted Python source. A top-level list (without the
``schemas`` key) is accepted too.
"""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from corresponding.core.constants import DEFAULT_OPTIONAL_MARKER
from corresponding.core.schema import Schema
from corresponding.core.shapes import TypeExpr

from .errors import IoSourceError

__all__ = [
    "MANIFEST_SUFFIXES",
    "schemas_from_mapping",
    "load_manifest",
    "dump_manifest",
]

MANIFEST_SUFFIXES = {".json", ".yaml", ".yml"}


def _parse_field_types(item: Any, marker: str, origin: str) -> Any:
    if not isinstance(item, dict) or not isinstance(item.get("fields"), list):
        return item
    fields = []
    for f in item["fields"]:
        if isinstance(f, dict) and isinstance(f.get("type"), str):
            try:
                f = {**f, "type": TypeExpr.parse(f["type"], marker)}
            except ValueError as exc:
                raise IoSourceError(f"{origin}: schema {item.get('name')!r}: {exc}") from exc
        fields.append(f)
    return {**item, "fields": fields}


def schemas_from_mapping(
    data: Any,
    *,
    origin: str = "<manifest>",
    optional_marker: str = DEFAULT_OPTIONAL_MARKER,
) -> list[Schema]:
    """
    Validate decoded manifest data into Schema models.

    Args:
        data: Decoded document (mapping with ``schemas`` or a list).
        origin (str): Name used in error messages.
        optional_marker (str): Wrapper name used when parsing ``X | None`` types.

    Raises:
        IoSourceError: If the document shape or any schema is invalid.
    """
    if isinstance(data, dict):
        data = data.get("schemas")
    if not isinstance(data, list):
        raise IoSourceError(f"{origin}: expected a list of schemas or a 'schemas' key")
    items = [_parse_field_types(item, optional_marker, origin) for item in data]
    try:
        return [Schema.model_validate(item) for item in items]
    except ValidationError as exc:
        raise IoSourceError(f"{origin}: invalid schema: {exc}") from exc


def load_manifest(
    path: str | os.PathLike[str], *, optional_marker: str = DEFAULT_OPTIONAL_MARKER
) -> list[Schema]:
    """
    Load a JSON or YAML manifest.

    Args:
        path: File ending in .json, .yaml or .yml.
        optional_marker (str): Wrapper name used when parsing ``X | None`` types.

    Returns:
        list[Schema]: Schemas in manifest order.

    Raises:
        IoSourceError: On unreadable files, decode errors or invalid schemas.
    """
    p = Path(path)
    suffix = p.suffix.lower()
    if suffix not in MANIFEST_SUFFIXES:
        raise IoSourceError(f"unsupported manifest type {suffix!r} for {p}")
    try:
        text = p.read_text(encoding="utf-8")
    except OSError as exc:
        raise IoSourceError(f"cannot read {p}: {exc}") from exc
    try:
        data = json.loads(text) if suffix == ".json" else yaml.safe_load(text)
    except (json.JSONDecodeError, yaml.YAMLError) as exc:
        raise IoSourceError(f"cannot decode {p}: {exc}") from exc
    return schemas_from_mapping(data, origin=str(p), optional_marker=optional_marker)


def dump_manifest(schemas: list[Schema]) -> str:
    """Serialize schemas to a YAML manifest with textual field types."""
    doc = {
        "schemas": [
            {
                "name": s.name,
                "default_constructible": s.default_constructible,
                "fields": [{"name": f.name, "type": f.type.render()} for f in s.fields],
            }
            for s in schemas
        ]
    }
    return yaml.safe_dump(doc, sort_keys=False)
