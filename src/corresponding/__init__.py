"""
corresponding — generate move-corresponding and conversion functions between record types.

Given the record types of one scope, corresponding derives, for every ordered
pair (including a type paired with itself), which fields correspond by name and
type shape, and emits:

- a move operation copying the corresponding fields into an existing target;
- a conversion building a default target and overlaying the source's fields,
  for every target that is default-constructible.

Fields typed ``T`` and ``Optional[T]`` correspond in every combination. An
optional source only assigns when present, and no generated operation ever
clears a target field.

## Examples
```python
from corresponding import generate, load_schemas, render_module

schemas = load_schemas("models.py")
print(render_module(generate(schemas), import_from="models"))
```
"""

from __future__ import annotations

from .core.engine import GenerationResult, generate
from .core.errors import CorrespondingError, DuplicateFieldError, SchemaError
from .core.grammar import MatchKind, OperationKind
from .core.operations import OperationDescriptor
from .core.resolver import Correspondence, resolve
from .core.schema import FieldDescriptor, Schema, SchemaIndex
from .core.shapes import TypeExpr, TypeShape, classify
from .io import GeneratorSettings, load_schemas
from .io.apply import apply_conversion, apply_move
from .io.render import render_module

__all__ = [
    "Correspondence",
    "CorrespondingError",
    "DuplicateFieldError",
    "FieldDescriptor",
    "GenerationResult",
    "GeneratorSettings",
    "MatchKind",
    "OperationDescriptor",
    "OperationKind",
    "Schema",
    "SchemaError",
    "SchemaIndex",
    "TypeExpr",
    "TypeShape",
    "apply_conversion",
    "apply_move",
    "classify",
    "generate",
    "load_schemas",
    "render_module",
    "resolve",
]

__version__ = "0.1.0"
