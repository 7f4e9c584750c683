"""
Core package aggregator for the corresponding engine (schemas, shapes, resolution, operations).

## Contracts (single source of truth)
- Grammar — MatchKind/OperationKind enums, the matching table, naming helpers.
- Shapes — TypeExpr tokens and the Plain/Optional classifier.
- Schema — FieldDescriptor/Schema models and the per-schema SchemaIndex.
- Resolver — field correspondences for one ordered schema pair.
- Operations — move and conversion OperationDescriptors.
- Engine — `generate`, the ordered emission for a whole scope.

## Notes
- Zero-IO policy: stdlib + pydantic only; no file/network IO.
- Absence is never propagated: no generated assignment clears a target field.
- Only one optional level is unwrapped; deeper nesting is an opaque inner type.

## Downstream usage
- corresponding.io.extract — builds Schema lists from Python source.
- corresponding.io.render — turns OperationDescriptors into Python functions.
- corresponding.io.apply — interprets OperationDescriptors on live objects.
- corresponding.io.report — tabulates correspondences with polars.

## Examples
```python
from corresponding.core.engine import generate
from corresponding.core.grammar import OperationKind
from corresponding.core.schema import FieldDescriptor, Schema

a = Schema(
    name="A",
    fields=[FieldDescriptor(name=n, type="int") for n in "abc"],
    default_constructible=True,
)
b = Schema(
    name="B",
    fields=[
        FieldDescriptor(name="a", type="int"),
        FieldDescriptor(name="b", type="Optional[int]"),
        FieldDescriptor(name="d", type="int"),
    ],
)
result = generate([a, b])
[c.kind.value for c in result.find(OperationKind.MOVE, "B", "A").correspondences]
# ['plain_to_plain', 'optional_to_plain']
```
"""
