import logging

import pytest

from corresponding.core.engine import generate, index_schemas
from corresponding.core.errors import DuplicateFieldError, SchemaError
from corresponding.core.grammar import OperationKind
from corresponding.core.schema import FieldDescriptor, Schema


def _schema(name: str, default: bool = False, **fields: str) -> Schema:
    return Schema(
        name=name,
        fields=[FieldDescriptor(name=k, type=v) for k, v in fields.items()],
        default_constructible=default,
    )


A = _schema("A", default=True, a="u8", b="u8", c="u8")
B = _schema("B", a="u8", b="Optional[u8]", d="u8")


def _keys(result) -> list[tuple[str, str, str]]:
    return [(op.kind.value, op.source_schema, op.target_schema) for op in result.operations]


def test_ordering_by_target_then_source() -> None:
    result = generate([A, B])
    assert _keys(result) == [
        ("move", "A", "A"),
        ("convert", "A", "A"),
        ("move", "B", "A"),
        ("convert", "B", "A"),
        ("move", "A", "B"),
        ("move", "B", "B"),
    ]
    assert result.ok
    assert result.schemas == ("A", "B")


def test_no_conversion_into_non_default_target() -> None:
    result = generate([A, B])
    assert result.find(OperationKind.CONVERT, "A", "B") is None
    assert result.find(OperationKind.CONVERT, "B", "A") is not None
    assert all(op.target_schema == "A" for op in result.conversions())


def test_every_ordered_pair_has_a_move() -> None:
    c = _schema("C", x="int")
    result = generate([A, B, c])
    pairs = {(op.source_schema, op.target_schema) for op in result.moves()}
    assert pairs == {(s, t) for s in "ABC" for t in "ABC"}


def test_conversion_reuses_move_correspondences() -> None:
    result = generate([A, B])
    move = result.find(OperationKind.MOVE, "B", "A")
    conv = result.find(OperationKind.CONVERT, "B", "A")
    assert conv.correspondences == move.correspondences
    assert conv.as_move() == move


def test_conversion_with_no_shared_fields_is_emitted_empty() -> None:
    d = _schema("D", default=True, p="int")
    e = _schema("E", q="int")
    conv = generate([d, e]).find(OperationKind.CONVERT, "E", "D")
    assert conv is not None
    assert conv.correspondences == ()


def test_self_pairs_can_be_disabled() -> None:
    result = generate([A, B], self_moves=False, self_conversions=False)
    assert all(not op.is_self_pair for op in result.operations)
    assert _keys(result) == [("move", "B", "A"), ("convert", "B", "A"), ("move", "A", "B")]


def test_self_conversion_without_self_move() -> None:
    result = generate([A], self_moves=False)
    assert _keys(result) == [("convert", "A", "A")]


def test_duplicate_field_schema_is_isolated(caplog: pytest.LogCaptureFixture) -> None:
    bad = _schema("Bad", x="int")
    bad = bad.model_copy(update={"fields": bad.fields + bad.fields})
    with caplog.at_level(logging.WARNING, logger="corresponding.core.engine"):
        result = generate([A, bad, B])
    assert not result.ok
    assert isinstance(result.errors[0], DuplicateFieldError)
    assert result.schemas == ("A", "B")
    assert all("Bad" not in (op.source_schema, op.target_schema) for op in result.operations)
    assert "Bad" in caplog.text


def test_strict_raises_duplicate_field() -> None:
    bad = Schema(
        name="Bad",
        fields=[FieldDescriptor(name="x", type="int"), FieldDescriptor(name="x", type="int")],
    )
    with pytest.raises(DuplicateFieldError):
        generate([A, bad], strict=True)
    with pytest.raises(DuplicateFieldError):
        index_schemas([bad])


def test_duplicate_schema_name_always_raises() -> None:
    with pytest.raises(SchemaError, match="more than once"):
        generate([A, _schema("A", z="int")])


def test_empty_scope() -> None:
    result = generate([])
    assert result.operations == ()
    assert result.ok


def test_inputs_are_not_mutated() -> None:
    before = (A.model_dump(), B.model_dump())
    generate([A, B])
    assert (A.model_dump(), B.model_dump()) == before
