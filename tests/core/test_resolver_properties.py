from corresponding.core.grammar import MatchKind
from corresponding.core.resolver import Correspondence, resolve
from corresponding.core.schema import FieldDescriptor, Schema, SchemaIndex


def _schema(name: str, default: bool = False, **fields: str) -> SchemaIndex:
    return SchemaIndex.build(
        Schema(
            name=name,
            fields=[FieldDescriptor(name=k, type=v) for k, v in fields.items()],
            default_constructible=default,
        )
    )


A = _schema("A", default=True, a="u8", b="u8", c="u8")
B = _schema("B", a="u8", b="Optional[u8]", d="u8")


def test_b_into_a() -> None:
    assert resolve(B, A) == (
        Correspondence(source_field="a", target_field="a", kind=MatchKind.PLAIN_TO_PLAIN),
        Correspondence(source_field="b", target_field="b", kind=MatchKind.OPTIONAL_TO_PLAIN),
    )


def test_a_into_b() -> None:
    assert resolve(A, B) == (
        Correspondence(source_field="a", target_field="a", kind=MatchKind.PLAIN_TO_PLAIN),
        Correspondence(source_field="b", target_field="b", kind=MatchKind.PLAIN_TO_OPTIONAL),
    )


def test_resolution_is_deterministic() -> None:
    assert resolve(B, A) == resolve(B, A)


def test_self_pair_identity() -> None:
    s = _schema("S", x="int", y="Optional[str]", z="Optional[Optional[int]]")
    kinds = {c.target_field: c.kind for c in resolve(s, s)}
    assert kinds == {
        "x": MatchKind.PLAIN_TO_PLAIN,
        "y": MatchKind.OPTIONAL_TO_OPTIONAL,
        "z": MatchKind.OPTIONAL_TO_OPTIONAL,
    }


def test_target_order_drives_output() -> None:
    src = _schema("Src", z="int", y="int", x="int")
    tgt = _schema("Tgt", x="int", y="int", z="int")
    assert [c.target_field for c in resolve(src, tgt)] == ["x", "y", "z"]


def test_inner_type_mismatch_is_skipped() -> None:
    src = _schema("Src", a="u16", b="Optional[u16]", k="String")
    tgt = _schema("Tgt", a="u8", b="u8", k="String")
    assert [c.target_field for c in resolve(src, tgt)] == ["k"]


def test_nested_optional_does_not_match_single_optional() -> None:
    c = _schema("C", x="Optional[Optional[u8]]")
    other = _schema("O", x="Optional[u8]")
    assert resolve(c, other) == ()
    assert resolve(other, c) == ()


def test_no_shared_fields() -> None:
    assert resolve(_schema("P", p="int"), _schema("Q", q="int")) == ()
