import pytest

from corresponding.core.shapes import TypeExpr, TypeShape, classify


def _t(text: str) -> TypeExpr:
    return TypeExpr.parse(text)


def test_plain_type_is_whole_token() -> None:
    shape = classify(_t("dict[str, list[int]]"))
    assert shape == TypeShape(optional=False, inner=_t("dict[str, list[int]]"))


@pytest.mark.parametrize("text", ["Optional[int]", "typing.Optional[int]", "int | None", "None | int"])
def test_optional_forms_unwrap_to_inner(text: str) -> None:
    shape = classify(_t(text))
    assert shape.optional is True
    assert shape.inner == TypeExpr(name="int")


def test_only_one_level_is_unwrapped() -> None:
    shape = classify(_t("Optional[Optional[int]]"))
    assert shape.optional is True
    assert shape.inner == _t("Optional[int]")
    assert str(shape) == "Optional(Optional[int])"


def test_marker_with_wrong_arity_is_plain() -> None:
    shape = classify(TypeExpr(name="Optional", args=(TypeExpr(name="int"), TypeExpr(name="str"))))
    assert shape.optional is False


def test_custom_marker() -> None:
    assert classify(_t("Maybe[int]"), marker="Maybe").optional is True
    assert classify(_t("Optional[int]"), marker="Maybe").optional is False


def test_parse_render_canonical_spacing() -> None:
    assert _t("dict[ str,list[ int ] ]").render() == "dict[str, list[int]]"
    assert _t("pkg . Money").render() == "pkg.Money"


def test_general_union_is_opaque() -> None:
    expr = _t("int | str")
    assert expr == TypeExpr(name="Union", args=(TypeExpr(name="int"), TypeExpr(name="str")))
    assert classify(expr).optional is False


@pytest.mark.parametrize("bad", ["", "Optional[", "list[int]]", "[int]", "dict[str,]"])
def test_parse_rejects_malformed(bad: str) -> None:
    with pytest.raises(ValueError):
        TypeExpr.parse(bad)


def test_type_expr_is_hashable_and_structural() -> None:
    assert hash(_t("list[int]")) == hash(_t("list[ int ]"))
    assert _t("List[int]") != _t("list[int]")
