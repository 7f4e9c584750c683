import textwrap
from pathlib import Path

import pytest

from corresponding.core.shapes import TypeExpr
from corresponding.io.errors import IoSourceError
from corresponding.io.extract import extract_module, extract_schemas

SOURCE = textwrap.dedent(
    '''
    from __future__ import annotations

    import dataclasses
    from dataclasses import dataclass, field
    from typing import ClassVar, Optional

    from pydantic import BaseModel, Field


    @dataclass
    class User:
        id: int = 0
        name: str = ""
        tags: list[str] = field(default_factory=list)
        registry: ClassVar[dict] = {}


    @dataclasses.dataclass(frozen=True)
    class UserKey:
        id: int


    class UserUpdate(BaseModel):
        id: int = 0
        name: str | None = None
        country: Optional[str] = Field(default=None)


    class Required(BaseModel):
        id: int = Field(...)


    @dataclass
    class Forced:
        __corresponding_default__ = True
        id: int


    class NotARecord:
        id: int = 0
    '''
)


def _by_name(source: str = SOURCE):
    return {s.name: s for s in extract_schemas(source)}


def test_only_record_classes_in_order() -> None:
    names = [s.name for s in extract_schemas(SOURCE)]
    assert names == ["User", "UserKey", "UserUpdate", "Required", "Forced"]


def test_fields_and_classvar_skipped() -> None:
    user = _by_name()["User"]
    assert user.field_names() == ("id", "name", "tags")
    assert user.fields[2].type == TypeExpr.parse("list[str]")


def test_pipe_none_normalizes_to_optional() -> None:
    update = _by_name()["UserUpdate"]
    assert update.fields[1].type == TypeExpr.parse("Optional[str]")
    assert update.fields[2].type == TypeExpr.parse("Optional[str]")


def test_default_constructible_detection() -> None:
    schemas = _by_name()
    assert schemas["User"].default_constructible is True
    assert schemas["UserKey"].default_constructible is False
    assert schemas["UserUpdate"].default_constructible is True
    assert schemas["Required"].default_constructible is False
    assert schemas["Forced"].default_constructible is True
    assert schemas["Forced"].field_names() == ("id",)


def test_string_annotations_are_parsed() -> None:
    src = "from dataclasses import dataclass\n@dataclass\nclass A:\n    x: 'Optional[int]' = None\n"
    assert extract_schemas(src)[0].fields[0].type == TypeExpr.parse("Optional[int]")


def test_custom_marker_for_pipe_none() -> None:
    src = "from dataclasses import dataclass\n@dataclass\nclass A:\n    x: int | None = None\n"
    schema = extract_schemas(src, optional_marker="Maybe")[0]
    assert schema.fields[0].type == TypeExpr.parse("Maybe[int]")


def test_syntax_error_raises() -> None:
    with pytest.raises(IoSourceError):
        extract_schemas("class :", filename="bad.py")


def test_extract_module_reads_file(tmp_path: Path) -> None:
    p = tmp_path / "models.py"
    p.write_text(SOURCE)
    assert len(extract_module(p)) == 5
    with pytest.raises(IoSourceError):
        extract_module(tmp_path / "missing.py")


def test_literal_and_annotated_values_stay_opaque() -> None:
    src = textwrap.dedent(
        """
        from dataclasses import dataclass
        from typing import Annotated, Literal


        @dataclass
        class Task:
            state: Literal['in progress', 'done'] = 'done'
            x: Annotated[int, 'the x value'] = 0
            owner: 'User | None' = None
        """
    )
    (task,) = extract_schemas(src)
    state, x, owner = task.fields
    assert state.type == TypeExpr(
        name="Literal", args=(TypeExpr(name="'in progress'"), TypeExpr(name="'done'"))
    )
    assert x.type.args == (TypeExpr(name="int"), TypeExpr(name="'the x value'"))
    assert owner.type == TypeExpr.parse("Optional[User]")


def test_unparseable_forward_reference_is_opaque() -> None:
    src = "from dataclasses import dataclass\n@dataclass\nclass A:\n    x: 'not a type' = None\n"
    assert extract_schemas(src)[0].fields[0].type == TypeExpr(name="'not a type'")


def test_inherited_record_fields() -> None:
    src = textwrap.dedent(
        """
        from dataclasses import dataclass
        from typing import Optional

        from pydantic import BaseModel


        @dataclass
        class Base:
            id: int = 0
            name: str = ""


        @dataclass
        class Child(Base):
            name: Optional[str] = None
            extra: int = 0


        @dataclass
        class Keyed(Base):
            key: str


        class Model(BaseModel):
            id: int = 0


        class SubModel(Model):
            note: str = ""
        """
    )
    schemas = _by_name(src)
    child = schemas["Child"]
    assert child.field_names() == ("id", "name", "extra")
    assert child.fields[1].type == TypeExpr.parse("Optional[str]")
    assert child.default_constructible is True
    assert schemas["Keyed"].field_names() == ("id", "name", "key")
    assert schemas["Keyed"].default_constructible is False
    assert schemas["SubModel"].field_names() == ("id", "note")
