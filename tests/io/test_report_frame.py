import polars as pl

from corresponding.core.engine import generate
from corresponding.core.grammar import OperationKind
from corresponding.core.schema import FieldDescriptor, Schema
from corresponding.io.report import REPORT_SCHEMA, correspondence_frame, pair_summary

SCHEMAS = [
    Schema(
        name="A",
        fields=[FieldDescriptor(name="a", type="int"), FieldDescriptor(name="b", type="int")],
        default_constructible=True,
    ),
    Schema(name="E", fields=[FieldDescriptor(name="z", type="int")]),
]


def test_frame_columns_and_rows() -> None:
    df = correspondence_frame(generate(SCHEMAS))
    assert df.columns == list(REPORT_SCHEMA)
    assert df.filter(
        (pl.col("kind") == "move") & (pl.col("source_schema") == "A") & (pl.col("target_schema") == "A")
    )["match_kind"].to_list() == ["plain_to_plain", "plain_to_plain"]


def test_empty_operations_have_null_row() -> None:
    df = correspondence_frame(generate(SCHEMAS))
    rows = df.filter((pl.col("kind") == "convert") & (pl.col("source_schema") == "E"))
    assert rows.height == 1
    assert rows["source_field"].to_list() == [None]


def test_pair_summary_counts() -> None:
    summary = pair_summary(generate(SCHEMAS))
    counts = {
        (r["kind"], r["source_schema"], r["target_schema"]): r["n_fields"]
        for r in summary.iter_rows(named=True)
    }
    assert counts[("move", "A", "A")] == 2
    assert counts[("convert", "E", "A")] == 0
    assert counts[("move", "A", "E")] == 0
    assert ("convert", "A", "E") not in counts


def test_empty_scope_frame() -> None:
    df = correspondence_frame(generate([]))
    assert df.height == 0
    assert df.columns == list(REPORT_SCHEMA)


def test_kind_filter() -> None:
    result = generate(SCHEMAS)
    df = correspondence_frame(result, OperationKind.CONVERT)
    assert set(df["kind"].to_list()) == {"convert"}
    assert set(df["target_schema"].to_list()) == {"A"}
    summary = pair_summary(result, OperationKind.MOVE)
    assert summary.height == 4
