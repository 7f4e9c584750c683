"""
Tabular correspondence report (polars).

One row per correspondence, with the operation it belongs to. Operations with
no correspondences (e.g., a conversion that degenerates to the default value)
contribute a single row with null field columns, so every emitted operation is
visible in the report.
"""

from __future__ import annotations

import polars as pl

from corresponding.core.engine import GenerationResult
from corresponding.core.grammar import OperationKind

__all__ = [
    "REPORT_SCHEMA",
    "correspondence_frame",
    "pair_summary",
]

REPORT_SCHEMA: dict[str, type[pl.DataType]] = {
    "kind": pl.Utf8,
    "target_schema": pl.Utf8,
    "source_schema": pl.Utf8,
    "source_field": pl.Utf8,
    "target_field": pl.Utf8,
    "match_kind": pl.Utf8,
}


def correspondence_frame(
    result: GenerationResult, kind: OperationKind | None = None
) -> pl.DataFrame:
    """
    Flatten a generation pass into a DataFrame in emission order.

    Args:
        result (GenerationResult): Generation pass to tabulate.
        kind (OperationKind | None): Keep only operations of this kind.

    Returns:
        pl.DataFrame: Columns from REPORT_SCHEMA.
    """
    rows: list[dict[str, str | None]] = []
    for op in result.operations:
        if kind is not None and op.kind is not kind:
            continue
        base = {
            "kind": op.kind.value,
            "target_schema": op.target_schema,
            "source_schema": op.source_schema,
        }
        if not op.correspondences:
            rows.append({**base, "source_field": None, "target_field": None, "match_kind": None})
            continue
        for c in op.correspondences:
            rows.append(
                {
                    **base,
                    "source_field": c.source_field,
                    "target_field": c.target_field,
                    "match_kind": c.kind.value,
                }
            )
    return pl.DataFrame(rows, schema=REPORT_SCHEMA)


def pair_summary(result: GenerationResult, kind: OperationKind | None = None) -> pl.DataFrame:
    """Count correspondences per (kind, target_schema, source_schema), in emission order."""
    df = correspondence_frame(result, kind)
    return df.group_by(["kind", "target_schema", "source_schema"], maintain_order=True).agg(
        pl.col("match_kind").count().alias("n_fields")
    )
