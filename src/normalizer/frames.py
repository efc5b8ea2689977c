"""Conversion between Polars frames and record dataclasses."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import asdict

import polars as pl

from src.normalizer.records import CleanResultRecord, RawResultRecord
from src.normalizer.schemas import CLEAN_RESULT_SCHEMA, RAW_RESULT_SCHEMA


def conform_raw_frame(df: pl.DataFrame) -> pl.DataFrame:
    """Give a frame exactly the raw schema.

    Missing text columns are added as empty strings, nulls in text columns
    become ``''`` and unknown columns are dropped.

    Raises:
        ValueError: If ``event_id`` is missing.
    """
    if "event_id" not in df.columns:
        raise ValueError("Raw frame has no 'event_id' column")

    exprs: list[pl.Expr] = []
    for col, dtype in RAW_RESULT_SCHEMA.items():
        if col == "event_id":
            exprs.append(pl.col(col).cast(dtype))
        elif col in df.columns:
            exprs.append(pl.col(col).cast(dtype).fill_null("").alias(col))
        else:
            exprs.append(pl.lit("", dtype=dtype).alias(col))
    return df.select(exprs)


def records_from_frame(df: pl.DataFrame) -> list[RawResultRecord]:
    """Turn a raw frame into ``RawResultRecord`` values, preserving order."""
    df = conform_raw_frame(df)
    return [RawResultRecord(**row) for row in df.iter_rows(named=True)]


def frame_from_records(records: Sequence[CleanResultRecord]) -> pl.DataFrame:
    """Build a frame with ``CLEAN_RESULT_SCHEMA`` from clean records."""
    rows = []
    for record in records:
        row = asdict(record)
        row["discipline"] = record.discipline.value
        row["start_type"] = record.start_type.value if record.start_type else None
        rows.append(row)
    return pl.DataFrame(rows, schema=CLEAN_RESULT_SCHEMA)
