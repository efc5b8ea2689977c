"""Data validation for the clean result dataset.

Provides null-rate, value-range and emptiness checks on the clean frame
before it is handed to persistence.
"""

from __future__ import annotations

from dataclasses import dataclass

import polars as pl

from src.common.logging import get_logger

logger = get_logger(__name__)

# Columns that are nullable by design and exempt from the null-rate check
_NULLABLE_COLUMNS = frozenset(
    [
        "race_distance",
        "start_type",
        "distance",
        "bib_number",
        "pace_string",
        "pace_seconds",
        "odds_decimal",
    ]
)


@dataclass
class ValidationError:
    """A single validation issue."""

    column: str
    error_type: str
    message: str


class DataValidator:
    """Validates clean result frames.

    Args:
        max_null_rate: Maximum allowed null fraction per non-nullable
            column (0.0-1.0).
    """

    def __init__(self, max_null_rate: float = 0.0) -> None:
        self._max_null_rate = max_null_rate

    def validate(self, df: pl.DataFrame) -> list[ValidationError]:
        """Run all validation checks on a DataFrame.

        Args:
            df: DataFrame to validate.

        Returns:
            List of validation errors (empty if valid).
        """
        errors: list[ValidationError] = []
        errors.extend(self._check_null_rates(df))
        errors.extend(self._check_ranges(df))
        errors.extend(self._check_empty(df))
        for err in errors:
            logger.warning(
                "Validation error",
                column=err.column,
                error_type=err.error_type,
                message=err.message,
            )
        return errors

    def _check_null_rates(self, df: pl.DataFrame) -> list[ValidationError]:
        """Check null rates of non-nullable columns."""
        errors: list[ValidationError] = []
        if df.is_empty():
            return errors

        row_count = len(df)
        for col in df.columns:
            if col in _NULLABLE_COLUMNS:
                continue
            null_rate = df[col].null_count() / row_count
            if null_rate > self._max_null_rate:
                errors.append(
                    ValidationError(
                        column=col,
                        error_type="high_null_rate",
                        message=(
                            f"Column '{col}' has {null_rate:.1%} nulls "
                            f"(threshold: {self._max_null_rate:.1%})"
                        ),
                    )
                )
        return errors

    def _check_ranges(self, df: pl.DataFrame) -> list[ValidationError]:
        """Prize money is never negative; odds and paces are never zero."""
        errors: list[ValidationError] = []
        checks = {
            "prize_cents": pl.col("prize_cents") < 0,
            "odds_decimal": pl.col("odds_decimal") == 0,
            "pace_seconds": pl.col("pace_seconds") == 0,
        }
        for col, bad in checks.items():
            if col not in df.columns:
                continue
            count = df.filter(bad).height
            if count:
                errors.append(
                    ValidationError(
                        column=col,
                        error_type="out_of_range",
                        message=f"Column '{col}' has {count} out-of-range values",
                    )
                )
        return errors

    def _check_empty(self, df: pl.DataFrame) -> list[ValidationError]:
        """Check if the DataFrame is empty."""
        if df.is_empty():
            return [
                ValidationError(
                    column="*",
                    error_type="empty_dataframe",
                    message="DataFrame has no rows",
                )
            ]
        return []
