"""Loader for scraped result CSV batches.

Reads every CSV batch in a directory, maps the scraped headers to
internal names and concatenates the batches into one ordered record
sequence.
"""

from __future__ import annotations

from pathlib import Path

import polars as pl

from src.common.config import get_settings
from src.common.logging import get_logger
from src.normalizer.frames import conform_raw_frame, records_from_frame
from src.normalizer.records import RawResultRecord
from src.normalizer.schemas import SOURCE_COLUMN_MAP

logger = get_logger(__name__)


class ResultLoader:
    """Loads raw result rows from CSV batches.

    Every column is read as text so that separators and sentinel tokens
    reach the parsers untouched. Batches are concatenated in file-name
    order.

    Args:
        data_dir: Directory containing the CSV batches.
            Defaults to settings.io.data_dir.
    """

    def __init__(self, data_dir: Path | None = None) -> None:
        settings = get_settings()
        if data_dir is not None:
            self._data_dir = Path(data_dir)
        else:
            self._data_dir = Path(settings.io.data_dir)
        self._separator = settings.io.csv_separator

    def _batch_paths(self) -> list[Path]:
        return sorted(self._data_dir.glob("*.csv"))

    def _read_csv(self, path: Path) -> pl.DataFrame:
        """Read one CSV batch, all columns as strings.

        Tries UTF-8 first, then Windows-1252 (older exports).
        """
        try:
            df = pl.read_csv(
                path,
                separator=self._separator,
                infer_schema_length=0,
                encoding="utf8",
            )
            logger.debug("Read CSV with UTF-8 encoding", path=str(path))
            return df
        except pl.exceptions.ComputeError:
            logger.debug("UTF-8 failed, trying cp1252", path=str(path))
            return pl.read_csv(
                path,
                separator=self._separator,
                infer_schema_length=0,
                encoding="cp1252",
            )

    def _apply_column_mapping(self, df: pl.DataFrame) -> pl.DataFrame:
        """Rename scraped headers to internal names.

        Columns already carrying internal names are left as they are.
        """
        col_map = {k: v for k, v in SOURCE_COLUMN_MAP.items() if k in df.columns}
        logger.debug("Column mapping applied", mapped=len(col_map))
        return df.rename(col_map)

    def load_frame(self) -> pl.DataFrame:
        """Load and concatenate all batches into one raw frame.

        Raises:
            FileNotFoundError: If the directory holds no CSV batch.
        """
        paths = self._batch_paths()
        if not paths:
            logger.error("No CSV batches found", data_dir=str(self._data_dir))
            raise FileNotFoundError(f"No CSV batches in {self._data_dir}")

        frames = []
        for path in paths:
            df = self._apply_column_mapping(self._read_csv(path))
            frames.append(conform_raw_frame(df))
            logger.info("Batch loaded", path=str(path), rows=len(df))

        combined = pl.concat(frames, how="vertical")
        logger.info("Raw results loaded", batches=len(frames), rows=len(combined))
        return combined

    def load(self) -> list[RawResultRecord]:
        """Load all batches as ``RawResultRecord`` values."""
        return records_from_frame(self.load_frame())
