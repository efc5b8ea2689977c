"""Result normalizer: raw scraped rows in, clean typed rows out.

Per record the order is fixed: discipline/cancellation filter, then for
every field the pre-parse corrections, the generic parser and the
post-parse corrections. Records never influence each other.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

import polars as pl

from src.common.config import NormalizerConfig, get_settings
from src.common.logging import get_logger
from src.normalizer.corrections import DEFAULT_REGISTRY, CorrectionRegistry
from src.normalizer.filters import RaceInfo, RecordFilter, format_race_info
from src.normalizer.frames import frame_from_records, records_from_frame
from src.normalizer.parsers import (
    CurrencyFormatError,
    DateTrackFormatError,
    correct_odds,
    correct_pace_seconds,
    format_date_track,
    format_distance,
    format_odds,
    format_prize_money,
    is_bib_token_recognized,
    is_canonical_pace,
    normalize_pace,
    pace_to_seconds,
    parse_bib,
    parse_date_track,
    parse_distance,
    parse_odds,
    parse_prize_money,
)
from src.normalizer.records import (
    CleanResultRecord,
    DataQualityWarning,
    Discipline,
    DropReason,
    NormalizationResult,
    RawResultRecord,
)

logger = get_logger(__name__)


class ResultNormalizer:
    """Turns raw result records into clean records.

    Args:
        registry: Correction rules. Defaults to the curated registry.
        config: Normalizer settings. Defaults to ``settings.normalizer``.
    """

    def __init__(
        self,
        registry: CorrectionRegistry | None = None,
        config: NormalizerConfig | None = None,
    ) -> None:
        self._registry = registry if registry is not None else DEFAULT_REGISTRY
        self._config = config if config is not None else get_settings().normalizer
        self._filter = RecordFilter(
            harness_label=self._config.harness_label,
            cancellation_codes=self._config.cancellation_codes,
        )

    def normalize(self, records: Sequence[RawResultRecord]) -> NormalizationResult:
        """Filter, parse and correct every record.

        Args:
            records: Raw records in input order.

        Returns:
            NormalizationResult with clean records, drop counts and
            data-quality warnings.

        Raises:
            DateTrackFormatError: Only when ``strict_integrity`` is set and
                a date/track value is malformed.
        """
        result = NormalizationResult()
        kept, dropped = self._filter.filter(records)
        result.dropped.update(dropped)

        for record, info in kept:
            warnings: list[DataQualityWarning] = []
            try:
                clean = self._normalize_record(record, info, warnings)
            except CurrencyFormatError as e:
                # The rest of such a row is cross-contaminated as well
                result.dropped[DropReason.CURRENCY_FORMAT] += 1
                logger.warning(
                    "Record dropped",
                    reason=DropReason.CURRENCY_FORMAT,
                    event_id=record.event_id,
                    race_number=record.race_number,
                    horse=record.horse,
                    error=str(e),
                )
                continue
            except DateTrackFormatError as e:
                if self._config.strict_integrity:
                    raise
                result.dropped[DropReason.DATE_TRACK_FORMAT] += 1
                logger.error(
                    "Record dropped",
                    reason=DropReason.DATE_TRACK_FORMAT,
                    event_id=record.event_id,
                    race_number=record.race_number,
                    horse=record.horse,
                    error=str(e),
                )
                continue
            result.records.append(clean)
            result.warnings.extend(warnings)

        logger.info(
            "Normalization complete",
            input_rows=len(records),
            clean_rows=len(result.records),
            dropped=result.dropped_count,
            warnings=len(result.warnings),
        )
        return result

    def normalize_frame(
        self, df: pl.DataFrame
    ) -> tuple[pl.DataFrame, NormalizationResult]:
        """Normalize a raw frame and return the clean frame with the result."""
        result = self.normalize(records_from_frame(df))
        return frame_from_records(result.records), result

    def _normalize_record(
        self,
        record: RawResultRecord,
        info: RaceInfo,
        warnings: list[DataQualityWarning],
    ) -> CleanResultRecord:
        registry = self._registry

        def raw(field: str) -> str:
            return registry.apply_pre_parse(record, field, getattr(record, field))

        def warn(field: str, kind: str, message: str) -> None:
            warnings.append(
                DataQualityWarning(
                    event_id=record.event_id,
                    race_number=record.race_number,
                    horse=record.horse,
                    field=field,
                    kind=kind,
                    message=message,
                )
            )
            logger.warning(
                "Data quality warning",
                event_id=record.event_id,
                race_number=record.race_number,
                horse=record.horse,
                field=field,
                kind=kind,
                message=message,
            )

        race_date, racecourse = parse_date_track(raw("date_track"))
        prize_cents = parse_prize_money(raw("prize_money"))

        if info.start_type is None and info.start_type_token:
            warn(
                "start_type",
                "unknown_start_type",
                f"Start type {info.start_type_token!r}",
            )

        raw_pace = raw("pace")
        pace_string = normalize_pace(raw_pace)
        if pace_string is not None and not is_canonical_pace(pace_string):
            warn(
                "pace_string",
                "non_canonical_pace",
                f"Pace {raw_pace!r} kept as given",
            )
        pace_seconds = correct_pace_seconds(pace_to_seconds(pace_string))

        bib, bib_legacy = raw("bib"), raw("bib_legacy")
        bib_number, conflict = parse_bib(bib, bib_legacy)
        if conflict:
            warn(
                "bib_number",
                "bib_conflict",
                f"Both bib columns filled ({bib!r}, {bib_legacy!r}); "
                "first column used",
            )
        if not is_bib_token_recognized(bib or bib_legacy):
            warn("bib_number", "unparseable_bib", f"Bib {bib or bib_legacy!r}")

        descriptions = [raw(f"description_{i}") for i in (1, 2, 3)]

        values: dict[str, Any] = {
            "discipline": Discipline.HARNESS,
            "race_distance": info.race_distance,
            "start_type": info.start_type,
            "date": race_date,
            "racecourse": racecourse,
            "race_time": raw("race_time"),
            "title": raw("title"),
            "description": " ".join(d for d in descriptions if d),
            "position": raw("position"),
            "horse": raw("horse"),
            "driver": raw("driver"),
            "distance": parse_distance(raw("distance")),
            "bib_number": bib_number,
            "pace_string": pace_string,
            "pace_seconds": pace_seconds,
            "prize_cents": prize_cents,
            "odds_decimal": correct_odds(parse_odds(raw("odds"))),
        }
        for field, value in values.items():
            values[field] = registry.apply_post_parse(record, field, value)

        pace_seconds = values["pace_seconds"]
        if pace_seconds is not None and pace_seconds < self._config.pace_floor_seconds:
            warn(
                "pace_seconds",
                "pace_below_floor",
                f"Pace {pace_seconds}s/km below {self._config.pace_floor_seconds}s/km "
                "with no correction rule",
            )

        return CleanResultRecord(
            event_id=record.event_id,
            race_number=record.race_number,
            **values,
        )


def to_raw(record: CleanResultRecord) -> RawResultRecord:
    """Render a clean record back into the raw string grammar.

    Normalizing the result yields ``record`` again.
    """
    return RawResultRecord(
        event_id=record.event_id,
        date_track=format_date_track(record.date, record.racecourse),
        race_time=record.race_time,
        race_number=record.race_number,
        title=record.title,
        description_1=record.description,
        race_info=format_race_info(
            record.discipline.value, record.race_distance, record.start_type
        ),
        position=record.position,
        horse=record.horse,
        driver=record.driver,
        distance=format_distance(record.distance),
        bib=str(record.bib_number) if record.bib_number is not None else "",
        prize_money=format_prize_money(record.prize_cents),
        odds=format_odds(record.odds_decimal),
        pace=record.pace_string or "",
    )
