"""Discipline and cancellation filters.

Runs before any field parser: everything downstream assumes a harness
race that actually took place.
"""

from __future__ import annotations

from collections import Counter
from collections.abc import Iterable, Sequence
from dataclasses import dataclass

from src.common.logging import get_logger
from src.normalizer.parsers import parse_race_distance
from src.normalizer.records import DropReason, RawResultRecord, StartType

logger = get_logger(__name__)

RACE_INFO_DELIMITER = " - "

_START_TYPES = {member.value.lower(): member for member in StartType}


@dataclass(frozen=True)
class RaceInfo:
    """Parsed ``'Discipline - Distance - StartType'`` string.

    Legacy rows carry the discipline only; the other attributes are then
    None. ``start_type_token`` keeps the raw token so an unknown start type
    can be reported.
    """

    discipline: str
    race_distance: float | None = None
    start_type: StartType | None = None
    start_type_token: str = ""


def split_race_info(text: str) -> RaceInfo:
    """Split the composite race-info column.

    Args:
        text: Race info, e.g. ``'Drafsport - 2100m - Autostart'``.

    Returns:
        RaceInfo with discipline, race distance and start type.
    """
    tokens = text.split(RACE_INFO_DELIMITER)
    discipline = tokens[0].strip()
    if len(tokens) < 3:
        return RaceInfo(discipline=discipline)

    start_token = tokens[2].strip()
    return RaceInfo(
        discipline=discipline,
        race_distance=parse_race_distance(tokens[1]),
        start_type=_START_TYPES.get(start_token.lower()),
        start_type_token=start_token,
    )


def format_race_info(
    discipline: str,
    race_distance: float | None,
    start_type: StartType | None,
) -> str:
    """Render race info in the source layout (inverse of ``split_race_info``)."""
    if race_distance is None and start_type is None:
        return discipline
    distance = f"{int(race_distance)}m" if race_distance is not None else ""
    start = start_type.value if start_type is not None else ""
    return RACE_INFO_DELIMITER.join([discipline, distance, start])


def is_harness(info: RaceInfo, harness_label: str) -> bool:
    return info.discipline == harness_label


def is_cancelled(race_number: str, cancellation_codes: Iterable[str]) -> bool:
    """Race numbers 0 and 20-29 mark voided races, not race ordinals."""
    return race_number in cancellation_codes


class RecordFilter:
    """Keeps harness races that were actually run.

    Args:
        harness_label: Discipline label of harness racing.
        cancellation_codes: Race-number values that mark a voided race.
    """

    def __init__(self, harness_label: str, cancellation_codes: Iterable[str]) -> None:
        self._harness_label = harness_label
        self._cancellation_codes = frozenset(cancellation_codes)

    def filter(
        self, records: Sequence[RawResultRecord]
    ) -> tuple[list[tuple[RawResultRecord, RaceInfo]], Counter[DropReason]]:
        """Drop other disciplines first, then cancelled races.

        Args:
            records: Raw records in input order.

        Returns:
            Tuple of (kept records paired with their parsed race info,
            drop counts per reason).
        """
        kept: list[tuple[RawResultRecord, RaceInfo]] = []
        dropped: Counter[DropReason] = Counter()

        for record in records:
            info = split_race_info(record.race_info)
            if not is_harness(info, self._harness_label):
                dropped[DropReason.DISCIPLINE] += 1
                continue
            if is_cancelled(record.race_number, self._cancellation_codes):
                dropped[DropReason.CANCELLED] += 1
                continue
            kept.append((record, info))

        logger.info(
            "Records filtered",
            total=len(records),
            kept=len(kept),
            dropped_discipline=dropped[DropReason.DISCIPLINE],
            dropped_cancelled=dropped[DropReason.CANCELLED],
        )
        return kept, dropped
