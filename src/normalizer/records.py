"""Record types flowing through the normalizer.

``RawResultRecord`` mirrors one scraped row (one horse in one race) with
every value still a string. ``CleanResultRecord`` is the typed row handed
to persistence.

Bib migration note: the source carries the bib number under two
historical column names (``bib`` and ``bib_legacy``) with identical
meaning. Only the raw record keeps both; the clean record exposes a
single optional ``bib_number``.
"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from datetime import date
from enum import Enum


class Discipline(str, Enum):
    HARNESS = "Drafsport"
    FLAT = "Vlakkoers"


class StartType(str, Enum):
    AUTOSTART = "Autostart"
    VOLTESTART = "Voltestart"


class DropReason(str, Enum):
    DISCIPLINE = "discipline"
    CANCELLED = "cancelled"
    CURRENCY_FORMAT = "currency_format"
    DATE_TRACK_FORMAT = "date_track_format"


@dataclass(frozen=True)
class RawResultRecord:
    """One scraped result row, as ingested."""

    event_id: int
    date_track: str = ""
    race_time: str = ""
    race_number: str = ""
    title: str = ""
    description_1: str = ""
    description_2: str = ""
    description_3: str = ""
    race_info: str = ""
    position: str = ""
    horse: str = ""
    driver: str = ""
    distance: str = ""
    bib: str = ""
    bib_legacy: str = ""
    # Flat-racing only, never parsed
    draw: str = ""
    distance_between: str = ""
    handicap: str = ""
    prize_money: str = ""
    odds: str = ""
    pace: str = ""


@dataclass(frozen=True)
class CleanResultRecord:
    """One normalized result row."""

    event_id: int
    discipline: Discipline
    race_distance: float | None
    start_type: StartType | None
    date: date
    racecourse: str
    race_time: str
    race_number: str
    title: str
    description: str
    position: str
    horse: str
    driver: str
    distance: float | None
    bib_number: int | None
    pace_string: str | None
    pace_seconds: float | None
    prize_cents: int
    odds_decimal: float | None


@dataclass(frozen=True)
class DataQualityWarning:
    """An anomaly kept alongside the parsed value rather than resolved."""

    event_id: int
    race_number: str
    horse: str
    field: str
    kind: str
    message: str


@dataclass
class NormalizationResult:
    """Output of one normalizer run.

    Attributes:
        records: Clean records in input order.
        dropped: Number of dropped raw records per reason.
        warnings: Data-quality anomalies found while parsing.
    """

    records: list[CleanResultRecord] = field(default_factory=list)
    dropped: Counter[DropReason] = field(default_factory=Counter)
    warnings: list[DataQualityWarning] = field(default_factory=list)

    @property
    def dropped_count(self) -> int:
        return sum(self.dropped.values())
