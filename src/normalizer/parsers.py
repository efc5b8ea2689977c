"""Field parsers for scraped result strings.

Each parser is a pure function over one raw value. Parsers return a typed
value or ``None``; only the currency and date/track parsers raise, and
only with a ``NormalizationError`` subclass that the pipeline turns into a
dropped record.
"""

from __future__ import annotations

import re
from datetime import date, datetime
from decimal import Decimal

# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------


class NormalizationError(Exception):
    """Base error for values that invalidate the whole record."""


class CurrencyFormatError(NormalizationError):
    """Prize money string matches neither accepted layout."""


class DateTrackFormatError(NormalizationError):
    """Date/track string is not ``DD-MM-YY, <racecourse>``."""


# ---------------------------------------------------------------------------
# Date / track
# ---------------------------------------------------------------------------

_DATE_TRACK_RE = re.compile(r"\d{2}-\d{2}-\d{2}, .+")


def parse_date_track(text: str) -> tuple[date, str]:
    """Split ``'DD-MM-YY, Racecourse'`` into a date and a racecourse name.

    Args:
        text: Composite date/track string.

    Returns:
        Tuple of (race date, racecourse).

    Raises:
        DateTrackFormatError: If the string does not have the expected
            layout or the date part is not a calendar date.
    """
    if not _DATE_TRACK_RE.fullmatch(text):
        raise DateTrackFormatError(f"Unexpected date/track value: {text!r}")
    date_part, racecourse = text.split(", ", 1)
    try:
        race_date = datetime.strptime(date_part, "%d-%m-%y").date()
    except ValueError as e:
        raise DateTrackFormatError(f"Invalid date in {text!r}") from e
    return race_date, racecourse


def format_date_track(race_date: date, racecourse: str) -> str:
    return f"{race_date:%d-%m-%y}, {racecourse}"


# ---------------------------------------------------------------------------
# Prize money
# ---------------------------------------------------------------------------

# Thousands grouped with '.', or ungrouped; always two decimals after ','
_CURRENCY_RE = re.compile(r"€ (?:\d{1,3}(?:\.\d{3})+|\d+),\d{2}")


def parse_prize_money(text: str) -> int:
    """Parse a prize money string into Euro cents.

    ``''`` means no prize (0). ``'€ 1.250,00'`` becomes ``125000``.

    Raises:
        CurrencyFormatError: For any other layout.
    """
    if text == "":
        return 0
    if not _CURRENCY_RE.fullmatch(text):
        raise CurrencyFormatError(f"Unexpected prize money value: {text!r}")
    cents = int(text[2:].replace(".", "").replace(",", ""))
    # Stored as Int64
    if cents > 2**63 - 1:
        raise CurrencyFormatError(f"Prize money out of range: {text!r}")
    return cents


def format_prize_money(cents: int) -> str:
    """Render cents in the source layout (inverse of ``parse_prize_money``)."""
    if cents == 0:
        return ""
    euros, rest = divmod(cents, 100)
    grouped = f"{euros:,}".replace(",", ".")
    return f"€ {grouped},{rest:02d}"


# ---------------------------------------------------------------------------
# Number rendering
# ---------------------------------------------------------------------------


def _plain_number(value: float) -> str:
    """Shortest round-tripping digits, never in exponent notation."""
    if value.is_integer():
        return str(int(value))
    return format(Decimal(repr(value)), "f")


# ---------------------------------------------------------------------------
# Odds
# ---------------------------------------------------------------------------

_ODDS_RE = re.compile(r"\d+(?:,\d+)?")


def parse_odds(text: str) -> float | None:
    """Parse odds written with a decimal comma (``'7,4'`` -> 7.4).

    Empty strings and entries without an integer part (``',8'``) give None.
    """
    if not _ODDS_RE.fullmatch(text):
        return None
    return float(text.replace(",", "."))


def correct_odds(value: float | None) -> float | None:
    """Odds of exactly zero cannot be quoted."""
    if value == 0:
        return None
    return value


def format_odds(value: float | None) -> str:
    if value is None:
        return ""
    return _plain_number(value).replace(".", ",")


# ---------------------------------------------------------------------------
# Pace (reduction kilometrique)
# ---------------------------------------------------------------------------

PACE_SENTINELS = frozenset(["GT", "gto"])

_PACE_CANONICAL_RE = re.compile(r"\d\.\d{2},\d")
_PACE_TRANSPOSED_RE = re.compile(r",\d")


def is_canonical_pace(text: str) -> bool:
    return bool(_PACE_CANONICAL_RE.fullmatch(text))


def normalize_pace(text: str) -> str | None:
    """Bring a pace string into the ``M.SS,D`` layout where possible.

    - ``'GT'`` / ``'gto'`` (no time taken) and ``''`` give None.
    - Six-character strings with swapped separators (``'1,20.9'``) are
      rewritten to ``'1.20,9'``.
    - Anything else is returned unchanged.
    """
    if text == "" or text in PACE_SENTINELS:
        return None
    if (
        len(text) == 6
        and not is_canonical_pace(text)
        and _PACE_TRANSPOSED_RE.search(text)
    ):
        dotted = text.replace(",", ".")
        return dotted[:-2] + "," + dotted[-1] if dotted[-2] == "." else dotted
    return text


def pace_to_seconds(text: str | None) -> float | None:
    """Convert ``M.SS,D`` to seconds per kilometer (``'1.20,9'`` -> 80.9).

    Returns None when either the minute or the seconds part does not parse.
    """
    if not text:
        return None
    minutes_part, sep, seconds_part = text.partition(".")
    if not sep:
        return None
    try:
        minutes = int(minutes_part)
        seconds = float(seconds_part.replace(",", "."))
    except ValueError:
        return None
    return round(minutes * 60 + seconds, 1)


def correct_pace_seconds(value: float | None) -> float | None:
    """A pace of exactly zero seconds is impossible."""
    if value == 0:
        return None
    return value


# ---------------------------------------------------------------------------
# Bib number
# ---------------------------------------------------------------------------

# Horse withdrawn / bib unknown
BIB_SENTINELS = frozenset(["A"])

_BIB_RE = re.compile(r"[0-9]+")
# Bibs are stored as Int32
_BIB_MAX = 2**31 - 1


def _bib_value(token: str) -> int | None:
    if not _BIB_RE.fullmatch(token):
        return None
    value = int(token)
    return value if value <= _BIB_MAX else None


def parse_bib(primary: str, legacy: str) -> tuple[int | None, bool]:
    """Parse the bib number from whichever of the two columns is filled.

    Args:
        primary: Value of the current bib column.
        legacy: Value of the historical bib column.

    Returns:
        Tuple of (bib number or None, conflict flag). The flag is True when
        both columns are filled; the primary column is used in that case.
    """
    conflict = bool(primary) and bool(legacy)
    token = primary or legacy
    return _bib_value(token), conflict


def is_bib_token_recognized(token: str) -> bool:
    return token == "" or token in BIB_SENTINELS or _bib_value(token) is not None


# ---------------------------------------------------------------------------
# Distances
# ---------------------------------------------------------------------------

_DISTANCE_RE = re.compile(r"\d+(?:[.,]\d+)?")
_RACE_DISTANCE_RE = re.compile(r"(\d{1,3}(?:\.\d{3})+|\d+)\s*m?")


def parse_distance(text: str) -> float | None:
    """Parse the per-horse distance column (empty or non-numeric -> None)."""
    text = text.strip()
    if not _DISTANCE_RE.fullmatch(text):
        return None
    return float(text.replace(",", "."))


def format_distance(value: float | None) -> str:
    if value is None:
        return ""
    return _plain_number(value)


def parse_race_distance(token: str) -> float | None:
    """Parse the distance token of the race-info string (``'2.100m'``)."""
    match = _RACE_DISTANCE_RE.fullmatch(token.strip())
    if match is None:
        return None
    return float(match.group(1).replace(".", ""))
