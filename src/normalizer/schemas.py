"""Schema definitions for raw and clean result tables.

Centralizes column definitions using Polars DataTypes for the frames
exchanged with ingestion and persistence.
"""

from __future__ import annotations

import polars as pl

# ---------------------------------------------------------------------------
# Raw schema (one scraped row per horse per race, all text but the event id)
# ---------------------------------------------------------------------------

RAW_RESULT_SCHEMA: dict[str, type[pl.DataType]] = {
    "event_id": pl.Int64,
    "date_track": pl.Utf8,
    "race_time": pl.Utf8,
    "race_number": pl.Utf8,
    "title": pl.Utf8,
    "description_1": pl.Utf8,
    "description_2": pl.Utf8,
    "description_3": pl.Utf8,
    "race_info": pl.Utf8,
    "position": pl.Utf8,
    "horse": pl.Utf8,
    "driver": pl.Utf8,
    "distance": pl.Utf8,
    "bib": pl.Utf8,
    "bib_legacy": pl.Utf8,
    "draw": pl.Utf8,
    "distance_between": pl.Utf8,
    "handicap": pl.Utf8,
    "prize_money": pl.Utf8,
    "odds": pl.Utf8,
    "pace": pl.Utf8,
}

# ---------------------------------------------------------------------------
# Clean schema
# ---------------------------------------------------------------------------

CLEAN_RESULT_SCHEMA: dict[str, type[pl.DataType]] = {
    "event_id": pl.Int64,
    "discipline": pl.Utf8,
    "race_distance": pl.Float64,
    "start_type": pl.Utf8,
    "date": pl.Date,
    "racecourse": pl.Utf8,
    "race_time": pl.Utf8,
    "race_number": pl.Utf8,
    "title": pl.Utf8,
    "description": pl.Utf8,
    "position": pl.Utf8,
    "horse": pl.Utf8,
    "driver": pl.Utf8,
    "distance": pl.Float64,
    "bib_number": pl.Int32,
    "pace_string": pl.Utf8,
    "pace_seconds": pl.Float64,
    "prize_cents": pl.Int64,
    "odds_decimal": pl.Float64,
}

# ---------------------------------------------------------------------------
# Column mapping: scraped CSV headers → internal names
# ---------------------------------------------------------------------------

SOURCE_COLUMN_MAP: dict[str, str] = {
    "Evenement": "event_id",
    "Datum en Baan": "date_track",
    "Uur": "race_time",
    "Koers": "race_number",
    "Titel": "title",
    "Beschrijving 1": "description_1",
    "Beschrijving 2": "description_2",
    "Beschrijving 3": "description_3",
    "Koersinfo": "race_info",
    "Plaats": "position",
    "Paard": "horse",
    "Pikeur": "driver",
    "Afstand": "distance",
    "Nummer": "bib",
    "Rugnummer": "bib_legacy",
    "Startplaats": "draw",
    "Afstand tot vorige": "distance_between",
    "Handicap": "handicap",
    "Prijzengeld": "prize_money",
    "Kans": "odds",
    "Reductie": "pace",
}
