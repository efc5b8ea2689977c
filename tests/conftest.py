"""Shared pytest fixtures for the normalizer test suite.

Provides a raw-record factory and a small mixed batch covering the
filters, every parser and each correction rule family.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

import pytest

from src.common.config import NormalizerConfig
from src.normalizer.corrections import (
    CURATED_RULES,
    CorrectionRegistry,
    CorrectionRule,
    NullDerivedValue,
    RecordKey,
    ReplaceRawValue,
)
from src.normalizer.records import RawResultRecord
from src.pipeline.normalizer import ResultNormalizer

# ---------------------------------------------------------------------------
# Record factory
# ---------------------------------------------------------------------------

_BASE_ROW: dict[str, Any] = {
    "event_id": 30001,
    "date_track": "14-05-19, Kuurne",
    "race_time": "14:30",
    "race_number": "3",
    "title": "Prix de Printemps",
    "description_1": "Voor 4-jarigen",
    "description_2": "",
    "description_3": "",
    "race_info": "Drafsport - 2100m - Autostart",
    "position": "1",
    "horse": "Ulysse du Vivier",
    "driver": "J. Verbeeck",
    "distance": "2100",
    "bib": "7",
    "bib_legacy": "",
    "prize_money": "€ 1.250,00",
    "odds": "7,4",
    "pace": "1.16,3",
}


def _make_raw(**overrides: Any) -> RawResultRecord:
    return RawResultRecord(**{**_BASE_ROW, **overrides})


@pytest.fixture
def make_raw() -> Callable[..., RawResultRecord]:
    """Factory building a well-formed harness record with overrides."""
    return _make_raw


@pytest.fixture
def normalizer_config() -> NormalizerConfig:
    return NormalizerConfig()


# One rule per family, keyed to fixture records only
_EXAMPLE_RULES: tuple[CorrectionRule, ...] = (
    ReplaceRawValue(RecordKey(26905, "6", position="3"), "pace", ""),
    ReplaceRawValue(RecordKey(28412, "3", horse="Iris de la Motte"), "bib", "1"),
    ReplaceRawValue(RecordKey(27530, "5", horse="Quinto Bello"), "distance", "2120"),
    ReplaceRawValue(RecordKey(27530, "5", horse="Rapide des Prés"), "distance", "2120"),
    NullDerivedValue(RecordKey(30118, "2", position="9"), "distance"),
)


@pytest.fixture
def example_registry() -> CorrectionRegistry:
    """Curated rules plus the fixture-only example rules."""
    return CorrectionRegistry([*CURATED_RULES, *_EXAMPLE_RULES])


@pytest.fixture
def normalizer(
    normalizer_config: NormalizerConfig, example_registry: CorrectionRegistry
) -> ResultNormalizer:
    """Normalizer with default settings and the example registry."""
    return ResultNormalizer(registry=example_registry, config=normalizer_config)


# ---------------------------------------------------------------------------
# Mixed batch
# ---------------------------------------------------------------------------


@pytest.fixture
def mixed_batch() -> list[RawResultRecord]:
    """Ten raw rows: six survive, four are dropped for different reasons."""
    return [
        _make_raw(),
        _make_raw(position="2", horse="Vasco Sport", bib="", bib_legacy="4", pace="1,20.9"),
        _make_raw(position="3", horse="Wonder Boy", bib="A", odds="0", pace="GT"),
        _make_raw(race_info="Vlakkoers - 1600m", horse="Flat Runner"),
        _make_raw(race_number="0", title="Koers afgelast", horse="Void One"),
        _make_raw(race_number="24", title="Koers afgelast", horse="Void Two"),
        _make_raw(horse="Broken Row", prize_money="Plaats 4"),
        _make_raw(event_id=29254, race_number="8", position="5", horse="Shifted", pace="0.31,2"),
        _make_raw(
            event_id=30118, race_number="2", position="9", horse="Zero Dist", distance="0"
        ),
        _make_raw(race_info="Drafsport", horse="Legacy Row", odds=",8", prize_money=""),
    ]
