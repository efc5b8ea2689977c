"""Hand-curated corrections for individually known-bad records.

Generic parsers cannot tell a transcription slip from a legitimately odd
value, so records traced back to specific source-page failures are fixed
by name here. Each rule targets one record through its natural key and
runs at a fixed phase:

- ``pre-parse``: replace a raw string before the field parser sees it.
- ``post-parse``: null or replace a derived value after parsing.

A rule whose target is absent from the current record set does nothing.
"""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Iterable, Iterator
from dataclasses import dataclass, fields
from enum import Enum
from typing import Any, ClassVar

from src.common.logging import get_logger
from src.normalizer.records import CleanResultRecord, RawResultRecord

logger = get_logger(__name__)


class Phase(str, Enum):
    PRE_PARSE = "pre-parse"
    POST_PARSE = "post-parse"


@dataclass(frozen=True)
class RecordKey:
    """Natural key of a result row: event, race and optionally horse/position."""

    event_id: int
    race_number: str
    horse: str | None = None
    position: str | None = None

    def matches(self, record: RawResultRecord) -> bool:
        if record.event_id != self.event_id or record.race_number != self.race_number:
            return False
        if self.horse is not None and record.horse != self.horse:
            return False
        if self.position is not None and record.position != self.position:
            return False
        return True


@dataclass(frozen=True)
class ReplaceRawValue:
    key: RecordKey
    field: str
    value: str
    note: str = ""

    phase: ClassVar[Phase] = Phase.PRE_PARSE

    def apply(self, current: Any) -> Any:
        return self.value


@dataclass(frozen=True)
class NullDerivedValue:
    key: RecordKey
    field: str
    note: str = ""

    phase: ClassVar[Phase] = Phase.POST_PARSE

    def apply(self, current: Any) -> Any:
        return None


@dataclass(frozen=True)
class ReplaceDerivedValue:
    key: RecordKey
    field: str
    value: Any
    note: str = ""

    phase: ClassVar[Phase] = Phase.POST_PARSE

    def apply(self, current: Any) -> Any:
        return self.value


CorrectionRule = ReplaceRawValue | NullDerivedValue | ReplaceDerivedValue

# Key and filter columns are read before any rule runs
_RAW_FIELDS = frozenset(f.name for f in fields(RawResultRecord)) - {
    "event_id",
    "race_number",
    "race_info",
}
_CLEAN_FIELDS = frozenset(f.name for f in fields(CleanResultRecord)) - {
    "event_id",
    "race_number",
}


class CorrectionRegistry:
    """Read-only lookup of correction rules by (event id, race number).

    Args:
        rules: Rules to register.

    Raises:
        ValueError: If a rule names a field that does not exist for its
            phase (raw fields for pre-parse, clean fields for post-parse).
    """

    def __init__(self, rules: Iterable[CorrectionRule] = ()) -> None:
        self._rules: list[CorrectionRule] = []
        self._index: dict[tuple[int, str], list[CorrectionRule]] = defaultdict(list)
        for rule in rules:
            self._check(rule)
            self._rules.append(rule)
            self._index[(rule.key.event_id, rule.key.race_number)].append(rule)

    @staticmethod
    def _check(rule: CorrectionRule) -> None:
        allowed = _RAW_FIELDS if rule.phase is Phase.PRE_PARSE else _CLEAN_FIELDS
        if rule.field not in allowed:
            raise ValueError(
                f"{type(rule).__name__} targets unknown {rule.phase.value} "
                f"field '{rule.field}'"
            )

    def __len__(self) -> int:
        return len(self._rules)

    def __iter__(self) -> Iterator[CorrectionRule]:
        return iter(self._rules)

    def rules_for(
        self, record: RawResultRecord, phase: Phase, field: str
    ) -> list[CorrectionRule]:
        """Rules of one phase that target ``field`` on ``record``."""
        candidates = self._index.get((record.event_id, record.race_number), [])
        return [
            rule
            for rule in candidates
            if rule.phase is phase and rule.field == field and rule.key.matches(record)
        ]

    def _apply(
        self, record: RawResultRecord, phase: Phase, field: str, value: Any
    ) -> Any:
        for rule in self.rules_for(record, phase, field):
            corrected = rule.apply(value)
            logger.debug(
                "Correction applied",
                event_id=record.event_id,
                race_number=record.race_number,
                horse=record.horse,
                field=field,
                phase=phase.value,
                before=value,
                after=corrected,
            )
            value = corrected
        return value

    def apply_pre_parse(self, record: RawResultRecord, field: str, value: str) -> str:
        """Return the raw value to feed the parser of ``field``."""
        return self._apply(record, Phase.PRE_PARSE, field, value)

    def apply_post_parse(self, record: RawResultRecord, field: str, value: Any) -> Any:
        """Return the derived value of ``field`` after plausibility fixes."""
        return self._apply(record, Phase.POST_PARSE, field, value)


# ---------------------------------------------------------------------------
# Curated rules
# ---------------------------------------------------------------------------

CURATED_RULES: tuple[CorrectionRule, ...] = (
    # Pace below 40 s/km, finisher times on the source page are shifted
    NullDerivedValue(
        RecordKey(29254, "8", position="5"),
        "pace_seconds",
        note="0.31,2 recorded; impossible pace",
    ),
)

DEFAULT_REGISTRY = CorrectionRegistry(CURATED_RULES)
