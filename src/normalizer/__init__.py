"""Field normalization for scraped harness-racing results."""

from src.normalizer.corrections import DEFAULT_REGISTRY, CorrectionRegistry
from src.normalizer.loader import ResultLoader
from src.normalizer.records import (
    CleanResultRecord,
    NormalizationResult,
    RawResultRecord,
)

__all__ = [
    "CleanResultRecord",
    "CorrectionRegistry",
    "DEFAULT_REGISTRY",
    "NormalizationResult",
    "RawResultRecord",
    "ResultLoader",
]
