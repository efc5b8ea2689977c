"""Pipeline module: record normalization and end-to-end runs."""

from src.pipeline.normalizer import ResultNormalizer, to_raw
from src.pipeline.orchestrator import PipelineOrchestrator

__all__ = [
    "PipelineOrchestrator",
    "ResultNormalizer",
    "to_raw",
]
