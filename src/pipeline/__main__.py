"""CLI entry point for the normalization pipeline.

Usage:
    uv run python -m src.pipeline
    uv run python -m src.pipeline --data-dir data/raw \
        --output data/processed/results.parquet
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from src.common.logging import get_logger, setup_logging

logger = get_logger(__name__)


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments.

    Args:
        argv: Optional argument list (defaults to sys.argv[1:]).

    Returns:
        Parsed arguments namespace.
    """
    parser = argparse.ArgumentParser(
        description="Harness racing result normalizer",
        prog="python -m src.pipeline",
    )
    parser.add_argument(
        "--data-dir",
        type=Path,
        default=None,
        help="Directory with scraped CSV batches (default: from config)",
    )
    parser.add_argument(
        "--output",
        type=Path,
        default=None,
        help="Parquet output path (default: from config)",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Normalize and validate without writing output",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        help="Log level, e.g. DEBUG (default: from config)",
    )
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    """Run the pipeline CLI.

    Args:
        argv: Optional argument list for testing.

    Returns:
        Exit code (0 for success).
    """
    args = _parse_args(argv)
    setup_logging(level=args.log_level)

    from src.pipeline.orchestrator import PipelineOrchestrator

    orchestrator = PipelineOrchestrator(data_dir=args.data_dir, output_path=args.output)

    try:
        result = orchestrator.run_full(dry_run=args.dry_run)
    except Exception as e:
        logger.error("Pipeline failed", error=str(e))
        raise

    logger.info("Pipeline completed", result=result)
    return 0


if __name__ == "__main__":
    sys.exit(main())
