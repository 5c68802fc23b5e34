import csv
import logging
import sys
from typing import List, Optional

from pydantic import ValidationError

from config import Settings, get_settings
from engine import AccountEngine, ProcessingStats
from reader import read_transactions
from writer import write_accounts

logger = logging.getLogger(__name__)


def configure_logging(settings: Settings) -> None:
    logging.basicConfig(
        level=settings.log_level,
        format=settings.log_format,
        stream=sys.stderr,
    )


def process_file(filepath: str, engine: Optional[AccountEngine] = None) -> ProcessingStats:
    """Feed every transaction in the CSV file through the engine, in file order."""
    engine = engine if engine is not None else AccountEngine()

    logger.info(f"Processing transactions from {filepath}")
    with open(filepath, "r", encoding="utf-8", newline="") as f:
        stats = engine.process(read_transactions(f))
    logger.info("Processing complete")

    return stats


def main(argv: Optional[List[str]] = None) -> int:
    argv = sys.argv[1:] if argv is None else argv
    if len(argv) != 1:
        print("Usage: python main.py <input.csv>", file=sys.stderr)
        return 1

    try:
        settings = get_settings()
    except ValidationError as e:
        print(f"Invalid configuration: {e}", file=sys.stderr)
        return 1
    configure_logging(settings)

    engine = AccountEngine()
    try:
        stats = process_file(argv[0], engine)
    except (OSError, UnicodeDecodeError, csv.Error) as e:
        print(f"Cannot read {argv[0]}: {e}", file=sys.stderr)
        return 1

    write_accounts(engine.summary(), sys.stdout, settings.decimal_places)

    print(
        f"Applied: {stats.applied}, "
        f"Ignored: {stats.ignored}, "
        f"Rejected: {stats.rejected}",
        file=sys.stderr
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
