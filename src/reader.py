import csv
import logging
from typing import Dict, Iterator, Optional, TextIO

from models import (
    RECORD_TYPES,
    ClientID,
    Deposit,
    PositiveAmount,
    TransactionID,
    TransactionRecord,
    TransactionType,
    Withdrawal,
)

logger = logging.getLogger(__name__)


def read_transactions(stream: TextIO) -> Iterator[TransactionRecord]:
    """
    Lazily read CSV rows into transaction records.
    Rows that cannot be parsed are logged and skipped.
    """
    reader = csv.DictReader(stream, skipinitialspace=True)
    for row in reader:
        try:
            record = parse_row(row)
        except (KeyError, ValueError) as e:
            logger.warning(f"Skipping invalid row at line {reader.line_num} {row}: {e}")
            continue
        yield record


def parse_row(row: Dict[Optional[str], Optional[str]]) -> TransactionRecord:
    """Parse CSV row into a TransactionRecord."""
    normalized = {k.strip().lower(): (v or "").strip() for k, v in row.items() if k is not None}

    transaction_type = TransactionType(normalized["type"].lower())
    client = ClientID(int(normalized["client"]))
    tx = TransactionID(int(normalized["tx"]))

    record_type = RECORD_TYPES[transaction_type]
    if record_type in (Deposit, Withdrawal):
        amount_str = normalized.get("amount", "")
        if not amount_str:
            raise ValueError(f"missing amount for transaction type '{transaction_type.value}'")
        return record_type(client=client, tx=tx, amount=PositiveAmount(amount_str))

    return record_type(client=client, tx=tx)
