import csv
from decimal import ROUND_HALF_EVEN, Decimal, localcontext
from typing import Iterable, TextIO

from models import AccountSummary

HEADER = ["client", "available", "held", "total", "locked"]


def format_decimal(value: Decimal, decimal_places: int = 4) -> str:
    """Format decimal with up to `decimal_places` decimal places, removing trailing zeros."""
    with localcontext() as ctx:
        # room for every integer digit plus the requested places
        ctx.prec = max(value.adjusted(), 0) + decimal_places + 2
        quantized = value.quantize(Decimal(1).scaleb(-decimal_places), rounding=ROUND_HALF_EVEN)
        normalized = quantized.normalize()
    if normalized.is_zero():
        return "0"
    return f"{normalized:f}"


def write_accounts(summary: Iterable[AccountSummary], stream: TextIO, decimal_places: int = 4) -> None:
    writer = csv.writer(stream, lineterminator="\n")
    writer.writerow(HEADER)
    for row in summary:
        writer.writerow([
            str(row.client),
            format_decimal(row.available, decimal_places),
            format_decimal(row.held, decimal_places),
            format_decimal(row.total, decimal_places),
            str(row.locked).lower(),
        ])
