import sys
import os
import io
from decimal import Decimal

import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))

from errors import InvalidAmount
from models import ClientID, Chargeback, Deposit, Dispute, PositiveAmount, Resolve, TransactionID, Withdrawal
from reader import parse_row, read_transactions


def read(text: str):
    return list(read_transactions(io.StringIO(text)))


class TestReadTransactions:
    def test_reads_all_types(self):
        records = read('\n'.join([
            "type, client, tx, amount",
            "deposit, 1, 1, 1.1",
            "withdrawal, 2, 3, 4.5678",
            "dispute, 1, 1,",
            "resolve, 1, 1,",
            "chargeback, 1, 1",
        ]))

        assert records == [
            Deposit(ClientID(1), TransactionID(1), PositiveAmount("1.1")),
            Withdrawal(ClientID(2), TransactionID(3), PositiveAmount("4.5678")),
            Dispute(ClientID(1), TransactionID(1)),
            Resolve(ClientID(1), TransactionID(1)),
            Chargeback(ClientID(1), TransactionID(1)),
        ]

    def test_no_whitespace_and_mixed_case(self):
        records = read("type,client,tx,amount\nDEPOSIT,7,8,2.50\n")
        assert records == [Deposit(ClientID(7), TransactionID(8), PositiveAmount("2.50"))]
        assert records[0].amount.value == Decimal("2.50")

    def test_skip_invalid(self, caplog):
        with caplog.at_level("WARNING", logger="reader"):
            records = read('\n'.join([
                "type, client, tx, amount",
                "invalid, 999, 999, 9.9999",
                "deposit, -1, 999, 9.9999",
                "deposit, 1, -999",
                "deposit, 1, 2,",
                "deposit, 1, 3, -5",
                "withdrawal, 1, 4, 0",
                "deposit, 70000, 5, 1",
                "deposit, x, 6, 1",
                "deposit, 1, 1, 1.1",
            ]))

        assert records == [Deposit(ClientID(1), TransactionID(1), PositiveAmount("1.1"))]
        assert caplog.text.count("Skipping invalid row") == 8

    def test_dispute_amount_ignored(self):
        records = read("type, client, tx, amount\ndispute, 1, 1, 5.0\n")
        assert records == [Dispute(ClientID(1), TransactionID(1))]

    def test_empty_input(self):
        assert read("type, client, tx, amount\n") == []
        assert read("") == []

    def test_is_lazy(self):
        stream = io.StringIO("type, client, tx, amount\ndeposit, 1, 1, 1\ndeposit, 1, 2, 1\n")
        records = read_transactions(stream)
        assert next(records) == Deposit(ClientID(1), TransactionID(1), PositiveAmount("1"))


class TestParseRow:
    def test_missing_amount(self):
        with pytest.raises(ValueError, match="missing amount"):
            parse_row({"type": "withdrawal", "client": "1", "tx": "1", "amount": ""})

    def test_missing_column(self):
        with pytest.raises(KeyError):
            parse_row({"type": "deposit", "tx": "1", "amount": "1"})

    def test_none_cells_from_short_rows(self):
        with pytest.raises(ValueError):
            parse_row({"type": "deposit", "client": "1", "tx": None, "amount": None})

    def test_non_positive_amount(self):
        with pytest.raises(InvalidAmount):
            parse_row({"type": "deposit", "client": "1", "tx": "1", "amount": "0.0"})
