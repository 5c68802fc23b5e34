from typing import Any


class PaymentsError(Exception):
    """Base class for all payments engine errors."""


class InvalidAmount(PaymentsError, ValueError):
    """Raised when an amount is zero, negative or not a finite number."""


class ProcessingError(PaymentsError):
    """
    A transaction was refused by the engine.
    Recoverable: the run continues with the next transaction.
    """

    reason = "transaction rejected"

    def __init__(self, client: Any, tx: Any):
        self.client = client
        self.tx = tx
        super().__init__(f"client {client}, tx {tx}: {self.reason}")


class DuplicateTransaction(ProcessingError):
    reason = "duplicate transaction id"


class InsufficientFunds(ProcessingError):
    reason = "insufficient funds"


class AccountLocked(ProcessingError):
    reason = "account is locked, no transactions allowed"
