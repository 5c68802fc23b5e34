from dataclasses import dataclass
from decimal import Context, Decimal, DivisionByZero, Inexact, InvalidOperation, Overflow, Rounded
from enum import Enum
from typing import Union

from errors import InvalidAmount

MAX_CLIENT_ID = 2**16 - 1
MAX_TRANSACTION_ID = 2**32 - 1

MAX_AMOUNT = Decimal(10) ** 28
MAX_AMOUNT_PLACES = 28

# Wide enough that sums of bounded amounts stay exact; anything that would round raises instead.
BALANCE_CONTEXT = Context(prec=100, traps=[InvalidOperation, DivisionByZero, Overflow, Inexact, Rounded])


def _check_identifier(name: str, value: int, upper: int) -> None:
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"{name} must be an int, got {type(value).__name__}")
    if not 0 <= value <= upper:
        raise ValueError(f"{name} out of range: {value}")


@dataclass(frozen=True, order=True)
class ClientID:
    value: int

    def __post_init__(self):
        _check_identifier("ClientID", self.value, MAX_CLIENT_ID)

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True, order=True)
class TransactionID:
    value: int

    def __post_init__(self):
        _check_identifier("TransactionID", self.value, MAX_TRANSACTION_ID)

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True, order=True)
class PositiveAmount:
    """
    Decimal amount strictly greater than zero, below 10**28, with at most 28 decimal places.
    Accepts Decimal, int or str; floats are refused to keep arithmetic exact.
    """

    value: Decimal

    def __post_init__(self):
        raw = self.value
        if isinstance(raw, float):
            raise TypeError("floating-point amounts are not accepted, pass a str or Decimal")
        if isinstance(raw, bool) or not isinstance(raw, (Decimal, int, str)):
            raise TypeError(f"unsupported amount type: {type(raw).__name__}")

        try:
            value = raw if isinstance(raw, Decimal) else Decimal(raw)
        except InvalidOperation:
            raise InvalidAmount(f"not a number: {raw!r}") from None

        if not value.is_finite():
            raise InvalidAmount(f"amount must be finite, got {value}")
        if value.is_zero():
            raise InvalidAmount("zero amount")
        if value.is_signed():
            raise InvalidAmount(f"negative amount: {value}")
        if value >= MAX_AMOUNT:
            raise InvalidAmount(f"amount too large: {value}")
        if value.as_tuple().exponent < -MAX_AMOUNT_PLACES:
            raise InvalidAmount(f"more than {MAX_AMOUNT_PLACES} decimal places: {value}")

        object.__setattr__(self, "value", value)

    def __str__(self) -> str:
        return str(self.value)


class TransactionType(Enum):
    DEPOSIT = "deposit"
    WITHDRAWAL = "withdrawal"
    DISPUTE = "dispute"
    RESOLVE = "resolve"
    CHARGEBACK = "chargeback"


class ProcessingResult(Enum):
    APPLIED = "applied"
    IGNORED = "ignored"


@dataclass(frozen=True)
class Deposit:
    client: ClientID
    tx: TransactionID
    amount: PositiveAmount


@dataclass(frozen=True)
class Withdrawal:
    client: ClientID
    tx: TransactionID
    amount: PositiveAmount


@dataclass(frozen=True)
class Dispute:
    client: ClientID
    tx: TransactionID


@dataclass(frozen=True)
class Resolve:
    client: ClientID
    tx: TransactionID


@dataclass(frozen=True)
class Chargeback:
    client: ClientID
    tx: TransactionID


TransactionRecord = Union[Deposit, Withdrawal, Dispute, Resolve, Chargeback]

RECORD_TYPES = {
    TransactionType.DEPOSIT: Deposit,
    TransactionType.WITHDRAWAL: Withdrawal,
    TransactionType.DISPUTE: Dispute,
    TransactionType.RESOLVE: Resolve,
    TransactionType.CHARGEBACK: Chargeback,
}


@dataclass
class ClientAccount:
    client: ClientID
    available: Decimal = Decimal("0")
    held: Decimal = Decimal("0")
    locked: bool = False

    @property
    def total(self) -> Decimal:
        return BALANCE_CONTEXT.add(self.available, self.held)

    def credit(self, amount: Decimal) -> None:
        self.available = BALANCE_CONTEXT.add(self.available, amount)

    def debit(self, amount: Decimal) -> None:
        self.available = BALANCE_CONTEXT.subtract(self.available, amount)

    def hold(self, amount: Decimal) -> None:
        self.available = BALANCE_CONTEXT.subtract(self.available, amount)
        self.held = BALANCE_CONTEXT.add(self.held, amount)

    def release_hold(self, amount: Decimal) -> None:
        self.held = BALANCE_CONTEXT.subtract(self.held, amount)
        self.available = BALANCE_CONTEXT.add(self.available, amount)

    def remove_held(self, amount: Decimal) -> None:
        self.held = BALANCE_CONTEXT.subtract(self.held, amount)


@dataclass(frozen=True)
class AccountSummary:
    client: ClientID
    available: Decimal
    held: Decimal
    total: Decimal
    locked: bool

    @classmethod
    def from_account(cls, account: ClientAccount) -> "AccountSummary":
        return cls(
            client=account.client,
            available=account.available,
            held=account.held,
            total=account.total,
            locked=account.locked,
        )
