from dataclasses import dataclass
from typing import Dict, Optional

from errors import DuplicateTransaction
from models import ClientID, PositiveAmount, TransactionID


@dataclass
class DepositRecord:
    client: ClientID
    amount: PositiveAmount
    disputed: bool = False


class Ledger:
    """
    History of processed deposits and their dispute status, keyed by transaction id.
    Withdrawals are never recorded, so only deposits can be disputed.
    """

    def __init__(self):
        self._deposits: Dict[TransactionID, DepositRecord] = {}

    def record_deposit(self, tx: TransactionID, client: ClientID, amount: PositiveAmount) -> None:
        """Store a deposit for future dispute lookups."""
        if tx in self._deposits:
            raise DuplicateTransaction(client, tx)
        self._deposits[tx] = DepositRecord(client=client, amount=amount)

    def lookup(self, tx: TransactionID) -> Optional[DepositRecord]:
        """Retrieve stored deposit by transaction id."""
        return self._deposits.get(tx)

    def mark_disputed(self, tx: TransactionID) -> None:
        self._deposits[tx].disputed = True

    def mark_resolved(self, tx: TransactionID) -> None:
        self._deposits[tx].disputed = False

    def __contains__(self, tx: TransactionID) -> bool:
        return tx in self._deposits

    def __len__(self) -> int:
        return len(self._deposits)
