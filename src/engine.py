import logging
from collections import Counter
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Union

from errors import AccountLocked, DuplicateTransaction, InsufficientFunds, ProcessingError
from ledger import DepositRecord, Ledger
from models import (
    AccountSummary,
    Chargeback,
    ClientAccount,
    ClientID,
    Deposit,
    Dispute,
    ProcessingResult,
    Resolve,
    TransactionRecord,
    Withdrawal,
)

logger = logging.getLogger(__name__)


@dataclass
class ProcessingStats:
    """Counters for a single run over a transaction sequence."""

    applied: int = 0
    ignored: int = 0
    rejected: int = 0
    rejections: Counter = field(default_factory=Counter)

    def record_result(self, result: ProcessingResult) -> None:
        if result == ProcessingResult.APPLIED:
            self.applied += 1
        else:
            self.ignored += 1

    def record_error(self, error: ProcessingError) -> None:
        self.rejected += 1
        self.rejections[type(error).__name__] += 1


class AccountEngine:
    """
    Applies transactions to client accounts, one at a time, in the order given.

    Deposits and withdrawals that break a business rule raise a ProcessingError.
    Disputes, resolves and chargebacks that cannot be matched to a deposit of
    the same client in the right state are dropped without an error.
    """

    def __init__(self, ledger: Optional[Ledger] = None):
        self._ledger = ledger if ledger is not None else Ledger()
        self._accounts: Dict[ClientID, ClientAccount] = {}

    @property
    def ledger(self) -> Ledger:
        return self._ledger

    def get_or_create_account(self, client: ClientID) -> ClientAccount:
        """Get existing account or create new one."""
        if client not in self._accounts:
            self._accounts[client] = ClientAccount(client=client)
        return self._accounts[client]

    def process_transaction(self, record: TransactionRecord) -> ProcessingResult:
        """
        Process a single transaction.

        Returns:
            APPLIED: balances or ledger changed
            IGNORED: dispute-family record with nothing to act on

        Raises:
            AccountLocked, DuplicateTransaction, InsufficientFunds
        """
        account = self.get_or_create_account(record.client)

        match record:
            case Deposit():
                return self._handle_deposit(account, record)
            case Withdrawal():
                return self._handle_withdrawal(account, record)
            case Dispute():
                return self._handle_dispute(account, record)
            case Resolve():
                return self._handle_resolve(account, record)
            case Chargeback():
                return self._handle_chargeback(account, record)

        raise TypeError(f"unsupported transaction record: {record!r}")

    def process(self, records: Iterable[TransactionRecord]) -> ProcessingStats:
        """Apply every record in order. Rejected records are logged and counted, never fatal."""
        stats = ProcessingStats()
        for record in records:
            logger.debug(f"Processing {record}")
            try:
                result = self.process_transaction(record)
            except ProcessingError as e:
                logger.warning(f"Transaction rejected: {e}")
                stats.record_error(e)
            else:
                stats.record_result(result)
        return stats

    def accounts(self) -> Dict[ClientID, ClientAccount]:
        """Return all accounts (for final output)."""
        return dict(self._accounts)

    def summary(self) -> List[AccountSummary]:
        """One row per client seen, ordered by client id."""
        return [AccountSummary.from_account(self._accounts[client]) for client in sorted(self._accounts)]

    def _handle_deposit(self, account: ClientAccount, deposit: Deposit) -> ProcessingResult:
        if account.locked:
            raise AccountLocked(deposit.client, deposit.tx)

        self._ledger.record_deposit(deposit.tx, deposit.client, deposit.amount)
        account.credit(deposit.amount.value)
        return ProcessingResult.APPLIED

    def _handle_withdrawal(self, account: ClientAccount, withdrawal: Withdrawal) -> ProcessingResult:
        if account.locked:
            raise AccountLocked(withdrawal.client, withdrawal.tx)

        if withdrawal.tx in self._ledger:
            raise DuplicateTransaction(withdrawal.client, withdrawal.tx)

        if account.available < withdrawal.amount.value:
            raise InsufficientFunds(withdrawal.client, withdrawal.tx)

        account.debit(withdrawal.amount.value)
        return ProcessingResult.APPLIED

    def _handle_dispute(self, account: ClientAccount, dispute: Dispute) -> ProcessingResult:
        deposit = self._find_deposit(account, dispute, disputed=False)
        if deposit is None:
            return ProcessingResult.IGNORED

        account.hold(deposit.amount.value)
        self._ledger.mark_disputed(dispute.tx)
        return ProcessingResult.APPLIED

    def _handle_resolve(self, account: ClientAccount, resolve: Resolve) -> ProcessingResult:
        deposit = self._find_deposit(account, resolve, disputed=True)
        if deposit is None:
            return ProcessingResult.IGNORED

        account.release_hold(deposit.amount.value)
        self._ledger.mark_resolved(resolve.tx)
        return ProcessingResult.APPLIED

    def _handle_chargeback(self, account: ClientAccount, chargeback: Chargeback) -> ProcessingResult:
        deposit = self._find_deposit(account, chargeback, disputed=True)
        if deposit is None:
            return ProcessingResult.IGNORED

        # ledger entry stays flagged as disputed
        account.remove_held(deposit.amount.value)
        account.locked = True
        return ProcessingResult.APPLIED

    def _find_deposit(
        self,
        account: ClientAccount,
        record: Union[Dispute, Resolve, Chargeback],
        disputed: bool,
    ) -> Optional[DepositRecord]:
        """Deposit the record refers to, or None if it must be ignored."""
        kind = type(record).__name__.lower()

        if account.locked:
            logger.debug(f"{kind} for tx {record.tx}: client {record.client} is locked, ignoring")
            return None

        deposit = self._ledger.lookup(record.tx)
        if deposit is None:
            logger.debug(f"{kind} for tx {record.tx}: no such deposit, ignoring")
            return None

        if deposit.client != record.client:
            logger.debug(f"{kind} for tx {record.tx}: deposit belongs to client {deposit.client}, not {record.client}, ignoring")
            return None

        if deposit.disputed != disputed:
            state = "already disputed" if deposit.disputed else "not disputed"
            logger.debug(f"{kind} for tx {record.tx}: deposit {state}, ignoring")
            return None

        return deposit
