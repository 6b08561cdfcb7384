import logging
from typing import Iterable, List, Optional, Tuple

from ledger_state import LedgerState
from models import (
    AccountSnapshot,
    ClientAccount,
    ProcessingResult,
    ProcessingStats,
    StoredTransaction,
    Transaction,
    TransactionType,
)

logger = logging.getLogger(__name__)


class LedgerEngine:
    """
    Applies transactions one at a time to in-memory account state.

    Every rule is a guard evaluated in order; the first failing guard returns
    its ProcessingResult before any mutation, so a rejected transaction never
    changes balances. Rejections are never raised to the caller.
    """

    def __init__(self, state: Optional[LedgerState] = None):
        self._state = state if state is not None else LedgerState()
        self.stats = ProcessingStats()

    def apply(self, transaction: Transaction) -> None:
        """Apply a transaction, silently ignoring it if a business rule rejects it."""
        self.process_transaction(transaction)

    def apply_all(self, transactions: Iterable[Transaction]) -> None:
        for transaction in transactions:
            self.apply(transaction)

    def process_transaction(self, transaction: Transaction) -> ProcessingResult:
        """
        Process a single transaction.

        Returns:
            APPLIED if the state changed, otherwise the reason for rejection.
        """
        account = self._state.get_or_create_account(transaction.client_id)

        if account.locked:
            result = ProcessingResult.ACCOUNT_LOCKED
        else:
            match transaction.transaction_type:
                case TransactionType.DEPOSIT:
                    result = self._handle_deposit(account, transaction)
                case TransactionType.WITHDRAWAL:
                    result = self._handle_withdrawal(account, transaction)
                case TransactionType.DISPUTE:
                    result = self._handle_dispute(account, transaction)
                case TransactionType.RESOLVE:
                    result = self._handle_resolve(account, transaction)
                case TransactionType.CHARGEBACK:
                    result = self._handle_chargeback(account, transaction)
                case _:
                    result = ProcessingResult.UNKNOWN_TYPE

        self.stats.record(result)
        if not result.is_applied:
            logger.debug(f"Rejected {transaction}: {result.value}")
        return result

    def snapshot(self) -> List[AccountSnapshot]:
        """Current state of every account seen so far, in creation order."""
        return [account.snapshot() for account in self._state.get_all_accounts()]

    def _check_new_funds_movement(self, transaction: Transaction) -> Optional[ProcessingResult]:
        if transaction.amount is None:
            return ProcessingResult.MISSING_AMOUNT
        if transaction.amount < 0:
            return ProcessingResult.NEGATIVE_AMOUNT
        if self._state.is_transaction_id_claimed(transaction.transaction_id):
            return ProcessingResult.DUPLICATE_TRANSACTION
        return None

    def _handle_deposit(self, account: ClientAccount, transaction: Transaction) -> ProcessingResult:
        rejection = self._check_new_funds_movement(transaction)
        if rejection is not None:
            return rejection

        account.credit(transaction.amount)
        self._state.claim_transaction_id(transaction.transaction_id)
        self._state.store_deposit(transaction.transaction_id, transaction.client_id, transaction.amount)
        return ProcessingResult.APPLIED

    def _handle_withdrawal(self, account: ClientAccount, transaction: Transaction) -> ProcessingResult:
        rejection = self._check_new_funds_movement(transaction)
        if rejection is not None:
            return rejection

        if account.available < transaction.amount:
            return ProcessingResult.INSUFFICIENT_FUNDS

        account.debit(transaction.amount)
        # Withdrawals cannot be disputed, so only the id is remembered.
        self._state.claim_transaction_id(transaction.transaction_id)
        return ProcessingResult.APPLIED

    def _lookup_disputed_target(
        self, transaction: Transaction
    ) -> Tuple[Optional[StoredTransaction], Optional[ProcessingResult]]:
        """Find the deposit referenced by a dispute, resolve or chargeback."""
        original = self._state.get_transaction(transaction.transaction_id)
        if original is None:
            return None, ProcessingResult.TRANSACTION_NOT_FOUND
        if original.client_id != transaction.client_id:
            return None, ProcessingResult.CLIENT_MISMATCH
        return original, None

    def _handle_dispute(self, account: ClientAccount, transaction: Transaction) -> ProcessingResult:
        original, rejection = self._lookup_disputed_target(transaction)
        if rejection is not None:
            return rejection

        if not original.can_dispute():
            return ProcessingResult.INVALID_DISPUTE_STATE

        account.hold(original.amount)
        original.mark_disputed()
        return ProcessingResult.APPLIED

    def _handle_resolve(self, account: ClientAccount, transaction: Transaction) -> ProcessingResult:
        original, rejection = self._lookup_disputed_target(transaction)
        if rejection is not None:
            return rejection

        if not original.is_disputed():
            return ProcessingResult.INVALID_DISPUTE_STATE

        account.release_hold(original.amount)
        original.mark_resolved()
        return ProcessingResult.APPLIED

    def _handle_chargeback(self, account: ClientAccount, transaction: Transaction) -> ProcessingResult:
        original, rejection = self._lookup_disputed_target(transaction)
        if rejection is not None:
            return rejection

        if not original.is_disputed():
            return ProcessingResult.INVALID_DISPUTE_STATE

        account.remove_held(original.amount)
        account.lock()
        original.mark_charged_back()
        return ProcessingResult.APPLIED

    def get_stored_transaction(self, transaction_id: int) -> Optional[StoredTransaction]:
        return self._state.get_transaction(transaction_id)
