from decimal import Decimal
from typing import Dict, List, Optional, Set

from models import ClientAccount, StoredTransaction


class LedgerState:
    """
    In-memory state owned by a single ledger engine.
    Stores client accounts, deposits kept for dispute lookups, and the
    transaction ids already claimed by accepted deposits and withdrawals.
    """

    def __init__(self):
        # dicts keep insertion order, so accounts come back in creation order
        self._accounts: Dict[int, ClientAccount] = {}
        self._transactions: Dict[int, StoredTransaction] = {}
        self._claimed_transaction_ids: Set[int] = set()

    def get_or_create_account(self, client_id: int) -> ClientAccount:
        """Get existing account or create new one."""
        account = self._accounts.get(client_id)
        if account is None:
            account = ClientAccount(client_id=client_id)
            self._accounts[client_id] = account
        return account

    def is_transaction_id_claimed(self, transaction_id: int) -> bool:
        return transaction_id in self._claimed_transaction_ids

    def claim_transaction_id(self, transaction_id: int) -> None:
        self._claimed_transaction_ids.add(transaction_id)

    def store_deposit(self, transaction_id: int, client_id: int, amount: Decimal) -> StoredTransaction:
        """Store a deposit for future dispute lookups."""
        stored = StoredTransaction(transaction_id=transaction_id, client_id=client_id, amount=amount)
        self._transactions[transaction_id] = stored
        return stored

    def get_transaction(self, transaction_id: int) -> Optional[StoredTransaction]:
        """Retrieve stored deposit by ID."""
        return self._transactions.get(transaction_id)

    def get_all_accounts(self) -> List[ClientAccount]:
        return list(self._accounts.values())
