import sys
import os
from decimal import Decimal

sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))

from ledger_state import LedgerState
from models import DisputeStatus


class TestLedgerState:
    def setup_method(self):
        self.state = LedgerState()

    def test_get_or_create_account(self):
        account = self.state.get_or_create_account(1)
        assert account.client_id == 1
        assert account.available == Decimal("0")
        assert self.state.get_or_create_account(1) is account
        assert self.state.get_all_accounts() == [account]

    def test_accounts_in_creation_order(self):
        for client_id in (5, 2, 9):
            self.state.get_or_create_account(client_id)
        assert [account.client_id for account in self.state.get_all_accounts()] == [5, 2, 9]

    def test_store_deposit(self):
        stored = self.state.store_deposit(transaction_id=10, client_id=1, amount=Decimal("2.5"))

        assert self.state.get_transaction(10) is stored
        assert stored.status == DisputeStatus.NONE
        assert self.state.get_transaction(11) is None

    def test_claim_transaction_id(self):
        assert not self.state.is_transaction_id_claimed(3)
        self.state.claim_transaction_id(3)
        assert self.state.is_transaction_id_claimed(3)
