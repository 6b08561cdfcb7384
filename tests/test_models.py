import sys
import os
from decimal import Decimal

import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))

from models import (
    AccountSnapshot,
    ClientAccount,
    DisputeStatus,
    ProcessingResult,
    ProcessingStats,
    StoredTransaction,
    Transaction,
    TransactionType,
)


class TestTransaction:
    def test_create_deposit(self):
        transaction = Transaction(
            transaction_type=TransactionType.DEPOSIT,
            client_id=1,
            transaction_id=1,
            amount=Decimal("100.0"),
        )
        assert transaction.transaction_type == TransactionType.DEPOSIT
        assert transaction.client_id == 1
        assert transaction.transaction_id == 1
        assert transaction.amount == Decimal("100.0")

    def test_create_dispute_no_amount(self):
        transaction = Transaction(
            transaction_type=TransactionType.DISPUTE,
            client_id=1,
            transaction_id=1,
        )
        assert transaction.amount is None

    def test_only_funds_movements_carry_amount(self):
        assert TransactionType.DEPOSIT.carries_amount
        assert TransactionType.WITHDRAWAL.carries_amount
        assert not TransactionType.DISPUTE.carries_amount
        assert not TransactionType.RESOLVE.carries_amount
        assert not TransactionType.CHARGEBACK.carries_amount


class TestClientAccount:
    def test_default_values(self):
        account = ClientAccount(client_id=1)
        assert account.available == Decimal("0")
        assert account.held == Decimal("0")
        assert account.locked is False

    def test_total_property(self):
        account = ClientAccount(
            client_id=1,
            available=Decimal("100"),
            held=Decimal("50"),
        )
        assert account.total == Decimal("150")

    def test_hold_and_release_keep_total(self):
        account = ClientAccount(client_id=1, available=Decimal("100"))

        account.hold(Decimal("40"))
        assert account.available == Decimal("60")
        assert account.held == Decimal("40")
        assert account.total == Decimal("100")

        account.release_hold(Decimal("40"))
        assert account.available == Decimal("100")
        assert account.held == Decimal("0")
        assert account.total == Decimal("100")

    def test_remove_held_reduces_total(self):
        account = ClientAccount(client_id=1, available=Decimal("100"))
        account.hold(Decimal("30"))
        account.remove_held(Decimal("30"))

        assert account.available == Decimal("70")
        assert account.held == Decimal("0")
        assert account.total == Decimal("70")

    def test_snapshot_is_a_frozen_copy(self):
        account = ClientAccount(client_id=7, available=Decimal("5"), held=Decimal("2"))
        snapshot = account.snapshot()

        assert snapshot == AccountSnapshot(7, Decimal("5"), Decimal("2"), Decimal("7"), False)

        account.credit(Decimal("1"))
        assert snapshot.available == Decimal("5")

        with pytest.raises(AttributeError):
            snapshot.available = Decimal("0")


class TestStoredTransaction:
    def test_new_deposit_can_be_disputed(self):
        stored = StoredTransaction(transaction_id=1, client_id=1, amount=Decimal("10"))
        assert stored.status == DisputeStatus.NONE
        assert stored.can_dispute()
        assert not stored.is_disputed()

    def test_disputed_cannot_be_disputed_again(self):
        stored = StoredTransaction(transaction_id=1, client_id=1, amount=Decimal("10"))
        stored.mark_disputed()
        assert stored.is_disputed()
        assert not stored.can_dispute()

    def test_resolved_can_be_disputed_again(self):
        stored = StoredTransaction(transaction_id=1, client_id=1, amount=Decimal("10"))
        stored.mark_disputed()
        stored.mark_resolved()
        assert stored.status == DisputeStatus.RESOLVED
        assert stored.can_dispute()
        assert not stored.is_disputed()

    def test_charged_back_is_terminal(self):
        stored = StoredTransaction(transaction_id=1, client_id=1, amount=Decimal("10"))
        stored.mark_disputed()
        stored.mark_charged_back()
        assert not stored.can_dispute()
        assert not stored.is_disputed()


class TestProcessingResult:
    def test_enum_values(self):
        assert ProcessingResult.APPLIED.value == "applied"
        assert ProcessingResult.INSUFFICIENT_FUNDS.value == "insufficient_funds"
        assert ProcessingResult.ACCOUNT_LOCKED.value == "account_locked"

    def test_only_applied_is_applied(self):
        applied = [result for result in ProcessingResult if result.is_applied]
        assert applied == [ProcessingResult.APPLIED]


class TestProcessingStats:
    def test_record_counts_by_outcome(self):
        stats = ProcessingStats()
        stats.record(ProcessingResult.APPLIED)
        stats.record(ProcessingResult.APPLIED)
        stats.record(ProcessingResult.INSUFFICIENT_FUNDS)

        assert stats.applied == 2
        assert stats.rejected == 1
        assert stats.rejections[ProcessingResult.INSUFFICIENT_FUNDS] == 1
        assert stats.summary() == "Applied: 2, Rejected: 1, Malformed: 0"
