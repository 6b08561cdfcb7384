from collections import Counter
from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from typing import Optional

MAX_CLIENT_ID = 2**16 - 1
MAX_TRANSACTION_ID = 2**32 - 1


class TransactionType(Enum):
    DEPOSIT = "deposit"
    WITHDRAWAL = "withdrawal"
    DISPUTE = "dispute"
    RESOLVE = "resolve"
    CHARGEBACK = "chargeback"

    @property
    def carries_amount(self) -> bool:
        return self in (TransactionType.DEPOSIT, TransactionType.WITHDRAWAL)


class DisputeStatus(Enum):
    NONE = "none"
    DISPUTED = "disputed"
    RESOLVED = "resolved"
    CHARGED_BACK = "charged_back"


class ProcessingResult(Enum):
    APPLIED = "applied"
    ACCOUNT_LOCKED = "account_locked"
    MISSING_AMOUNT = "missing_amount"
    NEGATIVE_AMOUNT = "negative_amount"
    DUPLICATE_TRANSACTION = "duplicate_transaction"
    INSUFFICIENT_FUNDS = "insufficient_funds"
    TRANSACTION_NOT_FOUND = "transaction_not_found"
    CLIENT_MISMATCH = "client_mismatch"
    INVALID_DISPUTE_STATE = "invalid_dispute_state"
    UNKNOWN_TYPE = "unknown_type"

    @property
    def is_applied(self) -> bool:
        return self is ProcessingResult.APPLIED


@dataclass
class Transaction:
    transaction_type: TransactionType
    client_id: int
    transaction_id: int
    amount: Optional[Decimal] = None

    def __repr__(self) -> str:
        transaction_type = getattr(self.transaction_type, "value", self.transaction_type)
        return f"Transaction({transaction_type}, client={self.client_id}, tx={self.transaction_id}, amount={self.amount})"


@dataclass
class ClientAccount:
    client_id: int
    available: Decimal = Decimal("0")
    held: Decimal = Decimal("0")
    locked: bool = False

    @property
    def total(self) -> Decimal:
        return self.available + self.held

    def credit(self, amount: Decimal) -> None:
        self.available += amount

    def debit(self, amount: Decimal) -> None:
        self.available -= amount

    def hold(self, amount: Decimal) -> None:
        """Move funds from available to held. Total is unchanged."""
        self.available -= amount
        self.held += amount

    def release_hold(self, amount: Decimal) -> None:
        """Move funds from held back to available. Total is unchanged."""
        self.held -= amount
        self.available += amount

    def remove_held(self, amount: Decimal) -> None:
        """Drop held funds from the account entirely. Total decreases."""
        self.held -= amount

    def lock(self) -> None:
        self.locked = True

    def snapshot(self) -> "AccountSnapshot":
        return AccountSnapshot(
            client_id=self.client_id,
            available=self.available,
            held=self.held,
            total=self.total,
            locked=self.locked,
        )


@dataclass(frozen=True)
class AccountSnapshot:
    client_id: int
    available: Decimal
    held: Decimal
    total: Decimal
    locked: bool


@dataclass
class StoredTransaction:
    """
    A deposit kept for dispute lookups.
    Withdrawals are never stored since they cannot be disputed.
    """

    transaction_id: int
    client_id: int
    amount: Decimal
    status: DisputeStatus = DisputeStatus.NONE

    def can_dispute(self) -> bool:
        # A resolved deposit may be disputed again; a charged back one is final.
        return self.status in (DisputeStatus.NONE, DisputeStatus.RESOLVED)

    def is_disputed(self) -> bool:
        return self.status is DisputeStatus.DISPUTED

    def mark_disputed(self) -> None:
        self.status = DisputeStatus.DISPUTED

    def mark_resolved(self) -> None:
        self.status = DisputeStatus.RESOLVED

    def mark_charged_back(self) -> None:
        self.status = DisputeStatus.CHARGED_BACK


@dataclass
class ProcessingStats:
    """Counters for a single processing run."""

    applied: int = 0
    rejected: int = 0
    malformed: int = 0
    rejections: Counter = field(default_factory=Counter)

    def record(self, result: ProcessingResult) -> None:
        if result.is_applied:
            self.applied += 1
        else:
            self.rejected += 1
            self.rejections[result] += 1

    def summary(self) -> str:
        return f"Applied: {self.applied}, Rejected: {self.rejected}, Malformed: {self.malformed}"
