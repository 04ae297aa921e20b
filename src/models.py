from collections import Counter
from dataclasses import dataclass, field, replace
from decimal import Decimal
from enum import Enum
from typing import NamedTuple, Optional

# Fractional digits kept for every amount, on input and on output.
AMOUNT_PRECISION = 4
AMOUNT_QUANTUM = Decimal(1).scaleb(-AMOUNT_PRECISION)


class TransactionType(Enum):
    DEPOSIT = "deposit"
    WITHDRAWAL = "withdrawal"
    DISPUTE = "dispute"
    RESOLVE = "resolve"
    CHARGEBACK = "chargeback"


DISPUTABLE_TYPES = frozenset({TransactionType.DEPOSIT, TransactionType.WITHDRAWAL})


class DisputeState(Enum):
    NONE = "none"
    UNDER_DISPUTE = "under_dispute"
    RESOLVED = "resolved"
    CHARGED_BACK = "charged_back"


class ProcessingResult(Enum):
    APPLIED = "applied"
    IGNORED = "ignored"


@dataclass(frozen=True)
class Transaction:
    transaction_type: TransactionType
    client_id: int
    transaction_id: int
    amount: Optional[Decimal] = None

    def __repr__(self) -> str:
        return f"Transaction({self.transaction_type.value}, client={self.client_id}, tx={self.transaction_id}, amount={self.amount})"


@dataclass(frozen=True)
class ClientAccount:
    """
    Balances for one client.
    Every mutator returns a new account; total is always available + held.
    """

    client_id: int
    available: Decimal = Decimal("0")
    held: Decimal = Decimal("0")
    locked: bool = False

    @property
    def total(self) -> Decimal:
        return self.available + self.held

    def credit(self, amount: Decimal) -> "ClientAccount":
        return replace(self, available=self.available + amount)

    def debit(self, amount: Decimal) -> "ClientAccount":
        return replace(self, available=self.available - amount)

    def hold(self, amount: Decimal) -> "ClientAccount":
        return replace(self, available=self.available - amount, held=self.held + amount)

    def release_hold(self, amount: Decimal) -> "ClientAccount":
        return replace(self, available=self.available + amount, held=self.held - amount)

    def remove_held(self, amount: Decimal) -> "ClientAccount":
        return replace(self, held=self.held - amount)

    def lock(self) -> "ClientAccount":
        return replace(self, locked=True)


@dataclass(frozen=True)
class DisputableRecord:
    """What the ledger remembers about a deposit or withdrawal for later disputes."""

    transaction_id: int
    client_id: int
    transaction_type: TransactionType
    amount: Decimal
    dispute_state: DisputeState = DisputeState.NONE

    @classmethod
    def from_transaction(cls, transaction: Transaction) -> "DisputableRecord":
        return cls(
            transaction_id=transaction.transaction_id,
            client_id=transaction.client_id,
            transaction_type=transaction.transaction_type,
            amount=transaction.amount,
        )

    def with_state(self, dispute_state: DisputeState) -> "DisputableRecord":
        return replace(self, dispute_state=dispute_state)


class AccountSnapshot(NamedTuple):
    client_id: int
    available: Decimal
    held: Decimal
    total: Decimal
    locked: bool

    @classmethod
    def from_account(cls, account: ClientAccount) -> "AccountSnapshot":
        return cls(account.client_id, account.available, account.held, account.total, account.locked)


@dataclass
class ProcessingStats:
    """Counters for tracking processing statistics."""

    applied: int = 0
    ignored: int = 0
    ignored_by_type: Counter = field(default_factory=Counter)

    def record(self, transaction: Transaction, result: ProcessingResult) -> None:
        if result == ProcessingResult.APPLIED:
            self.applied += 1
        else:
            self.ignored += 1
            self.ignored_by_type[transaction.transaction_type.value] += 1
