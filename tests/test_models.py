import sys
import os
from dataclasses import FrozenInstanceError
from decimal import Decimal

import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))

from models import (
    Transaction,
    TransactionType,
    ClientAccount,
    DisputableRecord,
    DisputeState,
    AccountSnapshot,
    ProcessingResult,
    ProcessingStats,
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

    def test_immutable(self):
        transaction = Transaction(TransactionType.DEPOSIT, 1, 1, Decimal("1"))
        with pytest.raises(FrozenInstanceError):
            transaction.amount = Decimal("2")


class TestClientAccount:
    def test_default_values(self):
        account = ClientAccount(client_id=1)
        assert account.available == Decimal("0")
        assert account.held == Decimal("0")
        assert account.total == Decimal("0")
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

        held = account.hold(Decimal("40"))
        assert held.available == Decimal("60")
        assert held.held == Decimal("40")
        assert held.total == Decimal("100")

        released = held.release_hold(Decimal("40"))
        assert released == account

    def test_remove_held_and_lock(self):
        account = ClientAccount(client_id=1, available=Decimal("10"), held=Decimal("5"))
        charged = account.remove_held(Decimal("5")).lock()

        assert charged.held == Decimal("0")
        assert charged.total == Decimal("10")
        assert charged.locked is True
        assert account.locked is False


class TestDisputableRecord:
    def test_from_transaction(self):
        transaction = Transaction(TransactionType.WITHDRAWAL, 3, 9, Decimal("2.5"))
        record = DisputableRecord.from_transaction(transaction)

        assert record.transaction_id == 9
        assert record.client_id == 3
        assert record.amount == Decimal("2.5")
        assert record.dispute_state == DisputeState.NONE

    def test_with_state(self):
        record = DisputableRecord(1, 1, TransactionType.DEPOSIT, Decimal("1"))
        assert record.with_state(DisputeState.UNDER_DISPUTE).dispute_state == DisputeState.UNDER_DISPUTE
        assert record.dispute_state == DisputeState.NONE


class TestAccountSnapshot:
    def test_from_account(self):
        account = ClientAccount(client_id=4, available=Decimal("1"), held=Decimal("2"), locked=True)
        assert AccountSnapshot.from_account(account) == (4, Decimal("1"), Decimal("2"), Decimal("3"), True)


class TestProcessingStats:
    def test_record(self):
        stats = ProcessingStats()
        deposit = Transaction(TransactionType.DEPOSIT, 1, 1, Decimal("1"))
        dispute = Transaction(TransactionType.DISPUTE, 1, 2)

        stats.record(deposit, ProcessingResult.APPLIED)
        stats.record(dispute, ProcessingResult.IGNORED)
        stats.record(dispute, ProcessingResult.IGNORED)

        assert stats.applied == 1
        assert stats.ignored == 2
        assert stats.ignored_by_type == {"dispute": 2}

    def test_enum_values(self):
        assert ProcessingResult.APPLIED.value == "applied"
        assert ProcessingResult.IGNORED.value == "ignored"
