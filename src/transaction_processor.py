import logging
from typing import Optional, Tuple

from errors import LedgerError
from models import (
    Transaction,
    TransactionType,
    ClientAccount,
    DisputableRecord,
    DisputeState,
    ProcessingResult,
)
from ledger_state import LedgerState

logger = logging.getLogger(__name__)

Outcome = Tuple[ClientAccount, DisputableRecord]


def handle_deposit(account: ClientAccount, record: Optional[DisputableRecord], transaction: Transaction) -> Optional[Outcome]:
    if transaction.amount is None or transaction.amount <= 0:
        logger.warning(f"Deposit tx {transaction.transaction_id}: invalid amount {transaction.amount}")
        return None

    if record is not None:
        logger.info(f"Deposit tx {transaction.transaction_id}: already processed, skipping")
        return None

    return account.credit(transaction.amount), DisputableRecord.from_transaction(transaction)


def handle_withdrawal(account: ClientAccount, record: Optional[DisputableRecord], transaction: Transaction) -> Optional[Outcome]:
    if transaction.amount is None or transaction.amount <= 0:
        logger.warning(f"Withdrawal tx {transaction.transaction_id}: invalid amount {transaction.amount}")
        return None

    if record is not None:
        logger.info(f"Withdrawal tx {transaction.transaction_id}: already processed, skipping")
        return None

    if account.available < transaction.amount:
        logger.warning(
            f"Withdrawal tx {transaction.transaction_id}: insufficient funds "
            f"(available {account.available}, requested {transaction.amount})"
        )
        return None

    return account.debit(transaction.amount), DisputableRecord.from_transaction(transaction)


def _is_valid_dispute_target(record: Optional[DisputableRecord], transaction: Transaction, expected: DisputeState) -> bool:
    """Shared preconditions for dispute, resolve and chargeback."""
    label = transaction.transaction_type.value.capitalize()

    if record is None:
        logger.info(f"{label} for tx {transaction.transaction_id}: transaction not found")
        return False

    if record.client_id != transaction.client_id:
        logger.warning(
            f"{label} for tx {transaction.transaction_id}: client mismatch "
            f"(expected {record.client_id}, got {transaction.client_id})"
        )
        return False

    if record.dispute_state != expected:
        logger.info(f"{label} for tx {transaction.transaction_id}: transaction is {record.dispute_state.value}")
        return False

    return True


def handle_dispute(account: ClientAccount, record: Optional[DisputableRecord], transaction: Transaction) -> Optional[Outcome]:
    if not _is_valid_dispute_target(record, transaction, DisputeState.NONE):
        return None
    return account.hold(record.amount), record.with_state(DisputeState.UNDER_DISPUTE)


def handle_resolve(account: ClientAccount, record: Optional[DisputableRecord], transaction: Transaction) -> Optional[Outcome]:
    if not _is_valid_dispute_target(record, transaction, DisputeState.UNDER_DISPUTE):
        return None
    return account.release_hold(record.amount), record.with_state(DisputeState.RESOLVED)


def handle_chargeback(account: ClientAccount, record: Optional[DisputableRecord], transaction: Transaction) -> Optional[Outcome]:
    if not _is_valid_dispute_target(record, transaction, DisputeState.UNDER_DISPUTE):
        return None
    return account.remove_held(record.amount).lock(), record.with_state(DisputeState.CHARGED_BACK)


class TransactionProcessor:
    """
    Applies transactions against ledger state.
    Handlers are pure; this class looks up their inputs and stores their outputs.
    Returns ProcessingResult to tell applied transactions from ignored ones.
    """

    def __init__(self, state: LedgerState):
        self._state = state

    def process_transaction(self, transaction: Transaction) -> ProcessingResult:
        """
        Process a single transaction.

        Returns:
            APPLIED: Balances and dispute state were updated
            IGNORED: A precondition was not met (unknown tx, locked account, ...); nothing changed

        Raises:
            LedgerError: The transaction type is not one the ledger understands
        """
        if not isinstance(transaction.transaction_type, TransactionType):
            raise LedgerError(f"Unsupported transaction type: {transaction.transaction_type!r}")

        account = self._state.get_or_create_account(transaction.client_id)

        if account.locked:
            logger.info(f"{transaction}: account {account.client_id} is locked, skipping")
            return ProcessingResult.IGNORED

        record = self._state.get_record(transaction.transaction_id)

        match transaction.transaction_type:
            case TransactionType.DEPOSIT:
                outcome = handle_deposit(account, record, transaction)
            case TransactionType.WITHDRAWAL:
                outcome = handle_withdrawal(account, record, transaction)
            case TransactionType.DISPUTE:
                outcome = handle_dispute(account, record, transaction)
            case TransactionType.RESOLVE:
                outcome = handle_resolve(account, record, transaction)
            case TransactionType.CHARGEBACK:
                outcome = handle_chargeback(account, record, transaction)

        if outcome is None:
            return ProcessingResult.IGNORED

        new_account, new_record = outcome
        self._state.store_account(new_account)
        self._state.store_record(new_record)
        return ProcessingResult.APPLIED
