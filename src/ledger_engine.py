import logging
from typing import Dict, Iterable, Iterator, Optional

from models import Transaction, ClientAccount, AccountSnapshot, ProcessingResult, ProcessingStats
from ledger_state import LedgerState
from transaction_processor import TransactionProcessor
from transaction_reader import read_transactions

logger = logging.getLogger(__name__)


class LedgerEngine:
    """
    Applies a stream of transactions to ledger state, one at a time, in order.
    Single pass: nothing is re-read or retried.
    """

    def __init__(self, state: Optional[LedgerState] = None):
        self._state = state if state is not None else LedgerState()
        self._processor = TransactionProcessor(self._state)
        self._stats = ProcessingStats()

    @property
    def state(self) -> LedgerState:
        return self._state

    @property
    def stats(self) -> ProcessingStats:
        return self._stats

    def apply(self, transaction: Transaction) -> ProcessingResult:
        """
        Apply one transaction. Unmet preconditions are ignored, never raised.
        Raises LedgerError only for a transaction type the ledger cannot interpret.
        """
        result = self._processor.process_transaction(transaction)
        self._stats.record(transaction, result)
        if result == ProcessingResult.IGNORED:
            logger.debug(f"Ignored {transaction}")
        return result

    def process_transactions(self, transactions: Iterable[Transaction]) -> LedgerState:
        """Apply every transaction from the iterable and return the resulting state."""
        for transaction in transactions:
            self.apply(transaction)

        logger.info(f"Processing complete: {self._stats.applied} applied, {self._stats.ignored} ignored")
        return self._state

    def process_file(self, filepath: str) -> Dict[int, ClientAccount]:
        """Process CSV file and return final account states."""
        logger.info(f"Reading transactions from {filepath}")
        self.process_transactions(read_transactions(filepath))
        return self._state.get_all_accounts()

    def snapshots(self) -> Iterator[AccountSnapshot]:
        """Lazily yield the final balances of every account, in first-seen order."""
        return self._state.snapshots()


def process_transactions(transactions: Iterable[Transaction], state: Optional[LedgerState] = None) -> LedgerState:
    """Apply transactions to state (a fresh one if not given) and return it."""
    return LedgerEngine(state).process_transactions(transactions)
