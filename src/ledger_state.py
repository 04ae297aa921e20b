from typing import Dict, Iterator, Optional

from models import ClientAccount, DisputableRecord, AccountSnapshot


class LedgerState:
    """
    All mutable ledger state for one run.
    Stores client accounts and disputable transactions keyed by tx id, so
    dispute lookups never scan a client's history.
    """

    def __init__(self):
        # Insertion order doubles as first-seen order for the final output.
        self._accounts: Dict[int, ClientAccount] = {}
        self._records: Dict[int, DisputableRecord] = {}

    def get_or_create_account(self, client_id: int) -> ClientAccount:
        """Get existing account or create new one."""
        account = self._accounts.get(client_id)
        if account is None:
            account = ClientAccount(client_id=client_id)
            self._accounts[client_id] = account
        return account

    def store_account(self, account: ClientAccount) -> None:
        self._accounts[account.client_id] = account

    def store_record(self, record: DisputableRecord) -> None:
        """Store deposit/withdrawal metadata for future dispute lookups."""
        self._records[record.transaction_id] = record

    def get_record(self, transaction_id: int) -> Optional[DisputableRecord]:
        """Retrieve stored record by transaction ID."""
        return self._records.get(transaction_id)

    def get_all_accounts(self) -> Dict[int, ClientAccount]:
        """Return all accounts in first-seen order."""
        return dict(self._accounts)

    def snapshots(self) -> Iterator[AccountSnapshot]:
        """Yield one snapshot per account, in first-seen order."""
        for account in list(self._accounts.values()):
            yield AccountSnapshot.from_account(account)

    def __len__(self) -> int:
        return len(self._accounts)
