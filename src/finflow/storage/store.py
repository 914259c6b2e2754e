"""Persisted transaction and recurring-description store."""
import json
import threading
from typing import Callable, Iterable, List, Optional, Tuple

from finflow.ledger.models import Transaction
from finflow.ledger.normalizer import same_description
from finflow.utils.logger import get_logger
from .kv import KeyValueStore

logger = get_logger()

TRANSACTIONS_KEY = "transactions"
RECURRING_KEY = "recurring_descs"

Listener = Callable[["TransactionStore"], None]


class TransactionStore:
    """Owns the transaction list and the recurring description list.

    Transactions are kept most-recent-first. Every mutation replaces the whole
    list and rewrites its persistence key, then notifies listeners. Mutations
    hold a lock from reading the current list until it is rebound.
    """

    def __init__(
        self,
        backend: KeyValueStore,
        transactions_key: str = TRANSACTIONS_KEY,
        recurring_key: str = RECURRING_KEY
    ):
        self.backend = backend
        self.transactions_key = transactions_key
        self.recurring_key = recurring_key
        self._transactions: Tuple[Transaction, ...] = ()
        self._recurring: Tuple[str, ...] = ()
        self._listeners: List[Listener] = []
        self._lock = threading.RLock()

    @property
    def transactions(self) -> Tuple[Transaction, ...]:
        return self._transactions

    @property
    def recurring(self) -> Tuple[str, ...]:
        return self._recurring

    def subscribe(self, listener: Listener) -> None:
        """Register a callback invoked after every mutation."""
        self._listeners.append(listener)

    def load(self) -> "TransactionStore":
        """Read both lists from the backend. Missing keys load as empty."""
        with self._lock:
            self._transactions = tuple(self._load_transactions())
            self._recurring = tuple(self._load_recurring())
        logger.info(
            f"Loaded {len(self._transactions)} transactions and "
            f"{len(self._recurring)} recurring descriptions"
        )
        self._notify()
        return self

    def get(self, transaction_id: str) -> Optional[Transaction]:
        for txn in self._transactions:
            if txn.id == transaction_id:
                return txn
        return None

    def append(self, transaction: Transaction) -> None:
        """Insert a transaction at the front of the list."""
        with self._lock:
            self._set_transactions((transaction,) + self._transactions)
        logger.debug(f"Stored transaction {transaction.id}: {transaction.description}")

    def prepend_many(self, transactions: Iterable[Transaction]) -> None:
        """Insert transactions at the front, keeping their given order."""
        batch = tuple(transactions)
        if not batch:
            return
        with self._lock:
            self._set_transactions(batch + self._transactions)
        logger.debug(f"Stored {len(batch)} imported transactions")

    def remove(self, transaction_id: str) -> bool:
        """
        Delete a transaction.

        Args:
            transaction_id: Id of the transaction

        Returns:
            True if a transaction was removed
        """
        with self._lock:
            remaining = tuple(t for t in self._transactions if t.id != transaction_id)
            if len(remaining) == len(self._transactions):
                logger.debug(f"No transaction with id {transaction_id}")
                return False
            self._set_transactions(remaining)
        return True

    def has_recurring(self, description: str) -> bool:
        return any(same_description(d, description) for d in self._recurring)

    def add_recurring(self, description: str) -> bool:
        """
        Add a recurring description unless a normalized match exists.

        Args:
            description: Raw description, stored as given

        Returns:
            True if the description was added
        """
        with self._lock:
            if self.has_recurring(description):
                return False
            self._set_recurring(self._recurring + (description,))
        logger.debug(f"Added recurring description: {description}")
        return True

    def remove_recurring(self, description: str) -> bool:
        """Remove a recurring description by exact value."""
        with self._lock:
            remaining = tuple(d for d in self._recurring if d != description)
            if len(remaining) == len(self._recurring):
                return False
            self._set_recurring(remaining)
        return True

    def _set_transactions(self, transactions: Tuple[Transaction, ...]) -> None:
        with self._lock:
            payload = json.dumps([t.to_dict() for t in transactions], ensure_ascii=False)
            self.backend.set(self.transactions_key, payload)
            self._transactions = transactions
            self._notify()

    def _set_recurring(self, recurring: Tuple[str, ...]) -> None:
        with self._lock:
            self.backend.set(self.recurring_key, json.dumps(list(recurring), ensure_ascii=False))
            self._recurring = recurring
            self._notify()

    def _notify(self) -> None:
        for listener in self._listeners:
            listener(self)

    def _load_transactions(self) -> List[Transaction]:
        raw = self._read_list(self.transactions_key)
        transactions = []
        for item in raw:
            try:
                transactions.append(Transaction.from_dict(item))
            except (KeyError, TypeError, ValueError) as e:
                logger.warning(f"Skipping unreadable stored transaction {item!r}: {e}")
        return transactions

    def _load_recurring(self) -> List[str]:
        return [d for d in self._read_list(self.recurring_key) if isinstance(d, str)]

    def _read_list(self, key: str) -> list:
        saved = self.backend.get(key)
        if saved is None:
            return []
        try:
            data = json.loads(saved)
        except ValueError as e:
            logger.warning(f"Stored value for '{key}' is not valid JSON: {e}")
            return []
        if not isinstance(data, list):
            logger.warning(f"Stored value for '{key}' is not a list")
            return []
        return data
