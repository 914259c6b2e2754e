"""Shared builders for tests."""
import threading
from datetime import date
from decimal import Decimal
from types import SimpleNamespace

from finflow.ledger.models import Category, Transaction, TransactionType
from finflow.storage.kv import MemoryKeyValueStore


def make_txn(description, amount, type=TransactionType.EXPENSE, category=Category.OTHER, when=None):
    return Transaction(
        description=description,
        amount=Decimal(str(amount)),
        category=category,
        type=type,
        date=when or date(2025, 5, 1)
    )


class FakeModels:
    """Stands in for genai.Client().models."""

    def __init__(self, text=None, error=None):
        self.text = text
        self.error = error
        self.calls = []

    def generate_content(self, **kwargs):
        self.calls.append(kwargs)
        if self.error is not None:
            raise self.error
        return SimpleNamespace(text=self.text)


class FakeClient:
    def __init__(self, text=None, error=None):
        self.models = FakeModels(text, error)


class GatedBackend(MemoryKeyValueStore):
    """Memory backend whose next write blocks until released."""

    def __init__(self, initial=None):
        super().__init__(initial)
        self.hold_next_write = False
        self.entered = threading.Event()
        self.release = threading.Event()

    def set(self, key, value):
        if self.hold_next_write:
            self.hold_next_write = False
            self.entered.set()
            self.release.wait(timeout=5)
        super().set(key, value)
