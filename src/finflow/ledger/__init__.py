"""Transaction ledger logic."""
from .models import Transaction, Category, TransactionType, AggregateTotals
from .normalizer import normalize_description
from .duplicates import DuplicateDetector, DuplicateKind, classify
from .aggregator import Aggregator, aggregate

__all__ = [
    "Transaction",
    "Category",
    "TransactionType",
    "AggregateTotals",
    "normalize_description",
    "DuplicateDetector",
    "DuplicateKind",
    "classify",
    "Aggregator",
    "aggregate",
]
