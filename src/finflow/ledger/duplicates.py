"""Duplicate transaction detection."""
from enum import Enum
from typing import Iterable

from .models import Transaction
from .normalizer import normalize_description


class DuplicateKind(str, Enum):
    """Outcome of checking a candidate against existing transactions."""
    NOVEL = "novel"
    EXACT = "exact"
    PARTIAL = "partial"


class DuplicateDetector:
    """Classifies candidate transactions against the stored list."""

    def classify(self, candidate: Transaction, existing: Iterable[Transaction]) -> DuplicateKind:
        """
        Classify a candidate transaction.

        An existing entry with the same canonical description and the same
        amount is an exact duplicate. Failing that, the same canonical
        description with a different amount is a partial duplicate. An exact
        match anywhere in the list wins over partial matches.

        Args:
            candidate: Transaction about to be committed
            existing: Current transactions, in any order

        Returns:
            DuplicateKind
        """
        target = normalize_description(candidate.description)
        partial = False

        for txn in existing:
            if normalize_description(txn.description) != target:
                continue
            # Decimal equality: 3.5 == 3.50, no tolerance
            if txn.amount == candidate.amount:
                return DuplicateKind.EXACT
            partial = True

        return DuplicateKind.PARTIAL if partial else DuplicateKind.NOVEL


def classify(candidate: Transaction, existing: Iterable[Transaction]) -> DuplicateKind:
    """Module-level shortcut for DuplicateDetector().classify."""
    return DuplicateDetector().classify(candidate, existing)
