"""Transaction aggregation module."""
from decimal import Decimal
from collections import defaultdict
from typing import Iterable

from .models import AggregateTotals, Category, Transaction


class Aggregator:
    """Derives totals and the expense breakdown from a transaction list."""

    def aggregate(self, transactions: Iterable[Transaction]) -> AggregateTotals:
        """
        Aggregate transactions into totals.

        Args:
            transactions: Transactions in any order

        Returns:
            AggregateTotals; categories without expenses are left out
        """
        income = Decimal(0)
        expense = Decimal(0)
        totals = defaultdict(Decimal)

        for txn in transactions:
            if txn.is_expense:
                expense += txn.amount
                totals[txn.category] += txn.amount
            else:
                income += txn.amount

        by_category = {
            category: totals[category]
            for category in Category
            if totals[category] > 0
        }

        return AggregateTotals(
            income=income,
            expense=expense,
            balance=income - expense,
            by_category=by_category
        )


def aggregate(transactions: Iterable[Transaction]) -> AggregateTotals:
    """Module-level shortcut for Aggregator().aggregate."""
    return Aggregator().aggregate(transactions)
