"""Data models for the transaction ledger."""
import math
import uuid
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Dict, Any


class Category(str, Enum):
    """Closed set of transaction categories, in display order."""
    FOOD = "Alimentación"
    TRANSPORT = "Transporte"
    HOUSING = "Vivienda"
    ENTERTAINMENT = "Entretenimiento"
    HEALTH = "Salud"
    EDUCATION = "Educación"
    OTHER = "Otros"


class TransactionType(str, Enum):
    """Direction of a transaction."""
    INCOME = "income"
    EXPENSE = "expense"


def new_transaction_id() -> str:
    """Generate an opaque unique transaction id."""
    return str(uuid.uuid4())


def parse_amount(value: Any) -> Decimal:
    """
    Parse a user or gateway supplied amount.

    Args:
        value: Text or number

    Returns:
        Decimal amount

    Raises:
        ValueError: If the value is not a finite number, or cannot be stored
            as a JSON number and read back unchanged
    """
    if isinstance(value, bool):
        raise ValueError(f"Not an amount: {value!r}")
    try:
        amount = Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        raise ValueError(f"Not an amount: {value!r}")
    if not amount.is_finite():
        raise ValueError(f"Amount must be finite: {value!r}")

    # Persisted amounts are JSON floats
    stored = float(amount)
    if not math.isfinite(stored) or Decimal(repr(stored)) != amount:
        raise ValueError(f"Amount out of storable range or precision: {value!r}")
    return amount


@dataclass(frozen=True)
class Transaction:
    """Single income or expense entry. Never mutated after creation."""
    description: str
    amount: Decimal
    category: Category
    type: TransactionType
    date: date
    id: str = field(default_factory=new_transaction_id)

    @property
    def is_expense(self) -> bool:
        return self.type is TransactionType.EXPENSE

    def to_dict(self) -> Dict[str, Any]:
        """Serialize using the persisted JSON layout."""
        return {
            "id": self.id,
            "description": self.description,
            "amount": float(self.amount),
            "category": self.category.value,
            "date": self.date.isoformat(),
            "type": self.type.value,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Transaction":
        """Rebuild a transaction from its persisted JSON layout."""
        return cls(
            id=str(data["id"]),
            description=data["description"],
            amount=parse_amount(data["amount"]),
            category=Category(data["category"]),
            type=TransactionType(data["type"]),
            date=date.fromisoformat(data["date"]),
        )


@dataclass
class AggregateTotals:
    """Totals derived from a transaction list."""
    income: Decimal
    expense: Decimal
    balance: Decimal
    by_category: Dict[Category, Decimal]  # expense categories with a positive sum
