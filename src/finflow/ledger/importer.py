"""Bulk import of transactions extracted from statement files."""
import mimetypes
from datetime import date
from decimal import Decimal
from pathlib import Path
from typing import List, Optional

from .models import Category, Transaction, TransactionType, parse_amount
from finflow.utils.logger import get_logger, set_action_context
from finflow.utils.exceptions import FinFlowError

logger = get_logger()

PLACEHOLDER_DESCRIPTION = "Sin descripción"
DEFAULT_MIME_TYPE = "application/octet-stream"


class FileImporter:
    """Turns gateway-extracted records into stored transactions.

    Imported records skip duplicate detection: they are prepended as
    returned, even when they repeat each other or existing entries.
    """

    def __init__(
        self,
        store,
        gateway,
        placeholder_description: str = PLACEHOLDER_DESCRIPTION,
        fallback_category: Category = Category.OTHER,
        fallback_type: TransactionType = TransactionType.EXPENSE
    ):
        """
        Initialize importer.

        Args:
            store: TransactionStore receiving imported transactions
            gateway: ExtractionGateway returning partial records
            placeholder_description: Used when a record has no description
            fallback_category: Used for missing or unknown categories
            fallback_type: Used for missing or unknown types
        """
        self.store = store
        self.gateway = gateway
        self.placeholder_description = placeholder_description
        self.fallback_category = Category(fallback_category)
        self.fallback_type = TransactionType(fallback_type)

    def import_file(self, path: Path) -> List[Transaction]:
        """Read a statement file and import its transactions."""
        path = Path(path)
        mime_type, _ = mimetypes.guess_type(path.name)
        with open(path, "rb") as f:
            data = f.read()
        logger.info(f"Importing {path.name} ({mime_type or DEFAULT_MIME_TYPE}, {len(data)} bytes)")
        return self.import_bytes(data, mime_type or DEFAULT_MIME_TYPE)

    def import_bytes(self, data: bytes, mime_type: str) -> List[Transaction]:
        """
        Extract and import transactions from raw file content.

        Args:
            data: File content
            mime_type: MIME type of the content

        Returns:
            Imported transactions; empty if the gateway failed or found nothing
        """
        set_action_context("import")
        try:
            records = self.gateway.extract(data, mime_type)
        except FinFlowError as e:
            logger.error(f"Error importing file: {e}")
            return []
        finally:
            set_action_context(None)

        if not records:
            logger.info("No transactions extracted")
            return []

        today = date.today()
        transactions = [self._to_transaction(record, today) for record in records]
        self.store.prepend_many(transactions)
        logger.info(f"Imported {len(transactions)} transactions")
        return transactions

    def _to_transaction(self, record, today: date) -> Transaction:
        return Transaction(
            description=(record.description or "").strip() or self.placeholder_description,
            amount=self._amount(record.amount),
            category=self._category(record.category),
            type=self._type(record.type),
            date=self._date(record.date, today)
        )

    @staticmethod
    def _amount(value) -> Decimal:
        if value is None:
            return Decimal(0)
        try:
            amount = parse_amount(value)
        except ValueError:
            logger.warning(f"Invalid amount '{value}', using 0")
            return Decimal(0)
        return abs(amount)

    def _category(self, value: Optional[str]) -> Category:
        if not value:
            return self.fallback_category
        try:
            return Category(value)
        except ValueError:
            logger.warning(f"Unknown category '{value}', using '{self.fallback_category.value}'")
            return self.fallback_category

    def _type(self, value: Optional[str]) -> TransactionType:
        try:
            return TransactionType(value)
        except ValueError:
            return self.fallback_type

    @staticmethod
    def _date(value: Optional[str], today: date) -> date:
        if not value:
            return today
        try:
            return date.fromisoformat(value)
        except ValueError:
            logger.warning(f"Invalid date format: {value}, using today")
            return today
