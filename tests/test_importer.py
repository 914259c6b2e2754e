"""Tests for statement file import."""
import shutil
import tempfile
import unittest
from datetime import date
from decimal import Decimal
from pathlib import Path

from finflow.ledger.importer import FileImporter
from finflow.ledger.models import Category, TransactionType
from finflow.llm.schemas import ExtractedRecord
from finflow.storage.kv import MemoryKeyValueStore
from finflow.storage.store import TransactionStore
from finflow.utils.exceptions import LLMError

from helpers import make_txn


class FakeGateway:
    def __init__(self, records=None, error=None):
        self.records = records or []
        self.error = error
        self.calls = []

    def extract(self, data, mime_type):
        self.calls.append((data, mime_type))
        if self.error is not None:
            raise self.error
        return self.records


class TestFileImporter(unittest.TestCase):
    """Test FileImporter defaults and ordering."""

    def setUp(self):
        self.store = TransactionStore(MemoryKeyValueStore()).load()
        self.existing = make_txn("Café", "3.50")
        self.store.append(self.existing)

    def test_records_prepended_in_gateway_order(self):
        gateway = FakeGateway([
            ExtractedRecord(description="Mercadona", amount=45.2, category="Alimentación",
                            type="expense", date="2025-04-02"),
            ExtractedRecord(description="Nómina", amount=1800, category="Otros",
                            type="income", date="2025-04-01"),
        ])
        importer = FileImporter(self.store, gateway)

        imported = importer.import_bytes(b"%PDF", "application/pdf")

        self.assertEqual(len(imported), 2)
        self.assertEqual(list(self.store.transactions), imported + [self.existing])
        self.assertEqual(imported[0].category, Category.FOOD)
        self.assertEqual(imported[0].amount, Decimal("45.2"))
        self.assertEqual(imported[0].date, date(2025, 4, 2))
        self.assertEqual(imported[1].type, TransactionType.INCOME)
        self.assertEqual(gateway.calls, [(b"%PDF", "application/pdf")])

    def test_missing_fields_defaulted(self):
        importer = FileImporter(self.store, FakeGateway([ExtractedRecord()]))

        [txn] = importer.import_bytes(b"x", "text/csv")

        self.assertEqual(txn.description, "Sin descripción")
        self.assertEqual(txn.amount, Decimal(0))
        self.assertEqual(txn.category, Category.OTHER)
        self.assertEqual(txn.type, TransactionType.EXPENSE)
        self.assertEqual(txn.date, date.today())
        self.assertTrue(txn.id)

    def test_unknown_values_fall_back(self):
        record = ExtractedRecord(description="Cine", amount=-12.5, category="Ocio",
                                 type="debit", date="12/04/2025")
        importer = FileImporter(self.store, FakeGateway([record]))

        [txn] = importer.import_bytes(b"x", "image/png")

        self.assertEqual(txn.category, Category.OTHER)
        self.assertEqual(txn.type, TransactionType.EXPENSE)
        self.assertEqual(txn.amount, Decimal("12.5"))
        self.assertEqual(txn.date, date.today())

    def test_no_duplicate_detection(self):
        records = [
            ExtractedRecord(description="Café", amount=3.5),
            ExtractedRecord(description="Café", amount=3.5),
        ]
        importer = FileImporter(self.store, FakeGateway(records))

        imported = importer.import_bytes(b"x", "application/pdf")

        self.assertEqual(len(imported), 2)
        self.assertEqual(len(self.store.transactions), 3)
        self.assertNotEqual(imported[0].id, imported[1].id)

    def test_gateway_failure_imports_nothing(self):
        importer = FileImporter(self.store, FakeGateway(error=LLMError("boom")))

        self.assertEqual(importer.import_bytes(b"x", "application/pdf"), [])
        self.assertEqual(self.store.transactions, (self.existing,))

    def test_empty_extraction(self):
        importer = FileImporter(self.store, FakeGateway([]))
        self.assertEqual(importer.import_bytes(b"x", "application/pdf"), [])
        self.assertEqual(len(self.store.transactions), 1)

    def test_custom_defaults(self):
        importer = FileImporter(
            self.store,
            FakeGateway([ExtractedRecord(amount=1)]),
            placeholder_description="(unknown)",
            fallback_category="Vivienda",
            fallback_type="income"
        )

        [txn] = importer.import_bytes(b"x", "text/csv")

        self.assertEqual(txn.description, "(unknown)")
        self.assertEqual(txn.category, Category.HOUSING)
        self.assertEqual(txn.type, TransactionType.INCOME)

    def test_import_file_guesses_mime_type(self):
        test_dir = Path(tempfile.mkdtemp())
        try:
            statement = test_dir / "extracto.csv"
            statement.write_bytes(b"fecha,concepto,importe\n")
            gateway = FakeGateway([ExtractedRecord(description="Luz", amount=60)])

            FileImporter(self.store, gateway).import_file(statement)

            self.assertEqual(gateway.calls, [(b"fecha,concepto,importe\n", "text/csv")])
        finally:
            shutil.rmtree(test_dir, ignore_errors=True)


if __name__ == "__main__":
    unittest.main()
