"""Tests for the commit workflow."""
import unittest
from datetime import date
from decimal import Decimal

from finflow.ledger.duplicates import DuplicateKind
from finflow.ledger.models import Category, TransactionType
from finflow.ledger.workflow import CommitWorkflow, WorkflowState
from finflow.storage.kv import MemoryKeyValueStore
from finflow.storage.store import TransactionStore
from finflow.utils.exceptions import WorkflowError

from helpers import make_txn


class TestCommitWorkflow(unittest.TestCase):
    """Test CommitWorkflow state transitions."""

    def setUp(self):
        self.store = TransactionStore(MemoryKeyValueStore()).load()
        self.store.append(make_txn("Café", "3.50"))
        self.workflow = CommitWorkflow(self.store)

    def test_novel_commits_to_front(self):
        result = self.workflow.submit("Taxi", "10", Category.TRANSPORT)

        self.assertEqual(result.state, WorkflowState.COMMITTED)
        self.assertEqual(result.kind, DuplicateKind.NOVEL)
        self.assertEqual(len(self.store.transactions), 2)
        self.assertIs(self.store.transactions[0], result.candidate)
        self.assertEqual(result.candidate.amount, Decimal("10"))
        self.assertEqual(result.candidate.date, date.today())

    def test_exact_duplicate_waits_for_confirmation(self):
        result = self.workflow.submit("café ", "3.50")

        self.assertTrue(result.needs_confirmation)
        self.assertEqual(result.kind, DuplicateKind.EXACT)
        self.assertEqual(self.workflow.state, WorkflowState.AWAITING_CONFIRMATION)
        self.assertEqual(len(self.store.transactions), 1)

    def test_partial_duplicate_confirmed(self):
        result = self.workflow.submit("CAFÉ", "4.00")
        self.assertEqual(result.kind, DuplicateKind.PARTIAL)

        committed = self.workflow.confirm()

        self.assertIs(committed, result.candidate)
        self.assertEqual(self.workflow.state, WorkflowState.COMMITTED)
        self.assertEqual(len(self.store.transactions), 2)
        self.assertIs(self.store.transactions[0], committed)

    def test_cancel_leaves_store_unchanged(self):
        before = self.store.transactions
        self.workflow.submit("café", "3.5")

        result = self.workflow.cancel()

        self.assertEqual(result.state, WorkflowState.CANCELLED)
        self.assertEqual(self.workflow.state, WorkflowState.IDLE)
        self.assertIsNone(self.workflow.pending)
        self.assertEqual(self.store.transactions, before)

    def test_rejects_missing_or_invalid_fields(self):
        for description, amount in [("", "5"), ("   ", "5"), ("Pan", ""), ("Pan", None),
                                    ("Pan", "abc"), ("Pan", "nan"), ("Pan", "-3")]:
            result = self.workflow.submit(description, amount)
            self.assertTrue(result.rejected, (description, amount))
            self.assertEqual(result.state, WorkflowState.IDLE)
        self.assertEqual(len(self.store.transactions), 1)

    def test_rejects_amounts_that_cannot_be_stored(self):
        for amount in ["1e400", "0.12345678901234567890"]:
            result = self.workflow.submit("Luz", amount)
            self.assertTrue(result.rejected, amount)
        self.assertEqual(len(self.store.transactions), 1)

    def test_classification_survives_reload(self):
        self.workflow.submit("Luz", "45.99")

        reloaded = TransactionStore(self.store.backend).load()
        result = CommitWorkflow(reloaded).submit("luz", "45.99")

        self.assertEqual(result.kind, DuplicateKind.EXACT)

    def test_description_is_trimmed(self):
        result = self.workflow.submit("  Taxi  ", 10)
        self.assertEqual(result.candidate.description, "Taxi")

    def test_income_and_explicit_date(self):
        result = self.workflow.submit(
            "Nómina", "1200", Category.OTHER, TransactionType.INCOME, date=date(2025, 1, 31)
        )
        self.assertEqual(result.candidate.type, TransactionType.INCOME)
        self.assertEqual(result.candidate.date, date(2025, 1, 31))

    def test_recurring_added_once(self):
        self.store.add_recurring("Súper semanal")

        self.workflow.submit("super semanal", "42", recurring=True)

        self.assertEqual(self.store.recurring, ("Súper semanal",))

    def test_recurring_added_on_commit(self):
        self.workflow.submit("Gimnasio", "30", recurring=True)
        self.assertEqual(self.store.recurring, ("Gimnasio",))

    def test_recurring_not_added_without_flag(self):
        self.workflow.submit("Gimnasio", "30")
        self.assertEqual(self.store.recurring, ())

    def test_recurring_flag_kept_until_confirmation(self):
        self.workflow.submit("Café", "9", recurring=True)
        self.assertEqual(self.store.recurring, ())

        self.workflow.confirm()

        self.assertEqual(self.store.recurring, ("Café",))

    def test_recurring_dropped_on_cancel(self):
        self.workflow.submit("Café", "9", recurring=True)
        self.workflow.cancel()
        self.assertEqual(self.store.recurring, ())

    def test_out_of_order_calls_raise(self):
        with self.assertRaises(WorkflowError):
            self.workflow.confirm()
        with self.assertRaises(WorkflowError):
            self.workflow.cancel()

        self.workflow.submit("Café", "3.5")
        with self.assertRaises(WorkflowError):
            self.workflow.submit("Taxi", "10")

    def test_next_submission_after_commit(self):
        self.workflow.submit("Taxi", "10")
        result = self.workflow.submit("Bus", "2")
        self.assertEqual(result.state, WorkflowState.COMMITTED)
        self.assertEqual([t.description for t in self.store.transactions], ["Bus", "Taxi", "Café"])


if __name__ == "__main__":
    unittest.main()
