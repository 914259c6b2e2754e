"""Submission workflow: validate, check duplicates, commit."""
from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Any, Optional, Union

from .duplicates import DuplicateDetector, DuplicateKind
from .models import Category, Transaction, TransactionType, parse_amount
from finflow.utils.logger import get_logger
from finflow.utils.exceptions import WorkflowError

logger = get_logger()


class WorkflowState(str, Enum):
    IDLE = "idle"
    PENDING_CLASSIFICATION = "pending_classification"
    AWAITING_CONFIRMATION = "awaiting_confirmation"
    COMMITTED = "committed"
    CANCELLED = "cancelled"


@dataclass
class SubmissionResult:
    """What happened to a submission."""
    state: WorkflowState
    kind: Optional[DuplicateKind] = None
    candidate: Optional[Transaction] = None

    @property
    def rejected(self) -> bool:
        return self.candidate is None

    @property
    def needs_confirmation(self) -> bool:
        return self.state is WorkflowState.AWAITING_CONFIRMATION


class CommitWorkflow:
    """Drives one submission at a time through duplicate detection.

    Novel candidates are committed straight away. Exact and partial
    duplicates wait for confirm() or cancel().
    """

    def __init__(self, store, detector: Optional[DuplicateDetector] = None):
        """
        Initialize workflow.

        Args:
            store: TransactionStore receiving committed transactions
            detector: Duplicate detector (default instance if omitted)
        """
        self.store = store
        self.detector = detector or DuplicateDetector()
        self.state = WorkflowState.IDLE
        self._pending: Optional[Transaction] = None
        self._pending_recurring = False

    @property
    def pending(self) -> Optional[Transaction]:
        return self._pending

    def submit(
        self,
        description: str,
        amount: Any,
        category: Union[Category, str] = Category.OTHER,
        type: Union[TransactionType, str] = TransactionType.EXPENSE,
        recurring: bool = False,
        date: Optional[date] = None
    ) -> SubmissionResult:
        """
        Submit a new transaction.

        Args:
            description: Free text, trimmed before use
            amount: Text or number; must parse to a finite non-negative value
            category: Category or its name
            type: TransactionType or its value
            recurring: Remember the description for quick entry
            date: Transaction date, today if omitted

        Returns:
            SubmissionResult; rejected submissions come back IDLE with no candidate

        Raises:
            WorkflowError: If a duplicate is still awaiting confirmation
        """
        if self.state is WorkflowState.AWAITING_CONFIRMATION:
            raise WorkflowError("A duplicate is awaiting confirmation")

        candidate = self._build_candidate(description, amount, category, type, date)
        if candidate is None:
            self.state = WorkflowState.IDLE
            return SubmissionResult(WorkflowState.IDLE)

        self.state = WorkflowState.PENDING_CLASSIFICATION
        kind = self.detector.classify(candidate, self.store.transactions)

        if kind is DuplicateKind.NOVEL:
            self._commit(candidate, recurring)
            return SubmissionResult(self.state, kind, candidate)

        logger.info(f"Possible {kind.value} duplicate: {candidate.description} ({candidate.amount})")
        self._pending = candidate
        self._pending_recurring = recurring
        self.state = WorkflowState.AWAITING_CONFIRMATION
        return SubmissionResult(self.state, kind, candidate)

    def confirm(self) -> Transaction:
        """Commit the pending duplicate anyway."""
        if self.state is not WorkflowState.AWAITING_CONFIRMATION:
            raise WorkflowError("Nothing to confirm")
        candidate = self._pending
        self._commit(candidate, self._pending_recurring)
        return candidate

    def cancel(self) -> SubmissionResult:
        """Discard the pending duplicate without touching the store."""
        if self.state is not WorkflowState.AWAITING_CONFIRMATION:
            raise WorkflowError("Nothing to cancel")
        candidate = self._pending
        logger.info(f"Discarded duplicate: {candidate.description}")
        self._clear_pending()
        self.state = WorkflowState.IDLE
        return SubmissionResult(WorkflowState.CANCELLED, candidate=candidate)

    def _commit(self, candidate: Transaction, recurring: bool) -> None:
        self.store.append(candidate)
        if recurring:
            self.store.add_recurring(candidate.description)
        self._clear_pending()
        self.state = WorkflowState.COMMITTED
        logger.info(f"Added {candidate.type.value}: {candidate.description} ({candidate.amount})")

    def _clear_pending(self) -> None:
        self._pending = None
        self._pending_recurring = False

    @staticmethod
    def _build_candidate(description, amount, category, type, when) -> Optional[Transaction]:
        description = (description or "").strip()
        if not description:
            logger.debug("Rejected submission without description")
            return None

        if amount is None or (isinstance(amount, str) and not amount.strip()):
            logger.debug("Rejected submission without amount")
            return None
        try:
            value = parse_amount(amount)
        except ValueError as e:
            logger.debug(f"Rejected submission: {e}")
            return None
        if value < 0:
            logger.debug(f"Rejected negative amount: {value}")
            return None

        return Transaction(
            description=description,
            amount=value,
            category=Category(category),
            type=TransactionType(type),
            date=when or date.today()
        )
