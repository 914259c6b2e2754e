"""Finance tracker session: store, workflows and gateways wired together.

All mutations go through the TransactionStore, which replaces whole lists
under a lock, so reads made while a gateway call is in flight always see a
complete snapshot and concurrent writes are never lost. Only one insight
request may run at a time; a second request returns immediately instead of
queueing.
"""
import concurrent.futures
import threading
from pathlib import Path
from typing import List, Optional, Tuple

from finflow.config.manager import Config
from finflow.config.settings import AppSettings
from finflow.ledger.aggregator import Aggregator
from finflow.ledger.importer import FileImporter
from finflow.ledger.models import AggregateTotals, Category, Transaction
from finflow.ledger.workflow import CommitWorkflow
from finflow.llm.extractor import ExtractionGateway
from finflow.llm.insights import InsightGateway
from finflow.llm.schemas import FALLBACK_INSIGHT, InsightReport
from finflow.storage.kv import JsonFileKeyValueStore
from finflow.storage.store import TransactionStore
from finflow.utils.logger import get_logger, set_action_context
from finflow.utils.exceptions import FinFlowError

logger = get_logger()


class FinanceTracker:
    """Single-user finance tracker."""

    def __init__(
        self,
        store: TransactionStore,
        insight_gateway: Optional[InsightGateway] = None,
        extraction_gateway: Optional[ExtractionGateway] = None,
        importer_defaults: Optional[dict] = None
    ):
        self.store = store
        self.insight_gateway = insight_gateway
        self.extraction_gateway = extraction_gateway
        self.aggregator = Aggregator()
        self.workflow = CommitWorkflow(store)
        self.importer = FileImporter(store, extraction_gateway, **(importer_defaults or {}))

        self._totals: Optional[Tuple[Tuple[Transaction, ...], AggregateTotals]] = None
        self._analysis_lock = threading.Lock()
        self._executor: Optional[concurrent.futures.ThreadPoolExecutor] = None
        self.last_analysis: Optional[InsightReport] = None

        store.subscribe(self._on_store_changed)

    @classmethod
    def from_config(cls, config: Config, settings: AppSettings) -> "FinanceTracker":
        """Build a tracker persisting under the configured data directory."""
        data_dir = Path(config.data_dir)
        backend = JsonFileKeyValueStore(data_dir / settings.storage_file_name)
        store = TransactionStore(backend, settings.transactions_key, settings.recurring_key).load()

        model_name = config.model_name or settings.llm_model_name
        insight_gateway = extraction_gateway = None
        if config.gemini_api_key:
            insight_gateway = InsightGateway(config.gemini_api_key, model_name)
            extraction_gateway = ExtractionGateway(config.gemini_api_key, model_name)

        return cls(
            store,
            insight_gateway,
            extraction_gateway,
            importer_defaults={
                "placeholder_description": settings.placeholder_description,
                "fallback_category": settings.fallback_category,
                "fallback_type": settings.fallback_type,
            }
        )

    @property
    def transactions(self) -> Tuple[Transaction, ...]:
        return self.store.transactions

    @property
    def totals(self) -> AggregateTotals:
        """Totals for the current list, recomputed after any change."""
        snapshot = self.store.transactions
        cached = self._totals
        # Cached totals are keyed on the list they were computed from
        if cached is not None and cached[0] is snapshot:
            return cached[1]

        totals = self.aggregator.aggregate(snapshot)
        self._totals = (snapshot, totals)
        return totals

    def chart_data(self) -> List[Tuple[Category, float]]:
        """Expense breakdown as (category, value) pairs in category order."""
        return [(category, float(value)) for category, value in self.totals.by_category.items()]

    def delete(self, transaction_id: str) -> bool:
        return self.store.remove(transaction_id)

    def recurring_suggestions(self) -> Tuple[str, ...]:
        return self.store.recurring

    def remove_recurring(self, description: str) -> bool:
        return self.store.remove_recurring(description)

    @property
    def is_analyzing(self) -> bool:
        return self._analysis_lock.locked()

    def analyze(self) -> Optional[InsightReport]:
        """
        Request spending insights for the current transactions.

        Returns:
            InsightReport (the fallback report on failure), or None when there
            is nothing to analyze or another analysis is still running
        """
        transactions = self.store.transactions
        if not transactions:
            logger.info("No transactions to analyze")
            return None

        if not self._analysis_lock.acquire(blocking=False):
            logger.warning("Analysis already in progress")
            return None

        set_action_context("analyze")
        try:
            if self.insight_gateway is None:
                raise FinFlowError("No Gemini API key configured")
            report = self.insight_gateway.analyze(transactions)
        except FinFlowError as e:
            logger.error(f"Analysis failed: {e}")
            report = FALLBACK_INSIGHT.model_copy(deep=True)
        finally:
            set_action_context(None)
            self._analysis_lock.release()

        self.last_analysis = report
        return report

    def analyze_async(self) -> concurrent.futures.Future:
        """Run analyze() on a worker thread so other actions can interleave."""
        return self._get_executor().submit(self.analyze)

    def import_file(self, path: Path) -> List[Transaction]:
        """Import a statement file; returns [] if nothing could be imported."""
        if self.extraction_gateway is None:
            logger.error("No Gemini API key configured, cannot import files")
            return []
        return self.importer.import_file(path)

    def import_file_async(self, path: Path) -> concurrent.futures.Future:
        return self._get_executor().submit(self.import_file, path)

    def close(self) -> None:
        if self._executor is not None:
            self._executor.shutdown(wait=True)
            self._executor = None

    def _get_executor(self) -> concurrent.futures.ThreadPoolExecutor:
        if self._executor is None:
            self._executor = concurrent.futures.ThreadPoolExecutor(max_workers=2)
        return self._executor

    def _on_store_changed(self, store: TransactionStore) -> None:
        self._totals = None
