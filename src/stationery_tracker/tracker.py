"""
The tracker: report store, stock ledger and their persistence as one unit.

Create one per storage location at startup and pass it to whatever needs it.
All state changes go through the methods below, each of which either
commits fully (ledger, reports, storage) or raises without touching anything.
"""

from datetime import date
from pathlib import Path
from typing import Callable, Mapping
import logging
import threading

from . import settings
from .clients.device_storage import (
    KeyValueStorage,
    read_or_default,
    remove_quietly,
    write_quietly,
)
from .clients.pdf_documents import PdfTextExtractor, ReportRenderer
from .core.extraction import DocumentExtractor
from .core.normalizer import migrate_reports, migrate_stock
from .core.reconciliation import ReconciliationEngine
from .core.reports import Report, ReportData, ReportStore
from .importer import ImportOutcome, import_from_document

logger = logging.getLogger(__name__)


def _stock_quantity(value) -> int:
    """Stock form input to a quantity; blanks, junk and negatives become 0."""
    try:
        quantity = int(value)
    except (TypeError, ValueError):
        return 0
    return max(quantity, 0)


class StationeryTracker:
    """
    Owns the ledger and report store for one storage location.

    Sufficiency checks read the ledger and then mutate it, so every operation
    holds a single lock for its whole check-then-commit sequence.
    """

    def __init__(
        self,
        storage: KeyValueStorage,
        catalog: list[str] | None = None,
        campuses: list[str] | None = None,
        clock: Callable[[], date] = date.today,
    ):
        self.storage = storage
        self.catalog = list(catalog or settings.STATIONARY_ITEMS)
        self.campuses = list(campuses or settings.CAMPUS_OPTIONS)
        self.clock = clock
        self._lock = threading.RLock()

        self.ledger = migrate_stock(
            read_or_default(storage, settings.STOCK_KEY), self.catalog, self.today()
        )
        self.reports = ReportStore(
            migrate_reports(read_or_default(storage, settings.REPORTS_KEY))
        )
        self.engine = ReconciliationEngine(self.ledger)
        # Last reports/stock pair known to be in storage together
        self._saved_reports = self.reports.to_list()

        selected = read_or_default(storage, settings.SELECTED_REPORT_KEY)
        self.selected_report_id = selected if self.reports.find(selected) else None

    def today(self) -> str:
        return self.clock().isoformat()

    # --- Persistence ---

    def _persist(self) -> None:
        """
        Save reports, then stock. Failures are logged and in-memory state is kept.

        If stock can't be saved after the reports were, the previously saved
        reports are written back so storage never pairs new reports with old
        stock.
        """
        reports = self.reports.to_list()
        if not write_quietly(self.storage, settings.REPORTS_KEY, reports):
            return
        if write_quietly(self.storage, settings.STOCK_KEY, self.ledger.to_dict()):
            self._saved_reports = reports
            return
        logger.error("Stock not saved; restoring the previously saved reports")
        write_quietly(self.storage, settings.REPORTS_KEY, self._saved_reports)

    def _persist_selection(self) -> None:
        if self.selected_report_id:
            write_quietly(self.storage, settings.SELECTED_REPORT_KEY, self.selected_report_id)
        else:
            remove_quietly(self.storage, settings.SELECTED_REPORT_KEY)

    def flush(self) -> None:
        """Write everything out; call on shutdown."""
        with self._lock:
            self._persist()
            self._persist_selection()

    # --- Reports ---

    def select_report(self, report_id: str | None) -> Report | None:
        with self._lock:
            report = self.reports.find(report_id)
            self.selected_report_id = report.id if report else None
            self._persist_selection()
            return report

    def _clear_selection(self) -> None:
        if self.selected_report_id is not None:
            self.selected_report_id = None
            self._persist_selection()

    def create_report(self, data: ReportData) -> Report:
        """Add a report; a Done report deducts its items from stock."""
        with self._lock:
            plan = self.engine.plan_create(data)
            plan.apply(self.ledger, self.reports, self.today())
            self._persist()
            self._clear_selection()
        logger.info("Created report %s (%s)", plan.report.id, plan.report.status.value)
        return plan.report

    def update_report(self, report_id: str, data: ReportData) -> Report | None:
        """Replace a report's fields, moving stock for any status/quantity change."""
        with self._lock:
            original = self.reports.find(report_id)
            if original is None:
                logger.warning("Update ignored: no report with id %s", report_id)
                return None
            plan = self.engine.plan_update(original, data)
            plan.apply(self.ledger, self.reports, self.today())
            self._persist()
            self._clear_selection()
        logger.info("Updated report %s", report_id)
        return plan.report

    def delete_report(self, report_id: str) -> Report | None:
        """Remove a report; a Done report returns its items to stock."""
        with self._lock:
            report = self.reports.find(report_id)
            if report is None:
                return None
            plan = self.engine.plan_delete(report)
            plan.apply(self.ledger, self.reports, self.today())
            self._persist()
            self._clear_selection()
        logger.info("Deleted report %s", report_id)
        return report

    # --- Stock ---

    def edit_stock_bulk(self, quantities: Mapping[str, object]) -> None:
        """Set absolute quantities for the given items."""
        with self._lock:
            today = self.today()
            for item, value in quantities.items():
                self.ledger.set_absolute(item, _stock_quantity(value), today)
            self._persist()

    def clear_stock(self) -> None:
        with self._lock:
            self.ledger.clear_all()
            self._persist()
        logger.info("Stock cleared")

    # --- Import / export ---

    async def import_from_document(
        self,
        document: bytes,
        text_extractor: PdfTextExtractor | None = None,
        extractor: DocumentExtractor | None = None,
        api_key: str | None = None,
    ) -> ImportOutcome:
        """
        Replace all reports and stock with the contents of a PDF.

        Nothing changes unless the outcome carries a payload (including the
        demo payload when the extraction service isn't configured).
        """
        outcome = await import_from_document(
            document,
            catalog=self.catalog,
            campuses=self.campuses,
            text_extractor=text_extractor,
            extractor=extractor,
            api_key=api_key,
        )
        if outcome.payload is None:
            return outcome

        with self._lock:
            self.reports.replace_all(outcome.payload.reports)
            self.ledger.replace(outcome.payload.ledger.snapshot())
            self._persist()
            self._clear_selection()
        return outcome

    def export_full_report(self, renderer: ReportRenderer | None = None) -> Path:
        renderer = renderer or ReportRenderer()
        with self._lock:
            return renderer.render_full_report(self.reports.list_reports(), self.ledger)

    def export_stock_report(self, renderer: ReportRenderer | None = None) -> Path:
        renderer = renderer or ReportRenderer()
        with self._lock:
            return renderer.render_stock_report(self.ledger)
