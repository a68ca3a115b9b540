"""
PDF import pipeline.

One linear coroutine: check the extraction service is configured, pull the
text out of the PDF, ask the model for structured reports and stock, then
normalize. Any failure ends the pipeline with a typed error in the outcome;
nothing is committed here, so the caller's state can't be half-replaced.
"""

from dataclasses import dataclass
from typing import Iterable
import asyncio
import logging

import openai

from . import settings
from .clients.pdf_documents import PdfTextExtractor
from .core.extraction import DocumentExtractor
from .core.ledger import StockItem, StockLedger
from .core.normalizer import normalize_import
from .core.reports import Report, ReportStatus
from .errors import DocumentImportError, ImportServiceUnavailable

logger = logging.getLogger(__name__)


@dataclass
class ImportPayload:
    """A complete replacement for the report store and stock ledger."""

    reports: list[Report]
    ledger: StockLedger
    demo: bool = False


@dataclass
class ImportOutcome:
    """
    Result of an import: a payload, an error, or both.

    Demo fallback carries both the demo payload and the
    ImportServiceUnavailable explaining why.
    """

    payload: ImportPayload | None = None
    error: DocumentImportError | None = None

    @property
    def ok(self) -> bool:
        return self.payload is not None

    @property
    def is_demo(self) -> bool:
        return self.payload is not None and self.payload.demo


def demo_payload(catalog: Iterable[str]) -> ImportPayload:
    """Fixed sample data loaded when the extraction service isn't configured."""
    reports = [
        Report(
            id="demo-1",
            requester_name="John Doe (Demo)",
            campus="Campus1",
            import_date="2024-01-15",
            export_date="2024-01-16",
            items={"A4 Paper": 2, "Mouse": 1},
            status=ReportStatus.DONE,
        ),
        Report(
            id="demo-2",
            requester_name="Jane Smith (Demo)",
            campus="Campus2",
            import_date="2024-01-17",
            export_date="2024-01-18",
            items={"Keyboard": 1, "Webcam": 1, "Bk": 5},
            status=ReportStatus.PROCESS,
        ),
    ]
    ledger = StockLedger(
        catalog,
        {
            "A4 Paper": StockItem(18, "2024-01-10", "2024-01-15", -2),
            "Mouse": StockItem(9, "2024-01-10", "2024-01-15", -1),
            "Keyboard": StockItem(14, "2024-01-10"),
            "Webcam": StockItem(5, "2024-01-10"),
            "Bk": StockItem(20, "2024-01-10"),
        },
    )
    return ImportPayload(reports=reports, ledger=ledger, demo=True)


async def import_from_document(
    document: bytes,
    catalog: list[str] | None = None,
    campuses: list[str] | None = None,
    text_extractor: PdfTextExtractor | None = None,
    extractor: DocumentExtractor | None = None,
    api_key: str | None = None,
) -> ImportOutcome:
    """
    Run the whole import for one PDF.

    Args:
        document: Raw PDF bytes
        extractor: Structured extractor; built from api_key (or the configured
            key) when omitted
    """
    catalog = list(catalog or settings.STATIONARY_ITEMS)
    campuses = list(campuses or settings.CAMPUS_OPTIONS)
    text_extractor = text_extractor or PdfTextExtractor()

    try:
        if extractor is None:
            extractor = DocumentExtractor(api_key=api_key)

        text = await asyncio.to_thread(text_extractor.extract_text, document)
        extracted = await extractor.extract(text, catalog, campuses)
        reports, ledger = normalize_import(extracted, catalog)

    except ImportServiceUnavailable as exc:
        logger.warning("Extraction service unavailable; loading demo data instead")
        return ImportOutcome(payload=demo_payload(catalog), error=exc)
    except DocumentImportError as exc:
        logger.error("Failed to import PDF: %s", exc.message)
        return ImportOutcome(error=exc)
    except openai.OpenAIError as exc:
        logger.error("Extraction service error: %s", exc)
        return ImportOutcome(
            error=DocumentImportError(f"An unexpected error occurred: {exc}")
        )

    logger.info("Imported %d report(s) from PDF", len(reports))
    return ImportOutcome(payload=ImportPayload(reports=reports, ledger=ledger))
