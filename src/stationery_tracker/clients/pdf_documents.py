"""
PDF adapters: text extraction for import, rendering for export.

Extraction uses PyMuPDF; rendering uses reportlab's platypus tables.
"""

from datetime import datetime
from pathlib import Path
from xml.sax.saxutils import escape
import logging

import fitz  # PyMuPDF
from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import getSampleStyleSheet
from reportlab.lib.units import mm
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

from .. import settings
from ..core.analysis import item_counts, reports_frame, split_by_status, stock_frame
from ..core.ledger import StockLedger
from ..core.reports import Report, ReportStatus
from ..errors import ImportTextError, NothingToExportError

logger = logging.getLogger(__name__)

HEADER_DARK = colors.Color(45 / 255, 55 / 255, 72 / 255)
HEADER_GREY = colors.Color(80 / 255, 80 / 255, 80 / 255)


class PdfTextExtractor:
    """Concatenates the text of every page in a PDF."""

    def extract_text(self, data: bytes) -> str:
        try:
            with fitz.open(stream=data, filetype="pdf") as doc:
                text = "\n\n".join(page.get_text() for page in doc)
        except RuntimeError as exc:
            # PyMuPDF's FileDataError / EmptyFileError both derive from RuntimeError
            logger.error("Could not open PDF: %s", exc)
            raise ImportTextError() from exc

        if not text.strip():
            raise ImportTextError()
        return text


def _summary_text(counts: dict[str, int]) -> str:
    return escape(" | ".join(f"{item}: {count}" for item, count in counts.items()))


def _table(df, header_color) -> Table:
    data = [list(df.columns)] + df.astype(str).values.tolist()
    table = Table(data, repeatRows=1, hAlign="LEFT")
    table.setStyle(
        TableStyle(
            [
                ("BACKGROUND", (0, 0), (-1, 0), header_color),
                ("TEXTCOLOR", (0, 0), (-1, 0), colors.white),
                ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
                ("GRID", (0, 0), (-1, -1), 0.5, colors.grey),
                ("FONTSIZE", (0, 0), (-1, -1), 9),
            ]
        )
    )
    return table


class ReportRenderer:
    """
    Writes printable PDFs of reports and stock into an output directory.

    Files are named with today's date, so a second export on the same day
    overwrites the first.
    """

    def __init__(self, output_dir: Path | str | None = None, now=datetime.now):
        self.output_dir = Path(output_dir or settings.OUTPUT_DIR)
        self.now = now
        self.styles = getSampleStyleSheet()

    def _build(self, filename: str, story: list) -> Path:
        self.output_dir.mkdir(parents=True, exist_ok=True)
        path = self.output_dir / filename
        doc = SimpleDocTemplate(
            str(path), pagesize=A4, leftMargin=14 * mm, rightMargin=14 * mm
        )
        doc.build(story)
        logger.info("PDF saved to %s", path)
        return path

    def render_full_report(self, reports: list[Report], ledger: StockLedger) -> Path:
        """All reports grouped by status with item summaries, then current stock."""
        if not reports and len(ledger) == 0:
            raise NothingToExportError()

        h1, h2, h3, body = (
            self.styles["Title"],
            self.styles["Heading2"],
            self.styles["Heading3"],
            self.styles["BodyText"],
        )
        story = [Paragraph("Stationary Report (All Time, All Campuses)", h1)]

        overall = item_counts(reports)
        if overall:
            story += [Paragraph("Overall Summary", h2), Paragraph(_summary_text(overall), body)]

        groups = split_by_status(reports)
        for status in (ReportStatus.DONE, ReportStatus.PROCESS):
            group = groups[status]
            if not group:
                continue
            story += [Spacer(1, 6 * mm), Paragraph(f"Status: {status.value}", h2)]
            counts = item_counts(group)
            if counts:
                story += [
                    Paragraph("Summary (Total Items)", h3),
                    Paragraph(_summary_text(counts), body),
                ]
            story.append(_table(reports_frame(group), HEADER_DARK))

        stock = stock_frame(ledger)[["Item", "Quantity in Stock", "Last Date In"]].rename(
            columns={"Quantity in Stock": "Quantity", "Last Date In": "Date Added"}
        )
        story += [
            Spacer(1, 8 * mm),
            Paragraph("Current Stock Inventory", h2),
            _table(stock, HEADER_GREY),
        ]

        return self._build(f"Stationary_Full_Report_{self.now().date().isoformat()}.pdf", story)

    def render_stock_report(self, ledger: StockLedger) -> Path:
        if len(ledger) == 0:
            raise NothingToExportError("No stock data to export.")

        now = self.now()
        story = [
            Paragraph("Stock Inventory Report", self.styles["Title"]),
            Paragraph(
                f"Generated on: {now.strftime('%B %d, %Y')} at {now.strftime('%I:%M %p')}",
                self.styles["BodyText"],
            ),
            Spacer(1, 6 * mm),
            _table(stock_frame(ledger), HEADER_DARK),
        ]
        return self._build(f"Stock_Inventory_Report_{now.date().isoformat()}.pdf", story)
