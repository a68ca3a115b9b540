from datetime import datetime

import fitz
import pytest

from stationery_tracker.clients.pdf_documents import PdfTextExtractor, ReportRenderer
from stationery_tracker.core.ledger import StockItem, StockLedger
from stationery_tracker.core.reports import Report, ReportStatus
from stationery_tracker.errors import ImportTextError, NothingToExportError

from conftest import CATALOG

NOW = datetime(2024, 3, 1, 14, 30)


@pytest.fixture
def renderer(tmp_path):
    return ReportRenderer(output_dir=tmp_path, now=lambda: NOW)


@pytest.fixture
def stock():
    return StockLedger(CATALOG, {"Pen": StockItem(12, "2024-01-01"), "Mouse": StockItem(3)})


def test_full_report_renders_reports_and_stock(renderer, stock):
    reports = [
        Report(
            id="a",
            requester_name="Carol",
            campus="Campus1",
            import_date="2024-02-01",
            export_date="2024-02-02",
            items={"Pen": 2},
            status=ReportStatus.DONE,
        ),
        Report(
            id="b",
            requester_name="Dan",
            campus="Campus2",
            import_date="2024-02-03",
            items={"Mouse": 1},
        ),
    ]

    path = renderer.render_full_report(reports, stock)

    assert path.name == "Stationary_Full_Report_2024-03-01.pdf"
    text = PdfTextExtractor().extract_text(path.read_bytes())
    for expected in ("Status: Done", "Status: Process", "Carol", "Dan", "Pen: 2", "Current Stock Inventory"):
        assert expected in text


def test_stock_report(renderer, stock):
    path = renderer.render_stock_report(stock)

    assert path.name == "Stock_Inventory_Report_2024-03-01.pdf"
    text = PdfTextExtractor().extract_text(path.read_bytes())
    assert "Stock Inventory Report" in text
    assert "March 01, 2024" in text
    assert "Keyboard" in text


def test_nothing_to_export(renderer):
    empty = StockLedger([])
    with pytest.raises(NothingToExportError):
        renderer.render_full_report([], empty)
    with pytest.raises(NothingToExportError):
        renderer.render_stock_report(empty)


@pytest.mark.parametrize("data", [b"", b"this is not a pdf"])
def test_unreadable_pdf(data):
    with pytest.raises(ImportTextError):
        PdfTextExtractor().extract_text(data)


def test_pdf_without_text():
    doc = fitz.open()
    doc.new_page()
    blank = doc.tobytes()
    doc.close()

    with pytest.raises(ImportTextError):
        PdfTextExtractor().extract_text(blank)


def test_tracker_export(tracker, tmp_path):
    path = tracker.export_stock_report(ReportRenderer(output_dir=tmp_path))
    assert path.exists()
    assert path.parent == tmp_path
