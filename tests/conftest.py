from datetime import date

import pytest

from stationery_tracker.clients.device_storage import JsonFileStorage
from stationery_tracker.core.ledger import StockItem, StockLedger
from stationery_tracker.core.reports import ReportData, ReportStatus
from stationery_tracker.tracker import StationeryTracker

CATALOG = ["A4 Paper", "Pen", "Mouse", "Keyboard", "Webcam", "Bk"]
CAMPUSES = ["Campus1", "Campus2"]
TODAY = date(2024, 3, 1)


def make_data(items, status=ReportStatus.PROCESS, **overrides) -> ReportData:
    values = dict(
        requester_name="Alice",
        campus="Campus1",
        import_date="2024-02-28",
        export_date="2024-02-29",
        items=items,
        status=status,
    )
    values.update(overrides)
    return ReportData(**values)


def done(items, **overrides) -> ReportData:
    return make_data(items, status=ReportStatus.DONE, **overrides)


@pytest.fixture
def storage(tmp_path):
    return JsonFileStorage(tmp_path / "data")


@pytest.fixture
def ledger():
    return StockLedger(CATALOG, {"A4 Paper": StockItem(quantity=10), "Pen": StockItem(quantity=5)})


@pytest.fixture
def tracker(storage):
    t = StationeryTracker(storage, catalog=CATALOG, campuses=CAMPUSES, clock=lambda: TODAY)
    t.edit_stock_bulk({"A4 Paper": 10, "Pen": 5, "Mouse": 3})
    return t
