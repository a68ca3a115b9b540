from stationery_tracker.core.ledger import StockItem
from stationery_tracker.core.normalizer import (
    BareQuantity,
    CurrentStockRecord,
    DatedQuantity,
    classify_stock_record,
    migrate_reports,
    migrate_stock,
    migrate_stock_record,
    normalize_import,
)
from stationery_tracker.core.reports import ReportStatus

from conftest import CATALOG

TODAY = "2024-03-01"


def _ids():
    counter = iter(range(100))
    return lambda: f"id-{next(counter)}"


# --- Legacy stock ---


def test_classify_recognises_each_saved_shape():
    assert classify_stock_record(7) == BareQuantity(7)
    assert classify_stock_record({"quantity": 3, "dateAdded": "2023-05-01"}) == DatedQuantity(
        3, "2023-05-01"
    )
    assert classify_stock_record(
        {"quantity": 4, "lastInDate": "2024-01-01"}
    ) == CurrentStockRecord(4, "2024-01-01", "", 0)
    assert classify_stock_record({"amount": 4}) is None
    assert classify_stock_record("7") is None
    assert classify_stock_record(True) is None


def test_bare_number_migrates_with_today_as_in_date():
    assert migrate_stock_record(7, TODAY) == StockItem(7, TODAY, "", 0)


def test_dated_quantity_keeps_its_date_or_uses_today():
    assert migrate_stock_record({"quantity": "5", "dateAdded": "2023-05-01"}, TODAY) == StockItem(
        5, "2023-05-01", "", 0
    )
    assert migrate_stock_record({"quantity": None, "dateAdded": ""}, TODAY) == StockItem(
        0, TODAY, "", 0
    )


def test_current_shape_fills_missing_fields():
    raw = {"quantity": 9, "lastInDate": "2024-01-01", "lastUpdateQuantity": "-2"}
    assert migrate_stock_record(raw, TODAY) == StockItem(9, "2024-01-01", "", -2)


def test_unrecognised_shape_starts_at_zero():
    assert migrate_stock_record(["junk"], TODAY) == StockItem()


def test_migrate_stock_covers_whole_catalog():
    ledger = migrate_stock({"Pen": 7, "Stapler": 3}, CATALOG, TODAY)
    assert ledger.catalog == CATALOG
    assert ledger.get("Pen") == StockItem(7, TODAY, "", 0)
    assert ledger.get("Mouse") == StockItem()
    assert "Stapler" not in ledger


def test_migrate_stock_with_bad_data_returns_empty_ledger():
    ledger = migrate_stock("not a mapping", CATALOG, TODAY)
    assert all(ledger.quantity(item) == 0 for item in CATALOG)


# --- Legacy reports ---


def test_item_name_lists_become_counted_maps():
    reports = migrate_reports(
        [
            {
                "id": "old",
                "requesterName": "Bob",
                "campus": "Campus1",
                "importDate": "2023-01-01",
                "exportDate": "2023-01-02",
                "items": ["Pen", "Pen", "Mouse"],
            }
        ]
    )
    assert reports[0].items == {"Pen": 2, "Mouse": 1}
    assert reports[0].status is ReportStatus.PROCESS
    assert reports[0].id == "old"


def test_malformed_items_and_status_are_defaulted():
    reports = migrate_reports(
        [{"id": "x", "items": "garbage", "status": "Finished"}, "not a report"]
    )
    assert len(reports) == 1
    assert reports[0].items == {}
    assert reports[0].status is ReportStatus.PROCESS


def test_migrate_reports_tolerates_non_list():
    assert migrate_reports({"reports": []}) == []
    assert migrate_reports(None) == []


# --- Document import ---


def _payload(**overrides):
    payload = {
        "reports": [
            {
                "requester_name": "Carol",
                "campus": "Campus2",
                "import_date": "15/01/2024",
                "export_date": "2024-01-16",
                "items": [
                    {"name": "a4  paper", "quantity": 2},
                    {"name": "Mouse", "quantity": 0},
                ],
                "status": "Done",
            },
            {
                "requester_name": "Dan",
                "campus": "Campus1",
                "import_date": "2024-01-17",
                "export_date": "",
                "items": [{"name": "Pen", "quantity": 3}],
                "status": "pending",
            },
            {
                "requester_name": "",
                "campus": "Campus1",
                "import_date": "2024-01-18",
                "export_date": "2024-01-18",
                "items": [],
                "status": "Done",
            },
        ],
        "stock": [
            {"name": "A4 Paper", "quantity": 20, "last_in_date": "2024-01-10"},
            {"name": "pen", "quantity": 8, "last_in_date": "N/A"},
            {"name": "Mouse", "quantity": 2},
            {"name": "Laser Pointer", "quantity": 1},
        ],
    }
    payload.update(overrides)
    return payload


def test_import_reports_are_normalized():
    reports, _ = normalize_import(_payload(), CATALOG, id_factory=_ids())

    assert [r.requester_name for r in reports] == ["Carol", "Dan"]
    carol, dan = reports
    assert carol.id == "id-0"
    assert carol.import_date == "2024-01-15"
    assert carol.items == {"A4 Paper": 2}
    assert carol.status is ReportStatus.DONE
    assert dan.status is ReportStatus.PROCESS
    assert dan.export_date == ""


def test_import_stock_replaces_whole_ledger():
    _, ledger = normalize_import(_payload(), CATALOG, id_factory=_ids())

    assert ledger.get("A4 Paper") == StockItem(20, "2024-01-10", "", 0)
    assert ledger.get("Pen") == StockItem(8, "", "", 0)
    assert ledger.get("Mouse") == StockItem(2, "", "", 0)
    assert ledger.get("Keyboard") == StockItem()
    assert "Laser Pointer" not in ledger


def test_import_with_nothing_usable():
    reports, ledger = normalize_import({"reports": [], "stock": []}, CATALOG)
    assert reports == []
    assert all(ledger.quantity(item) == 0 for item in CATALOG)
