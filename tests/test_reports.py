from stationery_tracker.core.reports import Report, ReportData, ReportStatus, ReportStore

from conftest import done, make_data


def test_items_drop_zero_and_negative_quantities():
    data = make_data({"Pen": 2, "Mouse": 0, "Bk": -1, "Webcam": "3"})
    assert data.items == {"Pen": 2, "Webcam": 3}
    assert data.total_items == 5


def test_status_defaults_to_process_unless_exactly_done():
    assert ReportData(status="Done").status is ReportStatus.DONE
    assert ReportData(status="done").status is ReportStatus.PROCESS
    assert ReportData(status=None).status is ReportStatus.PROCESS


def test_create_prepends_newest_first():
    store = ReportStore()
    first = store.create(make_data({"Pen": 1}, requester_name="First"))
    second = store.create(make_data({"Pen": 1}, requester_name="Second"))
    assert [r.id for r in store.list_reports()] == [second, first]
    assert first != second


def test_update_replaces_in_place():
    store = ReportStore()
    a = store.create(make_data({"Pen": 1}, requester_name="A"))
    b = store.create(make_data({"Pen": 1}, requester_name="B"))
    store.update(a, done({"Mouse": 2}, requester_name="A2"))

    assert [r.id for r in store.list_reports()] == [b, a]
    updated = store.find(a)
    assert updated.requester_name == "A2"
    assert updated.items == {"Mouse": 2}
    assert updated.status is ReportStatus.DONE


def test_unknown_ids_are_no_ops():
    store = ReportStore()
    store.create(make_data({"Pen": 1}))
    before = store.to_list()

    store.update("missing", make_data({"Bk": 4}))
    store.delete("missing")

    assert store.find("missing") is None
    assert store.to_list() == before


def test_delete_removes_by_id():
    store = ReportStore()
    a = store.create(make_data({"Pen": 1}))
    store.delete(a)
    assert len(store) == 0


def test_report_dict_round_trip_uses_saved_key_names():
    report = Report.from_data("r1", done({"Pen": 2}))
    raw = report.to_dict()
    assert raw["requesterName"] == "Alice"
    assert raw["status"] == "Done"
    assert Report.from_dict(raw) == report
