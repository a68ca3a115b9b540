"""
Report and stock summaries.

Computes:
- Item totals and display strings for a single report
- Item counts across reports, overall and per status
- Report filtering by campus and import date
- Tables for the dashboard and PDF export
"""

from collections.abc import Iterable, Mapping
import pandas as pd

from .ledger import StockLedger
from .reports import Report, ReportStatus

REPORT_COLUMNS = ["Requester", "Campus", "Import", "Export", "Total"]
STOCK_COLUMNS = ["Item", "Quantity in Stock", "Last Date In", "Last Date Out"]


def total_items(items: Mapping[str, int] | list) -> int:
    """Total quantity on a report; legacy item lists count one per entry."""
    if not items:
        return 0
    if isinstance(items, list):
        return len(items)
    return sum(int(q) for q in items.values() if isinstance(q, (int, float)))


def format_items(items: Mapping[str, int] | list) -> str:
    """'A4 Paper (2), Mouse (1)' or 'N/A' when there is nothing to show."""
    if isinstance(items, list):
        return ", ".join(items) if items else "N/A"
    entries = [(item, q) for item, q in (items or {}).items() if q > 0]
    if not entries:
        return "N/A"
    return ", ".join(f"{item} ({q})" for item, q in entries)


def _items_frame(reports: Iterable[Report]) -> pd.DataFrame:
    """Long format: one row per (report, item)."""
    rows = [
        {"report_id": r.id, "status": r.status.value, "item": item, "quantity": q}
        for r in reports
        for item, q in r.items.items()
    ]
    return pd.DataFrame(rows, columns=["report_id", "status", "item", "quantity"])


def item_counts(reports: Iterable[Report]) -> dict[str, int]:
    """Summed quantity per item, in first-seen order."""
    df = _items_frame(reports)
    if df.empty:
        return {}
    counts = df.groupby("item", sort=False)["quantity"].sum()
    return {item: int(q) for item, q in counts.items()}


def split_by_status(reports: Iterable[Report]) -> dict[ReportStatus, list[Report]]:
    groups: dict[ReportStatus, list[Report]] = {
        ReportStatus.DONE: [],
        ReportStatus.PROCESS: [],
    }
    for report in reports:
        groups[report.status].append(report)
    return groups


def filter_reports(
    reports: Iterable[Report],
    campus: str | None = None,
    date: str | None = None,
    month: int | None = None,
    year: int | None = None,
) -> list[Report]:
    """
    Filter by campus and import date.

    Reports without an import date only pass when no date filter is set.
    """
    result = []
    for report in reports:
        if campus and report.campus != campus:
            continue

        if not report.import_date:
            if date or month or year:
                continue
            result.append(report)
            continue

        parts = report.import_date.split("-")
        try:
            report_year, report_month = int(parts[0]), int(parts[1])
        except (IndexError, ValueError):
            report_year = report_month = None

        if year and report_year != int(year):
            continue
        if month and report_month != int(month):
            continue
        if date and report.import_date != date:
            continue
        result.append(report)
    return result


def available_years(reports: Iterable[Report]) -> list[str]:
    """Distinct import-date years, newest first."""
    years = {r.import_date.split("-")[0] for r in reports if r.import_date}
    return sorted((y for y in years if y.isdigit()), key=int, reverse=True)


def reports_frame(reports: Iterable[Report]) -> pd.DataFrame:
    rows = [
        [r.requester_name, r.campus, r.import_date, r.export_date, r.total_items]
        for r in reports
    ]
    return pd.DataFrame(rows, columns=REPORT_COLUMNS)


def stock_frame(ledger: StockLedger) -> pd.DataFrame:
    """Stock table sorted by item name, 'N/A' for dates never set."""
    rows = [
        [item, entry.quantity, entry.last_in_date or "N/A", entry.last_out_date or "N/A"]
        for item, entry in ledger.snapshot().items()
    ]
    df = pd.DataFrame(rows, columns=STOCK_COLUMNS)
    return df.sort_values("Item", key=lambda s: s.str.lower()).reset_index(drop=True)
