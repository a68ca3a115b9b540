"""
Normalization of external and previously persisted data.

Two entry points:
- normalize_import(): turns an extracted document payload into a complete
  replacement report list and stock ledger.
- migrate_stock() / migrate_reports(): bring data saved by older versions of
  the app into the current shapes.

Stock records have gone through three saved shapes:
- a bare number
- {"quantity", "dateAdded"}
- {"quantity", "lastInDate", "lastOutDate", "lastUpdateQuantity"} (current)
Each shape is recognised explicitly and converted by its own function.
"""

from dataclasses import dataclass
from typing import Any, Callable, Iterable, Mapping
import logging

from .extraction import ExtractedInventory
from .ledger import StockItem, StockLedger
from .parsers import DateParser, ItemNameNormalizer
from .reports import Report, ReportStatus, new_report_id

logger = logging.getLogger(__name__)


# --- Legacy stock shapes ---


@dataclass(frozen=True)
class BareQuantity:
    """Oldest shape: the quantity on its own."""

    quantity: int


@dataclass(frozen=True)
class DatedQuantity:
    """Second shape: quantity plus the date it was added."""

    quantity: int
    date_added: str


@dataclass(frozen=True)
class CurrentStockRecord:
    quantity: int
    last_in_date: str
    last_out_date: str
    last_update_quantity: int


LegacyStockRecord = BareQuantity | DatedQuantity | CurrentStockRecord


def _to_int(value: Any) -> int:
    """Integer value of value, 0 for anything unusable."""
    if isinstance(value, bool):
        return 0
    try:
        return int(value)
    except (TypeError, ValueError):
        return 0


def classify_stock_record(raw: Any) -> LegacyStockRecord | None:
    """Identify which saved shape raw is in, or None if it is none of them."""
    if isinstance(raw, (int, float)) and not isinstance(raw, bool):
        return BareQuantity(quantity=int(raw))

    if not isinstance(raw, Mapping):
        return None

    if "dateAdded" in raw:
        return DatedQuantity(
            quantity=_to_int(raw.get("quantity")),
            date_added=raw.get("dateAdded") or "",
        )

    if "quantity" in raw and "lastInDate" in raw:
        return CurrentStockRecord(
            quantity=_to_int(raw.get("quantity")),
            last_in_date=raw.get("lastInDate") or "",
            last_out_date=raw.get("lastOutDate") or "",
            last_update_quantity=_to_int(raw.get("lastUpdateQuantity")),
        )

    return None


def _migrate_bare(record: BareQuantity, today: str) -> StockItem:
    return StockItem(quantity=record.quantity, last_in_date=today)


def _migrate_dated(record: DatedQuantity, today: str) -> StockItem:
    return StockItem(quantity=record.quantity, last_in_date=record.date_added or today)


def _migrate_current(record: CurrentStockRecord, today: str) -> StockItem:
    return StockItem(
        quantity=record.quantity,
        last_in_date=record.last_in_date,
        last_out_date=record.last_out_date,
        last_update_quantity=record.last_update_quantity,
    )


_STOCK_MIGRATIONS: dict[type, Callable[[Any, str], StockItem]] = {
    BareQuantity: _migrate_bare,
    DatedQuantity: _migrate_dated,
    CurrentStockRecord: _migrate_current,
}


def migrate_stock_record(raw: Any, today: str) -> StockItem:
    """Convert any saved stock value into a StockItem (zeroed if unrecognised)."""
    record = classify_stock_record(raw)
    if record is None:
        return StockItem()
    return _STOCK_MIGRATIONS[type(record)](record, today)


def migrate_stock(raw: Any, catalog: Iterable[str], today: str) -> StockLedger:
    """Build a full ledger from saved stock; catalog items not saved start at zero."""
    ledger = StockLedger(catalog)
    if not isinstance(raw, Mapping):
        if raw is not None:
            logger.error("Saved stock is not a mapping; starting with empty stock")
        return ledger

    ledger.replace(
        {
            item: migrate_stock_record(raw[item], today)
            for item in ledger.catalog
            if item in raw
        }
    )
    return ledger


def migrate_report(raw: Mapping) -> Report:
    """Bring a saved report up to date; item lists become counted maps."""
    items = raw.get("items")
    if isinstance(items, list):
        counted: dict[str, int] = {}
        for name in items:
            if isinstance(name, str):
                counted[name] = counted.get(name, 0) + 1
        items = counted
    elif not isinstance(items, Mapping):
        items = {}

    return Report.from_dict({**raw, "items": items})


def migrate_reports(raw: Any) -> list[Report]:
    if not isinstance(raw, list):
        if raw is not None:
            logger.error("Saved reports are not a list; starting with no reports")
        return []
    return [migrate_report(entry) for entry in raw if isinstance(entry, Mapping)]


# --- Document import ---


class ImportNormalizer:
    """
    Maps an extracted payload to a replacement report list and ledger.

    Reports missing a requester, campus or import date are dropped. Stock rows
    are matched to the catalog; unmatched rows are dropped and catalog items
    the document doesn't mention start at zero.
    """

    def __init__(
        self,
        catalog: Iterable[str],
        id_factory: Callable[[], str] = new_report_id,
    ):
        self.catalog = list(catalog)
        self.id_factory = id_factory
        self.date_parser = DateParser()
        self.item_normalizer = ItemNameNormalizer(self.catalog)

    def normalize(
        self, payload: ExtractedInventory | Mapping
    ) -> tuple[list[Report], StockLedger]:
        if not isinstance(payload, ExtractedInventory):
            payload = ExtractedInventory.model_validate(payload)

        reports = [
            report
            for report in (self._normalize_report(r) for r in payload.reports)
            if report is not None
        ]
        dropped = len(payload.reports) - len(reports)
        if dropped:
            logger.warning("Dropped %d imported report(s) missing required fields", dropped)

        return reports, self._normalize_stock(payload.stock)

    def _normalize_report(self, record) -> Report | None:
        requester = (record.requester_name or "").strip()
        campus = (record.campus or "").strip()
        import_date = self.date_parser.normalize(record.import_date)
        if not requester or not campus or not import_date:
            return None

        items: dict[str, int] = {}
        for entry in record.items:
            name = self.item_normalizer.normalize(entry.name)
            if name is None:
                continue
            if name not in self.catalog:
                logger.warning("Imported report references unknown item '%s'", name)
            items[name] = entry.quantity

        return Report(
            id=self.id_factory(),
            requester_name=requester,
            campus=campus,
            import_date=import_date,
            export_date=self.date_parser.normalize(record.export_date),
            items=items,
            status=ReportStatus.coerce(record.status),
        )

    def _normalize_stock(self, rows) -> StockLedger:
        ledger = StockLedger(self.catalog)
        entries = {}
        for row in rows:
            name = self.item_normalizer.resolve(row.name)
            if name is None:
                logger.warning("Skipping imported stock for unknown item '%s'", row.name)
                continue
            entries[name] = StockItem(
                quantity=row.quantity,
                last_in_date=self.date_parser.normalize(row.last_in_date),
            )
        ledger.replace(entries)
        return ledger


def normalize_import(
    payload: ExtractedInventory | Mapping,
    catalog: Iterable[str],
    id_factory: Callable[[], str] = new_report_id,
) -> tuple[list[Report], StockLedger]:
    """Convenience wrapper around ImportNormalizer."""
    return ImportNormalizer(catalog, id_factory=id_factory).normalize(payload)
