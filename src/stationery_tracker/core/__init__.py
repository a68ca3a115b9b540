# Core inventory logic: ledger, reports and the rules that keep them consistent
# auth.py persists users through a KeyValueStorage and extraction.py calls OpenAI; the rest is pure logic

from .ledger import StockItem, StockLedger, Deficiency
from .reports import Report, ReportData, ReportStatus, ReportStore
from .validation import ReportValidator, ValidationIssue
from .reconciliation import ReconciliationEngine, ReconciliationPlan, Transition
from .parsers import DateParser, ItemNameNormalizer
from .extraction import DocumentExtractor, ExtractedInventory
from .normalizer import ImportNormalizer, normalize_import, migrate_reports, migrate_stock
from .analysis import (
    total_items,
    format_items,
    item_counts,
    split_by_status,
    filter_reports,
    available_years,
    reports_frame,
    stock_frame,
)

__all__ = [
    "StockItem",
    "StockLedger",
    "Deficiency",
    "Report",
    "ReportData",
    "ReportStatus",
    "ReportStore",
    "ReportValidator",
    "ValidationIssue",
    "ReconciliationEngine",
    "ReconciliationPlan",
    "Transition",
    "DateParser",
    "ItemNameNormalizer",
    "DocumentExtractor",
    "ExtractedInventory",
    "ImportNormalizer",
    "normalize_import",
    "migrate_reports",
    "migrate_stock",
    "total_items",
    "format_items",
    "item_counts",
    "split_by_status",
    "filter_reports",
    "available_years",
    "reports_frame",
    "stock_frame",
]
