"""
Reconciliation engine keeping the stock ledger in step with report status.

Every report transition that changes what a Done report draws from stock
produces an equal-and-opposite ledger delta:

    create  Process        -> nothing
    create  Done           -> -qty for every item
    update  Process->Done  -> -new qty
    update  Done->Process  -> +original qty
    update  Done->Done     -> original - new, per item over both maps
    delete  Done           -> +qty for every item

Deltas are checked against the ledger before anything is touched. A rejected
transition leaves both ledger and store as they were.
"""

from dataclasses import dataclass, field
from enum import Enum
import logging

from ..errors import InsufficientStockError
from .ledger import Deficiency, StockLedger
from .reports import Report, ReportData, ReportStatus, ReportStore, new_report_id
from .validation import ReportValidator

logger = logging.getLogger(__name__)


class Transition(Enum):
    """Which report store operation a plan commits."""

    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"


@dataclass
class ReconciliationPlan:
    """Ledger deltas and the report mutation that go together."""

    transition: Transition
    report: Report
    deltas: dict[str, int] = field(default_factory=dict)

    @property
    def affects_stock(self) -> bool:
        return any(self.deltas.values())

    def apply(self, ledger: StockLedger, store: ReportStore, today: str) -> None:
        """Commit the plan. Neither step raises, so both always complete."""
        for item, delta in self.deltas.items():
            ledger.apply_delta(item, delta, today)

        if self.transition is Transition.CREATE:
            store.create(self.report.data(), report_id=self.report.id)
        elif self.transition is Transition.UPDATE:
            store.update(self.report.id, self.report.data())
        else:
            store.delete(self.report.id)


def deltas_for_create(data: ReportData) -> dict[str, int]:
    if data.status is ReportStatus.DONE:
        return {item: -qty for item, qty in data.items.items()}
    return {}


def deltas_for_update(original: ReportData, updated: ReportData) -> dict[str, int]:
    old_done = original.status is ReportStatus.DONE
    new_done = updated.status is ReportStatus.DONE

    if not old_done and new_done:
        return {item: -qty for item, qty in updated.items.items()}
    if old_done and not new_done:
        return {item: qty for item, qty in original.items.items()}
    if old_done and new_done:
        # Positive when the request shrank (stock returns), negative when it grew.
        deltas = {}
        for item in {**original.items, **updated.items}:
            delta = original.items.get(item, 0) - updated.items.get(item, 0)
            if delta != 0:
                deltas[item] = delta
        return deltas
    return {}


def deltas_for_delete(report: ReportData) -> dict[str, int]:
    if report.status is ReportStatus.DONE:
        return dict(report.items)
    return {}


def check_deltas(ledger: StockLedger, deltas: dict[str, int]) -> list[Deficiency]:
    """Sufficiency check over the deductions in deltas only."""
    demands = {item: -delta for item, delta in deltas.items() if delta < 0}
    return ledger.sufficiency_check(demands)


class ReconciliationEngine:
    """
    Plans report transitions against a ledger.

    Usage:
        engine = ReconciliationEngine(ledger)
        plan = engine.plan_create(data)      # raises on a failed gate
        plan.apply(ledger, store, today)

    Planning only reads the ledger. Callers apply the plan while holding
    whatever lock guards the ledger and store.
    """

    def __init__(self, ledger: StockLedger, validator: ReportValidator | None = None):
        self.ledger = ledger
        self.validator = validator or ReportValidator()

    def plan_create(self, data: ReportData, report_id: str | None = None) -> ReconciliationPlan:
        self.validator.ensure_valid(data)
        deltas = deltas_for_create(data)
        self._gate(deltas, action="add")
        report = Report.from_data(report_id or new_report_id(), data)
        return ReconciliationPlan(Transition.CREATE, report, deltas)

    def plan_update(self, original: Report, data: ReportData) -> ReconciliationPlan:
        self.validator.ensure_valid(data)
        deltas = deltas_for_update(original, data)
        self._gate(deltas, action="update")
        report = Report.from_data(original.id, data)
        return ReconciliationPlan(Transition.UPDATE, report, deltas)

    def plan_delete(self, report: Report) -> ReconciliationPlan:
        # Returning stock can never be insufficient.
        return ReconciliationPlan(Transition.DELETE, report, deltas_for_delete(report))

    def _gate(self, deltas: dict[str, int], action: str) -> None:
        deficiencies = check_deltas(self.ledger, deltas)
        if deficiencies:
            logger.info(
                "Rejected %s: insufficient stock for %s",
                action,
                ", ".join(d.item for d in deficiencies),
            )
            raise InsufficientStockError(deficiencies, action=action)
