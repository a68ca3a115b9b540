"""
Requisition reports and the in-memory report store.
"""

from dataclasses import dataclass, field, fields
from enum import Enum
from typing import Iterable, Iterator, Mapping
import uuid


class ReportStatus(str, Enum):
    """Done reports have been disbursed and count against stock."""

    PROCESS = "Process"
    DONE = "Done"

    @classmethod
    def coerce(cls, value) -> "ReportStatus":
        """Anything other than exactly Done is treated as Process."""
        if isinstance(value, cls):
            return value
        return cls.DONE if value == cls.DONE.value else cls.PROCESS


def clean_items(items: Mapping[str, object] | None) -> dict[str, int]:
    """Keep only positive integer quantities."""
    cleaned = {}
    for name, quantity in (items or {}).items():
        try:
            quantity = int(quantity)
        except (TypeError, ValueError):
            continue
        if quantity > 0:
            cleaned[name] = quantity
    return cleaned


@dataclass
class ReportData:
    """The editable fields of a report (everything except its id)."""

    requester_name: str = ""
    campus: str = ""
    import_date: str = ""
    export_date: str = ""
    items: dict[str, int] = field(default_factory=dict)
    status: ReportStatus = ReportStatus.PROCESS

    def __post_init__(self):
        self.items = clean_items(self.items)
        self.status = ReportStatus.coerce(self.status)

    @property
    def total_items(self) -> int:
        return sum(self.items.values())

    @property
    def is_done(self) -> bool:
        return self.status is ReportStatus.DONE

    def data(self) -> "ReportData":
        return ReportData(
            requester_name=self.requester_name,
            campus=self.campus,
            import_date=self.import_date,
            export_date=self.export_date,
            items=dict(self.items),
            status=self.status,
        )


@dataclass
class Report(ReportData):
    id: str = ""

    @classmethod
    def from_data(cls, report_id: str, data: ReportData) -> "Report":
        values = {f.name: getattr(data, f.name) for f in fields(ReportData)}
        values["items"] = dict(data.items)
        return cls(id=report_id, **values)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "requesterName": self.requester_name,
            "campus": self.campus,
            "importDate": self.import_date,
            "exportDate": self.export_date,
            "items": dict(self.items),
            "status": self.status.value,
        }

    @classmethod
    def from_dict(cls, raw: Mapping) -> "Report":
        return cls(
            id=str(raw.get("id") or new_report_id()),
            requester_name=raw.get("requesterName") or "",
            campus=raw.get("campus") or "",
            import_date=raw.get("importDate") or "",
            export_date=raw.get("exportDate") or "",
            items=raw.get("items") if isinstance(raw.get("items"), Mapping) else {},
            status=raw.get("status"),
        )


def new_report_id() -> str:
    return uuid.uuid4().hex


class ReportStore:
    """
    Ordered report collection, newest first.

    update/delete on an unknown id are no-ops and find returns None; nothing
    here raises.
    """

    def __init__(self, reports: Iterable[Report] = ()):
        self._reports: list[Report] = list(reports)

    def __len__(self) -> int:
        return len(self._reports)

    def __iter__(self) -> Iterator[Report]:
        return iter(list(self._reports))

    def create(self, data: ReportData, report_id: str | None = None) -> str:
        report = Report.from_data(report_id or new_report_id(), data)
        self._reports.insert(0, report)
        return report.id

    def update(self, report_id: str, data: ReportData) -> None:
        for index, report in enumerate(self._reports):
            if report.id == report_id:
                self._reports[index] = Report.from_data(report_id, data)
                return

    def delete(self, report_id: str) -> None:
        self._reports = [r for r in self._reports if r.id != report_id]

    def find(self, report_id: str | None) -> Report | None:
        for report in self._reports:
            if report.id == report_id:
                return report
        return None

    def list_reports(self) -> list[Report]:
        return list(self._reports)

    def replace_all(self, reports: Iterable[Report]) -> None:
        self._reports = list(reports)

    def to_list(self) -> list[dict]:
        return [report.to_dict() for report in self._reports]
