"""
Required-field checks for report form data.

Follows the same check-list pattern as the rest of core: each check returns
a list of issues and the validator runs them all before deciding what to raise.
"""

from dataclasses import dataclass
from typing import Callable

from ..errors import EmptyReportError, MissingInformationError, ValidationError
from .reports import ReportData


@dataclass
class ValidationIssue:
    """A single problem found on a report."""

    field: str
    issue_type: str  # "missing", "empty" or a custom check's own type
    description: str = ""


REQUIRED_FIELDS = {
    "requester_name": "Requester Name",
    "campus": "Campus",
    "import_date": "Import Date",
    "export_date": "Export Date",
}


class ReportValidator:
    """
    Checks a proposed report before any stock logic runs.

    Missing header fields take precedence over an empty item list, so the
    user is asked for the header first.
    """

    def __init__(self):
        self._checks: list[Callable[[ReportData], list[ValidationIssue]]] = [
            self._check_required_fields,
            self._check_items,
        ]

    def add_check(
        self, check_fn: Callable[[ReportData], list[ValidationIssue]]
    ) -> "ReportValidator":
        """Add a custom check function. Returns self for chaining."""
        self._checks.append(check_fn)
        return self

    def _check_required_fields(self, data: ReportData) -> list[ValidationIssue]:
        issues = []
        for name, label in REQUIRED_FIELDS.items():
            value = getattr(data, name)
            if not value or not str(value).strip():
                issues.append(
                    ValidationIssue(
                        field=name, issue_type="missing", description=f"{label} is required"
                    )
                )
        return issues

    def _check_items(self, data: ReportData) -> list[ValidationIssue]:
        if data.total_items == 0:
            return [
                ValidationIssue(
                    field="items",
                    issue_type="empty",
                    description="At least one item is required",
                )
            ]
        return []

    def run(self, data: ReportData) -> list[ValidationIssue]:
        issues = []
        for check_fn in self._checks:
            issues.extend(check_fn(data))
        return issues

    def ensure_valid(self, data: ReportData) -> None:
        """
        Raise MissingInformationError or EmptyReportError for an invalid report.

        Issues from checks added with add_check() raise a plain ValidationError
        whose message joins their descriptions.
        """
        issues = self.run(data)
        missing = [i.field for i in issues if i.issue_type == "missing"]
        if missing:
            raise MissingInformationError(missing)
        if any(i.issue_type == "empty" for i in issues):
            raise EmptyReportError()
        if issues:
            raise ValidationError(" ".join(i.description or i.field for i in issues))
