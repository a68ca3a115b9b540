"""
Error taxonomy for the tracker.

Every error carries a short title and a user-facing message so the UI can
show it directly. None of them is fatal: whoever raises one has left the
report store and stock ledger exactly as they were.
"""


class StationeryError(Exception):
    """Base class for all recoverable tracker errors."""

    title = "Error"

    def __init__(self, message: str, title: str | None = None):
        super().__init__(message)
        self.message = message
        if title is not None:
            self.title = title


# --- Report validation ---


class ValidationError(StationeryError):
    """The proposed report is incomplete; the form stays editable."""

    title = "Invalid Report"


class MissingInformationError(ValidationError):
    title = "Missing Information"

    def __init__(self, missing_fields: list[str]):
        self.missing_fields = missing_fields
        super().__init__(
            "Please fill all required fields: Requester Name, Campus, "
            "Import Date, and Export Date."
        )


class EmptyReportError(ValidationError):
    title = "Empty Report"

    def __init__(self):
        super().__init__("A report must contain at least one stationary item.")


class InsufficientStockError(StationeryError):
    """
    Stock cannot cover a Done transition.

    Carries every deficient item, not only the first one found.
    """

    title = "Insufficient Stock"

    def __init__(self, deficiencies: list, action: str = "save"):
        self.deficiencies = list(deficiencies)
        self.action = action
        listing = ", ".join(
            f"{d.item} (requested {d.requested}, available {d.available})"
            for d in self.deficiencies
        )
        super().__init__(
            f"Cannot {action} report. Insufficient stock for: {listing}."
        )


# --- Document import ---


class DocumentImportError(StationeryError):
    """Import aborted; reports and stock are unchanged."""

    title = "Error Importing PDF"


class ImportTextError(DocumentImportError):
    title = "Cannot Read PDF"

    def __init__(self, message: str | None = None):
        super().__init__(
            message
            or "No text could be extracted from the provided PDF. "
            "It may be an image, empty, or corrupted."
        )


class ImportServiceUnavailable(DocumentImportError):
    """No usable credential for the extraction service. Triggers demo data."""

    title = "Demo Mode Activated"

    def __init__(self, message: str | None = None):
        super().__init__(
            message
            or "The AI document processing service is not configured. "
            "To demonstrate functionality, sample data has been loaded instead."
        )


class ImportParseError(DocumentImportError):
    title = "Error Importing PDF"


# --- Export ---


class NothingToExportError(StationeryError):
    title = "No Data"

    def __init__(self, message: str = "There is no report or stock data to export."):
        super().__init__(message)


# --- Storage ---


class StorageError(StationeryError):
    """A key-value read or write failed."""

    title = "Storage Error"


# --- Auth ---


class AuthError(StationeryError):
    title = "User Management"


class DuplicateUserError(AuthError):
    def __init__(self, username: str):
        super().__init__(f'User with username "{username}" already exists.')


class ProtectedUserError(AuthError):
    def __init__(self):
        super().__init__("The primary admin account cannot be deleted.")


class SelfDeletionError(AuthError):
    def __init__(self):
        super().__init__("Cannot delete yourself.")
