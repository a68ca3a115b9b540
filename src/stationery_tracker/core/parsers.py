"""
Parsers for the loosely formatted values that come back from document import.

These handle the messy reality of extracted text:
- Dates in whatever format the source document used
- Item names that differ from the catalog in case or spacing
"""

from datetime import datetime
from typing import Iterable


class DateParser:
    """
    Date parser that tries several common formats and returns ISO dates.

    To extend: Add new format patterns to DATE_FORMATS.
    """

    # Ordered by specificity
    DATE_FORMATS = [
        "%Y-%m-%d",      # ISO: 2024-07-25
        "%Y/%m/%d",      # ISO slash: 2024/07/25
        "%d/%m/%Y",      # EU slash: 25/08/2024
        "%m/%d/%Y",      # US: 05/27/2024
        "%d-%m-%Y",      # EU: 25-08-2024
        "%d %B %Y",      # 25 August 2024
        "%B %d, %Y",     # August 25, 2024
        "%d %b %Y",      # 25 Aug 2024
    ]

    # Values the extraction model uses for "no date"
    PLACEHOLDERS = {"n/a", "na", "none", "null", "-"}

    def __init__(self, custom_formats: list[str] | None = None):
        """
        Args:
            custom_formats: Additional date formats to try (prepended to defaults)
        """
        self.formats = (custom_formats or []) + self.DATE_FORMATS
        self._cache: dict[str, str | None] = {}

    def parse(self, date_str: str | None) -> str | None:
        """Parse a date string into YYYY-MM-DD, or None if it can't be read."""
        if date_str is None:
            return None

        date_str = str(date_str).strip()
        if not date_str or date_str.lower() in self.PLACEHOLDERS:
            return None

        if date_str in self._cache:
            return self._cache[date_str]

        result = None
        for fmt in self.formats:
            try:
                result = datetime.strptime(date_str, fmt).date().isoformat()
                break
            except ValueError:
                continue

        self._cache[date_str] = result
        return result

    def normalize(self, date_str: str | None) -> str:
        """ISO date when parseable, otherwise the stripped input ('' for placeholders)."""
        parsed = self.parse(date_str)
        if parsed:
            return parsed
        if date_str is None:
            return ""
        raw = str(date_str).strip()
        return "" if raw.lower() in self.PLACEHOLDERS else raw


class ItemNameNormalizer:
    """
    Resolves extracted item names to catalog names.

    Handles:
    - Case differences ("a4 paper" -> "A4 Paper")
    - Extra whitespace
    """

    def __init__(self, catalog: Iterable[str]):
        self._lookup = {self._key(name): name for name in catalog}

    @staticmethod
    def _key(name: str) -> str:
        return " ".join(str(name).split()).lower()

    def normalize(self, name: str | None) -> str | None:
        """Catalog name for name, the cleaned name if unknown, None if blank."""
        if name is None:
            return None
        cleaned = " ".join(str(name).split())
        if not cleaned:
            return None
        return self._lookup.get(cleaned.lower(), cleaned)

    def resolve(self, name: str | None) -> str | None:
        """Catalog name for name, or None when it isn't in the catalog."""
        if name is None:
            return None
        return self._lookup.get(self._key(name))
