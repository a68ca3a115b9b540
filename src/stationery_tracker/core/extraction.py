"""
AI-assisted document extraction using structured outputs.

Uses Pydantic models so the LLM response is schema-checked before anything
in the tracker sees it. Values are still loosely typed (free-text dates,
item names that may not match the catalog); the normalizer tidies them up.
"""

import logging

import openai
from openai import AsyncOpenAI
from pydantic import BaseModel, Field
from pydantic import ValidationError as SchemaValidationError

from .. import settings
from ..errors import ImportParseError, ImportServiceUnavailable

logger = logging.getLogger(__name__)


class ExtractedItem(BaseModel):
    """One requested item on a report."""

    name: str = Field(description="The name of the item, normalized to the catalog")
    quantity: int = Field(description="The quantity of the item")


class ExtractedReport(BaseModel):
    """A requisition report found in the document."""

    requester_name: str = Field(description="Name of the person requesting items")
    campus: str = Field(description="The campus location, one of the valid campuses")
    import_date: str = Field(description="Import date in YYYY-MM-DD format")
    export_date: str = Field(description="Export date in YYYY-MM-DD format")
    items: list[ExtractedItem] = Field(description="List of items with their quantities")
    status: str = Field(description="Should be either 'Process' or 'Done'")


class ExtractedStock(BaseModel):
    """A row of the stock inventory list."""

    name: str = Field(description="The name of the stock item")
    quantity: int = Field(description="The quantity in stock")
    last_in_date: str | None = Field(
        default=None,
        description="The last date the item was stocked in YYYY-MM-DD format, or 'N/A'",
    )


class ExtractedInventory(BaseModel):
    """Complete payload extracted from a stationery document."""

    reports: list[ExtractedReport] = Field(description="Every report in the document")
    stock: list[ExtractedStock] = Field(description="The complete stock inventory")


class DocumentExtractor:
    """
    Turns raw document text into an ExtractedInventory using an LLM.

    What to trust vs verify:
    - TRUST: Locating reports and stock rows in free text
    - VERIFY: Item names, campuses and dates (normalized afterwards)
    - VERIFY: Anything that touches stock (the import replaces it wholesale)
    """

    SYSTEM_PROMPT = (
        "You extract stationery requisition reports and stock inventory from "
        "documents. Only report what the document states; never invent entries."
    )

    def __init__(
        self,
        api_key: str | None = None,
        model: str = settings.OPENAI_MODEL,
        client: AsyncOpenAI | None = None,
    ):
        if client is None:
            api_key = api_key or settings.OPENAI_API_KEY
            if not api_key:
                raise ImportServiceUnavailable()
            client = AsyncOpenAI(api_key=api_key)
        self.client = client
        self.model = model

    async def extract(
        self,
        document_text: str,
        catalog: list[str],
        campuses: list[str],
    ) -> ExtractedInventory:
        """
        Extract reports and stock from document_text.

        Raises ImportServiceUnavailable when the key is rejected and
        ImportParseError when the response doesn't fit the schema.
        """
        prompt = self._build_prompt(document_text, catalog, campuses)

        try:
            response = await self.client.chat.completions.parse(
                model=self.model,
                messages=[
                    {"role": "system", "content": self.SYSTEM_PROMPT},
                    {"role": "user", "content": prompt},
                ],
                response_format=ExtractedInventory,
            )
        except openai.AuthenticationError as exc:
            logger.warning("Extraction service rejected the API key: %s", exc)
            raise ImportServiceUnavailable() from exc
        except (
            openai.LengthFinishReasonError,
            openai.ContentFilterFinishReasonError,
            SchemaValidationError,
        ) as exc:
            raise ImportParseError(f"AI response could not be parsed: {exc}") from exc

        message = response.choices[0].message
        if message.parsed is None:
            refusal = getattr(message, "refusal", None) or "empty response"
            raise ImportParseError(f"AI did not return a valid payload: {refusal}")

        return message.parsed

    def _build_prompt(self, document_text: str, catalog: list[str], campuses: list[str]) -> str:
        """Build the extraction prompt with the valid catalog and campus names."""
        return f"""Analyze the following text from a stationary management document and extract all reports and the complete stock inventory.

**Extraction Rules:**
1. **Reports:**
   * Identify every distinct report entry.
   * **requester_name**: The full name of the person requesting items.
   * **campus**: Normalize to one of these valid options: {", ".join(campuses)}.
   * **import_date** & **export_date**: Format strictly as YYYY-MM-DD.
   * **status**: 'Process' or 'Done'.
   * **items**: Every requested item with its quantity. Normalize item names to one of these valid options: {", ".join(catalog)}.

2. **Stock Inventory:**
   * **name**: Normalize to a valid option from the item list above.
   * **quantity**: The current quantity in stock.
   * **last_in_date**: The last stock-in date as YYYY-MM-DD, or 'N/A' if not present.

**Document Text to Analyze:**
---
{document_text}
---"""
