# Adapters for the outside world: device storage and PDF files

from .device_storage import JsonFileStorage, KeyValueStorage
from .pdf_documents import PdfTextExtractor, ReportRenderer

__all__ = ["JsonFileStorage", "KeyValueStorage", "PdfTextExtractor", "ReportRenderer"]
