"""
PDF document loading and page rasterisation.
"""

import logging
import re
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional, Tuple

import fitz  # PyMuPDF
from PyQt5.QtGui import QImage, QPixmap

logger = logging.getLogger(__name__)

# D:YYYYMMDDHHmmSS followed by Z, +HH'mm', -HH'mm' or nothing
_PDF_DATE_RE = re.compile(
    r"^(?:D:)?(\d{14})(?:(Z)|([+-])(\d{2})'?(\d{2})?'?)?"
)


@dataclass(frozen=True)
class DocumentMetadata:
    """Descriptive metadata of a loaded document."""

    format: str = ""
    mod_date: str = ""
    author: str = ""


def format_pdf_date(date_str: str) -> str:
    """
    Format a PDF date string as a local medium date-time.

    Args:
        date_str: Date in PDF notation, e.g. ``D:20240131174500+01'00'``

    Returns:
        Formatted date such as ``Jan 31, 2024, 4:45 PM``, or the input
        unchanged when it cannot be parsed
    """
    if not date_str:
        return ""

    match = _PDF_DATE_RE.match(date_str.strip())
    if not match:
        return date_str

    stamp, utc, sign, tz_hours, tz_minutes = match.groups()
    try:
        dt = datetime.strptime(stamp, "%Y%m%d%H%M%S")
    except ValueError:
        return date_str

    if utc:
        dt = dt.replace(tzinfo=timezone.utc)
    elif sign:
        offset = timedelta(hours=int(tz_hours), minutes=int(tz_minutes or 0))
        dt = dt.replace(tzinfo=timezone(offset if sign == "+" else -offset))

    if dt.tzinfo is not None:
        dt = dt.astimezone()

    hour = dt.hour % 12 or 12
    return f"{dt:%b} {dt.day}, {dt.year}, {hour}:{dt:%M} {dt:%p}"


class PDFDocumentReader:
    """Loads a PDF and renders its pages to pixmaps."""

    def __init__(self):
        self.doc: Optional[fitz.Document] = None
        self.total_pages: int = 0
        self.current_file_path: Optional[str] = None

    def load_pdf(self, file_path: str) -> Tuple[bool, int]:
        """
        Load a PDF document.

        Args:
            file_path: Path to the PDF file

        Returns:
            Tuple of (success flag, number of pages)
        """
        try:
            # Close existing document if any
            if self.doc:
                self.close_document()

            self.doc = fitz.open(file_path)
            self.total_pages = self.doc.page_count
            self.current_file_path = file_path

            return True, self.total_pages

        except Exception as e:
            logger.error("Error loading PDF %s: %s", file_path, e)
            self.doc = None
            self.total_pages = 0
            return False, 0

    def close_document(self) -> None:
        """Close the current PDF document and clear all state."""
        if self.doc:
            self.doc.close()
            self.doc = None

        self.total_pages = 0
        self.current_file_path = None

    def render_page(self, page_index: int, scale: float) -> Optional[QPixmap]:
        """
        Render a single page of the PDF to a pixmap.

        Args:
            page_index: 0-based index of the page to render
            scale: Pixels per PDF point

        Returns:
            The rendered page, or None if the page cannot be rendered
        """
        if not self.doc or not (0 <= page_index < self.total_pages):
            return None

        try:
            page = self.doc.load_page(page_index)
            pix = page.get_pixmap(matrix=fitz.Matrix(scale, scale), alpha=False)
            img = QImage(
                pix.samples, pix.width, pix.height, pix.stride, QImage.Format_RGB888
            )
            # QImage does not own pix.samples; copy before pix is released
            return QPixmap.fromImage(img.copy())

        except Exception as e:
            logger.error("Error rendering page %d: %s", page_index + 1, e)
            return None

    def get_metadata(self) -> DocumentMetadata:
        """
        Get format, modification date and author of the document.

        Returns:
            Metadata with empty strings for missing values
        """
        if not self.doc:
            return DocumentMetadata()

        meta = self.doc.metadata or {}
        return DocumentMetadata(
            format=meta.get("format") or "",
            mod_date=format_pdf_date(meta.get("modDate") or ""),
            author=meta.get("author") or "",
        )

    def is_loaded(self) -> bool:
        """Check if a document is currently loaded."""
        return self.doc is not None

    def get_file_path(self) -> Optional[str]:
        """Get the path of the currently loaded file."""
        return self.current_file_path

    def get_page_count(self) -> int:
        """Get the total number of pages."""
        return self.total_pages
