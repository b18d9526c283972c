import os

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

import fitz
import pytest
from PyQt5.QtWidgets import QApplication

from pdfoverlay.core.annotations import OverlayAnnotation

UNIT_SQUARE = (0, 0, 1, 0, 1, 1, 0, 1)


@pytest.fixture(scope="session")
def qapp():
    app = QApplication.instance() or QApplication([])
    yield app


@pytest.fixture
def make_annotation():
    def _make(line=1, page="1", content="note", rect=UNIT_SQUARE, **kwargs):
        return OverlayAnnotation(page=page, line=line, content=content, rect=tuple(rect), **kwargs)
    return _make


@pytest.fixture
def pdf_path(tmp_path):
    """A two-page, letter-sized PDF."""
    path = tmp_path / "sample.pdf"
    doc = fitz.open()
    for i in range(2):
        page = doc.new_page(width=612, height=792)
        page.insert_text((72, 72), f"Page {i + 1}")
    doc.set_metadata({"author": "Jane Roe", "modDate": "D:20240131164500"})
    doc.save(str(path))
    doc.close()
    return str(path)
