from datetime import datetime, timedelta, timezone

from pdfoverlay.core.document import PDFDocumentReader, format_pdf_date


def test_format_pdf_date_without_offset():
    assert format_pdf_date("D:20240131164500") == "Jan 31, 2024, 4:45 PM"


def test_format_pdf_date_morning():
    assert format_pdf_date("D:20231205091500") == "Dec 5, 2023, 9:15 AM"


def test_format_pdf_date_with_offset_converts_to_local_time():
    expected = datetime(2024, 1, 31, 16, 45, tzinfo=timezone(timedelta(hours=1))).astimezone()
    formatted = format_pdf_date("D:20240131164500+01'00'")

    hour = expected.hour % 12 or 12
    assert formatted == f"{expected:%b} {expected.day}, {expected.year}, {hour}:{expected:%M} {expected:%p}"


def test_format_pdf_date_unparseable():
    assert format_pdf_date("yesterday") == "yesterday"
    assert format_pdf_date("D:20241399000000") == "D:20241399000000"
    assert format_pdf_date("") == ""


def test_load_and_render(qapp, pdf_path):
    reader = PDFDocumentReader()
    assert reader.load_pdf(pdf_path) == (True, 2)
    assert reader.is_loaded()

    pixmap = reader.render_page(0, 2.0)
    assert (pixmap.width(), pixmap.height()) == (1224, 1584)
    assert reader.render_page(5, 1.0) is None

    metadata = reader.get_metadata()
    assert metadata.author == "Jane Roe"
    assert metadata.mod_date == "Jan 31, 2024, 4:45 PM"

    reader.close_document()
    assert not reader.is_loaded()
    assert reader.get_page_count() == 0


def test_load_missing_file(tmp_path):
    reader = PDFDocumentReader()
    assert reader.load_pdf(str(tmp_path / "missing.pdf")) == (False, 0)
    assert reader.get_metadata().author == ""
