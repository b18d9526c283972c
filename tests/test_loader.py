import json

from pdfoverlay.core.annotations import AnnotationSource, OverlayAnnotation


def write_json(path, data):
    path.write_text(json.dumps(data), encoding="utf-8")
    return str(path)


def test_loads_overlay_object(tmp_path):
    path = write_json(tmp_path / "overlay.json", {"overlay": [
        {"page": 1, "line": 1, "content": "Title", "rect": [0, 0, 1, 0, 1, 1, 0, 1]},
        {"page": "2", "line": 3, "content": "Body", "rect": [0, 0, 2, 0, 2, 2], "type": "para"},
    ]})

    annotations = AnnotationSource().load(path)

    assert [a.key for a in annotations] == ["annotation-1-1", "annotation-2-3"]
    assert annotations[0].page == "1"
    assert annotations[1].type == "para"
    assert annotations[1].rect == (0.0, 0.0, 2.0, 0.0, 2.0, 2.0)


def test_loads_bare_list_relative_to_base_dir(tmp_path):
    write_json(tmp_path / "bare.json", [{"page": 1, "line": 1, "content": "x", "rect": [0, 0, 1, 0, 1, 1]}])
    assert len(AnnotationSource(str(tmp_path)).load("bare.json")) == 1


def test_file_url(tmp_path):
    path = write_json(tmp_path / "url.json", [])
    assert AnnotationSource().resolve_path((tmp_path / "url.json").as_uri()) == path


def test_linked_data_and_metadata_are_kept(tmp_path):
    path = write_json(tmp_path / "ld.json", {"overlay": [{
        "page": 1, "line": 1, "content": "x", "rect": [0, 0, 1, 0, 1, 1],
        "@id": "urn:a", "@type": "Heading", "semanticProperties": {"level": 2},
        "metadata": {"source": "ocr"},
    }]})

    annotation = AnnotationSource().load(path)[0]

    assert annotation.linked_data == {
        "@id": "urn:a", "@type": "Heading", "semanticProperties": {"level": 2}
    }
    assert annotation.metadata == {"source": "ocr"}


def test_missing_file_gives_empty_list(tmp_path):
    assert AnnotationSource().load(str(tmp_path / "missing.json")) == []


def test_invalid_json_gives_empty_list(tmp_path):
    path = tmp_path / "broken.json"
    path.write_text("{not json", encoding="utf-8")
    assert AnnotationSource().load(str(path)) == []


def test_malformed_records_are_skipped():
    annotations = AnnotationSource().parse({"overlay": [
        "not a record",
        {"page": 1, "content": "no line", "rect": [0, 0, 1, 0, 1, 1]},
        {"page": 1, "line": "x", "rect": [0, 0, 1, 0, 1, 1]},
        {"page": 1, "line": 2, "rect": [0, 0, 1, 0, 1, 1]},
    ]})
    assert [a.line for a in annotations] == [2]
    assert annotations[0].content == ""


def test_float_page_numbers(tmp_path):
    path = write_json(tmp_path / "floats.json", {"overlay": [
        {"page": 1.0, "line": 1, "content": "whole", "rect": [0, 0, 1, 0, 1, 1]},
        {"page": 1.5, "line": 2, "content": "fractional", "rect": [0, 0, 1, 0, 1, 1]},
    ]})

    annotations = AnnotationSource().load(path)

    assert [a.content for a in annotations] == ["whole"]
    assert annotations[0].page == "1"
    assert annotations[0].key == "annotation-1-1"


def test_identity_equality_ignores_metadata():
    a = OverlayAnnotation(page="1", line=1, content="x", rect=(0, 0, 1, 1), metadata={"a": 1})
    b = OverlayAnnotation(page="1", line=1, content="x", rect=(0, 0, 1, 1))
    assert a == b
    assert a.identity == ("1", 1)
    assert a.page_index == 0
    assert a.points == ((0, 0), (1, 1))
