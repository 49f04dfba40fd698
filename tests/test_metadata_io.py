import json

import pytest
from PIL import Image

from planview.app.core.metadata import MetadataFormatError
from planview.app.io.images import measure_image
from planview.app.io.metadata_io import (
    MetadataDocumentError,
    MetadataLoadError,
    from_image_path,
    image_file,
    load_metadata,
    resolve_image_file,
    to_image_path,
)


@pytest.mark.parametrize(
    "filename, path",
    [
        ("101.png", "/data/drawings/101.png"),
        ("site plan.png", "/data/drawings/site%20plan.png"),
        ("배치도.png", "/data/drawings/%EB%B0%B0%EC%B9%98%EB%8F%84.png"),
        ("a(1)!~*'.png", "/data/drawings/a(1)!~*'.png"),
        ("a/b#c?.png", "/data/drawings/a%2Fb%23c%3F.png"),
    ],
)
def test_to_image_path_encodes_like_uri_component(filename, path):
    assert to_image_path(filename) == path
    assert from_image_path(path) == filename


def test_from_image_path_rejects_other_prefixes():
    with pytest.raises(ValueError):
        from_image_path("/static/101.png")


def test_resolve_image_file(tmp_path):
    expected = tmp_path / "drawings" / "101동 구조.png"
    assert resolve_image_file(tmp_path, to_image_path("101동 구조.png")) == expected
    assert image_file(tmp_path, "101동 구조.png") == expected


def test_load_metadata(metadata_file):
    metadata = load_metadata(metadata_file)
    assert metadata.project.name == "테스트 현장"
    assert [d.id for d in metadata.sorted_drawings()] == ["00", "01", "02", "10"]


def test_load_metadata_missing_file(tmp_path):
    with pytest.raises(MetadataLoadError) as excinfo:
        load_metadata(tmp_path / "metadata.json")
    assert not isinstance(excinfo.value, MetadataFormatError)


@pytest.mark.parametrize(
    "content",
    [
        "{not json",
        json.dumps([1, 2, 3]),
        json.dumps({"project": {"name": "p"}}),
    ],
)
def test_load_metadata_malformed_document(tmp_path, content):
    path = tmp_path / "metadata.json"
    path.write_text(content, encoding="utf-8")
    with pytest.raises(MetadataDocumentError) as excinfo:
        load_metadata(path)
    assert isinstance(excinfo.value, MetadataLoadError)
    assert isinstance(excinfo.value, MetadataFormatError)


def test_measure_image(tmp_path):
    path = tmp_path / "plan.png"
    Image.new("RGB", (40, 20), "white").save(path)
    assert measure_image(path) == (40, 20)


def test_measure_image_unreadable(tmp_path):
    garbage = tmp_path / "broken.png"
    garbage.write_bytes(b"not an image")
    assert measure_image(garbage) == (0, 0)
    assert measure_image(tmp_path / "missing.png") == (0, 0)
