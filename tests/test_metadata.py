import dataclasses

import pytest

from planview.app.core.metadata import (
    IDENTITY_TRANSFORM,
    ImageTransform,
    Metadata,
    MetadataFormatError,
)


def test_from_dict_keeps_declaration_order(metadata):
    assert metadata.project.name == "테스트 현장"
    assert metadata.project.unit == "px"
    assert metadata.discipline_names == ("건축", "구조", "설비")
    drawing = metadata.get("01")
    assert list(drawing.disciplines) == ["건축", "구조", "설비"]
    assert list(drawing.disciplines["구조"].regions) == ["A", "B"]


def test_from_dict_parses_revisions_and_transforms(metadata):
    discipline = metadata.get("01").disciplines["건축"]
    assert [r.version for r in discipline.revisions] == ["REV1", "REV2"]
    assert discipline.revisions[1].changes == ("벽체 이동",)
    assert discipline.image_transform == ImageTransform("101-arch.png", 0.0, 0.0, 1.0, 0.0)
    region = metadata.get("01").disciplines["구조"].regions["A"]
    assert region.polygon.vertices == ((10.0, 10.0), (50.0, 10.0), (50.0, 50.0))
    assert region.polygon.polygon_transform.relative_to == "101-arch.png"


def test_missing_transform_fields_take_identity_defaults(metadata):
    transform = metadata.get("01").disciplines["설비"].image_transform
    assert transform == ImageTransform("other.png", 3.0, 4.0, 1.0, 0.0)
    assert metadata.get("02").disciplines["건축"].image_transform is None
    assert metadata.get("01").position.image_transform == IDENTITY_TRANSFORM


def test_records_are_immutable(metadata):
    drawing = metadata.get("01")
    with pytest.raises(dataclasses.FrozenInstanceError):
        drawing.name = "changed"
    with pytest.raises(TypeError):
        drawing.disciplines["새 공종"] = None


def test_sorted_drawings_orders_by_integer_id():
    payload = {
        "drawings": {
            "10": {"name": "ten", "image": "10.png"},
            "2": {"name": "two", "image": "2.png"},
            "1": {"name": "one", "image": "1.png"},
        }
    }
    metadata = Metadata.from_dict(payload)
    assert [d.id for d in metadata.sorted_drawings()] == ["1", "2", "10"]


def test_hierarchy_navigation(metadata):
    assert metadata.root_drawing().id == "00"
    assert [d.id for d in metadata.child_drawings("00")] == ["01", "02", "10"]
    assert metadata.child_drawings("01") == []
    assert metadata.get("99") is None
    assert metadata.get(None) is None


def test_initial_drawing_is_first_child_of_root(metadata):
    assert metadata.initial_drawing_id() == "01"


def test_initial_drawing_falls_back_to_root_or_none():
    only_root = Metadata.from_dict({"drawings": {"0": {"name": "root", "image": "r.png"}}})
    assert only_root.initial_drawing_id() == "0"
    empty = Metadata.from_dict({"drawings": {}})
    assert empty.initial_drawing_id() is None
    assert empty.root_drawing() is None


def test_filter_drawings_matches_name_substring(metadata):
    assert [d.id for d in metadata.filter_drawings("10")] == ["01", "02"]
    assert [d.id for d in metadata.filter_drawings("  주차  ")] == ["10"]
    assert len(metadata.filter_drawings("")) == 4


def test_filter_drawings_is_case_insensitive():
    metadata = Metadata.from_dict(
        {"drawings": {"1": {"name": "Block A", "image": "a.png"}}}
    )
    assert [d.id for d in metadata.filter_drawings("block a")] == ["1"]


@pytest.mark.parametrize(
    "mutate",
    [
        lambda p: p.pop("drawings"),
        lambda p: p["drawings"]["01"].pop("image"),
        lambda p: p["drawings"]["01"].update({"image": None}),
        lambda p: p["drawings"]["01"]["disciplines"]["건축"]["revisions"][0].pop("version"),
        lambda p: p["drawings"]["01"]["disciplines"]["건축"].update(
            {"imageTransform": {"x": "left"}}
        ),
        lambda p: p.update({"project": "not an object"}),
    ],
)
def test_malformed_documents_raise_format_error(payload, mutate):
    mutate(payload)
    with pytest.raises(MetadataFormatError):
        Metadata.from_dict(payload)
