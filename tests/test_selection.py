import pytest

from planview.app.core.metadata import Metadata
from planview.app.core.selection import (
    SelectDiscipline,
    SelectDrawing,
    SelectionController,
    SelectionState,
    SelectOverlayDiscipline,
    SelectRegion,
    SelectRevision,
    ToggleOverlay,
    apply_defaults,
    reduce,
)
from planview.app.core.view import resolve_view


@pytest.fixture
def controller(metadata):
    return SelectionController(metadata)


def test_initial_selection_is_defaulted(controller):
    assert controller.state == SelectionState(
        drawing_id="01",
        discipline="건축",
        region="",
        revision="REV2",
        overlay_enabled=False,
        overlay_discipline="구조",
    )


def test_select_drawing_clears_dependent_fields():
    state = SelectionState("01", "구조", "A", "A-R1", True, "건축")
    assert reduce(state, SelectDrawing("02")) == SelectionState(
        drawing_id="02",
        discipline="",
        region="",
        revision="",
        overlay_enabled=False,
        overlay_discipline="건축",
    )


def test_select_discipline_clears_region_and_revision():
    state = SelectionState("01", "구조", "A", "A-R1")
    next_state = reduce(state, SelectDiscipline("건축"))
    assert (next_state.discipline, next_state.region, next_state.revision) == ("건축", "", "")


def test_select_region_clears_revision():
    state = SelectionState("01", "구조", "A", "A-R1")
    next_state = reduce(state, SelectRegion("B"))
    assert (next_state.region, next_state.revision) == ("B", "")


def test_reduce_rejects_unknown_events():
    with pytest.raises(TypeError):
        reduce(SelectionState(), "select")


def test_discipline_change_defaults_region_and_revision(controller):
    assert controller.dispatch(SelectDiscipline("구조"))
    state = controller.state
    assert (state.discipline, state.region, state.revision) == ("구조", "A", "A-R1")
    assert state.overlay_discipline == "건축"


def test_region_change_picks_its_latest_revision(controller):
    controller.dispatch(SelectDiscipline("구조"))
    controller.dispatch(SelectRegion("B"))
    assert controller.state.revision == "B-R1"


def test_explicit_revision_is_kept(controller):
    assert controller.dispatch(SelectRevision("REV1"))
    assert controller.state.revision == "REV1"
    assert not controller.dispatch(SelectRevision("REV1"))


def test_unknown_revision_falls_back_to_latest(controller):
    controller.dispatch(SelectRevision("REV1"))
    controller.dispatch(SelectRevision("REV9"))
    assert controller.state.revision == "REV2"


def test_overlay_discipline_cannot_equal_primary(controller):
    assert not controller.dispatch(SelectOverlayDiscipline("건축"))
    assert controller.state.overlay_discipline == "구조"
    assert controller.dispatch(SelectOverlayDiscipline("설비"))
    assert controller.state.overlay_discipline == "설비"


def test_overlay_follows_primary_discipline_change(controller):
    controller.dispatch(ToggleOverlay(True))
    controller.dispatch(SelectDiscipline("구조"))
    assert controller.state.overlay_enabled
    assert controller.state.overlay_discipline == "건축"


def test_overlay_unavailable_with_single_discipline(controller):
    controller.dispatch(SelectDrawing("02"))
    assert controller.state.overlay_discipline == ""
    assert not controller.dispatch(ToggleOverlay(True))
    assert not controller.state.overlay_enabled


def test_selecting_drawing_turns_overlay_off(controller):
    controller.dispatch(ToggleOverlay(True))
    controller.dispatch(SelectDrawing("02"))
    controller.dispatch(SelectDrawing("01"))
    assert not controller.state.overlay_enabled
    assert controller.state.discipline == "건축"


def test_drawing_without_disciplines(controller):
    controller.dispatch(SelectDrawing("10"))
    state = controller.state
    assert (state.discipline, state.region, state.revision) == ("", "", "")


def test_unknown_drawing_clears_everything(metadata):
    state = apply_defaults(metadata, SelectionState("99", "건축", "", "REV1", True, "구조"))
    assert state == SelectionState(drawing_id="99")


def test_apply_defaults_is_idempotent(metadata):
    state = apply_defaults(metadata, SelectionState("01", "구조"))
    assert apply_defaults(metadata, state) == state


def test_walk_through_hierarchy(controller):
    controller.dispatch(SelectDrawing("01"))
    controller.dispatch(SelectDiscipline("구조"))
    controller.dispatch(SelectRegion("B"))
    controller.dispatch(ToggleOverlay(True))
    controller.dispatch(SelectOverlayDiscipline("설비"))
    assert controller.state == SelectionState(
        drawing_id="01",
        discipline="구조",
        region="B",
        revision="B-R1",
        overlay_enabled=True,
        overlay_discipline="설비",
    )


def test_region_defaults_to_latest_dated_revision(payload):
    payload["drawings"]["01"]["disciplines"]["구조"]["regions"]["C"] = {
        "revisions": [
            {"version": "R0", "date": "2024-01-01"},
            {"version": "R1", "date": "2024-03-01"},
        ]
    }
    controller = SelectionController(Metadata.from_dict(payload))
    controller.dispatch(SelectDiscipline("구조"))
    controller.dispatch(SelectRegion("C"))
    assert controller.state.revision == "R1"
    assert controller.dispatch(SelectRevision("R0"))
    assert controller.state.revision == "R0"
    assert resolve_view(controller.metadata, controller.state).revision.version == "R0"
