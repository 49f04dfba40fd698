"""
Selection state machine.

A user choice cascades downward through drawing -> discipline -> region ->
revision. ``reduce`` applies the clears of one event; ``apply_defaults``
then re-derives every dependent field whose value is no longer a valid
candidate. ``SelectionController`` chains the two for the UI.
"""

import logging
from dataclasses import dataclass, replace
from typing import Optional, Sequence, Union

from .metadata import Metadata
from .resolver import (
    discipline_names,
    effective_discipline,
    effective_region,
    latest_revision,
    overlay_candidates,
    region_names,
    revision_by_version,
    revision_collection,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SelectionState:
    """
    The user's current selection path.

    Empty strings mean "nothing selected" for the name fields.
    """

    drawing_id: Optional[str] = None
    discipline: str = ""
    region: str = ""
    revision: str = ""
    overlay_enabled: bool = False
    overlay_discipline: str = ""


@dataclass(frozen=True)
class SelectDrawing:
    drawing_id: str


@dataclass(frozen=True)
class SelectDiscipline:
    name: str


@dataclass(frozen=True)
class SelectRegion:
    name: str


@dataclass(frozen=True)
class SelectRevision:
    version: str


@dataclass(frozen=True)
class ToggleOverlay:
    enabled: bool


@dataclass(frozen=True)
class SelectOverlayDiscipline:
    name: str


SelectionEvent = Union[
    SelectDrawing,
    SelectDiscipline,
    SelectRegion,
    SelectRevision,
    ToggleOverlay,
    SelectOverlayDiscipline,
]


def reduce(state: SelectionState, event: SelectionEvent) -> SelectionState:
    """
    Apply an event and clear the fields that depend on it.

    Parameters
    ----------
    state : SelectionState
        The current selection.
    event : SelectionEvent
        The user's choice.

    Returns
    -------
    SelectionState
        The selection with dependent fields cleared, before defaults are
        re-derived.
    """
    if isinstance(event, SelectDrawing):
        return replace(
            state,
            drawing_id=event.drawing_id,
            discipline="",
            region="",
            revision="",
            overlay_enabled=False,
        )
    if isinstance(event, SelectDiscipline):
        return replace(state, discipline=event.name, region="", revision="")
    if isinstance(event, SelectRegion):
        return replace(state, region=event.name, revision="")
    if isinstance(event, SelectRevision):
        return replace(state, revision=event.version)
    if isinstance(event, ToggleOverlay):
        return replace(state, overlay_enabled=event.enabled)
    if isinstance(event, SelectOverlayDiscipline):
        if event.name and event.name == state.discipline:
            return state
        return replace(state, overlay_discipline=event.name)
    raise TypeError(f"Unsupported selection event: {event!r}")


def _pick(candidates: Sequence[str], value: str) -> str:
    if not candidates:
        return ""
    return value if value in candidates else candidates[0]


def apply_defaults(metadata: Metadata, state: SelectionState) -> SelectionState:
    """
    Re-derive defaults for every field whose value is not a valid candidate.

    Discipline and region names default to the first in declaration order,
    the revision to the latest of the current collection, and the overlay
    discipline to the first discipline other than the primary one.
    """
    drawing = metadata.get(state.drawing_id)
    if drawing is None:
        return replace(
            state,
            discipline="",
            region="",
            revision="",
            overlay_enabled=False,
            overlay_discipline="",
        )

    discipline_name = _pick(discipline_names(drawing), state.discipline)
    discipline = effective_discipline(drawing, discipline_name)

    region_name = _pick(region_names(discipline), state.region)
    region = effective_region(discipline, region_name)

    revisions = revision_collection(discipline, region)
    if revision_by_version(revisions, state.revision) is not None:
        version = state.revision
    else:
        latest = latest_revision(revisions)
        version = latest.version if latest is not None else ""

    candidates = overlay_candidates(drawing, discipline_name)
    return SelectionState(
        drawing_id=state.drawing_id,
        discipline=discipline_name,
        region=region_name,
        revision=version,
        overlay_enabled=state.overlay_enabled and bool(candidates),
        overlay_discipline=_pick(candidates, state.overlay_discipline),
    )


class SelectionController:
    """
    Holder of the current selection for one metadata store.

    Attributes
    ----------
    metadata : Metadata
        The loaded store.
    state : SelectionState
        The current, fully defaulted selection.
    """

    metadata: Metadata
    state: SelectionState

    def __init__(
        self, metadata: Metadata, state: Optional[SelectionState] = None
    ) -> None:
        self.metadata = metadata
        if state is None:
            state = SelectionState(drawing_id=metadata.initial_drawing_id())
        self.state = apply_defaults(metadata, state)

    def dispatch(self, event: SelectionEvent) -> bool:
        """Apply an event and its defaults; return True if the state changed."""
        previous = self.state
        self.state = apply_defaults(self.metadata, reduce(previous, event))
        if self.state != previous:
            logger.debug("Selection %s -> %s", event, self.state)
        return self.state != previous
