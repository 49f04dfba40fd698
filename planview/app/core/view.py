"""
Resolved view of a selection.

``resolve_view`` runs the whole resolution pipeline for one selection and
bundles the result the widgets render: primary image, transform and polygon,
the revision list, and the aligned overlay.
"""

from dataclasses import dataclass
from typing import List, Optional, Sequence

from .alignment import TransformDelta, transform_delta
from .metadata import (
    Discipline,
    Drawing,
    ImageTransform,
    Metadata,
    Polygon,
    Region,
    Revision,
)
from .resolver import (
    effective_discipline,
    effective_image,
    effective_polygon,
    effective_region,
    effective_revision,
    effective_transform,
    latest_revision,
    revision_collection,
)
from .selection import SelectionState

DEFAULT_PROJECT_NAME = "프로젝트"


@dataclass(frozen=True)
class OverlayView:
    """
    The second discipline drawn over the primary image.

    Attributes
    ----------
    discipline_name : str
        Name of the overlaid discipline.
    revision : Optional[Revision]
        Latest revision of the overlaid discipline.
    image : str
        Resolved overlay image filename.
    transform : ImageTransform
        Resolved overlay transform.
    delta : TransformDelta
        Alignment relative to the primary transform.
    """

    discipline_name: str
    revision: Optional[Revision]
    image: str
    transform: ImageTransform
    delta: TransformDelta


@dataclass(frozen=True)
class ResolvedView:
    drawing: Drawing
    discipline: Optional[Discipline]
    region: Optional[Region]
    revisions: Sequence[Revision]
    revision: Optional[Revision]
    latest: Optional[Revision]
    image: str
    transform: ImageTransform
    polygon: Optional[Polygon]
    overlay: Optional[OverlayView]

    @property
    def has_polygon(self) -> bool:
        return self.polygon is not None and len(self.polygon.vertices) > 0


def resolve_overlay(
    drawing: Drawing, name: str, primary_transform: ImageTransform
) -> Optional[OverlayView]:
    """Resolve an overlay discipline against the primary transform."""
    discipline = effective_discipline(drawing, name)
    if discipline is None:
        return None
    revision = latest_revision(discipline.revisions)
    transform = effective_transform(discipline, revision)
    return OverlayView(
        discipline_name=name,
        revision=revision,
        image=effective_image(drawing, discipline, revision),
        transform=transform,
        delta=transform_delta(primary_transform, transform),
    )


def resolve_view(metadata: Metadata, state: SelectionState) -> Optional[ResolvedView]:
    """
    Resolve a selection into everything needed to render it.

    Returns None only when the selected drawing does not exist.
    """
    drawing = metadata.get(state.drawing_id)
    if drawing is None:
        return None
    discipline = effective_discipline(drawing, state.discipline)
    region = effective_region(discipline, state.region)
    revisions = revision_collection(discipline, region)
    revision = effective_revision(revisions, state.revision)
    transform = effective_transform(discipline, revision)
    overlay = None
    if state.overlay_enabled and state.overlay_discipline:
        overlay = resolve_overlay(drawing, state.overlay_discipline, transform)
    return ResolvedView(
        drawing=drawing,
        discipline=discipline,
        region=region,
        revisions=revisions,
        revision=revision,
        latest=latest_revision(revisions),
        image=effective_image(drawing, discipline, revision),
        transform=transform,
        polygon=effective_polygon(discipline, region, revision),
        overlay=overlay,
    )


def breadcrumb(
    metadata: Metadata, state: SelectionState, view: Optional[ResolvedView]
) -> List[str]:
    """Return the project / drawing / discipline / region / revision trail."""
    items = [metadata.project.name or DEFAULT_PROJECT_NAME]
    if view is not None:
        items.append(view.drawing.name)
    if state.discipline:
        items.append(state.discipline)
    if state.region:
        items.append(state.region)
    if view is not None and view.revision is not None:
        items.append(view.revision.version)
    return items
