"""
Metadata data structures for the drawing hierarchy.

This module provides the immutable records that make up a loaded project
(drawings, disciplines, regions, revisions, transforms and polygons) and the
Metadata store that indexes them. A store is built once from the parsed
metadata document and is read-only afterwards.
"""

import logging
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Optional, Tuple

logger = logging.getLogger(__name__)

Vertex = Tuple[float, float]


class MetadataFormatError(ValueError):
    """Raised when a metadata document does not have the expected structure."""


@dataclass(frozen=True)
class ImageTransform:
    """
    Similarity transform placing an image in a coordinate frame.

    Attributes
    ----------
    relative_to : Optional[str]
        Name of the reference image the transform is expressed against.
        None means the image's own default frame.
    x : float
        Horizontal translation in pixels.
    y : float
        Vertical translation in pixels.
    scale : float
        Uniform scale factor.
    rotation : float
        Rotation in radians.
    """

    relative_to: Optional[str] = None
    x: float = 0.0
    y: float = 0.0
    scale: float = 1.0
    rotation: float = 0.0

    def is_compatible(self, other: "ImageTransform") -> bool:
        """Return True if both transforms share the same reference image."""
        return self.relative_to == other.relative_to


IDENTITY_TRANSFORM = ImageTransform()


@dataclass(frozen=True)
class Polygon:
    """
    Vertex list authored in the pixel space of a reference image.

    Attributes
    ----------
    vertices : Tuple[Vertex, ...]
        The polygon vertices as (x, y) pairs.
    polygon_transform : ImageTransform
        Transform carried with the polygon.
    """

    vertices: Tuple[Vertex, ...]
    polygon_transform: ImageTransform = IDENTITY_TRANSFORM


@dataclass(frozen=True)
class DrawingPosition:
    """Footprint of a drawing inside its parent drawing's image."""

    vertices: Tuple[Vertex, ...]
    image_transform: ImageTransform = IDENTITY_TRANSFORM


@dataclass(frozen=True)
class Revision:
    """
    A dated version of a discipline or region image.

    Attributes
    ----------
    version : str
        Version label, not assumed to be sortable.
    image : str
        Image filename.
    date : str
        Date string, parsed when looking for the latest revision.
    description : str
        Free-text description.
    changes : Tuple[str, ...]
        List of change notes.
    image_transform : Optional[ImageTransform]
        Transform override for this revision.
    polygon : Optional[Polygon]
        Polygon override for this revision.
    """

    version: str
    image: str = ""
    date: str = ""
    description: str = ""
    changes: Tuple[str, ...] = ()
    image_transform: Optional[ImageTransform] = None
    polygon: Optional[Polygon] = None


@dataclass(frozen=True)
class Region:
    polygon: Optional[Polygon] = None
    revisions: Tuple[Revision, ...] = ()


@dataclass(frozen=True)
class Discipline:
    """
    An engineering trade view of a drawing.

    Attributes
    ----------
    image : Optional[str]
        Default image filename.
    image_transform : Optional[ImageTransform]
        Default transform.
    polygon : Optional[Polygon]
        Default polygon.
    regions : Mapping[str, Region]
        Regions keyed by name, in declaration order.
    revisions : Tuple[Revision, ...]
        Revisions used when no region applies.
    """

    image: Optional[str] = None
    image_transform: Optional[ImageTransform] = None
    polygon: Optional[Polygon] = None
    regions: Mapping[str, Region] = field(default_factory=lambda: MappingProxyType({}))
    revisions: Tuple[Revision, ...] = ()


@dataclass(frozen=True)
class Drawing:
    """
    A navigable unit of the project hierarchy.

    Attributes
    ----------
    id : str
        Identifier, sortable as an integer.
    name : str
        Display name.
    image : str
        Default image filename.
    parent : Optional[str]
        Parent drawing id, None for the root.
    position : Optional[DrawingPosition]
        Footprint inside the parent's image.
    disciplines : Mapping[str, Discipline]
        Disciplines keyed by name, in declaration order.
    """

    id: str
    name: str
    image: str
    parent: Optional[str] = None
    position: Optional[DrawingPosition] = None
    disciplines: Mapping[str, Discipline] = field(
        default_factory=lambda: MappingProxyType({})
    )


@dataclass(frozen=True)
class Project:
    name: str = ""
    unit: str = ""


def _sort_key(drawing_id: str) -> Tuple[int, Any]:
    try:
        return (0, int(drawing_id, 10))
    except ValueError:
        return (1, drawing_id)


class Metadata:
    """
    Read-only store of a loaded project.

    Drawings are kept in an id-indexed mapping together with an index from
    parent id to the ids of its children, both built once at construction.

    Attributes
    ----------
    project : Project
        Project name and unit.
    discipline_names : Tuple[str, ...]
        Project-wide discipline names, in declaration order.
    drawings : Mapping[str, Drawing]
        Drawings keyed by id.
    """

    project: Project
    discipline_names: Tuple[str, ...]
    drawings: Mapping[str, Drawing]

    def __init__(
        self,
        project: Project,
        discipline_names: Tuple[str, ...],
        drawings: Dict[str, Drawing],
    ) -> None:
        self.project = project
        self.discipline_names = tuple(discipline_names)
        self.drawings = MappingProxyType(dict(drawings))
        self._sorted_ids: Tuple[str, ...] = tuple(sorted(drawings, key=_sort_key))
        children: Dict[Optional[str], List[str]] = {}
        for drawing_id in self._sorted_ids:
            children.setdefault(self.drawings[drawing_id].parent, []).append(drawing_id)
        self._children: Dict[Optional[str], Tuple[str, ...]] = {
            parent: tuple(ids) for parent, ids in children.items()
        }

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "Metadata":
        """
        Build a store from a parsed metadata document.

        Parameters
        ----------
        payload : Mapping[str, Any]
            The decoded JSON document.

        Returns
        -------
        Metadata
            The populated store.

        Raises
        ------
        MetadataFormatError
            If the document is not structured as expected.
        """
        try:
            project_data = payload.get("project") or {}
            project = Project(
                name=str(project_data.get("name", "")),
                unit=str(project_data.get("unit", "")),
            )
            names = tuple(str(entry["name"]) for entry in payload.get("disciplines") or [])
            drawings = {
                str(key): _parse_drawing(str(key), value)
                for key, value in (payload["drawings"] or {}).items()
            }
        except (AttributeError, KeyError, TypeError, ValueError) as e:
            raise MetadataFormatError(f"Malformed metadata document: {e!r}") from e
        logger.debug("Parsed %d drawings for project %r", len(drawings), project.name)
        return cls(project, names, drawings)

    def sorted_drawings(self) -> List[Drawing]:
        """Return all drawings ordered by integer id."""
        return [self.drawings[i] for i in self._sorted_ids]

    def get(self, drawing_id: Optional[str]) -> Optional[Drawing]:
        if drawing_id is None:
            return None
        return self.drawings.get(drawing_id)

    def root_drawing(self) -> Optional[Drawing]:
        """Return the drawing without a parent (lowest id if several)."""
        roots = self._children.get(None, ())
        return self.drawings[roots[0]] if roots else None

    def child_drawings(self, parent_id: str) -> List[Drawing]:
        """Return the children of a drawing, ordered by integer id."""
        return [self.drawings[i] for i in self._children.get(parent_id, ())]

    def initial_drawing_id(self) -> Optional[str]:
        """Return the first child of the root, falling back to the root itself."""
        root = self.root_drawing()
        if root is None:
            return None
        children = self.child_drawings(root.id)
        return children[0].id if children else root.id

    def filter_drawings(self, query: str) -> List[Drawing]:
        """Return sorted drawings whose name contains the query (case-insensitive)."""
        needle = query.strip().lower()
        return [d for d in self.sorted_drawings() if needle in d.name.lower()]


def _parse_transform(data: Optional[Mapping[str, Any]]) -> Optional[ImageTransform]:
    if data is None:
        return None
    relative_to = data.get("relativeTo")
    return ImageTransform(
        relative_to=None if relative_to is None else str(relative_to),
        x=float(data.get("x", 0.0)),
        y=float(data.get("y", 0.0)),
        scale=float(data.get("scale", 1.0)),
        rotation=float(data.get("rotation", 0.0)),
    )


def _parse_vertices(data: Any) -> Tuple[Vertex, ...]:
    return tuple((float(x), float(y)) for x, y in (data or []))


def _parse_polygon(data: Optional[Mapping[str, Any]]) -> Optional[Polygon]:
    if data is None:
        return None
    return Polygon(
        vertices=_parse_vertices(data.get("vertices")),
        polygon_transform=_parse_transform(data.get("polygonTransform"))
        or IDENTITY_TRANSFORM,
    )


def _parse_revision(data: Mapping[str, Any]) -> Revision:
    return Revision(
        version=str(data["version"]),
        image=str(data.get("image") or ""),
        date=str(data.get("date") or ""),
        description=str(data.get("description") or ""),
        changes=tuple(str(c) for c in data.get("changes") or []),
        image_transform=_parse_transform(data.get("imageTransform")),
        polygon=_parse_polygon(data.get("polygon")),
    )


def _parse_revisions(data: Any) -> Tuple[Revision, ...]:
    return tuple(_parse_revision(r) for r in data or [])


def _parse_discipline(data: Mapping[str, Any]) -> Discipline:
    regions = {
        str(name): Region(
            polygon=_parse_polygon(region.get("polygon")),
            revisions=_parse_revisions(region.get("revisions")),
        )
        for name, region in (data.get("regions") or {}).items()
    }
    image = data.get("image")
    return Discipline(
        image=None if image is None else str(image),
        image_transform=_parse_transform(data.get("imageTransform")),
        polygon=_parse_polygon(data.get("polygon")),
        regions=MappingProxyType(regions),
        revisions=_parse_revisions(data.get("revisions")),
    )


def _parse_drawing(key: str, data: Mapping[str, Any]) -> Drawing:
    position = data.get("position")
    parent = data.get("parent")
    image = data["image"]
    if not isinstance(image, str):
        raise TypeError(f"drawing {key!r} image must be a string, got {image!r}")
    disciplines = {
        str(name): _parse_discipline(value)
        for name, value in (data.get("disciplines") or {}).items()
    }
    return Drawing(
        id=str(data.get("id", key)),
        name=str(data.get("name", "")),
        image=image,
        parent=None if parent is None else str(parent),
        position=None
        if position is None
        else DrawingPosition(
            vertices=_parse_vertices(position.get("vertices")),
            image_transform=_parse_transform(position.get("imageTransform"))
            or IDENTITY_TRANSFORM,
        ),
        disciplines=MappingProxyType(disciplines),
    )
