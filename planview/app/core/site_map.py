"""
Site map navigation over the root drawing.

Child drawings carry a position polygon in the pixel space of their parent's
image. This module lists the navigable children and hit-tests a point in
parent image pixels against their footprints.
"""

from dataclasses import dataclass
from typing import List, Optional, Sequence

from shapely.geometry import Point
from shapely.geometry import Polygon as ShapelyPolygon

from .metadata import Drawing, Metadata, Vertex
from .polygon import vertex_centroid


@dataclass(frozen=True)
class SiteMapEntry:
    """
    A child drawing placed on its parent's image.

    Attributes
    ----------
    drawing : Drawing
        The child drawing.
    vertices : Sequence[Vertex]
        Footprint in parent image pixels.
    label_position : Vertex
        Vertex centroid, used to place the drawing name.
    """

    drawing: Drawing
    vertices: Sequence[Vertex]
    label_position: Vertex


def site_map_entries(metadata: Metadata, parent_id: Optional[str] = None) -> List[SiteMapEntry]:
    """
    Return the children of ``parent_id`` (default: the root) that have a footprint.
    """
    if parent_id is None:
        root = metadata.root_drawing()
        if root is None:
            return []
        parent_id = root.id
    entries = []
    for drawing in metadata.child_drawings(parent_id):
        if drawing.position is None or not drawing.position.vertices:
            continue
        vertices = drawing.position.vertices
        entries.append(SiteMapEntry(drawing, vertices, vertex_centroid(vertices)))
    return entries


def drawing_at(entries: Sequence[SiteMapEntry], x: float, y: float) -> Optional[Drawing]:
    """
    Return the drawing whose footprint contains (x, y), if any.

    Footprints with fewer than three vertices cannot contain a point. When
    footprints overlap the last one listed wins, matching paint order.
    """
    point = Point(x, y)
    for entry in reversed(entries):
        if len(entry.vertices) < 3:
            continue
        if ShapelyPolygon(entry.vertices).covers(point):
            return entry.drawing
    return None
