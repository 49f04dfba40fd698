"""
Core module containing the metadata store and the resolution engine.

This module provides:
- Metadata, Drawing, Discipline, Region, Revision, ImageTransform, Polygon:
  the immutable project tree
- resolver functions: effective image, transform, polygon and revision
- transform_delta, TransformDelta: overlay alignment
- rescale_vertices, rescale_factors: polygon rescaling
- ViewportState, reduce_viewport, ViewportController: pan and zoom
- SelectionState, reduce, apply_defaults, SelectionController: selection cascade
- resolve_view, ResolvedView: one render pass over a selection
"""

from .alignment import TransformDelta, delta_matrix, transform_delta
from .metadata import (
    IDENTITY_TRANSFORM,
    Discipline,
    Drawing,
    DrawingPosition,
    ImageTransform,
    Metadata,
    MetadataFormatError,
    Polygon,
    Project,
    Region,
    Revision,
)
from .polygon import polygon_scale_for, rescale_factors, rescale_vertices
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
from .selection import SelectionController, SelectionState, apply_defaults, reduce
from .site_map import SiteMapEntry, drawing_at, site_map_entries
from .view import OverlayView, ResolvedView, breadcrumb, resolve_view
from .viewport import ViewportController, ViewportState, ZoomLimits, reduce_viewport

# Set canonical module paths to avoid Sphinx cross-reference ambiguity
Metadata.__module__ = "planview.app.core.metadata"
ResolvedView.__module__ = "planview.app.core.view"
SelectionState.__module__ = "planview.app.core.selection"
ViewportState.__module__ = "planview.app.core.viewport"

__all__ = [
    "IDENTITY_TRANSFORM",
    "Discipline",
    "Drawing",
    "DrawingPosition",
    "ImageTransform",
    "Metadata",
    "MetadataFormatError",
    "Polygon",
    "Project",
    "Region",
    "Revision",
    "TransformDelta",
    "delta_matrix",
    "transform_delta",
    "polygon_scale_for",
    "rescale_factors",
    "rescale_vertices",
    "effective_discipline",
    "effective_image",
    "effective_polygon",
    "effective_region",
    "effective_revision",
    "effective_transform",
    "latest_revision",
    "revision_collection",
    "SelectionController",
    "SelectionState",
    "apply_defaults",
    "reduce",
    "SiteMapEntry",
    "drawing_at",
    "site_map_entries",
    "OverlayView",
    "ResolvedView",
    "breadcrumb",
    "resolve_view",
    "ViewportController",
    "ViewportState",
    "ZoomLimits",
    "reduce_viewport",
]
