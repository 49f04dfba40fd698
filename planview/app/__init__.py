"""
planview application package.

This package provides the building blocks of planview, a viewer for
construction drawing sets with per-discipline revisions and overlays.

Modules
-------
core : Metadata store and resolution engine
    - Metadata, Drawing, Discipline, Region, Revision, ImageTransform
    - resolve_view, ResolvedView, breadcrumb
    - SelectionController, ViewportController, transform_delta

io : File I/O operations
    - load_metadata, MetadataLoadError
    - to_image_path, from_image_path, measure_image

config : Viewer settings
    - ViewerSettings, load_settings, apply_env_overrides

ui_main : Main window
    - MainWindow, ControlBar

ui_components, image_viewer, site_map : Qt widgets
    - ContextPanel, LabeledSlider, ImageViewer, SiteMapWidget

The Qt modules are not imported here so the core can be used headless.
"""

# Re-export core components for convenient access
from .core import (
    Discipline,
    Drawing,
    ImageTransform,
    Metadata,
    Region,
    ResolvedView,
    Revision,
    SelectionController,
    SelectionState,
    ViewportController,
    breadcrumb,
    resolve_view,
    transform_delta,
)

# Re-export I/O components
from .io import (
    MetadataLoadError,
    from_image_path,
    load_metadata,
    measure_image,
    to_image_path,
)
from .config import ViewerSettings, apply_env_overrides, load_settings

__all__ = [
    # Core
    "Discipline",
    "Drawing",
    "ImageTransform",
    "Metadata",
    "Region",
    "ResolvedView",
    "Revision",
    "SelectionController",
    "SelectionState",
    "ViewportController",
    "breadcrumb",
    "resolve_view",
    "transform_delta",
    # I/O
    "MetadataLoadError",
    "from_image_path",
    "load_metadata",
    "measure_image",
    "to_image_path",
    # Config
    "ViewerSettings",
    "apply_env_overrides",
    "load_settings",
]
