"""
I/O module for planview file operations.

This module provides:
- load_metadata, MetadataLoadError: metadata document loading
- to_image_path, from_image_path, resolve_image_file: image resource naming
- measure_image: natural image size discovery
"""

from .images import measure_image
from .metadata_io import (
    MetadataDocumentError,
    MetadataLoadError,
    from_image_path,
    image_file,
    load_metadata,
    resolve_image_file,
    to_image_path,
)

__all__ = [
    "MetadataDocumentError",
    "MetadataLoadError",
    "from_image_path",
    "image_file",
    "load_metadata",
    "measure_image",
    "resolve_image_file",
    "to_image_path",
]
