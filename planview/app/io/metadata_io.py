"""
Metadata loading and image resource naming.

This module reads the project metadata document from a data directory and
maps image filenames to resource paths and back.
"""

import json
import logging
from pathlib import Path
from typing import Union
from urllib.parse import quote, unquote

from ..core.metadata import Metadata, MetadataFormatError

logger = logging.getLogger(__name__)

DRAWINGS_PREFIX = "/data/drawings/"

# Characters encodeURIComponent leaves as-is besides ASCII letters, digits and "-_."
_URI_COMPONENT_SAFE = "!~*'()"


class MetadataLoadError(RuntimeError):
    """Raised when the metadata document cannot be obtained or understood."""


class MetadataDocumentError(MetadataLoadError, MetadataFormatError):
    """Raised when the metadata document is readable but malformed."""


def to_image_path(filename: str) -> str:
    """
    Map an image filename to its resource path.

    Parameters
    ----------
    filename : str
        Image filename as it appears in the metadata.

    Returns
    -------
    str
        ``/data/drawings/`` followed by the percent-encoded filename.
    """
    return DRAWINGS_PREFIX + quote(filename, safe=_URI_COMPONENT_SAFE)


def from_image_path(path: str) -> str:
    """
    Invert ``to_image_path``.

    Raises
    ------
    ValueError
        If ``path`` is not under the drawings prefix.
    """
    if not path.startswith(DRAWINGS_PREFIX):
        raise ValueError(f"Not a drawing resource path: {path!r}")
    return unquote(path[len(DRAWINGS_PREFIX):])


def resolve_image_file(data_dir: Union[str, Path], path: str) -> Path:
    """Return the local file backing a drawing resource path."""
    return Path(data_dir) / "drawings" / from_image_path(path)


def image_file(data_dir: Union[str, Path], filename: str) -> Path:
    return resolve_image_file(data_dir, to_image_path(filename))


def load_metadata(path: Union[str, Path]) -> Metadata:
    """
    Load and parse the metadata document.

    Parameters
    ----------
    path : Union[str, Path]
        Path to ``metadata.json``.

    Returns
    -------
    Metadata
        The read-only store.

    Raises
    ------
    MetadataLoadError
        If the file cannot be read or decoded, or is not a metadata document.
    """
    path = Path(path)
    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as e:
        raise MetadataLoadError(f"metadata load failed: {path}: {e.strerror or e}") from e
    try:
        payload = json.loads(raw)
    except json.JSONDecodeError as e:
        raise MetadataDocumentError(f"metadata load failed: {path}: {e}") from e
    if not isinstance(payload, dict):
        raise MetadataDocumentError(f"metadata load failed: {path}: not a JSON object")
    try:
        metadata = Metadata.from_dict(payload)
    except MetadataFormatError as e:
        raise MetadataDocumentError(f"metadata load failed: {path}: {e}") from e
    logger.info(
        "Loaded metadata for %r with %d drawings from %s",
        metadata.project.name,
        len(metadata.drawings),
        path,
    )
    return metadata
