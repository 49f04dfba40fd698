"""
Polygon geometry utilities.

This module rescales polygon vertices authored against a reference image
into the pixel space of the image currently displayed, and computes the
vertex centroid used to place labels.
"""

from typing import List, Optional, Sequence, Tuple

import numpy as np

from .metadata import ImageTransform, Vertex

ImageSize = Tuple[float, float]


def _is_known(size: Optional[ImageSize]) -> bool:
    return size is not None and size[0] > 0 and size[1] > 0


def rescale_factors(
    reference_size: Optional[ImageSize], displayed_size: Optional[ImageSize]
) -> Tuple[float, float]:
    """
    Compute per-axis scale factors from reference to displayed pixels.

    Parameters
    ----------
    reference_size : Optional[ImageSize]
        Natural (width, height) of the reference image, or None if not loaded.
    displayed_size : Optional[ImageSize]
        Natural (width, height) of the displayed image, or None if not loaded.

    Returns
    -------
    Tuple[float, float]
        (scale_x, scale_y). Both are 1 while any dimension is still unknown.
    """
    if not (_is_known(reference_size) and _is_known(displayed_size)):
        return 1.0, 1.0
    return (
        displayed_size[0] / reference_size[0],
        displayed_size[1] / reference_size[1],
    )


def polygon_scale_for(
    transform: ImageTransform,
    reference_size: Optional[ImageSize],
    displayed_size: Optional[ImageSize],
) -> Tuple[float, float]:
    """
    Return the rescale factors for a polygon shown under ``transform``.

    The reference image is the one named by the transform. Without a named
    reference the polygon is taken to be authored against the displayed image.
    """
    if transform.relative_to is None:
        return 1.0, 1.0
    return rescale_factors(reference_size, displayed_size)


def rescale_vertices(
    vertices: Sequence[Vertex],
    reference_size: Optional[ImageSize],
    displayed_size: Optional[ImageSize],
) -> List[Vertex]:
    """
    Rescale vertices using vectorized numpy operations.

    Parameters
    ----------
    vertices : Sequence[Vertex]
        The (x, y) vertices in reference image pixels.
    reference_size : Optional[ImageSize]
        Natural size of the reference image.
    displayed_size : Optional[ImageSize]
        Natural size of the displayed image.

    Returns
    -------
    List[Vertex]
        The vertices in displayed image pixels.
    """
    return scale_vertices(vertices, rescale_factors(reference_size, displayed_size))


def scale_vertices(
    vertices: Sequence[Vertex], factors: Tuple[float, float]
) -> List[Vertex]:
    if not vertices:
        return []
    coords = np.asarray(vertices, dtype=np.float64).reshape(-1, 2)
    if factors != (1.0, 1.0):
        coords = coords * np.asarray(factors, dtype=np.float64)
    return [(float(x), float(y)) for x, y in coords]


def vertex_centroid(vertices: Sequence[Vertex]) -> Vertex:
    """Return the mean of the vertices, (0, 0) for an empty list."""
    if not vertices:
        return 0.0, 0.0
    mean = np.asarray(vertices, dtype=np.float64).reshape(-1, 2).mean(axis=0)
    return float(mean[0]), float(mean[1])
