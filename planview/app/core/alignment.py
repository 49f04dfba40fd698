"""
Alignment of an overlay drawing onto a primary drawing.

The overlay image is first pinned at the primary image's top-left corner and
then moved by the TransformDelta: translate(dx, dy), rotate(rotation), then
scale(scale), all pivoting at the overlay's own top-left corner.
"""

import logging
from dataclasses import dataclass

import numpy as np

from .metadata import ImageTransform

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TransformDelta:
    """
    Transform taking the overlay into the primary image's frame.

    Attributes
    ----------
    dx, dy : float
        Translation in primary image pixels.
    scale : float
        Uniform scale relative to the primary.
    rotation : float
        Rotation in radians relative to the primary.
    compatible : bool
        False when the two transforms use different reference images, in
        which case the delta is the identity and the overlay is unaligned.
    """

    dx: float = 0.0
    dy: float = 0.0
    scale: float = 1.0
    rotation: float = 0.0
    compatible: bool = True


def transform_delta(
    primary: ImageTransform, overlay: ImageTransform
) -> TransformDelta:
    """
    Compute the delta aligning ``overlay`` with ``primary``.

    Parameters
    ----------
    primary : ImageTransform
        Resolved transform of the primary drawing.
    overlay : ImageTransform
        Resolved transform of the overlay drawing.

    Returns
    -------
    TransformDelta
        The identity delta with ``compatible=False`` if the reference images
        differ or the primary scale is zero, the aligning delta otherwise.
    """
    if not primary.is_compatible(overlay):
        return TransformDelta(compatible=False)
    if primary.scale == 0:
        logger.warning(
            "Primary transform relative to %r has zero scale; overlay left unaligned",
            primary.relative_to,
        )
        return TransformDelta(compatible=False)
    return TransformDelta(
        dx=overlay.x - primary.x,
        dy=overlay.y - primary.y,
        scale=overlay.scale / primary.scale,
        rotation=overlay.rotation - primary.rotation,
        compatible=True,
    )


def delta_matrix(delta: TransformDelta) -> np.ndarray:
    """
    Return the 3x3 affine matrix of a delta (column-vector convention).

    The matrix maps overlay pixel coordinates to primary pixel coordinates as
    ``T(dx, dy) @ R(rotation) @ S(scale)``.
    """
    cos_r = np.cos(delta.rotation)
    sin_r = np.sin(delta.rotation)
    translate = np.array([[1.0, 0.0, delta.dx], [0.0, 1.0, delta.dy], [0.0, 0.0, 1.0]])
    rotate = np.array([[cos_r, -sin_r, 0.0], [sin_r, cos_r, 0.0], [0.0, 0.0, 1.0]])
    scale = np.diag([delta.scale, delta.scale, 1.0])
    return translate @ rotate @ scale
