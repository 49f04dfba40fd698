import logging
import math

import numpy as np
import pytest

from planview.app.core.alignment import TransformDelta, delta_matrix, transform_delta
from planview.app.core.metadata import IDENTITY_TRANSFORM, ImageTransform


def test_identical_transforms_give_identity_delta():
    transform = ImageTransform("plan.png", x=12, y=-4, scale=1.5, rotation=0.2)
    assert transform_delta(transform, transform) == TransformDelta(0.0, 0.0, 1.0, 0.0, True)


def test_delta_is_relative_to_primary():
    primary = ImageTransform("plan.png", x=10, y=20, scale=2, rotation=0.1)
    overlay = ImageTransform("plan.png", x=30, y=50, scale=1, rotation=0.4)
    delta = transform_delta(primary, overlay)
    assert delta.compatible
    assert delta.dx == pytest.approx(20)
    assert delta.dy == pytest.approx(30)
    assert delta.scale == pytest.approx(0.5)
    assert delta.rotation == pytest.approx(0.3)


def test_default_frames_are_compatible():
    overlay = ImageTransform(None, x=5)
    delta = transform_delta(IDENTITY_TRANSFORM, overlay)
    assert delta.compatible
    assert delta.dx == 5


def test_different_references_are_not_aligned():
    primary = ImageTransform("a.png", x=10)
    overlay = ImageTransform("b.png", x=90, scale=3)
    delta = transform_delta(primary, overlay)
    assert delta == TransformDelta(compatible=False)
    assert (delta.dx, delta.dy, delta.scale, delta.rotation) == (0.0, 0.0, 1.0, 0.0)


def test_zero_primary_scale_leaves_overlay_unaligned(caplog):
    primary = ImageTransform("a.png", scale=0)
    with caplog.at_level(logging.WARNING, logger="planview"):
        delta = transform_delta(primary, ImageTransform("a.png", scale=2))
    assert delta == TransformDelta(compatible=False)
    assert "zero scale" in caplog.text


def test_delta_matrix_identity():
    np.testing.assert_allclose(delta_matrix(TransformDelta()), np.eye(3))


def test_delta_matrix_scales_then_rotates_then_translates():
    delta = TransformDelta(dx=10, dy=0, scale=2, rotation=math.pi / 2)
    point = delta_matrix(delta) @ np.array([1.0, 0.0, 1.0])
    np.testing.assert_allclose(point, [10.0, 2.0, 1.0], atol=1e-12)


def test_delta_matrix_pivots_at_top_left():
    delta = TransformDelta(dx=7, dy=-3, scale=0.5, rotation=1.2)
    origin = delta_matrix(delta) @ np.array([0.0, 0.0, 1.0])
    np.testing.assert_allclose(origin, [7.0, -3.0, 1.0])


def test_default_frame_against_named_reference_is_not_aligned():
    primary = ImageTransform(None, x=4, y=2, scale=1.5)
    overlay = ImageTransform("site.png", x=40, y=20, scale=3)
    assert transform_delta(primary, overlay) == TransformDelta(
        dx=0.0, dy=0.0, scale=1.0, rotation=0.0, compatible=False
    )
