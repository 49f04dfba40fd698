import os

import numpy as np
import pytest
from PIL import Image

pytest.importorskip("PySide6")

from PySide6.QtCore import QPointF  # noqa: E402
from PySide6.QtGui import QColor  # noqa: E402
from PySide6.QtWidgets import QApplication  # noqa: E402

from planview.app.core.alignment import TransformDelta, delta_matrix  # noqa: E402
from planview.app.core.selection import SelectionState  # noqa: E402
from planview.app.core.view import resolve_view  # noqa: E402
from planview.app.core.viewport import ViewportController  # noqa: E402
from planview.app.image_viewer import ImageViewer, overlay_qtransform  # noqa: E402
from planview.app.ui_components import RegionPolygonItem  # noqa: E402


@pytest.fixture(scope="module")
def qapp():
    os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")
    app = QApplication.instance()
    if app is None:
        app = QApplication([])
    yield app


@pytest.fixture
def data_dir(tmp_path):
    drawings = tmp_path / "drawings"
    drawings.mkdir()
    for name in ("101-arch.png", "101-arch-r1.png", "101-arch-r2.png", "101-str.png"):
        Image.new("RGB", (40, 20), "white").save(drawings / name)
    return tmp_path


@pytest.mark.parametrize(
    "delta",
    [
        TransformDelta(),
        TransformDelta(dx=7, dy=-3, scale=0.5, rotation=1.2),
        TransformDelta(dx=10, dy=0, scale=2, rotation=np.pi / 2),
    ],
)
def test_overlay_qtransform_matches_delta_matrix(delta):
    transform = overlay_qtransform(delta)
    matrix = delta_matrix(delta)
    for x, y in [(0.0, 0.0), (10.0, 0.0), (3.0, 4.0)]:
        mapped = transform.map(QPointF(x, y))
        expected = matrix @ np.array([x, y, 1.0])
        assert (mapped.x(), mapped.y()) == pytest.approx((expected[0], expected[1]))


def test_pixmap_cache_keeps_only_shown_images(qapp, metadata, data_dir):
    viewer = ImageViewer(ViewportController(), data_dir)
    viewer.show_view(resolve_view(metadata, SelectionState("01", "건축", "", "REV2")))
    assert set(viewer._pixmaps) == {"101-arch-r2.png"}
    viewer.show_view(resolve_view(metadata, SelectionState("01", "건축", "", "REV1")))
    assert set(viewer._pixmaps) == {"101-arch-r1.png"}
    state = SelectionState("01", "건축", "", "REV1", True, "구조")
    viewer.show_view(resolve_view(metadata, state))
    assert set(viewer._pixmaps) == {"101-arch-r1.png", "101-str.png"}
    viewer.show_view(None)
    assert viewer._pixmaps == {}


def test_image_reloads_after_empty_view(qapp, metadata, data_dir):
    viewer = ImageViewer(ViewportController(), data_dir)
    view = resolve_view(metadata, SelectionState("01", "건축", "", "REV2"))
    viewer.show_view(view)
    viewer.show_view(None)
    assert viewer.graphics_view.root_item.pixmap().isNull()
    viewer.show_view(view)
    assert viewer.graphics_view.root_item.pixmap().width() == 40


def test_polygon_item_colors_are_per_instance(qapp):
    first = RegionPolygonItem()
    second = RegionPolygonItem()
    assert first.color == QColor(14, 165, 233)
    first.color.setAlpha(10)
    assert second.color.alpha() == 255
    custom = RegionPolygonItem(color=QColor(255, 0, 0))
    assert custom.color == QColor(255, 0, 0)
