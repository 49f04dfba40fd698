import logging
from pathlib import Path
from typing import Any, Dict, Optional

from PySide6.QtCore import QPointF, QRectF, Qt, Signal
from PySide6.QtGui import QPainter, QPixmap, QTransform
from PySide6.QtWidgets import (
    QGraphicsPixmapItem,
    QGraphicsScene,
    QGraphicsView,
    QVBoxLayout,
    QWidget,
)

from .core.alignment import TransformDelta, delta_matrix
from .core.polygon import polygon_scale_for, scale_vertices
from .core.view import ResolvedView
from .core.viewport import (
    PRIMARY,
    REFERENCE,
    ContainerResized,
    ImageChanged,
    ImageDimensionsKnown,
    PointerDown,
    PointerMove,
    PointerUp,
    SetZoom,
    ViewportController,
    ViewportEvent,
    Wheel,
)
from .io.images import measure_image
from .io.metadata_io import image_file
from .ui_components import RegionPolygonItem

logger = logging.getLogger(__name__)


def overlay_qtransform(delta: TransformDelta) -> QTransform:
    """Build translate -> rotate -> scale about the overlay's top-left corner."""
    m = delta_matrix(delta)
    # QTransform uses the row-vector convention, so the linear part is transposed
    return QTransform(m[0, 0], m[1, 0], m[0, 1], m[1, 1], m[0, 2], m[1, 2])


class PanZoomGraphicsView(QGraphicsView):
    """
    Graphics view whose pan and zoom are owned by a ViewportController.

    Scene coordinates equal viewport pixels; the pan/zoom transform is set on
    ``root_item`` (the primary image), and the overlay and polygon are its
    children so they share the primary image's pixel space.
    """

    scene: QGraphicsScene
    root_item: QGraphicsPixmapItem
    controller: ViewportController

    viewportChanged = Signal()

    def __init__(
        self, controller: ViewportController, parent: Optional[QWidget] = None
    ) -> None:
        super().__init__(parent)
        self.scene = QGraphicsScene(self)
        self.setScene(self.scene)
        self.setRenderHint(QPainter.Antialiasing)
        self.setRenderHint(QPainter.SmoothPixmapTransform)
        self.setHorizontalScrollBarPolicy(Qt.ScrollBarAlwaysOff)
        self.setVerticalScrollBarPolicy(Qt.ScrollBarAlwaysOff)
        self.setTransformationAnchor(QGraphicsView.NoAnchor)
        self.setResizeAnchor(QGraphicsView.NoAnchor)
        self.setAlignment(Qt.AlignLeft | Qt.AlignTop)
        self.setStyleSheet("background-color: #e2e8f0; border: none")
        self.controller = controller
        self.root_item = QGraphicsPixmapItem()
        self.root_item.setTransformationMode(Qt.SmoothTransformation)
        self.scene.addItem(self.root_item)
        self.apply_state()

    def dispatch(self, event: ViewportEvent) -> None:
        if self.controller.dispatch(event):
            self.apply_state()
            self.viewportChanged.emit()

    def apply_state(self) -> None:
        state = self.controller.state
        self.root_item.setTransform(
            QTransform(state.scale, 0.0, 0.0, state.scale, state.pan[0], state.pan[1])
        )

    def resizeEvent(self, event: Any) -> None:
        super().resizeEvent(event)
        size = self.viewport().size()
        self.setSceneRect(QRectF(0, 0, size.width(), size.height()))
        self.dispatch(ContainerResized(size.width(), size.height()))

    def mousePressEvent(self, event: Any) -> None:
        if event.button() == Qt.LeftButton:
            pos = event.position()
            self.dispatch(PointerDown(pos.x(), pos.y()))
            self.viewport().setCursor(Qt.ClosedHandCursor)
        event.accept()

    def mouseMoveEvent(self, event: Any) -> None:
        pos = event.position()
        self.dispatch(PointerMove(pos.x(), pos.y()))
        event.accept()

    def mouseReleaseEvent(self, event: Any) -> None:
        self.dispatch(PointerUp())
        self.viewport().unsetCursor()
        event.accept()

    def leaveEvent(self, event: Any) -> None:
        self.dispatch(PointerUp())
        self.viewport().unsetCursor()
        super().leaveEvent(event)

    def wheelEvent(self, event: Any) -> None:
        pos = event.position()
        self.dispatch(Wheel(pos.x(), pos.y(), event.angleDelta().y()))
        event.accept()


class ImageViewer(QWidget):
    """
    Displays a ResolvedView: primary image, aligned overlay and region polygon.
    """

    data_dir: Path
    graphics_view: PanZoomGraphicsView
    overlay_item: QGraphicsPixmapItem
    polygon_item: RegionPolygonItem
    view: Optional[ResolvedView]

    imageLoadFailed = Signal(str)
    zoomChanged = Signal(int)

    def __init__(
        self, controller: ViewportController, data_dir: Path, parent: Optional[QWidget] = None
    ) -> None:
        super().__init__(parent)
        self.data_dir = Path(data_dir)
        self.view = None
        self.overlay_opacity = 0.55
        self.polygon_visible = True
        self._pixmaps: Dict[str, QPixmap] = {}
        layout = QVBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)
        self.graphics_view = PanZoomGraphicsView(controller)
        layout.addWidget(self.graphics_view)
        self.overlay_item = QGraphicsPixmapItem(self.graphics_view.root_item)
        self.overlay_item.setTransformationMode(Qt.SmoothTransformation)
        self.overlay_item.setZValue(1)
        self.overlay_item.setVisible(False)
        self.polygon_item = RegionPolygonItem(parent=self.graphics_view.root_item)
        self.polygon_item.setVisible(False)
        self._last_zoom = controller.state.zoom
        self.graphics_view.viewportChanged.connect(self._on_viewport_changed)

    @property
    def controller(self) -> ViewportController:
        return self.graphics_view.controller

    def _pixmap(self, filename: str) -> QPixmap:
        pixmap = self._pixmaps.get(filename)
        if pixmap is None:
            path = image_file(self.data_dir, filename)
            pixmap = QPixmap(str(path))
            if pixmap.isNull():
                logger.warning("Failed to load image %s", path)
                self.imageLoadFailed.emit(f"이미지를 불러오지 못했습니다: {filename}")
            # failures stay cached while the view shows the image
            self._pixmaps[filename] = pixmap
        return pixmap

    def _retain(self, *filenames: str) -> None:
        """Drop cached pixmaps the current view no longer shows."""
        keep = set(filenames)
        for name in [n for n in self._pixmaps if n not in keep]:
            del self._pixmaps[name]

    def show_view(self, view: Optional[ResolvedView]) -> None:
        self.view = view
        if view is None:
            self.graphics_view.root_item.setPixmap(QPixmap())
            self.overlay_item.setVisible(False)
            self.polygon_item.setVisible(False)
            self._pixmaps.clear()
            self.graphics_view.dispatch(ImageChanged(None))
            return
        state = self.controller.state
        reference = view.transform.relative_to
        image_changed = view.image != state.image
        reference_changed = reference != state.reference
        self.graphics_view.dispatch(ImageChanged(view.image, reference))
        if image_changed:
            pixmap = self._pixmap(view.image) if view.image else QPixmap()
            self.graphics_view.root_item.setPixmap(pixmap)
            if not pixmap.isNull():
                self.graphics_view.dispatch(
                    ImageDimensionsKnown(PRIMARY, pixmap.width(), pixmap.height())
                )
        if reference_changed and reference:
            width, height = measure_image(image_file(self.data_dir, reference))
            self.graphics_view.dispatch(ImageDimensionsKnown(REFERENCE, width, height))
        self.update_overlay()
        self.update_polygon()
        self._retain(view.image, view.overlay.image if view.overlay else "")

    def update_overlay(self) -> None:
        overlay = self.view.overlay if self.view is not None else None
        if overlay is None or not overlay.image:
            self.overlay_item.setVisible(False)
            return
        self.overlay_item.setPixmap(self._pixmap(overlay.image))
        self.overlay_item.setTransform(overlay_qtransform(overlay.delta))
        self.overlay_item.setOpacity(self.overlay_opacity)
        self.overlay_item.setVisible(True)

    def update_polygon(self) -> None:
        if self.view is None or not self.view.has_polygon:
            self.polygon_item.setVisible(False)
            return
        state = self.controller.state
        factors = polygon_scale_for(
            self.view.transform, state.reference_size, state.primary_size
        )
        points = scale_vertices(self.view.polygon.vertices, factors)
        self.polygon_item.set_points([QPointF(x, y) for x, y in points])
        self.polygon_item.setVisible(self.polygon_visible)

    def set_overlay_opacity(self, percent: int) -> None:
        self.overlay_opacity = percent / 100.0
        self.overlay_item.setOpacity(self.overlay_opacity)

    def set_polygon_visible(self, visible: bool) -> None:
        self.polygon_visible = visible
        self.update_polygon()

    def set_polygon_opacity(self, percent: int) -> None:
        self.polygon_item.set_fill_opacity(percent / 100.0)

    def set_zoom(self, value: int) -> None:
        self.graphics_view.dispatch(SetZoom(value))

    def _on_viewport_changed(self) -> None:
        self.update_polygon()
        zoom = self.controller.state.zoom
        if zoom != self._last_zoom:
            self._last_zoom = zoom
            self.zoomChanged.emit(zoom)
