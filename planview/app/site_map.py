import logging
from pathlib import Path
from typing import Any, List, Optional

from PySide6.QtCore import QPointF, QRectF, Qt, Signal
from PySide6.QtGui import QBrush, QColor, QFont, QPainter, QPen, QPixmap, QPolygonF
from PySide6.QtWidgets import QSizePolicy, QWidget

from .core.metadata import Metadata
from .core.site_map import SiteMapEntry, drawing_at, site_map_entries
from .io.metadata_io import image_file

logger = logging.getLogger(__name__)


class SiteMapWidget(QWidget):
    """
    The root drawing's image with each child drawing's footprint on top.

    Clicking inside a footprint emits ``drawingSelected`` with the child id.
    The image is scaled to the widget width; footprints are authored in the
    root image's natural pixels.
    """

    entries: List[SiteMapEntry]
    pixmap: QPixmap
    selected_id: Optional[str]

    drawingSelected = Signal(str)

    def __init__(
        self, metadata: Metadata, data_dir: Path, parent: Optional[QWidget] = None
    ) -> None:
        super().__init__(parent)
        self.entries = site_map_entries(metadata)
        self.selected_id = None
        root = metadata.root_drawing()
        self.pixmap = QPixmap()
        if root is not None and root.image and self.entries:
            path = image_file(data_dir, root.image)
            self.pixmap = QPixmap(str(path))
            if self.pixmap.isNull():
                logger.warning("Failed to load site map image %s", path)
        self.setSizePolicy(QSizePolicy.Expanding, QSizePolicy.Preferred)
        self.setCursor(Qt.PointingHandCursor)
        self.setVisible(self.has_content())

    def has_content(self) -> bool:
        return bool(self.entries) and not self.pixmap.isNull()

    def set_selected(self, drawing_id: Optional[str]) -> None:
        if drawing_id != self.selected_id:
            self.selected_id = drawing_id
            self.update()

    def hasHeightForWidth(self) -> bool:
        return self.has_content()

    def heightForWidth(self, width: int) -> int:
        if not self.has_content():
            return 0
        return int(width * self.pixmap.height() / self.pixmap.width())

    def _scale(self) -> float:
        if not self.has_content():
            return 1.0
        return self.width() / self.pixmap.width()

    def paintEvent(self, event: Any) -> None:
        if not self.has_content():
            return
        painter = QPainter(self)
        painter.setRenderHint(QPainter.Antialiasing)
        painter.setRenderHint(QPainter.SmoothPixmapTransform)
        scale = self._scale()
        painter.drawPixmap(
            QRectF(0, 0, self.width(), self.pixmap.height() * scale),
            self.pixmap,
            QRectF(self.pixmap.rect()),
        )
        painter.scale(scale, scale)
        font = QFont()
        font.setPixelSize(20)
        font.setBold(True)
        painter.setFont(font)
        for entry in self.entries:
            selected = entry.drawing.id == self.selected_id
            fill = QColor(2, 132, 199) if selected else QColor(14, 165, 233)
            fill.setAlphaF(0.52 if selected else 0.34)
            painter.setPen(QPen(QColor(8, 47, 73) if selected else QColor(12, 74, 110), 6))
            painter.setBrush(QBrush(fill))
            painter.drawPolygon(QPolygonF([QPointF(x, y) for x, y in entry.vertices]))
            cx, cy = entry.label_position
            label_rect = QRectF(cx - 72, cy - 18, 144, 30)
            painter.setPen(Qt.NoPen)
            painter.setBrush(QColor(15, 23, 42, 200))
            painter.drawRoundedRect(label_rect, 8, 8)
            painter.setPen(QColor(248, 250, 252))
            painter.drawText(label_rect, Qt.AlignCenter, entry.drawing.name)
        painter.end()

    def mousePressEvent(self, event: Any) -> None:
        if event.button() != Qt.LeftButton or not self.has_content():
            return
        scale = self._scale()
        pos = event.position()
        drawing = drawing_at(self.entries, pos.x() / scale, pos.y() / scale)
        if drawing is not None:
            self.drawingSelected.emit(drawing.id)
