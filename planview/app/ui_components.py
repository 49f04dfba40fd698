from typing import Any, List, Optional, Sequence

from PySide6.QtCore import QPointF, QRectF, Qt, Signal
from PySide6.QtGui import QBrush, QColor, QPainter, QPen, QPolygonF
from PySide6.QtWidgets import (
    QFormLayout,
    QFrame,
    QGraphicsItem,
    QHBoxLayout,
    QLabel,
    QListWidget,
    QListWidgetItem,
    QPushButton,
    QSlider,
    QVBoxLayout,
    QWidget,
)

from .core.metadata import Revision
from .core.view import ResolvedView

NO_REFERENCE_TEXT = "기준 없음(기본 좌표계)"
NO_REVISION_TEXT = "리비전 정보 없음"
NO_CHANGES_TEXT = "초기 설계 또는 변경 없음"
ALIGNED_TEXT = "자동 정렬 적용"
MISALIGNED_TEXT = "기준 이미지 불일치"
LATEST_MARKER = "최신"


class RegionPolygonItem(QGraphicsItem):
    """
    Filled polygon marking the active region on the primary image.
    """

    points: List[QPointF]
    color: QColor
    pen_w: float
    fill_opacity: float

    def __init__(
        self,
        points: Optional[List[QPointF]] = None,
        color: Optional[QColor] = None,
        stroke: Optional[QColor] = None,
        pen_w: float = 8,
        parent: Optional[QGraphicsItem] = None,
    ) -> None:
        super().__init__(parent)
        self.points = list(points) if points else []
        self.color = QColor(color) if color is not None else QColor(14, 165, 233)
        self.stroke = QColor(stroke) if stroke is not None else QColor(3, 105, 161)
        self.pen_w = pen_w
        self.fill_opacity = 0.35
        self.setZValue(2)

    def set_points(self, points: Sequence[QPointF]) -> None:
        self.prepareGeometryChange()
        self.points = list(points)
        self.update()

    def set_fill_opacity(self, opacity: float) -> None:
        self.fill_opacity = max(0.0, min(1.0, opacity))
        self.update()

    def boundingRect(self) -> QRectF:
        if not self.points:
            return QRectF()
        xs = [p.x() for p in self.points]
        ys = [p.y() for p in self.points]
        min_x, max_x = min(xs), max(xs)
        min_y, max_y = min(ys), max(ys)
        margin = self.pen_w
        return QRectF(
            min_x - margin,
            min_y - margin,
            (max_x - min_x) + 2 * margin,
            (max_y - min_y) + 2 * margin,
        )

    def paint(self, painter: QPainter, option: Any, widget: Optional[QWidget]) -> None:
        if len(self.points) < 3:
            return
        painter.setRenderHint(QPainter.Antialiasing)
        stroke = QColor(self.stroke)
        stroke.setAlphaF(0.9)
        fill = QColor(self.color)
        fill.setAlphaF(self.fill_opacity)
        painter.setPen(QPen(stroke, self.pen_w))
        painter.setBrush(QBrush(fill))
        painter.drawPolygon(QPolygonF(self.points))


class LabeledSlider(QWidget):
    """Horizontal slider with a caption showing its value as a percentage."""

    valueChanged = Signal(int)

    def __init__(
        self,
        caption: str,
        minimum: int,
        maximum: int,
        value: int,
        parent: Optional[QWidget] = None,
    ) -> None:
        super().__init__(parent)
        self.caption = caption
        layout = QHBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)
        self.label = QLabel()
        self.slider = QSlider(Qt.Horizontal)
        self.slider.setRange(minimum, maximum)
        self.slider.setValue(value)
        self.slider.setFixedWidth(128)
        layout.addWidget(self.label)
        layout.addWidget(self.slider)
        self._update_label(value)
        self.slider.valueChanged.connect(self._on_value_changed)

    def value(self) -> int:
        return self.slider.value()

    def set_value(self, value: int) -> None:
        self.slider.blockSignals(True)
        self.slider.setValue(value)
        self.slider.blockSignals(False)
        self._update_label(self.slider.value())

    def _update_label(self, value: int) -> None:
        self.label.setText(f"{self.caption} {value}%")

    def _on_value_changed(self, value: int) -> None:
        self._update_label(value)
        self.valueChanged.emit(value)


def revision_label(revision: Revision, latest: Optional[Revision]) -> str:
    text = f"{revision.version} / {revision.date}"
    if latest is not None and revision.version == latest.version:
        text += f" / {LATEST_MARKER}"
    return text


class ContextPanel(QFrame):
    """
    Side panel describing the current selection.

    Shows the breadcrumb, the resolved revision details, the overlay
    alignment status and the revision history of the current collection.
    """

    revisionClicked = Signal(str)
    closeRequested = Signal()

    def __init__(self, parent: Optional[QWidget] = None) -> None:
        super().__init__(parent)
        self.setMinimumWidth(280)
        layout = QVBoxLayout(self)
        header = QHBoxLayout()
        title = QLabel("현재 컨텍스트")
        title.setStyleSheet("font-weight: 600; font-size: 15px")
        self.close_btn = QPushButton("×")
        self.close_btn.setFixedSize(28, 28)
        self.close_btn.setToolTip("컨텍스트 닫기")
        self.close_btn.clicked.connect(self.closeRequested.emit)
        header.addWidget(title)
        header.addStretch(1)
        header.addWidget(self.close_btn)
        layout.addLayout(header)

        self.breadcrumb_label = QLabel()
        self.breadcrumb_label.setWordWrap(True)
        self.breadcrumb_label.setStyleSheet(
            "background-color: #f0f9ff; border: 1px solid #bae6fd; padding: 6px"
        )
        layout.addWidget(self.breadcrumb_label)

        form = QFormLayout()
        self.drawing_label = QLabel()
        self.discipline_label = QLabel()
        self.revision_label = QLabel()
        self.description_label = QLabel()
        self.changes_label = QLabel()
        self.reference_label = QLabel()
        self.polygon_label = QLabel()
        for label in (self.description_label, self.changes_label):
            label.setWordWrap(True)
        form.addRow("현재 도면", self.drawing_label)
        form.addRow("현재 공종", self.discipline_label)
        form.addRow("현재 리비전", self.revision_label)
        form.addRow("주요 설명", self.description_label)
        form.addRow("변경점", self.changes_label)
        form.addRow("기준 정렬", self.reference_label)
        form.addRow("영역 표시", self.polygon_label)
        layout.addLayout(form)

        self.overlay_box = QFrame()
        self.overlay_box.setStyleSheet(
            "QFrame { background-color: #f1f5f9; border: 1px solid #e2e8f0 }"
        )
        overlay_layout = QVBoxLayout(self.overlay_box)
        overlay_title = QLabel("겹쳐보기 상태")
        overlay_title.setStyleSheet("font-weight: 600")
        self.overlay_discipline_label = QLabel()
        self.overlay_revision_label = QLabel()
        self.overlay_alignment_label = QLabel()
        overlay_layout.addWidget(overlay_title)
        overlay_layout.addWidget(self.overlay_discipline_label)
        overlay_layout.addWidget(self.overlay_revision_label)
        overlay_layout.addWidget(self.overlay_alignment_label)
        layout.addWidget(self.overlay_box)

        history_title = QLabel("리비전 이력")
        history_title.setStyleSheet("font-weight: 600")
        layout.addWidget(history_title)
        self.revision_list = QListWidget()
        self.revision_list.itemClicked.connect(self._on_item_clicked)
        layout.addWidget(self.revision_list, stretch=1)

    def show_view(
        self,
        breadcrumb: Sequence[str],
        discipline_name: str,
        view: Optional[ResolvedView],
    ) -> None:
        self.breadcrumb_label.setText(" / ".join(breadcrumb))
        revision = view.revision if view is not None else None
        self.drawing_label.setText(view.drawing.name if view is not None else "-")
        self.discipline_label.setText(discipline_name or "-")
        self.revision_label.setText(
            f"{revision.version} ({revision.date})" if revision is not None else "-"
        )
        self.description_label.setText(
            revision.description if revision is not None else NO_REVISION_TEXT
        )
        self.changes_label.setText(
            ", ".join(revision.changes)
            if revision is not None and revision.changes
            else NO_CHANGES_TEXT
        )
        relative_to = view.transform.relative_to if view is not None else None
        self.reference_label.setText(relative_to or NO_REFERENCE_TEXT)
        has_polygon = view is not None and view.has_polygon
        self.polygon_label.setText("표시 중(좌표 스케일 보정)" if has_polygon else "해당 없음")

        overlay = view.overlay if view is not None else None
        self.overlay_box.setVisible(overlay is not None)
        if overlay is not None:
            overlay_revision = overlay.revision.version if overlay.revision else "없음"
            self.overlay_discipline_label.setText(f"대상 공종: {overlay.discipline_name}")
            self.overlay_revision_label.setText(f"대상 리비전: {overlay_revision}")
            self.overlay_alignment_label.setText(
                "정렬 기준: "
                + (ALIGNED_TEXT if overlay.delta.compatible else MISALIGNED_TEXT)
            )
            self.overlay_alignment_label.setStyleSheet(
                "" if overlay.delta.compatible else "color: #b45309; font-weight: 600"
            )

        self.revision_list.clear()
        if view is None:
            return
        for item_revision in view.revisions:
            item = QListWidgetItem(revision_label(item_revision, view.latest))
            item.setData(Qt.UserRole, item_revision.version)
            self.revision_list.addItem(item)
            if revision is not None and item_revision.version == revision.version:
                item.setSelected(True)

    def _on_item_clicked(self, item: QListWidgetItem) -> None:
        self.revisionClicked.emit(item.data(Qt.UserRole))
