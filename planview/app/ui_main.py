import logging
from typing import List, Optional

from PySide6.QtCore import Qt
from PySide6.QtGui import QAction
from PySide6.QtWidgets import (
    QCheckBox,
    QComboBox,
    QHBoxLayout,
    QLabel,
    QLineEdit,
    QListWidget,
    QListWidgetItem,
    QMainWindow,
    QVBoxLayout,
    QWidget,
)

from .config import ViewerSettings
from .core.metadata import Metadata
from .core.resolver import discipline_names, overlay_candidates, region_names
from .core.selection import (
    SelectDiscipline,
    SelectDrawing,
    SelectionController,
    SelectionEvent,
    SelectOverlayDiscipline,
    SelectRegion,
    SelectRevision,
    ToggleOverlay,
)
from .core.view import DEFAULT_PROJECT_NAME, ResolvedView, breadcrumb, resolve_view
from .core.viewport import ViewportController
from .image_viewer import ImageViewer
from .site_map import SiteMapWidget
from .ui_components import ContextPanel, LabeledSlider, revision_label

logger = logging.getLogger(__name__)


class ControlBar(QWidget):
    """Row of selection combos, overlay toggle and display sliders."""

    def __init__(self, settings: ViewerSettings, parent: Optional[QWidget] = None) -> None:
        super().__init__(parent)
        layout = QVBoxLayout(self)
        layout.setContentsMargins(8, 8, 8, 4)

        selectors = QHBoxLayout()
        self.discipline_combo = QComboBox()
        self.region_combo = QComboBox()
        self.revision_combo = QComboBox()
        self.revision_combo.setMinimumWidth(220)
        selectors.addWidget(QLabel("공종"))
        selectors.addWidget(self.discipline_combo)
        self.region_label = QLabel("영역")
        selectors.addWidget(self.region_label)
        selectors.addWidget(self.region_combo)
        selectors.addWidget(QLabel("리비전"))
        selectors.addWidget(self.revision_combo)
        selectors.addStretch(1)
        layout.addLayout(selectors)

        display = QHBoxLayout()
        self.overlay_check = QCheckBox("겹쳐보기")
        self.overlay_combo = QComboBox()
        self.overlay_opacity = LabeledSlider("투명도", 10, 100, settings.overlay_opacity)
        self.polygon_check = QCheckBox("영역 표시")
        self.polygon_check.setChecked(True)
        self.polygon_opacity = LabeledSlider("영역 농도", 0, 100, settings.polygon_opacity)
        limits = settings.zoom_limits
        self.zoom_slider = LabeledSlider(
            "확대", limits.minimum, limits.maximum, settings.default_zoom
        )
        display.addWidget(self.overlay_check)
        display.addWidget(self.overlay_combo)
        display.addWidget(self.overlay_opacity)
        display.addSpacing(12)
        display.addWidget(self.polygon_check)
        display.addWidget(self.polygon_opacity)
        display.addStretch(1)
        display.addWidget(self.zoom_slider)
        layout.addLayout(display)


def _fill_combo(combo: QComboBox, items: List[tuple], current: str) -> None:
    combo.blockSignals(True)
    combo.clear()
    for text, value in items:
        combo.addItem(text, value)
    index = combo.findData(current)
    combo.setCurrentIndex(index)
    combo.setEnabled(bool(items))
    combo.blockSignals(False)


class MainWindow(QMainWindow):
    """
    Drawing browser: list and site map on the left, viewer in the center,
    context panel on the right.
    """

    settings: ViewerSettings
    metadata: Metadata
    selection: SelectionController
    image_viewer: ImageViewer
    context_panel: ContextPanel
    site_map: SiteMapWidget
    controls: ControlBar
    view: Optional[ResolvedView]

    def __init__(self, settings: ViewerSettings, metadata: Metadata) -> None:
        super().__init__()
        self.settings = settings
        self.metadata = metadata
        self.selection = SelectionController(metadata)
        self.view = None
        self.setWindowTitle(metadata.project.name or DEFAULT_PROJECT_NAME)
        self.setGeometry(100, 100, 1400, 900)

        central_widget = QWidget()
        self.setCentralWidget(central_widget)
        main_layout = QHBoxLayout(central_widget)
        main_layout.setContentsMargins(0, 0, 0, 0)

        sidebar = QWidget()
        sidebar.setFixedWidth(300)
        sidebar_layout = QVBoxLayout(sidebar)
        self.search_edit = QLineEdit()
        self.search_edit.setPlaceholderText("도면 검색")
        self.search_edit.setClearButtonEnabled(True)
        self.site_map = SiteMapWidget(metadata, settings.data_dir)
        self.drawing_list = QListWidget()
        sidebar_layout.addWidget(self.search_edit)
        sidebar_layout.addWidget(self.site_map)
        sidebar_layout.addWidget(self.drawing_list, stretch=1)
        main_layout.addWidget(sidebar)

        center = QWidget()
        center_layout = QVBoxLayout(center)
        center_layout.setContentsMargins(0, 0, 0, 0)
        self.controls = ControlBar(settings)
        self.image_viewer = ImageViewer(
            ViewportController(zoom=settings.default_zoom, limits=settings.zoom_limits),
            settings.data_dir,
        )
        self.image_viewer.set_overlay_opacity(settings.overlay_opacity)
        self.image_viewer.set_polygon_opacity(settings.polygon_opacity)
        center_layout.addWidget(self.controls)
        center_layout.addWidget(self.image_viewer, stretch=1)
        main_layout.addWidget(center, stretch=4)

        self.context_panel = ContextPanel()
        main_layout.addWidget(self.context_panel, stretch=1)

        self.search_edit.textChanged.connect(self.populate_drawing_list)
        self.drawing_list.itemClicked.connect(self._on_drawing_clicked)
        self.site_map.drawingSelected.connect(self.select_drawing)
        self.controls.discipline_combo.currentIndexChanged.connect(
            lambda _: self._dispatch_combo(self.controls.discipline_combo, SelectDiscipline)
        )
        self.controls.region_combo.currentIndexChanged.connect(
            lambda _: self._dispatch_combo(self.controls.region_combo, SelectRegion)
        )
        self.controls.revision_combo.currentIndexChanged.connect(
            lambda _: self._dispatch_combo(self.controls.revision_combo, SelectRevision)
        )
        self.controls.overlay_combo.currentIndexChanged.connect(
            lambda _: self._dispatch_combo(
                self.controls.overlay_combo, SelectOverlayDiscipline
            )
        )
        self.controls.overlay_check.toggled.connect(
            lambda checked: self.dispatch(ToggleOverlay(checked))
        )
        self.controls.overlay_opacity.valueChanged.connect(
            self.image_viewer.set_overlay_opacity
        )
        self.controls.polygon_check.toggled.connect(self.image_viewer.set_polygon_visible)
        self.controls.polygon_opacity.valueChanged.connect(
            self.image_viewer.set_polygon_opacity
        )
        self.controls.zoom_slider.valueChanged.connect(self.image_viewer.set_zoom)
        self.image_viewer.zoomChanged.connect(self.controls.zoom_slider.set_value)
        self.image_viewer.imageLoadFailed.connect(
            lambda message: self.statusBar().showMessage(message, 5000)
        )
        self.context_panel.revisionClicked.connect(
            lambda version: self.dispatch(SelectRevision(version))
        )
        self.context_panel.closeRequested.connect(
            lambda: self.action_show_context.setChecked(False)
        )

        self._init_menu_bar()
        self.populate_drawing_list()
        self.refresh()

    def _init_menu_bar(self) -> None:
        menu_bar = self.menuBar()

        file_menu = menu_bar.addMenu("파일")
        self.action_quit = QAction("종료", self)
        self.action_quit.setShortcut("Ctrl+Q")
        self.action_quit.triggered.connect(self.close)
        file_menu.addAction(self.action_quit)

        view_menu = menu_bar.addMenu("보기")
        self.action_show_context = QAction("컨텍스트 패널", self)
        self.action_show_context.setCheckable(True)
        self.action_show_context.setChecked(True)
        self.action_show_context.toggled.connect(self.context_panel.setVisible)
        view_menu.addAction(self.action_show_context)

    def populate_drawing_list(self, query: str = "") -> None:
        self.drawing_list.blockSignals(True)
        self.drawing_list.clear()
        for drawing in self.metadata.filter_drawings(query):
            item = QListWidgetItem(drawing.name)
            item.setData(Qt.UserRole, drawing.id)
            self.drawing_list.addItem(item)
            if drawing.id == self.selection.state.drawing_id:
                item.setSelected(True)
        self.drawing_list.blockSignals(False)

    def _on_drawing_clicked(self, item: QListWidgetItem) -> None:
        self.select_drawing(item.data(Qt.UserRole))

    def select_drawing(self, drawing_id: str) -> None:
        logger.debug("Drawing %s selected", drawing_id)
        self.dispatch(SelectDrawing(drawing_id))

    def _dispatch_combo(self, combo: QComboBox, event_type: type) -> None:
        value = combo.currentData()
        if value is not None:
            self.dispatch(event_type(value))

    def dispatch(self, event: SelectionEvent) -> None:
        if self.selection.dispatch(event):
            self.refresh()

    def refresh(self) -> None:
        """Resolve the current selection and push it into every widget."""
        state = self.selection.state
        self.view = resolve_view(self.metadata, state)
        drawing = self.view.drawing if self.view is not None else None

        controls = self.controls
        _fill_combo(
            controls.discipline_combo,
            [(name, name) for name in discipline_names(drawing)],
            state.discipline,
        )
        regions = region_names(self.view.discipline if self.view is not None else None)
        _fill_combo(controls.region_combo, [(name, name) for name in regions], state.region)
        controls.region_label.setVisible(bool(regions))
        controls.region_combo.setVisible(bool(regions))
        revisions = self.view.revisions if self.view is not None else ()
        latest = self.view.latest if self.view is not None else None
        _fill_combo(
            controls.revision_combo,
            [(revision_label(r, latest), r.version) for r in revisions],
            state.revision,
        )
        candidates = overlay_candidates(drawing, state.discipline)
        _fill_combo(
            controls.overlay_combo,
            [(name, name) for name in candidates],
            state.overlay_discipline,
        )
        controls.overlay_combo.setEnabled(state.overlay_enabled and bool(candidates))
        controls.overlay_check.blockSignals(True)
        controls.overlay_check.setChecked(state.overlay_enabled)
        controls.overlay_check.setEnabled(bool(candidates))
        controls.overlay_check.blockSignals(False)
        controls.overlay_opacity.setEnabled(self.view is not None and self.view.overlay is not None)
        has_polygon = self.view is not None and self.view.has_polygon
        controls.polygon_check.setEnabled(has_polygon)
        controls.polygon_opacity.setEnabled(has_polygon)

        for row in range(self.drawing_list.count()):
            item = self.drawing_list.item(row)
            item.setSelected(item.data(Qt.UserRole) == state.drawing_id)
        self.site_map.set_selected(state.drawing_id)

        self.image_viewer.show_view(self.view)
        self.context_panel.show_view(
            breadcrumb(self.metadata, state, self.view), state.discipline, self.view
        )
        if self.view is not None and not self.view.image:
            self.statusBar().showMessage("표시할 이미지가 없습니다", 5000)
