import logging
from io import BytesIO
from pathlib import Path
from typing import Dict, Optional

from PyQt5.QtCore import QTimer, Qt, pyqtSignal
from PyQt5.QtGui import QPixmap
from PyQt5.QtWidgets import (
    QFileDialog,
    QFrame,
    QGridLayout,
    QHBoxLayout,
    QLabel,
    QMainWindow,
    QMessageBox,
    QPushButton,
    QScrollArea,
    QSpinBox,
    QVBoxLayout,
    QWidget,
)

from CS_Libs.ColorLib.pixel_sampler import DisplayRect
from CS_Libs.GridLib.grid_compositor import display_cell_size
from CS_Libs.ImageLib.image_models import HueDirection, ImageRecord, RgbColor
from CS_Libs.ProjStoreLib.project_store import get_store_path
from CS_Libs.constants import (
    AUTOSAVE_DELAY_MS,
    DEFAULT_WINDOW_HEIGHT,
    DEFAULT_WINDOW_WIDTH,
    IMAGE_FILE_FILTER,
    MAX_GAP,
    MAX_GRID_DIMENSION,
    MAX_WEIGHT,
    MIN_GAP,
    MIN_GRID_DIMENSION,
    MIN_WEIGHT,
    PICKING_BORDER_COLOR,
    SELECTION_BORDER_COLOR,
)
from CS_Libs.errors import ColorSorterError
from CS_Libs.session import EditingWeight, Picking, ColorSorterSession

logger = logging.getLogger(__name__)


def _css_color(color: RgbColor) -> str:
    return f"rgb({color[0]}, {color[1]}, {color[2]})"


class ImageLabel(QLabel):
    """Image display that reports pointer moves and clicks in its own coordinates."""

    pointer_moved = pyqtSignal(str, float, float)
    pointer_clicked = pyqtSignal(str, float, float)

    def __init__(self, record_id: str, parent: Optional[QWidget] = None) -> None:
        super().__init__(parent)
        self.record_id = record_id
        self.setMouseTracking(True)
        self.setAlignment(Qt.AlignCenter)

    def mouseMoveEvent(self, event) -> None:
        self.pointer_moved.emit(self.record_id, float(event.x()), float(event.y()))
        super().mouseMoveEvent(event)

    def mousePressEvent(self, event) -> None:
        if event.button() == Qt.LeftButton:
            self.pointer_clicked.emit(self.record_id, float(event.x()), float(event.y()))
        super().mousePressEvent(event)

    def display_rect(self) -> DisplayRect:
        return DisplayRect(0.0, 0.0, float(self.width()), float(self.height()))


class ColorSorterWindow(QMainWindow):
    def __init__(self, store_dir: Optional[Path] = None) -> None:
        super().__init__()
        self.setWindowTitle("Image Color Sorter")
        self.session = ColorSorterSession()
        self.store_path = get_store_path(store_dir or Path.home() / ".color_sorter")
        self.image_labels: Dict[str, ImageLabel] = {}
        self._pixmap_cache: Dict[str, QPixmap] = {}

        self._autosave_timer = QTimer(self)
        self._autosave_timer.setSingleShot(True)
        self._autosave_timer.setInterval(AUTOSAVE_DELAY_MS)

        self._build_ui()
        self._connect_signals()
        self._restore_on_start()
        self.resize(DEFAULT_WINDOW_WIDTH, DEFAULT_WINDOW_HEIGHT)

    def _build_ui(self) -> None:
        central = QWidget(self)
        self.setCentralWidget(central)

        root = QVBoxLayout(central)
        controls_row = QHBoxLayout()
        actions_row = QHBoxLayout()

        self.spin_rows = QSpinBox()
        self.spin_cols = QSpinBox()
        self.spin_gap = QSpinBox()
        for spin in (self.spin_rows, self.spin_cols):
            spin.setRange(MIN_GRID_DIMENSION, MAX_GRID_DIMENSION)
        self.spin_gap.setRange(MIN_GAP, MAX_GAP)

        self.btn_upload = QPushButton("Upload Images")
        self.btn_direction = QPushButton()
        self.btn_process = QPushButton("Process Images")
        self.btn_delete = QPushButton("Delete Selected")
        self.btn_save = QPushButton("Save Settings")
        self.btn_load = QPushButton("Load Settings")
        self.btn_export = QPushButton("Export Grid")

        self.label_status = QLabel("No images loaded")
        self.label_preview = QLabel()
        self.label_preview.setFixedSize(24, 24)
        self.label_preview.setStyleSheet("border: 1px solid #888;")

        controls_row.addWidget(self.btn_upload)
        controls_row.addWidget(QLabel("Rows"))
        controls_row.addWidget(self.spin_rows)
        controls_row.addWidget(QLabel("Columns"))
        controls_row.addWidget(self.spin_cols)
        controls_row.addWidget(QLabel("Gap"))
        controls_row.addWidget(self.spin_gap)
        controls_row.addWidget(self.btn_direction)
        controls_row.addStretch(1)

        actions_row.addWidget(self.btn_process)
        actions_row.addWidget(self.btn_delete)
        actions_row.addWidget(self.btn_save)
        actions_row.addWidget(self.btn_load)
        actions_row.addWidget(self.label_status)
        actions_row.addWidget(self.label_preview)
        actions_row.addStretch(1)
        actions_row.addWidget(self.btn_export)

        self.grid_container = QWidget()
        self.grid_layout = QGridLayout(self.grid_container)
        self.grid_layout.setContentsMargins(0, 0, 0, 0)

        self.scroll_area = QScrollArea()
        self.scroll_area.setWidgetResizable(True)
        self.scroll_area.setWidget(self.grid_container)

        root.addLayout(controls_row)
        root.addLayout(actions_row)
        root.addWidget(self.scroll_area, stretch=1)

        self._sync_controls()

    def _connect_signals(self) -> None:
        self.btn_upload.clicked.connect(self.upload_images)
        self.btn_direction.clicked.connect(self.toggle_direction)
        self.btn_process.clicked.connect(self.process_images)
        self.btn_delete.clicked.connect(self.delete_selected)
        self.btn_save.clicked.connect(self.save_settings)
        self.btn_load.clicked.connect(self.load_settings)
        self.btn_export.clicked.connect(self.export_grid)
        self.spin_rows.valueChanged.connect(lambda value: self._update_config(rows=value))
        self.spin_cols.valueChanged.connect(lambda value: self._update_config(cols=value))
        self.spin_gap.valueChanged.connect(lambda value: self._update_config(gap=value))
        self._autosave_timer.timeout.connect(self._autosave)

    def _sync_controls(self) -> None:
        config = self.session.config
        for spin, value in ((self.spin_rows, config.rows), (self.spin_cols, config.cols), (self.spin_gap, config.gap)):
            spin.blockSignals(True)
            spin.setValue(value)
            spin.blockSignals(False)

        if config.hue_direction is HueDirection.ASCENDING:
            self.btn_direction.setText("Hue: Ascending")
        else:
            self.btn_direction.setText("Hue: Descending")
        self.btn_export.setEnabled(self.session.is_processed)

    def _restore_on_start(self) -> None:
        try:
            self.session.restore(self.store_path)
        except ColorSorterError as e:
            logger.warning(f"Could not restore settings: {e}")
        self._sync_controls()

    # Actions

    def upload_images(self) -> None:
        file_paths, _ = QFileDialog.getOpenFileNames(self, "Select Images", "", IMAGE_FILE_FILTER)
        if not file_paths:
            return

        try:
            result = self.session.ingest_paths([Path(path_str) for path_str in file_paths])
        except (ColorSorterError, OSError, ValueError) as e:
            self._show_error("Upload Failed", str(e))
            return

        if result.errors:
            lines = [f"{name}: {error}" for name, error in result.errors]
            self._show_error("Some Files Were Skipped", "\n".join(lines))

        self._schedule_autosave()
        self.refresh_grid()

    def process_images(self) -> None:
        try:
            self.session.process()
        except ColorSorterError as e:
            self._show_info("Process Images", str(e))
            return
        self._sync_controls()
        self.refresh_grid()

    def toggle_direction(self) -> None:
        self.session.toggle_direction()
        self._sync_controls()
        self.refresh_grid()

    def _update_config(self, **changes) -> None:
        try:
            self.session.set_config(**changes)
        except ValueError as e:
            self._show_error("Invalid Setting", str(e))
            self._sync_controls()
            return
        self.refresh_grid()

    def delete_selected(self) -> None:
        count = len(self.session.selected_ids)
        if count == 0:
            return

        answer = QMessageBox.question(self, "Delete Images", f"Delete the {count} selected images?")
        if answer != QMessageBox.Yes:
            return

        for record_id in self.session.selected_ids:
            self._pixmap_cache.pop(record_id, None)
        self.session.delete_selected()
        self._schedule_autosave()
        self.refresh_grid()

    def save_settings(self) -> None:
        if self._save():
            self._show_info("Save Settings", "Settings saved.")

    def load_settings(self) -> None:
        try:
            restored = self.session.restore(self.store_path)
        except ColorSorterError as e:
            self._show_error("Load Failed", str(e))
            return

        if not restored:
            self._show_info("Load Settings", "No saved settings found.")
            return

        self._sync_controls()
        self.refresh_grid()
        self._show_info("Load Settings", "Settings loaded. Upload images again to apply saved weights.")

    def export_grid(self) -> None:
        output_dir = QFileDialog.getExistingDirectory(self, "Select Export Folder")
        if not output_dir:
            return

        try:
            output_file = self.session.export(Path(output_dir), cell_size=self._rendered_cell_size())
        except (ColorSorterError, OSError, ValueError) as e:
            self._show_error("Export Failed", str(e))
            return

        self._show_info("Export Grid", f"Exported to {output_file}")

    def _save(self) -> bool:
        try:
            self.session.save(self.store_path)
        except ColorSorterError as e:
            self._show_error(
                "Save Failed",
                f"{e}\nStored data was cleared. Images are kept in memory only; export your result.",
            )
            return False
        return True

    def _schedule_autosave(self) -> None:
        if self.session.records:
            self._autosave_timer.start()

    def _autosave(self) -> None:
        try:
            self.session.save(self.store_path)
        except ColorSorterError as e:
            logger.warning(f"Autosave failed: {e}")

    # Grid rendering

    def _rendered_cell_size(self) -> Optional[tuple]:
        for label in self.image_labels.values():
            if label.width() > 0 and label.height() > 0:
                return label.width(), label.height()
        return None

    def refresh_grid(self) -> None:
        while self.grid_layout.count():
            item = self.grid_layout.takeAt(0)
            widget = item.widget()
            if widget is not None:
                widget.deleteLater()
        self.image_labels = {}

        config = self.session.config
        self.grid_layout.setSpacing(config.gap)
        available_width = max(1, self.scroll_area.viewport().width())
        cell_width, cell_height = display_cell_size(config, available_width)

        records = self.session.visible_records()
        for index, record in enumerate(records):
            row, col = divmod(index, config.cols)
            self.grid_layout.addWidget(self._build_cell(record, cell_width, cell_height), row, col)

        hidden = len(self.session.records) - len(records)
        status = f"{len(self.session.records)} images"
        if hidden > 0:
            status += f" ({hidden} not shown)"
        self.label_status.setText(status)
        self._sync_controls()

    def _build_cell(self, record: ImageRecord, cell_width: int, cell_height: int) -> QWidget:
        cell = QFrame()
        layout = QVBoxLayout(cell)
        layout.setContentsMargins(0, 0, 0, 0)
        layout.setSpacing(2)

        mode = self.session.mode
        label = ImageLabel(record.id)
        label.setFixedSize(cell_width, cell_height)
        label.setPixmap(self._pixmap_for(record).scaled(
            cell_width, cell_height, Qt.AspectRatioMode.IgnoreAspectRatio, Qt.TransformationMode.SmoothTransformation
        ))

        if mode == Picking(record.id):
            label.setCursor(Qt.CrossCursor)
            label.setStyleSheet(f"border: 3px solid {PICKING_BORDER_COLOR};")
        elif record.id in self.session.selected_ids:
            label.setStyleSheet(f"border: 3px solid {SELECTION_BORDER_COLOR};")

        label.pointer_moved.connect(self.on_pointer_moved)
        label.pointer_clicked.connect(self.on_pointer_clicked)
        self.image_labels[record.id] = label

        info_row = QHBoxLayout()
        swatch = QLabel()
        swatch.setFixedSize(16, 16)
        swatch.setStyleSheet(f"background: {_css_color(record.color)}; border: 1px solid #888;")
        btn_weight = QPushButton(f"Weight {record.weight}")
        btn_pick = QPushButton("Pick")
        btn_weight.clicked.connect(lambda _=False, rid=record.id: self.toggle_weight_panel(rid))
        btn_pick.clicked.connect(lambda _=False, rid=record.id: self.start_picking(rid))
        info_row.addWidget(swatch)
        info_row.addWidget(btn_weight)
        info_row.addWidget(btn_pick)

        layout.addWidget(label)
        layout.addLayout(info_row)

        if mode == EditingWeight(record.id):
            weights_row = QHBoxLayout()
            for weight in range(MIN_WEIGHT, MAX_WEIGHT + 1):
                btn = QPushButton(str(weight))
                btn.setCheckable(True)
                btn.setChecked(weight == record.weight)
                btn.clicked.connect(lambda _=False, rid=record.id, w=weight: self.set_weight(rid, w))
                weights_row.addWidget(btn)
            layout.addLayout(weights_row)

        return cell

    def _pixmap_for(self, record: ImageRecord) -> QPixmap:
        pixmap = self._pixmap_cache.get(record.id)
        if pixmap is None:
            pixmap = QPixmap()
            if not pixmap.loadFromData(self._to_png_bytes(record.load_raster()), "PNG"):
                logger.warning(f"Preview failed for {record.name}")
            self._pixmap_cache[record.id] = pixmap
        return pixmap

    def _to_png_bytes(self, image) -> bytes:
        buffer = BytesIO()
        image.save(buffer, format="PNG")
        return buffer.getvalue()

    # Per-image interaction

    def toggle_weight_panel(self, record_id: str) -> None:
        self.session.toggle_weight_panel(record_id)
        self.refresh_grid()

    def set_weight(self, record_id: str, weight: int) -> None:
        self.session.set_weight(record_id, weight)
        self.session.close_weight_panel()
        self._schedule_autosave()
        self.refresh_grid()

    def start_picking(self, record_id: str) -> None:
        self.session.start_picking(record_id)
        self.label_preview.setStyleSheet("border: 1px solid #888;")
        self.refresh_grid()

    def on_pointer_moved(self, record_id: str, x: float, y: float) -> None:
        label = self.image_labels.get(record_id)
        if label is None:
            return
        color = self.session.preview_pick(record_id, (x, y), label.display_rect())
        if color is not None:
            self.label_preview.setStyleSheet(f"background: {_css_color(color)}; border: 1px solid #888;")

    def on_pointer_clicked(self, record_id: str, x: float, y: float) -> None:
        label = self.image_labels.get(record_id)
        if label is None:
            return

        if self.session.commit_pick(record_id, (x, y), label.display_rect()) is not None:
            self.label_preview.setStyleSheet("border: 1px solid #888;")
            self._schedule_autosave()
        else:
            self.session.toggle_selection(record_id)
        self.refresh_grid()

    def resizeEvent(self, event) -> None:
        super().resizeEvent(event)
        if self.session.records:
            self.refresh_grid()

    def _show_info(self, title: str, message: str) -> None:
        QMessageBox.information(self, title, message)

    def _show_error(self, title: str, message: str) -> None:
        QMessageBox.warning(self, title, message)
