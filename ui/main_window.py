from __future__ import annotations
import logging
import os
from pathlib import Path
from typing import Callable, Optional
import numpy as np

from PySide6.QtCore import Qt, QThreadPool
from PySide6.QtGui import QAction, QActionGroup, QImage, QKeySequence, QIcon
from PySide6.QtWidgets import (
    QMainWindow, QWidget, QFileDialog, QVBoxLayout, QHBoxLayout, QLabel,
    QSpinBox, QSlider, QCheckBox, QPushButton, QMessageBox, QDockWidget,
    QGroupBox, QScrollArea, QProgressDialog
)

from core.action_script import ActionScriptError, action_script_filename
from core.batch import ExportResult
from core.io import ImageDecodeError, is_image_path, load_images
from core.session import EditSession
from core.state import (
    BRIGHTNESS_RANGE, CONTRAST_RANGE, HUE_RANGE, MAX_TOLERANCE, SATURATION_RANGE,
    SHARPNESS_RANGE, VIEW_CUSTOM_ZOOM, VIEW_FIT_TO_WINDOW, VIEW_MODES, ZOOM_LEVELS,
    RGBAColor,
)
from ui.canvas_widget import CanvasWidget
from ui.color_pick_widget import ColorPickRow
from ui.workers import ApplyToAllWorker, ExportWorker

logger = logging.getLogger(__name__)

DROPPER_TRANSPARENCY = "transparency"
DROPPER_COLOR_CHANGE = "colorChange"
DROPPER_UNAFFECTED = "unaffected"


def np_rgba_to_qimage(arr: np.ndarray) -> QImage:
    h, w = arr.shape[:2]
    data = np.ascontiguousarray(arr).tobytes()
    qimg = QImage(data, w, h, w * 4, QImage.Format_RGBA8888)
    # Important: keep a copy because Python-owned bytes may be freed
    return qimg.copy()


class MainWindow(QMainWindow):
    def __init__(self, logo_path: Optional[Path] = None):
        super().__init__()
        self._logo_path = logo_path or Path(__file__).resolve().parent.parent / "assets" / "Logo.png"
        if self._logo_path.exists():
            self.setWindowIcon(QIcon(str(self._logo_path)))
        self.setWindowTitle("PixTint v0.1")

        self.session = EditSession()
        self._preview_rgba: Optional[np.ndarray] = None
        self._dropper_target: Optional[str] = None
        self._view_mode = VIEW_FIT_TO_WINDOW
        self._zoom = 1.0
        self._render_workers = max(1, os.cpu_count() or 1)
        self._pool = QThreadPool.globalInstance()
        self._active_job = None
        self._progress: Optional[QProgressDialog] = None

        self.canvas = CanvasWidget(
            on_pick_at_image_pos=self._pick_color_at_image_xy,
            on_zoom_changed=self._on_canvas_zoom_changed,
        )

        central = QWidget()
        lay = QVBoxLayout()
        lay.addWidget(self.canvas)
        central.setLayout(lay)
        self.setCentralWidget(central)

        self._build_menu()
        self._build_controls_dock()

        self.session.add_listener(self._on_session_changed)

        self.setAcceptDrops(True)
        self.resize(1200, 800)
        self._on_session_changed()

    # ---------------------------
    # Menu / Actions
    # ---------------------------
    def _build_menu(self) -> None:
        open_act = QAction("Open Images…", self)
        open_act.setShortcut(QKeySequence.StandardKey.Open)
        open_act.triggered.connect(self.open_files)

        self._act_export = QAction("Save Images…", self)
        self._act_export.setShortcut(QKeySequence.StandardKey.Save)
        self._act_export.triggered.connect(self.save_images)

        load_actions_act = QAction("Load Action Script…", self)
        load_actions_act.triggered.connect(self.load_actions)

        self._act_save_actions = QAction("Save Action Script…", self)
        self._act_save_actions.triggered.connect(self.save_actions)

        quit_act = QAction("Quit", self)
        quit_act.setShortcut(QKeySequence.StandardKey.Quit)
        quit_act.triggered.connect(self.close)

        self._act_undo_tr = QAction("Undo Transparency", self)
        self._act_undo_tr.setShortcut(QKeySequence.StandardKey.Undo)
        self._act_undo_tr.triggered.connect(self.session.undo_transparency)
        self._act_redo_tr = QAction("Redo Transparency", self)
        self._act_redo_tr.setShortcut(QKeySequence.StandardKey.Redo)
        self._act_redo_tr.triggered.connect(self.session.redo_transparency)
        self._act_undo_cc = QAction("Undo Color Change", self)
        self._act_undo_cc.setShortcut("Ctrl+Alt+Z")
        self._act_undo_cc.triggered.connect(self.session.undo_color_change)
        self._act_redo_cc = QAction("Redo Color Change", self)
        self._act_redo_cc.setShortcut("Ctrl+Alt+Y")
        self._act_redo_cc.triggered.connect(self.session.redo_color_change)

        mfile = self.menuBar().addMenu("File")
        mfile.addAction(open_act)
        mfile.addAction(self._act_export)
        mfile.addSeparator()
        mfile.addAction(load_actions_act)
        mfile.addAction(self._act_save_actions)
        mfile.addSeparator()
        mfile.addAction(quit_act)

        medit = self.menuBar().addMenu("Edit")
        medit.addAction(self._act_undo_tr)
        medit.addAction(self._act_redo_tr)
        medit.addSeparator()
        medit.addAction(self._act_undo_cc)
        medit.addAction(self._act_redo_cc)

        mview = self.menuBar().addMenu("View")
        mode_group = QActionGroup(self)
        self._view_mode_actions: dict[str, QAction] = {}
        for mode in VIEW_MODES:
            act = QAction(mode, self)
            act.setCheckable(True)
            act.setChecked(mode == self._view_mode)
            act.triggered.connect(lambda _=False, m=mode: self._set_view_mode(m))
            mode_group.addAction(act)
            mview.addAction(act)
            self._view_mode_actions[mode] = act
        mzoom = mview.addMenu("Zoom")
        for level in ZOOM_LEVELS:
            act = QAction(f"{int(round(level * 100))}%", self)
            act.triggered.connect(lambda _=False, z=level: self._set_zoom(z))
            mzoom.addAction(act)
        reset_view = QAction("Reset Pan", self)
        reset_view.triggered.connect(self.canvas.reset_view)
        mview.addSeparator()
        mview.addAction(reset_view)

    # ---------------------------
    # Controls dock
    # ---------------------------
    def _build_controls_dock(self) -> None:
        dock = QDockWidget("Controls", self)
        dock.setAllowedAreas(Qt.LeftDockWidgetArea | Qt.RightDockWidgetArea)

        scroll = QScrollArea()
        scroll.setWidgetResizable(True)
        panel = QWidget()
        v = QVBoxLayout(panel)

        g_frames, gl_frames = self._make_group("Frames")
        frame_row = QHBoxLayout()
        self.prev_frame_btn = QPushButton("◀")
        self.prev_frame_btn.clicked.connect(lambda: self.session.set_frame(self.session.current_index - 1))
        self.frame_label = QLabel("No image")
        self.frame_label.setAlignment(Qt.AlignCenter)
        self.next_frame_btn = QPushButton("▶")
        self.next_frame_btn.clicked.connect(lambda: self.session.set_frame(self.session.current_index + 1))
        frame_row.addWidget(self.prev_frame_btn)
        frame_row.addWidget(self.frame_label, 1)
        frame_row.addWidget(self.next_frame_btn)
        gl_frames.addLayout(frame_row)
        v.addWidget(g_frames)

        # Transparency
        g_tr, gl_tr = self._make_group("Transparency")
        self.tr_pick = ColorPickRow(
            "Transparent Color",
            on_eyedropper_toggled=lambda on: self._set_dropper(DROPPER_TRANSPARENCY if on else None),
            on_color_chosen=lambda c: self.session.set_transparency_staging(color=c),
        )
        gl_tr.addWidget(self.tr_pick)
        self.tr_tol, self.tr_tol_spin = self._add_slider_row(
            gl_tr, "Tolerance", (0, MAX_TOLERANCE),
            lambda val: self.session.set_transparency_staging(tolerance=val),
        )
        self.tr_apply_btn, self.tr_undo_btn, self.tr_redo_btn = self._add_history_buttons(
            gl_tr,
            self.session.apply_transparency,
            self.session.undo_transparency,
            self.session.redo_transparency,
            self.session.reset_transparency_staging,
        )
        self.tr_history_label = QLabel()
        gl_tr.addWidget(self.tr_history_label)
        v.addWidget(g_tr)

        # Color change
        g_cc, gl_cc = self._make_group("Color Change")
        self.cc_pick = ColorPickRow(
            "Target Color",
            on_eyedropper_toggled=lambda on: self._set_dropper(DROPPER_COLOR_CHANGE if on else None),
            on_color_chosen=lambda c: self.session.set_color_change_staging(target=c),
        )
        gl_cc.addWidget(self.cc_pick)
        self.cc_tol, self.cc_tol_spin = self._add_slider_row(
            gl_cc, "Tolerance", (0, MAX_TOLERANCE),
            lambda val: self.session.set_color_change_staging(tolerance=val),
        )
        self.cc_hue, self.cc_hue_spin = self._add_slider_row(
            gl_cc, "Hue", HUE_RANGE, lambda val: self.session.set_color_change_staging(hue=val)
        )
        self.cc_sat, self.cc_sat_spin = self._add_slider_row(
            gl_cc, "Saturation", SATURATION_RANGE,
            lambda val: self.session.set_color_change_staging(saturation=val),
        )
        self.cc_bri, self.cc_bri_spin = self._add_slider_row(
            gl_cc, "Brightness", BRIGHTNESS_RANGE,
            lambda val: self.session.set_color_change_staging(brightness=val),
        )
        self.cc_con, self.cc_con_spin = self._add_slider_row(
            gl_cc, "Contrast", CONTRAST_RANGE,
            lambda val: self.session.set_color_change_staging(contrast=val),
        )
        self.cc_sharp, self.cc_sharp_spin = self._add_slider_row(
            gl_cc, "Sharpness", SHARPNESS_RANGE,
            lambda val: self.session.set_color_change_staging(sharpness=val),
        )
        self.cc_apply_btn, self.cc_undo_btn, self.cc_redo_btn = self._add_history_buttons(
            gl_cc,
            self.session.apply_color_change,
            self.session.undo_color_change,
            self.session.redo_color_change,
            self.session.reset_color_change_staging,
        )
        self.cc_history_label = QLabel()
        gl_cc.addWidget(self.cc_history_label)
        v.addWidget(g_cc)

        # Unaffected color
        g_un, gl_un = self._make_group("Unaffected Color")
        self.un_enable_chk = QCheckBox("Protect this color from all edits")
        self.un_enable_chk.toggled.connect(lambda on: self.session.set_unaffected_color(enabled=bool(on)))
        gl_un.addWidget(self.un_enable_chk)
        self.un_pick = ColorPickRow(
            "Unaffected Color",
            on_eyedropper_toggled=lambda on: self._set_dropper(DROPPER_UNAFFECTED if on else None),
            on_color_chosen=lambda c: self.session.set_unaffected_color(color=c),
        )
        gl_un.addWidget(self.un_pick)
        self.un_tol, self.un_tol_spin = self._add_slider_row(
            gl_un, "Tolerance", (0, MAX_TOLERANCE),
            lambda val: self.session.set_unaffected_color(tolerance=val),
        )
        v.addWidget(g_un)

        # Action scripts
        g_act, gl_act = self._make_group("Actions")
        row1 = QHBoxLayout()
        self.save_actions_btn = QPushButton("Save Actions")
        self.save_actions_btn.clicked.connect(self.save_actions)
        row1.addWidget(self.save_actions_btn)
        self.load_actions_btn = QPushButton("Load Actions")
        self.load_actions_btn.clicked.connect(self.load_actions)
        row1.addWidget(self.load_actions_btn)
        gl_act.addLayout(row1)
        row2 = QHBoxLayout()
        self.run_actions_btn = QPushButton("Run Action")
        self.run_actions_btn.clicked.connect(self.session.run_loaded_script)
        row2.addWidget(self.run_actions_btn)
        self.refresh_btn = QPushButton("Refresh Session")
        self.refresh_btn.clicked.connect(self.session.refresh_session)
        row2.addWidget(self.refresh_btn)
        gl_act.addLayout(row2)
        self.apply_all_btn = QPushButton("Apply To All Frames")
        self.apply_all_btn.clicked.connect(self.apply_to_all)
        gl_act.addWidget(self.apply_all_btn)
        self.actions_label = QLabel()
        gl_act.addWidget(self.actions_label)
        v.addWidget(g_act)

        v.addStretch(1)
        scroll.setWidget(panel)
        dock.setWidget(scroll)
        self.addDockWidget(Qt.RightDockWidgetArea, dock)

    def _make_group(self, title: str) -> tuple[QGroupBox, QVBoxLayout]:
        g = QGroupBox(title)
        gl = QVBoxLayout()
        g.setLayout(gl)
        return g, gl

    def _add_slider_row(
        self,
        layout: QVBoxLayout,
        label: str,
        value_range: tuple[int, int],
        on_value: Callable[[int], None],
    ) -> tuple[QSlider, QSpinBox]:
        row = QHBoxLayout()
        row.addWidget(QLabel(label))
        slider = QSlider(Qt.Horizontal)
        slider.setRange(*value_range)
        spin = QSpinBox()
        spin.setRange(*value_range)
        # Slider and spin mirror each other; only the spin reports to the session.
        slider.valueChanged.connect(spin.setValue)
        spin.valueChanged.connect(slider.setValue)
        spin.valueChanged.connect(lambda val: on_value(int(val)))
        row.addWidget(slider, 1)
        row.addWidget(spin, 0)
        layout.addLayout(row)
        return slider, spin

    def _add_history_buttons(
        self,
        layout: QVBoxLayout,
        on_apply: Callable[[], None],
        on_undo: Callable[[], object],
        on_redo: Callable[[], object],
        on_reset: Callable[[], None],
    ) -> tuple[QPushButton, QPushButton, QPushButton]:
        row = QHBoxLayout()
        apply_btn = QPushButton("Apply")
        apply_btn.clicked.connect(on_apply)
        undo_btn = QPushButton("Undo")
        undo_btn.clicked.connect(on_undo)
        redo_btn = QPushButton("Redo")
        redo_btn.clicked.connect(on_redo)
        reset_btn = QPushButton("Reset")
        reset_btn.clicked.connect(on_reset)
        for b in (apply_btn, undo_btn, redo_btn, reset_btn):
            row.addWidget(b)
        layout.addLayout(row)
        return apply_btn, undo_btn, redo_btn

    # ---------------------------
    # File IO
    # ---------------------------
    def open_files(self) -> None:
        paths, _ = QFileDialog.getOpenFileNames(
            self, "Open Images", "", "Images (*.png *.jpg *.jpeg *.bmp *.webp *.gif *.tif *.tiff)"
        )
        if paths:
            self._load_paths(paths)

    def _load_paths(self, paths: list[str]) -> None:
        try:
            loaded = load_images(paths)
        except ImageDecodeError as e:
            QMessageBox.critical(self, "Open failed", str(e))
            return
        if not loaded:
            return
        self._set_dropper(None)
        self._set_view_mode(VIEW_FIT_TO_WINDOW)
        self.session.load_images(loaded)

    def save_images(self) -> None:
        if not self.session.frames:
            QMessageBox.information(self, "Nothing to save", "Load an image first.")
            return
        out_dir = QFileDialog.getExistingDirectory(self, "Save Processed Images To")
        if not out_dir:
            return
        worker = ExportWorker(
            self.session.frames,
            self.session.current_index,
            self.session.processing_params(),
            out_dir,
        )
        worker.signals.finished.connect(self._on_export_finished)
        self._start_job(worker, "Exporting images…")

    def _on_export_finished(self, result: ExportResult) -> None:
        self._end_job()
        if result.path is None:
            QMessageBox.critical(self, "Save failed", f"Could not export: {', '.join(result.skipped)}")
            return
        msg = f"Saved {result.path}"
        if result.skipped:
            msg += f"\nSkipped: {', '.join(result.skipped)}"
        self.statusBar().showMessage(msg, 5000)

    def save_actions(self) -> None:
        if not self.session.recorded_session:
            QMessageBox.information(self, "Nothing to save", "Apply at least one edit first.")
            return
        path, _ = QFileDialog.getSaveFileName(
            self, "Save Action Script", action_script_filename(), "Action Script (*.json)"
        )
        if not path:
            return
        try:
            self.session.save_script(path)
        except OSError as e:
            QMessageBox.critical(self, "Save actions failed", str(e))

    def load_actions(self) -> None:
        path, _ = QFileDialog.getOpenFileName(self, "Load Action Script", "", "Action Script (*.json)")
        if not path:
            return
        try:
            self.session.load_script(path)
        except (ActionScriptError, OSError) as e:
            QMessageBox.critical(self, "Invalid action script file.", str(e))

    # ---------------------------
    # Batch
    # ---------------------------
    def apply_to_all(self) -> None:
        if not self.session.is_multi_frame:
            return
        worker = ApplyToAllWorker(
            self.session.frames, self.session.processing_params(), workers=self._render_workers
        )
        worker.signals.finished.connect(self._on_apply_all_finished)
        self._start_job(worker, "Applying edits to all frames…")

    def _on_apply_all_finished(self, processed: list) -> None:
        self._end_job()
        self.session.replace_frame_pixels(processed)

    def _start_job(self, worker, title: str) -> None:
        if self._active_job is not None:
            return
        self._active_job = worker
        self._progress = QProgressDialog(title, "Cancel", 0, max(1, len(self.session.frames)), self)
        self._progress.setWindowModality(Qt.WindowModal)
        self._progress.setMinimumDuration(300)
        self._progress.canceled.connect(worker.cancel)
        worker.signals.progress.connect(self._on_job_progress)
        worker.signals.failed.connect(self._on_job_failed)
        worker.signals.cancelled.connect(self._on_job_cancelled)
        self._pool.start(worker)

    def _on_job_progress(self, done: int, total: int) -> None:
        if self._progress is not None:
            self._progress.setMaximum(total)
            self._progress.setValue(done)

    def _end_job(self) -> None:
        self._active_job = None
        if self._progress is not None:
            self._progress.reset()
            self._progress = None

    def _on_job_failed(self, msg: str) -> None:
        self._end_job()
        QMessageBox.critical(self, "Processing failed", msg)

    def _on_job_cancelled(self) -> None:
        self._end_job()
        self.statusBar().showMessage("Cancelled.", 3000)

    def closeEvent(self, e) -> None:
        if self._active_job is not None:
            self._active_job.cancel()
        self.session.remove_listener(self._on_session_changed)
        super().closeEvent(e)

    # ---------------------------
    # Drag & drop support
    # ---------------------------
    def dragEnterEvent(self, e) -> None:
        if e.mimeData().hasUrls():
            e.acceptProposedAction()

    def dropEvent(self, e) -> None:
        paths = [u.toLocalFile() for u in e.mimeData().urls()]
        paths = [p for p in paths if p and is_image_path(p)]
        if paths:
            self._load_paths(paths)

    # ---------------------------
    # Eyedropper / view
    # ---------------------------
    def _set_dropper(self, target: Optional[str]) -> None:
        self._dropper_target = target
        self.tr_pick.set_picking(target == DROPPER_TRANSPARENCY)
        self.cc_pick.set_picking(target == DROPPER_COLOR_CHANGE)
        self.un_pick.set_picking(target == DROPPER_UNAFFECTED)
        self.canvas.eyedropper_enabled = target is not None
        self.canvas.setCursor(Qt.CrossCursor if target is not None else Qt.ArrowCursor)
        self.canvas.update()

    def _pick_color_at_image_xy(self, x: int, y: int) -> None:
        if self._preview_rgba is None or self._dropper_target is None:
            return
        color = RGBAColor.from_pixel(self._preview_rgba[y, x])
        target = self._dropper_target
        self._set_dropper(None)
        if target == DROPPER_TRANSPARENCY:
            self.session.set_transparency_staging(color=color)
        elif target == DROPPER_COLOR_CHANGE:
            self.session.set_color_change_staging(target=color)
        elif target == DROPPER_UNAFFECTED:
            self.session.set_unaffected_color(color=color)

    def _set_view_mode(self, mode: str) -> None:
        self._view_mode = mode
        act = self._view_mode_actions.get(mode)
        if act is not None:
            act.setChecked(True)
        self.canvas.set_view(mode, self._zoom)

    def _set_zoom(self, zoom: float) -> None:
        self._zoom = float(zoom)
        self._set_view_mode(VIEW_CUSTOM_ZOOM)

    def _on_canvas_zoom_changed(self, zoom: float) -> None:
        self._zoom = zoom
        self._view_mode = VIEW_CUSTOM_ZOOM
        self._view_mode_actions[VIEW_CUSTOM_ZOOM].setChecked(True)

    # ---------------------------
    # Session -> UI
    # ---------------------------
    def _on_session_changed(self) -> None:
        self._sync_ui_from_state()
        self._rerender()

    def _set_slider_pair(self, spin: QSpinBox, slider: QSlider, value: int) -> None:
        spin.blockSignals(True)
        slider.blockSignals(True)
        spin.setValue(int(value))
        slider.setValue(int(value))
        spin.blockSignals(False)
        slider.blockSignals(False)

    def _sync_ui_from_state(self) -> None:
        s = self.session
        tr = s.staging.transparency
        cc = s.staging.color_change
        un = s.unaffected

        self.tr_pick.set_color(tr.color)
        self._set_slider_pair(self.tr_tol_spin, self.tr_tol, tr.tolerance)

        self.cc_pick.set_color(cc.target)
        self._set_slider_pair(self.cc_tol_spin, self.cc_tol, cc.tolerance)
        self._set_slider_pair(self.cc_hue_spin, self.cc_hue, cc.hue)
        self._set_slider_pair(self.cc_sat_spin, self.cc_sat, cc.saturation)
        self._set_slider_pair(self.cc_bri_spin, self.cc_bri, cc.brightness)
        self._set_slider_pair(self.cc_con_spin, self.cc_con, cc.contrast)
        self._set_slider_pair(self.cc_sharp_spin, self.cc_sharp, cc.sharpness)

        self.un_enable_chk.blockSignals(True)
        self.un_enable_chk.setChecked(un.enabled)
        self.un_enable_chk.blockSignals(False)
        self.un_pick.set_color(un.color)
        self._set_slider_pair(self.un_tol_spin, self.un_tol, un.tolerance)

        has_image = s.current_frame() is not None
        th = s.transparency_history
        ch = s.color_change_history
        self.tr_undo_btn.setEnabled(th.can_undo)
        self.tr_redo_btn.setEnabled(th.can_redo)
        self.cc_undo_btn.setEnabled(ch.can_undo)
        self.cc_redo_btn.setEnabled(ch.can_redo)
        self._act_undo_tr.setEnabled(th.can_undo)
        self._act_redo_tr.setEnabled(th.can_redo)
        self._act_undo_cc.setEnabled(ch.can_undo)
        self._act_redo_cc.setEnabled(ch.can_redo)
        self.tr_apply_btn.setEnabled(has_image)
        self.cc_apply_btn.setEnabled(has_image)
        self.tr_history_label.setText(f"History: {th.cursor}/{len(th) - 1} applied")
        self.cc_history_label.setText(f"History: {ch.cursor}/{len(ch) - 1} applied")

        self._act_export.setEnabled(has_image)
        self._act_save_actions.setEnabled(bool(s.recorded_session))
        self.save_actions_btn.setEnabled(bool(s.recorded_session))
        self.run_actions_btn.setEnabled(s.loaded_script is not None)
        self.apply_all_btn.setEnabled(s.is_multi_frame)
        loaded = "none" if s.loaded_script is None else f"{len(s.loaded_script)} actions"
        self.actions_label.setText(f"Recorded: {len(s.recorded_session)} | Loaded: {loaded}")

        n = len(s.frames)
        self.prev_frame_btn.setEnabled(n > 1 and s.current_index > 0)
        self.next_frame_btn.setEnabled(n > 1 and s.current_index < n - 1)
        frame = s.current_frame()
        self.frame_label.setText("No image" if frame is None else f"{frame.name} ({s.current_index + 1}/{n})")

    def _rerender(self) -> None:
        self._preview_rgba = self.session.render_current(workers=self._render_workers)
        if self._preview_rgba is None:
            self.canvas.set_preview(None)
        else:
            self.canvas.set_preview(np_rgba_to_qimage(self._preview_rgba))
        self._update_status()

    def _update_status(self) -> None:
        frame = self.session.current_frame()
        if frame is None:
            self.statusBar().showMessage("Open or drop one or more images to start.")
            return
        w, h = frame.size
        params = self.session.processing_params()
        msg = (
            f"{frame.name}: {w}x{h} | Transparency ops: {len(params.transparency_history) - 1} | "
            f"Color ops: {len(params.color_change_history) - 1} | "
            f"Unaffected: {'ON' if params.unaffected_color.active else 'OFF'} | View: {self._view_mode}"
        )
        self.statusBar().showMessage(msg)
