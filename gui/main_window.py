"""
Main Window

The main application window for the MPR viewer.
"""

import logging
from pathlib import Path
from typing import Dict, Optional

from PySide6.QtWidgets import (
    QMainWindow, QWidget, QHBoxLayout, QGridLayout,
    QSplitter, QFileDialog, QProgressBar, QStatusBar,
    QMessageBox, QScrollArea, QFrame, QProgressDialog
)
from PySide6.QtCore import Qt, QThread, Slot
from PySide6.QtGui import QAction, QActionGroup

from config import DEFAULT_GUI, DEFAULT_LOADER, DEFAULT_RENDER, GUIConfig
from core.base import LoadedVolume
from core.data_manager import DataManager
from loaders import DicomSeriesLoader
from mpr.types import InteractionTool, Orientation
from mpr.view_state import ViewState
from .panels import ControlsPanel, LogPanel, MPRViewWidget
from .workers import LoaderWorker


FRAME_RATE_CHOICES = {
    "30 FPS": 30,
    "60 FPS": 60,
    "Unlimited": 0,
}


class MainWindow(QMainWindow):
    """Main application window with the three linked MPR views."""
    
    def __init__(self, gui_config: GUIConfig = DEFAULT_GUI):
        super().__init__()
        
        self._gui_config = gui_config
        self._data_manager = DataManager(self)
        self._views: Dict[Orientation, MPRViewWidget] = {}
        self._worker: Optional[QThread] = None
        self._progress_dialog: Optional[QProgressDialog] = None
        
        self._setup_ui()
        self._setup_menu()
        self._connect_signals()
    
    @property
    def data_manager(self) -> DataManager:
        return self._data_manager
    
    def _setup_ui(self) -> None:
        """Set up the main window UI."""
        self.setWindowTitle(self._gui_config.window_title)
        self.setMinimumSize(*self._gui_config.min_size)
        self.resize(*self._gui_config.window_size)
        
        central = QWidget()
        self.setCentralWidget(central)
        main_layout = QHBoxLayout(central)
        main_layout.setContentsMargins(8, 8, 8, 8)
        main_layout.setSpacing(8)
        
        splitter = QSplitter(Qt.Horizontal)
        
        # Left panel (controls)
        self._controls_panel = ControlsPanel()
        scroll_area = QScrollArea()
        scroll_area.setWidget(self._controls_panel)
        scroll_area.setWidgetResizable(True)
        scroll_area.setFrameShape(QFrame.NoFrame)
        scroll_area.setHorizontalScrollBarPolicy(Qt.ScrollBarAlwaysOff)
        scroll_area.setMinimumWidth(260)
        scroll_area.setMaximumWidth(380)
        splitter.addWidget(scroll_area)
        
        # Right panel: 2x2 grid, three views plus the log
        grid_widget = QWidget()
        grid = QGridLayout(grid_widget)
        grid.setContentsMargins(0, 0, 0, 0)
        grid.setSpacing(4)
        cells = {
            Orientation.AXIAL: (0, 0),
            Orientation.CORONAL: (0, 1),
            Orientation.SAGITTAL: (1, 0),
        }
        for orientation, (row, col) in cells.items():
            widget = MPRViewWidget(
                orientation,
                on_state_change=self._data_manager.handle_state_update,
                gui_config=self._gui_config,
            )
            self._views[orientation] = widget
            grid.addWidget(widget, row, col)
        
        self._log_panel = LogPanel()
        grid.addWidget(self._log_panel, 1, 1)
        splitter.addWidget(grid_widget)
        
        splitter.setCollapsible(0, False)
        splitter.setCollapsible(1, False)
        splitter.setStretchFactor(1, 1)
        splitter.setSizes([300, 1100])
        main_layout.addWidget(splitter)
        
        # Status bar
        self._status_bar = QStatusBar()
        self.setStatusBar(self._status_bar)
        self._progress_bar = QProgressBar()
        self._progress_bar.setMaximumWidth(200)
        self._progress_bar.setVisible(False)
        self._status_bar.addPermanentWidget(self._progress_bar)
        self._status_bar.showMessage("Ready")
    
    def _setup_menu(self) -> None:
        """Set up the menu bar."""
        menubar = self.menuBar()
        
        # File menu
        file_menu = menubar.addMenu("File")
        
        open_action = QAction("Open DICOM Folder...", self)
        open_action.setShortcut("Ctrl+O")
        open_action.triggered.connect(self._on_open_dicom)
        file_menu.addAction(open_action)
        
        close_action = QAction("Close Volume", self)
        close_action.triggered.connect(self._data_manager.clear)
        file_menu.addAction(close_action)
        
        file_menu.addSeparator()
        
        exit_action = QAction("Exit", self)
        exit_action.setShortcut("Ctrl+Q")
        exit_action.triggered.connect(self.close)
        file_menu.addAction(exit_action)
        
        # View menu
        view_menu = menubar.addMenu("View")
        
        reset_action = QAction("Reset View", self)
        reset_action.setShortcut("Ctrl+R")
        reset_action.triggered.connect(self._data_manager.reset_view)
        view_menu.addAction(reset_action)
        
        reset_rotation_action = QAction("Reset Rotation", self)
        reset_rotation_action.setShortcut("Ctrl+Shift+R")
        reset_rotation_action.triggered.connect(self._data_manager.reset_rotation)
        view_menu.addAction(reset_rotation_action)
        
        
        fps_menu = view_menu.addMenu("Frame Rate")
        fps_group = QActionGroup(self)
        for label, fps in FRAME_RATE_CHOICES.items():
            action = QAction(label, self, checkable=True)
            action.setChecked(fps == DEFAULT_RENDER.fps)
            action.triggered.connect(lambda checked=False, f=fps: self._set_fps(f))
            fps_group.addAction(action)
            fps_menu.addAction(action)
        
        # Help menu
        help_menu = menubar.addMenu("Help")
        about_action = QAction("About", self)
        about_action.triggered.connect(self._on_about)
        help_menu.addAction(about_action)
    
    def _connect_signals(self) -> None:
        """Connect widget and session signals."""
        dm = self._data_manager
        dm.volume_changed.connect(self._on_volume_changed)
        dm.view_state_changed.connect(self._on_view_state_changed)
        
        panel = self._controls_panel
        panel.preset_selected.connect(dm.apply_preset)
        panel.window_changed.connect(dm.set_window)
        panel.slab_mode_changed.connect(dm.set_slab_mode)
        panel.thickness_changed.connect(dm.set_thickness)
        panel.tool_changed.connect(self._on_tool_changed)
        panel.reset_requested.connect(dm.reset_view)
        
        for widget in self._views.values():
            widget.slices_scrolled.connect(dm.scroll)
    
    # ========== Helper Methods ==========
    
    def _create_progress_dialog(self, title: str) -> QProgressDialog:
        """Create and configure a modal progress dialog."""
        dialog = QProgressDialog(title, "Cancel", 0, 100, self)
        dialog.setWindowModality(Qt.WindowModal)
        dialog.setAutoClose(False)
        dialog.setAutoReset(False)
        dialog.setCancelButton(None)
        dialog.show()
        return dialog
    
    def _close_progress_dialog(self) -> None:
        if self._progress_dialog:
            self._progress_dialog.close()
            self._progress_dialog = None
    
    def _show_error(self, title: str, message: str) -> None:
        """Display an error message; the current volume stays loaded."""
        self._close_progress_dialog()
        self._status_bar.showMessage(f"Error: {message}")
        QMessageBox.critical(self, title, f"An error occurred:\n\n{message}")
    
    def _set_fps(self, fps: float) -> None:
        for widget in self._views.values():
            widget.view.set_fps(fps)
        logging.info(f"Frame rate limit: {fps if fps else 'unlimited'}")
    
    # ========== Loading ==========
    
    def _on_open_dicom(self) -> None:
        """Handle File > Open DICOM Folder."""
        directory = QFileDialog.getExistingDirectory(self, "Select DICOM Series Folder")
        if directory:
            self.load_series(directory)
    
    def load_series(self, directory: str) -> None:
        """Load a DICOM series in the background."""
        if self._worker is not None and self._worker.isRunning():
            QMessageBox.warning(
                self,
                "Task Running",
                "Please wait for the current task to complete."
            )
            return
        
        loader = DicomSeriesLoader(force=DEFAULT_LOADER.force_read)
        if not loader.can_load(directory):
            self._show_error("Loading Error", f"Not a DICOM series folder: {directory}")
            return
        
        self._status_bar.showMessage(f"Loading {Path(directory).name}...")
        self._progress_dialog = self._create_progress_dialog("Loading DICOM Series...")
        
        self._worker = LoaderWorker(loader, directory)
        self._worker.progress.connect(self._on_load_progress)
        self._worker.finished.connect(self._on_load_finished)
        self._worker.error.connect(self._on_load_error)
        self._worker.start()
    
    @Slot(float)
    def _on_load_progress(self, progress: float) -> None:
        if self._progress_dialog:
            self._progress_dialog.setValue(int(progress * 100))
    
    @Slot(object)
    def _on_load_finished(self, loaded: LoadedVolume) -> None:
        self._close_progress_dialog()
        self._data_manager.set_volume(loaded)
        grid = loaded.grid
        self._status_bar.showMessage(
            f"Loaded: {grid.width}x{grid.height}x{grid.depth} "
            f"({loaded.metadata.get('series_description') or 'unnamed series'})"
        )
    
    @Slot(str)
    def _on_load_error(self, error_msg: str) -> None:
        self._show_error("Loading Error", error_msg)
    
    # ========== Session updates ==========
    
    @Slot(object)
    def _on_volume_changed(self, loaded: Optional[LoadedVolume]) -> None:
        grid = loaded.grid if loaded is not None else None
        for widget in self._views.values():
            widget.view.set_volume(grid)
    
    @Slot(object)
    def _on_view_state_changed(self, state: ViewState) -> None:
        for widget in self._views.values():
            widget.view.render(state)
        self._controls_panel.update_from_state(state)
    
    def _on_tool_changed(self, tool: InteractionTool) -> None:
        for widget in self._views.values():
            widget.view.set_tool(tool)
        logging.info(f"Mouse tool: {tool.value}")
    
    def closeEvent(self, event) -> None:
        for widget in self._views.values():
            widget.view.dispose()
        self._log_panel.detach()
        super().closeEvent(event)
    
    def _on_about(self) -> None:
        """Show about dialog."""
        QMessageBox.about(
            self,
            f"About {self._gui_config.window_title}",
            f"<h3>{self._gui_config.window_title}</h3>"
            "<p>Version 1.0</p>"
            "<p>Oblique multi-planar reformatting of CT/MR series.</p>"
            "<ul>"
            "<li>Linked axial, coronal and sagittal views</li>"
            "<li>Crosshair navigation and rotation</li>"
            "<li>MaxIP / MinIP / AvgIP slabs</li>"
            "<li>Window/level presets</li>"
            "</ul>"
        )
