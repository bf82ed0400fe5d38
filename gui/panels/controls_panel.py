"""
Controls Panel

Window/level, slab and tool controls for the MPR views.
"""

from typing import Dict, Optional

from PySide6.QtWidgets import (
    QWidget, QVBoxLayout, QHBoxLayout, QGroupBox, QLabel,
    QComboBox, QDoubleSpinBox, QRadioButton, QButtonGroup,
    QPushButton, QFormLayout
)
from PySide6.QtCore import Signal

from mpr.types import InteractionTool, Orientation, SlabMode
from mpr.view_state import ViewState
from mpr.window import WINDOW_PRESETS


SLAB_MODE_LABELS = {
    SlabMode.MAX_IP: "MaxIP",
    SlabMode.MIN_IP: "MinIP",
    SlabMode.AVG_IP: "AvgIP",
}

TOOL_LABELS = {
    InteractionTool.CROSSHAIR: "Crosshair",
    InteractionTool.SCROLL: "Scroll slices",
    InteractionTool.WINDOW: "Window/Level",
}


class ControlsPanel(QWidget):
    """Panel with the viewer controls; reflects the shared view state."""
    
    preset_selected = Signal(str)
    window_changed = Signal(float, float)  # center, width
    slab_mode_changed = Signal(object)  # SlabMode
    thickness_changed = Signal(object, float)  # Orientation, voxels
    tool_changed = Signal(object)  # InteractionTool
    reset_requested = Signal()
    
    def __init__(self, parent: Optional[QWidget] = None):
        super().__init__(parent)
        
        self._thickness_spins: Dict[Orientation, QDoubleSpinBox] = {}
        self._position_labels: Dict[Orientation, QLabel] = {}
        
        self._setup_ui()
        self.setEnabled(False)
    
    def _setup_ui(self) -> None:
        """Set up the panel UI."""
        layout = QVBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)
        
        # Window/Level
        wl_group = QGroupBox("Window/Level")
        wl_layout = QFormLayout(wl_group)
        
        self._preset_combo = QComboBox()
        self._preset_combo.addItems(list(WINDOW_PRESETS.keys()))
        self._preset_combo.setCurrentText("Custom")
        self._preset_combo.textActivated.connect(self.preset_selected.emit)
        wl_layout.addRow("Preset:", self._preset_combo)
        
        self._center_spin = QDoubleSpinBox()
        self._center_spin.setRange(-100000.0, 100000.0)
        self._center_spin.setDecimals(0)
        self._center_spin.editingFinished.connect(self._on_window_edited)
        wl_layout.addRow("Center:", self._center_spin)
        
        self._width_spin = QDoubleSpinBox()
        self._width_spin.setRange(1.0, 200000.0)
        self._width_spin.setDecimals(0)
        self._width_spin.editingFinished.connect(self._on_window_edited)
        wl_layout.addRow("Width:", self._width_spin)
        
        layout.addWidget(wl_group)
        
        # Slab
        slab_group = QGroupBox("Slab")
        slab_layout = QFormLayout(slab_group)
        
        self._slab_combo = QComboBox()
        for mode, label in SLAB_MODE_LABELS.items():
            self._slab_combo.addItem(label, mode)
        self._slab_combo.currentIndexChanged.connect(
            lambda index: self.slab_mode_changed.emit(self._slab_combo.itemData(index))
        )
        slab_layout.addRow("Mode:", self._slab_combo)
        
        for orientation in Orientation:
            spin = QDoubleSpinBox()
            spin.setRange(0.0, 10000.0)
            spin.setDecimals(1)
            spin.setSuffix(" vox")
            spin.editingFinished.connect(
                lambda o=orientation, s=spin: self.thickness_changed.emit(o, s.value())
            )
            self._thickness_spins[orientation] = spin
            slab_layout.addRow(f"{orientation.value.capitalize()}:", spin)
        
        layout.addWidget(slab_group)
        
        # Tools
        tool_group = QGroupBox("Mouse Tool")
        tool_layout = QVBoxLayout(tool_group)
        self._tool_buttons = QButtonGroup(self)
        for i, (tool, label) in enumerate(TOOL_LABELS.items()):
            button = QRadioButton(label)
            button.setChecked(tool is InteractionTool.CROSSHAIR)
            self._tool_buttons.addButton(button, i)
            tool_layout.addWidget(button)
        tools = list(TOOL_LABELS.keys())
        self._tool_buttons.idClicked.connect(lambda i: self.tool_changed.emit(tools[i]))
        layout.addWidget(tool_group)
        
        # Positions
        pos_group = QGroupBox("Slices")
        pos_layout = QFormLayout(pos_group)
        for orientation in Orientation:
            label = QLabel("-")
            self._position_labels[orientation] = label
            pos_layout.addRow(f"{orientation.value.capitalize()}:", label)
        layout.addWidget(pos_group)
        
        reset_row = QHBoxLayout()
        reset_btn = QPushButton("Reset View")
        reset_btn.clicked.connect(self.reset_requested.emit)
        reset_row.addWidget(reset_btn)
        layout.addLayout(reset_row)
        
        layout.addStretch()
    
    def _on_window_edited(self) -> None:
        self.window_changed.emit(self._center_spin.value(), self._width_spin.value())
    
    def update_from_state(self, state: ViewState) -> None:
        """Show the current view state without re-emitting change signals."""
        self.setEnabled(state.dimensions is not None)
        
        for widget in (self._center_spin, self._width_spin, self._slab_combo, self._preset_combo):
            widget.blockSignals(True)
        
        self._center_spin.setValue(state.window_center)
        self._width_spin.setValue(state.window_width)
        self._slab_combo.setCurrentIndex(self._slab_combo.findData(state.slab_mode))
        
        for name, preset in WINDOW_PRESETS.items():
            if preset["center"] == state.window_center and preset["width"] == state.window_width:
                self._preset_combo.setCurrentText(name)
                break
        else:
            self._preset_combo.setCurrentText("Custom")
        
        for widget in (self._center_spin, self._width_spin, self._slab_combo, self._preset_combo):
            widget.blockSignals(False)
        
        for orientation in Orientation:
            spin = self._thickness_spins[orientation]
            if not spin.hasFocus():
                spin.blockSignals(True)
                spin.setValue(state.thickness(orientation))
                spin.blockSignals(False)
            
            upper = state.max_position(orientation)
            if upper is None:
                self._position_labels[orientation].setText("-")
            else:
                self._position_labels[orientation].setText(
                    f"{state.position(orientation)} / {upper}"
                )
