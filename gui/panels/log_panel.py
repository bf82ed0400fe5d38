"""
Log Panel

Mirrors application log records into a read-only text view.
"""

import logging
from typing import Optional

from PySide6.QtWidgets import (
    QWidget, QVBoxLayout, QHBoxLayout, QPlainTextEdit,
    QPushButton, QComboBox, QLabel
)
from PySide6.QtCore import Signal, Slot, QObject
from PySide6.QtGui import QFont


LOG_FORMAT = '%(asctime)s - %(levelname)s - %(message)s'
MAX_LOG_LINES = 2000


class LogEmitter(QObject):
    """Carries log records across threads to the GUI."""
    log_message = Signal(str, int)


class QLogHandler(logging.Handler):
    """Logging handler that re-emits formatted records as a Qt signal."""
    
    def __init__(self, parent=None):
        super().__init__()
        self.emitter = LogEmitter(parent)
    
    def emit(self, record):
        self.emitter.log_message.emit(self.format(record), record.levelno)


class LogPanel(QWidget):
    """Panel for viewing application logs."""
    
    def __init__(self, parent: Optional[QWidget] = None):
        super().__init__(parent)
        self._setup_ui()
        self._attach_handler()
    
    def _setup_ui(self) -> None:
        layout = QVBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)
        
        toolbar = QHBoxLayout()
        toolbar.setContentsMargins(4, 4, 4, 0)
        toolbar.addWidget(QLabel("Logs"))
        
        self._level_combo = QComboBox()
        self._level_combo.addItems(["DEBUG", "INFO", "WARNING", "ERROR"])
        self._level_combo.setCurrentText("INFO")
        self._level_combo.currentTextChanged.connect(self._on_level_changed)
        toolbar.addWidget(self._level_combo)
        toolbar.addStretch()
        
        clear_btn = QPushButton("Clear")
        clear_btn.setFixedWidth(60)
        clear_btn.clicked.connect(self.clear_logs)
        toolbar.addWidget(clear_btn)
        layout.addLayout(toolbar)
        
        self._text = QPlainTextEdit()
        self._text.setReadOnly(True)
        self._text.setMaximumBlockCount(MAX_LOG_LINES)
        self._text.setLineWrapMode(QPlainTextEdit.NoWrap)
        font = QFont("Consolas", 9)
        if not font.exactMatch():
            font = QFont("Monospace", 9)
        self._text.setFont(font)
        layout.addWidget(self._text)
    
    def _attach_handler(self) -> None:
        self._handler = QLogHandler(self)
        self._handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt='%H:%M:%S'))
        self._handler.emitter.log_message.connect(self._append_log)
        logging.getLogger().addHandler(self._handler)
    
    def detach(self) -> None:
        """Stop receiving records; called when the window closes."""
        logging.getLogger().removeHandler(self._handler)
    
    def _on_level_changed(self, text: str) -> None:
        logging.getLogger().setLevel(getattr(logging, text))
        logging.info(f"Log level set to {text}")
    
    @Slot(str, int)
    def _append_log(self, msg: str, levelno: int) -> None:
        prefix = "!! " if levelno >= logging.ERROR else ""
        self._text.appendPlainText(prefix + msg)
    
    def clear_logs(self) -> None:
        self._text.clear()
