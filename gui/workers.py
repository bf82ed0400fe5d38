"""
Background Workers

QThread worker for loading volumes off the GUI thread.
"""

import logging
import traceback

from PySide6.QtCore import QThread, Signal

from core.base import BaseVolumeLoader


class LoaderWorker(QThread):
    """Background worker for loading a volume with any BaseVolumeLoader."""
    
    progress = Signal(float)
    finished = Signal(object)  # Emits LoadedVolume
    error = Signal(str)
    
    def __init__(self, loader: BaseVolumeLoader, source: str):
        super().__init__()
        self.loader = loader
        self.source = source
        self.loader.progress_callback = self.progress.emit
    
    def run(self):
        try:
            self.progress.emit(0.0)
            loaded = self.loader.load(self.source)
            self.progress.emit(1.0)
            self.finished.emit(loaded)
        except Exception as e:
            logging.error(f"Loading error: {e}\n{traceback.format_exc()}")
            self.error.emit(str(e))
