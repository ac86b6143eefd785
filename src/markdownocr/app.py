# -*- coding: utf-8 -*-
"""
src/markdownocr/app.py

Core application controller for MarkdownOCR.

`MarkdownOCRApp` walks through one capture run: show the overlay over the
frozen snapshot, and once a region is committed, run preprocessing and
recognition on a worker thread so the Qt event loop stays responsive. The
outcome is shown in a `ResultsWindow`; closing it ends the process. A
cancelled selection ends the process without showing anything.
"""

import asyncio
import logging
from typing import Optional

from PyQt6.QtCore import QObject, QThread, pyqtSignal
from PyQt6.QtWidgets import QApplication

from .config import BackendSettings
from .core.geometry import Rect
from .core.pipeline import format_failure, recognize_region
from .core.recognizer import OllamaRecognizer
from .core.selection import RegionSelector
from .core.snapshot import ScreenSnapshot
from .errors import MarkdownOCRError
from .gui.capture_overlay import CaptureOverlay
from .gui.results_window import ResultsWindow

logger = logging.getLogger(__name__)


class RecognitionWorker(QThread):
    """
    Runs crop -> preprocess -> recognize for one region off the GUI thread.

    Emits exactly one of `succeeded(text, elapsed_seconds)` or `failed(message)`.
    """
    succeeded = pyqtSignal(str, float)
    failed = pyqtSignal(str)

    def __init__(self, snapshot: ScreenSnapshot, region: Rect, recognizer: OllamaRecognizer,
                 scale: float = 1.0, parent: Optional[QObject] = None):
        super().__init__(parent)
        self.snapshot = snapshot
        self.region = region
        self.recognizer = recognizer
        self.scale = scale

    def run(self):
        try:
            result = asyncio.run(
                recognize_region(self.snapshot, self.region, self.recognizer, scale=self.scale)
            )
        except MarkdownOCRError as e:
            logger.error(f"Recognition of {self.region} failed: {e}")
            self.failed.emit(format_failure(e, self.recognizer.settings))
            return
        except Exception as e:
            logger.exception(f"Unexpected error while recognizing {self.region}")
            self.failed.emit(f"OCR recognition failed\n\n{e}")
            return
        self.succeeded.emit(result.text, result.elapsed_seconds)


class MarkdownOCRApp(QObject):
    """
    The main application controller. Owns the selector, the overlay, the
    recognition worker and the result window of a single run.
    """

    def __init__(self, app: QApplication, settings: BackendSettings, snapshot: ScreenSnapshot):
        super().__init__()
        self.app = app
        self.settings = settings
        self.snapshot = snapshot
        self.recognizer = OllamaRecognizer(settings)
        self.selector = RegionSelector(min_size=settings.min_selection_size)

        self.region: Optional[Rect] = None
        self.worker: Optional[RecognitionWorker] = None
        self.results_window: Optional[ResultsWindow] = None

        self.overlay = CaptureOverlay(snapshot, self.selector)
        self.overlay.region_selected.connect(self.on_region_selected)
        self.overlay.selection_cancelled.connect(self.on_selection_cancelled)

    def start(self):
        """Shows the capture overlay."""
        self.overlay.show()

    def on_region_selected(self, region: Rect):
        """Starts recognition of the committed region on a worker thread."""
        if self.worker is not None:
            logger.warning("A recognition is already running, ignoring the new region.")
            return
        self.region = region
        scale = self.overlay.snapshot_scale()
        logger.info(f"Region {region} committed (scale {scale:.2f}), starting recognition.")

        self.worker = RecognitionWorker(self.snapshot, region, self.recognizer, scale=scale, parent=self)
        self.worker.succeeded.connect(self.on_recognition_succeeded)
        self.worker.failed.connect(self.on_recognition_failed)
        self.worker.start()

    def on_selection_cancelled(self):
        logger.info("Selection cancelled, exiting.")
        self.app.quit()

    def on_recognition_succeeded(self, text: str, elapsed_seconds: float):
        self._show_results(ResultsWindow(text, self.region, elapsed_seconds))

    def on_recognition_failed(self, message: str):
        self._show_results(ResultsWindow.error(message, self.region))

    def _show_results(self, window: ResultsWindow):
        self.results_window = window
        window.closed.connect(self.quit_app)
        window.show()
        window.raise_()
        window.activateWindow()

    def quit_app(self):
        """Waits for the worker thread and quits the application."""
        logger.info("Quitting MarkdownOCR...")
        if self.worker is not None:
            self.worker.wait()
        self.app.quit()
