# -*- coding: utf-8 -*-
"""
The GUI Package for MarkdownOCR.

PyQt6 widgets around the core pipeline: the full-screen capture overlay that
drives region selection, and the window that presents the recognized text.
"""

from .capture_overlay import CaptureOverlay
from .results_window import ResultsWindow

__all__ = [
    "CaptureOverlay",
    "ResultsWindow",
]
