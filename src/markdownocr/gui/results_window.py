# -*- coding: utf-8 -*-
"""
src/markdownocr/gui/results_window.py

Defines the ResultsWindow widget for displaying recognition results.

The window appears next to the snipped area, renders the recognized Markdown,
shows how long recognition took, and offers copy and close buttons. Failures
are shown in the same window as plain text.
"""

from typing import Tuple

from PyQt6.QtCore import Qt, QTimer, pyqtSignal
from PyQt6.QtGui import QFont, QKeyEvent, QKeySequence
from PyQt6.QtWidgets import (
    QApplication,
    QHBoxLayout,
    QLabel,
    QPushButton,
    QTextBrowser,
    QVBoxLayout,
    QWidget,
)

from ..core.geometry import Rect
from ..utils.clipboard_manager import copy_to_clipboard

# Window size limits and layout metrics, in pixels
MIN_WINDOW_WIDTH = 450
MIN_WINDOW_HEIGHT = 250
MAX_WINDOW_WIDTH = 800
MAX_WINDOW_HEIGHT = 600
BUTTON_SIZE = 45
PADDING = 12
BUTTON_SPACING = 15
TIME_LABEL_HEIGHT = 25
CHAR_WIDTH = 12
LINE_HEIGHT = 25
WINDOW_OFFSET = 10
COPY_FEEDBACK_MS = 1000

EMPTY_RESULT_TEXT = "No text was recognized."


def calculate_window_size(text: str, show_time: bool) -> Tuple[int, int]:
    """
    Estimates a window size that fits `text`, within the fixed limits.

    Width follows the longest line, height follows the number of lines.
    """
    lines = [line for line in text.splitlines() if line]
    if not lines:
        return MIN_WINDOW_WIDTH, MIN_WINDOW_HEIGHT

    longest = max(len(line) for line in lines)
    width = longest * CHAR_WIDTH + BUTTON_SIZE + PADDING * 4
    time_space = TIME_LABEL_HEIGHT + 5 if show_time else 0
    height = len(lines) * LINE_HEIGHT + PADDING * 3 + time_space

    width = max(MIN_WINDOW_WIDTH, min(MAX_WINDOW_WIDTH, width))
    height = max(MIN_WINDOW_HEIGHT, min(MAX_WINDOW_HEIGHT, height))
    return width, height


def calculate_window_position(source: Rect, size: Tuple[int, int], area: Rect) -> Tuple[int, int]:
    """
    Places the window just below and right of the snip rectangle.

    If that would leave the available screen area the window flips to the
    other side of the snip, and as a last resort hugs the far edge.

    Args:
        source (Rect): The snipped region.
        size (Tuple[int, int]): Window width and height.
        area (Rect): The available screen geometry.

    Returns:
        The top-left (x, y) position of the window.
    """
    width, height = size

    x = source.right + WINDOW_OFFSET
    if x + width > area.right:
        x = source.x - width - WINDOW_OFFSET
        if x < area.x:
            x = area.right - width - WINDOW_OFFSET

    y = source.bottom + WINDOW_OFFSET
    if y + height > area.bottom:
        y = source.y - height - WINDOW_OFFSET
        if y < area.y:
            y = area.bottom - height - WINDOW_OFFSET

    return max(x, area.x), max(y, area.y)


class ResultsWindow(QWidget):
    """
    A small stay-on-top window showing one recognition result or failure.
    """
    closed = pyqtSignal()

    def __init__(self, text: str, source_rect: Rect, elapsed_seconds: float = 0.0,
                 is_error: bool = False, parent: QWidget = None):
        """
        Initializes the results window.

        Args:
            text (str): Recognized Markdown, or the failure message.
            source_rect (Rect): The snipped region, used for positioning.
            elapsed_seconds (float): Recognition time; the label is hidden when 0.
            is_error (bool): Render `text` as plain text instead of Markdown.
            parent (QWidget, optional): The parent widget. Defaults to None.
        """
        super().__init__(parent)
        self.markdown = text
        self.source_rect = source_rect
        self.elapsed_seconds = elapsed_seconds
        self.is_error = is_error

        self._setup_window_properties()
        self._setup_ui()
        self._position_window()

    @classmethod
    def error(cls, message: str, source_rect: Rect) -> "ResultsWindow":
        return cls(message, source_rect, 0.0, is_error=True)

    def _setup_window_properties(self):
        self.setWindowTitle("OCR Result")
        self.setWindowFlags(Qt.WindowType.Dialog | Qt.WindowType.WindowStaysOnTopHint)
        self.setAttribute(Qt.WidgetAttribute.WA_DeleteOnClose)
        self.resize(*calculate_window_size(self.markdown, self.elapsed_seconds > 0))

    def _setup_ui(self):
        """Creates and arranges the widgets within the window."""
        layout = QHBoxLayout(self)
        layout.setContentsMargins(PADDING, PADDING, PADDING, PADDING)
        layout.setSpacing(PADDING)

        content = QVBoxLayout()
        self.time_label = QLabel(f"Elapsed: {self.elapsed_seconds:.2f} s")
        self.time_label.setStyleSheet("color: gray;")
        self.time_label.setFixedHeight(TIME_LABEL_HEIGHT)
        self.time_label.setVisible(self.elapsed_seconds > 0)
        content.addWidget(self.time_label)

        self.browser = QTextBrowser()
        self.browser.setOpenLinks(False)
        if self.is_error:
            self.browser.setPlainText(self.markdown)
        elif self.markdown:
            self.browser.setMarkdown(self.markdown)
        else:
            self.browser.setPlainText(EMPTY_RESULT_TEXT)
        content.addWidget(self.browser)
        layout.addLayout(content)

        buttons = QVBoxLayout()
        buttons.setSpacing(BUTTON_SPACING)
        buttons.addStretch()
        self.copy_button = QPushButton("📋")
        self.copy_button.setToolTip("Copy Markdown (Ctrl+C)")
        self.close_button = QPushButton("✕")
        self.close_button.setToolTip("Close (Esc)")
        for button in (self.copy_button, self.close_button):
            button.setFixedSize(BUTTON_SIZE, BUTTON_SIZE)
            button.setFont(QFont(button.font().family(), 14))
            buttons.addWidget(button)
        buttons.addStretch()
        layout.addLayout(buttons)

        self.copy_button.clicked.connect(self.copy_result)
        self.close_button.clicked.connect(self.close)

    def _position_window(self):
        screen = QApplication.primaryScreen()
        if not screen:
            return
        geometry = screen.availableGeometry()
        area = Rect(geometry.x(), geometry.y(), geometry.width(), geometry.height())
        size = (self.width(), self.height())
        self.move(*calculate_window_position(self.source_rect, size, area))

    def copy_result(self) -> bool:
        """Copies the raw Markdown (not the rendered HTML) to the clipboard."""
        if not self.markdown:
            return False
        copied = copy_to_clipboard(self.markdown)
        if copied:
            self.copy_button.setText("✓")
            QTimer.singleShot(COPY_FEEDBACK_MS, self._reset_copy_button)
        return copied

    def _reset_copy_button(self):
        self.copy_button.setText("📋")

    def keyPressEvent(self, event: QKeyEvent):
        if event.key() == Qt.Key.Key_Escape:
            self.close()
        elif event.matches(QKeySequence.StandardKey.Copy) and not self.browser.textCursor().hasSelection():
            self.copy_result()
        else:
            super().keyPressEvent(event)

    def closeEvent(self, event):
        self.closed.emit()
        super().closeEvent(event)
