# -*- coding: utf-8 -*-
"""
src/markdownocr/gui/capture_overlay.py

Defines the CaptureOverlay widget for the region-selection step.

The overlay is a borderless, full-screen window that paints the frozen
snapshot under a dark veil. Mouse and key events are translated into
selector events and passed to a `RegionSelector`; the widget only acts on the
effects it gets back (repaint, commit, cancel).
"""

import logging

from PyQt6.QtCore import QPoint, QRect, Qt, pyqtSignal
from PyQt6.QtGui import QBrush, QColor, QCursor, QImage, QPainter, QPen
from PyQt6.QtWidgets import QApplication, QWidget

from ..core.geometry import Point, Rect
from ..core.selection import (
    Button,
    CancelKey,
    Effect,
    Phase,
    PointerDown,
    PointerMove,
    PointerUp,
    RegionSelector,
)
from ..core.snapshot import ScreenSnapshot

logger = logging.getLogger(__name__)

VEIL_COLOR = QColor(0, 0, 0, 77)  # black at ~30% opacity
BORDER_COLOR = QColor(255, 255, 255)
BORDER_WIDTH = 2
FILL_COLOR = QColor(255, 255, 255, 50)

_BUTTONS = {
    Qt.MouseButton.LeftButton: Button.PRIMARY,
    Qt.MouseButton.RightButton: Button.SECONDARY,
}


def snapshot_to_qimage(snapshot: ScreenSnapshot) -> QImage:
    """Wraps the BGR(A) snapshot buffer in a QImage that owns its own copy."""
    pixels = snapshot.pixels
    height, width, channels = pixels.shape
    image_format = QImage.Format.Format_ARGB32 if channels == 4 else QImage.Format.Format_BGR888
    data = pixels.tobytes()
    image = QImage(data, width, height, width * channels, image_format)
    # QImage does not keep `data` alive.
    return image.copy()


def to_qrect(rect: Rect) -> QRect:
    return QRect(rect.x, rect.y, rect.width, rect.height)


class CaptureOverlay(QWidget):
    """
    A full-screen overlay for selecting a region of the frozen snapshot.

    Left-drag selects, right-click or Escape cancels. Once the selection is
    committed or cancelled the overlay closes itself.
    """
    # Emitted with the committed `Rect` in widget (device-independent) coordinates.
    region_selected = pyqtSignal(object)
    selection_cancelled = pyqtSignal()

    def __init__(self, snapshot: ScreenSnapshot, selector: RegionSelector):
        """Initializes the capture overlay widget."""
        super().__init__()
        logger.info("Initializing CaptureOverlay.")
        self.snapshot = snapshot
        self.selector = selector
        self._background = snapshot_to_qimage(snapshot)

        screen = QApplication.primaryScreen()
        if not screen:
            logger.error("No primary screen found, sizing overlay to the snapshot.")
            self.setGeometry(0, 0, snapshot.width, snapshot.height)
        else:
            self.setGeometry(screen.geometry())

        self.setWindowFlags(
            Qt.WindowType.FramelessWindowHint |
            Qt.WindowType.WindowStaysOnTopHint |
            Qt.WindowType.Tool  # Prevents it from appearing in the taskbar
        )
        self.setAttribute(Qt.WidgetAttribute.WA_DeleteOnClose)
        self.setCursor(QCursor(Qt.CursorShape.CrossCursor))

    def snapshot_scale(self) -> float:
        """Snapshot pixels per widget pixel, i.e. the effective device pixel ratio."""
        if self.width() > 0:
            return self.snapshot.width / self.width()
        return self.devicePixelRatioF()

    def showEvent(self, event):
        """Ensure the widget is active and receives keyboard input when shown."""
        super().showEvent(event)
        self.activateWindow()
        self.raise_()
        self.setFocus()

    def paintEvent(self, event):
        """Draws the snapshot, the veil and the in-progress selection rectangle."""
        painter = QPainter(self)
        painter.drawImage(self.rect(), self._background)
        painter.fillRect(self.rect(), QBrush(VEIL_COLOR))

        rect = self.selector.rect
        if self.selector.phase is Phase.SELECTING and rect is not None and not rect.is_empty():
            selection = to_qrect(rect)
            painter.fillRect(selection, QBrush(FILL_COLOR))
            painter.setPen(QPen(BORDER_COLOR, BORDER_WIDTH, Qt.PenStyle.DashLine))
            painter.drawRect(selection)
        painter.end()

    def mousePressEvent(self, event):
        button = _BUTTONS.get(event.button(), Button.OTHER)
        self._dispatch(PointerDown(self._point(event), button))

    def mouseMoveEvent(self, event):
        self._dispatch(PointerMove(self._point(event)))

    def mouseReleaseEvent(self, event):
        button = _BUTTONS.get(event.button(), Button.OTHER)
        self._dispatch(PointerUp(self._point(event), button))

    def keyPressEvent(self, event):
        if event.key() == Qt.Key.Key_Escape:
            logger.info("Capture cancelled by user (Escape key).")
            self._dispatch(CancelKey())
        else:
            super().keyPressEvent(event)

    @staticmethod
    def _point(event) -> Point:
        pos: QPoint = event.position().toPoint()
        return Point(pos.x(), pos.y())

    def _dispatch(self, selector_event):
        effects = self.selector.handle(selector_event)
        if Effect.REDRAW in effects:
            self.update()
        if Effect.COMMIT in effects:
            # Hide first so the result window appears over the normal desktop.
            self.hide()
            self.region_selected.emit(self.selector.result())
            self.close()
        elif Effect.CANCEL in effects:
            self.hide()
            self.selection_cancelled.emit()
            self.close()
