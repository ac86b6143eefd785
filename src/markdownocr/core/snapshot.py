# -*- coding: utf-8 -*-
"""
src/markdownocr/core/snapshot.py

The snapshot store: one full-screen capture of the primary display, taken once
at startup with `mss` and frozen for the rest of the run. The selection overlay
paints it as its background and the committed rectangle is cropped out of it,
so what the user selected is exactly what gets recognized.
"""

import logging
import math
from dataclasses import dataclass

import mss
import numpy as np
from mss.exception import ScreenShotError

from ..errors import CaptureError
from .geometry import Rect

logger = logging.getLogger(__name__)

# mss lists the union of all monitors at index 0; the primary display is 1.
PRIMARY_MONITOR = 1


@dataclass(frozen=True)
class CroppedImage:
    """A color sub-region of the snapshot, in BGR or BGRA channel order."""

    pixels: np.ndarray

    def __post_init__(self):
        if self.pixels.dtype != np.uint8:
            raise ValueError(f"Expected uint8 pixels, got {self.pixels.dtype}")
        if self.pixels.ndim != 3 or self.pixels.shape[2] not in (3, 4):
            raise ValueError(f"Expected an HxWx3 or HxWx4 image, got shape {self.pixels.shape}")
        if self.pixels.shape[0] == 0 or self.pixels.shape[1] == 0:
            raise ValueError("Cropped image has zero area")

    @property
    def width(self) -> int:
        return self.pixels.shape[1]

    @property
    def height(self) -> int:
        return self.pixels.shape[0]


@dataclass(frozen=True)
class ScreenSnapshot:
    """
    An immutable BGRA capture of one display.

    Attributes:
        pixels (np.ndarray): HxWx4 uint8 buffer, row-major with a top-left
                             origin. Marked read-only on construction.
        left (int): X position of the display in virtual-desktop coordinates.
        top (int): Y position of the display in virtual-desktop coordinates.
    """

    pixels: np.ndarray
    left: int = 0
    top: int = 0

    def __post_init__(self):
        if self.pixels.ndim != 3 or self.pixels.shape[2] not in (3, 4):
            raise ValueError(f"Expected an HxWx3 or HxWx4 image, got shape {self.pixels.shape}")
        self.pixels.flags.writeable = False

    @property
    def width(self) -> int:
        return self.pixels.shape[1]

    @property
    def height(self) -> int:
        return self.pixels.shape[0]

    def crop(self, rect: Rect, scale: float = 1.0) -> CroppedImage:
        """
        Copies the pixels under `rect` into a new, owned image.

        Args:
            rect (Rect): The region in overlay (device-independent) coordinates.
            scale (float): Device pixel ratio between the overlay and the
                           snapshot. On a 200% display a 100 px wide selection
                           covers 200 snapshot pixels.

        Returns:
            CroppedImage: The selected region, clipped to the snapshot bounds.

        Raises:
            ValueError: If the clipped region is empty.
        """
        x0 = max(0, math.floor(rect.x * scale))
        y0 = max(0, math.floor(rect.y * scale))
        x1 = min(self.width, math.ceil(rect.right * scale))
        y1 = min(self.height, math.ceil(rect.bottom * scale))
        if x1 <= x0 or y1 <= y0:
            raise ValueError(f"Selection {rect} lies outside the {self.width}x{self.height} snapshot")

        logger.debug(f"Cropping snapshot region x={x0}..{x1}, y={y0}..{y1}")
        return CroppedImage(np.array(self.pixels[y0:y1, x0:x1], copy=True))


def capture(monitor_index: int = PRIMARY_MONITOR) -> ScreenSnapshot:
    """
    Captures the full bounds of one display exactly once.

    Args:
        monitor_index (int): mss monitor index; 1 is the primary display.

    Returns:
        ScreenSnapshot: The frozen BGRA capture.

    Raises:
        CaptureError: If there is no display or it cannot be read.
    """
    try:
        with mss.mss() as sct:
            monitor = sct.monitors[monitor_index]
            logger.info(f"Capturing screen: {monitor}")
            sct_img = sct.grab(monitor)
            pixels = np.array(sct_img, dtype=np.uint8)
    except (ScreenShotError, IndexError, OSError) as e:
        raise CaptureError(f"Screen capture failed: {e}") from e

    if pixels.ndim != 3 or pixels.size == 0:
        raise CaptureError(f"Screen capture returned an unusable buffer of shape {pixels.shape}")

    logger.info(f"Snapshot captured with shape: {pixels.shape}")
    return ScreenSnapshot(pixels=pixels, left=monitor["left"], top=monitor["top"])
