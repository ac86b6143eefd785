# -*- coding: utf-8 -*-
"""
src/markdownocr/core/image_processor.py

Implements the preprocessing step between cropping and recognition. This module
takes the selected color region, turns it into a contrast-enhanced grayscale
image, encodes it losslessly as PNG and wraps the bytes as base64 text so it can
be embedded in the JSON request body.

The transform is pure and deterministic: the same input always produces
byte-identical output.
"""

import logging
from base64 import b64encode
from dataclasses import dataclass

import cv2
import numpy as np

from ..errors import PreprocessError
from .snapshot import CroppedImage

logger = logging.getLogger(__name__)

# --- Module-level Configuration ---

# Standard perceptual luma weights (ITU-R BT.601).
LUMA_WEIGHT_R = 0.299
LUMA_WEIGHT_G = 0.587
LUMA_WEIGHT_B = 0.114

# Exponent of the power-law contrast curve. Values below 1 lift the shadows
# slightly, which separates dark text from mid-gray backgrounds.
CONTRAST_GAMMA = 0.8


@dataclass(frozen=True)
class EncodedPayload:
    """A preprocessed region, PNG-encoded and ready for transport."""

    png: bytes
    width: int
    height: int

    @property
    def base64(self) -> str:
        """The PNG bytes as ASCII-safe base64 text."""
        return b64encode(self.png).decode("ascii")


def contrast_curve(value: int) -> int:
    """Maps one 8-bit luma value through the contrast curve."""
    normalized = value / 255.0
    enhanced = normalized ** CONTRAST_GAMMA
    enhanced = max(0.0, min(1.0, enhanced))
    return int(enhanced * 255)


# Every possible 8-bit input, evaluated once.
CONTRAST_LUT = np.array([contrast_curve(v) for v in range(256)], dtype=np.uint8)


def to_grayscale(pixels: np.ndarray) -> np.ndarray:
    """
    Converts a BGR or BGRA image to a three-channel grayscale image.

    Each pixel's channels are replaced by the rounded luma value; alpha is
    dropped. Applying the conversion to its own output changes nothing.

    Args:
        pixels (np.ndarray): HxWx3 or HxWx4 uint8 image in BGR(A) order, as
                             delivered by mss.

    Returns:
        np.ndarray: HxWx3 uint8 image whose three channels are equal.
    """
    if pixels.ndim != 3 or pixels.shape[2] not in (3, 4):
        raise ValueError(f"Expected an HxWx3 or HxWx4 image, got shape {pixels.shape}")

    bgr = pixels[:, :, :3].astype(np.float64)
    luma = LUMA_WEIGHT_R * bgr[:, :, 2] + LUMA_WEIGHT_G * bgr[:, :, 1] + LUMA_WEIGHT_B * bgr[:, :, 0]
    # Round half up; the weights sum to 1.0 so gray input maps onto itself.
    gray = np.clip(np.floor(luma + 0.5), 0, 255).astype(np.uint8)
    return np.repeat(gray[:, :, np.newaxis], 3, axis=2)


def apply_contrast_curve(gray: np.ndarray) -> np.ndarray:
    """Applies the contrast curve to every channel through a lookup table."""
    return cv2.LUT(gray, CONTRAST_LUT)


def encode_png(image: np.ndarray) -> bytes:
    """Serializes an image as PNG. PNG is lossless, so OCR sees every edge as captured."""
    ok, buffer = cv2.imencode(".png", image)
    if not ok:
        raise ValueError(f"PNG encoder rejected image of shape {image.shape}")
    return buffer.tobytes()


def decode_png(data: bytes) -> np.ndarray:
    """Decodes PNG bytes back into a pixel array, keeping the channel count."""
    image = cv2.imdecode(np.frombuffer(data, dtype=np.uint8), cv2.IMREAD_UNCHANGED)
    if image is None:
        raise ValueError("Data is not a decodable PNG image")
    return image


def preprocess_pixels(image: CroppedImage) -> np.ndarray:
    """Grayscale conversion followed by the contrast curve, without encoding."""
    return apply_contrast_curve(to_grayscale(image.pixels))


def preprocess(image: CroppedImage) -> EncodedPayload:
    """
    Executes the full preprocessing pipeline on a cropped region.

    Args:
        image (CroppedImage): The user-selected region in BGR(A) order.

    Returns:
        EncodedPayload: The PNG-encoded, contrast-enhanced grayscale image.

    Raises:
        PreprocessError: If any step fails. There is no partial output.
    """
    if image is None:
        raise PreprocessError("No image to preprocess")

    try:
        enhanced = preprocess_pixels(image)
        png = encode_png(enhanced)
    except (cv2.error, ValueError, TypeError) as e:
        raise PreprocessError(f"Image preprocessing failed: {e}") from e

    logger.info(f"Preprocessed {image.width}x{image.height} region into {len(png)} PNG bytes")
    return EncodedPayload(png=png, width=image.width, height=image.height)


if __name__ == '__main__':
    # Demonstration: python -m src.markdownocr.core.image_processor
    logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(levelname)s - %(message)s')

    width, height = 400, 100
    dummy_bgr = np.full((height, width, 3), 128, dtype=np.uint8)
    cv2.putText(dummy_bgr, 'Hello world', (20, 60), cv2.FONT_HERSHEY_SIMPLEX, 1.5, (255, 255, 255), 2, cv2.LINE_AA)
    dummy_bgra = cv2.cvtColor(dummy_bgr, cv2.COLOR_BGR2BGRA)

    payload = preprocess(CroppedImage(dummy_bgra))
    print(f"PNG size: {len(payload.png)} bytes, base64 length: {len(payload.base64)}")
