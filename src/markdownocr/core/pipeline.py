# -*- coding: utf-8 -*-
"""
src/markdownocr/core/pipeline.py

Runs the stages after a region has been committed: crop the snapshot,
preprocess the crop, send it to the backend. Each stage starts only once the
previous one has fully produced its output. Only `PreprocessError` and
`RecognitionError` subclasses leave this module.
"""

import logging

from ..config import BackendSettings
from ..errors import MarkdownOCRError, PreprocessError, RecognitionError
from .geometry import Rect
from .image_processor import EncodedPayload, preprocess
from .recognizer import OllamaRecognizer, RecognitionResult
from .selection import RegionSelector
from .snapshot import ScreenSnapshot

logger = logging.getLogger(__name__)


def prepare_payload(snapshot: ScreenSnapshot, region: Rect, scale: float = 1.0) -> EncodedPayload:
    """Crops `region` out of the snapshot and preprocesses it."""
    try:
        cropped = snapshot.crop(region, scale=scale)
        return preprocess(cropped)
    except PreprocessError:
        raise
    except Exception as e:
        raise PreprocessError(f"Screenshot processing failed: {e}") from e


async def recognize_region(
    snapshot: ScreenSnapshot,
    region: Rect,
    recognizer: OllamaRecognizer,
    scale: float = 1.0,
) -> RecognitionResult:
    """
    Executes crop -> preprocess -> recognize for one committed region.

    Args:
        snapshot (ScreenSnapshot): The frozen full-screen capture.
        region (Rect): The committed selection in overlay coordinates.
        recognizer (OllamaRecognizer): Client for the OCR backend.
        scale (float): Device pixel ratio between overlay and snapshot.

    Returns:
        RecognitionResult: The recognized text and elapsed time.

    Raises:
        PreprocessError: Cropping or preprocessing failed.
        RecognitionError: The backend call failed (any of its subclasses).
    """
    logger.info(f"Recognizing region {region}")
    payload = prepare_payload(snapshot, region, scale=scale)
    return await recognizer.recognize(payload)


async def recognize_selection(
    snapshot: ScreenSnapshot,
    selector: RegionSelector,
    recognizer: OllamaRecognizer,
    scale: float = 1.0,
) -> RecognitionResult:
    """
    Recognizes the committed region of a finished selector.

    Raises:
        SelectionCancelled: The selection was cancelled; no request is sent.
    """
    region = selector.result()
    return await recognize_region(snapshot, region, recognizer, scale=scale)


def format_failure(error: MarkdownOCRError, settings: BackendSettings) -> str:
    """Builds the message shown in the result window for a failed run."""
    if isinstance(error, RecognitionError):
        hint = error.hint(model=settings.model, base_url=settings.base_url)
        return f"OCR recognition failed\n\n{error}\n\n{hint}"
    return f"Screenshot processing failed\n\n{error}"
