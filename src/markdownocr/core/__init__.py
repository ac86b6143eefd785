# -*- coding: utf-8 -*-
"""
The Core Processing Package for MarkdownOCR.

This package holds the capture-to-recognition pipeline and has no dependency
on the GUI layer:
- `snapshot`: the frozen full-screen capture and cropping.
- `selection`: the region-selection state machine.
- `image_processor`: grayscale, contrast curve, PNG and base64 encoding.
- `recognizer`: the asynchronous Ollama client.
- `pipeline`: runs the stages in order and keeps errors typed.
"""

from .geometry import Point, Rect
from .image_processor import EncodedPayload, preprocess
from .pipeline import format_failure, prepare_payload, recognize_region, recognize_selection
from .recognizer import OllamaRecognizer, RecognitionResult
from .selection import Phase, RegionSelector, SelectionState, transition
from .snapshot import CroppedImage, ScreenSnapshot, capture

__all__ = [
    "Point",
    "Rect",
    "EncodedPayload",
    "preprocess",
    "format_failure",
    "prepare_payload",
    "recognize_region",
    "recognize_selection",
    "OllamaRecognizer",
    "RecognitionResult",
    "Phase",
    "RegionSelector",
    "SelectionState",
    "transition",
    "CroppedImage",
    "ScreenSnapshot",
    "capture",
]
