# -*- coding: utf-8 -*-
"""
The Utilities Package for MarkdownOCR.

Small helpers used by the GUI layer, kept out of the core pipeline.
"""

from .clipboard_manager import copy_to_clipboard

__all__ = [
    "copy_to_clipboard",
]
