# -*- coding: utf-8 -*-
"""
src/markdownocr/utils/clipboard_manager.py

Clipboard access for the result window, backed by 'pyperclip'.
"""

import logging

import pyperclip

logger = logging.getLogger(__name__)


def copy_to_clipboard(text: str) -> bool:
    """
    Copies the recognized Markdown to the system clipboard.

    Args:
        text (str): The raw Markdown source to copy.

    Returns:
        bool: True if the text was copied, False if no clipboard mechanism
              is available.
    """
    try:
        pyperclip.copy(text)
    except pyperclip.PyperclipException as e:
        # Typical on Linux without xclip/xsel/wl-clipboard.
        logger.error(f"Failed to copy text to clipboard: {e}")
        logger.warning(
            "Clipboard functionality may not be available on this system. "
            "If on Linux, please ensure 'xclip', 'xsel' or 'wl-clipboard' is installed."
        )
        return False
    logger.info(f"Copied {len(text)} characters to the clipboard.")
    return True
