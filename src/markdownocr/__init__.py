# -*- coding: utf-8 -*-
"""
MarkdownOCR Application Package.

Select a region of the screen and get its text back as Markdown, recognized
by a local Ollama vision model. The package is split into the Qt-free `core`
pipeline, the PyQt6 `gui` widgets and small `utils`; `app` wires them together.
"""

__version__ = "0.1.0"
