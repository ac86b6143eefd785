"""
Pytest configuration and fixtures

This module provides shared fixtures and configuration for all tests.
"""

import os
import sys
from pathlib import Path

import httpx
import numpy as np
import pytest

# Qt must not try to open a real display.
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

# Ensure the project root is in the path
sys.path.insert(0, str(Path(__file__).parent.parent))

from src.markdownocr.config import BackendSettings
from src.markdownocr.core.recognizer import OllamaRecognizer
from src.markdownocr.core.snapshot import ScreenSnapshot


@pytest.fixture
def settings():
    """Default settings with a short timeout so timeout tests stay fast."""
    return BackendSettings(timeout=2.0, probe_timeout=1.0)


@pytest.fixture
def snapshot():
    """A 640x480 BGRA snapshot with a horizontal color gradient."""
    height, width = 480, 640
    pixels = np.zeros((height, width, 4), dtype=np.uint8)
    pixels[:, :, 0] = np.linspace(0, 255, width, dtype=np.uint8)  # blue ramp
    pixels[:, :, 1] = 96
    pixels[:, :, 2] = np.linspace(255, 0, width, dtype=np.uint8)[np.newaxis, :]  # red ramp
    pixels[:, :, 3] = 255
    # Dark "text" block so the crop is not uniform
    pixels[120:140, 110:290, :3] = 20
    return ScreenSnapshot(pixels=pixels)


@pytest.fixture
def make_recognizer(settings):
    """
    Builds an OllamaRecognizer whose HTTP calls go to `handler`.

    Every request the mock backend sees is recorded in `recognizer.requests`.
    """
    def factory(handler, backend_settings=None):
        requests = []

        async def recording_handler(request: httpx.Request):
            requests.append(request)
            result = handler(request)
            if not isinstance(result, httpx.Response):
                result = await result
            return result

        recognizer = OllamaRecognizer(
            backend_settings or settings,
            transport=httpx.MockTransport(recording_handler),
        )
        recognizer.requests = requests
        return recognizer

    return factory


def pytest_configure(config):
    """Configure pytest with custom markers"""
    config.addinivalue_line(
        "markers", "slow: marks tests that wait on timers (deselect with '-m \"not slow\"')"
    )
    config.addinivalue_line(
        "markers", "gui: marks tests that create Qt widgets"
    )
    config.addinivalue_line(
        "markers", "network: marks tests that exercise the HTTP client against a mock backend"
    )


def pytest_collection_modifyitems(config, items):
    """Modify test collection to add markers based on test names"""
    for item in items:
        nodeid = item.nodeid.lower()
        if "overlay" in nodeid or "results_window" in nodeid:
            item.add_marker(pytest.mark.gui)
        if "recognizer" in nodeid or "pipeline" in nodeid:
            item.add_marker(pytest.mark.network)
        if "timeout" in nodeid or "end_to_end" in nodeid:
            item.add_marker(pytest.mark.slow)
