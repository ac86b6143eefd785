"""
Unit tests for the snapshot store
"""

import numpy as np
import pytest
from mss.exception import ScreenShotError

from src.markdownocr.core import snapshot as snapshot_module
from src.markdownocr.core.geometry import Rect
from src.markdownocr.core.snapshot import ScreenSnapshot, capture
from src.markdownocr.errors import CaptureError


class FakeMSS:
    """Stands in for mss.mss() with a single 64x48 primary monitor"""

    def __init__(self, fail=False):
        self.fail = fail
        self.monitors = [
            {"left": 0, "top": 0, "width": 64, "height": 48},
            {"left": 0, "top": 0, "width": 64, "height": 48},
        ]
        self.grabbed = []

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False

    def grab(self, monitor):
        if self.fail:
            raise ScreenShotError("XGetImage() failed")
        self.grabbed.append(monitor)
        pixels = np.zeros((monitor["height"], monitor["width"], 4), dtype=np.uint8)
        pixels[:, :, 2] = 200
        return pixels


class TestCapture:
    """Capturing the primary display"""

    def test_captures_primary_monitor(self, monkeypatch):
        fake = FakeMSS()
        monkeypatch.setattr(snapshot_module.mss, "mss", lambda: fake)

        snap = capture()

        assert fake.grabbed == [fake.monitors[1]]
        assert (snap.width, snap.height) == (64, 48)
        assert snap.pixels.shape == (48, 64, 4)
        assert np.all(snap.pixels[:, :, 2] == 200)

    def test_screenshot_error_becomes_capture_error(self, monkeypatch):
        monkeypatch.setattr(snapshot_module.mss, "mss", lambda: FakeMSS(fail=True))
        with pytest.raises(CaptureError) as excinfo:
            capture()
        assert isinstance(excinfo.value.__cause__, ScreenShotError)

    def test_missing_monitor_becomes_capture_error(self, monkeypatch):
        monkeypatch.setattr(snapshot_module.mss, "mss", lambda: FakeMSS())
        with pytest.raises(CaptureError):
            capture(monitor_index=5)


class TestSnapshot:
    """Immutability and cropping"""

    def test_pixels_are_read_only(self, snapshot):
        with pytest.raises(ValueError):
            snapshot.pixels[0, 0, 0] = 1

    def test_crop_copies_region(self, snapshot):
        cropped = snapshot.crop(Rect(100, 100, 200, 60))
        assert (cropped.width, cropped.height) == (200, 60)
        assert np.array_equal(cropped.pixels, snapshot.pixels[100:160, 100:300])

    def test_crop_is_owned(self, snapshot):
        cropped = snapshot.crop(Rect(0, 0, 10, 10))
        cropped.pixels[:] = 7
        assert not np.all(snapshot.pixels[0:10, 0:10] == 7)

    def test_crop_is_clipped_to_bounds(self, snapshot):
        cropped = snapshot.crop(Rect(600, 450, 100, 100))
        assert (cropped.width, cropped.height) == (40, 30)

    def test_crop_scales_device_pixels(self, snapshot):
        cropped = snapshot.crop(Rect(10, 20, 30, 40), scale=1.5)
        assert (cropped.width, cropped.height) == (45, 60)
        assert np.array_equal(cropped.pixels, snapshot.pixels[30:90, 15:60])

    def test_crop_outside_raises(self, snapshot):
        with pytest.raises(ValueError):
            snapshot.crop(Rect(700, 0, 10, 10))

    def test_rejects_bad_shape(self):
        with pytest.raises(ValueError):
            ScreenSnapshot(pixels=np.zeros((10, 10), dtype=np.uint8))
