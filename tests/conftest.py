"""Shared fixtures for the target vision test suite."""
import numpy as np
import pytest

from target_vision.utils.rect import Rect


@pytest.fixture
def target_pair():
    """Two identical stripes forming an ideal target."""
    return Rect(100, 50, 10, 40), Rect(130, 50, 10, 40)


@pytest.fixture
def spurious_rect():
    """Wide, short blob that matches neither stripe."""
    return Rect(10, 200, 60, 8)


@pytest.fixture
def make_contour():
    """Build a contour whose cv2.boundingRect is exactly (x, y, w, h)."""
    def _make(x, y, w, h):
        x2 = x + max(w - 1, 0)
        y2 = y + max(h - 1, 0)
        return np.array([[[x, y]], [[x2, y]], [[x2, y2]], [[x, y2]]], dtype=np.int32)
    return _make


@pytest.fixture
def make_target_frame():
    """Black BGR frame with filled green rectangles drawn at the given rects."""
    def _make(rects, size=(320, 240)):
        frame = np.zeros((size[1], size[0], 3), dtype=np.uint8)
        for r in rects:
            x, y, w, h = r
            frame[y:y + h, x:x + w] = (0, 255, 0)
        return frame
    return _make


class FakeCapture:
    """cv2.VideoCapture stand-in that replays a list of frames."""

    def __init__(self, frames):
        self._frames = list(frames)
        self.reads = 0

    def read(self):
        self.reads += 1
        if not self._frames:
            return False, None
        return True, self._frames.pop(0)

    def isOpened(self):
        return True

    def release(self):
        self._frames = []


class FakePipeline:
    """Pipeline stand-in: each 'frame' already is the list of contours."""

    def process(self, frame):
        return frame


@pytest.fixture
def fake_capture():
    return FakeCapture


@pytest.fixture
def fake_pipeline():
    return FakePipeline()
