import os

import numpy as np
import pytest

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")
QtWidgets = pytest.importorskip("PySide6.QtWidgets")

from app import CAMERA_UNAVAILABLE_MESSAGE, MODEL_UNAVAILABLE_MESSAGE  # noqa: E402
from camera import CameraFrame  # noqa: E402
from config import AppConfig  # noqa: E402
from gui_app import PracticePage  # noqa: E402
from pose_detection import DetectorLoader  # noqa: E402


class FakeStream:
    def __init__(self, opens=True):
        self.opens = opens
        self.is_open = False
        self.open_calls = 0

    def ensure_open(self):
        self.open_calls += 1
        self.is_open = self.opens
        return self.is_open

    def read(self):
        return CameraFrame(np.zeros((48, 64, 3), dtype=np.uint8), 0.0, True)

    def release(self):
        self.is_open = False


class FakeClock:
    def __init__(self):
        self.now = 0.0

    def __call__(self):
        return self.now


@pytest.fixture(scope="module")
def qapp():
    return QtWidgets.QApplication.instance() or QtWidgets.QApplication([])


def test_model_failure_is_retried_on_interval_not_every_tick(qapp):
    page = PracticePage(AppConfig())
    page.camera = FakeStream()
    clock = FakeClock()
    attempts = []

    def factory():
        attempts.append(clock.now)
        raise RuntimeError("model file missing")

    page.detectors = DetectorLoader(factory, retry_seconds=5.0, clock=clock)
    for tick in range(100):
        clock.now = tick * 0.033
        page._update_frame()

    assert attempts == [0.0]
    assert page.error_label.text() == MODEL_UNAVAILABLE_MESSAGE
    assert page.camera.open_calls == 1


def test_closed_camera_shows_message_and_skips_read(qapp):
    page = PracticePage(AppConfig())
    page.camera = FakeStream(opens=False)
    page._update_frame()
    page._update_frame()

    assert page.error_label.text() == CAMERA_UNAVAILABLE_MESSAGE
    assert page.camera.open_calls == 2
