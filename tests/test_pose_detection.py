import logging
from types import SimpleNamespace

import numpy as np
import pytest

from app import analyse_frame
from coach import ChildPoseCoach
from feedback_throttle import FeedbackThrottle
from pose_detection import DetectorLoader, PoseDetector
from poses import ChildPoseEvaluator, OutcomeKind


class FakeModel:
    def __init__(self, on_process=None):
        self.on_process = on_process
        self.calls = 0
        self.closed = False

    def process(self, frame_rgb):
        self.calls += 1
        if self.on_process is not None:
            self.on_process()
        return SimpleNamespace(pose_landmarks=None)

    def close(self):
        self.closed = True


class FakeClock:
    def __init__(self, now=0.0):
        self.now = now

    def __call__(self):
        return self.now


def _frame():
    return np.zeros((48, 64, 3), dtype=np.uint8)


def _coach():
    return ChildPoseCoach(ChildPoseEvaluator(), FeedbackThrottle(), None)


def test_frame_submitted_during_inference_is_dropped():
    seen = {}
    model = FakeModel()
    detector = PoseDetector(model=model)

    def reenter():
        seen["busy"] = detector.busy
        seen["nested"] = detector.process(_frame(), 1.0)

    model.on_process = reenter
    pose = detector.process(_frame(), 0.0)

    assert seen == {"busy": True, "nested": None}
    assert model.calls == 1
    assert pose is not None and not pose.valid
    assert pose.image_size == (64, 48)
    assert not detector.busy


def test_busy_flag_clears_when_model_raises():
    def boom():
        raise RuntimeError("inference failed")

    detector = PoseDetector(model=FakeModel(on_process=boom))
    with pytest.raises(RuntimeError):
        detector.process(_frame(), 0.0)
    assert not detector.busy


def test_analyse_frame_skips_while_busy():
    seen = {}
    coach = _coach()
    model = FakeModel()
    detector = PoseDetector(model=model)

    def reenter():
        seen["nested"] = analyse_frame(detector, coach, _frame(), 1.0)

    model.on_process = reenter
    pose, outcome = analyse_frame(detector, coach, _frame(), 0.0)

    assert seen["nested"] is None
    assert model.calls == 1
    assert outcome.kind == OutcomeKind.NO_PERSON
    assert not pose.valid


def test_loader_builds_once_and_closes():
    built = []

    def factory():
        built.append(PoseDetector(model=FakeModel()))
        return built[-1]

    loader = DetectorLoader(factory)
    first = loader.get()
    assert loader.get() is first
    assert len(built) == 1

    loader.close()
    assert built[0]._pose.closed


def test_failed_load_backs_off_and_logs_one_traceback(caplog):
    clock = FakeClock()
    attempts = []

    def factory():
        attempts.append(clock.now)
        raise RuntimeError("model file missing")

    loader = DetectorLoader(factory, retry_seconds=5.0, clock=clock)
    with caplog.at_level(logging.WARNING, logger="pose_detection"):
        # One tick every 33 ms for ~12 s.
        for tick in range(360):
            clock.now = tick * 0.033
            assert loader.get() is None

    assert len(attempts) == 3
    assert loader.failed
    assert loader.failures == 3
    tracebacks = [r for r in caplog.records if r.exc_info]
    assert len(tracebacks) == 1
    assert len(caplog.records) == 3


def test_loader_recovers_after_retry_interval():
    clock = FakeClock()
    state = {"fail": True}

    def factory():
        if state["fail"]:
            raise RuntimeError("not yet")
        return PoseDetector(model=FakeModel())

    loader = DetectorLoader(factory, retry_seconds=5.0, clock=clock)
    assert loader.get() is None

    state["fail"] = False
    clock.now = 1.0
    assert loader.get() is None

    clock.now = 5.5
    assert loader.get() is not None
    assert not loader.failed
    assert loader.failures == 0
