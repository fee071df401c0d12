import logging
import time
from typing import Callable, List, Optional

import cv2
import mediapipe as mp

from pose_types import NUM_LANDMARKS, Landmark2D, PoseFrame

logger = logging.getLogger(__name__)


class PoseDetector:
    def __init__(
        self,
        min_detection_confidence: float = 0.5,
        min_tracking_confidence: float = 0.5,
        visibility_threshold: float = 0.0,
        model=None,
    ):
        self.visibility_threshold = visibility_threshold
        self._busy = False
        if model is None:
            model = mp.solutions.pose.Pose(
                static_image_mode=False,
                model_complexity=1,
                smooth_landmarks=True,
                enable_segmentation=False,
                min_detection_confidence=min_detection_confidence,
                min_tracking_confidence=min_tracking_confidence,
            )
            logger.info("Pose model loaded")
        self._pose = model

    @property
    def busy(self) -> bool:
        return self._busy

    def process(self, frame_bgr, timestamp: float) -> Optional[PoseFrame]:
        # At most one inference in flight; a frame submitted meanwhile is dropped.
        if self._busy:
            logger.debug("Detector busy, dropping frame at %.3f", timestamp)
            return None

        self._busy = True
        try:
            height, width = frame_bgr.shape[:2]
            frame_rgb = cv2.cvtColor(frame_bgr, cv2.COLOR_BGR2RGB)
            results = self._pose.process(frame_rgb)
        finally:
            self._busy = False

        landmarks: List[Optional[Landmark2D]] = [None] * NUM_LANDMARKS
        if results.pose_landmarks is None:
            return PoseFrame(timestamp=timestamp, image_size=(width, height), landmarks=landmarks, valid=False)

        for idx, lm in enumerate(results.pose_landmarks.landmark[:NUM_LANDMARKS]):
            if lm.visibility < self.visibility_threshold:
                continue
            landmarks[idx] = Landmark2D(lm.x, lm.y, lm.z, lm.visibility)

        return PoseFrame(timestamp=timestamp, image_size=(width, height), landmarks=landmarks, valid=True)

    def close(self) -> None:
        self._pose.close()


class DetectorLoader:
    """Builds the detector lazily and retries a failed load on a fixed interval.

    Only the first failure logs a traceback; later ones log a single line.
    """

    def __init__(self, factory: Callable[[], PoseDetector], retry_seconds: float = 5.0, clock=time.monotonic):
        self.factory = factory
        self.retry_seconds = retry_seconds
        self._clock = clock
        self._detector: Optional[PoseDetector] = None
        self._last_failure: Optional[float] = None
        self.failures = 0

    @property
    def failed(self) -> bool:
        return self._detector is None and self.failures > 0

    def get(self) -> Optional[PoseDetector]:
        if self._detector is not None:
            return self._detector
        now = self._clock()
        if self._last_failure is not None and now - self._last_failure < self.retry_seconds:
            return None
        try:
            self._detector = self.factory()
        except Exception as exc:
            self._last_failure = now
            self.failures += 1
            if self.failures == 1:
                logger.exception("Failed to load pose model")
            else:
                logger.warning("Pose model still unavailable (%d attempts): %s", self.failures, exc)
            return None
        self._last_failure = None
        self.failures = 0
        return self._detector

    def close(self) -> None:
        if self._detector is not None:
            self._detector.close()
            self._detector = None
