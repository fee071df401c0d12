import logging
import time
from dataclasses import dataclass
from typing import Optional

import cv2
import numpy as np

logger = logging.getLogger(__name__)


@dataclass
class CameraFrame:
    frame: Optional[np.ndarray]
    timestamp: float
    ok: bool


class CameraStream:
    def __init__(
        self,
        camera_index: int = 0,
        width: int = 1280,
        height: int = 720,
        target_fps: int = 30,
        mirror: bool = True,
        max_failed_reads: int = 30,
        reopen_seconds: float = 2.0,
        clock=time.monotonic,
    ):
        self.camera_index = camera_index
        self.width = width
        self.height = height
        self.target_fps = target_fps
        self.mirror = mirror
        self.max_failed_reads = max_failed_reads
        self.reopen_seconds = reopen_seconds
        self._clock = clock
        self._capture: Optional[cv2.VideoCapture] = None
        self._last_time = time.time()
        self._failed_reads = 0
        self._last_open_attempt: Optional[float] = None

    @property
    def is_open(self) -> bool:
        return self._capture is not None

    def open(self) -> bool:
        self._last_open_attempt = self._clock()
        capture = cv2.VideoCapture(self.camera_index)
        if not capture.isOpened():
            capture.release()
            logger.warning("Could not open camera %d", self.camera_index)
            return False
        capture.set(cv2.CAP_PROP_FRAME_WIDTH, self.width)
        capture.set(cv2.CAP_PROP_FRAME_HEIGHT, self.height)
        capture.set(cv2.CAP_PROP_FPS, self.target_fps)
        self._capture = capture
        self._failed_reads = 0
        logger.info("Camera %d opened at %dx%d", self.camera_index, self.width, self.height)
        return True

    def open_with_retry(self, attempts: int = 3, delay_seconds: float = 1.0) -> bool:
        for attempt in range(1, attempts + 1):
            if self.open():
                return True
            if attempt < attempts:
                logger.info("Retrying camera in %.1fs (%d/%d)", delay_seconds, attempt, attempts)
                time.sleep(delay_seconds)
        return False

    def ensure_open(self) -> bool:
        """Non-blocking reopen for frame loops: at most one attempt per ``reopen_seconds``."""
        if self.is_open:
            return True
        if self._last_open_attempt is not None and self._clock() - self._last_open_attempt < self.reopen_seconds:
            return False
        return self.open()

    def read(self) -> CameraFrame:
        if self._capture is None:
            return CameraFrame(None, time.time(), False)

        ok, frame = self._capture.read()
        now = time.time()
        if not ok:
            self._failed_reads += 1
            if self._failed_reads == 1:
                logger.warning("Camera read failed")
            if self._failed_reads >= self.max_failed_reads:
                # Likely unplugged; drop the capture so the loop goes back through ensure_open.
                logger.error("Camera %d lost after %d failed reads", self.camera_index, self._failed_reads)
                self.release()
            return CameraFrame(None, now, False)
        self._failed_reads = 0

        # Keep processing close to target_fps.
        if self.target_fps > 0:
            min_frame_time = 1.0 / float(self.target_fps)
            elapsed = now - self._last_time
            if elapsed < min_frame_time:
                time.sleep(min_frame_time - elapsed)
                now = time.time()
        self._last_time = now

        if self.mirror:
            frame = cv2.flip(frame, 1)
        return CameraFrame(frame, now, True)

    def release(self) -> None:
        if self._capture is not None:
            self._capture.release()
            self._capture = None
