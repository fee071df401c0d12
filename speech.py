import logging
import queue
import threading
from typing import Optional

import pyttsx3

logger = logging.getLogger(__name__)


class SpeechEngine:
    """Non-blocking text-to-speech on a worker thread.

    ``say`` only enqueues; playback happens on the worker so the frame loop
    never waits on the audio device.
    """

    def __init__(self, rate: int = 170, volume: float = 0.9):
        self.rate = rate
        self.volume = volume
        self._queue: "queue.Queue[Optional[str]]" = queue.Queue()
        self._thread: Optional[threading.Thread] = None
        self._engine = None

    @property
    def available(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> bool:
        if self.available:
            return True
        try:
            self._engine = pyttsx3.init()
            self._engine.setProperty("rate", self.rate)
            self._engine.setProperty("volume", self.volume)
        except Exception:
            logger.exception("Speech engine unavailable, feedback will be text only")
            self._engine = None
            return False
        self._thread = threading.Thread(target=self._worker, name="speech", daemon=True)
        self._thread.start()
        return True

    def say(self, text: str) -> None:
        if not text:
            return
        if not self.available:
            logger.info("(muted) %s", text)
            return
        logger.info("Speaking: %s", text)
        self._queue.put(text)

    def close(self, timeout: float = 1.0) -> None:
        if self._thread is None:
            return
        self._queue.put(None)
        self._thread.join(timeout=timeout)
        self._thread = None

    def _worker(self) -> None:
        while True:
            text = self._queue.get()
            if text is None:
                break
            try:
                self._engine.say(text)
                self._engine.runAndWait()
            except Exception:
                logger.exception("Speech playback failed for %r", text)
