import logging
from typing import List, Optional, Tuple

import cv2
import numpy as np

from camera import CameraStream
from coach import ChildPoseCoach
from config import AppConfig, config_from_args, configure_logging
from feedback_throttle import FeedbackThrottle
from pose_detection import DetectorLoader, PoseDetector
from pose_types import PoseFrame
from poses import ChildPoseEvaluator, EvaluationOutcome
from speech import SpeechEngine
from ui import draw_check_list, draw_status_panel
from visualization import draw_pose

logger = logging.getLogger(__name__)

CAMERA_UNAVAILABLE_MESSAGE = "Webcam access denied or not available."
MODEL_UNAVAILABLE_MESSAGE = "Pose model unavailable"


def build_coach(config: AppConfig, speech: Optional[SpeechEngine]) -> ChildPoseCoach:
    evaluator = ChildPoseEvaluator(config.tolerances)
    throttle = FeedbackThrottle(cooldown_seconds=config.speech_cooldown, sound_enabled=config.sound_enabled)
    return ChildPoseCoach(evaluator, throttle, speech)


def build_detector_loader(config: AppConfig) -> DetectorLoader:
    return DetectorLoader(
        lambda: PoseDetector(
            min_detection_confidence=config.min_detection_confidence,
            min_tracking_confidence=config.min_tracking_confidence,
        )
    )


def analyse_frame(
    detector: PoseDetector, coach: ChildPoseCoach, frame, timestamp: float
) -> Optional[Tuple[PoseFrame, EvaluationOutcome]]:
    # A frame arriving while an inference is still in flight is dropped, not queued.
    if detector.busy:
        return None
    pose = detector.process(frame, timestamp)
    if pose is None:
        return None
    return pose, coach.process(pose, timestamp).outcome


def _show_message(window_name: str, lines: List[str]) -> int:
    blank = np.zeros((480, 640, 3), dtype=np.uint8)
    draw_status_panel(blank, lines, origin=(10, 30))
    cv2.imshow(window_name, blank)
    return cv2.waitKey(1)


def main(argv: Optional[List[str]] = None):
    config = config_from_args(argv)
    configure_logging(config.log_level)
    window_name = "Child's Pose Coach"

    camera = CameraStream(
        camera_index=config.camera_index,
        width=config.width,
        height=config.height,
        target_fps=config.target_fps,
        mirror=config.mirror,
    )
    cv2.namedWindow(window_name, cv2.WINDOW_NORMAL)
    while not camera.open_with_retry(attempts=3, delay_seconds=1.0):
        logger.error("Camera %d unavailable", config.camera_index)
        key = _show_message(window_name, [CAMERA_UNAVAILABLE_MESSAGE, "R: retry, Q: quit"])
        while key & 0xFF not in (ord("q"), ord("r")):
            key = cv2.waitKey(100)
        if key & 0xFF == ord("q"):
            cv2.destroyAllWindows()
            return

    detectors = build_detector_loader(config)
    speech = SpeechEngine(rate=config.speech_rate)
    speech.start()
    coach = build_coach(config, speech)

    try:
        while True:
            if cv2.getWindowProperty(window_name, cv2.WND_PROP_VISIBLE) < 1:
                break
            if not camera.ensure_open():
                if _show_message(window_name, [CAMERA_UNAVAILABLE_MESSAGE, "Q: quit"]) & 0xFF == ord("q"):
                    break
                continue
            cam_frame = camera.read()
            if not cam_frame.ok:
                if _show_message(window_name, ["Camera error"]) & 0xFF == ord("q"):
                    break
                continue

            frame = cam_frame.frame
            footer = []
            detector = detectors.get()
            if detector is None:
                footer.append(MODEL_UNAVAILABLE_MESSAGE)
            else:
                analysed = analyse_frame(detector, coach, frame, cam_frame.timestamp)
                if analysed is not None:
                    pose, outcome = analysed
                    draw_pose(
                        frame,
                        pose,
                        failing=outcome.failing_landmarks(),
                        visibility_threshold=config.draw_visibility,
                    )
                    # Shown every frame, whether or not anything was spoken.
                    bottom = draw_status_panel(frame, outcome.feedback_messages, origin=(10, 30))
                    draw_check_list(frame, outcome.check_status, origin=(10, bottom + 10))

            sound = "on" if coach.throttle.sound_enabled else "off"
            footer.append(f"Sound: {sound}  (M toggle, Q quit)")
            draw_status_panel(frame, footer, origin=(10, frame.shape[0] - 28 * len(footer)))
            cv2.imshow(window_name, frame)

            key = cv2.waitKey(1)
            if key & 0xFF == ord("q"):
                break
            if key & 0xFF == ord("m"):
                coach.throttle.toggle_sound()
    finally:
        speech.close()
        detectors.close()
        camera.release()
        cv2.destroyAllWindows()


if __name__ == "__main__":
    main()
