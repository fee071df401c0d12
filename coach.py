from dataclasses import dataclass
from typing import Optional

from feedback_throttle import FeedbackThrottle, SessionState
from pose_types import PoseFrame
from poses.base import EvaluationOutcome, PoseEvaluatorBase


@dataclass
class CoachResult:
    outcome: EvaluationOutcome
    spoken: Optional[str]


class ChildPoseCoach:
    """Per-frame glue shared by the OpenCV and Qt front ends."""

    def __init__(self, evaluator: PoseEvaluatorBase, throttle: FeedbackThrottle, speech=None):
        self.evaluator = evaluator
        self.throttle = throttle
        self.speech = speech
        self.state = SessionState()

    def reset(self) -> None:
        self.state = SessionState()

    def process(self, pose: PoseFrame, now: float) -> CoachResult:
        landmarks = pose.landmarks if pose.valid else None
        outcome = self.evaluator.evaluate(landmarks, self.state.consecutive_good_frames)
        decision = self.throttle.update(outcome, self.state, now)
        self.state = decision.state
        if decision.text is not None and self.speech is not None:
            self.speech.say(decision.text)
        return CoachResult(outcome, decision.text)
