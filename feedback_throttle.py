from dataclasses import dataclass, replace
from typing import Optional

from poses.base import EvaluationOutcome, OutcomeKind


@dataclass(frozen=True)
class SessionState:
    consecutive_good_frames: int = 0
    last_spoken_message: str = ""
    last_speech_timestamp: Optional[float] = None


@dataclass(frozen=True)
class SpeechDecision:
    text: Optional[str]
    state: SessionState


class FeedbackThrottle:
    """Decides which feedback line, if any, to hand to the speech engine.

    The session state is passed in and returned rather than kept here, so a
    caller can replay a sequence of outcomes deterministically.
    """

    def __init__(self, cooldown_seconds: float = 5.0, sound_enabled: bool = True):
        self.cooldown_seconds = cooldown_seconds
        self.sound_enabled = sound_enabled

    def toggle_sound(self) -> bool:
        self.sound_enabled = not self.sound_enabled
        return self.sound_enabled

    @staticmethod
    def candidate_text(outcome: EvaluationOutcome) -> Optional[str]:
        if not outcome.feedback_messages:
            return None
        if outcome.kind == OutcomeKind.GOOD_POSE:
            return " ".join(outcome.feedback_messages)
        return outcome.feedback_messages[0]

    def update(self, outcome: EvaluationOutcome, state: SessionState, now: float) -> SpeechDecision:
        if outcome.resets_session:
            # Cleared so the same correction can be spoken as soon as the person is back.
            return SpeechDecision(None, SessionState())

        state = replace(state, consecutive_good_frames=outcome.good_streak)
        text = self.candidate_text(outcome)
        if text is None or not self.sound_enabled:
            return SpeechDecision(None, state)
        if text == state.last_spoken_message:
            return SpeechDecision(None, state)
        last = state.last_speech_timestamp
        if last is not None and now - last <= self.cooldown_seconds:
            return SpeechDecision(None, state)

        return SpeechDecision(text, replace(state, last_spoken_message=text, last_speech_timestamp=now))
