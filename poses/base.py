from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, FrozenSet, List, Mapping, Optional, Set

from pose_types import CheckName, LandmarkSet


class OutcomeKind(Enum):
    NO_PERSON = "no_person"
    MISSING_PARTS = "missing_parts"
    NEEDS_CORRECTION = "needs_correction"
    GOOD_POSE = "good_pose"


@dataclass(frozen=True)
class CheckResult:
    name: CheckName
    passed: bool
    feedback: Optional[str] = None
    value: Optional[float] = None

    @property
    def out_of_tolerance(self) -> bool:
        return self.feedback is not None


@dataclass
class EvaluationOutcome:
    kind: OutcomeKind
    feedback_messages: List[str]
    check_status: Dict[CheckName, bool] = field(default_factory=dict)
    landmark_checks: Mapping[int, FrozenSet[CheckName]] = field(default_factory=dict)
    checks: List[CheckResult] = field(default_factory=list)
    good_streak: int = 0

    @property
    def resets_session(self) -> bool:
        return self.kind in (OutcomeKind.NO_PERSON, OutcomeKind.MISSING_PARTS)

    @property
    def feedback_text(self) -> str:
        return "\n".join(self.feedback_messages)

    @property
    def failing_checks(self) -> Set[CheckName]:
        return {check.name for check in self.checks if check.out_of_tolerance}

    def failing_landmarks(self) -> Set[int]:
        failing = self.failing_checks
        return {idx for idx, names in self.landmark_checks.items() if names & failing}


class PoseEvaluatorBase:
    required_landmarks: List[int] = []

    def evaluate(self, landmarks: Optional[LandmarkSet], good_streak: int = 0) -> EvaluationOutcome:
        raise NotImplementedError
