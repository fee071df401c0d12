from types import MappingProxyType
from typing import Dict, FrozenSet, List, Mapping, Optional, Set

from config import DEFAULT_TOLERANCES, ToleranceConfig
from geometry import angle_degrees, distance_2d, midpoint
from pose_types import BodyPart as P
from pose_types import CheckName, Landmark2D, LandmarkSet
from poses.base import CheckResult, EvaluationOutcome, OutcomeKind, PoseEvaluatorBase

NO_PERSON_MESSAGE = "No person detected."
MISSING_PARTS_MESSAGE = "Cannot detect all required body parts."
BREATHING_MESSAGE = (
    "Now take slow, deep breaths. Inhale through your nose, exhale gently, "
    "and relax your body in this posture."
)

CHECK_MESSAGES: Dict[CheckName, str] = {
    CheckName.KNEE_FLEXION: "Sit deeper on your heels. Knee angle too open.",
    CheckName.HIP_HEEL_DISTANCE: "Bring your hips closer to your heels.",
    CheckName.TORSO_THIGH_CONTACT: "Fold your torso more onto your thighs.",
    CheckName.HEAD_POSITION: "Lower your head below your hips.",
    CheckName.SPINE_CURVATURE: "Relax your spine more. Allow natural curve.",
    CheckName.SHOULDER_RELAXATION: "Relax and level your shoulders.",
    CheckName.ARM_RELAXATION: "Let your arms relax alongside your body.",
}

# (minimum streak, message), highest first.
ENCOURAGEMENT_TIERS = [
    (6, "Excellent! Keep going."),
    (3, "You're doing great!"),
    (1, "Good pose!"),
]

CHECK_LANDMARKS: Dict[CheckName, List[int]] = {
    CheckName.KNEE_FLEXION: [P.LEFT_HIP, P.LEFT_KNEE, P.LEFT_ANKLE, P.RIGHT_HIP, P.RIGHT_KNEE, P.RIGHT_ANKLE],
    CheckName.HIP_HEEL_DISTANCE: [P.LEFT_HIP, P.RIGHT_HIP, P.LEFT_HEEL, P.RIGHT_HEEL],
    CheckName.TORSO_THIGH_CONTACT: [P.NOSE, P.LEFT_SHOULDER, P.RIGHT_SHOULDER, P.LEFT_HIP, P.RIGHT_HIP],
    CheckName.HEAD_POSITION: [P.NOSE, P.LEFT_EAR, P.RIGHT_EAR],
    CheckName.SPINE_CURVATURE: [P.NOSE, P.LEFT_SHOULDER, P.RIGHT_SHOULDER, P.LEFT_HIP, P.RIGHT_HIP],
    CheckName.SHOULDER_RELAXATION: [P.LEFT_SHOULDER, P.RIGHT_SHOULDER],
    CheckName.ARM_RELAXATION: [
        P.LEFT_SHOULDER,
        P.LEFT_ELBOW,
        P.LEFT_WRIST,
        P.RIGHT_SHOULDER,
        P.RIGHT_ELBOW,
        P.RIGHT_WRIST,
    ],
}


def encouragement_for(streak: int) -> str:
    for minimum, message in ENCOURAGEMENT_TIERS:
        if streak >= minimum:
            return message
    return ENCOURAGEMENT_TIERS[-1][1]


def build_landmark_checks(enabled: FrozenSet[CheckName]) -> Mapping[int, FrozenSet[CheckName]]:
    grouped: Dict[int, Set[CheckName]] = {}
    for name, indices in CHECK_LANDMARKS.items():
        if name not in enabled:
            continue
        for idx in indices:
            grouped.setdefault(int(idx), set()).add(name)
    return MappingProxyType({idx: frozenset(names) for idx, names in grouped.items()})


class ChildPoseEvaluator(PoseEvaluatorBase):
    """Rule-based checks for the child's pose (balasana).

    Each call is independent of the previous one: the only carried value is
    the good-pose streak, which callers pass in and read back from the
    outcome.
    """

    required_landmarks = [
        P.NOSE,
        P.LEFT_SHOULDER,
        P.RIGHT_SHOULDER,
        P.LEFT_HIP,
        P.RIGHT_HIP,
        P.LEFT_KNEE,
        P.RIGHT_KNEE,
        P.LEFT_ANKLE,
        P.RIGHT_ANKLE,
    ]

    def __init__(self, tolerances: ToleranceConfig = DEFAULT_TOLERANCES):
        self.tolerances = tolerances
        self.landmark_checks = build_landmark_checks(tolerances.enabled_checks)

    def evaluate(self, landmarks: Optional[LandmarkSet], good_streak: int = 0) -> EvaluationOutcome:
        if landmarks is None:
            return EvaluationOutcome(OutcomeKind.NO_PERSON, [NO_PERSON_MESSAGE], landmark_checks=self.landmark_checks)

        if any(self._get(landmarks, idx) is None for idx in self.required_landmarks):
            return EvaluationOutcome(
                OutcomeKind.MISSING_PARTS, [MISSING_PARTS_MESSAGE], landmark_checks=self.landmark_checks
            )

        checks = self._run_checks(landmarks)
        feedback = [check.feedback for check in checks if check.feedback is not None]
        status = {check.name: check.passed for check in checks}

        if feedback:
            return EvaluationOutcome(
                OutcomeKind.NEEDS_CORRECTION,
                feedback,
                check_status=status,
                landmark_checks=self.landmark_checks,
                checks=checks,
                good_streak=0,
            )

        streak = good_streak + 1
        return EvaluationOutcome(
            OutcomeKind.GOOD_POSE,
            [encouragement_for(streak), BREATHING_MESSAGE],
            check_status=status,
            landmark_checks=self.landmark_checks,
            checks=checks,
            good_streak=streak,
        )

    def _get(self, landmarks: LandmarkSet, idx: int) -> Optional[Landmark2D]:
        if idx >= len(landmarks):
            return None
        lm = landmarks[idx]
        if lm is None or lm.visibility < self.tolerances.min_visibility:
            return None
        return lm

    def _run_checks(self, lm: LandmarkSet) -> List[CheckResult]:
        def get(idx: int) -> Optional[Landmark2D]:
            return self._get(lm, idx)

        hip_center = midpoint(get(P.LEFT_HIP), get(P.RIGHT_HIP))
        shoulder_center = midpoint(get(P.LEFT_SHOULDER), get(P.RIGHT_SHOULDER))
        nose = get(P.NOSE)
        results: List[CheckResult] = []

        if self.tolerances.is_enabled(CheckName.KNEE_FLEXION):
            left = angle_degrees(get(P.LEFT_HIP), get(P.LEFT_KNEE), get(P.LEFT_ANKLE))
            right = angle_degrees(get(P.RIGHT_HIP), get(P.RIGHT_KNEE), get(P.RIGHT_ANKLE))
            results.append(self._banded(CheckName.KNEE_FLEXION, (left + right) / 2.0))

        if self.tolerances.is_enabled(CheckName.HIP_HEEL_DISTANCE):
            left_heel, right_heel = get(P.LEFT_HEEL), get(P.RIGHT_HEEL)
            if left_heel is not None and right_heel is not None:
                reference = midpoint(left_heel, right_heel)
            else:
                reference = midpoint(get(P.LEFT_ANKLE), get(P.RIGHT_ANKLE))
            results.append(self._banded(CheckName.HIP_HEEL_DISTANCE, distance_2d(hip_center, reference)))

        if self.tolerances.is_enabled(CheckName.TORSO_THIGH_CONTACT):
            knee_center = midpoint(get(P.LEFT_KNEE), get(P.RIGHT_KNEE))
            results.append(self._banded(CheckName.TORSO_THIGH_CONTACT, distance_2d(shoulder_center, knee_center)))

        if self.tolerances.is_enabled(CheckName.HEAD_POSITION):
            # y grows downward, so a larger y is lower on screen.
            head_low = nose.y > hip_center.y
            results.append(
                CheckResult(
                    CheckName.HEAD_POSITION,
                    head_low,
                    None if head_low else CHECK_MESSAGES[CheckName.HEAD_POSITION],
                    nose.y - hip_center.y,
                )
            )

        if self.tolerances.is_enabled(CheckName.SPINE_CURVATURE):
            curve = angle_degrees(nose, shoulder_center, hip_center)
            results.append(self._banded(CheckName.SPINE_CURVATURE, curve))

        if self.tolerances.is_enabled(CheckName.SHOULDER_RELAXATION):
            diff = abs(get(P.LEFT_SHOULDER).y - get(P.RIGHT_SHOULDER).y)
            results.append(self._banded(CheckName.SHOULDER_RELAXATION, diff))

        if self.tolerances.is_enabled(CheckName.ARM_RELAXATION):
            left_wrist, right_wrist = get(P.LEFT_WRIST), get(P.RIGHT_WRIST)
            if left_wrist is not None and right_wrist is not None:
                left = distance_2d(get(P.LEFT_SHOULDER), left_wrist)
                right = distance_2d(get(P.RIGHT_SHOULDER), right_wrist)
                results.append(self._banded(CheckName.ARM_RELAXATION, (left + right) / 2.0))

        return results

    def _banded(self, name: CheckName, value: float) -> CheckResult:
        threshold = self.tolerances.threshold(name)
        feedback = None if threshold.in_tolerance(value) else CHECK_MESSAGES[name]
        return CheckResult(name, threshold.in_ideal(value), feedback, value)
