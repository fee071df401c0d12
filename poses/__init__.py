from poses.base import CheckResult, EvaluationOutcome, OutcomeKind, PoseEvaluatorBase
from poses.child_pose import ChildPoseEvaluator

__all__ = [
    "CheckResult",
    "EvaluationOutcome",
    "OutcomeKind",
    "PoseEvaluatorBase",
    "ChildPoseEvaluator",
]
