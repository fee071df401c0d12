from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import List, Optional, Sequence, Tuple


@dataclass
class Landmark2D:
    x: float
    y: float
    z: float = 0.0
    visibility: float = 1.0


class BodyPart(IntEnum):
    # Same order as MediaPipe's PoseLandmark.
    NOSE = 0
    LEFT_EYE_INNER = 1
    LEFT_EYE = 2
    LEFT_EYE_OUTER = 3
    RIGHT_EYE_INNER = 4
    RIGHT_EYE = 5
    RIGHT_EYE_OUTER = 6
    LEFT_EAR = 7
    RIGHT_EAR = 8
    MOUTH_LEFT = 9
    MOUTH_RIGHT = 10
    LEFT_SHOULDER = 11
    RIGHT_SHOULDER = 12
    LEFT_ELBOW = 13
    RIGHT_ELBOW = 14
    LEFT_WRIST = 15
    RIGHT_WRIST = 16
    LEFT_PINKY = 17
    RIGHT_PINKY = 18
    LEFT_INDEX = 19
    RIGHT_INDEX = 20
    LEFT_THUMB = 21
    RIGHT_THUMB = 22
    LEFT_HIP = 23
    RIGHT_HIP = 24
    LEFT_KNEE = 25
    RIGHT_KNEE = 26
    LEFT_ANKLE = 27
    RIGHT_ANKLE = 28
    LEFT_HEEL = 29
    RIGHT_HEEL = 30
    LEFT_FOOT_INDEX = 31
    RIGHT_FOOT_INDEX = 32


NUM_LANDMARKS = len(BodyPart)

LandmarkSet = Sequence[Optional[Landmark2D]]


class CheckName(str, Enum):
    KNEE_FLEXION = "knee_flexion"
    HIP_HEEL_DISTANCE = "hip_heel_distance"
    TORSO_THIGH_CONTACT = "torso_thigh_contact"
    HEAD_POSITION = "head_position"
    SPINE_CURVATURE = "spine_curvature"
    SHOULDER_RELAXATION = "shoulder_relaxation"
    ARM_RELAXATION = "arm_relaxation"


@dataclass
class PoseFrame:
    timestamp: float
    image_size: Tuple[int, int]
    landmarks: List[Optional[Landmark2D]]
    valid: bool
