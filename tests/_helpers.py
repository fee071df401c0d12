import math
from typing import List, Optional

from pose_types import NUM_LANDMARKS, BodyPart, Landmark2D, PoseFrame

HIP = (0.5, 0.5)
KNEE = (0.6, 0.6)
SHOULDER = (0.7, 0.6)


def point_from(origin, degrees: float, radius: float) -> Landmark2D:
    ox, oy = origin
    rad = math.radians(degrees)
    return Landmark2D(ox + radius * math.cos(rad), oy + radius * math.sin(rad))


def heading(origin, target) -> float:
    return math.degrees(math.atan2(target[1] - origin[1], target[0] - origin[0]))


def child_pose(knee_angle: float = 25.0, spine_angle: float = 80.0) -> List[Optional[Landmark2D]]:
    """A side-on child's pose that passes every ideal band with the defaults.

    ``knee_angle`` and ``spine_angle`` place the ankles and nose so that the
    corresponding measurements come out at exactly those values.
    """
    lms: List[Optional[Landmark2D]] = [None] * NUM_LANDMARKS

    for part in (BodyPart.LEFT_HIP, BodyPart.RIGHT_HIP):
        lms[part] = Landmark2D(*HIP)
    for part in (BodyPart.LEFT_KNEE, BodyPart.RIGHT_KNEE):
        lms[part] = Landmark2D(*KNEE)
    for part in (BodyPart.LEFT_SHOULDER, BodyPart.RIGHT_SHOULDER):
        lms[part] = Landmark2D(*SHOULDER)

    ankle_heading = heading(KNEE, HIP) - knee_angle
    for part in (BodyPart.LEFT_ANKLE, BodyPart.RIGHT_ANKLE):
        lms[part] = point_from(KNEE, ankle_heading, 0.1)
    for part in (BodyPart.LEFT_HEEL, BodyPart.RIGHT_HEEL):
        lms[part] = Landmark2D(0.52, 0.55)

    nose_heading = heading(SHOULDER, HIP) - spine_angle
    lms[BodyPart.NOSE] = point_from(SHOULDER, nose_heading, 0.25)
    lms[BodyPart.LEFT_EAR] = Landmark2D(lms[BodyPart.NOSE].x + 0.03, lms[BodyPart.NOSE].y - 0.02)
    lms[BodyPart.RIGHT_EAR] = Landmark2D(lms[BodyPart.NOSE].x + 0.03, lms[BodyPart.NOSE].y - 0.01)

    for part in (BodyPart.LEFT_WRIST, BodyPart.RIGHT_WRIST):
        lms[part] = Landmark2D(0.8, 0.65)
    return lms


def set_point(lms, part: BodyPart, x: float, y: float, visibility: float = 1.0) -> None:
    lms[part] = Landmark2D(x, y, 0.0, visibility)


def pose_frame(lms, valid: bool = True, timestamp: float = 0.0) -> PoseFrame:
    return PoseFrame(timestamp=timestamp, image_size=(100, 100), landmarks=lms, valid=valid)
