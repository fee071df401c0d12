from typing import Iterable, List, Optional, Set, Tuple

import cv2

from pose_types import BodyPart as P
from pose_types import Landmark2D, PoseFrame

# BGR
GOOD_COLOR = (0, 255, 0)
BAD_COLOR = (0, 0, 255)
LINE_COLOR = (255, 255, 255)

CONNECTIONS: List[Tuple[int, int]] = [
    (P.LEFT_SHOULDER, P.RIGHT_SHOULDER),
    (P.LEFT_SHOULDER, P.LEFT_HIP),
    (P.RIGHT_SHOULDER, P.RIGHT_HIP),
    (P.LEFT_HIP, P.RIGHT_HIP),
    (P.LEFT_HIP, P.LEFT_KNEE),
    (P.RIGHT_HIP, P.RIGHT_KNEE),
    (P.LEFT_KNEE, P.LEFT_ANKLE),
    (P.RIGHT_KNEE, P.RIGHT_ANKLE),
    (P.LEFT_SHOULDER, P.LEFT_ELBOW),
    (P.RIGHT_SHOULDER, P.RIGHT_ELBOW),
    (P.LEFT_ELBOW, P.LEFT_WRIST),
    (P.RIGHT_ELBOW, P.RIGHT_WRIST),
]


def _to_pixel(lm: Landmark2D, image_size: Tuple[int, int]) -> Tuple[int, int]:
    width, height = image_size
    return int(lm.x * width), int(lm.y * height)


def _drawable(lm: Optional[Landmark2D], visibility_threshold: float) -> bool:
    return lm is not None and lm.visibility > visibility_threshold


def draw_pose(
    frame,
    pose: PoseFrame,
    failing: Optional[Iterable[int]] = None,
    visibility_threshold: float = 0.1,
) -> int:
    """Draw skeleton lines and landmark dots; landmarks in ``failing`` are red.

    Returns the number of landmarks drawn.
    """
    if not pose.valid:
        return 0
    failing_set: Set[int] = set(failing or ())
    lms = pose.landmarks
    height, width = frame.shape[:2]

    for a, b in CONNECTIONS:
        lm_a = lms[a] if a < len(lms) else None
        lm_b = lms[b] if b < len(lms) else None
        if not (_drawable(lm_a, visibility_threshold) and _drawable(lm_b, visibility_threshold)):
            continue
        cv2.line(frame, _to_pixel(lm_a, (width, height)), _to_pixel(lm_b, (width, height)), LINE_COLOR, 2)

    drawn = 0
    for idx, lm in enumerate(lms):
        if not _drawable(lm, visibility_threshold):
            continue
        center = _to_pixel(lm, (width, height))
        color = BAD_COLOR if idx in failing_set else GOOD_COLOR
        cv2.circle(frame, center, 5, color, -1)
        cv2.circle(frame, center, 5, LINE_COLOR, 1)
        drawn += 1
    return drawn
