import math

from pose_types import Landmark2D


def distance_2d(a: Landmark2D, b: Landmark2D) -> float:
    # Normalized image space; never mix with pixel coordinates.
    return math.hypot(a.x - b.x, a.y - b.y)


def midpoint(a: Landmark2D, b: Landmark2D) -> Landmark2D:
    return Landmark2D(
        (a.x + b.x) / 2.0,
        (a.y + b.y) / 2.0,
        (a.z + b.z) / 2.0,
        (a.visibility + b.visibility) / 2.0,
    )


def angle_degrees(a: Landmark2D, b: Landmark2D, c: Landmark2D) -> float:
    # Angle at b from the difference of the two ray headings, folded into [0, 180].
    # This is not the law-of-cosines interior angle in every configuration.
    radians = math.atan2(c.y - b.y, c.x - b.x) - math.atan2(a.y - b.y, a.x - b.x)
    angle = abs(math.degrees(radians))
    if angle > 180.0:
        angle = 360.0 - angle
    return angle
