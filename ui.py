from typing import Dict, List, Tuple

import cv2

from pose_types import CheckName

CHECK_LABELS: Dict[CheckName, str] = {
    CheckName.KNEE_FLEXION: "Knees",
    CheckName.HIP_HEEL_DISTANCE: "Hips to heels",
    CheckName.TORSO_THIGH_CONTACT: "Torso on thighs",
    CheckName.HEAD_POSITION: "Head low",
    CheckName.SPINE_CURVATURE: "Spine",
    CheckName.SHOULDER_RELAXATION: "Shoulders",
    CheckName.ARM_RELAXATION: "Arms",
}


def wrap_line(line: str, max_chars: int = 48) -> List[str]:
    words = line.split()
    if not words:
        return [""]
    wrapped: List[str] = []
    current = words[0]
    for word in words[1:]:
        if len(current) + 1 + len(word) > max_chars:
            wrapped.append(current)
            current = word
        else:
            current = f"{current} {word}"
    wrapped.append(current)
    return wrapped


def draw_status_panel(frame, lines, origin=(10, 30), color=(255, 255, 255)) -> int:
    """Draw text lines with a dark backing; returns the y just below the last line."""
    x, y = origin
    wrapped = [part for line in lines for part in wrap_line(line)]
    if wrapped:
        height = 28 * len(wrapped) + 8
        width = 12 + 13 * max(len(part) for part in wrapped)
        cv2.rectangle(frame, (x - 6, y - 22), (x + width, y - 22 + height), (30, 30, 30), -1)
    for line in wrapped:
        cv2.putText(frame, line, (x, y), cv2.FONT_HERSHEY_SIMPLEX, 0.7, color, 2)
        y += 28
    return y


def check_lines(status: Dict[CheckName, bool]) -> List[Tuple[str, bool]]:
    return [(CHECK_LABELS.get(name, name.value), passed) for name, passed in status.items()]


def draw_check_list(frame, status: Dict[CheckName, bool], origin=(10, 30)) -> None:
    x, y = origin
    for label, passed in check_lines(status):
        color = (0, 200, 0) if passed else (0, 0, 255)
        mark = "OK" if passed else "--"
        cv2.putText(frame, f"{mark} {label}", (x, y), cv2.FONT_HERSHEY_SIMPLEX, 0.55, color, 1)
        y += 22
