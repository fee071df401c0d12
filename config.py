import argparse
import logging
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import FrozenSet, List, Mapping, Optional

from pose_types import CheckName


@dataclass(frozen=True)
class Threshold:
    """Ideal band for one measurement plus the slack allowed before feedback.

    ``low`` is ``None`` for measurements that only have an upper limit
    (distances). Status uses the ideal band; feedback uses the band widened
    by ``tolerance`` on each side.
    """

    low: Optional[float]
    high: float
    tolerance: float

    def __post_init__(self):
        if self.tolerance < 0:
            raise ValueError(f"tolerance must be >= 0, got {self.tolerance}")
        if self.low is not None and self.low > self.high:
            raise ValueError(f"ideal band is empty: [{self.low}, {self.high}]")

    def in_ideal(self, value: float) -> bool:
        if self.low is not None and value < self.low:
            return False
        return value <= self.high

    def in_tolerance(self, value: float) -> bool:
        if self.low is not None and value < self.low - self.tolerance:
            return False
        return value <= self.high + self.tolerance


ALL_CHECKS: FrozenSet[CheckName] = frozenset(CheckName)

_DEFAULT_THRESHOLDS = {
    CheckName.KNEE_FLEXION: Threshold(10.0, 35.0, 15.0),
    CheckName.HIP_HEEL_DISTANCE: Threshold(None, 0.12, 0.06),
    CheckName.TORSO_THIGH_CONTACT: Threshold(None, 0.15, 0.08),
    CheckName.SPINE_CURVATURE: Threshold(40.0, 120.0, 25.0),
    CheckName.SHOULDER_RELAXATION: Threshold(None, 0.06, 0.04),
    CheckName.ARM_RELAXATION: Threshold(None, 0.2, 0.08),
}


def _default_thresholds() -> Mapping[CheckName, Threshold]:
    return MappingProxyType(dict(_DEFAULT_THRESHOLDS))


@dataclass(frozen=True)
class ToleranceConfig:
    # Head position is binary and has no entry here.
    thresholds: Mapping[CheckName, Threshold] = field(default_factory=_default_thresholds)
    enabled_checks: FrozenSet[CheckName] = ALL_CHECKS
    # Landmarks below this visibility count as missing. 0.0 gates on presence only.
    min_visibility: float = 0.0

    def __post_init__(self):
        missing = [
            name
            for name in self.enabled_checks
            if name is not CheckName.HEAD_POSITION and name not in self.thresholds
        ]
        if missing:
            names = ", ".join(sorted(name.value for name in missing))
            raise ValueError(f"no threshold configured for: {names}")
        if not isinstance(self.thresholds, MappingProxyType):
            object.__setattr__(self, "thresholds", MappingProxyType(dict(self.thresholds)))
        object.__setattr__(self, "enabled_checks", frozenset(self.enabled_checks))

    def threshold(self, name: CheckName) -> Threshold:
        return self.thresholds[name]

    def is_enabled(self, name: CheckName) -> bool:
        return name in self.enabled_checks

    def without(self, *names: CheckName) -> "ToleranceConfig":
        return ToleranceConfig(
            thresholds=self.thresholds,
            enabled_checks=self.enabled_checks.difference(names),
            min_visibility=self.min_visibility,
        )


DEFAULT_TOLERANCES = ToleranceConfig()


@dataclass(frozen=True)
class AppConfig:
    camera_index: int = 0
    width: int = 1280
    height: int = 720
    target_fps: int = 30
    mirror: bool = True
    min_detection_confidence: float = 0.5
    min_tracking_confidence: float = 0.5
    draw_visibility: float = 0.1
    speech_cooldown: float = 5.0
    sound_enabled: bool = True
    speech_rate: int = 170
    log_level: str = "INFO"
    tolerances: ToleranceConfig = DEFAULT_TOLERANCES


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Real-time child's pose feedback from a webcam.")
    parser.add_argument("--camera", type=int, default=0, help="camera index")
    parser.add_argument("--width", type=int, default=1280)
    parser.add_argument("--height", type=int, default=720)
    parser.add_argument("--fps", type=int, default=30)
    parser.add_argument("--no-mirror", action="store_true", help="do not flip the feed horizontally")
    parser.add_argument("--mute", action="store_true", help="start with speech disabled")
    parser.add_argument("--cooldown", type=float, default=5.0, help="seconds between spoken cues")
    parser.add_argument("--skip-torso-check", action="store_true", help="disable the torso-thigh contact check")
    parser.add_argument("--log-level", default="INFO")
    return parser


def config_from_args(argv: Optional[List[str]] = None) -> AppConfig:
    args = build_arg_parser().parse_args(argv)
    tolerances = DEFAULT_TOLERANCES
    if args.skip_torso_check:
        tolerances = tolerances.without(CheckName.TORSO_THIGH_CONTACT)
    return AppConfig(
        camera_index=args.camera,
        width=args.width,
        height=args.height,
        target_fps=args.fps,
        mirror=not args.no_mirror,
        speech_cooldown=args.cooldown,
        sound_enabled=not args.mute,
        log_level=args.log_level,
        tolerances=tolerances,
    )

