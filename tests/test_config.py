import pytest

from config import DEFAULT_TOLERANCES, Threshold, ToleranceConfig, config_from_args
from pose_types import CheckName


def test_default_table():
    knee = DEFAULT_TOLERANCES.threshold(CheckName.KNEE_FLEXION)
    assert (knee.low, knee.high, knee.tolerance) == (10.0, 35.0, 15.0)
    assert DEFAULT_TOLERANCES.threshold(CheckName.ARM_RELAXATION).high == 0.2
    assert DEFAULT_TOLERANCES.enabled_checks == frozenset(CheckName)
    assert CheckName.HEAD_POSITION not in DEFAULT_TOLERANCES.thresholds


def test_ideal_and_tolerance_bands_differ():
    band = Threshold(10.0, 35.0, 15.0)
    assert band.in_ideal(10.0) and band.in_ideal(35.0)
    assert not band.in_ideal(9.9)
    assert band.in_tolerance(-5.0) and band.in_tolerance(50.0)
    assert not band.in_tolerance(50.1)
    assert not band.in_tolerance(-5.1)


def test_upper_only_band():
    band = Threshold(None, 0.12, 0.06)
    assert band.in_ideal(0.0)
    assert not band.in_ideal(0.13)
    assert band.in_tolerance(0.18)
    assert not band.in_tolerance(0.19)


def test_invalid_thresholds_rejected():
    with pytest.raises(ValueError):
        Threshold(40.0, 10.0, 5.0)
    with pytest.raises(ValueError):
        Threshold(None, 0.1, -0.1)


def test_enabled_check_needs_threshold():
    with pytest.raises(ValueError):
        ToleranceConfig(thresholds={CheckName.KNEE_FLEXION: Threshold(10.0, 35.0, 15.0)})
    only_knees = ToleranceConfig(
        thresholds={CheckName.KNEE_FLEXION: Threshold(10.0, 35.0, 15.0)},
        enabled_checks=frozenset({CheckName.KNEE_FLEXION, CheckName.HEAD_POSITION}),
    )
    assert only_knees.is_enabled(CheckName.HEAD_POSITION)


def test_tolerances_are_read_only():
    with pytest.raises(TypeError):
        DEFAULT_TOLERANCES.thresholds[CheckName.KNEE_FLEXION] = Threshold(0.0, 1.0, 0.0)


def test_config_from_args():
    config = config_from_args(["--camera", "2", "--mute", "--cooldown", "3", "--skip-torso-check"])
    assert config.camera_index == 2
    assert config.sound_enabled is False
    assert config.speech_cooldown == 3.0
    assert config.mirror is True
    assert not config.tolerances.is_enabled(CheckName.TORSO_THIGH_CONTACT)
