import json

import pytest

from posture.config import (
	Calibration,
	PostureConfig,
	load_config,
	merge_settings,
	sanitize_settings,
	save_config,
)
from posture.constants import Sensitivity


def test_defaults():
	cfg = sanitize_settings({})
	assert cfg == PostureConfig()
	assert cfg.sensitivity == Sensitivity.MEDIUM
	assert cfg.thresholds.head_forward_angle == 15.0
	assert cfg.thresholds.shoulder_asymmetry == 10.0
	assert cfg.thresholds.poor_posture_duration == 30.0
	assert cfg.alerts.enabled is True
	assert cfg.alerts.cooldown_seconds == 300.0
	assert cfg.alerts.sound is False
	assert cfg.detection.fps == 5.0
	assert cfg.detection.confidence_threshold == 0.5
	assert cfg.calibration is None


@pytest.mark.parametrize("raw", [None, [], "settings", 42])
def test_non_object_falls_back_to_defaults(raw):
	assert sanitize_settings(raw) == PostureConfig()


def test_out_of_range_values_are_clamped():
	cfg = sanitize_settings({
		"sensitivity": "extreme",
		"thresholds": {"headForwardAngle": 120, "shoulderAsymmetry": -4, "poorPostureDuration": 0},
		"alerts": {"cooldownSeconds": 99999},
		"detection": {"fps": 100, "confidenceThreshold": 1.5},
	})
	assert cfg.sensitivity == Sensitivity.MEDIUM
	assert cfg.thresholds.head_forward_angle == 90.0
	assert cfg.thresholds.shoulder_asymmetry == 0.0
	assert cfg.thresholds.poor_posture_duration == 1.0
	assert cfg.alerts.cooldown_seconds == 3600.0
	assert cfg.detection.fps == 30.0
	assert cfg.detection.confidence_threshold == 1.0


def test_wrong_types_fall_back_to_defaults():
	cfg = sanitize_settings({
		"sensitivity": 3,
		"thresholds": {"headForwardAngle": "abc", "shoulderAsymmetry": True, "poorPostureDuration": float("nan")},
		"alerts": "loud",
		"detection": {"confidenceThreshold": None},
	})
	assert cfg == PostureConfig()


def test_boolean_strings_and_legacy_cooldown_key():
	cfg = sanitize_settings({
		"sensitivity": " HIGH ",
		"alerts": {"cooldown": 60, "enabled": "false", "sound": "yes"},
	})
	assert cfg.sensitivity == Sensitivity.HIGH
	assert cfg.alerts.cooldown_seconds == 60.0
	assert cfg.alerts.enabled is False
	assert cfg.alerts.sound is True


def test_calibration_parsing():
	assert sanitize_settings({"calibration": None}).calibration is None
	assert sanitize_settings({"calibration": {}}).calibration is None
	cal = sanitize_settings({"calibration": {"headForwardAngle": 7.5}}).calibration
	assert cal == Calibration(head_forward_angle=7.5, shoulder_asymmetry=None)


def test_to_dict_round_trip():
	cfg = sanitize_settings({
		"sensitivity": "low",
		"thresholds": {"headForwardAngle": 12},
		"calibration": {"headForwardAngle": 3, "shoulderAsymmetry": 1},
	})
	assert sanitize_settings(cfg.to_dict()) == cfg
	json.dumps(cfg.to_dict())


def test_merge_is_shallow():
	cfg = sanitize_settings({"thresholds": {"headForwardAngle": 20, "shoulderAsymmetry": 12}})
	merged = merge_settings(cfg, {"thresholds": {"headForwardAngle": 25}})
	assert merged.thresholds.head_forward_angle == 25.0
	# The whole section is replaced, so the unspecified field goes back to its default.
	assert merged.thresholds.shoulder_asymmetry == 10.0
	assert merge_settings(cfg, {"sensitivity": "high"}).thresholds == cfg.thresholds
	assert merge_settings(cfg, "nonsense") is cfg


def test_load_config_missing_file(tmp_path):
	assert load_config(tmp_path / "nope.json") == PostureConfig()


def test_load_config_malformed(tmp_path):
	p = tmp_path / "config.json"
	p.write_text("{not json", encoding="utf-8")
	assert load_config(p) == PostureConfig()
	p.write_text("[1, 2]", encoding="utf-8")
	assert load_config(p) == PostureConfig()


def test_save_and_load(tmp_path):
	cfg = sanitize_settings({"sensitivity": "high", "alerts": {"cooldownSeconds": 45}})
	p = save_config(cfg, tmp_path / "sub" / "config.json")
	assert load_config(p) == cfg


def test_numeric_strings_fall_back_to_defaults():
	cfg = sanitize_settings({
		"thresholds": {"headForwardAngle": "40", "poorPostureDuration": "60"},
		"alerts": {"cooldownSeconds": "10"},
		"detection": {"confidenceThreshold": "0.9"},
		"calibration": {"headForwardAngle": "5", "shoulderAsymmetry": 2},
	})
	assert cfg.thresholds.head_forward_angle == 15.0
	assert cfg.thresholds.poor_posture_duration == 30.0
	assert cfg.alerts.cooldown_seconds == 300.0
	assert cfg.detection.confidence_threshold == 0.5
	assert cfg.calibration == Calibration(head_forward_angle=None, shoulder_asymmetry=2.0)


@pytest.mark.parametrize("value,expected", [
	("maybe", True),
	("", True),
	("off", False),
	("0", False),
	(" On ", True),
	(None, True),
])
def test_unrecognised_boolean_strings_use_default(value, expected):
	cfg = sanitize_settings({"alerts": {"enabled": value}})
	assert cfg.alerts.enabled is expected


def test_wrong_typed_settings_use_defaults():
	cfg = sanitize_settings({"thresholds": {"headForwardAngle": "40"}, "alerts": {"enabled": "maybe"}})
	assert (cfg.thresholds.head_forward_angle, cfg.alerts.enabled) == (15.0, True)
