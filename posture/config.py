from __future__ import annotations

import json
import logging
import math
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

from posture.constants import Sensitivity

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Thresholds:
	# Degrees. A metric at 2x its threshold scores 0.
	head_forward_angle: float = 15.0
	shoulder_asymmetry: float = 10.0
	# Seconds of sustained warning/poor posture before an alert is eligible.
	poor_posture_duration: float = 30.0


@dataclass(frozen=True)
class AlertSettings:
	enabled: bool = True
	cooldown_seconds: float = 300.0
	sound: bool = False  # audio cue is played by the host, not here


@dataclass(frozen=True)
class DetectionSettings:
	fps: float = 5.0
	confidence_threshold: float = 0.5


@dataclass(frozen=True)
class Calibration:
	# Either baseline may be None; only present ones are subtracted.
	head_forward_angle: Optional[float] = None
	shoulder_asymmetry: Optional[float] = None


@dataclass(frozen=True)
class PostureConfig:
	sensitivity: Sensitivity = Sensitivity.MEDIUM
	thresholds: Thresholds = field(default_factory=Thresholds)
	alerts: AlertSettings = field(default_factory=AlertSettings)
	detection: DetectionSettings = field(default_factory=DetectionSettings)
	calibration: Optional[Calibration] = None

	def to_dict(self) -> Dict[str, Any]:
		"""JSON shape (camelCase keys) accepted back by sanitize_settings()."""
		cal = None
		if self.calibration is not None:
			cal = {
				"headForwardAngle": self.calibration.head_forward_angle,
				"shoulderAsymmetry": self.calibration.shoulder_asymmetry,
			}
		return {
			"sensitivity": self.sensitivity.value,
			"thresholds": {
				"headForwardAngle": self.thresholds.head_forward_angle,
				"shoulderAsymmetry": self.thresholds.shoulder_asymmetry,
				"poorPostureDuration": self.thresholds.poor_posture_duration,
			},
			"alerts": {
				"enabled": self.alerts.enabled,
				"cooldownSeconds": self.alerts.cooldown_seconds,
				"sound": self.alerts.sound,
			},
			"detection": {
				"fps": self.detection.fps,
				"confidenceThreshold": self.detection.confidence_threshold,
			},
			"calibration": cal,
		}


def _deep_get(d: Dict[str, Any], keys: list[str], default: Any = None) -> Any:
	cur: Any = d
	for k in keys:
		if not isinstance(cur, dict):
			return default
		cur = cur.get(k)
	return cur if cur is not None else default


def _as_bool(v: Any, default: bool) -> bool:
	if isinstance(v, bool):
		return v
	if isinstance(v, (int, float)):
		return bool(v)
	if isinstance(v, str):
		s = v.strip().lower()
		if s in ("1", "true", "yes", "on"):
			return True
		if s in ("0", "false", "no", "off"):
			return False
	return bool(default)


def _as_float(v: Any, default: float) -> float:
	# Only real numbers; bools and numeric strings fall back to the default.
	if isinstance(v, bool) or not isinstance(v, (int, float)):
		return float(default)
	f = float(v)
	return f if math.isfinite(f) else float(default)


def _clamped(v: Any, lo: float, hi: float, default: float) -> float:
	return max(lo, min(hi, _as_float(v, default)))


def _as_optional_float(v: Any) -> Optional[float]:
	if v is None or isinstance(v, bool):
		return None
	f = _as_float(v, math.nan)
	return None if math.isnan(f) else f


def _as_sensitivity(v: Any) -> Sensitivity:
	if isinstance(v, Sensitivity):
		return v
	if isinstance(v, str):
		try:
			return Sensitivity(v.strip().lower())
		except ValueError:
			pass
	return Sensitivity.MEDIUM


def _parse_calibration(obj: Any) -> Optional[Calibration]:
	if isinstance(obj, Calibration):
		return obj
	if not isinstance(obj, dict):
		return None
	head = _as_optional_float(obj.get("headForwardAngle", obj.get("head_forward_angle")))
	shoulder = _as_optional_float(obj.get("shoulderAsymmetry", obj.get("shoulder_asymmetry")))
	if head is None and shoulder is None:
		return None
	return Calibration(head_forward_angle=head, shoulder_asymmetry=shoulder)


def sanitize_settings(raw: Any) -> PostureConfig:
	"""
	Coerce a JSON-like settings document into a PostureConfig.

	Every numeric field is clamped into its documented range; anything
	missing, wrong-typed or non-finite falls back to its default. Never raises.
	"""
	if isinstance(raw, PostureConfig):
		return raw
	if not isinstance(raw, dict):
		return PostureConfig()

	defaults = PostureConfig()
	cooldown = _deep_get(raw, ["alerts", "cooldownSeconds"])
	if cooldown is None:
		cooldown = _deep_get(raw, ["alerts", "cooldown"], defaults.alerts.cooldown_seconds)

	return PostureConfig(
		sensitivity=_as_sensitivity(raw.get("sensitivity")),
		thresholds=Thresholds(
			head_forward_angle=_clamped(_deep_get(raw, ["thresholds", "headForwardAngle"]), 0.0, 90.0, 15.0),
			shoulder_asymmetry=_clamped(_deep_get(raw, ["thresholds", "shoulderAsymmetry"]), 0.0, 90.0, 10.0),
			poor_posture_duration=_clamped(_deep_get(raw, ["thresholds", "poorPostureDuration"]), 1.0, 600.0, 30.0),
		),
		alerts=AlertSettings(
			enabled=_as_bool(_deep_get(raw, ["alerts", "enabled"], True), True),
			cooldown_seconds=_clamped(cooldown, 0.0, 3600.0, 300.0),
			sound=_as_bool(_deep_get(raw, ["alerts", "sound"], False), False),
		),
		detection=DetectionSettings(
			fps=_clamped(_deep_get(raw, ["detection", "fps"]), 1.0, 30.0, 5.0),
			confidence_threshold=_clamped(_deep_get(raw, ["detection", "confidenceThreshold"]), 0.0, 1.0, 0.5),
		),
		calibration=_parse_calibration(raw.get("calibration")),
	)


def merge_settings(config: PostureConfig, partial: Any) -> PostureConfig:
	"""
	Shallow merge: each top-level key present in `partial` replaces the whole
	section. The result is sanitized again.
	"""
	if isinstance(partial, PostureConfig):
		return partial
	if not isinstance(partial, dict):
		return config
	merged = dict(config.to_dict())
	merged.update(partial)
	return sanitize_settings(merged)


def load_config(path: str | Path) -> PostureConfig:
	p = Path(path).expanduser().resolve()
	if not p.exists():
		# Defaults-only config; monitor can still run.
		return PostureConfig()
	try:
		raw = json.loads(p.read_text(encoding="utf-8"))
	except (OSError, ValueError) as e:
		# Malformed config fails safe to defaults.
		logger.warning("[Config] could not read %s (%s); using defaults", p, e)
		return PostureConfig()
	if not isinstance(raw, dict):
		return PostureConfig()
	return sanitize_settings(raw)


def save_config(config: PostureConfig, path: str | Path) -> Path:
	p = Path(path).expanduser().resolve()
	p.parent.mkdir(parents=True, exist_ok=True)
	p.write_text(json.dumps(config.to_dict(), indent=2), encoding="utf-8")
	return p
