"""Pydantic models for settings documents coming from the settings UI or storage."""
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field


class _Payload(BaseModel):
	model_config = ConfigDict(populate_by_name=True, extra="ignore")


class ThresholdsPayload(_Payload):
	"""Angles in degrees; duration in seconds."""

	head_forward_angle: Optional[float] = Field(None, strict=True, ge=0, le=90, alias="headForwardAngle")
	shoulder_asymmetry: Optional[float] = Field(None, strict=True, ge=0, le=90, alias="shoulderAsymmetry")
	poor_posture_duration: Optional[float] = Field(None, strict=True, ge=1, le=600, alias="poorPostureDuration")


class AlertSettingsPayload(_Payload):
	enabled: Optional[bool] = Field(None, strict=True)
	cooldown_seconds: Optional[float] = Field(None, strict=True, ge=0, le=3600, alias="cooldownSeconds")
	cooldown: Optional[float] = Field(None, strict=True, ge=0, le=3600, description="Legacy alias for cooldownSeconds")
	sound: Optional[bool] = Field(None, strict=True)


class DetectionSettingsPayload(_Payload):
	fps: Optional[float] = Field(None, strict=True, ge=1, le=30)
	confidence_threshold: Optional[float] = Field(None, strict=True, ge=0, le=1, alias="confidenceThreshold")


class CalibrationPayload(_Payload):
	head_forward_angle: Optional[float] = Field(None, strict=True, alias="headForwardAngle")
	shoulder_asymmetry: Optional[float] = Field(None, strict=True, alias="shoulderAsymmetry")


class SettingsPayload(_Payload):
	"""
	Strict settings document. Unlike sanitize_settings(), this rejects
	out-of-range or wrong-typed values so the UI can report them.
	"""

	sensitivity: Optional[Literal["low", "medium", "high"]] = None
	thresholds: Optional[ThresholdsPayload] = None
	alerts: Optional[AlertSettingsPayload] = None
	detection: Optional[DetectionSettingsPayload] = None
	calibration: Optional[CalibrationPayload] = None
