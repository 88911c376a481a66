"""Pydantic models for the JSON contracts around the posture core."""
from schemas.requests import (
	AlertSettingsPayload,
	CalibrationPayload,
	DetectionSettingsPayload,
	SettingsPayload,
	ThresholdsPayload,
)
from schemas.responses import AlertPayload, PostureRecord

__all__ = [
	"AlertSettingsPayload",
	"CalibrationPayload",
	"DetectionSettingsPayload",
	"SettingsPayload",
	"ThresholdsPayload",
	"AlertPayload",
	"PostureRecord",
]
