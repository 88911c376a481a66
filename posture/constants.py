"""Enumerations and tuning constants shared across the posture pipeline."""

from enum import Enum
from typing import Dict


class PostureStatus(str, Enum):
	GOOD = "good"
	WARNING = "warning"
	POOR = "poor"
	UNKNOWN = "unknown"


class Sensitivity(str, Enum):
	LOW = "low"
	MEDIUM = "medium"
	HIGH = "high"


class AlertKind(str, Enum):
	WARNING = "warning"
	POOR = "poor"

	@classmethod
	def for_status(cls, status: PostureStatus) -> "AlertKind":
		if status == PostureStatus.POOR:
			return cls.POOR
		if status == PostureStatus.WARNING:
			return cls.WARNING
		raise ValueError(f"no alert kind for status {status!r}")


class KeypointPart(str, Enum):
	NOSE = "nose"
	LEFT_EYE = "left_eye"
	RIGHT_EYE = "right_eye"
	LEFT_EAR = "left_ear"
	RIGHT_EAR = "right_ear"
	LEFT_SHOULDER = "left_shoulder"
	RIGHT_SHOULDER = "right_shoulder"
	LEFT_ELBOW = "left_elbow"
	RIGHT_ELBOW = "right_elbow"
	LEFT_WRIST = "left_wrist"
	RIGHT_WRIST = "right_wrist"
	LEFT_HIP = "left_hip"
	RIGHT_HIP = "right_hip"


# PoseNet emits camelCase part names.
PART_ALIASES: Dict[str, str] = {
	"leftEye": KeypointPart.LEFT_EYE.value,
	"rightEye": KeypointPart.RIGHT_EYE.value,
	"leftEar": KeypointPart.LEFT_EAR.value,
	"rightEar": KeypointPart.RIGHT_EAR.value,
	"leftShoulder": KeypointPart.LEFT_SHOULDER.value,
	"rightShoulder": KeypointPart.RIGHT_SHOULDER.value,
	"leftElbow": KeypointPart.LEFT_ELBOW.value,
	"rightElbow": KeypointPart.RIGHT_ELBOW.value,
	"leftWrist": KeypointPart.LEFT_WRIST.value,
	"rightWrist": KeypointPart.RIGHT_WRIST.value,
	"leftHip": KeypointPart.LEFT_HIP.value,
	"rightHip": KeypointPart.RIGHT_HIP.value,
}

REQUIRED_PARTS = (
	KeypointPart.NOSE.value,
	KeypointPart.LEFT_SHOULDER.value,
	KeypointPart.RIGHT_SHOULDER.value,
)

# Higher multiplier = stricter scoring.
SENSITIVITY_MULTIPLIERS: Dict[Sensitivity, float] = {
	Sensitivity.LOW: 0.7,
	Sensitivity.MEDIUM: 1.0,
	Sensitivity.HIGH: 1.5,
}

# Empirical constants; change only with product input.
SMOOTHING_ALPHA = 0.3
HEAD_WEIGHT = 0.6
SHOULDER_WEIGHT = 0.4
REQUIRED_KEYPOINT_SCORE = 0.3

SCORE_GOOD = 80
SCORE_WARNING = 50

# Neck angle only feeds feedback text, never the score.
NECK_FEEDBACK_ANGLE = 20.0

DEFAULT_SNOOZE_MINUTES = 15

MAX_SESSIONS_KEPT = 100
MAX_DAYS_KEPT = 90
