from __future__ import annotations

import math
from dataclasses import asdict, dataclass
from typing import Any, Dict, Optional

from posture.constants import KeypointPart
from posture.math_utils import calculate_angle, midpoint
from posture.pose.types import PoseFrame


@dataclass(frozen=True)
class RawMetrics:
	"""
	Posture angles for one frame, in degrees (>= 0).

	The same shape is reused for smoothed metrics.
	"""

	head_forward_angle: float
	shoulder_asymmetry: float
	neck_angle: float
	confidence: float
	timestamp: float

	def to_dict(self) -> Dict[str, Any]:
		return asdict(self)


def _shoulders(frame: PoseFrame):
	return frame.get(KeypointPart.LEFT_SHOULDER.value), frame.get(KeypointPart.RIGHT_SHOULDER.value)


def head_forward_angle(frame: PoseFrame) -> float:
	"""
	Angle between the vertical and the shoulder-midpoint -> nose line.
	"""
	nose = frame.get(KeypointPart.NOSE.value)
	ls, rs = _shoulders(frame)
	if not nose or not ls or not rs:
		return 0.0
	mx, my = midpoint(ls, rs)
	horizontal = abs(float(nose.x_px) - mx)
	vertical = abs(my - float(nose.y_px))
	if vertical == 0:
		return 0.0
	return math.degrees(math.atan(horizontal / vertical))


def shoulder_asymmetry(frame: PoseFrame) -> float:
	"""Tilt of the shoulder line from horizontal."""
	ls, rs = _shoulders(frame)
	if not ls or not rs:
		return 0.0
	height_diff = abs(float(ls.y_px) - float(rs.y_px))
	width = abs(float(rs.x_px) - float(ls.x_px))
	if width == 0:
		return 0.0
	return math.degrees(math.atan(height_diff / width))


def neck_angle(frame: PoseFrame) -> float:
	"""
	Angle of the shoulder-midpoint -> head line. The head reference is the
	ear midpoint when both ears are visible, else the nose.
	"""
	ls, rs = _shoulders(frame)
	le = frame.get(KeypointPart.LEFT_EAR.value)
	re = frame.get(KeypointPart.RIGHT_EAR.value)
	head = midpoint(le, re) if le and re else frame.get(KeypointPart.NOSE.value)
	if head is None or not ls or not rs:
		return 0.0
	return calculate_angle(midpoint(ls, rs), head)


def extract_raw_metrics(frame: PoseFrame, timestamp: float, confidence: Optional[float] = None) -> RawMetrics:
	return RawMetrics(
		head_forward_angle=head_forward_angle(frame),
		shoulder_asymmetry=shoulder_asymmetry(frame),
		neck_angle=neck_angle(frame),
		confidence=frame.average_confidence() if confidence is None else float(confidence),
		timestamp=float(timestamp),
	)


def apply_calibration(value: float, baseline: Optional[float]) -> float:
	"""Subtract a calibrated baseline so the user's own 'good' posture reads as 0."""
	if baseline is None:
		return value
	return max(0.0, value - float(baseline))
