from __future__ import annotations

import logging
import math
import time
from dataclasses import dataclass
from typing import Any, Dict, Optional

from posture.config import Calibration, PostureConfig, merge_settings, sanitize_settings
from posture.constants import (
	HEAD_WEIGHT,
	NECK_FEEDBACK_ANGLE,
	REQUIRED_KEYPOINT_SCORE,
	REQUIRED_PARTS,
	SCORE_GOOD,
	SCORE_WARNING,
	SENSITIVITY_MULTIPLIERS,
	SHOULDER_WEIGHT,
	SMOOTHING_ALPHA,
	PostureStatus,
)
from posture.math_utils import exponential_smoothing, normalize_value
from posture.pose.pose_metrics import RawMetrics, apply_calibration, extract_raw_metrics
from posture.pose.types import PoseFrame
from schemas.responses import PostureRecord

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AnalysisResult:
	metrics: RawMetrics  # smoothed
	raw_metrics: RawMetrics  # calibrated, unsmoothed
	score: int
	status: PostureStatus

	def to_record(self) -> Dict[str, Any]:
		return PostureRecord(
			status=self.status.value,
			score=self.score,
			timestamp=self.metrics.timestamp,
		).model_dump()


class PostureAnalyzer:
	"""
	Converts pose frames into a smoothed posture score and status.

	Pipeline per frame:
	  - reject frames that are empty, low-confidence overall, or missing
	    nose/shoulders (returns None, never raises)
	  - extract head-forward, shoulder-asymmetry and neck angles
	  - subtract calibration baselines (floored at 0)
	  - exponentially smooth the angles against the previous reading
	  - score head/shoulders against thresholds and classify

	One instance per caller; calls must be serialized because smoothing is
	order-dependent.
	"""

	def __init__(self, config: Any = None, alpha: float = SMOOTHING_ALPHA) -> None:
		self.config: PostureConfig = sanitize_settings(config) if config is not None else PostureConfig()
		self.alpha = float(alpha)
		self.smoothed_metrics: Optional[RawMetrics] = None
		# Last reading before calibration; used to capture a new baseline.
		self.last_raw_metrics: Optional[RawMetrics] = None

	def update_configuration(self, partial: Any) -> PostureConfig:
		"""Shallow-merge settings. Smoothing state is kept."""
		self.config = merge_settings(self.config, partial)
		return self.config

	def reset(self) -> None:
		self.smoothed_metrics = None
		self.last_raw_metrics = None

	def analyze(self, frame: Any, config: Any = None, now: Optional[float] = None) -> Optional[AnalysisResult]:
		"""
		`config` may be a PostureConfig or a raw settings dict (sanitized here).
		`now` stamps the metrics when the frame carries no t_host.
		"""
		cfg = sanitize_settings(config) if config is not None else self.config
		if isinstance(frame, dict):
			frame = PoseFrame.from_dict(frame)
		if not isinstance(frame, PoseFrame) or not frame.keypoints:
			return None

		confidence = frame.average_confidence()
		if confidence < cfg.detection.confidence_threshold:
			logger.debug("[Analyzer] skip: avg confidence %.2f < %.2f", confidence, cfg.detection.confidence_threshold)
			return None

		for part in REQUIRED_PARTS:
			kp = frame.get(part)
			if kp is None or kp.score <= REQUIRED_KEYPOINT_SCORE:
				logger.debug("[Analyzer] skip: %s missing or below %.1f", part, REQUIRED_KEYPOINT_SCORE)
				return None

		if frame.t_host is not None:
			timestamp = frame.t_host
		else:
			timestamp = float(now) if now is not None else time.time()
		measured = extract_raw_metrics(frame, timestamp=timestamp, confidence=confidence)
		self.last_raw_metrics = measured

		raw = measured
		if cfg.calibration is not None:
			raw = RawMetrics(
				head_forward_angle=apply_calibration(measured.head_forward_angle, cfg.calibration.head_forward_angle),
				shoulder_asymmetry=apply_calibration(measured.shoulder_asymmetry, cfg.calibration.shoulder_asymmetry),
				neck_angle=measured.neck_angle,
				confidence=measured.confidence,
				timestamp=measured.timestamp,
			)

		self.smoothed_metrics = self._smooth(raw)
		score = self.calculate_score(self.smoothed_metrics, cfg)
		return AnalysisResult(
			metrics=self.smoothed_metrics,
			raw_metrics=raw,
			score=score,
			status=self.classify(score),
		)

	def _smooth(self, raw: RawMetrics) -> RawMetrics:
		prev = self.smoothed_metrics
		if prev is None:
			return raw
		a = self.alpha
		return RawMetrics(
			head_forward_angle=exponential_smoothing(raw.head_forward_angle, prev.head_forward_angle, a),
			shoulder_asymmetry=exponential_smoothing(raw.shoulder_asymmetry, prev.shoulder_asymmetry, a),
			neck_angle=exponential_smoothing(raw.neck_angle, prev.neck_angle, a),
			confidence=raw.confidence,
			timestamp=raw.timestamp,
		)

	def calculate_score(self, metrics: RawMetrics, config: Any = None) -> int:
		"""
		0..100, higher is better. Each angle scores 100 at 0 and 0 at twice
		its threshold (after sensitivity scaling); head weighs 0.6, shoulders 0.4.
		"""
		cfg = sanitize_settings(config) if config is not None else self.config
		multiplier = SENSITIVITY_MULTIPLIERS[cfg.sensitivity]
		th = cfg.thresholds

		head_score = 100.0 - normalize_value(metrics.head_forward_angle * multiplier, 0.0, th.head_forward_angle * 2.0) * 100.0
		shoulder_score = 100.0 - normalize_value(metrics.shoulder_asymmetry * multiplier, 0.0, th.shoulder_asymmetry * 2.0) * 100.0

		total = head_score * HEAD_WEIGHT + shoulder_score * SHOULDER_WEIGHT
		# half-up rounding
		return int(math.floor(max(0.0, min(100.0, total)) + 0.5))

	@staticmethod
	def classify(score: int) -> PostureStatus:
		if score >= SCORE_GOOD:
			return PostureStatus.GOOD
		if score >= SCORE_WARNING:
			return PostureStatus.WARNING
		return PostureStatus.POOR

	def capture_calibration(self) -> Optional[Calibration]:
		"""Baseline from the last uncalibrated reading, or None before the first one."""
		m = self.last_raw_metrics
		if m is None:
			return None
		return Calibration(head_forward_angle=m.head_forward_angle, shoulder_asymmetry=m.shoulder_asymmetry)

	def feedback(self, result: Optional[AnalysisResult]) -> str:
		if result is None or result.status == PostureStatus.UNKNOWN:
			return "Unable to detect posture. Please ensure you are visible to the camera."
		if result.status == PostureStatus.GOOD:
			return f"Excellent posture! (Score: {result.score}/100)"

		th = self.config.thresholds
		m = result.metrics
		parts = []
		if m.head_forward_angle > th.head_forward_angle:
			parts.append("Your head is too far forward. Bring your ears in line with your shoulders.")
		if m.shoulder_asymmetry > th.shoulder_asymmetry:
			parts.append("Your shoulders are uneven. Try to level them and relax.")
		if m.neck_angle > NECK_FEEDBACK_ANGLE:
			parts.append("Your neck angle suggests slouching. Sit up straighter.")
		if not parts:
			parts.append("Your posture needs improvement.")
		return f"{' '.join(parts)} (Score: {result.score}/100)"
