from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Any, Dict, Optional

from posture.alerts import Alert, AlertController
from posture.analyzer import AnalysisResult, PostureAnalyzer
from posture.config import Calibration, PostureConfig, merge_settings, sanitize_settings
from posture.constants import DEFAULT_SNOOZE_MINUTES
from posture.session_stats import SessionStats

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MonitorUpdate:
	result: Optional[AnalysisResult]
	alert: Optional[Alert] = None


class PostureMonitor:
	"""
	Host-side owner of one analyzer, one alert controller and the session
	statistics. Replaces process-wide settings/alert globals with a single
	instance the detection loop holds.

	Not thread-safe: the detection loop must call process() serially.
	"""

	def __init__(self, config: Any = None) -> None:
		self.config: PostureConfig = sanitize_settings(config) if config is not None else PostureConfig()
		self.analyzer = PostureAnalyzer(self.config)
		self.alerts = AlertController(self.config)
		self.stats = SessionStats()
		self.running = False
		self.last_result: Optional[AnalysisResult] = None

	def start(self, now: Optional[float] = None) -> None:
		t = float(now) if now is not None else time.time()
		self.analyzer.reset()
		self.alerts.reset()
		self.stats.start(t)
		self.last_result = None
		self.running = True
		logger.info("[Monitor] started")

	def stop(self, now: Optional[float] = None) -> Dict[str, Any]:
		t = float(now) if now is not None else time.time()
		self.running = False
		summary = self.stats.finish(t)
		logger.info(
			"[Monitor] stopped after %.0fs (good=%.0fs warning=%.0fs poor=%.0fs, alerts=%d)",
			summary["total_time"],
			summary["good_posture_time"],
			summary["warning_posture_time"],
			summary["poor_posture_time"],
			summary["alert_count"],
		)
		return summary

	def process(self, frame: Any, now: Optional[float] = None) -> MonitorUpdate:
		"""Analyze one frame and decide on an alert. A rejected frame yields result=None."""
		t = float(now) if now is not None else time.time()
		result = self.analyzer.analyze(frame, now=t)
		if result is None:
			return MonitorUpdate(result=None)

		self.last_result = result
		self.stats.record(result.status, t)
		alert = self.alerts.evaluate(result, now=t)
		if alert is not None:
			self.stats.record_alert()
		return MonitorUpdate(result=result, alert=alert)

	def update_settings(self, partial: Any) -> PostureConfig:
		self.config = merge_settings(self.config, partial)
		self.analyzer.update_configuration(self.config)
		self.alerts.update_configuration(self.config)
		return self.config

	def calibrate(self) -> Optional[Calibration]:
		"""
		Take the latest uncalibrated reading as the user's baseline. Returns
		None (and changes nothing) when no frame has been analysed yet.
		"""
		baseline = self.analyzer.capture_calibration()
		if baseline is None:
			logger.warning("[Monitor] calibration requested before any reading")
			return None
		self.update_settings({
			"calibration": {
				"headForwardAngle": baseline.head_forward_angle,
				"shoulderAsymmetry": baseline.shoulder_asymmetry,
			},
		})
		self.analyzer.reset()
		logger.info(
			"[Monitor] calibrated: head=%.1f° shoulders=%.1f°",
			baseline.head_forward_angle,
			baseline.shoulder_asymmetry,
		)
		return baseline

	def reset_calibration(self) -> PostureConfig:
		self.update_settings({"calibration": None})
		self.analyzer.reset()
		return self.config

	def snooze(self, duration_minutes: float = DEFAULT_SNOOZE_MINUTES, now: Optional[float] = None) -> float:
		return self.alerts.snooze(duration_minutes, now=now)

	def status(self) -> Dict[str, Any]:
		last = self.last_result
		return {
			"running": self.running,
			"settings": self.config.to_dict(),
			"session": self.stats.snapshot(),
			"last": last.to_record() if last is not None else None,
			"feedback": self.analyzer.feedback(last) if last is not None else None,
			"poor_posture_duration": self.alerts.state.poor_posture_duration,
			"snoozed_until": self.alerts.state.snoozed_until,
		}
