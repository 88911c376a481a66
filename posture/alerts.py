from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from posture.analyzer import AnalysisResult
from posture.config import PostureConfig, merge_settings, sanitize_settings
from posture.constants import DEFAULT_SNOOZE_MINUTES, AlertKind, PostureStatus
from schemas.responses import AlertPayload

logger = logging.getLogger(__name__)

CAUSE_HEAD_FORWARD = "Head too far forward"
CAUSE_SHOULDER_ASYMMETRY = "Uneven shoulders"
CAUSE_GENERIC = "Overall posture needs improvement"


@dataclass
class AlertState:
	# Seconds of continuous warning/poor posture.
	poor_posture_duration: float = 0.0
	last_poor_posture_timestamp: Optional[float] = None
	last_alert_timestamp_by_kind: Dict[AlertKind, float] = field(default_factory=dict)
	snoozed_until: Optional[float] = None
	alert_count: int = 0


@dataclass(frozen=True)
class Alert:
	kind: AlertKind
	score: int
	causes: List[str]
	timestamp: float
	sound: bool = False

	@property
	def title(self) -> str:
		if self.kind == AlertKind.POOR:
			return "Poor Posture Detected"
		return "Posture Warning"

	@property
	def message(self) -> str:
		if self.kind == AlertKind.POOR:
			return f"Your posture score is {self.score}/100. Please adjust your position."
		return f"Your posture score is {self.score}/100. Consider improving your position."

	def to_payload(self) -> Dict[str, Any]:
		return AlertPayload(kind=self.kind.value, score=self.score, causes=list(self.causes)).model_dump()


def alert_causes(result: AnalysisResult, config: PostureConfig) -> List[str]:
	"""Which smoothed metrics exceed their thresholds; generic cause if none do."""
	th = config.thresholds
	causes = []
	if result.metrics.head_forward_angle > th.head_forward_angle:
		causes.append(CAUSE_HEAD_FORWARD)
	if result.metrics.shoulder_asymmetry > th.shoulder_asymmetry:
		causes.append(CAUSE_SHOULDER_ASYMMETRY)
	return causes or [CAUSE_GENERIC]


class AlertController:
	"""
	Decides when sustained bad posture should surface as an alert.

	- Warning and poor readings accumulate one shared duration counter;
	  a good reading clears it.
	- Once the duration reaches thresholds.poor_posture_duration, an alert of
	  the reading's kind fires unless that kind is still cooling down.
	- With alerts disabled nothing fires, but duration tracking continues.

	`now` is epoch seconds; pass it explicitly to drive simulated time.
	"""

	def __init__(self, config: Any = None) -> None:
		self.config: PostureConfig = sanitize_settings(config) if config is not None else PostureConfig()
		self.state = AlertState()

	def update_configuration(self, config: Any) -> PostureConfig:
		if isinstance(config, PostureConfig):
			self.config = config
		else:
			self.config = merge_settings(self.config, config)
		return self.config

	def reset(self) -> None:
		self.state = AlertState()

	def evaluate(self, result: Optional[AnalysisResult], now: Optional[float] = None) -> Optional[Alert]:
		if result is None:
			# No reading this cycle; keep state as is.
			return None
		t = float(now) if now is not None else time.time()
		st = self.state

		if result.status not in (PostureStatus.WARNING, PostureStatus.POOR):
			st.poor_posture_duration = 0.0
			st.last_poor_posture_timestamp = None
			return None

		if st.last_poor_posture_timestamp is not None:
			st.poor_posture_duration += max(0.0, t - st.last_poor_posture_timestamp)
		st.last_poor_posture_timestamp = t

		if st.poor_posture_duration < self.config.thresholds.poor_posture_duration:
			return None
		if not self.config.alerts.enabled:
			return None
		if st.snoozed_until is not None and t < st.snoozed_until:
			logger.debug("[Alert] snoozed for another %.0fs", st.snoozed_until - t)
			return None

		kind = AlertKind.for_status(result.status)
		last = st.last_alert_timestamp_by_kind.get(kind)
		if last is not None and t - last < self.config.alerts.cooldown_seconds:
			logger.debug("[Alert] %s suppressed: %.1fs since last", kind.value, t - last)
			return None

		st.last_alert_timestamp_by_kind[kind] = t
		st.alert_count += 1
		alert = Alert(
			kind=kind,
			score=int(result.score),
			causes=alert_causes(result, self.config),
			timestamp=t,
			sound=self.config.alerts.sound,
		)
		logger.info(
			"[Alert] %s score=%d after %.1fs: %s",
			kind.value,
			alert.score,
			st.poor_posture_duration,
			", ".join(alert.causes),
		)
		return alert

	def snooze(self, duration_minutes: float = DEFAULT_SNOOZE_MINUTES, now: Optional[float] = None) -> float:
		"""
		Block alerts until the snooze ends and push every kind's last-alert
		time forward to match. Duration tracking is untouched.
		Returns the snooze end (epoch seconds).
		"""
		t = float(now) if now is not None else time.time()
		until = t + max(0.0, float(duration_minutes)) * 60.0
		shifted = until - self.config.alerts.cooldown_seconds
		for kind in AlertKind:
			prev = self.state.last_alert_timestamp_by_kind.get(kind)
			self.state.last_alert_timestamp_by_kind[kind] = shifted if prev is None else max(prev, shifted)
		self.state.snoozed_until = until
		logger.info("[Alert] snoozed for %.0f min", float(duration_minutes))
		return until
