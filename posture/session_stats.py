"""
Time-in-status accounting for one monitoring session, plus folding finished
sessions into a rolling statistics record. Persisting that record is left
to the caller.
"""

from __future__ import annotations

import copy
from datetime import date, datetime, timedelta, timezone
from typing import Any, Dict, Optional

from posture.constants import MAX_DAYS_KEPT, MAX_SESSIONS_KEPT, PostureStatus


_STATUS_FIELDS = {
	PostureStatus.GOOD: "good_posture_time",
	PostureStatus.WARNING: "warning_posture_time",
	PostureStatus.POOR: "poor_posture_time",
}


def _empty_daily() -> Dict[str, Any]:
	return {
		"total_time": 0.0,
		"good_posture_time": 0.0,
		"warning_posture_time": 0.0,
		"poor_posture_time": 0.0,
		"alert_count": 0,
		"session_count": 0,
	}


class SessionStats:
	"""
	Credits the time between consecutive readings to the status of the
	earlier reading. Nothing is credited while the last status is UNKNOWN.
	Times are seconds.
	"""

	def __init__(self) -> None:
		self._clear()

	def _clear(self) -> None:
		self.start_time: Optional[float] = None
		self.last_update_time: Optional[float] = None
		self.last_status: PostureStatus = PostureStatus.UNKNOWN
		self.total_time = 0.0
		self.good_posture_time = 0.0
		self.warning_posture_time = 0.0
		self.poor_posture_time = 0.0
		self.alert_count = 0

	def start(self, now: float) -> None:
		self._clear()
		self.start_time = float(now)

	def _credit(self, now: float) -> None:
		if self.last_status == PostureStatus.UNKNOWN:
			return
		since = self.last_update_time if self.last_update_time is not None else self.start_time
		if since is None:
			return
		elapsed = max(0.0, float(now) - since)
		self.total_time += elapsed
		attr = _STATUS_FIELDS.get(self.last_status)
		if attr:
			setattr(self, attr, getattr(self, attr) + elapsed)

	def record(self, status: PostureStatus, now: float) -> None:
		if self.start_time is None:
			self.start(now)
		self._credit(now)
		self.last_status = status
		self.last_update_time = float(now)

	def record_alert(self) -> None:
		self.alert_count += 1

	def snapshot(self) -> Dict[str, Any]:
		return {
			"start_time": self.start_time,
			"total_time": self.total_time,
			"good_posture_time": self.good_posture_time,
			"warning_posture_time": self.warning_posture_time,
			"poor_posture_time": self.poor_posture_time,
			"alert_count": self.alert_count,
			"last_status": self.last_status.value,
		}

	def finish(self, now: float) -> Dict[str, Any]:
		"""Credit the trailing interval and return the session summary."""
		self._credit(now)
		self.last_update_time = float(now)
		summary = self.snapshot()
		summary["end_time"] = float(now)
		return summary


def merge_session(
	statistics: Optional[Dict[str, Any]],
	summary: Dict[str, Any],
	today: Optional[date] = None,
) -> Dict[str, Any]:
	"""
	Fold a finished session into {"sessions": [...], "daily": {"YYYY-MM-DD": {...}}}.
	Keeps the newest sessions and drops days older than the retention window.
	Returns a new dict; the input is not modified.
	"""
	stats = copy.deepcopy(statistics) if isinstance(statistics, dict) else {}
	sessions = stats.get("sessions") if isinstance(stats.get("sessions"), list) else []
	daily = stats.get("daily") if isinstance(stats.get("daily"), dict) else {}

	if today is None:
		end = summary.get("end_time")
		today = datetime.fromtimestamp(end, tz=timezone.utc).date() if end else datetime.now(timezone.utc).date()
	key = today.isoformat()

	sessions.append(dict(summary))
	sessions = sessions[-MAX_SESSIONS_KEPT:]

	day = daily.setdefault(key, _empty_daily())
	for f in ("total_time", "good_posture_time", "warning_posture_time", "poor_posture_time", "alert_count"):
		day[f] = day.get(f, 0) + summary.get(f, 0)
	day["session_count"] = day.get("session_count", 0) + 1

	cutoff = (today - timedelta(days=MAX_DAYS_KEPT)).isoformat()
	daily = {d: v for d, v in daily.items() if d >= cutoff}

	return {"sessions": sessions, "daily": daily}
