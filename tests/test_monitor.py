import pytest

from posture.constants import AlertKind, PostureStatus
from posture.monitor import PostureMonitor
from tests.conftest import make_frame


def test_good_posture_never_alerts(good_frame):
	monitor = PostureMonitor()
	monitor.start(now=0)
	updates = [monitor.process(good_frame, now=t) for t in range(0, 60)]
	assert all(u.result.status == PostureStatus.GOOD for u in updates)
	assert all(u.alert is None for u in updates)
	summary = monitor.stop(now=60)
	assert summary["good_posture_time"] == pytest.approx(60)
	assert summary["alert_count"] == 0


def test_sustained_forward_head_alerts_once(good_frame, forward_head_frame):
	monitor = PostureMonitor()
	monitor.start(now=0)
	monitor.process(good_frame, now=0)
	alerts = []
	for t in range(1, 41):
		update = monitor.process(forward_head_frame, now=t)
		if update.alert:
			alerts.append(update.alert)
	assert len(alerts) == 1
	assert alerts[0].kind == AlertKind.POOR
	assert alerts[0].timestamp == 31
	assert monitor.stats.alert_count == 1
	assert monitor.status()["poor_posture_duration"] == pytest.approx(39)


def test_rejected_frame_is_skipped():
	monitor = PostureMonitor()
	monitor.start(now=0)
	update = monitor.process(make_frame(nose=None), now=1)
	assert update.result is None
	assert update.alert is None
	assert monitor.last_result is None


def test_calibrate_makes_current_posture_the_baseline(forward_head_frame):
	monitor = PostureMonitor()
	monitor.start(now=0)
	assert monitor.calibrate() is None
	before = monitor.process(forward_head_frame, now=1)
	assert before.result.status == PostureStatus.POOR
	baseline = monitor.calibrate()
	assert baseline.head_forward_angle == pytest.approx(before.result.raw_metrics.head_forward_angle)
	assert monitor.analyzer.config.calibration == baseline
	after = monitor.process(forward_head_frame, now=2)
	assert after.result.score == 100
	assert after.result.status == PostureStatus.GOOD

	monitor.reset_calibration()
	assert monitor.config.calibration is None
	assert monitor.process(forward_head_frame, now=3).result.status == PostureStatus.POOR


def test_update_settings_reaches_both_components():
	monitor = PostureMonitor()
	monitor.update_settings({"alerts": {"enabled": False}, "sensitivity": "high"})
	assert monitor.alerts.config.alerts.enabled is False
	assert monitor.analyzer.config.sensitivity.value == "high"


def test_snooze_through_monitor(forward_head_frame):
	monitor = PostureMonitor()
	monitor.start(now=0)
	assert monitor.snooze(15, now=0) == 900
	fired = [monitor.process(forward_head_frame, now=t).alert for t in range(0, 900, 5)]
	assert not any(fired)
	assert monitor.process(forward_head_frame, now=900).alert is not None


def test_status_snapshot(good_frame):
	monitor = PostureMonitor()
	monitor.start(now=0)
	assert monitor.status()["last"] is None
	monitor.process(make_frame(t=1.0), now=1)
	status = monitor.status()
	assert status["running"] is True
	assert status["last"] == {"status": "good", "score": 100, "timestamp": 1.0}
	assert status["feedback"].startswith("Excellent posture")
	assert status["settings"]["sensitivity"] == "medium"


def test_record_timestamp_uses_monitor_time():
	monitor = PostureMonitor()
	monitor.start(now=100)
	update = monitor.process(make_frame(), now=105)
	assert update.result.to_record()["timestamp"] == 105
	assert monitor.stats.last_update_time == 105
