import json

from posture.monitor import PostureMonitor
from posture.replay import main, replay


def posenet_frame(t, nose_x=100, score=0.95):
	return {
		"t": t,
		"keypoints": [
			{"part": "nose", "position": {"x": nose_x, "y": 50}, "score": score},
			{"part": "leftShoulder", "position": {"x": 80, "y": 120}, "score": score},
			{"part": "rightShoulder", "position": {"x": 120, "y": 120}, "score": score},
		],
	}


def test_replay_counts_and_alerts(capsys):
	frames = [posenet_frame(t, nose_x=160) for t in range(0, 36)]
	frames.insert(5, {"t": 4.5, "keypoints": []})
	result = replay(PostureMonitor(), iter(frames))
	assert result["analysed"] == 36
	assert result["skipped"] == 1
	assert [a["t"] for a in result["alerts"]] == [30]
	assert result["alerts"][0]["kind"] == "poor"
	assert '"alert"' in capsys.readouterr().out


def test_replay_snooze_suppresses(capsys):
	frames = [posenet_frame(t, nose_x=160) for t in range(0, 36)]
	result = replay(PostureMonitor(), iter(frames), snooze_minutes=5)
	assert result["alerts"] == []


def test_main_reads_jsonl(tmp_path, capsys):
	path = tmp_path / "frames.jsonl"
	lines = [json.dumps(posenet_frame(t)) for t in range(10)]
	lines.insert(3, "not json")
	path.write_text("\n".join(lines) + "\n", encoding="utf-8")
	cfg = tmp_path / "config.json"
	cfg.write_text(json.dumps({"sensitivity": "low"}), encoding="utf-8")

	assert main([str(path), "--config", str(cfg)]) == 0
	out = capsys.readouterr().out
	summary = json.loads(out[out.index("{"):])["summary"]
	assert summary["analysed"] == 10
	assert summary["alerts"] == []
	assert summary["session"]["good_posture_time"] == 9


def test_main_missing_file(tmp_path):
	assert main([str(tmp_path / "missing.jsonl")]) == 1
