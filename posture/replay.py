"""
Replay recorded pose frames through a PostureMonitor.

Input is JSON lines, one PoseNet-style frame per line:
  {"t": 12.5, "keypoints": [{"part": "nose", "position": {"x": 100, "y": 50}, "score": 0.95}, ...]}
Frames without "t" are spaced 1/fps seconds apart.
"""

from __future__ import annotations

import json
import logging
import sys
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional, TextIO

from posture.config import load_config
from posture.monitor import PostureMonitor
from posture.pose.types import PoseFrame

logger = logging.getLogger(__name__)


def iter_frames(fh: TextIO) -> Iterator[Dict[str, Any]]:
	for lineno, line in enumerate(fh, start=1):
		line = line.strip()
		if not line:
			continue
		try:
			obj = json.loads(line)
		except ValueError:
			logger.warning("line %d: not JSON, skipped", lineno)
			continue
		if isinstance(obj, dict):
			yield obj


def replay(
	monitor: PostureMonitor,
	frames: Iterator[Dict[str, Any]],
	t0: float = 0.0,
	snooze_minutes: Optional[float] = None,
) -> Dict[str, Any]:
	step = 1.0 / max(1.0, monitor.config.detection.fps)
	t = t0
	alerts: List[Dict[str, Any]] = []
	analysed = 0
	skipped = 0

	monitor.start(now=t0)
	if snooze_minutes:
		monitor.snooze(snooze_minutes, now=t0)
	for obj in frames:
		frame = PoseFrame.from_dict(obj)
		t = frame.t_host if frame.t_host is not None else t + step
		update = monitor.process(frame, now=t)
		if update.result is None:
			skipped += 1
			continue
		analysed += 1
		if update.alert is not None:
			payload = update.alert.to_payload()
			payload["t"] = t
			alerts.append(payload)
			print(json.dumps({"alert": payload}))
	summary = monitor.stop(now=t)
	return {"analysed": analysed, "skipped": skipped, "alerts": alerts, "session": summary}


def main(argv: Optional[List[str]] = None) -> int:
	import argparse

	parser = argparse.ArgumentParser(description="Replay pose frames (JSON lines) through the posture monitor.")
	parser.add_argument("frames", help="Path to a .jsonl file of pose frames, or '-' for stdin.")
	parser.add_argument("--config", help="Settings JSON file (missing or malformed -> defaults).")
	parser.add_argument("--snooze", type=float, default=None, help="Snooze alerts for N minutes at the start.")
	parser.add_argument("--debug", action="store_true", help="Enable debug logging.")
	args = parser.parse_args(argv)

	if args.debug:
		logging.basicConfig(level=logging.DEBUG, format="%(levelname)s:%(name)s:%(message)s")
	else:
		logging.basicConfig(level=logging.INFO, format="%(levelname)s:%(name)s:%(message)s")

	config = load_config(args.config) if args.config else None
	monitor = PostureMonitor(config)

	try:
		if args.frames == "-":
			frames = list(iter_frames(sys.stdin))
		else:
			with Path(args.frames).open("r", encoding="utf-8") as fh:
				frames = list(iter_frames(fh))
	except OSError as e:
		logger.error("cannot read %s: %s", args.frames, e)
		return 1

	first_t = PoseFrame.from_dict(frames[0]).t_host if frames else None
	t0 = first_t if first_t is not None else 0.0
	result = replay(monitor, iter(frames), t0=t0, snooze_minutes=args.snooze)
	print(json.dumps({"summary": result}, indent=2))
	return 0


if __name__ == "__main__":
	sys.exit(main())
