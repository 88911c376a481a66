from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, Optional

from posture.constants import PART_ALIASES


@dataclass(frozen=True)
class Keypoint:
	"""
	A single 2D keypoint in pixel coordinates.
	"""

	name: str
	x_px: float
	y_px: float
	score: float  # confidence [0..1], clamped on parse


def _finite(v: Any) -> Optional[float]:
	if isinstance(v, bool) or not isinstance(v, (int, float)):
		return None
	f = float(v)
	return f if math.isfinite(f) else None


def _parse_keypoint(obj: Any) -> Optional[Keypoint]:
	if isinstance(obj, Keypoint):
		return obj
	if not isinstance(obj, dict):
		return None
	part = obj.get("part") or obj.get("name")
	if not isinstance(part, str) or not part:
		return None
	pos = obj.get("position")
	if isinstance(pos, dict):
		x, y = _finite(pos.get("x")), _finite(pos.get("y"))
	else:
		x, y = _finite(obj.get("x")), _finite(obj.get("y"))
	if x is None or y is None:
		return None
	score = _finite(obj.get("score"))
	score = 0.0 if score is None else max(0.0, min(1.0, score))
	return Keypoint(name=PART_ALIASES.get(part, part), x_px=x, y_px=y, score=score)


@dataclass(frozen=True)
class PoseFrame:
	"""
	Model-agnostic pose output for a single detection cycle.

	- Coordinates are in pixel space.
	- Keypoints are keyed by part name; an undetected part is absent.
	- t_host is optional epoch seconds; the analyzer stamps metrics with it
	  when present.
	"""

	keypoints: Dict[str, Keypoint] = field(default_factory=dict)
	t_host: Optional[float] = None
	backend: str = ""
	width: int = 0
	height: int = 0

	def get(self, name: str) -> Optional[Keypoint]:
		if not self.keypoints:
			return None
		return self.keypoints.get(name)

	def average_confidence(self) -> float:
		if not self.keypoints:
			return 0.0
		return sum(kp.score for kp in self.keypoints.values()) / len(self.keypoints)

	@classmethod
	def from_keypoint_list(cls, items: Iterable[Any], t_host: Optional[float] = None) -> "PoseFrame":
		"""
		Build a frame from PoseNet-style entries:
		  {"part": "leftShoulder", "position": {"x": .., "y": ..}, "score": ..}
		Malformed entries are skipped; a later duplicate part wins.
		"""
		kps: Dict[str, Keypoint] = {}
		try:
			for item in items:
				kp = _parse_keypoint(item)
				if kp is not None:
					kps[kp.name] = kp
		except TypeError:
			return cls(t_host=t_host)
		return cls(keypoints=kps, t_host=t_host)

	@classmethod
	def from_dict(cls, obj: Any) -> "PoseFrame":
		"""Parse `{"keypoints": [...], "t": <seconds>}`. Garbage yields an empty frame."""
		if not isinstance(obj, dict):
			return cls()
		t = _finite(obj.get("t", obj.get("t_host")))
		items = obj.get("keypoints")
		if not isinstance(items, list):
			return cls(t_host=t)
		frame = cls.from_keypoint_list(items, t_host=t)
		return cls(
			keypoints=frame.keypoints,
			t_host=t,
			backend=str(obj.get("backend") or ""),
			width=int(_finite(obj.get("width")) or 0),
			height=int(_finite(obj.get("height")) or 0),
		)
