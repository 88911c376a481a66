"""
Strict validation for settings documents and raw pose payloads.

These report problems instead of fixing them; see config.sanitize_settings()
for the tolerant path the core itself relies on.
"""

from __future__ import annotations

import math
from typing import Any, List, Tuple

from pydantic import ValidationError

from posture.constants import PART_ALIASES, REQUIRED_PARTS
from schemas.requests import SettingsPayload


def validate_settings(raw: Any) -> Tuple[bool, List[str]]:
	if not isinstance(raw, dict):
		return False, ["Settings must be an object"]
	try:
		SettingsPayload.model_validate(raw)
	except ValidationError as e:
		errors = []
		for err in e.errors():
			loc = ".".join(str(p) for p in err.get("loc", ()))
			errors.append(f"{loc}: {err.get('msg')}" if loc else str(err.get("msg")))
		return False, errors
	return True, []


def _is_number(v: Any) -> bool:
	return isinstance(v, (int, float)) and not isinstance(v, bool) and math.isfinite(v)


def validate_pose_data(pose: Any) -> bool:
	"""
	Check a PoseNet-style frame: {"keypoints": [{"part", "position": {"x","y"}, "score"}]}.
	All required parts must be present and every entry well formed.
	"""
	if not isinstance(pose, dict):
		return False
	keypoints = pose.get("keypoints")
	if not isinstance(keypoints, list):
		return False

	parts = set()
	for kp in keypoints:
		if not isinstance(kp, dict):
			return False
		part = kp.get("part")
		pos = kp.get("position")
		score = kp.get("score")
		if not isinstance(part, str) or not part or not isinstance(pos, dict):
			return False
		if not _is_number(pos.get("x")) or not _is_number(pos.get("y")):
			return False
		if not _is_number(score) or score < 0 or score > 1:
			return False
		parts.add(PART_ALIASES.get(part, part))

	return all(p in parts for p in REQUIRED_PARTS)
