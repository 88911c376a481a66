"""
Small geometry/statistics helpers for pose analysis.

Points are anything with `x_px`/`y_px` attributes (Keypoint) or plain
(x, y) tuples. Missing inputs resolve to 0 instead of raising.
"""

from __future__ import annotations

import math
from typing import Any, Optional, Sequence, Tuple


Point = Tuple[float, float]


def as_point(p: Any) -> Optional[Point]:
	if p is None:
		return None
	if hasattr(p, "x_px") and hasattr(p, "y_px"):
		return (float(p.x_px), float(p.y_px))
	return (float(p[0]), float(p[1]))


def midpoint(p1: Any, p2: Any) -> Optional[Point]:
	a, b = as_point(p1), as_point(p2)
	if a is None or b is None:
		return None
	return ((a[0] + b[0]) / 2.0, (a[1] + b[1]) / 2.0)


def calculate_angle(p1: Any, p2: Any) -> float:
	"""
	Angle in degrees of the segment p1 -> p2 measured from the image vertical.
	0 means p2 sits straight above/below p1.
	"""
	a, b = as_point(p1), as_point(p2)
	if a is None or b is None:
		return 0.0
	dx = b[0] - a[0]
	dy = b[1] - a[1]
	return abs(math.degrees(math.atan2(dx, dy)))


def calculate_distance(p1: Any, p2: Any) -> float:
	a, b = as_point(p1), as_point(p2)
	if a is None or b is None:
		return 0.0
	return math.hypot(b[0] - a[0], b[1] - a[1])


def clamp(value: float, lo: float, hi: float) -> float:
	return max(lo, min(hi, value))


def normalize_value(value: float, lo: float, hi: float) -> float:
	"""Map value onto [0, 1] relative to [lo, hi], clamped. Degenerate range -> 0."""
	if hi == lo:
		return 0.0
	return clamp((value - lo) / (hi - lo), 0.0, 1.0)


def lerp(start: float, end: float, t: float) -> float:
	return start + (end - start) * clamp(t, 0.0, 1.0)


def exponential_smoothing(new_value: float, old_value: float, alpha: float = 0.3) -> float:
	"""EMA step; higher alpha follows the new value more closely."""
	return alpha * new_value + (1.0 - alpha) * old_value


def moving_average(values: Sequence[float], window: int) -> float:
	if not values or window <= 0:
		return 0.0
	tail = list(values)[-int(window):]
	return sum(tail) / len(tail)


def median(values: Sequence[float]) -> float:
	if not values:
		return 0.0
	s = sorted(values)
	mid = len(s) // 2
	if len(s) % 2 == 0:
		return (s[mid - 1] + s[mid]) / 2.0
	return float(s[mid])


def standard_deviation(values: Sequence[float]) -> float:
	"""Population standard deviation."""
	if not values:
		return 0.0
	avg = sum(values) / len(values)
	return math.sqrt(sum((v - avg) ** 2 for v in values) / len(values))
