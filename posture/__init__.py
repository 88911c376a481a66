"""
Posture monitor core package.

Turns 2D body keypoints into a smoothed posture score and decides when a
user-facing alert should fire.
"""

from importlib.metadata import PackageNotFoundError, version

try:
	__version__ = version("posture-monitor")
except PackageNotFoundError:
	# Running from a source checkout without an install.
	__version__ = "0.0.0"
