import pytest

from posture.pose.types import Keypoint, PoseFrame


def make_frame(nose=(100, 50), left_shoulder=(80, 120), right_shoulder=(120, 120), score=0.95, t=None, **extra):
	"""Frame with nose and shoulders; extra parts as name=(x, y[, score])."""
	kps = {}
	for name, pt in (("nose", nose), ("left_shoulder", left_shoulder), ("right_shoulder", right_shoulder)):
		if pt is not None:
			kps[name] = Keypoint(name, float(pt[0]), float(pt[1]), score)
	for name, point in extra.items():
		s = point[2] if len(point) > 2 else score
		kps[name] = Keypoint(name, float(point[0]), float(point[1]), s)
	return PoseFrame(keypoints=kps, t_host=t)


@pytest.fixture
def good_frame():
	return make_frame()


@pytest.fixture
def forward_head_frame():
	return make_frame(nose=(160, 50))
