"""
Pose input contract and metric extraction.

Pose estimation itself happens outside this package; these modules only
consume its keypoints.
"""
