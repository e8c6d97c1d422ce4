"""
Single Camera Distance Estimation
Uses the known height of the vision target
"""

import math
from typing import Optional

from .rect import BoundingPair
from .result_latch import FrameResult

# Camera resolution in pixels
IMG_WIDTH = 320
IMG_HEIGHT = 240

# Height of the target in inches
TARGET_HEIGHT = 15.3

# Camera vertical field of view in degrees (Microsoft LifeCam)
CAMERA_FOV_VERT = 41.0


class DistanceEstimator:
    """Estimate distance to the target using monocular vision"""

    def __init__(self,
                 target_height: float = TARGET_HEIGHT,
                 fov_vertical: float = CAMERA_FOV_VERT,
                 img_width: int = IMG_WIDTH,
                 img_height: int = IMG_HEIGHT):
        """
        Args:
            target_height: Real-world target height in inches
            fov_vertical: Camera vertical field of view in degrees
            img_width: Frame width in pixels
            img_height: Frame height in pixels
        """
        self.target_height = target_height
        self.fov_vertical = fov_vertical
        self.img_width = img_width
        self.img_height = img_height

    @property
    def focal_length(self) -> float:
        """Vertical focal length in pixels implied by the field of view"""
        return 0.5 * self.img_height / math.tan(math.radians(self.fov_vertical / 2))

    def estimate(self, bounding: BoundingPair) -> float:
        """
        Estimate distance to the target

        The target height in inches over its height in pixels is the same
        ratio as for the full camera view, which gives the view height in
        inches at the target. Half of that is the side opposite half the
        vertical FOV in a right triangle whose other leg is the distance.

        Args:
            bounding: Box enclosing the target pair

        Returns:
            Distance in inches (-1 if cannot estimate)
        """
        pixel_height = bounding.height

        if pixel_height <= 0:
            return -1.0

        # Distance formula: D = (real_height * focal_length) / pixel_height
        return self.target_height * self.focal_length / pixel_height

    def solve(self, bounding: BoundingPair) -> Optional[FrameResult]:
        """Center and distance of the target, None for a degenerate box"""
        distance = self.estimate(bounding)
        if distance < 0:
            return None
        return FrameResult(center_x=bounding.center_x, distance=distance)
