"""
Contour Pipeline
HSV threshold + contour filter that turns a camera frame into target
candidates (lit retroreflective tape under a green LED ring)
"""

import cv2
import numpy as np
from dataclasses import dataclass
from typing import List, Optional, Tuple


@dataclass
class ContourFilter:
    """Limits a contour must satisfy to be a candidate"""
    min_area: float = 20.0
    min_perimeter: float = 0.0
    min_width: float = 2.0
    max_width: float = 1000.0
    min_height: float = 5.0
    max_height: float = 1000.0
    solidity: Tuple[float, float] = (60.0, 100.0)   # percent of convex hull area
    max_vertices: float = 1000000.0
    min_vertices: float = 0.0
    min_ratio: float = 0.0      # width / height
    max_ratio: float = 1000.0

    def accepts(self, contour: np.ndarray) -> bool:
        """Check a single contour against every limit"""
        x, y, w, h = cv2.boundingRect(contour)
        if w < self.min_width or w > self.max_width:
            return False
        if h < self.min_height or h > self.max_height:
            return False

        area = cv2.contourArea(contour)
        if area < self.min_area:
            return False
        if cv2.arcLength(contour, True) < self.min_perimeter:
            return False

        hull_area = cv2.contourArea(cv2.convexHull(contour))
        if hull_area <= 0:
            return False
        solid = 100.0 * area / hull_area
        if solid < self.solidity[0] or solid > self.solidity[1]:
            return False

        if len(contour) < self.min_vertices or len(contour) > self.max_vertices:
            return False

        ratio = w / h
        return self.min_ratio <= ratio <= self.max_ratio


class ContourPipeline:
    """Threshold a BGR frame in HSV and keep contours that look like tape"""

    def __init__(self,
                 hsv_low: Tuple[int, int, int] = (50, 100, 100),
                 hsv_high: Tuple[int, int, int] = (90, 255, 255),
                 contour_filter: Optional[ContourFilter] = None,
                 blur_size: int = 0,
                 frame_size: Optional[Tuple[int, int]] = None):
        """
        Args:
            hsv_low: Lower HSV bound (OpenCV ranges: H 0-179, S/V 0-255)
            hsv_high: Upper HSV bound
            contour_filter: Candidate limits (defaults to ContourFilter())
            blur_size: Odd Gaussian kernel size applied before thresholding, 0 disables
            frame_size: (width, height) frames are resized to first, None keeps them as is
        """
        self.hsv_low = np.array(hsv_low, dtype=np.uint8)
        self.hsv_high = np.array(hsv_high, dtype=np.uint8)
        self.contour_filter = contour_filter or ContourFilter()
        self.blur_size = blur_size
        self.frame_size = frame_size

        # Outputs of the last processed frame
        self.hsv_threshold_output = None
        self.find_contours_output = []
        self.filter_contours_output = []

    def resize(self, frame: np.ndarray) -> np.ndarray:
        """Scale a frame to frame_size (no-op when unset or already that size)"""
        if self.frame_size is None:
            return frame
        h, w = frame.shape[:2]
        if (w, h) == tuple(self.frame_size):
            return frame
        return cv2.resize(frame, tuple(self.frame_size), interpolation=cv2.INTER_AREA)

    def process(self, frame: np.ndarray) -> List[np.ndarray]:
        """
        Run the pipeline on one frame

        Args:
            frame: Input BGR frame

        Returns:
            Filtered contours
        """
        frame = self.resize(frame)

        if self.blur_size > 1:
            frame = cv2.GaussianBlur(frame, (self.blur_size, self.blur_size), 0)

        hsv = cv2.cvtColor(frame, cv2.COLOR_BGR2HSV)
        mask = cv2.inRange(hsv, self.hsv_low, self.hsv_high)
        self.hsv_threshold_output = mask

        contours_info = cv2.findContours(mask, cv2.RETR_EXTERNAL, cv2.CHAIN_APPROX_SIMPLE)
        # OpenCV 3 returns (image, contours, hierarchy)
        contours = contours_info[1] if len(contours_info) == 3 else contours_info[0]
        self.find_contours_output = list(contours)

        self.filter_contours_output = [c for c in self.find_contours_output if self.contour_filter.accepts(c)]
        return self.filter_contours_output
