"""
Rectangle Geometry
Axis-aligned contour rectangles and the box enclosing a pair of them
"""

import cv2
import numpy as np
from dataclasses import dataclass


@dataclass(frozen=True)
class Rect:
    """Axis-aligned rectangle in pixel coordinates (y grows downward)"""
    x: int
    y: int
    width: int
    height: int

    def __post_init__(self):
        if self.width < 0 or self.height < 0:
            raise ValueError(f"Rect size must be non-negative, got {self.width}x{self.height}")

    @property
    def left(self) -> int:
        return self.x

    @property
    def right(self) -> int:
        return self.x + self.width

    @property
    def top(self) -> int:
        return self.y

    @property
    def bottom(self) -> int:
        return self.y + self.height

    @classmethod
    def from_contour(cls, contour) -> "Rect":
        """
        Bounding rect of an OpenCV contour

        Args:
            contour: Array of points, shape (N, 1, 2) or (N, 2)
        """
        x, y, w, h = cv2.boundingRect(np.asarray(contour, dtype=np.int32))
        return cls(int(x), int(y), int(w), int(h))


@dataclass(frozen=True)
class BoundingPair:
    """Edges of the smallest rectangle enclosing two rects"""
    top: int
    bottom: int
    left: int
    right: int

    @property
    def height(self) -> int:
        return self.bottom - self.top

    @property
    def width(self) -> int:
        return self.right - self.left

    @property
    def center_x(self) -> float:
        return (self.left + self.right) / 2


def enclose(r1: Rect, r2: Rect) -> BoundingPair:
    """Smallest axis-aligned rectangle containing both rects"""
    return BoundingPair(
        top=min(r1.top, r2.top),
        bottom=max(r1.bottom, r2.bottom),
        left=min(r1.left, r2.left),
        right=max(r1.right, r2.right),
    )
