"""
Target Shape Scoring
Six heuristics that rate how well two contours form the two-stripe target.

Every heuristic reduces a pair of rects to a ratio whose ideal value is 1
and maps it through ratio_to_score, so each one contributes 0-100 points.
"""

from typing import Dict, Optional

from .rect import Rect, BoundingPair, enclose


def ratio_to_score(ratio: float) -> float:
    """
    Convert a ratio with ideal value 1 to a score.

    Piecewise linear from (0, 0) to (1, 100) to (2, 0), and 0 for all
    inputs outside 0-2.
    """
    return max(0.0, min(100.0 * (1.0 - abs(1.0 - ratio)), 100.0))


def bounding_ratio_score(r1: Rect, r2: Rect, bounding: Optional[BoundingPair] = None) -> float:
    """Height of the box around both rects should be about double its width"""
    bounding = bounding or enclose(r1, r2)
    if bounding.width == 0:
        return 0.0
    return ratio_to_score(bounding.height / (2.0 * bounding.width))


def contour_width_score(r1: Rect, r2: Rect, bounding: Optional[BoundingPair] = None) -> float:
    """Width of either contour should be about 1/4 of the box width"""
    bounding = bounding or enclose(r1, r2)
    if bounding.width == 0:
        return 0.0
    return ratio_to_score(4.0 * r1.width / bounding.width)


def top_edge_score(r1: Rect, r2: Rect, bounding: Optional[BoundingPair] = None) -> float:
    """
    Top edges should be very close together.

    The difference is scaled by the box height, which gives an ideal of 0,
    so 1 is added.
    """
    bounding = bounding or enclose(r1, r2)
    if bounding.height == 0:
        return 0.0
    return ratio_to_score(1.0 + (r1.top - r2.top) / bounding.height)


def left_spacing_score(r1: Rect, r2: Rect, bounding: Optional[BoundingPair] = None) -> float:
    """Spacing between the left edges should be 3/4 of the target width"""
    bounding = bounding or enclose(r1, r2)
    if bounding.width == 0:
        return 0.0
    return ratio_to_score(3.0 * abs(r2.left - r1.left) / (4.0 * bounding.width))


def width_ratio_score(r1: Rect, r2: Rect, bounding: Optional[BoundingPair] = None) -> float:
    """Widths of the two contours should match"""
    if r2.width == 0:
        return 0.0
    return ratio_to_score(r1.width / r2.width)


def height_ratio_score(r1: Rect, r2: Rect, bounding: Optional[BoundingPair] = None) -> float:
    """Heights of the two contours should match"""
    if r2.height == 0:
        return 0.0
    return ratio_to_score(r1.height / r2.height)


SCORE_FUNCTIONS = (
    bounding_ratio_score,
    contour_width_score,
    top_edge_score,
    left_spacing_score,
    width_ratio_score,
    height_ratio_score,
)


def score_breakdown(r1: Rect, r2: Rect) -> Dict[str, float]:
    """
    Score a pair with every heuristic

    Returns:
        Dict mapping heuristic name to its 0-100 score, in SCORE_FUNCTIONS order
    """
    bounding = enclose(r1, r2)
    return {fn.__name__: fn(r1, r2, bounding) for fn in SCORE_FUNCTIONS}


def total_score(r1: Rect, r2: Rect) -> float:
    """Sum of all six heuristics (0-600)"""
    return sum(score_breakdown(r1, r2).values())
