"""
Target Pair Selection
Picks the pair of contours that best matches the two-stripe target
"""

import logging
from dataclasses import dataclass
from itertools import combinations
from typing import Iterable, Optional

from .rect import Rect, BoundingPair, enclose
from .target_scorer import score_breakdown

logger = logging.getLogger(__name__)

# "Average" score of 75 across the six heuristics needed to be seen as target
SCORE_THRESHOLD = 75 * 6


@dataclass(frozen=True)
class TargetMatch:
    """Winning contour pair for one frame"""
    first: Rect
    second: Rect
    bounding: BoundingPair
    score: float


class PairSelector:
    """Score every unordered pair of candidate rects and keep the best"""

    def __init__(self, score_threshold: float = SCORE_THRESHOLD, min_single_score: Optional[float] = None):
        """
        Args:
            score_threshold: Total score a pair must exceed to be the target
            min_single_score: If set, pairs with any single heuristic below
                this value are ignored (the LabVIEW example uses 15)
        """
        self.score_threshold = score_threshold
        self.min_single_score = min_single_score

    def select(self, rects: Iterable[Rect]) -> Optional[TargetMatch]:
        """
        Find the target pair among one frame's candidates

        Args:
            rects: Candidate rects, in any order

        Returns:
            TargetMatch for the highest scoring pair above the threshold,
            None if there is no such pair
        """
        candidates = list(rects)
        if len(candidates) < 2:
            return None

        best = None
        best_score = float('-inf')

        for r1, r2 in combinations(candidates, 2):
            scores = score_breakdown(r1, r2)
            if self.min_single_score is not None and min(scores.values()) < self.min_single_score:
                continue

            total = sum(scores.values())
            # Strict comparison keeps the first pair on ties
            if total > best_score:
                best_score = total
                best = (r1, r2)

        if best is None or best_score <= self.score_threshold:
            logger.debug("No target among %d candidates (best score %.1f)", len(candidates), best_score)
            return None

        r1, r2 = best
        return TargetMatch(first=r1, second=r2, bounding=enclose(r1, r2), score=best_score)
