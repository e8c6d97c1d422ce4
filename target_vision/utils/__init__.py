"""
Target Vision Utilities
Contour scoring, distance estimation and result hand-off
"""

from .rect import Rect, BoundingPair, enclose
from .target_scorer import ratio_to_score, score_breakdown, total_score, SCORE_FUNCTIONS
from .pair_selector import PairSelector, TargetMatch, SCORE_THRESHOLD
from .distance_estimator import DistanceEstimator
from .result_latch import ResultLatch, FrameResult
from .contour_pipeline import ContourPipeline, ContourFilter
from .vision_runner import VisionRunner

__all__ = [
    'Rect',
    'BoundingPair',
    'enclose',
    'ratio_to_score',
    'score_breakdown',
    'total_score',
    'SCORE_FUNCTIONS',
    'PairSelector',
    'TargetMatch',
    'SCORE_THRESHOLD',
    'DistanceEstimator',
    'ResultLatch',
    'FrameResult',
    'ContourPipeline',
    'ContourFilter',
    'VisionRunner'
]
