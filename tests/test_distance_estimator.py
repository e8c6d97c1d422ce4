"""Tests for DistanceEstimator."""
import math

import pytest

from target_vision.utils.distance_estimator import (
    DistanceEstimator, IMG_WIDTH, IMG_HEIGHT, TARGET_HEIGHT, CAMERA_FOV_VERT
)
from target_vision.utils.rect import BoundingPair
from target_vision.utils.result_latch import FrameResult


def _box(top, bottom, left=100, right=140):
    return BoundingPair(top=top, bottom=bottom, left=left, right=right)


class TestDistanceEstimator:
    """Test suite for distance estimation."""

    def test_constants(self):
        assert (IMG_WIDTH, IMG_HEIGHT) == (320, 240)
        assert TARGET_HEIGHT == 15.3
        assert CAMERA_FOV_VERT == 41

    def test_perfect_target_distance(self):
        distance = DistanceEstimator().estimate(_box(50, 90))
        assert distance == pytest.approx(122.8, abs=0.5)

    def test_matches_view_height_formula(self):
        estimator = DistanceEstimator()
        for pixel_height in (10, 40, 97, 240):
            view_height = TARGET_HEIGHT * IMG_HEIGHT / pixel_height
            expected = 0.5 * view_height / math.tan(CAMERA_FOV_VERT * math.pi / (2 * 180))
            assert estimator.estimate(_box(0, pixel_height)) == pytest.approx(expected)

    def test_closer_target_is_nearer(self):
        estimator = DistanceEstimator()
        distances = [estimator.estimate(_box(0, h)) for h in range(1, 241)]
        assert all(a > b for a, b in zip(distances, distances[1:]))

    def test_zero_height_cannot_estimate(self):
        assert DistanceEstimator().estimate(_box(60, 60)) == -1.0

    def test_focal_length(self):
        estimator = DistanceEstimator(fov_vertical=90.0, img_height=200)
        assert estimator.focal_length == pytest.approx(100.0)

    def test_custom_target_height_scales_linearly(self):
        near = DistanceEstimator(target_height=10.0).estimate(_box(0, 50))
        far = DistanceEstimator(target_height=20.0).estimate(_box(0, 50))
        assert far == pytest.approx(2 * near)


class TestSolve:
    """Test suite for DistanceEstimator.solve()."""

    def test_solve_perfect_target(self):
        result = DistanceEstimator().solve(_box(50, 90))

        assert isinstance(result, FrameResult)
        assert result.center_x == 120
        assert result.distance == pytest.approx(122.8, abs=0.5)

    def test_solve_odd_width_center(self):
        result = DistanceEstimator().solve(_box(0, 10, left=3, right=8))
        assert result.center_x == 5.5

    def test_solve_degenerate_box(self):
        assert DistanceEstimator().solve(_box(60, 60)) is None
