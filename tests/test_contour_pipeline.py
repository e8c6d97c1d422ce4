"""Tests for the HSV contour pipeline and the full system on synthetic frames."""
import numpy as np
import pytest

from target_vision.main import TargetVisionSystem
from target_vision.utils.contour_pipeline import ContourPipeline, ContourFilter
from target_vision.utils.pair_selector import PairSelector
from target_vision.utils.rect import Rect
from target_vision.utils.result_latch import FrameResult

TARGET_RECTS = [(100, 50, 10, 40), (130, 50, 10, 40)]


class TestContourFilter:
    """Test suite for ContourFilter."""

    def test_accepts_stripe(self, make_contour):
        assert ContourFilter().accepts(make_contour(100, 50, 10, 40))

    def test_rejects_small_area(self, make_contour):
        assert not ContourFilter(min_area=500).accepts(make_contour(100, 50, 10, 40))

    def test_rejects_by_width(self, make_contour):
        assert not ContourFilter(max_width=5).accepts(make_contour(100, 50, 10, 40))

    def test_rejects_by_ratio(self, make_contour):
        # 10 / 40 = 0.25
        assert not ContourFilter(min_ratio=0.5).accepts(make_contour(100, 50, 10, 40))
        assert ContourFilter(max_ratio=0.5).accepts(make_contour(100, 50, 10, 40))

    def test_rejects_low_solidity(self):
        # L-shape: area is well below its hull area
        l_shape = np.array([[[0, 0]], [[10, 0]], [[10, 40]], [[40, 40]], [[40, 50]], [[0, 50]]], dtype=np.int32)
        assert not ContourFilter(solidity=(90.0, 100.0)).accepts(l_shape)


class TestContourPipeline:
    """Test suite for ContourPipeline."""

    def test_finds_green_stripes(self, make_target_frame):
        pipeline = ContourPipeline()
        contours = pipeline.process(make_target_frame(TARGET_RECTS))

        rects = sorted((Rect.from_contour(c) for c in contours), key=lambda r: r.x)
        assert rects == [Rect(*r) for r in TARGET_RECTS]
        assert pipeline.filter_contours_output is contours
        assert pipeline.hsv_threshold_output.shape == (240, 320)

    def test_ignores_other_colors(self):
        frame = np.zeros((240, 320, 3), dtype=np.uint8)
        frame[50:90, 100:110] = (0, 0, 255)
        assert ContourPipeline().process(frame) == []

    def test_filters_specks(self, make_target_frame):
        pipeline = ContourPipeline()
        contours = pipeline.process(make_target_frame(TARGET_RECTS + [(250, 200, 3, 3)]))

        assert len(pipeline.find_contours_output) == 3
        assert len(contours) == 2

    def test_resizes_to_frame_size(self, make_target_frame):
        frame = make_target_frame([(200, 100, 20, 80), (260, 100, 20, 80)], size=(640, 480))
        pipeline = ContourPipeline(frame_size=(320, 240))

        contours = pipeline.process(frame)

        assert len(contours) == 2
        assert pipeline.hsv_threshold_output.shape == (240, 320)


class TestTargetVisionSystem:
    """End-to-end runs of TargetVisionSystem."""

    @pytest.fixture
    def system(self):
        return TargetVisionSystem()

    def test_target_frame(self, system, make_target_frame):
        results = system.process_frame(make_target_frame(TARGET_RECTS))

        assert results['match'] is not None
        assert results['result'].center_x == 120
        assert results['result'].distance == pytest.approx(122.8, abs=0.5)
        assert system.latch.snapshot() == results['result']

    def test_empty_frame(self, system, make_target_frame):
        results = system.process_frame(make_target_frame([]))

        assert results['match'] is None
        assert results['latched'] == FrameResult(0.0, 0.0)

    def test_visualize_returns_frame(self, system, make_target_frame):
        frame = make_target_frame(TARGET_RECTS)
        output = system.visualize(frame, system.process_frame(frame))

        assert output.shape == frame.shape
        assert output is not frame

    def test_statistics(self, system, make_target_frame):
        system.process_frame(make_target_frame(TARGET_RECTS))
        system.process_frame(make_target_frame([]))

        stats = system.get_statistics()
        assert stats['total_frames'] == 2
        assert stats['target_frames'] == 1
        assert stats['center_x'] == 120
        assert 'pipeline_avg_ms' in stats

    def test_arithmetic_error_skips_frame(self, system, make_target_frame):
        class ExplodingSelector(PairSelector):
            def select(self, rects):
                raise ZeroDivisionError("degenerate")

        system.runner.selector = ExplodingSelector()
        results = system.process_frame(make_target_frame(TARGET_RECTS))

        assert results['result'] is None
        assert results['match'] is None
        assert system.latch.snapshot_with_id() == (FrameResult(0.0, 0.0), 0)
        assert system.frame_count == 1
