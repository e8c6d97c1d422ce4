"""
Vision Runner
Runs the contour pipeline on every camera frame on a dedicated thread and
publishes the target center and distance to a ResultLatch.

Per frame:
  1. Read a frame from the capture
  2. Run the contour pipeline
  3. Select the best contour pair
  4. Estimate distance and publish

Frames without a target leave the latch untouched.
"""

import logging
import threading
from typing import Iterable, Optional

from .distance_estimator import DistanceEstimator
from .pair_selector import PairSelector
from .rect import Rect
from .result_latch import FrameResult, ResultLatch

logger = logging.getLogger(__name__)


class VisionRunner:
    """
    Frame-by-frame driver between a capture and the result latch.

    Parameters
    ----------
    capture : object, optional
        Anything with ``read() -> (ok, frame)`` (e.g. ``cv2.VideoCapture``).
        Only needed by ``run_once`` / ``run_forever`` / ``start``.
    pipeline : object
        Anything with ``process(frame) -> contours``.
    latch : ResultLatch
        Where results are published.
    selector : PairSelector, optional
    estimator : DistanceEstimator, optional
    """

    def __init__(self, capture, pipeline, latch: ResultLatch,
                 selector: Optional[PairSelector] = None,
                 estimator: Optional[DistanceEstimator] = None):
        self.capture = capture
        self._pipeline = pipeline
        self.latch = latch
        self.selector = selector or PairSelector()
        self.estimator = estimator or DistanceEstimator()

        self.frames_processed = 0
        self.targets_found = 0
        self.last_error = None

        # Candidates and winning pair of the last processed frame
        self.last_rects = []
        self.last_match = None

        # One stop event per run so a lingering thread can't stop its successor
        self._stop_event = None
        self._thread = None

    @property
    def running(self):
        return self._stop_event is not None and not self._stop_event.is_set()

    # ── Per-frame work ─────────────────────────────────

    def process_contours(self, contours: Iterable) -> Optional[FrameResult]:
        """
        Find the target among one frame's contours and publish it

        Returns:
            The published FrameResult, None if the frame had no target
        """
        self.frames_processed += 1
        self.last_rects = []
        self.last_match = None
        try:
            self.last_rects = [Rect.from_contour(c) for c in contours]
            match = self.selector.select(self.last_rects)
            if match is None:
                return None
            self.last_match = match

            result = self.estimator.solve(match.bounding)
            if result is None:
                return None
        except ArithmeticError as e:
            logger.debug("Frame %d skipped: %s", self.frames_processed, e)
            return None

        self.latch.publish(result)
        self.targets_found += 1
        logger.debug("Target at x=%.1f, %.1f in (score %.1f)",
                     result.center_x, result.distance, match.score)
        return result

    def process_frame(self, frame) -> Optional[FrameResult]:
        """Run the pipeline on one frame and publish any target found"""
        return self.process_contours(self._pipeline.process(frame))

    def run_once(self) -> bool:
        """
        Process the next frame from the capture

        Returns:
            False if the capture delivered no frame
        """
        ok, frame = self.capture.read()
        if not ok or frame is None:
            return False

        self.process_frame(frame)
        return True

    def run_forever(self):
        """Process frames until stopped or the capture runs dry"""
        self._stop_event = threading.Event()
        self._loop(self._stop_event)

    def _loop(self, stop_event):
        try:
            while not stop_event.is_set():
                if not self.run_once():
                    logger.info("Capture ended after %d frames", self.frames_processed)
                    break
        finally:
            stop_event.set()

    # ── Start / Stop ───────────────────────────────────

    def start(self) -> bool:
        """
        Launch the vision daemon thread.

        Returns:
            False if a previous vision thread is still alive
        """
        if self._thread is not None:
            if self._thread.is_alive():
                logger.warning("Vision thread still running, not starting another")
                return False
            self._thread = None

        self.last_error = None
        self._stop_event = threading.Event()
        self._thread = threading.Thread(target=self._thread_main, args=(self._stop_event,),
                                        name="vision", daemon=True)
        self._thread.start()
        logger.info("Vision thread started")
        return True

    def stop(self, timeout: float = 2.0) -> bool:
        """
        Signal the vision thread to stop after the current frame.

        Returns:
            True once the thread has exited, False if it is still blocked
            (e.g. in a camera read) after the timeout
        """
        if self._stop_event is not None:
            self._stop_event.set()
        if self._thread is None:
            return True

        self._thread.join(timeout=timeout)
        if self._thread.is_alive():
            logger.warning("Vision thread did not exit within %.1fs", timeout)
            return False

        self._thread = None
        logger.info("Vision thread stopped")
        return True

    def join(self, timeout: Optional[float] = None):
        if self._thread:
            self._thread.join(timeout=timeout)

    def _thread_main(self, stop_event):
        try:
            self._loop(stop_event)
        except Exception as e:
            self.last_error = e
            logger.exception("Vision thread died")
