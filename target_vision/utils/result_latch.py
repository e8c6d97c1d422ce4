"""
Result Latch
Hands the latest target center and distance from the vision thread to
the control loop
"""

import threading
import time
from dataclasses import dataclass
from typing import Optional, Tuple


@dataclass(frozen=True)
class FrameResult:
    """Target center (pixels) and distance (inches) from one frame"""
    center_x: float = 0.0
    distance: float = 0.0

    @property
    def has_target(self) -> bool:
        # Distance stays 0 until a target has been seen
        return self.distance != 0


class ResultLatch:
    """
    Thread-safe cell holding the most recent FrameResult.

    Writers overwrite, readers sample. Both fields are copied under one
    lock so a reader never mixes values from two publishes. Frames without
    a target simply don't publish, so the last good result persists.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._center_x = 0.0
        self._distance = 0.0
        self._publish_id = 0
        self._published_at = None

    def publish(self, result: FrameResult):
        """Replace the stored result (vision thread)"""
        now = time.monotonic()
        with self._lock:
            self._center_x = result.center_x
            self._distance = result.distance
            self._publish_id += 1
            self._published_at = now

    def snapshot(self) -> FrameResult:
        """Consistent copy of the stored result (any thread)"""
        with self._lock:
            return FrameResult(center_x=self._center_x, distance=self._distance)

    def snapshot_with_id(self) -> Tuple[FrameResult, int]:
        """
        Stored result along with the number of publishes so far.
        Returns id 0 if nothing was ever published.
        """
        with self._lock:
            return FrameResult(center_x=self._center_x, distance=self._distance), self._publish_id

    def age(self) -> Optional[float]:
        """Seconds since the last publish, None if never published"""
        with self._lock:
            published_at = self._published_at
        if published_at is None:
            return None
        return time.monotonic() - published_at
