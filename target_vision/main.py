#!/usr/bin/env python3
"""
Retroreflective Target Vision
Main Entry Point - Full Integration

Features:
- HSV threshold + contour filter pipeline
- Six-heuristic target pair scoring
- Distance estimation from target height
- Thread-safe result latch for the control loop
- Target overlay and HUD

Usage:
    python -m target_vision.main 0
    python -m target_vision.main <video_file> --output result.mp4
    python -m target_vision.main 0 --threaded --period 0.02
"""

import cv2
import numpy as np
import time
import os
import json
import argparse
import logging

from target_vision.utils.contour_pipeline import ContourPipeline, ContourFilter
from target_vision.utils.pair_selector import PairSelector, SCORE_THRESHOLD
from target_vision.utils.distance_estimator import (
    DistanceEstimator, IMG_WIDTH, IMG_HEIGHT, TARGET_HEIGHT, CAMERA_FOV_VERT
)
from target_vision.utils.result_latch import ResultLatch
from target_vision.utils.vision_runner import VisionRunner


class TargetVisionSystem:
    """Complete target vision system with all components"""

    def __init__(self,
                 img_width=IMG_WIDTH,
                 img_height=IMG_HEIGHT,
                 target_height=TARGET_HEIGHT,
                 fov_vertical=CAMERA_FOV_VERT,
                 score_threshold=SCORE_THRESHOLD,
                 min_single_score=None,
                 hsv_low=(50, 100, 100),
                 hsv_high=(90, 255, 255),
                 min_area=20.0):
        """Initialize complete target vision system"""
        print("=" * 70)
        print("TARGET VISION SYSTEM - INITIALIZATION")
        print("=" * 70)

        self.img_width = img_width
        self.img_height = img_height

        print("\n[1/4] Initializing Contour Pipeline...")
        self.pipeline = ContourPipeline(
            hsv_low=hsv_low,
            hsv_high=hsv_high,
            contour_filter=ContourFilter(min_area=min_area),
            frame_size=(img_width, img_height)
        )
        print(f"       ✓ HSV {tuple(hsv_low)} - {tuple(hsv_high)}, min area {min_area}")

        print("[2/4] Initializing Pair Selector...")
        self.selector = PairSelector(score_threshold=score_threshold, min_single_score=min_single_score)
        print(f"       ✓ Score threshold {score_threshold}")

        print("[3/4] Initializing Distance Estimator...")
        self.distance_estimator = DistanceEstimator(
            target_height=target_height,
            fov_vertical=fov_vertical,
            img_width=img_width,
            img_height=img_height
        )
        print(f"       ✓ Target {target_height} in, FOV {fov_vertical} deg "
              f"(f={self.distance_estimator.focal_length:.1f}px)")

        print("[4/4] Initializing Result Latch...")
        self.latch = ResultLatch()
        self.runner = VisionRunner(
            None,
            self.pipeline,
            self.latch,
            selector=self.selector,
            estimator=self.distance_estimator
        )
        print("       ✓ Latch ready")

        # Performance tracking
        self.total_time = 0.0
        self.component_times = {
            'pipeline': [],
            'target': [],
            'visualization': []
        }

        print("\n" + "=" * 70)
        print("✓ SYSTEM READY")
        print("=" * 70 + "\n")

    @property
    def frame_count(self):
        return self.runner.frames_processed

    @property
    def target_count(self):
        return self.runner.targets_found

    def process_frame(self, frame):
        """
        Run one frame through the full system

        Returns:
            Dict with contours, rects, match, result and timing
        """
        t_start = time.time()

        # 1. Contours
        t0 = time.time()
        contours = self.pipeline.process(frame)
        self.component_times['pipeline'].append((time.time() - t0) * 1000)

        # 2. Target pair, distance + publish
        t0 = time.time()
        result = self.runner.process_contours(contours)
        self.component_times['target'].append((time.time() - t0) * 1000)

        processing_time = time.time() - t_start
        self.total_time += processing_time

        return {
            'contours': contours,
            'rects': self.runner.last_rects,
            'match': self.runner.last_match,
            'result': result,
            'latched': self.latch.snapshot(),
            'processing_time': processing_time
        }

    def visualize(self, frame, results):
        """Draw candidates, target box and HUD"""
        t0 = time.time()
        output = self.pipeline.resize(frame).copy()
        h, w = output.shape[:2]

        # 1. Candidate rects
        for rect in results['rects']:
            cv2.rectangle(output, (rect.left, rect.top), (rect.right, rect.bottom), (255, 200, 0), 1)

        # 2. Target box + center line
        match = results['match']
        if match is not None:
            b = match.bounding
            cv2.rectangle(output, (b.left, b.top), (b.right, b.bottom), (0, 0, 255), 2)
            cx = int(round(b.center_x))
            cv2.line(output, (cx, b.top), (cx, b.bottom), (0, 255, 255), 1)

        # 3. Image center reference
        cv2.line(output, (w // 2, h - 8), (w // 2, h), (180, 180, 180), 1)

        # 4. HUD
        latched = results['latched']
        if latched.has_target:
            text = f"X:{latched.center_x:.0f} D:{latched.distance:.1f}in"
            color = (0, 255, 0) if results['result'] is not None else (0, 165, 255)
        else:
            text = "NO TARGET"
            color = (0, 0, 255)
        cv2.putText(output, text, (5, 15), cv2.FONT_HERSHEY_SIMPLEX, 0.45, color, 1)

        if match is not None:
            cv2.putText(output, f"Score: {match.score:.0f}", (5, 30),
                        cv2.FONT_HERSHEY_SIMPLEX, 0.4, (255, 255, 255), 1)

        fps = 1.0 / results['processing_time'] if results['processing_time'] > 0 else 0
        cv2.putText(output, f"FPS: {fps:.0f} | {len(results['rects'])} cand", (5, h - 5),
                    cv2.FONT_HERSHEY_SIMPLEX, 0.35, (180, 180, 180), 1)

        self.component_times['visualization'].append((time.time() - t0) * 1000)
        return output

    def get_statistics(self):
        """Get performance statistics"""
        stats = {
            'total_frames': self.frame_count,
            'target_frames': self.target_count,
            'total_time': self.total_time,
            'average_fps': self.frame_count / self.total_time if self.total_time > 0 else 0,
        }

        for component, times in self.component_times.items():
            if times:
                stats[f'{component}_avg_ms'] = float(np.mean(times))
                stats[f'{component}_max_ms'] = float(np.max(times))

        latched = self.latch.snapshot()
        stats['center_x'] = latched.center_x
        stats['distance'] = latched.distance
        return stats


def _parse_hsv(text):
    values = tuple(int(v) for v in text.split(','))
    if len(values) != 3:
        raise argparse.ArgumentTypeError(f"expected H,S,V, got {text!r}")
    return values


def _open_capture(source, width, height):
    """Open a camera index or a video file"""
    if source.isdigit():
        cap = cv2.VideoCapture(int(source))
        cap.set(cv2.CAP_PROP_FRAME_WIDTH, width)
        cap.set(cv2.CAP_PROP_FRAME_HEIGHT, height)
        return cap

    if not os.path.exists(source):
        print(f"Error: Video file not found: {source}")
        return None
    return cv2.VideoCapture(source)


def run_threaded(system, cap, period):
    """
    Run the vision thread and poll the latch like a periodic control loop.
    Returns when the capture ends or on Ctrl+C.
    """
    runner = system.runner
    runner.capture = cap
    runner.start()
    last_id = 0
    try:
        while runner.running:
            result, publish_id = system.latch.snapshot_with_id()
            if publish_id != last_id:
                last_id = publish_id
                print(f"Center: {result.center_x}")
                print(f"Distance: {result.distance}")
            time.sleep(period)
    except KeyboardInterrupt:
        print("\nQuitting...")
    finally:
        runner.stop()

    if runner.last_error is not None:
        print(f"Error: Vision thread failed: {runner.last_error}")


def run_display(system, cap, writer, show):
    """Process frames on the main thread with an overlay"""
    while cap.isOpened():
        ret, frame = cap.read()
        if not ret:
            break

        results = system.process_frame(frame)
        output = system.visualize(frame, results)

        if writer:
            writer.write(output)

        if show:
            cv2.imshow("Target Vision - Press 'q' to quit", output)
            if cv2.waitKey(1) & 0xFF == ord('q'):
                print("\nQuitting...")
                break


def main():
    """Main function"""
    parser = argparse.ArgumentParser(description='Retroreflective Target Vision')
    parser.add_argument('source', help='Camera index (e.g. 0) or path to video file')
    parser.add_argument('--width', type=int, default=IMG_WIDTH,
                        help=f'Processing width in pixels (default: {IMG_WIDTH})')
    parser.add_argument('--height', type=int, default=IMG_HEIGHT,
                        help=f'Processing height in pixels (default: {IMG_HEIGHT})')
    parser.add_argument('--target-height', type=float, default=TARGET_HEIGHT,
                        help=f'Target height in inches (default: {TARGET_HEIGHT})')
    parser.add_argument('--fov', type=float, default=CAMERA_FOV_VERT,
                        help=f'Camera vertical FOV in degrees (default: {CAMERA_FOV_VERT})')
    parser.add_argument('--score-threshold', type=float, default=SCORE_THRESHOLD,
                        help=f'Total score needed for a target (default: {SCORE_THRESHOLD})')
    parser.add_argument('--min-single-score', type=float, default=None,
                        help='Reject pairs with any single score below this (e.g. 15)')
    parser.add_argument('--hsv-low', type=_parse_hsv, default=(50, 100, 100),
                        help='Lower HSV bound as H,S,V (default: 50,100,100)')
    parser.add_argument('--hsv-high', type=_parse_hsv, default=(90, 255, 255),
                        help='Upper HSV bound as H,S,V (default: 90,255,255)')
    parser.add_argument('--min-area', type=float, default=20.0,
                        help='Minimum contour area in pixels (default: 20)')
    parser.add_argument('--threaded', action='store_true',
                        help='Run vision on its own thread and poll results periodically')
    parser.add_argument('--period', type=float, default=0.02,
                        help='Polling period in seconds for --threaded (default: 0.02)')
    parser.add_argument('--output', help='Save annotated video to file')
    parser.add_argument('--stats', help='Save statistics to JSON file')
    parser.add_argument('--no-display', action='store_true',
                        help='Do not open a preview window')
    parser.add_argument('--log-level', default='WARNING',
                        help='Logging level (default: WARNING)')

    args = parser.parse_args()
    if args.threaded and args.output:
        parser.error("--output cannot be combined with --threaded (no frames are drawn in threaded mode)")

    logging.basicConfig(
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        level=getattr(logging, args.log_level.upper(), logging.WARNING)
    )

    system = TargetVisionSystem(
        img_width=args.width,
        img_height=args.height,
        target_height=args.target_height,
        fov_vertical=args.fov,
        score_threshold=args.score_threshold,
        min_single_score=args.min_single_score,
        hsv_low=args.hsv_low,
        hsv_high=args.hsv_high,
        min_area=args.min_area
    )

    cap = _open_capture(args.source, args.width, args.height)
    if cap is None:
        return
    if not cap.isOpened():
        print(f"Error: Cannot open source {args.source}")
        return

    fps = cap.get(cv2.CAP_PROP_FPS) or 30.0
    print(f"Source: {args.source}")
    print(f"Processing at {args.width}x{args.height}")

    writer = None
    if args.output:
        fourcc = cv2.VideoWriter_fourcc(*'mp4v')
        writer = cv2.VideoWriter(args.output, fourcc, fps, (args.width, args.height))
        print(f"Saving output to: {args.output}\n")

    try:
        if args.threaded:
            print("\nRunning vision thread... (Ctrl+C to quit)\n")
            run_threaded(system, cap, args.period)
        else:
            print("\nProcessing... (Press 'q' to quit)\n")
            run_display(system, cap, writer, show=not (args.no_display or args.output))
    except KeyboardInterrupt:
        print("\nQuitting...")
    finally:
        cap.release()
        if writer:
            writer.release()
        cv2.destroyAllWindows()

    stats = system.get_statistics()

    print("\n" + "=" * 70)
    print("FINAL STATISTICS")
    print("=" * 70)
    print(f"Total frames:  {stats['total_frames']}")
    print(f"Target frames: {stats['target_frames']}")
    if stats['total_time'] > 0:
        print(f"Average FPS:   {stats['average_fps']:.2f}")
        print("\nComponent Breakdown:")
        print(f"  Pipeline:      {stats.get('pipeline_avg_ms', 0):.2f} ms")
        print(f"  Target:        {stats.get('target_avg_ms', 0):.2f} ms")
        print(f"  Visualization: {stats.get('visualization_avg_ms', 0):.2f} ms")
    print(f"\nLast target: center {stats['center_x']:.1f}px, distance {stats['distance']:.1f}in")
    print("=" * 70)

    if args.stats:
        with open(args.stats, 'w') as f:
            json.dump(stats, f, indent=2)
        print(f"\nStatistics saved to: {args.stats}")

    print("\n✓ Processing complete!\n")


if __name__ == "__main__":
    main()
