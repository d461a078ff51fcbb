"""Run the IoU tracker over a directory of images, a video file or a camera."""
from __future__ import annotations

import argparse
import glob
import os
import sys
import time
from collections.abc import Iterator

import cv2 as cv
import numpy as np
from pydantic import ValidationError

from iou_tracker.config import Settings, build_config
from iou_tracker.detected_object import Detection
from iou_tracker.detector import StaticDetector, YoloDetector
from iou_tracker.logging import LOG_FORMATS, configure_logging, get_logger
from iou_tracker.persistence import JsonlTrackSink
from iou_tracker.real_time_object_tracker import RealTimeObjectTracker
from iou_tracker.tracker import SimpleTracker

log = get_logger(__name__)

# Log throughput every N frames
_LOG_INTERVAL = 100

_MOCK_DETECTION = Detection(x1=100, y1=100, x2=220, y2=280, score=0.85, label="person")


def iterate_frames(source: str) -> Iterator[np.ndarray]:
    """Yield RGB frames from an image directory, a video file or a camera index."""
    if os.path.isdir(source):
        images_path = sorted(
            p
            for ext in ("*.png", "*.jpg", "*.jpeg")
            for p in glob.glob(os.path.join(source, ext))
        )
        for image_file in images_path:
            image = cv.imread(image_file)
            if image is None:
                log.warning("image_unreadable", path=image_file)
                continue
            yield cv.cvtColor(image, cv.COLOR_BGR2RGB)
        return

    capture = cv.VideoCapture(int(source) if source.isdigit() else source)
    if not capture.isOpened():
        raise FileNotFoundError(f"cannot open video source: {source}")
    try:
        while True:
            ok, image = capture.read()
            if not ok:
                break
            yield cv.cvtColor(image, cv.COLOR_BGR2RGB)
    finally:
        capture.release()


def build_parser(settings: Settings) -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(description=__doc__)
    ap.add_argument("source", help="image directory, video file or camera index")
    ap.add_argument("--mock", action="store_true", help="use a fixed placeholder detection instead of YOLO")
    ap.add_argument("--model", default=settings.model_path)
    ap.add_argument("--conf", type=float, default=settings.confidence)
    ap.add_argument("--iou-threshold", type=float, default=settings.iou_threshold)
    ap.add_argument("--max-age", type=int, default=settings.max_age)
    ap.add_argument("--min-hits", type=int, default=settings.min_hits)
    ap.add_argument("--output", default=settings.output_path, help="JSON Lines file for confirmed tracks")
    ap.add_argument("--show", action="store_true", help="display annotated frames")
    ap.add_argument("--log-format", default=settings.log_format, choices=LOG_FORMATS)
    ap.add_argument("--log-level", default=settings.log_level)
    return ap


def main(argv: list[str] | None = None) -> int:
    try:
        settings = Settings()
    except ValidationError as exc:
        configure_logging()
        log.error("invalid_settings", errors=exc.errors(include_url=False))
        return 2

    args = build_parser(settings).parse_args(argv)
    configure_logging(args.log_format, args.log_level)

    settings = settings.model_copy(
        update={
            "iou_threshold": args.iou_threshold,
            "max_age": args.max_age,
            "min_hits": args.min_hits,
        }
    )
    try:
        config = build_config(settings)
    except ValueError as exc:
        log.error("invalid_config", error=str(exc))
        return 2

    if args.mock:
        detector = StaticDetector([_MOCK_DETECTION])
    else:
        detector = YoloDetector.from_weights(args.model, conf=args.conf)

    sink = JsonlTrackSink(args.output) if args.output else None
    pipeline = RealTimeObjectTracker(detector, SimpleTracker.from_config(config), sink)

    started = time.monotonic()
    frames = 0
    try:
        for frame in iterate_frames(args.source):
            output_image, tracks = pipeline.inference(frame)
            frames += 1

            if frames % _LOG_INTERVAL == 0:
                elapsed = time.monotonic() - started
                log.info(
                    "throughput",
                    frames=frames,
                    fps=round(frames / elapsed, 2) if elapsed else None,
                    live_tracks=len(tracks),
                )

            if args.show:
                cv.imshow("Object Tracking", cv.cvtColor(output_image, cv.COLOR_RGB2BGR))
                # Break the loop if 'q' is pressed
                if cv.waitKey(1) & 0xFF == ord("q"):
                    break
    except FileNotFoundError as exc:
        log.error("source_unavailable", error=str(exc))
        return 1
    finally:
        if sink is not None:
            sink.close()
        if args.show:
            cv.destroyAllWindows()

    log.info("done", frames=frames, frame_count=pipeline.tracker.frame_count)
    return 0


if __name__ == "__main__":
    sys.exit(main())
