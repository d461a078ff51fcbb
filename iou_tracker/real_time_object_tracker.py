from __future__ import annotations

import copy
from collections.abc import Callable

import cv2 as cv
import numpy as np

from iou_tracker.detected_object import Detection, TrackState
from iou_tracker.persistence import JsonlTrackSink
from iou_tracker.tracker import SimpleTracker
from iou_tracker.utils import id_to_color


class RealTimeObjectTracker:
    """
    Per-frame pipeline: detect, track, persist and draw.

    The detector is any callable returning a list of Detections for an image.
    Every emitted track is drawn, tentative ones included; only confirmed
    tracks reach the sink.
    """

    def __init__(
        self,
        detector: Callable[[np.ndarray], list[Detection]],
        tracker: SimpleTracker | None = None,
        sink: JsonlTrackSink | None = None,
    ) -> None:
        """
        Initialize the real-time object tracking pipeline.

        Args:
            detector (Callable): Produces the detections for one frame.
            tracker (SimpleTracker | None): Tracker to advance; a default one is built if omitted.
            sink (JsonlTrackSink | None): Optional persistence for confirmed tracks.
        """
        self.detector = detector
        self.tracker = tracker if tracker is not None else SimpleTracker()
        self.sink = sink

    def inference(self, input_image: np.ndarray) -> tuple[np.ndarray, list[TrackState]]:
        """
        Perform complete object tracking inference on an input image.

        Args:
            input_image (np.ndarray): Image for object detection and tracking.

        Returns:
            tuple: A tuple containing (annotated_image, tracks)
                - annotated_image (np.ndarray): Copy of the input with tracks drawn
                - tracks (list[TrackState]): Tracks alive after this frame
        """
        # Create a copy to avoid modifying the original image
        image = copy.deepcopy(input_image)

        detections = self.detector(image)
        tracks = self.tracker.update(detections)

        if self.sink is not None:
            self.sink.write(tracks)

        return self.draw_tracks(image, tracks), tracks

    @staticmethod
    def draw_tracks(image: np.ndarray, tracks: list[TrackState]) -> np.ndarray:
        """Draw a box and an ``<label> ID:<id> <score>%`` caption for each track, in place."""
        for track in tracks:
            box = track.bbox
            left, top = int(box.x1), int(box.y1)
            right, bottom = int(box.x2), int(box.y2)
            color = id_to_color(track.id * 10)  # Color based on track ID

            # Tentative tracks get a thinner outline
            cv.rectangle(
                image,
                (left, top),
                (right, bottom),
                color,
                thickness=3 if track.confirmed else 1,
            )

            caption = f"{box.label if box.label is not None else 'obj'} ID:{track.id}"
            if box.score:
                caption += f" {box.score * 100:.0f}%"
            cv.putText(
                image,
                caption,
                (left + 4, top + 18),
                cv.FONT_HERSHEY_SIMPLEX,
                0.6,
                color,
                thickness=2,
            )

        return image
