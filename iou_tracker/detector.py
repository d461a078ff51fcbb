"""Detectors that feed SimpleTracker one batch of Detections per frame."""
from __future__ import annotations

from collections.abc import Iterable

import numpy as np

from iou_tracker.detected_object import Detection
from iou_tracker.logging import get_logger

log = get_logger(__name__)


class YoloDetector:
    """Wraps an ultralytics YOLO model and returns Detections for an image."""

    def __init__(self, model, conf: float = 0.5) -> None:
        """
        Args:
            model (YOLO): Pre-trained ultralytics model.
            conf (float): Confidence threshold for object detection (default: 0.5).
        """
        self.model = model
        self.conf = conf

    @classmethod
    def from_weights(cls, weights: str, conf: float = 0.5) -> "YoloDetector":
        from ultralytics import YOLO

        log.info("loading_model", weights=weights)
        return cls(YOLO(weights), conf=conf)

    def __call__(self, input_image: np.ndarray) -> list[Detection]:
        """
        Run object detection inference on the input image.

        Args:
            input_image (np.ndarray): Input image for object detection.

        Returns:
            list[Detection]: One Detection per box, labelled with the class name
                when the model provides one. Empty if nothing was detected.
        """
        results = self.model.predict(input_image, conf=self.conf, verbose=False)

        # Extract the first (and typically only) result
        result = results[0]
        if result.boxes is None or len(result.boxes) == 0:
            return []

        boxes = _to_numpy(result.boxes.xyxy)
        scores = _to_numpy(result.boxes.conf)
        categories = _to_numpy(result.boxes.cls)
        names = getattr(result, "names", None) or {}

        detections = []
        for (x1, y1, x2, y2), score, category in zip(boxes, scores, categories):
            class_id = int(category)
            detections.append(
                Detection(
                    x1=float(x1),
                    y1=float(y1),
                    x2=float(x2),
                    y2=float(y2),
                    score=float(score),
                    label=names.get(class_id, str(class_id)),
                )
            )
        return detections


class StaticDetector:
    """Placeholder detector that reports the same detections on every frame."""

    def __init__(self, detections: Iterable[Detection]) -> None:
        self.detections = list(detections)

    def __call__(self, input_image: np.ndarray) -> list[Detection]:
        return list(self.detections)


def _to_numpy(values) -> np.ndarray:
    # ultralytics returns torch tensors; tests and exported models may give arrays
    if hasattr(values, "cpu"):
        values = values.cpu().numpy()
    return np.asarray(values)
