from iou_tracker.config import TrackerConfig
from iou_tracker.detected_object import DetectedObject, Detection, TrackState
from iou_tracker.tracker import SimpleTracker
from iou_tracker.utils import box_iou

__all__ = [
    "DetectedObject",
    "Detection",
    "SimpleTracker",
    "TrackState",
    "TrackerConfig",
    "box_iou",
]
