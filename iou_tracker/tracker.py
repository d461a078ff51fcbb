from __future__ import annotations

import copy
from collections.abc import Iterable, Mapping

from iou_tracker.config import TrackerConfig
from iou_tracker.detected_object import DetectedObject, Detection, TrackState
from iou_tracker.logging import get_logger
from iou_tracker.matching import greedy_match
from iou_tracker.utils import iou_matrix

log = get_logger(__name__)


class SimpleTracker:
    """
    IoU-only multi-object tracker with persistent integer IDs.

    Each call to :meth:`update` advances one frame: existing tracks are
    associated greedily with the new detections, unmatched detections start new
    tracks, unmatched tracks age and are removed once their age exceeds
    ``max_age``. There is no appearance or motion model.

    Not safe for concurrent use; callers must serialize ``update`` calls.
    """

    def __init__(
        self,
        iou_threshold: float = 0.3,
        max_age: int = 30,
        min_hits: int = 1,
    ) -> None:
        """
        Initialize the tracker.

        Args:
            iou_threshold (float): Minimum IoU for a track/detection match (default: 0.3).
            max_age (int): Frames a track survives without a match (default: 30).
            min_hits (int): Matched frames required before a track is confirmed (default: 1).

        Raises:
            ValueError: If any option is out of range.
        """
        self._config = TrackerConfig(
            iou_threshold=iou_threshold, max_age=max_age, min_hits=min_hits
        )
        self._tracks: list[DetectedObject] = []
        self._next_id: int = 1  # Identities are never reused
        self._frame_count: int = 0

    @classmethod
    def from_config(cls, config: TrackerConfig) -> "SimpleTracker":
        return cls(
            iou_threshold=config.iou_threshold,
            max_age=config.max_age,
            min_hits=config.min_hits,
        )

    @property
    def config(self) -> TrackerConfig:
        return self._config

    @property
    def frame_count(self) -> int:
        return self._frame_count

    @property
    def tracks(self) -> tuple[DetectedObject, ...]:
        """Copies of the live tracks; changing them does not affect the tracker."""
        return tuple(copy.copy(t) for t in self._tracks)

    def reset(self) -> None:
        """Drop every track and restart the frame counter. IDs keep increasing."""
        self._tracks = []
        self._frame_count = 0

    def update(self, detections: Iterable[Detection | Mapping]) -> list[TrackState]:
        """
        Advance one frame with a new batch of detections.

        Args:
            detections (Iterable[Detection | Mapping]): Detections for this frame,
                either Detection objects or ``{x1, y1, x2, y2, score, label}`` mappings.
                May be empty.

        Returns:
            list[TrackState]: Every track alive after this frame, matched or not,
                with its confirmation status and age.
        """
        self._frame_count += 1
        frame = self._frame_count

        batch = [
            d if isinstance(d, Detection) else Detection.from_mapping(d)
            for d in detections
        ]

        # Perform data association between existing tracks and new detections
        scores = iou_matrix([t.detection for t in self._tracks], batch)
        matches, unmatched_trackers, unmatched_detections = greedy_match(
            scores, self._config.iou_threshold
        )

        # Process matched detections - update existing tracks
        for track_index, detection_index in matches:
            self._tracks[track_index].match(batch[detection_index], frame)

        # Process unmatched trackers - age relative to their last match
        for track_index in unmatched_trackers:
            self._tracks[track_index].mark_missed(frame)

        # Process new (unmatched) detections - create new tracks
        for detection_index in unmatched_detections:
            track = DetectedObject(self._next_id, batch[detection_index], frame)
            self._next_id += 1
            self._tracks.append(track)
            log.debug("track_created", track_id=track.idx, frame=frame)

        # Remove objects that exceeded the unmatched age threshold in one pass
        survivors = [t for t in self._tracks if t.age <= self._config.max_age]
        if len(survivors) != len(self._tracks):
            removed = sorted(
                t.idx for t in self._tracks if t.age > self._config.max_age
            )
            log.debug("tracks_removed", track_ids=removed, frame=frame)
        self._tracks = survivors

        log.debug(
            "frame_advanced",
            frame=frame,
            detections=len(batch),
            matched=len(matches),
            created=len(unmatched_detections),
            live=len(self._tracks),
        )

        return [self._emit(track) for track in self._tracks]

    def _emit(self, track: DetectedObject) -> TrackState:
        return TrackState(
            id=track.idx,
            bbox=track.detection,
            confirmed=track.hits >= self._config.min_hits,
            age=track.age,
            hits=track.hits,
        )
