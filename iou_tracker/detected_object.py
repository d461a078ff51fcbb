from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass


@dataclass(frozen=True)
class Detection:
    """
    One bounding box produced by the upstream detector for a single frame.

    The score and label are opaque to the tracker and are passed through
    unmodified to the emitted tracks.
    """

    x1: float
    y1: float
    x2: float
    y2: float
    score: float | None = None
    label: object = None

    @classmethod
    def from_mapping(cls, data: Mapping) -> "Detection":
        """
        Build a detection from the ``{x1, y1, x2, y2, score, label}`` shape.

        Args:
            data (Mapping): Box corners plus optional score and label.

        Returns:
            Detection: A detection holding copies of the mapping's fields.
        """
        return cls(
            x1=float(data["x1"]),
            y1=float(data["y1"]),
            x2=float(data["x2"]),
            y2=float(data["y2"]),
            score=data.get("score"),
            label=data.get("label"),
        )

    def as_box(self) -> tuple[float, float, float, float]:
        return (self.x1, self.y1, self.x2, self.y2)

    def to_dict(self) -> dict:
        return {
            "x1": self.x1,
            "y1": self.y1,
            "x2": self.x2,
            "y2": self.y2,
            "score": self.score,
            "label": self.label,
        }


class DetectedObject:
    """
    Represents a tracked object for tracking purposes.

    This class encapsulates the state of a tracked object including its unique
    identifier, the most recently matched detection, and tracking statistics to
    maintain continuity across video frames.
    """

    def __init__(
        self,
        idx: int,
        detection: Detection,
        frame: int,
        hits: int = 1,
        age: int = 0,
    ) -> None:
        """
        Initialize a tracked object with tracking information.

        Args:
            idx (int): Unique identifier for the tracked object.
            detection (Detection): Detection the track was created from.
            frame (int): Frame counter value at creation.
            hits (int): Number of frames this object has been matched (default: 1).
            age (int): Number of consecutive frames this object has been unmatched (default: 0).
        """
        self.idx = idx  # Unique object identifier
        self.detection = detection  # Latest matched box, score and label
        self.hits = hits  # Matched frames, including the creation frame
        self.age = age  # Consecutive unmatched frames
        self.last_matched_frame = frame

    def __repr__(self) -> str:
        return (
            f"DetectedObject(idx={self.idx}, hits={self.hits}, age={self.age}, "
            f"box={self.detection.as_box()})"
        )

    def match(self, detection: Detection, frame: int) -> None:
        """Replace the box with ``detection`` and register a hit at ``frame``."""
        self.detection = detection
        self.hits += 1
        self.last_matched_frame = frame
        self.age = 0

    def mark_missed(self, frame: int) -> None:
        self.age = frame - self.last_matched_frame


@dataclass(frozen=True)
class TrackState:
    """A surviving track as emitted by the tracker after one frame."""

    id: int
    bbox: Detection
    confirmed: bool
    age: int
    hits: int

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "bbox": self.bbox.to_dict(),
            "confirmed": self.confirmed,
            "age": self.age,
            "hits": self.hits,
        }
