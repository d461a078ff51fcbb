"""Append-only JSON Lines sink for confirmed tracks."""
from __future__ import annotations

import json
import math
import time
from collections.abc import Iterable
from pathlib import Path

import numpy as np

from iou_tracker.detected_object import TrackState
from iou_tracker.logging import get_logger

log = get_logger(__name__)


class JsonlTrackSink:
    """Writes one JSON record per confirmed track, keyed by a millisecond timestamp.

    Tentative tracks are never persisted.
    """

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)
        self._file = None
        self.records_written = 0

    def __enter__(self) -> "JsonlTrackSink":
        self.open()
        return self

    def __exit__(self, *exc) -> None:
        self.close()

    def open(self) -> None:
        if self._file is None:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self._file = self.path.open("a", encoding="utf-8")
            log.info("sink_opened", path=str(self.path))

    def close(self) -> None:
        if self._file is not None:
            self._file.close()
            self._file = None
            log.info("sink_closed", path=str(self.path), records=self.records_written)

    def write(self, tracks: Iterable[TrackState], timestamp_ms: int | None = None) -> int:
        """
        Persist the confirmed tracks of one frame.

        Args:
            tracks (Iterable[TrackState]): Output of SimpleTracker.update.
            timestamp_ms (int | None): Record time; defaults to the current wall clock.

        Returns:
            int: Number of records written.
        """
        self.open()
        now = int(time.time() * 1000) if timestamp_ms is None else timestamp_ms

        written = 0
        for track in tracks:
            if not track.confirmed:
                continue
            bbox = {k: _finite_or_none(v) for k, v in track.bbox.to_dict().items()}
            record = {
                "id": track.id,
                "label": bbox["label"],
                "score": bbox["score"],
                "bbox": bbox,
                "time": now,
            }
            self._file.write(json.dumps(record, default=str, allow_nan=False) + "\n")
            written += 1

        self._file.flush()
        self.records_written += written
        return written


def _finite_or_none(value):
    # NaN and infinities have no JSON encoding
    if isinstance(value, (float, np.floating)) and not math.isfinite(value):
        return None
    return value
