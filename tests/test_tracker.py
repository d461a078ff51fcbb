"""Unit tests for SimpleTracker lifecycle and association."""
from __future__ import annotations

import random

import pytest

from iou_tracker.config import TrackerConfig
from iou_tracker.detected_object import Detection
from iou_tracker.tracker import SimpleTracker


def det(x1, y1, x2, y2, score=0.9, label="person") -> Detection:
    return Detection(x1, y1, x2, y2, score, label)


# ── Scenarios ─────────────────────────────────────────────────────────────────

def test_first_detection_creates_confirmed_track():
    tracker = SimpleTracker(iou_threshold=0.3, max_age=30, min_hits=1)
    out = tracker.update([det(0, 0, 10, 10, 0.9)])
    assert len(out) == 1
    assert out[0].id == 1
    assert out[0].confirmed is True
    assert out[0].age == 0
    assert out[0].hits == 1


def test_overlapping_detection_updates_same_track():
    tracker = SimpleTracker(iou_threshold=0.3, max_age=30, min_hits=1)
    tracker.update([det(0, 0, 10, 10, 0.9)])
    out = tracker.update([det(1, 1, 11, 11, 0.85)])
    assert len(out) == 1
    assert out[0].id == 1
    assert out[0].hits == 2
    assert out[0].age == 0
    assert out[0].bbox == det(1, 1, 11, 11, 0.85)


def test_track_survives_max_age_empty_frames_then_removed():
    tracker = SimpleTracker(iou_threshold=0.3, max_age=30, min_hits=1)
    tracker.update([det(0, 0, 10, 10)])
    tracker.update([det(1, 1, 11, 11)])

    for n in range(1, 31):
        out = tracker.update([])
        assert [t.id for t in out] == [1]
        assert out[0].age == n

    assert tracker.update([]) == []
    assert tracker.update([]) == []


def test_min_hits_gates_confirmation():
    tracker = SimpleTracker(min_hits=2)
    out = tracker.update([det(0, 0, 10, 10)])
    assert out[0].confirmed is False
    assert out[0].hits == 1

    out = tracker.update([det(1, 0, 11, 10)])
    assert out[0].id == 1
    assert out[0].confirmed is True
    assert out[0].hits == 2


def test_two_disjoint_detections_create_two_tracks():
    tracker = SimpleTracker()
    out = tracker.update([det(0, 0, 10, 10), det(50, 50, 60, 60)])
    assert len(out) == 2
    assert out[0].id != out[1].id
    assert all(t.confirmed for t in out)


# ── Edge cases ────────────────────────────────────────────────────────────────

def test_empty_frame_on_empty_tracker_advances_counter():
    tracker = SimpleTracker()
    assert tracker.update([]) == []
    assert tracker.frame_count == 1


def test_duplicate_detections_become_separate_tracks():
    tracker = SimpleTracker()
    tracker.update([det(0, 0, 10, 10)])
    out = tracker.update([det(0, 0, 10, 10), det(0, 0, 10, 10)])
    assert sorted(t.id for t in out) == [1, 2]
    assert {t.id: t.hits for t in out} == {1: 2, 2: 1}


def test_low_overlap_creates_new_track_and_ages_old():
    tracker = SimpleTracker(iou_threshold=0.5)
    tracker.update([det(0, 0, 10, 10)])
    out = tracker.update([det(6, 6, 16, 16)])
    by_id = {t.id: t for t in out}
    assert by_id[1].age == 1
    assert by_id[2].age == 0


def test_max_age_zero_removes_on_first_miss():
    tracker = SimpleTracker(max_age=0)
    tracker.update([det(0, 0, 10, 10)])
    assert tracker.update([]) == []


def test_age_resets_on_rematch():
    tracker = SimpleTracker()
    tracker.update([det(0, 0, 10, 10)])
    tracker.update([])
    tracker.update([])
    out = tracker.update([det(0, 0, 10, 10)])
    assert out[0].id == 1
    assert out[0].age == 0
    assert out[0].hits == 2


def test_degenerate_boxes_are_tolerated():
    tracker = SimpleTracker()
    out = tracker.update([det(5, 5, 5, 5), det(10, 0, 0, 10)])
    assert [t.id for t in out] == [1, 2]
    out = tracker.update([det(5, 5, 5, 5)])
    # Zero-area boxes never overlap anything, so a new track starts
    assert [t.id for t in out] == [1, 2, 3]


def test_accepts_mappings():
    tracker = SimpleTracker()
    out = tracker.update([{"x1": 0, "y1": 0, "x2": 10, "y2": 10, "score": 0.7, "label": "cat"}])
    assert out[0].bbox.label == "cat"
    assert out[0].bbox.score == 0.7
    assert out[0].to_dict()["bbox"]["x2"] == 10.0


def test_label_and_score_pass_through():
    payload = {"class_id": 3}
    tracker = SimpleTracker()
    out = tracker.update([det(0, 0, 10, 10, score=0.42, label=payload)])
    assert out[0].bbox.label is payload
    assert out[0].bbox.score == 0.42


def test_reset_keeps_identity_counter():
    tracker = SimpleTracker()
    tracker.update([det(0, 0, 10, 10)])
    tracker.reset()
    assert tracker.frame_count == 0
    assert tracker.tracks == ()
    out = tracker.update([det(0, 0, 10, 10)])
    assert out[0].id == 2


def test_from_config():
    tracker = SimpleTracker.from_config(TrackerConfig(iou_threshold=0.5, max_age=3, min_hits=2))
    assert tracker.config == TrackerConfig(iou_threshold=0.5, max_age=3, min_hits=2)


def test_tracks_snapshot_does_not_leak_state():
    tracker = SimpleTracker(min_hits=3, max_age=1)
    tracker.update([det(0, 0, 10, 10)])

    snapshot = tracker.tracks[0]
    snapshot.hits = 99
    snapshot.last_matched_frame = -100
    snapshot.match(det(50, 50, 60, 60), 1)

    out = tracker.update([])
    assert len(out) == 1
    assert out[0].hits == 1
    assert out[0].confirmed is False
    assert out[0].age == 1
    assert out[0].bbox == det(0, 0, 10, 10)
    assert tracker.tracks[0] is not tracker.tracks[0]


@pytest.mark.parametrize(
    "kwargs",
    [{"iou_threshold": -0.1}, {"iou_threshold": 1.5}, {"max_age": -1}, {"min_hits": 0}],
)
def test_invalid_configuration_fails_fast(kwargs):
    with pytest.raises(ValueError):
        SimpleTracker(**kwargs)


# ── Properties over random streams ────────────────────────────────────────────

def _random_batch(rng: random.Random) -> list[Detection]:
    batch = []
    for _ in range(rng.randint(0, 5)):
        x, y = rng.uniform(0, 50), rng.uniform(0, 50)
        w, h = rng.uniform(-2, 20), rng.uniform(-2, 20)
        batch.append(det(x, y, x + w, y + h))
    return batch


def test_invariants_hold_over_random_stream():
    rng = random.Random(1234)
    tracker = SimpleTracker(iou_threshold=0.3, max_age=3, min_hits=2)
    seen_ids: list[int] = []
    last_seen: dict[int, int] = {}

    for k in range(1, 201):
        out = tracker.update(_random_batch(rng))
        assert tracker.frame_count == k

        for track in tracker.tracks:
            if track.idx not in seen_ids:
                seen_ids.append(track.idx)
            assert track.age == k - track.last_matched_frame
            assert track.age <= 3

        for state in out:
            internal = next(t for t in tracker.tracks if t.idx == state.id)
            assert state.confirmed == (internal.hits >= 2)
            assert state.age == internal.age
            if state.age == 0:
                last_seen[state.id] = k

        # ids of tracks that aged out must never come back
        for track_id, frame in last_seen.items():
            if k - frame > 3:
                assert track_id not in {s.id for s in out}

    assert seen_ids == sorted(seen_ids)
    assert len(seen_ids) == len(set(seen_ids))
