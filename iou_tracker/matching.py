"""Greedy association of tracks and detections by descending IoU.

This is a local heuristic, not an optimal assignment: a high-IoU pair claimed
early can block a combination with a larger total overlap. Ties keep the
row-major order of the IoU matrix (track index, then detection index).
"""
import numpy as np


def greedy_match(
    iou_matrix: np.ndarray, iou_thresh: float
) -> tuple[list[tuple[int, int]], list[int], list[int]]:
    """
    Associate tracks (rows) with detections (columns) greedily.

    Every (track, detection) pair is visited once in descending IoU order. A
    pair is accepted when its IoU reaches ``iou_thresh`` and neither side has
    already been consumed.

    Args:
        iou_matrix (np.ndarray): IoU scores of shape (tracks, detections).
        iou_thresh (float): Minimum IoU for a pair to be accepted.

    Returns:
        tuple: (matches, unmatched_trackers, unmatched_detections)
            - matches: List of (track_idx, detection_idx) in acceptance order
            - unmatched_trackers: Sorted indices of tracks without a match
            - unmatched_detections: Sorted indices of detections without a match
    """
    n_tracks, n_detections = iou_matrix.shape

    # Consumed markers, indexed positionally
    track_used = np.zeros(n_tracks, dtype=bool)
    detection_used = np.zeros(n_detections, dtype=bool)
    matches: list[tuple[int, int]] = []

    if n_tracks and n_detections:
        scores = iou_matrix.ravel()
        order = np.argsort(-scores, kind="stable")

        for flat_index in order:
            if not scores[flat_index] >= iou_thresh:
                # Sorted descending with NaN last, nothing below can pass
                break
            t, d = divmod(int(flat_index), n_detections)
            if track_used[t] or detection_used[d]:
                continue
            track_used[t] = True
            detection_used[d] = True
            matches.append((t, d))

    unmatched_trackers = np.flatnonzero(~track_used).tolist()
    unmatched_detections = np.flatnonzero(~detection_used).tolist()

    return matches, unmatched_trackers, unmatched_detections
