from collections.abc import Sequence

import numpy as np

from iou_tracker.detected_object import Detection


def id_to_color(idx: int):
    blue = idx * 5 % 256
    green = idx * 12 % 256
    red = idx * 23 % 256
    return (red, green, blue)


def _corners(box) -> tuple[float, float, float, float]:
    if isinstance(box, Detection):
        return box.as_box()
    x1, y1, x2, y2 = box
    return (x1, y1, x2, y2)


def box_area(box) -> float:
    """Area of an [x1, y1, x2, y2] box, with negative width or height clamped to 0."""
    x1, y1, x2, y2 = _corners(box)
    return max(0.0, x2 - x1) * max(0.0, y2 - y1)


def box_iou(prev_box, current_box) -> float:
    """
    Calculate the Intersection over Union (IoU) between two bounding boxes.

    Degenerate or malformed boxes (x2 < x1 or y2 < y1) are treated as having
    zero area. When the union is empty or undefined (infinite coordinates)
    the IoU is 0.0.

    Args:
        prev_box (Detection or sequence): [x1, y1, x2, y2] coordinates of the previous bounding box.
        current_box (Detection or sequence): [x1, y1, x2, y2] coordinates of the current bounding box.

    Returns:
        float: IoU value between the two boxes (0.0 to 1.0).
    """
    ax1, ay1, ax2, ay2 = _corners(prev_box)
    bx1, by1, bx2, by2 = _corners(current_box)

    # Determine the coordinates of the intersection rectangle
    xA = max(ax1, bx1)  # Intersection top-left x
    yA = max(ay1, by1)  # Intersection top-left y
    xB = min(ax2, bx2)  # Intersection bottom-right x
    yB = min(ay2, by2)  # Intersection bottom-right y

    # Compute the area of intersection rectangle (W * H)
    intercept_area = max(0.0, xB - xA) * max(0.0, yB - yA)

    # Compute the union area
    union_area = box_area(prev_box) + box_area(current_box) - intercept_area
    if not union_area > 0.0:
        return 0.0

    return float(intercept_area / union_area)


def iou_matrix(
    old_boxes: Sequence, new_boxes: Sequence
) -> np.ndarray:
    """
    Build the (old x new) IoU matrix between tracked boxes and new detections.

    Args:
        old_boxes (Sequence): Boxes of the current tracks (rows).
        new_boxes (Sequence): Boxes of the new detections (columns).

    Returns:
        np.ndarray: float64 array of shape (len(old_boxes), len(new_boxes)).
    """
    matrix = np.zeros((len(old_boxes), len(new_boxes)), dtype=np.float64)

    for i, old_box in enumerate(old_boxes):
        for j, new_box in enumerate(new_boxes):
            matrix[i, j] = box_iou(old_box, new_box)

    return matrix
