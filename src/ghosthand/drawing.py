from __future__ import annotations

from typing import Sequence, Tuple

import cv2

from .config import LABEL_OFFSET_PX, LANDMARK_COLOR_BGR
from .types import Point2


def draw_point(frame, pt: Point2, color=LANDMARK_COLOR_BGR, radius=2):
    cv2.circle(frame, pt, radius, color, -1, lineType=cv2.LINE_AA)
    return frame


def draw_text(frame, text: str, org: Tuple[int, int], color=(255, 255, 255), scale=0.6, thickness=2):
    cv2.putText(frame, text, org, cv2.FONT_HERSHEY_SIMPLEX, scale, (0, 0, 0), thickness + 2, cv2.LINE_AA)
    cv2.putText(frame, text, org, cv2.FONT_HERSHEY_SIMPLEX, scale, color, thickness, cv2.LINE_AA)
    return frame


def draw_landmark_markers(frame, points_px: Sequence[Point2], radius: int, color=LANDMARK_COLOR_BGR):
    if radius <= 0:
        return frame
    for pt in points_px:
        draw_point(frame, pt, color=color, radius=radius)
    return frame


def draw_handedness_label(frame, text: str, points_px: Sequence[Point2], color=LANDMARK_COLOR_BGR):
    """Label anchored up-right of the first landmark (the wrist)."""
    if not points_px:
        return frame
    x, y = points_px[0]
    dx, dy = LABEL_OFFSET_PX
    h, w = frame.shape[:2]
    org = (min(max(0, x + dx), w - 1), min(max(12, y + dy), h - 1))
    return draw_text(frame, text, org, color=color)
