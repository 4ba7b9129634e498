from __future__ import annotations

from typing import Iterable, Optional, Sequence, Tuple

import cv2
import numpy as np

from .config import CLEANUP_RADIUS_PX, MIN_STROKE_PX, STROKE_BASE_FRACTION, STROKE_TAPER_PER_SEGMENT
from .types import Point2


# Wrist + finger base joints, in contour order.
PALM_INDICES: Tuple[int, ...] = (0, 1, 2, 5, 9, 13, 17)

FINGER_CHAINS: Tuple[Tuple[int, int, int, int], ...] = (
    (1, 2, 3, 4),  # thumb
    (5, 6, 7, 8),  # index
    (9, 10, 11, 12),  # middle
    (13, 14, 15, 16),  # ring
    (17, 18, 19, 20),  # pinky
)


def _ellipse_kernel(radius: int) -> np.ndarray:
    side = 2 * radius + 1
    return cv2.getStructuringElement(cv2.MORPH_ELLIPSE, (side, side))


def stroke_thickness(width: int, height: int, segment: int) -> int:
    base = min(width, height) * STROKE_BASE_FRACTION
    return max(MIN_STROKE_PX, int(round(base * (1.0 - STROKE_TAPER_PER_SEGMENT * segment))))


class HandMaskBuilder:
    """Rasterizes one hand's pixel landmarks into a binary (0/255) silhouette."""

    def __init__(self, cleanup_radius_px: int = CLEANUP_RADIUS_PX) -> None:
        self._kernel = _ellipse_kernel(cleanup_radius_px)

    def build(self, points_px: Sequence[Point2], width: int, height: int) -> np.ndarray:
        mask = np.zeros((height, width), dtype=np.uint8)
        if not points_px:
            return mask

        self._fill_palm(mask, points_px)
        self._draw_fingers(mask, points_px, width, height)

        mask = cv2.morphologyEx(mask, cv2.MORPH_CLOSE, self._kernel)
        mask = cv2.morphologyEx(mask, cv2.MORPH_OPEN, self._kernel)
        # Anti-aliased edges leave partial values; keep the mask binary.
        _, mask = cv2.threshold(mask, 127, 255, cv2.THRESH_BINARY)
        return mask

    @staticmethod
    def _fill_palm(mask: np.ndarray, points_px: Sequence[Point2]) -> None:
        palm = [points_px[i] for i in PALM_INDICES if i < len(points_px)]
        if len(palm) < 3:
            return
        hull = cv2.convexHull(np.array(palm, dtype=np.int32))
        cv2.fillConvexPoly(mask, hull, 255, lineType=cv2.LINE_AA)

    @staticmethod
    def _draw_fingers(mask: np.ndarray, points_px: Sequence[Point2], width: int, height: int) -> None:
        n = len(points_px)
        for chain in FINGER_CHAINS:
            for segment, (a, b) in enumerate(zip(chain[:-1], chain[1:])):
                if a >= n or b >= n:
                    continue
                thickness = stroke_thickness(width, height, segment)
                p0, p1 = points_px[a], points_px[b]
                cv2.line(mask, p0, p1, 255, thickness, cv2.LINE_AA)
                cv2.circle(mask, p1, max(1, thickness // 2), 255, -1, lineType=cv2.LINE_AA)


def union_masks(masks: Iterable[np.ndarray], shape: Optional[Tuple[int, int]] = None) -> np.ndarray:
    """Per-pixel maximum of binary masks; an empty input yields an all-zero mask of `shape`."""
    out: Optional[np.ndarray] = None
    for m in masks:
        out = m.copy() if out is None else cv2.max(out, m)
    if out is None:
        if shape is None:
            raise ValueError("shape is required when no masks are given")
        out = np.zeros(shape, dtype=np.uint8)
    return out
