from __future__ import annotations

from typing import List

import numpy as np

from .types import Point2


def clamp_int(v: int, lo: int, hi: int) -> int:
    return max(lo, min(hi, v))


def clamp_float(v: float, lo: float, hi: float) -> float:
    return max(lo, min(hi, float(v)))


def to_pixel_points(points_norm: np.ndarray, width: int, height: int) -> List[Point2]:
    """Scale an (N, 2) array of normalized points to pixels, clamped to the frame."""
    pts: List[Point2] = []
    for x, y in points_norm:
        x_px = clamp_int(int(round(float(x) * width)), 0, width - 1)
        y_px = clamp_int(int(round(float(y) * height)), 0, height - 1)
        pts.append((x_px, y_px))
    return pts
