"""
Heuristic hand tracker based on skin-color segmentation.

Used when MediaPipe is not available. It finds the largest skin-colored
blobs and synthesizes a 21-point landmark layout for each one (wrist,
finger bases, joints and tips), so the ghost renderer can draw a rough
silhouette. Handedness cannot be inferred and is reported as "Unknown".
"""

from __future__ import annotations

import logging
import math
from typing import List, Optional, Tuple

import cv2
import numpy as np

from .types import HandLandmarks, TrackingResult

logger = logging.getLogger(__name__)

# Fractions along the wrist -> tip ray for the 4 points of each finger chain.
_THUMB_STEPS = (0.3, 0.55, 0.78, 1.0)
_FINGER_STEPS = (0.45, 0.65, 0.83, 1.0)


class SkinColorHandTracker:
    """
    Finds hands as skin-colored blobs (YCrCb and HSV thresholds combined).

    Input frames are expected as **BGR** images.
    """

    def __init__(self, max_num_hands: int = 2, min_area_fraction: float = 0.005) -> None:
        self.max_num_hands = max_num_hands
        self.min_area_fraction = min_area_fraction

        self.hsv_lower = np.array([0, 20, 70], dtype=np.uint8)
        self.hsv_upper = np.array([20, 255, 255], dtype=np.uint8)
        self.ycrcb_lower = np.array([0, 133, 77], dtype=np.uint8)
        self.ycrcb_upper = np.array([255, 173, 127], dtype=np.uint8)

        self._kernel = cv2.getStructuringElement(cv2.MORPH_ELLIPSE, (5, 5))
        logger.info("Using skin-color fallback tracker")

    def close(self) -> None:
        pass

    def __enter__(self) -> "SkinColorHandTracker":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def skin_mask(self, frame_bgr: np.ndarray) -> np.ndarray:
        hsv = cv2.cvtColor(frame_bgr, cv2.COLOR_BGR2HSV)
        ycrcb = cv2.cvtColor(frame_bgr, cv2.COLOR_BGR2YCrCb)
        mask = cv2.bitwise_or(
            cv2.inRange(hsv, self.hsv_lower, self.hsv_upper),
            cv2.inRange(ycrcb, self.ycrcb_lower, self.ycrcb_upper),
        )
        mask = cv2.morphologyEx(mask, cv2.MORPH_OPEN, self._kernel)
        mask = cv2.morphologyEx(mask, cv2.MORPH_CLOSE, self._kernel)
        return mask

    def track(self, frame_bgr) -> TrackingResult:
        if frame_bgr is None or frame_bgr.size == 0:
            return TrackingResult.empty()

        h, w = frame_bgr.shape[:2]
        contours, _ = cv2.findContours(self.skin_mask(frame_bgr), cv2.RETR_EXTERNAL, cv2.CHAIN_APPROX_SIMPLE)

        min_area = self.min_area_fraction * w * h
        blobs = [c for c in contours if cv2.contourArea(c) >= min_area]
        blobs.sort(key=cv2.contourArea, reverse=True)

        hands = []
        for contour in blobs[: self.max_num_hands]:
            points = synthesize_landmarks(contour)
            if points is None:
                continue
            hands.append(HandLandmarks.from_label(None, [(x / w, y / h) for x, y in points]))
        return TrackingResult(hands=tuple(hands))


def _fingertips(contour: np.ndarray, centroid: Tuple[float, float], min_sep: float) -> List[Tuple[float, float]]:
    """Hull points above the centroid, farthest first, at least `min_sep` apart (up to 5)."""
    cx, cy = centroid
    hull = cv2.convexHull(contour).reshape(-1, 2)
    candidates = [(float(x), float(y)) for x, y in hull if y < cy]
    candidates.sort(key=lambda p: math.hypot(p[0] - cx, p[1] - cy), reverse=True)

    tips: List[Tuple[float, float]] = []
    for p in candidates:
        if all(math.hypot(p[0] - q[0], p[1] - q[1]) >= min_sep for q in tips):
            tips.append(p)
        if len(tips) == 5:
            break
    return tips


def synthesize_landmarks(contour: np.ndarray) -> Optional[List[Tuple[float, float]]]:
    """21 pixel points in the usual wrist/thumb/index/middle/ring/pinky order."""
    m = cv2.moments(contour)
    if m["m00"] == 0:
        return None
    cx, cy = m["m10"] / m["m00"], m["m01"] / m["m00"]
    x, y, bw, bh = cv2.boundingRect(contour)

    wrist = (cx, min(y + bh - 1.0, cy + 0.45 * bh))

    # Five slots spread along the top edge; detected tips replace the nearest slot.
    slots = [(x + bw * f, float(y)) for f in (0.1, 0.3, 0.5, 0.7, 0.9)]
    for tip in _fingertips(contour, (cx, cy), max(8.0, 0.12 * bw)):
        nearest = min(range(5), key=lambda i: abs(slots[i][0] - tip[0]))
        slots[nearest] = tip

    points: List[Tuple[float, float]] = [wrist]
    for finger, tip in enumerate(slots):
        steps = _THUMB_STEPS if finger == 0 else _FINGER_STEPS
        for t in steps:
            points.append((wrist[0] + (tip[0] - wrist[0]) * t, wrist[1] + (tip[1] - wrist[1]) * t))
    return points
