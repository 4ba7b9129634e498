from __future__ import annotations

from typing import Sequence, Tuple

import cv2
import numpy as np

from .config import BODY_TINT_BGR, HALO_TINT_BGR, GhostRenderSettings
from .drawing import draw_handedness_label, draw_landmark_markers
from .soft_mask import SoftMasks
from .types import Point2


def blend_tint(frame: np.ndarray, soft_mask: np.ndarray, tint_bgr: Tuple[int, int, int], opacity: float) -> np.ndarray:
    """Blend a flat tint into `frame` in place, weighted by `soft_mask / 255 * opacity`.

    out = original * (1 - alpha) + tint * alpha, per channel in [0, 1].
    Only the bounding box of the non-zero mask region is touched.
    """
    if opacity <= 0.0:
        return frame
    x, y, w, h = cv2.boundingRect(soft_mask)
    if w == 0 or h == 0:
        return frame

    roi = frame[y : y + h, x : x + w]
    alpha = soft_mask[y : y + h, x : x + w].astype(np.float32) * (opacity / 255.0)
    alpha = alpha[..., None]

    base = roi.astype(np.float32) / 255.0
    tint = np.array(tint_bgr, dtype=np.float32) / 255.0
    out = base * (1.0 - alpha) + tint * alpha

    roi[...] = np.rint(np.clip(out, 0.0, 1.0) * 255.0).astype(np.uint8)
    return frame


class Compositor:
    """Paints the halo then the body tint, then optional debug markers."""

    def __init__(
        self,
        body_tint_bgr: Tuple[int, int, int] = BODY_TINT_BGR,
        halo_tint_bgr: Tuple[int, int, int] = HALO_TINT_BGR,
    ) -> None:
        self.body_tint_bgr = body_tint_bgr
        self.halo_tint_bgr = halo_tint_bgr

    def composite(self, frame: np.ndarray, masks: SoftMasks, settings: GhostRenderSettings) -> np.ndarray:
        blend_tint(frame, masks.halo, self.halo_tint_bgr, settings.halo_opacity)
        blend_tint(frame, masks.body, self.body_tint_bgr, settings.body_opacity)
        return frame

    def draw_debug(
        self,
        frame: np.ndarray,
        points_px: Sequence[Point2],
        label: str,
        settings: GhostRenderSettings,
    ) -> np.ndarray:
        if settings.show_landmarks:
            draw_landmark_markers(frame, points_px, settings.landmark_size)
        if settings.show_handedness_label:
            draw_handedness_label(frame, label, points_px)
        return frame
