from __future__ import annotations

import logging
import time
from typing import Callable, List, Optional, Set, Tuple

import numpy as np

from .compositor import Compositor
from .config import STALE_AFTER_S, DuplicatePolicy, GhostRenderSettings
from .mask import HandMaskBuilder, union_masks
from .smoothing import HandStateStore, LandmarkSmoother
from .soft_mask import SoftMaskGenerator
from .types import Handedness, Point2, TrackingResult
from .utils import to_pixel_points

logger = logging.getLogger(__name__)


class FrameRenderer:
    """
    Draws the ghost-hand overlay onto video frames.

    Input frames are expected as **BGR** `uint8` images (OpenCV default).
    One instance owns its own per-hand smoothing state; call `render` from a
    single thread, once per frame.
    """

    def __init__(
        self,
        settings: Optional[GhostRenderSettings] = None,
        *,
        stale_after_s: float = STALE_AFTER_S,
        duplicate_policy: DuplicatePolicy = DuplicatePolicy.OVERWRITE,
        clock: Callable[[], float] = time.monotonic,
        compositor: Optional[Compositor] = None,
    ) -> None:
        self.settings = settings or GhostRenderSettings()
        self.stale_after_s = stale_after_s
        self.duplicate_policy = duplicate_policy
        self._clock = clock

        self.state = HandStateStore()
        self._smoother = LandmarkSmoother(self.state)
        self._mask_builder = HandMaskBuilder()
        self._soft_masks = SoftMaskGenerator()
        self._compositor = compositor or Compositor()

    def reset(self) -> None:
        self.state.clear()

    def render(
        self,
        frame_bgr: np.ndarray,
        tracking: TrackingResult,
        settings: Optional[GhostRenderSettings] = None,
        now_s: Optional[float] = None,
    ) -> np.ndarray:
        """Return a new frame with the overlay; `frame_bgr` is never modified."""
        if frame_bgr.size == 0:
            return frame_bgr.copy()
        if frame_bgr.ndim != 3 or frame_bgr.shape[2] != 3 or frame_bgr.dtype != np.uint8:
            raise ValueError(
                f"Expected an HxWx3 uint8 BGR frame, got shape={frame_bgr.shape} dtype={frame_bgr.dtype}"
            )

        s = (settings or self.settings).sanitized()
        out = frame_bgr.copy()
        if not s.enable_ghost_style:
            return out

        now = self._clock() if now_s is None else now_s
        h, w = out.shape[:2]

        masks: List[np.ndarray] = []
        drawn: List[Tuple[str, List[Point2]]] = []
        seen: Set[Handedness] = set()

        for hand in tracking.hands:
            key = hand.handedness
            alpha = s.smoothing_alpha
            if key in seen:
                if self.duplicate_policy is DuplicatePolicy.REJECT:
                    logger.debug("Dropping duplicate %s hand in frame", key.value)
                    continue
                # Later duplicate replaces the state outright instead of averaging into it.
                logger.debug("Duplicate %s hand in frame overwrites smoothing state", key.value)
                alpha = 1.0
            elif key not in self.state:
                logger.debug("Tracking new %s hand (%d points)", key.value, len(hand.points))
            seen.add(key)

            smoothed = self._smoother.smooth(key, hand.points, alpha, now)
            points_px = to_pixel_points(smoothed, w, h)
            masks.append(self._mask_builder.build(points_px, w, h))
            drawn.append((hand.display_label, points_px))

        body_mask = union_masks(masks, shape=(h, w))
        if np.any(body_mask):
            soft = self._soft_masks.generate(body_mask, s.blur_sigma)
            self._compositor.composite(out, soft, s)

        for label, points_px in drawn:
            self._compositor.draw_debug(out, points_px, label, s)

        self.state.evict_stale(now, self.stale_after_s)
        return out
