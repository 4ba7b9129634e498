from __future__ import annotations

import math
from dataclasses import dataclass

import cv2
import numpy as np

from .config import (
    BLUR_RADIUS_FACTOR,
    HALO_DILATE_RADIUS_PX,
    HALO_SIGMA_FACTOR,
    MIN_BLUR_SIGMA,
    SOFT_MASK_THRESHOLD,
)


@dataclass(frozen=True)
class SoftMasks:
    body: np.ndarray  # uint8, 0..255
    halo: np.ndarray  # uint8, 0..255


def kernel_side(sigma: float) -> int:
    radius = int(math.ceil(sigma * BLUR_RADIUS_FACTOR))
    return 2 * radius + 1


def soft_blur(mask: np.ndarray, sigma: float, threshold: int = SOFT_MASK_THRESHOLD) -> np.ndarray:
    """Gaussian blur followed by zeroing of the faint tail (values <= threshold)."""
    side = kernel_side(sigma)
    blurred = cv2.GaussianBlur(mask, (side, side), sigma)
    _, blurred = cv2.threshold(blurred, threshold, 255, cv2.THRESH_TOZERO)
    return blurred


class SoftMaskGenerator:
    """Derives the body and halo alpha masks from the unioned binary hand mask."""

    def __init__(
        self,
        halo_dilate_radius_px: int = HALO_DILATE_RADIUS_PX,
        halo_sigma_factor: float = HALO_SIGMA_FACTOR,
    ) -> None:
        side = 2 * halo_dilate_radius_px + 1
        self._halo_kernel = cv2.getStructuringElement(cv2.MORPH_ELLIPSE, (side, side))
        self._halo_sigma_factor = halo_sigma_factor

    def generate(self, body_mask: np.ndarray, blur_sigma: float) -> SoftMasks:
        sigma = max(MIN_BLUR_SIGMA, float(blur_sigma))

        body = soft_blur(body_mask, sigma)

        dilated = cv2.dilate(body_mask, self._halo_kernel)
        ring = cv2.subtract(dilated, body_mask)
        halo = soft_blur(ring, sigma * self._halo_sigma_factor)

        return SoftMasks(body=body, halo=halo)
