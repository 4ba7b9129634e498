from __future__ import annotations

from dataclasses import dataclass, fields, replace as dc_replace
from enum import Enum
from typing import Any, Dict, Mapping, Tuple

from .errors import ConfigurationError
from .utils import clamp_float


BGR = Tuple[int, int, int]

# --- Tuning knobs ---
# Per-hand smoothing state is dropped once it has not been refreshed for this long.
STALE_AFTER_S = 2.0

BODY_TINT_BGR: BGR = (132, 112, 96)  # dark gray-blue
HALO_TINT_BGR: BGR = (255, 238, 214)  # cool light blue
LANDMARK_COLOR_BGR: BGR = (255, 255, 255)

# Gaussian kernel radius = ceil(sigma * BLUR_RADIUS_FACTOR)
BLUR_RADIUS_FACTOR = 2.75
HALO_SIGMA_FACTOR = 2.0
HALO_DILATE_RADIUS_PX = 8
CLEANUP_RADIUS_PX = 2
# Soft-mask values at or below this (of 255, ~5%) are zeroed.
SOFT_MASK_THRESHOLD = 12

# Finger stroke thickness at the base, as a fraction of min(width, height).
STROKE_BASE_FRACTION = 0.03
STROKE_TAPER_PER_SEGMENT = 0.2
MIN_STROKE_PX = 2

MIN_BLUR_SIGMA = 0.5
MIN_SMOOTHING_ALPHA = 0.01

LABEL_OFFSET_PX = (12, -12)


class DuplicatePolicy(Enum):
    """What to do when two hands share a handedness tag in the same frame."""

    OVERWRITE = "overwrite"  # draw both; the later one owns the smoothing state
    REJECT = "reject"  # drop later duplicates from the frame


# camelCase names accepted by from_mapping()
_CAMEL_ALIASES: Dict[str, str] = {
    "enableGhostStyle": "enable_ghost_style",
    "showLandmarks": "show_landmarks",
    "showHandednessLabel": "show_handedness_label",
    "bodyOpacity": "body_opacity",
    "haloOpacity": "halo_opacity",
    "blurSigma": "blur_sigma",
    "landmarkSize": "landmark_size",
    "smoothingAlpha": "smoothing_alpha",
}


@dataclass(frozen=True)
class GhostRenderSettings:
    """Immutable snapshot of the ghost overlay options."""

    enable_ghost_style: bool = True
    show_landmarks: bool = False
    show_handedness_label: bool = False
    body_opacity: float = 0.33
    halo_opacity: float = 0.14
    blur_sigma: float = 3.2
    landmark_size: int = 2
    smoothing_alpha: float = 0.45

    def sanitized(self) -> "GhostRenderSettings":
        """Copy clamped into the range the pipeline can render without failing."""
        return GhostRenderSettings(
            enable_ghost_style=bool(self.enable_ghost_style),
            show_landmarks=bool(self.show_landmarks),
            show_handedness_label=bool(self.show_handedness_label),
            body_opacity=clamp_float(self.body_opacity, 0.0, 1.0),
            halo_opacity=clamp_float(self.halo_opacity, 0.0, 1.0),
            blur_sigma=max(MIN_BLUR_SIGMA, float(self.blur_sigma)),
            landmark_size=max(0, int(self.landmark_size)),
            smoothing_alpha=clamp_float(self.smoothing_alpha, MIN_SMOOTHING_ALPHA, 1.0),
        )

    def replace(self, **changes: Any) -> "GhostRenderSettings":
        return dc_replace(self, **changes)

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, Any]) -> "GhostRenderSettings":
        """Build settings from a dict using snake_case or camelCase option names."""
        known = {f.name for f in fields(cls)}
        kwargs: Dict[str, Any] = {}
        for key, value in mapping.items():
            name = _CAMEL_ALIASES.get(key, key)
            if name not in known:
                raise ConfigurationError(
                    f"Unknown render setting '{key}'. Available: {sorted(known)}",
                    context={"config_key": key},
                )
            kwargs[name] = value
        return cls(**kwargs)
