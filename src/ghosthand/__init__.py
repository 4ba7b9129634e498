from .config import DuplicatePolicy, GhostRenderSettings
from .detector import HandTracker, MediaPipeHandTracker, create_hand_tracker
from .fallback import SkinColorHandTracker
from .renderer import FrameRenderer
from .types import HandLandmarks, Handedness, NormalizedPoint, TrackingResult

__all__ = [
    "DuplicatePolicy",
    "FrameRenderer",
    "GhostRenderSettings",
    "HandLandmarks",
    "HandTracker",
    "Handedness",
    "MediaPipeHandTracker",
    "NormalizedPoint",
    "SkinColorHandTracker",
    "TrackingResult",
    "create_hand_tracker",
]
