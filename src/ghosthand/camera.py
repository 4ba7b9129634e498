from __future__ import annotations

import logging
import platform
from typing import List, Optional

import cv2
import numpy as np

from .errors import CameraError

logger = logging.getLogger(__name__)

_MACOS_HINT = "On macOS: System Settings -> Privacy & Security -> Camera -> allow your terminal."


def _open_capture(index: int) -> cv2.VideoCapture:
    if platform.system() == "Darwin":
        return cv2.VideoCapture(index, cv2.CAP_AVFOUNDATION)
    return cv2.VideoCapture(index)


def discover_camera_indexes(max_to_probe: int = 8) -> List[int]:
    indexes = []
    for i in range(max_to_probe):
        probe = _open_capture(i)
        if probe.isOpened():
            indexes.append(i)
        probe.release()
    return indexes


class VideoSource:
    """Thin wrapper over `cv2.VideoCapture` yielding BGR frames."""

    def __init__(self) -> None:
        self._cap: Optional[cv2.VideoCapture] = None
        self.index: Optional[int] = None

    @property
    def is_open(self) -> bool:
        return self._cap is not None and self._cap.isOpened()

    def open(self, index: int, width: int = 1280, height: int = 720, fps: int = 60) -> None:
        self.close()
        cap = _open_capture(index)
        if not cap.isOpened():
            cap.release()
            raise CameraError(index, "open", hint=_MACOS_HINT if platform.system() == "Darwin" else "")

        # Best effort; drivers may pick the nearest supported mode.
        cap.set(cv2.CAP_PROP_FRAME_WIDTH, width)
        cap.set(cv2.CAP_PROP_FRAME_HEIGHT, height)
        cap.set(cv2.CAP_PROP_FPS, fps)
        self._cap = cap
        self.index = index
        logger.info(
            "Opened camera %d at %dx%d (requested %dx%d @ %d fps)",
            index,
            int(cap.get(cv2.CAP_PROP_FRAME_WIDTH)),
            int(cap.get(cv2.CAP_PROP_FRAME_HEIGHT)),
            width,
            height,
            fps,
        )

    def read(self) -> Optional[np.ndarray]:
        if not self.is_open:
            return None
        ok, frame = self._cap.read()
        if not ok or frame is None or frame.size == 0:
            return None
        return frame

    def close(self) -> None:
        if self._cap is not None:
            self._cap.release()
            self._cap = None
            self.index = None

    def __enter__(self) -> "VideoSource":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
