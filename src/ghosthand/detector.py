from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional, Protocol

import cv2

from .errors import ModelAssetError, TrackerUnavailableError
from .model_assets import ensure_hand_landmarker_task
from .types import HandLandmarks, TrackingResult

logger = logging.getLogger(__name__)


class HandTracker(Protocol):
    """Anything that turns a BGR frame into a TrackingResult."""

    def track(self, frame_bgr) -> TrackingResult:
        ...

    def close(self) -> None:
        ...


@dataclass(frozen=True)
class _SolutionsBackend:
    mp: object
    hands: object


@dataclass(frozen=True)
class _TasksBackend:
    mp: object
    landmarker: object


def _try_create_solutions_backend(
    static_image_mode: bool,
    max_num_hands: int,
    model_complexity: int,
    min_detection_confidence: float,
    min_tracking_confidence: float,
) -> Optional[_SolutionsBackend]:
    import mediapipe as mp  # type: ignore

    if not hasattr(mp, "solutions"):
        return None
    hands_mod = mp.solutions.hands
    hands = hands_mod.Hands(
        static_image_mode=static_image_mode,
        max_num_hands=max_num_hands,
        model_complexity=model_complexity,
        min_detection_confidence=min_detection_confidence,
        min_tracking_confidence=min_tracking_confidence,
    )
    return _SolutionsBackend(mp=mp, hands=hands)


def _try_create_tasks_backend(
    model_path: str,
    max_num_hands: int,
    min_detection_confidence: float,
    min_tracking_confidence: float,
) -> _TasksBackend:
    """
    Fallback for MediaPipe distributions that do not include `mp.solutions`.

    Uses the MediaPipe Tasks HandLandmarker API, which requires a `.task` model asset on disk.
    """

    import mediapipe as mp  # type: ignore
    from mediapipe.tasks.python import BaseOptions  # type: ignore
    from mediapipe.tasks.python.vision import HandLandmarker, HandLandmarkerOptions, RunningMode  # type: ignore

    model_path = ensure_hand_landmarker_task(model_path)

    options = HandLandmarkerOptions(
        base_options=BaseOptions(model_asset_path=model_path),
        running_mode=RunningMode.VIDEO,
        num_hands=max_num_hands,
        min_hand_detection_confidence=min_detection_confidence,
        min_tracking_confidence=min_tracking_confidence,
    )
    landmarker = HandLandmarker.create_from_options(options)
    return _TasksBackend(mp=mp, landmarker=landmarker)


class MediaPipeHandTracker:
    """
    Hand landmark tracker using MediaPipe Hands.

    Input frames are expected as **BGR** images (OpenCV default). Emits up to
    `max_num_hands` hands, each with its handedness label and normalized points.
    """

    def __init__(
        self,
        static_image_mode: bool = False,
        max_num_hands: int = 2,
        model_complexity: int = 1,
        min_detection_confidence: float = 0.5,
        min_tracking_confidence: float = 0.5,
        tasks_model_path: str = "models/hand_landmarker.task",
        frame_interval_ms: int = 17,
    ) -> None:
        self._tasks: Optional[_TasksBackend] = None
        self._tasks_timestamp_ms = 0
        self._frame_interval_ms = frame_interval_ms

        try:
            self._solutions = _try_create_solutions_backend(
                static_image_mode=static_image_mode,
                max_num_hands=max_num_hands,
                model_complexity=model_complexity,
                min_detection_confidence=min_detection_confidence,
                min_tracking_confidence=min_tracking_confidence,
            )
        except ImportError as e:
            raise TrackerUnavailableError(
                "The `mediapipe` package is not installed. Install it with:\n"
                "  pip install 'ghosthand[mediapipe]'"
            ) from e

        if self._solutions is not None:
            logger.info("Using MediaPipe solutions backend")
            return

        try:
            self._tasks = _try_create_tasks_backend(
                model_path=tasks_model_path,
                max_num_hands=max_num_hands,
                min_detection_confidence=min_detection_confidence,
                min_tracking_confidence=min_tracking_confidence,
            )
        except ModelAssetError as e:
            raise TrackerUnavailableError(
                "MediaPipe does not provide `mp.solutions` in your environment, and the Tasks\n"
                "HandLandmarker fallback needs a model file on disk:\n"
                f"  {tasks_model_path}",
                context={"model_path": tasks_model_path},
            ) from e
        except (ImportError, RuntimeError, ValueError) as e:
            raise TrackerUnavailableError(
                "Could not initialize MediaPipe Hands: `mp.solutions` is missing and the Tasks\n"
                "fallback could not be initialized."
            ) from e
        logger.info("Using MediaPipe Tasks backend (%s)", tasks_model_path)

    def close(self) -> None:
        if self._solutions is not None:
            self._solutions.hands.close()
        if self._tasks is not None:
            self._tasks.landmarker.close()

    def __enter__(self) -> "MediaPipeHandTracker":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def track(self, frame_bgr) -> TrackingResult:
        if frame_bgr is None or frame_bgr.size == 0:
            return TrackingResult.empty()

        frame_rgb = cv2.cvtColor(frame_bgr, cv2.COLOR_BGR2RGB)

        if self._solutions is not None:
            results = self._solutions.hands.process(frame_rgb)
            if not results.multi_hand_landmarks:
                return TrackingResult.empty()

            handedness_list = results.multi_handedness or []
            hands: List[HandLandmarks] = []
            for i, hand_landmarks in enumerate(results.multi_hand_landmarks):
                label: Optional[str] = None
                if i < len(handedness_list) and handedness_list[i].classification:
                    label = getattr(handedness_list[i].classification[0], "label", None)
                hands.append(_to_hand(hand_landmarks.landmark, label))
            return TrackingResult(hands=tuple(hands))

        if self._tasks is None:
            return TrackingResult.empty()

        mp = self._tasks.mp
        mp_image = mp.Image(image_format=mp.ImageFormat.SRGB, data=frame_rgb)

        # VIDEO mode requires monotonically increasing timestamps.
        self._tasks_timestamp_ms += self._frame_interval_ms
        result = self._tasks.landmarker.detect_for_video(mp_image, self._tasks_timestamp_ms)

        hand_landmarks_list = getattr(result, "hand_landmarks", None) or []
        handedness_list = getattr(result, "handedness", None) or []

        hands = []
        for i, landmarks in enumerate(hand_landmarks_list):
            label = None
            if i < len(handedness_list) and handedness_list[i]:
                cat0 = handedness_list[i][0]
                label = getattr(cat0, "category_name", None) or getattr(cat0, "display_name", None)
            hands.append(_to_hand(landmarks, label))
        return TrackingResult(hands=tuple(hands))


def _to_hand(landmarks, label: Optional[str]) -> HandLandmarks:
    return HandLandmarks.from_label(label, ((float(lm.x), float(lm.y)) for lm in landmarks))


def create_hand_tracker(backend: str = "auto", **kwargs) -> HandTracker:
    """
    Build a tracker by name: "mediapipe", "skin", or "auto".

    "auto" prefers MediaPipe and falls back to the skin-color heuristic when
    MediaPipe cannot be initialized. `kwargs` go to the MediaPipe tracker;
    `max_num_hands` is also honored by the skin tracker.
    """
    from .fallback import SkinColorHandTracker

    if backend == "skin":
        return SkinColorHandTracker(max_num_hands=kwargs.get("max_num_hands", 2))
    if backend == "mediapipe":
        return MediaPipeHandTracker(**kwargs)
    if backend != "auto":
        raise ValueError(f"Unknown tracker backend '{backend}'. Available: ['auto', 'mediapipe', 'skin']")

    try:
        return MediaPipeHandTracker(**kwargs)
    except TrackerUnavailableError as e:
        logger.warning("MediaPipe unavailable, falling back to skin-color tracking: %s", e)
        return SkinColorHandTracker(max_num_hands=kwargs.get("max_num_hands", 2))
