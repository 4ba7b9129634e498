from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, Iterator, List, Optional, Sequence

import numpy as np

from .config import STALE_AFTER_S
from .types import Handedness, NormalizedPoint

logger = logging.getLogger(__name__)


@dataclass
class SmoothedHandState:
    points: np.ndarray  # (N, 2) float64, normalized
    last_update_s: float


class HandStateStore:
    """Per-hand smoothing state, keyed by handedness.

    Owned by one renderer; not shared between instances and not thread-safe
    (a single caller drives it frame by frame).
    """

    def __init__(self) -> None:
        self._states: Dict[Handedness, SmoothedHandState] = {}

    def get(self, key: Handedness) -> Optional[SmoothedHandState]:
        return self._states.get(key)

    def put(self, key: Handedness, state: SmoothedHandState) -> None:
        self._states[key] = state

    def evict_stale(self, now_s: float, stale_after_s: float = STALE_AFTER_S) -> List[Handedness]:
        """Drop states not refreshed for more than `stale_after_s` seconds."""
        stale = [k for k, s in self._states.items() if now_s - s.last_update_s > stale_after_s]
        for key in stale:
            del self._states[key]
            logger.debug("Evicted smoothing state for %s hand", key.value)
        return stale

    def clear(self) -> None:
        self._states.clear()

    @property
    def is_idle(self) -> bool:
        return not self._states

    def __contains__(self, key: object) -> bool:
        return key in self._states

    def __len__(self) -> int:
        return len(self._states)

    def __iter__(self) -> Iterator[Handedness]:
        return iter(list(self._states))


def points_to_array(points: Sequence[NormalizedPoint]) -> np.ndarray:
    if not points:
        return np.zeros((0, 2), dtype=np.float64)
    return np.array([(p.x, p.y) for p in points], dtype=np.float64)


class LandmarkSmoother:
    """Exponential moving average over a hand's landmarks.

    smoothed = alpha * raw + (1 - alpha) * previous, per point and coordinate.
    A key seen for the first time, or whose point count changed, starts over
    from the raw points.
    """

    def __init__(self, store: HandStateStore) -> None:
        self._store = store

    def smooth(
        self,
        key: Handedness,
        raw_points: Sequence[NormalizedPoint],
        alpha: float,
        now_s: float,
    ) -> np.ndarray:
        raw = points_to_array(raw_points)
        prev = self._store.get(key)

        if prev is None or prev.points.shape != raw.shape:
            if prev is not None:
                logger.debug(
                    "Landmark count for %s hand changed (%d -> %d); resetting smoothing",
                    key.value,
                    len(prev.points),
                    len(raw),
                )
            self._store.put(key, SmoothedHandState(points=raw.copy(), last_update_s=now_s))
            return raw

        smoothed = alpha * raw + (1.0 - alpha) * prev.points
        self._store.put(key, SmoothedHandState(points=smoothed.copy(), last_update_s=now_s))
        return smoothed
