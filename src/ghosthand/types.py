from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Optional, Tuple, Union


Point2 = Tuple[int, int]
PointLike = Union["NormalizedPoint", Tuple[float, float]]


@dataclass(frozen=True)
class NormalizedPoint:
    """A 2D landmark relative to frame width/height (0..1)."""

    x: float
    y: float


class Handedness(Enum):
    LEFT = "Left"
    RIGHT = "Right"
    UNKNOWN = "Unknown"

    @classmethod
    def parse(cls, label: Optional[str]) -> "Handedness":
        """Map a free-form detector label onto a handedness tag (trimmed, case-insensitive)."""
        if not label:
            return cls.UNKNOWN
        key = label.strip().casefold()
        for member in cls:
            if member.value.casefold() == key:
                return member
        return cls.UNKNOWN


@dataclass(frozen=True)
class HandLandmarks:
    """Landmarks for a single hand.

    `points` conventionally holds 21 entries (wrist + 4 per finger) but any
    count is accepted; consumers bounds-check indices.
    """

    handedness: Handedness
    points: Tuple[NormalizedPoint, ...]
    label: Optional[str] = None  # raw detector label, display only

    @classmethod
    def from_label(cls, label: Optional[str], points: Iterable[PointLike]) -> "HandLandmarks":
        pts = []
        for p in points:
            if isinstance(p, NormalizedPoint):
                pts.append(p)
            else:
                x, y = p
                pts.append(NormalizedPoint(float(x), float(y)))
        return cls(handedness=Handedness.parse(label), points=tuple(pts), label=label)

    @property
    def display_label(self) -> str:
        if self.label and self.label.strip():
            return self.label.strip()
        return self.handedness.value


@dataclass(frozen=True)
class TrackingResult:
    """All hands reported for one frame. List order carries no meaning."""

    hands: Tuple[HandLandmarks, ...] = ()

    @classmethod
    def empty(cls) -> "TrackingResult":
        return cls(hands=())

    def __len__(self) -> int:
        return len(self.hands)
