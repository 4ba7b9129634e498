from __future__ import annotations

from typing import List, Tuple

import numpy as np
import pytest

from ghosthand.types import HandLandmarks


class FakeClock:
    def __init__(self, start: float = 0.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def blank_frame():
    def make(width: int = 320, height: int = 240, value: int = 90) -> np.ndarray:
        frame = np.empty((height, width, 3), dtype=np.uint8)
        frame[...] = (value, value + 10, value + 20)
        return frame

    return make


def square_points(cx: float, cy: float, side: float, width: int, height: int) -> List[Tuple[float, float]]:
    """21 normalized points: palm joints on the corners of a square, finger joints on the wrist."""
    x0, x1 = (cx - side / 2) / width, (cx + side / 2) / width
    y0, y1 = (cy - side / 2) / height, (cy + side / 2) / height
    bottom_left, bottom_right = (x0, y1), (x1, y1)
    top_right, top_left = (x1, y0), (x0, y0)

    points = [bottom_left] * 21
    points[1] = bottom_right
    points[2] = top_right
    for i in (5, 9, 13, 17):
        points[i] = top_left
    return points


@pytest.fixture
def square_hand():
    def make(
        label: str = "Left",
        cx: float = 320,
        cy: float = 240,
        side: float = 100,
        width: int = 640,
        height: int = 480,
    ) -> HandLandmarks:
        return HandLandmarks.from_label(label, square_points(cx, cy, side, width, height))

    return make
