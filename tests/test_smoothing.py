import numpy as np
import pytest

from ghosthand.smoothing import HandStateStore, LandmarkSmoother, points_to_array
from ghosthand.types import Handedness, NormalizedPoint


def pts(*xy):
    return [NormalizedPoint(x, y) for x, y in xy]


def test_first_sighting_returns_raw_points():
    store = HandStateStore()
    smoother = LandmarkSmoother(store)

    out = smoother.smooth(Handedness.LEFT, pts((0.2, 0.4), (0.6, 0.8)), alpha=0.3, now_s=0.0)

    np.testing.assert_array_equal(out, [[0.2, 0.4], [0.6, 0.8]])
    assert Handedness.LEFT in store
    assert not store.is_idle


def test_ema_update_blends_with_previous():
    store = HandStateStore()
    smoother = LandmarkSmoother(store)
    smoother.smooth(Handedness.RIGHT, pts((0.0, 0.0)), alpha=0.25, now_s=0.0)

    out = smoother.smooth(Handedness.RIGHT, pts((1.0, 0.5)), alpha=0.25, now_s=0.1)

    np.testing.assert_allclose(out, [[0.25, 0.125]])
    assert store.get(Handedness.RIGHT).last_update_s == 0.1


@pytest.mark.parametrize("alpha", [0.05, 0.2, 0.45, 0.9, 1.0])
def test_repeated_input_converges_to_raw(alpha):
    store = HandStateStore()
    smoother = LandmarkSmoother(store)
    smoother.smooth(Handedness.LEFT, pts((0.9, 0.1), (0.1, 0.9)), alpha=alpha, now_s=0.0)

    target = pts((0.3, 0.6), (0.7, 0.2))
    out = None
    for i in range(1000):
        out = smoother.smooth(Handedness.LEFT, target, alpha=alpha, now_s=i * 0.016)

    np.testing.assert_allclose(out, points_to_array(target), atol=1e-9)


def test_alpha_one_tracks_raw_exactly():
    store = HandStateStore()
    smoother = LandmarkSmoother(store)
    rng = np.random.default_rng(7)

    for i in range(20):
        raw = [NormalizedPoint(float(x), float(y)) for x, y in rng.random((21, 2))]
        out = smoother.smooth(Handedness.LEFT, raw, alpha=1.0, now_s=float(i))
        np.testing.assert_array_equal(out, points_to_array(raw))


def test_point_count_change_resets_state():
    store = HandStateStore()
    smoother = LandmarkSmoother(store)
    smoother.smooth(Handedness.LEFT, pts((0.0, 0.0), (0.0, 0.0)), alpha=0.5, now_s=0.0)

    out = smoother.smooth(Handedness.LEFT, pts((1.0, 1.0)), alpha=0.5, now_s=0.1)

    np.testing.assert_array_equal(out, [[1.0, 1.0]])
    assert store.get(Handedness.LEFT).points.shape == (1, 2)


def test_hands_are_smoothed_independently():
    store = HandStateStore()
    smoother = LandmarkSmoother(store)
    smoother.smooth(Handedness.LEFT, pts((0.0, 0.0)), alpha=0.5, now_s=0.0)
    smoother.smooth(Handedness.RIGHT, pts((1.0, 1.0)), alpha=0.5, now_s=0.0)

    left = smoother.smooth(Handedness.LEFT, pts((1.0, 1.0)), alpha=0.5, now_s=0.1)
    right = smoother.smooth(Handedness.RIGHT, pts((1.0, 1.0)), alpha=0.5, now_s=0.1)

    np.testing.assert_allclose(left, [[0.5, 0.5]])
    np.testing.assert_allclose(right, [[1.0, 1.0]])


def test_evict_stale_drops_only_expired_states():
    store = HandStateStore()
    smoother = LandmarkSmoother(store)
    smoother.smooth(Handedness.LEFT, pts((0.1, 0.1)), alpha=0.5, now_s=0.0)
    smoother.smooth(Handedness.RIGHT, pts((0.1, 0.1)), alpha=0.5, now_s=1.5)

    assert store.evict_stale(2.0, stale_after_s=2.0) == []
    assert store.evict_stale(2.5, stale_after_s=2.0) == [Handedness.LEFT]
    assert list(store) == [Handedness.RIGHT]

    store.evict_stale(10.0, stale_after_s=2.0)
    assert store.is_idle
    assert len(store) == 0


def test_returned_points_do_not_alias_state():
    store = HandStateStore()
    smoother = LandmarkSmoother(store)
    out = smoother.smooth(Handedness.LEFT, pts((0.5, 0.5)), alpha=0.5, now_s=0.0)
    out[0, 0] = 99.0

    assert store.get(Handedness.LEFT).points[0, 0] == 0.5
