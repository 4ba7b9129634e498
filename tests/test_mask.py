import numpy as np
import pytest

from ghosthand.mask import FINGER_CHAINS, PALM_INDICES, HandMaskBuilder, stroke_thickness, union_masks

W, H = 320, 240


def palm_square(x0=100, y0=70, side=100):
    """21 pixel points with the palm on a square and every finger collapsed onto the wrist."""
    bl, br, tr, tl = (x0, y0 + side), (x0 + side, y0 + side), (x0 + side, y0), (x0, y0)
    points = [bl] * 21
    points[1], points[2] = br, tr
    for i in (5, 9, 13, 17):
        points[i] = tl
    return points


def test_topology_constants():
    assert PALM_INDICES == (0, 1, 2, 5, 9, 13, 17)
    assert [c[0] for c in FINGER_CHAINS] == [1, 5, 9, 13, 17]
    assert all(len(c) == 4 for c in FINGER_CHAINS)


def test_mask_is_binary_frame_sized_and_fills_palm():
    mask = HandMaskBuilder().build(palm_square(), W, H)

    assert mask.shape == (H, W)
    assert mask.dtype == np.uint8
    assert set(np.unique(mask)) <= {0, 255}
    assert mask[120, 150] == 255
    assert mask[10, 10] == 0
    assert mask[120, 300] == 0


def test_fewer_than_three_points_gives_no_palm():
    mask = HandMaskBuilder().build([(50, 50), (50, 50)], W, H)
    assert not mask.any()


def test_empty_points_give_empty_mask():
    assert not HandMaskBuilder().build([], W, H).any()


def test_out_of_range_indices_are_skipped():
    # Only wrist, thumb chain and index base: palm uses 0,1,2,5; index chain is skipped.
    points = [(160, 200), (200, 190), (210, 150), (215, 120), (218, 100), (130, 130)]

    mask = HandMaskBuilder().build(points, W, H)

    assert mask.any()
    assert mask[165, 170] == 255


def test_finger_stroke_extends_beyond_palm():
    points = palm_square()
    # Index finger straight up from the top-left palm corner (100, 70).
    points[6] = points[7] = points[8] = (100, 20)

    mask = HandMaskBuilder().build(points, W, H)

    assert mask[45, 100] == 255
    assert mask[45, 130] == 0


def test_stroke_thickness_tapers_and_has_floor():
    t = [stroke_thickness(640, 480, i) for i in range(3)]
    assert t[0] >= t[1] >= t[2] >= 2
    assert t[0] > t[2]
    assert stroke_thickness(20, 20, 2) == 2


def test_cleanup_removes_isolated_speckle():
    # A stroke of minimum thickness on a tiny frame is thinner than the opening kernel.
    mask = HandMaskBuilder().build([(5, 5), (6, 5), (7, 5)], 40, 40)
    assert not mask.any()


def test_union_is_superset_of_each_mask():
    builder = HandMaskBuilder()
    a = builder.build(palm_square(x0=40, y0=40, side=80), W, H)
    b = builder.build(palm_square(x0=120, y0=60, side=90), W, H)

    u = union_masks([a, b], shape=(H, W))

    assert np.all(u >= a)
    assert np.all(u >= b)
    assert np.array_equal(u, union_masks([b, a]))


def test_union_of_nothing_is_empty():
    u = union_masks([], shape=(H, W))
    assert u.shape == (H, W)
    assert not u.any()
    with pytest.raises(ValueError):
        union_masks([])
