import pytest

from skifree.geometry import Rect, INVALID_HITBOX, translated_hitbox, rects_overlap, vec_distance


def test_rect_edges():
    r = Rect(top=1.0, left=2.0, width=3.0, height=4.0)
    assert r.right == 5.0
    assert r.bottom == 5.0


def test_overlap_is_strict():
    a = Rect(0.0, 0.0, 1.0, 1.0)
    assert rects_overlap(a, Rect(0.5, 0.5, 1.0, 1.0))
    # Sharing an edge is not a hit
    assert not rects_overlap(a, Rect(0.0, 1.0, 1.0, 1.0))
    assert not rects_overlap(a, Rect(1.0, 0.0, 1.0, 1.0))


def test_invalid_hitbox_overlaps_nothing_on_the_slope():
    for other in (Rect(0, 0, 10, 10), Rect(-5, -5, 50, 50), Rect(500, -20, 2, 2)):
        assert not rects_overlap(INVALID_HITBOX, other)
        assert not rects_overlap(other, INVALID_HITBOX)


def test_translated_hitbox_scales_pixels_to_meters():
    box = translated_hitbox(10.0, 20.0, (15, 30, 45, 60), 15)
    assert box.top == pytest.approx(21.0)
    assert box.left == pytest.approx(12.0)
    assert box.width == pytest.approx(3.0)
    assert box.height == pytest.approx(4.0)


def test_vec_distance():
    assert vec_distance(0, 0, 3, 4) == pytest.approx(5.0)
    assert vec_distance(1, 1, 1, 1) == 0.0
