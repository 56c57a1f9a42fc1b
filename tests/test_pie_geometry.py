import math

import pytest

from pie_geometry import (
    EPSILON,
    TAU,
    compute_wedges,
    label_anchor,
    layout_chart,
    point_on_circle,
    wedge_path,
)


def test_quarter_quarter_half():
    wedges = compute_wedges([1, 1, 2])
    assert [w.fraction for w in wedges] == pytest.approx([0.25, 0.25, 0.5])
    assert [(w.start_angle, w.end_angle) for w in wedges] == [
        (0.0, pytest.approx(math.pi / 2)),
        (pytest.approx(math.pi / 2), pytest.approx(math.pi)),
        (pytest.approx(math.pi), TAU),
    ]
    assert wedges[0].mid_angle == pytest.approx(math.pi / 4)
    assert not any(w.full_circle for w in wedges)


@pytest.mark.parametrize("values", [
    [1, 1, 2],
    [0.1] * 10,
    [3.3, 1e-6, 7.1, 2.9, 0.004],
    list(range(1, 40)),
])
def test_wedges_are_contiguous_and_close_the_circle(values):
    wedges = compute_wedges(values)
    assert wedges[0].start_angle == 0.0
    for prev, cur in zip(wedges, wedges[1:]):
        assert cur.start_angle == prev.end_angle
    assert wedges[-1].end_angle == TAU
    assert sum(w.end_angle - w.start_angle for w in wedges) == pytest.approx(TAU, abs=EPSILON)


def test_single_slice_is_full_circle():
    (wedge,) = compute_wedges([42])
    assert wedge.full_circle
    assert wedge.start_angle == 0.0
    assert wedge.end_angle == TAU
    assert wedge_path(wedge, 100, 100, 50) is None


def test_huge_values_do_not_overflow():
    first, second = compute_wedges([1e308, 1e308])
    assert first.fraction == pytest.approx(0.5)
    assert second.fraction == pytest.approx(0.5)
    assert first.end_angle == pytest.approx(math.pi)
    assert second.end_angle == TAU


def test_large_arc_flag():
    big, small = compute_wedges([3, 1])
    assert big.large_arc_flag
    assert not small.large_arc_flag
    assert big.sweep_flag and small.sweep_flag


def test_point_on_circle_starts_at_twelve_and_turns_clockwise():
    assert point_on_circle(0, 0, 10, 0) == pytest.approx((0, -10))
    assert point_on_circle(0, 0, 10, math.pi / 2) == pytest.approx((10, 0))
    assert point_on_circle(0, 0, 10, math.pi) == pytest.approx((0, 10))


def test_wedge_path_for_first_quarter():
    wedge = compute_wedges([1, 3])[0]
    d = wedge_path(wedge, 100, 100, 50)
    assert d == "M 100.000,100.000 L 100.000,50.000 A 50.000,50.000 0 0 1 150.000,100.000 Z"


def test_label_anchor_sides():
    right, bottom, left, top = compute_wedges([1, 1, 1, 1])
    # mid angles 45, 135, 225, 315 degrees
    assert label_anchor(right, 0, 0, 10)[2] == "start"
    assert label_anchor(left, 0, 0, 10)[2] == "end"
    x, y, _ = label_anchor(bottom, 0, 0, 10, offset=5)
    assert math.hypot(x, y) == pytest.approx(15)
    (full,) = compute_wedges([1])
    assert label_anchor(full, 0, 0, 10)[2] == "middle"


def test_layout_right_legend():
    lay = layout_chart(["A", "B", "C"], radius=100, legend_position="right", has_title=True)
    assert len(lay.legend) == 3
    assert lay.title_pos is not None
    for entry in lay.legend:
        assert entry.swatch[0] > lay.cx + lay.radius
        assert entry.text[0] > entry.swatch[0]
        assert entry.text[0] < lay.width
    ys = [e.swatch[1] for e in lay.legend]
    assert ys == sorted(ys)
    assert lay.height >= lay.cy + lay.radius


def test_layout_bottom_legend():
    lay = layout_chart(["A", "B"], radius=80, legend_position="bottom")
    assert lay.title_pos is None
    for entry in lay.legend:
        assert entry.swatch[1] > lay.cy + lay.radius
        assert entry.swatch[1] < lay.height
    assert lay.width >= 2 * lay.radius


def test_layout_grows_with_radius():
    small = layout_chart(["A"], radius=50)
    large = layout_chart(["A"], radius=200)
    assert large.width > small.width
    assert large.height > small.height
