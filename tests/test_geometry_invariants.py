import math

import pytest

import lampshade_geometry as geo
from lampshade_geometry import ShadeDimensions


def _sampled_bbox(outline, segments=4000):
    return geo.bbox_points(outline.polygon(segments))


@pytest.mark.parametrize("d,h", [(30.0, 20.0), (0.5, 1e-3), (12.25, 400.0), (1e4, 3.0)])
def test_cylinder_is_circumference_by_height(d, h):
    out = geo.compute_pattern(ShadeDimensions.drum(d, h))
    assert isinstance(out, geo.CylinderOutline)
    assert out.width == math.pi * d
    assert out.height == h
    assert out.bbox == geo.BBox(0.0, 0.0, math.pi * d, h)


def test_drum_30_by_20():
    out = geo.compute_pattern(ShadeDimensions.drum(30, 20))
    assert out.width == pytest.approx(94.248, abs=1e-3)
    assert out.height == 20


def test_cone_20_30_20():
    out = geo.compute_pattern(ShadeDimensions.cone(20, 30, 20))
    assert isinstance(out, geo.FrustumOutline)
    assert out.slant_height == pytest.approx(math.sqrt(20 ** 2 + 5 ** 2))
    assert out.slant_height == pytest.approx(20.616, abs=1e-3)
    assert out.outer_radius == pytest.approx(61.85, abs=1e-2)
    assert out.inner_radius == pytest.approx(41.23, abs=1e-2)
    # 2*pi*rBottom/outer
    assert out.angle == pytest.approx(2 * math.pi * 15 / out.outer_radius)
    assert out.angle == pytest.approx(1.5239, abs=1e-4)
    assert out.angle < math.pi
    assert not out.large_arc
    assert out.top_arc_length == pytest.approx(math.pi * 20)
    assert out.bottom_arc_length == pytest.approx(math.pi * 30)


def test_outer_arc_length_matches_bottom_circumference():
    out = geo.compute_pattern(ShadeDimensions.cone(14, 36, 23))
    assert out.outer_radius * out.angle == pytest.approx(math.pi * 36, rel=1e-12)
    assert out.inner_radius * out.angle == pytest.approx(math.pi * 14, rel=1e-12)


@pytest.mark.parametrize(
    "top,bottom,h",
    [(20, 30, 20), (1, 2, 100), (0.1, 50, 0.5), (29.9, 30, 10), (5, 7, 1e-3)],
)
def test_radii_differ_by_slant(top, bottom, h):
    out = geo.compute_pattern(ShadeDimensions.cone(top, bottom, h))
    assert out.outer_radius - out.inner_radius == pytest.approx(out.slant_height, rel=1e-9)


def test_inverted_cone_is_invalid_taper():
    with pytest.raises(geo.InvalidTaperError) as exc:
        geo.compute_pattern(ShadeDimensions.cone(30, 20, 20))
    assert "Bottom diameter must be larger than top diameter" in str(exc.value)
    assert exc.value.code == "INVALID_TAPER"
    assert isinstance(exc.value, geo.GeometryError)


@pytest.mark.parametrize("a,b", [(20, 30), (1, 100), (7.5, 7.50001)])
def test_swapped_diameters_always_rejected(a, b):
    geo.compute_pattern(ShadeDimensions.cone(a, b, 10))
    with pytest.raises(geo.InvalidTaperError):
        geo.compute_pattern(ShadeDimensions.cone(b, a, 10))


def test_equal_diameters_rejected_for_frustum():
    # Strict boundary: equal rims are a drum, not a cone.
    with pytest.raises(geo.InvalidTaperError):
        geo.compute_pattern(ShadeDimensions.cone(25, 25, 10))


def test_angle_grows_as_shade_flattens():
    angles = [geo.sector_angle(ShadeDimensions.cone(20, 30, h)) for h in (80, 40, 20, 10, 5, 1, 0.1, 0.001)]
    assert all(a0 < a1 for a0, a1 in zip(angles, angles[1:]))
    assert all(a <= 2 * math.pi for a in angles)


def test_extreme_taper_approaches_full_turn():
    out = geo.compute_pattern(ShadeDimensions.cone(1, 100, 0.01))
    assert out.angle < 2 * math.pi
    assert out.angle == pytest.approx(2 * math.pi, rel=1e-6)
    assert out.large_arc


def test_angle_over_full_turn_is_rejected():
    geo.check_sector_angle(2 * math.pi)
    with pytest.raises(geo.AngleOverflowError) as exc:
        geo.check_sector_angle(2 * math.pi + 1e-9)
    assert exc.value.code == "ANGLE_OVERFLOW"
    assert isinstance(exc.value, geo.GeometryError)


def test_narrow_sector_box_includes_outer_arc_apex():
    out = geo.compute_pattern(ShadeDimensions.cone(20, 30, 20))
    assert out.angle < math.pi

    corners_x = [p[0] for p in out.corners]
    # The arc bulges past the corners at angle 0.
    assert max(corners_x) < out.outer_radius
    assert out.bbox.max_x == pytest.approx(out.outer_radius)
    assert out.bbox.min_x == pytest.approx(out.inner_radius * math.cos(out.angle / 2))
    assert out.bbox.height == pytest.approx(2 * out.outer_radius * math.sin(out.angle / 2))


def test_wide_sector_box_includes_arc_axis_crossings():
    out = geo.compute_pattern(ShadeDimensions.cone(10, 30, 5))
    assert out.angle > math.pi
    assert out.large_arc

    corner_box = geo.BBox.from_points(list(out.corners))
    assert out.bbox.max_x == pytest.approx(out.outer_radius)
    assert out.bbox.min_y == pytest.approx(-out.outer_radius)
    assert out.bbox.max_y == pytest.approx(out.outer_radius)
    assert corner_box.max_x < out.bbox.max_x


@pytest.mark.parametrize(
    "top,bottom,h",
    [(20, 30, 20), (10, 30, 5), (1, 100, 0.01), (29, 30, 60), (15, 45, 14.5)],
)
def test_bbox_is_minimal_and_covers_boundary(top, bottom, h):
    out = geo.compute_pattern(ShadeDimensions.cone(top, bottom, h))
    x0, y0, x1, y1 = _sampled_bbox(out)
    tol = 1e-9 * out.outer_radius
    assert out.bbox.min_x <= x0 + tol
    assert out.bbox.min_y <= y0 + tol
    assert out.bbox.max_x >= x1 - tol
    assert out.bbox.max_y >= y1 - tol
    # Dense sampling gets arbitrarily close to the true extremes.
    assert out.bbox.width == pytest.approx(x1 - x0, rel=1e-5)
    assert out.bbox.height == pytest.approx(y1 - y0, rel=1e-5)


def test_frustum_boundary_commands():
    out = geo.compute_pattern(ShadeDimensions.cone(20, 30, 20))
    cmds = out.draw_commands()
    assert [type(c) for c in cmds] == [geo.MoveTo, geo.LineTo, geo.ArcTo, geo.LineTo, geo.ArcTo, geo.ClosePath]

    p1, p2, p3, p4 = out.corners
    assert cmds[0].point == p1
    assert cmds[1].point == p2
    outer_arc, inner_arc = cmds[2], cmds[4]
    assert (outer_arc.radius, outer_arc.sweep, outer_arc.point) == (out.outer_radius, True, p3)
    assert (inner_arc.radius, inner_arc.sweep, inner_arc.point) == (out.inner_radius, False, p1)
    assert outer_arc.large_arc is False and inner_arc.large_arc is False
    # Symmetric about angle 0.
    assert p2[1] == pytest.approx(-p3[1])
    assert p1[0] == pytest.approx(p4[0])


def test_arc_command_takes_sweep_before_large_arc():
    arc = geo.ArcTo(5.0, True, False, (1.0, 2.0))
    assert arc.sweep is True and arc.large_arc is False
    # SVG itself orders the flags large-arc first.
    assert geo.commands_to_path([arc]) == "A 5 5 0 0 1 1 2"


def test_path_d_large_arc_flag():
    narrow = geo.compute_pattern(ShadeDimensions.cone(20, 30, 20)).path_d()
    wide = geo.compute_pattern(ShadeDimensions.cone(10, 30, 5)).path_d()
    assert narrow.startswith("M ") and narrow.endswith(" Z")
    assert narrow.count(" A ") == 2
    assert " 0 0 1 " in narrow and " 0 0 0 " in narrow
    assert " 0 1 1 " in wide and " 0 1 0 " in wide


def test_cylinder_draws_closed_rectangle():
    out = geo.compute_pattern(ShadeDimensions.drum(10, 5))
    cmds = out.draw_commands()
    assert isinstance(cmds[0], geo.MoveTo) and isinstance(cmds[-1], geo.ClosePath)
    assert [c.point for c in cmds[1:-1]] == [(math.pi * 10, 0.0), (math.pi * 10, 5), (0.0, 5)]
    assert 'width="31.416"' in out.to_svg_element()


def test_repeat_calls_are_identical():
    dims = ShadeDimensions.cone(12.5, 31.75, 18.2)
    assert geo.compute_pattern(dims) == geo.compute_pattern(dims)
    assert geo.compute_pattern(dims).path_d() == geo.compute_pattern(dims).path_d()


def test_unit_is_carried_through():
    out = geo.compute_pattern(ShadeDimensions.cone(8, 12, 9, unit=geo.Unit.INCH))
    assert out.dims.unit == geo.Unit.INCH
    assert out.dims.height == 9


def test_sector_polygon_is_closed_ring_on_the_boundary():
    out = geo.compute_pattern(ShadeDimensions.cone(20, 30, 20))
    ring = out.polygon(32)
    assert ring[0] == out.corners[0]
    for x, y in ring:
        r = math.hypot(x, y)
        assert out.inner_radius - 1e-9 <= r <= out.outer_radius + 1e-9
