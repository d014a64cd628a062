#!/usr/bin/env python3
"""lampshade_geometry.py

Flat pattern geometry for lampshade frames.

A drum (cylinder) shade unrolls into a rectangle. A cone / empire shade is the
lateral surface of a right-circular frustum, which unrolls into a sector of an
annulus:

  slant = sqrt(height^2 + (rBottom - rTop)^2)
  outer = slant * rBottom / (rBottom - rTop)     (apex to bottom edge)
  inner = slant * rTop / (rBottom - rTop)        (apex to top edge)
  theta = 2*pi * rBottom / outer                 (sector angle, radians)

The sector is laid out with its apex at the origin and symmetric about angle 0,
so the outline lives in its own local frame. The tight bounding box of that
frame is what callers use as the SVG viewBox and as the area to tile onto
printed pages.

Notes:
- Comparisons are exact. A frustum with bottom <= top is rejected, never
  snapped.
- Coordinates follow SVG conventions (y down). The sector is symmetric, so the
  outline is the same shape either way.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Tuple, Union

Point = Tuple[float, float]


def fmt(n: float) -> str:
    return f"{n:.3f}".rstrip("0").rstrip(".")


def polar(radius: float, angle: float) -> Point:
    return (radius * math.cos(angle), radius * math.sin(angle))


def bbox_points(points: List[Point]) -> Tuple[float, float, float, float]:
    xs = [p[0] for p in points]
    ys = [p[1] for p in points]
    return (min(xs), min(ys), max(xs), max(ys))


class ShapeClass(str, Enum):
    CYLINDER = "cylinder"
    FRUSTUM = "frustum"


class Unit(str, Enum):
    INCH = "in"
    CM = "cm"
    PX = "px"


# Shade styles offered to users, mapped onto the two geometries we unroll.
SHADE_STYLES = {
    "drum": ShapeClass.CYLINDER,
    "cone": ShapeClass.FRUSTUM,
    "empire": ShapeClass.FRUSTUM,
}


class GeometryError(ValueError):
    """The requested shade cannot be unrolled into a single flat panel."""

    code = "GEOMETRY"


class InvalidTaperError(GeometryError):
    code = "INVALID_TAPER"


class AngleOverflowError(GeometryError):
    code = "ANGLE_OVERFLOW"


@dataclass(frozen=True)
class ShadeDimensions:
    top_diameter: float = 20.0
    bottom_diameter: float = 30.0
    height: float = 20.0
    unit: Unit = Unit.CM
    shape: ShapeClass = ShapeClass.FRUSTUM

    @classmethod
    def drum(cls, diameter: float, height: float, unit: Unit = Unit.CM) -> "ShadeDimensions":
        return cls(
            top_diameter=diameter,
            bottom_diameter=diameter,
            height=height,
            unit=unit,
            shape=ShapeClass.CYLINDER,
        )

    @classmethod
    def cone(cls, top_diameter: float, bottom_diameter: float, height: float, unit: Unit = Unit.CM) -> "ShadeDimensions":
        return cls(
            top_diameter=top_diameter,
            bottom_diameter=bottom_diameter,
            height=height,
            unit=unit,
            shape=ShapeClass.FRUSTUM,
        )


@dataclass(frozen=True)
class BBox:
    min_x: float
    min_y: float
    width: float
    height: float

    @property
    def max_x(self) -> float:
        return self.min_x + self.width

    @property
    def max_y(self) -> float:
        return self.min_y + self.height

    @classmethod
    def from_points(cls, points: List[Point]) -> "BBox":
        x0, y0, x1, y1 = bbox_points(points)
        return cls(min_x=x0, min_y=y0, width=x1 - x0, height=y1 - y0)

    def union(self, other: "BBox") -> "BBox":
        x0 = min(self.min_x, other.min_x)
        y0 = min(self.min_y, other.min_y)
        x1 = max(self.max_x, other.max_x)
        y1 = max(self.max_y, other.max_y)
        return BBox(min_x=x0, min_y=y0, width=x1 - x0, height=y1 - y0)

    def view_box(self) -> str:
        return f"{fmt(self.min_x)} {fmt(self.min_y)} {fmt(self.width)} {fmt(self.height)}"


# ---------------------- Draw commands ----------------------


@dataclass(frozen=True)
class MoveTo:
    point: Point


@dataclass(frozen=True)
class LineTo:
    point: Point


@dataclass(frozen=True)
class ArcTo:
    radius: float
    sweep: bool
    large_arc: bool
    point: Point


@dataclass(frozen=True)
class ClosePath:
    pass


DrawCommand = Union[MoveTo, LineTo, ArcTo, ClosePath]


def commands_to_path(commands: List[DrawCommand]) -> str:
    d: List[str] = []
    for c in commands:
        if isinstance(c, MoveTo):
            d.append(f"M {fmt(c.point[0])} {fmt(c.point[1])}")
        elif isinstance(c, LineTo):
            d.append(f"L {fmt(c.point[0])} {fmt(c.point[1])}")
        elif isinstance(c, ArcTo):
            r = fmt(c.radius)
            d.append(f"A {r} {r} 0 {int(c.large_arc)} {int(c.sweep)} {fmt(c.point[0])} {fmt(c.point[1])}")
        elif isinstance(c, ClosePath):
            d.append("Z")
        else:
            raise TypeError(f"unknown draw command: {c!r}")
    return " ".join(d)


def polyline_to_path(points: List[Point], close: bool = True) -> str:
    if not points:
        return ""
    d = [f"M {fmt(points[0][0])} {fmt(points[0][1])}"]
    for x, y in points[1:]:
        d.append(f"L {fmt(x)} {fmt(y)}")
    if close:
        d.append("Z")
    return " ".join(d)


# ---------------------- Outlines ----------------------


@dataclass(frozen=True)
class CylinderOutline:
    dims: ShadeDimensions
    circumference: float
    height: float
    bbox: BBox

    @property
    def width(self) -> float:
        return self.circumference

    def draw_commands(self) -> List[DrawCommand]:
        w, h = self.circumference, self.height
        return [
            MoveTo((0.0, 0.0)),
            LineTo((w, 0.0)),
            LineTo((w, h)),
            LineTo((0.0, h)),
            ClosePath(),
        ]

    def path_d(self) -> str:
        return commands_to_path(self.draw_commands())

    def polygon(self, segments: int = 64) -> List[Point]:
        w, h = self.circumference, self.height
        return [(0.0, 0.0), (w, 0.0), (w, h), (0.0, h)]

    def to_svg_element(self, css_class: str = "cut") -> str:
        return (
            f'<rect class="{css_class}" x="0" y="0" '
            f'width="{fmt(self.circumference)}" height="{fmt(self.height)}"/>'
        )


@dataclass(frozen=True)
class FrustumOutline:
    """Annular sector for a tapered shade.

    corners are, in boundary order: inner and outer radius at -angle/2, then
    outer and inner radius at +angle/2.
    """

    dims: ShadeDimensions
    slant_height: float
    inner_radius: float
    outer_radius: float
    angle: float
    corners: Tuple[Point, Point, Point, Point]
    bbox: BBox
    top_arc_length: float = field(init=False)
    bottom_arc_length: float = field(init=False)

    def __post_init__(self):
        object.__setattr__(self, "top_arc_length", math.pi * self.dims.top_diameter)
        object.__setattr__(self, "bottom_arc_length", math.pi * self.dims.bottom_diameter)

    @property
    def width(self) -> float:
        return self.bbox.width

    @property
    def height(self) -> float:
        return self.bbox.height

    @property
    def large_arc(self) -> bool:
        return self.angle > math.pi

    def draw_commands(self) -> List[DrawCommand]:
        p1, p2, p3, p4 = self.corners
        return [
            MoveTo(p1),
            LineTo(p2),
            ArcTo(self.outer_radius, True, self.large_arc, p3),
            LineTo(p4),
            ArcTo(self.inner_radius, False, self.large_arc, p1),
            ClosePath(),
        ]

    def path_d(self) -> str:
        return commands_to_path(self.draw_commands())

    def polygon(self, segments: int = 64) -> List[Point]:
        """Flatten the boundary into a closed point ring (no repeated start point)."""

        n = max(2, int(segments))
        a0 = -self.angle / 2
        step = self.angle / n
        pts: List[Point] = [self.corners[0]]
        pts += [polar(self.outer_radius, a0 + i * step) for i in range(n + 1)]
        pts += [polar(self.inner_radius, a0 + i * step) for i in range(n, 0, -1)]
        return pts

    def to_svg_element(self, css_class: str = "cut") -> str:
        return f'<path class="{css_class}" d="{self.path_d()}"/>'


PatternOutline = Union[CylinderOutline, FrustumOutline]


# ---------------------- Calculator ----------------------


def _axis_angles_within(start: float, end: float) -> List[float]:
    """Angles k*pi/2 inside [start, end]; where a circular arc reaches an axis extreme."""

    k0 = math.ceil(start / (math.pi / 2))
    k1 = math.floor(end / (math.pi / 2))
    return [k * math.pi / 2 for k in range(k0, k1 + 1)]


def sector_bbox(inner: float, outer: float, angle: float) -> BBox:
    """Tight box of the annular sector spanning [-angle/2, +angle/2].

    The corners bound the straight edges. The outer arc may bulge past them
    wherever it crosses an axis direction inside the sweep: at angle 0 for any
    sector, and additionally at +-pi/2 once the sector reaches a half turn.
    The inner arc never extends past the outer one.
    """

    a = angle / 2
    pts = [polar(inner, -a), polar(outer, -a), polar(outer, a), polar(inner, a)]
    pts += [polar(outer, ang) for ang in _axis_angles_within(-a, a)]
    return BBox.from_points(pts)


def sector_angle(dims: ShadeDimensions) -> float:
    r_top = dims.top_diameter / 2
    r_bottom = dims.bottom_diameter / 2
    slant = math.sqrt(dims.height ** 2 + (r_bottom - r_top) ** 2)
    outer = slant * r_bottom / (r_bottom - r_top)
    return 2 * math.pi * r_bottom / outer


def check_sector_angle(angle: float) -> None:
    if angle > 2 * math.pi:
        raise AngleOverflowError(
            "The resulting pattern angle is larger than a full turn; "
            "this shade cannot be made from a single flat panel."
        )


def compute_cylinder(dims: ShadeDimensions) -> CylinderOutline:
    circumference = math.pi * dims.bottom_diameter
    return CylinderOutline(
        dims=dims,
        circumference=circumference,
        height=dims.height,
        bbox=BBox(0.0, 0.0, circumference, dims.height),
    )


def compute_frustum(dims: ShadeDimensions) -> FrustumOutline:
    if dims.bottom_diameter <= dims.top_diameter:
        raise InvalidTaperError(
            "Bottom diameter must be larger than top diameter for cone/empire shades "
            f"(got top {fmt(dims.top_diameter)}, bottom {fmt(dims.bottom_diameter)})."
        )

    r_top = dims.top_diameter / 2
    r_bottom = dims.bottom_diameter / 2
    slant = math.sqrt(dims.height ** 2 + (r_bottom - r_top) ** 2)

    inner = slant * r_top / (r_bottom - r_top)
    outer = slant * r_bottom / (r_bottom - r_top)
    angle = 2 * math.pi * r_bottom / outer
    check_sector_angle(angle)

    a = angle / 2
    corners = (polar(inner, -a), polar(outer, -a), polar(outer, a), polar(inner, a))
    return FrustumOutline(
        dims=dims,
        slant_height=slant,
        inner_radius=inner,
        outer_radius=outer,
        angle=angle,
        corners=corners,
        bbox=sector_bbox(inner, outer, angle),
    )


def compute_pattern(dims: ShadeDimensions) -> PatternOutline:
    """Unroll a shade into its flat outline.

    Raises InvalidTaperError / AngleOverflowError (both GeometryError) when the
    shade cannot be made from one seamless flat panel. Positivity of the inputs
    is the caller's job.
    """

    if dims.shape == ShapeClass.CYLINDER:
        return compute_cylinder(dims)
    if dims.shape == ShapeClass.FRUSTUM:
        return compute_frustum(dims)
    raise ValueError(f"Unknown shape class: {dims.shape!r}")
