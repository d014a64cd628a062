#!/usr/bin/env python3
"""lampshade_tiles.py

Split a full-size pattern over printable pages.

The tiler is a plain raster grid over the pattern bounding box: no rotation,
no packing. Each page gets the translation that brings its window of the
pattern under the page's printable frame, plus join marks naming the
neighbouring pages it must be taped to. Join marks come from grid adjacency
only; the pattern shape never matters.

Page sizes are expressed in the pattern unit (see page_spec_for), so the
pattern and the pages share one coordinate space.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional, Tuple, Union

from lampshade_geometry import BBox, CylinderOutline, FrustumOutline, Unit, fmt

PPI = 96  # CSS pixels per inch

# Inches.
PAPER_SIZES: Dict[str, Tuple[float, float]] = {
    "A4": (8.27, 11.69),
    "Letter": (8.5, 11.0),
}
PRINT_MARGIN_IN = 0.5
DEFAULT_MAX_PAGES = 50


class PatternTooLargeError(ValueError):
    code = "PATTERN_TOO_LARGE"


def to_px(value: float, unit: Union[Unit, str]) -> float:
    unit = Unit(unit)
    if unit == Unit.INCH:
        return value * PPI
    if unit == Unit.CM:
        return value / 2.54 * PPI
    return value


def from_px(value: float, unit: Union[Unit, str]) -> float:
    unit = Unit(unit)
    if unit == Unit.INCH:
        return value / PPI
    if unit == Unit.CM:
        return value / PPI * 2.54
    return value


def convert(value: float, src: Union[Unit, str], dst: Union[Unit, str]) -> float:
    if Unit(src) == Unit(dst):
        return value
    return from_px(to_px(value, src), dst)


@dataclass(frozen=True)
class PageSpec:
    """Printable area of one sheet, margins already removed."""

    printable_width: float
    printable_height: float
    unit: Unit = Unit.CM


def page_spec_for(paper: str = "A4", unit: Union[Unit, str] = Unit.CM, *, margin_in: float = PRINT_MARGIN_IN) -> PageSpec:
    if paper not in PAPER_SIZES:
        raise ValueError(f"Unknown paper size: {paper!r} (expected one of {sorted(PAPER_SIZES)})")
    w_in, h_in = PAPER_SIZES[paper]
    pw = w_in - 2 * margin_in
    ph = h_in - 2 * margin_in
    if pw <= 0 or ph <= 0:
        raise ValueError(f"Margin {fmt(margin_in)}in leaves no printable area on {paper}")
    return PageSpec(
        printable_width=convert(pw, Unit.INCH, unit),
        printable_height=convert(ph, Unit.INCH, unit),
        unit=Unit(unit),
    )


def page_in_unit(page: PageSpec, unit: Union[Unit, str]) -> PageSpec:
    """The same printable area expressed in another unit."""

    if Unit(page.unit) == Unit(unit):
        return page
    return PageSpec(
        printable_width=convert(page.printable_width, page.unit, unit),
        printable_height=convert(page.printable_height, page.unit, unit),
        unit=Unit(unit),
    )


class Edge(str, Enum):
    TOP = "top"
    BOTTOM = "bottom"
    LEFT = "left"
    RIGHT = "right"


EDGE_ARROWS = {
    Edge.TOP: "▲",
    Edge.BOTTOM: "▼",
    Edge.LEFT: "◄",
    Edge.RIGHT: "►",
}

OPPOSITE_EDGE = {
    Edge.TOP: Edge.BOTTOM,
    Edge.BOTTOM: Edge.TOP,
    Edge.LEFT: Edge.RIGHT,
    Edge.RIGHT: Edge.LEFT,
}


@dataclass(frozen=True)
class JoinMark:
    edge: Edge
    target_row: int
    target_col: int

    def label(self) -> str:
        return f"{EDGE_ARROWS[self.edge]} Join to R{self.target_row + 1}, C{self.target_col + 1}"


@dataclass(frozen=True)
class PageTile:
    row: int
    col: int
    offset_x: float
    offset_y: float
    marks: Tuple[JoinMark, ...]
    index: int  # 1-based, row-major

    def mark(self, edge: Edge) -> Optional[JoinMark]:
        for m in self.marks:
            if m.edge == edge:
                return m
        return None


@dataclass(frozen=True)
class PageLayout:
    columns: int
    rows: int
    page: PageSpec
    tiles: Tuple[PageTile, ...]

    @property
    def page_count(self) -> int:
        return self.columns * self.rows

    def tile_at(self, row: int, col: int) -> PageTile:
        if not (0 <= row < self.rows and 0 <= col < self.columns):
            raise IndexError(f"no page at row {row}, col {col}")
        return self.tiles[row * self.columns + col]


def join_marks(row: int, col: int, rows: int, columns: int) -> Tuple[JoinMark, ...]:
    marks: List[JoinMark] = []
    if row > 0:
        marks.append(JoinMark(Edge.TOP, row - 1, col))
    if row < rows - 1:
        marks.append(JoinMark(Edge.BOTTOM, row + 1, col))
    if col > 0:
        marks.append(JoinMark(Edge.LEFT, row, col - 1))
    if col < columns - 1:
        marks.append(JoinMark(Edge.RIGHT, row, col + 1))
    return tuple(marks)


def grid_size(width: float, height: float, page: PageSpec) -> Tuple[int, int]:
    """(columns, rows) of the smallest page grid covering width x height."""

    columns = max(1, math.ceil(width / page.printable_width))
    rows = max(1, math.ceil(height / page.printable_height))
    return columns, rows


def tile_box(bbox: BBox, page: PageSpec, *, max_pages: int = DEFAULT_MAX_PAGES) -> PageLayout:
    if not (page.printable_width > 0 and page.printable_height > 0):
        raise ValueError("Printable page width and height must be > 0")
    if not (math.isfinite(page.printable_width) and math.isfinite(page.printable_height)):
        raise ValueError("Printable page width and height must be finite")
    if not (math.isfinite(bbox.width) and math.isfinite(bbox.height)):
        raise ValueError(f"Cannot tile a pattern of size {bbox.width} x {bbox.height}")
    if max_pages < 1:
        raise ValueError("max_pages must be >= 1")

    columns, rows = grid_size(bbox.width, bbox.height, page)
    if columns * rows > max_pages:
        raise PatternTooLargeError(
            f"This pattern is too large to print automatically ({columns * rows} pages, "
            f"limit {max_pages}). Download the SVG and tile it in a vector editor instead."
        )

    tiles: List[PageTile] = []
    for row in range(rows):
        for col in range(columns):
            tiles.append(
                PageTile(
                    row=row,
                    col=col,
                    offset_x=-col * page.printable_width,
                    offset_y=-row * page.printable_height,
                    marks=join_marks(row, col, rows, columns),
                    index=row * columns + col + 1,
                )
            )
    return PageLayout(columns=columns, rows=rows, page=page, tiles=tuple(tiles))


def tile_pattern(
    outline: Union[CylinderOutline, FrustumOutline],
    page: PageSpec,
    *,
    max_pages: int = DEFAULT_MAX_PAGES,
) -> PageLayout:
    # The layout's page is in the pattern unit, whatever unit `page` came in.
    return tile_box(outline.bbox, page_in_unit(page, outline.dims.unit), max_pages=max_pages)


# ---------------------- Page rendering ----------------------


def _mark_position(edge: Edge, pw: float, ph: float, inset: float) -> Tuple[float, float, str]:
    if edge == Edge.TOP:
        return pw / 2, inset, "hanging"
    if edge == Edge.BOTTOM:
        return pw / 2, ph - inset, "auto"
    if edge == Edge.LEFT:
        return inset, ph / 2, "middle"
    return pw - inset, ph / 2, "middle"


_MARK_ANCHOR = {
    Edge.TOP: "middle",
    Edge.BOTTOM: "middle",
    Edge.LEFT: "start",
    Edge.RIGHT: "end",
}


def make_page_svg(
    body: str,
    extent: BBox,
    layout: PageLayout,
    tile: PageTile,
    *,
    title: str = "Lampshade pattern",
    print_unit: Union[Unit, str, None] = None,
    stroke: float = 1.0,
) -> str:
    """One printed page: the pattern body shifted by the tile offset and cropped.

    `body` is SVG markup in pattern coordinates; `extent` is the box the grid
    was laid over, whose top-left is the origin of the first page. Both must
    be in `layout.page.unit`, which tile_pattern guarantees.
    """

    page = layout.page
    unit = Unit(page.unit).value
    pw, ph = page.printable_width, page.printable_height
    shown_unit = Unit(print_unit) if print_unit is not None else Unit(page.unit)

    small = from_px(12, page.unit)  # ~9pt
    tiny = from_px(9.5, page.unit)  # ~7pt
    inset = from_px(5, page.unit)
    line = from_px(max(0.001, float(stroke)), page.unit)

    total_w = convert(extent.width, page.unit, shown_unit)
    total_h = convert(extent.height, page.unit, shown_unit)

    gx = tile.offset_x - extent.min_x
    gy = tile.offset_y - extent.min_y

    out: List[str] = [
        "<?xml version=\"1.0\" encoding=\"UTF-8\"?>\n",
        f"<svg xmlns=\"http://www.w3.org/2000/svg\" width=\"{fmt(pw)}{unit}\" height=\"{fmt(ph)}{unit}\" "
        f"viewBox=\"0 0 {fmt(pw)} {fmt(ph)}\">\n",
        f"  <title>{title} - page {tile.index} of {layout.page_count}</title>\n",
        "  <style>\n",
        f"    .cut {{ fill: none; stroke: #000000; stroke-width: {fmt(line)}; }}\n",
        f"    .allowance {{ fill: none; stroke: #666666; stroke-width: {fmt(line)}; stroke-dasharray: {fmt(line * 4)} {fmt(line * 4)}; }}\n",
        f"    .frame {{ fill: none; stroke: #cccccc; stroke-width: {fmt(line)}; stroke-dasharray: {fmt(line * 3)} {fmt(line * 3)}; }}\n",
        f"    .info {{ fill: #666666; font-family: Arial, sans-serif; font-size: {fmt(small)}px; }}\n",
        f"    .assembly {{ fill: #666666; font-family: Arial, sans-serif; font-size: {fmt(tiny)}px; }}\n",
        f"    .mark {{ fill: #333333; font-family: Arial, sans-serif; font-size: {fmt(small)}px; }}\n",
        "  </style>\n",
        f"  <g id=\"PATTERN\" transform=\"translate({fmt(gx)},{fmt(gy)})\">\n",
        f"    {body}\n",
        "  </g>\n",
        f"  <rect class=\"frame\" x=\"0\" y=\"0\" width=\"{fmt(pw)}\" height=\"{fmt(ph)}\"/>\n",
        "  <g id=\"INFO\">\n",
        f"    <text class=\"info\" x=\"{fmt(inset)}\" y=\"{fmt(inset)}\" dominant-baseline=\"hanging\">"
        f"{title} - Page {tile.index} of {layout.page_count}</text>\n",
        f"    <text class=\"info\" x=\"{fmt(inset)}\" y=\"{fmt(inset + small * 1.2)}\" dominant-baseline=\"hanging\">"
        f"Total size: {total_w:.2f} x {total_h:.2f} {shown_unit.value}</text>\n",
        f"    <text class=\"assembly\" x=\"{fmt(pw - inset)}\" y=\"{fmt(ph - inset - small * 1.5)}\" text-anchor=\"end\">"
        f"(Row {tile.row + 1}, Col {tile.col + 1})</text>\n",
        "  </g>\n",
    ]

    if tile.marks:
        out.append("  <g id=\"JOIN_MARKS\">\n")
        for m in tile.marks:
            x, y, baseline = _mark_position(m.edge, pw, ph, inset)
            out.append(
                f"    <text class=\"mark\" data-edge=\"{m.edge.value}\" x=\"{fmt(x)}\" y=\"{fmt(y)}\" "
                f"text-anchor=\"{_MARK_ANCHOR[m.edge]}\" dominant-baseline=\"{baseline}\">{m.label()}</text>\n"
            )
        out.append("  </g>\n")

    out.append("</svg>\n")
    return "".join(out)


def make_page_svgs(body: str, extent: BBox, layout: PageLayout, **kwargs) -> List[str]:
    return [make_page_svg(body, extent, layout, tile, **kwargs) for tile in layout.tiles]
