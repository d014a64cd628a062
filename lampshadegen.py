#!/usr/bin/env python3
"""lampshadegen.py

Printable sewing / craft patterns for lampshade frames.

Give the shade style (drum, cone or empire), its top and bottom diameters and
its vertical height; get back:
- a full-size SVG of the flat pattern, sized in physical units (cm / in / px),
- one SVG per printed page when the pattern does not fit on a single sheet,
  each with "Join to Rn, Cm" marks on the edges that meet another page.

Notes:
- Drum shades unroll to a rectangle (width = circumference).
- Cone / empire shades unroll to an annular sector; the bottom diameter must be
  strictly larger than the top one.
- Optional seam allowance: the outline is offset outward with pyclipper and
  drawn as a dashed guide line. Without pyclipper the allowance is skipped
  with a warning.
- Print tiling follows the browser print flow of the original tool: A4 or US
  Letter, 0.5in margins, at most 50 pages unless --max-pages says otherwise.
"""

from __future__ import annotations

import argparse
import json
import math
import os
import sys
import textwrap
from dataclasses import asdict, dataclass
from typing import Dict, List, Optional, Tuple

from lampshade_geometry import (
    SHADE_STYLES,
    BBox,
    GeometryError,
    PatternOutline,
    Point,
    ShadeDimensions,
    ShapeClass,
    Unit,
    FrustumOutline,
    compute_pattern,
    fmt,
    polar,
    polyline_to_path,
)
from lampshade_tiles import (
    DEFAULT_MAX_PAGES,
    PAPER_SIZES,
    PRINT_MARGIN_IN,
    PageLayout,
    PatternTooLargeError,
    convert,
    from_px,
    make_page_svgs,
    page_spec_for,
    tile_box,
)

__version__ = "0.3"

UNITS = [u.value for u in Unit]


@dataclass
class WarningMsg:
    severity: str  # error|warn|info
    code: str
    message: str
    fix: str


@dataclass
class PatternParams:
    shape: str = "cone"  # drum | cone | empire
    top_diameter: float = 20.0
    bottom_diameter: float = 30.0
    height: float = 20.0
    unit: str = "cm"

    # Print tiling
    paper: str = "A4"
    print_unit: Optional[str] = None  # defaults to unit
    margin_in: float = PRINT_MARGIN_IN
    max_pages: int = DEFAULT_MAX_PAGES

    seam_allowance: float = 0.0
    arc_segments: int = 96

    labels: bool = True
    stroke_px: float = 1.0


def params_from_dict(params: dict) -> PatternParams:
    if not isinstance(params, dict):
        raise TypeError("params must be a dict")

    d = PatternParams()
    shape = str(params.get("shape", d.shape)).strip().lower()
    bottom = float(params.get("bottom_diameter", d.bottom_diameter))
    top = float(params.get("top_diameter", d.top_diameter))
    if "diameter" in params:
        # Drum shorthand: one diameter for both rims.
        top = bottom = float(params["diameter"])
    print_unit = params.get("print_unit", None)

    return PatternParams(
        shape=shape,
        top_diameter=top,
        bottom_diameter=bottom,
        height=float(params.get("height", d.height)),
        unit=str(params.get("unit", d.unit)).strip(),
        paper=str(params.get("paper", d.paper)).strip(),
        print_unit=None if print_unit is None else str(print_unit).strip(),
        margin_in=float(params.get("margin_in", d.margin_in)),
        max_pages=int(params.get("max_pages", d.max_pages)),
        seam_allowance=float(params.get("seam_allowance", d.seam_allowance)),
        arc_segments=int(params.get("arc_segments", d.arc_segments)),
        labels=bool(params.get("labels", d.labels)),
        stroke_px=float(params.get("stroke_px", d.stroke_px)),
    )


def validate_params(p: PatternParams) -> List[WarningMsg]:
    warns: List[WarningMsg] = []

    if p.shape not in SHADE_STYLES:
        warns.append(WarningMsg("error", "UNKNOWN_SHAPE", f"Unknown shade style {p.shape!r}.",
                                f"Use one of: {', '.join(SHADE_STYLES)}."))
    if p.unit not in UNITS:
        warns.append(WarningMsg("error", "UNKNOWN_UNIT", f"Unknown unit {p.unit!r}.", f"Use one of: {', '.join(UNITS)}."))
    if p.print_unit is not None and p.print_unit not in UNITS:
        warns.append(WarningMsg("error", "UNKNOWN_PRINT_UNIT", f"Unknown print unit {p.print_unit!r}.",
                                f"Use one of: {', '.join(UNITS)}."))
    if p.paper not in PAPER_SIZES:
        warns.append(WarningMsg("error", "UNKNOWN_PAPER", f"Unknown paper size {p.paper!r}.",
                                f"Use one of: {', '.join(PAPER_SIZES)}."))

    tapered = SHADE_STYLES.get(p.shape) == ShapeClass.FRUSTUM
    # A drum only uses the bottom diameter.
    numbers = ["bottom_diameter", "height", "margin_in", "seam_allowance", "stroke_px"]
    if tapered:
        numbers.insert(0, "top_diameter")
    not_finite = [name for name in numbers if not math.isfinite(getattr(p, name))]
    for name in not_finite:
        warns.append(WarningMsg("error", name.upper(), f"{name} must be a finite number (got {getattr(p, name)}).",
                                f"Set {name} to a real value."))
    if not_finite:
        return warns

    if tapered and p.top_diameter <= 0:
        warns.append(WarningMsg("error", "TOP_DIAMETER", "Diameter must be greater than zero.", "Increase top_diameter."))
    if p.bottom_diameter <= 0:
        warns.append(WarningMsg("error", "BOTTOM_DIAMETER", "Diameter must be greater than zero.", "Increase bottom_diameter."))
    if p.height <= 0:
        warns.append(WarningMsg("error", "HEIGHT", "Height must be greater than zero.", "Increase height."))
    if tapered and p.top_diameter >= p.bottom_diameter:
        # Same code and wording compute_pattern would raise.
        warns.append(WarningMsg("error", "INVALID_TAPER",
                                "Bottom diameter must be larger than top diameter for cone/empire shades "
                                f"(got top {fmt(p.top_diameter)}, bottom {fmt(p.bottom_diameter)}).",
                                "Swap the diameters or choose the drum style."))

    if p.margin_in < 0:
        warns.append(WarningMsg("error", "MARGIN_IN", "Page margin must be >= 0.", "Set margin_in to 0 or more."))
    elif p.paper in PAPER_SIZES and 2 * p.margin_in >= min(PAPER_SIZES[p.paper]):
        warns.append(WarningMsg("error", "MARGIN_IN", f"Margin {fmt(p.margin_in)}in leaves no printable area on {p.paper}.",
                                "Use a smaller margin_in."))
    if p.seam_allowance < 0:
        warns.append(WarningMsg("error", "SEAM_ALLOWANCE", "Seam allowance must be >= 0.", "Set seam_allowance to 0 or more."))
    if p.max_pages < 1:
        warns.append(WarningMsg("error", "MAX_PAGES", "max_pages must be >= 1.", "Increase max_pages."))
    if p.arc_segments < 8:
        warns.append(WarningMsg("warn", "ARC_SEGMENTS", "Few arc segments; the seam allowance will look faceted.",
                                "Use arc_segments >= 32."))
    return warns


def dimensions_from_params(p: PatternParams) -> ShadeDimensions:
    unit = Unit(p.unit)
    if SHADE_STYLES[p.shape] == ShapeClass.CYLINDER:
        return ShadeDimensions.drum(p.bottom_diameter, p.height, unit)
    return ShadeDimensions.cone(p.top_diameter, p.bottom_diameter, p.height, unit)


def describe(p: PatternParams) -> str:
    style = p.shape.capitalize()
    if SHADE_STYLES.get(p.shape) == ShapeClass.CYLINDER:
        return f"{style}: Ø{fmt(p.bottom_diameter)} x {fmt(p.height)} {p.unit}"
    return f"{style}: {fmt(p.top_diameter)}/{fmt(p.bottom_diameter)} x {fmt(p.height)} {p.unit}"


# ---------------------- Seam allowance ----------------------


def try_import_pyclipper():
    try:
        import pyclipper  # type: ignore

        return pyclipper
    except Exception:
        return None


def offset_polygon_pyclipper(points: List[Point], delta: float, *, arc_tolerance: float = 0.01) -> Optional[List[Point]]:
    pc = try_import_pyclipper()
    if pc is None:
        return None
    if len(points) < 3:
        return None
    scale = 1000.0
    path = [(int(round(x * scale)), int(round(y * scale))) for x, y in points]
    co = pc.PyclipperOffset()
    co.ArcTolerance = max(1.0, arc_tolerance * scale)
    co.AddPath(path, pc.JT_ROUND, pc.ET_CLOSEDPOLYGON)
    res = co.Execute(delta * scale)
    if not res:
        return None

    # choose the largest area result
    def area_i(poly):
        a = 0
        for (x0, y0), (x1, y1) in zip(poly, poly[1:] + poly[:1]):
            a += x0 * y1 - x1 * y0
        return abs(a)

    best = max(res, key=area_i)
    return [(p[0] / scale, p[1] / scale) for p in best]


def seam_allowance_outline(outline: PatternOutline, allowance: float, *, segments: int = 96) -> Optional[List[Point]]:
    if allowance <= 0:
        return None
    return offset_polygon_pyclipper(outline.polygon(segments), allowance, arc_tolerance=allowance / 100.0)


# ---------------------- SVG ----------------------


def label_anchor(outline: PatternOutline) -> Point:
    if isinstance(outline, FrustumOutline):
        return polar((outline.inner_radius + outline.outer_radius) / 2, 0.0)
    return (outline.width / 2, outline.height / 2)


def pattern_body(outline: PatternOutline, allowance: Optional[List[Point]]) -> str:
    parts = [outline.to_svg_element("cut")]
    if allowance:
        parts.append(f'<path class="allowance" d="{polyline_to_path(allowance, close=True)}"/>')
    return "\n    ".join(parts)


def rendered_extent(outline: PatternOutline, allowance: Optional[List[Point]]) -> BBox:
    if not allowance:
        return outline.bbox
    return outline.bbox.union(BBox.from_points(allowance))


def make_svg(
    outline: PatternOutline,
    *,
    meta: dict,
    title: str,
    allowance: Optional[List[Point]] = None,
    labels: bool = True,
    stroke_px: float = 1.0,
) -> str:
    unit = Unit(outline.dims.unit).value
    extent = rendered_extent(outline, allowance)
    line = from_px(max(0.001, float(stroke_px)), unit)
    font = from_px(16, unit)
    meta_comment = "\n".join(textwrap.wrap(json.dumps(meta, ensure_ascii=False), width=120))

    out: List[str] = [
        "<?xml version=\"1.0\" encoding=\"UTF-8\"?>\n",
        f"<svg xmlns=\"http://www.w3.org/2000/svg\" width=\"{fmt(extent.width)}{unit}\" "
        f"height=\"{fmt(extent.height)}{unit}\" viewBox=\"{extent.view_box()}\">\n",
        "  <title>Lampshade Pattern</title>\n",
        f"  <desc>{title}. Generated by lampshadegen v{__version__}</desc>\n",
        "  <style>\n",
        f"    .cut {{ fill: none; stroke: #000000; stroke-width: {fmt(line)}; }}\n",
        f"    .allowance {{ fill: none; stroke: #666666; stroke-width: {fmt(line)}; stroke-dasharray: {fmt(line * 4)} {fmt(line * 4)}; }}\n",
        f"    .text {{ fill: #000000; font-family: Arial, sans-serif; font-size: {fmt(font)}px; }}\n",
        "  </style>\n",
        f"  <!-- params: {meta_comment} -->\n",
        "  <g id=\"CUT\">\n",
        f"    {outline.to_svg_element('cut')}\n",
        "  </g>\n",
    ]
    if allowance:
        out.append("  <g id=\"ALLOWANCE\">\n")
        out.append(f"    <path class=\"allowance\" d=\"{polyline_to_path(allowance, close=True)}\"/>\n")
        out.append("  </g>\n")
    if labels:
        lx, ly = label_anchor(outline)
        out.append("  <g id=\"LABELS\" class=\"text\">\n")
        out.append(
            f"    <text x=\"{fmt(lx)}\" y=\"{fmt(ly)}\" text-anchor=\"middle\" dominant-baseline=\"middle\">{title}</text>\n"
        )
        out.append("  </g>\n")
    out.append("</svg>\n")
    return "".join(out)


def pattern_details(outline: PatternOutline, print_unit: str) -> Dict[str, float]:
    """The figures a maker needs next to the drawing, in the print unit."""

    src = outline.dims.unit

    def conv(v: float) -> float:
        return round(convert(v, src, print_unit), 3)

    details = {
        "pattern_width": conv(outline.width),
        "pattern_height": conv(outline.height),
    }
    if isinstance(outline, FrustumOutline):
        details["slant_height"] = conv(outline.slant_height)
        details["inner_radius"] = conv(outline.inner_radius)
        details["outer_radius"] = conv(outline.outer_radius)
        details["sector_angle_deg"] = round(math.degrees(outline.angle), 3)
        details["top_arc_length"] = conv(outline.top_arc_length)
        details["bottom_arc_length"] = conv(outline.bottom_arc_length)
    else:
        details["circumference"] = conv(outline.circumference)
    return details


def _warn_dicts(warns: List[WarningMsg]) -> List[dict]:
    return [w.__dict__.copy() for w in (warns or [])]


def _blocked(warns: List[WarningMsg], meta: dict) -> dict:
    return {"svg": "", "pages": [], "warnings": _warn_dicts(warns), "details": {}, "meta": meta}


def build_pattern(p: PatternParams) -> Tuple[PatternOutline, Optional[List[Point]], List[WarningMsg]]:
    """Outline plus optional seam allowance. Raises GeometryError."""

    warns: List[WarningMsg] = []
    outline = compute_pattern(dimensions_from_params(p))
    allowance = None
    if p.seam_allowance > 0:
        allowance = seam_allowance_outline(outline, p.seam_allowance, segments=p.arc_segments)
        if allowance is None:
            warns.append(WarningMsg("warn", "SEAM_ALLOWANCE_SKIPPED",
                                    "Seam allowance was not drawn (pyclipper is unavailable or the offset failed).",
                                    "Install pyclipper, or add the allowance by hand when cutting."))
    return outline, allowance, warns


def layout_pages(p: PatternParams, extent: BBox) -> PageLayout:
    """Raises PatternTooLargeError."""

    page = page_spec_for(p.paper, p.unit, margin_in=p.margin_in)
    return tile_box(extent, page, max_pages=p.max_pages)


def generate_pattern(params: dict) -> dict:
    """Public API.

    Returns a JSON-serializable dict:
      {"svg": str, "pages": [str, ...], "warnings": [{severity, code, message, fix}, ...],
       "details": dict, "meta": dict}

    Input and geometry errors come back as severity "error" warnings with no
    SVG. A pattern too large to tile still returns its SVG, but no pages.
    """

    p = params_from_dict(params)
    meta = {"generator": f"lampshadegen v{__version__}", "params": asdict(p)}

    warns = validate_params(p)
    if any(w.severity == "error" for w in warns):
        return _blocked(warns, meta)

    try:
        outline, allowance, more = build_pattern(p)
    except GeometryError as e:
        warns.append(WarningMsg("error", e.code, str(e), "Adjust the diameters or height and try again."))
        return _blocked(warns, meta)
    warns.extend(more)

    title = describe(p)
    print_unit = p.print_unit or p.unit
    extent = rendered_extent(outline, allowance)
    svg = make_svg(outline, meta=meta, title=title, allowance=allowance, labels=p.labels, stroke_px=p.stroke_px)
    details = pattern_details(outline, print_unit)

    pages: List[str] = []
    try:
        layout = layout_pages(p, extent)
    except PatternTooLargeError as e:
        warns.append(WarningMsg("error", e.code, str(e), "Use larger paper, raise max_pages, or tile the SVG by hand."))
    else:
        meta["layout"] = {"columns": layout.columns, "rows": layout.rows, "page_count": layout.page_count}
        pages = make_page_svgs(
            pattern_body(outline, allowance),
            extent,
            layout,
            title=f"Lampshade pattern ({title})",
            print_unit=print_unit,
            stroke=p.stroke_px,
        )

    return {
        "svg": svg,
        "pages": pages,
        "warnings": _warn_dicts(warns),
        "details": details,
        "meta": meta,
    }


# ---------------------- CLI ----------------------


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    ap = argparse.ArgumentParser(
        formatter_class=argparse.RawTextHelpFormatter,
        description=(
            "Lampshade pattern generator: flat pattern SVG plus printable page tiles.\n\n"
            "Styles: drum (cylinder), cone / empire (tapered; top < bottom)\n"
        ),
    )
    ap.add_argument("--shape", default="cone", choices=sorted(SHADE_STYLES), help="Shade style")
    ap.add_argument("--top-diameter", type=float, default=20.0)
    ap.add_argument("--bottom-diameter", type=float, default=30.0)
    ap.add_argument("--diameter", type=float, default=None, help="Drum shorthand: sets both diameters")
    ap.add_argument("--height", type=float, default=20.0, help="Vertical (not slant) height")
    ap.add_argument("--unit", default="cm", choices=UNITS)

    ap.add_argument("--paper", default="A4", choices=sorted(PAPER_SIZES))
    ap.add_argument("--print-unit", default=None, choices=UNITS, help="Unit for printed sizes (default: --unit)")
    ap.add_argument("--margin-in", type=float, default=PRINT_MARGIN_IN, help="Page margin in inches (default %(default)s)")
    ap.add_argument("--max-pages", type=int, default=DEFAULT_MAX_PAGES, help="Refuse to tile beyond this many pages")

    ap.add_argument("--seam-allowance", type=float, default=0.0, help="Dashed allowance line offset (pattern unit)")
    ap.add_argument("--arc-segments", type=int, default=96, help="Arc flattening used for the seam allowance")
    ap.add_argument("--stroke", type=float, default=1.0, help="Line width in px")
    ap.add_argument("--no-labels", action="store_true")

    ap.add_argument("--out", default=None, help="Output path for the full-size pattern SVG")
    ap.add_argument("--pages-dir", default=None, help="Directory for one SVG per printed page")
    ap.add_argument("--details", action="store_true", help="Print pattern details")
    return ap.parse_args(argv)


def params_from_args(args: argparse.Namespace) -> dict:
    params = {
        "shape": args.shape,
        "top_diameter": args.top_diameter,
        "bottom_diameter": args.bottom_diameter,
        "height": args.height,
        "unit": args.unit,
        "paper": args.paper,
        "print_unit": args.print_unit,
        "margin_in": args.margin_in,
        "max_pages": args.max_pages,
        "seam_allowance": args.seam_allowance,
        "arc_segments": args.arc_segments,
        "labels": not args.no_labels,
        "stroke_px": args.stroke,
    }
    if args.diameter is not None:
        params["diameter"] = args.diameter
    return params


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    res = generate_pattern(params_from_args(args))
    warns = res["warnings"]

    errs = [w for w in warns if w["severity"] == "error"]
    if not res["svg"]:
        print("PATTERN NOT GENERATED (errors):", file=sys.stderr)
        for w in errs:
            print("-", w["code"], w["message"], "| fix:", w["fix"], file=sys.stderr)
        return 1

    if args.out:
        with open(args.out, "w", encoding="utf-8") as f:
            f.write(res["svg"])
        print(f"Wrote {args.out}")

    if args.pages_dir and res["pages"]:
        os.makedirs(args.pages_dir, exist_ok=True)
        for i, svg in enumerate(res["pages"], start=1):
            out_path = os.path.join(args.pages_dir, f"page_{i:02d}.svg")
            with open(out_path, "w", encoding="utf-8") as f:
                f.write(svg)
        layout = res["meta"]["layout"]
        print(f"Wrote {layout['page_count']} pages ({layout['rows']} rows x {layout['columns']} columns) to {args.pages_dir}")

    if args.details:
        unit = args.print_unit or args.unit
        for k, v in res["details"].items():
            suffix = "" if k.endswith("_deg") else f" {unit}"
            print(f"{k.replace('_', ' ')}: {v}{suffix}")

    if errs:
        print("PRINT PAGES BLOCKED (errors):", file=sys.stderr)
        for w in errs:
            print("-", w["code"], w["message"], "| fix:", w["fix"], file=sys.stderr)
        return 1
    if warns:
        print("Warnings:")
        for w in warns:
            print("-", w["severity"], w["code"], w["message"], "| fix:", w["fix"])
    print("OK")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
