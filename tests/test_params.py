import pytest

import lampshadegen as gen
from lampshade_geometry import ShapeClass, Unit


def test_defaults_match_stock_cone():
    p = gen.params_from_dict({})
    assert (p.shape, p.top_diameter, p.bottom_diameter, p.height, p.unit) == ("cone", 20.0, 30.0, 20.0, "cm")
    assert p.max_pages == 50
    assert gen.validate_params(p) == []


def test_drum_uses_one_diameter():
    p = gen.params_from_dict({"shape": "Drum", "diameter": 30, "height": 20})
    dims = gen.dimensions_from_params(p)
    assert dims.shape == ShapeClass.CYLINDER
    assert dims.top_diameter == dims.bottom_diameter == 30.0
    assert gen.describe(p) == "Drum: Ø30 x 20 cm"


def test_drum_ignores_top_diameter():
    p = gen.params_from_dict({"shape": "drum", "top_diameter": 0, "bottom_diameter": 12, "height": 8})
    assert gen.validate_params(p) == []
    assert gen.dimensions_from_params(p).top_diameter == 12.0


def test_empire_is_tapered():
    p = gen.params_from_dict({"shape": "empire", "top_diameter": 15, "bottom_diameter": 35, "height": 25, "unit": "in"})
    dims = gen.dimensions_from_params(p)
    assert dims.shape == ShapeClass.FRUSTUM
    assert dims.unit == Unit.INCH
    assert gen.describe(p) == "Empire: 15/35 x 25 in"


def test_equal_rims_on_cone_are_rejected():
    p = gen.params_from_dict({"shape": "cone", "top_diameter": 25, "bottom_diameter": 25})
    assert [w.code for w in gen.validate_params(p)] == ["INVALID_TAPER"]


def test_negative_allowance_and_page_limit():
    p = gen.params_from_dict({"seam_allowance": -1, "max_pages": 0})
    codes = [w.code for w in gen.validate_params(p)]
    assert "SEAM_ALLOWANCE" in codes
    assert "MAX_PAGES" in codes


def test_few_arc_segments_only_warns():
    p = gen.params_from_dict({"arc_segments": 4})
    warns = gen.validate_params(p)
    assert [(w.severity, w.code) for w in warns] == [("warn", "ARC_SEGMENTS")]


def test_params_must_be_dict():
    with pytest.raises(TypeError):
        gen.params_from_dict([("shape", "cone")])


def test_skipped_allowance_warns(monkeypatch):
    monkeypatch.setattr(gen, "try_import_pyclipper", lambda: None)
    res = gen.generate_pattern({"seam_allowance": 1.0})
    assert res["svg"]
    assert [w["code"] for w in res["warnings"]] == ["SEAM_ALLOWANCE_SKIPPED"]
    assert 'id="ALLOWANCE"' not in res["svg"]


def test_non_finite_values_stop_validation():
    p = gen.params_from_dict({"height": float("nan"), "seam_allowance": float("inf")})
    assert [(w.severity, w.code) for w in gen.validate_params(p)] == [("error", "HEIGHT"), ("error", "SEAM_ALLOWANCE")]


def test_drum_top_diameter_may_be_anything():
    p = gen.params_from_dict({"shape": "drum", "top_diameter": float("nan"), "bottom_diameter": 12})
    assert gen.validate_params(p) == []


def test_negative_margin_is_rejected():
    p = gen.params_from_dict({"margin_in": -0.1})
    assert [w.code for w in gen.validate_params(p)] == ["MARGIN_IN"]
