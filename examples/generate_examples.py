#!/usr/bin/env python3

import os
import sys

# Allow running this script directly (sys.path[0] is examples/).
sys.path.insert(0, os.path.dirname(os.path.dirname(__file__)))

import lampshadegen as gen


def generate(out_dir: str):
    os.makedirs(out_dir, exist_ok=True)

    examples = [
        (
            "cone_20_30_20cm",
            {"shape": "cone", "top_diameter": 20, "bottom_diameter": 30, "height": 20, "unit": "cm"},
        ),
        (
            "drum_30x20cm",
            {"shape": "drum", "diameter": 30, "height": 20, "unit": "cm"},
        ),
        (
            "empire_6_12_9in_letter",
            {
                "shape": "empire",
                "top_diameter": 6,
                "bottom_diameter": 12,
                "height": 9,
                "unit": "in",
                "paper": "Letter",
                "seam_allowance": 0.5,
            },
        ),
    ]

    for name, params in examples:
        res = gen.generate_pattern(params)
        if not res["svg"]:
            raise RuntimeError(f"{name}: {res['warnings']}")
        with open(os.path.join(out_dir, f"{name}.svg"), "w", encoding="utf-8") as f:
            f.write(res["svg"])
        for i, page in enumerate(res["pages"], start=1):
            with open(os.path.join(out_dir, f"{name}_page_{i:02d}.svg"), "w", encoding="utf-8") as f:
                f.write(page)


if __name__ == "__main__":
    generate(os.path.join(os.path.dirname(__file__), "out"))
