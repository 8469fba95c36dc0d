#!/usr/bin/env python3
"""
Suggest texture.lon_offset_deg for an equirectangular Earth texture by finding
the column where the image wraps around most smoothly.

  PYTHONPATH=$PWD python tools/estimate_texture_seam.py earth.jpg
"""
from __future__ import annotations

import argparse
import sys
from pathlib import Path

from earthclock.texture import load_texture


def parse_args() -> argparse.Namespace:
    ap = argparse.ArgumentParser(description="Estimate the seam column of an equirectangular texture.")
    ap.add_argument("texture", type=Path, help="Texture image (any format Pillow reads)")
    return ap.parse_args()


def main() -> int:
    args = parse_args()
    if not args.texture.exists():
        print(f"ERROR: texture not found: {args.texture}", file=sys.stderr)
        return 2

    tex = load_texture(args.texture)
    col, offset_deg = tex.estimate_seam_offset()

    print(f"Texture : {args.texture}  ({tex.width}x{tex.height}, {tex.channels} ch)")
    print(f"Seam    : column {col}")
    print(f"Offset  : {offset_deg:.3f} deg")
    print(f"Use     : EC_TEX_LON_OFFSET_DEG={offset_deg:.3f}  or  [texture] lon_offset_deg = {offset_deg:.3f}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
