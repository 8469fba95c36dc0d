#!/usr/bin/env python3
"""
Write a synthetic equirectangular Earth texture so earthclock runs without
downloaded imagery:

  PYTHONPATH=$PWD python scripts/make_test_texture.py --out earth.jpg --nlon 1440 --nlat 720
"""
from __future__ import annotations

import argparse
from pathlib import Path

from PIL import Image

from earthclock.texture import toy_land_ocean_rgb


def main() -> None:
    ap = argparse.ArgumentParser(description="Write a toy land/ocean equirectangular texture.")
    ap.add_argument("--out", type=Path, default=Path("earth.jpg"))
    ap.add_argument("--nlon", type=int, default=1440, help="Number of longitude pixels (e.g. 1440 = 0.25 deg)")
    ap.add_argument("--nlat", type=int, default=720, help="Number of latitude pixels (e.g. 720 = 0.25 deg)")
    args = ap.parse_args()

    rgb = toy_land_ocean_rgb(args.nlon, args.nlat)

    args.out.parent.mkdir(parents=True, exist_ok=True)
    Image.fromarray(rgb).save(args.out)

    print(f"Wrote: {args.out}")
    print(f"  shape={rgb.shape} dtype={rgb.dtype} mean RGB={rgb.reshape(-1, 3).mean(axis=0).round(1).tolist()}")


if __name__ == "__main__":
    main()
