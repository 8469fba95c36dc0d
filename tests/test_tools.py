from __future__ import annotations

import runpy
import sys
from pathlib import Path

import numpy as np
import pytest
from PIL import Image

ROOT = Path(__file__).resolve().parents[1]


def run_script(relpath: str, argv: list[str], monkeypatch):
    monkeypatch.setattr(sys, "argv", [relpath, *argv])
    return runpy.run_path(str(ROOT / relpath), run_name="__main__")


def test_make_test_texture(tmp_path, monkeypatch, capsys):
    out = tmp_path / "toy.png"
    run_script("scripts/make_test_texture.py", ["--out", str(out), "--nlon", "64", "--nlat", "32"], monkeypatch)
    assert "Wrote:" in capsys.readouterr().out
    with Image.open(out) as img:
        assert img.size == (64, 32)
        assert img.mode == "RGB"


def test_estimate_texture_seam(tmp_path, monkeypatch, capsys):
    a = np.zeros((8, 40, 3), dtype=np.uint8)
    a[...] = (4 * np.arange(40))[None, :, None]
    a[:, 10] = a[:, 9]
    p = tmp_path / "seam.png"
    Image.fromarray(a).save(p)

    with pytest.raises(SystemExit) as exc:
        run_script("tools/estimate_texture_seam.py", [str(p)], monkeypatch)
    assert exc.value.code == 0
    out = capsys.readouterr().out
    assert "Seam    : column 10" in out
    assert "Offset  : -90.000 deg" in out


def test_estimate_texture_seam_missing_file(tmp_path, monkeypatch, capsys):
    with pytest.raises(SystemExit) as exc:
        run_script("tools/estimate_texture_seam.py", [str(tmp_path / "nope.png")], monkeypatch)
    assert exc.value.code == 2
    assert "texture not found" in capsys.readouterr().err
