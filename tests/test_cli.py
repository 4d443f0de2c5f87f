import numpy as np

from gbc_transform.cli import main
from gbc_transform.image_io import load_image_rgba, save_image_rgba

from conftest import solid


def test_converts_image(tmp_path, quadrants, capsys):
    src = save_image_rgba(tmp_path / "in.png", quadrants)
    dst = tmp_path / "out.png"
    code = main([str(src), "-o", str(dst), "-p", "4", "-n", "10", "--workers", "1"])
    assert code == 0
    assert np.array_equal(load_image_rgba(dst), quadrants)
    assert "Wrote" in capsys.readouterr().out


def test_debug_output(tmp_path, quadrants, capsys):
    src = save_image_rgba(tmp_path / "in.png", quadrants)
    code = main([str(src), "-o", str(tmp_path / "o.png"), "--debug", "--workers", "1"])
    assert code == 0
    out = capsys.readouterr().out
    assert "[debug] palette:" in out
    assert "#ff0000" in out


def test_fully_transparent_writes_nothing(tmp_path, capsys):
    src = save_image_rgba(tmp_path / "in.png", solid(2, 2, (0, 0, 0, 0)))
    dst = tmp_path / "out.png"
    assert main([str(src), "-o", str(dst), "-n", "10"]) == 1
    assert not dst.exists()
    assert "zero eligible pixels" in capsys.readouterr().err


def test_missing_input(tmp_path, capsys):
    assert main([str(tmp_path / "missing.png"), "-o", str(tmp_path / "o.png")]) == 2
    assert "not found" in capsys.readouterr().err


def test_invalid_factor(tmp_path, quadrants, capsys):
    src = save_image_rgba(tmp_path / "in.png", quadrants)
    dst = tmp_path / "out.png"
    assert main([str(src), "-o", str(dst), "-p", "0"]) == 2
    assert not dst.exists()
