import numpy as np
import pytest
from PIL import Image, ImageCms

from gbc_transform.errors import DecodeError, EncodeError
from gbc_transform.image_io import _convert_to_srgb_rgba, load_image_rgba, save_image_rgba


def test_png_round_trip(tmp_path, noisy_image):
    img = noisy_image.copy()
    img[0, 0, 3] = 0
    path = save_image_rgba(tmp_path / "out.png", img)
    assert np.array_equal(load_image_rgba(path), img)
    assert sorted(p.name for p in tmp_path.iterdir()) == ["out.png"]


def test_jpeg_drops_alpha(tmp_path, noisy_image):
    path = save_image_rgba(tmp_path / "out.jpg", noisy_image)
    loaded = load_image_rgba(path)
    assert loaded.shape == noisy_image.shape
    assert (loaded[..., 3] == 255).all()


def test_unknown_extension(tmp_path, noisy_image):
    with pytest.raises(EncodeError):
        save_image_rgba(tmp_path / "out.notaformat", noisy_image)
    assert list(tmp_path.iterdir()) == []


def test_missing_directory(tmp_path, noisy_image):
    with pytest.raises(EncodeError):
        save_image_rgba(tmp_path / "nope" / "out.png", noisy_image)


def test_missing_input(tmp_path):
    with pytest.raises(DecodeError):
        load_image_rgba(tmp_path / "missing.png")


def test_corrupt_input(tmp_path):
    bad = tmp_path / "bad.png"
    bad.write_bytes(b"definitely not a png")
    with pytest.raises(DecodeError):
        load_image_rgba(bad)


@pytest.mark.parametrize("name", ["out.ppm", "out.pgm", "out.pcx"])
def test_formats_without_alpha_drop_it(tmp_path, noisy_image, name):
    path = save_image_rgba(tmp_path / name, noisy_image)
    assert sorted(p.name for p in tmp_path.iterdir()) == [name]
    loaded = load_image_rgba(path)
    assert loaded.shape == noisy_image.shape
    assert (loaded[..., 3] == 255).all()


def test_icc_profile_applied_to_source_mode(monkeypatch):
    seen = []

    def fake_profile_to_profile(im, src, dst, **kwargs):
        seen.append(im.mode)
        return im.convert("RGBA")

    monkeypatch.setattr(ImageCms, "profileToProfile", fake_profile_to_profile)
    im = Image.new("L", (2, 2), 90)
    im.info["icc_profile"] = ImageCms.ImageCmsProfile(ImageCms.createProfile("sRGB")).tobytes()
    out = _convert_to_srgb_rgba(im)
    assert seen == ["L"]
    assert out.mode == "RGBA"
