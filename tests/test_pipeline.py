import numpy as np
import pytest

from gbc_transform import TransformConfig, transform
from gbc_transform.errors import EmptyPaletteInputError, InvalidParameterError
from gbc_transform.pixelate import pixelate

from conftest import solid


def test_solid_red_is_unchanged():
    img = solid(4, 4, (255, 0, 0, 255))
    result = transform(img, TransformConfig(pixelation_factor=2, num_colours=10))
    assert result.palette.hex_codes() == ["#ff0000"]
    assert np.array_equal(result.image, img)


def test_two_colour_blocks_survive(quadrants):
    cfg = TransformConfig(pixelation_factor=4, num_colours=10)
    result = transform(quadrants, cfg)
    assert len(result.palette) <= 2
    assert np.array_equal(result.image, quadrants)


def test_three_colours_with_large_request():
    img = solid(3, 3, (0, 0, 0, 255))
    img[1] = (255, 255, 255, 255)
    img[2] = (0, 128, 0, 255)
    result = transform(img, TransformConfig(pixelation_factor=1, num_colours=56))
    assert len(result.palette) == 3
    assert np.array_equal(result.image, img)


def test_deterministic(noisy_image):
    cfg = TransformConfig(pixelation_factor=2, num_colours=10)
    a = transform(noisy_image, cfg, workers=2)
    b = transform(noisy_image, cfg, workers=2)
    assert a.image.tobytes() == b.image.tobytes()
    assert np.array_equal(a.palette.rgb, b.palette.rgb)


def test_fully_transparent_propagates():
    img = solid(2, 2, (0, 0, 0, 0))
    with pytest.raises(EmptyPaletteInputError):
        transform(img, TransformConfig(pixelation_factor=1, num_colours=10))


@pytest.mark.parametrize(
    "cfg",
    [
        TransformConfig(pixelation_factor=0),
        TransformConfig(num_colours=0),
        TransformConfig(width=0),
        TransformConfig(max_iter=0),
        TransformConfig(tol=-1.0),
    ],
)
def test_invalid_parameters_before_any_work(cfg, noisy_image):
    seen = []
    with pytest.raises(InvalidParameterError):
        transform(noisy_image, cfg, progress=lambda stage, stats: seen.append(stage))
    assert seen == []


def test_alpha_follows_pixelation(rng):
    img = rng.integers(0, 256, size=(12, 12, 4), dtype=np.uint8)
    result = transform(img, TransformConfig(pixelation_factor=3, num_colours=10))
    assert np.array_equal(result.image[..., 3], pixelate(img, 3)[..., 3])


def test_progress_stages_and_resize(noisy_image):
    seen = []
    cfg = TransformConfig(pixelation_factor=4, num_colours=10, width=16)
    result = transform(noisy_image, cfg, progress=lambda s, st: seen.append(s))
    assert seen == ["pixelate", "resize", "palette", "map"]
    assert result.image.shape == (16, 16, 4)
    assert result.stats["palette"]["Palette"] == len(result.palette)
