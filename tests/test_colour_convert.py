import numpy as np

from gbc_transform.colour_convert import (
    float_rgb_to_u8,
    lab_to_rgb,
    quantise_rgb555,
    rgb_to_lab,
    rgb_to_lab_threaded,
)


def test_white_and_black():
    lab = rgb_to_lab(np.array([[255, 255, 255], [0, 0, 0]], dtype=np.uint8))
    assert np.allclose(lab[0], [100.0, 0.0, 0.0], atol=0.05)
    assert np.allclose(lab[1], [0.0, 0.0, 0.0], atol=1e-6)


def test_uint8_and_float_inputs_agree():
    rgb = np.array([[255, 128, 0]], dtype=np.uint8)
    assert np.allclose(rgb_to_lab(rgb), rgb_to_lab(rgb / 255.0))


def test_lab_back_to_rgb_recovers_u8():
    steps = np.arange(0, 256, 17, dtype=np.uint8)
    grid = np.stack(np.meshgrid(steps, steps, steps, indexing="ij"), axis=-1)
    rgb = grid.reshape(-1, 3)
    back = float_rgb_to_u8(lab_to_rgb(rgb_to_lab(rgb)))
    assert np.array_equal(back, rgb)


def test_float_rgb_to_u8_clamps():
    out = float_rgb_to_u8(np.array([[-0.2, 1.5, 0.5]]))
    assert out.tolist() == [[0, 255, 128]]


def test_quantise_rgb555():
    out = quantise_rgb555(np.array([[255, 7, 8]], dtype=np.uint8))
    assert out.tolist() == [[248, 0, 8]]


def test_threaded_matches_single(rng):
    rgb = rng.integers(0, 256, size=(600, 3), dtype=np.uint8)
    assert np.allclose(rgb_to_lab_threaded(rgb, 4), rgb_to_lab(rgb))
