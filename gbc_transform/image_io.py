# gbc_transform/image_io.py
from __future__ import annotations

import io
import os
import tempfile
from pathlib import Path

import numpy as np
from PIL import Image, ImageOps, UnidentifiedImageError

from .core_types import U8Rgba, assert_u8_rgba
from .errors import DecodeError, EncodeError

"""
Image I/O helpers (RGBA in sRGB). Format follows the file extension.
"""

try:
    from PIL import ImageCms  # ICC conversion if profile present
except ImportError:  # pragma: no cover
    ImageCms = None  # type: ignore[assignment]

# Formats Pillow can write but not with an alpha channel.
_NO_ALPHA_FORMATS = {"JPEG", "EPS"}


def _convert_to_srgb_rgba(im: Image.Image) -> Image.Image:
    im = ImageOps.exif_transpose(im)
    icc_bytes = im.info.get("icc_profile")

    if icc_bytes and ImageCms is not None:
        try:
            src_prof = ImageCms.ImageCmsProfile(io.BytesIO(icc_bytes))
            dst_prof = ImageCms.createProfile("sRGB")
            im2 = ImageCms.profileToProfile(
                im,
                src_prof,
                dst_prof,
                renderingIntent=ImageCms.Intent.PERCEPTUAL,
                outputMode="RGBA",
            )
            if im2 is not None:
                return im2
        except (ImageCms.PyCMSError, OSError, ValueError):
            pass

    return im.convert("RGBA")


def load_image_rgba(path: Path) -> U8Rgba:
    """Decode the first frame of an image into a uint8 (H,W,4) sRGB raster."""
    path = Path(path)
    try:
        with Image.open(path) as im0:
            im = _convert_to_srgb_rgba(im0)
            arr = np.array(im, dtype=np.uint8)
    except FileNotFoundError as exc:
        raise DecodeError(f"input not found: {path}") from exc
    except UnidentifiedImageError as exc:
        raise DecodeError(f"unsupported or corrupt image: {path}") from exc
    except (OSError, ValueError) as exc:
        raise DecodeError(f"failed to decode {path}: {exc}") from exc
    return arr


def _save_dropping_alpha_if_needed(im: Image.Image, fp, fmt: str) -> None:
    """Save im; retry as RGB when the encoder rejects RGBA (PPM, PCX, ...)."""
    try:
        im.save(fp, format=fmt)
    except (OSError, ValueError) as exc:
        if im.mode != "RGBA" or "rgba" not in str(exc).lower():
            raise
        fp.seek(0)
        fp.truncate()
        im.convert("RGB").save(fp, format=fmt)


def output_format_for(path: Path) -> str:
    """Pillow format name for the path's extension."""
    suffix = Path(path).suffix.lower()
    fmt = Image.registered_extensions().get(suffix)
    if not suffix or fmt is None:
        raise EncodeError(f"unsupported output format: {path}")
    return fmt


def save_image_rgba(path: Path, image: U8Rgba) -> Path:
    """
    Encode an RGBA raster to path, format chosen by extension.

    Writes to a temporary file in the destination directory and renames it
    into place, so a failed write never leaves a partial output behind.
    """
    path = Path(path)
    image = assert_u8_rgba(image)
    fmt = output_format_for(path)

    im = Image.fromarray(np.ascontiguousarray(image))
    if fmt in _NO_ALPHA_FORMATS:
        im = im.convert("RGB")

    directory = path.parent if str(path.parent) else Path(".")
    tmp_name = None
    try:
        with tempfile.NamedTemporaryFile(
            dir=directory, prefix=f".{path.stem}-", suffix=path.suffix, delete=False
        ) as tmp:
            tmp_name = tmp.name
            _save_dropping_alpha_if_needed(im, tmp, fmt)
        os.replace(tmp_name, path)
    except (OSError, ValueError, KeyError) as exc:
        if tmp_name is not None and os.path.exists(tmp_name):
            os.unlink(tmp_name)
        raise EncodeError(f"failed to write {path}: {exc}") from exc
    return path


__all__ = ["load_image_rgba", "output_format_for", "save_image_rgba"]
