# gbc_transform/errors.py
"""
Error taxonomy for the image transform.

All of these are fatal for a single run; nothing is retried.
"""


class GbcTransformError(Exception):
    """Base class for every error raised by gbc_transform."""


class InvalidParameterError(GbcTransformError, ValueError):
    """Pixelation factor, colour count or output size is out of range."""


class EmptyPaletteInputError(GbcTransformError):
    """Palette extraction found no eligible pixels to cluster."""

    def __init__(self, total_pixels: int = 0, include_transparent: bool = False):
        message = "image produced zero eligible pixels for palette extraction"
        if total_pixels and not include_transparent:
            message += (
                f" ({total_pixels:,} pixels, all fully transparent;"
                " try --transparent to include them)"
            )
        super().__init__(message)
        self.total_pixels = total_pixels
        self.include_transparent = include_transparent


class DecodeError(GbcTransformError, OSError):
    """Input image is missing, corrupt, or in an unsupported format."""


class EncodeError(GbcTransformError, OSError):
    """Output image could not be written."""


__all__ = [
    "GbcTransformError",
    "InvalidParameterError",
    "EmptyPaletteInputError",
    "DecodeError",
    "EncodeError",
]
