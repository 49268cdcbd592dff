"""Neo Geo color words to 8-bit RGBA.

Color word layout (bit 15 = MSB):

    D R0 G0 B0 R4 R3 R2 R1 G4 G3 G2 G1 B4 B3 B2 B1

The dark bit ``D`` is the shared least significant bit of every channel, so
each channel is six bits wide: ``(upper nibble << 2) | (lower bit << 1) | D``.
"""

from __future__ import annotations

from typing import List, Sequence, Tuple

from PIL import Image

from .errors import MalformedInputError

RGBA = Tuple[int, int, int, int]
RgbPalette = List[RGBA]

PALETTE_SIZE = 16
TRANSPARENT: RGBA = (0, 0, 0, 0)
FIX_PALETTE_COUNT = 16


def _scale_6bit(value: int) -> int:
    return int(round(value * 255 / 63))


def convert_color(col16: int) -> RGBA:
    """Convert one hardware color word to an opaque RGBA color."""

    dark = (col16 >> 15) & 1

    b6 = ((col16 & 0xF) << 2) | (((col16 >> 12) & 1) << 1) | dark
    g6 = (((col16 >> 4) & 0xF) << 2) | (((col16 >> 13) & 1) << 1) | dark
    r6 = (((col16 >> 8) & 0xF) << 2) | (((col16 >> 14) & 1) << 1) | dark

    return (_scale_6bit(r6), _scale_6bit(g6), _scale_6bit(b6), 255)


def convert_palette(palette: Sequence[int]) -> RgbPalette:
    """Convert a 16-word hardware palette; color 0 is always transparent."""

    if len(palette) != PALETTE_SIZE:
        raise MalformedInputError(
            f"Palette must hold {PALETTE_SIZE} colors (got {len(palette)})"
        )
    return [TRANSPARENT] + [convert_color(word) for word in palette[1:]]


def read_fix_palettes(image: Image.Image) -> List[RgbPalette]:
    """Read the fix layer palettes from a reference sheet.

    Row ``p`` of the sheet holds palette ``p``; pixels 1-15 are its colors.
    Pixel 0 is ignored and color 0 is forced to transparent.
    """

    width, height = image.size
    if width < PALETTE_SIZE or height < FIX_PALETTE_COUNT:
        raise MalformedInputError(
            f"Fix palette sheet must be at least {PALETTE_SIZE}x{FIX_PALETTE_COUNT} "
            f"pixels (got {width}x{height})"
        )

    rgba = image.convert("RGBA")
    palettes: List[RgbPalette] = []
    for p in range(FIX_PALETTE_COUNT):
        palette: RgbPalette = [TRANSPARENT]
        for x in range(1, PALETTE_SIZE):
            palette.append(tuple(rgba.getpixel((x, p))))  # type: ignore[arg-type]
        palettes.append(palette)
    return palettes
