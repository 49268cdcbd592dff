"""Indexed tile data to RGBA tile images.

Sprite (C ROM) tiles are 16x16. Each row is 8 values holding two pixels
each, high nibble on the left, but the values are stored in the order given
by ``SPRITE_COLUMN_ORDER``.

Fix (S ROM) tiles are 8x8 and take 32 bytes, stored as four 8-byte column
pairs in the order: columns 4-5, 6-7, 0-1, 2-3. Each byte holds the left
pixel in its low nibble and the right pixel in its high nibble.
"""

from __future__ import annotations

from typing import List, Sequence

from PIL import Image

from .errors import MalformedInputError, OutOfRangeError
from .palette import PALETTE_SIZE, RGBA

SPRITE_TILE_SIZE = 16
SPRITE_TILE_VALUES = SPRITE_TILE_SIZE * SPRITE_TILE_SIZE // 2
SPRITE_COLUMN_ORDER = (3, 2, 1, 0, 7, 6, 5, 4)

FIX_TILE_SIZE = 8
FIX_TILE_BYTES = 32
# output pixel column of the left pixel for each 8-byte block of a fix tile
FIX_BLOCK_COLUMNS = (4, 6, 0, 2)


def lookup_color(palette: Sequence[RGBA], index: int) -> RGBA:
    if index < 0 or index >= PALETTE_SIZE:
        raise OutOfRangeError("palette", index, PALETTE_SIZE)
    return palette[index]


def _check_palette(palette: Sequence[RGBA]) -> None:
    if len(palette) != PALETTE_SIZE:
        raise MalformedInputError(
            f"RGBA palette must hold {PALETTE_SIZE} colors (got {len(palette)})"
        )


def sprite_tile_indices(tile_data: Sequence[int]) -> List[int]:
    """Unpack a sprite tile into 256 row-major palette indices."""

    if len(tile_data) != SPRITE_TILE_VALUES:
        raise MalformedInputError(
            f"Sprite tile data must hold {SPRITE_TILE_VALUES} values (got {len(tile_data)})"
        )

    pairs_per_row = SPRITE_TILE_SIZE // 2
    indices: List[int] = []
    for y in range(SPRITE_TILE_SIZE):
        for x in range(pairs_per_row):
            pixel_pair = tile_data[y * pairs_per_row + SPRITE_COLUMN_ORDER[x]]
            indices.append((pixel_pair >> 4) & 0xF)
            indices.append(pixel_pair & 0xF)
    return indices


def fix_tile_indices(tile_data: Sequence[int]) -> List[int]:
    """Unpack a 32-byte fix tile into 64 row-major palette indices."""

    if len(tile_data) != FIX_TILE_BYTES:
        raise MalformedInputError(
            f"Fix tile data must hold {FIX_TILE_BYTES} bytes (got {len(tile_data)})"
        )

    indices = [0] * (FIX_TILE_SIZE * FIX_TILE_SIZE)
    offset = 0
    for column in FIX_BLOCK_COLUMNS:
        for row in range(FIX_TILE_SIZE):
            pixel_pair = tile_data[offset]
            offset += 1
            indices[row * FIX_TILE_SIZE + column] = pixel_pair & 0xF
            indices[row * FIX_TILE_SIZE + column + 1] = (pixel_pair >> 4) & 0xF
    return indices


def rasterize(indices: Sequence[int], palette: Sequence[RGBA], size: int) -> Image.Image:
    """Resolve row-major palette indices into a ``size`` x ``size`` RGBA image."""

    _check_palette(palette)
    tile = Image.new("RGBA", (size, size))
    tile.putdata([lookup_color(palette, idx) for idx in indices])
    return tile


def flip_horizontal(tile: Image.Image, h_flip: bool = True) -> Image.Image:
    if not h_flip:
        return tile
    return tile.transpose(Image.Transpose.FLIP_LEFT_RIGHT)


def flip_vertical(tile: Image.Image, v_flip: bool = True) -> Image.Image:
    if not v_flip:
        return tile
    return tile.transpose(Image.Transpose.FLIP_TOP_BOTTOM)


def render_sprite_tile(
    palette: Sequence[RGBA],
    tile_data: Sequence[int],
    h_flip: bool = False,
    v_flip: bool = False,
) -> Image.Image:
    tile = rasterize(sprite_tile_indices(tile_data), palette, SPRITE_TILE_SIZE)
    return flip_vertical(flip_horizontal(tile, h_flip), v_flip)


def render_fix_tile(palette: Sequence[RGBA], tile_data: Sequence[int]) -> Image.Image:
    return rasterize(fix_tile_indices(tile_data), palette, FIX_TILE_SIZE)
