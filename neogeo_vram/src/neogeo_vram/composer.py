"""Assemble decoded sprites and the fix layer into RGBA images."""

from __future__ import annotations

from typing import Dict, Mapping, Sequence

from PIL import Image

from .errors import MissingResourceError
from .fix import FixGrid
from .palette import RgbPalette, convert_palette
from .sprites import Sprite
from .tiles import (
    FIX_TILE_BYTES,
    FIX_TILE_SIZE,
    SPRITE_TILE_SIZE,
    render_fix_tile,
    render_sprite_tile,
)


def sprite_to_image(
    sprite: Sprite,
    palettes: Mapping[int, Sequence[int]],
    tile_datas: Mapping[int, Sequence[int]],
    honor_vflip: bool = False,
) -> Image.Image:
    """Render every tile of ``sprite`` into one ``width*16`` x ``height*16`` image.

    ``palettes`` maps palette index to 16 hardware color words and
    ``tile_datas`` maps tile index to its 128 pixel-pair values.
    """

    canvas = Image.new(
        "RGBA", (sprite.width * SPRITE_TILE_SIZE, sprite.height * SPRITE_TILE_SIZE)
    )
    rgb_palettes: Dict[int, RgbPalette] = {}

    for x in range(sprite.width):
        for y in range(sprite.height):
            tile = sprite.tiles[x][y]
            owner = f"sprite {sprite.sprite_index} column {x} row {y}"

            neo_palette = palettes.get(tile.palette_index)
            if neo_palette is None:
                raise MissingResourceError("palette", tile.palette_index, owner)
            tile_data = tile_datas.get(tile.tile_index)
            if tile_data is None:
                raise MissingResourceError("tile", tile.tile_index, owner)

            rgb_palette = rgb_palettes.get(tile.palette_index)
            if rgb_palette is None:
                rgb_palette = convert_palette(neo_palette)
                rgb_palettes[tile.palette_index] = rgb_palette

            tile_image = render_sprite_tile(
                rgb_palette,
                tile_data,
                h_flip=tile.h_flip,
                v_flip=honor_vflip and tile.v_flip,
            )
            canvas.paste(tile_image, (x * SPRITE_TILE_SIZE, y * SPRITE_TILE_SIZE))

    return canvas


def fix_tile_data(s_rom: bytes, tile_index: int, owner: str) -> bytes:
    start = tile_index * FIX_TILE_BYTES
    end = start + FIX_TILE_BYTES
    if end > len(s_rom):
        raise MissingResourceError("fix tile", tile_index, owner)
    return s_rom[start:end]


def fix_layer_to_image(
    grid: FixGrid,
    fix_palettes: Sequence[RgbPalette],
    s_rom: bytes,
) -> Image.Image:
    """Render the fix map using already converted RGBA palettes and S ROM bytes."""

    columns = len(grid)
    rows = len(grid[0]) if grid else 0
    canvas = Image.new("RGBA", (columns * FIX_TILE_SIZE, rows * FIX_TILE_SIZE))

    for x, cells in enumerate(grid):
        for y, cell in enumerate(cells):
            owner = f"fix cell ({x}, {y})"
            if cell.palette_index >= len(fix_palettes):
                raise MissingResourceError("fix palette", cell.palette_index, owner)
            tile_image = render_fix_tile(
                fix_palettes[cell.palette_index],
                fix_tile_data(s_rom, cell.tile_index, owner),
            )
            canvas.paste(tile_image, (x * FIX_TILE_SIZE, y * FIX_TILE_SIZE))

    return canvas
