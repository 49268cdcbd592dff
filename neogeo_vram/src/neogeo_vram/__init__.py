"""Neo Geo VRAM snapshot extractor.

Decodes sprite control blocks and the fix layer of a video memory dump and
renders them as RGBA images. It can be invoked through the CLI (``python -m
neogeo_vram``) or imported to decode and render individual sprites.
"""

from .composer import fix_layer_to_image, sprite_to_image
from .errors import (
    MalformedInputError,
    MissingResourceError,
    OutOfRangeError,
    VramDecodeError,
)
from .fix import FixCell, decode_fix_cell, decode_fix_layer, format_fix_map
from .layout import DEFAULT_LAYOUT, Snapshot, VramLayout, WordRegion
from .palette import convert_color, convert_palette, read_fix_palettes
from .sprites import Sprite, SpriteTile, decode_snapshot_sprites, decode_sprites
from .tiles import flip_horizontal, render_fix_tile, render_sprite_tile

__all__ = [
    "DEFAULT_LAYOUT",
    "FixCell",
    "MalformedInputError",
    "MissingResourceError",
    "OutOfRangeError",
    "Snapshot",
    "Sprite",
    "SpriteTile",
    "VramDecodeError",
    "VramLayout",
    "WordRegion",
    "convert_color",
    "convert_palette",
    "decode_fix_cell",
    "decode_fix_layer",
    "decode_snapshot_sprites",
    "decode_sprites",
    "fix_layer_to_image",
    "flip_horizontal",
    "format_fix_map",
    "read_fix_palettes",
    "render_fix_tile",
    "render_sprite_tile",
    "sprite_to_image",
]
