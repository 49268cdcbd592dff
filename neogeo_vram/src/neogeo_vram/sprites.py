"""Sprite control block (SCB1/SCB3/SCB4) decoding."""

from __future__ import annotations

import warnings
from dataclasses import dataclass, field
from typing import List, Sequence

from .errors import MalformedInputError, OutOfRangeError
from .layout import DEFAULT_LAYOUT, Snapshot, VramLayout, WordRegion


@dataclass(frozen=True)
class SpriteTile:
    """One tile reference from an SCB1 word pair."""

    palette_index: int
    tile_index: int
    v_flip: bool
    h_flip: bool


@dataclass(frozen=True)
class Scb3Entry:
    y: int
    sticky: bool
    height: int


@dataclass
class Sprite:
    """A logical sprite: the origin slot plus every sticky slot chained to it.

    ``tiles`` is column-major: ``tiles[column][row]``.
    """

    sprite_index: int
    x: int
    y: int
    width: int
    height: int
    tiles: List[List[SpriteTile]] = field(default_factory=list)


def decode_sprite_tile(tile_lsb: int, attributes: int) -> SpriteTile:
    """Build a tile from the even (tile LSB) and odd (attribute) SCB1 words."""

    palette_index = (attributes & 0xFF00) >> 8
    tile_msb = (attributes & 0x00F0) >> 4
    return SpriteTile(
        palette_index=palette_index,
        tile_index=(tile_msb << 16) | tile_lsb,
        v_flip=bool(attributes & 0x2),
        h_flip=bool(attributes & 0x1),
    )


def _check_slot(sprite_index: int, layout: VramLayout) -> None:
    if sprite_index < 0 or sprite_index >= layout.sprite_slots:
        raise OutOfRangeError("sprite slots", sprite_index, layout.sprite_slots)


def read_scb1_strip(
    scb1: WordRegion,
    sprite_index: int,
    rows: int,
    layout: VramLayout = DEFAULT_LAYOUT,
) -> List[SpriteTile]:
    """Decode the first ``rows`` tiles of a slot's SCB1 strip.

    A strip holds ``scb1_slot_words // 2`` tiles; asking for more rows is an
    error rather than a read into the next slot's strip.
    """

    _check_slot(sprite_index, layout)
    strip_tiles = layout.scb1_slot_words // 2
    base = sprite_index * layout.scb1_slot_words
    tiles: List[SpriteTile] = []
    for row in range(rows):
        if row >= strip_tiles:
            raise OutOfRangeError(f"SCB1 slot {sprite_index}", row, strip_tiles)
        ti = base + row * 2
        tiles.append(decode_sprite_tile(scb1.word(ti), scb1.word(ti + 1)))
    return tiles


def read_scb3(
    scb3: WordRegion, sprite_index: int, layout: VramLayout = DEFAULT_LAYOUT
) -> Scb3Entry:
    _check_slot(sprite_index, layout)
    word = scb3.word(sprite_index)
    return Scb3Entry(y=word >> 7, sticky=bool(word & 0x40), height=word & 0x3F)


def read_scb4_x(scb4: WordRegion, sprite_index: int, layout: VramLayout = DEFAULT_LAYOUT) -> int:
    _check_slot(sprite_index, layout)
    return scb4.word(sprite_index) >> 6


def build_sprite(
    scb1: WordRegion,
    scb3: WordRegion,
    scb4: WordRegion,
    sprite_index: int,
    width: int,
    layout: VramLayout = DEFAULT_LAYOUT,
    strict_heights: bool = False,
) -> Sprite:
    """Decode ``width`` consecutive slots starting at ``sprite_index`` as one sprite.

    Chained slots take the origin's height, so every column holds ``height``
    rows. A chained slot whose own height field disagrees is reported with a
    warning, or rejected when ``strict_heights`` is set.
    """

    origin = read_scb3(scb3, sprite_index, layout)
    x = read_scb4_x(scb4, sprite_index, layout)

    tiles: List[List[SpriteTile]] = []
    for s in range(sprite_index, sprite_index + width):
        if s != sprite_index:
            own_height = read_scb3(scb3, s, layout).height
            if own_height != origin.height:
                message = (
                    f"sprite {sprite_index}: chained slot {s} has height {own_height}, "
                    f"origin has {origin.height}"
                )
                if strict_heights:
                    raise MalformedInputError(message)
                warnings.warn(message, RuntimeWarning, stacklevel=2)
        tiles.append(read_scb1_strip(scb1, s, origin.height, layout))

    return Sprite(
        sprite_index=sprite_index,
        x=x,
        y=origin.y,
        width=width,
        height=origin.height,
        tiles=tiles,
    )


def decode_sprites(
    scb1: WordRegion,
    scb3: WordRegion,
    scb4: WordRegion,
    layout: VramLayout = DEFAULT_LAYOUT,
    strict_heights: bool = False,
) -> List[Sprite]:
    """Partition every sprite slot into logical sprites using the sticky bit."""

    sprites: List[Sprite] = []
    si = 0

    while si < layout.sprite_slots:
        sprite_index = si
        width = 1
        si += 1

        while si < layout.sprite_slots and read_scb3(scb3, si, layout).sticky:
            width += 1
            si += 1

        sprites.append(
            build_sprite(
                scb1,
                scb3,
                scb4,
                sprite_index,
                width,
                layout=layout,
                strict_heights=strict_heights,
            )
        )

    return sprites


def decode_snapshot_sprites(
    snapshot: Snapshot,
    layout: VramLayout = DEFAULT_LAYOUT,
    strict_heights: bool = False,
) -> List[Sprite]:
    return decode_sprites(
        snapshot.scb1(layout),
        snapshot.scb3(layout),
        snapshot.scb4(layout),
        layout=layout,
        strict_heights=strict_heights,
    )


def format_sprite_summary(sprites: Sequence[Sprite], only_chained: bool = True) -> str:
    lines = []
    for i, s in enumerate(sprites):
        if only_chained and s.width <= 1:
            continue
        lines.append(f"sprite (i:{i}) (si:{s.sprite_index}), w:{s.width}, h:{s.height}")
    return "\n".join(lines)
