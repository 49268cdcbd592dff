from __future__ import annotations

import sys
import warnings
from pathlib import Path

import pytest

sys.path.append(str(Path(__file__).resolve().parents[1] / "neogeo_vram/src"))

from neogeo_vram.errors import MalformedInputError, OutOfRangeError  # noqa: E402
from neogeo_vram.layout import DEFAULT_LAYOUT, Snapshot  # noqa: E402
from neogeo_vram.sprites import (  # noqa: E402
    SpriteTile,
    decode_snapshot_sprites,
    decode_sprite_tile,
    format_sprite_summary,
    read_scb1_strip,
    read_scb3,
    read_scb4_x,
)

SCB3 = DEFAULT_LAYOUT.scb3_addr
SCB4 = DEFAULT_LAYOUT.scb4_addr
STICKY = 0x40


def _snapshot(words: dict[int, int], word_count: int | None = None) -> Snapshot:
    data = bytearray((word_count or DEFAULT_LAYOUT.word_count) * 2)
    for index, value in words.items():
        data[index * 2 : index * 2 + 2] = value.to_bytes(2, "little")
    return Snapshot(data)


def _scb1_tile(slot: int, row: int, tile_lsb: int, attributes: int) -> dict[int, int]:
    base = slot * 64 + row * 2
    return {base: tile_lsb, base + 1: attributes}


def test_decode_sprite_tile_splits_attribute_word():
    tile = decode_sprite_tile(0x1234, 0x56A3)
    assert tile == SpriteTile(palette_index=0x56, tile_index=0xA1234, v_flip=True, h_flip=True)

    plain = decode_sprite_tile(0xFFFF, 0x0000)
    assert plain == SpriteTile(palette_index=0, tile_index=0xFFFF, v_flip=False, h_flip=False)


def test_scb3_and_scb4_fields():
    snapshot = _snapshot({SCB3 + 7: (300 << 7) | STICKY | 5, SCB4 + 7: (123 << 6) | 0x3F})

    entry = read_scb3(snapshot.scb3(), 7)
    assert (entry.y, entry.sticky, entry.height) == (300, True, 5)
    assert read_scb4_x(snapshot.scb4(), 7) == 123


def test_sticky_chain_partition():
    words = {
        SCB3 + 0: (10 << 7) | 2,
        SCB3 + 1: STICKY | 2,
        SCB3 + 2: STICKY | 2,
        SCB3 + 3: (20 << 7) | 1,
        SCB3 + 4: 0,
        SCB3 + 5: 0,
        SCB4 + 0: 40 << 6,
        SCB4 + 3: 80 << 6,
    }
    sprites = decode_snapshot_sprites(_snapshot(words))

    assert [s.width for s in sprites[:3]] == [3, 1, 1]
    assert [s.sprite_index for s in sprites[:3]] == [0, 3, 4]
    assert len(sprites) == 381 - 2
    assert sum(s.width for s in sprites) == 381

    first = sprites[0]
    assert (first.x, first.y, first.height) == (40, 10, 2)
    assert len(first.tiles) == first.width
    assert all(len(column) == 2 for column in first.tiles)

    second = sprites[1]
    assert (second.x, second.y, second.height) == (80, 20, 1)


def test_slot_zero_starts_a_sprite_even_when_sticky():
    sprites = decode_snapshot_sprites(_snapshot({SCB3 + 0: STICKY | 1}))
    assert sprites[0].sprite_index == 0
    assert sprites[0].width == 1


def test_chained_columns_read_their_own_scb1_strips():
    words = {SCB3 + 10: 2, SCB3 + 11: STICKY | 2}
    words.update(_scb1_tile(10, 0, 0x0100, 0x0500))
    words.update(_scb1_tile(10, 1, 0x0101, 0x0501))
    words.update(_scb1_tile(11, 0, 0x0200, 0x0610))
    words.update(_scb1_tile(11, 1, 0x0201, 0x0602))

    sprite = next(s for s in decode_snapshot_sprites(_snapshot(words)) if s.sprite_index == 10)

    assert sprite.width == 2
    assert [t.tile_index for t in sprite.tiles[0]] == [0x0100, 0x0101]
    assert [t.palette_index for t in sprite.tiles[0]] == [5, 5]
    assert sprite.tiles[1][0] == SpriteTile(6, 0x10200, False, False)
    assert sprite.tiles[1][1].v_flip is True


def test_chained_height_mismatch_warns_by_default():
    words = {SCB3 + 0: 2, SCB3 + 1: STICKY | 3}
    with pytest.warns(RuntimeWarning, match="chained slot 1 has height 3"):
        sprites = decode_snapshot_sprites(_snapshot(words))
    assert sprites[0].height == 2
    assert [len(column) for column in sprites[0].tiles] == [2, 2]


def test_chained_height_mismatch_rejected_when_strict():
    words = {SCB3 + 0: 2, SCB3 + 1: STICKY | 3}
    with pytest.raises(MalformedInputError):
        decode_snapshot_sprites(_snapshot(words), strict_heights=True)


def test_matching_chained_heights_do_not_warn():
    words = {SCB3 + 0: 2, SCB3 + 1: STICKY | 2}
    with warnings.catch_warnings():
        warnings.simplefilter("error")
        decode_snapshot_sprites(_snapshot(words), strict_heights=True)


def test_height_above_32_rows_does_not_read_the_next_slot():
    words = {SCB3 + 0: 40}
    words.update(_scb1_tile(1, 0, 0xBEEF, 0x0700))

    with pytest.raises(OutOfRangeError) as excinfo:
        decode_snapshot_sprites(_snapshot(words))

    assert excinfo.value.region == "SCB1 slot 0"
    assert excinfo.value.index == 32
    assert excinfo.value.length == 32


def test_full_32_row_strip_decodes():
    words = {SCB3 + 0: 32}
    words.update(_scb1_tile(0, 31, 0x0123, 0x0400))
    words.update(_scb1_tile(1, 0, 0xBEEF, 0x0700))

    sprite = decode_snapshot_sprites(_snapshot(words))[0]

    assert len(sprite.tiles[0]) == 32
    assert sprite.tiles[0][31] == SpriteTile(4, 0x0123, False, False)
    assert all(t.tile_index != 0xBEEF for t in sprite.tiles[0])


def test_slot_381_is_out_of_range():
    snapshot = _snapshot({})
    with pytest.raises(OutOfRangeError) as excinfo:
        read_scb3(snapshot.scb3(), 381)
    assert excinfo.value.index == 381
    with pytest.raises(OutOfRangeError):
        read_scb4_x(snapshot.scb4(), 381)
    with pytest.raises(OutOfRangeError):
        read_scb1_strip(snapshot.scb1(), 381, 1)


def test_short_snapshot_reports_region_and_index():
    snapshot = _snapshot({}, word_count=SCB4 + 100)
    with pytest.raises(OutOfRangeError) as excinfo:
        decode_snapshot_sprites(snapshot)
    assert excinfo.value.region == "SCB4"
    assert excinfo.value.index == 100
    assert "SCB4" in str(excinfo.value)


def test_format_sprite_summary_lists_chained_sprites():
    words = {SCB3 + 0: 4, SCB3 + 1: STICKY | 4}
    sprites = decode_snapshot_sprites(_snapshot(words))
    assert format_sprite_summary(sprites) == "sprite (i:0) (si:0), w:2, h:4"
    assert format_sprite_summary(sprites, only_chained=False).count("\n") == len(sprites) - 1
