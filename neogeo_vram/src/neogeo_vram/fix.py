"""Fix layer (text/HUD tile map) decoding."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List

from .errors import OutOfRangeError
from .layout import DEFAULT_LAYOUT, Snapshot, VramLayout, WordRegion

EMPTY_FIX_TILE = 0xFF


@dataclass(frozen=True)
class FixCell:
    tile_index: int
    palette_index: int


FixGrid = List[List[FixCell]]


def decode_fix_cell(word: int) -> FixCell:
    return FixCell(tile_index=word & 0xFFF, palette_index=word >> 12)


def read_fix_cell(fix_map: WordRegion, index: int, layout: VramLayout = DEFAULT_LAYOUT) -> FixCell:
    cell_count = layout.fix_columns * layout.fix_rows
    if index < 0 or index >= cell_count:
        raise OutOfRangeError("fix map", index, cell_count)
    return decode_fix_cell(fix_map.word(index))


def decode_fix_layer(fix_map: WordRegion, layout: VramLayout = DEFAULT_LAYOUT) -> FixGrid:
    """Return the fix map as ``grid[column][row]``.

    The map is stored column-major, ``layout.fix_rows`` words per column.
    """

    grid: FixGrid = []
    for column in range(layout.fix_columns):
        cells = []
        for row in range(layout.fix_rows):
            cells.append(read_fix_cell(fix_map, column * layout.fix_rows + row, layout))
        grid.append(cells)
    return grid


def decode_snapshot_fix_layer(snapshot: Snapshot, layout: VramLayout = DEFAULT_LAYOUT) -> FixGrid:
    return decode_fix_layer(snapshot.fix_map(layout), layout)


def format_fix_map(grid: FixGrid) -> str:
    """Row-by-row hex dump of tile indices; the blank tile shows as `` . ``."""

    if not grid:
        return ""
    lines = []
    for row in range(len(grid[0])):
        cells = []
        for column in grid:
            tile_index = column[row].tile_index
            cells.append(" . " if tile_index == EMPTY_FIX_TILE else f"{tile_index:x}")
        lines.append(" ".join(cells))
    return "\n".join(lines)
