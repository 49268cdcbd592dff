"""VRAM address map and word-addressed views over a snapshot.

Reference: Neo Geo LSPC VRAM (word addresses)
Usage                 | Address Range   | Notes
----------------------|-----------------|----------------------------------------------
SCB1 (tile maps)      | 0000h-6FFFh     | 64 words per sprite: 32 x (tile LSB, attributes)
Fix map               | 7000h-7FFFh     | 40 columns x 32 rows, column-major
SCB2 (shrink)         | 8000h-81FFh     | unused here
SCB3 (y, sticky, h)   | 8200h-83FFh     | 1 word per sprite
SCB4 (x)              | 8400h-85FFh     | 1 word per sprite
"""

from __future__ import annotations

from dataclasses import dataclass

from .errors import MalformedInputError, OutOfRangeError


@dataclass(frozen=True)
class VramLayout:
    """Region addresses and sizes, all in 16-bit word units."""

    scb1_addr: int = 0x0000
    scb1_size: int = 0x7000
    fix_addr: int = 0x7000
    fix_size: int = 0x1000
    scb3_addr: int = 0x8200
    scb4_addr: int = 0x8400
    scb234_size: int = 0x200
    scb1_slot_words: int = 64
    sprite_slots: int = 381
    fix_columns: int = 40
    fix_rows: int = 32

    @property
    def word_count(self) -> int:
        """Words needed to cover every region used by the decoders."""
        return max(
            self.scb1_addr + self.scb1_size,
            self.fix_addr + self.fix_size,
            self.scb3_addr + self.scb234_size,
            self.scb4_addr + self.scb234_size,
        )


DEFAULT_LAYOUT = VramLayout()


class WordRegion:
    """Read-only, bounds-checked word view over a slice of a snapshot."""

    def __init__(self, name: str, data: bytes):
        self.name = name
        self._data = data

    def __len__(self) -> int:
        return len(self._data) // 2

    def word(self, index: int) -> int:
        if index < 0 or index >= len(self):
            raise OutOfRangeError(self.name, index, len(self))
        offset = index * 2
        return int.from_bytes(self._data[offset : offset + 2], "little")


class Snapshot:
    """A VRAM dump addressed either as bytes or as little-endian words."""

    def __init__(self, data: bytes | bytearray | memoryview):
        data = bytes(data)
        if len(data) % 2:
            raise MalformedInputError(
                f"VRAM snapshot must hold whole 16-bit words (got {len(data)} bytes)"
            )
        self._data = data

    def __len__(self) -> int:
        return len(self._data)

    @property
    def word_count(self) -> int:
        return len(self._data) // 2

    def region(self, name: str, start: int, size: int) -> WordRegion:
        """Return the words ``[start, start + size)``, clipped to the snapshot end."""
        return WordRegion(name, self._data[start * 2 : (start + size) * 2])

    def scb1(self, layout: VramLayout = DEFAULT_LAYOUT) -> WordRegion:
        return self.region("SCB1", layout.scb1_addr, layout.scb1_size)

    def scb3(self, layout: VramLayout = DEFAULT_LAYOUT) -> WordRegion:
        return self.region("SCB3", layout.scb3_addr, layout.scb234_size)

    def scb4(self, layout: VramLayout = DEFAULT_LAYOUT) -> WordRegion:
        return self.region("SCB4", layout.scb4_addr, layout.scb234_size)

    def fix_map(self, layout: VramLayout = DEFAULT_LAYOUT) -> WordRegion:
        return self.region("fix map", layout.fix_addr, layout.fix_size)
