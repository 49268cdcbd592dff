"""Load snapshot containers, S ROM tile sets and fix palette sheets from disk."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List

from PIL import Image

from .errors import MalformedInputError
from .layout import Snapshot
from .palette import RgbPalette, read_fix_palettes


@dataclass
class SnapshotBundle:
    """Everything a savestate export provides for sprite rendering."""

    snapshot: Snapshot
    palettes: Dict[int, List[int]] = field(default_factory=dict)
    tile_memory: Dict[int, List[int]] = field(default_factory=dict)
    frame_count_speed: int = 0


def _int_keyed(raw: Any, name: str, path: Path) -> Dict[int, List[int]]:
    if not isinstance(raw, dict):
        raise MalformedInputError(f"{path}: '{name}' must be an object")
    try:
        return {int(key): [int(v) for v in values] for key, values in raw.items()}
    except (TypeError, ValueError) as exc:
        raise MalformedInputError(f"{path}: '{name}' has a non-numeric entry") from exc


def parse_snapshot_json(document: Dict[str, Any], path: Path) -> SnapshotBundle:
    if not isinstance(document, dict) or "spriteMemory" not in document:
        raise MalformedInputError(f"{path}: missing 'spriteMemory'")

    try:
        memory = bytes(document["spriteMemory"])
    except (TypeError, ValueError) as exc:
        raise MalformedInputError(f"{path}: 'spriteMemory' must be a list of bytes") from exc

    try:
        frame_count_speed = int(document.get("frameCountSpeed", 0))
    except (TypeError, ValueError) as exc:
        raise MalformedInputError(f"{path}: 'frameCountSpeed' must be a number") from exc

    return SnapshotBundle(
        snapshot=Snapshot(memory),
        palettes=_int_keyed(document.get("palettes", {}), "palettes", path),
        tile_memory=_int_keyed(document.get("tileMemory", {}), "tileMemory", path),
        frame_count_speed=frame_count_speed,
    )


def load_snapshot_json(path: str | Path) -> SnapshotBundle:
    path = Path(path)
    try:
        document = json.loads(path.read_text())
    except FileNotFoundError as exc:
        raise MalformedInputError(f"Snapshot file not found: {path}") from exc
    except json.JSONDecodeError as exc:
        raise MalformedInputError(f"Invalid snapshot JSON: {path}: {exc}") from exc
    except OSError as exc:
        raise MalformedInputError(f"Failed to read snapshot: {path}") from exc
    return parse_snapshot_json(document, path)


def load_s_rom(path: str | Path) -> bytes:
    path = Path(path)
    try:
        return path.read_bytes()
    except FileNotFoundError as exc:
        raise MalformedInputError(f"S ROM file not found: {path}") from exc
    except OSError as exc:
        raise MalformedInputError(f"Failed to read S ROM: {path}") from exc


def load_fix_palettes(path: str | Path) -> List[RgbPalette]:
    path = Path(path)
    try:
        with Image.open(path) as img:
            return read_fix_palettes(img)
    except FileNotFoundError as exc:
        raise MalformedInputError(f"Fix palette image not found: {path}") from exc
    except OSError as exc:
        raise MalformedInputError(f"Failed to read fix palette image: {path}") from exc
