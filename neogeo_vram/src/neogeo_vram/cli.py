"""Command line interface for the Neo Geo VRAM extractor."""

from __future__ import annotations

import argparse
import sys
import warnings
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Tuple

from PIL import Image

from .composer import fix_layer_to_image, sprite_to_image
from .errors import VramDecodeError
from .fix import decode_snapshot_fix_layer, format_fix_map
from .layout import DEFAULT_LAYOUT
from .loader import SnapshotBundle, load_fix_palettes, load_s_rom, load_snapshot_json
from .report import render_report
from .sprites import Sprite, decode_snapshot_sprites, format_sprite_summary


@dataclass
class ExtractOptions:
    """What to render and where to put it."""

    sprite_indices: List[int] = field(default_factory=list)
    all_sprites: bool = False
    strict_heights: bool = False
    honor_vflip: bool = False
    output_dir: Path = Path(".")
    prefix: str = ""
    force: bool = False
    s_rom_path: Optional[Path] = None
    fix_palettes_path: Optional[Path] = None
    report_path: Optional[Path] = None


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description=(
            "Render sprites and the fix layer of a Neo Geo VRAM snapshot to PNG files.\n"
            "Sprites are numbered in decode order after sticky slots are merged; "
            "use the printed summary to find the ones you want."
        ),
        formatter_class=argparse.RawTextHelpFormatter,
    )
    parser.add_argument("snapshot", help="Snapshot JSON (spriteMemory, palettes, tileMemory)")
    parser.add_argument(
        "-o",
        "--output-dir",
        default=".",
        help="Destination directory for PNG files",
    )
    parser.add_argument("--prefix", default="", help="Optional prefix for output filenames")
    parser.add_argument(
        "-s",
        "--sprite",
        action="append",
        type=int,
        default=[],
        metavar="N",
        help="Render logical sprite N (can be given multiple times)",
    )
    parser.add_argument(
        "--all-sprites",
        action="store_true",
        help="Render every sprite with a non-zero height",
    )
    parser.add_argument(
        "--strict-heights",
        action="store_true",
        help="Fail when a chained slot's height differs from its chain origin",
    )
    parser.add_argument(
        "--honor-vflip",
        action="store_true",
        help="Apply the vertical flip attribute of sprite tiles",
    )
    parser.add_argument("--s-rom", help="Fix layer tile set (S ROM) binary")
    parser.add_argument(
        "--fix-palettes",
        help="Fix palette sheet image: row p, pixels 1-15 = palette p",
    )
    parser.add_argument("--report", help="Write a text report of the decoded data")
    parser.add_argument(
        "-f",
        "--force",
        action="store_true",
        help="Overwrite existing files without prompting",
    )
    return parser


def options_from_args(args: argparse.Namespace) -> ExtractOptions:
    if bool(args.s_rom) != bool(args.fix_palettes):
        raise VramDecodeError("--s-rom and --fix-palettes must be given together")

    return ExtractOptions(
        sprite_indices=list(args.sprite),
        all_sprites=args.all_sprites,
        strict_heights=args.strict_heights,
        honor_vflip=args.honor_vflip,
        output_dir=Path(args.output_dir),
        prefix=args.prefix,
        force=args.force,
        s_rom_path=Path(args.s_rom) if args.s_rom else None,
        fix_palettes_path=Path(args.fix_palettes) if args.fix_palettes else None,
        report_path=Path(args.report) if args.report else None,
    )


def select_sprites(sprites: List[Sprite], options: ExtractOptions) -> List[Tuple[int, Sprite]]:
    if options.all_sprites:
        return [(i, s) for i, s in enumerate(sprites) if s.height > 0]

    selected = []
    for i in options.sprite_indices:
        if i < 0 or i >= len(sprites):
            raise VramDecodeError(f"Sprite {i} does not exist ({len(sprites)} sprites decoded)")
        if sprites[i].height == 0:
            warnings.warn(f"sprite {i} has zero height; skipped", RuntimeWarning, stacklevel=1)
            continue
        selected.append((i, sprites[i]))
    return selected


def output_targets(selected: List[Tuple[int, Sprite]], options: ExtractOptions) -> List[Path]:
    names = [f"{options.prefix}sprite{i}.png" for i, _ in selected]
    if options.fix_palettes_path is not None:
        names.append(f"{options.prefix}fixLayer.png")
    targets = [options.output_dir / name for name in names]
    if options.report_path is not None:
        targets.append(options.report_path)
    return targets


def check_conflicts(targets: List[Path], force: bool) -> None:
    if force:
        return
    conflicts = [str(target) for target in targets if target.exists()]
    if conflicts:
        raise VramDecodeError(
            "Output files already exist (use --force to overwrite):\n" + "\n".join(conflicts)
        )


def write_image(image: Image.Image, target: Path) -> None:
    target.parent.mkdir(parents=True, exist_ok=True)
    image.save(target, format="PNG")
    print(f"wrote {target}")


def run(bundle: SnapshotBundle, options: ExtractOptions) -> None:
    snapshot = bundle.snapshot
    layout = DEFAULT_LAYOUT

    print(f"snapshot words: {snapshot.word_count} (layout needs {layout.word_count})")
    if snapshot.word_count < layout.word_count:
        warnings.warn(
            f"snapshot is shorter than the VRAM layout ({snapshot.word_count} < "
            f"{layout.word_count} words)",
            RuntimeWarning,
            stacklevel=1,
        )

    sprites = decode_snapshot_sprites(snapshot, layout, strict_heights=options.strict_heights)
    print(f"sprite count: {len(sprites)}")
    summary = format_sprite_summary(sprites)
    if summary:
        print(summary)

    selected = select_sprites(sprites, options)
    check_conflicts(output_targets(selected, options), options.force)

    for i, sprite in selected:
        image = sprite_to_image(
            sprite, bundle.palettes, bundle.tile_memory, honor_vflip=options.honor_vflip
        )
        write_image(image, options.output_dir / f"{options.prefix}sprite{i}.png")

    fix_grid = None
    if options.s_rom_path is not None and options.fix_palettes_path is not None:
        s_rom = load_s_rom(options.s_rom_path)
        fix_palettes = load_fix_palettes(options.fix_palettes_path)
        fix_grid = decode_snapshot_fix_layer(snapshot, layout)
        print(format_fix_map(fix_grid))
        image = fix_layer_to_image(fix_grid, fix_palettes, s_rom)
        write_image(image, options.output_dir / f"{options.prefix}fixLayer.png")

    if options.report_path is not None:
        options.report_path.parent.mkdir(parents=True, exist_ok=True)
        options.report_path.write_text(render_report(snapshot, sprites, fix_grid, layout))
        print(f"wrote {options.report_path}")


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        options = options_from_args(args)
        with warnings.catch_warnings(record=True) as caught:
            warnings.simplefilter("always")
            try:
                bundle = load_snapshot_json(args.snapshot)
                run(bundle, options)
            finally:
                for warning in caught:
                    print(f"Warning: {warning.message}")
        return 0
    except VramDecodeError as exc:
        print(exc, file=sys.stderr)
        return 1


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
