"""Plain text report of what was decoded from a snapshot."""

from __future__ import annotations

from typing import Optional, Sequence

import jinja2

from .fix import FixGrid, format_fix_map
from .layout import DEFAULT_LAYOUT, Snapshot, VramLayout
from .sprites import Sprite

report_template = """NEO GEO VRAM REPORT
snapshot: {{ snapshot_bytes }} bytes ({{ snapshot_words }} words, layout needs {{ layout_words }})
{% for region in regions %}{{ "%-8s"|format(region.name) }} {{ "%04X"|format(region.start) }}h {{ region.available }}/{{ region.size }} words
{% endfor %}
SPRITES: {{ sprites|length }} logical, {{ chained|length }} chained
{% for sprite in chained %}sprite (i:{{ sprite.i }}) (si:{{ sprite.si }}), w:{{ sprite.w }}, h:{{ sprite.h }}, x:{{ sprite.x }}, y:{{ sprite.y }}
{% endfor %}{% if fix_map %}
FIX LAYER
{{ fix_map }}
{% endif %}"""


def render_report(
    snapshot: Snapshot,
    sprites: Sequence[Sprite],
    fix_grid: Optional[FixGrid] = None,
    layout: VramLayout = DEFAULT_LAYOUT,
) -> str:
    regions = []
    for name, start, size in (
        ("SCB1", layout.scb1_addr, layout.scb1_size),
        ("FIX", layout.fix_addr, layout.fix_size),
        ("SCB3", layout.scb3_addr, layout.scb234_size),
        ("SCB4", layout.scb4_addr, layout.scb234_size),
    ):
        regions.append(
            {
                "name": name,
                "start": start,
                "size": size,
                "available": len(snapshot.region(name, start, size)),
            }
        )

    chained = [
        {"i": i, "si": s.sprite_index, "w": s.width, "h": s.height, "x": s.x, "y": s.y}
        for i, s in enumerate(sprites)
        if s.width > 1
    ]

    template = jinja2.Template(report_template)
    return template.render(
        snapshot_bytes=len(snapshot),
        snapshot_words=snapshot.word_count,
        layout_words=layout.word_count,
        regions=regions,
        sprites=sprites,
        chained=chained,
        fix_map=format_fix_map(fix_grid) if fix_grid else "",
    )
