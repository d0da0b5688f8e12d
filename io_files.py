"""Helpers for writing solver outputs to disk."""

from __future__ import annotations

import os
from typing import Optional

from config import CFG
from solver.grid import Grid


def _resolve_output_path(base_dir: str, configured_name: str, fallback: str) -> str:
    """Return the absolute path where an output artifact should be written."""

    name = (configured_name or "").strip() or fallback
    if os.path.isabs(name):
        return name
    return os.path.join(base_dir, name)


def write_coords(grid: Grid, ok: bool, base_dir: str) -> str:
    """Write one line per placement: index, glyph and covered cells."""

    path = _resolve_output_path(base_dir, CFG.COORDS_OUT, "coords.txt")
    os.makedirs(os.path.dirname(path), exist_ok=True)

    with open(path, "w", encoding="utf-8") as f:
        f.write(f"grid {grid.width}x{grid.height}\n")
        placements = grid.placements()
        if not ok or not placements:
            f.write("No solution\n")
        else:
            for idx, coords in placements.items():
                cells = " ".join(f"({x},{y})" for x, y in coords)
                f.write(f"{idx} {grid.glyph_of(idx)} @ {cells}\n")
    return path


def write_layout_view_html(
    svg: str,
    legend_html: str,
    base_dir: str,
    grid_label: Optional[str] = None,
) -> str:
    """Write the rendered SVG/legend preview to the configured HTML file."""

    path = _resolve_output_path(base_dir, CFG.LAYOUT_HTML, "layout_view.html")
    os.makedirs(os.path.dirname(path), exist_ok=True)

    heading = f"Layout View — {grid_label}" if grid_label else "Layout View"
    with open(path, "w", encoding="utf-8") as vf:
        vf.write(
            f"""<!doctype html>
<html><head><meta charset='utf-8'><title>Layout View</title>
<link rel='stylesheet' href='/styles.css'></head>
<body class='container'>
<h1>{heading}</h1>
<section class='card'><div class='gridwrap'>{svg}</div></section>
<section class='card'><h3>Legend</h3><ul>{legend_html}</ul></section>
</body></html>"""
        )
    return path


__all__ = ["write_coords", "write_layout_view_html"]
