import colorsys
import html
from typing import Dict, List, Optional, Tuple

from config import CFG
from solver.grid import Grid

RGB = Tuple[int, int, int]

_GOLDEN = 0.618033988749895


def distinct_colors(n: int) -> List[RGB]:
    """``n`` visually separated colours (golden-ratio hue walk)."""
    out: List[RGB] = []
    hue = 0.0
    for i in range(max(0, n)):
        hue = (hue + _GOLDEN) % 1.0
        light = 0.55 if i % 2 == 0 else 0.42
        r, g, b = colorsys.hls_to_rgb(hue, light, 0.65)
        out.append((int(r * 255), int(g * 255), int(b * 255)))
    return out


def _palette(grid: Grid) -> Dict[int, RGB]:
    indices = sorted({idx for idx, _ in grid.cells.values()})
    colors = distinct_colors(len(indices))
    return dict(zip(indices, colors))


def _css(rgb: RGB) -> str:
    return f"rgb({rgb[0]},{rgb[1]},{rgb[2]})"


def render_text(grid: Grid, color: bool = False, glyphs: Optional[bool] = None) -> str:
    """Bordered box, one character per cell.

    Vacant cells are decided by map presence, so placement 0 and an empty
    cell never look alike.  With ``color`` each placement gets its own
    background; otherwise (or with ``glyphs``) the shape glyph is drawn.
    """
    if glyphs is None:
        glyphs = CFG.SHOW_GLYPHS or not color
    palette = _palette(grid) if color else {}

    lines = ["┌" + "─" * grid.width + "┐"]
    for row in grid.rows():
        out = []
        for occupant in row:
            if occupant is None:
                out.append(" ")
                continue
            idx, glyph = occupant
            ch = glyph if glyphs else " "
            if color:
                r, g, b = palette[idx]
                out.append(f"\x1b[48;2;{r};{g};{b}m{ch}\x1b[0m")
            else:
                out.append(ch)
        lines.append("│" + "".join(out) + "│")
    lines.append("└" + "─" * grid.width + "┘")
    return "\n".join(lines)


def render_result(grid: Grid, names: Optional[Dict[str, str]] = None):
    """Return (svg_markup, legend_html) for the final grid state."""
    names = names or {}
    palette = _palette(grid)

    scale = max(1, int(CFG.SVG_SCALE))
    svg_w = grid.width * scale + 2
    svg_h = grid.height * scale + 2

    rects = []
    for idx, coords in grid.placements().items():
        fill = _css(palette[idx])
        for x, y in coords:
            rects.append(
                f'<rect x="{x * scale + 1}" y="{y * scale + 1}" width="{scale}" height="{scale}" '
                f'fill="{fill}" stroke="{fill}" stroke-width="1" data-placement="{idx}"/>'
            )
        glyph = grid.cells[coords[0]][1]
        x0, y0 = coords[0]
        rects.append(
            f'<text x="{x0 * scale + 5}" y="{y0 * scale + 15}" font-size="12" fill="black">{html.escape(glyph)}</text>'
        )
    border = f'<rect x="1" y="1" width="{svg_w-2}" height="{svg_h-2}" fill="none" stroke="black" stroke-width="2"/>'
    svg = (
        f'<svg class="layout-svg" xmlns="http://www.w3.org/2000/svg" '
        f'width="{svg_w}" height="{svg_h}" '
        f'viewBox="0 0 {svg_w} {svg_h}" preserveAspectRatio="xMinYMin meet">'
        f'{"".join(rects)}{border}</svg>'
    )

    legend = "".join(
        f"<li><span class='swatch' style='background:{_css(palette[idx])}'></span>"
        f"#{idx} {html.escape(names.get(grid.glyph_of(idx), grid.glyph_of(idx)))}</li>"
        for idx in grid.placements()
    )
    return svg, legend
