# config.py
import os

# ======= Grid bounds =======
# Coordinates are kept inside a signed 8-bit range.
MAX_DIM = int(os.getenv("TS_MAX_DIM", "127"))

# ======= Rendering =======
SVG_SCALE   = int(os.getenv("TS_SVG_SCALE", "32"))   # pixels per cell
ANSI_COLOR  = os.getenv("TS_ANSI_COLOR", "auto").strip().lower()   # 1 | 0 | auto
SHOW_GLYPHS = int(os.getenv("TS_SHOW_GLYPHS", "0")) != 0

# ======= Search logging =======
# Emit a progress line every N attempted placements (0 disables).
LOG_EVERY = int(os.getenv("TS_LOG_EVERY", "100000"))

# ======= Output names =======
COORDS_OUT  = os.getenv("TS_COORDS_OUT", "coords.txt")
LAYOUT_HTML = os.getenv("TS_LAYOUT_HTML", "layout_view.html")


class CFG:
    MAX_DIM = MAX_DIM

    SVG_SCALE   = SVG_SCALE
    ANSI_COLOR  = ANSI_COLOR
    SHOW_GLYPHS = SHOW_GLYPHS

    LOG_EVERY = LOG_EVERY

    COORDS_OUT  = COORDS_OUT
    LAYOUT_HTML = LAYOUT_HTML


__all__ = ["CFG", "MAX_DIM"]
