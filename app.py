# app.py — form, solve, result and progress endpoints
from __future__ import annotations
import logging
import os
import time
from typing import Any, Dict, Optional, Tuple

from flask import Flask, request, render_template, send_from_directory, jsonify, url_for

from config import CFG
from io_files import write_coords, write_layout_view_html
from render import render_result
from solver.orchestrator import GridDimensionError, solve as solve_grid
from tiles import SHAPE_KEYS, SHAPE_LIBRARY, fmt_counts, parse_counts

from progress import (
    reset as progress_reset,
    as_json as progress_json,
    set_done,
)

BASE_DIR = os.path.dirname(os.path.abspath(__file__))

log = logging.getLogger(__name__)


def _resolve_output_paths(configured: str, fallback: str) -> Tuple[str, str, str]:
    name = (configured or "").strip() or fallback
    if os.path.isabs(name):
        full_path = name
    else:
        full_path = os.path.abspath(os.path.join(BASE_DIR, name))
    directory = os.path.dirname(full_path) or BASE_DIR
    filename = os.path.basename(full_path) or fallback
    return full_path, directory, filename


_COORDS_FULL_PATH, COORDS_DIR, COORDS_FILENAME = _resolve_output_paths(
    CFG.COORDS_OUT, "coords.txt"
)
_LAYOUT_FULL_PATH, LAYOUT_DIR, LAYOUT_FILENAME = _resolve_output_paths(
    CFG.LAYOUT_HTML, "layout_view.html"
)

_EMPTY_RESULT: Dict[str, Any] = {
    "ok": False,
    "strategy": "No run yet",
    "W": 0,
    "H": 0,
    "placed_count": 0,
    "demand_count": 0,
    "nodes": 0,
    "elapsed_str": "0s",
    "svg": "",
    "legend": "",
    "demand_items": [],
    "coords_filename": COORDS_FILENAME,
    "layout_filename": LAYOUT_FILENAME,
}

LAST_RESULT: Dict[str, Any] = dict(_EMPTY_RESULT)

SHAPE_NAMES: Dict[str, str] = {shape.glyph: shape.name for shape in SHAPE_LIBRARY.values()}

app = Flask(__name__, static_folder=None, template_folder="templates")


@app.after_request
def _no_cache_progress(resp):
    if request.path == "/progress":
        resp.headers["Cache-Control"] = "no-store, max-age=0"
        resp.headers["Pragma"] = "no-cache"
        resp.headers["Expires"] = "0"
    return resp


@app.route("/")
def index():
    shapes = [(key, SHAPE_LIBRARY[key]) for key in SHAPE_KEYS]
    return render_template("index.html", shapes=shapes, max_dim=CFG.MAX_DIM)


@app.route("/result/latest")
def result_latest():
    return render_template("result.html", **LAST_RESULT)


@app.route("/styles.css")
def styles_css():
    return send_from_directory(BASE_DIR, "styles.css")


def _fmt_elapsed(seconds: float) -> str:
    if seconds < 1:
        return f"{seconds * 1000:.0f}ms"
    m, s = divmod(int(seconds), 60)
    if m == 0:
        return f"{s}s"
    h, m = divmod(m, 60)
    if h == 0:
        return f"{m}m {s}s"
    return f"{h}h {m}m {s}s"


def _merge_like_mapping() -> Dict[str, Any]:
    merged: Dict[str, Any] = {}
    payload = request.get_json(silent=True)
    if isinstance(payload, dict):
        merged.update(payload)

    for k, v in request.form.to_dict(flat=False).items():
        merged.setdefault(k, v)
    for k, v in request.args.to_dict(flat=False).items():
        merged.setdefault(k, v)

    return merged


def _first(val: Any) -> Any:
    if isinstance(val, (list, tuple)):
        return val[0] if val else None
    return val


def _extract_grid(like: Dict[str, Any]) -> Tuple[Optional[int], Optional[int], Optional[str]]:
    """Return (width, height, error_message_or_None)."""
    for wk, hk in (("width", "height"), ("W", "H")):
        wv, hv = _first(like.get(wk)), _first(like.get(hk))
        if wv in (None, "") or hv in (None, ""):
            continue
        try:
            return int(str(wv).strip()), int(str(hv).strip()), None
        except ValueError:
            return None, None, f"Bad grid: {wk}={wv!r} / {hk}={hv!r} must be whole numbers"
    return None, None, None


def _fail(reason: str, t0: float, demand_items=(), demand_count: int = 0):
    set_done(False, status="Error", message=reason)
    LAST_RESULT.clear()
    LAST_RESULT.update(_EMPTY_RESULT)
    LAST_RESULT.update({
        "strategy": reason,
        "demand_count": demand_count,
        "demand_items": list(demand_items),
        "elapsed_str": _fmt_elapsed(time.time() - t0),
    })
    return render_template("result.html", result_url=url_for("result_latest"), **LAST_RESULT), 400


@app.route("/solve", methods=["POST"])
def solve():
    progress_reset()
    t0 = time.time()

    like = _merge_like_mapping()
    counts, err = parse_counts(like)
    demand_items = fmt_counts(counts)
    demand_count = sum(counts.values())
    if err:
        return _fail(err, t0, demand_items, demand_count)

    W, H, grid_err = _extract_grid(like)
    if grid_err:
        return _fail(grid_err, t0, demand_items, demand_count)
    if W is None or H is None:
        seen_keys = ", ".join(list(like.keys())[:8]) or "—"
        return _fail(f"Bad grid: width and height are required (saw keys: {seen_keys})",
                     t0, demand_items, demand_count)

    try:
        result = solve_grid(W, H, counts)
    except GridDimensionError as e:
        return _fail(f"Bad grid: {e}", t0, demand_items, demand_count)

    grid = result["grid"]
    strategy_text = "Solved by backtracking" if result["ok"] else result["reason"]

    svg_markup, legend_html = render_result(grid, SHAPE_NAMES)
    coords_name = COORDS_FILENAME
    layout_name = LAYOUT_FILENAME
    try:
        coords_path = write_coords(grid, result["ok"], BASE_DIR)
        coords_name = os.path.basename(coords_path) or COORDS_FILENAME
        layout_path = write_layout_view_html(
            svg_markup, legend_html, BASE_DIR, grid_label=f"{W} × {H} cells"
        )
        layout_name = os.path.basename(layout_path) or LAYOUT_FILENAME
    except OSError:
        log.exception("could not write output files")

    LAST_RESULT.clear()
    LAST_RESULT.update({
        "ok": result["ok"],
        "strategy": strategy_text,
        "W": W,
        "H": H,
        "placed_count": result["placed_count"],
        "demand_count": result["demand_count"],
        "nodes": result["nodes"],
        "elapsed_str": _fmt_elapsed(time.time() - t0),
        "svg": svg_markup,
        "legend": legend_html,
        "demand_items": demand_items,
        "coords_filename": coords_name,
        "layout_filename": layout_name,
    })
    return render_template("result.html", result_url=url_for("result_latest"), **LAST_RESULT)


@app.route("/download/coords")
def download_coords():
    return send_from_directory(COORDS_DIR, COORDS_FILENAME, as_attachment=True)


@app.route("/download/html")
def download_html():
    return send_from_directory(LAYOUT_DIR, LAYOUT_FILENAME, as_attachment=True)


@app.route("/progress")
def progress():
    return jsonify(progress_json())


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    app.run(debug=False)
