# Orchestrator: boundary validation and the single backtracking run
from __future__ import annotations

import logging
import sys
import time
from contextlib import contextmanager
from typing import Any, Dict, Iterator

from config import CFG
from progress import (
    log_attempt_detail, set_status, set_grid, set_demand_count, set_nodes,
    set_done, start_timer,
)
from solver.grid import Grid
from tiles import SHAPE_KEYS, build_multiset

log = logging.getLogger(__name__)

# Frames per recursion level plus headroom for the caller's own stack.
_FRAMES_PER_LEVEL = 2
_STACK_HEADROOM = 200


class GridDimensionError(ValueError):
    """Grid side outside the supported 1..MAX_DIM range."""


def validate_dimensions(width: Any, height: Any) -> None:
    limit = int(CFG.MAX_DIM)
    for label, value in (("wide", width), ("tall", height)):
        try:
            v = int(value)
        except (TypeError, ValueError):
            raise GridDimensionError(f"grid size {value!r} is not an integer") from None
        if v > limit:
            raise GridDimensionError(f"grid is too {label} ({v} > {limit})")
        if v < 1:
            raise GridDimensionError(f"grid must be at least 1 cell {label} (got {v})")


@contextmanager
def _recursion_depth(levels: int) -> Iterator[None]:
    """Raise the recursion limit for the duration of one search, then restore it."""
    previous = sys.getrecursionlimit()
    needed = levels * _FRAMES_PER_LEVEL + _STACK_HEADROOM
    if previous < needed:
        log.debug("raising recursion limit to %d", needed)
        sys.setrecursionlimit(needed)
    try:
        yield
    finally:
        if previous < needed:
            sys.setrecursionlimit(previous)


def solve(width: Any, height: Any, counts: Dict[str, int]) -> Dict[str, Any]:
    """
    Fill a ``width`` × ``height`` grid with the requested tile counts.

    Returns a result dict: ``ok``, ``grid``, ``strategy``, ``reason``,
    ``placed_count``, ``demand_count``, ``nodes``, ``elapsed``.  Running out
    of arrangements is an ordinary ``ok=False`` result; only an invalid grid
    size raises (``GridDimensionError``), before anything is searched.
    """
    validate_dimensions(width, height)
    W, H = int(width), int(height)

    unknown = sorted(set(counts) - set(SHAPE_KEYS))
    if unknown:
        raise KeyError(f"unknown shape(s): {', '.join(unknown)}")

    grid = Grid(W, H)
    shapes = build_multiset(counts)
    demand_count = sum(n for _, n in shapes)
    demand_area = sum(shape.size * n for shape, n in shapes)

    start_timer()
    set_status("Solving")
    set_grid(f"{W} × {H} cells")
    set_demand_count(demand_count)
    log_attempt_detail(
        "Run setup",
        grid=f"{W}x{H}",
        demand_count=demand_count,
        demand_area=demand_area,
        grid_area=grid.area(),
        counts=",".join(f"{k}:{n}" for k, n in counts.items() if n),
    )

    t0 = time.time()
    with _recursion_depth(demand_count):
        ok = grid.fill_with_rec(shapes)
    elapsed = time.time() - t0

    placed_count = len(grid.placements())
    if ok:
        strategy = "backtracking"
        reason = None
    else:
        strategy = "exhausted"
        reason = "No arrangement fits the requested tiles"

    set_nodes(grid.nodes)
    set_done(ok, placed=placed_count, message=reason or "")
    log.info(
        "%s %dx%d: %d/%d tiles, %d placements tried in %.3fs",
        "solved" if ok else "exhausted", W, H, placed_count, demand_count,
        grid.nodes, elapsed,
    )

    return {
        "ok": ok,
        "grid": grid,
        "strategy": strategy,
        "reason": reason,
        "W": W,
        "H": H,
        "placed_count": placed_count,
        "demand_count": demand_count,
        "nodes": grid.nodes,
        "elapsed": elapsed,
    }
