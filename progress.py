from __future__ import annotations

import logging
import os
import time
import threading
from pathlib import Path
from typing import Any, Dict, Optional

# ------------------------------
# Thread-safe global progress state
# ------------------------------

PROGRESS_LOCK = threading.Lock()


def _log_file_path() -> Path:
    configured = os.environ.get("SOLVER_LOG_FILE")
    if configured:
        return Path(configured)
    return Path(__file__).resolve().parent / "logs" / "solver_attempts.log"


def _init_logger() -> logging.Logger:
    logger = logging.getLogger("solver.attempt_log")
    if logger.handlers:
        return logger

    log_path = _log_file_path()
    try:
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handler = logging.FileHandler(log_path, encoding="utf-8")
        formatter = logging.Formatter(
            "%(asctime)s [%(levelname)s] %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
        handler.setFormatter(formatter)
        logger.addHandler(handler)
        logger.setLevel(logging.INFO)
        logger.propagate = False
    except OSError:
        # An unwritable log directory leaves attempt logging disabled.
        logger.handlers.clear()
    return logger


ATTEMPT_LOGGER = _init_logger()


def _log_enabled() -> bool:
    return bool(ATTEMPT_LOGGER.handlers)


def _fmt_seconds(seconds: Optional[float]) -> Optional[str]:
    if seconds is None:
        return None
    return f"{float(seconds):.2f}s"


def _emit_log(event: str, **fields: Any) -> None:
    if not _log_enabled():
        return
    extras = [
        f"{key}={value}"
        for key, value in fields.items()
        if value is not None and value != ""
    ]
    if extras:
        ATTEMPT_LOGGER.info("%s | %s", event, " ".join(extras))
    else:
        ATTEMPT_LOGGER.info("%s", event)


def log_attempt_detail(event: str, **fields: Any) -> None:
    """Public entry point for solver modules to write to the attempt log."""
    _emit_log(event, **fields)


# Single source of truth for the /progress endpoint
PROGRESS: Dict[str, Any] = {
    "status": "Idle",          # Idle | Solving | Solved | Exhausted | Error
    "grid": "",                # e.g. "8 × 6 cells"
    "demand_count": 0,         # tile instances requested
    "placed_count": 0,         # tile instances on the final grid
    "nodes": 0,                # placements attempted by the search
    "elapsed_start": None,     # t0 (float) when solving started
    "elapsed": 0.0,            # seconds snapshot
    "message": "",             # optional note
    "done": False,             # run completed
    "ok": None,                # success flag if known
    "run_id": 0,               # monotonically increasing identifier
}

# ------------------------------
# Helpers
# ------------------------------

def _now() -> float:
    return time.time()


def _fmt_elapsed(seconds: float) -> str:
    seconds = max(0.0, float(seconds))
    if seconds < 60:
        return f"{seconds:.2f}s" if seconds < 1 else f"{int(seconds)}s"
    m, s = divmod(int(seconds), 60)
    if m < 60:
        return f"{m}m {s}s"
    h, m = divmod(m, 60)
    return f"{h}h {m}m"


def _touch_elapsed_locked() -> None:
    t0 = PROGRESS.get("elapsed_start")
    if t0 is not None and not PROGRESS.get("done"):
        PROGRESS["elapsed"] = _now() - float(t0)


def reset() -> None:
    with PROGRESS_LOCK:
        new_run_id = int(PROGRESS.get("run_id", 0)) + 1
        PROGRESS.update({
            "status": "Idle",
            "grid": "",
            "demand_count": 0,
            "placed_count": 0,
            "nodes": 0,
            "elapsed_start": None,
            "elapsed": 0.0,
            "message": "",
            "done": False,
            "ok": None,
            "run_id": new_run_id,
        })
        _emit_log("Progress reset", run_id=new_run_id)


def start_timer() -> None:
    with PROGRESS_LOCK:
        PROGRESS["elapsed_start"] = _now()
        PROGRESS["elapsed"] = 0.0
        _emit_log("Run timer started", run_id=PROGRESS["run_id"])

# ------------------------------
# Setters
# ------------------------------

def set_status(v: Any) -> None:
    with PROGRESS_LOCK:
        PROGRESS["status"] = str(v)


def set_grid(v: Any) -> None:
    with PROGRESS_LOCK:
        grid_str = "" if v is None else str(v)
        if grid_str != PROGRESS["grid"] and grid_str:
            _emit_log("Grid updated", grid=grid_str)
        PROGRESS["grid"] = grid_str


def set_demand_count(n: Any) -> None:
    with PROGRESS_LOCK:
        PROGRESS["demand_count"] = max(0, int(n))


def set_nodes(n: Any) -> None:
    with PROGRESS_LOCK:
        PROGRESS["nodes"] = max(0, int(n))


def set_done(
    ok: Any = None, *, placed: Any = None, message: Any = None, status: Any = None,
) -> None:
    """Mark the run complete.

    ``ok`` selects the final status (``Solved`` or ``Exhausted``); when it is
    omitted the status is left alone unless still idle.  An explicit
    ``status`` (e.g. ``Error`` for rejected input) wins over both.
    """
    with PROGRESS_LOCK:
        _touch_elapsed_locked()
        if status is not None:
            PROGRESS["status"] = str(status)
            PROGRESS["ok"] = bool(ok) if ok is not None else False
        elif ok is not None:
            PROGRESS["ok"] = bool(ok)
            PROGRESS["status"] = "Solved" if ok else "Exhausted"
        elif PROGRESS.get("status") in ("", "Idle", None):
            PROGRESS["status"] = "Solved"
            PROGRESS["ok"] = True
        if placed is not None:
            PROGRESS["placed_count"] = max(0, int(placed))
        if message is not None:
            PROGRESS["message"] = str(message)
        PROGRESS["done"] = True
        _emit_log(
            "Run finished",
            status=PROGRESS["status"],
            ok=PROGRESS["ok"],
            duration=_fmt_seconds(PROGRESS["elapsed"]),
            nodes=PROGRESS["nodes"],
            placed=PROGRESS["placed_count"],
            message=PROGRESS["message"],
        )

# ------------------------------
# Snapshots for the UI
# ------------------------------

def snapshot() -> Dict[str, Any]:
    with PROGRESS_LOCK:
        _touch_elapsed_locked()
        out = {k: v for k, v in PROGRESS.items() if k != "elapsed_start"}
        out["elapsed_str"] = _fmt_elapsed(PROGRESS["elapsed"])
        return out


def as_json() -> Dict[str, Any]:
    # Alias used by /progress
    return snapshot()
