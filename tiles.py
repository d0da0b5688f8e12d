# tiles.py — fixed tetromino library and demand parsing
from __future__ import annotations
import math
from typing import Any, Dict, List, Optional, Tuple

from models import Shape

# key -> (pattern, extra rotations, glyph, label)
# Rotation counts only cover orientations that are distinct under each
# shape's own symmetry.
_DEFINITIONS: Tuple[Tuple[str, str, int, str, str], ...] = (
    ("square",    "##\n##",  0, "#", "Square"),
    ("line",      "####",    1, "+", "Line"),
    ("z",         "##\n ##", 1, "Z", "Z"),
    ("reverse_z", " ##\n##", 1, "N", "Reverse Z"),
    ("l",         "###\n#",  3, "L", "L"),
    ("reverse_l", "#\n###",  3, "⅃", "Reverse L"),
    ("t",         "###\n #", 3, "T", "T"),
)

SHAPE_KEYS: Tuple[str, ...] = tuple(d[0] for d in _DEFINITIONS)

SHAPE_LIBRARY: Dict[str, Shape] = {
    key: Shape.from_pattern(pattern, rotations, glyph, name)
    for key, pattern, rotations, glyph, name in _DEFINITIONS
}

# Short spellings accepted from forms and query strings (mirrors CLI flags).
_ALIASES: Dict[str, str] = {
    "s": "square",
    "i": "line",
    "rz": "reverse_z",
    "rl": "reverse_l",
}

_PREFIXES = ("q_", "qty_", "quantity_", "count_", "cnt_")


def _to_int(x: Any) -> Optional[int]:
    try:
        f = float(x)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(f) or f != int(f):
        return None
    return int(f)


def _first(val: Any) -> Any:
    if isinstance(val, (list, tuple)):
        return val[0] if val else None
    return val


def _normalize_key(key: str) -> Optional[str]:
    k = (key or "").strip().lower().replace("-", "_")
    for pre in _PREFIXES:
        if k.startswith(pre):
            k = k[len(pre):]
            break
    k = _ALIASES.get(k, k)
    return k if k in SHAPE_LIBRARY else None


def parse_counts(form_like: Any) -> Tuple[Dict[str, int], Optional[str]]:
    """
    Return ({shape_key: count}, error_message_or_None).

    Every library shape is present in the result (missing keys count 0).
    Keys may carry a quantity prefix (``qty_square``) or use the short CLI
    spelling (``rz``); values may be scalars or single-element lists as
    produced by ``request.form.to_dict(flat=False)``.
    """
    counts: Dict[str, int] = {key: 0 for key in SHAPE_KEYS}
    if not form_like:
        return counts, None
    if not hasattr(form_like, "items"):
        return counts, "Bad demand: expected a mapping of shape counts"

    for raw_k, raw_v in form_like.items():
        key = _normalize_key(str(raw_k))
        if key is None:
            continue
        v = _first(raw_v)
        if v is None or str(v).strip() == "":
            continue
        n = _to_int(str(v).strip())
        if n is None:
            return counts, f"Bad demand: {raw_k}={v!r} is not a whole number"
        if n < 0:
            return counts, f"Bad demand: negative count for {key}"
        counts[key] = n

    return counts, None


def build_multiset(counts: Dict[str, int]) -> List[List[Any]]:
    """Search input: ``[shape, remaining]`` pairs in library order."""
    return [[SHAPE_LIBRARY[key], int(counts.get(key, 0))] for key in SHAPE_KEYS]


def fmt_counts(counts: Dict[str, int]) -> List[Tuple[str, int]]:
    return [(SHAPE_LIBRARY[k].name, n) for k, n in counts.items() if n > 0]
