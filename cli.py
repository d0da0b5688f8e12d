# cli.py
import argparse
import logging
import sys

from config import CFG
from render import render_text
from solver.orchestrator import GridDimensionError, solve

FAILURE_MESSAGE = "failed to fill the grid! :("

# (dest, flags, help)
_SHAPE_FLAGS = (
    ("square",    ("-s", "--square"), "number of 2x2 squares"),
    ("line",      ("-i", "--line"),   "number of 4-in-a-row lines"),
    ("z",         ("-z", "--z"),      "number of Z tiles"),
    ("reverse_z", ("--rz",),          "number of mirrored Z tiles"),
    ("l",         ("-l", "--l"),      "number of L tiles"),
    ("reverse_l", ("--rl",),          "number of mirrored L tiles"),
    ("t",         ("-t", "--t"),      "number of T tiles"),
)


def _count(value: str) -> int:
    n = int(value)
    if n < 0:
        raise argparse.ArgumentTypeError(f"count must be non-negative: {value}")
    return n


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(description="Fill a grid with tetrominoes by exhaustive backtracking")
    p.add_argument("width", type=int, help="grid width in cells (1-%d)" % CFG.MAX_DIM)
    p.add_argument("height", type=int, help="grid height in cells (1-%d)" % CFG.MAX_DIM)
    for dest, flags, help_text in _SHAPE_FLAGS:
        p.add_argument(*flags, dest=dest, type=_count, default=0, help=help_text)
    p.add_argument("--no-color", action="store_true", help="plain glyph output without ANSI colours")
    p.add_argument("-v", "--verbose", action="store_true", help="log search progress to stderr")
    return p


def _use_color(args) -> bool:
    if args.no_color:
        return False
    if CFG.ANSI_COLOR in ("1", "true", "yes"):
        return True
    if CFG.ANSI_COLOR in ("0", "false", "no"):
        return False
    return sys.stdout.isatty()


def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )

    counts = {dest: getattr(args, dest) for dest, _, _ in _SHAPE_FLAGS}
    try:
        result = solve(args.width, args.height, counts)
    except GridDimensionError as e:
        parser.error(str(e))

    if not result["ok"]:
        print(FAILURE_MESSAGE)

    print(render_text(result["grid"], color=_use_color(args)))
    return 0


if __name__ == "__main__":
    sys.exit(main())
