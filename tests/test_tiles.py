import pytest

from models import rotate_cells
from tiles import SHAPE_KEYS, SHAPE_LIBRARY, build_multiset, fmt_counts, parse_counts


def test_library_holds_seven_tetrominoes_in_fixed_order():
    assert SHAPE_KEYS == ("square", "line", "z", "reverse_z", "l", "reverse_l", "t")
    assert all(SHAPE_LIBRARY[k].size == 4 for k in SHAPE_KEYS)


@pytest.mark.parametrize(
    "key,rotations,glyph",
    [
        ("square", 0, "#"),
        ("line", 1, "+"),
        ("z", 1, "Z"),
        ("reverse_z", 1, "N"),
        ("l", 3, "L"),
        ("reverse_l", 3, "⅃"),
        ("t", 3, "T"),
    ],
)
def test_library_rotation_counts_and_glyphs(key, rotations, glyph):
    shape = SHAPE_LIBRARY[key]
    assert len(shape.rotations) == rotations
    assert shape.glyph == glyph


def _normalized(cells):
    mx = min(x for x, _ in cells)
    my = min(y for _, y in cells)
    return frozenset((x - mx, y - my) for x, y in cells)


@pytest.mark.parametrize("key", ["square", "line", "z", "reverse_z"])
def test_skipped_rotations_are_redundant_by_symmetry(key):
    shape = SHAPE_LIBRARY[key]
    listed = {_normalized(c) for c in shape.all_orientations()}
    cells = shape.base_cells
    for _ in range(4):
        cells = rotate_cells(cells)
        assert _normalized(cells) in listed


def test_parse_counts_fills_missing_shapes_with_zero():
    counts, err = parse_counts({"square": "2", "t": ["3"]})
    assert err is None
    assert counts == {"square": 2, "line": 0, "z": 0, "reverse_z": 0, "l": 0, "reverse_l": 0, "t": 3}


def test_parse_counts_accepts_prefixes_and_cli_spellings():
    counts, err = parse_counts({"qty_line": 1, "rz": "2", "count_reverse-l": "1", "s": 4, "width": 8})
    assert err is None
    assert counts["line"] == 1
    assert counts["reverse_z"] == 2
    assert counts["reverse_l"] == 1
    assert counts["square"] == 4


def test_parse_counts_skips_blank_values():
    counts, err = parse_counts({"z": "", "l": [""]})
    assert err is None
    assert counts["z"] == 0 and counts["l"] == 0


@pytest.mark.parametrize("value", ["-1", "1.5", "many", "nan", "inf", "-inf"])
def test_parse_counts_reports_bad_demand(value):
    _counts, err = parse_counts({"t": value})
    assert err is not None
    assert err.startswith("Bad demand")


def test_parse_counts_rejects_non_mapping():
    _counts, err = parse_counts([1, 2, 3])
    assert err.startswith("Bad demand")


def test_build_multiset_follows_library_order():
    shapes = build_multiset({"t": 2, "square": 1})
    assert [s.glyph for s, _ in shapes] == ["#", "+", "Z", "N", "L", "⅃", "T"]
    assert [n for _, n in shapes] == [1, 0, 0, 0, 0, 0, 2]
    # fresh lists: mutating one run does not leak into the next
    shapes[0][1] = 0
    assert build_multiset({"square": 1})[0][1] == 1


def test_fmt_counts_lists_requested_shapes_only():
    counts, _ = parse_counts({"square": 1, "reverse_l": 2})
    assert fmt_counts(counts) == [("Square", 1), ("Reverse L", 2)]
