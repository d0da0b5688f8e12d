from dataclasses import dataclass, field
from typing import FrozenSet, Iterable, Iterator, Optional, Tuple

Coord = Tuple[int, int]
CellSet = FrozenSet[Coord]

MARKER = "#"


def rotate_cells(cells: Iterable[Coord]) -> CellSet:
    """Quarter turn: (x, y) -> (y, -x)."""
    return frozenset((y, -x) for x, y in cells)


def cells_from_pattern(pattern: str) -> CellSet:
    return frozenset(
        (x, y)
        for y, line in enumerate(pattern.splitlines())
        for x, ch in enumerate(line)
        if ch == MARKER
    )


@dataclass(frozen=True)
class Shape:
    base_cells: CellSet
    rotations: Tuple[CellSet, ...]
    glyph: str
    name: str = field(default="")

    @classmethod
    def from_pattern(
        cls,
        pattern: str,
        rotation_count: int,
        glyph: str,
        name: Optional[str] = None,
    ) -> "Shape":
        """
        Build a shape from a text pattern where ``#`` marks an occupied cell
        at (column, row).  ``rotation_count`` extra quarter turns are
        precomputed; callers only request the turns that are not redundant
        under the shape's own symmetry.
        """
        base = cells_from_pattern(pattern)
        rotations = []
        prev = base
        for _ in range(rotation_count):
            prev = rotate_cells(prev)
            rotations.append(prev)
        return cls(base, tuple(rotations), glyph, name or glyph)

    def all_orientations(self) -> Iterator[CellSet]:
        yield self.base_cells
        yield from self.rotations

    @property
    def size(self) -> int:
        return len(self.base_cells)

    def __str__(self) -> str:
        if not self.base_cells:
            return ""
        xs = [x for x, _ in self.base_cells]
        ys = [y for _, y in self.base_cells]
        rows = []
        for y in range(min(ys), max(ys) + 1):
            row = "".join(
                self.glyph if (x, y) in self.base_cells else " "
                for x in range(min(xs), max(xs) + 1)
            )
            rows.append(row.rstrip())
        return "\n".join(rows) + "\n"
