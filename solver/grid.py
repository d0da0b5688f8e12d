# solver/grid.py — occupancy map and backtracking tiler
from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, List, Optional, Tuple

from config import CFG
from models import CellSet, Coord

log = logging.getLogger(__name__)

Occupant = Tuple[int, str]  # (placement_index, glyph)


class Grid:
    """Rectangular board, origin top-left, x right, y down.

    ``cells`` maps each occupied coordinate to ``(placement_index, glyph)``;
    a coordinate missing from the map is vacant.
    """

    def __init__(self, width: int, height: int):
        self.width = int(width)
        self.height = int(height)
        self.cells: Dict[Coord, Occupant] = {}
        self.nodes = 0

    def __repr__(self) -> str:
        return f"Grid({self.width}x{self.height}, occupied={len(self.cells)})"

    # ---------------- occupancy ----------------

    def is_vacant(self, coord: Coord) -> bool:
        x, y = coord
        if x < 0 or y < 0:
            return False
        if x >= self.width or y >= self.height:
            return False
        return coord not in self.cells

    def find_placement_vector(self, cell_set: CellSet) -> Optional[Coord]:
        """
        First translation (row-major scan, then anchor order) that puts every
        cell of ``cell_set`` on a vacant in-bounds coordinate.

        Every cell of the set is tried as the anchor landing on the scanned
        position, so each legal translation is reached at least once.
        """
        for grid_y in range(self.height):
            for grid_x in range(self.width):
                for ax, ay in cell_set:
                    vx, vy = grid_x + ax, grid_y + ay
                    if all(self.is_vacant((vx - x, vy - y)) for x, y in cell_set):
                        return (vx, vy)
        return None

    def place(self, cell_set: CellSet, vector: Coord, placement_index: int, glyph: str) -> None:
        # No overlap check: callers place only at vectors from find_placement_vector.
        vx, vy = vector
        for x, y in cell_set:
            self.cells[(vx - x, vy - y)] = (placement_index, glyph)

    def remove(self, cell_set: CellSet, vector: Coord) -> None:
        vx, vy = vector
        for x, y in cell_set:
            self.cells.pop((vx - x, vy - y), None)

    # ---------------- search ----------------

    def fill_with_rec(self, shapes: List[List[Any]], placement_index: int = 0) -> bool:
        """Depth-first backtracking over ``[shape, remaining]`` pairs.

        On success the final placements stay on the grid and the counts stay
        consumed.  On failure every placement made below this call has been
        removed and every count restored.
        """
        if all(amount == 0 for _, amount in shapes):
            return True

        for entry in shapes:
            shape, amount = entry
            if amount == 0:
                continue

            entry[1] -= 1

            for cell_set in shape.all_orientations():
                vector = self.find_placement_vector(cell_set)
                if vector is None:
                    continue

                self.place(cell_set, vector, placement_index, shape.glyph)
                self._count_node(placement_index)

                if self.fill_with_rec(shapes, placement_index + 1):
                    return True

                self.remove(cell_set, vector)

            entry[1] += 1

        return False

    def _count_node(self, depth: int) -> None:
        self.nodes += 1
        every = CFG.LOG_EVERY
        if every > 0 and self.nodes % every == 0:
            log.info(
                "search progress: %d placements tried, depth %d, %d cells occupied",
                self.nodes, depth, self.occupied_count(),
            )

    # ---------------- views ----------------

    def placements(self) -> Dict[int, List[Coord]]:
        """Occupied coordinates grouped by placement index, row-major within each."""
        groups: Dict[int, List[Coord]] = {}
        for coord in sorted(self.cells, key=lambda c: (c[1], c[0])):
            groups.setdefault(self.cells[coord][0], []).append(coord)
        return dict(sorted(groups.items()))

    def glyph_of(self, placement_index: int) -> str:
        for idx, glyph in self.cells.values():
            if idx == placement_index:
                return glyph
        return " "

    def occupied_count(self) -> int:
        return len(self.cells)

    def area(self) -> int:
        return self.width * self.height

    def rows(self) -> Iterable[List[Optional[Occupant]]]:
        for y in range(self.height):
            yield [self.cells.get((x, y)) for x in range(self.width)]
