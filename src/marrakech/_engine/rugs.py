# Area: Engine
"""
marrakech._engine.rugs — Layered rug grid
=========================================

Each cell holds an append-only stack of rug layers, bottom to top. The
top layer is the visible owner of the cell. Cells are kept in a flat
list indexed by y * size + x and mutated in place.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Dict, Iterator, List, Optional, Tuple

Cell = Tuple[int, int]


@dataclass(frozen=True)
class RugLayer:
    owner_id: str
    rug_id: str


class RugGrid:
    """Square grid of rug stacks."""

    def __init__(self, size: int):
        self.size = size
        self._cells: List[List[RugLayer]] = [[] for _ in range(size * size)]

    @classmethod
    def from_rows(cls, rows: List[List[List[Dict[str, str]]]]) -> "RugGrid":
        """Rebuild a grid from the rows[y][x] export of rows()."""
        grid = cls(len(rows))
        for y, row in enumerate(rows):
            for x, layers in enumerate(row):
                for layer in layers:
                    grid.push(x, y, RugLayer(owner_id=layer["owner_id"], rug_id=layer["rug_id"]))
        return grid

    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.size and 0 <= y < self.size

    def _index(self, x: int, y: int) -> int:
        if not self.in_bounds(x, y):
            raise IndexError(f"Cell ({x}, {y}) outside {self.size}x{self.size} board")
        return y * self.size + x

    def stack(self, x: int, y: int) -> Tuple[RugLayer, ...]:
        return tuple(self._cells[self._index(x, y)])

    def top(self, x: int, y: int) -> Optional[RugLayer]:
        layers = self._cells[self._index(x, y)]
        return layers[-1] if layers else None

    def top_owner(self, x: int, y: int) -> Optional[str]:
        layer = self.top(x, y)
        return layer.owner_id if layer else None

    def push(self, x: int, y: int, layer: RugLayer) -> None:
        self._cells[self._index(x, y)].append(layer)

    def cells(self) -> Iterator[Cell]:
        for y in range(self.size):
            for x in range(self.size):
                yield x, y

    def visible_counts(self) -> Dict[str, int]:
        """Count, per owner, the cells where their layer is on top."""
        counts: Dict[str, int] = {}
        for layers in self._cells:
            if layers:
                owner = layers[-1].owner_id
                counts[owner] = counts.get(owner, 0) + 1
        return counts

    def rows(self) -> List[List[List[Dict[str, str]]]]:
        """Nested rows[y][x] -> list of layer dicts, bottom to top."""
        return [
            [
                [{"owner_id": l.owner_id, "rug_id": l.rug_id} for l in self._cells[y * self.size + x]]
                for x in range(self.size)
            ]
            for y in range(self.size)
        ]
