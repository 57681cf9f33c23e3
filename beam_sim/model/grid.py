"""Tile grid management for the beam simulation."""

from pathlib import Path
from typing import Iterable, List, Optional, Tuple

import numpy as np

from .tiles import CODE_TILES, TILE_CODES, Heading, TileKind


class MalformedGrid(ValueError):
    """Raised when input rows cannot form a rectangular tile grid."""


class TileGrid:
    """
    Immutable 2D environment of tile kinds.

    Coordinate convention: (x, y) for API, [y, x] for array indexing.
    """

    def __init__(self, tiles: np.ndarray):
        if tiles.ndim != 2 or tiles.size == 0:
            raise MalformedGrid("Grid must be a non-empty 2D array")
        self.height, self.width = tiles.shape
        self.tiles = tiles.copy()
        self.tiles.setflags(write=False)

    @classmethod
    def from_lines(cls, lines: Iterable[str]) -> "TileGrid":
        """Parse equal-length text rows using the character set ``. - | / \\``."""
        rows = [line.rstrip("\r\n").rstrip() for line in lines]
        # Trailing blank lines are file padding, not rows.
        while rows and not rows[-1]:
            rows.pop()
        if not rows:
            raise MalformedGrid("Grid input contains no rows")

        width = len(rows[0])
        codes: List[List[int]] = []
        for y, row in enumerate(rows):
            if len(row) != width:
                raise MalformedGrid(
                    f"Row {y} has length {len(row)}, expected {width}"
                )
            row_codes = []
            for x, char in enumerate(row):
                try:
                    kind = TileKind.from_char(char)
                except ValueError as exc:
                    raise MalformedGrid(
                        f"Unrecognized tile {char!r} at row {y}, column {x}"
                    ) from exc
                row_codes.append(TILE_CODES[kind])
            codes.append(row_codes)

        return cls(np.array(codes, dtype=np.int8))

    @classmethod
    def from_file(cls, path: Path) -> "TileGrid":
        """Load a grid from a text file, one row per line."""
        with open(path) as f:
            return cls.from_lines(f.readlines())

    @property
    def shape(self) -> Tuple[int, int]:
        return self.height, self.width

    def contains(self, position: Tuple[int, int]) -> bool:
        """Check if position is within grid bounds."""
        x, y = position
        return 0 <= x < self.width and 0 <= y < self.height

    def tile_at(self, position: Tuple[int, int]) -> Optional[TileKind]:
        """Tile at position, or None when out of bounds."""
        if not self.contains(position):
            return None
        x, y = position
        return CODE_TILES[self.tiles[y, x]]

    def count(self, kind: TileKind) -> int:
        return int(np.count_nonzero(self.tiles == TILE_CODES[kind]))

    def edge_entries(self) -> List[Tuple[Tuple[int, int], Heading]]:
        """
        Every edge cell paired with the heading pointing into the grid.

        Corner cells appear twice, once per inward heading.
        """
        entries = []
        for x in range(self.width):
            entries.append(((x, 0), Heading.DOWN))
            entries.append(((x, self.height - 1), Heading.UP))
        for y in range(self.height):
            entries.append(((0, y), Heading.RIGHT))
            entries.append(((self.width - 1, y), Heading.LEFT))
        return entries

    def render(self) -> str:
        """Text form of the grid, the inverse of ``from_lines``."""
        return "\n".join(
            "".join(CODE_TILES[code].char for code in row) for row in self.tiles
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, TileGrid):
            return NotImplemented
        return np.array_equal(self.tiles, other.tiles)

    def __hash__(self) -> int:
        return hash((self.shape, self.tiles.tobytes()))

    def __repr__(self) -> str:
        return f"TileGrid(width={self.width}, height={self.height})"
