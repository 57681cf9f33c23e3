"""Tile kinds, headings and the propagation rule for the beam simulation."""

from enum import Enum
from typing import Dict, Tuple


class Heading(Enum):
    """Cardinal headings of a ray. Screen coordinates: y grows downward."""

    UP = (0, -1)
    DOWN = (0, 1)
    LEFT = (-1, 0)
    RIGHT = (1, 0)

    @property
    def vector(self) -> Tuple[int, int]:
        return self.value

    @staticmethod
    def from_name(name: str) -> "Heading":
        try:
            return Heading[name.strip().upper()]
        except KeyError as exc:
            raise ValueError(f"Unknown heading: {name}") from exc

    def reverse(self) -> "Heading":
        return _REVERSE[self]


_REVERSE: Dict[Heading, Heading] = {
    Heading.UP: Heading.DOWN,
    Heading.DOWN: Heading.UP,
    Heading.LEFT: Heading.RIGHT,
    Heading.RIGHT: Heading.LEFT,
}


class TileKind(Enum):
    """Static redirection behavior of a grid cell, keyed by its input character."""

    EMPTY = "."
    HORIZONTAL_SPLITTER = "-"
    VERTICAL_SPLITTER = "|"
    FORWARD_MIRROR = "/"
    BACKWARD_MIRROR = "\\"

    @property
    def char(self) -> str:
        return self.value

    @staticmethod
    def from_char(char: str) -> "TileKind":
        try:
            return TileKind(char)
        except ValueError as exc:
            raise ValueError(f"Unknown tile character: {char!r}") from exc

    @property
    def is_splitter(self) -> bool:
        return self in (TileKind.HORIZONTAL_SPLITTER, TileKind.VERTICAL_SPLITTER)


# Stable small-integer codes used by the numpy tile array.
TILE_CODES: Dict[TileKind, int] = {kind: code for code, kind in enumerate(TileKind)}
CODE_TILES: Tuple[TileKind, ...] = tuple(TileKind)

_FORWARD_MIRROR: Dict[Heading, Heading] = {
    Heading.UP: Heading.RIGHT,
    Heading.RIGHT: Heading.UP,
    Heading.DOWN: Heading.LEFT,
    Heading.LEFT: Heading.DOWN,
}

_BACKWARD_MIRROR: Dict[Heading, Heading] = {
    Heading.UP: Heading.LEFT,
    Heading.LEFT: Heading.UP,
    Heading.DOWN: Heading.RIGHT,
    Heading.RIGHT: Heading.DOWN,
}


def advance(tile: TileKind, heading: Heading) -> Tuple[Heading, ...]:
    """
    Outgoing heading(s) for a ray entering ``tile`` with ``heading``.

    Always returns one heading, or two when a splitter is hit across its axis.
    Pure: no state is read or written.
    """
    if tile is TileKind.EMPTY:
        return (heading,)
    if tile is TileKind.FORWARD_MIRROR:
        return (_FORWARD_MIRROR[heading],)
    if tile is TileKind.BACKWARD_MIRROR:
        return (_BACKWARD_MIRROR[heading],)
    if tile is TileKind.HORIZONTAL_SPLITTER:
        if heading in (Heading.LEFT, Heading.RIGHT):
            return (heading,)
        return (Heading.LEFT, Heading.RIGHT)
    if tile is TileKind.VERTICAL_SPLITTER:
        if heading in (Heading.UP, Heading.DOWN):
            return (heading,)
        return (Heading.UP, Heading.DOWN)
    raise ValueError(f"Unhandled tile kind: {tile!r}")
