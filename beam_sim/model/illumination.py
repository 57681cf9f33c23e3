"""Reduction of visited ray states into illuminated cells."""

from typing import Iterable, Set, Tuple

import numpy as np

from .state import RayState


def illuminated_positions(visited: Iterable[RayState]) -> Set[Tuple[int, int]]:
    """Distinct cells touched by any visited state; headings are discarded."""
    return {state.position for state in visited}


def count_illuminated(visited: Iterable[RayState]) -> int:
    return len(illuminated_positions(visited))


def energized_mask(visited: Iterable[RayState],
                   shape: Tuple[int, int]) -> np.ndarray:
    """Boolean [y, x] array marking illuminated cells of a grid with ``shape``."""
    mask = np.zeros(shape, dtype=bool)
    for x, y in illuminated_positions(visited):
        mask[y, x] = True
    return mask


def render_energized(mask: np.ndarray) -> str:
    """Text picture of the mask: ``#`` for illuminated cells, ``.`` otherwise."""
    return "\n".join(
        "".join("#" if lit else "." for lit in row) for row in mask
    )
