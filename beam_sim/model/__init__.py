"""Model package for the beam simulation."""

from .tiles import Heading, TileKind, advance
from .grid import MalformedGrid, TileGrid
from .state import RayState, RoundSnapshot
from .illumination import count_illuminated, energized_mask, render_energized
from .engine import DEFAULT_ENTRY, BeamEngine, InvariantViolation, simulate
from .search import EntryResult, best_entry, evaluate_entries

__all__ = [
    'Heading',
    'TileKind',
    'advance',
    'MalformedGrid',
    'TileGrid',
    'RayState',
    'RoundSnapshot',
    'count_illuminated',
    'energized_mask',
    'render_energized',
    'DEFAULT_ENTRY',
    'BeamEngine',
    'InvariantViolation',
    'simulate',
    'EntryResult',
    'best_entry',
    'evaluate_entries',
]
