"""Grid beam propagation simulator."""

from .model import BeamEngine, Heading, MalformedGrid, RayState, TileGrid, TileKind, simulate

__version__ = "0.1.0"

__all__ = [
    'BeamEngine',
    'Heading',
    'MalformedGrid',
    'RayState',
    'TileGrid',
    'TileKind',
    'simulate',
]
