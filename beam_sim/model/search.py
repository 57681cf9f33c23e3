"""Best entry search: one independent simulation per edge entry."""

from concurrent.futures import ProcessPoolExecutor
from dataclasses import dataclass
from typing import Iterable, List

from .engine import simulate
from .grid import TileGrid
from .state import RayState


@dataclass(frozen=True)
class EntryResult:
    entry: RayState
    illuminated: int


def _simulate_entry(grid: TileGrid, entry: RayState) -> EntryResult:
    return EntryResult(entry=entry, illuminated=simulate(grid, entry))


def evaluate_entries(grid: TileGrid,
                     entries: Iterable[RayState],
                     workers: int = 1) -> List[EntryResult]:
    """
    Simulate each entry independently; results keep the order of ``entries``.

    With ``workers > 1`` the runs are spread over a process pool. Runs share
    only the read-only grid.
    """
    entries = list(entries)
    if workers <= 1 or len(entries) <= 1:
        return [_simulate_entry(grid, entry) for entry in entries]

    with ProcessPoolExecutor(max_workers=workers) as pool:
        return list(pool.map(_simulate_entry, [grid] * len(entries), entries))


def best_entry(grid: TileGrid, workers: int = 1) -> EntryResult:
    """Edge entry with the largest illuminated count; ties keep the first."""
    entries = [RayState(position, heading)
               for position, heading in grid.edge_entries()]
    results = evaluate_entries(grid, entries, workers=workers)
    return max(results, key=lambda result: result.illuminated)
