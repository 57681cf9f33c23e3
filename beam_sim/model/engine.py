"""Simulation engine for grid beam propagation."""

from typing import Dict, FrozenSet, Optional, Set

import numpy as np

from .grid import TileGrid
from .illumination import count_illuminated, energized_mask
from .state import RayState, RoundSnapshot
from .tiles import Heading, TileKind, advance


# Synthetic state just left of the top-left cell, moving inward.
DEFAULT_ENTRY = RayState((-1, 0), Heading.RIGHT)


class InvariantViolation(RuntimeError):
    """Raised when the engine reaches a state a correct run never produces."""


class BeamEngine:
    """
    Advances every live ray one cell per round until no new state appears.

    Implements:
    1. Seeding from a single entry ray
    2. Round stepping with bounds retirement
    3. Cycle breaking through the visited (position, heading) set
    4. Illumination reduction once settled
    """

    def __init__(self, grid: TileGrid,
                 entry: Optional[RayState] = None,
                 max_rounds: Optional[int] = None):
        self.grid = grid
        # Every growing round adds a state, plus one round to drain the rest.
        self.max_rounds = (max_rounds if max_rounds is not None
                           else self.state_space_size() + 1)
        self.current_round = 0
        self.entry = entry if entry is not None else DEFAULT_ENTRY
        self.live_rays: Set[RayState] = set()
        self._visited: Set[RayState] = set()
        self.seed(self.entry)

    def state_space_size(self) -> int:
        """Upper bound on distinct ray states: four headings per cell."""
        return 4 * self.grid.width * self.grid.height

    def seed(self, entry: RayState) -> None:
        """
        Reset the run and insert the entry ray.

        An entry outside the grid is live as given and moves inward on the
        first round. An entry inside the grid is a beam arriving at that cell,
        so it is seeded one cell back and the entry tile is applied on the
        first round like any other.
        """
        self.entry = entry
        self.current_round = 0
        self._visited = set()
        if self.grid.contains(entry.position):
            entry = entry.retreat()
        self.live_rays = {entry}

    def step(self) -> RoundSnapshot:
        """
        Execute one round.

        1. Move each live ray one cell along its heading
        2. Retire rays that leave the grid
        3. Apply the propagation rule at the new cell
        4. Keep only states not already visited
        5. Return the round summary
        """
        if self.is_settled():
            raise InvariantViolation("step() called on a settled engine")
        self.current_round += 1

        next_live: Set[RayState] = set()
        new_states = 0
        retired = 0
        dropped = 0

        for ray in self.live_rays:
            candidate = ray.next_position()
            if not self.grid.contains(candidate):
                retired += 1
                continue

            tile = self._resolve_tile(candidate)
            for heading in advance(tile, ray.heading):
                state = RayState(candidate, heading)
                # Insert-if-absent: a state is spawned at most once per run.
                if state in self._visited:
                    dropped += 1
                    continue
                self._visited.add(state)
                next_live.add(state)
                new_states += 1

        self.live_rays = next_live

        return RoundSnapshot(
            round=self.current_round,
            live_rays=len(next_live),
            new_states=new_states,
            retired=retired,
            dropped=dropped,
            visited_count=len(self._visited),
        )

    def _resolve_tile(self, position) -> TileKind:
        tile = self.grid.tile_at(position)
        if tile is None:
            raise InvariantViolation(
                f"Tile lookup at {position} outside {self.grid.width}x{self.grid.height} grid"
            )
        return tile

    def is_settled(self) -> bool:
        """
        True once no ray is live.

        Live rays only ever carry newly discovered states, so a round that
        discovers nothing leaves the live set empty.
        """
        return not self.live_rays

    def run(self) -> int:
        """Step until settled and return the number of rounds executed."""
        while not self.is_settled():
            if self.current_round >= self.max_rounds:
                raise InvariantViolation(
                    f"Simulation did not settle within {self.max_rounds} rounds"
                )
            self.step()
        return self.current_round

    @property
    def visited(self) -> FrozenSet[RayState]:
        return frozenset(self._visited)

    def illuminated_count(self) -> int:
        return count_illuminated(self._visited)

    def energized_mask(self) -> np.ndarray:
        return energized_mask(self._visited, self.grid.shape)

    def get_summary(self) -> Dict:
        """Get summary statistics for the simulation."""
        return {
            'entry_position': self.entry.position,
            'entry_heading': self.entry.heading.name,
            'total_rounds': self.current_round,
            'visited_states': len(self._visited),
            'state_space': self.state_space_size(),
            'illuminated': self.illuminated_count(),
            'settled': self.is_settled(),
        }


def simulate(grid: TileGrid, entry: Optional[RayState] = None) -> int:
    """Run one full simulation from ``entry`` and return the illuminated count."""
    engine = BeamEngine(grid, entry)
    engine.run()
    return engine.illuminated_count()
