"""Ray state and round snapshot dataclasses for the beam simulation."""

from dataclasses import dataclass
from typing import Dict, Tuple

from .tiles import Heading


@dataclass(frozen=True)
class RayState:
    """A ray's cell and heading; the unit of cycle detection."""
    position: Tuple[int, int]
    heading: Heading

    def next_position(self) -> Tuple[int, int]:
        """Cell one step ahead along the heading."""
        dx, dy = self.heading.vector
        return self.position[0] + dx, self.position[1] + dy

    def moved_to(self, position: Tuple[int, int]) -> "RayState":
        return RayState(position, self.heading)

    def turned(self, heading: Heading) -> "RayState":
        return RayState(self.position, heading)

    def retreat(self) -> "RayState":
        """Same heading, one cell back: the ray that arrives here next step."""
        dx, dy = self.heading.vector
        return RayState((self.position[0] - dx, self.position[1] - dy), self.heading)


@dataclass(frozen=True)
class RoundSnapshot:
    """Immutable summary of one completed simulation round."""
    round: int
    live_rays: int       # rays carried into the next round
    new_states: int      # states added to the visited set this round
    retired: int         # rays that left the grid
    dropped: int         # candidates discarded as already visited
    visited_count: int

    def to_csv_row(self) -> Dict[str, int]:
        """Convert to CSV-compatible format."""
        return {
            "round": self.round,
            "live_rays": self.live_rays,
            "new_states": self.new_states,
            "retired": self.retired,
            "dropped": self.dropped,
            "visited": self.visited_count,
        }
