"""Summary report generation for the beam simulation."""

from typing import List, Optional, TYPE_CHECKING
from pathlib import Path

if TYPE_CHECKING:
    from ..model.engine import BeamEngine
    from ..model.search import EntryResult
    from ..model.state import RoundSnapshot


class Reporter:
    """Accumulates round statistics and formats a text report."""

    def __init__(self, source: str):
        self.source = source
        self.rounds: List["RoundSnapshot"] = []
        self.peak_live_rays = 0
        self.peak_round = 0
        self.total_retired = 0
        self.total_dropped = 0
        self.split_rounds = 0

    def update(self, snapshot: "RoundSnapshot") -> None:
        """Accumulate metrics per round."""
        previous_live = self.rounds[-1].live_rays if self.rounds else 1
        self.rounds.append(snapshot)

        if snapshot.live_rays > self.peak_live_rays:
            self.peak_live_rays = snapshot.live_rays
            self.peak_round = snapshot.round

        self.total_retired += snapshot.retired
        self.total_dropped += snapshot.dropped

        # More outgoing states than in-bounds rays means a splitter fired
        if snapshot.new_states + snapshot.dropped > previous_live - snapshot.retired:
            self.split_rounds += 1

    def generate_summary(self, engine: "BeamEngine",
                         output_dir: Path,
                         csv_enabled: bool,
                         snapshot_enabled: bool,
                         gif_enabled: bool,
                         best: Optional["EntryResult"] = None) -> str:
        """Returns formatted text report."""
        summary = engine.get_summary()
        cells = engine.grid.width * engine.grid.height
        coverage = summary['illuminated'] / cells * 100 if cells > 0 else 0
        state_fill = (summary['visited_states'] / summary['state_space'] * 100
                      if summary['state_space'] > 0 else 0)

        lines = [
            "",
            "=" * 80,
            "                    BEAM PROPAGATION REPORT",
            "=" * 80,
            f"Grid Source: {self.source}",
            f"Grid Size:   {engine.grid.width}x{engine.grid.height}",
            f"Entry:       {summary['entry_position']} heading {summary['entry_heading']}",
            "",
            "SIMULATION METRICS",
            "-" * 40,
            f"Rounds:                {summary['total_rounds']}",
            f"Visited States:        {summary['visited_states']} / {summary['state_space']} ({state_fill:.1f}%)",
            f"Illuminated Cells:     {summary['illuminated']} / {cells} ({coverage:.1f}%)",
            f"Peak Live Rays:        {self.peak_live_rays} (round {self.peak_round})",
            f"Rays Retired:          {self.total_retired}",
            f"Revisits Dropped:      {self.total_dropped}",
            "",
            "BEHAVIORS DETECTED",
            "-" * 40,
            f"[{'X' if self.split_rounds > 0 else ' '}] Splits: {self.split_rounds} rounds",
            f"[{'X' if self.total_dropped > 0 else ' '}] Cycles: {self.total_dropped} revisits cut",
        ]

        if best is not None:
            lines.extend([
                "",
                "BEST ENTRY",
                "-" * 40,
                f"Entry:                 {best.entry.position} heading {best.entry.heading.name}",
                f"Illuminated Cells:     {best.illuminated}",
            ])

        lines.extend([
            "",
            "OUTPUT FILES",
            "-" * 40,
        ])

        if csv_enabled:
            lines.append(f"CSV Log:    {output_dir / 'rounds.csv'}")
        else:
            lines.append("CSV Log:    (disabled)")

        if snapshot_enabled:
            lines.append(f"Snapshot:   {output_dir / 'energized.png'}")
        else:
            lines.append("Snapshot:   (disabled)")

        if gif_enabled:
            lines.append(f"Animation:  {output_dir / 'propagation.gif'}")
        else:
            lines.append("Animation:  (disabled)")

        lines.append("=" * 80)

        return "\n".join(lines)
