#!/usr/bin/env python3
"""
Grid Beam Propagation Simulation

Traces a light beam through a grid of mirrors and splitters and counts the
cells it energizes.

Usage:
    python -m beam_sim.main --config configs/contraption.yaml [options]
    python -m beam_sim.main --input grid.txt [options]

Examples:
    python -m beam_sim.main --config configs/contraption.yaml
    python -m beam_sim.main --input grid.txt --entry 3 0 down --show
    python -m beam_sim.main --input grid.txt --search --workers 4 --quiet
    python -m beam_sim.main --config configs/contraption.yaml --gif --out-dir results/
"""

import argparse
import sys
from pathlib import Path
from typing import List, Optional

from beam_sim.config import EntryConfig, GridConfig, SimulationConfig, load_config
from beam_sim.model.engine import BeamEngine, InvariantViolation
from beam_sim.model.grid import MalformedGrid
from beam_sim.model.illumination import render_energized
from beam_sim.model.search import best_entry
from beam_sim.export.csv_writer import CSVWriter
from beam_sim.export.visualizer import Visualizer
from beam_sim.export.reporter import Reporter


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description='Grid Beam Propagation Simulation',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    python -m beam_sim.main --config configs/contraption.yaml
    python -m beam_sim.main --input grid.txt --entry 3 0 down --show
    python -m beam_sim.main --input grid.txt --search --workers 4 --quiet
        """
    )

    # Grid source
    source = parser.add_mutually_exclusive_group(required=True)
    source.add_argument('--config', type=Path,
                        help='Path to YAML configuration file')
    source.add_argument('--input', type=Path,
                        help='Path to grid text file (one row per line)')

    # Optional overrides
    parser.add_argument('--entry', nargs=3, metavar=('X', 'Y', 'HEADING'),
                        default=None,
                        help='Entry ray, e.g. "-1 0 right" (default)')
    parser.add_argument('--max-rounds', type=int, default=None,
                        help='Override the round budget')
    parser.add_argument('--search', action='store_true', default=False,
                        help='Also find the edge entry with the most energized cells')
    parser.add_argument('--workers', type=int, default=None,
                        help='Worker processes for --search')
    parser.add_argument('--out-dir', type=Path, default=Path('./output'),
                        help='Output directory for exports (default: ./output)')

    # Export toggles
    parser.add_argument('--csv', dest='csv', action='store_true', default=None,
                        help='Enable per-round CSV export')
    parser.add_argument('--no-csv', dest='csv', action='store_false',
                        help='Disable CSV export')

    parser.add_argument('--snapshot', dest='snapshot', action='store_true', default=None,
                        help='Enable energized grid snapshot')
    parser.add_argument('--no-snapshot', dest='snapshot', action='store_false',
                        help='Disable energized grid snapshot')

    parser.add_argument('--gif', action='store_true', default=False,
                        help='Enable GIF animation export')

    parser.add_argument('--show', action='store_true', default=False,
                        help='Print the energized map')
    parser.add_argument('--quiet', action='store_true', default=False,
                        help='Print only the results')

    return parser.parse_args(argv)


def build_config(args: argparse.Namespace) -> SimulationConfig:
    """Load configuration and apply CLI overrides."""
    if args.config is not None:
        config = load_config(args.config)
    else:
        config = SimulationConfig(grid=GridConfig(path=args.input))

    if args.entry is not None:
        x, y, heading = args.entry
        config.entry = EntryConfig(x=int(x), y=int(y), heading=heading.lower())
        config.entry.to_state()  # validate heading
    if args.max_rounds is not None:
        config.max_rounds = args.max_rounds
    if args.search:
        config.search.enabled = True
    if args.workers is not None:
        config.search.workers = max(1, args.workers)
    if args.csv is not None:
        config.csv_enabled = args.csv
    if args.snapshot is not None:
        config.snapshot_enabled = args.snapshot
    if args.gif:
        config.gif_enabled = True
    config.quiet = args.quiet
    config.out_dir = args.out_dir
    return config


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    args = parse_args(argv)

    # Load configuration and grid
    try:
        config = build_config(args)
        grid = config.grid.load()
    except FileNotFoundError as e:
        print(f"Error: File not found: {e.filename}", file=sys.stderr)
        return 1
    except MalformedGrid as e:
        print(f"Error: Malformed grid: {e}", file=sys.stderr)
        return 1
    except Exception as e:
        print(f"Error loading config: {e}", file=sys.stderr)
        return 1

    entry = config.entry.to_state()

    # Initialize engine
    if not config.quiet:
        print(f"Initializing simulation...")
        print(f"  Grid: {grid.width}x{grid.height}")
        print(f"  Entry: {entry.position} heading {entry.heading.name}")

    engine = BeamEngine(grid, entry, max_rounds=config.max_rounds)

    # Initialize exporters
    csv_writer = None
    if config.csv_enabled:
        csv_writer = CSVWriter(config.out_dir / 'rounds.csv')
        csv_writer.open()

    visualizer = Visualizer(grid)
    reporter = Reporter(str(args.config or args.input))

    # Main simulation loop
    if not config.quiet:
        print(f"\nRunning simulation...")

    try:
        while not engine.is_settled():
            if engine.current_round >= engine.max_rounds:
                raise InvariantViolation(
                    f"Simulation did not settle within {engine.max_rounds} rounds"
                )
            snapshot = engine.step()

            if csv_writer:
                csv_writer.append(snapshot)

            if config.gif_enabled:
                visualizer.buffer_frame(engine.energized_mask(), engine.live_rays,
                                        snapshot.round)

            reporter.update(snapshot)

            # Progress indicator
            if not config.quiet and snapshot.round % 100 == 0:
                print(f"  Round {snapshot.round}: {snapshot.live_rays} live, "
                      f"{snapshot.visited_count} states visited")

    except KeyboardInterrupt:
        if not config.quiet:
            print("\nSimulation interrupted by user.")
    except InvariantViolation as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    finally:
        if csv_writer:
            csv_writer.close()

    if not engine.is_settled():
        return 1

    best = None
    if config.search.enabled:
        if not config.quiet:
            print(f"\nSearching {len(grid.edge_entries())} edge entries "
                  f"({config.search.workers} workers)...")
        best = best_entry(grid, workers=config.search.workers)

    # Final exports
    if csv_writer and not config.quiet:
        print(f"\nCSV saved: {config.out_dir / 'rounds.csv'}")

    if config.snapshot_enabled:
        snapshot_path = config.out_dir / 'energized.png'
        visualizer.save_snapshot(engine.energized_mask(), snapshot_path)
        if not config.quiet:
            print(f"Snapshot saved: {snapshot_path}")

    if config.gif_enabled:
        gif_path = config.out_dir / 'propagation.gif'
        if not config.quiet:
            print(f"Generating GIF ({len(visualizer.frames)} frames)...")
        visualizer.generate_gif(gif_path, fps=10)
        if not config.quiet:
            print(f"Animation saved: {gif_path}")

    if args.show:
        print(render_energized(engine.energized_mask()))

    if config.quiet:
        print(engine.illuminated_count())
        if best is not None:
            print(best.illuminated)
    else:
        report = reporter.generate_summary(
            engine,
            config.out_dir,
            config.csv_enabled,
            config.snapshot_enabled,
            config.gif_enabled,
            best=best
        )
        print(report)

    return 0


if __name__ == '__main__':
    sys.exit(main())
