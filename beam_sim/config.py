"""Configuration dataclasses and YAML loader for the beam simulation."""

from dataclasses import dataclass, field
from typing import List, Dict, Any, Optional
from pathlib import Path
import yaml

from .model.grid import TileGrid
from .model.state import RayState
from .model.tiles import Heading


@dataclass
class GridConfig:
    path: Optional[Path] = None
    rows: Optional[List[str]] = None  # inline alternative to path

    def load(self) -> TileGrid:
        """Build the tile grid from inline rows or the grid file."""
        if self.rows is not None:
            return TileGrid.from_lines(self.rows)
        if self.path is None:
            raise ValueError("Grid config needs either 'path' or 'rows'")
        return TileGrid.from_file(self.path)


@dataclass
class EntryConfig:
    x: int = -1
    y: int = 0
    heading: str = "right"  # "up", "down", "left", "right"

    def to_state(self) -> RayState:
        return RayState((self.x, self.y), Heading.from_name(self.heading))


@dataclass
class SearchConfig:
    enabled: bool = False
    workers: int = 1


@dataclass
class SimulationConfig:
    grid: GridConfig
    entry: EntryConfig = field(default_factory=EntryConfig)
    max_rounds: Optional[int] = None
    search: SearchConfig = field(default_factory=SearchConfig)

    # Export flags (can be overridden by CLI)
    csv_enabled: bool = False
    snapshot_enabled: bool = False
    gif_enabled: bool = False
    quiet: bool = False
    out_dir: Path = field(default_factory=lambda: Path("./output"))


def _parse_grid(grid_raw: Dict[str, Any], base_dir: Path) -> GridConfig:
    """Parse grid source from raw YAML data."""
    if 'rows' in grid_raw:
        return GridConfig(rows=[str(r) for r in grid_raw['rows']])
    path = Path(grid_raw['path'])
    if not path.is_absolute():
        path = base_dir / path
    return GridConfig(path=path)


def _parse_entry(entry_raw: Dict[str, Any]) -> EntryConfig:
    """Parse the entry ray from raw YAML data."""
    entry = EntryConfig(
        x=int(entry_raw.get('x', -1)),
        y=int(entry_raw.get('y', 0)),
        heading=str(entry_raw.get('heading', 'right')).lower()
    )
    # Fail at load time rather than on first use
    Heading.from_name(entry.heading)
    return entry


def load_config(config_path: Path) -> SimulationConfig:
    """Load and validate YAML configuration file."""
    config_path = Path(config_path)
    with open(config_path) as f:
        raw = yaml.safe_load(f) or {}

    if 'grid' not in raw:
        raise KeyError("Configuration is missing the 'grid' section")
    grid = _parse_grid(raw['grid'], config_path.parent)

    entry = _parse_entry(raw.get('entry') or {})

    sim_raw = raw.get('simulation') or {}
    max_rounds = sim_raw.get('max_rounds')
    if max_rounds is not None:
        max_rounds = int(max_rounds)
        if max_rounds <= 0:
            raise ValueError(f"max_rounds must be positive, got {max_rounds}")

    search_raw = raw.get('search') or {}
    search = SearchConfig(
        enabled=bool(search_raw.get('enabled', False)),
        workers=max(1, int(search_raw.get('workers', 1)))
    )

    # Parse export config (optional)
    export_raw = raw.get('export') or {}

    return SimulationConfig(
        grid=grid,
        entry=entry,
        max_rounds=max_rounds,
        search=search,
        csv_enabled=export_raw.get('csv', False),
        snapshot_enabled=export_raw.get('snapshot', False),
        gif_enabled=export_raw.get('gif', False)
    )
