from pathlib import Path

import pytest

from beam_sim.config import EntryConfig, GridConfig, load_config
from beam_sim.model.grid import MalformedGrid
from beam_sim.model.state import RayState
from beam_sim.model.tiles import Heading

from conftest import CONTRAPTION, configs_path


def write_config(tmp_path: Path, text: str) -> Path:
    path = tmp_path / "config.yaml"
    path.write_text(text)
    return path


def test_bundled_config_loads():
    config = load_config(configs_path("contraption.yaml"))

    assert config.grid.path == configs_path("contraption.txt")
    assert config.entry.to_state() == RayState((-1, 0), Heading.RIGHT)
    assert config.max_rounds is None
    assert config.search.enabled is True
    assert config.csv_enabled is True
    assert config.snapshot_enabled is True
    assert config.gif_enabled is False
    assert config.grid.load().shape == (10, 10)


def test_inline_rows_and_defaults(tmp_path):
    path = write_config(tmp_path, "grid:\n  rows:\n    - '..'\n    - '-|'\n")
    config = load_config(path)

    assert config.grid.rows == ["..", "-|"]
    assert config.entry == EntryConfig()
    assert config.search.workers == 1
    assert config.csv_enabled is False
    assert config.grid.load().width == 2


def test_relative_grid_path_resolves_against_config_dir(tmp_path):
    (tmp_path / "grids").mkdir()
    (tmp_path / "grids" / "g.txt").write_text("\n".join(CONTRAPTION))
    path = write_config(tmp_path, (
        "grid:\n  path: grids/g.txt\n"
        "entry:\n  x: 3\n  y: 0\n  heading: DOWN\n"
        "simulation:\n  max_rounds: 500\n"
        "search:\n  enabled: false\n  workers: 0\n"
    ))
    config = load_config(path)

    assert config.grid.path == tmp_path / "grids" / "g.txt"
    assert config.entry.to_state() == RayState((3, 0), Heading.DOWN)
    assert config.max_rounds == 500
    assert config.search.workers == 1


def test_missing_grid_section_raises(tmp_path):
    with pytest.raises(KeyError):
        load_config(write_config(tmp_path, "entry:\n  x: 0\n"))


def test_bad_heading_raises(tmp_path):
    path = write_config(tmp_path, "grid:\n  rows: ['.']\nentry:\n  heading: sideways\n")
    with pytest.raises(ValueError):
        load_config(path)


def test_non_positive_max_rounds_raises(tmp_path):
    path = write_config(tmp_path, "grid:\n  rows: ['.']\nsimulation:\n  max_rounds: 0\n")
    with pytest.raises(ValueError):
        load_config(path)


def test_malformed_inline_grid_surfaces_on_load():
    with pytest.raises(MalformedGrid):
        GridConfig(rows=["..", "."]).load()


def test_grid_config_needs_a_source():
    with pytest.raises(ValueError):
        GridConfig().load()
