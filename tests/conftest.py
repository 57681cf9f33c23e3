from pathlib import Path

import pytest

from beam_sim.model.grid import TileGrid


CONTRAPTION = [
    ".|...\\....",
    "|.-.\\.....",
    ".....|-...",
    "........|.",
    "..........",
    ".........\\",
    "..../.\\\\..",
    ".-.-/..|..",
    ".|....-|.\\",
    "..//.|....",
]

# Clockwise loop that re-enters its first cell through the splitter.
LOOP = [
    "-.\\",
    "...",
    "\\./",
]


def configs_path(*parts: str) -> Path:
    return Path(__file__).resolve().parents[1].joinpath("configs", *parts)


@pytest.fixture
def contraption() -> TileGrid:
    return TileGrid.from_lines(CONTRAPTION)


@pytest.fixture
def loop_grid() -> TileGrid:
    return TileGrid.from_lines(LOOP)
