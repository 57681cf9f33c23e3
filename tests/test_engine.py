import pytest

from beam_sim.model.engine import DEFAULT_ENTRY, BeamEngine, InvariantViolation, simulate
from beam_sim.model.grid import TileGrid
from beam_sim.model.illumination import (
    count_illuminated,
    energized_mask,
    illuminated_positions,
    render_energized,
)
from beam_sim.model.state import RayState
from beam_sim.model.tiles import Heading


def test_reference_contraption_energizes_46(contraption):
    engine = BeamEngine(contraption)
    engine.run()

    assert engine.is_settled()
    assert engine.illuminated_count() == 46
    assert simulate(contraption) == 46


def test_entry_on_edge_cell_matches_outside_entry(contraption):
    inside = simulate(contraption, RayState((0, 0), Heading.RIGHT))
    outside = simulate(contraption, RayState((-1, 0), Heading.RIGHT))
    assert inside == outside == 46


def test_entry_on_edge_cell_applies_entry_tile():
    grid = TileGrid.from_lines(["\\..", "...", "..."])
    engine = BeamEngine(grid, RayState((0, 0), Heading.RIGHT))
    engine.run()

    # The mirror under the entry turns the beam down column 0.
    assert illuminated_positions(engine.visited) == {(0, 0), (0, 1), (0, 2)}
    assert RayState((0, 0), Heading.DOWN) in engine.visited


@pytest.mark.parametrize("width,height", [(1, 1), (5, 1), (7, 4)])
def test_empty_grid_is_a_straight_traversal(width, height):
    grid = TileGrid.from_lines(["." * width] * height)
    engine = BeamEngine(grid, RayState((-1, 0), Heading.RIGHT))
    rounds = engine.run()

    assert engine.illuminated_count() == width
    assert rounds == width + 1


def test_vertical_splitter_spawns_two_rays():
    grid = TileGrid.from_lines([".....", "..|..", "....."])
    engine = BeamEngine(grid, RayState((-1, 1), Heading.RIGHT))

    engine.step()
    engine.step()
    snapshot = engine.step()

    assert snapshot.live_rays == 2
    assert engine.live_rays == {
        RayState((2, 1), Heading.UP),
        RayState((2, 1), Heading.DOWN),
    }

    engine.run()
    assert engine.is_settled()
    assert engine.current_round == 5
    assert illuminated_positions(engine.visited) == {
        (0, 1), (1, 1), (2, 1), (2, 0), (2, 2),
    }


def test_loop_terminates_and_cuts_revisits(loop_grid):
    engine = BeamEngine(loop_grid)
    snapshots = []
    while not engine.is_settled():
        snapshots.append(engine.step())

    assert len(snapshots) == 10
    assert sum(s.dropped for s in snapshots) == 1
    assert snapshots[8].new_states == 1
    assert snapshots[-1].retired == 1
    assert len(engine.visited) == 9
    assert engine.illuminated_count() == 8
    assert render_energized(engine.energized_mask()) == "###\n#.#\n###"


def test_rounds_and_visited_stay_within_state_space(contraption, loop_grid):
    for grid in (contraption, loop_grid):
        engine = BeamEngine(grid)
        bound = 4 * grid.width * grid.height
        previous = 0
        while not engine.is_settled():
            snapshot = engine.step()
            assert snapshot.visited_count >= previous
            assert snapshot.visited_count <= bound
            previous = snapshot.visited_count
        assert engine.current_round <= bound


def test_runs_are_deterministic(contraption):
    first = BeamEngine(contraption)
    second = BeamEngine(contraption)
    first.run()
    second.run()

    assert first.visited == second.visited
    assert first.current_round == second.current_round
    assert first.illuminated_count() == second.illuminated_count()


def test_reinserting_visited_state_changes_nothing(loop_grid):
    engine = BeamEngine(loop_grid)
    engine.run()
    visited_before = engine.visited

    # Replay the very first move into an already explored state.
    engine.live_rays = {DEFAULT_ENTRY}
    snapshot = engine.step()

    assert snapshot.new_states == 0
    assert snapshot.dropped == 1
    assert engine.visited == visited_before
    assert engine.is_settled()


def test_rays_converging_in_one_round_spawn_once():
    grid = TileGrid.from_lines(["...", ".-.", "..."])
    engine = BeamEngine(grid)
    engine.live_rays = {
        RayState((0, 1), Heading.RIGHT),
        RayState((1, 2), Heading.UP),
    }
    snapshot = engine.step()

    assert snapshot.new_states == 2
    assert snapshot.dropped == 1
    assert engine.live_rays == {
        RayState((1, 1), Heading.RIGHT),
        RayState((1, 1), Heading.LEFT),
    }


def test_seed_resets_run(contraption):
    engine = BeamEngine(contraption)
    engine.run()
    engine.seed(DEFAULT_ENTRY)

    assert engine.current_round == 0
    assert engine.visited == frozenset()
    assert not engine.is_settled()
    engine.run()
    assert engine.illuminated_count() == 46


def test_step_after_settled_raises(loop_grid):
    engine = BeamEngine(loop_grid)
    engine.run()
    with pytest.raises(InvariantViolation):
        engine.step()


def test_round_budget_exhaustion_raises():
    grid = TileGrid.from_lines(["." * 10])
    engine = BeamEngine(grid, max_rounds=3)
    with pytest.raises(InvariantViolation, match="3 rounds"):
        engine.run()


def test_out_of_bounds_tile_resolution_is_fatal(loop_grid):
    engine = BeamEngine(loop_grid)
    with pytest.raises(InvariantViolation):
        engine._resolve_tile((5, 5))


def test_summary(loop_grid):
    engine = BeamEngine(loop_grid)
    engine.run()
    summary = engine.get_summary()

    assert summary['entry_position'] == (-1, 0)
    assert summary['entry_heading'] == 'RIGHT'
    assert summary['total_rounds'] == 10
    assert summary['visited_states'] == 9
    assert summary['state_space'] == 36
    assert summary['illuminated'] == 8
    assert summary['settled'] is True


def test_reducer_discards_headings():
    visited = {
        RayState((0, 0), Heading.RIGHT),
        RayState((0, 0), Heading.UP),
        RayState((1, 0), Heading.LEFT),
    }
    assert count_illuminated(visited) == 2
    mask = energized_mask(visited, (2, 3))
    assert mask.shape == (2, 3)
    assert mask.sum() == 2
    assert render_energized(mask) == "##.\n..."
    assert count_illuminated([]) == 0
