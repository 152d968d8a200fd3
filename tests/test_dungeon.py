import random

import pytest

from dunjy_krawl.config import GameConfig
from dunjy_krawl.dungeon import (
    Room, generate_dungeon, enemy_count_for, fallback_enemy_tile, carve_corridor
)
from dunjy_krawl.grid import Grid, FLOOR

from conftest import ScriptedRandom


SEEDS = range(40)


@pytest.mark.parametrize('seed', SEEDS)
def test_rooms_are_floor_and_disjoint(seed):
    config = GameConfig()
    layout = generate_dungeon(1, 1, config, random.Random(seed))

    for room in layout.rooms:
        assert all(layout.grid.is_floor(x, y) for x, y in room.cells())

    for i, a in enumerate(layout.rooms):
        for b in layout.rooms[i + 1:]:
            assert not a.overlaps(b)


@pytest.mark.parametrize('seed', SEEDS)
def test_carving_stays_inside_the_border(seed):
    config = GameConfig()
    layout = generate_dungeon(3, 2, config, random.Random(seed))

    for x, y in layout.grid.floor_tiles():
        assert 1 <= x <= config.cols - 2
        assert 1 <= y <= config.rows - 2


@pytest.mark.parametrize('seed', SEEDS)
def test_spawns_are_on_floor(seed):
    config = GameConfig()
    layout = generate_dungeon(2, 1, config, random.Random(seed))

    assert layout.rooms
    assert layout.player_spawn == layout.rooms[0].center
    assert layout.grid.is_open(*layout.player_spawn)
    for spawn in layout.enemy_spawns:
        assert layout.grid.is_open(*spawn)
    assert len(layout.enemy_spawns) == enemy_count_for(config, 2, 1)


def test_single_scripted_room_puts_player_at_its_center():
    config = GameConfig(cols=20, rows=15, max_rooms=1, base_enemies=0)
    # w, h, x, y
    rng = ScriptedRandom([6, 4, 3, 2])
    layout = generate_dungeon(1, 1, config, rng)

    assert layout.rooms == [Room(3, 2, 6, 4)]
    assert layout.player_spawn == (6, 4)
    assert layout.enemy_spawns == []
    assert len(layout.grid.floor_tiles()) == 24


def test_overlapping_candidate_is_skipped_not_retried():
    config = GameConfig(cols=20, rows=15, max_rooms=3, base_enemies=0)
    rng = ScriptedRandom([
        4, 4, 1, 1,     # accepted
        4, 4, 5, 1,     # touches the first room's right edge: rejected
        4, 4, 10, 8,    # accepted
    ])
    layout = generate_dungeon(1, 1, config, rng)

    assert layout.rooms == [Room(1, 1, 4, 4), Room(10, 8, 4, 4)]
    assert rng.values == []


def test_rooms_are_joined_by_l_shaped_corridor():
    config = GameConfig(cols=20, rows=15, max_rooms=2, base_enemies=0)
    rng = ScriptedRandom([4, 4, 1, 1, 4, 4, 12, 8])
    layout = generate_dungeon(1, 1, config, rng)

    (x1, y1), (x2, y2) = layout.rooms[0].center, layout.rooms[1].center
    assert (x1, y1) == (3, 3) and (x2, y2) == (14, 10)
    # Horizontal leg on the first center's row, vertical leg on the second's column
    assert all(layout.grid.is_floor(x, y1) for x in range(x1, x2 + 1))
    assert all(layout.grid.is_floor(x2, y) for y in range(y1, y2 + 1))
    # The other corner of the L stays solid
    assert not layout.grid.is_floor(x1, 9)


def test_overlap_is_inclusive():
    a = Room(2, 2, 4, 4)
    assert a.overlaps(Room(6, 2, 3, 3))       # touches right edge
    assert a.overlaps(Room(2, 6, 3, 3))       # touches bottom edge
    assert not a.overlaps(Room(7, 2, 3, 3))
    assert not a.overlaps(Room(2, 7, 3, 3))


def test_zero_rooms_still_gives_a_player_spawn():
    config = GameConfig(max_rooms=0)
    layout = generate_dungeon(1, 1, config, random.Random(0))

    assert layout.rooms == []
    assert layout.grid.is_open(*layout.player_spawn)
    for spawn in layout.enemy_spawns:
        assert layout.grid.in_bounds(*spawn)
        assert layout.grid.is_open(*spawn)


def test_enemies_overflow_onto_fallback_tile():
    config = GameConfig(cols=20, rows=15, max_rooms=2, base_enemies=3)
    rng = ScriptedRandom([4, 4, 1, 1, 4, 4, 10, 8])
    layout = generate_dungeon(1, 1, config, rng)

    fallback = fallback_enemy_tile(config)
    assert layout.enemy_spawns[0] == layout.rooms[1].center
    assert layout.enemy_spawns[1:] == [fallback, fallback]
    assert layout.grid.is_open(*fallback)


def test_enemy_count_grows_with_level_and_difficulty():
    config = GameConfig(base_enemies=2)
    assert enemy_count_for(config, 1, 1) == 2
    counts = [enemy_count_for(config, level, 1) for level in range(1, 6)]
    assert counts == sorted(counts)
    assert enemy_count_for(config, 1, 3) > enemy_count_for(config, 1, 2)


def test_seeded_generation_is_reproducible():
    config = GameConfig()
    a = generate_dungeon(4, 2, config, random.Random(99))
    b = generate_dungeon(4, 2, config, random.Random(99))
    assert a.grid.cells == b.grid.cells
    assert a.player_spawn == b.player_spawn
    assert a.enemy_spawns == b.enemy_spawns


def test_carve_corridor_same_row():
    grid = Grid(10, 5)
    carve_corridor(grid, (2, 2), (7, 2))
    assert sorted(grid.floor_tiles()) == [(x, 2) for x in range(2, 8)]
    assert grid.cells[2][4] == FLOOR


def test_overflow_enemies_never_stack_on_the_player():
    config = GameConfig(max_rooms=1)
    # A single room whose center is the usual overflow tile
    layout = generate_dungeon(5, 1, config, ScriptedRandom([4, 4, 15, 10]))

    assert layout.player_spawn == fallback_enemy_tile(config) == (17, 12)
    assert len(layout.enemy_spawns) == enemy_count_for(config, 5, 1)
    assert layout.player_spawn not in layout.enemy_spawns
    assert set(layout.enemy_spawns) == {(1, 1)}
    assert layout.grid.is_open(1, 1)


def test_fallback_tile_moves_off_the_player_spawn():
    config = GameConfig()
    assert fallback_enemy_tile(config, (5, 5)) == (17, 12)
    assert fallback_enemy_tile(config, (17, 12)) == (1, 1)


@pytest.mark.parametrize('seed', range(20))
def test_smallest_grid_keeps_carving_inside_the_border(seed):
    config = GameConfig(cols=5, rows=5, min_room_size=1, max_room_size=1,
                        max_rooms=3, base_enemies=4)
    layout = generate_dungeon(2, 2, config, random.Random(seed))

    for x, y in layout.grid.floor_tiles():
        assert 1 <= x <= 3 and 1 <= y <= 3
    for spawn in layout.enemy_spawns:
        assert layout.grid.is_open(*spawn)
        assert spawn != layout.player_spawn
