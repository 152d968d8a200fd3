from dunjy_krawl.ecs import World
from dunjy_krawl.components import Position, Facing, Direction, EnemyTag
from dunjy_krawl.player import create_player, player_movement_system, get_player_position
from dunjy_krawl.enemies import create_enemy, enemy_ai_system

from conftest import ScriptedRandom


def test_player_steps_onto_floor(arena):
    world = World()
    pid = create_player(world, 2, 2)

    assert player_movement_system(world, arena, (Direction.RIGHT,))
    assert get_player_position(world) == Position(3, 2)
    assert world.get_component(pid, Facing).direction is Direction.RIGHT


def test_blocked_step_still_turns_player(arena):
    world = World()
    pid = create_player(world, 1, 1)

    assert not player_movement_system(world, arena, (Direction.UP,))
    assert get_player_position(world) == Position(1, 1)
    assert world.get_component(pid, Facing).direction is Direction.UP


def test_pillar_blocks(arena):
    world = World()
    create_player(world, 3, 3)
    player_movement_system(world, arena, (Direction.RIGHT,))
    assert get_player_position(world) == Position(3, 3)


def test_two_held_directions_move_diagonally(arena):
    world = World()
    pid = create_player(world, 2, 2)

    player_movement_system(world, arena, (Direction.DOWN, Direction.RIGHT))
    assert get_player_position(world) == Position(3, 3)
    # RIGHT is applied after DOWN
    assert world.get_component(pid, Facing).direction is Direction.RIGHT


def test_axes_are_checked_independently(arena):
    world = World()
    create_player(world, 1, 2)

    # LEFT hits the outer wall, DOWN is open
    player_movement_system(world, arena, (Direction.LEFT, Direction.DOWN))
    assert get_player_position(world) == Position(1, 3)


def test_nothing_held_is_no_move(arena):
    world = World()
    pid = create_player(world, 2, 2)
    assert not player_movement_system(world, arena, ())
    assert world.get_component(pid, Facing).direction is Direction.RIGHT


def test_enemy_moves_in_chosen_direction(arena):
    world = World()
    eid = create_enemy(world, 2, 2)

    # DIRECTION_ORDER index 3 is RIGHT
    assert enemy_ai_system(world, arena, ScriptedRandom([3])) == 1
    assert world.get_component(eid, Position) == Position(3, 2)


def test_enemy_blocked_stays_put_without_retry(arena):
    world = World()
    eid = create_enemy(world, 1, 1)

    # index 0 is UP, into the wall
    rng = ScriptedRandom([0, 1])
    assert enemy_ai_system(world, arena, rng) == 0
    assert world.get_component(eid, Position) == Position(1, 1)
    assert rng.values == [1]


def test_each_enemy_rolls_its_own_direction(arena):
    world = World()
    a = create_enemy(world, 2, 2)
    b = create_enemy(world, 6, 4)

    enemy_ai_system(world, arena, ScriptedRandom([1, 2]))
    assert world.get_component(a, Position) == Position(2, 3)
    assert world.get_component(b, Position) == Position(5, 4)


def test_random_walk_never_leaves_the_floor(arena, rng):
    world = World()
    ids = [create_enemy(world, x, y) for x, y in [(1, 1), (7, 5), (3, 3)]]

    for _ in range(200):
        enemy_ai_system(world, arena, rng)
        for eid in ids:
            pos = world.get_component(eid, Position)
            assert arena.is_open(pos.x, pos.y)


def test_steps_follow_press_order(arena):
    world = World()
    pid = create_player(world, 3, 4)

    # RIGHT reaches (4, 4); UP from there runs into the pillar at (4, 3)
    player_movement_system(world, arena, (Direction.RIGHT, Direction.UP))
    assert get_player_position(world) == Position(4, 4)
    assert world.get_component(pid, Facing).direction is Direction.UP


def test_reversed_press_order_takes_the_other_corner(arena):
    world = World()
    pid = create_player(world, 3, 4)

    player_movement_system(world, arena, (Direction.UP, Direction.RIGHT))
    # UP to (3, 3), then RIGHT into the pillar
    assert get_player_position(world) == Position(3, 3)
    assert world.get_component(pid, Facing).direction is Direction.RIGHT


def test_created_enemy_is_a_plain_tagged_entity():
    world = World()
    eid = create_enemy(world, 4, 1)
    assert world.get_component(eid, Position) == Position(4, 1)
    assert world.get_component(eid, EnemyTag) == EnemyTag()
