"""
Enemies
========
Enemy creation and the random-walk AI.
"""

from typing import Iterable, Tuple

from .ecs import World
from .components import Position, EnemyTag, DIRECTION_ORDER
from .grid import Grid


def create_enemy(world: World, x: int, y: int) -> int:
    """Create an enemy entity at tile (x, y)."""
    entity_id = world.create_entity()
    world.add_component(entity_id, Position(x, y))
    world.add_component(entity_id, EnemyTag())
    return entity_id


def spawn_enemies(world: World, spawns: Iterable[Tuple[int, int]]) -> list:
    """Create one enemy per spawn tile, in order."""
    return [create_enemy(world, x, y) for x, y in spawns]


def enemy_ai_system(world: World, grid: Grid, rng) -> int:
    """
    Each enemy picks one cardinal direction uniformly at random and
    steps there if the tile is open; otherwise it stays put this tick.

    Returns the number of enemies that moved.
    """
    moved = 0
    for entity_id, pos, _ in world.query(Position, EnemyTag):
        direction = DIRECTION_ORDER[rng.randint(0, len(DIRECTION_ORDER) - 1)]
        nx, ny = pos.x + direction.dx, pos.y + direction.dy
        if grid.is_open(nx, ny):
            pos.x, pos.y = nx, ny
            moved += 1
    return moved
