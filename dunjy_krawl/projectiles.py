"""
Projectile System
==================
Ranged shots: spawn toward an aim tile, step, collide, destroy.
"""

import logging
from typing import List, Optional, Tuple

from .ecs import World
from .components import Position, Projectile, EnemyTag
from .grid import Grid


logger = logging.getLogger(__name__)


def _sign(value: int) -> int:
    return (value > 0) - (value < 0)


def aim_direction(origin: Tuple[int, int], target: Tuple[int, int]) -> Tuple[int, int]:
    """Per-axis sign of target - origin; one of 8 unit steps, or (0, 0)."""
    return _sign(target[0] - origin[0]), _sign(target[1] - origin[1])


def spawn_projectile(world: World, x: int, y: int, dx: int, dy: int) -> int:
    """Spawn a single projectile entity."""
    eid = world.create_entity()
    world.add_component(eid, Position(x, y))
    world.add_component(eid, Projectile(dx, dy))
    return eid


def resolve_projectile(world: World, grid: Grid, proj_id: int, pos: Position) -> Optional[int]:
    """
    Settle a projectile on the tile it just entered.

    A wall or off-grid tile destroys it. An enemy there dies with it
    (first one in creation order only). Returns the killed enemy id.
    """
    if not grid.is_open(pos.x, pos.y):
        world.destroy_entity(proj_id)
        return None

    for enemy_id, e_pos, _ in world.query(Position, EnemyTag):
        if e_pos.x == pos.x and e_pos.y == pos.y:
            world.destroy_entity(enemy_id)
            world.destroy_entity(proj_id)
            logger.debug('projectile %d killed enemy %d at (%d, %d)',
                         proj_id, enemy_id, pos.x, pos.y)
            return enemy_id
    return None


def fire_projectile(world: World, grid: Grid, origin: Tuple[int, int],
                    target: Optional[Tuple[int, int]], ammo: int) -> Tuple[Optional[int], Optional[int]]:
    """
    Fire from origin toward target.

    Returns (projectile id, enemy killed on the spawn tile). The
    projectile id is None when nothing was fired: no ammo, no target,
    or a target on the origin itself. The caller spends one ammo
    whenever a projectile id comes back, even if the shot ended at once
    against an adjacent wall or enemy.
    """
    if ammo <= 0 or target is None:
        return None, None
    dx, dy = aim_direction(origin, target)
    if dx == 0 and dy == 0:
        return None, None

    proj_id = spawn_projectile(world, origin[0] + dx, origin[1] + dy, dx, dy)
    pos = world.get_component(proj_id, Position)
    return proj_id, resolve_projectile(world, grid, proj_id, pos)


def projectile_system(world: World, grid: Grid) -> List[int]:
    """
    Advance every projectile one step along its direction.

    Diagonal shots move on both axes at once and only check the tile
    they land on. Returns the ids of enemies killed.
    """
    killed = []

    for proj_id, pos, proj in world.query(Position, Projectile):
        pos.x += proj.dx
        pos.y += proj.dy

        enemy_id = resolve_projectile(world, grid, proj_id, pos)
        if enemy_id is not None:
            killed.append(enemy_id)

    return killed
