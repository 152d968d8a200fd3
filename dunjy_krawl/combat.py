"""
Combat Resolver
================
Melee swings, swing markers and player-enemy contact damage.
Ranged fire and projectile stepping live in projectiles.py.
"""

import logging
from typing import List, Tuple

from .ecs import World
from .components import Position, Facing, Health, PlayerTag, EnemyTag, SwingEffect


logger = logging.getLogger(__name__)


def enemies_at(world: World, x: int, y: int) -> List[int]:
    """Live enemy ids standing on tile (x, y), in creation order."""
    return [
        enemy_id
        for enemy_id, pos, _ in world.query(Position, EnemyTag)
        if pos.x == x and pos.y == y
    ]


def spawn_swing_effect(world: World, x: int, y: int, frames: int) -> int:
    """Place the swing marker, replacing any marker still showing."""
    for marker_id, _ in world.query(SwingEffect):
        world.destroy_entity(marker_id)

    eid = world.create_entity()
    world.add_component(eid, Position(x, y))
    world.add_component(eid, SwingEffect(frames))
    return eid


def melee_swing(world: World, swing_frames: int = 10) -> List[int]:
    """
    Swing at the tile in front of the player.

    Every enemy on that tile dies. The marker is placed whether or not
    anything was hit. Returns the ids of enemies killed.
    """
    for player_id, pos, facing, _ in world.query(Position, Facing, PlayerTag):
        tx = pos.x + facing.direction.dx
        ty = pos.y + facing.direction.dy

        killed = enemies_at(world, tx, ty)
        for enemy_id in killed:
            world.destroy_entity(enemy_id)

        spawn_swing_effect(world, tx, ty, swing_frames)
        if killed:
            logger.debug('swing at (%d, %d) killed %s', tx, ty, killed)
        return killed
    return []


def swing_effect_system(world: World) -> None:
    """Tick swing markers down, removing the ones that ran out."""
    for eid, effect in world.query(SwingEffect):
        effect.frames_remaining -= 1
        if effect.frames_remaining <= 0:
            world.destroy_entity(eid)


def contact_system(world: World) -> Tuple[int, List[int]]:
    """
    Resolve enemies sharing the player's tile.

    Each one costs the player a hit point and is removed. Health never
    drops below zero. Returns (damage taken, enemy ids removed).
    """
    for player_id, pos, health, _ in world.query(Position, Health, PlayerTag):
        touching = enemies_at(world, pos.x, pos.y)
        for enemy_id in touching:
            world.destroy_entity(enemy_id)
            health.current = max(0, health.current - 1)

        if touching:
            logger.debug('player hit by %d enemies, hp now %d',
                         len(touching), health.current)
        return len(touching), touching
    return 0, []
