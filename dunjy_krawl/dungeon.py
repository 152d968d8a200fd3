"""
Dungeon Generator
==================
Room-and-corridor levels: random rooms rejected on overlap, each new
room joined to the previous one by an L-shaped corridor.
"""

import logging
import random
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from .config import GameConfig
from .grid import Grid


logger = logging.getLogger(__name__)

Tile = Tuple[int, int]


@dataclass
class Room:
    x: int
    y: int
    w: int
    h: int

    def cells(self):
        for iy in range(self.y, self.y + self.h):
            for ix in range(self.x, self.x + self.w):
                yield ix, iy

    @property
    def center(self) -> Tile:
        return (self.x + self.w // 2, self.y + self.h // 2)

    def overlaps(self, other: 'Room') -> bool:
        """Inclusive edge test: rooms that merely touch count as overlapping."""
        return (
            self.x <= other.x + other.w and
            self.x + self.w >= other.x and
            self.y <= other.y + other.h and
            self.y + self.h >= other.y
        )


@dataclass
class DungeonLayout:
    """Result of one generation pass."""
    grid: Grid
    player_spawn: Tile
    enemy_spawns: List[Tile] = field(default_factory=list)
    rooms: List[Room] = field(default_factory=list)


def enemy_count_for(config: GameConfig, level: int, difficulty: int) -> int:
    """Enemies on a level; never decreases with level or difficulty."""
    return config.base_enemies + max(0, level - 1) + max(0, difficulty - 1)


def fallback_enemy_tile(config: GameConfig, player_spawn: Optional[Tile] = None) -> Tile:
    """Interior tile for enemies the rooms could not hold; never the player's spawn."""
    tile = (config.cols - 3, config.rows - 3)
    if tile == player_spawn:
        tile = (1, 1)
    return tile


def place_rooms(grid: Grid, config: GameConfig, rng) -> List[Room]:
    """
    Try max_rooms placements, carving each accepted room and joining it
    to the previously accepted one. Rejected attempts are not retried.
    """
    rooms: List[Room] = []
    for _ in range(config.max_rooms):
        w = rng.randint(config.min_room_size, config.max_room_size)
        h = rng.randint(config.min_room_size, config.max_room_size)
        x = rng.randint(1, config.cols - w - 1)
        y = rng.randint(1, config.rows - h - 1)
        new_room = Room(x, y, w, h)

        if any(new_room.overlaps(r) for r in rooms):
            continue

        grid.carve_rect(x, y, w, h)
        if rooms:
            carve_corridor(grid, rooms[-1].center, new_room.center)
        rooms.append(new_room)
    return rooms


def carve_corridor(grid: Grid, start: Tile, end: Tile):
    """Horizontal leg along start's row, then vertical leg along end's column."""
    (x1, y1), (x2, y2) = start, end
    grid.carve_h_line(x1, x2, y1)
    grid.carve_v_line(y1, y2, x2)


def generate_dungeon(level: int, difficulty: int,
                     config: Optional[GameConfig] = None,
                     rng=None) -> DungeonLayout:
    """
    Build a fresh grid with player and enemy spawn points.

    rng is anything with randint(a, b) inclusive; defaults to the
    random module.
    """
    if config is None:
        config = GameConfig()
    if rng is None:
        rng = random

    grid = Grid(config.cols, config.rows)
    rooms = place_rooms(grid, config, rng)

    if rooms:
        player_spawn = rooms[0].center
    else:
        player_spawn = (1, 1)
        grid.carve(*player_spawn)
        logger.warning('no rooms accepted; spawning player at fallback %s', player_spawn)

    wanted = enemy_count_for(config, level, difficulty)
    enemy_spawns: List[Tile] = []
    # Later rooms first, so enemies start far from the player
    for room in reversed(rooms[1:]):
        if len(enemy_spawns) >= wanted:
            break
        enemy_spawns.append(room.center)

    if len(enemy_spawns) < wanted:
        fallback = fallback_enemy_tile(config, player_spawn)
        if not grid.is_floor(*fallback):
            anchor = rooms[-1].center if rooms else player_spawn
            carve_corridor(grid, anchor, fallback)
        enemy_spawns.extend([fallback] * (wanted - len(enemy_spawns)))

    logger.info(
        'generated level %d (difficulty %d): %d/%d rooms, %d enemies',
        level, difficulty, len(rooms), config.max_rooms, len(enemy_spawns)
    )
    return DungeonLayout(grid, player_spawn, enemy_spawns, rooms)
