"""
Component Definitions
======================
All components are plain dataclasses with no behavior.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Tuple


# =============================================================================
# DIRECTIONS
# =============================================================================

class Direction(Enum):
    """Cardinal directions as (dx, dy) tile offsets. Y grows downward."""
    UP = (0, -1)
    DOWN = (0, 1)
    LEFT = (-1, 0)
    RIGHT = (1, 0)

    @property
    def dx(self) -> int:
        return self.value[0]

    @property
    def dy(self) -> int:
        return self.value[1]


# Index order for random direction picks (enemy AI)
DIRECTION_ORDER: Tuple[Direction, ...] = (
    Direction.UP, Direction.DOWN, Direction.LEFT, Direction.RIGHT
)


# =============================================================================
# SPATIAL COMPONENTS
# =============================================================================

@dataclass
class Position:
    """Tile position (column, row)."""
    x: int = 0
    y: int = 0


@dataclass
class Facing:
    """Last cardinal direction the entity turned to."""
    direction: Direction = Direction.RIGHT


# =============================================================================
# COMBAT COMPONENTS
# =============================================================================

@dataclass
class Health:
    """Entity hit points."""
    current: int = 3
    maximum: int = 3


@dataclass
class Projectile:
    """Ranged shot travelling one step along (dx, dy) per projectile tick."""
    dx: int = 0
    dy: int = 0


@dataclass
class SwingEffect:
    """Melee swing marker; ticks down once per simulation tick."""
    frames_remaining: int = 10


# =============================================================================
# TAGS
# =============================================================================

@dataclass
class PlayerTag:
    """Marks the player entity."""
    pass


@dataclass
class EnemyTag:
    """Marks an enemy entity."""
    pass
