"""
Game Configuration
===================
Grid dimensions, generation bounds, cadences and progression limits.
"""

import os
from dataclasses import dataclass, fields
from typing import Mapping, Optional


ENV_PREFIX = 'DUNJY_'
MIN_GRID_SIZE = 5


@dataclass
class GameConfig:
    # Grid (tiles)
    cols: int = 20
    rows: int = 15

    # Room-and-corridor generation
    max_rooms: int = 8
    min_room_size: int = 4
    max_room_size: int = 8

    # Enemies per level: base + (level - 1) + (difficulty - 1)
    base_enemies: int = 2

    # Progression
    max_level: int = 5
    starting_ammo: int = 5
    starting_hp: int = 3

    # Minimum seconds between accepted updates, per group
    player_interval: float = 0.12
    enemy_interval: float = 0.5
    projectile_interval: float = 0.05

    # Swing marker lifetime in ticks
    swing_frames: int = 10

    seed: Optional[int] = None

    def __post_init__(self):
        if self.min_room_size < 1 or self.max_room_size < self.min_room_size:
            raise ValueError(
                f'invalid room size bounds: {self.min_room_size}..{self.max_room_size}'
            )
        # A max-size room plus a wall ring on every side must fit
        if self.cols < self.max_room_size + 2 or self.rows < self.max_room_size + 2:
            raise ValueError(
                f'grid {self.cols}x{self.rows} too small for rooms up to {self.max_room_size}'
            )
        # The overflow enemy tile (cols-3, rows-3) must sit inside the border, clear of (1, 1)
        if self.cols < MIN_GRID_SIZE or self.rows < MIN_GRID_SIZE:
            raise ValueError(
                f'grid {self.cols}x{self.rows} is smaller than {MIN_GRID_SIZE}x{MIN_GRID_SIZE}'
            )
        if self.max_rooms < 0 or self.base_enemies < 0:
            raise ValueError('max_rooms and base_enemies must be non-negative')
        if self.max_level < 1:
            raise ValueError(f'max_level must be at least 1, got {self.max_level}')
        if self.starting_hp < 1 or self.starting_ammo < 0:
            raise ValueError('starting_hp must be positive and starting_ammo non-negative')
        for name in ('player_interval', 'enemy_interval', 'projectile_interval'):
            if getattr(self, name) <= 0:
                raise ValueError(f'{name} must be positive')
        if self.swing_frames < 1:
            raise ValueError('swing_frames must be positive')

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> 'GameConfig':
        """Build a config, overriding defaults from DUNJY_* variables."""
        if environ is None:
            environ = os.environ
        overrides = {}
        for f in fields(cls):
            raw = environ.get(ENV_PREFIX + f.name.upper())
            if raw is None or raw == '':
                continue
            caster = float if f.name.endswith('_interval') else int
            try:
                overrides[f.name] = caster(raw)
            except ValueError:
                raise ValueError(f'{ENV_PREFIX}{f.name.upper()}={raw!r} is not a valid number')
        return cls(**overrides)


__all__ = ['GameConfig', 'ENV_PREFIX', 'MIN_GRID_SIZE']
