import random

import pytest

from dunjy_krawl.config import GameConfig
from dunjy_krawl.dungeon import DungeonLayout
from dunjy_krawl.game import Simulation
from dunjy_krawl.grid import Grid, FLOOR
from dunjy_krawl.player import InputHandler


class FakeClock:
    """Monotonic clock that only moves when told to."""

    def __init__(self, start: float = 0.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float):
        self.now += seconds


class ScriptedRandom:
    """randint() that hands out queued values, checking each fits its range."""

    def __init__(self, values):
        self.values = list(values)

    def randint(self, a, b):
        if not self.values:
            raise AssertionError('ScriptedRandom ran out of values')
        value = self.values.pop(0)
        assert a <= value <= b, f'{value} outside [{a}, {b}]'
        return value


def grid_from_text(*rows: str) -> Grid:
    """'#' is wall, '.' is floor."""
    grid = Grid(len(rows[0]), len(rows))
    for y, row in enumerate(rows):
        for x, ch in enumerate(row):
            if ch == '.':
                grid.cells[y][x] = FLOOR
    return grid


# 9 x 7 arena: one open room with a pillar at (4, 3)
ARENA = (
    '#########',
    '#.......#',
    '#.......#',
    '#...#...#',
    '#.......#',
    '#.......#',
    '#########',
)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def rng():
    return random.Random(1234)


@pytest.fixture
def arena():
    return grid_from_text(*ARENA)


@pytest.fixture
def quiet_config():
    """Enemies effectively never wander, so scenes stay put."""
    return GameConfig(
        player_interval=0.1,
        enemy_interval=1000.0,
        projectile_interval=0.05,
    )


@pytest.fixture
def make_sim(quiet_config, clock):
    """
    Build a RUNNING simulation on a hand-made layout.

    make_sim(grid, player=(x, y), enemies=[...]) -> Simulation
    """
    def _make(grid, player, enemies=(), config=None, seed=7):
        sim = Simulation(config or quiet_config, InputHandler(),
                         rng=random.Random(seed), clock=clock)
        sim.begin()
        sim.load_layout(DungeonLayout(grid, player, list(enemies)))
        return sim
    return _make
