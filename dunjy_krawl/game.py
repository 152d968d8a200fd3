"""
Game State Machine
===================
The simulation context: owns the grid, the entity world, the session
counters and the timing gates, and advances them once per frame.

    START --BEGIN--> RUNNING --hp <= 0--> GAMEOVER --RESTART--> START
                     RUNNING --last level cleared--> START (difficulty + 1)
"""

import logging
import random
import time
from dataclasses import dataclass
from enum import Enum, auto
from typing import Optional, Tuple

from .config import GameConfig
from .ecs import World
from .components import Position, Facing, Health, EnemyTag, Projectile, SwingEffect, Direction
from .grid import Grid
from .dungeon import DungeonLayout, generate_dungeon
from .timing import TimingGate
from .player import Action, InputHandler, create_player, player_movement_system
from .enemies import spawn_enemies, enemy_ai_system
from .combat import melee_swing, swing_effect_system, contact_system
from .projectiles import fire_projectile, projectile_system


logger = logging.getLogger(__name__)


class GameState(Enum):
    START = auto()
    RUNNING = auto()
    GAMEOVER = auto()


@dataclass(frozen=True)
class Snapshot:
    """Read-only view of one frame, enough to draw it."""
    state: GameState
    level: int
    difficulty: int
    ammo: int
    kills: int
    grid: Tuple[Tuple[int, ...], ...]
    player_pos: Tuple[int, int]
    player_facing: Direction
    player_hp: int
    player_max_hp: int
    enemies: Tuple[Tuple[int, int], ...]
    projectiles: Tuple[Tuple[int, int, int, int], ...]  # (x, y, dx, dy)
    swing: Optional[Tuple[int, int, int]]  # (x, y, frames_remaining)

    @property
    def cols(self) -> int:
        return len(self.grid[0]) if self.grid else 0

    @property
    def rows(self) -> int:
        return len(self.grid)


class Simulation:
    """
    One game session.

    The input source is pulled, never pushed: advance() drains its
    queued actions and reads its held directions and aim target. The
    rng needs randint(a, b); the clock returns monotonic seconds.
    """

    def __init__(self, config: Optional[GameConfig] = None,
                 input_source=None, rng=None, clock=None):
        self.config = config or GameConfig()
        self.rng = rng if rng is not None else random.Random(self.config.seed)
        self.clock = clock or time.perf_counter
        self.input = input_source or InputHandler(bounds=(self.config.cols, self.config.rows))

        self.state = GameState.START
        self.level = 1
        self.difficulty = 1
        self.ammo = self.config.starting_ammo
        self.kills = 0

        self.player_gate = TimingGate(self.config.player_interval, self.clock)
        self.enemy_gate = TimingGate(self.config.enemy_interval, self.clock)
        self.projectile_gate = TimingGate(self.config.projectile_interval, self.clock)

        self.grid: Grid = Grid(self.config.cols, self.config.rows)
        self.world = World()
        self.player_id: Optional[int] = None

        # Something to show behind the title screen
        self._generate_level()

    # -------------------------------------------------------------------------
    # Level setup
    # -------------------------------------------------------------------------

    def _generate_level(self):
        layout = generate_dungeon(self.level, self.difficulty, self.config, self.rng)
        self.load_layout(layout)

    def load_layout(self, layout: DungeonLayout):
        """Replace the grid and entities with a freshly generated level."""
        self.grid = layout.grid
        self.world = World()
        px, py = layout.player_spawn
        self.player_id = create_player(self.world, px, py, self.config.starting_hp)
        spawn_enemies(self.world, layout.enemy_spawns)
        self.ammo = self.config.starting_ammo

        for gate in (self.player_gate, self.enemy_gate, self.projectile_gate):
            gate.reset()

    # -------------------------------------------------------------------------
    # Transitions
    # -------------------------------------------------------------------------

    def begin(self):
        """START -> RUNNING at level 1 with a fresh dungeon."""
        if self.state is not GameState.START:
            return
        self.level = 1
        self.kills = 0
        self._generate_level()
        self._set_state(GameState.RUNNING)

    def restart(self):
        """GAMEOVER -> START; level and difficulty are kept until BEGIN."""
        if self.state is not GameState.GAMEOVER:
            return
        self._set_state(GameState.START)

    def _set_state(self, state: GameState):
        logger.info('state %s -> %s (level %d, difficulty %d)',
                    self.state.name, state.name, self.level, self.difficulty)
        self.state = state

    def _level_cleared(self):
        self.level += 1
        if self.level > self.config.max_level:
            self.difficulty += 1
            logger.info('all %d levels cleared; difficulty raised to %d',
                        self.config.max_level, self.difficulty)
            self._set_state(GameState.START)
            return
        logger.info('level cleared; entering level %d', self.level)
        self._generate_level()

    # -------------------------------------------------------------------------
    # Actions
    # -------------------------------------------------------------------------

    def handle_action(self, action: Action):
        """Apply one discrete action; actions foreign to the state are dropped."""
        if self.state is GameState.START:
            if action is Action.BEGIN:
                self.begin()
        elif self.state is GameState.GAMEOVER:
            if action is Action.RESTART:
                self.restart()
        elif action is Action.MELEE:
            self.kills += len(melee_swing(self.world, self.config.swing_frames))
        elif action is Action.FIRE:
            self._fire()

    def _fire(self):
        pos = self.world.get_component(self.player_id, Position)
        proj_id, killed = fire_projectile(
            self.world, self.grid, (pos.x, pos.y), self.input.aim_target(), self.ammo
        )
        if proj_id is None:
            return
        self.ammo -= 1
        if killed is not None:
            self.kills += 1

    # -------------------------------------------------------------------------
    # Per-frame entry point
    # -------------------------------------------------------------------------

    def advance(self):
        """Run one frame. Safe to call in every state."""
        actions = self.input.consume_actions()

        if self.state is GameState.RUNNING:
            swing_effect_system(self.world)

        for action in actions:
            self.handle_action(action)

        if self.state is not GameState.RUNNING:
            self.world.process_dead_entities()
            return

        if self.player_gate.ready():
            player_movement_system(self.world, self.grid, self.input.held_directions())

        if self.enemy_gate.ready():
            enemy_ai_system(self.world, self.grid, self.rng)

        if self.projectile_gate.ready():
            self.kills += len(projectile_system(self.world, self.grid))

        damage, _ = contact_system(self.world)
        if damage:
            health = self.world.get_component(self.player_id, Health)
            if health.current <= 0:
                self.world.process_dead_entities()
                self._set_state(GameState.GAMEOVER)
                return

        if self.world.count(EnemyTag) == 0:
            self._level_cleared()

        self.world.process_dead_entities()

    # -------------------------------------------------------------------------
    # Read-only view
    # -------------------------------------------------------------------------

    def snapshot(self) -> Snapshot:
        pos = self.world.get_component(self.player_id, Position)
        facing = self.world.get_component(self.player_id, Facing)
        health = self.world.get_component(self.player_id, Health)

        swing = None
        for _, s_pos, effect in self.world.query(Position, SwingEffect):
            swing = (s_pos.x, s_pos.y, effect.frames_remaining)

        return Snapshot(
            state=self.state,
            level=self.level,
            difficulty=self.difficulty,
            ammo=self.ammo,
            kills=self.kills,
            grid=self.grid.as_tuple(),
            player_pos=(pos.x, pos.y),
            player_facing=facing.direction,
            player_hp=health.current,
            player_max_hp=health.maximum,
            enemies=tuple((p.x, p.y) for _, p, _ in self.world.query(Position, EnemyTag)),
            projectiles=tuple(
                (p.x, p.y, proj.dx, proj.dy)
                for _, p, proj in self.world.query(Position, Projectile)
            ),
            swing=swing,
        )

    def player_position(self) -> Tuple[int, int]:
        pos = self.world.get_component(self.player_id, Position)
        return pos.x, pos.y


__all__ = ['GameState', 'Action', 'Snapshot', 'Simulation']
