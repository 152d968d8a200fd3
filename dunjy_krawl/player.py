"""
Player Module
==============
Player entity creation, input handling and grid movement.
"""

from enum import Enum, auto
from typing import Dict, Iterable, List, Optional, Tuple

from .ecs import World
from .components import (
    Position, Facing, Health, PlayerTag, Direction
)
from .grid import Grid


class Action(Enum):
    """Discrete one-shot inputs."""
    MELEE = auto()
    FIRE = auto()
    BEGIN = auto()
    RESTART = auto()


def create_player(world: World, x: int, y: int, hp: int = 3) -> int:
    """Create the player entity with all required components."""
    entity_id = world.create_entity()

    world.add_component(entity_id, Position(x, y))
    world.add_component(entity_id, Facing(Direction.RIGHT))
    world.add_component(entity_id, Health(hp, hp))
    world.add_component(entity_id, PlayerTag())

    return entity_id


_MOVE_KEYS = {
    'w': Direction.UP,
    's': Direction.DOWN,
    'a': Direction.LEFT,
    'd': Direction.RIGHT,
}

_AIM_KEYS = {
    'KEY_UP': Direction.UP,
    'KEY_DOWN': Direction.DOWN,
    'KEY_LEFT': Direction.LEFT,
    'KEY_RIGHT': Direction.RIGHT,
}


class InputHandler:
    """
    Handles player input with key hold detection.

    Uses frame-based timers to simulate key hold in terminals
    that don't support key-up events. Discrete actions are queued
    once per key press and drained by the simulation.
    """

    def __init__(self, hold_duration: int = 12,
                 bounds: Optional[Tuple[int, int]] = None):
        # direction -> frames remaining, in press order (latest press last)
        self.keys_held: Dict[Direction, int] = {}
        self.hold_duration = hold_duration
        self.bounds = bounds  # (cols, rows) for clamping the aim cursor

        self._actions: List[Action] = []
        self._aim: Optional[Tuple[int, int]] = None
        self._quit_triggered = False
        self._recenter_aim = False

    def process_key(self, key) -> None:
        """Process a single key press from blessed's inkey()."""
        if key is None or not key:
            return

        key_str = key.lower() if not key.is_sequence else ''

        # Quit
        if key_str == 'q' or key.name == 'KEY_ESCAPE':
            self._quit_triggered = True
            return

        if key_str in _MOVE_KEYS:
            self.hold(_MOVE_KEYS[key_str])
        elif key.name in _AIM_KEYS:
            self.nudge_aim(_AIM_KEYS[key.name])
        elif key_str == ' ':
            self.trigger(Action.MELEE)
        elif key_str == 'f':
            self.trigger(Action.FIRE)
        elif key_str == 'r':
            self.trigger(Action.RESTART)
        elif key_str == 'c':
            self._recenter_aim = True
        elif key.name == 'KEY_ENTER' or key_str in ('\n', '\r'):
            self.trigger(Action.BEGIN)

    def update(self) -> None:
        """Update key hold timers (call once per frame)."""
        expired = []
        for direction, frames in self.keys_held.items():
            self.keys_held[direction] = frames - 1
            if self.keys_held[direction] <= 0:
                expired.append(direction)
        for direction in expired:
            del self.keys_held[direction]

    # -------------------------------------------------------------------------
    # Input source interface
    # -------------------------------------------------------------------------

    def held_directions(self) -> Tuple[Direction, ...]:
        """Held directions, oldest press first."""
        return tuple(self.keys_held)

    def consume_actions(self) -> List[Action]:
        """Return and clear the queued actions, oldest first."""
        actions = self._actions
        self._actions = []
        return actions

    def aim_target(self) -> Optional[Tuple[int, int]]:
        return self._aim

    # -------------------------------------------------------------------------
    # Direct feeds (keyboard handler and tests)
    # -------------------------------------------------------------------------

    def hold(self, direction: Direction, frames: Optional[int] = None) -> None:
        # Re-pressing moves the key to the back of the press order
        self.keys_held.pop(direction, None)
        self.keys_held[direction] = frames if frames is not None else self.hold_duration

    def release(self, direction: Direction) -> None:
        self.keys_held.pop(direction, None)

    def trigger(self, action: Action) -> None:
        self._actions.append(action)

    def set_aim(self, x: int, y: int) -> None:
        if self.bounds is not None:
            cols, rows = self.bounds
            x = min(max(x, 0), cols - 1)
            y = min(max(y, 0), rows - 1)
        self._aim = (x, y)

    def nudge_aim(self, direction: Direction) -> None:
        if self._aim is None:
            return
        x, y = self._aim
        self.set_aim(x + direction.dx, y + direction.dy)

    def consume_quit(self) -> bool:
        """Check and consume quit trigger."""
        triggered = self._quit_triggered
        self._quit_triggered = False
        return triggered

    def consume_recenter_aim(self) -> bool:
        """Check and consume the aim re-centre request."""
        triggered = self._recenter_aim
        self._recenter_aim = False
        return triggered


def player_movement_system(world: World, grid: Grid, held: Iterable[Direction]) -> bool:
    """
    Step the player one tile per held direction, in the order given
    (press order from the input handler), each step checked on its own.

    A blocked step leaves that axis unchanged. Facing follows the last
    direction processed, whether or not it moved. Returns True if the
    player changed tile.
    """
    held = list(held)
    moved = False
    for entity_id, pos, facing, _ in world.query(Position, Facing, PlayerTag):
        for direction in held:
            nx, ny = pos.x + direction.dx, pos.y + direction.dy
            if grid.is_open(nx, ny):
                pos.x, pos.y = nx, ny
                moved = True
            facing.direction = direction
    return moved


def get_player_entity(world: World) -> Optional[int]:
    """Get the player entity ID."""
    for entity_id, _ in world.query(PlayerTag):
        return entity_id
    return None


def get_player_position(world: World) -> Optional[Position]:
    """Get the player's position component."""
    player_id = get_player_entity(world)
    if player_id is not None:
        return world.get_component(player_id, Position)
    return None
