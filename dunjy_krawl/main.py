#!/usr/bin/env python3
"""
DUNJY KRAWL - Terminal Dungeon Crawler
=======================================
Clear every room of a freshly dug dungeon, five levels deep.

Controls:
    WASD    - Move
    SPACE   - Swing at the tile you face
    F       - Fire at the aim cursor
    ARROWS  - Move the aim cursor
    C       - Re-centre the aim cursor in front of you
    ENTER   - Start
    R       - Restart after death
    Q/ESC   - Quit
"""

import logging
import os
import sys
import time
from logging.handlers import RotatingFileHandler

try:
    from blessed import Terminal
except ImportError:
    print("ERROR: 'blessed' library required. Install with: pip install blessed")
    sys.exit(1)

from .config import GameConfig
from .engine import (
    GameRenderer, GRAY_DARK, GRAY_DARKER, GRAY_MED, GRAY_LIGHT,
    TORCH_YELLOW, BLOOD_RED, MOSS_GREEN, STEEL_BLUE, EMBER_ORANGE, BONE_WHITE
)
from .game import GameState, Simulation, Snapshot
from .grid import WALL
from .player import InputHandler


logger = logging.getLogger(__name__)


# =============================================================================
# CONSTANTS
# =============================================================================

TARGET_FPS = 60
FRAME_TIME = 1.0 / TARGET_FPS
HUD_ROWS = 3

LOG_FORMAT = '%(asctime)s [%(levelname)s] %(name)s: %(message)s'

TITLE_ART = [
    r" ___  _   _ _  _     _ _  _  ",
    r"|   \| | | | \| |_  | | || | ",
    r"| |) | |_| | .` | || |\_, | ",
    r"|___/ \___/|_|\_|\__/ |__/  ",
    r" _  _____    ___      ___    ",
    r"| |/ / _ \  /_\ \    / / |   ",
    r"| ' <|   / / _ \ \/\/ /| |__ ",
    r"|_|\_\_|_\/_/ \_\_/\_/ |____|",
]

PROJECTILE_GLYPHS = {
    (1, 0): '-', (-1, 0): '-',
    (0, 1): '|', (0, -1): '|',
    (1, 1): '\\', (-1, -1): '\\',
    (1, -1): '/', (-1, 1): '/',
}


# =============================================================================
# LOGGING
# =============================================================================

def configure_logging(environ=None):
    """
    Send log records to a rotating file. The game owns the terminal,
    so there is no console handler.
    """
    if environ is None:
        environ = os.environ
    level_name = environ.get('DUNJY_LOG_LEVEL', 'WARNING').upper()
    log_path = environ.get('DUNJY_LOG_FILE', 'dunjy_krawl.log')

    root = logging.getLogger()
    root.setLevel(getattr(logging, level_name, logging.WARNING))

    file_handler = RotatingFileHandler(log_path, maxBytes=1_000_000, backupCount=3)
    file_handler.setFormatter(logging.Formatter(LOG_FORMAT))

    # Avoid duplicate handlers if reconfigured
    for h in list(root.handlers):
        root.removeHandler(h)
    root.addHandler(file_handler)
    return file_handler


# =============================================================================
# SCREENS
# =============================================================================

def render_map(renderer: GameRenderer, snap: Snapshot, aim=None):
    """Draw tiles, then the aim cursor, then everything standing on them."""
    renderer.draw_box(
        renderer.origin_x - 1, renderer.origin_y - 1,
        snap.cols * renderer.TILE_WIDTH + 2, snap.rows + 2, GRAY_DARKER, '.'
    )

    for y, row in enumerate(snap.grid):
        for x, cell in enumerate(row):
            if cell == WALL:
                renderer.put_tile(x, y, '##', GRAY_DARK)
            else:
                renderer.put_tile(x, y, '.', GRAY_DARKER)

    if aim is not None:
        renderer.put_tile(aim[0], aim[1], '+', STEEL_BLUE)

    if snap.swing is not None:
        sx, sy, frames = snap.swing
        renderer.put_tile(sx, sy, '*' if frames % 4 < 2 else 'x', EMBER_ORANGE)

    for ex, ey in snap.enemies:
        renderer.put_tile(ex, ey, 'g', BLOOD_RED)

    for px, py, dx, dy in snap.projectiles:
        renderer.put_tile(px, py, PROJECTILE_GLYPHS.get((dx, dy), '*'), BONE_WHITE)

    x, y = snap.player_pos
    renderer.put_tile(x, y, '@', TORCH_YELLOW)


def render_ui(renderer: GameRenderer, snap: Snapshot, max_level: int):
    """HUD rows under the map."""
    ui_y = renderer.hud_y

    hearts = '♥' * snap.player_hp + '·' * max(0, snap.player_max_hp - snap.player_hp)
    hp_color = MOSS_GREEN if snap.player_hp > 1 else BLOOD_RED
    renderer.put_string(1, ui_y, 'HP ', GRAY_MED)
    renderer.put_string(4, ui_y, hearts, hp_color)

    ammo_text = f'AMMO {snap.ammo}'
    renderer.put_string(14, ui_y, ammo_text, STEEL_BLUE if snap.ammo else GRAY_DARK)

    status = f'LVL {snap.level}/{max_level}  DIFF {snap.difficulty}  FOES {len(snap.enemies)}'
    renderer.put_string(24, ui_y, status, TORCH_YELLOW)

    renderer.put_string(
        1, ui_y + 1,
        'WASD move  SPC swing  F fire  ARROWS aim  C centre  Q quit',
        GRAY_DARK
    )


def render_title_screen(renderer: GameRenderer, snap: Snapshot, frame: int):
    top = max(1, renderer.height // 2 - len(TITLE_ART) // 2 - 3)
    for i, line in enumerate(TITLE_ART):
        renderer.put_centered(top + i, line, TORCH_YELLOW)

    y = top + len(TITLE_ART) + 2
    if snap.difficulty > 1:
        renderer.put_centered(y, f'DIFFICULTY {snap.difficulty}', EMBER_ORANGE)
    if frame % 60 < 40:
        renderer.put_centered(y + 2, 'PRESS ENTER TO DESCEND', BONE_WHITE)
    renderer.put_centered(y + 4, 'Q TO QUIT', GRAY_MED)


def render_game_over_screen(renderer: GameRenderer, snap: Snapshot):
    cy = renderer.height // 2 - 3
    renderer.put_centered(cy, '[ YOU DIED ]', BLOOD_RED)
    renderer.put_centered(cy + 2, f'LEVEL {snap.level}   DIFFICULTY {snap.difficulty}', GRAY_LIGHT)
    renderer.put_centered(cy + 3, f'ENEMIES SLAIN: {snap.kills}', GRAY_LIGHT)
    renderer.put_centered(cy + 5, 'R TO RETURN TO THE SURFACE   Q TO QUIT', GRAY_MED)


# =============================================================================
# GAME
# =============================================================================

class DunjyKrawl:
    """Ties the terminal, the input handler and the simulation together."""

    def __init__(self, term: Terminal, config: GameConfig):
        self.term = term
        self.config = config
        self.input_handler = InputHandler(bounds=(config.cols, config.rows))
        self.sim = Simulation(config, self.input_handler)

        self.renderer = GameRenderer(term, map_rows=config.rows)
        self.running = True
        self.frame = 0
        self._last_hp = None

    def handle_input(self):
        """Drain all pending input from the terminal."""
        key = self.term.inkey(timeout=0)
        while key:
            self.input_handler.process_key(key)
            key = self.term.inkey(timeout=0)

        if self.input_handler.consume_quit():
            self.running = False

        if self.input_handler.aim_target() is None or self.input_handler.consume_recenter_aim():
            self._recenter_aim()

    def _recenter_aim(self):
        snap = self.sim.snapshot()
        x, y = snap.player_pos
        self.input_handler.set_aim(x + snap.player_facing.dx, y + snap.player_facing.dy)

    def update(self):
        self.sim.advance()
        self.input_handler.update()
        self.frame += 1

    def render(self):
        snap = self.sim.snapshot()
        if self._last_hp is not None and snap.player_hp < self._last_hp:
            self.renderer.trigger_shake(intensity=1, frames=8)
        self._last_hp = snap.player_hp

        if self.renderer.sync_size():
            logger.info('terminal resized to %dx%d', self.renderer.width, self.renderer.height)
        self.renderer.begin_frame()
        if snap.state is GameState.START:
            render_title_screen(self.renderer, snap, self.frame)
        elif snap.state is GameState.GAMEOVER:
            render_game_over_screen(self.renderer, snap)
        else:
            render_map(self.renderer, snap, self.input_handler.aim_target())
            render_ui(self.renderer, snap, self.config.max_level)

        output = self.renderer.end_frame()
        if output:
            print(output, end='', flush=True)


# =============================================================================
# MAIN LOOP
# =============================================================================

def main():
    """Entry point. Sets up terminal and runs the 60 FPS game loop."""
    try:
        config = GameConfig.from_env()
    except ValueError as exc:
        print(f'Invalid configuration: {exc}')
        sys.exit(1)

    configure_logging()

    term = Terminal()
    min_width = config.cols * GameRenderer.TILE_WIDTH + 2
    min_height = config.rows + 2 + HUD_ROWS
    if term.width < min_width or term.height < min_height:
        print(
            f'Terminal too small: {term.width}x{term.height}. '
            f'Minimum: {min_width}x{min_height}'
        )
        sys.exit(1)

    logger.info('starting on a %dx%d terminal', term.width, term.height)

    with term.fullscreen(), term.cbreak(), term.hidden_cursor():
        game = DunjyKrawl(term, config)

        # Initial clear (only time we clear the whole screen)
        print(term.home + term.clear, end='', flush=True)

        # Keep ticking in every state so GAMEOVER can still take a restart
        while game.running:
            now = time.perf_counter()

            game.handle_input()
            game.update()
            game.render()

            # Sleep for remaining frame time
            elapsed = time.perf_counter() - now
            sleep_time = FRAME_TIME - elapsed
            if sleep_time > 0.001:
                time.sleep(sleep_time * 0.9)

        print(term.normal, end='', flush=True)

    logger.info('quit')


if __name__ == '__main__':
    main()
