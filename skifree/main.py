#!/usr/bin/env python3
"""
SKIFREE - Endless Terminal Downhill
====================================
Ski down an endless mountain. Dodge trees, rocks, dogs and the yeti.

Controls:
    A/D, LEFT/RIGHT  - Turn
    S, DOWN          - Point straight downhill
    F                - Toggle turbo
    F1               - Toggle FPS display
    Q/ESC            - Quit

Environment:
    SKIFREE_DEBUG=true     - Debug-level logging
    SKIFREE_LOG_FILE=path  - Write the log to a file instead of stderr
"""

from typing import Optional
import logging
import os
import sys
import time

try:
    from blessed import Terminal
except ImportError:
    print("ERROR: 'blessed' library required. Install with: pip install blessed")
    sys.exit(1)

from .config import FPS
from .engine import GameRenderer
from .render import (
    render_entities, render_snow, render_ui,
    render_title_screen, render_game_over_screen
)
from .simulation import Simulation
from .skier import InputHandler

logger = logging.getLogger(__name__)


# =============================================================================
# CONSTANTS
# =============================================================================

FRAME_TIME = 1.0 / FPS
MIN_WIDTH = 80
MIN_HEIGHT = 24

# Game phases
PHASE_TITLE = 'title'
PHASE_PLAYING = 'playing'
PHASE_GAME_OVER = 'game_over'


def setup_logging(debug: bool = False, log_file: Optional[str] = None) -> None:
    """Configure logging."""
    # The game owns the terminal, so stderr only gets warnings unless a file is set
    if debug:
        level = logging.DEBUG
    elif log_file:
        level = logging.INFO
    else:
        level = logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
        filename=log_file,
    )


# =============================================================================
# GAME STATE
# =============================================================================

class GameState:
    """Ties the simulation to the terminal: phases, input and drawing."""

    def __init__(self, term: Terminal):
        self.term = term
        self.renderer = GameRenderer(term)
        self.input_handler = InputHandler()

        self.running = True
        self.phase = PHASE_TITLE
        self.phase_frame = 0

        # Set up on game start
        self.sim: Optional[Simulation] = None
        self._last_health = 0

    def start_game(self):
        """Initialize a new run."""
        self.sim = Simulation()
        self._last_health = self.sim.health.current
        self.phase = PHASE_PLAYING
        self.phase_frame = 0
        logger.info("new run started")

    def update(self):
        """Run one fixed-timestep tick of game logic."""
        self.phase_frame += 1

        if self.phase != PHASE_PLAYING:
            return

        for command in self.input_handler.consume_commands():
            self.sim.command(command)

        self.sim.tick()

        health = self.sim.health.current
        if health < self._last_health:
            self.renderer.trigger_shake(intensity=1, frames=8)
        self._last_health = health

        if self.sim.poll_game_over():
            self.renderer.trigger_shake(intensity=2, frames=15)
            self.phase = PHASE_GAME_OVER
            self.phase_frame = 0

    def render(self):
        """Draw the current phase."""
        if (self.term.width, self.term.height) != (self.renderer.width, self.renderer.height):
            self.renderer.resize(self.term.width, self.term.height)
            print(self.term.home + self.term.clear, end='', flush=True)

        self.renderer.begin_frame()

        if self.phase == PHASE_TITLE:
            render_title_screen(self.renderer, self.phase_frame)
        else:
            hud = self.sim.hud
            render_snow(self.renderer, hud.distance)
            render_entities(self.sim.world, self.renderer)
            render_ui(self.renderer, hud, self.sim.skier.turbo)
            if self.phase == PHASE_GAME_OVER:
                render_game_over_screen(self.renderer, hud, self.phase_frame)

        output = self.renderer.end_frame()
        if output:
            print(output, end='', flush=True)

    def _menu_key(self, key) -> bool:
        """Title and game-over keys. Returns True if the key was acted on."""
        text = '' if key.is_sequence else key.lower()
        if text == 'q' or key.name == 'KEY_ESCAPE':
            self.running = False
            return True
        if self.phase == PHASE_TITLE or text == 'r':
            self.start_game()
            return True
        return False

    def handle_input(self):
        """Drain all pending input from the terminal."""
        for key in iter(lambda: self.term.inkey(timeout=0), ''):
            if self.phase == PHASE_PLAYING:
                self.input_handler.process_key(key)
            elif self._menu_key(key):
                # Menu keys end the drain so a restart starts with a clean queue
                return

        if self.input_handler.consume_quit():
            self.running = False
        if self.input_handler.consume_toggle_fps():
            self.renderer.show_fps = not self.renderer.show_fps


def main():
    """Entry point. Sets up terminal and runs the 60 FPS game loop."""
    debug = os.getenv("SKIFREE_DEBUG", "false").lower() == "true"
    setup_logging(debug, os.getenv("SKIFREE_LOG_FILE"))

    term = Terminal()

    if term.width < MIN_WIDTH or term.height < MIN_HEIGHT:
        print(
            f'Terminal too small: {term.width}x{term.height}. '
            f'Minimum: {MIN_WIDTH}x{MIN_HEIGHT}'
        )
        sys.exit(1)

    logger.info("SKIFREE starting (%dx%d)", term.width, term.height)

    try:
        with term.fullscreen(), term.cbreak(), term.hidden_cursor():
            game = GameState(term)

            last_time = time.perf_counter()
            accumulator = 0.0
            fps_timer = 0.0
            fps_frame_count = 0

            # Initial clear (only time we clear the whole screen)
            print(term.home + term.clear, end='', flush=True)

            while game.running:
                now = time.perf_counter()
                delta = now - last_time
                last_time = now

                # Clamp delta to prevent spiral of death
                delta = min(delta, FRAME_TIME * 5)

                accumulator += delta
                fps_timer += delta

                game.handle_input()

                # Fixed-timestep updates
                ticks = 0
                while accumulator >= FRAME_TIME and ticks < 4:
                    game.update()
                    accumulator -= FRAME_TIME
                    ticks += 1
                    fps_frame_count += 1

                # Render at display rate
                game.render()

                if fps_timer >= 0.5:
                    game.renderer.current_fps = fps_frame_count / fps_timer
                    fps_frame_count = 0
                    fps_timer = 0.0

                # Sleep for remaining frame time
                elapsed = time.perf_counter() - now
                sleep_time = FRAME_TIME - elapsed
                if sleep_time > 0.001:
                    time.sleep(sleep_time * 0.9)

            # Restore terminal
            print(term.normal, end='', flush=True)

    except KeyboardInterrupt:
        logger.info("Interrupted by user")

    logger.info("SKIFREE exiting")


if __name__ == '__main__':
    main()
