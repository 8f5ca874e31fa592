"""
Simulation Driver
==================
Owns every piece of mutable game state and advances it one fixed tick
at a time. No rendering or terminal I/O happens here.

Tick order:
    timers -> chunk window -> skier physics -> NPC spawns
    -> collision pass -> movement pass (+ pruning) -> removal sweep
"""

from dataclasses import dataclass
from typing import Optional, Tuple
import logging
import random

from .ecs import World
from .components import Position, ScreenPosition, Obstacle, Health, SkierState
from .config import (
    SimConfig, FPS, PIXELS_PER_METER, SKIER_SCREEN_TOP, SKIER_SCREEN_LEFT
)
from .chunks import ChunkGenerator, SpawnRateTable
from .collision import collision_system
from .obstacles import move, update_graphics, clean_up, finish_bite
from .skier import (
    create_skier, skier_physics_system, update_skier_graphics,
    get_up, end_invincibility, apply_command, Command
)
from .spawner import DogSpawner, YetiSpawner, display_distance
from .timers import Scheduler, GET_UP, INVINCIBILITY_END, YETI_BITE

logger = logging.getLogger(__name__)


@dataclass
class HudSnapshot:
    """Numbers shown on the status panel."""
    distance: int = 0
    vertical_speed: int = 0
    health: int = 0
    max_health: int = 0


class Simulation:
    """One independent run down the mountain."""

    def __init__(self, config: Optional[SimConfig] = None,
                 rng: Optional[random.Random] = None):
        self.config = config or SimConfig()
        self.rng = rng or random.Random()

        self.world = World()
        self.scheduler = Scheduler()
        self.rates = SpawnRateTable(rng=self.rng)
        self.generator = ChunkGenerator(self.world, self.rates, self.config, self.rng)
        self.dog_spawner = DogSpawner(self.config.dog_spawn_interval, self.rng)
        self.yeti_spawner = YetiSpawner(self.config.yeti_milestone, self.rng)

        self.skier_id = create_skier(self.world)
        self.tick_count = 0

        self.hud = self.snapshot()
        self._game_over_signaled = False
        self._game_over_pending = False

        self._refresh_graphics()

    # -------------------------------------------------------------------------
    # Accessors
    # -------------------------------------------------------------------------

    @property
    def skier(self) -> SkierState:
        return self.world.get_component(self.skier_id, SkierState)

    @property
    def skier_pos(self) -> Position:
        return self.world.get_component(self.skier_id, Position)

    @property
    def health(self) -> Health:
        return self.world.get_component(self.skier_id, Health)

    def obstacle_count(self) -> int:
        return sum(1 for _ in self.world.query(Obstacle))

    def project(self, pos: Position) -> Tuple[float, float]:
        """World position -> skier-relative screen (top, left) in pixels."""
        skier_pos = self.skier_pos
        top = (pos.y - skier_pos.y) * PIXELS_PER_METER + SKIER_SCREEN_TOP
        left = (pos.x - skier_pos.x) * PIXELS_PER_METER + SKIER_SCREEN_LEFT
        return top, left

    def snapshot(self) -> HudSnapshot:
        health = self.health
        return HudSnapshot(
            distance=display_distance(self.skier),
            vertical_speed=int(round(self.skier.speed_y * FPS)),
            health=health.current,
            max_health=health.maximum,
        )

    # -------------------------------------------------------------------------
    # Input
    # -------------------------------------------------------------------------

    def command(self, command: Command) -> bool:
        """Forward a steering command to the skier."""
        return apply_command(self.world, self.skier_id, command)

    def poll_game_over(self) -> bool:
        """True exactly once, on the first check after the skier dies."""
        if self._game_over_pending:
            self._game_over_pending = False
            return True
        return False

    # -------------------------------------------------------------------------
    # Tick
    # -------------------------------------------------------------------------

    def tick(self) -> None:
        """Advance the world by one fixed step."""
        self.tick_count += 1

        self._fire_timers()
        self._update_chunks()
        skier_physics_system(self.world, self.scheduler)
        self._spawn_npcs()
        collision_system(self.world, self.skier_id, self.scheduler)
        self._move_obstacles()
        self.world.process_dead_entities(cleanup=clean_up)

        if self.tick_count % self.config.hud_interval == 0:
            self.hud = self.snapshot()

        if self.skier.dead and not self._game_over_signaled:
            self._game_over_signaled = True
            self._game_over_pending = True
            self.hud = self.snapshot()
            logger.info("skier died at %d after %d ticks",
                        self.hud.distance, self.tick_count)

    def _fire_timers(self) -> None:
        for entry in self.scheduler.advance(self.tick_count):
            if entry.event == GET_UP:
                get_up(self.world, entry.entity_id, self.scheduler)
            elif entry.event == INVINCIBILITY_END:
                end_invincibility(self.world, entry.entity_id)
            elif entry.event == YETI_BITE:
                finish_bite(self.world, entry.entity_id)

    def _update_chunks(self) -> None:
        """Generate the chunk window whenever the skier changes chunk."""
        skier = self.skier
        pos = self.skier_pos
        chunk = self.generator.current_chunk(pos.x, pos.y)
        if chunk != skier.chunk:
            skier.chunk = chunk
            self.generator.generate_window(chunk, (pos.x, pos.y))

    def _spawn_npcs(self) -> None:
        skier = self.skier
        pos = self.skier_pos
        self.yeti_spawner.update(self.world, pos, skier)
        self.dog_spawner.update(self.world, pos, skier)

    def _move_obstacles(self) -> None:
        """Move every obstacle, refresh its projection and prune what scrolled away."""
        skier = self.skier
        skier_pos = self.skier_pos
        update_skier_graphics(self.world, self.skier_id)

        for entity_id, pos, screen, _ in self.world.query(Position, ScreenPosition, Obstacle):
            move(self.world, entity_id, skier_pos, skier)
            screen.top, screen.left = self.project(pos)
            update_graphics(self.world, entity_id, skier_pos, skier)

            _, chunk_y = self.generator.current_chunk(pos.x, pos.y)
            if chunk_y < skier.chunk[1] - 1:
                self.world.destroy_entity(entity_id)

    def _refresh_graphics(self) -> None:
        """Project every entity without advancing anything."""
        screen = self.world.get_component(self.skier_id, ScreenPosition)
        screen.top, screen.left = SKIER_SCREEN_TOP, SKIER_SCREEN_LEFT
        update_skier_graphics(self.world, self.skier_id)
        for _, pos, screen, _ in self.world.query(Position, ScreenPosition, Obstacle):
            screen.top, screen.left = self.project(pos)
