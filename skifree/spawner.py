"""
NPC Spawning
=============
Dogs arrive on a timer while the skier is moving downhill; a yeti
arrives at every distance milestone.
"""

from typing import Optional, Tuple
import logging
import random

from .ecs import World
from .components import Position, SkierState
from .config import (
    DOG_SPAWN_INTERVAL, DOG_SPEED, MIN_DOG_SPAWN_Y_DISTANCE,
    YETI_SPAWN_MILESTONE, PIXELS_PER_METER
)
from .obstacles import create_dog, create_yeti

logger = logging.getLogger(__name__)


def display_distance(state: SkierState) -> int:
    """Distance skied in display units, as shown on the HUD."""
    return int(round(state.distance_traveled * PIXELS_PER_METER))


def dog_spawn_position(skier_pos: Position, skier: SkierState, direction: int) -> Tuple[float, float]:
    """
    Place a dog far below the skier so that, walking sideways, it
    crosses the skier's projected path right as the skier gets there.
    """
    dog_speed = DOG_SPEED * direction
    ticks_to_reach = MIN_DOG_SPAWN_Y_DISTANCE / skier.speed_y
    skier_drift_x = skier.speed_x * ticks_to_reach
    dist_x = ticks_to_reach * -dog_speed + skier_drift_x

    return (skier_pos.x + dist_x, skier_pos.y + MIN_DOG_SPAWN_Y_DISTANCE)


class DogSpawner:
    """Counts down ticks of downhill skiing between dogs."""

    def __init__(self, interval: Tuple[int, int] = DOG_SPAWN_INTERVAL,
                 rng: Optional[random.Random] = None):
        self.interval = interval
        self.rng = rng or random.Random()
        self.countdown = self._draw()

    def _draw(self) -> int:
        return int(round(self.rng.uniform(*self.interval)))

    def update(self, world: World, skier_pos: Position, skier: SkierState) -> Optional[int]:
        """Tick the countdown; returns the new dog's ID when one spawns."""
        if skier.speed_y <= 0:
            return None

        self.countdown -= 1
        if self.countdown > 0:
            return None

        direction = self.rng.choice((-1, 1))
        x, y = dog_spawn_position(skier_pos, skier, direction)
        dog_id = create_dog(world, x, y, direction)
        self.countdown = self._draw()
        logger.debug("dog %d spawned at (%.1f, %.1f), next in %d ticks",
                     dog_id, x, y, self.countdown)
        return dog_id


class YetiSpawner:
    """Releases a yeti each time the skier passes another milestone."""

    def __init__(self, milestone: int = YETI_SPAWN_MILESTONE,
                 rng: Optional[random.Random] = None):
        self.milestone = milestone
        self.next_spawn = milestone
        self.rng = rng or random.Random()

    def update(self, world: World, skier_pos: Position, skier: SkierState) -> Optional[int]:
        if display_distance(skier) < self.next_spawn:
            return None

        yeti_id = create_yeti(world, skier_pos.x, skier_pos.y, self.rng)
        logger.debug("yeti %d released at %d", yeti_id, self.next_spawn)
        self.next_spawn += self.milestone
        return yeti_id
