"""
Obstacle Variants
==================
Factories for everything the skier can hit, plus per-kind dispatch
for hitbox, collision effect, movement, visual state and cleanup.

    tree/tall-tree/rock/log  static, 1 damage
    bush                     static, 1 damage (2 when burning)
    mushroom                 static, +1 health, removed on pickup
    dog                      walks sideways, 1 damage
    yeti                     chases the skier, lethal
"""

import logging
import math
import random

from .ecs import World
from .components import (
    Position, CollisionBox, Renderable, ScreenPosition,
    Obstacle, ObstacleKind, DogWalker, YetiChaser, SkierState
)
from .config import (
    OBSTACLE_HITBOXES, FLAMING_BUSH_PROB, PIXELS_PER_METER,
    DOG_SPEED, DOG_HITBOX,
    YETI_SPEED, YETI_HITBOX, YETI_OFFSETS_X, YETI_OFFSETS_Y,
    YETI_BITE_DURATION, YETI_EXIT_SCREEN_TOP
)
from .geometry import Rect, INVALID_HITBOX, translated_hitbox
from .skier import collide, add_health, die
from .timers import Scheduler, YETI_BITE

logger = logging.getLogger(__name__)

STATIC_KINDS = (ObstacleKind.TREE, ObstacleKind.TALL_TREE, ObstacleKind.ROCK, ObstacleKind.LOG)

# These collide even after the skier has passed them
BYPASS_PASSED_RULE = (ObstacleKind.MUSHROOM, ObstacleKind.YETI)


# =============================================================================
# FACTORIES
# =============================================================================

def _create_obstacle(world: World, kind: ObstacleKind, x: float, y: float,
                     hitbox: tuple, damage: int = 1, burning: bool = False) -> int:
    entity_id = world.create_entity()

    world.add_component(entity_id, Position(x, y))
    world.add_component(entity_id, CollisionBox(*hitbox))
    world.add_component(entity_id, Obstacle(kind, damage, burning))
    world.add_component(entity_id, Renderable(state=kind.value, layer=5))
    world.add_component(entity_id, ScreenPosition())

    return entity_id


def create_static_obstacle(world: World, kind: ObstacleKind, x: float, y: float) -> int:
    """Create a tree, tall tree, rock or log."""
    return _create_obstacle(world, kind, x, y, OBSTACLE_HITBOXES[kind])


def create_bush(world: World, x: float, y: float, rng: random.Random,
                flaming_prob: float = FLAMING_BUSH_PROB) -> int:
    """Create a bush. Some of them are on fire and hurt twice as much."""
    burning = flaming_prob > rng.random()
    entity_id = _create_obstacle(
        world, ObstacleKind.BUSH, x, y, OBSTACLE_HITBOXES[ObstacleKind.BUSH],
        damage=2 if burning else 1, burning=burning
    )
    if burning:
        world.get_component(entity_id, Renderable).state = 'flaming-bush'
    return entity_id


def create_mushroom(world: World, x: float, y: float) -> int:
    """Create a health pickup."""
    return _create_obstacle(
        world, ObstacleKind.MUSHROOM, x, y, OBSTACLE_HITBOXES[ObstacleKind.MUSHROOM],
        damage=0
    )


def create_dog(world: World, x: float, y: float, direction: int) -> int:
    """Create a dog walking left (-1) or right (+1)."""
    entity_id = _create_obstacle(world, ObstacleKind.DOG, x, y, DOG_HITBOX)
    world.add_component(entity_id, DogWalker(speed_x=direction * DOG_SPEED))

    rend = world.get_component(entity_id, Renderable)
    rend.state = 'dog-walk'
    rend.facing = direction
    return entity_id


def create_yeti(world: World, skier_x: float, skier_y: float, rng: random.Random) -> int:
    """Create a yeti at one of the fixed offsets from the skier."""
    x = skier_x - rng.choice(YETI_OFFSETS_X)
    y = skier_y + rng.choice(YETI_OFFSETS_Y)

    entity_id = _create_obstacle(world, ObstacleKind.YETI, x, y, YETI_HITBOX)
    world.add_component(entity_id, YetiChaser(speed=YETI_SPEED))

    rend = world.get_component(entity_id, Renderable)
    rend.state = 'yeti-run'
    rend.layer = 8
    return entity_id


def spawn_obstacle(world: World, kind: ObstacleKind, x: float, y: float,
                   rng: random.Random, flaming_prob: float = FLAMING_BUSH_PROB) -> int:
    """Create any kind the chunk generator can place."""
    if kind == ObstacleKind.BUSH:
        return create_bush(world, x, y, rng, flaming_prob)
    if kind == ObstacleKind.MUSHROOM:
        return create_mushroom(world, x, y)
    return create_static_obstacle(world, kind, x, y)


# =============================================================================
# DISPATCH
# =============================================================================

def get_hitbox(pos: Position, box: CollisionBox) -> Rect:
    """World-space hitbox, or INVALID_HITBOX once consumed."""
    if not box.valid:
        return INVALID_HITBOX
    return translated_hitbox(pos.x, pos.y, box.as_tuple(), PIXELS_PER_METER)


def bypasses_passed_rule(kind: ObstacleKind) -> bool:
    return kind in BYPASS_PASSED_RULE


def on_collision(world: World, entity_id: int, skier_id: int, scheduler: Scheduler) -> None:
    """Apply the obstacle's effect on the skier."""
    obstacle = world.get_component(entity_id, Obstacle)
    box = world.get_component(entity_id, CollisionBox)
    if obstacle is None or box is None:
        return

    if obstacle.kind == ObstacleKind.MUSHROOM:
        box.valid = False
        add_health(world, skier_id, 1)
        world.destroy_entity(entity_id)

    elif obstacle.kind == ObstacleKind.YETI:
        yeti = world.get_component(entity_id, YetiChaser)
        skier = world.get_component(skier_id, SkierState)
        if yeti.victorious or skier is None or skier.dead:
            return
        box.valid = False
        die(world, skier_id)
        yeti.victorious = True
        yeti.pose = 'yeti-eat'
        scheduler.schedule(YETI_BITE_DURATION, YETI_BITE, entity_id)
        logger.debug("yeti %d caught the skier", entity_id)

    else:
        # Static obstacles, bushes and dogs
        box.valid = False
        collide(world, skier_id, obstacle.damage)


def finish_bite(world: World, entity_id: int) -> None:
    """Second half of the bite animation."""
    yeti = world.get_component(entity_id, YetiChaser)
    if yeti:
        yeti.pose = 'yeti-pick'


def move(world: World, entity_id: int, skier_pos: Position, skier: SkierState) -> None:
    """Advance mobile obstacles one tick. Static ones do nothing."""
    pos = world.get_component(entity_id, Position)

    walker = world.get_component(entity_id, DogWalker)
    if walker:
        pos.x += walker.speed_x
        return

    yeti = world.get_component(entity_id, YetiChaser)
    if yeti:
        if yeti.victorious:
            return

        rad = math.atan2(skier_pos.y - pos.y, skier_pos.x - pos.x)
        speed_x = math.cos(rad) * yeti.speed
        speed_y = math.sin(rad) * yeti.speed

        # Back away from a corpse someone else got to first
        if skier.dead:
            speed_x *= -1

        pos.x += speed_x
        pos.y += speed_y


def update_graphics(world: World, entity_id: int, skier_pos: Position, skier: SkierState) -> None:
    """Refresh facing/pose; yetis that ran off the top of the screen get removed."""
    yeti = world.get_component(entity_id, YetiChaser)
    if yeti is None:
        return

    screen = world.get_component(entity_id, ScreenPosition)
    if screen.top <= YETI_EXIT_SCREEN_TOP:
        world.destroy_entity(entity_id)

    pos = world.get_component(entity_id, Position)
    direction = skier_pos.x - pos.x
    if skier.dead and not yeti.victorious:
        direction *= -1

    rend = world.get_component(entity_id, Renderable)
    rend.facing = -1 if direction < 0 else 1
    rend.state = yeti.pose


def clean_up(world: World, entity_id: int) -> None:
    """Called by the sweep just before an obstacle is deregistered."""
    obstacle = world.get_component(entity_id, Obstacle)
    if obstacle:
        logger.debug("removing %s %d", obstacle.kind.value, entity_id)
