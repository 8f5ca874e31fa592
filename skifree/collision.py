"""
Collision System
=================
Tests the skier against every live obstacle once per tick.
"""

from typing import List

from .ecs import World
from .components import Position, CollisionBox, Obstacle, ObstacleKind
from .geometry import Rect, rects_overlap
from .obstacles import get_hitbox, bypasses_passed_rule, on_collision
from .timers import Scheduler


def hitboxes_intersect(skier_box: Rect, other_box: Rect, kind: ObstacleKind) -> bool:
    """
    AABB overlap, except that obstacles the skier has already passed
    (skier's bottom edge below theirs) never collide. Mushrooms and
    the yeti ignore that rule.
    """
    if skier_box.bottom > other_box.bottom and not bypasses_passed_rule(kind):
        return False

    return rects_overlap(skier_box, other_box)


def collision_system(world: World, skier_id: int, scheduler: Scheduler) -> List[int]:
    """
    Dispatch collision effects for every obstacle touching the skier.

    Returns IDs of the obstacles that were hit.
    """
    skier_pos = world.get_component(skier_id, Position)
    skier_box = world.get_component(skier_id, CollisionBox)
    if skier_pos is None or skier_box is None:
        return []

    skier_hitbox = get_hitbox(skier_pos, skier_box)

    hits = []
    for entity_id, pos, box, obstacle in world.query(Position, CollisionBox, Obstacle):
        if hitboxes_intersect(skier_hitbox, get_hitbox(pos, box), obstacle.kind):
            on_collision(world, entity_id, skier_id, scheduler)
            hits.append(entity_id)
    return hits
