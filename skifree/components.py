"""
Component Definitions
======================
All components are plain dataclasses with no behavior.
"""

from dataclasses import dataclass
from typing import Optional, Tuple
from enum import Enum


# =============================================================================
# PHYSICS COMPONENTS
# =============================================================================

@dataclass
class Position:
    """World position in meters. y increases downhill."""
    x: float = 0.0
    y: float = 0.0


@dataclass
class CollisionBox:
    """
    Hitbox relative to Position, in pixels: (top, left, width, height).

    valid=False means the box was consumed by a collision and must
    never overlap anything again.
    """
    top: int = 0
    left: int = 0
    width: int = 1
    height: int = 1
    valid: bool = True

    def as_tuple(self) -> Tuple[int, int, int, int]:
        return (self.top, self.left, self.width, self.height)


# =============================================================================
# RENDERING COMPONENTS
# =============================================================================

@dataclass
class Renderable:
    """
    Visual state handed to the render collaborator.

    state is the sprite name ('tree', 'dog-walk', 'rightmost', ...),
    facing is +1/-1 for horizontally flippable sprites.
    """
    state: str = ''
    facing: int = 1
    opacity: float = 1.0
    layer: int = 0
    visible: bool = True


@dataclass
class ScreenPosition:
    """Skier-relative screen offset in pixels, refreshed every tick."""
    top: float = 0.0
    left: float = 0.0


# =============================================================================
# OBSTACLE COMPONENTS
# =============================================================================

class ObstacleKind(Enum):
    """Closed set of things the skier can run into."""
    TREE = 'tree'
    TALL_TREE = 'tall-tree'
    ROCK = 'rock'
    LOG = 'log'
    BUSH = 'bush'
    MUSHROOM = 'mushroom'
    DOG = 'dog'
    YETI = 'yeti'


@dataclass
class Obstacle:
    """Marks an obstacle entity and carries its collision payload."""
    kind: ObstacleKind = ObstacleKind.TREE
    damage: int = 1
    burning: bool = False  # bushes only


@dataclass
class DogWalker:
    """Walks sideways at a constant speed."""
    speed_x: float = 0.0


@dataclass
class YetiChaser:
    """Chases the skier until it lands the lethal bite."""
    speed: float = 0.0
    victorious: bool = False
    pose: str = 'yeti-run'  # 'yeti-run', 'yeti-eat', 'yeti-pick'


# =============================================================================
# SKIER COMPONENTS
# =============================================================================

@dataclass
class Health:
    """Health pool."""
    current: int = 3
    maximum: int = 3


@dataclass
class SkierState:
    """Steering, speed and crash state of the skier."""
    direction: int = 6
    angle: float = 360.0
    goal_angle: float = 360.0
    speed: float = 0.0
    max_speed: float = 0.0
    speed_x: float = 0.0
    speed_y: float = 0.0
    turbo: bool = False
    falling: bool = False
    invincible: bool = False
    dead: bool = False
    distance_traveled: float = 0.0
    chunk: Optional[Tuple[int, int]] = None
    get_up_pending: bool = False


# =============================================================================
# TAG COMPONENTS (empty, used for queries)
# =============================================================================

@dataclass
class SkierTag:
    """Marks the skier entity."""
    pass
