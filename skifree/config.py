"""
Tuning Constants
=================
All gameplay numbers in one place. Distances are in meters, speeds in
meters per tick, durations in ticks unless noted otherwise.
"""

from dataclasses import dataclass
from typing import Tuple

from .components import ObstacleKind


# =============================================================================
# TIMING & VIEW
# =============================================================================

FPS = 60
TICK_DURATION = 1.0 / FPS

VIEW_WIDTH = 640   # px
VIEW_HEIGHT = 480  # px
PIXELS_PER_METER = 15

# Where the skier sits on screen; everything else is drawn relative to it
SKIER_SCREEN_TOP = 100
SKIER_SCREEN_LEFT = VIEW_WIDTH / 2


# =============================================================================
# WORLD GRID
# =============================================================================

CHUNK_WIDTH = (VIEW_WIDTH / 3.0) / PIXELS_PER_METER
CHUNK_HEIGHT = (VIEW_HEIGHT / 2.0) / PIXELS_PER_METER
QUADRANTS_PER_CHUNK = (1, 1)

MIN_OBSTACLE_SPAWN_DISTANCE = min(CHUNK_WIDTH, CHUNK_HEIGHT) / 3

# Chunks generated around the skier: columns cx-2..cx+2, rows cy..cy+2
CHUNK_WINDOW_X = 2
CHUNK_WINDOW_AHEAD = 2


# =============================================================================
# SKIER
# =============================================================================

LEFTMOST = 0
MORE_LEFT = 1
LEFT = 2
FORWARD = 3
RIGHT = 4
MORE_RIGHT = 5
RIGHTMOST = 6

MIN_DIR = LEFTMOST
MAX_DIR = RIGHTMOST
INITIAL_DIR = RIGHTMOST

DIR_NAMES = ['leftmost', 'more-left', 'left', 'forward', 'right', 'more-right', 'rightmost']
DIR_ANGLES = [180, 202, 227, 270, 313, 338, 360]  # degrees

SKIER_FALLING_STATE = 'falling'
SKIER_DEAD_STATE = 'ouch'

MAX_SPEED = 20 * TICK_DURATION
TURBO_MAX_SPEED = 40 * TICK_DURATION
ACCEL = 1 * TICK_DURATION
TURBO_ACCEL = 9 * TICK_DURATION
ANGLE_ACCEL = 300 * TICK_DURATION  # degrees per tick

INITIAL_HEALTH = 3
DOWN_DURATION = FPS           # 1 second on the ground after a crash
INVINCIBILITY_DURATION = FPS  # 1 second of immunity after getting up

SKIER_INITIAL_POS = (CHUNK_WIDTH / 2 - 20 / PIXELS_PER_METER, 0.2 * CHUNK_HEIGHT)

# Hitboxes are (top, left, width, height) in pixels relative to the anchor
SKIER_HITBOX = (17, 2, 13, 16)


# =============================================================================
# OBSTACLES
# =============================================================================

@dataclass(frozen=True)
class ObstacleRate:
    """One row of the distribution table."""
    kind: ObstacleKind
    interval: Tuple[int, int]  # quadrant visits between spawns
    hitbox: Tuple[int, int, int, int]


# Priority order matters: the first type whose countdown hits zero wins
OBSTACLE_TABLE = (
    ObstacleRate(ObstacleKind.TALL_TREE, (4, 7), (43, 5, 27, 21)),
    ObstacleRate(ObstacleKind.ROCK, (7, 7), (0, 0, 23, 11)),
    ObstacleRate(ObstacleKind.BUSH, (5, 8), (14, 0, 22, 13)),
    ObstacleRate(ObstacleKind.LOG, (10, 12), (0, 0, 16, 11)),
    ObstacleRate(ObstacleKind.MUSHROOM, (60, 100), (-5, -5, 13, 16)),
    ObstacleRate(ObstacleKind.TREE, (1, 1), (16, 5, 23, 16)),
)

OBSTACLE_HITBOXES = {row.kind: row.hitbox for row in OBSTACLE_TABLE}

# Between 0 (no bushes burn) and 1 (every bush burns)
FLAMING_BUSH_PROB = 0.1


# =============================================================================
# NPCS
# =============================================================================

MIN_DOG_SPAWN_Y_DISTANCE = VIEW_HEIGHT * 2 / PIXELS_PER_METER
DOG_SPEED = 10 * TICK_DURATION
DOG_SPAWN_INTERVAL = (FPS * 5, FPS * 20)  # one dog every 5-20 seconds
DOG_HITBOX = (0, 0, 22, 19)

YETI_SPAWN_MILESTONE = 3000  # display units (meters scaled by PIXELS_PER_METER)
YETI_SPEED = MAX_SPEED * 1.5
YETI_OFFSETS_X = ((VIEW_WIDTH * 0.5) / PIXELS_PER_METER, (VIEW_WIDTH * -0.5) / PIXELS_PER_METER)
YETI_OFFSETS_Y = (0, (VIEW_HEIGHT - SKIER_SCREEN_TOP) / PIXELS_PER_METER)
YETI_HITBOX = (14, 10, 11, 25)
YETI_BITE_DURATION = 24  # ticks between the 'eat' and 'pick' poses
YETI_EXIT_SCREEN_TOP = -100  # px


# =============================================================================
# HUD
# =============================================================================

HUD_INTERVAL = FPS // 2


# =============================================================================
# PER-SIMULATION KNOBS
# =============================================================================

@dataclass
class SimConfig:
    """Knobs that differ between simulation instances (mostly for tests)."""
    chunk_width: float = CHUNK_WIDTH
    chunk_height: float = CHUNK_HEIGHT
    quadrants_x: int = QUADRANTS_PER_CHUNK[0]
    quadrants_y: int = QUADRANTS_PER_CHUNK[1]
    min_spawn_distance: float = MIN_OBSTACLE_SPAWN_DISTANCE
    flaming_bush_prob: float = FLAMING_BUSH_PROB
    dog_spawn_interval: Tuple[int, int] = DOG_SPAWN_INTERVAL
    yeti_milestone: int = YETI_SPAWN_MILESTONE
    hud_interval: int = HUD_INTERVAL

    @property
    def quadrant_width(self) -> float:
        return self.chunk_width / self.quadrants_x

    @property
    def quadrant_height(self) -> float:
        return self.chunk_height / self.quadrants_y
