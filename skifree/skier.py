"""
Skier Module
=============
Skier entity creation, physics, crash/health state machine and the
input command layer.

State flags compose rather than forming a single enum:
    normal -> falling -> (get up) -> invincible -> normal
    normal/falling -> dead   (health exhausted, or the yeti's bite)
"""

from enum import Enum, auto
from typing import List, Optional
import logging
import math

from .ecs import World
from .components import (
    Position, CollisionBox, Renderable, ScreenPosition,
    Health, SkierState, SkierTag
)
from .config import (
    DIR_ANGLES, DIR_NAMES, MIN_DIR, MAX_DIR, FORWARD, INITIAL_DIR,
    MAX_SPEED, TURBO_MAX_SPEED, ACCEL, TURBO_ACCEL, ANGLE_ACCEL,
    INITIAL_HEALTH, DOWN_DURATION, INVINCIBILITY_DURATION,
    SKIER_HITBOX, SKIER_INITIAL_POS,
    SKIER_FALLING_STATE, SKIER_DEAD_STATE
)
from .geometry import deg_to_rad
from .timers import Scheduler, GET_UP, INVINCIBILITY_END

logger = logging.getLogger(__name__)


def create_skier(world: World, x: float = SKIER_INITIAL_POS[0],
                 y: float = SKIER_INITIAL_POS[1]) -> int:
    """Create the skier entity with all required components."""
    entity_id = world.create_entity()

    world.add_component(entity_id, Position(x, y))
    world.add_component(entity_id, CollisionBox(*SKIER_HITBOX))
    world.add_component(entity_id, SkierState(
        direction=INITIAL_DIR,
        angle=DIR_ANGLES[INITIAL_DIR],
        goal_angle=DIR_ANGLES[INITIAL_DIR],
    ))
    world.add_component(entity_id, Health(INITIAL_HEALTH, INITIAL_HEALTH))

    world.add_component(entity_id, Renderable(
        state=DIR_NAMES[INITIAL_DIR],
        layer=10  # Skier renders on top
    ))
    world.add_component(entity_id, ScreenPosition())
    world.add_component(entity_id, SkierTag())

    return entity_id


def get_skier_entity(world: World) -> Optional[int]:
    """Find the skier entity ID."""
    for entity_id, _ in world.query(SkierTag):
        return entity_id
    return None


# =============================================================================
# STEERING
# =============================================================================

def change_direction(state: SkierState, delta: int) -> None:
    """Turn by `delta` steps, clamped to the steering range."""
    state.direction = max(MIN_DIR, min(MAX_DIR, state.direction + delta))


def set_direction(state: SkierState, direction: int) -> None:
    """Set the direction index directly (used for fixed resets)."""
    state.direction = direction


# =============================================================================
# HEALTH & CRASH STATE
# =============================================================================

def collide(world: World, skier_id: int, damage: int) -> bool:
    """
    Crash into something. No-op while already falling or invincible.

    Returns True if the crash registered.
    """
    state = world.get_component(skier_id, SkierState)
    health = world.get_component(skier_id, Health)
    if state is None or health is None:
        return False
    if state.falling or state.invincible:
        return False

    state.falling = True
    state.turbo = False

    health.current -= damage
    if health.current <= 0:
        health.current = 0
        state.dead = True
        logger.debug("skier %d crashed for %d damage and died", skier_id, damage)
    else:
        logger.debug("skier %d crashed for %d damage, health %d/%d",
                     skier_id, damage, health.current, health.maximum)
    return True


def add_health(world: World, skier_id: int, amount: int) -> None:
    """Heal, capped at the maximum."""
    health = world.get_component(skier_id, Health)
    if health:
        health.current = min(health.maximum, health.current + amount)


def die(world: World, skier_id: int) -> None:
    """
    Unconditional death, ignoring invincibility. Only the yeti does this.
    """
    state = world.get_component(skier_id, SkierState)
    if state is None:
        return
    state.falling = True
    state.dead = True
    state.speed = 0.0
    state.max_speed = 0.0

    rend = world.get_component(skier_id, Renderable)
    if rend:
        rend.opacity = 0.0
    logger.debug("skier %d was eaten", skier_id)


def get_up(world: World, skier_id: int, scheduler: Scheduler) -> bool:
    """
    Stand up after the down timer. Grants a short invincibility window.

    Returns False (and changes nothing else) if the skier died meanwhile.
    """
    state = world.get_component(skier_id, SkierState)
    if state is None:
        return False
    state.get_up_pending = False
    if state.dead:
        return False

    state.falling = False
    state.invincible = True
    set_direction(state, FORWARD)
    state.angle = DIR_ANGLES[state.direction]

    scheduler.schedule(INVINCIBILITY_DURATION, INVINCIBILITY_END, skier_id)
    return True


def end_invincibility(world: World, skier_id: int) -> None:
    state = world.get_component(skier_id, SkierState)
    if state:
        state.invincible = False


# =============================================================================
# PHYSICS
# =============================================================================

def update_speed(state: SkierState, scheduler: Scheduler, skier_id: int) -> None:
    """
    Advance speed and angle one tick and recompute the velocity.

    Speed and angle each move toward their targets by at most one
    step, so turning lags visibly behind the steering input.
    """
    if state.direction == MIN_DIR or state.direction == MAX_DIR or state.falling:
        state.max_speed = 0.0
    elif state.turbo:
        state.max_speed = TURBO_MAX_SPEED
    else:
        state.max_speed = MAX_SPEED

    accel = TURBO_ACCEL if state.turbo else ACCEL
    if state.speed < state.max_speed:
        state.speed = min(state.speed + accel, state.max_speed)
    elif state.speed > state.max_speed:
        state.speed = max(state.speed - accel, state.max_speed)

    if state.falling and state.speed == 0 and not state.dead and not state.get_up_pending:
        state.get_up_pending = True
        scheduler.schedule(DOWN_DURATION, GET_UP, skier_id)

    state.goal_angle = DIR_ANGLES[state.direction]
    if state.angle < state.goal_angle:
        state.angle = min(state.angle + ANGLE_ACCEL, state.goal_angle)
    elif state.angle > state.goal_angle:
        state.angle = max(state.angle - ANGLE_ACCEL, state.goal_angle)

    rad = deg_to_rad(state.angle)
    state.speed_x = math.cos(rad) * state.speed
    state.speed_y = -math.sin(rad) * state.speed


def skier_physics_system(world: World, scheduler: Scheduler) -> None:
    """Integrate the skier's position and accumulate distance."""
    for entity_id, pos, state in world.query(Position, SkierState):
        update_speed(state, scheduler, entity_id)

        pos.x += state.speed_x
        pos.y += state.speed_y

        state.distance_traveled += state.speed_y


def update_skier_graphics(world: World, skier_id: int) -> None:
    """Refresh the skier's sprite name and opacity from its flags."""
    state = world.get_component(skier_id, SkierState)
    rend = world.get_component(skier_id, Renderable)
    if state is None or rend is None:
        return

    if state.falling:
        if state.speed == 0 and state.dead:
            rend.state = SKIER_DEAD_STATE
        else:
            rend.state = SKIER_FALLING_STATE
    else:
        rend.state = DIR_NAMES[state.direction]

    if state.invincible and not state.dead:
        rend.opacity = 0.5
    elif not state.dead:
        rend.opacity = 1.0


# =============================================================================
# INPUT
# =============================================================================

class Command(Enum):
    """Discrete steering commands."""
    TURN_LEFT = auto()
    TURN_RIGHT = auto()
    FORWARD = auto()
    TOGGLE_TURBO = auto()


KEY_COMMANDS = {
    'a': Command.TURN_LEFT,
    'd': Command.TURN_RIGHT,
    's': Command.FORWARD,
    'f': Command.TOGGLE_TURBO,
}

SEQUENCE_COMMANDS = {
    'KEY_LEFT': Command.TURN_LEFT,
    'KEY_RIGHT': Command.TURN_RIGHT,
    'KEY_DOWN': Command.FORWARD,
}


class InputHandler:
    """
    Turns terminal keystrokes into steering commands.

    Terminal keys arrive as discrete presses, which matches the
    one-step-per-press steering model, so there is no hold tracking.
    """

    def __init__(self):
        self._commands: List[Command] = []

        # Actions triggered this frame (consumed on read)
        self._quit_triggered = False
        self._toggle_fps = False

    def process_key(self, key) -> None:
        """Process a single key press from blessed's inkey()."""
        if key is None or not key:
            return

        key_str = key.lower() if not key.is_sequence else ''

        # Quit
        if key_str == 'q' or key.name == 'KEY_ESCAPE':
            self._quit_triggered = True
            return

        if key.name == 'KEY_F1':
            self._toggle_fps = True
            return

        command = KEY_COMMANDS.get(key_str) or SEQUENCE_COMMANDS.get(key.name)
        if command is not None:
            self._commands.append(command)

    def consume_commands(self) -> List[Command]:
        commands = self._commands
        self._commands = []
        return commands

    def consume_quit(self) -> bool:
        result = self._quit_triggered
        self._quit_triggered = False
        return result

    def consume_toggle_fps(self) -> bool:
        result = self._toggle_fps
        self._toggle_fps = False
        return result


def apply_command(world: World, skier_id: int, command: Command) -> bool:
    """Apply a steering command. Ignored while the skier is down."""
    state = world.get_component(skier_id, SkierState)
    if state is None or state.falling:
        return False

    if command == Command.TURN_LEFT:
        change_direction(state, -1)
    elif command == Command.TURN_RIGHT:
        change_direction(state, +1)
    elif command == Command.FORWARD:
        set_direction(state, FORWARD)
        state.angle = DIR_ANGLES[FORWARD]
    elif command == Command.TOGGLE_TURBO:
        state.turbo = not state.turbo
    else:
        return False
    return True
