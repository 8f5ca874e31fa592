import math

import pytest

from conftest import FakeKey
from skifree.components import Health, Renderable, SkierState, Position
from skifree.config import (
    FORWARD, LEFTMOST, RIGHTMOST, MIN_DIR, MAX_DIR, DIR_ANGLES,
    ACCEL, TURBO_ACCEL, MAX_SPEED, TURBO_MAX_SPEED, ANGLE_ACCEL,
    DOWN_DURATION, INVINCIBILITY_DURATION
)
from skifree.skier import (
    change_direction, set_direction, collide, add_health, die, get_up,
    end_invincibility, update_speed, skier_physics_system, update_skier_graphics,
    apply_command, Command, InputHandler, get_skier_entity
)
from skifree.timers import GET_UP, INVINCIBILITY_END


def state_of(world, skier_id) -> SkierState:
    return world.get_component(skier_id, SkierState)


def health_of(world, skier_id) -> Health:
    return world.get_component(skier_id, Health)


class TestSteering:

    def test_change_direction_clamps(self, world, skier_id):
        state = state_of(world, skier_id)
        change_direction(state, +3)
        assert state.direction == MAX_DIR
        change_direction(state, -20)
        assert state.direction == MIN_DIR
        change_direction(state, +2)
        assert state.direction == 2

    def test_set_direction_is_direct(self, world, skier_id):
        state = state_of(world, skier_id)
        set_direction(state, FORWARD)
        assert state.direction == FORWARD

    def test_skier_is_found(self, world, skier_id):
        assert get_skier_entity(world) == skier_id


class TestPhysics:

    @pytest.mark.parametrize("direction", [LEFTMOST, RIGHTMOST])
    def test_no_speed_at_steering_extremes(self, world, scheduler, skier_id, direction):
        state = state_of(world, skier_id)
        set_direction(state, direction)
        for _ in range(120):
            skier_physics_system(world, scheduler)
            assert state.max_speed == 0
            assert state.speed == 0

    def test_acceleration_is_one_step_per_tick(self, world, scheduler, skier_id):
        state = state_of(world, skier_id)
        set_direction(state, FORWARD)

        update_speed(state, scheduler, skier_id)
        assert state.max_speed == MAX_SPEED
        assert state.speed == pytest.approx(ACCEL)

        for _ in range(200):
            update_speed(state, scheduler, skier_id)
            assert state.speed <= MAX_SPEED
        assert state.speed == MAX_SPEED

    def test_turbo_uses_larger_step_and_cap(self, world, scheduler, skier_id):
        state = state_of(world, skier_id)
        set_direction(state, FORWARD)
        state.turbo = True

        update_speed(state, scheduler, skier_id)
        assert state.speed == pytest.approx(TURBO_ACCEL)
        for _ in range(50):
            update_speed(state, scheduler, skier_id)
        assert state.speed == TURBO_MAX_SPEED

        # Dropping out of turbo slows down gradually
        state.turbo = False
        update_speed(state, scheduler, skier_id)
        assert state.speed == pytest.approx(TURBO_MAX_SPEED - ACCEL)

    def test_angle_lags_behind_direction(self, world, scheduler, skier_id):
        state = state_of(world, skier_id)
        assert state.angle == DIR_ANGLES[RIGHTMOST]
        set_direction(state, FORWARD)

        update_speed(state, scheduler, skier_id)
        assert state.goal_angle == DIR_ANGLES[FORWARD]
        assert state.angle == pytest.approx(DIR_ANGLES[RIGHTMOST] - ANGLE_ACCEL)

        for _ in range(100):
            update_speed(state, scheduler, skier_id)
        assert state.angle == DIR_ANGLES[FORWARD]

    def test_velocity_follows_angle(self, world, scheduler, skier_id):
        state = state_of(world, skier_id)
        pos = world.get_component(skier_id, Position)
        set_direction(state, FORWARD)
        state.angle = DIR_ANGLES[FORWARD]
        state.speed = MAX_SPEED

        skier_physics_system(world, scheduler)
        assert state.speed_x == pytest.approx(0.0, abs=1e-12)
        assert state.speed_y == pytest.approx(MAX_SPEED)
        assert pos.y == pytest.approx(MAX_SPEED)
        assert state.distance_traveled == pytest.approx(MAX_SPEED)

        set_direction(state, FORWARD + 1)
        state.angle = DIR_ANGLES[FORWARD + 1]
        update_speed(state, scheduler, skier_id)
        rad = math.radians(DIR_ANGLES[FORWARD + 1])
        assert state.speed_x == pytest.approx(math.cos(rad) * state.speed)
        assert state.speed_x > 0
        assert state.speed_y > 0


class TestCrashes:

    def test_bush_hit_then_immediate_second_hit(self, world, skier_id):
        state = state_of(world, skier_id)
        health = health_of(world, skier_id)
        state.turbo = True

        assert collide(world, skier_id, 1)
        assert state.falling
        assert not state.turbo
        assert health.current == 2
        assert not state.dead

        assert not collide(world, skier_id, 1)
        assert health.current == 2

    def test_flaming_bush_at_one_health_kills(self, world, skier_id):
        state = state_of(world, skier_id)
        health = health_of(world, skier_id)
        health.current = 1

        collide(world, skier_id, 2)
        assert health.current == 0
        assert state.dead
        assert state.falling

    def test_reaching_zero_health_is_death(self, world, skier_id):
        health = health_of(world, skier_id)
        health.current = 1
        collide(world, skier_id, 1)
        assert health.current == 0
        assert state_of(world, skier_id).dead

    def test_invincible_ignores_damage_but_not_the_yeti(self, world, skier_id):
        state = state_of(world, skier_id)
        health = health_of(world, skier_id)
        state.invincible = True

        assert not collide(world, skier_id, 2)
        assert health.current == 3
        assert not state.falling

        die(world, skier_id)
        assert state.dead
        assert state.falling
        assert state.speed == 0
        assert world.get_component(skier_id, Renderable).opacity == 0

    def test_add_health_caps_at_maximum(self, world, skier_id):
        health = health_of(world, skier_id)
        health.current = 1
        add_health(world, skier_id, 1)
        assert health.current == 2
        add_health(world, skier_id, 5)
        assert health.current == health.maximum


class TestGettingUp:

    def test_get_up_timer_starts_once_when_stopped(self, world, scheduler, skier_id):
        state = state_of(world, skier_id)
        set_direction(state, FORWARD)
        state.speed = 2 * ACCEL
        collide(world, skier_id, 1)

        update_speed(state, scheduler, skier_id)
        assert state.speed == ACCEL
        assert scheduler.pending(GET_UP) == 0

        update_speed(state, scheduler, skier_id)
        assert state.speed == 0
        assert state.get_up_pending
        assert scheduler.pending(GET_UP) == 1

        for _ in range(10):
            update_speed(state, scheduler, skier_id)
        assert scheduler.pending(GET_UP) == 1

        due = scheduler.advance(DOWN_DURATION)
        assert [e.event for e in due] == [GET_UP]

    def test_get_up_grants_invincibility_and_faces_forward(self, world, scheduler, skier_id):
        state = state_of(world, skier_id)
        state.falling = True
        state.get_up_pending = True
        state.direction = LEFTMOST

        assert get_up(world, skier_id, scheduler)
        assert not state.falling
        assert state.invincible
        assert not state.get_up_pending
        assert state.direction == FORWARD
        assert state.angle == DIR_ANGLES[FORWARD]

        due = scheduler.advance(INVINCIBILITY_DURATION)
        assert [e.event for e in due] == [INVINCIBILITY_END]
        end_invincibility(world, skier_id)
        assert not state.invincible

    def test_get_up_after_death_is_a_no_op(self, world, scheduler, skier_id):
        state = state_of(world, skier_id)
        health_of(world, skier_id).current = 1
        collide(world, skier_id, 1)

        assert not get_up(world, skier_id, scheduler)
        assert state.falling
        assert not state.invincible
        assert len(scheduler) == 0

    def test_dead_skier_never_schedules_get_up(self, world, scheduler, skier_id):
        state = state_of(world, skier_id)
        die(world, skier_id)
        for _ in range(5):
            update_speed(state, scheduler, skier_id)
        assert len(scheduler) == 0


class TestGraphics:

    def test_states(self, world, skier_id):
        state = state_of(world, skier_id)
        rend = world.get_component(skier_id, Renderable)

        set_direction(state, FORWARD)
        update_skier_graphics(world, skier_id)
        assert rend.state == 'forward'

        state.falling = True
        state.speed = 0.1
        update_skier_graphics(world, skier_id)
        assert rend.state == 'falling'

        state.dead = True
        state.speed = 0
        update_skier_graphics(world, skier_id)
        assert rend.state == 'ouch'

    def test_invincible_skier_is_translucent(self, world, skier_id):
        state = state_of(world, skier_id)
        rend = world.get_component(skier_id, Renderable)
        state.invincible = True
        update_skier_graphics(world, skier_id)
        assert rend.opacity == 0.5
        state.invincible = False
        update_skier_graphics(world, skier_id)
        assert rend.opacity == 1.0


class TestInput:

    def test_commands_ignored_while_falling(self, world, skier_id):
        state = state_of(world, skier_id)
        state.falling = True
        assert not apply_command(world, skier_id, Command.TURN_LEFT)
        assert not apply_command(world, skier_id, Command.TOGGLE_TURBO)
        assert state.direction == RIGHTMOST
        assert not state.turbo

    def test_forward_snaps_angle(self, world, skier_id):
        state = state_of(world, skier_id)
        assert apply_command(world, skier_id, Command.FORWARD)
        assert state.direction == FORWARD
        assert state.angle == DIR_ANGLES[FORWARD]

    def test_turn_and_turbo(self, world, skier_id):
        state = state_of(world, skier_id)
        apply_command(world, skier_id, Command.TURN_LEFT)
        apply_command(world, skier_id, Command.TURN_LEFT)
        assert state.direction == RIGHTMOST - 2
        apply_command(world, skier_id, Command.TURN_RIGHT)
        assert state.direction == RIGHTMOST - 1
        apply_command(world, skier_id, Command.TOGGLE_TURBO)
        assert state.turbo

    def test_input_handler_maps_keys(self):
        handler = InputHandler()
        for key in (FakeKey('a'), FakeKey('D'), FakeKey('s'), FakeKey('f'),
                    FakeKey('\x1b[D', 'KEY_LEFT', True), FakeKey('z'),
                    FakeKey('\x1b[A', 'KEY_UP', True)):
            handler.process_key(key)

        assert handler.consume_commands() == [
            Command.TURN_LEFT, Command.TURN_RIGHT, Command.FORWARD,
            Command.TOGGLE_TURBO, Command.TURN_LEFT,
        ]
        assert handler.consume_commands() == []
        assert not handler.consume_quit()

    def test_input_handler_quit_and_fps(self):
        handler = InputHandler()
        handler.process_key(FakeKey('\x1b', 'KEY_ESCAPE', True))
        handler.process_key(FakeKey('\x1bOP', 'KEY_F1', True))
        assert handler.consume_quit()
        assert not handler.consume_quit()
        assert handler.consume_toggle_fps()
