from conftest import FakeKey, FakeTerminal
from skifree.main import GameState, PHASE_TITLE, PHASE_PLAYING, PHASE_GAME_OVER
from skifree.config import FORWARD
from skifree.skier import die


def test_any_key_leaves_the_title_screen():
    term = FakeTerminal([FakeKey(' ')])
    game = GameState(term)
    assert game.phase == PHASE_TITLE

    game.handle_input()
    assert game.phase == PHASE_PLAYING
    assert game.sim is not None


def test_quit_from_title():
    game = GameState(FakeTerminal([FakeKey('q')]))
    game.handle_input()
    assert not game.running


def test_steering_keys_reach_the_skier():
    term = FakeTerminal([FakeKey(' ')])
    game = GameState(term)
    game.handle_input()

    term._keys = [FakeKey('s')]
    game.handle_input()
    game.update()
    assert game.sim.skier.direction == FORWARD


def test_death_moves_to_game_over_and_r_restarts():
    term = FakeTerminal([FakeKey(' ')])
    game = GameState(term)
    game.handle_input()
    first_run = game.sim

    die(game.sim.world, game.sim.skier_id)
    game.update()
    assert game.phase == PHASE_GAME_OVER

    # The frozen slope no longer ticks
    ticks = game.sim.tick_count
    game.update()
    assert game.sim.tick_count == ticks

    term._keys = [FakeKey('r')]
    game.handle_input()
    assert game.phase == PHASE_PLAYING
    assert game.sim is not first_run


def test_render_draws_every_phase():
    term = FakeTerminal([FakeKey(' ')])
    game = GameState(term)
    game.render()
    game.handle_input()
    game.update()
    game.render()
    die(game.sim.world, game.sim.skier_id)
    game.update()
    game.render()
    assert game.phase == PHASE_GAME_OVER
