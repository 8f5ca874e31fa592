"""
Slope Rendering
================
Draws the simulation's projected entities, the status panel and the
title/game-over screens into a GameRenderer.
"""

import random

from .ecs import World
from .components import Renderable, ScreenPosition
from .config import VIEW_WIDTH
from .engine import (
    GameRenderer,
    PINE_GREEN, PINE_DARK, BARK_BROWN, ROCK_GRAY, FIRE_ORANGE,
    MUSHROOM_RED, DOG_BROWN, YETI_WHITE, SKIER_BLUE, SKIER_RED, ICE_CYAN,
    SNOW_SHADE, GRAY_MED, GRAY_DARK, GRAY_DARKER, WHITE, FIRE_RED
)
from .simulation import HudSnapshot


# state -> (glyph facing right, glyph facing left, color)
SPRITES = {
    'tree': ('^', '^', PINE_GREEN),
    'tall-tree': ('A', 'A', PINE_DARK),
    'rock': ('o', 'o', ROCK_GRAY),
    'log': ('=', '=', BARK_BROWN),
    'bush': ('"', '"', PINE_GREEN),
    'flaming-bush': ('&', '&', FIRE_ORANGE),
    'mushroom': ('*', '*', MUSHROOM_RED),
    'dog-walk': ('d', 'b', DOG_BROWN),
    'yeti-run': ('Y', 'Y', YETI_WHITE),
    'yeti-eat': ('W', 'W', YETI_WHITE),
    'yeti-pick': ('M', 'M', YETI_WHITE),

    'leftmost': ('-', '-', SKIER_BLUE),
    'more-left': ('/', '/', SKIER_BLUE),
    'left': ('/', '/', SKIER_BLUE),
    'forward': ('|', '|', SKIER_BLUE),
    'right': ('\\', '\\', SKIER_BLUE),
    'more-right': ('\\', '\\', SKIER_BLUE),
    'rightmost': ('-', '-', SKIER_BLUE),
    'falling': ('x', 'x', SKIER_RED),
    'ouch': ('X', 'X', SKIER_RED),
}

TITLE_ART = [
    r"  ___ _  _____ ___ ___ ___ ___ ",
    r" / __| |/ /_ _| __| _ \ __| __|",
    r" \__ \ ' < | || _||   / _|| _| ",
    r" |___/_|\_\___|_| |_|_\___|___|",
]

GAME_OVER_ART = [
    r"  ___  _   _  ___ _  _ _ ",
    r" / _ \| | | |/ __| || | |",
    r"| (_) | |_| | (__| __ |_|",
    r" \___/ \___/ \___|_||_(_)",
]


def cell_size(renderer: GameRenderer):
    """Pixels per terminal column and row (cells are roughly twice as tall as wide)."""
    px_per_col = VIEW_WIDTH / max(1, renderer.width)
    return px_per_col, px_per_col * 2


def render_entities(world: World, renderer: GameRenderer):
    """Draw every projected entity, lowest layer first."""
    px_per_col, px_per_row = cell_size(renderer)

    render_list = []
    for entity_id, screen, rend in world.query(ScreenPosition, Renderable):
        if not rend.visible or rend.opacity <= 0:
            continue
        render_list.append((rend.layer, entity_id, screen, rend))

    render_list.sort(key=lambda x: (x[0], x[1]))

    for _, _, screen, rend in render_list:
        sprite = SPRITES.get(rend.state)
        if sprite is None:
            continue
        right_glyph, left_glyph, color = sprite
        glyph = left_glyph if rend.facing < 0 else right_glyph
        if rend.opacity < 1.0:
            color = GRAY_MED

        x = int(screen.left // px_per_col)
        y = int(screen.top // px_per_row)
        if 0 <= x < renderer.width and 0 <= y < renderer.game_height:
            renderer.put(x, y, glyph, color)


def render_snow(renderer: GameRenderer, distance: int):
    """Sparse snow texture that scrolls with the distance skied."""
    _, px_per_row = cell_size(renderer)
    offset = int(distance // px_per_row)
    for y in range(renderer.game_height):
        row = y + offset
        for x in range((row * 7) % 11, renderer.width, 11):
            renderer.put(x, y, '.', SNOW_SHADE if row % 3 else GRAY_DARKER)


def render_ui(renderer: GameRenderer, hud: HudSnapshot, turbo: bool):
    """Render the status panel in the bottom 3 rows."""
    ui_y = renderer.game_height
    width = renderer.width

    # Separator line with title
    renderer.buffer.put_string(0, ui_y, '=' * width, GRAY_DARK)
    renderer.buffer.put_string(2, ui_y, ' SKIFREE ', ICE_CYAN)

    row1_y = ui_y + 1
    renderer.buffer.put_string(2, row1_y, 'DISTANCE:', GRAY_MED)
    renderer.buffer.put_string(12, row1_y, f'{hud.distance} m', WHITE)

    renderer.buffer.put_string(26, row1_y, 'SPEED:', GRAY_MED)
    renderer.buffer.put_string(33, row1_y, f'{hud.vertical_speed} m/s', WHITE)

    color = FIRE_RED if hud.health == 0 else MUSHROOM_RED
    hearts = '♥' * hud.health + '.' * (hud.max_health - hud.health)
    renderer.buffer.put_string(46, row1_y, 'HEALTH:', GRAY_MED)
    renderer.buffer.put_string(54, row1_y, f'[{hearts}] {hud.health}/{hud.max_health}', color)

    if turbo:
        renderer.buffer.put_string(width - 9, row1_y, '>>TURBO', FIRE_ORANGE)

    controls = 'A/D:Turn  S:Forward  F:Turbo  Q:Quit'
    renderer.buffer.put_string(2, ui_y + 2, controls, GRAY_DARKER)

    # FPS counter (top-right, bypasses shake)
    if renderer.show_fps:
        fps_text = f'FPS:{renderer.current_fps:.0f}'
        renderer.buffer.put_string(width - len(fps_text) - 2, 0, fps_text, GRAY_MED)


def render_title_screen(renderer: GameRenderer, frame: int):
    """Render the title screen."""
    width = renderer.width
    height = renderer.game_height

    art_y = height // 2 - 5
    for i, line in enumerate(TITLE_ART):
        x = width // 2 - len(line) // 2
        color = ICE_CYAN if i % 2 == 0 else WHITE
        renderer.buffer.put_string(max(0, x), art_y + i, line, color)

    sub = 'HOW FAR CAN YOU GO?'
    sx = width // 2 - len(sub) // 2
    renderer.buffer.put_string(sx, art_y + len(TITLE_ART) + 1, sub, GRAY_MED)

    # Blinking prompt
    if (frame // 30) % 2 == 0:
        prompt = '[ PRESS ANY KEY TO START ]'
        px = width // 2 - len(prompt) // 2
        renderer.buffer.put_string(px, art_y + len(TITLE_ART) + 4, prompt, PINE_GREEN)

    controls = [
        'A/D or LEFT/RIGHT - Turn',
        'S or DOWN - Point downhill',
        'F - Turbo     Q/ESC - Quit',
    ]
    cy = art_y + len(TITLE_ART) + 6
    for i, line in enumerate(controls):
        cx = width // 2 - len(line) // 2
        renderer.buffer.put_string(cx, cy + i, line, GRAY_DARK)

    renderer.draw_frame(0, 0, width, height, '.', GRAY_DARKER, with_shake=False)


def render_game_over_screen(renderer: GameRenderer, hud: HudSnapshot, frame: int):
    """Render the game over overlay on top of the frozen slope."""
    width = renderer.width
    height = renderer.game_height

    art_y = height // 2 - 5
    for i, line in enumerate(GAME_OVER_ART):
        x = width // 2 - len(line) // 2
        renderer.buffer.put_string(max(0, x), art_y + i, line, FIRE_RED)

    stats = f'DISTANCE SKIED: {hud.distance} m'
    sx = width // 2 - len(stats) // 2
    renderer.buffer.put_string(sx, art_y + len(GAME_OVER_ART) + 2, stats, WHITE)

    if (frame // 30) % 2 == 0:
        restart = '[ R - RESTART ]    [ Q - QUIT ]'
        rx = width // 2 - len(restart) // 2
        renderer.buffer.put_string(rx, art_y + len(GAME_OVER_ART) + 4, restart, ICE_CYAN)

    # Blowing snow
    for _ in range(int(width * height * 0.01)):
        nx = random.randint(0, width - 1)
        ny = random.randint(0, height - 1)
        renderer.buffer.put(nx, ny, random.choice(['.', '*', "'"]),
                            random.choice([GRAY_DARKER, GRAY_DARK, SNOW_SHADE]))
