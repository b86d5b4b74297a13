import math
import random
import sys
from typing import List, Tuple

import numpy as np
import pygame

from game2048.config import GRID_N, LEADERBOARD_LIMIT, build_parser, config_from_args
from game2048.controller import GameController, GameState
from game2048.game import Direction
from game2048.leaderboard import Leaderboard, LeaderboardEntry
from game2048.logging_utils import setup_logging

# ------------------------
# Config
# ------------------------
TILE_SIZE = 110
GAP = 12
BORDER = 18
HUD_HEIGHT = 160
WINDOW_W = BORDER * 2 + GRID_N * TILE_SIZE + (GRID_N - 1) * GAP
WINDOW_H = HUD_HEIGHT + BORDER * 2 + GRID_N * TILE_SIZE + (GRID_N - 1) * GAP
FPS = 60
USERNAME_MAX_INPUT = 20

# Colors
BG_COLOR = (250, 248, 239)
BOARD_BG = (187, 173, 160)
EMPTY_TILE = (205, 193, 180)
TEXT_DARK = (119, 110, 101)
TEXT_LIGHT = (249, 246, 242)
WIN_GOLD = (237, 194, 46)

# Classic-ish palette
VALUE_COLORS = {
    2: (238, 228, 218),
    4: (237, 224, 200),
    8: (242, 177, 121),
    16: (245, 149, 99),
    32: (246, 124, 95),
    64: (246, 94, 59),
    128: (237, 207, 114),
    256: (237, 204, 97),
    512: (237, 200, 80),
    1024: (237, 197, 63),
    2048: (237, 194, 46),
}

KEY_DIRECTIONS = {
    pygame.K_UP: Direction.UP, pygame.K_w: Direction.UP,
    pygame.K_DOWN: Direction.DOWN, pygame.K_s: Direction.DOWN,
    pygame.K_LEFT: Direction.LEFT, pygame.K_a: Direction.LEFT,
    pygame.K_RIGHT: Direction.RIGHT, pygame.K_d: Direction.RIGHT,
}


# Fallback for > 2048
def color_for(v: int) -> Tuple[int, int, int]:
    if v in VALUE_COLORS:
        return VALUE_COLORS[v]
    # simple fade for larger numbers
    t = min(1.0, math.log2(max(2048, v)) - 11)  # 2048 -> 0, 4096 -> 1
    base = (60, 58, 50)
    return (int(237*(1-t) + base[0]*t), int(194*(1-t) + base[1]*t), int(46*(1-t) + base[2]*t))


def grid_to_px(r: int, c: int) -> Tuple[int, int]:
    x = BORDER + c * (TILE_SIZE + GAP)
    y = HUD_HEIGHT + BORDER + r * (TILE_SIZE + GAP)
    return x, y


# ------------------------
# Views
# ------------------------
def draw_grid(surface: pygame.Surface, board: np.ndarray, font_big: pygame.font.Font, font_med: pygame.font.Font):
    board_rect = pygame.Rect(BORDER, HUD_HEIGHT, WINDOW_W - 2 * BORDER, WINDOW_H - HUD_HEIGHT - BORDER)
    pygame.draw.rect(surface, BOARD_BG, board_rect, border_radius=12)

    for (r, c), value in np.ndenumerate(board):
        x, y = grid_to_px(r, c)
        rect = pygame.Rect(x, y, TILE_SIZE, TILE_SIZE)
        if value == 0:
            pygame.draw.rect(surface, EMPTY_TILE, rect, border_radius=8)
            continue
        pygame.draw.rect(surface, color_for(int(value)), rect, border_radius=8)
        font = font_big if value < 1024 else font_med
        text_color = TEXT_DARK if value <= 4 else TEXT_LIGHT
        text_surf = font.render(str(value), True, text_color)
        surface.blit(text_surf, text_surf.get_rect(center=rect.center))


def draw_score(surface: pygame.Surface, score: int, message: str,
               font_title: pygame.font.Font, font_small: pygame.font.Font):
    title = font_title.render("2048", True, TEXT_DARK)
    surface.blit(title, (BORDER + 4, BORDER - 2))

    w, h = 140, 56
    rect = pygame.Rect(WINDOW_W - BORDER - w, BORDER + 8, w, h)
    pygame.draw.rect(surface, BOARD_BG, rect, border_radius=8)
    lab = font_small.render("SCORE", True, TEXT_LIGHT)
    val = font_small.render(str(score), True, TEXT_LIGHT)
    surface.blit(lab, (rect.x + 12, rect.y + 8))
    surface.blit(val, (rect.x + 12, rect.y + 28))

    info = font_small.render(message, True, TEXT_DARK)
    surface.blit(info, (BORDER + 4, HUD_HEIGHT - 70))
    hint = font_small.render("N: new game   L: leaderboard", True, TEXT_DARK)
    surface.blit(hint, (BORDER + 4, HUD_HEIGHT - 40))


class LeaderboardPanel:
    """Overlay listing the top scores, with a username box to submit the current one."""

    def __init__(self, leaderboard: Leaderboard):
        self.leaderboard = leaderboard
        self.visible = False
        self.username = ""
        self.status = ""
        self.submitted = False
        self.entries: List[LeaderboardEntry] = []

    def open(self):
        self.visible = True
        self.entries = self.leaderboard.top(LEADERBOARD_LIMIT)

    def close(self):
        self.visible = False

    def toggle(self):
        if self.visible:
            self.close()
        else:
            self.open()

    def new_game(self):
        self.username = ""
        self.status = ""
        self.submitted = False

    def handle_key(self, event: pygame.event.Event, controller: GameController):
        # L closes the panel until a username is being typed, Esc always does
        if event.key == pygame.K_ESCAPE or (event.key == pygame.K_l and not self.username):
            self.close()
        elif event.key == pygame.K_BACKSPACE:
            self.username = self.username[:-1]
        elif event.key in (pygame.K_RETURN, pygame.K_KP_ENTER):
            self.submit(controller)
        elif event.unicode and event.unicode.isprintable() and len(self.username) < USERNAME_MAX_INPUT:
            self.username += event.unicode

    def submit(self, controller: GameController):
        # one submission per game
        if self.submitted or not self.username.strip():
            return
        if controller.submit_score(self.username):
            self.status = "Score added"
            self.submitted = True
        else:
            self.status = "Score not added"
        self.entries = self.leaderboard.top(LEADERBOARD_LIMIT)

    def draw(self, surface: pygame.Surface, font_title: pygame.font.Font, font_small: pygame.font.Font):
        overlay = pygame.Surface((WINDOW_W, WINDOW_H), pygame.SRCALPHA)
        overlay.fill(BG_COLOR + (240,))
        surface.blit(overlay, (0, 0))

        title = font_title.render("Leaderboard", True, TEXT_DARK)
        surface.blit(title, title.get_rect(center=(WINDOW_W // 2, BORDER + 40)))

        cols = (BORDER + 30, BORDER + 120, WINDOW_W - BORDER - 120)
        y = BORDER + 90
        for x, heading in zip(cols, ("Rank", "Username", "Score")):
            surface.blit(font_small.render(heading, True, TEXT_DARK), (x, y))
        for rank, entry in enumerate(self.entries, start=1):
            y += 30
            color = WIN_GOLD if entry.won else TEXT_DARK
            for x, text in zip(cols, (str(rank), entry.display_name, str(entry.score))):
                surface.blit(font_small.render(text, True, color), (x, y))

        y = WINDOW_H - BORDER - 90
        box = pygame.Rect(BORDER + 30, y, WINDOW_W - 2 * BORDER - 60, 36)
        pygame.draw.rect(surface, TEXT_LIGHT, box, border_radius=6)
        pygame.draw.rect(surface, BOARD_BG, box, width=2, border_radius=6)
        shown = self.username or "type a username, Enter to add score, Esc to close"
        surface.blit(font_small.render(shown, True, TEXT_DARK),
                     (box.x + 10, box.y + 7))
        if self.status:
            surface.blit(font_small.render(self.status, True, TEXT_DARK), (box.x, box.bottom + 12))


# ------------------------
# Main loop
# ------------------------
def main(argv=None):
    args = build_parser("Play 2048 in a pygame window").parse_args(argv)
    config = config_from_args(args)
    setup_logging(config.log_level)

    pygame.init()
    pygame.display.set_caption("2048")
    screen = pygame.display.set_mode((WINDOW_W, WINDOW_H))
    clock = pygame.time.Clock()

    # fonts
    font_title = pygame.font.SysFont("arial", 56, bold=True)
    font_big = pygame.font.SysFont("arial", 40, bold=True)
    font_med = pygame.font.SysFont("arial", 32, bold=True)
    font_small = pygame.font.SysFont("arial", 20, bold=True)

    rng = random.Random(config.seed) if config.seed is not None else None
    leaderboard = Leaderboard(config.leaderboard_path)
    controller = GameController(leaderboard=leaderboard, size=config.size, rng=rng)
    panel = LeaderboardPanel(leaderboard)

    running = True
    while running:
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                running = False
            elif event.type == pygame.KEYDOWN:
                if panel.visible:
                    panel.handle_key(event, controller)
                elif event.key in KEY_DIRECTIONS:
                    controller.handle(KEY_DIRECTIONS[event.key])
                elif event.key == pygame.K_n:
                    controller.reset()
                    panel.new_game()
                elif event.key == pygame.K_l:
                    panel.toggle()

        screen.fill(BG_COLOR)
        draw_score(screen, controller.score, controller.message, font_title, font_small)
        draw_grid(screen, controller.board, font_big, font_med)

        # Game over overlay
        if controller.state is GameState.LOST and not panel.visible:
            overlay = pygame.Surface((WINDOW_W, WINDOW_H), pygame.SRCALPHA)
            overlay.fill((255, 255, 255, 180))
            screen.blit(overlay, (0, 0))
            msg = font_title.render("Game Over", True, TEXT_DARK)
            screen.blit(msg, msg.get_rect(center=(WINDOW_W // 2, WINDOW_H // 2)))

        if panel.visible:
            panel.draw(screen, font_title, font_small)

        pygame.display.flip()
        clock.tick(FPS)

    pygame.quit()
    sys.exit()


if __name__ == "__main__":
    main()
