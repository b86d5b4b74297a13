#!/usr/bin/env python3
"""
2048 Game - Command Line Interface
Play 2048 using arrow keys or WASD, then put your score on the leaderboard
"""

import os
import random
import sys
import termios
import tty

from game2048.config import LEADERBOARD_LIMIT, build_parser, config_from_args
from game2048.controller import GameController, GameState
from game2048.game import Direction
from game2048.leaderboard import Leaderboard
from game2048.logging_utils import setup_logging

# Updated high-contrast ANSI colors
COLORS = {
    2: '\033[97m',    # white
    4: '\033[90m',    # bright black
    8: '\033[36m',    # cyan
    16: '\033[31m',   # red
    32: '\033[32m',   # green
    64: '\033[33m',   # yellow
    128: '\033[35m',  # magenta
    256: '\033[34m',  # blue
    512: '\033[91m',  # bright red
    1024: '\033[92m', # bright green
    2048: '\033[95m', # bright magenta
    4096: '\033[93m', # bright yellow
}
RESET = '\033[0m'
BOLD = '\033[1m'
RED = '\033[91m'
GREEN = '\033[92m'
YELLOW = '\033[93m'
BLUE = '\033[94m'

KEY_DIRECTIONS = {
    'A': Direction.UP,
    'B': Direction.DOWN,
    'C': Direction.RIGHT,
    'D': Direction.LEFT,
}
WASD = {
    'w': Direction.UP,
    'a': Direction.LEFT,
    's': Direction.DOWN,
    'd': Direction.RIGHT,
}
COMMANDS = {'q': 'quit', 'n': 'new', 'l': 'leaderboard'}


def clear_screen():
    os.system('clear' if os.name == 'posix' else 'cls')


def get_color_for_tile(value):
    return COLORS.get(value, '\033[93m')  # fallback: bright yellow


def format_tile(value):
    if value == 0:
        return "     "
    color = get_color_for_tile(value)
    num_str = str(value)
    padding = " " * (5 - len(num_str))
    return f"{padding}{color}{BOLD}{num_str}{RESET}"


def draw_board(controller: GameController):
    clear_screen()
    board = controller.board
    n = board.shape[0]

    sys.stdout.write(f"{BOLD}2048 Game{RESET}\n")
    sys.stdout.write(f"Score: {GREEN}{controller.score}{RESET} | Moves: {BLUE}{controller.move_count}{RESET}\n")
    msg_color = RED if controller.state is GameState.LOST else YELLOW
    sys.stdout.write(f"{msg_color}{controller.message}{RESET}\n")
    sys.stdout.write("Arrows/WASD move, 'n' new game, 'l' leaderboard, 'q' quit\n\n")

    sys.stdout.write("┌" + "┬".join(["─────"] * n) + "┐\n")
    for i in range(n):
        sys.stdout.write("│")
        for j in range(n):
            sys.stdout.write(format_tile(int(board[i, j])) + "│")
        sys.stdout.write("\n")
        if i < n - 1:
            sys.stdout.write("├" + "┼".join(["─────"] * n) + "┤\n")
    sys.stdout.write("└" + "┴".join(["─────"] * n) + "┘\n\n")
    sys.stdout.flush()


def draw_leaderboard(leaderboard: Leaderboard):
    entries = leaderboard.top(LEADERBOARD_LIMIT)
    sys.stdout.write(f"\n{BOLD}Leaderboard{RESET}\n")
    sys.stdout.write(f"{'Rank':>4}  {'Username':<10}  {'Score':>7}\n")
    if not entries:
        sys.stdout.write("  (no scores yet)\n")
    for rank, entry in enumerate(entries, start=1):
        # winners are shown in gold
        color = YELLOW if entry.won else ''
        sys.stdout.write(f"{color}{rank:>4}  {entry.display_name:<10}  {entry.score:>7}{RESET}\n")
    sys.stdout.flush()


def get_key():
    fd = sys.stdin.fileno()
    old_settings = termios.tcgetattr(fd)
    try:
        tty.setraw(fd)
        return sys.stdin.read(1)
    finally:
        termios.tcsetattr(fd, termios.TCSADRAIN, old_settings)


def get_arrow_key():
    """Return a Direction, a command name, or None for unmapped keys."""
    ch = get_key()
    if ch == '\x1b':
        if get_key() == '[':
            return KEY_DIRECTIONS.get(get_key())
        return None
    if ch == '\x03':
        raise KeyboardInterrupt
    ch = ch.lower()
    if ch in WASD:
        return WASD[ch]
    return COMMANDS.get(ch)


def offer_submission(controller: GameController):
    sys.stdout.write(f"Final Score: {GREEN}{controller.score}{RESET}\n")
    sys.stdout.write("Enter a username for the leaderboard (blank to skip): ")
    sys.stdout.flush()
    username = sys.stdin.readline().rstrip("\n")
    if not username.strip():
        return
    if controller.submit_score(username):
        sys.stdout.write(f"{GREEN}Score saved.{RESET}\n")
    else:
        sys.stdout.write(f"{YELLOW}Score not saved (duplicate entry or file not writable).{RESET}\n")
    draw_leaderboard(controller.leaderboard)


def main(argv=None):
    args = build_parser("Play 2048 in the terminal").parse_args(argv)
    config = config_from_args(args)
    setup_logging(config.log_level)

    rng = random.Random(config.seed) if config.seed is not None else None
    controller = GameController(leaderboard=Leaderboard(config.leaderboard_path), size=config.size, rng=rng)

    sys.stdout.write(f"{BOLD}Welcome to 2048!{RESET}\n")
    sys.stdout.write("Use arrow keys or WASD to move tiles\n")
    sys.stdout.write("Press 'q' to quit\n")
    sys.stdout.write("Press any key to start...\n")
    sys.stdout.flush()
    get_key()

    while True:
        draw_board(controller)
        if controller.is_over:
            sys.stdout.write(f"\n{BOLD}GAME OVER!{RESET}\n")
            offer_submission(controller)
            sys.stdout.write("Press 'n' for a new game or any other key to exit...\n")
            sys.stdout.flush()
            if get_key().lower() == 'n':
                controller.reset()
                continue
            break

        key = get_arrow_key()
        if key == 'quit':
            sys.stdout.write(f"\n{YELLOW}Game ended.{RESET}\n")
            offer_submission(controller)
            break
        if key == 'new':
            controller.reset()
        elif key == 'leaderboard':
            draw_leaderboard(controller.leaderboard)
            sys.stdout.write("Press any key to continue...\n")
            sys.stdout.flush()
            get_key()
        elif isinstance(key, Direction):
            controller.handle(key)


if __name__ == "__main__":
    try:
        main()
    except KeyboardInterrupt:
        sys.stdout.write(f"\n\n{YELLOW}Game interrupted. Thanks for playing!{RESET}\n")
        sys.stdout.flush()
    except Exception as e:
        sys.stdout.write(f"\n{RED}Error: {e}{RESET}\n")
        sys.stdout.write("Make sure you're running this in a terminal that supports colors and arrow keys.\n")
        sys.stdout.flush()
