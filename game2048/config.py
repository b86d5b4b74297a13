"""
Game and leaderboard settings shared by the engine and both front ends.
"""

import argparse
import os
from dataclasses import dataclass
from typing import Optional

# ------------------------
# Engine
# ------------------------
GRID_N = 4
WIN_TILE = 2048
START_TILES = 2
FOUR_PROBABILITY = 0.1  # 10% chance a spawned tile is a 4

# ------------------------
# Leaderboard
# ------------------------
LEADERBOARD_FILE = "leaderboard.txt"
LEADERBOARD_ENV = "GAME2048_LEADERBOARD"
LEADERBOARD_LIMIT = 10
USERNAME_DISPLAY_LEN = 10


@dataclass(frozen=True)
class GameConfig:
    size: int = GRID_N
    leaderboard_path: str = LEADERBOARD_FILE
    seed: Optional[int] = None
    log_level: str = "WARNING"


def default_leaderboard_path() -> str:
    return os.environ.get(LEADERBOARD_ENV, LEADERBOARD_FILE)


def build_parser(description: str) -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(description=description)
    ap.add_argument('--leaderboard', type=str, default=default_leaderboard_path(),
                    help=f"Leaderboard file (env: {LEADERBOARD_ENV})")
    ap.add_argument('--seed', type=int, default=None, help="Seed for tile spawns")
    ap.add_argument('--log-level', type=str, default="WARNING",
                    choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    return ap


def config_from_args(args: argparse.Namespace) -> GameConfig:
    return GameConfig(
        leaderboard_path=args.leaderboard,
        seed=args.seed,
        log_level=args.log_level,
    )
