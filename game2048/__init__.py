from .controller import GameController, GameState, MoveOutcome
from .game import Direction, Grid, ShiftResult
from .leaderboard import Leaderboard, LeaderboardEntry
from .score import ScoreTracker
from .tile import Tile

__all__ = [
    "Direction",
    "GameController",
    "GameState",
    "Grid",
    "Leaderboard",
    "LeaderboardEntry",
    "MoveOutcome",
    "ScoreTracker",
    "ShiftResult",
    "Tile",
]
