import logging
import random
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional, Union

import numpy as np

from game2048.config import GRID_N, WIN_TILE
from game2048.game import Direction, Grid
from game2048.leaderboard import Leaderboard
from game2048.score import ScoreTracker

logger = logging.getLogger(__name__)

MSG_START = f"Use arrow keys to reach {WIN_TILE}!"
MSG_WIN = "You win!"
MSG_LOSE = "You lost :("


class GameState(Enum):
    PLAYING = "playing"
    WON = "won"    # still playable
    LOST = "lost"  # terminal


@dataclass(frozen=True)
class MoveOutcome:
    direction: Optional[Direction]
    score_delta: int
    moved: bool
    spawned: bool
    state: GameState
    won_now: bool = False
    lost_now: bool = False


class GameController:
    """
    Runs one game session: turns a direction into a grid shift, keeps the
    score and decides when the game is won or lost.
    """

    def __init__(self,
                 leaderboard: Optional[Leaderboard] = None,
                 size: int = GRID_N,
                 rng: Optional[random.Random] = None,
                 on_win: Optional[Callable[["GameController"], None]] = None,
                 on_lose: Optional[Callable[["GameController"], None]] = None):
        self.leaderboard = leaderboard
        self.size = size
        self.rng = rng
        self.on_win = on_win
        self.on_lose = on_lose
        self.reset()

    def reset(self):
        """Start a new session with a fresh grid and score."""
        self.grid = Grid(self.size, rng=self.rng)
        self.tracker = ScoreTracker()
        self.state = GameState.PLAYING
        self.message = MSG_START
        self.move_count = 0
        logger.info("New game started")

    # ---------- read accessors ----------

    @property
    def board(self) -> np.ndarray:
        return self.grid.board

    @property
    def score(self) -> int:
        return self.tracker.score

    @property
    def won(self) -> bool:
        return self.tracker.won

    @property
    def is_over(self) -> bool:
        return self.state is GameState.LOST

    # ---------- input ----------

    def _idle(self, direction: Optional[Direction]) -> MoveOutcome:
        return MoveOutcome(direction, 0, False, False, self.state)

    def handle(self, direction: Union[Direction, str]) -> MoveOutcome:
        if self.state is GameState.LOST:
            return self._idle(Direction.parse(direction))

        d = Direction.parse(direction)
        if d is None:
            return self._idle(None)

        result = self.grid.shift(d)

        # merged or shifted
        if result.changed:
            self.tracker.add(result.score_delta)
            self.move_count += 1
            spawned = self.grid.spawn()
            won_now = result.score_delta >= WIN_TILE and self.tracker.mark_won()
            if won_now:
                self.state = GameState.WON
                self.message = MSG_WIN
                logger.info("Reached %d with score %d", WIN_TILE, self.score)
                if self.on_win:
                    self.on_win(self)
            return MoveOutcome(d, result.score_delta, result.moved, spawned, self.state, won_now=won_now)

        # no merge or shift + can't move = lose
        if not self.grid.can_move():
            self.state = GameState.LOST
            self.message = MSG_LOSE
            logger.info("Game over after %d moves, score %d", self.move_count, self.score)
            if self.on_lose:
                self.on_lose(self)
            return MoveOutcome(d, 0, False, False, self.state, lost_now=True)

        return self._idle(d)

    def submit_score(self, username: str) -> bool:
        """Record the current score on the attached leaderboard, if any."""
        if self.leaderboard is None:
            return False
        return self.leaderboard.submit(username, self.score, self.won)
