import logging
import random
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Tuple, Union

import numpy as np

from game2048.config import FOUR_PROBABILITY, GRID_N, START_TILES
from game2048.tile import Tile

logger = logging.getLogger(__name__)


class Direction(Enum):
    UP = "up"
    DOWN = "down"
    LEFT = "left"
    RIGHT = "right"

    @classmethod
    def parse(cls, value: Union["Direction", str, None]) -> Optional["Direction"]:
        """Accept a Direction or its name in any case; None for anything else."""
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            try:
                return cls(value.strip().lower())
            except ValueError:
                return None
        return None


@dataclass(frozen=True)
class ShiftResult:
    score_delta: int = 0
    moved: bool = False
    max_merged: int = 0  # largest tile produced by a merge, 0 if nothing merged

    @property
    def changed(self) -> bool:
        return self.moved or self.score_delta > 0


class Grid:
    """
    The N x N board of Tiles and the shift / merge / spawn rules.
    Tiles are never replaced, only their values change, so the lines handed
    out by row() and column() stay live across moves.
    """

    def __init__(self, size: int = GRID_N, rng: Optional[random.Random] = None,
                 start_tiles: int = START_TILES):
        self.n = size
        self.rng = rng if rng is not None else random.Random()
        self.tiles = np.empty((self.n, self.n), dtype=object)
        for r in range(self.n):
            for c in range(self.n):
                self.tiles[r, c] = Tile()
        self.last_spawn: Optional[Tuple[int, int, int]] = None
        # Start with two tiles as usual
        for _ in range(start_tiles):
            self.spawn()

    @classmethod
    def from_board(cls, values, rng: Optional[random.Random] = None) -> "Grid":
        """Build a grid holding exactly the given values, with no spawned tiles."""
        arr = np.asarray(values, dtype=int)
        grid = cls(size=arr.shape[0], rng=rng, start_tiles=0)
        grid.board = arr
        return grid

    # ---------- read accessors ----------

    @property
    def board(self) -> np.ndarray:
        """Snapshot of tile values as an int array."""
        return np.array([[tile.value for tile in row] for row in self.tiles], dtype=int)

    @board.setter
    def board(self, values):
        arr = np.asarray(values, dtype=int)
        if arr.shape != (self.n, self.n):
            raise ValueError(f"board must be {self.n}x{self.n}, got {arr.shape}")
        for (r, c), v in np.ndenumerate(arr):
            self.tiles[r, c].value = int(v)

    def get_state(self) -> np.ndarray:
        return self.board

    def row(self, index: int) -> np.ndarray:
        return self.tiles[index, :]

    def column(self, index: int) -> np.ndarray:
        return self.tiles[:, index]

    def empty_cells(self) -> List[Tuple[int, int]]:
        return [(int(r), int(c)) for r, c in np.argwhere(self.board == 0)]

    def max_tile(self) -> int:
        return int(self.board.max())

    # ---------- rules ----------

    def spawn(self) -> bool:
        """Put a 2 (90%) or a 4 (10%) on a random empty cell. False if the grid is full."""
        empty = self.empty_cells()
        if not empty:
            return False
        r, c = self.rng.choice(empty)
        val = 2 if self.rng.random() < 1 - FOUR_PROBABILITY else 4
        self.tiles[r, c].value = val
        self.last_spawn = (r, c, val)
        logger.debug("Spawned %d at (%d, %d)", val, r, c)
        return True

    def can_move(self) -> bool:
        """True while there is an empty cell or two equal neighbours."""
        b = self.board
        if not b.all():
            return True
        return bool(np.any(b[:-1, :] == b[1:, :]) or np.any(b[:, :-1] == b[:, 1:]))

    def _oriented_lines(self, direction: Direction) -> List[np.ndarray]:
        """Views over the tiles ordered so that every direction compacts towards index 0."""
        if direction is Direction.UP:
            return [self.tiles[:, c] for c in range(self.n)]
        if direction is Direction.DOWN:
            return [self.tiles[::-1, c] for c in range(self.n)]
        if direction is Direction.RIGHT:
            return [self.tiles[r, ::-1] for r in range(self.n)]
        return [self.tiles[r, :] for r in range(self.n)]

    @staticmethod
    def _compact(line) -> bool:
        """Slide non-empty tiles to the front, keeping their order."""
        moved = False
        j = 0
        for i in range(len(line)):
            if not line[i].is_empty:
                if i != j:
                    line[i].swap(line[j])
                    moved = True
                j += 1
        return moved

    @staticmethod
    def _merge(line) -> Tuple[int, int]:
        """Merge equal neighbours once, left to right. Returns (score_gain, max_merged)."""
        score_gain = 0
        max_merged = 0
        i = 0
        while i < len(line) - 1:
            left, right = line[i], line[i + 1]
            if not left.is_empty and left.value == right.value:
                merged_val = left.merge(right)
                score_gain += merged_val
                max_merged = max(max_merged, merged_val)
                # the merged tile is done for this move
                i += 2
            else:
                i += 1
        return score_gain, max_merged

    def _shift_line(self, line) -> Tuple[int, bool, int]:
        moved = self._compact(line)
        score_gain, max_merged = self._merge(line)
        if max_merged:
            self._compact(line)
            moved = True
        return score_gain, moved, max_merged

    def shift(self, direction: Union[Direction, str]) -> ShiftResult:
        """
        Slide and merge every line towards the given direction, in place.
        Unknown directions are ignored and report no change.
        """
        d = Direction.parse(direction)
        if d is None:
            logger.debug("Ignoring unknown direction %r", direction)
            return ShiftResult()

        total_score_gain = 0
        moved = False
        max_merged = 0
        for line in self._oriented_lines(d):
            score_gain, line_moved, line_max = self._shift_line(line)
            total_score_gain += score_gain
            moved = moved or line_moved
            max_merged = max(max_merged, line_max)

        return ShiftResult(total_score_gain, moved, max_merged)

    def __str__(self) -> str:
        return "\n".join(" ".join(f"{v:5d}" for v in row) for row in self.board)
