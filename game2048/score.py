class ScoreTracker:
    """Running score for one game plus the one-shot win flag."""

    def __init__(self):
        self._score = 0
        self._won = False

    @property
    def score(self) -> int:
        return self._score

    @property
    def won(self) -> bool:
        return self._won

    def add(self, delta: int) -> int:
        if delta < 0:
            raise ValueError(f"score delta must be non-negative, got {delta}")
        self._score += delta
        return self._score

    def mark_won(self) -> bool:
        """Set the win flag. Returns True only the first time."""
        if self._won:
            return False
        self._won = True
        return True
