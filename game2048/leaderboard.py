"""
Flat-file leaderboard: one `username,score,won` record per line, no header.
A missing file is an empty leaderboard, bad lines are skipped and failed
writes are logged, so the running game never depends on the file.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import List, Union

from game2048.config import LEADERBOARD_FILE, LEADERBOARD_LIMIT, USERNAME_DISPLAY_LEN

logger = logging.getLogger(__name__)

DELIMITER = ","
# characters that would break the one-record-per-line format
_UNSAFE_CHARS = (DELIMITER, "\n", "\r")
# stands in for undecodable bytes when the file is read with errors="replace"
_UNDECODABLE = "\ufffd"


def sanitize_username(username: str) -> str:
    for ch in _UNSAFE_CHARS:
        username = username.replace(ch, "_")
    return username


@dataclass(frozen=True)
class LeaderboardEntry:
    username: str
    score: int
    won: bool = False

    @property
    def display_name(self) -> str:
        return self.username[:USERNAME_DISPLAY_LEN]

    def to_line(self) -> str:
        won = "true" if self.won else "false"
        return f"{sanitize_username(self.username)}{DELIMITER}{self.score}{DELIMITER}{won}"

    @classmethod
    def from_line(cls, line: str) -> "LeaderboardEntry":
        """Parse a stored record. Raises ValueError on anything malformed."""
        fields = line.split(DELIMITER)
        if len(fields) != 3:
            raise ValueError(f"expected 3 fields, got {len(fields)}")
        username, score_text, won_text = fields
        if not username:
            raise ValueError("empty username")
        if _UNDECODABLE in username:
            raise ValueError("username is not valid UTF-8")
        # plain ASCII digits only, no sign, spaces or underscores
        if not (score_text.isascii() and score_text.isdigit()):
            raise ValueError(f"score must be a non-negative integer, got {score_text!r}")
        score = int(score_text)
        if won_text not in ("true", "false"):
            raise ValueError(f"won flag must be 'true' or 'false', got {won_text!r}")
        return cls(username, score, won_text == "true")


class Leaderboard:
    def __init__(self, path: Union[str, Path] = LEADERBOARD_FILE):
        self.path = Path(path)
        self.entries: List[LeaderboardEntry] = []
        # raw stored lines, used for exact-match duplicate detection
        self.lines: List[str] = []
        self._missing_newline = False

    def _read_lines(self) -> List[str]:
        try:
            with self.path.open("r", encoding="utf-8", errors="replace") as f:
                text = f.read()
        except FileNotFoundError:
            logger.debug("No leaderboard at %s yet", self.path)
            text = ""
        except OSError as e:
            logger.warning("Could not read leaderboard %s: %s", self.path, e)
            text = ""
        self._missing_newline = bool(text) and not text.endswith("\n")
        return [line.rstrip("\r") for line in text.split("\n") if line.strip()]

    def load(self) -> List[LeaderboardEntry]:
        """Read every valid record, highest score first. Ties keep file order."""
        lines = self._read_lines()
        entries = []
        for lineno, line in enumerate(lines, start=1):
            try:
                entries.append(LeaderboardEntry.from_line(line))
            except ValueError as e:
                logger.warning("Skipping malformed leaderboard line %d in %s: %s", lineno, self.path, e)
        self.lines = lines
        # sorted() is stable, so equal scores stay in insertion order
        self.entries = sorted(entries, key=lambda entry: entry.score, reverse=True)
        return list(self.entries)

    def top(self, limit: int = LEADERBOARD_LIMIT) -> List[LeaderboardEntry]:
        return self.load()[:limit]

    def submit(self, username: str, score: int, won: bool = False) -> bool:
        """
        Append a record unless the identical line is already stored.
        Returns True if a line was written.
        """
        if not username or not username.strip():
            logger.warning("Refusing to submit a score without a username")
            return False

        line = LeaderboardEntry(sanitize_username(username), int(score), bool(won)).to_line()
        self.load()
        if line in self.lines:
            logger.info("Leaderboard already has %r, not adding it again", line)
            return False

        try:
            with self.path.open("a", encoding="utf-8") as f:
                if self._missing_newline:
                    f.write("\n")
                f.write(line + "\n")
        except OSError as e:
            logger.warning("Could not save score to %s: %s", self.path, e)
            return False

        logger.info("Recorded leaderboard entry %r", line)
        self.load()
        return True

    def __len__(self) -> int:
        return len(self.entries)
