from dataclasses import dataclass


@dataclass
class Tile:
    """A single grid cell. A value of 0 means the cell is empty."""
    value: int = 0

    @property
    def is_empty(self) -> bool:
        return self.value == 0

    def swap(self, other: "Tile"):
        """Exchange values with another tile."""
        self.value, other.value = other.value, self.value

    def merge(self, other: "Tile") -> int:
        """Double this tile, empty the other one, and return the new value."""
        self.value *= 2
        other.value = 0
        return self.value

    def __str__(self) -> str:
        return str(self.value)
