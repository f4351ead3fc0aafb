from dataclasses import dataclass


@dataclass(frozen=True)
class Position:
    """A zero-based (column, row) pair.

    Columns are grapheme indices when the position is a cursor and screen
    columns once it has been translated for display.
    """

    x: int = 0
    y: int = 0

    @classmethod
    def at(cls, x: int, y: int) -> "Position":
        return cls(x, y)

    @classmethod
    def zero(cls) -> "Position":
        return cls(0, 0)

    def add(self, other: "Position") -> "Position":
        return Position(self.x + other.x, self.y + other.y)

    def diff(self, other: "Position") -> "Position":
        """Component-wise difference, saturating at zero."""
        return Position(max(self.x - other.x, 0), max(self.y - other.y, 0))

    def __lt__(self, other):
        if self.y != other.y:
            return self.y < other.y
        return self.x < other.x

    def __le__(self, other):
        return self == other or self < other

    def __gt__(self, other):
        return other < self

    def __ge__(self, other):
        return not self < other
