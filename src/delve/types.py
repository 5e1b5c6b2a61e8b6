"""Core geometry types for the grid world."""

import math
from enum import IntEnum
from typing import Iterator

from pydantic import BaseModel


class Direction(IntEnum):
    """Cardinal directions. Declaration order is the AI tie-break order."""

    UP = 1
    DOWN = 2
    LEFT = 3
    RIGHT = 4

    @property
    def delta(self) -> "Delta":
        """Unit step for this direction."""
        return DIRECTION_DELTAS[self]

    @property
    def rotation(self) -> float:
        """Display rotation in radians, up being 0."""
        return DIRECTION_ROTATIONS[self]


class Delta(BaseModel, frozen=True):
    """Integer displacement between two tiles."""

    dx: int
    dy: int

    @classmethod
    def zero(cls) -> "Delta":
        return cls(dx=0, dy=0)

    @property
    def is_zero(self) -> bool:
        return self.dx == 0 and self.dy == 0

    @property
    def magnitude(self) -> float:
        """Euclidean length."""
        return math.sqrt(self.dx * self.dx + self.dy * self.dy)

    @property
    def manhattan_distance(self) -> int:
        return abs(self.dx) + abs(self.dy)

    @property
    def primary_direction(self) -> Direction:
        """Direction along the dominant axis; vertical wins ties."""
        if abs(self.dy) >= abs(self.dx):
            return Direction.DOWN if self.dy >= 0 else Direction.UP
        return Direction.RIGHT if self.dx >= 0 else Direction.LEFT

    def __hash__(self) -> int:
        return hash((self.dx, self.dy))

    def __str__(self) -> str:
        return f"<{self.dx}, {self.dy}>"


# Coordinate system: +X is right, +Y is down
DIRECTION_DELTAS: dict[Direction, Delta] = {
    Direction.UP: Delta(dx=0, dy=-1),
    Direction.DOWN: Delta(dx=0, dy=1),
    Direction.LEFT: Delta(dx=-1, dy=0),
    Direction.RIGHT: Delta(dx=1, dy=0),
}

DIRECTION_ROTATIONS: dict[Direction, float] = {
    Direction.UP: 0.0,
    Direction.DOWN: math.pi,
    Direction.LEFT: -math.pi / 2,
    Direction.RIGHT: math.pi / 2,
}


class Position(BaseModel, frozen=True):
    """Immutable absolute world tile coordinate."""

    x: int
    y: int

    def __add__(self, other: Delta) -> "Position":
        return Position(x=self.x + other.dx, y=self.y + other.dy)

    def offset(self, direction: Direction) -> "Position":
        """Return new position one step in direction."""
        return self + direction.delta

    def delta_to(self, other: "Position") -> Delta:
        """Displacement from this position to other."""
        return Delta(dx=other.x - self.x, dy=other.y - self.y)

    def positions_in_nearby_grid(
        self, x_radius: int, y_radius: int
    ) -> Iterator["Position"]:
        """Yield every position in the surrounding box, row by row."""
        for dy in range(-y_radius, y_radius + 1):
            for dx in range(-x_radius, x_radius + 1):
                yield Position(x=self.x + dx, y=self.y + dy)

    def __hash__(self) -> int:
        return hash((self.x, self.y))

    def __str__(self) -> str:
        return f"({self.x}, {self.y})"

    def __repr__(self) -> str:
        return f"Position(x={self.x}, y={self.y})"


class GridPosition(BaseModel, frozen=True):
    """Chunk-local coordinate. Never equal to a Position."""

    x: int
    y: int

    def __hash__(self) -> int:
        return hash((self.x, self.y))

    def __repr__(self) -> str:
        return f"GridPosition(x={self.x}, y={self.y})"


class Size(BaseModel, frozen=True):
    """Integer width and height."""

    width: int
    height: int

    @property
    def area(self) -> int:
        return self.width * self.height


class Rect(BaseModel, frozen=True):
    """Axis-aligned integer rectangle; right and bottom are exclusive."""

    left: int
    top: int
    width: int
    height: int

    @property
    def right(self) -> int:
        return self.left + self.width

    @property
    def bottom(self) -> int:
        return self.top + self.height

    def contains(self, position: Position) -> bool:
        return (
            self.left <= position.x < self.right
            and self.top <= position.y < self.bottom
        )

    def inflate(self, amount: int) -> "Rect":
        """Return rect grown by amount on every side."""
        return Rect(
            left=self.left - amount,
            top=self.top - amount,
            width=self.width + 2 * amount,
            height=self.height + 2 * amount,
        )
