"""Dense fixed-size 2D grids addressed by chunk-local coordinates."""

from enum import IntEnum
from typing import Any, Callable, Generic, Iterator, TypeVar

import numpy as np
from numpy.typing import DTypeLike, NDArray

from .exceptions import InvalidCoordinateError
from .types import GridPosition, Size

T = TypeVar("T")


class CellType(IntEnum):
    """Terrain cell kinds, stored as uint8 in cell grids."""

    EMPTY = 0
    WALL = 1
    # Returned for queries outside a grid; never stored.
    OUT_OF_BOUNDS = 2

    @property
    def is_passable(self) -> bool:
        """Whether entities can occupy this cell."""
        return self is CellType.EMPTY

    @property
    def is_wall(self) -> bool:
        return self is CellType.WALL

    def to_char(self) -> str:
        return _CELL_CHARS[self]


_CELL_CHARS: dict[CellType, str] = {
    CellType.EMPTY: ".",
    CellType.WALL: "#",
    CellType.OUT_OF_BOUNDS: "?",
}


class Grid(Generic[T]):
    """Rectangular dense array with bounds-checked access.

    Backed by a numpy array of shape (height, width). Reads outside the grid
    return None; writes outside it raise InvalidCoordinateError.
    """

    def __init__(self, cells: NDArray[Any]):
        if cells.ndim != 2 or cells.size == 0:
            raise ValueError(f"Grid needs a non-empty 2D array, got shape {cells.shape}")
        self._cells = cells

    @classmethod
    def filled(
        cls,
        size: Size,
        create: Callable[[GridPosition], T],
        dtype: DTypeLike = None,
    ) -> "Grid[T]":
        """Build a grid by calling create for every position."""
        rows = [
            [create(GridPosition(x=x, y=y)) for x in range(size.width)]
            for y in range(size.height)
        ]
        return cls(np.array(rows, dtype=dtype))

    @classmethod
    def full(cls, size: Size, value: T, dtype: DTypeLike = None) -> "Grid[T]":
        """Build a grid with every cell set to value."""
        return cls(np.full((size.height, size.width), value, dtype=dtype))

    @property
    def width(self) -> int:
        return self._cells.shape[1]

    @property
    def height(self) -> int:
        return self._cells.shape[0]

    @property
    def size(self) -> Size:
        return Size(width=self.width, height=self.height)

    @property
    def array(self) -> NDArray[Any]:
        """Backing array, shape (height, width). Mutations are visible."""
        return self._cells

    def in_bounds(self, position: GridPosition) -> bool:
        return 0 <= position.x < self.width and 0 <= position.y < self.height

    def get(self, position: GridPosition) -> T | None:
        """Return the value at position, or None outside the grid."""
        if not self.in_bounds(position):
            return None
        return self._cells[position.y, position.x].item()

    def set(self, position: GridPosition, value: T) -> None:
        """Store value at position.

        Raises:
            InvalidCoordinateError: If position lies outside the grid.
        """
        if not self.in_bounds(position):
            raise InvalidCoordinateError(
                f"{position!r} outside {self.width}x{self.height} grid"
            )
        self._cells[position.y, position.x] = value

    def all_positions(self) -> Iterator[GridPosition]:
        """Yield every position, row by row."""
        for y in range(self.height):
            for x in range(self.width):
                yield GridPosition(x=x, y=y)

    def rows(self) -> Iterator[list[T]]:
        for row in self._cells:
            yield row.tolist()

    def copy(self) -> "Grid[T]":
        return Grid(self._cells.copy())
