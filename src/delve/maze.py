"""Maze carving by randomized wall placement with connectivity checks.

Walls are added one at a time to an initially open grid. Each tentative wall
is kept only if the start cell can still reach the end cell, so the finished
level is always solvable. An optional sealing pass walls off every pocket the
start cannot reach.
"""

from enum import Enum
from typing import Callable, Iterator, TypeVar

import numpy as np
import structlog
from scipy import ndimage

from .exceptions import GenerationError, InvalidCoordinateError
from .grid import CellType, Grid
from .types import Direction, GridPosition, Position, Size

logger = structlog.get_logger()

P = TypeVar("P", Position, GridPosition)


def cardinal_neighbors(position: P) -> Iterator[P]:
    """Yield the four orthogonal neighbours in Direction order."""
    for direction in Direction:
        step = direction.delta
        yield type(position)(x=position.x + step.dx, y=position.y + step.dy)


def has_path_between(is_passable: Callable[[P], bool], start: P, end: P) -> bool:
    """Depth-first reachability over passable cells.

    Returns False immediately when start itself is not passable.
    """
    if not is_passable(start):
        return False
    visited = {start}
    stack = [start]
    while stack:
        current = stack.pop()
        if current == end:
            return True
        for neighbor in cardinal_neighbors(current):
            if neighbor in visited or not is_passable(neighbor):
                continue
            visited.add(neighbor)
            stack.append(neighbor)
    return False


def random_grid_position(size: Size, rng: np.random.Generator) -> GridPosition:
    """Uniformly random position inside size."""
    y, x = divmod(int(rng.integers(size.area)), size.width)
    return GridPosition(x=x, y=y)


class NamedLocation(str, Enum):
    """Distinguished cells of a level."""

    ENTRANCE = "entrance"
    EXIT = "exit"


class Level:
    """A generated cell layout with an entrance and an exit."""

    def __init__(self, cells: Grid[int], enter: GridPosition, exit: GridPosition):
        self.cells = cells
        self.enter = enter
        self.exit = exit

    @classmethod
    def empty(cls, size: Size, enter: GridPosition, exit: GridPosition) -> "Level":
        """Fully passable level."""
        return cls(Grid.full(size, CellType.EMPTY, dtype=np.uint8), enter, exit)

    @property
    def size(self) -> Size:
        return self.cells.size

    @property
    def width(self) -> int:
        return self.cells.width

    @property
    def height(self) -> int:
        return self.cells.height

    def get_cell(self, position: GridPosition) -> CellType:
        value = self.cells.get(position)
        if value is None:
            return CellType.OUT_OF_BOUNDS
        return CellType(value)

    def set_cell(self, position: GridPosition, cell: CellType) -> None:
        self.cells.set(position, cell)

    def is_passable(self, position: GridPosition) -> bool:
        return self.get_cell(position).is_passable

    def has_path_between(self, start: GridPosition, end: GridPosition) -> bool:
        return has_path_between(self.is_passable, start, end)

    def position_for(self, location: NamedLocation) -> GridPosition:
        if location is NamedLocation.ENTRANCE:
            return self.enter
        return self.exit

    def wall_count(self) -> int:
        return int(np.count_nonzero(self.cells.array == CellType.WALL))

    def render(self) -> str:
        """ASCII rendering, one line per row."""
        lines = []
        for row in self.cells.rows():
            lines.append("".join(CellType(value).to_char() for value in row))
        return "\n".join(lines) + "\n"

    def __str__(self) -> str:
        return self.render()


class MazeGenerator:
    """Adds walls to a level while keeping start connected to end.

    Candidate cells for each wall are drawn without replacement, so a call
    to add_wall either succeeds or fails after finitely many attempts.
    """

    def __init__(
        self,
        size: Size,
        start: GridPosition,
        end: GridPosition,
        rng: np.random.Generator,
        max_attempts: int | None = None,
    ):
        self.level = Level.empty(size, enter=start, exit=end)
        if not self.level.cells.in_bounds(start):
            raise InvalidCoordinateError(f"Start {start!r} outside {size}")
        if not self.level.cells.in_bounds(end):
            raise InvalidCoordinateError(f"End {end!r} outside {size}")
        self.size = size
        self.start = start
        self.end = end
        self.max_attempts = max_attempts
        self._rng = rng

    def add_wall(self) -> GridPosition:
        """Place one wall that keeps start and end connected.

        Returns:
            Position of the new wall.

        Raises:
            GenerationError: If no passable cell can become a wall, or
                max_attempts candidates were rejected.
        """
        cells = self.level.cells.array
        candidates = np.argwhere(cells == CellType.EMPTY)
        order = self._rng.permutation(len(candidates))

        for attempt, index in enumerate(order, start=1):
            if self.max_attempts is not None and attempt > self.max_attempts:
                break
            y, x = candidates[index]
            position = GridPosition(x=int(x), y=int(y))
            self.level.set_cell(position, CellType.WALL)
            if self.level.has_path_between(self.start, self.end):
                return position
            self.level.set_cell(position, CellType.EMPTY)
            logger.debug("wall_rejected", x=position.x, y=position.y)

        raise GenerationError(
            f"No wall placement keeps {self.start!r} connected to {self.end!r} "
            f"({len(candidates)} passable candidates)"
        )

    def add_many_walls(self, count: int) -> None:
        for _ in range(count):
            self.add_wall()

    def seal_unreachable(self) -> int:
        """Wall off every passable cell the start cannot reach.

        Returns:
            Number of cells converted to walls.
        """
        cells = self.level.cells.array
        passable = cells == CellType.EMPTY
        structure = ndimage.generate_binary_structure(2, 1)  # 4-connected
        labeled, _ = ndimage.label(passable, structure=structure)

        start_label = labeled[self.start.y, self.start.x]
        if start_label == 0:
            pockets = passable
        else:
            pockets = passable & (labeled != start_label)

        cells[pockets] = CellType.WALL
        sealed = int(np.count_nonzero(pockets))
        if sealed:
            logger.debug("pockets_sealed", cells=sealed)
        return sealed


def generate_level(
    size: Size,
    start: GridPosition,
    end: GridPosition,
    rng: np.random.Generator,
    wall_count: int = 20,
    seal: bool = False,
    max_attempts: int | None = None,
) -> Level:
    """Generate one connected level.

    Args:
        size: Level dimensions.
        start: Entrance cell.
        end: Exit cell; always reachable from start afterwards.
        rng: Random source, advanced in place.
        wall_count: Number of walls to place.
        seal: Whether to wall off cells unreachable from start.
        max_attempts: Per-wall ceiling on rejected candidates.

    Returns:
        The generated Level.
    """
    generator = MazeGenerator(size, start, end, rng, max_attempts=max_attempts)
    generator.add_many_walls(wall_count)
    if seal:
        generator.seal_unreachable()
    return generator.level


def generate_levels(
    size: Size,
    count: int,
    rng: np.random.Generator,
    wall_count: int = 20,
    seal: bool = False,
) -> Iterator[Level]:
    """Yield count levels drawn from one shared random source.

    A fixed seed for rng reproduces the whole sequence.
    """
    if size.area < 2:
        raise GenerationError(f"Level of size {size} cannot hold distinct start and end")
    for _ in range(count):
        start = random_grid_position(size, rng)
        # Draw from the area minus the start cell, then skip over it.
        offset = int(rng.integers(size.area - 1))
        if offset >= start.y * size.width + start.x:
            offset += 1
        y, x = divmod(offset, size.width)
        end = GridPosition(x=x, y=y)
        yield generate_level(size, start, end, rng, wall_count=wall_count, seal=seal)
