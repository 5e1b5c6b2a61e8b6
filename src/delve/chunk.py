"""Fixed-size chunks of the infinite world."""

from typing import Callable, Iterable, Iterator

import numpy as np
import structlog
from pydantic import BaseModel

from .config import ChunkConfig, ItemSpawnConfig
from .entities import ENEMY_TYPES, Enemy
from .exceptions import GenerationError
from .grid import CellType, Grid
from .items import Item, ItemKind
from .maze import cardinal_neighbors, generate_level, has_path_between
from .types import GridPosition, Position, Rect, Size

logger = structlog.get_logger()

CHUNK_SIZE = Size(width=10, height=10)


class ChunkId(BaseModel, frozen=True):
    """Integer coordinate of a chunk in the chunk lattice."""

    x: int
    y: int

    @classmethod
    def origin(cls) -> "ChunkId":
        return cls(x=0, y=0)

    @classmethod
    def from_position(cls, position: Position, size: Size = CHUNK_SIZE) -> "ChunkId":
        """Chunk containing position. Floor division, so -1 maps to chunk -1."""
        return cls(x=position.x // size.width, y=position.y // size.height)

    def origin_position(self, size: Size = CHUNK_SIZE) -> Position:
        """Global position of local (0, 0)."""
        return Position(x=self.x * size.width, y=self.y * size.height)

    def __hash__(self) -> int:
        return hash((self.x, self.y))

    def __str__(self) -> str:
        return f"[{self.x},{self.y}]"


class Chunk:
    """One tile of the world: cells, visibility, enemies and items.

    State is changed only through the methods here. Positions passed in are
    global unless the method name ends in _local.
    """

    def __init__(self, chunk_id: ChunkId, cells: Grid[int]):
        self.chunk_id = chunk_id
        self.cells = cells
        self.mapped: Grid[bool] = Grid.full(cells.size, False, dtype=bool)
        self.lit: Grid[bool] = Grid.full(cells.size, False, dtype=bool)
        self.enemies: list[Enemy] = []
        self.items: list[Item] = []

    @classmethod
    def generate(
        cls,
        chunk_id: ChunkId,
        rng: np.random.Generator,
        config: ChunkConfig | None = None,
    ) -> "Chunk":
        """Generate walls, enemies and items for a new chunk.

        Every random draw comes from rng, so the result is a pure function of
        rng's seed and config.
        """
        config = config or ChunkConfig()
        size = config.size
        reserved: list[Position] = []

        if config.style == "maze":
            # Corridor from the west edge to the east edge.
            start = GridPosition(x=0, y=size.height // 2)
            end = GridPosition(x=size.width - 1, y=size.height // 2)
            level = generate_level(
                size,
                start,
                end,
                rng,
                wall_count=config.maze.wall_count,
                seal=config.maze.seal,
                max_attempts=config.maze.max_attempts,
            )
            chunk = cls(chunk_id, level.cells)
            # Corridor ends stay free so neighbouring chunks connect.
            reserved = [chunk.to_global(start), chunk.to_global(end)]
        else:
            chunk = cls(chunk_id, Grid.full(size, CellType.EMPTY, dtype=np.uint8))
            chunk.add_many_walls(config.wall_count, rng)

        chunk.spawn_enemies(config.enemy_count, rng, config.enemy_types, reserved)
        chunk.spawn_items(rng, config.items, reserved)

        logger.debug(
            "chunk_generated",
            chunk_id=str(chunk_id),
            style=config.style,
            enemies=len(chunk.enemies),
            items=len(chunk.items),
        )
        return chunk

    # --- Geometry ---

    @property
    def size(self) -> Size:
        return self.cells.size

    @property
    def width(self) -> int:
        return self.cells.width

    @property
    def height(self) -> int:
        return self.cells.height

    @property
    def origin(self) -> Position:
        return self.chunk_id.origin_position(self.size)

    @property
    def bounds(self) -> Rect:
        origin = self.origin
        return Rect(left=origin.x, top=origin.y, width=self.width, height=self.height)

    def to_local(self, position: Position) -> GridPosition:
        origin = self.origin
        return GridPosition(x=position.x - origin.x, y=position.y - origin.y)

    def to_global(self, position: GridPosition) -> Position:
        origin = self.origin
        return Position(x=position.x + origin.x, y=position.y + origin.y)

    def contains(self, position: Position) -> bool:
        return self.bounds.contains(position)

    def all_positions(self) -> Iterator[Position]:
        for position in self.cells.all_positions():
            yield self.to_global(position)

    # --- Cells ---

    def get_cell_local(self, position: GridPosition) -> CellType:
        value = self.cells.get(position)
        if value is None:
            return CellType.OUT_OF_BOUNDS
        return CellType(value)

    def get_cell(self, position: Position) -> CellType:
        return self.get_cell_local(self.to_local(position))

    def set_cell_local(self, position: GridPosition, cell: CellType) -> None:
        self.cells.set(position, cell)

    def set_cell(self, position: Position, cell: CellType) -> None:
        self.set_cell_local(self.to_local(position), cell)

    def is_passable_local(self, position: GridPosition) -> bool:
        return self.get_cell_local(position).is_passable

    def is_passable(self, position: Position) -> bool:
        return self.is_passable_local(self.to_local(position))

    def traversable_neighbors(self, position: Position) -> Iterator[Position]:
        """Passable orthogonal neighbours inside this chunk."""
        for neighbor in cardinal_neighbors(position):
            if self.is_passable(neighbor):
                yield neighbor

    def nearby_positions(self, position: Position, radius: float = 1.0) -> list[Position]:
        """Positions of this chunk within radius of position, plus position."""
        nearby = [
            p for p in self.all_positions() if p.delta_to(position).magnitude <= radius
        ]
        if position not in nearby:
            nearby.append(position)
        return nearby

    def has_path_between(self, start: Position, end: Position) -> bool:
        """Reachability restricted to this chunk's cells."""
        return has_path_between(self.is_passable, start, end)

    # --- Generation ---

    def _random_position(
        self,
        rng: np.random.Generator,
        allowed: Callable[[GridPosition], bool],
    ) -> GridPosition:
        """Sample uniformly from the local cells satisfying allowed.

        Raises:
            GenerationError: If no cell satisfies allowed.
        """
        eligible = [p for p in self.cells.all_positions() if allowed(p)]
        if not eligible:
            raise GenerationError(f"No eligible cell left in chunk {self.chunk_id}")
        return eligible[int(rng.integers(len(eligible)))]

    def add_wall(self, rng: np.random.Generator) -> GridPosition:
        """Turn a random passable cell into a wall, ignoring connectivity."""
        position = self._random_position(rng, self.is_passable_local)
        self.set_cell_local(position, CellType.WALL)
        return position

    def add_many_walls(self, count: int, rng: np.random.Generator) -> None:
        for _ in range(count):
            self.add_wall(rng)

    def spawn_location(
        self, rng: np.random.Generator, reserved: Iterable[Position] = ()
    ) -> Position:
        """Random passable cell with no enemy, no item and not reserved."""
        blocked = set(reserved)

        def allowed(position: GridPosition) -> bool:
            if not self.is_passable_local(position):
                return False
            location = self.to_global(position)
            if location in blocked:
                return False
            return self.enemy_at(location) is None and self.item_at(location) is None

        return self.to_global(self._random_position(rng, allowed))

    def spawn_enemies(
        self,
        count: int,
        rng: np.random.Generator,
        enemy_types: list[str] | None = None,
        reserved: Iterable[Position] = (),
    ) -> None:
        """Spawn count enemies drawn uniformly from enemy_types."""
        enemy_types = enemy_types or ["alien"]
        reserved = list(reserved)
        for _ in range(count):
            descriptor = ENEMY_TYPES[enemy_types[int(rng.integers(len(enemy_types)))]]
            location = self.spawn_location(rng, reserved)
            enemy_id = (
                f"{descriptor.name.lower()}-{self.chunk_id.x}_{self.chunk_id.y}"
                f"-{len(self.enemies)}"
            )
            self.enemies.append(descriptor.spawn(enemy_id, location, rng))

    def spawn_item(
        self,
        kind: ItemKind,
        rng: np.random.Generator,
        chance: float = 1.0,
        reserved: Iterable[Position] = (),
    ) -> Item | None:
        """Spawn one item of kind with the given probability."""
        if rng.random() < chance:
            item = Item(kind=kind, location=self.spawn_location(rng, reserved))
            self.items.append(item)
            return item
        return None

    def spawn_items(
        self,
        rng: np.random.Generator,
        config: ItemSpawnConfig | None = None,
        reserved: Iterable[Position] = (),
    ) -> None:
        config = config or ItemSpawnConfig()
        reserved = list(reserved)
        for kind, chance in config.chances():
            self.spawn_item(kind, rng, chance=chance, reserved=reserved)

    # --- Occupants ---

    def enemy_at(self, position: Position) -> Enemy | None:
        for enemy in self.enemies:
            if enemy.location == position:
                return enemy
        return None

    def item_at(self, position: Position) -> Item | None:
        for item in self.items:
            if item.location == position:
                return item
        return None

    def add_enemy(self, enemy: Enemy) -> None:
        self.enemies.append(enemy)

    def remove_enemy(self, enemy: Enemy, dropped_item: Item | None = None) -> Item | None:
        """Remove enemy, leaving dropped_item at its location if that cell is free.

        Returns:
            The item placed, or None.
        """
        self.enemies.remove(enemy)
        if dropped_item is not None and self.item_at(enemy.location) is None:
            dropped_item.location = enemy.location
            self.items.append(dropped_item)
            return dropped_item
        return None

    def add_item(self, item: Item) -> None:
        self.items.append(item)

    def pick_up_item(self, position: Position) -> Item | None:
        item = self.item_at(position)
        if item is not None:
            self.items.remove(item)
        return item

    # --- Visibility ---

    def is_mapped(self, position: Position) -> bool:
        return bool(self.mapped.get(self.to_local(position)))

    def is_lit(self, position: Position) -> bool:
        return bool(self.lit.get(self.to_local(position)))

    def mark_mapped(self, position: Position) -> None:
        """Mapping is permanent; there is no way to clear it."""
        self.mapped.set(self.to_local(position), True)

    def set_lit(self, position: Position, lit: bool) -> None:
        self.lit.set(self.to_local(position), lit)

    # --- Rendering ---

    def render(self) -> str:
        """ASCII dump of cells with enemies and items overlaid."""
        lines = []
        for y, row in enumerate(self.cells.rows()):
            chars = []
            for x, value in enumerate(row):
                location = self.to_global(GridPosition(x=x, y=y))
                enemy = self.enemy_at(location)
                item = self.item_at(location)
                if enemy is not None:
                    chars.append(enemy.descriptor.glyph)
                elif item is not None:
                    chars.append(item.kind.to_char())
                else:
                    chars.append(CellType(value).to_char())
            lines.append("".join(chars))
        return "\n".join(lines) + "\n"

    def __str__(self) -> str:
        return self.render()
