"""Unbounded world made of lazily generated chunks."""

from typing import Iterator, Mapping

import numpy as np
import structlog
from pydantic import BaseModel, Field, PrivateAttr

from .chunk import Chunk, ChunkId
from .config import ChunkConfig
from .entities import Enemy
from .grid import CellType
from .items import Item
from .types import Position, Size

logger = structlog.get_logger()


def zigzag(value: int) -> int:
    """Map a signed integer onto the non-negative integers, one to one."""
    return 2 * value if value >= 0 else -2 * value - 1


def seed_sequence(seed: int, *key: int) -> np.random.SeedSequence:
    """Independent, well-mixed seed stream for (seed, key...).

    Keys may be negative; every distinct tuple yields an unrelated stream.
    """
    return np.random.SeedSequence(
        entropy=zigzag(seed), spawn_key=tuple(zigzag(k) for k in key)
    )


class World(BaseModel):
    """
    Owner of every chunk, keyed by ChunkId.

    Chunks are generated on first access from (seed, chunk id) alone and
    kept for the lifetime of the world, so the same id always returns the
    same Chunk instance.
    """

    seed: int = 0
    chunk_config: ChunkConfig = Field(default_factory=ChunkConfig)

    _chunks: dict[ChunkId, Chunk] = PrivateAttr(default_factory=dict)

    @property
    def chunk_size(self) -> Size:
        return self.chunk_config.size

    # --- Chunk access ---

    def get(self, chunk_id: ChunkId) -> Chunk:
        """Return the chunk for chunk_id, generating it on first access."""
        chunk = self._chunks.get(chunk_id)
        if chunk is None:
            chunk = self._generate_chunk(chunk_id)
            self._chunks[chunk_id] = chunk
        return chunk

    def _generate_chunk(self, chunk_id: ChunkId) -> Chunk:
        rng = np.random.default_rng(seed_sequence(self.seed, chunk_id.x, chunk_id.y))
        return Chunk.generate(chunk_id, rng, self.chunk_config)

    def chunk_id_for(self, position: Position) -> ChunkId:
        return ChunkId.from_position(position, self.chunk_size)

    def chunk_for(self, position: Position) -> Chunk:
        """Chunk owning position."""
        return self.get(self.chunk_id_for(position))

    def chunks_near(self, position: Position, radius: int = 1) -> list[Chunk]:
        """Chunks within radius chunks of position's chunk, row by row."""
        center = self.chunk_id_for(position)
        return [
            self.get(ChunkId(x=center.x + dx, y=center.y + dy))
            for dy in range(-radius, radius + 1)
            for dx in range(-radius, radius + 1)
        ]

    def loaded_chunks(self) -> Mapping[ChunkId, Chunk]:
        """Read-only view of chunks generated so far."""
        return self._chunks

    def chunk_count(self) -> int:
        return len(self._chunks)

    # --- Cell queries ---

    def get_cell(self, position: Position) -> CellType:
        return self.chunk_for(position).get_cell(position)

    def set_cell(self, position: Position, cell: CellType) -> None:
        self.chunk_for(position).set_cell(position, cell)

    def is_passable(self, position: Position) -> bool:
        return self.chunk_for(position).is_passable(position)

    def is_lit(self, position: Position) -> bool:
        return self.chunk_for(position).is_lit(position)

    def is_mapped(self, position: Position) -> bool:
        return self.chunk_for(position).is_mapped(position)

    # --- Occupants ---

    def enemy_at(self, position: Position) -> Enemy | None:
        return self.chunk_for(position).enemy_at(position)

    def item_at(self, position: Position) -> Item | None:
        return self.chunk_for(position).item_at(position)

    def pick_up_item(self, position: Position) -> Item | None:
        return self.chunk_for(position).pick_up_item(position)

    def all_enemies(self) -> Iterator[Enemy]:
        """Enemies of every loaded chunk."""
        for chunk in self._chunks.values():
            yield from chunk.enemies

    def remove_enemy(self, enemy: Enemy, dropped_item: Item | None = None) -> Item | None:
        """Remove enemy from its chunk, optionally leaving a drop behind."""
        return self.chunk_for(enemy.location).remove_enemy(enemy, dropped_item)

    def relocate_enemy(self, enemy: Enemy, old_location: Position) -> bool:
        """Move enemy between chunk lists after its location changed.

        Returns:
            True if the enemy changed chunks.
        """
        old_chunk = self.chunk_for(old_location)
        new_chunk = self.chunk_for(enemy.location)
        if old_chunk is new_chunk:
            return False
        old_chunk.remove_enemy(enemy)
        new_chunk.add_enemy(enemy)
        logger.debug(
            "enemy_migrated",
            enemy_id=enemy.enemy_id,
            from_chunk=str(old_chunk.chunk_id),
            to_chunk=str(new_chunk.chunk_id),
        )
        return True
