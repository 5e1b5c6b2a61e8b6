"""Shared test fixtures for delve tests."""

from typing import Callable

import numpy as np
import pytest

from delve.chunk import Chunk, ChunkId
from delve.config import ChunkConfig, GameConfig, ItemSpawnConfig
from delve.entities import ALIEN, Enemy, EnemyDescriptor
from delve.game import GameSession
from delve.grid import CellType, Grid
from delve.types import Position, Size
from delve.world import World


@pytest.fixture
def open_chunk_config() -> ChunkConfig:
    """Chunks with no walls, enemies or items."""
    return ChunkConfig(
        wall_count=0,
        enemy_count=0,
        items=ItemSpawnConfig(
            area_reveal=0.0, heal_one=0.0, heal_all=0.0, torch=0.0, max_health_up=0.0
        ),
    )


@pytest.fixture
def open_config(open_chunk_config: ChunkConfig) -> GameConfig:
    """Game config whose every chunk is an empty room."""
    return GameConfig(seed=1, chunk=open_chunk_config)


@pytest.fixture
def open_world(open_chunk_config: ChunkConfig) -> World:
    """World of empty 10x10 chunks."""
    return World(seed=0, chunk_config=open_chunk_config)


@pytest.fixture
def empty_chunk() -> Chunk:
    """Empty 10x10 origin chunk built directly from a grid."""
    return Chunk(ChunkId.origin(), Grid.full(Size(width=10, height=10), CellType.EMPTY))


@pytest.fixture
def session(open_config: GameConfig) -> GameSession:
    """Session in empty rooms with the player at (5, 5) facing up."""
    game = GameSession(config=open_config)
    game.player.location = Position(x=5, y=5)
    game.update_visibility()
    return game


@pytest.fixture
def place_enemy(session: GameSession) -> Callable[..., Enemy]:
    """Factory that drops an enemy into the session's world."""

    def _place(
        location: Position, descriptor: EnemyDescriptor = ALIEN, seed: int = 0
    ) -> Enemy:
        enemy_id = f"{descriptor.name.lower()}-test-{location.x}_{location.y}"
        enemy = descriptor.spawn(enemy_id, location, np.random.default_rng(seed))
        session.world.chunk_for(location).add_enemy(enemy)
        return enemy

    return _place
