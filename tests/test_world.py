"""Tests for the chunked world."""

import numpy as np
import pytest

from delve.chunk import ChunkId
from delve.entities import DRONE
from delve.grid import CellType
from delve.types import GridPosition, Position
from delve.world import World, seed_sequence, zigzag


class TestSeeding:
    """Tests for per-chunk seed derivation."""

    @pytest.mark.parametrize("value,expected", [(0, 0), (-1, 1), (1, 2), (-2, 3), (2, 4)])
    def test_zigzag(self, value: int, expected: int):
        assert zigzag(value) == expected

    def test_negative_keys_accepted(self):
        """Negative seeds and chunk coordinates give valid generators."""
        rng = np.random.default_rng(seed_sequence(-5, -1, -2))

        assert 0 <= rng.random() < 1

    def test_swapped_coordinates_differ(self):
        a = np.random.default_rng(seed_sequence(0, 1, 2)).integers(2**32, size=4)
        b = np.random.default_rng(seed_sequence(0, 2, 1)).integers(2**32, size=4)

        assert not np.array_equal(a, b)


class TestChunkCache:
    """Tests for lazy chunk generation."""

    def test_same_id_same_instance(self):
        world = World(seed=5)

        assert world.get(ChunkId(x=2, y=-3)) is world.get(ChunkId(x=2, y=-3))
        assert world.chunk_count() == 1

    def test_equal_seeds_equal_chunks(self):
        """Chunk content depends only on seed and chunk id."""
        first = World(seed=5)
        second = World(seed=5)
        # Different access order must not matter.
        second.get(ChunkId(x=0, y=0))

        a = first.get(ChunkId(x=-4, y=7))
        b = second.get(ChunkId(x=-4, y=7))

        np.testing.assert_array_equal(a.cells.array, b.cells.array)
        assert [e.location for e in a.enemies] == [e.location for e in b.enemies]
        assert [(i.kind, i.location) for i in a.items] == [
            (i.kind, i.location) for i in b.items
        ]

    def test_different_seeds_differ(self):
        ids = [ChunkId(x=x, y=0) for x in range(4)]
        first = World(seed=1)
        second = World(seed=2)

        assert any(
            not np.array_equal(first.get(cid).cells.array, second.get(cid).cells.array)
            for cid in ids
        )

    def test_mirrored_chunks_differ(self):
        world = World(seed=0)

        assert not np.array_equal(
            world.get(ChunkId(x=1, y=2)).cells.array,
            world.get(ChunkId(x=2, y=1)).cells.array,
        )

    def test_chunks_near_row_major(self, open_world: World):
        chunks = open_world.chunks_near(Position(x=5, y=5), radius=1)

        assert len(chunks) == 9
        assert chunks[0].chunk_id == ChunkId(x=-1, y=-1)
        assert chunks[1].chunk_id == ChunkId(x=0, y=-1)
        assert chunks[4].chunk_id == ChunkId(x=0, y=0)
        assert chunks[8].chunk_id == ChunkId(x=1, y=1)


class TestWorldQueries:
    """Tests for global coordinate queries."""

    def test_set_cell_routes_to_owning_chunk(self, open_world: World):
        open_world.set_cell(Position(x=-1, y=-1), CellType.WALL)

        chunk = open_world.get(ChunkId(x=-1, y=-1))
        assert chunk.get_cell_local(GridPosition(x=9, y=9)) is CellType.WALL
        assert not open_world.is_passable(Position(x=-1, y=-1))
        assert open_world.is_passable(Position(x=0, y=0))

    def test_relocate_enemy_across_chunks(self, open_world: World):
        """An enemy crossing a border moves to the new chunk's list."""
        old = Position(x=9, y=5)
        enemy = DRONE.spawn("d", old, np.random.default_rng(0))
        open_world.chunk_for(old).add_enemy(enemy)

        enemy.location = Position(x=10, y=5)
        moved = open_world.relocate_enemy(enemy, old)

        assert moved
        assert enemy not in open_world.get(ChunkId(x=0, y=0)).enemies
        assert enemy in open_world.get(ChunkId(x=1, y=0)).enemies
        assert open_world.enemy_at(Position(x=10, y=5)) is enemy
        assert list(open_world.all_enemies()) == [enemy]

    def test_relocate_within_chunk_is_noop(self, open_world: World):
        old = Position(x=3, y=3)
        enemy = DRONE.spawn("d", old, np.random.default_rng(0))
        open_world.chunk_for(old).add_enemy(enemy)

        enemy.location = Position(x=4, y=3)

        assert not open_world.relocate_enemy(enemy, old)
        assert open_world.get(ChunkId.origin()).enemies == [enemy]
