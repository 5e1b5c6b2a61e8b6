"""Tests for the game session and turn loop."""

import numpy as np
import pytest
from pydantic import ValidationError

from delve.chunk import ChunkId
from delve.config import ChunkConfig, GameConfig
from delve.entities import DRONE, BrainKind, Drop, EnemyDescriptor
from delve.game import EventKind, GameSession, LogicalEvent, new_game
from delve.grid import CellType
from delve.items import Item, ItemKind
from delve.types import Direction, Position

FRAGILE = EnemyDescriptor(
    name="Fragile",
    brain=BrainKind.WANDERER,
    max_health=1,
    drops=(Drop(chance=1.0, item=ItemKind.HEAL_ONE),),
)


def _snapshot(session: GameSession) -> tuple:
    player = session.player
    enemies = [(e.enemy_id, e.location, e.current_health) for e in session.world.all_enemies()]
    return (player.location, player.current_health, player.facing, enemies)


class TestLogicalEvent:
    """Tests for player intents."""

    def test_move_requires_direction(self):
        with pytest.raises(ValidationError):
            LogicalEvent(kind=EventKind.MOVE)

    def test_constructors(self):
        assert LogicalEvent.move(Direction.LEFT).direction is Direction.LEFT
        assert LogicalEvent.interact().kind is EventKind.INTERACT


class TestSessionSetup:
    """Tests for session creation."""

    def test_player_spawns_on_open_origin_cell(self):
        session = new_game(seed=3)

        location = session.player.location
        assert session.world.chunk_id_for(location) == ChunkId.origin()
        assert session.world.is_passable(location)
        assert session.world.enemy_at(location) is None
        assert session.world.is_lit(location)

    def test_explicit_seed_overrides_config(self, open_config: GameConfig):
        assert GameSession(config=open_config, seed=9).seed == 9
        assert GameSession(config=open_config).seed == 1

    def test_missing_seed_is_recorded(self):
        session = new_game()

        assert isinstance(session.seed, int)
        assert 0 <= session.seed < 2**64
        replay = new_game(seed=session.seed)
        assert replay.player.location == session.player.location

    def test_same_seed_same_game(self):
        """Equal seeds and inputs give identical turn-by-turn state."""
        moves = [Direction.RIGHT, Direction.RIGHT, Direction.DOWN, Direction.LEFT] * 5
        first = new_game(seed=42)
        second = new_game(seed=42)

        assert _snapshot(first) == _snapshot(second)
        for direction in moves:
            first.take_turn(LogicalEvent.move(direction))
            second.take_turn(LogicalEvent.move(direction))
            assert _snapshot(first) == _snapshot(second)


class TestActionFor:
    """Tests for translating intents."""

    def test_move_into_enemy_is_attack(self, session: GameSession, place_enemy):
        place_enemy(Position(x=5, y=4))

        action = session.action_for(session.player, LogicalEvent.move(Direction.UP))

        assert action.name == "attack"

    def test_plain_move(self, session: GameSession):
        action = session.action_for(session.player, LogicalEvent.move(Direction.LEFT))

        assert action.name == "move"
        assert action.destination == Position(x=4, y=5)

    def test_interact_uses_facing(self, session: GameSession):
        session.player.facing = Direction.RIGHT
        session.world.set_cell(Position(x=6, y=5), CellType.WALL)

        action = session.action_for(session.player, LogicalEvent.interact())

        assert action.name == "interact"
        assert action.target == Position(x=6, y=5)

    def test_interact_with_nothing_is_none(self, session: GameSession):
        assert session.action_for(session.player, LogicalEvent.interact()) is None


class TestTakeTurn:
    """Tests for whole-turn resolution."""

    def test_turn_counter_advances(self, session: GameSession):
        result = session.take_turn(LogicalEvent.move(Direction.DOWN))

        assert result.turn == 1
        assert session.turn == 1
        assert result.player_action == "move"
        assert session.player.location == Position(x=5, y=6)

    def test_noop_turn_still_advances(self, session: GameSession):
        result = session.take_turn(LogicalEvent.interact())

        assert result.player_action is None
        assert session.turn == 1

    def test_kill_then_collect_drop(self, session: GameSession, place_enemy):
        place_enemy(Position(x=6, y=5), FRAGILE)
        session.player.current_health = 5

        result = session.take_turn(LogicalEvent.move(Direction.RIGHT))

        assert result.player_action == "attack"
        assert session.world.enemy_at(Position(x=6, y=5)) is None
        assert session.world.item_at(Position(x=6, y=5)).kind is ItemKind.HEAL_ONE

        result = session.take_turn(LogicalEvent.move(Direction.RIGHT))

        assert result.picked_up is ItemKind.HEAL_ONE
        assert session.player.current_health == 6
        assert session.player.inventory[ItemKind.HEAL_ONE] == 1
        assert session.world.item_at(Position(x=6, y=5)) is None

    def test_player_death_stops_turns(self, session: GameSession, place_enemy):
        """Once the player is dead, further intents change nothing."""
        place_enemy(Position(x=6, y=5))
        session.player.current_health = 1

        result = session.take_turn(LogicalEvent.interact())

        assert result.player_dead
        assert session.player_dead
        turn = session.turn
        location = session.player.location

        ignored = session.take_turn(LogicalEvent.move(Direction.LEFT))

        assert ignored.player_action is None
        assert ignored.player_dead
        assert session.turn == turn
        assert session.player.location == location

    def test_enemy_crosses_chunk_border(self, session: GameSession, place_enemy):
        """An enemy stepping into another chunk is listed there."""
        drone = place_enemy(Position(x=9, y=5), DRONE)
        for position in (Position(x=9, y=4), Position(x=9, y=6), Position(x=8, y=5)):
            session.world.set_cell(position, CellType.WALL)

        session.next_turn()

        assert drone.location == Position(x=10, y=5)
        assert drone in session.world.get(ChunkId(x=1, y=0)).enemies
        assert drone not in session.world.get(ChunkId.origin()).enemies

    def test_far_enemies_do_not_act(self, session: GameSession, place_enemy):
        drone = place_enemy(Position(x=35, y=5), DRONE)

        result = session.next_turn()

        assert result.enemies_acted == 0
        assert drone.location == Position(x=35, y=5)

    def test_enemies_stay_in_their_chunks(self):
        """Every enemy is listed once, in the chunk containing it."""
        config = GameConfig(seed=8, chunk=ChunkConfig(enemy_count=4, enemy_types=["drone"]))
        session = GameSession(config=config)
        rng = np.random.default_rng(0)
        directions = list(Direction)

        for _ in range(40):
            session.take_turn(LogicalEvent.move(directions[int(rng.integers(4))]))
            seen = []
            for chunk_id, chunk in session.world.loaded_chunks().items():
                for enemy in chunk.enemies:
                    assert session.world.chunk_id_for(enemy.location) == chunk_id
                    seen.append(id(enemy))
            assert len(seen) == len(set(seen))

    def test_mapping_never_shrinks(self):
        session = new_game(seed=5)
        rng = np.random.default_rng(1)
        directions = list(Direction)
        snapshot: dict[ChunkId, np.ndarray] = {}

        for _ in range(30):
            session.take_turn(LogicalEvent.move(directions[int(rng.integers(4))]))
            for chunk_id, before in snapshot.items():
                after = session.world.get(chunk_id).mapped.array
                assert np.all(after[before])
            snapshot = {
                chunk_id: chunk.mapped.array.copy()
                for chunk_id, chunk in session.world.loaded_chunks().items()
            }


class TestItemEffects:
    """Tests for pickup effects."""

    @pytest.fixture
    def drop_item(self, session: GameSession):
        def _drop(kind: ItemKind) -> None:
            location = Position(x=5, y=6)
            session.world.chunk_for(location).add_item(Item(kind=kind, location=location))
            session.take_turn(LogicalEvent.move(Direction.DOWN))

        return _drop

    def test_torch_widens_light(self, session: GameSession, drop_item):
        drop_item(ItemKind.TORCH)

        assert session.player.light_radius == pytest.approx(3.5)
        assert session.world.is_lit(Position(x=8, y=6))

    def test_heal_all(self, session: GameSession, drop_item):
        session.player.current_health = 2

        drop_item(ItemKind.HEAL_ALL)

        assert session.player.current_health == session.player.max_health

    def test_max_health_up(self, session: GameSession, drop_item):
        drop_item(ItemKind.MAX_HEALTH_UP)

        assert session.player.max_health == 11
        assert session.player.current_health == 10

    def test_area_reveal(self, session: GameSession, drop_item):
        drop_item(ItemKind.AREA_REVEAL)

        assert session.world.is_mapped(Position(x=5, y=15))
        assert not session.world.is_lit(Position(x=5, y=15))
