"""Game session and turn driver."""

from dataclasses import dataclass
from enum import Enum

import numpy as np
import structlog
from pydantic import BaseModel, model_validator

from .actions import Action, AttackAction, InteractAction, MoveAction, can_interact_with, execute
from .brain import select_action
from .chunk import Chunk, ChunkId
from .config import GameConfig
from .entities import Enemy, Mob, Player, apply_health_change
from .items import Item, ItemKind, apply_pickup
from .types import Direction, Position
from .visibility import reveal_around, update_visibility
from .world import World, seed_sequence

logger = structlog.get_logger()


class EventKind(str, Enum):
    MOVE = "move"
    INTERACT = "interact"


class LogicalEvent(BaseModel, frozen=True):
    """One player intent: a move in a direction, or interact."""

    kind: EventKind
    direction: Direction | None = None

    @model_validator(mode="after")
    def _check_direction(self) -> "LogicalEvent":
        if self.kind is EventKind.MOVE and self.direction is None:
            raise ValueError("move events need a direction")
        return self

    @classmethod
    def move(cls, direction: Direction) -> "LogicalEvent":
        return cls(kind=EventKind.MOVE, direction=direction)

    @classmethod
    def interact(cls) -> "LogicalEvent":
        return cls(kind=EventKind.INTERACT)


@dataclass
class TurnResult:
    """Summary of one resolved turn."""

    turn: int
    player_action: str | None
    enemies_acted: int = 0
    picked_up: ItemKind | None = None
    player_dead: bool = False


class GameSession:
    """
    Everything one game needs: the world, the player and the turn counter.

    Usage:
        session = new_game(seed=7)
        result = session.take_turn(LogicalEvent.move(Direction.RIGHT))
        session.world.is_lit(session.player.location)

    A turn is resolved completely inside take_turn; callers never observe a
    half-applied turn.
    """

    def __init__(self, config: GameConfig | None = None, seed: int | None = None):
        self.config = config or GameConfig()
        if seed is None:
            seed = self.config.seed
        if seed is None:
            # 64 bits of OS entropy, short enough to pass back via --seed.
            seed = int(np.random.SeedSequence().generate_state(1, np.uint64)[0])
        self.seed = seed
        self.random = np.random.default_rng(seed_sequence(seed))
        self.world = World(seed=seed, chunk_config=self.config.chunk)
        self.turn = 0
        self._lit: set[Position] = set()

        origin = self.world.get(ChunkId.origin())
        self.player = Player.spawn(origin.spawn_location(self.random), self.config.player)
        self.update_visibility()

        logger.info("game_started", seed=seed, player=str(self.player.location))

    # --- Queries ---

    @property
    def player_dead(self) -> bool:
        return self.player.is_exhausted

    @property
    def focused_chunk(self) -> Chunk:
        """Chunk the player stands in."""
        return self.world.chunk_for(self.player.location)

    def nearby_chunks(self, radius: int = 1) -> list[Chunk]:
        return self.world.chunks_near(self.player.location, radius)

    def character_at(self, position: Position) -> Mob | None:
        """Player or enemy standing on position."""
        if self.player.location == position:
            return self.player
        return self.world.enemy_at(position)

    def active_enemies(self) -> list[Enemy]:
        """Enemies near the player, in chunk row order then list order."""
        enemies: list[Enemy] = []
        for chunk in self.nearby_chunks(self.config.active_chunk_radius):
            enemies.extend(chunk.enemies)
        return enemies

    # --- Player input ---

    def action_for(self, player: Player, event: LogicalEvent) -> Action | None:
        """Translate an intent into an action, or None if it does nothing."""
        if event.kind is EventKind.INTERACT:
            target = player.location.offset(player.facing)
            if can_interact_with(self, player, target):
                return InteractAction(mob=player, target=target)
            return None

        direction = event.direction
        target = player.location.offset(direction)
        if self.world.enemy_at(target) is not None:
            return AttackAction(mob=player, target=target, direction=direction)
        return MoveAction(mob=player, destination=target, direction=direction)

    def take_turn(self, event: LogicalEvent) -> TurnResult:
        """Resolve one full turn for a player intent.

        Once the player is dead, turns are ignored.
        """
        if self.player_dead:
            logger.warning("turn_ignored_player_dead", turn=self.turn)
            return TurnResult(turn=self.turn, player_action=None, player_dead=True)

        action = self.action_for(self.player, event)
        if action is not None:
            execute(self, action)
        result = self.next_turn()
        result.player_action = action.name if action is not None else None

        logger.debug(
            "turn_resolved",
            turn=result.turn,
            player_action=result.player_action,
            enemies_acted=result.enemies_acted,
            player=str(self.player.location),
            health=self.player.current_health,
        )
        return result

    def next_turn(self) -> TurnResult:
        """Let enemies act, collect any item underfoot and update lighting."""
        enemies_acted = 0
        for enemy in self.active_enemies():
            if enemy.is_exhausted:
                continue
            action = select_action(self, enemy)
            if action is None:
                continue
            execute(self, action)
            enemies_acted += 1

        item = self.pick_up_item()
        self.update_visibility()
        self.turn += 1

        return TurnResult(
            turn=self.turn,
            player_action=None,
            enemies_acted=enemies_acted,
            picked_up=item.kind if item is not None else None,
            player_dead=self.player_dead,
        )

    # --- State changes ---

    def change_health(self, mob: Mob, delta: int) -> None:
        """Apply a health change and handle exhaustion."""
        if apply_health_change(mob, delta):
            self._did_exhaust_health(mob)

    def _did_exhaust_health(self, mob: Mob) -> None:
        if isinstance(mob, Enemy):
            drop = mob.roll_for_item(self.random)
            placed = self.world.remove_enemy(mob, dropped_item=drop)
            logger.debug(
                "enemy_killed",
                enemy_id=mob.enemy_id,
                location=str(mob.location),
                drop=placed.kind.value if placed is not None else None,
            )
        elif isinstance(mob, Player):
            logger.info("player_died", turn=self.turn, location=str(mob.location))

    def did_move_character(self, mob: Mob, old_location: Position) -> None:
        """Keep chunk enemy lists in step with enemy locations."""
        if isinstance(mob, Enemy):
            self.world.relocate_enemy(mob, old_location)

    def pick_up_item(self) -> Item | None:
        item = self.world.pick_up_item(self.player.location)
        if item is not None:
            apply_pickup(self, item)
        return item

    def update_visibility(self) -> None:
        self._lit = update_visibility(
            self.world, self.player.location, self.player.light_radius, self._lit
        )

    def reveal_around(self, center: Position, radius: float) -> int:
        return reveal_around(self.world, center, radius)


def new_game(seed: int | None = None, config: GameConfig | None = None) -> GameSession:
    """Start a session. Equal seeds and inputs give identical games."""
    return GameSession(config=config, seed=seed)
