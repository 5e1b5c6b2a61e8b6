"""Discrete actions and their execution."""

from dataclasses import dataclass
from typing import TYPE_CHECKING, Union

import structlog

from .entities import Mob, Player
from .grid import CellType
from .types import Direction, Position

if TYPE_CHECKING:
    from .game import GameSession

logger = structlog.get_logger()


@dataclass(frozen=True)
class MoveAction:
    """Step mob to destination, facing direction."""

    mob: Mob
    destination: Position
    direction: Direction

    name = "move"


@dataclass(frozen=True)
class AttackAction:
    """Damage whatever character stands on target."""

    mob: Mob
    target: Position
    direction: Direction
    amount: int = 1

    name = "attack"


@dataclass(frozen=True)
class InteractAction:
    """Pick up or put down a block at target."""

    mob: Mob
    target: Position

    name = "interact"


Action = Union[MoveAction, AttackAction, InteractAction]


def can_interact_with(session: "GameSession", mob: Mob, target: Position) -> bool:
    """Whether mob may pick up or put down a block at target.

    Only the player interacts. Carrying a block, it can be put on an empty
    cell with no enemy or item; otherwise a wall can be picked up.
    """
    if not isinstance(mob, Player):
        return False
    world = session.world
    cell = world.get_cell(target)
    if mob.carrying_block:
        return (
            cell.is_passable
            and world.enemy_at(target) is None
            and world.item_at(target) is None
        )
    return cell.is_wall


def execute(session: "GameSession", action: Action) -> None:
    """Apply action to the session state."""
    if isinstance(action, MoveAction):
        _execute_move(session, action)
    elif isinstance(action, AttackAction):
        _execute_attack(session, action)
    elif isinstance(action, InteractAction):
        _execute_interact(session, action)
    else:
        raise TypeError(f"Unknown action {action!r}")


def _execute_move(session: "GameSession", action: MoveAction) -> None:
    mob = action.mob
    mob.facing = action.direction
    if not session.world.is_passable(action.destination):
        logger.debug("move_blocked", to_pos=str(action.destination))
        return
    old_location = mob.location
    mob.location = action.destination
    session.did_move_character(mob, old_location)


def _execute_attack(session: "GameSession", action: AttackAction) -> None:
    action.mob.facing = action.direction
    target = session.character_at(action.target)
    if target is None:
        logger.debug("attack_missed", target=str(action.target))
        return
    session.change_health(target, -action.amount)


def _execute_interact(session: "GameSession", action: InteractAction) -> None:
    player = action.mob
    if not isinstance(player, Player):
        return
    if not can_interact_with(session, player, action.target):
        return
    if player.carrying_block:
        session.world.set_cell(action.target, CellType.WALL)
        player.carrying_block = False
        logger.debug("block_placed", target=str(action.target))
    else:
        session.world.set_cell(action.target, CellType.EMPTY)
        player.carrying_block = True
        logger.debug("block_picked_up", target=str(action.target))
