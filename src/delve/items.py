"""Pickup items and their effects."""

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Callable

import structlog

from .types import Position

if TYPE_CHECKING:
    from .game import GameSession

logger = structlog.get_logger()


class ItemKind(str, Enum):
    """Kinds of pickup."""

    AREA_REVEAL = "area_reveal"
    HEAL_ONE = "heal_one"
    HEAL_ALL = "heal_all"
    TORCH = "torch"
    MAX_HEALTH_UP = "max_health_up"

    def to_char(self) -> str:
        return "*"


@dataclass(eq=False)
class Item:
    """An item lying on a tile until picked up."""

    kind: ItemKind
    location: Position


ItemEffect = Callable[["GameSession"], None]


def _reveal_area(session: "GameSession") -> None:
    session.reveal_around(session.player.location, session.config.reveal_radius)


def _heal_one(session: "GameSession") -> None:
    session.change_health(session.player, 1)


def _heal_all(session: "GameSession") -> None:
    session.change_health(session.player, session.player.max_health)


def _torch(session: "GameSession") -> None:
    session.player.light_radius += 1


def _max_health_up(session: "GameSession") -> None:
    session.player.max_health += 1


ITEM_EFFECTS: dict[ItemKind, ItemEffect] = {
    ItemKind.AREA_REVEAL: _reveal_area,
    ItemKind.HEAL_ONE: _heal_one,
    ItemKind.HEAL_ALL: _heal_all,
    ItemKind.TORCH: _torch,
    ItemKind.MAX_HEALTH_UP: _max_health_up,
}


def apply_pickup(session: "GameSession", item: Item) -> None:
    """Run the item's effect and record it in the player's inventory."""
    ITEM_EFFECTS[item.kind](session)
    player = session.player
    player.inventory = player.inventory.with_item(item.kind)
    logger.debug("item_picked_up", kind=item.kind.value, location=str(item.location))
