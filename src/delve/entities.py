"""Player and enemy state.

Player and Enemy share their positional and health fields through Mob, a
plain data record. Behaviour that differs per kind (exhaustion, pickups,
decision making) lives in functions that check the concrete type.
"""

from dataclasses import dataclass, field
from enum import Enum

import numpy as np
from pydantic import BaseModel, Field

from .config import PlayerConfig
from .items import Item, ItemKind
from .types import Direction, Position


class Inventory(BaseModel, frozen=True):
    """Pickups collected so far, per item kind."""

    counts: dict[ItemKind, int] = Field(default_factory=dict)

    def __getitem__(self, kind: ItemKind) -> int:
        return self.counts.get(kind, 0)

    def with_item(self, kind: ItemKind) -> "Inventory":
        """Copy with one more of kind."""
        return Inventory(counts={**self.counts, kind: self[kind] + 1})


class BrainKind(str, Enum):
    """Enemy decision strategies."""

    WANDERER = "wanderer"
    PURSUER = "pursuer"


@dataclass
class Brain:
    """Per-enemy decision state: the strategy tag and a private random source."""

    kind: BrainKind
    rng: np.random.Generator


class Drop(BaseModel, frozen=True):
    """One drop table entry."""

    chance: float = Field(ge=0.0, le=1.0)
    item: ItemKind


class EnemyDescriptor(BaseModel, frozen=True):
    """Static description of an enemy type."""

    name: str
    brain: BrainKind
    attack_range: int = Field(default=1, ge=1)
    attack_damage: int = Field(default=1, ge=0)
    max_health: int = Field(default=1, gt=0)
    aggro_radius: int = Field(default=3, ge=0)
    drops: tuple[Drop, ...] = ()
    glyph: str = "e"

    def spawn(
        self, enemy_id: str, location: Position, rng: np.random.Generator
    ) -> "Enemy":
        """Create an enemy whose brain draws from a stream split off rng."""
        brain_rng = np.random.default_rng(int(rng.integers(2**63)))
        return Enemy(
            enemy_id=enemy_id,
            location=location,
            max_health=self.max_health,
            current_health=self.max_health,
            descriptor=self,
            brain=Brain(kind=self.brain, rng=brain_rng),
        )


ALIEN = EnemyDescriptor(
    name="Alien",
    brain=BrainKind.PURSUER,
    attack_range=1,
    max_health=1,
    aggro_radius=3,
    drops=(
        Drop(chance=0.2, item=ItemKind.HEAL_ONE),
        Drop(chance=0.1, item=ItemKind.HEAL_ALL),
    ),
)

DRONE = EnemyDescriptor(
    name="Drone",
    brain=BrainKind.WANDERER,
    attack_range=1,
    max_health=2,
    aggro_radius=0,
    drops=(Drop(chance=0.3, item=ItemKind.HEAL_ONE),),
    glyph="d",
)

ENEMY_TYPES: dict[str, EnemyDescriptor] = {
    "alien": ALIEN,
    "drone": DRONE,
}


@dataclass(eq=False, kw_only=True)
class Mob:
    """Fields shared by everything that moves and has health."""

    location: Position
    max_health: int
    current_health: int
    facing: Direction = Direction.UP

    @property
    def missing_health(self) -> int:
        return self.max_health - self.current_health

    @property
    def is_exhausted(self) -> bool:
        return self.current_health == 0


@dataclass(eq=False, kw_only=True)
class Player(Mob):
    """The player character."""

    light_radius: float = 2.5
    carrying_block: bool = False
    inventory: Inventory = field(default_factory=Inventory)

    @classmethod
    def spawn(cls, location: Position, config: PlayerConfig | None = None) -> "Player":
        config = config or PlayerConfig()
        return cls(
            location=location,
            max_health=config.max_health,
            current_health=config.max_health,
            light_radius=config.light_radius,
        )


@dataclass(eq=False, kw_only=True)
class Enemy(Mob):
    """An AI-controlled enemy."""

    enemy_id: str
    descriptor: EnemyDescriptor
    brain: Brain

    def roll_for_item(self, rng: np.random.Generator) -> Item | None:
        """Roll the drop table once; entries are cumulative thresholds."""
        roll = rng.random()
        threshold = 0.0
        for drop in self.descriptor.drops:
            threshold += drop.chance
            if roll < threshold:
                return Item(kind=drop.item, location=self.location)
        return None


def apply_health_change(mob: Mob, delta: int) -> bool:
    """Add delta to health, clamped to [0, max_health].

    Returns:
        True if this change brought health to 0 from above.
    """
    was_alive = mob.current_health > 0
    mob.current_health = max(min(mob.current_health + delta, mob.max_health), 0)
    return was_alive and mob.current_health == 0
