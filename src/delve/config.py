"""Game configuration models and TOML loading."""

import tomllib
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field

from .items import ItemKind
from .types import Size


class ItemSpawnConfig(BaseModel):
    """Per-chunk spawn chance for each item kind (0-1)."""

    area_reveal: float = Field(default=0.50, ge=0.0, le=1.0)
    heal_one: float = Field(default=0.70, ge=0.0, le=1.0)
    heal_all: float = Field(default=0.20, ge=0.0, le=1.0)
    torch: float = Field(default=0.05, ge=0.0, le=1.0)
    max_health_up: float = Field(default=0.0, ge=0.0, le=1.0)

    def chances(self) -> list[tuple[ItemKind, float]]:
        """Chances in spawn order; the order fixes the random draw sequence."""
        return [
            (ItemKind.AREA_REVEAL, self.area_reveal),
            (ItemKind.HEAL_ONE, self.heal_one),
            (ItemKind.HEAL_ALL, self.heal_all),
            (ItemKind.TORCH, self.torch),
            (ItemKind.MAX_HEALTH_UP, self.max_health_up),
        ]


class MazeConfig(BaseModel):
    """Maze carving parameters for maze-style chunks."""

    wall_count: int = Field(default=40, ge=0, description="Walls placed per chunk")
    seal: bool = Field(
        default=False, description="Wall off cells unreachable from the entrance"
    )
    max_attempts: int | None = Field(
        default=None, description="Rejected candidates allowed per wall (None = all)"
    )


class ChunkConfig(BaseModel):
    """Chunk dimensions and generation parameters."""

    width: int = Field(default=10, gt=0, description="Chunk width in tiles")
    height: int = Field(default=10, gt=0, description="Chunk height in tiles")
    style: Literal["scatter", "maze"] = Field(
        default="scatter", description="Wall layout strategy"
    )
    wall_count: int = Field(
        default=10, ge=0, description="Unconditional walls for scatter chunks"
    )
    enemy_count: int = Field(default=2, ge=0, description="Enemies spawned per chunk")
    enemy_types: list[Literal["alien", "drone"]] = Field(
        default_factory=lambda: ["alien"], min_length=1, description="Enemy pool"
    )
    items: ItemSpawnConfig = Field(default_factory=ItemSpawnConfig)
    maze: MazeConfig = Field(default_factory=MazeConfig)

    @property
    def size(self) -> Size:
        return Size(width=self.width, height=self.height)


class PlayerConfig(BaseModel):
    """Starting player stats."""

    max_health: int = Field(default=10, gt=0)
    light_radius: float = Field(default=2.5, gt=0.0)


class GameConfig(BaseModel):
    """Complete configuration for a game session."""

    seed: int | None = Field(
        default=None, description="World seed (None = fresh OS entropy)"
    )
    chunk: ChunkConfig = Field(default_factory=ChunkConfig)
    player: PlayerConfig = Field(default_factory=PlayerConfig)
    active_chunk_radius: int = Field(
        default=1, ge=0, description="Chunks around the player whose enemies act"
    )
    reveal_radius: float = Field(
        default=10.0, gt=0.0, description="Radius mapped by an area reveal pickup"
    )


def load_config(config_path: Path) -> GameConfig:
    """Load configuration from a TOML file.

    Args:
        config_path: Path to the TOML config file.

    Returns:
        Parsed GameConfig.

    Raises:
        FileNotFoundError: If config file doesn't exist.
        tomllib.TOMLDecodeError: If TOML is malformed.
        pydantic.ValidationError: If values are out of range.
    """
    with open(config_path, "rb") as f:
        data = tomllib.load(f)
    return GameConfig.model_validate(data)
