"""Turn-based grid world engine: chunked terrain, enemies and fog of war."""

from .actions import (
    Action,
    AttackAction,
    InteractAction,
    MoveAction,
    can_interact_with,
    execute,
)
from .brain import possible_actions, select_action
from .chunk import CHUNK_SIZE, Chunk, ChunkId
from .config import (
    ChunkConfig,
    GameConfig,
    ItemSpawnConfig,
    MazeConfig,
    PlayerConfig,
    load_config,
)
from .entities import (
    ALIEN,
    DRONE,
    ENEMY_TYPES,
    Brain,
    BrainKind,
    Drop,
    Enemy,
    EnemyDescriptor,
    Inventory,
    Mob,
    Player,
)
from .exceptions import DelveError, GenerationError, InvalidCoordinateError
from .game import EventKind, GameSession, LogicalEvent, TurnResult, new_game
from .grid import CellType, Grid
from .items import Item, ItemKind
from .maze import (
    Level,
    MazeGenerator,
    NamedLocation,
    generate_level,
    generate_levels,
    has_path_between,
)
from .types import Delta, Direction, GridPosition, Position, Rect, Size
from .visibility import reveal_around, update_visibility
from .world import World

__all__ = [
    # Types
    "Delta",
    "Direction",
    "GridPosition",
    "Position",
    "Rect",
    "Size",
    # Grid
    "CellType",
    "Grid",
    # Maze
    "Level",
    "MazeGenerator",
    "NamedLocation",
    "generate_level",
    "generate_levels",
    "has_path_between",
    # Chunks and world
    "CHUNK_SIZE",
    "Chunk",
    "ChunkId",
    "World",
    # Entities
    "ALIEN",
    "DRONE",
    "ENEMY_TYPES",
    "Brain",
    "BrainKind",
    "Drop",
    "Enemy",
    "EnemyDescriptor",
    "Inventory",
    "Mob",
    "Player",
    "Item",
    "ItemKind",
    # Actions and AI
    "Action",
    "AttackAction",
    "InteractAction",
    "MoveAction",
    "can_interact_with",
    "execute",
    "possible_actions",
    "select_action",
    # Visibility
    "reveal_around",
    "update_visibility",
    # Session
    "EventKind",
    "GameSession",
    "LogicalEvent",
    "TurnResult",
    "new_game",
    # Config
    "ChunkConfig",
    "GameConfig",
    "ItemSpawnConfig",
    "MazeConfig",
    "PlayerConfig",
    "load_config",
    # Exceptions
    "DelveError",
    "GenerationError",
    "InvalidCoordinateError",
]
