"""Developer console: play a seeded session and dump the map as text."""

import argparse
import logging
from pathlib import Path

import numpy as np
import structlog

from .config import GameConfig, load_config
from .chunk import Chunk
from .game import GameSession, LogicalEvent
from .types import Direction, Position
from .world import seed_sequence

MOVE_KEYS: dict[str, Direction] = {
    "u": Direction.UP,
    "d": Direction.DOWN,
    "l": Direction.LEFT,
    "r": Direction.RIGHT,
}


def parse_moves(script: str) -> list[LogicalEvent]:
    """Turn a script like "uurri" into events; i means interact.

    Raises:
        ValueError: On any other character.
    """
    events = []
    for key in script.lower():
        if key in MOVE_KEYS:
            events.append(LogicalEvent.move(MOVE_KEYS[key]))
        elif key == "i":
            events.append(LogicalEvent.interact())
        elif not key.isspace():
            raise ValueError(f"Unknown move '{key}' (expected u, d, l, r or i)")
    return events


def render_map(session: GameSession, radius: int = 1) -> str:
    """Text view of the chunks around the player.

    Unmapped tiles are blank and enemies show only where lit.
    """
    world = session.world
    chunks = session.nearby_chunks(radius)
    left = min(chunk.bounds.left for chunk in chunks)
    top = min(chunk.bounds.top for chunk in chunks)
    right = max(chunk.bounds.right for chunk in chunks)
    bottom = max(chunk.bounds.bottom for chunk in chunks)

    lines = []
    for y in range(top, bottom):
        chars = []
        for x in range(left, right):
            position = Position(x=x, y=y)
            chars.append(_glyph(session, world.chunk_for(position), position))
        lines.append("".join(chars).rstrip())
    return "\n".join(lines) + "\n"


def _glyph(session: GameSession, chunk: Chunk, position: Position) -> str:
    if position == session.player.location:
        return "@"
    if not chunk.is_mapped(position):
        return " "
    enemy = chunk.enemy_at(position)
    if enemy is not None and chunk.is_lit(position):
        return enemy.descriptor.glyph
    item = chunk.item_at(position)
    if item is not None:
        return item.kind.to_char()
    return chunk.get_cell(position).to_char()


def status_line(session: GameSession) -> str:
    player = session.player
    return (
        f"turn {session.turn} | chunk {session.focused_chunk.chunk_id} | "
        f"hp {player.current_health}/{player.max_health} | "
        f"light {player.light_radius:g} | "
        f"block {'yes' if player.carrying_block else 'no'} | "
        f"{'DEAD' if session.player_dead else 'alive'}"
    )


def main(argv: list[str] | None = None) -> None:
    """CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Play a seeded delve session and print the explored map"
    )
    parser.add_argument("--seed", type=int, default=None, help="World seed")
    parser.add_argument(
        "--turns",
        type=int,
        default=20,
        help="Random turns to play when no --moves script is given (default: 20)",
    )
    parser.add_argument(
        "--moves",
        type=str,
        default=None,
        help="Scripted intents: u/d/l/r to move, i to interact",
    )
    parser.add_argument(
        "--config", type=str, default=None, help="Path to a TOML game config"
    )
    parser.add_argument(
        "--radius", type=int, default=1, help="Chunks shown around the player"
    )
    parser.add_argument(
        "--verbose", "-v", action="store_true", help="Verbose logging"
    )

    args = parser.parse_args(argv)

    level = logging.DEBUG if args.verbose else logging.INFO
    structlog.configure(
        processors=[
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.dev.ConsoleRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
    )
    logger = structlog.get_logger()

    config = load_config(Path(args.config)) if args.config else GameConfig()
    session = GameSession(config=config, seed=args.seed)

    if args.moves is not None:
        try:
            events = parse_moves(args.moves)
        except ValueError as e:
            parser.error(str(e))
    else:
        rng = np.random.default_rng(seed_sequence(session.seed, 1))
        directions = list(Direction)
        events = [
            LogicalEvent.move(directions[int(rng.integers(len(directions)))])
            for _ in range(args.turns)
        ]

    for event in events:
        if session.player_dead:
            break
        session.take_turn(event)

    logger.info("session_finished", seed=session.seed, turns=session.turn)
    print(render_map(session, radius=args.radius), end="")
    print(status_line(session))


if __name__ == "__main__":
    main()
