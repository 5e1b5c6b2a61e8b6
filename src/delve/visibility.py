"""Light radius and fog-of-war bookkeeping."""

import math
from typing import Iterable

from .types import Position
from .world import World


def update_visibility(
    world: World,
    center: Position,
    light_radius: float,
    previously_lit: Iterable[Position] = (),
) -> set[Position]:
    """Recompute lit tiles around center and map everything lit.

    Tiles strictly closer than light_radius become lit and mapped. Other
    tiles in the surrounding box, and every tile in previously_lit, are
    unlit. Mapping is never cleared. Chunks are resolved per tile, so light
    crosses chunk borders.

    Returns:
        The set of tiles lit now.
    """
    for position in previously_lit:
        world.chunk_for(position).set_lit(position, False)

    radius = math.ceil(light_radius)
    lit: set[Position] = set()
    for position in center.positions_in_nearby_grid(radius, radius):
        chunk = world.chunk_for(position)
        if center.delta_to(position).magnitude < light_radius:
            chunk.mark_mapped(position)
            chunk.set_lit(position, True)
            lit.add(position)
        else:
            chunk.set_lit(position, False)
    return lit


def reveal_around(world: World, center: Position, radius: float) -> int:
    """Map every tile within radius of center without lighting it.

    Returns:
        Number of tiles newly mapped.
    """
    revealed = 0
    box = math.ceil(radius)
    for position in center.positions_in_nearby_grid(box, box):
        if center.delta_to(position).magnitude > radius:
            continue
        chunk = world.chunk_for(position)
        if not chunk.is_mapped(position):
            chunk.mark_mapped(position)
            revealed += 1
    return revealed
