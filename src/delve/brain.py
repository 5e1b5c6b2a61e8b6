"""Enemy decision making.

A brain never holds a reference to its enemy. The acting enemy is passed in
explicitly and its Brain record supplies the strategy tag and random source.
"""

from typing import TYPE_CHECKING, Callable

from .actions import Action, AttackAction, MoveAction
from .entities import BrainKind, Enemy
from .types import Direction

if TYPE_CHECKING:
    from .game import GameSession

Strategy = Callable[["GameSession", Enemy], list[Action]]


def _open_move(session: "GameSession", enemy: Enemy, direction: Direction) -> MoveAction | None:
    """Move in direction if the cell is passable and free of other enemies."""
    destination = enemy.location.offset(direction)
    world = session.world
    if not world.is_passable(destination):
        return None
    if world.enemy_at(destination) is not None:
        return None
    return MoveAction(mob=enemy, destination=destination, direction=direction)


def wanderer_actions(session: "GameSession", enemy: Enemy) -> list[Action]:
    """Any open direction; attack instead of stepping onto the player."""
    actions: list[Action] = []
    player_location = session.player.location
    for direction in Direction:
        move = _open_move(session, enemy, direction)
        if move is None:
            continue
        if move.destination == player_location:
            actions.append(
                AttackAction(
                    mob=enemy,
                    target=move.destination,
                    direction=direction,
                    amount=enemy.descriptor.attack_damage,
                )
            )
        else:
            actions.append(move)
    return actions


def pursuer_actions(session: "GameSession", enemy: Enemy) -> list[Action]:
    """Attack in range; close the distance within aggro radius; else wander."""
    actions: list[Action] = []
    descriptor = enemy.descriptor
    player_location = session.player.location
    delta = enemy.location.delta_to(player_location)
    distance = delta.manhattan_distance

    if distance <= descriptor.attack_range:
        actions.append(
            AttackAction(
                mob=enemy,
                target=player_location,
                direction=delta.primary_direction,
                amount=descriptor.attack_damage,
            )
        )

    if distance <= descriptor.aggro_radius:
        directions = []
        if delta.dx < 0:
            directions.append(Direction.LEFT)
        if delta.dx > 0:
            directions.append(Direction.RIGHT)
        if delta.dy < 0:
            directions.append(Direction.UP)
        if delta.dy > 0:
            directions.append(Direction.DOWN)
    else:
        directions = list(Direction)

    for direction in directions:
        move = _open_move(session, enemy, direction)
        if move is not None and move.destination != player_location:
            actions.append(move)
    return actions


STRATEGIES: dict[BrainKind, Strategy] = {
    BrainKind.WANDERER: wanderer_actions,
    BrainKind.PURSUER: pursuer_actions,
}


def possible_actions(session: "GameSession", enemy: Enemy) -> list[Action]:
    return STRATEGIES[enemy.brain.kind](session, enemy)


def select_action(session: "GameSession", enemy: Enemy) -> Action | None:
    """Pick the enemy's action for this turn.

    The first attack candidate always wins. Otherwise a move is chosen
    uniformly with the enemy's own random source. No candidates means the
    enemy waits.
    """
    actions = possible_actions(session, enemy)
    if not actions:
        return None
    for action in actions:
        if isinstance(action, AttackAction):
            return action
    return actions[int(enemy.brain.rng.integers(len(actions)))]
