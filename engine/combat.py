"""Combat mode state machine: preparation, turn order and turn advance.

    NORMAL --toggle--> PREPARATION --start--> ACTIVE
      ^                    |                    |
      +------toggle--------+-------toggle-------+
"""

from __future__ import annotations

import logging

from engine.errors import InvalidTransitionError
from models.characters import Character
from models.tracker_state import CombatMode, TrackerState

logger = logging.getLogger(__name__)


def toggle_combat_mode(state: TrackerState) -> CombatMode:
    """Flip between normal mode and combat.

    NORMAL enters PREPARATION. ACTIVE returns to NORMAL, dropping turn order
    but keeping the captured initiatives. PREPARATION returns to NORMAL,
    dropping both.

    Args:
        state: Current tracker state (mutated in place).

    Returns:
        The new mode.
    """
    combat = state.combat
    if combat.mode == CombatMode.ACTIVE:
        combat.turn_order = {}
        combat.mode = CombatMode.NORMAL
    elif combat.mode == CombatMode.PREPARATION:
        combat.turn_order = {}
        combat.initiative_original = {}
        combat.mode = CombatMode.NORMAL
    else:
        combat.mode = CombatMode.PREPARATION

    logger.info("Combat mode is now %s", combat.mode.value)
    return combat.mode


def start_combat(state: TrackerState) -> TrackerState:
    """Freeze the initiative order and begin active combat.

    Every character gets a turn order equal to its initiative. The first
    initiative seen for a character is kept as its original initiative.

    Args:
        state: Current tracker state (mutated in place).

    Returns:
        Updated tracker state in ACTIVE mode.

    Raises:
        InvalidTransitionError: If the table is not in PREPARATION.
    """
    combat = state.combat
    if combat.mode != CombatMode.PREPARATION:
        raise InvalidTransitionError(
            f"Combat can only start from preparation (mode: {combat.mode.value})"
        )

    for char in state.characters:
        initiative = char.initiative or 0
        combat.initiative_original.setdefault(char.id, initiative)
        combat.turn_order[char.id] = initiative

    combat.mode = CombatMode.ACTIVE
    logger.info("Combat started with %d characters", len(state.characters))
    return state


def effective_order(state: TrackerState, character: Character) -> int:
    """Turn order if the character has one, otherwise its initiative."""
    order = state.combat.turn_order.get(character.id)
    if order is not None:
        return order
    return character.initiative or 0


def sorted_characters(state: TrackerState) -> list[Character]:
    """Characters in display order for the current mode.

    PREPARATION sorts by initiative and ACTIVE by turn order, both highest
    first. NORMAL keeps insertion order. Ties keep roster order.
    """
    mode = state.combat.mode
    if mode == CombatMode.PREPARATION:
        return sorted(state.characters, key=lambda c: c.initiative or 0, reverse=True)
    if mode == CombatMode.ACTIVE:
        return sorted(
            state.characters,
            key=lambda c: effective_order(state, c),
            reverse=True,
        )
    return list(state.characters)


def get_current_turn_character(state: TrackerState) -> Character | None:
    """The character whose turn it is, or None outside active combat."""
    if state.combat.mode != CombatMode.ACTIVE or not state.characters:
        return None
    return sorted_characters(state)[0]


def set_initiative(state: TrackerState, character_id: int, value: int) -> Character | None:
    """Record a character's initiative.

    During active combat the turn order follows the new initiative.

    Returns:
        The updated character, or None if the id is unknown.
    """
    char = next((c for c in state.characters if c.id == character_id), None)
    if char is None:
        return None

    char.initiative = value
    if state.combat.mode == CombatMode.ACTIVE:
        state.combat.turn_order[char.id] = value
    return char


def advance_turn(state: TrackerState) -> Character | None:
    """Send the character on top of the order to the bottom.

    The first character holding the highest order value gets
    ``min(order values) - 1``. Does nothing outside active combat.

    Args:
        state: Current tracker state (mutated in place).

    Returns:
        The character that just finished its turn, or None.
    """
    if state.combat.mode != CombatMode.ACTIVE or not state.characters:
        return None

    orders = [effective_order(state, c) for c in state.characters]
    top_index = orders.index(max(orders))
    top = state.characters[top_index]
    state.combat.turn_order[top.id] = min(orders) - 1

    logger.debug("Turn passed from %s (id %d)", top.name, top.id)
    return top


def remove_combat_entries(state: TrackerState, character_id: int) -> None:
    """Forget the transient combat fields of a removed character."""
    state.combat.turn_order.pop(character_id, None)
    state.combat.initiative_original.pop(character_id, None)
