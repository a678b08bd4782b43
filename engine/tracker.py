"""Command dispatch: the single entry point the view layer calls."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from engine import combat, roster
from engine.dice import RandomSource, roll, roll_for_character
from engine.errors import MalformedInputError, TrackerError
from models.commands import Command, CommandType, Effect, EffectKind

if TYPE_CHECKING:
    from engine.storage import SnapshotStore
    from models.tracker_state import TrackerState

logger = logging.getLogger(__name__)


def _require_id(command: Command) -> int:
    if command.character_id is None:
        raise MalformedInputError(f"{command.command_type.value} requires a character_id")
    return command.character_id


def _int_value(command: Command, default: int | None = None) -> int:
    """Parse ``command.value`` as an integer."""
    if command.value is None or (isinstance(command.value, str) and not command.value.strip()):
        if default is not None:
            return default
        raise MalformedInputError(f"{command.command_type.value} requires a value")
    try:
        return int(str(command.value).strip())
    except ValueError:
        raise MalformedInputError(f"Invalid number: {command.value!r}")


def _changed(command: Command, character_id: int | None = None, **kwargs) -> Effect:
    return Effect(
        kind=EffectKind.COLLECTION_CHANGED,
        command_type=command.command_type,
        changed=True,
        character_id=character_id,
        **kwargs,
    )


def _unchanged(command: Command, character_id: int | None = None) -> Effect:
    return Effect(
        kind=EffectKind.NONE,
        command_type=command.command_type,
        character_id=character_id,
    )


def _dispatch(state: TrackerState, command: Command, rng: RandomSource | None) -> Effect:
    ctype = command.command_type

    # --- ROSTER ---
    if ctype == CommandType.ADD:
        if command.draft is None:
            raise MalformedInputError("add requires a character draft")
        char = roster.add_character(state, command.draft)
        return _changed(command, char.id, value=char.id)

    if ctype == CommandType.DELETE:
        character_id = _require_id(command)
        if not roster.delete_character(state, character_id):
            return _unchanged(command, character_id)
        return _changed(command, character_id)

    if ctype == CommandType.UPDATE_RESOURCE:
        character_id = _require_id(command)
        if command.kind is None:
            raise MalformedInputError("update_resource requires a resource kind")
        if command.value is None:
            raise MalformedInputError("update_resource requires a value")
        change = roster.update_resource(state, character_id, command.kind, command.value)
        if change is None:
            return _unchanged(command, character_id)
        return _changed(command, character_id, value=change.new_value, delta=change.delta)

    if ctype == CommandType.SET_AVATAR:
        character_id = _require_id(command)
        char = roster.set_avatar(state, character_id, command.avatar)
        if char is None:
            return _unchanged(command, character_id)
        return _changed(command, character_id)

    if ctype == CommandType.SET_ZONE:
        character_id = _require_id(command)
        char = roster.set_zone(state, character_id, _int_value(command))
        if char is None:
            return _unchanged(command, character_id)
        return _changed(command, character_id, value=char.battlefield_section)

    # --- COMBAT ---
    if ctype == CommandType.SET_INITIATIVE:
        character_id = _require_id(command)
        # Blank initiative counts as 0
        char = combat.set_initiative(state, character_id, _int_value(command, default=0))
        if char is None:
            return _unchanged(command, character_id)
        return _changed(command, character_id, value=char.initiative)

    if ctype == CommandType.TOGGLE_COMBAT_MODE:
        combat.toggle_combat_mode(state)
        return _changed(command)

    if ctype == CommandType.START_COMBAT:
        combat.start_combat(state)
        return _changed(command)

    if ctype == CommandType.ADVANCE_TURN:
        finished = combat.advance_turn(state)
        if finished is None:
            return _unchanged(command)
        return _changed(command, finished.id)

    # --- DICE ---
    if ctype == CommandType.ROLL:
        request = command.roll
        if request is None:
            raise MalformedInputError("roll requires roll parameters")
        if request.character_id is not None:
            char = roster.find_character(state, request.character_id)
            if char is None:
                return _unchanged(command, request.character_id)
            outcome = roll_for_character(
                char,
                request.attribute,
                dice_count=request.dice_count,
                modifier=request.modifier,
                target=request.target,
                rng=rng,
            )
        else:
            outcome = roll(
                request.dice_count,
                request.attribute_value or 0,
                request.modifier,
                request.target,
                rng=rng,
            )
        return Effect(
            kind=EffectKind.ROLLED,
            command_type=ctype,
            character_id=request.character_id,
            value=outcome.final,
            outcome=outcome,
        )

    raise MalformedInputError(f"Unknown command type: {ctype}")


def apply_command(
    state: TrackerState,
    command: Command,
    store: SnapshotStore | None = None,
    rng: RandomSource | None = None,
) -> Effect:
    """Validate and apply a command, persisting the roster if it changed.

    Args:
        state: Current tracker state (mutated in place).
        command: The requested command.
        store: Snapshot store written after every mutation.
        rng: Optional random source for dice rolls.

    Returns:
        The effect for the view layer. Rejected commands leave the state
        untouched and carry the error message.
    """
    try:
        effect = _dispatch(state, command, rng)
    except TrackerError as e:
        logger.info("Rejected %s: %s", command.command_type.value, e)
        return Effect(
            kind=EffectKind.REJECTED,
            command_type=command.command_type,
            character_id=command.character_id,
            error=str(e),
            error_type=type(e).__name__,
        )

    if effect.changed and store is not None:
        store.save(state)
    return effect
