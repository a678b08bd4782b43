"""Roster CRUD: adding, finding, editing and removing characters."""

from __future__ import annotations

import logging

from config import (
    DEFAULT_BATTLEFIELD_SECTION,
    DEFAULT_POWER,
    DEFAULT_RESISTANCE,
    DEFAULT_SKILL,
    PLACEHOLDER_AVATAR,
)
from engine.battlefield import assign_zone
from engine.combat import remove_combat_entries
from engine.errors import MalformedInputError
from engine.stats import (
    ResourceChange,
    apply_resource,
    normalize_resources,
    parse_resource_input,
)
from models.characters import Character, CharacterDraft, ResourceKind
from models.tracker_state import TrackerState

logger = logging.getLogger(__name__)


def next_character_id(state: TrackerState) -> int:
    """One more than the highest id on the roster, or 1 when it is empty."""
    if not state.characters:
        return 1
    return max(c.id for c in state.characters) + 1


def find_character(state: TrackerState, character_id: int) -> Character | None:
    """Look up a character by id."""
    for char in state.characters:
        if char.id == character_id:
            return char
    return None


def _positive_or_default(raw: int | str | None, default: int) -> int:
    """Parse an attribute, substituting the default for anything non-positive."""
    try:
        value = int(str(raw).strip())
    except (TypeError, ValueError):
        return default
    return value if value > 0 else default


def add_character(state: TrackerState, draft: CharacterDraft) -> Character:
    """Create a character from user input and append it to the roster.

    Unparsable or non-positive attributes fall back to 10 / 8 / 12. Resources
    start full and the character is placed in the middle zone.

    Args:
        state: Current tracker state (mutated in place).
        draft: The user-entered values.

    Returns:
        The new character.

    Raises:
        MalformedInputError: If the name is blank.
    """
    name = draft.name.strip()
    if not name:
        raise MalformedInputError("Please enter a name for the character")

    character = Character(
        id=next_character_id(state),
        name=name,
        avatar=(draft.avatar or "").strip() or PLACEHOLDER_AVATAR,
        type=draft.type,
        hidden_values=draft.hidden_values,
        power=_positive_or_default(draft.power, DEFAULT_POWER),
        skill=_positive_or_default(draft.skill, DEFAULT_SKILL),
        resistance=_positive_or_default(draft.resistance, DEFAULT_RESISTANCE),
        battlefield_section=DEFAULT_BATTLEFIELD_SECTION,
    )
    normalize_resources(character)
    state.characters.append(character)

    logger.info("Added %s (id %d)", character.name, character.id)
    return character


def delete_character(state: TrackerState, character_id: int) -> bool:
    """Remove a character. Unknown ids are ignored.

    Returns:
        True if a character was removed.
    """
    char = find_character(state, character_id)
    if char is None:
        return False
    state.characters.remove(char)
    remove_combat_entries(state, character_id)
    logger.info("Removed %s (id %d)", char.name, character_id)
    return True


def set_avatar(state: TrackerState, character_id: int, avatar: str | None) -> Character | None:
    """Change a character's avatar; None or blank resets to the placeholder."""
    char = find_character(state, character_id)
    if char is None:
        return None
    char.avatar = (avatar or "").strip() or PLACEHOLDER_AVATAR
    return char


def set_zone(state: TrackerState, character_id: int, index: int) -> Character | None:
    """Move a character to a battlefield zone."""
    char = find_character(state, character_id)
    if char is None:
        return None
    return assign_zone(char, index)


def update_resource(
    state: TrackerState,
    character_id: int,
    kind: ResourceKind,
    value: str | int,
) -> ResourceChange | None:
    """Apply a ``+N`` / ``-N`` / ``N`` edit to a character's resource bar.

    Returns:
        The change, or None if the id is unknown.

    Raises:
        MalformedInputError: If the value cannot be parsed.
    """
    edit = parse_resource_input(value)
    char = find_character(state, character_id)
    if char is None:
        return None
    return apply_resource(char, kind, edit)
