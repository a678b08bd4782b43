"""Battlefield zones: which distance bucket each character stands in."""

from __future__ import annotations

import math
from typing import TYPE_CHECKING

from config import BATTLEFIELD_SECTIONS, DEFAULT_BATTLEFIELD_SECTION

if TYPE_CHECKING:
    from models.characters import Character
    from models.tracker_state import TrackerState


def clamp_zone(index: int, sections: int = BATTLEFIELD_SECTIONS) -> int:
    """Clamp a zone index into [0, sections - 1]."""
    return max(0, min(int(index), sections - 1))


def assign_zone(character: Character, index: int) -> Character:
    """Move a character to a zone, clamping out-of-range indexes.

    Args:
        character: The character to move (mutated in place).
        index: Requested zone index.

    Returns:
        The same character.
    """
    character.battlefield_section = clamp_zone(index)
    return character


def normalize_zone(character: Character) -> Character:
    """Reset a missing or non-numeric zone to the middle zone.

    Finite numbers are clamped into range and truncated to an integer.
    """
    section = character.battlefield_section
    if (
        isinstance(section, bool)
        or not isinstance(section, (int, float))
        or not math.isfinite(section)
    ):
        character.battlefield_section = DEFAULT_BATTLEFIELD_SECTION
    else:
        character.battlefield_section = clamp_zone(section)
    return character


def ensure_positions(state: TrackerState) -> None:
    """Normalize the zone of every character on the roster."""
    for character in state.characters:
        normalize_zone(character)


def zone_members(
    state: TrackerState,
    ordered: list[Character] | None = None,
) -> list[list[int]]:
    """Group character ids by zone for the mini-map.

    Args:
        state: Current tracker state.
        ordered: Characters in display order; defaults to roster order.

    Returns:
        One list of character ids per zone, each in display order.
    """
    ensure_positions(state)
    zones: list[list[int]] = [[] for _ in range(BATTLEFIELD_SECTIONS)]
    for character in ordered if ordered is not None else state.characters:
        zones[clamp_zone(character.battlefield_section)].append(character.id)
    return zones
