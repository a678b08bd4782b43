"""Derived stats: resource capacities, clamping, near-death and edit parsing."""

from __future__ import annotations

import re

from pydantic import BaseModel

from config import HEALTH_PER_RESISTANCE, MANA_PER_SKILL
from engine.errors import MalformedInputError
from models.characters import Character, ResourceKind
from models.commands import DeltaTag

_RELATIVE_RE = re.compile(r"^([+-])(\d+)$")
_ABSOLUTE_RE = re.compile(r"^(\d+)$")


class Capacity(BaseModel):
    """Maximum value of each resource bar."""
    max_health: int
    max_mana: int
    max_action: int


class ResourceInput(BaseModel):
    """A parsed resource edit: ``+5``, ``-5`` or ``50``."""
    amount: int
    relative: bool                  # False means "set to amount"


class ResourceChange(BaseModel):
    """Outcome of applying a resource edit to a character."""
    kind: ResourceKind
    old_value: int
    new_value: int
    delta: DeltaTag | None = None


def capacity(character: Character) -> Capacity:
    """Compute the resource maxima from a character's attributes."""
    return Capacity(
        max_health=character.resistance * HEALTH_PER_RESISTANCE,
        max_mana=character.skill * MANA_PER_SKILL,
        max_action=character.power,
    )


def max_for(character: Character, kind: ResourceKind) -> int:
    """Maximum of a single resource bar."""
    if kind == ResourceKind.HEALTH:
        return character.resistance * HEALTH_PER_RESISTANCE
    if kind == ResourceKind.MANA:
        return character.skill * MANA_PER_SKILL
    return character.power


def _clamp(value: int, maximum: int) -> int:
    # A non-positive maximum still clamps to 0
    return max(0, min(value, maximum))


def normalize_resources(character: Character) -> Character:
    """Initialize missing resources to max and clamp the rest into [0, max].

    Explicit zeros are kept. Safe to call repeatedly.

    Args:
        character: The character to normalize (mutated in place).

    Returns:
        The same character, for chaining.
    """
    for kind in ResourceKind:
        maximum = max_for(character, kind)
        current = getattr(character, kind.value)
        if current is None:
            setattr(character, kind.value, max(0, maximum))
        else:
            setattr(character, kind.value, _clamp(current, maximum))
    return character


def is_near_death(character: Character) -> bool:
    """True when health is at or below the resistance attribute."""
    normalize_resources(character)
    return character.health <= character.resistance


def resource_percent(character: Character, kind: ResourceKind) -> float:
    """Fill percentage of a bar, always within 0..100."""
    normalize_resources(character)
    maximum = max_for(character, kind)
    if maximum <= 0:
        return 0.0
    return getattr(character, kind.value) / maximum * 100


def parse_resource_input(text: str | int) -> ResourceInput:
    """Parse a resource edit.

    ``+N`` adds, ``-N`` subtracts and a bare ``N`` sets the value. Integers
    are read through their text form, so ``-3`` subtracts and ``3`` sets.

    Raises:
        MalformedInputError: If the text matches none of those forms.
    """
    value = str(text).strip()
    match = _RELATIVE_RE.match(value)
    if match:
        amount = int(match.group(2))
        return ResourceInput(
            amount=amount if match.group(1) == "+" else -amount,
            relative=True,
        )
    match = _ABSOLUTE_RE.match(value)
    if match:
        return ResourceInput(amount=int(match.group(1)), relative=False)
    raise MalformedInputError(
        f"Invalid value {value!r}: use +N to add, -N to subtract or N to set"
    )


def _delta_tag(kind: ResourceKind, old_value: int, new_value: int) -> DeltaTag | None:
    if new_value == old_value:
        return None
    if kind == ResourceKind.HEALTH:
        return DeltaTag.HEALED if new_value > old_value else DeltaTag.DAMAGED
    if new_value > old_value:
        return DeltaTag.RESOURCE_RECOVERED
    return DeltaTag.RESOURCE_SPENT


def apply_resource(
    character: Character,
    kind: ResourceKind,
    value: str | int | ResourceInput,
) -> ResourceChange:
    """Apply a relative or absolute edit to one resource bar.

    Args:
        character: The character to edit (mutated in place).
        kind: Which bar to edit.
        value: Raw user input or an already parsed ResourceInput.

    Returns:
        ResourceChange with the old and new value and the delta tag.

    Raises:
        MalformedInputError: If the raw input cannot be parsed. The
            character is left untouched.
    """
    edit = value if isinstance(value, ResourceInput) else parse_resource_input(value)
    normalize_resources(character)

    maximum = max_for(character, kind)
    old_value = getattr(character, kind.value)
    if edit.relative:
        new_value = _clamp(old_value + edit.amount, maximum)
    else:
        new_value = _clamp(edit.amount, maximum)
    setattr(character, kind.value, new_value)

    return ResourceChange(
        kind=kind,
        old_value=old_value,
        new_value=new_value,
        delta=_delta_tag(kind, old_value, new_value),
    )


def character_view(character: Character, *, is_current_turn: bool = False) -> dict:
    """Build the render model for a character card.

    Hidden characters keep their bar widths but show ``?`` instead of numbers.
    """
    normalize_resources(character)
    caps = capacity(character)
    hidden = character.hidden_values

    def _display(current: int, maximum: int) -> str:
        return "?" if hidden else f"{current} / {maximum}"

    if hidden:
        stats_display = "P ? H ? R ?"
    else:
        stats_display = f"P {character.power} H {character.skill} R {character.resistance}"

    return {
        **character.model_dump(mode="json"),
        **caps.model_dump(),
        "health_percent": resource_percent(character, ResourceKind.HEALTH),
        "mana_percent": resource_percent(character, ResourceKind.MANA),
        "action_percent": resource_percent(character, ResourceKind.ACTION),
        "health_display": _display(character.health, caps.max_health),
        "mana_display": _display(character.mana, caps.max_mana),
        "action_display": _display(character.action, caps.max_action),
        "stats_display": stats_display,
        "near_death": is_near_death(character),
        "is_current_turn": is_current_turn,
    }
