"""Character data models for Combat Tracker."""

from enum import Enum
from typing import Any

from pydantic import AliasChoices, BaseModel, Field, field_validator

from config import PLACEHOLDER_AVATAR


class CharacterType(str, Enum):
    """Which side of the table a character is on."""
    PLAYER = "player"
    ENEMY = "enemy"
    FRIENDLY = "friendly"
    NEUTRAL = "neutral"


class ResourceKind(str, Enum):
    """The three resource bars shown on every card."""
    HEALTH = "health"
    MANA = "mana"
    ACTION = "action"


class Attribute(str, Enum):
    """Archetype attributes a dice roll can be made against."""
    POWER = "power"
    SKILL = "skill"
    RESISTANCE = "resistance"


def _character_type(value: Any) -> Any:
    # Missing or unrecognised classifications default to player
    if isinstance(value, CharacterType):
        return value
    try:
        return CharacterType(str(value).strip().lower())
    except ValueError:
        return CharacterType.PLAYER


class Character(BaseModel):
    """A combatant on the roster.

    Stored records are loaded leniently: an unknown ``type`` becomes a player
    and a non-numeric zone is dropped so it can be reset to the middle zone.
    Both snake_case and camelCase keys are accepted for the two-word fields.
    """
    id: int                         # Unique, assigned as max(existing) + 1
    name: str
    avatar: str = PLACEHOLDER_AVATAR  # URL or data URI
    type: CharacterType = CharacterType.PLAYER
    hidden_values: bool = Field(    # Hide numbers on the card
        default=False,
        validation_alias=AliasChoices("hidden_values", "hiddenValues"),
    )
    power: int
    skill: int
    resistance: int
    health: int | None = None       # None means "start at max"
    mana: int | None = None
    action: int | None = None
    initiative: int | None = None
    battlefield_section: int | float | None = Field(  # Zone index, normalized later
        default=None,
        validation_alias=AliasChoices("battlefield_section", "battlefieldSection"),
    )

    @field_validator("type", mode="before")
    @classmethod
    def unknown_type_is_player(cls, v: Any) -> Any:
        return _character_type(v)

    @field_validator("battlefield_section", mode="before")
    @classmethod
    def drop_non_numeric_zone(cls, v: Any) -> Any:
        if isinstance(v, str):
            try:
                return float(v)
            except ValueError:
                return None
        if v is None or isinstance(v, (int, float)):
            return v
        return None


class CharacterDraft(BaseModel):
    """User-entered values for a new character.

    Attributes arrive as raw text or numbers; anything that doesn't parse to a
    positive integer falls back to the defaults when the character is added.
    """
    name: str
    avatar: str | None = None
    type: CharacterType = CharacterType.PLAYER
    hidden_values: bool = Field(
        default=False,
        validation_alias=AliasChoices("hidden_values", "hiddenValues"),
    )
    power: int | str | None = None
    skill: int | str | None = None
    resistance: int | str | None = None

    @field_validator("type", mode="before")
    @classmethod
    def unknown_type_is_player(cls, v: Any) -> Any:
        return _character_type(v)
