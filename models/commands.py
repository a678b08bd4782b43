"""Command and effect models: the contract between clients and the core."""

from enum import Enum

from pydantic import BaseModel

from engine.dice import RollOutcome
from models.characters import Attribute, CharacterDraft, ResourceKind


class CommandType(str, Enum):
    """Every mutation or query a client can ask the core for."""
    ADD = "add"
    DELETE = "delete"
    UPDATE_RESOURCE = "update_resource"
    SET_INITIATIVE = "set_initiative"
    SET_ZONE = "set_zone"
    TOGGLE_COMBAT_MODE = "toggle_combat_mode"
    START_COMBAT = "start_combat"
    ADVANCE_TURN = "advance_turn"
    ROLL = "roll"
    SET_AVATAR = "set_avatar"


class EffectKind(str, Enum):
    """What the client should do after a command."""
    COLLECTION_CHANGED = "collection_changed"   # Re-render everything
    ROLLED = "rolled"                           # Show a dice outcome
    REJECTED = "rejected"                       # Show the error message
    NONE = "none"                               # Nothing happened


class DeltaTag(str, Enum):
    """Semantic change on a resource bar, used for transient highlights."""
    HEALED = "healed"
    DAMAGED = "damaged"
    RESOURCE_SPENT = "resource_spent"
    RESOURCE_RECOVERED = "resource_recovered"


class RollRequest(BaseModel):
    """Dice calculator input.

    Either ``attribute_value`` is given directly, or ``character_id`` plus
    ``attribute`` select it from the roster.
    """
    dice_count: int = 3
    attribute_value: int | None = None
    character_id: int | None = None
    attribute: Attribute = Attribute.POWER
    modifier: int = 0
    target: int = 0


class Command(BaseModel):
    """A single request from the view layer."""
    command_type: CommandType
    character_id: int | None = None
    draft: CharacterDraft | None = None         # ADD
    kind: ResourceKind | None = None            # UPDATE_RESOURCE
    value: int | str | None = None              # resource text, initiative, zone
    avatar: str | None = None                   # SET_AVATAR, None resets
    roll: RollRequest | None = None             # ROLL


class Effect(BaseModel):
    """The result of applying a command."""
    kind: EffectKind
    command_type: CommandType
    changed: bool = False                       # State was mutated and saved
    character_id: int | None = None
    value: int | None = None                    # New id, resource value, zone...
    delta: DeltaTag | None = None
    outcome: RollOutcome | None = None
    error: str | None = None
    error_type: str | None = None               # Exception class of a rejection
