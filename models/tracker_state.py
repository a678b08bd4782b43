"""Roster and combat state models for Combat Tracker."""

from enum import Enum

from pydantic import BaseModel

from config import TRACKER_NAME
from models.characters import Character


class CombatMode(str, Enum):
    """Possible combat modes for the table."""
    NORMAL = "normal"               # No combat, insertion order
    PREPARATION = "preparation"     # Initiative being entered
    ACTIVE = "active"               # Turns in progress


class CombatState(BaseModel):
    """Combat mode plus the transient per-character ordering fields.

    ``turn_order`` only has entries while the mode is ACTIVE.
    ``initiative_original`` is captured once on combat start and survives
    until the table returns to NORMAL from PREPARATION.
    """
    mode: CombatMode = CombatMode.NORMAL
    turn_order: dict[int, int] = {}           # character_id -> order value
    initiative_original: dict[int, int] = {}  # character_id -> initiative at start


class TrackerState(BaseModel):
    """The full in-memory state of the tracker."""
    name: str = TRACKER_NAME
    characters: list[Character] = []          # Display / insertion order
    combat: CombatState = CombatState()
