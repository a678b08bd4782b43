"""Combat mode endpoints: toggling, starting and advancing turns."""

from fastapi import APIRouter, Request

from api.common import get_state, run_command
from engine.combat import effective_order, get_current_turn_character, sorted_characters
from models.commands import Command, CommandType
from models.tracker_state import CombatMode

router = APIRouter()


def _combat_summary(request: Request) -> dict:
    state = get_state(request)
    current = get_current_turn_character(state)
    active = state.combat.mode == CombatMode.ACTIVE

    order = []
    for char in sorted_characters(state):
        order.append({
            "id": char.id,
            "name": char.name,
            "initiative": char.initiative or 0,
            "turn_order": effective_order(state, char) if active else None,
            "initiative_original": state.combat.initiative_original.get(char.id),
        })

    return {
        "mode": state.combat.mode.value,
        "current_turn_id": current.id if current else None,
        "order": order,
    }


@router.get("")
def get_combat(request: Request) -> dict:
    """Current combat mode, whose turn it is and the display order."""
    return _combat_summary(request)


@router.post("/toggle")
async def toggle_combat(request: Request) -> dict:
    """Enter preparation from normal mode, or leave combat."""
    await run_command(request, Command(command_type=CommandType.TOGGLE_COMBAT_MODE))
    return _combat_summary(request)


@router.post("/start")
async def start_combat(request: Request) -> dict:
    """Freeze initiative into turn order and begin active combat."""
    await run_command(request, Command(command_type=CommandType.START_COMBAT))
    return _combat_summary(request)


@router.post("/advance")
async def advance_turn(request: Request) -> dict:
    """Pass the turn: the current character moves to the bottom."""
    await run_command(request, Command(command_type=CommandType.ADVANCE_TURN))
    return _combat_summary(request)
