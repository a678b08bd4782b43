"""Roster endpoints: listing, adding, editing, removing and exporting characters."""

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from api.common import get_state, run_command
from engine.battlefield import zone_members
from engine.combat import get_current_turn_character, sorted_characters
from engine.stats import character_view
from engine.storage import export_characters
from models.characters import CharacterDraft, ResourceKind
from models.commands import Command, CommandType, Effect

router = APIRouter()


class ResourceUpdateRequest(BaseModel):
    """Request body for a resource edit: ``"+10"``, ``"-5"`` or ``"50"``."""
    value: str


class AvatarRequest(BaseModel):
    """Request body for changing an avatar; null resets to the placeholder."""
    avatar: str | None = None


class InitiativeRequest(BaseModel):
    """Request body for setting initiative."""
    initiative: int | str | None = None


class ZoneRequest(BaseModel):
    """Request body for moving a character on the battlefield."""
    section: int


class AddCharacterResponse(BaseModel):
    """Response after adding a character."""
    character_id: int
    message: str


@router.get("")
def get_roster(request: Request) -> dict:
    """Characters in display order with their derived stats."""
    state = get_state(request)
    current = get_current_turn_character(state)
    return {
        "name": state.name,
        "mode": state.combat.mode.value,
        "current_turn_id": current.id if current else None,
        "characters": [
            character_view(c, is_current_turn=current is not None and c.id == current.id)
            for c in sorted_characters(state)
        ],
    }


@router.post("", response_model=AddCharacterResponse)
async def add_character(body: CharacterDraft, request: Request) -> AddCharacterResponse:
    """Add a character. Missing or non-positive attributes use the defaults."""
    effect = await run_command(request, Command(command_type=CommandType.ADD, draft=body))
    return AddCharacterResponse(
        character_id=effect.character_id,
        message=f"{body.name.strip()} has joined the roster.",
    )


@router.get("/battlefield")
def get_battlefield(request: Request) -> dict:
    """Character ids per battlefield zone, in display order."""
    state = get_state(request)
    return {"sections": zone_members(state, sorted_characters(state))}


@router.get("/export")
def export_roster(request: Request) -> JSONResponse:
    """Download the roster as ``characters.json``."""
    return JSONResponse(
        content=export_characters(get_state(request)),
        headers={"Content-Disposition": 'attachment; filename="characters.json"'},
    )


@router.delete("/{character_id}", response_model=Effect)
async def delete_character(character_id: int, request: Request) -> Effect:
    """Remove a character. Unknown ids are ignored."""
    return await run_command(
        request,
        Command(command_type=CommandType.DELETE, character_id=character_id),
    )


@router.post("/{character_id}/resources/{kind}", response_model=Effect)
async def update_resource(
    character_id: int,
    kind: ResourceKind,
    body: ResourceUpdateRequest,
    request: Request,
) -> Effect:
    """Add to, subtract from or set a resource bar."""
    return await run_command(
        request,
        Command(
            command_type=CommandType.UPDATE_RESOURCE,
            character_id=character_id,
            kind=kind,
            value=body.value,
        ),
    )


@router.put("/{character_id}/avatar", response_model=Effect)
async def set_avatar(character_id: int, body: AvatarRequest, request: Request) -> Effect:
    """Change or reset a character's avatar."""
    return await run_command(
        request,
        Command(
            command_type=CommandType.SET_AVATAR,
            character_id=character_id,
            avatar=body.avatar,
        ),
    )


@router.put("/{character_id}/initiative", response_model=Effect)
async def set_initiative(character_id: int, body: InitiativeRequest, request: Request) -> Effect:
    """Set a character's initiative."""
    return await run_command(
        request,
        Command(
            command_type=CommandType.SET_INITIATIVE,
            character_id=character_id,
            value=body.initiative,
        ),
    )


@router.put("/{character_id}/zone", response_model=Effect)
async def set_zone(character_id: int, body: ZoneRequest, request: Request) -> Effect:
    """Move a character to a battlefield zone (clamped into range)."""
    return await run_command(
        request,
        Command(
            command_type=CommandType.SET_ZONE,
            character_id=character_id,
            value=body.section,
        ),
    )
