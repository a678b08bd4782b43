"""Dice calculator endpoint."""

from fastapi import APIRouter, Request

from api.common import run_command
from models.commands import Command, CommandType, Effect, RollRequest

router = APIRouter()


@router.post("/roll", response_model=Effect)
async def roll_dice(body: RollRequest, request: Request) -> Effect:
    """Roll d6s against an attribute, optionally read from a roster character."""
    return await run_command(request, Command(command_type=CommandType.ROLL, roll=body))
