"""Helpers shared by the HTTP routers."""

from fastapi import HTTPException, Request
from fastapi.concurrency import run_in_threadpool

from api.ws import notify_effect
from engine.storage import SnapshotStore
from engine.tracker import apply_command
from models.commands import Command, Effect, EffectKind
from models.tracker_state import TrackerState


def get_state(request: Request) -> TrackerState:
    """Get the singleton tracker state from app state."""
    return request.app.state.tracker


def get_store(request: Request) -> SnapshotStore:
    """Get the snapshot store from app state."""
    return request.app.state.store


async def run_command(request: Request, command: Command) -> Effect:
    """Apply a command, notify listeners and translate rejections.

    The command runs in the threadpool since it writes the snapshot file.

    Raises:
        HTTPException 409: For combat transitions that aren't allowed.
        HTTPException 400: For any other rejected input.
    """
    effect = await run_in_threadpool(
        apply_command,
        get_state(request),
        command,
        get_store(request),
        rng=getattr(request.app.state, "rng", None),
    )
    if effect.kind == EffectKind.REJECTED:
        status = 409 if effect.error_type == "InvalidTransitionError" else 400
        raise HTTPException(status_code=status, detail=effect.error)

    await notify_effect(effect)
    return effect
