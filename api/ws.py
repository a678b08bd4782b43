"""WebSocket endpoint for real-time roster notifications."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, WebSocket, WebSocketDisconnect

from models.commands import Effect, EffectKind

router = APIRouter()

# Connected clients
connections: list[WebSocket] = []


async def broadcast(message: dict[str, Any]) -> None:
    """Send a message to all connected WebSocket clients.

    Args:
        message: The JSON-serializable message to send.
    """
    disconnected = []
    for i, ws in enumerate(connections):
        try:
            await ws.send_json(message)
        except Exception:
            disconnected.append(i)
    # Clean up disconnected clients
    for i in reversed(disconnected):
        connections.pop(i)


async def notify_effect(effect: Effect) -> None:
    """Tell clients what changed so they can re-render and highlight."""
    if effect.kind == EffectKind.COLLECTION_CHANGED:
        await broadcast({
            "type": "collection_changed",
            "command_type": effect.command_type.value,
            "character_id": effect.character_id,
            "delta": effect.delta.value if effect.delta else None,
        })
    elif effect.kind == EffectKind.ROLLED and effect.outcome is not None:
        await broadcast({
            "type": "rolled",
            "character_id": effect.character_id,
            **effect.outcome.model_dump(mode="json"),
        })


@router.websocket("/ws")
async def websocket_endpoint(websocket: WebSocket) -> None:
    """WebSocket endpoint for real-time roster notifications."""
    await websocket.accept()
    connections.append(websocket)

    try:
        await websocket.send_json({
            "type": "connected",
            "mode": websocket.app.state.tracker.combat.mode.value,
        })

        # Keep connection alive, listen for client messages (optional)
        while True:
            try:
                await websocket.receive_text()
            except WebSocketDisconnect:
                break
    finally:
        if websocket in connections:
            connections.remove(websocket)
