"""FastAPI app entry point for Combat Tracker."""

import logging

from fastapi import FastAPI

from api.combat import router as combat_router
from api.dice import router as dice_router
from api.roster import router as roster_router
from api.ws import router as ws_router
from config import LOG_LEVEL, SEED_SOURCE, SNAPSHOT_FILE, TRACKER_NAME
from engine.storage import SnapshotStore, bootstrap_state

logging.basicConfig(
    level=LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

app = FastAPI(
    title=TRACKER_NAME,
    description="Roster, initiative and dice tracker for tabletop RPG combat",
    version="0.1.0",
)

# Load the roster: seed + saved resources, saved roster, or a sample character
app.state.store = SnapshotStore(SNAPSHOT_FILE)
app.state.tracker = bootstrap_state(app.state.store, SEED_SOURCE)

app.include_router(roster_router, prefix="/roster", tags=["Roster"])
app.include_router(combat_router, prefix="/combat", tags=["Combat"])
app.include_router(dice_router, prefix="/dice", tags=["Dice"])
app.include_router(ws_router, tags=["WebSocket"])


@app.get("/")
def root() -> dict:
    """Root endpoint returning tracker info."""
    return {"name": TRACKER_NAME, "version": "0.1.0", "status": "running"}


@app.get("/health")
def health() -> dict:
    """Health check endpoint."""
    return {"healthy": True}
