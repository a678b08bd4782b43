"""Roster persistence: seed loading, snapshots and export."""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path

import httpx
from pydantic import TypeAdapter, ValidationError

from config import PLACEHOLDER_AVATAR, SEED_SOURCE, SEED_TIMEOUT_SECONDS
from engine.battlefield import ensure_positions
from engine.errors import LoadFailureError, SnapshotParseError
from models.characters import Character
from models.tracker_state import TrackerState

logger = logging.getLogger(__name__)

_roster_adapter = TypeAdapter(list[Character])

# Fields a snapshot may override on top of seed definitions
MERGED_FIELDS = ("health", "mana", "action")


def sample_character() -> Character:
    """The built-in record used when no seed and no snapshot are available."""
    return Character(
        id=1,
        name="Sample Character",
        avatar=PLACEHOLDER_AVATAR,
        power=10,
        skill=8,
        resistance=12,
        health=60,
        mana=40,
        action=10,
    )


def export_characters(state: TrackerState) -> list[dict]:
    """Serialize the roster in seed format.

    Transient combat fields are folded back into each record only when the
    character has them.
    """
    exported = []
    for char in state.characters:
        data = char.model_dump(mode="json")
        if char.id in state.combat.turn_order:
            data["turn_order"] = state.combat.turn_order[char.id]
        if char.id in state.combat.initiative_original:
            data["initiative_original"] = state.combat.initiative_original[char.id]
        exported.append(data)
    return exported


class SnapshotStore:
    """Whole-roster snapshots in a single JSON file."""

    def __init__(self, path: str) -> None:
        self.path = path

    def save(self, state: TrackerState) -> None:
        """Persist the roster.

        Writes to a temporary file first, then renames for atomicity.
        """
        tmp_path = self.path + ".tmp"
        data = export_characters(state)
        with open(tmp_path, "w") as f:
            json.dump(data, f, indent=2)
        os.replace(tmp_path, self.path)

    def load(self) -> list[Character] | None:
        """Read the roster snapshot.

        Returns:
            The saved characters, or None if no snapshot exists.

        Raises:
            SnapshotParseError: If the file is not a valid roster.
        """
        if not Path(self.path).exists():
            return None
        try:
            with open(self.path) as f:
                data = json.load(f)
            return _roster_adapter.validate_python(data)
        except (json.JSONDecodeError, ValidationError) as e:
            raise SnapshotParseError(f"Corrupt snapshot at {self.path}: {e}") from e


def _is_url(source: str) -> bool:
    return source.startswith(("http://", "https://"))


def load_seed(source: str = SEED_SOURCE, client: httpx.Client | None = None) -> list[Character]:
    """Load the default roster from a local file or a URL.

    Args:
        source: File path or http(s) URL of a JSON array of characters.
        client: Optional httpx client used for URL sources.

    Returns:
        The seed characters.

    Raises:
        LoadFailureError: If the source is missing, unreachable, returns a
            non-success status or does not hold a valid roster.
    """
    try:
        if _is_url(source):
            if client is not None:
                resp = client.get(source, timeout=SEED_TIMEOUT_SECONDS)
            else:
                resp = httpx.get(source, timeout=SEED_TIMEOUT_SECONDS)
            if not resp.is_success:
                raise LoadFailureError(f"Seed request failed with status {resp.status_code}")
            data = resp.json()
        else:
            if not Path(source).exists():
                raise LoadFailureError(f"Seed file not found: {source}")
            with open(source) as f:
                data = json.load(f)
        return _roster_adapter.validate_python(data)
    except (httpx.HTTPError, json.JSONDecodeError, ValidationError) as e:
        raise LoadFailureError(f"Could not load seed from {source}: {e}") from e


def merge_snapshot(seed: list[Character], saved: list[Character]) -> list[Character]:
    """Overlay saved resource values onto seed characters with the same id.

    Only the current health, mana and action come from the snapshot; every
    other field keeps its seed definition.
    """
    saved_by_id = {c.id: c for c in saved}
    for char in seed:
        match = saved_by_id.get(char.id)
        if match is None:
            continue
        for field in MERGED_FIELDS:
            setattr(char, field, getattr(match, field))
    return seed


def _load_snapshot(store: SnapshotStore) -> list[Character]:
    try:
        return store.load() or []
    except SnapshotParseError:
        logger.error("Ignoring corrupt roster snapshot", exc_info=True)
        return []


def bootstrap_state(
    store: SnapshotStore,
    seed_source: str = SEED_SOURCE,
    client: httpx.Client | None = None,
) -> TrackerState:
    """Build the startup roster.

    Seed merged with saved resources if the seed loads; otherwise the saved
    snapshot; otherwise a single sample character. The result is written
    back to the snapshot and always starts in normal mode.
    """
    state = TrackerState()
    try:
        seed = load_seed(seed_source, client=client)
        state.characters = merge_snapshot(seed, _load_snapshot(store))
        logger.info("Loaded %d characters from seed %s", len(seed), seed_source)
    except LoadFailureError as e:
        logger.warning("%s; falling back to saved roster", e)
        state.characters = _load_snapshot(store)

    if not state.characters:
        logger.warning("No saved roster found; using the sample character")
        state.characters = [sample_character()]

    ensure_positions(state)
    store.save(state)
    return state
