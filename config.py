"""Tracker-wide configuration constants for Combat Tracker."""

import os

BATTLEFIELD_SECTIONS = 5         # Number of distance zones on the battlefield
DEFAULT_BATTLEFIELD_SECTION = 2  # Middle zone
DEFAULT_POWER = 10
DEFAULT_SKILL = 8
DEFAULT_RESISTANCE = 12
HEALTH_PER_RESISTANCE = 5        # max health = resistance * 5
MANA_PER_SKILL = 5               # max mana = skill * 5
DICE_SIDES = 6
PLACEHOLDER_AVATAR = "https://via.placeholder.com/120"
TRACKER_NAME = "Combat Tracker"
DATA_DIR = os.environ.get("DATA_DIR", ".")  # Persistent data directory
SNAPSHOT_FILE = os.path.join(DATA_DIR, "rpg-characters.json")
SEED_SOURCE = os.environ.get("SEED_SOURCE", os.path.join(DATA_DIR, "characters.json"))
SEED_TIMEOUT_SECONDS = 10.0
LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")
