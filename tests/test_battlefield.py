"""Tests for battlefield zones."""

import math

import pytest

from config import BATTLEFIELD_SECTIONS, DEFAULT_BATTLEFIELD_SECTION
from engine.battlefield import (
    assign_zone,
    clamp_zone,
    ensure_positions,
    normalize_zone,
    zone_members,
)
from models.characters import Character
from models.tracker_state import TrackerState


def _make_character(char_id: int = 1, section=None) -> Character:
    """Helper to create a test character."""
    return Character(
        id=char_id,
        name="Test",
        power=10,
        skill=8,
        resistance=12,
        battlefield_section=section,
    )


class TestAssignZone:
    """Tests for assign_zone()."""

    def test_in_range(self):
        assert assign_zone(_make_character(), 3).battlefield_section == 3

    def test_clamps_high(self):
        assert assign_zone(_make_character(), 7).battlefield_section == 4

    def test_clamps_low(self):
        assert assign_zone(_make_character(), -1).battlefield_section == 0

    def test_clamp_zone_edges(self):
        assert clamp_zone(0) == 0
        assert clamp_zone(BATTLEFIELD_SECTIONS - 1) == BATTLEFIELD_SECTIONS - 1


class TestNormalizeZone:
    """Tests for normalize_zone()."""

    def test_missing_goes_to_middle(self):
        assert normalize_zone(_make_character()).battlefield_section == DEFAULT_BATTLEFIELD_SECTION
        assert DEFAULT_BATTLEFIELD_SECTION == 2

    def test_nan_goes_to_middle(self):
        char = _make_character(section=math.nan)
        assert normalize_zone(char).battlefield_section == 2

    @pytest.mark.parametrize("value", [math.inf, -math.inf])
    def test_infinite_goes_to_middle(self, value):
        assert normalize_zone(_make_character(section=value)).battlefield_section == 2

    def test_valid_kept(self):
        assert normalize_zone(_make_character(section=0)).battlefield_section == 0

    def test_out_of_range_clamped(self):
        assert normalize_zone(_make_character(section=12)).battlefield_section == 4


class TestZoneMembers:
    """Tests for zone_members() and ensure_positions()."""

    def test_groups_in_order(self):
        state = TrackerState(characters=[
            _make_character(1, 0),
            _make_character(2),
            _make_character(3, 4),
            _make_character(4, 0),
        ])
        zones = zone_members(state)
        assert len(zones) == BATTLEFIELD_SECTIONS
        assert zones == [[1, 4], [], [2], [], [3]]

    def test_respects_given_order(self):
        state = TrackerState(characters=[_make_character(1, 1), _make_character(2, 1)])
        zones = zone_members(state, list(reversed(state.characters)))
        assert zones[1] == [2, 1]

    def test_ensure_positions(self):
        state = TrackerState(characters=[_make_character(1), _make_character(2, 9)])
        ensure_positions(state)
        assert [c.battlefield_section for c in state.characters] == [2, 4]
