"""Tests for the combat state machine: modes, ordering and turn advance."""

import pytest

from engine.combat import (
    advance_turn,
    effective_order,
    get_current_turn_character,
    set_initiative,
    sorted_characters,
    start_combat,
    toggle_combat_mode,
)
from engine.errors import InvalidTransitionError
from models.characters import Character
from models.tracker_state import CombatMode, TrackerState


def _make_character(char_id: int, initiative: int | None = None) -> Character:
    """Helper to create a test character."""
    return Character(
        id=char_id,
        name=f"Char_{char_id}",
        power=10,
        skill=8,
        resistance=12,
        initiative=initiative,
    )


def _make_state(*initiatives: int | None) -> TrackerState:
    """Helper to create a state with one character per initiative value."""
    return TrackerState(
        characters=[_make_character(i + 1, init) for i, init in enumerate(initiatives)]
    )


def _start(state: TrackerState) -> TrackerState:
    toggle_combat_mode(state)
    return start_combat(state)


def _ids(chars: list[Character]) -> list[int]:
    return [c.id for c in chars]


class TestToggleCombatMode:
    """Tests for toggle_combat_mode()."""

    def test_starts_normal(self):
        assert TrackerState().combat.mode == CombatMode.NORMAL

    def test_normal_to_preparation(self):
        state = _make_state(5, 3)
        assert toggle_combat_mode(state) == CombatMode.PREPARATION
        assert state.combat.turn_order == {}
        assert state.combat.initiative_original == {}

    def test_preparation_to_normal_clears_everything(self):
        state = _make_state(5, 3)
        toggle_combat_mode(state)
        state.combat.initiative_original = {1: 5}
        assert toggle_combat_mode(state) == CombatMode.NORMAL
        assert state.combat.turn_order == {}
        assert state.combat.initiative_original == {}

    def test_active_to_normal_keeps_initiative(self):
        state = _start(_make_state(5, 3, 9))
        assert toggle_combat_mode(state) == CombatMode.NORMAL
        assert state.combat.turn_order == {}
        assert state.combat.initiative_original == {1: 5, 2: 3, 3: 9}
        assert [c.initiative for c in state.characters] == [5, 3, 9]

    def test_active_to_normal_after_partial_turn_orders(self):
        """Leaving combat removes every turn order regardless of how many exist."""
        state = _start(_make_state(5, 3))
        del state.combat.turn_order[1]
        toggle_combat_mode(state)
        assert state.combat.turn_order == {}


class TestStartCombat:
    """Tests for start_combat()."""

    def test_sets_active(self):
        state = _start(_make_state(5, 3))
        assert state.combat.mode == CombatMode.ACTIVE

    def test_turn_order_from_initiative(self):
        state = _start(_make_state(5, None, 12))
        assert state.combat.turn_order == {1: 5, 2: 0, 3: 12}
        assert state.combat.initiative_original == {1: 5, 2: 0, 3: 12}

    def test_original_initiative_captured_once(self):
        state = _start(_make_state(5, 3))
        toggle_combat_mode(state)          # ACTIVE -> NORMAL keeps originals
        state.characters[0].initiative = 20
        _start(state)
        assert state.combat.initiative_original[1] == 5
        assert state.combat.turn_order[1] == 20

    def test_from_normal_fails(self):
        state = _make_state(5, 3)
        with pytest.raises(InvalidTransitionError):
            start_combat(state)
        assert state.combat.mode == CombatMode.NORMAL
        assert state.combat.turn_order == {}

    def test_from_active_fails(self):
        state = _start(_make_state(5, 3))
        with pytest.raises(InvalidTransitionError):
            start_combat(state)

    def test_empty_roster(self):
        state = _start(TrackerState())
        assert state.combat.mode == CombatMode.ACTIVE
        assert get_current_turn_character(state) is None


class TestSortedCharacters:
    """Tests for sorted_characters()."""

    def test_normal_keeps_insertion_order(self):
        state = _make_state(1, 9, 5)
        assert _ids(sorted_characters(state)) == [1, 2, 3]

    def test_preparation_sorts_by_initiative(self):
        state = _make_state(1, 9, None, 5)
        toggle_combat_mode(state)
        assert _ids(sorted_characters(state)) == [2, 4, 1, 3]

    def test_ties_keep_roster_order(self):
        state = _make_state(4, 4, 4)
        toggle_combat_mode(state)
        assert _ids(sorted_characters(state)) == [1, 2, 3]

    def test_active_sorts_by_turn_order(self):
        state = _start(_make_state(1, 9, 5))
        state.combat.turn_order[1] = 50
        assert _ids(sorted_characters(state)) == [1, 2, 3]

    def test_active_falls_back_to_initiative(self):
        state = _start(_make_state(1, 9, 5))
        del state.combat.turn_order[2]
        state.characters[1].initiative = 3
        assert effective_order(state, state.characters[1]) == 3
        assert _ids(sorted_characters(state)) == [3, 2, 1]


class TestCurrentTurn:
    """Tests for get_current_turn_character()."""

    def test_none_outside_active(self):
        state = _make_state(5, 3)
        assert get_current_turn_character(state) is None
        toggle_combat_mode(state)
        assert get_current_turn_character(state) is None

    def test_highest_goes_first(self):
        state = _start(_make_state(5, 3, 9))
        assert get_current_turn_character(state).id == 3


class TestSetInitiative:
    """Tests for set_initiative()."""

    def test_preparation(self):
        state = _make_state(None, None)
        toggle_combat_mode(state)
        char = set_initiative(state, 2, 15)
        assert char.initiative == 15
        assert state.combat.turn_order == {}

    def test_active_updates_turn_order(self):
        state = _start(_make_state(5, 3))
        set_initiative(state, 2, 30)
        assert state.combat.turn_order[2] == 30
        assert get_current_turn_character(state).id == 2

    def test_unknown_id(self):
        state = _make_state(5)
        assert set_initiative(state, 99, 3) is None


class TestAdvanceTurn:
    """Tests for advance_turn()."""

    def test_top_goes_to_bottom(self):
        state = _start(_make_state(5, 3, 9))
        finished = advance_turn(state)
        assert finished.id == 3
        assert state.combat.turn_order[3] == 2
        assert _ids(sorted_characters(state)) == [1, 2, 3]

    def test_noop_outside_active(self):
        state = _make_state(5, 3)
        assert advance_turn(state) is None
        toggle_combat_mode(state)
        assert advance_turn(state) is None
        assert state.combat.turn_order == {}

    def test_noop_on_empty_roster(self):
        state = _start(TrackerState())
        assert advance_turn(state) is None

    def test_tie_first_in_roster_wins(self):
        state = _start(_make_state(7, 7, 1))
        assert advance_turn(state).id == 1
        assert state.combat.turn_order[1] == 0

    def test_full_rotation(self):
        """N advances put every character on top exactly once."""
        state = _start(_make_state(10, 20, 30, 40))
        initial = _ids(sorted_characters(state))
        seen = []
        for _ in range(4):
            seen.append(get_current_turn_character(state).id)
            untouched = _ids(sorted_characters(state))[1:]
            advance_turn(state)
            assert _ids(sorted_characters(state))[:-1] == untouched
        assert seen == initial
        assert _ids(sorted_characters(state)) == initial

    def test_single_character(self):
        state = _start(_make_state(4))
        advance_turn(state)
        assert state.combat.turn_order[1] == 3
        assert get_current_turn_character(state).id == 1

    def test_initiative_untouched(self):
        state = _start(_make_state(5, 3))
        advance_turn(state)
        assert [c.initiative for c in state.characters] == [5, 3]
