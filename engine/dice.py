"""Dice rolling for Combat Tracker.

A roll is ``n`` six-sided dice plus an effective attribute (attribute +
modifier). Every 6 is a critical and adds the effective attribute again.
A roll where every die shows 1 is a critical failure.
"""

from __future__ import annotations

import logging
import random
from enum import Enum
from typing import TYPE_CHECKING, Protocol

from pydantic import BaseModel

from config import DICE_SIDES
from engine.errors import InvalidDiceRequestError

if TYPE_CHECKING:
    from models.characters import Attribute, Character

logger = logging.getLogger(__name__)


class RandomSource(Protocol):
    """Anything with ``random.Random.randint`` semantics."""

    def randint(self, a: int, b: int) -> int: ...


class RollGrade(str, Enum):
    """Outcome of a roll measured against a target."""
    CRITICAL_FAILURE = "critical_failure"
    FAILURE = "failure"
    SUCCESS = "success"
    PERFECT_SUCCESS = "perfect_success"


class RollOutcome(BaseModel):
    """Result of a dice roll."""
    dice: list[int]
    dice_sum: int
    effective_attribute: int
    base: int                       # dice_sum + effective_attribute
    critical_count: int             # Number of 6s
    critical_bonus: int             # critical_count * effective_attribute
    final: int
    critical_failure: bool
    target: int
    grade: RollGrade | None = None  # Only graded when target > 0


def grade_roll(final: int, target: int, critical_failure: bool) -> RollGrade | None:
    """Grade a final result against a target.

    Args:
        final: Final roll total including critical bonus.
        target: Difficulty to beat; 0 or less means ungraded.
        critical_failure: Whether every die showed 1.

    Returns:
        The grade, or None when there is no target.
    """
    if target <= 0:
        return None
    if critical_failure:
        return RollGrade.CRITICAL_FAILURE
    if final >= target * 2:
        return RollGrade.PERFECT_SUCCESS
    if final >= target:
        return RollGrade.SUCCESS
    return RollGrade.FAILURE


def roll(
    dice_count: int,
    attribute_value: int,
    modifier: int = 0,
    target: int = 0,
    rng: RandomSource | None = None,
) -> RollOutcome:
    """Roll ``dice_count`` d6 against an attribute.

    Args:
        dice_count: Number of six-sided dice to roll.
        attribute_value: The attribute being tested.
        modifier: Situational modifier added to the attribute.
        target: Difficulty; grading is skipped when 0 or less.
        rng: Optional random source for seeded/testing rolls.

    Returns:
        RollOutcome with the individual dice and the graded total.

    Raises:
        InvalidDiceRequestError: If the effective attribute is not positive
            or the dice count is negative. No dice are drawn in that case.
    """
    effective = attribute_value + modifier
    if effective <= 0:
        raise InvalidDiceRequestError(
            f"Effective attribute must be greater than zero (got {effective})"
        )
    if dice_count < 0:
        raise InvalidDiceRequestError(f"Dice count cannot be negative (got {dice_count})")

    rng = rng or random.Random()
    dice = [rng.randint(1, DICE_SIDES) for _ in range(dice_count)]

    dice_sum = sum(dice)
    base = dice_sum + effective
    critical_count = sum(1 for die in dice if die == DICE_SIDES)
    critical_bonus = critical_count * effective
    final = base + critical_bonus
    critical_failure = bool(dice) and all(die == 1 for die in dice)

    outcome = RollOutcome(
        dice=dice,
        dice_sum=dice_sum,
        effective_attribute=effective,
        base=base,
        critical_count=critical_count,
        critical_bonus=critical_bonus,
        final=final,
        critical_failure=critical_failure,
        target=target,
        grade=grade_roll(final, target, critical_failure),
    )
    logger.debug("Rolled %s + %d -> %d (%s)", dice, effective, final, outcome.grade)
    return outcome


def roll_for_character(
    character: Character,
    attribute: Attribute,
    dice_count: int = 3,
    modifier: int = 0,
    target: int = 0,
    rng: RandomSource | None = None,
) -> RollOutcome:
    """Roll against one of a roster character's attributes."""
    attribute_value = getattr(character, attribute.value) or 0
    return roll(dice_count, attribute_value, modifier, target, rng=rng)
