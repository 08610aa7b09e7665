"""Experience curve and level advancement."""

from __future__ import annotations

from dataclasses import dataclass, field

from guildhall.utils.rng import Sampler

from .enums import AdventurerLevel, AttributeType
from .models import Adventurer, AdventurerID
from .rules_config import DEFAULT_RULES, RulesConfig


@dataclass(frozen=True, slots=True)
class LevelUp:
    """Record of a single level gained."""

    adventurer_id: AdventurerID
    old_level: AdventurerLevel
    new_level: AdventurerLevel
    new_wage: int
    attribute_gains: dict[AttributeType, int] = field(default_factory=dict)


def experience_required(level: AdventurerLevel, *, rules: RulesConfig = DEFAULT_RULES) -> int | None:
    """Experience needed to advance out of ``level``; ``None`` at the cap."""

    if level.next() is None:
        return None
    leveling = rules.leveling
    return int(leveling.base_experience * leveling.experience_scaling**level.rank)


def calculate_wage(adventurer: Adventurer, *, rules: RulesConfig = DEFAULT_RULES) -> int:
    """Weekly wage from level, attribute average and career record."""

    leveling = rules.leveling
    values = list(adventurer.attributes.values())
    average = sum(values) / len(values) if values else 0.0
    return (
        leveling.base_wage[adventurer.level]
        + int(average * leveling.wage_attribute_factor)
        + adventurer.statistics.quests_completed * leveling.wage_per_quest
    )


def grant_experience(
    adventurer: Adventurer,
    amount: int,
    *,
    rng: Sampler,
    rules: RulesConfig = DEFAULT_RULES,
) -> list[LevelUp]:
    """Add experience and apply every level-up it pays for, in order."""

    if amount < 0:
        raise ValueError("experience amount must be non-negative")

    adventurer.experience += amount
    adventurer.total_experience += amount

    level_ups: list[LevelUp] = []
    while True:
        required = experience_required(adventurer.level, rules=rules)
        if required is None or adventurer.experience < required:
            break
        adventurer.experience -= required
        level_ups.append(_level_up(adventurer, rng, rules))
    return level_ups


def _level_up(adventurer: Adventurer, rng: Sampler, rules: RulesConfig) -> LevelUp:
    old_level = adventurer.level
    new_level = old_level.next()
    assert new_level is not None
    adventurer.level = new_level

    cap = rules.leveling.attribute_cap
    primary = list(rules.leveling.class_primary.get(adventurer.primary_class, ()))
    others = [attribute for attribute in AttributeType if attribute not in primary]
    chosen: list[AttributeType] = []
    if primary:
        chosen += rng.sample(primary, rng.randint(1, min(2, len(primary))))
    chosen += rng.sample(others, rng.randint(1, 2))

    gains: dict[AttributeType, int] = {}
    for attribute in chosen:
        current = adventurer.attribute(attribute)
        if current < cap:
            adventurer.attributes[attribute] = current + 1
            gains[attribute] = 1

    adventurer.weekly_wage = calculate_wage(adventurer, rules=rules)
    return LevelUp(
        adventurer_id=adventurer.id,
        old_level=old_level,
        new_level=new_level,
        new_wage=adventurer.weekly_wage,
        attribute_gains=gains,
    )
