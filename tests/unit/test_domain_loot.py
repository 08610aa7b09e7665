"""Tests for quest loot rolls and the guild inventory."""

from __future__ import annotations

import random

import pytest

from guildhall.domain import execution, loot, quests, setup
from guildhall.domain import models as dm
from guildhall.domain.enums import (
    AdventurerLevel,
    DifficultyLevel,
    EventType,
    ItemCategory,
    LootTier,
    QuestOutcome,
    QuestStakes,
    QuestType,
)
from guildhall.domain.rules_config import DEFAULT_RULES


def _campaign() -> dm.Campaign:
    return setup.new_campaign("Test", "Iron Wolves", seed=7, roster_size=6)


def _quest(
    campaign: dm.Campaign,
    *,
    stakes: QuestStakes = QuestStakes.MEDIUM,
    quest_type: QuestType = QuestType.COMBAT,
) -> dm.Quest:
    quest = dm.Quest(
        id=campaign.state.store.allocate_quest_id(),
        name="Clear the Barrow Mound",
        quest_type=quest_type,
        stakes=stakes,
        minimum_party_size=2,
        maximum_party_size=4,
        recommended_level=AdventurerLevel.APPRENTICE,
        base_gold_reward=200,
        experience_reward=20,
    )
    quests.post_quests(campaign.state, [quest])
    return quest


@pytest.mark.parametrize(
    "outcome", [QuestOutcome.FAILURE, QuestOutcome.CATASTROPHIC_FAILURE]
)
def test_failures_yield_nothing(outcome):
    quest = _quest(_campaign(), stakes=QuestStakes.CRITICAL)
    for seed in range(5):
        assert loot.roll_loot(quest, outcome, rng=random.Random(seed)) == ()


def test_outcome_shifts_the_loot_tier():
    quest = _quest(_campaign(), stakes=QuestStakes.HIGH)
    assert loot.loot_tier(quest, QuestOutcome.SUCCESS) is LootTier.RARE
    assert loot.loot_tier(quest, QuestOutcome.PERFECT_VICTORY) is LootTier.EPIC
    assert loot.loot_tier(quest, QuestOutcome.PARTIAL_SUCCESS) is LootTier.UNCOMMON
    assert LootTier.LEGENDARY.upgraded() is LootTier.LEGENDARY
    assert LootTier.POOR.downgraded() is LootTier.POOR


@pytest.mark.parametrize("stakes", list(QuestStakes))
def test_drop_counts_follow_stakes_and_outcome(stakes):
    quest = _quest(_campaign(), stakes=stakes)
    low, high = DEFAULT_RULES.loot.stakes_drops[stakes]
    for seed in range(20):
        success = loot.roll_loot(quest, QuestOutcome.SUCCESS, rng=random.Random(seed))
        partial = loot.roll_loot(quest, QuestOutcome.PARTIAL_SUCCESS, rng=random.Random(seed))
        perfect = loot.roll_loot(quest, QuestOutcome.PERFECT_VICTORY, rng=random.Random(seed))
        assert low <= len(success) <= high
        assert max(0, low - 1) <= len(partial) <= high - 1
        # one extra drop plus the bonus item
        assert low + 2 <= len(perfect) <= high + 2
        assert all(drop.value >= 1 for drop in success + partial + perfect)


def test_perfect_victory_bonus_is_weapon_or_accessory():
    quest = _quest(_campaign(), quest_type=QuestType.SOCIAL)
    for seed in range(10):
        drops = loot.roll_loot(quest, QuestOutcome.PERFECT_VICTORY, rng=random.Random(seed))
        assert drops[-1].category in (ItemCategory.WEAPON, ItemCategory.ACCESSORY)


def test_categories_come_from_the_quest_type_table():
    quest = _quest(_campaign(), stakes=QuestStakes.CRITICAL, quest_type=QuestType.RITUAL)
    allowed = set(DEFAULT_RULES.loot.category_weights[QuestType.RITUAL])
    for seed in range(20):
        drops = loot.roll_loot(quest, QuestOutcome.SUCCESS, rng=random.Random(seed))
        assert {drop.category for drop in drops} <= allowed


def test_simulated_loot_is_committed_to_inventory():
    campaign = _campaign()
    quest = _quest(campaign, stakes=QuestStakes.LOW)
    party = dm.QuestParty(adventurer_ids=list(campaign.guild.roster_ids[:2]))
    quests.accept_quest(campaign, quest.id, party)
    members = [campaign.state.store.adventurer(aid) for aid in party.adventurer_ids]

    result = next(
        candidate
        for seed in range(200)
        if (
            candidate := execution.simulate_quest(
                quest, party, members, DifficultyLevel.NORMAL, rng=random.Random(seed)
            )
        ).loot
    )
    execution.apply_quest_results(campaign, quest.id, result, rng=random.Random(0))

    inventory = campaign.guild.inventory
    assert [item.name for item in inventory] == [drop.name for drop in result.loot]
    assert all(item.source_quest_id == quest.id for item in inventory)
    assert len({item.id for item in inventory}) == len(inventory)
    found = [e for e in campaign.state.events if e.event_type is EventType.LOOT_OBTAINED]
    assert [e.message for e in found] == [f"Found: {item.name}" for item in inventory]
    assert quest.result is not None and quest.result.loot == result.loot
