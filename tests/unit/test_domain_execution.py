"""Tests for quest simulation and result application."""

from __future__ import annotations

import random
from collections.abc import Sequence

import pytest

from guildhall.domain import execution, quests, setup
from guildhall.domain import models as dm
from guildhall.domain.enums import (
    AdventurerCondition,
    AdventurerLevel,
    DifficultyLevel,
    EventType,
    InjuryType,
    QuestOutcome,
    QuestStakes,
    QuestStatus,
    QuestType,
)
from guildhall.domain.errors import EntityNotFoundError, QuestAlreadyResolvedError


class _ScriptedSampler:
    """Sampler returning queued values from ``random()`` and fixed picks elsewhere."""

    def __init__(self, rolls: Sequence[float], default: float = 0.99) -> None:
        self._rolls = list(rolls)
        self._default = default

    def random(self) -> float:
        return self._rolls.pop(0) if self._rolls else self._default

    def randint(self, a: int, b: int) -> int:
        return a

    def uniform(self, a: float, b: float) -> float:
        return (a + b) / 2

    def choice(self, seq):
        return seq[0]

    def sample(self, population, k):
        return list(population)[:k]


def _campaign() -> dm.Campaign:
    return setup.new_campaign("Test", "Iron Wolves", seed=7, roster_size=6)


def _quest(
    campaign: dm.Campaign,
    *,
    stakes: QuestStakes = QuestStakes.MEDIUM,
    level: AdventurerLevel = AdventurerLevel.APPRENTICE,
) -> dm.Quest:
    quest = dm.Quest(
        id=campaign.state.store.allocate_quest_id(),
        name="Recover the Stolen Relic",
        quest_type=QuestType.RETRIEVAL,
        stakes=stakes,
        minimum_party_size=2,
        maximum_party_size=4,
        recommended_level=level,
        base_gold_reward=200,
        experience_reward=20,
    )
    quests.post_quests(campaign.state, [quest])
    return quest


def _accepted(campaign: dm.Campaign, size: int = 2) -> tuple[dm.Quest, dm.QuestParty]:
    quest = _quest(campaign)
    party = dm.QuestParty(adventurer_ids=list(campaign.guild.roster_ids[:size]))
    quests.accept_quest(campaign, quest.id, party)
    return quest, campaign.parties[quest.id]


def _members(campaign: dm.Campaign, party: dm.QuestParty) -> list[dm.Adventurer]:
    return [campaign.state.store.adventurer(aid) for aid in party.adventurer_ids]


def _adventurer(adventurer_id: int, value: int, level=AdventurerLevel.JOURNEYMAN) -> dm.Adventurer:
    campaign = _campaign()
    template = campaign.state.store.adventurer(campaign.guild.roster_ids[0])
    template.id = dm.AdventurerID(adventurer_id)
    template.level = level
    template.attributes = {attribute: value for attribute in template.attributes}
    template.condition = AdventurerCondition.HEALTHY
    return template


def test_success_probability_is_clamped():
    assert execution.success_probability(1000.0, 10.0) == pytest.approx(0.95)
    assert execution.success_probability(50.0, 50.0) == pytest.approx(0.6)
    assert execution.success_probability(0.0, 50.0) == pytest.approx(0.2)


def test_success_probability_is_pure():
    assert execution.success_probability(42.0, 60.0) == execution.success_probability(42.0, 60.0)


def test_party_power_uses_synergy_and_injury_penalty():
    healthy = [_adventurer(1, 10), _adventurer(2, 10)]
    # two journeymen at 10 in every attribute: (10 + 10) * 1.1 synergy
    assert execution.party_power(healthy, QuestType.COMBAT) == pytest.approx(22.0)

    healthy[1].condition = AdventurerCondition.INJURED
    assert execution.party_power(healthy, QuestType.COMBAT) == pytest.approx((10 + 7) * 1.1)


def test_quest_difficulty_combines_stakes_level_and_campaign_difficulty():
    campaign = _campaign()
    quest = _quest(campaign, stakes=QuestStakes.HIGH, level=AdventurerLevel.ADEPT)
    assert execution.quest_difficulty(quest, DifficultyLevel.HARD) == pytest.approx(75 * 1.4 * 1.25)


@pytest.mark.parametrize(
    ("roll", "expected"),
    [
        (0.10, QuestOutcome.PERFECT_VICTORY),
        (0.30, QuestOutcome.SUCCESS),
        (0.55, QuestOutcome.PARTIAL_SUCCESS),
        (0.80, QuestOutcome.FAILURE),
        (0.95, QuestOutcome.CATASTROPHIC_FAILURE),
    ],
)
def test_outcome_bands(roll, expected):
    assert execution.determine_outcome(0.5, roll) is expected


def test_gold_delta_rewards_and_penalties():
    campaign = _campaign()
    medium = _quest(campaign, stakes=QuestStakes.MEDIUM)
    low = _quest(campaign, stakes=QuestStakes.LOW)

    assert execution.gold_delta(medium, QuestOutcome.PERFECT_VICTORY, DifficultyLevel.NORMAL) == 300
    assert execution.gold_delta(medium, QuestOutcome.SUCCESS, DifficultyLevel.EASY) == 250
    assert execution.gold_delta(medium, QuestOutcome.FAILURE, DifficultyLevel.NORMAL) == -10
    assert (
        execution.gold_delta(medium, QuestOutcome.CATASTROPHIC_FAILURE, DifficultyLevel.NORMAL)
        == -20
    )
    assert execution.gold_delta(low, QuestOutcome.FAILURE, DifficultyLevel.NORMAL) == 0


def test_simulation_is_deterministic_for_a_seed():
    campaign = _campaign()
    quest, party = _accepted(campaign, size=3)
    members = _members(campaign, party)

    first = execution.simulate_quest(
        quest, party, members, DifficultyLevel.NORMAL, rng=random.Random(1234)
    )
    second = execution.simulate_quest(
        quest, party, members, DifficultyLevel.NORMAL, rng=random.Random(1234)
    )
    assert first == second


def test_simulation_does_not_mutate_campaign():
    campaign = _campaign()
    quest, party = _accepted(campaign)
    before = (quest.status, list(campaign.state.active_quests), campaign.guild.finances.treasury)
    execution.simulate_quest(
        quest, party, _members(campaign, party), DifficultyLevel.NORMAL, rng=random.Random(5)
    )
    assert (quest.status, campaign.state.active_quests, campaign.guild.finances.treasury) == before


def test_simulation_requires_every_party_member():
    campaign = _campaign()
    quest, party = _accepted(campaign)
    with pytest.raises(EntityNotFoundError):
        execution.simulate_quest(
            quest, party, _members(campaign, party)[:1], DifficultyLevel.NORMAL, rng=random.Random(5)
        )


def test_scripted_outcome_and_injury():
    campaign = _campaign()
    quest, party = _accepted(campaign)
    members = _members(campaign, party)
    # outcome roll, member one injury check + severity, member two injury check
    sampler = _ScriptedSampler([0.999, 0.0, 0.6, 0.99])

    result = execution.simulate_quest(quest, party, members, DifficultyLevel.NORMAL, rng=sampler)

    assert result.outcome is QuestOutcome.CATASTROPHIC_FAILURE
    assert result.injuries == {members[0].id: InjuryType.SERIOUS_WOUND}
    assert result.ratings[members[1].id] == pytest.approx(1.0)
    assert result.gold_delta == -20
    assert result.experience_per_member == 2


def test_apply_success_credits_treasury_once():
    campaign = _campaign()
    quest, party = _accepted(campaign)
    members = _members(campaign, party)
    treasury = campaign.guild.finances.treasury
    reputation = campaign.guild.reputation

    result = execution.simulate_quest(
        quest, party, members, DifficultyLevel.NORMAL, rng=_ScriptedSampler([0.0])
    )
    assert result.outcome is QuestOutcome.PERFECT_VICTORY

    execution.apply_quest_results(campaign, quest.id, result, rng=_ScriptedSampler([]))

    assert campaign.guild.finances.treasury == treasury + result.gold_delta == treasury + 300
    assert campaign.guild.reputation == reputation + 5
    assert quest.status is QuestStatus.COMPLETED
    assert quest.result is not None and quest.result.completed_week == 0
    assert quest.id in campaign.state.completed_quests
    assert quest.id not in campaign.state.active_quests
    assert campaign.state.events[-1].event_type is EventType.QUEST_COMPLETED
    assert quest.id not in campaign.parties
    # two rolled drops plus the perfect-victory bonus
    assert [item.name for item in campaign.guild.inventory] == [drop.name for drop in result.loot]
    assert len(result.loot) == 3
    for member in members:
        assert member.condition is AdventurerCondition.HEALTHY
        assert member.statistics.quests_completed == 1
        assert member.experience == 30

    with pytest.raises(QuestAlreadyResolvedError):
        execution.apply_quest_results(campaign, quest.id, result, rng=_ScriptedSampler([]))
    assert campaign.guild.finances.treasury == treasury + 300


def test_apply_failure_injures_and_debits():
    campaign = _campaign()
    quest, party = _accepted(campaign)
    members = _members(campaign, party)
    treasury = campaign.guild.finances.treasury

    result = dm.QuestResult(
        outcome=QuestOutcome.FAILURE,
        success_probability=0.4,
        party_power=20.0,
        quest_difficulty=50.0,
        gold_delta=-10,
        experience_per_member=4,
        injuries={members[0].id: InjuryType.MINOR_WOUND},
        ratings={member.id: 3.0 for member in members},
    )
    execution.apply_quest_results(campaign, quest.id, result, rng=_ScriptedSampler([]))

    assert campaign.guild.finances.treasury == treasury - 10
    assert members[0].condition is AdventurerCondition.INJURED
    assert members[0].injuries == [dm.Injury(InjuryType.MINOR_WOUND, 1)]
    assert members[1].condition is AdventurerCondition.HEALTHY
    assert members[1].statistics.quests_failed == 1
    assert quest.id not in campaign.parties
    assert campaign.guild.inventory == []
    event_types = [event.event_type for event in campaign.state.events[-2:]]
    assert event_types == [EventType.ADVENTURER_INJURED, EventType.QUEST_FAILED]


def test_apply_to_available_quest_is_rejected():
    campaign = _campaign()
    quest = _quest(campaign)
    result = dm.QuestResult(
        outcome=QuestOutcome.SUCCESS,
        success_probability=0.6,
        party_power=50.0,
        quest_difficulty=50.0,
        gold_delta=200,
        experience_per_member=20,
    )
    with pytest.raises(QuestAlreadyResolvedError):
        execution.apply_quest_results(campaign, quest.id, result, rng=_ScriptedSampler([]))


def test_apply_can_level_up_members():
    campaign = _campaign()
    quest, party = _accepted(campaign)
    members = _members(campaign, party)
    for member in members:
        member.level = AdventurerLevel.APPRENTICE
        member.experience = 0
    result = dm.QuestResult(
        outcome=QuestOutcome.SUCCESS,
        success_probability=0.6,
        party_power=50.0,
        quest_difficulty=50.0,
        gold_delta=200,
        experience_per_member=100,
    )

    level_ups = execution.apply_quest_results(campaign, quest.id, result, rng=_ScriptedSampler([]))

    assert [level_up.adventurer_id for level_up in level_ups] == party.adventurer_ids
    assert all(member.level is AdventurerLevel.JOURNEYMAN for member in members)
