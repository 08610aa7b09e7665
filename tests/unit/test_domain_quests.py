"""Tests for quest generation and acceptance."""

from __future__ import annotations

import copy
import random

import pytest

from guildhall.domain import models as dm
from guildhall.domain import quests, setup
from guildhall.domain.enums import (
    AdventurerCondition,
    AdventurerLevel,
    EventType,
    GuildTier,
    InjuryType,
    QuestStakes,
    QuestStatus,
    QuestType,
)
from guildhall.domain.errors import (
    DuplicateMemberError,
    EntityNotFoundError,
    MemberUnavailableError,
    PartyTooLargeError,
    PartyTooSmallError,
    QuestCancellationError,
    QuestNotAvailableError,
    RequirementsNotMetError,
)
from guildhall.domain.rules_config import DEFAULT_RULES


def _campaign() -> dm.Campaign:
    return setup.new_campaign("Test", "Iron Wolves", seed=7, roster_size=6)


def _post_quest(
    campaign: dm.Campaign,
    *,
    minimum: int = 2,
    maximum: int = 4,
    stakes: QuestStakes = QuestStakes.LOW,
    reputation: int = 0,
    tier: GuildTier = GuildTier.FLEDGLING,
) -> dm.Quest:
    quest = dm.Quest(
        id=campaign.state.store.allocate_quest_id(),
        name="Clear the Goblin Warren",
        quest_type=QuestType.COMBAT,
        stakes=stakes,
        minimum_party_size=minimum,
        maximum_party_size=maximum,
        recommended_level=AdventurerLevel.APPRENTICE,
        base_gold_reward=200,
        experience_reward=20,
        required_reputation=reputation,
        required_tier=tier,
    )
    quests.post_quests(campaign.state, [quest])
    return quest


def _party(campaign: dm.Campaign, size: int) -> dm.QuestParty:
    return dm.QuestParty(adventurer_ids=list(campaign.guild.roster_ids[:size]))


def test_generated_quests_respect_type_bounds():
    campaign = _campaign()
    generated = quests.generate_available_quests(
        campaign.state.store, campaign.guild, 50, rng=random.Random(11)
    )
    assert len(generated) == 50
    assert len({quest.id for quest in generated}) == 50
    for quest in generated:
        minimum, maximum = DEFAULT_RULES.quest_board.party_size[quest.quest_type]
        assert (quest.minimum_party_size, quest.maximum_party_size) == (minimum, maximum)
        assert quest.status is QuestStatus.AVAILABLE
        assert quest.experience_reward == int(quest.base_gold_reward * 0.1)
        # fledgling guilds never see critical stakes
        assert quest.stakes is not QuestStakes.CRITICAL


def test_generated_quests_are_not_registered_until_posted():
    campaign = _campaign()
    before = set(campaign.state.store.quests)
    generated = quests.generate_available_quests(
        campaign.state.store, campaign.guild, 2, rng=random.Random(1)
    )
    assert set(campaign.state.store.quests) == before

    quests.post_quests(campaign.state, generated)
    assert campaign.state.available_quests[-2:] == [quest.id for quest in generated]


def test_new_campaign_board_is_full():
    campaign = _campaign()
    assert len(campaign.state.available_quests) == DEFAULT_RULES.quest_board.board_size


def test_replenish_only_below_floor():
    campaign = _campaign()
    assert quests.replenish_quest_board(campaign.state, campaign.guild, rng=random.Random(1)) == []

    campaign.state.available_quests = campaign.state.available_quests[:4]
    posted = quests.replenish_quest_board(campaign.state, campaign.guild, rng=random.Random(1))
    assert len(posted) == 4
    assert len(campaign.state.available_quests) == 8


def test_effective_reward_scales_with_stakes():
    campaign = _campaign()
    quest = _post_quest(campaign, stakes=QuestStakes.HIGH)
    assert quests.effective_reward(quest) == 300


def test_accept_quest_assigns_party():
    campaign = _campaign()
    quest = _post_quest(campaign)
    party = _party(campaign, 2)

    quests.accept_quest(campaign, quest.id, party)

    assert quest.status is QuestStatus.IN_PROGRESS
    assert quest.id in campaign.state.active_quests
    assert quest.id not in campaign.state.available_quests
    assert campaign.parties[quest.id].adventurer_ids == party.adventurer_ids
    for adventurer_id in party.adventurer_ids:
        assert campaign.state.store.adventurer(adventurer_id).condition is AdventurerCondition.FATIGUED
    assert campaign.state.events[-1].event_type is EventType.QUEST_ACCEPTED


def test_accept_records_acceptance_week():
    campaign = _campaign()
    campaign.state.total_weeks_elapsed = 3
    quest = _post_quest(campaign)
    quests.accept_quest(campaign, quest.id, _party(campaign, 2))
    assert quest.accepted_week == 3


@pytest.mark.parametrize(
    ("size", "error"),
    [(1, PartyTooSmallError), (5, PartyTooLargeError)],
)
def test_party_size_bounds_leave_state_unchanged(size, error):
    campaign = _campaign()
    quest = _post_quest(campaign, minimum=2, maximum=4)
    snapshot = copy.deepcopy(campaign)

    with pytest.raises(error):
        quests.accept_quest(campaign, quest.id, _party(campaign, size))

    assert campaign == snapshot


def test_duplicate_member_rejected():
    campaign = _campaign()
    quest = _post_quest(campaign)
    member = campaign.guild.roster_ids[0]
    with pytest.raises(DuplicateMemberError):
        quests.accept_quest(campaign, quest.id, dm.QuestParty(adventurer_ids=[member, member]))


def test_injured_member_rejected_without_mutation():
    campaign = _campaign()
    quest = _post_quest(campaign)
    party = _party(campaign, 3)
    injured = campaign.state.store.adventurer(party.adventurer_ids[2])
    injured.injuries.append(dm.Injury(InjuryType.SERIOUS_WOUND, 3))
    injured.condition = AdventurerCondition.INJURED
    snapshot = copy.deepcopy(campaign)

    with pytest.raises(MemberUnavailableError) as excinfo:
        quests.accept_quest(campaign, quest.id, party)

    assert excinfo.value.adventurer_id == injured.id
    assert campaign == snapshot
    # members validated before the injured one keep their condition
    first = campaign.state.store.adventurer(party.adventurer_ids[0])
    assert first.condition is AdventurerCondition.HEALTHY


def test_adventurer_cannot_join_two_active_parties():
    campaign = _campaign()
    first = _post_quest(campaign)
    second = _post_quest(campaign)
    quests.accept_quest(campaign, first.id, _party(campaign, 2))

    shared = campaign.guild.roster_ids[1]
    # force the shared member back to healthy so only the deployment check can fail
    campaign.state.store.adventurer(shared).condition = AdventurerCondition.HEALTHY
    with pytest.raises(MemberUnavailableError, match="already assigned"):
        quests.accept_quest(
            campaign,
            second.id,
            dm.QuestParty(adventurer_ids=[shared, campaign.guild.roster_ids[2]]),
        )


def test_member_must_be_on_roster():
    campaign = _campaign()
    quest = _post_quest(campaign)
    outsider = campaign.guild.roster_ids.pop()
    with pytest.raises(MemberUnavailableError, match="roster"):
        quests.accept_quest(
            campaign, quest.id, dm.QuestParty(adventurer_ids=[campaign.guild.roster_ids[0], outsider])
        )


def test_unknown_member_raises_entity_not_found():
    campaign = _campaign()
    quest = _post_quest(campaign)
    with pytest.raises(EntityNotFoundError):
        quests.accept_quest(
            campaign,
            quest.id,
            dm.QuestParty(adventurer_ids=[campaign.guild.roster_ids[0], dm.AdventurerID(999)]),
        )


def test_reputation_gate():
    campaign = _campaign()
    quest = _post_quest(campaign, reputation=50)
    with pytest.raises(RequirementsNotMetError, match="reputation"):
        quests.accept_quest(campaign, quest.id, _party(campaign, 2))


def test_tier_gate():
    campaign = _campaign()
    quest = _post_quest(campaign, tier=GuildTier.ELITE)
    with pytest.raises(RequirementsNotMetError, match="tier"):
        quests.accept_quest(campaign, quest.id, _party(campaign, 2))


def test_accepting_twice_fails():
    campaign = _campaign()
    quest = _post_quest(campaign)
    quests.accept_quest(campaign, quest.id, _party(campaign, 2))
    with pytest.raises(QuestNotAvailableError):
        quests.accept_quest(
            campaign,
            quest.id,
            dm.QuestParty(adventurer_ids=list(campaign.guild.roster_ids[2:4])),
        )


def test_cancel_is_unsupported():
    campaign = _campaign()
    quest = _post_quest(campaign)
    quests.accept_quest(campaign, quest.id, _party(campaign, 2))
    with pytest.raises(QuestCancellationError):
        quests.cancel_quest(campaign, quest.id)
    assert quest.status is QuestStatus.IN_PROGRESS
