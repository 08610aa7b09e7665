"""Quest board generation and party acceptance."""

from __future__ import annotations

import logging

from guildhall.utils.rng import Sampler, weighted_choice

from .enums import AdventurerCondition, EventType, QuestStakes, QuestStatus, QuestType
from .errors import (
    DuplicateMemberError,
    MemberUnavailableError,
    PartyTooLargeError,
    PartyTooSmallError,
    QuestCancellationError,
    QuestNotAvailableError,
    RequirementsNotMetError,
)
from .events import record_event
from .models import (
    AdventurerID,
    Campaign,
    EntityStore,
    GameState,
    Guild,
    Quest,
    QuestID,
    QuestParty,
)
from .rules_config import DEFAULT_RULES, RulesConfig

logger = logging.getLogger(__name__)

_NAME_PARTS: dict[QuestType, tuple[tuple[str, ...], tuple[str, ...]]] = {
    QuestType.INVESTIGATION: (
        ("The Mystery of", "Secrets of", "The Riddle of", "Shadows over"),
        ("the Vanished Merchant", "Blackwater Manor", "the Silent Bell", "the Ashen Ledger"),
    ),
    QuestType.COMBAT: (
        ("Clear the", "Break the", "Rout the", "Slay the"),
        ("Goblin Warren", "Bandit Camp", "Troll Bridge", "Ogre Den"),
    ),
    QuestType.EXPLORATION: (
        ("Chart the", "Into the", "Beyond the", "Delve into"),
        ("Sunken Vaults", "Whispering Caves", "Frozen Pass", "Old Dwarven Road"),
    ),
    QuestType.SOCIAL: (
        ("Negotiate with", "Court the", "Parley with", "Win over"),
        ("Merchant Council", "Duke's Envoy", "River Clans", "Temple Elders"),
    ),
    QuestType.RITUAL: (
        ("Consecrate the", "Seal the", "Cleanse the", "Bind the"),
        ("Haunted Chapel", "Rift Stones", "Cursed Well", "Moonlit Circle"),
    ),
    QuestType.SIEGE: (
        ("Storm the", "Lay Siege to", "Breach the", "Take the"),
        ("Rebel Keep", "Orc Stockade", "Bandit Fortress", "Ruined Citadel"),
    ),
    QuestType.ESCORT: (
        ("Guard the", "Escort the", "Protect the", "See Safe the"),
        ("Spice Caravan", "Pilgrim Train", "Noble Heir", "Grain Wagons"),
    ),
    QuestType.RETRIEVAL: (
        ("Recover the", "Reclaim the", "Find the", "Return the"),
        ("Stolen Relic", "Lost Crown", "Sealed Tome", "Silver Chalice"),
    ),
    QuestType.ASSASSINATION: (
        ("Silence the", "Remove the", "End the", "Hunt the"),
        ("Usurper", "Cult Leader", "Smuggler King", "Traitor Captain"),
    ),
    QuestType.DEFENSE: (
        ("Hold the", "Defend the", "Stand at", "Fortify the"),
        ("Border Village", "Mill Crossing", "Watchtower", "Harbor Gate"),
    ),
}


def effective_reward(quest: Quest, *, rules: RulesConfig = DEFAULT_RULES) -> int:
    """Base gold reward scaled by the quest's stakes."""

    return int(quest.base_gold_reward * rules.execution.stakes_reward_multiplier[quest.stakes])


def generate_available_quests(
    store: EntityStore,
    guild: Guild,
    count: int,
    *,
    rng: Sampler,
    week: int = 0,
    rules: RulesConfig = DEFAULT_RULES,
) -> list[Quest]:
    """Build ``count`` quests sized to the guild's tier.

    Identifiers are allocated from ``store`` but the quests are not
    registered; pass them to :func:`post_quests` to put them on the board.
    """

    if count < 0:
        raise ValueError("count must be non-negative")

    board = rules.quest_board
    stakes_options = list(QuestStakes)
    weights = board.stakes_weights[guild.tier]
    quests: list[Quest] = []
    for _ in range(count):
        quest_type = rng.choice(list(QuestType))
        stakes = weighted_choice(rng, stakes_options, weights)
        base_reward = board.tier_reward_base[guild.tier] * board.stakes_reward_factor[stakes]
        base_reward = max(1, base_reward + rng.randint(-board.reward_variance, board.reward_variance))
        minimum, maximum = board.party_size[quest_type]
        prefixes, suffixes = _NAME_PARTS[quest_type]
        quests.append(
            Quest(
                id=store.allocate_quest_id(),
                name=f"{rng.choice(prefixes)} {rng.choice(suffixes)}",
                quest_type=quest_type,
                stakes=stakes,
                minimum_party_size=minimum,
                maximum_party_size=maximum,
                recommended_level=board.recommended_level[stakes],
                base_gold_reward=base_reward,
                experience_reward=int(base_reward * board.experience_ratio),
                required_reputation=board.required_reputation[stakes],
                required_tier=board.required_tier[stakes],
                posted_week=week,
            )
        )
    return quests


def post_quests(state: GameState, quests: list[Quest]) -> None:
    """Register generated quests and append them to the quest board."""

    for quest in quests:
        if quest.status is not QuestStatus.AVAILABLE:
            raise ValueError(f"quest {quest.id} is not available")
        state.store.add_quest(quest)
        state.available_quests.append(quest.id)


def replenish_quest_board(
    state: GameState,
    guild: Guild,
    *,
    rng: Sampler,
    rules: RulesConfig = DEFAULT_RULES,
) -> list[Quest]:
    """Top the board up to its full size once it drops below the floor."""

    board = rules.quest_board
    if len(state.available_quests) >= board.replenish_floor:
        return []
    needed = board.board_size - len(state.available_quests)
    quests = generate_available_quests(
        state.store, guild, needed, rng=rng, week=state.total_weeks_elapsed, rules=rules
    )
    post_quests(state, quests)
    return quests


def deployed_adventurers(campaign: Campaign) -> set[AdventurerID]:
    """Every adventurer currently assigned to an active party."""

    return {
        adventurer_id
        for party in campaign.parties.values()
        for adventurer_id in party.adventurer_ids
    }


def accept_quest(
    campaign: Campaign,
    quest_id: QuestID,
    party: QuestParty,
    *,
    rules: RulesConfig = DEFAULT_RULES,
) -> Quest:
    """Assign ``party`` to an available quest.

    All checks run before any mutation; a raised error leaves the campaign
    untouched.
    """

    state, guild = campaign.state, campaign.guild
    quest = state.store.quest(quest_id)
    if quest.status is not QuestStatus.AVAILABLE or quest_id not in state.available_quests:
        raise QuestNotAvailableError(f"quest {quest_id} is {quest.status}")

    member_ids = list(party.adventurer_ids)
    if len(set(member_ids)) != len(member_ids):
        raise DuplicateMemberError("party lists an adventurer more than once")
    if len(member_ids) < quest.minimum_party_size:
        raise PartyTooSmallError(
            f"party of {len(member_ids)} below minimum {quest.minimum_party_size}"
        )
    if len(member_ids) > quest.maximum_party_size:
        raise PartyTooLargeError(
            f"party of {len(member_ids)} above maximum {quest.maximum_party_size}"
        )
    if party.leader_id is not None and party.leader_id not in member_ids:
        raise MemberUnavailableError(party.leader_id, "leader is not in the party")

    deployed = deployed_adventurers(campaign)
    members = [state.store.adventurer(adventurer_id) for adventurer_id in member_ids]
    for adventurer in members:
        if adventurer.id not in guild.roster_ids:
            raise MemberUnavailableError(adventurer.id, "not on the guild roster")
        if adventurer.id in deployed:
            raise MemberUnavailableError(adventurer.id, "already assigned to an active quest")
        if not adventurer.is_available:
            raise MemberUnavailableError(adventurer.id, str(adventurer.condition))

    if guild.reputation < quest.required_reputation:
        raise RequirementsNotMetError(
            f"reputation {guild.reputation} below required {quest.required_reputation}"
        )
    if guild.tier.rank < quest.required_tier.rank:
        raise RequirementsNotMetError(f"guild tier {guild.tier} below {quest.required_tier}")

    for adventurer in members:
        adventurer.condition = AdventurerCondition.FATIGUED
    quest.status = QuestStatus.IN_PROGRESS
    quest.accepted_week = state.total_weeks_elapsed
    state.available_quests.remove(quest_id)
    state.active_quests.append(quest_id)
    campaign.parties[quest_id] = QuestParty(adventurer_ids=member_ids, leader_id=party.leader_id)

    record_event(
        state,
        EventType.QUEST_ACCEPTED,
        f"{len(members)} adventurers set out on '{quest.name}'",
        related_entity_id=int(quest_id),
    )
    logger.debug("quest %s accepted by %s", quest_id, member_ids)
    return quest


def cancel_quest(campaign: Campaign, quest_id: QuestID) -> None:
    """Cancellation of in-progress quests is not supported."""

    quest = campaign.state.store.quest(quest_id)
    raise QuestCancellationError(f"quest {quest_id} ({quest.status}) cannot be cancelled")
