"""Quest simulation and result application.

Simulation is a pure function of its inputs plus the sampler handed in; it
never touches the campaign.  :func:`apply_quest_results` is the only place
a quest outcome is committed, and it refuses to commit twice.
"""

from __future__ import annotations

import logging
from dataclasses import replace

from guildhall.utils.rng import Sampler

from . import finances
from .loot import roll_loot
from .enums import (
    AdventurerCondition,
    DifficultyLevel,
    EventType,
    InjuryType,
    QuestOutcome,
    QuestStatus,
    QuestType,
    TransactionCategory,
)
from .errors import EntityNotFoundError, QuestAlreadyResolvedError
from .events import record_event
from .leveling import LevelUp, grant_experience
from .models import (
    Adventurer,
    AdventurerID,
    Campaign,
    Injury,
    Item,
    Quest,
    QuestID,
    QuestParty,
    QuestResult,
)
from .quests import effective_reward
from .rules_config import DEFAULT_RULES, RulesConfig

logger = logging.getLogger(__name__)


def party_power(
    adventurers: list[Adventurer],
    quest_type: QuestType,
    *,
    rules: RulesConfig = DEFAULT_RULES,
) -> float:
    """Combined strength of a party for the given quest type."""

    if not adventurers:
        return 0.0
    execution = rules.execution
    attributes = execution.primary_attributes[quest_type]
    total = 0.0
    for adventurer in adventurers:
        average = sum(adventurer.attribute(a) for a in attributes) / len(attributes)
        power = average * execution.level_power[adventurer.level]
        if adventurer.condition is AdventurerCondition.INJURED or adventurer.injuries:
            power *= execution.injured_power_factor
        total += power
    synergy = execution.party_synergy[min(len(adventurers), len(execution.party_synergy)) - 1]
    return total * synergy


def quest_difficulty(
    quest: Quest,
    difficulty: DifficultyLevel,
    *,
    rules: RulesConfig = DEFAULT_RULES,
) -> float:
    execution = rules.execution
    return (
        execution.stakes_difficulty[quest.stakes]
        * execution.level_difficulty[quest.recommended_level]
        * rules.difficulty.enemy_strength[difficulty]
    )


def success_probability(
    power: float,
    difficulty_score: float,
    *,
    rules: RulesConfig = DEFAULT_RULES,
) -> float:
    """Chance of at least a partial success, clamped to the configured bounds."""

    execution = rules.execution
    if difficulty_score <= 0:
        return execution.max_chance
    ratio = power / difficulty_score
    chance = execution.base_chance + (ratio - 1.0) * execution.ratio_slope
    return min(execution.max_chance, max(execution.min_chance, chance))


def determine_outcome(
    probability: float,
    roll: float,
    *,
    rules: RulesConfig = DEFAULT_RULES,
) -> QuestOutcome:
    """Map a uniform roll in [0, 1) onto the five outcome bands."""

    execution = rules.execution
    remainder = 1.0 - probability
    if roll < probability * execution.perfect_band:
        return QuestOutcome.PERFECT_VICTORY
    if roll < probability:
        return QuestOutcome.SUCCESS
    if roll < probability + remainder * execution.partial_band:
        return QuestOutcome.PARTIAL_SUCCESS
    if roll < probability + remainder * execution.failure_band:
        return QuestOutcome.FAILURE
    return QuestOutcome.CATASTROPHIC_FAILURE


def gold_delta(
    quest: Quest,
    outcome: QuestOutcome,
    difficulty: DifficultyLevel,
    *,
    rules: RulesConfig = DEFAULT_RULES,
) -> int:
    """Treasury change for an outcome: a reward, or a penalty on failure."""

    execution = rules.execution
    reward = effective_reward(quest, rules=rules)
    if outcome.is_success:
        return int(
            reward * execution.outcome_gold[outcome] * rules.difficulty.reward_multiplier[difficulty]
        )
    penalty = reward * execution.failure_penalty[quest.stakes]
    if outcome is QuestOutcome.CATASTROPHIC_FAILURE:
        penalty *= execution.catastrophic_penalty_factor
    return -int(penalty)


def simulate_quest(
    quest: Quest,
    party: QuestParty,
    adventurers: list[Adventurer],
    difficulty: DifficultyLevel,
    *,
    rng: Sampler,
    rules: RulesConfig = DEFAULT_RULES,
) -> QuestResult:
    """Roll a quest outcome for the given party without mutating anything.

    ``adventurers`` must contain every party member; extra records are
    ignored.  The outcome consumes exactly one ``rng.random()`` draw, after
    which injuries and ratings are drawn member by member in party order,
    and finally the loot.
    """

    by_id = {adventurer.id: adventurer for adventurer in adventurers}
    missing = [aid for aid in party.adventurer_ids if aid not in by_id]
    if missing:
        raise EntityNotFoundError("adventurer", missing[0])
    members = [by_id[aid] for aid in party.adventurer_ids]

    execution = rules.execution
    power = party_power(members, quest.quest_type, rules=rules)
    difficulty_score = quest_difficulty(quest, difficulty, rules=rules)
    probability = success_probability(power, difficulty_score, rules=rules)
    outcome = determine_outcome(probability, rng.random(), rules=rules)

    injury_chance = (
        execution.outcome_injury_chance[outcome]
        * execution.stakes_risk[quest.stakes]
        * execution.risk_injury_factor
    )
    injuries: dict[AdventurerID, InjuryType] = {}
    ratings: dict[AdventurerID, float] = {}
    for member in members:
        if rng.random() < injury_chance:
            severity = rng.random()
            injuries[member.id] = next(
                (kind for limit, kind in execution.injury_severity if severity < limit),
                InjuryType.EXHAUSTION,
            )
        rating = execution.outcome_rating[outcome] + rng.uniform(
            -execution.rating_spread, execution.rating_spread
        )
        ratings[member.id] = round(min(10.0, max(1.0, rating)), 2)

    return QuestResult(
        outcome=outcome,
        success_probability=probability,
        party_power=power,
        quest_difficulty=difficulty_score,
        gold_delta=gold_delta(quest, outcome, difficulty, rules=rules),
        experience_per_member=int(
            quest.experience_reward * rules.leveling.outcome_experience[outcome]
        ),
        injuries=injuries,
        ratings=ratings,
        loot=roll_loot(quest, outcome, rng=rng, rules=rules),
    )


def apply_quest_results(
    campaign: Campaign,
    quest_id: QuestID,
    result: QuestResult,
    *,
    rng: Sampler,
    rules: RulesConfig = DEFAULT_RULES,
) -> list[LevelUp]:
    """Commit a simulated result to the campaign and release its party.

    Members come back healthy unless the result injured them, and any loot
    goes into the guild inventory.

    Raises:
        QuestAlreadyResolvedError: If the quest is completed or not active
        EntityNotFoundError: If the party or one of its members is missing
    """

    state, guild = campaign.state, campaign.guild
    quest = state.store.quest(quest_id)
    if quest.status is QuestStatus.COMPLETED or quest_id not in state.active_quests:
        raise QuestAlreadyResolvedError(f"quest {quest_id} has no pending result")
    party = campaign.parties.get(quest_id)
    if party is None:
        raise EntityNotFoundError("party for quest", quest_id)
    members = [state.store.adventurer(aid) for aid in party.adventurer_ids]

    outcome = result.outcome
    week = state.total_weeks_elapsed

    if result.gold_delta:
        category = (
            TransactionCategory.QUEST_REWARD
            if result.gold_delta > 0
            else TransactionCategory.QUEST_PENALTY
        )
        finances.post_transaction(
            campaign, result.gold_delta, category, f"{quest.name}: {outcome}", int(quest_id)
        )
        guild.in_financial_trouble = guild.finances.treasury < 0
    if outcome.is_success:
        guild.statistics.quests_completed += 1
        guild.statistics.total_gold_earned += max(0, result.gold_delta)
    else:
        guild.statistics.quests_failed += 1
    guild.reputation = min(100, max(0, guild.reputation + rules.execution.outcome_reputation[outcome]))

    level_ups: list[LevelUp] = []
    for member in members:
        stats = member.statistics
        if outcome.is_success:
            stats.quests_completed += 1
        else:
            stats.quests_failed += 1
        if member.id in result.ratings:
            stats.rating_total += result.ratings[member.id]
            stats.rating_count += 1

        injury_type = result.injuries.get(member.id)
        if injury_type is not None:
            low, high = rules.recovery.recovery_weeks[injury_type]
            member.injuries.append(Injury(injury_type, rng.randint(low, high)))
            member.condition = AdventurerCondition.INJURED
            stats.injuries_sustained += 1
            record_event(
                state,
                EventType.ADVENTURER_INJURED,
                f"{member.full_name} suffered a {injury_type.replace('_', ' ')}",
                related_entity_id=int(member.id),
            )
        else:
            member.condition = AdventurerCondition.HEALTHY

        for level_up in grant_experience(
            member, result.experience_per_member, rng=rng, rules=rules
        ):
            level_ups.append(level_up)
            record_event(
                state,
                EventType.ADVENTURER_LEVEL_UP,
                f"{member.full_name} reached {level_up.new_level}",
                related_entity_id=int(member.id),
            )

    for drop in result.loot:
        item = Item(
            id=state.store.allocate_item_id(),
            name=drop.name,
            category=drop.category,
            rarity=drop.rarity,
            value=drop.value,
            source_quest_id=quest_id,
        )
        guild.inventory.append(item)
        record_event(
            state, EventType.LOOT_OBTAINED, f"Found: {item.name}", related_entity_id=int(item.id)
        )

    quest.result = replace(result, completed_week=week)
    quest.status = QuestStatus.COMPLETED
    state.active_quests.remove(quest_id)
    state.completed_quests.append(quest_id)
    del campaign.parties[quest_id]

    event_type = EventType.QUEST_COMPLETED if outcome.is_success else EventType.QUEST_FAILED
    record_event(
        state,
        event_type,
        f"'{quest.name}' ended in {outcome.replace('_', ' ')} ({result.gold_delta:+d} gold)",
        related_entity_id=int(quest_id),
    )
    logger.info("quest %s resolved: %s", quest_id, outcome)
    return level_ups

