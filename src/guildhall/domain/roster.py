"""Adventurer generation, the free-agent pool, hiring, dismissal and recovery."""

from __future__ import annotations

import logging

from guildhall.utils.rng import Sampler, weighted_choice

from . import finances
from .enums import (
    AdventurerClass,
    AdventurerCondition,
    AdventurerLevel,
    AdventurerRace,
    AttributeType,
    EventType,
    TransactionCategory,
)
from .errors import (
    AdventurerDeployedError,
    EntityNotFoundError,
    InsufficientFundsError,
    NotAFreeAgentError,
    RosterFullError,
)
from .events import record_event
from .models import Adventurer, AdventurerID, Campaign, EntityStore, GameState
from .rules_config import DEFAULT_RULES, RulesConfig

logger = logging.getLogger(__name__)

_FIRST_NAMES = (
    "Aldric", "Brenna", "Cedric", "Dara", "Elowen", "Fenwick", "Gwyn", "Hadrik",
    "Isolde", "Jory", "Kestra", "Lorcan", "Maren", "Niall", "Orla", "Perrin",
    "Quill", "Rowan", "Saoirse", "Tamsin", "Ulric", "Vesna", "Wren", "Yorick",
)
_LAST_NAMES = (
    "Ashdown", "Blackthorn", "Coldbrook", "Dunmore", "Emberly", "Fairwind",
    "Greymantle", "Hollowell", "Ironside", "Kettleby", "Larkspur", "Mossgrove",
    "Northcott", "Oakheart", "Redfern", "Stonebridge", "Thistlewood", "Whitlock",
)


def random_name(rng: Sampler) -> tuple[str, str]:
    return rng.choice(_FIRST_NAMES), rng.choice(_LAST_NAMES)


def generate_adventurer(
    store: EntityStore,
    *,
    rng: Sampler,
    level: AdventurerLevel = AdventurerLevel.APPRENTICE,
    rules: RulesConfig = DEFAULT_RULES,
) -> Adventurer:
    """Roll a new adventurer of ``level`` with an id allocated from ``store``.

    The adventurer is not stored; add them to the free-agent pool with
    :func:`add_free_agents` or to the roster with :func:`enlist`.
    """

    leveling = rules.leveling
    primary_class = rng.choice(list(AdventurerClass))
    low, high = leveling.attribute_range[level]
    primary = leveling.class_primary.get(primary_class, ())
    attributes: dict[AttributeType, int] = {}
    for attribute in AttributeType:
        value = rng.randint(low, high)
        if attribute in primary:
            value += leveling.class_primary_bonus
        attributes[attribute] = min(leveling.attribute_cap, value)

    base = leveling.base_wage[level]
    wage = max(1, int(round(base * rng.uniform(1.0 - leveling.wage_variance, 1.0 + leveling.wage_variance))))
    first_name, last_name = random_name(rng)
    return Adventurer(
        id=store.allocate_adventurer_id(),
        first_name=first_name,
        last_name=last_name,
        race=rng.choice(list(AdventurerRace)),
        primary_class=primary_class,
        level=level,
        age=rng.randint(17, 45),
        attributes=attributes,
        weekly_wage=wage,
    )


def hiring_fee(adventurer: Adventurer, *, rules: RulesConfig = DEFAULT_RULES) -> int:
    """Signing fee: average attribute score scaled by level."""

    recruitment = rules.recruitment
    average = sum(adventurer.attributes.values()) / max(1, len(adventurer.attributes))
    return int(
        average
        * recruitment.fee_per_attribute_point
        * recruitment.level_fee_multiplier[adventurer.level]
    )


# --- Free-agent pool --------------------------------------------------------------


def add_free_agents(
    state: GameState,
    count: int,
    *,
    rng: Sampler,
    rules: RulesConfig = DEFAULT_RULES,
) -> list[Adventurer]:
    """Generate ``count`` adventurers of weighted random level into the pool."""

    weights = rules.recruitment.pool_level_weights
    levels = list(weights)
    arrivals: list[Adventurer] = []
    for _ in range(count):
        level = weighted_choice(rng, levels, [weights[lvl] for lvl in levels])
        adventurer = generate_adventurer(state.store, rng=rng, level=level, rules=rules)
        state.store.add_adventurer(adventurer)
        state.free_agents.append(adventurer.id)
        arrivals.append(adventurer)
    return arrivals


def replenish_free_agents(
    state: GameState,
    *,
    rng: Sampler,
    rules: RulesConfig = DEFAULT_RULES,
) -> list[Adventurer]:
    """Top up a thin pool with a fresh batch; called when a month begins."""

    recruitment = rules.recruitment
    if len(state.free_agents) >= recruitment.refill_floor:
        return []
    arrivals = add_free_agents(state, recruitment.refill_batch, rng=rng, rules=rules)
    record_event(
        state,
        EventType.FREE_AGENTS_ARRIVED,
        f"{len(arrivals)} adventurers are looking for a guild",
    )
    return arrivals


# --- Roster changes ----------------------------------------------------------------


def _check_capacity(campaign: Campaign) -> None:
    guild = campaign.guild
    if len(guild.roster_ids) >= guild.roster_capacity:
        raise RosterFullError(f"roster is at capacity ({guild.roster_capacity})")


def _join_roster(campaign: Campaign, adventurer: Adventurer) -> None:
    campaign.guild.roster_ids.append(adventurer.id)
    record_event(
        campaign.state,
        EventType.ADVENTURER_HIRED,
        f"{adventurer.full_name} ({adventurer.level} {adventurer.primary_class}) joined the guild",
        related_entity_id=int(adventurer.id),
    )


def enlist(campaign: Campaign, adventurer: Adventurer) -> Adventurer:
    """Store a newly generated adventurer directly on the roster, without a fee.

    Used for the founding roster.
    """

    _check_capacity(campaign)
    campaign.state.store.add_adventurer(adventurer)
    _join_roster(campaign, adventurer)
    return adventurer


def hire_adventurer(
    campaign: Campaign,
    adventurer_id: AdventurerID,
    *,
    rules: RulesConfig = DEFAULT_RULES,
) -> Adventurer:
    """Sign a free agent, paying their hiring fee from the treasury.

    Raises:
        EntityNotFoundError: If no adventurer has this id
        NotAFreeAgentError: If the adventurer is not in the free-agent pool
        RosterFullError: If the roster is at capacity
        InsufficientFundsError: If the treasury cannot cover the fee
    """

    state = campaign.state
    adventurer = state.store.adventurer(adventurer_id)
    if adventurer_id not in state.free_agents:
        raise NotAFreeAgentError(f"adventurer {adventurer_id} is not a free agent")
    _check_capacity(campaign)
    fee = hiring_fee(adventurer, rules=rules)
    treasury = campaign.guild.finances.treasury
    if treasury < fee:
        raise InsufficientFundsError(fee, treasury)

    finances.post_transaction(
        campaign,
        -fee,
        TransactionCategory.RECRUITMENT_FEES,
        f"Hired {adventurer.full_name}",
        int(adventurer_id),
    )
    state.free_agents.remove(adventurer_id)
    _join_roster(campaign, adventurer)
    return adventurer


def dismiss_adventurer(campaign: Campaign, adventurer_id: AdventurerID) -> Adventurer:
    """Release a roster adventurer back into the free-agent pool.

    Raises:
        EntityNotFoundError: If the adventurer is not on the roster
        AdventurerDeployedError: If the adventurer is out with a quest party
    """

    state, guild = campaign.state, campaign.guild
    adventurer = state.store.adventurer(adventurer_id)
    if adventurer_id not in guild.roster_ids:
        raise EntityNotFoundError("roster adventurer", adventurer_id)
    for quest_id, party in campaign.parties.items():
        if adventurer_id in party.adventurer_ids:
            raise AdventurerDeployedError(adventurer_id, quest_id)

    guild.roster_ids.remove(adventurer_id)
    state.free_agents.append(adventurer_id)
    record_event(
        state,
        EventType.ADVENTURER_DISMISSED,
        f"{adventurer.full_name} left the guild",
        related_entity_id=int(adventurer_id),
    )
    logger.debug("adventurer %s returned to the free-agent pool", adventurer_id)
    return adventurer


def recover_injuries(campaign: Campaign) -> list[AdventurerID]:
    """Advance every injury by one week; return roster adventurers fully healed.

    Free agents heal too, without an event.
    """

    recovered: list[AdventurerID] = []
    state = campaign.state
    roster_ids = set(campaign.guild.roster_ids)
    for adventurer_id in [*campaign.guild.roster_ids, *state.free_agents]:
        adventurer = state.store.adventurers.get(adventurer_id)
        if adventurer is None or not adventurer.injuries:
            continue
        for injury in adventurer.injuries:
            injury.recovery_weeks_remaining -= 1
        adventurer.injuries = [i for i in adventurer.injuries if i.recovery_weeks_remaining > 0]
        if adventurer.injuries or adventurer.condition is not AdventurerCondition.INJURED:
            continue
        adventurer.condition = AdventurerCondition.HEALTHY
        if adventurer_id in roster_ids:
            recovered.append(adventurer_id)
            record_event(
                state,
                EventType.ADVENTURER_RECOVERED,
                f"{adventurer.full_name} has recovered",
                related_entity_id=int(adventurer_id),
            )
    return recovered
