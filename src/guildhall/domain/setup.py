"""Construction of a fresh campaign."""

from __future__ import annotations

from guildhall.domain import facilities, roster
from guildhall.domain import quests as quest_rules
from guildhall.domain.enums import AdventurerLevel, DifficultyLevel, EventType, GuildTier
from guildhall.domain.events import record_event
from guildhall.domain.models import (
    Campaign,
    GameSettings,
    GameState,
    Guild,
    GuildFinances,
    GuildID,
)
from guildhall.domain.rules_config import DEFAULT_RULES, RulesConfig
from guildhall.utils.rng import generate_seed, sampler_for


def new_campaign(
    campaign_name: str,
    guild_name: str,
    *,
    motto: str = "Fortune favours the bold",
    difficulty: DifficultyLevel = DifficultyLevel.NORMAL,
    seed: int = 0,
    roster_size: int = 6,
    rules: RulesConfig = DEFAULT_RULES,
) -> Campaign:
    """Found a fledgling guild and stock its roster, free-agent pool and quest board."""

    if not campaign_name.strip():
        raise ValueError("campaign name cannot be empty")
    if not guild_name.strip():
        raise ValueError("guild name cannot be empty")

    finance = rules.finance
    state = GameState(
        campaign_name=campaign_name,
        settings=GameSettings(difficulty=difficulty, rng_seed=seed),
    )
    guild = Guild(
        id=GuildID(1),
        name=guild_name,
        motto=motto,
        tier=GuildTier.FLEDGLING,
        reputation=finance.starting_reputation,
        founded_season=state.current_season,
        roster_capacity=finance.roster_capacity[GuildTier.FLEDGLING],
        finances=GuildFinances(
            treasury=finance.starting_treasury,
            weekly_income=finance.base_weekly_income,
        ),
        facilities=[
            facilities.build_facility(kind, rules=rules) for kind in finance.starting_facilities
        ],
    )
    campaign = Campaign(state=state, guild=guild)
    record_event(state, EventType.GUILD_FOUNDED, f"{guild_name} opens its doors")

    rng = sampler_for(generate_seed(seed, 0, state.season_phase, "founding"))
    for index in range(min(roster_size, guild.roster_capacity)):
        # the first third of the founding roster arrives with some experience
        level = AdventurerLevel.JOURNEYMAN if index < roster_size // 3 else AdventurerLevel.APPRENTICE
        adventurer = roster.generate_adventurer(state.store, rng=rng, level=level, rules=rules)
        roster.enlist(campaign, adventurer)

    roster.add_free_agents(state, rules.recruitment.initial_pool, rng=rng, rules=rules)
    quest_rules.replenish_quest_board(state, guild, rng=rng, rules=rules)
    return campaign
