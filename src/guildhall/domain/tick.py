"""Weekly tick orchestration for guild campaigns."""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field

from guildhall.domain import execution, finances, roster
from guildhall.domain import quests as quest_rules
from guildhall.domain.enums import EventType, SeasonPhase
from guildhall.domain.events import record_event
from guildhall.domain.leveling import LevelUp
from guildhall.domain.models import AdventurerID, Campaign, QuestID
from guildhall.domain.rules_config import DEFAULT_RULES, RulesConfig
from guildhall.utils.rng import Sampler, generate_seed, sampler_for

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class WeekReport:
    """What happened during one call to :func:`advance_week`."""

    week: int
    settlement: finances.SettlementSummary
    resolved_quests: list[QuestID] = field(default_factory=list)
    delayed_quests: list[QuestID] = field(default_factory=list)
    posted_quests: list[QuestID] = field(default_factory=list)
    new_free_agents: list[AdventurerID] = field(default_factory=list)
    recovered: list[AdventurerID] = field(default_factory=list)
    level_ups: list[LevelUp] = field(default_factory=list)
    month_changed: bool = False
    season_changed: bool = False


def advance_week(
    campaign: Campaign,
    *,
    rng: Sampler | None = None,
    rules: RulesConfig = DEFAULT_RULES,
) -> WeekReport:
    """Advance the campaign by one in-game week.

    Without an explicit ``rng`` each random step draws from its own sampler
    seeded by the campaign seed, the week and the step's context, so a tick
    replays identically from the same starting state.
    """

    state = campaign.state
    week = state.total_weeks_elapsed
    phase = state.season_phase

    def sampler(context: str) -> Sampler:
        if rng is not None:
            return rng
        return sampler_for(generate_seed(state.settings.rng_seed, week, phase, context))

    settlement = finances.settle_week(campaign, rules=rules)
    report = WeekReport(week=week, settlement=settlement)
    report.recovered = roster.recover_injuries(campaign)

    _resolve_active_quests(campaign, report, sampler, rules)

    posted = quest_rules.replenish_quest_board(
        state, campaign.guild, rng=sampler("board"), rules=rules
    )
    report.posted_quests = [quest.id for quest in posted]

    _advance_calendar(campaign, report, rules)
    if report.month_changed:
        arrivals = roster.replenish_free_agents(state, rng=sampler("free_agents"), rules=rules)
        report.new_free_agents = [adventurer.id for adventurer in arrivals]
    return report


def _resolve_active_quests(
    campaign: Campaign,
    report: WeekReport,
    sampler: Callable[[str], Sampler],
    rules: RulesConfig,
) -> None:
    """Simulate and commit every active quest whose party is intact."""

    state = campaign.state
    for quest_id in list(state.active_quests):
        party = campaign.parties.get(quest_id)
        missing = (
            None
            if party is None
            else [aid for aid in party.adventurer_ids if aid not in state.store.adventurers]
        )
        if party is None or missing:
            logger.warning(
                "skipping quest %s: %s",
                quest_id,
                "no party recorded" if party is None else f"missing adventurers {missing}",
            )
            record_event(
                state,
                EventType.QUEST_DELAYED,
                f"'{state.store.quest(quest_id).name}' could not be resolved this week",
                related_entity_id=int(quest_id),
            )
            report.delayed_quests.append(quest_id)
            continue

        quest = state.store.quest(quest_id)
        members = [state.store.adventurer(aid) for aid in party.adventurer_ids]
        quest_rng = sampler(f"quest:{int(quest_id)}")
        result = execution.simulate_quest(
            quest, party, members, state.settings.difficulty, rng=quest_rng, rules=rules
        )
        report.level_ups.extend(
            execution.apply_quest_results(campaign, quest_id, result, rng=quest_rng, rules=rules)
        )
        report.resolved_quests.append(quest_id)


def _advance_calendar(campaign: Campaign, report: WeekReport, rules: RulesConfig) -> None:
    """Roll week, month, phase and season counters forward."""

    state = campaign.state
    calendar = rules.calendar
    record_event(
        state,
        EventType.WEEK_ADVANCED,
        f"Week {state.current_week} of month {state.current_month} has passed",
    )

    state.total_weeks_elapsed += 1
    state.current_week += 1
    if state.current_week <= calendar.weeks_per_month:
        return

    state.current_week = 1
    state.current_month += 1
    if state.current_month > calendar.months_per_season:
        state.current_month = 1
    report.month_changed = True

    if (state.current_month - 1) % calendar.months_per_phase == 0:
        state.season_phase = state.season_phase.next()
        if state.season_phase is SeasonPhase.SPRING_THAW:
            _begin_new_season(campaign)
            report.season_changed = True
        else:
            record_event(
                state,
                EventType.SEASON_CHANGED,
                f"The season turns to {state.season_phase.replace('_', ' ')}",
            )

    record_event(state, EventType.MONTH_CHANGED, f"Month {state.current_month} begins")


def _begin_new_season(campaign: Campaign) -> None:
    state, guild = campaign.state, campaign.guild
    state.current_season += 1
    guild.finances.season_income = 0
    guild.finances.season_expenses = 0
    guild.statistics.seasons_active += 1
    record_event(
        state,
        EventType.SEASON_CHANGED,
        f"Season {state.current_season} begins with the spring thaw",
    )
