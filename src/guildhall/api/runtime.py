"""Runtime primitives backing the guild HTTP API."""

from __future__ import annotations

import logging

from guildhall.config import Settings, get_settings
from guildhall.domain import finances, roster
from guildhall.domain import models as dm
from guildhall.domain.enums import QuestStatus
from guildhall.domain.events import recent_events
from guildhall.domain.rules_config import DEFAULT_RULES, RulesConfig
from guildhall.domain.tick import WeekReport
from guildhall.feedback import FeedbackBus, FeedbackSignal
from guildhall.repository import SaveSlotRepository
from guildhall.savegame import SaveError
from guildhall.session import GameSession

logger = logging.getLogger(__name__)


class CampaignService:
    """Read models over the session's live campaign."""

    def __init__(self, session: GameSession) -> None:
        self._session = session

    @property
    def session(self) -> GameSession:
        return self._session

    @staticmethod
    def to_summary_dict(campaign: dm.Campaign) -> dict[str, object]:
        state, guild = campaign.state, campaign.guild
        return {
            "campaign_name": state.campaign_name,
            "guild_name": guild.name,
            "tier": guild.tier,
            "reputation": guild.reputation,
            "treasury": guild.finances.treasury,
            "weekly_costs": finances.weekly_operating_costs(campaign),
            "in_financial_trouble": guild.in_financial_trouble,
            "season": state.current_season,
            "month": state.current_month,
            "week": state.current_week,
            "season_phase": state.season_phase,
            "total_weeks_elapsed": state.total_weeks_elapsed,
            "difficulty": state.settings.difficulty,
            "roster_size": len(guild.roster_ids),
            "roster_capacity": guild.roster_capacity,
            "available_quests": len(state.available_quests),
            "active_quests": len(state.active_quests),
            "completed_quests": len(state.completed_quests),
        }

    @staticmethod
    def to_adventurer_dict(campaign: dm.Campaign, adventurer: dm.Adventurer) -> dict[str, object]:
        assigned_to = next(
            (
                int(quest_id)
                for quest_id, party in campaign.parties.items()
                if adventurer.id in party.adventurer_ids
            ),
            None,
        )
        return {
            "id": int(adventurer.id),
            "name": adventurer.full_name,
            "race": adventurer.race,
            "primary_class": adventurer.primary_class,
            "level": adventurer.level,
            "condition": adventurer.condition,
            "experience": adventurer.experience,
            "weekly_wage": adventurer.weekly_wage,
            "attributes": {str(k): v for k, v in adventurer.attributes.items()},
            "injuries": [
                {"type": injury.injury_type, "weeks_remaining": injury.recovery_weeks_remaining}
                for injury in adventurer.injuries
            ],
            "quests_completed": adventurer.statistics.quests_completed,
            "quests_failed": adventurer.statistics.quests_failed,
            "assigned_quest_id": assigned_to,
        }

    @staticmethod
    def to_item_dict(item: dm.Item) -> dict[str, object]:
        return {
            "id": int(item.id),
            "name": item.name,
            "category": item.category,
            "rarity": item.rarity,
            "value": item.value,
            "source_quest_id": int(item.source_quest_id) if item.source_quest_id is not None else None,
        }

    @staticmethod
    def to_facility_dict(facility: dm.Facility) -> dict[str, object]:
        return {
            "facility_type": facility.facility_type,
            "rating": facility.rating,
            "weekly_maintenance": facility.weekly_maintenance,
        }

    @staticmethod
    def to_staff_dict(member: dm.StaffMember) -> dict[str, object]:
        return {
            "id": int(member.id),
            "name": member.name,
            "role": member.role,
            "weekly_salary": member.weekly_salary,
            "skill": member.skill,
        }

    @staticmethod
    def to_quest_dict(campaign: dm.Campaign, quest: dm.Quest) -> dict[str, object]:
        party = campaign.parties.get(quest.id)
        result = quest.result
        return {
            "id": int(quest.id),
            "name": quest.name,
            "quest_type": quest.quest_type,
            "stakes": quest.stakes,
            "status": quest.status,
            "minimum_party_size": quest.minimum_party_size,
            "maximum_party_size": quest.maximum_party_size,
            "recommended_level": quest.recommended_level,
            "base_gold_reward": quest.base_gold_reward,
            "experience_reward": quest.experience_reward,
            "required_reputation": quest.required_reputation,
            "required_tier": quest.required_tier,
            "party": [int(aid) for aid in party.adventurer_ids] if party else [],
            "outcome": result.outcome if result else None,
            "gold_delta": result.gold_delta if result else None,
        }

    @staticmethod
    def to_event_dict(event: dm.GameEvent) -> dict[str, object]:
        return {
            "id": int(event.id),
            "event_type": event.event_type,
            "message": event.message,
            "season": event.timestamp.season,
            "month": event.timestamp.month,
            "week": event.timestamp.week,
            "related_entity_id": event.related_entity_id,
        }

    @staticmethod
    def to_report_dict(report: WeekReport) -> dict[str, object]:
        return {
            "week": report.week,
            "treasury": report.settlement.treasury,
            "operating_costs": report.settlement.operating_costs,
            "in_financial_trouble": report.settlement.in_financial_trouble,
            "resolved_quests": [int(q) for q in report.resolved_quests],
            "delayed_quests": [int(q) for q in report.delayed_quests],
            "posted_quests": [int(q) for q in report.posted_quests],
            "new_free_agents": [int(a) for a in report.new_free_agents],
            "level_ups": [int(level_up.adventurer_id) for level_up in report.level_ups],
            "month_changed": report.month_changed,
            "season_changed": report.season_changed,
        }

    def list_roster(self) -> list[dict[str, object]]:
        campaign = self._session.campaign
        store = campaign.state.store
        return [
            self.to_adventurer_dict(campaign, store.adventurers[adventurer_id])
            for adventurer_id in campaign.guild.roster_ids
            if adventurer_id in store.adventurers
        ]

    def list_free_agents(self) -> list[dict[str, object]]:
        campaign = self._session.campaign
        rules = self._session.rules
        return [
            {
                **self.to_adventurer_dict(campaign, adventurer),
                "hiring_fee": roster.hiring_fee(adventurer, rules=rules),
            }
            for adventurer in self._session.free_agents()
        ]

    def list_inventory(self) -> list[dict[str, object]]:
        return [self.to_item_dict(item) for item in self._session.campaign.guild.inventory]

    def list_facilities(self) -> list[dict[str, object]]:
        return [self.to_facility_dict(f) for f in self._session.campaign.guild.facilities]

    def list_staff(self) -> list[dict[str, object]]:
        return [self.to_staff_dict(member) for member in self._session.campaign.guild.staff]

    def list_quests(self, status: QuestStatus | None = None) -> list[dict[str, object]]:
        campaign = self._session.campaign
        state = campaign.state
        collections = {
            QuestStatus.AVAILABLE: state.available_quests,
            QuestStatus.IN_PROGRESS: state.active_quests,
            QuestStatus.COMPLETED: state.completed_quests,
        }
        selected = [collections[status]] if status is not None else list(collections.values())
        return [
            self.to_quest_dict(campaign, state.store.quest(quest_id))
            for ids in selected
            for quest_id in ids
        ]

    def list_events(self, limit: int = 20) -> list[dict[str, object]]:
        return [self.to_event_dict(e) for e in recent_events(self._session.campaign.state, limit)]


class ApiState:
    """Aggregated services shared by the FastAPI layer."""

    def __init__(
        self, *, settings: Settings | None = None, rules: RulesConfig = DEFAULT_RULES
    ) -> None:
        self.settings = settings or get_settings()
        self.repository = SaveSlotRepository(
            self.settings.saves_dir, quicksave_name=self.settings.quicksave_name
        )
        self.rules = rules
        self.feedback = FeedbackBus()
        self.feedback.subscribe(self._log_signal)
        self.session = GameSession(self.repository, rules=rules, feedback=self.feedback)
        self.campaigns = CampaignService(self.session)

    @staticmethod
    def _log_signal(signal: FeedbackSignal) -> None:
        logger.debug("feedback signal: %s", signal)

    async def startup(self) -> None:
        saves = self.repository.list_saved_games()
        logger.info("save slots in %s: %d", self.settings.saves_dir, len(saves))
        if not self.settings.persist_quicksave:
            return
        if not self.repository.exists(self.repository.quicksave_name):
            logger.info("no quick save to resume; waiting for a new campaign")
            return
        try:
            campaign = self.session.quick_load()
        except SaveError as exc:
            logger.warning("could not resume quick save: %s", exc)
            return
        logger.info(
            "resumed %r in season %d after %d weeks",
            campaign.state.campaign_name,
            campaign.state.current_season,
            campaign.state.total_weeks_elapsed,
        )

    async def shutdown(self) -> None:
        if not self.session.has_campaign:
            return
        if self.settings.persist_quicksave:
            try:
                metadata = self.session.quick_save()
            except SaveError:
                logger.exception("quick save on shutdown failed")
                return
            logger.info("quick-saved %r on shutdown", metadata.campaign_name)
        else:
            logger.info("shutting down with an unsaved campaign in memory")


def build_state() -> ApiState:
    """Factory used by the API to initialize state."""

    return ApiState()
