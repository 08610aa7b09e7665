"""The live game session: sole owner and mutator of the running campaign."""

from __future__ import annotations

import copy
import logging
import random
from collections.abc import Iterator
from contextlib import contextmanager

from guildhall.domain import facilities, finances, roster, setup, tick
from guildhall.domain import quests as quest_rules
from guildhall.domain import models as dm
from guildhall.domain.enums import DifficultyLevel, FacilityType, StaffRole
from guildhall.domain.errors import GuildError
from guildhall.domain.rules_config import DEFAULT_RULES, RulesConfig
from guildhall.feedback import FeedbackBus, FeedbackSignal
from guildhall.repository import SaveSlotRepository
from guildhall.savegame import SaveMetadata
from guildhall.utils.rng import Sampler, generate_seed, sampler_for

logger = logging.getLogger(__name__)


class NoActiveCampaignError(GuildError):
    """An operation needs a campaign and none is loaded."""


class GameSession:
    """Turns player intents into rule calls against one campaign.

    Weekly ticks and loads are transactional: they work on a copy and only
    replace the live campaign once they have fully succeeded.
    """

    def __init__(
        self,
        repository: SaveSlotRepository,
        *,
        rules: RulesConfig = DEFAULT_RULES,
        feedback: FeedbackBus | None = None,
    ) -> None:
        self.repository = repository
        self.rules = rules
        self.feedback = feedback or FeedbackBus()
        self._campaign: dm.Campaign | None = None

    @property
    def has_campaign(self) -> bool:
        return self._campaign is not None

    @property
    def campaign(self) -> dm.Campaign:
        if self._campaign is None:
            raise NoActiveCampaignError("no campaign is loaded")
        return self._campaign

    @contextmanager
    def _reporting_errors(self) -> Iterator[None]:
        try:
            yield
        except Exception:
            self.feedback.publish(FeedbackSignal.ERROR)
            raise

    # --- Campaign lifecycle ------------------------------------------------------

    def new_campaign(
        self,
        campaign_name: str,
        guild_name: str,
        *,
        difficulty: DifficultyLevel = DifficultyLevel.NORMAL,
        seed: int | None = None,
        roster_size: int = 6,
    ) -> dm.Campaign:
        if seed is None:
            seed = random.randrange(2**31)
        self._campaign = setup.new_campaign(
            campaign_name,
            guild_name,
            difficulty=difficulty,
            seed=seed,
            roster_size=roster_size,
            rules=self.rules,
        )
        logger.info("started campaign %r (seed %s)", campaign_name, seed)
        return self._campaign

    # --- Intents -----------------------------------------------------------------

    def accept_quest(
        self,
        quest_id: dm.QuestID,
        adventurer_ids: list[dm.AdventurerID],
        *,
        leader_id: dm.AdventurerID | None = None,
    ) -> dm.Quest:
        with self._reporting_errors():
            party = dm.QuestParty(adventurer_ids=list(adventurer_ids), leader_id=leader_id)
            quest = quest_rules.accept_quest(self.campaign, quest_id, party, rules=self.rules)
        self.feedback.publish(FeedbackSignal.QUEST_ACCEPTED)
        return quest

    def cancel_quest(self, quest_id: dm.QuestID) -> None:
        with self._reporting_errors():
            quest_rules.cancel_quest(self.campaign, quest_id)

    def _sampler(self, context: str) -> Sampler:
        state = self.campaign.state
        return sampler_for(
            generate_seed(state.settings.rng_seed, state.total_weeks_elapsed, state.season_phase, context)
        )

    def free_agents(self) -> list[dm.Adventurer]:
        state = self.campaign.state
        return [state.store.adventurer(adventurer_id) for adventurer_id in state.free_agents]

    def hire(self, adventurer_id: dm.AdventurerID) -> dm.Adventurer:
        with self._reporting_errors():
            return roster.hire_adventurer(self.campaign, adventurer_id, rules=self.rules)

    def dismiss(self, adventurer_id: dm.AdventurerID) -> dm.Adventurer:
        with self._reporting_errors():
            return roster.dismiss_adventurer(self.campaign, adventurer_id)

    def upgrade_facility(self, facility_type: FacilityType) -> dm.Facility:
        with self._reporting_errors():
            return facilities.upgrade_facility(self.campaign, facility_type, rules=self.rules)

    def hire_staff(self, role: StaffRole) -> dm.StaffMember:
        with self._reporting_errors():
            rng = self._sampler(f"staff:{self.campaign.state.store.next_staff_id}")
            return facilities.hire_staff(self.campaign, role, rng=rng, rules=self.rules)

    def dismiss_staff(self, staff_id: dm.StaffID) -> dm.StaffMember:
        with self._reporting_errors():
            return facilities.dismiss_staff(self.campaign, staff_id)

    def take_loan(self, lender: str, amount: int, weeks: int) -> dm.Loan:
        with self._reporting_errors():
            return finances.take_loan(self.campaign, lender, amount, weeks, rules=self.rules)

    def advance_week(self, weeks: int = 1, *, rng: Sampler | None = None) -> list[tick.WeekReport]:
        """Run ``weeks`` ticks; a failing tick leaves the last good state in place."""

        if weeks < 1:
            raise ValueError("weeks must be at least 1")
        reports: list[tick.WeekReport] = []
        with self._reporting_errors():
            for _ in range(weeks):
                working = copy.deepcopy(self.campaign)
                try:
                    report = tick.advance_week(working, rng=rng, rules=self.rules)
                except Exception:
                    logger.exception("weekly tick failed; campaign left unchanged")
                    raise
                self._campaign = working
                reports.append(report)
                self._publish_report(report)
        return reports

    def _publish_report(self, report: tick.WeekReport) -> None:
        for _ in report.resolved_quests:
            self.feedback.publish(FeedbackSignal.QUEST_RESOLVED)
        for _ in report.level_ups:
            self.feedback.publish(FeedbackSignal.LEVEL_UP)
        self.feedback.publish(FeedbackSignal.WEEK_ADVANCED)

    # --- Persistence -------------------------------------------------------------

    def save(self, name: str) -> SaveMetadata:
        with self._reporting_errors():
            metadata = self.repository.save_campaign(name, self.campaign)
        self.feedback.publish(FeedbackSignal.SAVE_COMPLETED)
        return metadata

    def quick_save(self) -> SaveMetadata:
        return self.save(self.repository.quicksave_name)

    def load(self, name: str) -> dm.Campaign:
        """Replace the live campaign with a save; on failure nothing changes."""

        with self._reporting_errors():
            loaded = self.repository.load(name)
        self._campaign = loaded
        logger.info("loaded save %r", name)
        self.feedback.publish(FeedbackSignal.LOAD_COMPLETED)
        return loaded

    def quick_load(self) -> dm.Campaign:
        return self.load(self.repository.quicksave_name)

    def list_saves(self) -> list[SaveMetadata]:
        return self.repository.list_saved_games()

    def delete_save(self, name: str) -> None:
        with self._reporting_errors():
            self.repository.delete_save(name)
