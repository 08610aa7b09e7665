"""HTTP routes for the guild API."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query, Request, status
from pydantic import BaseModel, Field

from guildhall.api.runtime import ApiState
from guildhall.domain import models as dm
from guildhall.domain.enums import DifficultyLevel, FacilityType, QuestStatus, StaffRole
from guildhall.domain.errors import (
    AdventurerDeployedError,
    EntityNotFoundError,
    FacilityMaxedError,
    GuildError,
    InsufficientFundsError,
    NotAFreeAgentError,
    QuestCancellationError,
    RosterFullError,
    StaffRoleFilledError,
)
from guildhall.repository import InvalidSaveNameError
from guildhall.savegame import (
    CorruptSaveError,
    IncompatibleSaveError,
    SaveError,
    SaveMetadata,
    SaveNotFoundError,
    SaveWriteError,
)
from guildhall.session import NoActiveCampaignError

router = APIRouter()


def get_state(request: Request) -> ApiState:
    state = getattr(request.app.state, "api_state", None)
    if state is None:  # pragma: no cover - FastAPI should always initialise state
        raise RuntimeError("API state not initialised")
    return state


ApiStateDep = Annotated[ApiState, Depends(get_state)]


class CampaignSummary(BaseModel):
    campaign_name: str
    guild_name: str
    tier: str
    reputation: int
    treasury: int
    weekly_costs: int
    in_financial_trouble: bool
    season: int
    month: int
    week: int
    season_phase: str
    total_weeks_elapsed: int
    difficulty: str
    roster_size: int
    roster_capacity: int
    available_quests: int
    active_quests: int
    completed_quests: int


class AdventurerSummary(BaseModel):
    id: int
    name: str
    race: str
    primary_class: str
    level: str
    condition: str
    experience: int
    weekly_wage: int
    attributes: dict[str, int]
    injuries: list[dict[str, object]]
    quests_completed: int
    quests_failed: int
    assigned_quest_id: int | None


class FreeAgentSummary(AdventurerSummary):
    hiring_fee: int


class ItemSummary(BaseModel):
    id: int
    name: str
    category: str
    rarity: str
    value: int
    source_quest_id: int | None


class FacilitySummary(BaseModel):
    facility_type: str
    rating: int
    weekly_maintenance: int


class StaffSummary(BaseModel):
    id: int
    name: str
    role: str
    weekly_salary: int
    skill: int


class QuestSummary(BaseModel):
    id: int
    name: str
    quest_type: str
    stakes: str
    status: str
    minimum_party_size: int
    maximum_party_size: int
    recommended_level: str
    base_gold_reward: int
    experience_reward: int
    required_reputation: int
    required_tier: str
    party: list[int]
    outcome: str | None
    gold_delta: int | None


class EventSummary(BaseModel):
    id: int
    event_type: str
    message: str
    season: int
    month: int
    week: int
    related_entity_id: int | None


class WeekReportSummary(BaseModel):
    week: int
    treasury: int
    operating_costs: int
    in_financial_trouble: bool
    resolved_quests: list[int]
    delayed_quests: list[int]
    posted_quests: list[int]
    new_free_agents: list[int]
    level_ups: list[int]
    month_changed: bool
    season_changed: bool


class CreateCampaignRequest(BaseModel):
    campaign_name: str = Field(min_length=1)
    guild_name: str = Field(min_length=1)
    difficulty: DifficultyLevel | None = None
    seed: int | None = Field(default=None, ge=0)
    roster_size: int | None = Field(default=None, ge=1, le=40)


class AcceptQuestRequest(BaseModel):
    adventurer_ids: list[int] = Field(min_length=1)
    leader_id: int | None = None


class AdvanceRequest(BaseModel):
    weeks: int = Field(default=1, ge=1, le=52)


class RecruitRequest(BaseModel):
    adventurer_id: int


class HireStaffRequest(BaseModel):
    role: StaffRole


class SaveRequest(BaseModel):
    name: str = Field(min_length=1)


_CONFLICTS = (
    NoActiveCampaignError,
    QuestCancellationError,
    RosterFullError,
    NotAFreeAgentError,
    AdventurerDeployedError,
    InsufficientFundsError,
    FacilityMaxedError,
    StaffRoleFilledError,
)


def _http_error(exc: Exception) -> HTTPException:
    """Map rule and persistence errors onto HTTP status codes."""

    if isinstance(exc, SaveNotFoundError):
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc))
    if isinstance(exc, CorruptSaveError | IncompatibleSaveError):
        return HTTPException(status_code=422, detail=str(exc))
    if isinstance(exc, EntityNotFoundError):
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc))
    if isinstance(exc, SaveWriteError):
        return HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc))
    if isinstance(exc, _CONFLICTS):
        return HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc))
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))


@router.get("/health")
async def health(state: ApiStateDep) -> dict[str, object]:
    return {
        "status": "ok",
        "campaign_loaded": state.session.has_campaign,
        "saves_dir": str(state.settings.saves_dir),
    }


@router.post("/campaign", response_model=CampaignSummary, status_code=status.HTTP_201_CREATED)
async def create_campaign(request: CreateCampaignRequest, state: ApiStateDep) -> CampaignSummary:
    try:
        campaign = state.session.new_campaign(
            request.campaign_name,
            request.guild_name,
            difficulty=request.difficulty or state.settings.default_difficulty,
            seed=request.seed,
            roster_size=request.roster_size or state.settings.starting_roster_size,
        )
    except ValueError as exc:
        raise _http_error(exc) from exc
    return CampaignSummary.model_validate(state.campaigns.to_summary_dict(campaign))


@router.get("/campaign", response_model=CampaignSummary)
async def get_campaign(state: ApiStateDep) -> CampaignSummary:
    try:
        campaign = state.session.campaign
    except NoActiveCampaignError as exc:
        raise _http_error(exc) from exc
    return CampaignSummary.model_validate(state.campaigns.to_summary_dict(campaign))


@router.get("/campaign/roster", response_model=list[AdventurerSummary])
async def list_roster(state: ApiStateDep) -> list[AdventurerSummary]:
    try:
        roster = state.campaigns.list_roster()
    except NoActiveCampaignError as exc:
        raise _http_error(exc) from exc
    return [AdventurerSummary.model_validate(entry) for entry in roster]


@router.get("/campaign/quests", response_model=list[QuestSummary])
async def list_quests(
    state: ApiStateDep,
    status_filter: Annotated[QuestStatus | None, Query(alias="status")] = None,
) -> list[QuestSummary]:
    try:
        quests = state.campaigns.list_quests(status_filter)
    except NoActiveCampaignError as exc:
        raise _http_error(exc) from exc
    return [QuestSummary.model_validate(entry) for entry in quests]


@router.get("/campaign/events", response_model=list[EventSummary])
async def list_events(
    state: ApiStateDep,
    limit: Annotated[int, Query(ge=1, le=500)] = 20,
) -> list[EventSummary]:
    try:
        events = state.campaigns.list_events(limit)
    except NoActiveCampaignError as exc:
        raise _http_error(exc) from exc
    return [EventSummary.model_validate(entry) for entry in events]


@router.post("/campaign/quests/{quest_id}/accept", response_model=QuestSummary)
async def accept_quest(
    quest_id: int, request: AcceptQuestRequest, state: ApiStateDep
) -> QuestSummary:
    try:
        quest = state.session.accept_quest(
            dm.QuestID(quest_id),
            [dm.AdventurerID(aid) for aid in request.adventurer_ids],
            leader_id=dm.AdventurerID(request.leader_id) if request.leader_id is not None else None,
        )
    except GuildError as exc:
        raise _http_error(exc) from exc
    return QuestSummary.model_validate(state.campaigns.to_quest_dict(state.session.campaign, quest))


@router.post("/campaign/quests/{quest_id}/cancel")
async def cancel_quest(quest_id: int, state: ApiStateDep) -> dict[str, object]:
    try:
        state.session.cancel_quest(dm.QuestID(quest_id))
    except GuildError as exc:
        raise _http_error(exc) from exc
    return {"cancelled": True}  # pragma: no cover - cancellation always raises


@router.post("/campaign/advance", response_model=list[WeekReportSummary])
async def advance_weeks(request: AdvanceRequest, state: ApiStateDep) -> list[WeekReportSummary]:
    try:
        reports = state.session.advance_week(request.weeks)
    except GuildError as exc:
        raise _http_error(exc) from exc
    return [WeekReportSummary.model_validate(state.campaigns.to_report_dict(r)) for r in reports]


@router.get("/campaign/free-agents", response_model=list[FreeAgentSummary])
async def list_free_agents(state: ApiStateDep) -> list[FreeAgentSummary]:
    try:
        agents = state.campaigns.list_free_agents()
    except NoActiveCampaignError as exc:
        raise _http_error(exc) from exc
    return [FreeAgentSummary.model_validate(entry) for entry in agents]


@router.post(
    "/campaign/recruit", response_model=AdventurerSummary, status_code=status.HTTP_201_CREATED
)
async def recruit(request: RecruitRequest, state: ApiStateDep) -> AdventurerSummary:
    try:
        adventurer = state.session.hire(dm.AdventurerID(request.adventurer_id))
    except GuildError as exc:
        raise _http_error(exc) from exc
    return AdventurerSummary.model_validate(
        state.campaigns.to_adventurer_dict(state.session.campaign, adventurer)
    )


@router.post("/campaign/roster/{adventurer_id}/dismiss", response_model=AdventurerSummary)
async def dismiss(adventurer_id: int, state: ApiStateDep) -> AdventurerSummary:
    try:
        adventurer = state.session.dismiss(dm.AdventurerID(adventurer_id))
    except GuildError as exc:
        raise _http_error(exc) from exc
    return AdventurerSummary.model_validate(
        state.campaigns.to_adventurer_dict(state.session.campaign, adventurer)
    )


@router.get("/campaign/inventory", response_model=list[ItemSummary])
async def list_inventory(state: ApiStateDep) -> list[ItemSummary]:
    try:
        items = state.campaigns.list_inventory()
    except NoActiveCampaignError as exc:
        raise _http_error(exc) from exc
    return [ItemSummary.model_validate(entry) for entry in items]


@router.get("/campaign/facilities", response_model=list[FacilitySummary])
async def list_facilities(state: ApiStateDep) -> list[FacilitySummary]:
    try:
        entries = state.campaigns.list_facilities()
    except NoActiveCampaignError as exc:
        raise _http_error(exc) from exc
    return [FacilitySummary.model_validate(entry) for entry in entries]


@router.post("/campaign/facilities/{facility_type}/upgrade", response_model=FacilitySummary)
async def upgrade_facility(facility_type: FacilityType, state: ApiStateDep) -> FacilitySummary:
    try:
        facility = state.session.upgrade_facility(facility_type)
    except GuildError as exc:
        raise _http_error(exc) from exc
    return FacilitySummary.model_validate(state.campaigns.to_facility_dict(facility))


@router.get("/campaign/staff", response_model=list[StaffSummary])
async def list_staff(state: ApiStateDep) -> list[StaffSummary]:
    try:
        entries = state.campaigns.list_staff()
    except NoActiveCampaignError as exc:
        raise _http_error(exc) from exc
    return [StaffSummary.model_validate(entry) for entry in entries]


@router.post("/campaign/staff", response_model=StaffSummary, status_code=status.HTTP_201_CREATED)
async def hire_staff(request: HireStaffRequest, state: ApiStateDep) -> StaffSummary:
    try:
        member = state.session.hire_staff(request.role)
    except GuildError as exc:
        raise _http_error(exc) from exc
    return StaffSummary.model_validate(state.campaigns.to_staff_dict(member))


@router.delete("/campaign/staff/{staff_id}", status_code=status.HTTP_204_NO_CONTENT)
async def dismiss_staff(staff_id: int, state: ApiStateDep) -> None:
    try:
        state.session.dismiss_staff(dm.StaffID(staff_id))
    except GuildError as exc:
        raise _http_error(exc) from exc


@router.get("/saves", response_model=list[SaveMetadata])
async def list_saves(state: ApiStateDep) -> list[SaveMetadata]:
    return state.session.list_saves()


@router.post("/saves", response_model=SaveMetadata, status_code=status.HTTP_201_CREATED)
async def save_campaign(request: SaveRequest, state: ApiStateDep) -> SaveMetadata:
    try:
        return state.session.save(request.name)
    except (GuildError, SaveError) as exc:
        raise _http_error(exc) from exc


@router.post("/saves/{name}/load", response_model=CampaignSummary)
async def load_campaign(name: str, state: ApiStateDep) -> CampaignSummary:
    try:
        campaign = state.session.load(name)
    except (SaveNotFoundError, CorruptSaveError, IncompatibleSaveError, InvalidSaveNameError) as exc:
        raise _http_error(exc) from exc
    return CampaignSummary.model_validate(state.campaigns.to_summary_dict(campaign))


@router.delete("/saves/{name}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_save(name: str, state: ApiStateDep) -> None:
    try:
        state.session.delete_save(name)
    except (SaveNotFoundError, InvalidSaveNameError) as exc:
        raise _http_error(exc) from exc


@router.post("/quicksave", response_model=SaveMetadata, status_code=status.HTTP_201_CREATED)
async def quick_save(state: ApiStateDep) -> SaveMetadata:
    try:
        return state.session.quick_save()
    except (GuildError, SaveError) as exc:
        raise _http_error(exc) from exc


@router.post("/quickload", response_model=CampaignSummary)
async def quick_load(state: ApiStateDep) -> CampaignSummary:
    try:
        campaign = state.session.quick_load()
    except (SaveNotFoundError, CorruptSaveError, IncompatibleSaveError) as exc:
        raise _http_error(exc) from exc
    return CampaignSummary.model_validate(state.campaigns.to_summary_dict(campaign))
