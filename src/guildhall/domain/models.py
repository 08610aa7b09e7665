"""Dataclasses describing every guild simulation entity.

Entities reference each other through integer identifiers rather than
object references: parties hold adventurer ids, the quest collections on
:class:`GameState` hold quest ids, and the :class:`EntityStore` owns the
canonical records.  The whole graph hangs off :class:`Campaign`, which is
what the persistence layer snapshots.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import NewType

from .enums import (
    AdventurerClass,
    AdventurerCondition,
    AdventurerLevel,
    AdventurerRace,
    AttributeType,
    DifficultyLevel,
    EventType,
    FacilityType,
    GuildTier,
    InjuryType,
    ItemCategory,
    ItemRarity,
    QuestOutcome,
    QuestStakes,
    QuestStatus,
    QuestType,
    SeasonPhase,
    StaffRole,
    TransactionCategory,
)
from .errors import EntityNotFoundError

# --- Strongly typed identifiers -------------------------------------------------

AdventurerID = NewType("AdventurerID", int)
QuestID = NewType("QuestID", int)
GuildID = NewType("GuildID", int)
EventID = NewType("EventID", int)
StaffID = NewType("StaffID", int)
ItemID = NewType("ItemID", int)


# --- Adventurers ----------------------------------------------------------------


@dataclass(slots=True)
class Injury:
    """An unhealed wound; recovers one week per tick."""

    injury_type: InjuryType
    recovery_weeks_remaining: int


@dataclass(slots=True)
class AdventurerStatistics:
    """Career record of an adventurer."""

    quests_completed: int = 0
    quests_failed: int = 0
    injuries_sustained: int = 0
    rating_total: float = 0.0
    rating_count: int = 0

    @property
    def average_rating(self) -> float:
        if self.rating_count == 0:
            return 0.0
        return self.rating_total / self.rating_count


@dataclass(slots=True)
class Adventurer:
    """A hireable member of the guild roster."""

    id: AdventurerID
    first_name: str
    last_name: str
    race: AdventurerRace
    primary_class: AdventurerClass
    level: AdventurerLevel
    age: int
    attributes: dict[AttributeType, int]
    weekly_wage: int
    condition: AdventurerCondition = AdventurerCondition.HEALTHY
    experience: int = 0
    total_experience: int = 0
    injuries: list[Injury] = field(default_factory=list)
    statistics: AdventurerStatistics = field(default_factory=AdventurerStatistics)

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"

    @property
    def is_available(self) -> bool:
        """Healthy with no unhealed injuries."""

        return self.condition is AdventurerCondition.HEALTHY and not self.injuries

    def attribute(self, attribute: AttributeType) -> int:
        return self.attributes.get(attribute, 0)


# --- Guild ----------------------------------------------------------------------


@dataclass(slots=True)
class StaffMember:
    id: StaffID
    name: str
    role: StaffRole
    weekly_salary: int
    skill: int = 10


@dataclass(slots=True)
class Facility:
    facility_type: FacilityType
    rating: int
    weekly_maintenance: int


@dataclass(frozen=True, slots=True)
class LootDrop:
    """An item rolled by quest simulation, not yet in the guild's keeping."""

    name: str
    category: ItemCategory
    rarity: ItemRarity
    value: int


@dataclass(slots=True)
class Item:
    id: ItemID
    name: str
    category: ItemCategory
    rarity: ItemRarity
    value: int
    source_quest_id: QuestID | None = None


@dataclass(slots=True)
class FinancialTransaction:
    """Single ledger entry; positive amounts are income."""

    week: int
    amount: int
    category: TransactionCategory
    description: str
    related_entity_id: int | None = None


@dataclass(slots=True)
class Loan:
    lender: str
    remaining_balance: int
    weekly_payment: int


@dataclass(slots=True)
class GuildFinances:
    """Treasury plus recurring income and the running ledger."""

    treasury: int
    weekly_income: int = 0
    season_income: int = 0
    season_expenses: int = 0
    last_week_costs: int = 0
    ledger: list[FinancialTransaction] = field(default_factory=list)


@dataclass(slots=True)
class GuildStatistics:
    quests_completed: int = 0
    quests_failed: int = 0
    total_gold_earned: int = 0
    seasons_active: int = 0


@dataclass(slots=True)
class Guild:
    """The player's guild."""

    id: GuildID
    name: str
    motto: str
    tier: GuildTier
    reputation: int
    founded_season: int
    roster_capacity: int
    finances: GuildFinances
    roster_ids: list[AdventurerID] = field(default_factory=list)
    staff: list[StaffMember] = field(default_factory=list)
    facilities: list[Facility] = field(default_factory=list)
    loans: list[Loan] = field(default_factory=list)
    inventory: list[Item] = field(default_factory=list)
    statistics: GuildStatistics = field(default_factory=GuildStatistics)
    in_financial_trouble: bool = False


# --- Quests ---------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class QuestResult:
    """Immutable outcome of a simulated quest."""

    outcome: QuestOutcome
    success_probability: float
    party_power: float
    quest_difficulty: float
    gold_delta: int
    experience_per_member: int
    injuries: dict[AdventurerID, InjuryType] = field(default_factory=dict)
    ratings: dict[AdventurerID, float] = field(default_factory=dict)
    loot: tuple[LootDrop, ...] = ()
    completed_week: int | None = None


@dataclass(slots=True)
class Quest:
    """A contract on the quest board."""

    id: QuestID
    name: str
    quest_type: QuestType
    stakes: QuestStakes
    minimum_party_size: int
    maximum_party_size: int
    recommended_level: AdventurerLevel
    base_gold_reward: int
    experience_reward: int
    status: QuestStatus = QuestStatus.AVAILABLE
    required_reputation: int = 0
    required_tier: GuildTier = GuildTier.FLEDGLING
    posted_week: int = 0
    accepted_week: int | None = None
    result: QuestResult | None = None


@dataclass(slots=True)
class QuestParty:
    """Adventurers jointly assigned to one quest."""

    adventurer_ids: list[AdventurerID]
    leader_id: AdventurerID | None = None


# --- Timeline -------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class GameTimestamp:
    season: int
    month: int
    week: int


@dataclass(frozen=True, slots=True)
class GameEvent:
    """Immutable entry in the campaign event log."""

    id: EventID
    event_type: EventType
    message: str
    timestamp: GameTimestamp
    related_entity_id: int | None = None


# --- State root -----------------------------------------------------------------


@dataclass(slots=True)
class EntityStore:
    """Canonical adventurer and quest records.

    Identifier counters only ever increase, so removing a record retires its
    id for the rest of the campaign.
    """

    adventurers: dict[AdventurerID, Adventurer] = field(default_factory=dict)
    quests: dict[QuestID, Quest] = field(default_factory=dict)
    next_adventurer_id: int = 1
    next_quest_id: int = 1
    next_staff_id: int = 1
    next_item_id: int = 1

    def allocate_adventurer_id(self) -> AdventurerID:
        adventurer_id = AdventurerID(self.next_adventurer_id)
        self.next_adventurer_id += 1
        return adventurer_id

    def allocate_quest_id(self) -> QuestID:
        quest_id = QuestID(self.next_quest_id)
        self.next_quest_id += 1
        return quest_id

    def allocate_staff_id(self) -> StaffID:
        staff_id = StaffID(self.next_staff_id)
        self.next_staff_id += 1
        return staff_id

    def allocate_item_id(self) -> ItemID:
        item_id = ItemID(self.next_item_id)
        self.next_item_id += 1
        return item_id

    def adventurer(self, adventurer_id: AdventurerID) -> Adventurer:
        try:
            return self.adventurers[adventurer_id]
        except KeyError:
            raise EntityNotFoundError("adventurer", adventurer_id) from None

    def quest(self, quest_id: QuestID) -> Quest:
        try:
            return self.quests[quest_id]
        except KeyError:
            raise EntityNotFoundError("quest", quest_id) from None

    def add_adventurer(self, adventurer: Adventurer) -> None:
        if adventurer.id in self.adventurers:
            raise ValueError(f"adventurer {adventurer.id} already stored")
        self.adventurers[adventurer.id] = adventurer
        self.next_adventurer_id = max(self.next_adventurer_id, int(adventurer.id) + 1)

    def add_quest(self, quest: Quest) -> None:
        if quest.id in self.quests:
            raise ValueError(f"quest {quest.id} already stored")
        self.quests[quest.id] = quest
        self.next_quest_id = max(self.next_quest_id, int(quest.id) + 1)

    def remove_adventurer(self, adventurer_id: AdventurerID) -> Adventurer:
        adventurer = self.adventurer(adventurer_id)
        del self.adventurers[adventurer_id]
        return adventurer


@dataclass(slots=True)
class GameSettings:
    difficulty: DifficultyLevel = DifficultyLevel.NORMAL
    rng_seed: int = 0


@dataclass(slots=True)
class GameState:
    """Calendar counters, quest collections, free agents, entity store and event log.

    Free agents are stored adventurers who belong to no guild; hiring moves
    an id from ``free_agents`` to the guild roster and dismissal moves it back.
    """

    campaign_name: str
    settings: GameSettings = field(default_factory=GameSettings)
    current_season: int = 1
    current_month: int = 1
    current_week: int = 1
    total_weeks_elapsed: int = 0
    season_phase: SeasonPhase = SeasonPhase.SPRING_THAW
    store: EntityStore = field(default_factory=EntityStore)
    available_quests: list[QuestID] = field(default_factory=list)
    active_quests: list[QuestID] = field(default_factory=list)
    completed_quests: list[QuestID] = field(default_factory=list)
    free_agents: list[AdventurerID] = field(default_factory=list)
    events: list[GameEvent] = field(default_factory=list)
    next_event_id: int = 1

    @property
    def timestamp(self) -> GameTimestamp:
        return GameTimestamp(
            season=self.current_season, month=self.current_month, week=self.current_week
        )


@dataclass(slots=True)
class Campaign:
    """Aggregate root: game state, the guild and the quest->party mapping."""

    state: GameState
    guild: Guild
    parties: dict[QuestID, QuestParty] = field(default_factory=dict)
