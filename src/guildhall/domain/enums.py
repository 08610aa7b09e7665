"""Enumerations used across the guild simulation domain."""

from __future__ import annotations

from enum import StrEnum


class SeasonPhase(StrEnum):
    """Quarter of the campaign year; each spans three months."""

    SPRING_THAW = "spring_thaw"
    SUMMER_CAMPAIGN = "summer_campaign"
    AUTUMN_HARVEST = "autumn_harvest"
    WINTERS_END = "winters_end"

    def next(self) -> SeasonPhase:
        order = list(SeasonPhase)
        return order[(order.index(self) + 1) % len(order)]


class DifficultyLevel(StrEnum):
    """Campaign difficulty chosen at campaign creation."""

    EASY = "easy"
    NORMAL = "normal"
    HARD = "hard"
    LEGENDARY = "legendary"


class AdventurerCondition(StrEnum):
    """Availability of an adventurer for new assignments."""

    HEALTHY = "healthy"
    FATIGUED = "fatigued"
    INJURED = "injured"


class AdventurerLevel(StrEnum):
    """Experience tier, ordered from weakest to strongest."""

    APPRENTICE = "apprentice"
    JOURNEYMAN = "journeyman"
    ADEPT = "adept"
    EXPERT = "expert"
    MASTER = "master"
    GRANDMASTER = "grandmaster"
    LEGENDARY = "legendary"

    @property
    def rank(self) -> int:
        return list(AdventurerLevel).index(self)

    def next(self) -> AdventurerLevel | None:
        order = list(AdventurerLevel)
        index = order.index(self)
        return order[index + 1] if index + 1 < len(order) else None


class AdventurerRace(StrEnum):
    HUMAN = "human"
    ELF = "elf"
    DWARF = "dwarf"
    HALFLING = "halfling"
    HALF_ORC = "half_orc"
    GNOME = "gnome"
    TIEFLING = "tiefling"


class AdventurerClass(StrEnum):
    FIGHTER = "fighter"
    BARBARIAN = "barbarian"
    PALADIN = "paladin"
    RANGER = "ranger"
    ROGUE = "rogue"
    WIZARD = "wizard"
    CLERIC = "cleric"
    BARD = "bard"


class AttributeType(StrEnum):
    """Attribute block entries, each scored 1-20."""

    MIGHT = "might"
    AGILITY = "agility"
    VITALITY = "vitality"
    INTELLECT = "intellect"
    WILLPOWER = "willpower"
    PRESENCE = "presence"
    PERCEPTION = "perception"
    ARCANA = "arcana"
    FAITH = "faith"
    CUNNING = "cunning"


class QuestType(StrEnum):
    INVESTIGATION = "investigation"
    COMBAT = "combat"
    EXPLORATION = "exploration"
    SOCIAL = "social"
    RITUAL = "ritual"
    SIEGE = "siege"
    ESCORT = "escort"
    RETRIEVAL = "retrieval"
    ASSASSINATION = "assassination"
    DEFENSE = "defense"


class QuestStakes(StrEnum):
    """Risk tier of a quest, ordered from safest to deadliest."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class QuestStatus(StrEnum):
    """Quest lifecycle; transitions are strictly forward."""

    AVAILABLE = "available"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"


class QuestOutcome(StrEnum):
    PERFECT_VICTORY = "perfect_victory"
    SUCCESS = "success"
    PARTIAL_SUCCESS = "partial_success"
    FAILURE = "failure"
    CATASTROPHIC_FAILURE = "catastrophic_failure"

    @property
    def is_success(self) -> bool:
        return self in (
            QuestOutcome.PERFECT_VICTORY,
            QuestOutcome.SUCCESS,
            QuestOutcome.PARTIAL_SUCCESS,
        )


class InjuryType(StrEnum):
    MINOR_WOUND = "minor_wound"
    SERIOUS_WOUND = "serious_wound"
    CRITICAL_WOUND = "critical_wound"
    EXHAUSTION = "exhaustion"


class GuildTier(StrEnum):
    """Guild standing, gating roster size and quest access."""

    FLEDGLING = "fledgling"
    RISING = "rising"
    ESTABLISHED = "established"
    ELITE = "elite"
    LEGENDARY = "legendary"

    @property
    def rank(self) -> int:
        return list(GuildTier).index(self)


class StaffRole(StrEnum):
    SECOND_IN_COMMAND = "second_in_command"
    COMBAT_INSTRUCTOR = "combat_instructor"
    MAGIC_INSTRUCTOR = "magic_instructor"
    SCOUT_MASTER = "scout_master"
    HEALER = "healer"
    QUARTERMASTER = "quartermaster"


class FacilityType(StrEnum):
    GUILD_HALL = "guild_hall"
    TRAINING_GROUNDS = "training_grounds"
    TAVERN = "tavern"
    TEMPLE = "temple"
    ARMORY = "armory"
    LIBRARY = "library"


class TransactionCategory(StrEnum):
    """Ledger buckets for guild income and expenses."""

    QUEST_REWARD = "quest_reward"
    QUEST_PENALTY = "quest_penalty"
    RECURRING_INCOME = "recurring_income"
    OPERATING_COSTS = "operating_costs"
    LOAN = "loan"
    LOAN_PAYMENT = "loan_payment"
    RECRUITMENT_FEES = "recruitment_fees"
    FACILITY_UPGRADE = "facility_upgrade"
    STAFF_HIRING = "staff_hiring"


class EventType(StrEnum):
    """Kinds of entries in the campaign event log."""

    GUILD_FOUNDED = "guild_founded"
    ADVENTURER_HIRED = "adventurer_hired"
    ADVENTURER_DISMISSED = "adventurer_dismissed"
    ADVENTURER_INJURED = "adventurer_injured"
    ADVENTURER_RECOVERED = "adventurer_recovered"
    ADVENTURER_LEVEL_UP = "adventurer_level_up"
    QUEST_ACCEPTED = "quest_accepted"
    QUEST_COMPLETED = "quest_completed"
    QUEST_FAILED = "quest_failed"
    QUEST_DELAYED = "quest_delayed"
    LOOT_OBTAINED = "loot_obtained"
    FREE_AGENTS_ARRIVED = "free_agents_arrived"
    FACILITY_UPGRADED = "facility_upgraded"
    STAFF_HIRED = "staff_hired"
    STAFF_DISMISSED = "staff_dismissed"
    LOAN_TAKEN = "loan_taken"
    LOAN_REPAID = "loan_repaid"
    TREASURY_LOW = "treasury_low"
    WEEK_ADVANCED = "week_advanced"
    MONTH_CHANGED = "month_changed"
    SEASON_CHANGED = "season_changed"


class ItemCategory(StrEnum):
    WEAPON = "weapon"
    ARMOR = "armor"
    ACCESSORY = "accessory"
    CONSUMABLE = "consumable"
    VALUABLE = "valuable"


class ItemRarity(StrEnum):
    """Item quality, ordered from most to least common."""

    COMMON = "common"
    UNCOMMON = "uncommon"
    RARE = "rare"
    EPIC = "epic"
    LEGENDARY = "legendary"


class LootTier(StrEnum):
    """Quality band of a quest's reward table."""

    POOR = "poor"
    COMMON = "common"
    UNCOMMON = "uncommon"
    RARE = "rare"
    EPIC = "epic"
    LEGENDARY = "legendary"

    def upgraded(self) -> LootTier:
        order = list(LootTier)
        return order[min(order.index(self) + 1, len(order) - 1)]

    def downgraded(self) -> LootTier:
        order = list(LootTier)
        return order[max(order.index(self) - 1, 0)]
