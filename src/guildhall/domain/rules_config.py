"""Declarative balance tables for the guild simulation."""

from __future__ import annotations

from dataclasses import dataclass, field

from .enums import (
    AdventurerClass,
    AdventurerLevel,
    AttributeType,
    DifficultyLevel,
    FacilityType,
    GuildTier,
    InjuryType,
    ItemCategory,
    ItemRarity,
    LootTier,
    QuestOutcome,
    QuestStakes,
    QuestType,
    StaffRole,
)

_A = AttributeType
_C = ItemCategory
_F = FacilityType
_L = AdventurerLevel
_O = QuestOutcome
_R = ItemRarity
_S = QuestStakes
_T = GuildTier


@dataclass(frozen=True, slots=True)
class QuestBoardRules:
    """Quest generation curves and board size."""

    replenish_floor: int = 5
    board_size: int = 8
    reward_variance: int = 20  # +/- gold on the base reward
    experience_ratio: float = 0.1
    tier_reward_base: dict[GuildTier, int] = field(
        default_factory=lambda: {
            _T.FLEDGLING: 100,
            _T.RISING: 250,
            _T.ESTABLISHED: 500,
            _T.ELITE: 1000,
            _T.LEGENDARY: 2500,
        }
    )
    stakes_reward_factor: dict[QuestStakes, int] = field(
        default_factory=lambda: {_S.LOW: 1, _S.MEDIUM: 2, _S.HIGH: 4, _S.CRITICAL: 8}
    )
    # percentage weights low/medium/high/critical
    stakes_weights: dict[GuildTier, tuple[int, int, int, int]] = field(
        default_factory=lambda: {
            _T.FLEDGLING: (50, 40, 10, 0),
            _T.RISING: (30, 50, 18, 2),
            _T.ESTABLISHED: (15, 50, 30, 5),
            _T.ELITE: (5, 35, 45, 15),
            _T.LEGENDARY: (0, 20, 50, 30),
        }
    )
    recommended_level: dict[QuestStakes, AdventurerLevel] = field(
        default_factory=lambda: {
            _S.LOW: _L.APPRENTICE,
            _S.MEDIUM: _L.JOURNEYMAN,
            _S.HIGH: _L.ADEPT,
            _S.CRITICAL: _L.EXPERT,
        }
    )
    required_reputation: dict[QuestStakes, int] = field(
        default_factory=lambda: {_S.LOW: 0, _S.MEDIUM: 0, _S.HIGH: 20, _S.CRITICAL: 45}
    )
    required_tier: dict[QuestStakes, GuildTier] = field(
        default_factory=lambda: {
            _S.LOW: _T.FLEDGLING,
            _S.MEDIUM: _T.FLEDGLING,
            _S.HIGH: _T.FLEDGLING,
            _S.CRITICAL: _T.RISING,
        }
    )
    party_size: dict[QuestType, tuple[int, int]] = field(
        default_factory=lambda: {
            QuestType.INVESTIGATION: (2, 4),
            QuestType.COMBAT: (4, 6),
            QuestType.EXPLORATION: (3, 5),
            QuestType.SOCIAL: (1, 3),
            QuestType.RITUAL: (2, 4),
            QuestType.SIEGE: (5, 6),
            QuestType.ESCORT: (4, 6),
            QuestType.RETRIEVAL: (2, 4),
            QuestType.ASSASSINATION: (1, 3),
            QuestType.DEFENSE: (4, 6),
        }
    )


@dataclass(frozen=True, slots=True)
class ExecutionRules:
    """Quest simulation: power, difficulty, outcome bands and consequences."""

    base_chance: float = 0.6
    ratio_slope: float = 0.4
    min_chance: float = 0.05
    max_chance: float = 0.95
    perfect_band: float = 0.3  # fraction of the success chance
    partial_band: float = 0.4  # fraction of the failure remainder
    failure_band: float = 0.85
    injured_power_factor: float = 0.7
    rating_spread: float = 1.0
    primary_attributes: dict[QuestType, tuple[AttributeType, ...]] = field(
        default_factory=lambda: {
            QuestType.INVESTIGATION: (_A.INTELLECT, _A.PERCEPTION, _A.CUNNING),
            QuestType.COMBAT: (_A.MIGHT, _A.AGILITY, _A.VITALITY),
            QuestType.EXPLORATION: (_A.PERCEPTION, _A.VITALITY, _A.AGILITY),
            QuestType.SOCIAL: (_A.PRESENCE, _A.CUNNING, _A.INTELLECT),
            QuestType.RITUAL: (_A.ARCANA, _A.FAITH, _A.WILLPOWER),
            QuestType.SIEGE: (_A.MIGHT, _A.VITALITY, _A.WILLPOWER),
            QuestType.ESCORT: (_A.PERCEPTION, _A.MIGHT, _A.PRESENCE),
            QuestType.RETRIEVAL: (_A.AGILITY, _A.CUNNING, _A.PERCEPTION),
            QuestType.ASSASSINATION: (_A.AGILITY, _A.CUNNING, _A.PERCEPTION),
            QuestType.DEFENSE: (_A.VITALITY, _A.MIGHT, _A.WILLPOWER),
        }
    )
    # indexed by party size - 1
    party_synergy: tuple[float, ...] = (1.0, 1.1, 1.15, 1.2, 1.22, 1.25)
    level_power: dict[AdventurerLevel, float] = field(
        default_factory=lambda: {
            _L.APPRENTICE: 0.6,
            _L.JOURNEYMAN: 1.0,
            _L.ADEPT: 1.5,
            _L.EXPERT: 2.2,
            _L.MASTER: 3.0,
            _L.GRANDMASTER: 4.0,
            _L.LEGENDARY: 5.5,
        }
    )
    level_difficulty: dict[AdventurerLevel, float] = field(
        default_factory=lambda: {
            _L.APPRENTICE: 0.6,
            _L.JOURNEYMAN: 1.0,
            _L.ADEPT: 1.4,
            _L.EXPERT: 1.8,
            _L.MASTER: 2.5,
            _L.GRANDMASTER: 3.5,
            _L.LEGENDARY: 5.0,
        }
    )
    stakes_difficulty: dict[QuestStakes, float] = field(
        default_factory=lambda: {_S.LOW: 30.0, _S.MEDIUM: 50.0, _S.HIGH: 75.0, _S.CRITICAL: 100.0}
    )
    stakes_reward_multiplier: dict[QuestStakes, float] = field(
        default_factory=lambda: {_S.LOW: 0.5, _S.MEDIUM: 1.0, _S.HIGH: 1.5, _S.CRITICAL: 2.5}
    )
    stakes_risk: dict[QuestStakes, float] = field(
        default_factory=lambda: {_S.LOW: 0.02, _S.MEDIUM: 0.05, _S.HIGH: 0.10, _S.CRITICAL: 0.20}
    )
    risk_injury_factor: float = 5.0
    # fraction of the effective reward lost on failure
    failure_penalty: dict[QuestStakes, float] = field(
        default_factory=lambda: {_S.LOW: 0.0, _S.MEDIUM: 0.05, _S.HIGH: 0.1, _S.CRITICAL: 0.2}
    )
    catastrophic_penalty_factor: float = 2.0
    outcome_gold: dict[QuestOutcome, float] = field(
        default_factory=lambda: {
            _O.PERFECT_VICTORY: 1.5,
            _O.SUCCESS: 1.0,
            _O.PARTIAL_SUCCESS: 0.5,
            _O.FAILURE: 0.0,
            _O.CATASTROPHIC_FAILURE: 0.0,
        }
    )
    outcome_injury_chance: dict[QuestOutcome, float] = field(
        default_factory=lambda: {
            _O.PERFECT_VICTORY: 0.02,
            _O.SUCCESS: 0.08,
            _O.PARTIAL_SUCCESS: 0.20,
            _O.FAILURE: 0.35,
            _O.CATASTROPHIC_FAILURE: 0.60,
        }
    )
    outcome_rating: dict[QuestOutcome, float] = field(
        default_factory=lambda: {
            _O.PERFECT_VICTORY: 9.0,
            _O.SUCCESS: 7.0,
            _O.PARTIAL_SUCCESS: 5.0,
            _O.FAILURE: 3.0,
            _O.CATASTROPHIC_FAILURE: 1.0,
        }
    )
    outcome_reputation: dict[QuestOutcome, int] = field(
        default_factory=lambda: {
            _O.PERFECT_VICTORY: 5,
            _O.SUCCESS: 2,
            _O.PARTIAL_SUCCESS: 0,
            _O.FAILURE: -3,
            _O.CATASTROPHIC_FAILURE: -10,
        }
    )
    # cumulative severity thresholds, checked in order; anything above is exhaustion
    injury_severity: tuple[tuple[float, InjuryType], ...] = (
        (0.5, InjuryType.MINOR_WOUND),
        (0.8, InjuryType.SERIOUS_WOUND),
        (0.95, InjuryType.CRITICAL_WOUND),
    )


@dataclass(frozen=True, slots=True)
class DifficultyRules:
    """Campaign difficulty modifiers."""

    enemy_strength: dict[DifficultyLevel, float] = field(
        default_factory=lambda: {
            DifficultyLevel.EASY: 0.75,
            DifficultyLevel.NORMAL: 1.0,
            DifficultyLevel.HARD: 1.25,
            DifficultyLevel.LEGENDARY: 1.5,
        }
    )
    reward_multiplier: dict[DifficultyLevel, float] = field(
        default_factory=lambda: {
            DifficultyLevel.EASY: 1.25,
            DifficultyLevel.NORMAL: 1.0,
            DifficultyLevel.HARD: 0.9,
            DifficultyLevel.LEGENDARY: 0.75,
        }
    )


@dataclass(frozen=True, slots=True)
class LevelingRules:
    """Experience curve, attribute growth and wages."""

    base_experience: int = 100
    experience_scaling: float = 1.8
    attribute_cap: int = 20
    wage_attribute_factor: float = 0.5
    wage_per_quest: int = 2
    wage_variance: float = 0.25
    outcome_experience: dict[QuestOutcome, float] = field(
        default_factory=lambda: {
            _O.PERFECT_VICTORY: 1.5,
            _O.SUCCESS: 1.0,
            _O.PARTIAL_SUCCESS: 0.6,
            _O.FAILURE: 0.2,
            _O.CATASTROPHIC_FAILURE: 0.1,
        }
    )
    base_wage: dict[AdventurerLevel, int] = field(
        default_factory=lambda: {
            _L.APPRENTICE: 5,
            _L.JOURNEYMAN: 25,
            _L.ADEPT: 75,
            _L.EXPERT: 200,
            _L.MASTER: 500,
            _L.GRANDMASTER: 1500,
            _L.LEGENDARY: 5000,
        }
    )
    attribute_range: dict[AdventurerLevel, tuple[int, int]] = field(
        default_factory=lambda: {
            _L.APPRENTICE: (3, 10),
            _L.JOURNEYMAN: (5, 12),
            _L.ADEPT: (7, 14),
            _L.EXPERT: (9, 16),
            _L.MASTER: (11, 18),
            _L.GRANDMASTER: (13, 19),
            _L.LEGENDARY: (15, 20),
        }
    )
    class_primary: dict[AdventurerClass, tuple[AttributeType, ...]] = field(
        default_factory=lambda: {
            AdventurerClass.FIGHTER: (_A.MIGHT, _A.VITALITY),
            AdventurerClass.BARBARIAN: (_A.MIGHT, _A.VITALITY),
            AdventurerClass.PALADIN: (_A.MIGHT, _A.FAITH),
            AdventurerClass.RANGER: (_A.AGILITY, _A.PERCEPTION),
            AdventurerClass.ROGUE: (_A.AGILITY, _A.CUNNING),
            AdventurerClass.WIZARD: (_A.INTELLECT, _A.ARCANA),
            AdventurerClass.CLERIC: (_A.FAITH, _A.WILLPOWER),
            AdventurerClass.BARD: (_A.PRESENCE, _A.CUNNING),
        }
    )
    class_primary_bonus: int = 2


@dataclass(frozen=True, slots=True)
class FinanceRules:
    """Treasury, operating costs, loans and tier capacity."""

    starting_treasury: int = 5000
    base_weekly_income: int = 50
    low_reserve_weeks: int = 4
    loan_interest: float = 0.1
    starting_reputation: int = 10
    roster_capacity: dict[GuildTier, int] = field(
        default_factory=lambda: {
            _T.FLEDGLING: 12,
            _T.RISING: 18,
            _T.ESTABLISHED: 24,
            _T.ELITE: 30,
            _T.LEGENDARY: 40,
        }
    )
    starting_facilities: tuple[FacilityType, ...] = (
        FacilityType.GUILD_HALL,
        FacilityType.TRAINING_GROUNDS,
        FacilityType.TAVERN,
    )


@dataclass(frozen=True, slots=True)
class RecoveryRules:
    """Injury recovery durations in weeks (inclusive ranges)."""

    recovery_weeks: dict[InjuryType, tuple[int, int]] = field(
        default_factory=lambda: {
            InjuryType.MINOR_WOUND: (1, 2),
            InjuryType.SERIOUS_WOUND: (3, 6),
            InjuryType.CRITICAL_WOUND: (6, 10),
            InjuryType.EXHAUSTION: (1, 1),
        }
    )


@dataclass(frozen=True, slots=True)
class CalendarRules:
    weeks_per_month: int = 4
    months_per_season: int = 12
    months_per_phase: int = 3


@dataclass(frozen=True, slots=True)
class RecruitmentRules:
    """Free-agent pool size and hiring fees."""

    initial_pool: int = 10
    refill_floor: int = 8
    refill_batch: int = 6
    fee_per_attribute_point: int = 100
    level_fee_multiplier: dict[AdventurerLevel, float] = field(
        default_factory=lambda: {
            _L.APPRENTICE: 0.3,
            _L.JOURNEYMAN: 0.6,
            _L.ADEPT: 1.0,
            _L.EXPERT: 1.5,
            _L.MASTER: 2.5,
            _L.GRANDMASTER: 4.0,
            _L.LEGENDARY: 7.0,
        }
    )
    pool_level_weights: dict[AdventurerLevel, int] = field(
        default_factory=lambda: {
            _L.APPRENTICE: 50,
            _L.JOURNEYMAN: 30,
            _L.ADEPT: 15,
            _L.EXPERT: 5,
        }
    )


@dataclass(frozen=True, slots=True)
class LootRules:
    """Reward tables for successful quests."""

    stakes_tier: dict[QuestStakes, LootTier] = field(
        default_factory=lambda: {
            _S.LOW: LootTier.COMMON,
            _S.MEDIUM: LootTier.UNCOMMON,
            _S.HIGH: LootTier.RARE,
            _S.CRITICAL: LootTier.EPIC,
        }
    )
    # inclusive drop count range before the outcome modifier
    stakes_drops: dict[QuestStakes, tuple[int, int]] = field(
        default_factory=lambda: {_S.LOW: (1, 1), _S.MEDIUM: (1, 2), _S.HIGH: (1, 3), _S.CRITICAL: (2, 4)}
    )
    outcome_drop_modifier: dict[QuestOutcome, int] = field(
        default_factory=lambda: {_O.PERFECT_VICTORY: 1, _O.SUCCESS: 0, _O.PARTIAL_SUCCESS: -1}
    )
    rarity_weights: dict[LootTier, dict[ItemRarity, int]] = field(
        default_factory=lambda: {
            LootTier.POOR: {_R.COMMON: 95, _R.UNCOMMON: 5},
            LootTier.COMMON: {_R.COMMON: 70, _R.UNCOMMON: 25, _R.RARE: 5},
            LootTier.UNCOMMON: {_R.COMMON: 40, _R.UNCOMMON: 40, _R.RARE: 18, _R.EPIC: 2},
            LootTier.RARE: {_R.COMMON: 20, _R.UNCOMMON: 35, _R.RARE: 35, _R.EPIC: 9, _R.LEGENDARY: 1},
            LootTier.EPIC: {_R.UNCOMMON: 20, _R.RARE: 40, _R.EPIC: 35, _R.LEGENDARY: 5},
            LootTier.LEGENDARY: {_R.RARE: 30, _R.EPIC: 50, _R.LEGENDARY: 20},
        }
    )
    default_category_weights: dict[ItemCategory, int] = field(
        default_factory=lambda: {_C.VALUABLE: 30, _C.CONSUMABLE: 30, _C.WEAPON: 20, _C.ARMOR: 20}
    )
    category_weights: dict[QuestType, dict[ItemCategory, int]] = field(
        default_factory=lambda: {
            QuestType.COMBAT: {_C.WEAPON: 35, _C.ARMOR: 30, _C.CONSUMABLE: 20, _C.VALUABLE: 15},
            QuestType.ASSASSINATION: {_C.WEAPON: 35, _C.ARMOR: 30, _C.CONSUMABLE: 20, _C.VALUABLE: 15},
            QuestType.EXPLORATION: {_C.VALUABLE: 40, _C.CONSUMABLE: 25, _C.WEAPON: 20, _C.ARMOR: 15},
            QuestType.RETRIEVAL: {_C.VALUABLE: 40, _C.CONSUMABLE: 25, _C.WEAPON: 20, _C.ARMOR: 15},
            QuestType.DEFENSE: {_C.ARMOR: 40, _C.WEAPON: 30, _C.CONSUMABLE: 20, _C.VALUABLE: 10},
            QuestType.SIEGE: {_C.ARMOR: 40, _C.WEAPON: 30, _C.CONSUMABLE: 20, _C.VALUABLE: 10},
            QuestType.RITUAL: {_C.ACCESSORY: 35, _C.CONSUMABLE: 30, _C.VALUABLE: 25, _C.WEAPON: 10},
        }
    )
    base_value: dict[ItemCategory, int] = field(
        default_factory=lambda: {
            _C.WEAPON: 50,
            _C.ARMOR: 40,
            _C.ACCESSORY: 60,
            _C.CONSUMABLE: 15,
            _C.VALUABLE: 45,
        }
    )
    rarity_value_multiplier: dict[ItemRarity, int] = field(
        default_factory=lambda: {_R.COMMON: 1, _R.UNCOMMON: 2, _R.RARE: 5, _R.EPIC: 15, _R.LEGENDARY: 50}
    )
    value_variance: float = 0.2
    # perfect victories add one item from these categories, a tier higher
    bonus_categories: tuple[ItemCategory, ...] = (_C.WEAPON, _C.ACCESSORY)


@dataclass(frozen=True, slots=True)
class FacilityRules:
    """Facility upgrades, maintenance and staff payroll."""

    max_rating: int = 7
    maintenance_factor: float = 0.5
    # cost to reach a rating; rating 1 is the price of building from nothing
    upgrade_cost: dict[int, int] = field(
        default_factory=lambda: {
            1: 250,
            2: 500,
            3: 2000,
            4: 8000,
            5: 25000,
            6: 75000,
            7: 200000,
        }
    )
    base_maintenance: dict[FacilityType, int] = field(
        default_factory=lambda: {
            _F.GUILD_HALL: 40,
            _F.TRAINING_GROUNDS: 20,
            _F.TAVERN: 20,
            _F.TEMPLE: 60,
            _F.ARMORY: 30,
            _F.LIBRARY: 25,
        }
    )
    staff_salary: dict[StaffRole, int] = field(
        default_factory=lambda: {
            StaffRole.SECOND_IN_COMMAND: 200,
            StaffRole.COMBAT_INSTRUCTOR: 100,
            StaffRole.MAGIC_INSTRUCTOR: 120,
            StaffRole.SCOUT_MASTER: 80,
            StaffRole.HEALER: 150,
            StaffRole.QUARTERMASTER: 70,
        }
    )
    salary_variance: int = 20  # +/- gold on the base salary
    skill_range: tuple[int, int] = (8, 16)
    signing_weeks: int = 4  # hiring costs this many weeks of salary up front
    unique_roles: tuple[StaffRole, ...] = (StaffRole.SECOND_IN_COMMAND,)


@dataclass(frozen=True, slots=True)
class RulesConfig:
    """Top-level configuration container for all subsystems."""

    quest_board: QuestBoardRules = QuestBoardRules()
    execution: ExecutionRules = ExecutionRules()
    difficulty: DifficultyRules = DifficultyRules()
    leveling: LevelingRules = LevelingRules()
    finance: FinanceRules = FinanceRules()
    recovery: RecoveryRules = RecoveryRules()
    calendar: CalendarRules = CalendarRules()
    recruitment: RecruitmentRules = RecruitmentRules()
    loot: LootRules = LootRules()
    facilities: FacilityRules = FacilityRules()


DEFAULT_RULES = RulesConfig()
