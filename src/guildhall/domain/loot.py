"""Loot rolled from successful quests."""

from __future__ import annotations

from guildhall.utils.rng import Sampler, weighted_choice

from .enums import ItemCategory, ItemRarity, LootTier, QuestOutcome
from .models import LootDrop, Quest
from .rules_config import DEFAULT_RULES, LootRules, RulesConfig

_PREFIXES: dict[ItemRarity, tuple[str, ...]] = {
    ItemRarity.COMMON: ("Iron", "Steel", "Worn", "Simple"),
    ItemRarity.UNCOMMON: ("Fine", "Tempered", "Keen", "Sturdy"),
    ItemRarity.RARE: ("Masterwork", "Runed", "Gleaming", "Enchanted"),
    ItemRarity.EPIC: ("Mithril", "Stormforged", "Shadowed", "Blessed"),
    ItemRarity.LEGENDARY: ("Ancient", "Divine", "Legendary", "Dragon's"),
}
_NOUNS: dict[ItemCategory, tuple[str, ...]] = {
    ItemCategory.WEAPON: ("Longsword", "Battleaxe", "Spear", "Mace", "Longbow", "Dagger"),
    ItemCategory.ARMOR: ("Chainmail", "Breastplate", "Shield", "Helm", "Gauntlets"),
    ItemCategory.ACCESSORY: ("Ring", "Amulet", "Cloak", "Circlet"),
    ItemCategory.CONSUMABLE: ("Healing Draught", "Antidote", "Smoke Bomb", "Trail Rations"),
    ItemCategory.VALUABLE: ("Chalice", "Gemstone", "Idol", "Reliquary", "Signet"),
}


def loot_tier(quest: Quest, outcome: QuestOutcome, *, rules: RulesConfig = DEFAULT_RULES) -> LootTier:
    tier = rules.loot.stakes_tier[quest.stakes]
    if outcome is QuestOutcome.PERFECT_VICTORY:
        return tier.upgraded()
    if outcome is QuestOutcome.PARTIAL_SUCCESS:
        return tier.downgraded()
    return tier


def roll_loot(
    quest: Quest,
    outcome: QuestOutcome,
    *,
    rng: Sampler,
    rules: RulesConfig = DEFAULT_RULES,
) -> tuple[LootDrop, ...]:
    """Roll the items a quest yields; failures yield nothing.

    Perfect victories add one bonus item a tier above the rest.
    """

    if not outcome.is_success:
        return ()
    table = rules.loot
    tier = loot_tier(quest, outcome, rules=rules)
    low, high = table.stakes_drops[quest.stakes]
    count = max(0, rng.randint(low, high) + table.outcome_drop_modifier.get(outcome, 0))
    weights = table.category_weights.get(quest.quest_type, table.default_category_weights)
    categories = list(weights)

    drops = [
        _roll_item(rng, tier, weighted_choice(rng, categories, [weights[c] for c in categories]), table)
        for _ in range(count)
    ]
    if outcome is QuestOutcome.PERFECT_VICTORY:
        drops.append(_roll_item(rng, tier.upgraded(), rng.choice(table.bonus_categories), table))
    return tuple(drops)


def _roll_item(rng: Sampler, tier: LootTier, category: ItemCategory, table: LootRules) -> LootDrop:
    rarity_weights = table.rarity_weights[tier]
    rarities = list(rarity_weights)
    rarity = weighted_choice(rng, rarities, [rarity_weights[r] for r in rarities])
    name = f"{rng.choice(_PREFIXES[rarity])} {rng.choice(_NOUNS[category])}"
    spread = rng.uniform(1.0 - table.value_variance, 1.0 + table.value_variance)
    value = max(1, int(table.base_value[category] * table.rarity_value_multiplier[rarity] * spread))
    return LootDrop(name=name, category=category, rarity=rarity, value=value)
