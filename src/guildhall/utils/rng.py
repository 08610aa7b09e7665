"""Deterministic random number generation for guild campaigns.

Every random draw in the rules layer comes from a sampler passed in
explicitly.  Samplers are seeded from campaign state (campaign seed, week,
season phase, context) so that:
- Reproducibility: the same campaign state always produces the same results
- Bug reproduction: a reported week can be replayed exactly
- Isolation: each quest resolution draws from its own stream

Examples:
    >>> seed = generate_seed(7, 12, "spring_thaw", "quest:3")
    >>> seed
    '7:12:spring_thaw:quest:3'
    >>> rng = sampler_for(seed)
    >>> rng.random() == sampler_for(seed).random()
    True
"""

from __future__ import annotations

import hashlib
import random
from collections.abc import Sequence
from typing import Protocol, TypeVar

T = TypeVar("T")


class Sampler(Protocol):
    """The subset of :class:`random.Random` the rules layer relies on."""

    def random(self) -> float: ...

    def randint(self, a: int, b: int) -> int: ...

    def uniform(self, a: float, b: float) -> float: ...

    def choice(self, seq: Sequence[T]) -> T: ...

    def sample(self, population: Sequence[T], k: int) -> list[T]: ...


def generate_seed(campaign_seed: int, week: int, phase: str, context: str) -> str:
    """Generate deterministic seed from campaign state.

    Format: "campaign_seed:week:phase:context"

    Args:
        campaign_seed: Seed fixed at campaign creation
        week: Total weeks elapsed in the campaign
        phase: Current season phase
        context: What the draw is for (e.g., 'quest:12', 'board')

    Returns:
        Seed string in format "campaign_seed:week:phase:context"

    Examples:
        >>> generate_seed(1, 42, "summer_campaign", "board")
        '1:42:summer_campaign:board'

    Raises:
        ValueError: If campaign_seed or week is negative
    """
    if campaign_seed < 0:
        raise ValueError(f"campaign_seed must be non-negative, got {campaign_seed}")
    if week < 0:
        raise ValueError(f"week must be non-negative, got {week}")

    return f"{campaign_seed}:{week}:{phase}:{context}"


def _seed_to_int(seed: str) -> int:
    """Convert seed string to a stable 64-bit integer for random.Random().

    Args:
        seed: Seed string

    Returns:
        64-bit integer derived from SHA-256(seed)
    """
    digest = hashlib.sha256(seed.encode("utf-8")).digest()
    # Use first 8 bytes for a 64-bit integer
    return int.from_bytes(digest[:8], "big", signed=False)


def sampler_for(seed: str) -> random.Random:
    """Return a fresh sampler whose stream is fixed by ``seed``."""

    return random.Random(_seed_to_int(seed))


def weighted_choice(rng: Sampler, options: Sequence[T], weights: Sequence[float]) -> T:
    """Pick one option with probability proportional to its weight.

    Uses a single ``rng.random()`` draw.

    Raises:
        ValueError: If options is empty, lengths differ, or no weight is positive
    """
    if not options:
        raise ValueError("options list cannot be empty")
    if len(options) != len(weights):
        raise ValueError("options and weights must have the same length")
    total = float(sum(weights))
    if total <= 0:
        raise ValueError("at least one weight must be positive")

    threshold = rng.random() * total
    cumulative = 0.0
    for option, weight in zip(options, weights, strict=True):
        cumulative += weight
        if threshold < cumulative:
            return option
    # Floating point slack: fall back to the last positively weighted option
    return next(option for option, weight in zip(reversed(options), reversed(weights)) if weight > 0)
