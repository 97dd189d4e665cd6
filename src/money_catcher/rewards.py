"""Reward catalog: the collectible kinds and weighted-random selection.

Every reward kind has a single tunable number, its score value. Selection
weights are derived from it: a kind's weight is ``total_value / value``,
normalized so the weights sum to 1. With the default catalog
(1, 3, 10) that works out to roughly 70% bills, 23% treasure and 7% gems,
so the valuable rewards stay scarce without hand-tuned probabilities.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Protocol, Tuple


class RandomSource(Protocol):
    """Anything with ``random() -> float`` in [0, 1), e.g. ``random.Random``."""

    def random(self) -> float:
        ...


class RewardKind(Enum):
    BILL = "bill"
    TREASURE = "treasure"
    GEM = "gem"


@dataclass(frozen=True)
class RewardDefinition:
    """Static description of a reward kind."""
    kind: RewardKind
    name: str
    value: int  # Score contribution when caught
    emoji: str


REWARD_MAP: Dict[RewardKind, RewardDefinition] = {
    RewardKind.BILL: RewardDefinition(RewardKind.BILL, "Bill", 1, "\U0001F4B5"),
    RewardKind.TREASURE: RewardDefinition(RewardKind.TREASURE, "Treasure", 3, "\U0001F4B0"),
    RewardKind.GEM: RewardDefinition(RewardKind.GEM, "Gem", 10, "\U0001F48E"),
}

# Ascending value; the catalog order used everywhere (tallies, state vectors)
SORTED_REWARDS: Tuple[RewardDefinition, ...] = tuple(
    sorted(REWARD_MAP.values(), key=lambda reward: reward.value)
)

TOTAL_VALUE: int = sum(reward.value for reward in SORTED_REWARDS)

INVERSE_VALUES: Tuple[float, ...] = tuple(
    TOTAL_VALUE / reward.value for reward in SORTED_REWARDS
)

PROBABILITIES: Tuple[float, ...] = tuple(
    inverse / sum(INVERSE_VALUES) for inverse in INVERSE_VALUES
)


def reward_for(kind: RewardKind) -> RewardDefinition:
    """Look up the definition for a reward kind."""
    try:
        return REWARD_MAP[kind]
    except KeyError:
        raise KeyError(f"Unknown reward kind: {kind!r}") from None


def pick_random_reward(rng: RandomSource) -> RewardDefinition:
    """Choose a reward kind with probability proportional to its inverse value.

    Consumes exactly one ``rng.random()`` draw.

    Args:
        rng: Random source. Pass a seeded ``random.Random`` for reproducibility.

    Returns:
        The selected reward definition.
    """
    r = rng.random()
    cumulative = 0.0
    for reward, probability in zip(SORTED_REWARDS, PROBABILITIES):
        cumulative += probability
        if r < cumulative:
            return reward
    # Cumulative mass can land just short of 1.0; fall back to the cheapest kind
    return SORTED_REWARDS[0]
