"""Simulation state: the complete world snapshot passed between ticks."""

from dataclasses import dataclass, field
from typing import Dict, Tuple, Optional, Any

from .config import PlayfieldConfig, DEFAULT_PLAYFIELD
from .entities import Cart, Goblin, FallingReward, FallingHazard
from .rewards import RewardKind, SORTED_REWARDS


def empty_collection() -> Dict[RewardKind, int]:
    """Zero tally for every reward kind, in catalog order."""
    return {reward.kind: 0 for reward in SORTED_REWARDS}


@dataclass(frozen=True)
class SimulationState:
    """Immutable world snapshot.

    Owned by the driver, which replaces it wholesale each tick. The
    ``collection`` dict is never shared between two states: every transition
    that touches it builds a fresh copy.

    Once ``is_game_over`` is set, the step function returns the state unchanged
    until the driver calls ``reset()``.
    """
    cart: Cart
    goblin: Goblin = field(default_factory=Goblin)
    rewards: Tuple[FallingReward, ...] = ()
    hazards: Tuple[FallingHazard, ...] = ()
    score: int = 0
    collection: Dict[RewardKind, int] = field(default_factory=empty_collection)
    is_game_over: bool = False

    @property
    def total_collected(self) -> int:
        return sum(self.collection.values())

    def to_dict(self) -> Dict[str, Any]:
        """Plain-data view for logging, info dicts and JSON metadata."""
        return {
            "cart_x": self.cart.x,
            "cart_velocity": self.cart.velocity,
            "goblin_x": self.goblin.x,
            "goblin_direction": self.goblin.direction,
            "rewards": [(r.x, r.y, r.kind.value) for r in self.rewards],
            "hazards": [(h.x, h.y) for h in self.hazards],
            "score": self.score,
            "collection": {kind.value: count for kind, count in self.collection.items()},
            "is_game_over": self.is_game_over,
        }


def reset(playfield: Optional[PlayfieldConfig] = None) -> SimulationState:
    """Fresh initial state: cart centered and at rest, goblin at the left edge
    moving right, nothing falling, zero score and tallies.
    """
    playfield = playfield or DEFAULT_PLAYFIELD
    return SimulationState(
        cart=Cart(x=playfield.width / 2, velocity=0.0),
        goblin=Goblin(x=0.0, direction=1),
        rewards=(),
        hazards=(),
        score=0,
        collection=empty_collection(),
        is_game_over=False,
    )
