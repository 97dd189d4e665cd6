"""Game entities: cart, goblin, falling rewards and hazards.

All entities are immutable values. Each simulation step builds new instances
instead of mutating the previous ones, so a held state can never change
underneath its owner.

Coordinates follow screen convention: origin at the top-left of the playfield,
y grows downward. Falling items are anchored at their top-left corner; the cart
is anchored at its horizontal center and sits on the bottom edge.
"""

from dataclasses import dataclass, replace
from typing import Tuple

from .config import PlayfieldConfig
from .rewards import RewardKind


@dataclass(frozen=True)
class Cart:
    """Player-controlled collector moving along the bottom edge."""
    x: float  # Center
    velocity: float = 0.0

    def bounds(self, playfield: PlayfieldConfig) -> Tuple[float, float, float, float]:
        """(left, top, right, bottom) in playfield coordinates."""
        half_w = playfield.half_cart_width
        return (
            self.x - half_w,
            playfield.catch_line,
            self.x + half_w,
            playfield.height,
        )


@dataclass(frozen=True)
class Goblin:
    """Oscillates between the playfield edges and drops the bombs."""
    x: float = 0.0
    direction: int = 1  # +1 moving right, -1 moving left


@dataclass(frozen=True)
class FallingReward:
    x: float  # Left edge
    y: float  # Top edge
    kind: RewardKind

    def advanced(self, dy: float) -> "FallingReward":
        return replace(self, y=self.y + dy)

    def bounds(self, size: float) -> Tuple[float, float, float, float]:
        return (self.x, self.y, self.x + size, self.y + size)


@dataclass(frozen=True)
class FallingHazard:
    x: float  # Left edge
    y: float  # Top edge

    def advanced(self, dy: float) -> "FallingHazard":
        return replace(self, y=self.y + dy)

    def bounds(self, size: float) -> Tuple[float, float, float, float]:
        return (self.x, self.y, self.x + size, self.y + size)
