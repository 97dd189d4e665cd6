"""Collision and scoring for falling items against the cart.

The test is a single-sample bounding-box check taken after the item has
advanced: the item's bottom edge must be below the cart's top edge and its
horizontal span must intersect the cart's. There is no lower bound: an item is
only discarded for leaving the playfield after it has failed the catch test.
"""

from dataclasses import dataclass
from typing import Dict, List, Tuple

from .config import PlayfieldConfig
from .entities import FallingReward, FallingHazard
from .rewards import RewardKind, reward_for


def overlaps_cart(
    item_x: float,
    item_y: float,
    item_size: float,
    cart_x: float,
    playfield: PlayfieldConfig,
) -> bool:
    """Whether an item at (item_x, item_y) touches the cart centered at cart_x."""
    half_w = playfield.half_cart_width
    return (
        item_y + item_size > playfield.catch_line
        and item_x + item_size > cart_x - half_w
        and item_x < cart_x + half_w
    )


@dataclass
class RewardResolution:
    """Outcome of advancing every falling reward by one tick."""
    remaining: Tuple[FallingReward, ...]
    score_gained: int
    collection: Dict[RewardKind, int]
    caught: Tuple[FallingReward, ...]


@dataclass
class HazardResolution:
    """Outcome of advancing every falling hazard by one tick."""
    remaining: Tuple[FallingHazard, ...]
    hit: bool


def resolve_rewards(
    rewards: Tuple[FallingReward, ...],
    cart_x: float,
    fall_speed: float,
    collection: Dict[RewardKind, int],
    playfield: PlayfieldConfig,
) -> RewardResolution:
    """Advance rewards, credit the ones the cart catches, drop the ones that left.

    The input ``collection`` is not modified; the resolution carries a copy.
    """
    tally = dict(collection)
    remaining: List[FallingReward] = []
    caught: List[FallingReward] = []
    score_gained = 0

    for reward in rewards:
        moved = reward.advanced(fall_speed)
        if overlaps_cart(moved.x, moved.y, playfield.reward_size, cart_x, playfield):
            score_gained += reward_for(moved.kind).value
            tally[moved.kind] = tally.get(moved.kind, 0) + 1
            caught.append(moved)
            continue
        if moved.y < playfield.height:
            remaining.append(moved)

    return RewardResolution(
        remaining=tuple(remaining),
        score_gained=score_gained,
        collection=tally,
        caught=tuple(caught),
    )


def resolve_hazards(
    hazards: Tuple[FallingHazard, ...],
    cart_x: float,
    fall_speed: float,
    playfield: PlayfieldConfig,
) -> HazardResolution:
    """Advance hazards; any that touches the cart is removed and flags a hit."""
    remaining: List[FallingHazard] = []
    hit = False

    for hazard in hazards:
        moved = hazard.advanced(fall_speed)
        if overlaps_cart(moved.x, moved.y, playfield.hazard_size, cart_x, playfield):
            hit = True
            continue
        if moved.y < playfield.height:
            remaining.append(moved)

    return HazardResolution(remaining=tuple(remaining), hit=hit)
