"""
Side selection from pool imbalance.

AGAINST (contrarian) bets on the lighter pool while the heavier pool is less
than `ratio_threshold` times larger, and follows the heavier pool once the
imbalance reaches the threshold. WITH is the mirror image:
decide(WITH, a, b) == decide(AGAINST, b, a).

Ratios use integer division in wei. A zero denominator yields an infinite
ratio, which meets any threshold.
"""
import math
from typing import Union

from protocol.models import PoolAmounts, Side, Strategy
from bettor.utils.env import STRATEGY_RATIO_THRESHOLD


def _ratio(numerator: int, denominator: int) -> Union[int, float]:
    if denominator == 0:
        return math.inf
    return numerator // denominator


def _is_bear(bull_amount: int, bear_amount: int, ratio_threshold: int) -> bool:
    return (
        bull_amount > bear_amount and _ratio(bull_amount, bear_amount) < ratio_threshold
    ) or (
        bull_amount < bear_amount and _ratio(bear_amount, bull_amount) > ratio_threshold
    )


def decide(
    strategy: Strategy,
    bull_amount: int,
    bear_amount: int,
    ratio_threshold: int = STRATEGY_RATIO_THRESHOLD,
) -> Side:
    """
    Pick the side to bet on.

    Args:
        strategy: AGAINST or WITH the majority
        bull_amount: Bull pool total (wei)
        bear_amount: Bear pool total (wei)
        ratio_threshold: Pool ratio at which AGAINST follows the majority

    Returns:
        Side.BEAR or Side.BULL
    """
    if ratio_threshold <= 0:
        raise ValueError(f"ratio_threshold must be positive, got {ratio_threshold}")
    if bull_amount < 0 or bear_amount < 0:
        raise ValueError("Pool amounts must be non-negative")

    if strategy == Strategy.AGAINST:
        is_bear = _is_bear(bull_amount, bear_amount, ratio_threshold)
    elif strategy == Strategy.WITH:
        is_bear = _is_bear(bear_amount, bull_amount, ratio_threshold)
    else:
        raise ValueError(f"Unknown strategy {strategy!r}")
    return Side.BEAR if is_bear else Side.BULL


def decide_for_pools(
    strategy: Strategy, pools: PoolAmounts, ratio_threshold: int = STRATEGY_RATIO_THRESHOLD
) -> Side:
    """decide() over a PoolAmounts read from the contract."""
    return decide(strategy, pools.bull_amount, pools.bear_amount, ratio_threshold)
