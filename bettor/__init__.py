"""
Prediction round bettor.

Bets on PancakeSwap / CandleGenie Bull-Bear prediction rounds from pool
imbalance, claims past winnings and forwards dues on each payout.
"""
from bettor.bot import PredictionBot
from bettor.config import BotConfig, load_config
from bettor.orchestrator.lifecycle import RoundLifecycleController

__all__ = [
    "PredictionBot",
    "BotConfig",
    "load_config",
    "RoundLifecycleController",
]
