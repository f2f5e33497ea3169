"""
Prediction platform adapters.

- base: the PlatformAdapter protocol the round lifecycle depends on
- platforms: PancakeSwap and CandleGenie contract call names
- prediction: adapter implementation over a web3 contract
"""
from bettor.adapters.base import PlatformAdapter
from bettor.adapters.platforms import CANDLEGENIE, PANCAKESWAP, PLATFORMS, PlatformSpec
from bettor.adapters.prediction import PredictionContractAdapter

__all__ = [
    "PlatformAdapter",
    "PlatformSpec",
    "PANCAKESWAP",
    "CANDLEGENIE",
    "PLATFORMS",
    "PredictionContractAdapter",
]
