"""
Round services: side selection, dues calculation and claim scanning.
"""
from bettor.services.claims import ClaimWindowScanner
from bettor.services.dues import DuesCalculator
from bettor.services.strategy import decide

__all__ = [
    "ClaimWindowScanner",
    "DuesCalculator",
    "decide",
]
