"""
Round orchestration: per-round lifecycle, shared waiting time and the
StartRound signal source.

- lifecycle: the round state machine (wait, bet, claim, dues)
- waiting_time: adaptive delay shared by concurrent rounds
- round_watcher: polls StartRound events and dispatches epochs
"""
from bettor.orchestrator.lifecycle import (
    RoundLifecycle,
    RoundLifecycleController,
    RoundState,
)
from bettor.orchestrator.round_watcher import StartRoundWatcher
from bettor.orchestrator.waiting_time import WaitingTime

__all__ = [
    "RoundLifecycle",
    "RoundLifecycleController",
    "RoundState",
    "StartRoundWatcher",
    "WaitingTime",
]
