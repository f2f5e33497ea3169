"""
Project-wide pytest fixtures.

Use these across test modules. Helpers live in tests.common.
"""
from __future__ import annotations

import logging

import pytest

# Ensure project root on path before any local imports
from tests.common import (
    FakeAdapter,
    FakeChain,
    MIN_FEE,
    STAKE,
    TEST_DUES_RECIPIENT,
    ensure_project_root,
)

ensure_project_root()

from protocol.models import Strategy  # noqa: E402
from bettor.orchestrator.lifecycle import RoundLifecycleController  # noqa: E402
from bettor.orchestrator.waiting_time import WaitingTime  # noqa: E402
from bettor.services.claims import ClaimWindowScanner  # noqa: E402
from bettor.services.dues import DuesCalculator  # noqa: E402

logger = logging.getLogger(__name__)


@pytest.fixture
def adapter() -> FakeAdapter:
    """Empty in-memory platform."""
    return FakeAdapter()


@pytest.fixture
def chain() -> FakeChain:
    """Chain client that records dues transfers."""
    return FakeChain()


@pytest.fixture
def waiting_time() -> WaitingTime:
    """Short shared waiting time with a floor well below it."""
    return WaitingTime(initial_ms=20, floor_ms=0, step_ms=6000)


@pytest.fixture
def make_controller(adapter, chain, waiting_time):
    """Factory for a controller over the fake adapter and chain."""

    def _make(strategy: Strategy = Strategy.AGAINST, **kwargs) -> RoundLifecycleController:
        params = dict(
            adapter=adapter,
            chain=chain,
            strategy=strategy,
            stake=STAKE,
            waiting_time=waiting_time,
            scanner=ClaimWindowScanner(adapter, window_size=5),
            dues=DuesCalculator(minimum_fee=MIN_FEE),
            dues_recipient=TEST_DUES_RECIPIENT,
        )
        params.update(kwargs)
        return RoundLifecycleController(**params)

    return _make
