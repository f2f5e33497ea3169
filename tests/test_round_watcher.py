"""
Tests for the StartRound event watcher.
"""
import asyncio
from unittest.mock import AsyncMock, MagicMock

import pytest

from bettor.orchestrator.round_watcher import StartRoundWatcher
from tests.common import FakeEth, FakeWeb3


def _log(epoch: int, block: int, index: int = 0) -> dict:
    return {"args": {"epoch": epoch}, "blockNumber": block, "logIndex": index}


def _watcher(eth: FakeEth, logs=None, poll_interval: float = 0.01, **kwargs):
    contract = MagicMock()
    event = contract.events.StartRound.return_value
    event.get_logs = AsyncMock(return_value=logs or [])
    watcher = StartRoundWatcher(FakeWeb3(eth), contract, poll_interval=poll_interval, **kwargs)
    return watcher, event


class TestPoll:
    @pytest.mark.asyncio
    async def test_first_poll_only_sets_start_block(self):
        eth = FakeEth(block_number=100)
        watcher, event = _watcher(eth, [_log(1, 90)])
        seen = []

        assert await watcher.poll(seen.append) == 0

        assert watcher.next_block == 101
        assert seen == []
        event.get_logs.assert_not_called()

    @pytest.mark.asyncio
    async def test_dispatches_new_epochs_in_block_order(self):
        eth = FakeEth(block_number=100)
        logs = [_log(12, 104), _log(10, 101), _log(11, 103, 2), _log(13, 103, 5)]
        watcher, event = _watcher(eth, logs)
        seen = []
        await watcher.poll(seen.append)

        eth.block = 105
        count = await watcher.poll(seen.append)

        assert count == 4
        assert seen == [10, 11, 13, 12]
        event.get_logs.assert_awaited_once_with(from_block=101, to_block=105)
        assert watcher.next_block == 106

    @pytest.mark.asyncio
    async def test_no_new_blocks(self):
        eth = FakeEth(block_number=100)
        watcher, event = _watcher(eth)
        await watcher.poll(lambda epoch: None)

        assert await watcher.poll(lambda epoch: None) == 0
        event.get_logs.assert_not_called()


class TestWatch:
    @pytest.mark.asyncio
    async def test_watch_until_stopped(self):
        eth = FakeEth(block_number=100)
        watcher, _ = _watcher(eth, [_log(7, 101)])
        seen = []

        task = asyncio.create_task(watcher.watch(seen.append))
        await asyncio.sleep(0.005)
        eth.block = 101
        await asyncio.sleep(0.05)
        watcher.stop()
        await asyncio.wait_for(task, timeout=1)

        assert seen == [7]

    @pytest.mark.asyncio
    async def test_poll_errors_do_not_stop_watching(self):
        eth = FakeEth(block_number=100)
        watcher, event = _watcher(eth)
        await watcher.poll(lambda epoch: None)
        eth.block = 101
        event.get_logs.side_effect = [ConnectionError("rpc down"), [_log(8, 101)]]
        seen = []

        task = asyncio.create_task(watcher.watch(seen.append))
        await asyncio.sleep(0.05)
        watcher.stop()
        await asyncio.wait_for(task, timeout=1)

        assert seen == [8]
        assert event.get_logs.await_count == 2


def _ranged_logs(events, max_range: int = 5000):
    """get_logs over (block, epoch) pairs; rejects ranges wider than max_range like public RPCs."""

    async def _get_logs(from_block, to_block):
        if to_block - from_block + 1 > max_range:
            raise ValueError("exceed maximum block range: 5000")
        return [_log(epoch, block) for block, epoch in events if from_block <= block <= to_block]

    return _get_logs


class TestBlockGaps:
    @pytest.mark.asyncio
    async def test_recovers_after_long_outage(self):
        """A gap wider than the RPC's log range limit does not wedge the watcher."""
        eth = FakeEth(block_number=100)
        watcher, event = _watcher(eth)
        event.get_logs.side_effect = _ranged_logs([(3000, 1), (6050, 2), (6101, 3)])
        seen = []
        await watcher.poll(seen.append)

        eth.block = 6100
        await watcher.poll(seen.append)
        eth.block = 6105
        await watcher.poll(seen.append)

        assert seen == [2, 3]
        assert watcher.next_block == 6106

    @pytest.mark.asyncio
    async def test_closed_rounds_are_not_dispatched(self, caplog):
        eth = FakeEth(block_number=100)
        watcher, event = _watcher(eth, stale_after_blocks=100)
        event.get_logs.side_effect = _ranged_logs([(150, 10), (400, 11), (550, 12)])
        seen = []
        await watcher.poll(seen.append)

        eth.block = 600
        count = await watcher.poll(seen.append)

        assert count == 1
        assert seen == [12]
        event.get_logs.assert_awaited_once_with(from_block=501, to_block=600)
        assert "Skipping StartRound blocks 101-500" in caplog.text

    @pytest.mark.asyncio
    async def test_catches_up_in_capped_chunks(self):
        eth = FakeEth(block_number=100)
        watcher, event = _watcher(eth, max_block_range=50, stale_after_blocks=1000)
        event.get_logs.side_effect = _ranged_logs([(120, 1), (180, 2), (240, 3)], max_range=50)
        seen = []
        await watcher.poll(seen.append)

        eth.block = 250
        for _ in range(3):
            await watcher.poll(seen.append)

        assert seen == [1, 2, 3]
        ranges = [
            (c.kwargs["from_block"], c.kwargs["to_block"]) for c in event.get_logs.await_args_list
        ]
        assert ranges == [(101, 150), (151, 200), (201, 250)]

    @pytest.mark.asyncio
    async def test_watch_delivers_after_outage(self):
        eth = FakeEth(block_number=100)
        watcher, event = _watcher(eth)
        event.get_logs.side_effect = _ranged_logs([(6090, 21)])
        seen = []

        task = asyncio.create_task(watcher.watch(seen.append))
        await asyncio.sleep(0.005)
        eth.block = 6100
        await asyncio.sleep(0.05)
        watcher.stop()
        await asyncio.wait_for(task, timeout=1)

        assert seen == [21]

    def test_rejects_empty_range(self):
        with pytest.raises(ValueError):
            _watcher(FakeEth(), max_block_range=0)
