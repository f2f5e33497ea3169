"""
Prediction bot: wires configuration, chain client, platform adapter and the
round lifecycle controller, and runs one lifecycle task per StartRound.
"""
import asyncio
import logging
from typing import Dict, Optional

from protocol.models import Strategy
from bettor.adapters.platforms import PlatformSpec
from bettor.adapters.prediction import PredictionContractAdapter
from bettor.chain import ChainClient
from bettor.config import BotConfig
from bettor.orchestrator.lifecycle import RoundLifecycleController
from bettor.orchestrator.round_watcher import StartRoundWatcher
from bettor.orchestrator.waiting_time import WaitingTime
from bettor.services.claims import ClaimWindowScanner
from bettor.services.dues import DuesCalculator
from bettor.utils.console import SUCCESS, clear_console
from bettor.utils.web3 import AsyncWeb3Helper

logger = logging.getLogger(__name__)


class PredictionBot:
    """
    Bets on every round of one prediction platform until stopped.

    The chain client, adapter and watcher are built from the config unless
    given explicitly.
    """

    def __init__(
        self,
        config: BotConfig,
        platform: PlatformSpec,
        strategy: Strategy = Strategy.AGAINST,
        *,
        chain: Optional[ChainClient] = None,
        adapter=None,
        watcher: Optional[StartRoundWatcher] = None,
    ):
        self.config = config
        self.platform = platform
        self.strategy = strategy

        if chain is None or adapter is None or watcher is None:
            web3_helper = AsyncWeb3Helper.make_web3(config.rpc_url)
            contract = web3_helper.make_contract_by_name(
                name=platform.abi_name,
                addr=getattr(config, f"{platform.key}_address"),
            )
            chain = chain or ChainClient(
                web3_helper.web3, config.private_key, tx_timeout=config.tx_timeout_seconds
            )
            adapter = adapter or PredictionContractAdapter(platform, contract, chain)
            watcher = watcher or StartRoundWatcher(
                web3_helper.web3,
                contract,
                event_name=platform.start_round_event,
                poll_interval=config.poll_interval_seconds,
            )

        self.chain = chain
        self.adapter = adapter
        self.watcher = watcher
        self.waiting_time = WaitingTime(
            initial_ms=config.waiting_time_ms,
            floor_ms=config.min_waiting_time_ms,
        )
        self.controller = RoundLifecycleController(
            adapter=adapter,
            chain=chain,
            strategy=strategy,
            stake=config.bet_amount_wei,
            waiting_time=self.waiting_time,
            scanner=ClaimWindowScanner(adapter, window_size=config.claim_window),
            dues=DuesCalculator(minimum_fee=config.min_dues_amount_wei),
            dues_recipient=config.dues_recipient,
            ratio_threshold=config.ratio_threshold,
        )

        # Track running rounds: epoch -> task
        self.running_rounds: Dict[int, asyncio.Task] = {}

    def on_start_round(self, epoch: int) -> asyncio.Task:
        """Start an independent lifecycle task for a signalled round."""
        task = asyncio.create_task(self.controller.run_round(epoch), name=f"round_{epoch}")
        self.running_rounds[epoch] = task

        def _forget(done: asyncio.Task, epoch: int = epoch) -> None:
            if self.running_rounds.get(epoch) is done:
                del self.running_rounds[epoch]

        task.add_done_callback(_forget)
        return task

    async def start(self) -> None:
        """Run until stop() is called."""
        clear_console()
        logger.log(SUCCESS, f"{self.platform.name} Predictions Bot")
        logger.info(
            f"Starting. Amount to Bet: {self.config.bet_amount} {self.platform.currency}. "
            f"Strategy: {self.strategy.value}. Account: {self.chain.address}"
        )
        logger.info("Waiting for the next round. It may take up to 5 minutes, please wait.")
        await self.watcher.watch(self.on_start_round)

    async def stop(self) -> None:
        """Stop watching and cancel in-flight rounds."""
        self.watcher.stop()
        tasks = list(self.running_rounds.values())
        logger.info(f"Cancelling {len(tasks)} running round(s)...")
        for task in tasks:
            task.cancel()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)
        self.running_rounds.clear()
