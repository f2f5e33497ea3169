"""
Command line entry for the prediction bettor.

The platform is chosen by the entry script (pancakeswap-bot / candlegenie-bot);
`--with` bets with the majority instead of against it.
"""
import argparse
import asyncio
import logging
import sys
from typing import List, Optional

from protocol.models import Strategy
from bettor.adapters.platforms import PLATFORMS, PlatformSpec
from bettor.bot import PredictionBot
from bettor.config import BotConfig, load_config
from bettor.exceptions import ConfigError
from bettor.utils.console import configure_logging
from bettor.utils.env import LOG_FILE

logger = logging.getLogger(__name__)

ENTRY_SCRIPTS = {
    "pancakeswap": "pancakeswap-bot",
    "candlegenie": "candlegenie-bot",
}


def parse_args(platform: PlatformSpec, argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog=ENTRY_SCRIPTS.get(platform.key),
        description=f"{platform.name} Predictions Bot",
    )
    parser.add_argument(
        "--with",
        dest="with_majority",
        action="store_true",
        help="Bet with the majority (default: against it)",
    )
    parser.add_argument(
        "--env-file",
        type=str,
        default=None,
        help="Path to a .env file (default: search from the working directory)",
    )
    parser.add_argument(
        "--log-file",
        type=str,
        default=LOG_FILE,
        help=f"Log file (default: {LOG_FILE}); empty string disables it",
    )
    parser.add_argument("--debug", action="store_true", help="Verbose logging")
    return parser.parse_args(argv)


def parse_strategy(args: argparse.Namespace) -> Strategy:
    """Select the strategy and log how to switch to the other one."""
    strategy = Strategy.WITH if args.with_majority else Strategy.AGAINST
    logger.info(f"Strategy: {strategy.value}")

    commands = " or ".join(ENTRY_SCRIPTS.values())
    if strategy == Strategy.AGAINST:
        logger.info(
            "You can use this bot with or against the majority. "
            "Start the bot using the --with flag to bet with the majority. "
            f"You may use the bot on Candle Genie or PancakeSwap: {commands} (add --with)"
        )
    else:
        logger.info(
            "You can use this bot with or against the majority. "
            "Start the bot without the --with flag to bet against the majority. "
            f"You may use the bot on Candle Genie or PancakeSwap: {commands}"
        )
    return strategy


def get_config(args: argparse.Namespace) -> BotConfig:
    """
    Load and validate configuration. Exit with code 1 if any check fails.
    """
    try:
        return load_config(dotenv_path=args.env_file)
    except ConfigError as e:
        logger.error("Config validation failed:")
        for err in e.errors:
            logger.error(f"  - {err}")
        logger.error("Please set required environment variables and restart.")
        sys.exit(1)


async def run_bot(bot: PredictionBot) -> None:
    if not await bot.chain.is_connected():
        raise ConnectionError(f"Failed to connect to RPC {bot.config.rpc_url}")
    try:
        await bot.start()
    finally:
        await bot.stop()


def main(platform_key: str, argv: Optional[List[str]] = None) -> None:
    """Entry point shared by the per-platform scripts."""
    platform = PLATFORMS[platform_key]
    args = parse_args(platform, argv)
    configure_logging(
        level=logging.DEBUG if args.debug else logging.INFO,
        log_file=args.log_file or None,
    )

    config = get_config(args)
    strategy = parse_strategy(args)
    try:
        bot = PredictionBot(config, platform, strategy)
        asyncio.run(run_bot(bot))
    except KeyboardInterrupt:
        logger.info("Keyboard interrupt received. Shutting down...")
    except Exception as e:
        logger.error(f"Failed to start bot: {e}", exc_info=True)
        sys.exit(1)
