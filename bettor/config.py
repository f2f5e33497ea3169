"""
Configuration for the bettor.

Settings come from environment variables (a `.env` file is loaded first)
and are validated into a BotConfig. Any problem is reported through a
ConfigError that lists every failing setting.
"""
import os
import re
from decimal import Decimal, InvalidOperation
from typing import Dict, Mapping, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field, ValidationError, field_validator, model_validator
from web3 import Web3

from bettor.exceptions import ConfigError
from bettor.utils.env import (
    CANDLEGENIE_V3_ADDRESS,
    CLAIMABLE_EPOCHS_CHECK_COUNT,
    DEFAULT_BET_AMOUNT,
    DEFAULT_BSC_RPC,
    DEFAULT_POLL_INTERVAL_SECONDS,
    DEFAULT_TX_TIMEOUT_SECONDS,
    DEFAULT_WAITING_TIME_MS,
    DUES_RECIPIENT,
    MIN_DUES_AMOUNT_BNB,
    MIN_WAITING_TIME_MS,
    PANCAKESWAP_V2_ADDRESS,
    STRATEGY_RATIO_THRESHOLD,
)

PRIVATE_KEY_RE = re.compile(r"^0x[0-9a-fA-F]{64}$")

# Environment variable -> BotConfig field
ENV_FIELDS: Dict[str, str] = {
    "PRIVATE_KEY": "private_key",
    "BET_AMOUNT": "bet_amount",
    "BSC_RPC": "rpc_url",
    "WAITING_TIME_MS": "waiting_time_ms",
    "MIN_WAITING_TIME_MS": "min_waiting_time_ms",
    "CLAIM_WINDOW": "claim_window",
    "RATIO_THRESHOLD": "ratio_threshold",
    "DUES_RECIPIENT": "dues_recipient",
    "MIN_DUES_AMOUNT": "min_dues_amount",
    "POLL_INTERVAL_SECONDS": "poll_interval_seconds",
    "TX_TIMEOUT_SECONDS": "tx_timeout_seconds",
    "PANCAKESWAP_ADDRESS": "pancakeswap_address",
    "CANDLEGENIE_ADDRESS": "candlegenie_address",
}


class BotConfig(BaseModel):
    """Validated bettor settings."""

    private_key: str = Field(..., repr=False, description="Signing key, 0x + 64 hex")
    bet_amount: str = Field(DEFAULT_BET_AMOUNT, description="Stake per round in BNB")
    rpc_url: str = Field(DEFAULT_BSC_RPC, description="BSC JSON-RPC endpoint")
    waiting_time_ms: int = Field(DEFAULT_WAITING_TIME_MS, description="Delay after round start")
    min_waiting_time_ms: int = Field(MIN_WAITING_TIME_MS, gt=0)
    claim_window: int = Field(CLAIMABLE_EPOCHS_CHECK_COUNT, ge=1)
    ratio_threshold: int = Field(STRATEGY_RATIO_THRESHOLD, ge=1)
    dues_recipient: str = Field(DUES_RECIPIENT)
    min_dues_amount: str = Field(str(MIN_DUES_AMOUNT_BNB), description="Dues floor in BNB")
    poll_interval_seconds: float = Field(DEFAULT_POLL_INTERVAL_SECONDS, gt=0)
    tx_timeout_seconds: int = Field(DEFAULT_TX_TIMEOUT_SECONDS, gt=0)
    pancakeswap_address: str = Field(PANCAKESWAP_V2_ADDRESS)
    candlegenie_address: str = Field(CANDLEGENIE_V3_ADDRESS)

    @field_validator("private_key")
    @classmethod
    def _check_private_key(cls, value: str) -> str:
        if not PRIVATE_KEY_RE.match(value):
            raise ValueError("PRIVATE_KEY must be a valid 64-character hex string starting with 0x")
        return value

    @field_validator("bet_amount", "min_dues_amount")
    @classmethod
    def _check_positive_decimal(cls, value: str) -> str:
        try:
            amount = Decimal(value)
        except InvalidOperation:
            raise ValueError(f"{value!r} is not a number")
        if not amount.is_finite() or amount <= 0:
            raise ValueError("must be a positive number")
        return value

    @field_validator("rpc_url")
    @classmethod
    def _check_rpc_url(cls, value: str) -> str:
        if not value.startswith(("http://", "https://")):
            raise ValueError("BSC_RPC must be a valid HTTP/HTTPS URL")
        return value

    @field_validator("dues_recipient", "pancakeswap_address", "candlegenie_address")
    @classmethod
    def _check_address(cls, value: str) -> str:
        if not Web3.is_address(value):
            raise ValueError(f"{value!r} is not an address")
        return Web3.to_checksum_address(value)

    @model_validator(mode="after")
    def _check_waiting_time(self) -> "BotConfig":
        if self.waiting_time_ms < self.min_waiting_time_ms:
            raise ValueError(
                f"WAITING_TIME_MS ({self.waiting_time_ms}) must not be below "
                f"MIN_WAITING_TIME_MS ({self.min_waiting_time_ms})"
            )
        return self

    @property
    def bet_amount_wei(self) -> int:
        return Web3.to_wei(Decimal(self.bet_amount), "ether")

    @property
    def min_dues_amount_wei(self) -> int:
        return Web3.to_wei(Decimal(self.min_dues_amount), "ether")


def _is_set(value) -> bool:
    """Return True if value is set and usable (not None, 'None', or empty string)."""
    if value is None:
        return False
    s = str(value).strip()
    return s not in ("", "None", "none")


def load_config(
    environ: Optional[Mapping[str, str]] = None,
    dotenv_path: Optional[str] = None,
) -> BotConfig:
    """
    Build a BotConfig from environment variables.

    Args:
        environ: Mapping to read instead of os.environ (no .env loading then)
        dotenv_path: Explicit .env file; by default python-dotenv searches for one

    Raises:
        ConfigError: Listing every missing or invalid setting
    """
    if environ is None:
        load_dotenv(dotenv_path)
        environ = os.environ

    values = {
        field: environ[name].strip()
        for name, field in ENV_FIELDS.items()
        if _is_set(environ.get(name))
    }
    try:
        return BotConfig(**values)
    except ValidationError as e:
        field_to_env = {field: name for name, field in ENV_FIELDS.items()}
        errors = []
        for err in e.errors():
            loc = err.get("loc") or ()
            name = field_to_env.get(loc[0], loc[0]) if loc else "config"
            if err.get("type") == "missing":
                errors.append(f"{name} is required. Please set it in your .env file.")
            else:
                errors.append(f"{name}: {err['msg']}")
        raise ConfigError(errors) from e
