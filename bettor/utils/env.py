"""
Defaults and environment variable names for the bettor.
"""
from decimal import Decimal

# Prediction contract addresses on BNB Smart Chain
PANCAKESWAP_V2_ADDRESS = "0x18B2A687610328590Bc8F2e5fEdDe3b582A49cdA"
CANDLEGENIE_V3_ADDRESS = "0x995294CdBfBf7784060BD3Bec05CE38a5F94A0C5"

DEFAULT_BSC_RPC = "https://bsc-dataseed.binance.org/"
DEFAULT_BET_AMOUNT = "0.1"

# 281.5 seconds after round start; rounds lock after 300 seconds
DEFAULT_WAITING_TIME_MS = 281500
MIN_WAITING_TIME_MS = 6000
# Two BSC blocks
WAITING_TIME_REDUCTION_MS = 6000

DUES_RECIPIENT = "0x74b8B9b7aa13D26056F4eceBDF06C917d15974C7"
MIN_DUES_AMOUNT_BNB = Decimal("0.01")
# 2% = 1/50
DUES_DIVISOR = 50

CLAIMABLE_EPOCHS_CHECK_COUNT = 5
STRATEGY_RATIO_THRESHOLD = 5

DEFAULT_POLL_INTERVAL_SECONDS = 3.0
# eth_getLogs range limit of public BSC endpoints
MAX_LOG_BLOCK_RANGE = 5000
# About one 5 minute round of 3 s blocks; older StartRound events are closed rounds
STALE_ROUND_BLOCKS = 100
DEFAULT_TX_TIMEOUT_SECONDS = 120

LOG_FILE = "bettor.log"
