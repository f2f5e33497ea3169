import json
import logging
from pathlib import Path
from typing import Dict, Any, List, Optional

from web3 import AsyncHTTPProvider, AsyncWeb3, Web3
from web3.contract import AsyncContract
from web3.middleware import ExtraDataToPOAMiddleware

logger = logging.getLogger(__name__)

DEFAULT_ABI_PATH = Path(__file__).parent / "abis"

# Reuse one Web3 instance per RPC endpoint to avoid 429 (too many requests) on public RPCs
_web3_cache: Dict[str, "AsyncWeb3Helper"] = {}


class AsyncWeb3Helper:
    """One AsyncWeb3 connection plus the prediction contracts built on it."""

    def __init__(self) -> None:
        self.web3: Optional[AsyncWeb3] = None

    @classmethod
    def make_web3(cls, rpc_url: str) -> "AsyncWeb3Helper":
        """Return the cached helper for rpc_url, creating it on first use."""
        if not rpc_url.startswith(("http://", "https://")):
            raise ValueError(f"Invalid RPC url {rpc_url}")
        if rpc_url in _web3_cache:
            return _web3_cache[rpc_url]
        instance = AsyncWeb3Helper()
        instance.web3 = AsyncWeb3(AsyncHTTPProvider(rpc_url))
        # BSC is a POA chain; block extraData is longer than the 32 bytes web3 expects
        instance.web3.middleware_onion.inject(ExtraDataToPOAMiddleware, layer=0)
        _web3_cache[rpc_url] = instance
        logger.debug("Created cached AsyncWeb3Helper for rpc_url=%s", rpc_url)
        return instance

    def load_abi(self, path: Path) -> List[Dict[str, Any]]:
        """Load an ABI file"""
        if not path.is_file():
            raise ValueError(f"Invalid ABI file path {path}")

        with open(path, "r") as f:
            abi_data = json.load(f)
            if isinstance(abi_data, dict):
                return abi_data.get("abi", abi_data)
            return abi_data

    def make_contract(self, abi_path: Path, addr: str) -> AsyncContract:
        """Make a contract object"""
        if self.web3 is None:
            raise ValueError("Web3 not initialized")
        abi = self.load_abi(abi_path)
        contract = self.web3.eth.contract(address=Web3.to_checksum_address(addr), abi=abi)
        return contract

    def make_contract_by_name(self, name: str, addr: str) -> AsyncContract:
        """Make a contract from a bundled ABI (bettor/utils/abis/<name>.json)"""
        abi_path = DEFAULT_ABI_PATH / f"{name}.json"
        contract = self.make_contract(abi_path, addr)
        return contract


def output_names(abi: List[Dict[str, Any]], fn_name: str) -> List[str]:
    """Return the output names of a view function, in declaration order."""
    for entry in abi:
        if entry.get("type") == "function" and entry.get("name") == fn_name:
            return [out.get("name", "") for out in entry.get("outputs", [])]
    raise ValueError(f"Function {fn_name} not found in ABI")


def decode_outputs(abi: List[Dict[str, Any]], fn_name: str, values) -> Dict[str, Any]:
    """
    Map a tuple returned by a contract call to its ABI output names.

    Single-output calls that return a bare value are wrapped first.
    """
    names = output_names(abi, fn_name)
    if not isinstance(values, (list, tuple)):
        values = (values,)
    if len(names) != len(values):
        raise ValueError(
            f"{fn_name} returned {len(values)} values, ABI declares {len(names)}"
        )
    return dict(zip(names, values))
