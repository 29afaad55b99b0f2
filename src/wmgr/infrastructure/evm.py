"""Thin adapter over web3.py for native-coin and ERC-20 transfers."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from web3 import Web3
from web3.exceptions import Web3Exception

from wmgr.domain.errors import InvalidAddress

if TYPE_CHECKING:
    from eth_account.signers.local import LocalAccount

    from wmgr.domain.networks import EvmNetwork

# requests.RequestException (raised by HTTPProvider) subclasses OSError.
NETWORK_ERRORS: tuple[type[Exception], ...] = (Web3Exception, OSError)

ERC20_ABI: list[dict[str, Any]] = [
    {
        "constant": True,
        "inputs": [],
        "name": "decimals",
        "outputs": [{"name": "", "type": "uint8"}],
        "type": "function",
    },
    {
        "constant": False,
        "inputs": [{"name": "_to", "type": "address"}, {"name": "_value", "type": "uint256"}],
        "name": "transfer",
        "outputs": [{"name": "", "type": "bool"}],
        "type": "function",
    },
]

logger = logging.getLogger(__name__)


def create_web3(network: EvmNetwork) -> Web3:
    return Web3(Web3.HTTPProvider(network.rpc_url))


def to_checksum(address: str, *, label: str = "address") -> str:
    """Checksum an EVM address, raising InvalidAddress on bad input."""
    try:
        return Web3.to_checksum_address(address.strip())
    except (ValueError, TypeError) as exc:
        raise InvalidAddress(f"Invalid {label}: {address}") from exc


def _base_tx(
    w3: Web3,
    account: LocalAccount,
    chain_id: int,
    gas_price: int | None,
    gas_limit: int | None,
) -> dict[str, Any]:
    tx: dict[str, Any] = {
        "from": account.address,
        "nonce": w3.eth.get_transaction_count(account.address, "pending"),
        "chainId": chain_id,
    }
    if gas_price is not None:
        tx["gasPrice"] = gas_price
    if gas_limit is not None:
        tx["gas"] = gas_limit
    return tx


def _sign_and_send(w3: Web3, account: LocalAccount, tx: dict[str, Any]) -> tuple[str, Any]:
    signed = account.sign_transaction(tx)
    tx_hash = w3.eth.send_raw_transaction(signed.raw_transaction)
    hex_hash = Web3.to_hex(tx_hash)
    logger.debug("Submitted transaction %s; awaiting receipt", hex_hash)
    receipt = w3.eth.wait_for_transaction_receipt(tx_hash)
    return hex_hash, receipt


def transfer_native(
    w3: Web3,
    account: LocalAccount,
    to: str,
    value: int,
    chain_id: int,
    *,
    gas_price: int | None = None,
    gas_limit: int | None = None,
) -> tuple[str, Any]:
    """Send *value* wei of the network's native coin. Returns ``(hash, receipt)``."""
    tx = _base_tx(w3, account, chain_id, gas_price, gas_limit)
    tx["to"] = to
    tx["value"] = value
    if "gasPrice" not in tx:
        tx["gasPrice"] = w3.eth.gas_price
    if "gas" not in tx:
        tx["gas"] = w3.eth.estimate_gas(tx)
    return _sign_and_send(w3, account, tx)


def get_erc20_decimals(w3: Web3, token: str) -> int:
    contract = w3.eth.contract(address=token, abi=ERC20_ABI)
    return int(contract.functions.decimals().call())


def transfer_erc20(
    w3: Web3,
    account: LocalAccount,
    token: str,
    to: str,
    amount: int,
    chain_id: int,
    *,
    gas_price: int | None = None,
    gas_limit: int | None = None,
) -> tuple[str, Any]:
    """Call ``transfer(to, amount)`` on *token*. Returns ``(hash, receipt)``."""
    contract = w3.eth.contract(address=token, abi=ERC20_ABI)
    tx = contract.functions.transfer(to, amount).build_transaction(
        _base_tx(w3, account, chain_id, gas_price, gas_limit)
    )
    return _sign_and_send(w3, account, tx)


def get_native_balance(w3: Web3, address: str) -> int:
    """Balance in wei."""
    return int(w3.eth.get_balance(address))
