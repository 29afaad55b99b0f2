"""TransferService: SOL, USDC, ETH and ERC-20 transfers.

Every operation follows the same order: validate the amount, look up the
network, build the credential reference, resolve the signing identity,
and only then touch the RPC endpoint.  A failure before the last step
never reaches the network.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from wmgr.domain.amount import (
    EVM_NATIVE_DECIMALS,
    GWEI_DECIMALS,
    SOL_DECIMALS,
    to_base_units,
    to_decimal_string,
    validate_amount,
)
from wmgr.domain.credentials import EVM_SOURCES, SOLANA_SOURCES
from wmgr.domain.errors import ConfigurationError
from wmgr.domain.networks import (
    get_cluster,
    get_derivation_profile,
    get_evm_network,
    parse_commitment,
)
from wmgr.infrastructure import evm, solana
from wmgr.services.base import HANDLED_ERRORS, BaseService
from wmgr.services.resolvers import apply_key_defaults
from wmgr.services.result import ServiceResult

if TYPE_CHECKING:
    from eth_account.signers.local import LocalAccount
    from solders.keypair import Keypair

    from wmgr.domain.credentials import KeyOptions
    from wmgr.domain.networks import ClusterProfile, Commitment, EvmNetwork

logger = logging.getLogger(__name__)


class TransferService(BaseService):
    """Sign and submit transfers on Solana and EVM networks."""

    # ── Solana ────────────────────────────────────────────────────────

    def send_sol(
        self,
        options: KeyOptions,
        to: str,
        amount: str,
        *,
        cluster: str | None = None,
        rpc: str | None = None,
        commitment: str | None = None,
        mnemonic_profile: str | None = None,
    ) -> ServiceResult:
        """Transfer native SOL and wait for confirmation."""
        op = "send_sol"
        meta: dict[str, Any] | None = None
        try:
            lamports = to_base_units(validate_amount(amount), SOL_DECIMALS)
            profile, level = self._solana_target(cluster, rpc, commitment)
            meta = _solana_meta(profile, level)
            recipient = solana.parse_pubkey(to, label="recipient")
            signer = self._solana_signer(options, mnemonic_profile)

            client = solana.create_client(profile.rpc_url, level)
            logger.info("Sending %d lamports to %s on %s", lamports, recipient, profile.name)
            signature = solana.transfer_sol(client, signer, recipient, lamports, level)
        except HANDLED_ERRORS as exc:
            return self._failure(op, exc, meta=meta)

        return ServiceResult(
            ok=True,
            op=op,
            data={
                "signature": signature,
                "from": str(signer.pubkey()),
                "to": str(recipient),
                "amount": to_decimal_string(lamports, SOL_DECIMALS),
                "base_units": lamports,
                "symbol": "SOL",
            },
            meta=meta,
        )

    def send_usdc(
        self,
        options: KeyOptions,
        to: str,
        amount: str,
        *,
        cluster: str | None = None,
        rpc: str | None = None,
        commitment: str | None = None,
        mnemonic_profile: str | None = None,
    ) -> ServiceResult:
        """Transfer the cluster's USDC mint with ``transfer_checked``.

        Source and destination associated token accounts are created
        idempotently in the same transaction.
        """
        op = "send_usdc"
        meta: dict[str, Any] | None = None
        try:
            amount_text = validate_amount(amount)
            profile, level = self._solana_target(cluster, rpc, commitment)
            meta = _solana_meta(profile, level)
            recipient = solana.parse_pubkey(to, label="recipient")
            mint = solana.parse_pubkey(profile.usdc_mint, label="USDC mint")
            signer = self._solana_signer(options, mnemonic_profile)

            client = solana.create_client(profile.rpc_url, level)
            decimals = solana.get_mint_decimals(client, mint)
            base_units = to_base_units(amount_text, decimals)
            logger.info(
                "Sending %d USDC base units to %s on %s", base_units, recipient, profile.name
            )
            signature = solana.transfer_spl(
                client, signer, recipient, mint, base_units, decimals, level
            )
        except HANDLED_ERRORS as exc:
            return self._failure(op, exc, meta=meta)

        return ServiceResult(
            ok=True,
            op=op,
            data={
                "signature": signature,
                "from": str(signer.pubkey()),
                "to": str(recipient),
                "amount": to_decimal_string(base_units, decimals),
                "base_units": base_units,
                "symbol": "USDC",
                "mint": str(mint),
                "decimals": decimals,
            },
            meta=meta,
        )

    # ── EVM ───────────────────────────────────────────────────────────

    def send_eth(
        self,
        options: KeyOptions,
        to: str,
        amount: str,
        *,
        network: str | None = None,
        rpc: str | None = None,
        gas_price: str | None = None,
        gas_limit: int | None = None,
    ) -> ServiceResult:
        """Transfer the network's native coin and wait for the receipt."""
        op = "send_eth"
        meta: dict[str, Any] | None = None
        try:
            value = to_base_units(validate_amount(amount), EVM_NATIVE_DECIMALS)
            net = self._evm_target(network, rpc)
            meta = _evm_meta(net)
            price_wei, limit = self._gas(gas_price, gas_limit)
            recipient = evm.to_checksum(to, label="recipient")
            account = self._evm_signer(options)

            w3 = evm.create_web3(net)
            logger.info("Sending %d wei to %s on %s", value, recipient, net.name)
            tx_hash, receipt = evm.transfer_native(
                w3, account, recipient, value, net.chain_id, gas_price=price_wei, gas_limit=limit
            )
        except HANDLED_ERRORS as exc:
            return self._failure(op, exc, meta=meta)

        return ServiceResult(
            ok=True,
            op=op,
            data={
                "tx_hash": tx_hash,
                "from": account.address,
                "to": recipient,
                "amount": to_decimal_string(value, EVM_NATIVE_DECIMALS),
                "base_units": value,
                **_receipt_fields(receipt),
            },
            meta=meta,
        )

    def send_erc20(
        self,
        options: KeyOptions,
        token: str,
        to: str,
        amount: str,
        *,
        decimals: int | None = None,
        network: str | None = None,
        rpc: str | None = None,
        gas_price: str | None = None,
        gas_limit: int | None = None,
    ) -> ServiceResult:
        """Call ``transfer(to, amount)`` on an ERC-20 contract.

        Token decimals come from *decimals* when given, else from the
        contract's ``decimals()``.
        """
        op = "send_erc20"
        meta: dict[str, Any] | None = None
        try:
            amount_text = validate_amount(amount)
            if decimals is not None and decimals < 0:
                raise ConfigurationError("--decimals must be >= 0")
            net = self._evm_target(network, rpc)
            meta = _evm_meta(net)
            price_wei, limit = self._gas(gas_price, gas_limit)
            contract = evm.to_checksum(token, label="token")
            recipient = evm.to_checksum(to, label="recipient")
            account = self._evm_signer(options)

            w3 = evm.create_web3(net)
            token_decimals = (
                decimals if decimals is not None else evm.get_erc20_decimals(w3, contract)
            )
            base_units = to_base_units(amount_text, token_decimals)
            logger.info("Sending %d token units of %s to %s", base_units, contract, recipient)
            tx_hash, receipt = evm.transfer_erc20(
                w3,
                account,
                contract,
                recipient,
                base_units,
                net.chain_id,
                gas_price=price_wei,
                gas_limit=limit,
            )
        except HANDLED_ERRORS as exc:
            return self._failure(op, exc, meta=meta)

        return ServiceResult(
            ok=True,
            op=op,
            data={
                "tx_hash": tx_hash,
                "from": account.address,
                "to": recipient,
                "token": contract,
                "amount": to_decimal_string(base_units, token_decimals),
                "base_units": base_units,
                "decimals": token_decimals,
                **_receipt_fields(receipt),
            },
            meta=meta,
        )

    # ── Helpers ───────────────────────────────────────────────────────

    def _solana_target(
        self,
        cluster: str | None,
        rpc: str | None,
        commitment: str | None,
    ) -> tuple[ClusterProfile, Commitment]:
        cfg = self._settings.solana
        profile = get_cluster(cluster or cfg.cluster, rpc or cfg.rpc)
        return profile, parse_commitment(commitment or cfg.commitment)

    def _evm_target(self, network: str | None, rpc: str | None) -> EvmNetwork:
        cfg = self._settings.evm
        return get_evm_network(network or cfg.network, rpc or cfg.rpc)

    def _solana_signer(self, options: KeyOptions, mnemonic_profile: str | None) -> Keypair:
        default_path = get_derivation_profile(
            mnemonic_profile or self._settings.solana.mnemonic_profile
        ).path
        ref = apply_key_defaults(options, self._settings.svpi).to_credential(
            SOLANA_SOURCES, chain="solana"
        )
        return self.solana_chain(default_path).resolve(ref)

    def _evm_signer(self, options: KeyOptions) -> LocalAccount:
        ref = apply_key_defaults(options, self._settings.svpi).to_credential(
            EVM_SOURCES, chain="evm"
        )
        return self.evm_chain().resolve(ref)

    def _gas(self, gas_price: str | None, gas_limit: int | None) -> tuple[int | None, int | None]:
        """Gas price in gwei text to wei, and a positive gas limit (either optional)."""
        cfg = self._settings.evm
        price_text = gas_price if gas_price is not None else cfg.gas_price
        limit = gas_limit if gas_limit is not None else cfg.gas_limit
        price_wei = (
            to_base_units(validate_amount(price_text), GWEI_DECIMALS)
            if price_text is not None
            else None
        )
        if limit is not None and limit <= 0:
            raise ConfigurationError("--gas-limit must be > 0")
        return price_wei, limit


def _solana_meta(profile: ClusterProfile, commitment: Commitment) -> dict[str, Any]:
    return {"cluster": profile.name, "rpc": profile.rpc_url, "commitment": str(commitment)}


def _evm_meta(network: EvmNetwork) -> dict[str, Any]:
    return {"network": network.name, "chain_id": network.chain_id, "rpc": network.rpc_url}


def _receipt_fields(receipt: Any) -> dict[str, Any]:
    """Block number and status from a web3 receipt (an AttributeDict)."""
    fields: dict[str, Any] = {}
    if receipt is None:
        return fields
    for key, name in (("blockNumber", "block"), ("status", "status")):
        value = receipt.get(key) if hasattr(receipt, "get") else None
        if value is not None:
            fields[name] = value
    return fields
