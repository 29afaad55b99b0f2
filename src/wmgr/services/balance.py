"""BalanceService: read-only SOL/USDC and native EVM balances."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from wmgr.domain.amount import EVM_NATIVE_DECIMALS, SOL_DECIMALS, to_decimal_string
from wmgr.domain.credentials import EVM_SOURCES, SOLANA_SOURCES
from wmgr.domain.networks import (
    USDC_DECIMALS,
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
    from wmgr.domain.credentials import KeyOptions

logger = logging.getLogger(__name__)


class BalanceService(BaseService):
    """Query balances for an explicit address or the resolved wallet."""

    def solana_balance(
        self,
        options: KeyOptions,
        address: str | None = None,
        *,
        cluster: str | None = None,
        rpc: str | None = None,
        commitment: str | None = None,
        mnemonic_profile: str | None = None,
    ) -> ServiceResult:
        """SOL and USDC balances.

        A USDC mint unknown to the endpoint counts as 6 decimals and a
        missing token account as zero.
        """
        op = "balance"
        meta: dict[str, Any] | None = None
        cfg = self._settings.solana
        try:
            profile = get_cluster(cluster or cfg.cluster, rpc or cfg.rpc)
            level = parse_commitment(commitment or cfg.commitment)
            meta = {"cluster": profile.name, "rpc": profile.rpc_url, "commitment": str(level)}
            if address:
                owner = solana.parse_pubkey(address)
            else:
                default_path = get_derivation_profile(
                    mnemonic_profile or cfg.mnemonic_profile
                ).path
                ref = apply_key_defaults(options, self._settings.svpi).to_credential(
                    SOLANA_SOURCES, chain="solana"
                )
                owner = self.solana_chain(default_path).resolve(ref).pubkey()
            mint = solana.parse_pubkey(profile.usdc_mint, label="USDC mint")

            client = solana.create_client(profile.rpc_url, level)
            lamports = solana.get_sol_balance(client, owner)
            usdc_raw, usdc_decimals = solana.get_token_balance(client, owner, mint, USDC_DECIMALS)
        except HANDLED_ERRORS as exc:
            return self._failure(op, exc, meta=meta)

        logger.debug("Balance of %s: %d lamports, %d USDC units", owner, lamports, usdc_raw)
        return ServiceResult(
            ok=True,
            op=op,
            data={
                "address": str(owner),
                "sol": to_decimal_string(lamports, SOL_DECIMALS),
                "lamports": lamports,
                "usdc": to_decimal_string(usdc_raw, usdc_decimals),
                "usdc_base_units": usdc_raw,
            },
            meta=meta,
        )

    def evm_balance(
        self,
        options: KeyOptions,
        address: str | None = None,
        *,
        network: str | None = None,
        rpc: str | None = None,
    ) -> ServiceResult:
        """Native coin balance at 18 decimals."""
        op = "balance"
        meta: dict[str, Any] | None = None
        cfg = self._settings.evm
        try:
            net = get_evm_network(network or cfg.network, rpc or cfg.rpc)
            meta = {"network": net.name, "chain_id": net.chain_id, "rpc": net.rpc_url}
            if address:
                owner = evm.to_checksum(address)
            else:
                ref = apply_key_defaults(options, self._settings.svpi).to_credential(
                    EVM_SOURCES, chain="evm"
                )
                owner = self.evm_chain().resolve(ref).address

            w3 = evm.create_web3(net)
            wei = evm.get_native_balance(w3, owner)
        except HANDLED_ERRORS as exc:
            return self._failure(op, exc, meta=meta)

        return ServiceResult(
            ok=True,
            op=op,
            data={
                "address": owner,
                "balance": to_decimal_string(wei, EVM_NATIVE_DECIMALS),
                "wei": wei,
            },
            meta=meta,
        )
