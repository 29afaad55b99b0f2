"""Thin adapter over solana-py / solders.

Builds, signs, submits and confirms SOL and SPL transfers, and reads
balances.  Amounts arrive here already converted to integer base units.
"""

from __future__ import annotations

import logging

from solana.exceptions import SolanaRpcException
from solana.rpc.api import Client
from solana.rpc.commitment import Commitment
from solana.rpc.core import (
    RPCException,
    TransactionExpiredBlockheightExceededError,
    UnconfirmedTxError,
)
from solana.rpc.types import TxOpts
from solders.instruction import Instruction
from solders.keypair import Keypair
from solders.pubkey import Pubkey
from solders.system_program import TransferParams, transfer
from solders.transaction import Transaction
from spl.token.constants import TOKEN_PROGRAM_ID
from spl.token.instructions import (
    TransferCheckedParams,
    create_idempotent_associated_token_account,
    get_associated_token_address,
    transfer_checked,
)

from wmgr.domain.errors import InvalidAddress

NETWORK_ERRORS: tuple[type[Exception], ...] = (
    SolanaRpcException,
    RPCException,
    UnconfirmedTxError,
    TransactionExpiredBlockheightExceededError,
    OSError,
)

logger = logging.getLogger(__name__)


def create_client(rpc_url: str, commitment: str = "confirmed") -> Client:
    """Open an RPC client with a default commitment level."""
    return Client(rpc_url, commitment=Commitment(commitment))


def parse_pubkey(address: str, *, label: str = "address") -> Pubkey:
    """Parse a base58 public key, raising InvalidAddress on bad input."""
    try:
        return Pubkey.from_string(address.strip())
    except ValueError as exc:
        raise InvalidAddress(f"Invalid {label}: {address}") from exc


def send_and_confirm(
    client: Client,
    instructions: list[Instruction],
    signer: Keypair,
    commitment: str,
) -> str:
    """Sign *instructions* with *signer*, submit, and wait for *commitment*."""
    latest = client.get_latest_blockhash().value
    tx = Transaction.new_signed_with_payer(
        instructions,
        signer.pubkey(),
        [signer],
        latest.blockhash,
    )
    level = Commitment(commitment)
    sig = client.send_raw_transaction(
        bytes(tx),
        opts=TxOpts(skip_preflight=False, preflight_commitment=level),
    ).value
    logger.debug("Submitted transaction %s; awaiting %s", sig, commitment)
    client.confirm_transaction(
        sig,
        level,
        last_valid_block_height=latest.last_valid_block_height,
    )
    return str(sig)


def transfer_sol(
    client: Client,
    signer: Keypair,
    to: Pubkey,
    lamports: int,
    commitment: str,
) -> str:
    """System-program transfer of *lamports* from *signer* to *to*."""
    ix = transfer(TransferParams(from_pubkey=signer.pubkey(), to_pubkey=to, lamports=lamports))
    return send_and_confirm(client, [ix], signer, commitment)


def get_mint_decimals(client: Client, mint: Pubkey) -> int:
    return client.get_token_supply(mint).value.decimals


def transfer_spl(
    client: Client,
    signer: Keypair,
    to: Pubkey,
    mint: Pubkey,
    amount: int,
    decimals: int,
    commitment: str,
) -> str:
    """``transfer_checked`` between associated token accounts.

    Both ATAs are created idempotently first, so a first-time recipient
    needs no separate setup transaction.
    """
    owner = signer.pubkey()
    source_ata = get_associated_token_address(owner, mint)
    dest_ata = get_associated_token_address(to, mint)
    instructions = [
        create_idempotent_associated_token_account(owner, owner, mint),
        create_idempotent_associated_token_account(owner, to, mint),
        transfer_checked(
            TransferCheckedParams(
                program_id=TOKEN_PROGRAM_ID,
                source=source_ata,
                mint=mint,
                dest=dest_ata,
                owner=owner,
                amount=amount,
                decimals=decimals,
            )
        ),
    ]
    return send_and_confirm(client, instructions, signer, commitment)


def get_sol_balance(client: Client, owner: Pubkey) -> int:
    """Balance in lamports."""
    return client.get_balance(owner).value


def get_token_balance(
    client: Client,
    owner: Pubkey,
    mint: Pubkey,
    default_decimals: int,
) -> tuple[int, int]:
    """Return ``(raw_amount, decimals)`` of *owner*'s ATA for *mint*.

    A mint unknown to the RPC (e.g. a local validator) falls back to
    *default_decimals*; a missing ATA is a zero balance.
    """
    try:
        decimals = get_mint_decimals(client, mint)
    except (RPCException, SolanaRpcException):
        logger.debug("Mint %s not found; assuming %d decimals", mint, default_decimals)
        decimals = default_decimals

    ata = get_associated_token_address(owner, mint)
    try:
        raw = int(client.get_token_account_balance(ata).value.amount)
    except (RPCException, SolanaRpcException):
        logger.debug("No token account %s; treating balance as zero", ata)
        raw = 0
    return raw, decimals
