"""Tests for the ``wmgr send`` commands (network adapters faked)."""

from __future__ import annotations

import json
import subprocess
from pathlib import Path
from typing import Any

import pytest
from click.testing import CliRunner
from solders.keypair import Keypair

from wmgr.cli import cli
from wmgr.infrastructure import evm, solana, svpi

PHRASE = "test test test test test test test test test test test junk"
EVM_KEY = "0xac0974bec39a17e36ba4a6b4d238ff944bacb478cbed5efcae784d7bf4f2ff80"
EVM_FROM = "0xf39Fd6e51aad88F6F4ce6aB8827279cffFb92266"
EVM_TO = "0x70997970C51812dc3A010C7d01b50e0d17dc79C8"
TOKEN = "0xA0b86991c6218b36c1d19D4a2e9Eb0cE3606eB48"


@pytest.fixture(autouse=True)
def fake_network(monkeypatch: pytest.MonkeyPatch) -> list[str]:
    """Replace every network-touching adapter; returns the names called."""
    called: list[str] = []

    def fake(name: str, result: Any) -> Any:
        def _fn(*args: Any, **kwargs: Any) -> Any:
            called.append(name)
            return result

        return _fn

    monkeypatch.setattr(solana, "create_client", fake("create_client", "client"))
    monkeypatch.setattr(solana, "transfer_sol", fake("transfer_sol", "SIGSOL"))
    monkeypatch.setattr(solana, "get_mint_decimals", fake("get_mint_decimals", 6))
    monkeypatch.setattr(solana, "transfer_spl", fake("transfer_spl", "SIGUSDC"))
    monkeypatch.setattr(evm, "create_web3", fake("create_web3", "w3"))
    monkeypatch.setattr(
        evm, "transfer_native", fake("transfer_native", ("0xethhash", {"status": 1}))
    )
    monkeypatch.setattr(evm, "get_erc20_decimals", fake("get_erc20_decimals", 18))
    monkeypatch.setattr(
        evm, "transfer_erc20", fake("transfer_erc20", ("0xtokenhash", {"status": 1}))
    )
    return called


@pytest.fixture
def fake_svpi(monkeypatch: pytest.MonkeyPatch) -> list[list[str]]:
    """svpi subprocess that returns PHRASE; records argv."""
    calls: list[list[str]] = []

    def run(argv: list[str], **kwargs: Any) -> subprocess.CompletedProcess[str]:
        calls.append(argv)
        body = {"schema": "svpi.response.v1", "ok": True, "result": {"data": PHRASE}}
        return subprocess.CompletedProcess(argv, 0, json.dumps(body), "")

    monkeypatch.setattr(svpi.subprocess, "run", run)
    return calls


@pytest.fixture
def recipient() -> str:
    return str(Keypair().pubkey())


class TestSendSol:
    def test_success(self, cli_runner: CliRunner, keyfile: Path, recipient: str) -> None:
        result = cli_runner.invoke(
            cli,
            ["send", "sol", recipient, "0.5", "--keyfile", str(keyfile), "--cluster", "devnet"],
        )
        assert result.exit_code == 0, result.output
        assert "OK  send_sol" in result.output
        assert "SIGSOL" in result.output

    def test_json(
        self, cli_runner: CliRunner, keyfile: Path, keypair: Keypair, recipient: str
    ) -> None:
        result = cli_runner.invoke(
            cli, ["--json", "send", "sol", recipient, "1.25", "--keyfile", str(keyfile)]
        )
        assert result.exit_code == 0, result.output
        data = json.loads(result.stdout)
        assert data["ok"] is True
        assert data["data"]["base_units"] == 1_250_000_000
        assert data["data"]["from"] == str(keypair.pubkey())
        assert data["meta"]["cluster"] == "mainnet-beta"

    def test_quiet_prints_signature_only(
        self, cli_runner: CliRunner, keyfile: Path, recipient: str
    ) -> None:
        result = cli_runner.invoke(
            cli, ["-q", "send", "sol", recipient, "0.1", "--keyfile", str(keyfile)]
        )
        assert result.exit_code == 0
        assert result.stdout.strip() == "SIGSOL"

    def test_no_source(self, cli_runner: CliRunner, recipient: str) -> None:
        result = cli_runner.invoke(cli, ["send", "sol", recipient, "1"])
        assert result.exit_code == 1
        assert "Provide one of" in result.stderr
        assert result.stdout == ""

    def test_two_sources(
        self, cli_runner: CliRunner, keyfile: Path, recipient: str, fake_network: list[str]
    ) -> None:
        result = cli_runner.invoke(
            cli, ["send", "sol", recipient, "1", "--keyfile", str(keyfile), "--seed", PHRASE]
        )
        assert result.exit_code == 1
        assert "ambiguous_credential_source" in result.stderr
        assert fake_network == []

    @pytest.mark.parametrize("amount", ["-1", "1e3", "abc", "1,5", "+2"])
    def test_bad_amount_never_touches_network(
        self,
        cli_runner: CliRunner,
        keyfile: Path,
        recipient: str,
        fake_network: list[str],
        amount: str,
    ) -> None:
        result = cli_runner.invoke(
            cli, ["--json", "send", "sol", recipient, amount, "--keyfile", str(keyfile)]
        )
        assert result.exit_code == 1
        assert fake_network == []

    def test_unknown_cluster(self, cli_runner: CliRunner, keyfile: Path, recipient: str) -> None:
        result = cli_runner.invoke(
            cli, ["send", "sol", recipient, "1", "--keyfile", str(keyfile), "--cluster", "moon"]
        )
        assert result.exit_code == 1
        assert "unknown_network" in result.stderr

    def test_seed_with_profile(self, cli_runner: CliRunner, recipient: str) -> None:
        result = cli_runner.invoke(
            cli, ["--json", "send", "sol", recipient, "1", "--seed", PHRASE, "--mnemo", "phantom"]
        )
        assert result.exit_code == 0, result.output

    def test_unknown_profile(self, cli_runner: CliRunner, recipient: str) -> None:
        result = cli_runner.invoke(
            cli, ["send", "sol", recipient, "1", "--seed", PHRASE, "--mnemo", "ledger-ish"]
        )
        assert result.exit_code == 1
        assert "unknown_derivation_profile" in result.stderr


class TestSvpiPrompts:
    def test_password_prompt_on_stderr(
        self, cli_runner: CliRunner, recipient: str, fake_svpi: list[list[str]]
    ) -> None:
        result = cli_runner.invoke(
            cli,
            ["-q", "send", "sol", recipient, "1", "--svpi", "--svpi-name", "main"],
            input="pw\n",
        )
        assert result.exit_code == 0, result.output
        assert "SVPI password:" in result.stderr
        assert result.stdout.strip() == "SIGSOL"
        assert fake_svpi[0][-1] == "--password=pw"

    def test_name_and_password_prompted(
        self, cli_runner: CliRunner, recipient: str, fake_svpi: list[list[str]]
    ) -> None:
        result = cli_runner.invoke(
            cli, ["send", "sol", recipient, "1", "--svpi"], input="main\npw\n"
        )
        assert result.exit_code == 0, result.output
        assert "get" in fake_svpi[0]
        assert "main" in fake_svpi[0]

    def test_no_interact_requires_password(
        self, cli_runner: CliRunner, recipient: str, fake_svpi: list[list[str]]
    ) -> None:
        result = cli_runner.invoke(
            cli, ["--no-interact", "send", "sol", recipient, "1", "--svpi", "--svpi-name", "main"]
        )
        assert result.exit_code == 1
        assert "password is required" in result.stderr
        assert fake_svpi == []

    def test_no_interact_from_env(
        self,
        cli_runner: CliRunner,
        recipient: str,
        fake_svpi: list[list[str]],
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        monkeypatch.setenv("WMGR_NO_INTERACT", "true")
        result = cli_runner.invoke(
            cli, ["send", "sol", recipient, "1", "--svpi", "--svpi-name", "main"], input="pw\n"
        )
        assert result.exit_code == 1
        assert "password is required" in result.stderr

    def test_password_flag_skips_prompt(
        self, cli_runner: CliRunner, fake_svpi: list[list[str]]
    ) -> None:
        result = cli_runner.invoke(
            cli,
            [
                "--no-interact",
                "-q",
                "send",
                "eth",
                EVM_TO,
                "0.01",
                "--svpi",
                "--svpi-name",
                "evm",
                "--svpi-pass",
                "pw",
            ],
        )
        assert result.exit_code == 0, result.output
        assert result.stdout.strip() == "0xethhash"


class TestSendUsdc:
    def test_success(self, cli_runner: CliRunner, keyfile: Path, recipient: str) -> None:
        result = cli_runner.invoke(
            cli, ["--json", "send", "usdc", recipient, "12.5", "--keyfile", str(keyfile)]
        )
        assert result.exit_code == 0, result.output
        data = json.loads(result.stdout)["data"]
        assert data["base_units"] == 12_500_000
        assert data["symbol"] == "USDC"
        assert data["decimals"] == 6

    def test_excess_digits_truncated(
        self, cli_runner: CliRunner, keyfile: Path, recipient: str
    ) -> None:
        result = cli_runner.invoke(
            cli, ["--json", "send", "usdc", recipient, "1.2345678", "--keyfile", str(keyfile)]
        )
        assert result.exit_code == 0, result.output
        data = json.loads(result.stdout)["data"]
        assert data["base_units"] == 1_234_567
        assert data["amount"] == "1.234567"


class TestSendEth:
    def test_privkey(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(
            cli, ["--json", "send", "eth", EVM_TO, "0.01", "--privkey", EVM_KEY]
        )
        assert result.exit_code == 0, result.output
        payload = json.loads(result.stdout)
        assert payload["data"]["tx_hash"] == "0xethhash"
        assert payload["data"]["from"] == EVM_FROM
        assert payload["data"]["base_units"] == 10**16
        assert payload["meta"]["chain_id"] == 1

    def test_privkey_file_and_network(self, cli_runner: CliRunner, tmp_path: Path) -> None:
        key_path = tmp_path / "key.hex"
        key_path.write_text(EVM_KEY[2:] + "\n")
        result = cli_runner.invoke(
            cli,
            [
                "--json",
                "send",
                "eth",
                EVM_TO,
                "1",
                "--privkey-file",
                str(key_path),
                "--network",
                "sepolia",
                "--gas-price",
                "30",
            ],
        )
        assert result.exit_code == 0, result.output
        assert json.loads(result.stdout)["meta"]["network"] == "sepolia"

    def test_seed(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["--json", "send", "eth", EVM_TO, "1", "--seed", PHRASE])
        assert result.exit_code == 0, result.output
        assert json.loads(result.stdout)["data"]["from"] == EVM_FROM

    def test_malformed_privkey(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["send", "eth", EVM_TO, "1", "--privkey", "0x12"])
        assert result.exit_code == 1
        assert "invalid_private_key" in result.stderr

    def test_binary_privkey_file(self, cli_runner: CliRunner, tmp_path: Path) -> None:
        key_path = tmp_path / "key.bin"
        key_path.write_bytes(b"\xff\xfe\x00\x80" * 16)
        result = cli_runner.invoke(
            cli, ["send", "eth", EVM_TO, "1", "--privkey-file", str(key_path)]
        )
        assert result.exit_code == 1
        assert "invalid_private_key" in result.stderr

    def test_bad_recipient(self, cli_runner: CliRunner, fake_network: list[str]) -> None:
        result = cli_runner.invoke(cli, ["send", "eth", "0xnope", "1", "--privkey", EVM_KEY])
        assert result.exit_code == 1
        assert "invalid_address" in result.stderr
        assert fake_network == []

    def test_zero_gas_limit(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(
            cli, ["send", "eth", EVM_TO, "1", "--privkey", EVM_KEY, "--gas-limit", "0"]
        )
        assert result.exit_code == 1
        assert "--gas-limit must be > 0" in result.stderr


class TestSendErc20:
    def test_onchain_decimals(self, cli_runner: CliRunner, fake_network: list[str]) -> None:
        result = cli_runner.invoke(
            cli, ["--json", "send", "erc20", TOKEN, EVM_TO, "2.5", "--privkey", EVM_KEY]
        )
        assert result.exit_code == 0, result.output
        data = json.loads(result.stdout)["data"]
        assert data["base_units"] == 25 * 10**17
        assert data["decimals"] == 18
        assert "get_erc20_decimals" in fake_network

    def test_explicit_decimals(self, cli_runner: CliRunner, fake_network: list[str]) -> None:
        result = cli_runner.invoke(
            cli,
            [
                "--json",
                "send",
                "erc20",
                TOKEN,
                EVM_TO,
                "2.5",
                "--privkey",
                EVM_KEY,
                "--decimals",
                "6",
            ],
        )
        assert result.exit_code == 0, result.output
        assert json.loads(result.stdout)["data"]["base_units"] == 2_500_000
        assert "get_erc20_decimals" not in fake_network

    def test_missing_arguments(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["send", "erc20", TOKEN])
        assert result.exit_code == 2
