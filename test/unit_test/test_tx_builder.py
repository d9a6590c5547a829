"""
Test Transaction Builder

Tests for versioned transaction assembly, multi-signer signing and the
send/confirm outcomes, with a mocked RPC client.
"""

import sys
import json
from pathlib import Path
from unittest.mock import Mock

import httpx
import pytest
from solders.hash import Hash
from solders.keypair import Keypair
from solders.signature import Signature
from solders.transaction import VersionedTransaction

# Add parent to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent.parent))

from funnyfun_sdk.errors import ErrorCode, RpcError, TransactionError
from funnyfun_sdk.infra import LocalSigner, TxBuilder, TxBuilderConfig
from funnyfun_sdk.infra.rpc import RpcClient, RpcClientConfig
from funnyfun_sdk.infra.solana_signer import message_bytes_for_signing
from funnyfun_sdk.wallets import spl
from funnyfun_sdk.constants import MINT_SIZE


@pytest.fixture
def wallet():
    return Keypair()


@pytest.fixture
def rpc():
    rpc = Mock()
    rpc.get_latest_blockhash.return_value = {"blockhash": str(Hash.default())}
    rpc.send_transaction.return_value = "5igSig"
    rpc.confirm_transaction.return_value = True
    return rpc


def make_builder(rpc, wallet, **overrides):
    config = TxBuilderConfig(
        compute_units=overrides.get("compute_units", 200_000),
        compute_unit_price=overrides.get("compute_unit_price", 0),
        skip_preflight=False,
        confirmation_timeout=5,
    )
    return TxBuilder(rpc, LocalSigner(wallet), config=config)


class TestBuild:
    """Test transaction assembly"""

    def test_compute_budget_prepended(self, rpc, wallet):
        builder = make_builder(rpc, wallet, compute_unit_price=1000)
        ix = spl.build_transfer_lamports_instruction(wallet.pubkey(), Keypair().pubkey(), 1)

        tx = VersionedTransaction.from_bytes(builder.build([ix]))
        assert len(tx.message.instructions) == 3
        assert tx.message.account_keys[0] == wallet.pubkey()

    def test_zero_compute_budget_omitted(self, rpc, wallet):
        builder = make_builder(rpc, wallet, compute_units=0)
        ix = spl.build_transfer_lamports_instruction(wallet.pubkey(), Keypair().pubkey(), 1)

        tx = VersionedTransaction.from_bytes(builder.build([ix]))
        assert len(tx.message.instructions) == 1

    def test_missing_blockhash(self, rpc, wallet):
        rpc.get_latest_blockhash.return_value = {}
        builder = make_builder(rpc, wallet)
        ix = spl.build_transfer_lamports_instruction(wallet.pubkey(), Keypair().pubkey(), 1)

        with pytest.raises(TransactionError):
            builder.build([ix])


class TestSign:
    """Test wallet and additional signer signatures"""

    def _create_mint(self, wallet, mint):
        return [spl.build_create_account_instruction(wallet.pubkey(), mint.pubkey(), 1461600, MINT_SIZE)]

    def test_wallet_and_mint_sign(self, rpc, wallet):
        mint = Keypair()
        builder = make_builder(rpc, wallet)

        signed, wallet_sig = builder.sign(builder.build(self._create_mint(wallet, mint)), [mint])
        tx = VersionedTransaction.from_bytes(signed)

        assert len(tx.signatures) == 2
        assert Signature.default() not in tx.signatures
        assert str(tx.signatures[0]) == wallet_sig
        message = message_bytes_for_signing(tx.message)
        assert tx.signatures[0].verify(wallet.pubkey(), message)
        assert tx.signatures[1].verify(mint.pubkey(), message)

    def test_missing_required_signer(self, rpc, wallet):
        mint = Keypair()
        builder = make_builder(rpc, wallet)
        unsigned = builder.build(self._create_mint(wallet, mint))

        with pytest.raises(TransactionError) as exc_info:
            builder.sign(unsigned, [Keypair()])
        assert str(mint.pubkey()) in exc_info.value.message


class TestSend:
    """Test send and confirmation outcomes"""

    def test_confirmed(self, rpc, wallet):
        builder = make_builder(rpc, wallet)
        assert builder.send(b"signed") == "5igSig"
        rpc.send_transaction.assert_called_once_with(b"signed", skip_preflight=False)

    def test_no_wait(self, rpc, wallet):
        builder = make_builder(rpc, wallet)
        assert builder.send(b"signed", wait_confirmation=False) == "5igSig"
        rpc.confirm_transaction.assert_not_called()

    def test_failed_on_chain_reports_cluster_error(self, wallet):
        err = {"InstructionError": [2, {"Custom": 6001}]}
        results = {
            "sendTransaction": "5igSig",
            "getSignatureStatuses": {"value": [{"confirmationStatus": "confirmed", "err": err}]},
        }

        def handler(request: httpx.Request) -> httpx.Response:
            body = json.loads(request.content)
            return httpx.Response(200, json={"jsonrpc": "2.0", "id": body["id"], "result": results[body["method"]]})

        rpc = RpcClient(
            "https://rpc.example.com",
            config=RpcClientConfig(confirmation_timeout=1, poll_interval=0.01),
            http_client=httpx.Client(transport=httpx.MockTransport(handler)),
        )
        with pytest.raises(TransactionError) as exc_info:
            make_builder(rpc, wallet).send(b"signed")

        assert exc_info.value.code == ErrorCode.TX_CONFIRMATION_FAILED
        assert exc_info.value.signature == "5igSig"
        assert "InstructionError" in str(exc_info.value)
        assert "6001" in str(exc_info.value)
        assert exc_info.value.details["error"] == err

    def test_timeout(self, rpc, wallet):
        rpc.confirm_transaction.return_value = None
        with pytest.raises(TransactionError) as exc_info:
            make_builder(rpc, wallet).send(b"signed")
        assert exc_info.value.code == ErrorCode.TX_CONFIRMATION_TIMEOUT

    def test_rpc_rejection(self, rpc, wallet):
        rpc.send_transaction.side_effect = RpcError("RPC error: Transaction simulation failed")
        with pytest.raises(TransactionError) as exc_info:
            make_builder(rpc, wallet).send(b"signed")
        assert exc_info.value.code == ErrorCode.TX_SEND_FAILED
        assert isinstance(exc_info.value.original_error, RpcError)

    def test_build_and_send(self, rpc, wallet):
        mint = Keypair()
        builder = make_builder(rpc, wallet)
        ixs = [spl.build_create_account_instruction(wallet.pubkey(), mint.pubkey(), 1461600, MINT_SIZE)]

        assert builder.build_and_send(ixs, additional_signers=[mint]) == "5igSig"
        sent = rpc.send_transaction.call_args[0][0]
        assert len(VersionedTransaction.from_bytes(sent).signatures) == 2
