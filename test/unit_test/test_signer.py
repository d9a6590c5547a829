"""
Test Signer Module

Tests for Solana private key decoding, local signing and the EVM signer.
"""

import sys
import base64
from pathlib import Path
from unittest.mock import Mock

import base58
import pytest
from eth_account import Account
from eth_account.messages import encode_defunct
from solders.keypair import Keypair
from solders.signature import Signature
from web3.exceptions import Web3RPCError

# Add parent to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent.parent))

from funnyfun_sdk.errors import ConfigurationError, ErrorCode, TransactionError
from funnyfun_sdk.infra.solana_signer import (
    LocalSigner,
    decode_private_key,
    keypair_from_private_key,
)
from funnyfun_sdk.infra.evm_signer import EVMSigner


class TestDecodePrivateKey:
    """Test key format detection"""

    def test_base64_secret_key(self):
        keypair = Keypair()
        encoded = base64.b64encode(bytes(keypair)).decode()
        assert keypair_from_private_key(encoded).pubkey() == keypair.pubkey()

    def test_hex_secret_key(self):
        keypair = Keypair()
        assert keypair_from_private_key(bytes(keypair).hex()).pubkey() == keypair.pubkey()
        assert keypair_from_private_key("0x" + bytes(keypair).hex()).pubkey() == keypair.pubkey()

    def test_base58_secret_key(self):
        keypair = Keypair()
        encoded = base58.b58encode(bytes(keypair)).decode()
        assert keypair_from_private_key(encoded).pubkey() == keypair.pubkey()

    def test_hex_seed(self):
        seed = bytes(range(32))
        expected = Keypair.from_seed(seed)
        assert keypair_from_private_key(seed.hex()).pubkey() == expected.pubkey()

    def test_decoded_length(self):
        keypair = Keypair()
        assert len(decode_private_key(base64.b64encode(bytes(keypair)).decode())) == 64

    @pytest.mark.parametrize("value", ["", "not a key", "abcd", base64.b64encode(b"short").decode()])
    def test_invalid(self, value):
        with pytest.raises(ConfigurationError) as exc_info:
            decode_private_key(value)
        assert "Must be base64 or hex" in exc_info.value.message


class TestLocalSigner:
    """Test local ed25519 signing"""

    def test_sign(self):
        keypair = Keypair()
        signer = LocalSigner(keypair)

        signature = signer.sign(b"test message to sign")
        assert len(signature) == 64
        assert Signature.from_bytes(signature).verify(keypair.pubkey(), b"test message to sign")

    def test_sign_message_base64(self):
        keypair = Keypair()
        signer = LocalSigner(keypair)

        encoded = signer.sign_message_base64("hello solana")
        raw = base64.b64decode(encoded)
        assert Signature.from_bytes(raw).verify(keypair.pubkey(), "hello solana".encode("utf-8"))

    def test_pubkey_is_base58(self):
        keypair = Keypair()
        signer = LocalSigner.from_bytes(bytes(keypair))
        assert signer.pubkey == str(keypair.pubkey())


class TestEVMSigner:
    """Test EVM signer"""

    def test_from_private_key_without_prefix(self):
        account = Account.create()
        key = account.key.hex()
        if key.startswith("0x"):
            key = key[2:]
        assert EVMSigner.from_private_key(key).address == account.address

    def test_invalid_private_key(self):
        with pytest.raises(ConfigurationError):
            EVMSigner.from_private_key("0x1234")

    def test_missing_private_key(self):
        with pytest.raises(ConfigurationError) as exc_info:
            EVMSigner.from_private_key("")
        assert exc_info.value.code == ErrorCode.CONFIG_MISSING

    def test_sign_message_recovers_address(self):
        account = Account.create()
        signer = EVMSigner(account)

        signature = signer.sign_message("Sign in with Ethereum to the app")
        assert signature.startswith("0x")
        recovered = Account.recover_message(
            encode_defunct(text="Sign in with Ethereum to the app"),
            signature=signature,
        )
        assert recovered == account.address

    def _web3(self, status=1):
        web3 = Mock()
        web3.eth.get_transaction_count.return_value = 0
        web3.eth.chain_id = 97
        web3.eth.estimate_gas.return_value = 21000
        web3.eth.gas_price = 10 ** 9
        web3.eth.send_raw_transaction.return_value = b"\x11" * 32
        web3.eth.wait_for_transaction_receipt.return_value = {
            "status": status,
            "transactionHash": b"\x11" * 32,
        }
        return web3

    def test_prepare_transaction(self):
        signer = EVMSigner(Account.create())
        tx = signer.prepare_transaction(self._web3(), {"to": signer.address, "value": 1})
        assert tx["nonce"] == 0
        assert tx["chainId"] == 97
        assert tx["gas"] == int(21000 * 1.2)
        assert tx["gasPrice"] == 10 ** 9

    def test_sign_and_send(self):
        signer = EVMSigner(Account.create())
        web3 = self._web3()

        receipt = signer.sign_and_send(web3, {"to": signer.address, "value": 1})
        assert receipt["status"] == 1
        web3.eth.send_raw_transaction.assert_called_once()

    def test_sign_and_send_reverted(self):
        signer = EVMSigner(Account.create())
        with pytest.raises(TransactionError) as exc_info:
            signer.sign_and_send(self._web3(status=0), {"to": signer.address, "value": 1})
        assert exc_info.value.code == ErrorCode.TX_REVERTED

    def test_sign_and_send_rejected(self):
        signer = EVMSigner(Account.create())
        web3 = self._web3()
        web3.eth.send_raw_transaction.side_effect = ValueError("insufficient funds")

        with pytest.raises(TransactionError) as exc_info:
            signer.sign_and_send(web3, {"to": signer.address, "value": 1})
        assert exc_info.value.code == ErrorCode.TX_SEND_FAILED
        assert "insufficient funds" in exc_info.value.message

    def test_sign_and_send_receipt_wait_error(self):
        signer = EVMSigner(Account.create())
        web3 = self._web3()
        web3.eth.wait_for_transaction_receipt.side_effect = Web3RPCError("header not found")

        with pytest.raises(TransactionError) as exc_info:
            signer.sign_and_send(web3, {"to": signer.address, "value": 1})
        assert exc_info.value.code == ErrorCode.TX_CONFIRMATION_FAILED
        assert "header not found" in exc_info.value.message
        assert exc_info.value.signature == "0x" + "11" * 32
