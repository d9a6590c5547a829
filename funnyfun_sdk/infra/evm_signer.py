"""
EVM Transaction Signer using web3.py

Provides local signing for EVM chains (Ethereum, BSC and other
EIP-155 networks). Only supports local private key signing.
"""

from __future__ import annotations

import logging
from typing import Optional, Dict, Any, Tuple

from eth_account import Account
from eth_account.messages import encode_defunct
from eth_account.signers.local import LocalAccount
from web3 import Web3, HTTPProvider
from web3.exceptions import TimeExhausted, Web3Exception
from web3.middleware import ExtraDataToPOAMiddleware

from ..constants import POA_CHAIN_IDS
from ..errors import SignerError, ConfigurationError, TransactionError
from ..config import get_config

logger = logging.getLogger(__name__)


class EVMSigner:
    """
    Local EVM signer using web3.py

    Usage:
        signer = EVMSigner.from_private_key("0x...")

        signature = signer.sign_message("Sign in with Ethereum...")
        receipt = signer.sign_and_send(web3, tx_dict)
    """

    def __init__(self, account: LocalAccount):
        """
        Initialize with eth_account LocalAccount

        Args:
            account: LocalAccount from eth_account
        """
        self._account = account

    @property
    def address(self) -> str:
        """Get wallet address (checksummed)"""
        return self._account.address

    def sign_transaction(self, tx_dict: Dict[str, Any]) -> Tuple[bytes, str]:
        """
        Sign a transaction

        Args:
            tx_dict: Transaction dictionary with to, data, value, gas, fees, nonce, chainId

        Returns:
            (raw_tx_bytes, tx_hash_hex)
        """
        signed = self._account.sign_transaction(tx_dict)
        return signed.raw_transaction, Web3.to_hex(signed.hash)

    def sign_message(self, message: str) -> str:
        """
        Sign a text message with EIP-191 personal_sign semantics

        Args:
            message: Message text

        Returns:
            0x-prefixed hex signature
        """
        try:
            signed = self._account.sign_message(encode_defunct(text=message))
        except (TypeError, ValueError) as e:
            raise SignerError.failed(e, original_error=e)
        return Web3.to_hex(signed.signature)

    def prepare_transaction(self, web3: Web3, tx_dict: Dict[str, Any]) -> Dict[str, Any]:
        """
        Fill nonce, chain id, gas and gas price when missing

        Gas estimates are scaled by EVM_GAS_LIMIT_MULTIPLIER.
        """
        tx = dict(tx_dict)
        tx.setdefault("from", self.address)
        if "nonce" not in tx:
            tx["nonce"] = web3.eth.get_transaction_count(self.address, "pending")
        if "chainId" not in tx:
            tx["chainId"] = web3.eth.chain_id
        if "gas" not in tx:
            estimate = web3.eth.estimate_gas(tx)
            tx["gas"] = int(estimate * get_config().evm.gas_limit_multiplier)
        if "gasPrice" not in tx and "maxFeePerGas" not in tx:
            tx["gasPrice"] = web3.eth.gas_price
        return tx

    def sign_and_send(
        self,
        web3: Web3,
        tx_dict: Dict[str, Any],
        timeout: Optional[int] = None,
    ) -> Dict[str, Any]:
        """
        Sign, send and wait for the receipt

        Args:
            web3: Web3 instance connected to RPC
            tx_dict: Transaction dictionary
            timeout: Receipt wait in seconds (defaults to EVM_RECEIPT_TIMEOUT)

        Returns:
            Transaction receipt as a dict (tx hash under "transactionHash")

        Raises:
            TransactionError: On send failure, revert or receipt timeout
        """
        timeout = timeout or get_config().evm.receipt_timeout
        try:
            tx = self.prepare_transaction(web3, tx_dict)
            signed = self._account.sign_transaction(tx)
            tx_hash = web3.eth.send_raw_transaction(signed.raw_transaction)
        except (Web3Exception, ValueError) as e:
            logger.error(f"Transaction failed: {e}")
            raise TransactionError.send_failed(str(e), original_error=e)

        tx_hash_hex = Web3.to_hex(tx_hash)
        logger.info(f"Transaction sent: {tx_hash_hex}")

        try:
            receipt = web3.eth.wait_for_transaction_receipt(tx_hash, timeout=timeout)
        except TimeExhausted:
            raise TransactionError.confirmation_timeout(tx_hash_hex, timeout)
        except (Web3Exception, ValueError, OSError) as e:
            logger.error(f"Receipt wait for {tx_hash_hex} failed: {e}")
            raise TransactionError.receipt_failed(tx_hash_hex, e)

        if receipt["status"] != 1:
            logger.warning(f"Transaction {tx_hash_hex} reverted")
            raise TransactionError.reverted(tx_hash_hex)

        return dict(receipt)

    @classmethod
    def from_private_key(cls, private_key: str) -> "EVMSigner":
        """
        Create signer from private key

        Args:
            private_key: Hex-encoded private key (with or without 0x prefix)

        Raises:
            ConfigurationError: If the key is not a valid secp256k1 private key
        """
        if not private_key:
            raise ConfigurationError.missing("privateKey")

        if not private_key.startswith("0x"):
            private_key = "0x" + private_key

        try:
            account = Account.from_key(private_key)
        except (ValueError, TypeError) as e:
            raise ConfigurationError.invalid("privateKey", str(e))
        return cls(account)

    def __repr__(self) -> str:
        return f"EVMSigner(address={self.address})"


def create_web3(
    rpc_url: str,
    chain_id: int,
    timeout: Optional[int] = None,
) -> Web3:
    """
    Create Web3 instance for a chain

    Args:
        rpc_url: RPC endpoint URL
        chain_id: EIP-155 chain id (56/97 get the PoA extra-data middleware)
        timeout: Request timeout in seconds

    Returns:
        Configured Web3 instance
    """
    provider = HTTPProvider(
        rpc_url,
        request_kwargs={"timeout": timeout or get_config().evm.rpc_timeout},
    )
    web3 = Web3(provider)

    # BSC uses Proof of Staked Authority
    if chain_id in POA_CHAIN_IDS:
        web3.middleware_onion.inject(ExtraDataToPOAMiddleware, layer=0)

    return web3
