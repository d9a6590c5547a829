"""
EVM wallet adapter

Signs in with EIP-4361 messages, deploys tokens through the platform token
factory and deposits native currency or ERC-20 tokens.
"""

import logging
from decimal import Decimal
from typing import Any, Dict, Optional

from siwe import SiweMessage
from web3 import Web3
from web3.exceptions import Web3Exception
from web3.logs import DISCARD

from ..constants import DEFAULT_MESSAGE
from ..errors import ConfigurationError, SignerError, TransactionError, ValidationError
from ..infra import EVMSigner, create_web3, FACTORY_ABI, ERC20_ABI
from ..types import NetworkType, SignatureRequest, TokenDeployment, WalletConfig
from ..utils import Number, to_raw_amount
from .base import WalletAdapter
from .sign_in import iso_timestamp

logger = logging.getLogger(__name__)


class EvmWallet(WalletAdapter):
    """
    EVM wallet backed by web3.py and a local private key

    Usage:
        wallet = EvmWallet(
            server_url="https://app.nusabyte.com",
            private_key="0x...",
            chain_id=97,
            rpc_url="https://data-seed-prebsc-1-s1.bnbchain.org:8545",
        )
        signature = wallet.sign_message(request)
        deployment = wallet.create_token(factory, "Funny", "FUN")
    """

    network_type = NetworkType.EVM

    def __init__(
        self,
        server_url: Optional[str],
        private_key: Optional[str],
        chain_id: Optional[int],
        rpc_url: Optional[str],
        web3: Optional[Web3] = None,
    ):
        """
        Initialize EVM wallet

        Args:
            server_url: Platform server URL (domain and origin of sign-in messages)
            private_key: Hex private key
            chain_id: EIP-155 chain id
            rpc_url: Chain JSON-RPC endpoint
            web3: Pre-built Web3 instance

        Raises:
            ConfigurationError: If a required option is missing or invalid
        """
        super().__init__(server_url, private_key)

        if not chain_id:
            raise ConfigurationError.missing("chain id")
        if not rpc_url and web3 is None:
            raise ConfigurationError.missing("Rpc Url")
        if not isinstance(chain_id, int) or isinstance(chain_id, bool):
            raise ConfigurationError.invalid("chainId", f"expected an integer, got {chain_id!r}")

        self._chain_id = chain_id
        self._rpc_url = rpc_url
        self._signer = EVMSigner.from_private_key(private_key)
        self._web3 = web3 or create_web3(rpc_url, chain_id)

        logger.debug(f"EVM wallet {self.address} on chain {chain_id}")

    @property
    def address(self) -> str:
        return self._signer.address

    @property
    def web3(self) -> Web3:
        return self._web3

    @property
    def chain_id(self) -> int:
        return self._chain_id

    def config(self) -> WalletConfig:
        return WalletConfig(
            address=self.address,
            domain=self.domain,
            origin=self.origin,
            provider=self._web3,
            signer=self._signer,
            network_type=self.network_type,
            rpc_url=self._rpc_url,
            chain_id=self._chain_id,
            abi_factory=FACTORY_ABI,
        )

    # =========================================================================
    # Sign-in
    # =========================================================================

    def build_sign_in_message(self, request: SignatureRequest, issued_at: Optional[str] = None) -> str:
        """
        Render the EIP-4361 message for a sign-in request

        Raises:
            SignerError: If the request fields do not form a valid SIWE message
        """
        try:
            message = SiweMessage(
                domain=request.domain,
                address=self.address,
                statement=request.message or DEFAULT_MESSAGE[self.network_type.value],
                uri=request.url,
                version="1",
                chain_id=self._chain_id,
                nonce=str(request.nonce),
                issued_at=issued_at or iso_timestamp(),
            )
        except (TypeError, ValueError) as e:
            raise SignerError.failed(f"invalid sign-in message: {e}", original_error=e)
        return message.prepare_message()

    def sign_message(self, request: SignatureRequest) -> str:
        return self._signer.sign_message(self.build_sign_in_message(request))

    # =========================================================================
    # Transactions
    # =========================================================================

    @staticmethod
    def _checksum(address: str, field: str) -> str:
        try:
            return Web3.to_checksum_address(address)
        except (TypeError, ValueError) as e:
            raise ValidationError.invalid_field(field, f"{address!r} is not an EVM address ({e})")

    def _contract(self, address: str, abi, field: str = "contract address"):
        return self._web3.eth.contract(address=self._checksum(address, field), abi=abi)

    def _send_call(self, function, value: int = 0) -> Dict[str, Any]:
        """Build, sign and send a contract call, returning the receipt"""
        try:
            tx = function.build_transaction({
                "from": self.address,
                "value": value,
                "nonce": self._web3.eth.get_transaction_count(self.address, "pending"),
            })
        except (Web3Exception, ValueError) as e:
            logger.error(f"Failed to build {function.fn_name} transaction: {e}")
            raise TransactionError.send_failed(str(e), original_error=e)
        return self._signer.sign_and_send(self._web3, tx)

    def create_token(
        self,
        factory_address: str,
        name: str,
        symbol: str,
        token_creation_fee: Optional[int] = None,
        metadata_url: str = "",
    ) -> TokenDeployment:
        """
        Deploy a token through the factory contract

        The creation fee is read from getTokenCreationFee() and sent as value.
        The token address comes from the TokenCreated event of the receipt.
        """
        factory = self._contract(factory_address, FACTORY_ABI, "factory address")
        try:
            fee = factory.functions.getTokenCreationFee().call()
        except (Web3Exception, ValueError) as e:
            raise TransactionError.send_failed(f"getTokenCreationFee failed: {e}", original_error=e)

        logger.info(f"Creating token {symbol} via factory {factory_address} (fee={fee} wei)")
        receipt = self._send_call(factory.functions.createToken(name, symbol), value=fee)
        tx_hash = Web3.to_hex(receipt["transactionHash"])

        events = factory.events.TokenCreated().process_receipt(receipt, errors=DISCARD)
        token_address = events[0]["args"]["tokenAddress"] if events else None
        if token_address is None:
            logger.warning(f"No TokenCreated event in {tx_hash}")

        logger.info(f"Token {symbol} created: {token_address} (tx {tx_hash})")
        return TokenDeployment(tx_hash=tx_hash, token_address=token_address)

    def deposit(self, deposit_address: str, amount: Number) -> str:
        """Send `amount` ether-units of native currency to the deposit address"""
        value = Web3.to_wei(Decimal(str(amount)), "ether")
        tx = {
            "to": self._checksum(deposit_address, "deposit address"),
            "value": value,
        }
        receipt = self._signer.sign_and_send(self._web3, tx)
        tx_hash = Web3.to_hex(receipt["transactionHash"])
        logger.info(f"Deposited {amount} native to {deposit_address}: {tx_hash}")
        return tx_hash

    def token_decimals(self, token_address: str) -> int:
        try:
            return int(self._contract(token_address, ERC20_ABI, "token address").functions.decimals().call())
        except (Web3Exception, ValueError) as e:
            raise TransactionError.send_failed(f"decimals() failed for {token_address}: {e}", original_error=e)

    def deposit_token(
        self,
        deposit_address: str,
        amount: Number,
        token_address: str,
        token_decimals: Optional[int] = None,
    ) -> str:
        """
        Transfer ERC-20 tokens to the deposit address

        Approves the deposit address first when its allowance is short.
        """
        decimals = token_decimals if token_decimals is not None else self.token_decimals(token_address)
        raw_amount = to_raw_amount(amount, decimals)

        if self.allowance(deposit_address, token_address) < raw_amount:
            self._approve_raw(deposit_address, raw_amount, token_address)

        token = self._contract(token_address, ERC20_ABI, "token address")
        receipt = self._send_call(
            token.functions.transfer(self._checksum(deposit_address, "deposit address"), raw_amount)
        )
        tx_hash = Web3.to_hex(receipt["transactionHash"])
        logger.info(f"Deposited {amount} of {token_address} to {deposit_address}: {tx_hash}")
        return tx_hash

    def allowance(self, spender: str, token_address: str) -> int:
        token = self._contract(token_address, ERC20_ABI, "token address")
        try:
            return int(token.functions.allowance(
                self.address,
                self._checksum(spender, "spender"),
            ).call())
        except (Web3Exception, ValueError) as e:
            raise TransactionError.send_failed(f"allowance() failed for {token_address}: {e}", original_error=e)

    def _approve_raw(self, spender: str, raw_amount: int, token_address: str) -> str:
        token = self._contract(token_address, ERC20_ABI, "token address")
        receipt = self._send_call(
            token.functions.approve(self._checksum(spender, "spender"), raw_amount)
        )
        tx_hash = Web3.to_hex(receipt["transactionHash"])
        logger.info(f"Approved {raw_amount} of {token_address} for {spender}: {tx_hash}")
        return tx_hash

    def approve(
        self,
        spender: str,
        amount: Number,
        token_address: str,
        token_decimals: Optional[int] = None,
    ) -> Optional[str]:
        decimals = token_decimals if token_decimals is not None else self.token_decimals(token_address)
        return self._approve_raw(spender, to_raw_amount(amount, decimals), token_address)
