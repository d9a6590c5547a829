"""
Base wallet adapter interface

Both wallet families (EVM, Solana) implement this interface so the SDK
facade can sign in, deploy tokens and deposit without branching on the
chain beyond the few places where the flows genuinely differ.
"""

from abc import ABC, abstractmethod
from typing import Optional

from ..errors import ConfigurationError
from ..types import NetworkType, SignatureRequest, TokenDeployment, WalletConfig
from ..utils import Number, parse_server_url


class WalletAdapter(ABC):
    """
    Abstract base class for wallet adapters

    Each adapter provides:
    - Sign-in message signing
    - Token deployment
    - Native and token deposits
    - Token allowance queries and approvals
    """

    network_type: NetworkType

    def __init__(self, server_url: Optional[str], private_key: Optional[str]):
        """
        Validate the options shared by every wallet

        Raises:
            ConfigurationError: If server_url or private_key is missing or malformed
        """
        if not server_url:
            raise ConfigurationError.missing("serverUrl")
        if not private_key:
            raise ConfigurationError.missing("privateKey")

        self._server_url = server_url
        self._domain, self._origin = parse_server_url(server_url)

    @property
    def domain(self) -> str:
        return self._domain

    @property
    def origin(self) -> str:
        return self._origin

    @property
    @abstractmethod
    def address(self) -> str:
        """Wallet address"""
        ...

    @abstractmethod
    def config(self) -> WalletConfig:
        """Resolved wallet configuration"""
        ...

    @abstractmethod
    def sign_message(self, request: SignatureRequest) -> str:
        """
        Sign the sign-in message

        Args:
            request: Statement, nonce, domain and URI to embed

        Returns:
            Signature string (0x-hex on EVM, base64 on Solana)
        """
        ...

    @abstractmethod
    def create_token(
        self,
        factory_address: str,
        name: str,
        symbol: str,
        token_creation_fee: Optional[int] = None,
        metadata_url: str = "",
    ) -> TokenDeployment:
        """
        Deploy a new token

        Args:
            factory_address: Token factory contract (EVM) or fee receiver (Solana)
            name: Token name
            symbol: Token symbol
            token_creation_fee: Creation fee in smallest units (read from chain on EVM)
            metadata_url: Metadata URI written on-chain (Solana)

        Returns:
            TokenDeployment with transaction hash and token address

        Raises:
            TransactionError: If the deployment transaction fails
        """
        ...

    @abstractmethod
    def deposit(self, deposit_address: str, amount: Number) -> str:
        """
        Transfer native currency to the deposit address

        Returns:
            Transaction hash / signature
        """
        ...

    @abstractmethod
    def deposit_token(
        self,
        deposit_address: str,
        amount: Number,
        token_address: str,
        token_decimals: Optional[int] = None,
    ) -> str:
        """
        Transfer a fungible token to the deposit address

        Returns:
            Transaction hash / signature
        """
        ...

    @abstractmethod
    def allowance(self, spender: str, token_address: str) -> int:
        """Raw amount spender may transfer on the wallet's behalf"""
        ...

    @abstractmethod
    def approve(
        self,
        spender: str,
        amount: Number,
        token_address: str,
        token_decimals: Optional[int] = None,
    ) -> Optional[str]:
        """Approve spender for amount, returning the transaction hash if one was sent"""
        ...

    def close(self):
        """Release network resources"""
        pass

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(address={self.address})"
