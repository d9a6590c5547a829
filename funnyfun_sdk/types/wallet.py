"""
Wallet configuration and sign-in request types
"""

from dataclasses import dataclass
from typing import Any, List, Optional

from .network import NetworkType


@dataclass(frozen=True)
class WalletConfig:
    """
    Resolved wallet configuration

    Attributes:
        address: Wallet address (checksummed hex on EVM, base58 on Solana)
        domain: Hostname of the platform server URL
        origin: scheme://host[:port] of the platform server URL
        provider: Web3 instance (EVM) or RpcClient (Solana)
        signer: EVMSigner or LocalSigner
        network_type: Wallet family
        rpc_url: Chain RPC endpoint
        cluster: Solana cluster name
        chain_id: EIP-155 chain id, or the chain id passed for Solana
        abi_factory: Token factory ABI (EVM only)
    """
    address: str
    domain: str
    origin: str
    provider: Any
    signer: Any
    network_type: NetworkType
    rpc_url: Optional[str] = None
    cluster: Optional[str] = None
    chain_id: Optional[int] = None
    abi_factory: Optional[List[dict]] = None


@dataclass(frozen=True)
class SignatureRequest:
    """
    Sign-in message inputs

    Attributes:
        message: Statement shown to the user
        nonce: Nonce issued by /auth-nonce
        domain: Domain requesting the sign-in
        url: URI of the platform
    """
    message: str
    nonce: str
    domain: str
    url: str
