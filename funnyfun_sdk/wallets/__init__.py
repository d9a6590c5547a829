"""
Wallet adapters

Provides:
- WalletAdapter: common interface
- EvmWallet: web3.py / eth-account backed wallet
- SolanaWallet: solders / JSON-RPC backed wallet
- create_wallet: factory selecting the adapter for a network type
"""

from typing import Optional, Union

from ..config import get_config
from ..types import NetworkType
from .base import WalletAdapter
from .evm import EvmWallet
from .solana import SolanaWallet, resolve_cluster_url
from .sign_in import SignInMessage


def create_wallet(
    network_type: Union[NetworkType, str],
    server_url: Optional[str],
    private_key: Optional[str],
    chain_id: Optional[int] = None,
    rpc_url: Optional[str] = None,
    cluster: Optional[str] = None,
) -> WalletAdapter:
    """
    Build the wallet adapter for a network type

    Args:
        network_type: NetworkType or "evm" / "solana"
        server_url: Platform server URL
        private_key: Wallet private key
        chain_id: Chain id (EVM falls back to EVM_CHAIN_ID)
        rpc_url: Chain RPC endpoint (falls back to EVM_RPC_URL / SOLANA_RPC_URL)
        cluster: Solana cluster name (falls back to SOLANA_CLUSTER)

    Returns:
        EvmWallet or SolanaWallet

    Raises:
        ConfigurationError: If a required option is missing
    """
    network_type = NetworkType.from_string(network_type)
    settings = get_config()
    if network_type == NetworkType.EVM:
        return EvmWallet(
            server_url=server_url,
            private_key=private_key,
            chain_id=chain_id if chain_id is not None else settings.evm.chain_id,
            rpc_url=rpc_url or settings.evm.rpc_url or None,
        )
    return SolanaWallet(
        server_url=server_url,
        private_key=private_key,
        chain_id=chain_id,
        cluster=cluster or settings.solana.cluster or None,
        rpc_url=rpc_url or settings.solana.rpc_url or None,
    )


__all__ = [
    "WalletAdapter",
    "EvmWallet",
    "SolanaWallet",
    "SignInMessage",
    "create_wallet",
    "resolve_cluster_url",
]
