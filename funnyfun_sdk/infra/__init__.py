"""
Infrastructure layer for the FunnyFun SDK

Provides:
- RpcClient: Solana JSON-RPC wrapper over httpx
- LocalSigner: Solana keypair signing
- TxBuilder: Solana transaction assembly and sending
- EVMSigner: EVM transaction and message signing using web3.py
"""

from .rpc import RpcClient, RpcClientConfig
from .solana_signer import (
    Signer,
    LocalSigner,
    decode_private_key,
    keypair_from_private_key,
)
from .tx_builder import TxBuilder, TxBuilderConfig

# EVM infrastructure
from .evm_signer import EVMSigner, create_web3
from .abi import FACTORY_ABI, ERC20_ABI

__all__ = [
    # Solana infrastructure
    "RpcClient",
    "RpcClientConfig",
    "Signer",
    "LocalSigner",
    "decode_private_key",
    "keypair_from_private_key",
    "TxBuilder",
    "TxBuilderConfig",
    # EVM infrastructure
    "EVMSigner",
    "create_web3",
    "FACTORY_ABI",
    "ERC20_ABI",
]
