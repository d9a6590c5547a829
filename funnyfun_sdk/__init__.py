"""
FunnyFun SDK - Client for the FunnyFun token launchpad

Provides:
- Wallet sign-in (EIP-4361 on EVM, Sign-In with Solana)
- Token launch: EVM factory deployment, SPL mint with Metaplex metadata
- Native and token deposits
- Market orders, estimates and withdrawals
- Read-throughs for tokens, balances, deposits, markets and trades
"""

from .client import FunnyFunSdk
from .types import (
    NetworkType,
    NetworkInfo,
    TokenId,
    TokenCreationParams,
    DepositParams,
    WithdrawalParams,
    OrderParams,
    EstimateParams,
    PageQuery,
    TokenQuery,
    DepositQuery,
    WithdrawalQuery,
    MarketQuery,
    TransactionQuery,
    TradeQuery,
    ServerStatus,
    TokenDeployment,
    DepositResult,
    SignatureRequest,
    WalletConfig,
)
from .errors import (
    ErrorCode,
    FunnyFunError,
    ConfigurationError,
    ValidationError,
    ImageValidationError,
    PlatformApiError,
    AuthenticationError,
    NetworkNotFound,
    RpcError,
    TransactionError,
    SignerError,
)

from .api import PlatformAPI, validate_image
from .wallets import WalletAdapter, EvmWallet, SolanaWallet, create_wallet
from .utils import get_future_epoch_in_minutes
from .config import setup_logging, enable_file_logging

__all__ = [
    # Client
    "FunnyFunSdk",
    # Types
    "NetworkType",
    "NetworkInfo",
    "TokenId",
    "TokenCreationParams",
    "DepositParams",
    "WithdrawalParams",
    "OrderParams",
    "EstimateParams",
    "PageQuery",
    "TokenQuery",
    "DepositQuery",
    "WithdrawalQuery",
    "MarketQuery",
    "TransactionQuery",
    "TradeQuery",
    "ServerStatus",
    "TokenDeployment",
    "DepositResult",
    "SignatureRequest",
    "WalletConfig",
    # Errors
    "ErrorCode",
    "FunnyFunError",
    "ConfigurationError",
    "ValidationError",
    "ImageValidationError",
    "PlatformApiError",
    "AuthenticationError",
    "NetworkNotFound",
    "RpcError",
    "TransactionError",
    "SignerError",
    # Platform and wallets
    "PlatformAPI",
    "validate_image",
    "WalletAdapter",
    "EvmWallet",
    "SolanaWallet",
    "create_wallet",
    # Helpers
    "get_future_epoch_in_minutes",
    "setup_logging",
    "enable_file_logging",
]

__version__ = "0.1.0"
