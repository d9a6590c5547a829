"""
Type definitions for the FunnyFun SDK
"""

from .network import NetworkType, NetworkInfo, filter_blockchain_network
from .params import (
    TokenId,
    parse_token_id,
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
)
from .result import ServerStatus, TokenDeployment, DepositResult, DEPOSIT_SUCCESS_MESSAGE
from .wallet import WalletConfig, SignatureRequest

__all__ = [
    # Network
    "NetworkType",
    "NetworkInfo",
    "filter_blockchain_network",
    # Params
    "TokenId",
    "parse_token_id",
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
    # Results
    "ServerStatus",
    "TokenDeployment",
    "DepositResult",
    "DEPOSIT_SUCCESS_MESSAGE",
    # Wallet
    "WalletConfig",
    "SignatureRequest",
]
