"""
Request parameter records for platform operations

Each record maps snake_case attributes onto the camelCase body or query
string the platform expects.
"""

from dataclasses import dataclass, replace, fields
from typing import Any, Dict, Optional, Union
from decimal import Decimal

from ..constants import (
    NATIVE_TOKEN_NAMESPACE,
    EVM_TOKEN_NAMESPACE,
    SOLANA_TOKEN_NAMESPACE,
)
from ..utils import object_to_query

Amount = Union[Decimal, float, int, str]

KNOWN_TOKEN_NAMESPACES = (NATIVE_TOKEN_NAMESPACE, EVM_TOKEN_NAMESPACE, SOLANA_TOKEN_NAMESPACE)


@dataclass(frozen=True)
class TokenId:
    """
    Platform token identifier "<namespace>:<reference>"

    Examples:
        slip44:714            native coin (SLIP-44 coin type)
        erc20:0xCf4E...5890   ERC-20 contract
        spl:So111...1112      SPL mint
    """
    namespace: str
    reference: str

    @property
    def is_native(self) -> bool:
        return self.namespace == NATIVE_TOKEN_NAMESPACE

    def __str__(self) -> str:
        return f"{self.namespace}:{self.reference}"


def parse_token_id(value: Any) -> Optional[TokenId]:
    """Parse a token id string, None when it is malformed or of an unknown namespace"""
    if not isinstance(value, str):
        return None
    namespace, sep, reference = value.strip().partition(":")
    namespace = namespace.lower()
    if not sep or not reference or namespace not in KNOWN_TOKEN_NAMESPACES:
        return None
    return TokenId(namespace, reference)


def _amount_str(value: Amount) -> str:
    if isinstance(value, Decimal):
        return format(value, "f")
    return str(value)


@dataclass(frozen=True)
class TokenCreationParams:
    """
    Token launch request

    Attributes:
        blockchain_key: Target network key (must match the active network)
        token_name: Token name
        token_symbol: Token ticker
        token_image: Base64 image or data URI
        quote_token_id: Token id the launch is paired against
        initial_buy_price: Initial buy in quote units
        metadata_url: Off-chain metadata URI written on Solana mints
        tx_hash: Deployment transaction hash, set after deployment
        token_address: Deployed token address, set after deployment
    """
    blockchain_key: str
    token_name: str
    token_symbol: str
    token_image: str = ""
    quote_token_id: str = ""
    initial_buy_price: Amount = "0"
    token_description: str = ""
    token_website: str = ""
    token_twitter: str = ""
    token_telegram: str = ""
    token_discord: str = ""
    metadata_url: Optional[str] = None
    tx_hash: Optional[str] = None
    token_address: Optional[str] = None

    def to_payload(self) -> Dict[str, Any]:
        payload = {
            "blockchainKey": self.blockchain_key,
            "quoteTokenId": self.quote_token_id,
            "initialBuyPrice": _amount_str(self.initial_buy_price),
            "tokenImage": self.token_image,
            "tokenSymbol": self.token_symbol,
            "tokenWebsite": self.token_website,
            "tokenTwitter": self.token_twitter,
            "tokenTelegram": self.token_telegram,
            "tokenDiscord": self.token_discord,
            "tokenName": self.token_name,
            "tokenDescription": self.token_description,
        }
        if self.metadata_url:
            payload["tokenMetadataUrl"] = self.metadata_url
        if self.tx_hash:
            payload["txHash"] = self.tx_hash
        if self.token_address:
            payload["tokenAddress"] = self.token_address
        return payload

    def with_metadata_url(self, metadata_url: Optional[str]) -> "TokenCreationParams":
        return replace(self, metadata_url=metadata_url)

    def with_deployment(self, tx_hash: str, token_address: Optional[str] = None) -> "TokenCreationParams":
        """Copy with the deployment transaction hash (and token address) attached"""
        return replace(self, tx_hash=tx_hash, token_address=token_address or self.token_address)


@dataclass(frozen=True)
class DepositParams:
    """
    On-chain deposit request

    Attributes:
        amount: Amount in whole units (ether / SOL / token UI amount)
        blockchain_key: Target network key
        token_id: "slip44:<coin>" for native deposits, "erc20:<addr>" or "spl:<mint>" for tokens
        token_decimals: Token decimals, read from chain when omitted
    """
    amount: Amount
    blockchain_key: str
    token_id: str
    token_decimals: Optional[int] = None

    def to_payload(self) -> Dict[str, Any]:
        return {
            "amount": _amount_str(self.amount),
            "blockchainKey": self.blockchain_key,
            "tokenId": self.token_id,
        }


@dataclass(frozen=True)
class WithdrawalParams:
    token_id: str
    request_amount: Amount
    user_address: Optional[str] = None

    def to_payload(self) -> Dict[str, Any]:
        return {
            "tokenId": self.token_id,
            "userAddress": self.user_address,
            "requestAmount": _amount_str(self.request_amount),
        }


@dataclass(frozen=True)
class OrderParams:
    """
    Market order request

    Attributes:
        deadline: Unix epoch seconds after which the order is void
        order_type: "buy" or "sell"
        slippage: Allowed slippage in percent
    """
    base_token_id: str
    quote_token_id: str
    amount: Amount
    price: Amount
    deadline: int
    blockchain_key: str
    order_type: str
    slippage: Amount = "1"

    def to_payload(self) -> Dict[str, Any]:
        return {
            "baseTokenId": self.base_token_id,
            "amount": _amount_str(self.amount),
            "deadline": self.deadline,
            "blockchainKey": self.blockchain_key,
            "orderType": self.order_type,
            "price": _amount_str(self.price),
            "quoteTokenId": self.quote_token_id,
            "slippage": _amount_str(self.slippage),
        }


@dataclass(frozen=True)
class EstimateParams:
    """
    Market estimate request

    side and market_type select the endpoint: POST /market-<side>-<market_type>.
    """
    base_token_id: str
    quote_token_id: str
    side: str
    market_type: str
    amount: Amount
    blockchain_key: str

    @property
    def path(self) -> str:
        return f"/market-{self.side}-{self.market_type}"

    def to_payload(self) -> Dict[str, Any]:
        return {
            "baseTokenId": self.base_token_id,
            "quoteTokenId": self.quote_token_id,
            "amount": _amount_str(self.amount),
            "blockchainKey": self.blockchain_key,
        }


# Query records: attribute name -> query parameter name
_QUERY_NAMES = {
    "blockchain_key": "blockchainKey",
    "user_address": "userAddress",
    "order_by": "orderBy",
    "token_id": "tokenId",
    "base_token_id": "baseTokenId",
    "quote_token_id": "quoteTokenId",
}


class _Query:
    def to_params(self) -> Dict[str, str]:
        """Query parameters with None values dropped"""
        raw = {_QUERY_NAMES.get(f.name, f.name): getattr(self, f.name) for f in fields(self)}
        return object_to_query(raw)


@dataclass(frozen=True)
class PageQuery(_Query):
    page: int = 1
    limit: int = 25


@dataclass(frozen=True)
class TokenQuery(_Query):
    page: Optional[int] = None
    limit: Optional[int] = None
    blockchain_key: Optional[str] = None
    order_by: Optional[str] = None
    search: Optional[str] = None


@dataclass(frozen=True)
class DepositQuery(_Query):
    page: Optional[int] = None
    limit: Optional[int] = None
    blockchain_key: Optional[str] = None
    user_address: Optional[str] = None


@dataclass(frozen=True)
class WithdrawalQuery(_Query):
    page: Optional[int] = None
    limit: Optional[int] = None
    blockchain_key: Optional[str] = None
    user_address: Optional[str] = None


@dataclass(frozen=True)
class MarketQuery(_Query):
    page: Optional[int] = None
    limit: Optional[int] = None
    blockchain_key: Optional[str] = None
    order_by: Optional[str] = None


@dataclass(frozen=True)
class TransactionQuery(_Query):
    page: Optional[int] = None
    limit: Optional[int] = None
    blockchain_key: Optional[str] = None
    user_address: Optional[str] = None
    token_id: Optional[str] = None


@dataclass(frozen=True)
class TradeQuery(_Query):
    page: Optional[int] = None
    limit: Optional[int] = None
    blockchain_key: Optional[str] = None
    user_address: Optional[str] = None
    base_token_id: Optional[str] = None
