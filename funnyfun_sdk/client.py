"""
FunnyFunSdk - Unified entry point for platform operations

Combines the platform REST client with one wallet adapter (EVM or Solana)
and runs the sign-in, token launch, deposit, order and withdrawal flows.
"""

from __future__ import annotations

import logging
import time
from dataclasses import replace
from typing import Any, Dict, Optional, Union

import httpx

from .api import PlatformAPI, validate_image
from .config import get_config
from .constants import DEFAULT_MESSAGE, EVM_TOKEN_NAMESPACE, SOLANA_TOKEN_NAMESPACE
from .errors import (
    AuthenticationError,
    FunnyFunError,
    NetworkNotFound,
    ValidationError,
)
from .types import (
    NetworkInfo,
    NetworkType,
    SignatureRequest,
    TokenCreationParams,
    DepositParams,
    DepositResult,
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
    TokenId,
    filter_blockchain_network,
    parse_token_id,
)
from .utils import base_api, to_decimal
from .wallets import WalletAdapter, create_wallet

logger = logging.getLogger(__name__)

ORDER_TYPES = ("buy", "sell")
MARKET_TYPES = ("price", "amount")


class FunnyFunSdk:
    """
    FunnyFun platform SDK

    Provides:
    - signature(): wallet sign-in against the platform
    - get_blockchain_data(): network record of the wallet's chain (cached)
    - deploy_and_request_create_token(): deploy and register a token
    - create_deposit() / create_deposit_token(): on-chain deposits
    - create_order() / create_withdraw(): trading and withdrawals
    - read-throughs for tokens, balances, deposits, markets and trades

    Usage:
        sdk = FunnyFunSdk(
            server_url="https://app.nusabyte.com",
            private_key="0x...",
            network="evm",
            chain_id=97,
            rpc_url="https://data-seed-prebsc-1-s1.bnbchain.org:8545",
        )

        sdk.signature()
        network = sdk.get_blockchain_data()
        result = sdk.create_deposit(DepositParams("0.01", network.key, "slip44:714"))

        # Solana
        with FunnyFunSdk(server_url=url, private_key=key, network="solana",
                         chain_id=3, solana_network="devnet") as sdk:
            sdk.signature()
    """

    def __init__(
        self,
        server_url: Optional[str] = None,
        private_key: Optional[str] = None,
        network: Union[NetworkType, str] = NetworkType.EVM,
        chain_id: Optional[int] = None,
        rpc_url: Optional[str] = None,
        solana_network: Optional[str] = None,
        http_client: Optional[httpx.Client] = None,
        api: Optional[PlatformAPI] = None,
        wallet: Optional[WalletAdapter] = None,
    ):
        """
        Initialize SDK

        Args:
            server_url: Platform server URL (API base is <server_url>/api/v1)
            private_key: Wallet private key
            network: "evm" or "solana"
            chain_id: Chain id of the wallet
            rpc_url: Chain RPC endpoint
            solana_network: Solana cluster ("devnet", "testnet", "mainnet-beta")
            http_client: Pre-built httpx client for platform requests
            api: Pre-built platform client
            wallet: Pre-built wallet adapter

        Raises:
            ConfigurationError: If the wallet options are incomplete
        """
        self._network_type = NetworkType.from_string(network)
        self._options = {
            "server_url": server_url,
            "chain_id": chain_id,
            "rpc_url": rpc_url,
            "solana_network": solana_network,
        }

        self._owns_wallet = wallet is None
        self._wallet = wallet or create_wallet(
            self._network_type,
            server_url=server_url,
            private_key=private_key,
            chain_id=chain_id,
            rpc_url=rpc_url,
            cluster=solana_network,
        )

        platform = get_config().platform
        self._owns_api = api is None
        self._api = api or PlatformAPI(
            base_api(
                domain=server_url or platform.server_url,
                feature=platform.api_feature,
                version=platform.api_version,
            ),
            http_client=http_client,
        )

        self._message = DEFAULT_MESSAGE[self._network_type.value]
        self._network: Optional[NetworkInfo] = None
        self._signature: Optional[str] = None

    @property
    def api(self) -> PlatformAPI:
        """Access to platform client"""
        return self._api

    @property
    def wallet(self) -> WalletAdapter:
        """Access to wallet adapter"""
        return self._wallet

    @property
    def network_type(self) -> NetworkType:
        return self._network_type

    @property
    def address(self) -> str:
        return self._wallet.address

    @property
    def is_authenticated(self) -> bool:
        return self._signature is not None

    @property
    def _chain_id(self) -> Optional[int]:
        chain_id = self._options.get("chain_id")
        if chain_id is None:
            chain_id = getattr(self._wallet.config(), "chain_id", None)
        return chain_id

    # =========================================================================
    # Sign-in
    # =========================================================================

    def signature(self) -> str:
        """
        Sign in with the wallet

        Probes server liveness, requests a nonce, signs the sign-in message,
        installs it as the Authorization header and verifies it with
        /auth-check.

        Returns:
            Signature string

        Raises:
            AuthenticationError: If the server is down or any step fails
        """
        status = self._api.check_status_server()
        if not status.is_up:
            raise AuthenticationError.server_down(status.url, status.error)

        try:
            nonce = self._api.nonce(self._wallet.address, self._network_type)
            signature = self._wallet.sign_message(SignatureRequest(
                message=self._message,
                nonce=nonce,
                domain=self._wallet.domain,
                url=self._wallet.origin,
            ))
            self._api.set_signature_auth(signature)
            self._api.auth_check()
        except FunnyFunError as e:
            self._api.clear_signature_auth()
            self._signature = None
            logger.warning(f"Sign-in failed for {self._wallet.address}: {e}")
            raise AuthenticationError.failed(e)

        self._signature = signature
        logger.info(f"Signed in as {self._wallet.address} ({self._network_type.value})")
        return signature

    # =========================================================================
    # Network
    # =========================================================================

    def get_blockchain_data(self, refresh: bool = False) -> NetworkInfo:
        """
        Network record of the wallet's chain

        The first result is cached; pass refresh=True to fetch again.

        Raises:
            NetworkNotFound: If no platform network matches the wallet
        """
        if self._network is not None and not refresh:
            return self._network

        networks = self._api.blockchains()
        network = filter_blockchain_network(networks, self._network_type, self._chain_id)
        if network is None:
            raise NetworkNotFound(self._network_type.value, self._chain_id)

        logger.debug(f"Resolved network {network.key} ({network.name})")
        self._network = network
        return network

    def _require_blockchain_key(self, blockchain_key: str) -> NetworkInfo:
        network = self.get_blockchain_data()
        if blockchain_key != network.key:
            raise ValidationError.mismatched_blockchain(network.key, blockchain_key)
        return network

    # =========================================================================
    # Local validation
    # =========================================================================

    @staticmethod
    def _require_positive(field: str, value: Any):
        amount = to_decimal(value)
        if amount is None or amount <= 0:
            raise ValidationError.invalid_amount(field, value)
        return amount

    @staticmethod
    def _require_token_id(field: str, value: Any) -> TokenId:
        token_id = parse_token_id(value)
        if token_id is None:
            raise ValidationError.unknown_token(field, value)
        return token_id

    @staticmethod
    def _require_choice(field: str, value: Any, choices) -> str:
        if value not in choices:
            raise ValidationError.invalid_field(field, f"{value!r} is not one of {', '.join(choices)}")
        return value

    @property
    def _token_namespace(self) -> str:
        if self._network_type == NetworkType.SOLANA:
            return SOLANA_TOKEN_NAMESPACE
        return EVM_TOKEN_NAMESPACE

    # =========================================================================
    # Read-throughs
    # =========================================================================

    def app_config(self) -> Dict[str, Any]:
        return self._api.app_config()

    def token_lists(self, query: Optional[TokenQuery] = None) -> Any:
        return self._api.tokens(query)

    def get_account_balance(self, page: int = 1, limit: int = 25) -> Any:
        """Platform balances of the signed-in user"""
        if not isinstance(page, int) or page < 1:
            raise ValidationError.invalid_field("page", f"must be a positive integer, got {page!r}")
        if not isinstance(limit, int) or limit < 1:
            raise ValidationError.invalid_field("limit", f"must be a positive integer, got {limit!r}")
        return self._api.accounts(PageQuery(page=page, limit=limit))

    def get_deposit(self, query: Optional[DepositQuery] = None) -> Any:
        return self._api.deposits(query)

    def get_withdrawals(self, query: Optional[WithdrawalQuery] = None) -> Any:
        return self._api.withdrawals(query)

    def get_market_list(self, query: Optional[MarketQuery] = None) -> Any:
        return self._api.markets(query)

    def get_transactions(self, query: Optional[TransactionQuery] = None) -> Any:
        return self._api.transactions(query)

    def get_trade_history(self, query: Optional[TradeQuery] = None) -> Any:
        return self._api.trades(query)

    def get_estimate_amount_markets(self, params: EstimateParams) -> Any:
        """Estimate the price or amount of a market buy or sell"""
        self._require_choice("side", params.side, ORDER_TYPES)
        self._require_choice("market_type", params.market_type, MARKET_TYPES)
        self._require_positive("amount", params.amount)
        self._require_token_id("base_token_id", params.base_token_id)
        self._require_token_id("quote_token_id", params.quote_token_id)
        self._require_blockchain_key(params.blockchain_key)
        return self._api.estimate_market(params)

    # =========================================================================
    # Token launch
    # =========================================================================

    def deploy_and_request_create_token(self, params: TokenCreationParams) -> Dict[str, Any]:
        """
        Deploy a token and register it with the platform

        EVM: metadata upload, factory deployment, registration.
        Solana: deployment (metadata written on-chain), registration.
        A failure after deployment leaves the token deployed but unregistered.

        Returns:
            Registration response from POST /tokens
        """
        if not params.token_name or not params.token_symbol:
            raise ValidationError.invalid_field("token_name", "token name and symbol are required")
        if params.token_image:
            validate_image(params.token_image)

        network = self._require_blockchain_key(params.blockchain_key)
        # EVM factories report their own fee on-chain
        creation_fee = network.creation_fee if network.is_solana else None

        if not network.is_solana:
            metadata_url = self._api.upload_metadata(params)
            params = params.with_metadata_url(metadata_url)

        deployment = self._wallet.create_token(
            network.token_factory_contract_address,
            params.token_name,
            params.token_symbol,
            token_creation_fee=creation_fee,
            metadata_url=params.metadata_url or "",
        )
        logger.info(f"Token {params.token_symbol} deployed: {network.transaction_url(deployment.tx_hash)}")

        params = params.with_deployment(deployment.tx_hash, deployment.token_address)
        return self._api.upload_token_data(params)

    # =========================================================================
    # Deposits
    # =========================================================================

    def create_deposit(self, params: DepositParams) -> DepositResult:
        """
        Deposit native currency to the platform deposit address

        Raises:
            ValidationError: Non-positive amount, non-native token id or wrong network
        """
        self._require_positive("amount", params.amount)
        token_id = self._require_token_id("token_id", params.token_id)
        if not token_id.is_native:
            raise ValidationError.unknown_token("token_id", params.token_id)
        network = self._require_blockchain_key(params.blockchain_key)

        tx_hash = self._wallet.deposit(network.deposit_address, params.amount)
        return DepositResult.success(tx_hash)

    def create_deposit_token(self, params: DepositParams) -> DepositResult:
        """
        Deposit an ERC-20 / SPL token to the platform deposit address

        Raises:
            ValidationError: Non-positive amount, token id of another family or wrong network
        """
        self._require_positive("amount", params.amount)
        token_id = self._require_token_id("token_id", params.token_id)
        if token_id.namespace != self._token_namespace:
            raise ValidationError.unknown_token("token_id", params.token_id)
        network = self._require_blockchain_key(params.blockchain_key)

        tx_hash = self._wallet.deposit_token(
            network.deposit_address,
            params.amount,
            token_id.reference,
            token_decimals=params.token_decimals,
        )
        return DepositResult.success(tx_hash)

    # =========================================================================
    # Withdrawals and orders
    # =========================================================================

    def create_withdraw(self, params: WithdrawalParams) -> Dict[str, Any]:
        """Request a withdrawal; user_address defaults to the wallet address"""
        self._require_positive("request_amount", params.request_amount)
        self._require_token_id("token_id", params.token_id)
        if not params.user_address:
            params = replace(params, user_address=self._wallet.address)
        return self._api.create_withdrawal(params)

    def create_order(self, params: OrderParams) -> Dict[str, Any]:
        """
        Place a market order

        Raises:
            ValidationError: Non-positive amount, negative price, past deadline,
                unknown token ids, bad order type or wrong network
        """
        self._require_positive("amount", params.amount)
        price = to_decimal(params.price)
        if price is None or price < 0:
            raise ValidationError.invalid_field("price", f"must be a number >= 0, got {params.price!r}")
        now = int(time.time())
        if not isinstance(params.deadline, int) or params.deadline <= now:
            raise ValidationError.expired_deadline(params.deadline, now)
        self._require_token_id("base_token_id", params.base_token_id)
        self._require_token_id("quote_token_id", params.quote_token_id)
        self._require_choice("order_type", params.order_type, ORDER_TYPES)
        self._require_blockchain_key(params.blockchain_key)

        return self._api.create_order(params)

    # =========================================================================
    # Lifecycle
    # =========================================================================

    def close(self):
        """Close client connections and release resources"""
        if self._owns_api:
            self._api.close()
        if self._owns_wallet:
            self._wallet.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()

    def __repr__(self) -> str:
        return f"FunnyFunSdk(network={self._network_type.value}, address={self._wallet.address})"
