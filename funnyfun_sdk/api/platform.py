"""
Platform REST API client

One method per platform resource, each issuing exactly one HTTP request
through an injected (or owned) httpx.Client.
"""

import logging
from typing import Any, Dict, List, Optional, Union

import httpx

from ..config import get_config
from ..errors import PlatformApiError
from ..types import (
    NetworkInfo,
    NetworkType,
    ServerStatus,
    TokenCreationParams,
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
from .image import validate_image

logger = logging.getLogger(__name__)

Query = Union[PageQuery, TokenQuery, DepositQuery, WithdrawalQuery, MarketQuery, TransactionQuery, TradeQuery]


class PlatformAPI:
    """
    FunnyFun platform REST client

    Usage:
        api = PlatformAPI("https://app.nusabyte.com/api/v1")

        nonce = api.nonce(address, NetworkType.EVM)
        api.set_signature_auth(signature)
        networks = api.blockchains()

        # Share or mock transport by injecting the client
        api = PlatformAPI(base_url, http_client=httpx.Client(transport=transport))
    """

    def __init__(
        self,
        base_url: str,
        http_client: Optional[httpx.Client] = None,
        timeout: Optional[float] = None,
        status_timeout: Optional[float] = None,
    ):
        """
        Initialize platform client

        Args:
            base_url: API base URL including feature and version (".../api/v1")
            http_client: Pre-built httpx client (not closed by this client)
            timeout: Request timeout in seconds
            status_timeout: Liveness probe timeout in seconds
        """
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout or get_config().platform.timeout
        self._status_timeout = status_timeout or get_config().platform.status_timeout
        self._owns_client = http_client is None
        self._client = http_client or httpx.Client(
            timeout=self._timeout,
            headers={
                "Content-Type": "application/json",
                "Accept": "application/json",
            },
        )

    @property
    def base_url(self) -> str:
        return self._base_url

    @property
    def client(self) -> httpx.Client:
        return self._client

    def _url(self, path: str) -> str:
        return f"{self._base_url}{path}"

    @staticmethod
    def _error_reason(response: httpx.Response) -> str:
        """Server supplied message, falling back to the status reason"""
        try:
            body = response.json()
        except ValueError:
            body = None
        if isinstance(body, dict):
            for key in ("message", "error", "description"):
                value = body.get(key)
                if value:
                    return value if isinstance(value, str) else str(value)
        text = response.text[:500] if response.text else ""
        return text or response.reason_phrase or f"HTTP {response.status_code}"

    def _request(
        self,
        method: str,
        path: str,
        params: Optional[Dict[str, Any]] = None,
        json_data: Optional[Dict[str, Any]] = None,
    ) -> Any:
        """
        Make one HTTP request and decode the JSON body

        Raises:
            PlatformApiError: On transport failure, non-2xx status or invalid JSON
        """
        logger.debug(f"{method} {path}")
        try:
            response = self._client.request(
                method,
                self._url(path),
                params=params,
                json=json_data,
                timeout=self._timeout,
            )
        except httpx.TimeoutException as e:
            logger.warning(f"Platform API timeout: {method} {path}")
            raise PlatformApiError.timeout(path, e)
        except httpx.RequestError as e:
            logger.warning(f"Platform API request error: {method} {path}: {e}")
            raise PlatformApiError.connection_failed(path, e)

        if not response.is_success:
            reason = self._error_reason(response)
            logger.warning(f"Platform API error: {method} {path} -> {response.status_code} {reason}")
            raise PlatformApiError.http_status(path, response.status_code, reason)

        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as e:
            raise PlatformApiError.invalid_response(path, f"body is not JSON ({e})")

    @staticmethod
    def _unwrap_list(data: Any) -> Any:
        """Unwrap {"data": [...]} envelopes of paginated endpoints"""
        if isinstance(data, dict) and isinstance(data.get("data"), list):
            return data["data"]
        return data

    def _get_list(self, path: str, query: Optional[Query]) -> Any:
        params = query.to_params() if query is not None else None
        return self._unwrap_list(self._request("GET", path, params=params))

    # =========================================================================
    # Auth
    # =========================================================================

    def set_signature_auth(self, signature: str) -> None:
        """Send `Authorization: Bearer <signature>` on every later request"""
        self._client.headers["Authorization"] = f"Bearer {signature}"

    def clear_signature_auth(self) -> None:
        self._client.headers.pop("Authorization", None)

    def check_status_server(self, url: Optional[str] = None) -> ServerStatus:
        """
        Probe server liveness

        Sends HEAD (GET when the server answers 405) with the short status
        timeout. Any status below 500 counts as up. Never raises.

        Args:
            url: URL to probe (defaults to the API base URL)

        Returns:
            ServerStatus
        """
        url = url or self._base_url
        try:
            response = self._client.head(url, timeout=self._status_timeout)
            if response.status_code == 405:
                response = self._client.get(url, timeout=self._status_timeout)
        except httpx.HTTPError as e:
            logger.warning(f"Server probe failed for {url}: {e}")
            return ServerStatus(url=url, is_up=False, error=str(e) or e.__class__.__name__)

        is_up = response.status_code < 500
        if not is_up:
            logger.warning(f"Server probe for {url} returned {response.status_code}")
        return ServerStatus(
            url=url,
            is_up=is_up,
            status_code=response.status_code,
            error=None if is_up else (response.reason_phrase or f"HTTP {response.status_code}"),
        )

    def nonce(self, address: str, network: Union[NetworkType, str]) -> str:
        """
        Request a sign-in nonce

        Args:
            address: Wallet address
            network: Wallet family ("evm" or "solana")

        Returns:
            Nonce string
        """
        network_value = network.value if isinstance(network, NetworkType) else str(network)
        data = self._request(
            "POST",
            "/auth-nonce",
            json_data={"userAddress": address, "blockchainType": network_value},
        )
        if not isinstance(data, dict) or data.get("nonce") in (None, ""):
            raise PlatformApiError.invalid_response("/auth-nonce", "missing nonce")
        return str(data["nonce"])

    def auth_check(self) -> Dict[str, Any]:
        return self._request("GET", "/auth-check") or {}

    # =========================================================================
    # Reference data
    # =========================================================================

    def blockchains(self) -> List[NetworkInfo]:
        """Blockchain networks supported by the platform"""
        data = self._unwrap_list(self._request("GET", "/blockchains"))
        if not isinstance(data, list):
            raise PlatformApiError.invalid_response("/blockchains", "expected a list of networks")
        return [NetworkInfo.from_dict(item) for item in data if isinstance(item, dict)]

    def app_config(self) -> Dict[str, Any]:
        return self._request("GET", "/app-config") or {}

    # =========================================================================
    # Tokens
    # =========================================================================

    def _payload_with_image(self, params: TokenCreationParams) -> Dict[str, Any]:
        payload = params.to_payload()
        if params.token_image:
            payload["tokenImage"] = validate_image(params.token_image).data_uri
        return payload

    def upload_metadata(self, params: TokenCreationParams) -> str:
        """
        Upload token metadata

        The embedded image is validated before the request is sent.

        Returns:
            Metadata URL
        """
        payload = self._payload_with_image(params)
        data = self._request("POST", "/token-metadata", json_data=payload)
        if isinstance(data, str) and data:
            return data
        if isinstance(data, dict):
            for key in ("url", "metadataUrl", "uri"):
                if data.get(key):
                    return str(data[key])
        raise PlatformApiError.invalid_response("/token-metadata", "missing metadata url")

    def upload_token_data(self, params: TokenCreationParams) -> Dict[str, Any]:
        """Register a deployed token with the platform"""
        payload = self._payload_with_image(params)
        return self._request("POST", "/tokens", json_data=payload) or {}

    def tokens(self, query: Optional[TokenQuery] = None) -> Any:
        return self._get_list("/tokens", query)

    # =========================================================================
    # Accounts, deposits, withdrawals
    # =========================================================================

    def accounts(self, query: Optional[PageQuery] = None) -> Any:
        """Platform balances of the signed-in user"""
        return self._get_list("/accounts", query)

    def deposits(self, query: Optional[DepositQuery] = None) -> Any:
        return self._get_list("/deposits", query)

    def create_withdrawal(self, params: WithdrawalParams) -> Dict[str, Any]:
        return self._request("POST", "/withdrawals", json_data=params.to_payload()) or {}

    def withdrawals(self, query: Optional[WithdrawalQuery] = None) -> Any:
        return self._get_list("/withdrawals", query)

    # =========================================================================
    # Markets and trading
    # =========================================================================

    def markets(self, query: Optional[MarketQuery] = None) -> Any:
        return self._get_list("/markets", query)

    def transactions(self, query: Optional[TransactionQuery] = None) -> Any:
        return self._get_list("/transactions", query)

    def trades(self, query: Optional[TradeQuery] = None) -> Any:
        return self._get_list("/trades", query)

    def create_order(self, params: OrderParams) -> Dict[str, Any]:
        return self._request("POST", "/orders", json_data=params.to_payload()) or {}

    def estimate_market(self, params: EstimateParams) -> Any:
        """Estimate price or amount: POST /market-<side>-<market_type>"""
        return self._request("POST", params.path, json_data=params.to_payload())

    def close(self):
        """Close HTTP client when owned"""
        if self._owns_client:
            self._client.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
