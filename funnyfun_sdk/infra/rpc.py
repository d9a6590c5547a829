"""
JSON-RPC client for Solana

Thin synchronous wrapper over the cluster JSON-RPC interface with:
- Request timeout management
- JSON-RPC error normalization into RpcError
- Signature confirmation polling
"""

from __future__ import annotations

import base64
import logging
import time
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

import httpx

from ..errors import RpcError, ConfigurationError, TransactionError
from ..config import get_config

logger = logging.getLogger(__name__)


@dataclass
class RpcClientConfig:
    """
    RPC client runtime configuration

    Pulls defaults from the global config (funnyfun_sdk.config.SolanaConfig)
    for any value left unset.

    Usage:
        # Use all defaults from environment
        client = RpcClient(endpoint)

        # Override specific settings
        config = RpcClientConfig(timeout_seconds=60, commitment="finalized")
        client = RpcClient(endpoint, config=config)
    """
    timeout_seconds: float = None
    commitment: str = None
    confirmation_timeout: float = None
    poll_interval: float = None

    def __post_init__(self):
        """Apply defaults from global config for any unset values"""
        if self.timeout_seconds is None:
            self.timeout_seconds = get_config().solana.timeout_seconds
        if self.commitment is None:
            self.commitment = get_config().solana.commitment
        if self.confirmation_timeout is None:
            self.confirmation_timeout = get_config().solana.confirmation_timeout
        if self.poll_interval is None:
            self.poll_interval = get_config().solana.confirmation_poll_interval


class RpcClient:
    """
    Solana JSON-RPC client

    Usage:
        rpc = RpcClient("https://api.devnet.solana.com")

        blockhash = rpc.get_latest_blockhash()["blockhash"]
        lamports = rpc.get_minimum_balance_for_rent_exemption(82)

        # Custom RPC call
        result = rpc.call("getSlot", [])
    """

    def __init__(
        self,
        endpoint: str,
        config: Optional[RpcClientConfig] = None,
        http_client: Optional[httpx.Client] = None,
    ):
        """
        Initialize RPC client

        Args:
            endpoint: RPC endpoint URL
            config: RPC configuration options
            http_client: Pre-built httpx client (not closed by this client)
        """
        if not endpoint:
            raise ConfigurationError.missing("rpcUrl")

        self._endpoint = endpoint
        self._config = config or RpcClientConfig()
        self._client: Optional[httpx.Client] = http_client
        self._owns_client = http_client is None
        self._request_id = 0

    @property
    def endpoint(self) -> str:
        return self._endpoint

    @property
    def commitment(self) -> str:
        """Default commitment level"""
        return self._config.commitment

    def _get_client(self) -> httpx.Client:
        """Get or create HTTP client"""
        if self._client is None:
            self._client = httpx.Client(
                timeout=self._config.timeout_seconds,
                headers={"Content-Type": "application/json"},
            )
        return self._client

    def call(
        self,
        method: str,
        params: List[Any],
        timeout: Optional[float] = None,
    ) -> Any:
        """
        Make JSON-RPC call

        Args:
            method: RPC method name
            params: RPC parameters
            timeout: Optional timeout override

        Returns:
            RPC result

        Raises:
            RpcError: On transport failure or JSON-RPC error response
        """
        client = self._get_client()
        self._request_id += 1
        body = {
            "jsonrpc": "2.0",
            "id": self._request_id,
            "method": method,
            "params": params,
        }
        timeout_val = timeout or self._config.timeout_seconds

        logger.debug(f"RPC {method} -> {self._endpoint}")
        try:
            response = client.post(self._endpoint, json=body, timeout=timeout_val)
            response.raise_for_status()
            result = response.json()
        except httpx.TimeoutException:
            raise RpcError.timeout(self._endpoint, timeout_val)
        except httpx.HTTPStatusError as e:
            raise RpcError(
                f"HTTP error {e.response.status_code} from {method}",
                endpoint=self._endpoint,
                original_error=e,
            )
        except httpx.RequestError as e:
            raise RpcError.connection_failed(self._endpoint, e)
        except ValueError as e:
            raise RpcError(
                f"Invalid JSON in {method} response: {e}",
                endpoint=self._endpoint,
                original_error=e,
            )

        if "error" in result:
            error = result["error"]
            error_msg = error.get("message", str(error)) if isinstance(error, dict) else str(error)
            rpc_error = RpcError(f"RPC error: {error_msg}", endpoint=self._endpoint)
            # Preserve RPC error code in details for debugging
            if isinstance(error, dict):
                rpc_error.details["rpc_error_code"] = error.get("code")
                rpc_error.details["rpc_error_data"] = error.get("data")
            raise rpc_error

        return result.get("result")

    def get_account_info(
        self,
        address: str,
        encoding: str = "base64",
        commitment: Optional[str] = None,
    ) -> Optional[Dict[str, Any]]:
        """
        Get account information

        Args:
            address: Account address (base58)
            encoding: Data encoding ("base64", "jsonParsed", etc.)
            commitment: Commitment level

        Returns:
            Account info or None if not found
        """
        params = [
            address,
            {
                "encoding": encoding,
                "commitment": commitment or self.commitment,
            },
        ]
        result = self.call("getAccountInfo", params)
        return result.get("value") if result else None

    def get_latest_blockhash(
        self,
        commitment: Optional[str] = None,
    ) -> Dict[str, Any]:
        """
        Get latest blockhash

        Returns:
            Dict with blockhash and lastValidBlockHeight
        """
        params = [{"commitment": commitment or self.commitment}]
        result = self.call("getLatestBlockhash", params)
        return result.get("value", {}) if result else {}

    def get_minimum_balance_for_rent_exemption(
        self,
        data_length: int,
        commitment: Optional[str] = None,
    ) -> int:
        """Get lamports required to keep an account of data_length bytes rent exempt"""
        params = [data_length, {"commitment": commitment or self.commitment}]
        return int(self.call("getMinimumBalanceForRentExemption", params))

    def send_transaction(
        self,
        transaction: bytes,
        skip_preflight: bool = False,
        preflight_commitment: Optional[str] = None,
    ) -> str:
        """
        Send signed transaction

        Args:
            transaction: Signed transaction bytes
            skip_preflight: Skip preflight simulation
            preflight_commitment: Preflight commitment level

        Returns:
            Transaction signature (base58)
        """
        tx_data = base64.b64encode(transaction).decode("ascii")

        params = [
            tx_data,
            {
                "skipPreflight": skip_preflight,
                "preflightCommitment": preflight_commitment or self.commitment,
                "encoding": "base64",
            },
        ]
        return self.call("sendTransaction", params)

    def get_signature_status(self, signature: str) -> Optional[Dict[str, Any]]:
        """Get the status of one signature, None when the cluster has not seen it"""
        result = self.call("getSignatureStatuses", [[signature]])
        if result and result.get("value"):
            return result["value"][0]
        return None

    def confirm_transaction(
        self,
        signature: str,
        timeout_seconds: Optional[float] = None,
    ) -> Optional[bool]:
        """
        Wait for transaction confirmation

        Args:
            signature: Transaction signature
            timeout_seconds: Max wait time (defaults to config)

        Returns:
            True if confirmed successfully
            None if timeout (transaction never landed or status unknown)

        Raises:
            TransactionError: If the transaction landed with an error; the
                cluster's error object is carried in the message and details
        """
        timeout_seconds = timeout_seconds or self._config.confirmation_timeout
        start_time = time.time()
        last_status = None

        while time.time() - start_time < timeout_seconds:
            try:
                status = self.get_signature_status(signature)
            except RpcError as e:
                logger.debug(f"Error checking transaction status: {e}")
                status = None

            if status:
                last_status = status
                if status.get("err"):
                    logger.warning(f"Transaction {signature} failed on-chain: {status['err']}")
                    raise TransactionError.confirmation_failed(signature, status["err"])
                if status.get("confirmationStatus") in ("confirmed", "finalized"):
                    return True

            time.sleep(self._config.poll_interval)

        if last_status is None:
            logger.warning(f"Transaction {signature} was never seen on chain (dropped/expired)")
        else:
            logger.warning(
                f"Transaction {signature} timeout. Last status: "
                f"{last_status.get('confirmationStatus', 'unknown')}"
            )
        return None

    def close(self):
        """Close HTTP client when owned"""
        if self._client and self._owns_client:
            self._client.close()
        self._client = None

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
