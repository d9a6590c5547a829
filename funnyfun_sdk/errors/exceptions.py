"""
Exception definitions for the FunnyFun SDK
"""

import json
from enum import Enum
from typing import Any, Optional


class ErrorCode(Enum):
    """
    Unified error codes for SDK operations

    1xxx - Platform API errors
    2xxx - Transaction errors
    3xxx - Authentication errors
    4xxx - Network selection errors
    5xxx - Chain RPC errors
    6xxx - Signer errors
    8xxx - Local validation errors
    9xxx - Configuration errors
    """
    # Platform API errors
    API_CONNECTION_FAILED = "1001"
    API_TIMEOUT = "1002"
    API_HTTP_ERROR = "1003"
    API_INVALID_RESPONSE = "1004"

    # Transaction errors
    TX_SEND_FAILED = "2001"
    TX_CONFIRMATION_FAILED = "2002"
    TX_REVERTED = "2003"
    TX_CONFIRMATION_TIMEOUT = "2004"

    # Authentication errors
    AUTH_SERVER_DOWN = "3001"
    AUTH_FAILED = "3002"

    # Network selection errors
    NETWORK_NOT_FOUND = "4001"

    # RPC errors
    RPC_CONNECTION_FAILED = "5001"
    RPC_TIMEOUT = "5002"
    RPC_ERROR_RESPONSE = "5003"

    # Signer errors
    SIGNER_FAILED = "6001"

    # Validation errors
    INVALID_AMOUNT = "8001"
    BLOCKCHAIN_MISMATCH = "8002"
    UNKNOWN_TOKEN = "8003"
    DEADLINE_EXPIRED = "8004"
    INVALID_FIELD = "8005"
    INVALID_IMAGE = "8006"

    # Configuration errors
    CONFIG_INVALID = "9001"
    CONFIG_MISSING = "9002"


class FunnyFunError(Exception):
    """
    Base exception for all SDK errors

    Attributes:
        message: Human-readable error message
        code: Error code for programmatic handling
        original_error: The underlying exception if any
        details: Additional error context
    """

    def __init__(
        self,
        message: str,
        code: ErrorCode,
        original_error: Optional[Exception] = None,
        details: Optional[dict] = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.original_error = original_error
        self.details = details or {}

    def __str__(self) -> str:
        return f"[{self.code.value}] {self.message}"

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(code={self.code.value}, message={self.message!r})"


class ConfigurationError(FunnyFunError):
    """
    Configuration-related errors, raised at construction time

    Raised when:
    - A required credential (server url, private key, chain id, rpc) is missing
    - A configuration value cannot be parsed
    """

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.CONFIG_INVALID,
    ):
        super().__init__(message, code)

    @classmethod
    def missing(cls, param: str) -> "ConfigurationError":
        return cls(f"{param} is required.", ErrorCode.CONFIG_MISSING)

    @classmethod
    def invalid(cls, param: str, reason: str) -> "ConfigurationError":
        return cls(f"Invalid configuration '{param}': {reason}", ErrorCode.CONFIG_INVALID)


class ValidationError(FunnyFunError):
    """
    Local input validation errors

    Always raised before any HTTP or RPC call is issued.
    """

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.INVALID_FIELD,
        field: Optional[str] = None,
    ):
        super().__init__(message, code, details={"field": field} if field else None)
        self.field = field

    @classmethod
    def invalid_amount(cls, field: str, value: Any) -> "ValidationError":
        return cls(
            f"{field} must be a number greater than 0, got {value!r}",
            ErrorCode.INVALID_AMOUNT,
            field=field,
        )

    @classmethod
    def mismatched_blockchain(cls, expected: str, actual: str) -> "ValidationError":
        return cls(
            f"blockchainKey {actual!r} does not match active network {expected!r}",
            ErrorCode.BLOCKCHAIN_MISMATCH,
            field="blockchain_key",
        )

    @classmethod
    def unknown_token(cls, field: str, token_id: Any) -> "ValidationError":
        return cls(
            f"{field} {token_id!r} is not a known token id",
            ErrorCode.UNKNOWN_TOKEN,
            field=field,
        )

    @classmethod
    def expired_deadline(cls, deadline: int, now: int) -> "ValidationError":
        return cls(
            f"deadline {deadline} is not in the future (now={now})",
            ErrorCode.DEADLINE_EXPIRED,
            field="deadline",
        )

    @classmethod
    def invalid_field(cls, field: str, reason: str) -> "ValidationError":
        return cls(f"Invalid {field}: {reason}", ErrorCode.INVALID_FIELD, field=field)


class ImageValidationError(ValidationError):
    """
    Embedded token image rejected before upload

    Raised when:
    - The payload is not valid base64
    - The decoded image exceeds the size ceiling
    - The detected MIME type is not allowed
    """

    def __init__(self, message: str):
        super().__init__(message, ErrorCode.INVALID_IMAGE, field="token_image")

    @classmethod
    def invalid_encoding(cls, reason: str) -> "ImageValidationError":
        return cls(f"Invalid image encoding: {reason}")

    @classmethod
    def too_large(cls, size: int, max_bytes: int) -> "ImageValidationError":
        return cls(f"Image is too large: {size} bytes (max {max_bytes} bytes)")

    @classmethod
    def unsupported_type(cls, mime_type: Optional[str], allowed) -> "ImageValidationError":
        return cls(
            f"Unsupported image type: {mime_type or 'unknown'} "
            f"(allowed: {', '.join(sorted(allowed))})"
        )


class PlatformApiError(FunnyFunError):
    """
    Platform REST API errors

    Raised when:
    - The server answers with a non-2xx status
    - The request cannot be sent or times out
    - The response body is not the expected JSON
    """

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.API_HTTP_ERROR,
        status_code: Optional[int] = None,
        path: Optional[str] = None,
        original_error: Optional[Exception] = None,
    ):
        super().__init__(
            message,
            code,
            original_error=original_error,
            details={"status_code": status_code, "path": path},
        )
        self.status_code = status_code
        self.path = path

    @classmethod
    def http_status(cls, path: str, status_code: int, reason: str) -> "PlatformApiError":
        return cls(
            f"{path} failed with HTTP {status_code}: {reason}",
            ErrorCode.API_HTTP_ERROR,
            status_code=status_code,
            path=path,
        )

    @classmethod
    def connection_failed(cls, path: str, error: Exception) -> "PlatformApiError":
        return cls(
            f"{path} request failed: {error}",
            ErrorCode.API_CONNECTION_FAILED,
            path=path,
            original_error=error,
        )

    @classmethod
    def timeout(cls, path: str, error: Exception) -> "PlatformApiError":
        return cls(
            f"{path} request timed out: {error}",
            ErrorCode.API_TIMEOUT,
            path=path,
            original_error=error,
        )

    @classmethod
    def invalid_response(cls, path: str, reason: str) -> "PlatformApiError":
        return cls(
            f"{path} returned an invalid response: {reason}",
            ErrorCode.API_INVALID_RESPONSE,
            path=path,
        )


class AuthenticationError(FunnyFunError):
    """
    Wallet sign-in errors

    Raised when the liveness probe, nonce request, signing, or auth check
    of the sign-in chain fails.
    """

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.AUTH_FAILED,
        original_error: Optional[Exception] = None,
    ):
        super().__init__(message, code, original_error=original_error)

    @classmethod
    def server_down(cls, url: str, reason: Optional[str]) -> "AuthenticationError":
        return cls(
            f"Platform server {url} is not reachable: {reason or 'unknown error'}",
            ErrorCode.AUTH_SERVER_DOWN,
        )

    @classmethod
    def failed(cls, error: Exception) -> "AuthenticationError":
        return cls(f"Sign-in failed: {error}", ErrorCode.AUTH_FAILED, original_error=error)


class NetworkNotFound(FunnyFunError):
    """No blockchain network record matches the wallet's network type and chain id"""

    def __init__(self, network: str, chain_id: Optional[int] = None):
        target = f"{network} (chain id {chain_id})" if chain_id is not None else network
        super().__init__(
            f"No blockchain network available for {target}",
            ErrorCode.NETWORK_NOT_FOUND,
            details={"network": network, "chain_id": chain_id},
        )
        self.network = network
        self.chain_id = chain_id


class RpcError(FunnyFunError):
    """
    Chain JSON-RPC errors

    Raised when:
    - Connection to the RPC endpoint fails or times out
    - The endpoint answers with a JSON-RPC error object
    """

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.RPC_CONNECTION_FAILED,
        original_error: Optional[Exception] = None,
        endpoint: Optional[str] = None,
    ):
        super().__init__(
            message,
            code,
            original_error=original_error,
            details={"endpoint": endpoint} if endpoint else None,
        )
        self.endpoint = endpoint

    @classmethod
    def connection_failed(cls, endpoint: str, error: Optional[Exception] = None) -> "RpcError":
        return cls(
            f"Failed to connect to RPC endpoint {endpoint}: {error}",
            ErrorCode.RPC_CONNECTION_FAILED,
            original_error=error,
            endpoint=endpoint,
        )

    @classmethod
    def timeout(cls, endpoint: str, timeout_seconds: float) -> "RpcError":
        return cls(
            f"RPC request timed out after {timeout_seconds}s",
            ErrorCode.RPC_TIMEOUT,
            endpoint=endpoint,
        )


class TransactionError(FunnyFunError):
    """
    On-chain transaction errors

    Raised when:
    - Sending a transaction fails (simulation, RPC, contract revert on estimate)
    - The transaction lands with an error or reverts
    - Confirmation does not arrive in time
    """

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.TX_SEND_FAILED,
        signature: Optional[str] = None,
        original_error: Optional[Exception] = None,
        details: Optional[dict] = None,
    ):
        super().__init__(
            message,
            code,
            original_error=original_error,
            details={"signature": signature, **(details or {})},
        )
        self.signature = signature

    @classmethod
    def send_failed(cls, error: Any, original_error: Optional[Exception] = None) -> "TransactionError":
        return cls(
            f"Failed to send transaction: {error}",
            ErrorCode.TX_SEND_FAILED,
            original_error=original_error,
        )

    @classmethod
    def confirmation_failed(cls, signature: str, error: Any) -> "TransactionError":
        """On-chain error as reported by the cluster, kept verbatim in details"""
        reason = error if isinstance(error, str) else json.dumps(error, default=str)
        return cls(
            f"Transaction {signature} failed on-chain: {reason}",
            ErrorCode.TX_CONFIRMATION_FAILED,
            signature=signature,
            details={"error": error},
        )

    @classmethod
    def receipt_failed(cls, tx_hash: str, error: Exception) -> "TransactionError":
        return cls(
            f"Waiting for receipt of {tx_hash} failed: {error}",
            ErrorCode.TX_CONFIRMATION_FAILED,
            signature=tx_hash,
            original_error=error,
        )

    @classmethod
    def confirmation_timeout(cls, signature: str, timeout_seconds: float) -> "TransactionError":
        return cls(
            f"Transaction {signature} was not confirmed within {timeout_seconds}s",
            ErrorCode.TX_CONFIRMATION_TIMEOUT,
            signature=signature,
        )

    @classmethod
    def reverted(cls, tx_hash: str) -> "TransactionError":
        return cls(
            f"Transaction {tx_hash} reverted",
            ErrorCode.TX_REVERTED,
            signature=tx_hash,
        )


class SignerError(FunnyFunError):
    """Signing-related errors"""

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.SIGNER_FAILED,
        original_error: Optional[Exception] = None,
    ):
        super().__init__(message, code, original_error=original_error)

    @classmethod
    def failed(cls, reason: Any, original_error: Optional[Exception] = None) -> "SignerError":
        return cls(f"Signing failed: {reason}", ErrorCode.SIGNER_FAILED, original_error=original_error)
