"""
Test Errors Module

Tests for funnyfun_sdk.errors package.
"""

import sys
from pathlib import Path

# Add parent to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent.parent))


def test_error_code():
    """Test ErrorCode enum"""
    from funnyfun_sdk.errors import ErrorCode

    print("Testing ErrorCode...")

    assert ErrorCode.API_CONNECTION_FAILED.value == "1001"
    assert ErrorCode.TX_SEND_FAILED.value == "2001"
    assert ErrorCode.AUTH_SERVER_DOWN.value == "3001"
    assert ErrorCode.NETWORK_NOT_FOUND.value == "4001"
    assert ErrorCode.INVALID_AMOUNT.value == "8001"
    assert ErrorCode.CONFIG_MISSING.value == "9002"

    print("  ErrorCode: PASSED")


def test_base_error():
    """Test FunnyFunError base class"""
    from funnyfun_sdk.errors import FunnyFunError, ErrorCode

    print("Testing FunnyFunError...")

    cause = ValueError("boom")
    error = FunnyFunError("Test error", ErrorCode.API_HTTP_ERROR, original_error=cause)

    # __str__ returns "[code] message" format
    assert str(error) == "[1003] Test error"
    assert error.message == "Test error"
    assert error.original_error is cause
    assert error.details == {}

    print("  FunnyFunError: PASSED")


def test_configuration_error():
    """Test ConfigurationError constructors"""
    from funnyfun_sdk.errors import ConfigurationError, FunnyFunError, ErrorCode

    print("Testing ConfigurationError...")

    missing = ConfigurationError.missing("serverUrl")
    assert missing.code == ErrorCode.CONFIG_MISSING
    assert missing.message == "serverUrl is required."
    assert isinstance(missing, FunnyFunError)

    invalid = ConfigurationError.invalid("chainId", "expected an integer")
    assert invalid.code == ErrorCode.CONFIG_INVALID
    assert "chainId" in invalid.message

    print("  ConfigurationError: PASSED")


def test_validation_errors():
    """Test ValidationError constructors carry the offending field"""
    from funnyfun_sdk.errors import ValidationError, ImageValidationError, ErrorCode

    print("Testing ValidationError...")

    error = ValidationError.invalid_amount("amount", 0)
    assert error.code == ErrorCode.INVALID_AMOUNT
    assert error.field == "amount"
    assert error.details == {"field": "amount"}

    mismatch = ValidationError.mismatched_blockchain("eip155:97", "eip155:56")
    assert mismatch.code == ErrorCode.BLOCKCHAIN_MISMATCH
    assert "eip155:56" in mismatch.message

    assert ValidationError.unknown_token("token_id", "foo").code == ErrorCode.UNKNOWN_TOKEN
    assert ValidationError.expired_deadline(1, 2).code == ErrorCode.DEADLINE_EXPIRED

    image = ImageValidationError.too_large(3_000_000, 2_000_000)
    assert isinstance(image, ValidationError)
    assert image.code == ErrorCode.INVALID_IMAGE
    assert image.field == "token_image"

    unsupported = ImageValidationError.unsupported_type(None, {"image/png"})
    assert "unknown" in unsupported.message

    print("  ValidationError: PASSED")


def test_platform_api_error():
    """Test PlatformApiError constructors"""
    from funnyfun_sdk.errors import PlatformApiError, ErrorCode

    print("Testing PlatformApiError...")

    error = PlatformApiError.http_status("/tokens", 400, "bad request")
    assert error.code == ErrorCode.API_HTTP_ERROR
    assert error.status_code == 400
    assert error.path == "/tokens"
    assert error.details == {"status_code": 400, "path": "/tokens"}

    cause = RuntimeError("refused")
    connection = PlatformApiError.connection_failed("/blockchains", cause)
    assert connection.code == ErrorCode.API_CONNECTION_FAILED
    assert connection.original_error is cause

    print("  PlatformApiError: PASSED")


def test_authentication_error():
    """Test AuthenticationError wraps the failing step"""
    from funnyfun_sdk.errors import AuthenticationError, PlatformApiError, ErrorCode

    print("Testing AuthenticationError...")

    down = AuthenticationError.server_down("https://app.example.com/api/v1", None)
    assert down.code == ErrorCode.AUTH_SERVER_DOWN
    assert "unknown error" in down.message

    cause = PlatformApiError.http_status("/auth-check", 401, "unauthorized")
    failed = AuthenticationError.failed(cause)
    assert failed.code == ErrorCode.AUTH_FAILED
    assert failed.original_error is cause

    print("  AuthenticationError: PASSED")


def test_network_not_found():
    """Test NetworkNotFound message and details"""
    from funnyfun_sdk.errors import NetworkNotFound, ErrorCode

    print("Testing NetworkNotFound...")

    error = NetworkNotFound("evm", 97)
    assert error.code == ErrorCode.NETWORK_NOT_FOUND
    assert "chain id 97" in error.message
    assert error.details == {"network": "evm", "chain_id": 97}

    assert "chain id" not in NetworkNotFound("solana").message

    print("  NetworkNotFound: PASSED")


def test_rpc_error():
    """Test RpcError exception"""
    from funnyfun_sdk.errors import RpcError, ErrorCode

    print("Testing RpcError...")

    error1 = RpcError.connection_failed("https://rpc.example.com")
    assert error1.code == ErrorCode.RPC_CONNECTION_FAILED
    assert error1.endpoint == "https://rpc.example.com"

    error2 = RpcError.timeout("https://rpc.example.com", 30.0)
    assert error2.code == ErrorCode.RPC_TIMEOUT
    assert "30.0" in error2.message

    print("  RpcError: PASSED")


def test_transaction_error():
    """Test TransactionError constructors"""
    from funnyfun_sdk.errors import TransactionError, ErrorCode

    print("Testing TransactionError...")

    failed = TransactionError.confirmation_failed("sig123", "InstructionError")
    assert failed.code == ErrorCode.TX_CONFIRMATION_FAILED
    assert failed.signature == "sig123"
    assert failed.details["signature"] == "sig123"

    structured = TransactionError.confirmation_failed("sig123", {"InstructionError": [2, {"Custom": 6001}]})
    assert '{"InstructionError": [2, {"Custom": 6001}]}' in structured.message
    assert structured.details["error"] == {"InstructionError": [2, {"Custom": 6001}]}
    assert structured.details["signature"] == "sig123"

    waited = TransactionError.receipt_failed("0xabc", ValueError("rpc down"))
    assert waited.code == ErrorCode.TX_CONFIRMATION_FAILED
    assert "rpc down" in waited.message
    assert isinstance(waited.original_error, ValueError)

    timeout = TransactionError.confirmation_timeout("sig123", 60)
    assert timeout.code == ErrorCode.TX_CONFIRMATION_TIMEOUT

    reverted = TransactionError.reverted("0xabc")
    assert reverted.code == ErrorCode.TX_REVERTED

    print("  TransactionError: PASSED")


def test_error_inheritance():
    """Test every error derives from FunnyFunError"""
    from funnyfun_sdk.errors import (
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

    print("Testing error inheritance...")

    for cls in (
        ConfigurationError,
        ValidationError,
        ImageValidationError,
        PlatformApiError,
        AuthenticationError,
        NetworkNotFound,
        RpcError,
        TransactionError,
        SignerError,
    ):
        assert issubclass(cls, FunnyFunError), cls.__name__

    print("  Error inheritance: PASSED")
