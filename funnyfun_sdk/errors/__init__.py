"""
Error definitions for the FunnyFun SDK
"""

from .exceptions import (
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

__all__ = [
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
]
