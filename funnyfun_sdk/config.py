"""
Configuration management for the FunnyFun SDK

Loads settings from environment variables and .env file.
Includes logging configuration with rotating file output.
"""

import os
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, List, Tuple

from dotenv import load_dotenv

from .constants import (
    DEFAULT_BASE_ORIGIN,
    DEFAULT_FEATURE,
    DEFAULT_VERSION,
    DEFAULT_TOKEN_SUPPLY,
    DEFAULT_TOKEN_DECIMALS,
)


def _load_env_file():
    """Load .env file from project root"""
    current = Path(__file__).parent.parent  # funnyfun_sdk package parent
    env_file = current / ".env"

    if env_file.exists():
        load_dotenv(env_file)


# Load .env on module import
_load_env_file()


def _get_env(key: str, default: Optional[str] = "") -> Optional[str]:
    """Get environment variable with default"""
    value = os.getenv(key)
    if value is None:
        return default
    return value


def _get_env_float(key: str, default: float) -> float:
    """Get environment variable as float"""
    value = os.getenv(key)
    if value is None:
        return default
    try:
        return float(value)
    except ValueError:
        logging.getLogger(__name__).warning(
            f"Invalid float value for {key}='{value}', using default={default}"
        )
        return default


def _get_env_int(key: str, default: int) -> int:
    """Get environment variable as int"""
    value = os.getenv(key)
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        logging.getLogger(__name__).warning(
            f"Invalid int value for {key}='{value}', using default={default}"
        )
        return default


def _get_env_optional_int(key: str) -> Optional[int]:
    """Get environment variable as int, None when unset or invalid"""
    value = os.getenv(key)
    if not value:
        return None
    try:
        return int(value)
    except ValueError:
        logging.getLogger(__name__).warning(f"Invalid int value for {key}='{value}', ignoring")
        return None


def _get_env_bool(key: str, default: bool) -> bool:
    """Get environment variable as bool"""
    value = os.getenv(key)
    if value is None:
        return default
    return value.lower() in ("true", "1", "yes", "on")


def _get_env_list(key: str, default: Tuple[str, ...]) -> Tuple[str, ...]:
    """Get comma separated environment variable as tuple"""
    value = os.getenv(key)
    if not value:
        return default
    return tuple(item.strip() for item in value.split(",") if item.strip())


@dataclass
class PlatformConfig:
    """Platform REST API configuration"""
    server_url: str = field(default_factory=lambda: _get_env("FUNNYFUN_SERVER_URL", DEFAULT_BASE_ORIGIN))
    api_feature: str = field(default_factory=lambda: _get_env("FUNNYFUN_API_FEATURE", DEFAULT_FEATURE))
    api_version: str = field(default_factory=lambda: _get_env("FUNNYFUN_API_VERSION", DEFAULT_VERSION))
    timeout: float = field(default_factory=lambda: _get_env_float("FUNNYFUN_HTTP_TIMEOUT", 30.0))
    # Liveness probe runs before sign-in and must fail fast
    status_timeout: float = field(default_factory=lambda: _get_env_float("FUNNYFUN_STATUS_TIMEOUT", 5.0))


@dataclass
class EvmConfig:
    """EVM chain configuration"""
    rpc_url: str = field(default_factory=lambda: _get_env("EVM_RPC_URL", ""))
    chain_id: Optional[int] = field(default_factory=lambda: _get_env_optional_int("EVM_CHAIN_ID"))
    rpc_timeout: int = field(default_factory=lambda: _get_env_int("EVM_RPC_TIMEOUT", 30))
    receipt_timeout: int = field(default_factory=lambda: _get_env_int("EVM_RECEIPT_TIMEOUT", 120))
    # Multiplier applied to gas estimates
    gas_limit_multiplier: float = field(default_factory=lambda: _get_env_float("EVM_GAS_LIMIT_MULTIPLIER", 1.2))


@dataclass
class SolanaConfig:
    """Solana cluster and transaction configuration"""
    rpc_url: str = field(default_factory=lambda: _get_env("SOLANA_RPC_URL", ""))
    cluster: str = field(default_factory=lambda: _get_env("SOLANA_CLUSTER", ""))
    commitment: str = field(default_factory=lambda: _get_env("SOLANA_COMMITMENT", "confirmed"))
    timeout_seconds: float = field(default_factory=lambda: _get_env_float("SOLANA_RPC_TIMEOUT", 30.0))
    confirmation_timeout: float = field(default_factory=lambda: _get_env_float("SOLANA_CONFIRMATION_TIMEOUT", 60.0))
    confirmation_poll_interval: float = field(default_factory=lambda: _get_env_float("SOLANA_CONFIRMATION_POLL", 1.0))
    # Token creation packs ten instructions including metadata creation
    compute_units: int = field(default_factory=lambda: _get_env_int("SOLANA_COMPUTE_UNITS", 300_000))
    # 0 disables the priority fee instruction
    compute_unit_price: int = field(default_factory=lambda: _get_env_int("SOLANA_COMPUTE_UNIT_PRICE", 0))
    skip_preflight: bool = field(default_factory=lambda: _get_env_bool("SOLANA_SKIP_PREFLIGHT", False))


@dataclass
class TokenConfig:
    """Token creation and metadata upload defaults"""
    default_supply: int = field(default_factory=lambda: _get_env_int("TOKEN_DEFAULT_SUPPLY", DEFAULT_TOKEN_SUPPLY))
    decimals: int = field(default_factory=lambda: _get_env_int("TOKEN_DECIMALS", DEFAULT_TOKEN_DECIMALS))
    image_max_bytes: int = field(default_factory=lambda: _get_env_int("TOKEN_IMAGE_MAX_BYTES", 2 * 1024 * 1024))
    image_types: Tuple[str, ...] = field(default_factory=lambda: _get_env_list(
        "TOKEN_IMAGE_TYPES",
        ("image/png", "image/jpeg", "image/gif", "image/webp"),
    ))


def _get_default_log_path() -> str:
    """Get default log file path under funnyfun_sdk/log/ with UTC timestamp"""
    from datetime import datetime, timezone
    timestamp = datetime.now(timezone.utc).strftime("%Y%m%d_%H%M%S")
    log_dir = Path(__file__).parent / "log"
    return str(log_dir / f"funnyfun_sdk_{timestamp}.log")


@dataclass
class LoggingConfig:
    """
    Logging configuration with rotating file output.

    Environment variables:
        LOG_FILE: Path to log file (empty disables file output)
        LOG_LEVEL: DEBUG, INFO, WARNING, ERROR, CRITICAL (default: INFO)
        LOG_FORMAT: Custom log format string
        LOG_CONSOLE: Enable console output (default: true)
        LOG_MAX_BYTES: Max log file size before rotation (default: 10MB)
        LOG_BACKUP_COUNT: Number of backup files to keep (default: 5)
    """
    log_file: str = field(default_factory=lambda: _get_env("LOG_FILE", ""))
    log_level: str = field(default_factory=lambda: _get_env("LOG_LEVEL", "INFO"))
    log_format: str = field(default_factory=lambda: _get_env(
        "LOG_FORMAT",
        "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    ))
    console_output: bool = field(default_factory=lambda: _get_env_bool("LOG_CONSOLE", True))
    max_bytes: int = field(default_factory=lambda: _get_env_int("LOG_MAX_BYTES", 10 * 1024 * 1024))  # 10MB
    backup_count: int = field(default_factory=lambda: _get_env_int("LOG_BACKUP_COUNT", 5))

    @property
    def level(self) -> int:
        """Get numeric log level"""
        return getattr(logging, self.log_level.upper(), logging.INFO)


@dataclass
class Config:
    """
    Main configuration container

    Loads all settings from environment variables and .env file.

    Usage:
        from funnyfun_sdk.config import config

        print(config.platform.server_url)
        print(config.solana.cluster)
    """
    platform: PlatformConfig = field(default_factory=PlatformConfig)
    evm: EvmConfig = field(default_factory=EvmConfig)
    solana: SolanaConfig = field(default_factory=SolanaConfig)
    token: TokenConfig = field(default_factory=TokenConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    @classmethod
    def reload(cls) -> "Config":
        """Reload configuration from environment"""
        _load_env_file()
        return cls()


# Global config instance
config = Config()


def get_config() -> Config:
    """Get global configuration instance"""
    return config


def reload_config() -> Config:
    """Reload and return new configuration"""
    global config
    config = Config.reload()
    return config


def setup_logging(
    log_config: Optional[LoggingConfig] = None,
    logger_name: str = "funnyfun_sdk",
) -> logging.Logger:
    """
    Set up logging based on configuration.

    Creates handlers for file and/or console output with optional rotation.
    The log file directory is created automatically if it doesn't exist.

    Args:
        log_config: Logging configuration (uses global config if None)
        logger_name: Name of the logger to configure (default: funnyfun_sdk)

    Returns:
        Configured logger instance
    """
    if log_config is None:
        log_config = config.logging

    logger = logging.getLogger(logger_name)
    logger.setLevel(log_config.level)

    # Close before removing to flush buffers and release file handles
    for handler in logger.handlers[:]:
        handler.close()
        logger.removeHandler(handler)

    formatter = logging.Formatter(log_config.log_format)

    handlers: List[logging.Handler] = []

    if log_config.log_file:
        from logging.handlers import RotatingFileHandler

        log_path = Path(log_config.log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)

        file_handler = RotatingFileHandler(
            log_config.log_file,
            maxBytes=log_config.max_bytes,
            backupCount=log_config.backup_count,
            encoding='utf-8',
        )
        file_handler.setLevel(log_config.level)
        file_handler.setFormatter(formatter)
        handlers.append(file_handler)

    if log_config.console_output:
        console_handler = logging.StreamHandler()
        console_handler.setLevel(log_config.level)
        console_handler.setFormatter(formatter)
        handlers.append(console_handler)

    for handler in handlers:
        logger.addHandler(handler)

    if log_config.log_file:
        logger.info(f"Logging initialized: file={log_config.log_file}, level={log_config.log_level}")

    return logger


def enable_file_logging(
    log_file: Optional[str] = None,
    level: str = "INFO",
    console: bool = True,
) -> logging.Logger:
    """
    Quick setup for file logging.

    Args:
        log_file: Path to log file (defaults to funnyfun_sdk/log/funnyfun_sdk_<utc>.log)
        level: Log level (DEBUG, INFO, WARNING, ERROR)
        console: Also output to console

    Returns:
        Configured logger
    """
    log_config = LoggingConfig(
        log_file=log_file or config.logging.log_file or _get_default_log_path(),
        log_level=level,
        console_output=console,
    )
    return setup_logging(log_config)
