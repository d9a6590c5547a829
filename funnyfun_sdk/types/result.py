"""
Result type definitions for platform calls and transactions
"""

from dataclasses import dataclass
from typing import Optional

DEPOSIT_SUCCESS_MESSAGE = "user deposited success"


@dataclass(frozen=True)
class ServerStatus:
    """
    Liveness probe result

    Attributes:
        url: Probed URL
        is_up: Server answered with a status below 500
        status_code: HTTP status, None when no response arrived
        error: Transport error or status reason when down
    """
    url: str
    is_up: bool
    status_code: Optional[int] = None
    error: Optional[str] = None


@dataclass(frozen=True)
class TokenDeployment:
    """Deployed token: transaction hash (EVM) or signature (Solana) and token address"""
    tx_hash: str
    token_address: Optional[str] = None


@dataclass(frozen=True)
class DepositResult:
    message: str
    tx_hash: str

    @classmethod
    def success(cls, tx_hash: str) -> "DepositResult":
        return cls(message=DEPOSIT_SUCCESS_MESSAGE, tx_hash=tx_hash)

    def to_dict(self) -> dict:
        return {"message": self.message, "txHash": self.tx_hash}
