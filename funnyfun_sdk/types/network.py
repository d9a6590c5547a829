"""
Blockchain network type definitions and network selection
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterable, Optional

from ..constants import EVM_KEY_NAMESPACE, SOLANA_KEY_NAMESPACE
from ..errors import ConfigurationError, ValidationError
from ..utils import to_decimal


class NetworkType(Enum):
    """Wallet family the SDK instance operates on"""
    EVM = "evm"
    SOLANA = "solana"

    @classmethod
    def from_string(cls, value) -> "NetworkType":
        """
        Parse a network name

        Accepts "evm", "solana" or "sol" (case-insensitive) and NetworkType
        members.

        Raises:
            ConfigurationError: For any other value
        """
        if isinstance(value, cls):
            return value
        normalized = str(value or "").strip().lower()
        if normalized == "evm":
            return cls.EVM
        if normalized in ("solana", "sol"):
            return cls.SOLANA
        raise ConfigurationError.invalid("network", f"unsupported network {value!r} (expected 'evm' or 'solana')")


@dataclass(frozen=True)
class NetworkInfo:
    """
    Platform blockchain network record

    Attributes:
        key: Namespaced chain key (e.g. "eip155:97", "solana:devnet")
        name: Human-readable network name
        image_url: Network logo URL
        deposit_address: Platform deposit address on this network
        token_factory_contract_address: Token factory (EVM) or fee receiver (Solana)
        token_creation_fee: Creation fee in smallest units (wei / lamports), as string
        address_explorer_url: Explorer template containing "{address}"
        transaction_explorer_url: Explorer template containing "{hash}"
        last_indexed_block_number: Last block indexed by the platform
    """
    key: str
    name: str = ""
    image_url: str = ""
    deposit_address: str = ""
    token_factory_contract_address: str = ""
    token_creation_fee: str = "0"
    address_explorer_url: str = ""
    transaction_explorer_url: str = ""
    last_indexed_block_number: str = ""
    raw: Dict[str, Any] = field(default_factory=dict, compare=False, repr=False)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "NetworkInfo":
        """Build from the camelCase API payload"""
        return cls(
            key=str(data.get("key", "")),
            name=data.get("name") or "",
            image_url=data.get("imageUrl") or "",
            deposit_address=data.get("depositAddress") or "",
            token_factory_contract_address=data.get("tokenFactoryContractAddress") or "",
            token_creation_fee=str(data.get("tokenCreationFee") or "0"),
            address_explorer_url=data.get("addressExplorerUrl") or "",
            transaction_explorer_url=data.get("transactionExplorerUrl") or "",
            last_indexed_block_number=str(data.get("lastIndexedBlockNumber") or ""),
            raw=dict(data),
        )

    @property
    def is_solana(self) -> bool:
        return self.key.startswith(SOLANA_KEY_NAMESPACE)

    @property
    def chain_id(self) -> Optional[int]:
        """EIP-155 chain id for "eip155:<id>" keys, None otherwise"""
        namespace, _, reference = self.key.partition(":")
        if namespace != EVM_KEY_NAMESPACE or not reference.isdigit():
            return None
        return int(reference)

    @property
    def creation_fee(self) -> int:
        """
        Token creation fee as an integer in smallest units

        Raises:
            ValidationError: If the fee is not a whole, non-negative amount
        """
        fee = to_decimal(self.token_creation_fee)
        if fee is None or fee < 0 or fee != fee.to_integral_value():
            raise ValidationError.invalid_field(
                "tokenCreationFee",
                f"{self.token_creation_fee!r} is not a whole amount in smallest units",
            )
        return int(fee)

    def address_url(self, address: str) -> str:
        return self.address_explorer_url.replace("{address}", address)

    def transaction_url(self, tx_hash: str) -> str:
        return self.transaction_explorer_url.replace("{hash}", tx_hash)

    def __str__(self) -> str:
        return self.name or self.key


def filter_blockchain_network(
    networks: Iterable[NetworkInfo],
    network_type,
    chain_id: Optional[int] = None,
) -> Optional[NetworkInfo]:
    """
    Select the network record for a wallet

    Solana wallets, and any wallet without a usable integer chain id, get the
    first record whose key starts with "solana". Otherwise the first record
    whose key ends with the decimal chain id is returned.

    Args:
        networks: Network records from the platform
        network_type: NetworkType or its string name
        chain_id: EIP-155 chain id

    Returns:
        Matching NetworkInfo, or None when nothing matches
    """
    is_solana = str(getattr(network_type, "value", network_type)).lower() == NetworkType.SOLANA.value
    has_chain_id = isinstance(chain_id, int) and not isinstance(chain_id, bool)

    if is_solana or not has_chain_id:
        candidates = (item for item in networks if item.key.startswith(SOLANA_KEY_NAMESPACE))
    else:
        suffix = str(chain_id)
        candidates = (item for item in networks if item.key.endswith(suffix))

    return next(candidates, None)
