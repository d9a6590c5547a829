"""
Solana signing abstractions

Provides unified signing interface for local signing with an ed25519 keypair.
"""

from __future__ import annotations

import base64
import binascii
import logging
from typing import List, Protocol, Tuple, runtime_checkable

import base58
from solders.keypair import Keypair
from solders.message import MessageV0
from solders.signature import Signature
from solders.transaction import VersionedTransaction

from ..errors import SignerError, ConfigurationError

logger = logging.getLogger(__name__)

# Secret key (64 bytes) or seed (32 bytes)
_KEY_LENGTHS = (64, 32)


@runtime_checkable
class Signer(Protocol):
    """
    Protocol for Solana signers

    Implementations must provide:
    - pubkey: The signer's public key (base58)
    - sign(): Sign raw message bytes
    - sign_transaction(): Sign a versioned transaction
    """

    @property
    def pubkey(self) -> str:
        """Signer's public key (base58)"""
        ...

    def sign(self, message: bytes) -> bytes:
        """
        Sign a message

        Args:
            message: Message bytes to sign

        Returns:
            64-byte signature
        """
        ...

    def sign_transaction(self, unsigned_tx: bytes) -> Tuple[bytes, str]:
        """
        Sign a transaction

        Args:
            unsigned_tx: Unsigned transaction bytes

        Returns:
            (signed_tx_bytes, signature_base58)
        """
        ...


def message_bytes_for_signing(message) -> bytes:
    """Serialized message bytes, with the 0x80 version prefix for MessageV0"""
    raw = bytes(message)
    if isinstance(message, MessageV0):
        return bytes([0x80]) + raw
    return raw


def decode_private_key(private_key: str) -> bytes:
    """
    Decode a Solana private key string

    Formats are tried in order: strict base64, hex (optional 0x prefix),
    base58 (Solana CLI export). The decoded key must be a 64-byte secret
    key or a 32-byte seed.

    Raises:
        ConfigurationError: If no format yields a key of valid length
    """
    value = (private_key or "").strip()
    candidates: List[bytes] = []

    try:
        candidates.append(base64.b64decode(value, validate=True))
    except (binascii.Error, ValueError):
        pass

    hex_value = value[2:] if value.lower().startswith("0x") else value
    try:
        candidates.append(bytes.fromhex(hex_value))
    except ValueError:
        pass

    try:
        candidates.append(base58.b58decode(value))
    except ValueError:
        pass

    for raw in candidates:
        if len(raw) in _KEY_LENGTHS:
            return raw

    raise ConfigurationError.invalid("privateKey", "Invalid privateKey format. Must be base64 or hex.")


def keypair_from_private_key(private_key: str) -> Keypair:
    """Build a Keypair from a base64, hex or base58 encoded secret key or seed"""
    raw = decode_private_key(private_key)
    try:
        if len(raw) == 32:
            return Keypair.from_seed(raw)
        return Keypair.from_bytes(raw)
    except ValueError as e:
        raise ConfigurationError.invalid("privateKey", f"Invalid privateKey format. Must be base64 or hex. ({e})")


class LocalSigner:
    """
    Local signer using Solana keypair

    Usage:
        signer = LocalSigner.from_private_key(os.environ["SOLANA_PRIVATE_KEY"])

        signed_tx, sig = signer.sign_transaction(unsigned_tx_bytes)
        sig_b64 = signer.sign_message_base64("Sign in with Solana...")
    """

    def __init__(self, keypair: Keypair):
        """
        Initialize with keypair

        Args:
            keypair: solders.keypair.Keypair instance
        """
        self._keypair = keypair

    @property
    def pubkey(self) -> str:
        """Public key as base58 string"""
        return str(self._keypair.pubkey())

    @property
    def keypair(self) -> Keypair:
        return self._keypair

    def sign(self, message: bytes) -> bytes:
        """Sign message bytes"""
        return bytes(self._keypair.sign_message(message))

    def sign_message_base64(self, message: str) -> str:
        """Sign the UTF-8 bytes of a text message, base64 encoded detached signature"""
        try:
            return base64.b64encode(self.sign(message.encode("utf-8"))).decode("ascii")
        except UnicodeEncodeError as e:
            raise SignerError.failed(e, original_error=e)

    def sign_transaction(self, unsigned_tx: bytes) -> Tuple[bytes, str]:
        """
        Sign versioned transaction

        Args:
            unsigned_tx: Unsigned VersionedTransaction bytes

        Returns:
            (signed_tx_bytes, signature_base58)
        """
        tx = VersionedTransaction.from_bytes(unsigned_tx)
        message = tx.message
        signature = self._keypair.sign_message(message_bytes_for_signing(message))

        num_required_signatures = message.header.num_required_signatures
        account_keys = list(message.account_keys)
        our_pubkey = self._keypair.pubkey()

        signer_index = None
        for i in range(min(num_required_signatures, len(account_keys))):
            if account_keys[i] == our_pubkey:
                signer_index = i
                break

        if signer_index is None:
            raise SignerError(
                f"Wallet {our_pubkey} is not in the required signers list. "
                f"Expected signers: {[str(k) for k in account_keys[:num_required_signatures]]}"
            )

        signatures = [Signature.default()] * num_required_signatures
        signatures[signer_index] = signature
        signed_tx = VersionedTransaction.populate(message, signatures)

        return bytes(signed_tx), str(signature)

    @classmethod
    def from_private_key(cls, private_key: str) -> "LocalSigner":
        """Create signer from a base64, hex or base58 encoded key"""
        return cls(keypair_from_private_key(private_key))

    @classmethod
    def from_bytes(cls, secret_key: bytes) -> "LocalSigner":
        """Create signer from secret key bytes (64 bytes)"""
        return cls(Keypair.from_bytes(secret_key))
