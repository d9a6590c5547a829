"""
Transaction builder and sender

Provides utilities for:
- Building versioned transactions
- Adding compute budget instructions
- Multi-signer signing (wallet plus freshly generated keypairs)
- Sending and confirming transactions
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional, Tuple

from solders.compute_budget import set_compute_unit_limit, set_compute_unit_price
from solders.hash import Hash
from solders.instruction import Instruction
from solders.keypair import Keypair
from solders.message import MessageV0
from solders.pubkey import Pubkey
from solders.signature import Signature
from solders.transaction import VersionedTransaction

from .rpc import RpcClient
from .solana_signer import LocalSigner, message_bytes_for_signing
from ..errors import TransactionError, RpcError
from ..config import get_config

logger = logging.getLogger(__name__)


@dataclass
class TxBuilderConfig:
    """
    Transaction builder runtime configuration

    Pulls defaults from the global config (funnyfun_sdk.config.SolanaConfig).

    Usage:
        config = TxBuilderConfig(compute_units=400_000, skip_preflight=True)
        builder = TxBuilder(rpc, signer, config=config)
    """
    compute_units: int = None
    compute_unit_price: int = None
    skip_preflight: bool = None
    confirmation_timeout: float = None

    def __post_init__(self):
        """Apply defaults from global config for any unset values"""
        if self.compute_units is None:
            self.compute_units = get_config().solana.compute_units
        if self.compute_unit_price is None:
            self.compute_unit_price = get_config().solana.compute_unit_price
        if self.skip_preflight is None:
            self.skip_preflight = get_config().solana.skip_preflight
        if self.confirmation_timeout is None:
            self.confirmation_timeout = get_config().solana.confirmation_timeout


class TxBuilder:
    """
    Transaction builder and sender

    Usage:
        builder = TxBuilder(rpc, signer)

        # Build, sign and send, waiting for confirmation
        signature = builder.build_and_send(instructions, additional_signers=[mint])

        # Or step by step
        tx_bytes = builder.build(instructions)
        signed_bytes, sig = builder.sign(tx_bytes)
        signature = builder.send(signed_bytes)
    """

    def __init__(
        self,
        rpc: RpcClient,
        signer: LocalSigner,
        config: Optional[TxBuilderConfig] = None,
    ):
        self._rpc = rpc
        self._signer = signer
        self._config = config or TxBuilderConfig()

    @property
    def pubkey(self) -> str:
        """Signer's public key"""
        return self._signer.pubkey

    def build(
        self,
        instructions: List[Instruction],
        payer: Optional[str] = None,
        compute_units: Optional[int] = None,
        compute_unit_price: Optional[int] = None,
        recent_blockhash: Optional[str] = None,
    ) -> bytes:
        """
        Build unsigned versioned transaction

        Args:
            instructions: List of instructions
            payer: Fee payer pubkey (defaults to signer)
            compute_units: Compute unit limit (0 omits the instruction)
            compute_unit_price: Priority fee in microlamports per CU (0 omits the instruction)
            recent_blockhash: Optional blockhash (fetched if not provided)

        Returns:
            Unsigned transaction bytes
        """
        all_instructions = []

        cu_limit = self._config.compute_units if compute_units is None else compute_units
        cu_price = self._config.compute_unit_price if compute_unit_price is None else compute_unit_price

        if cu_limit > 0:
            all_instructions.append(set_compute_unit_limit(cu_limit))
        if cu_price > 0:
            all_instructions.append(set_compute_unit_price(cu_price))

        all_instructions.extend(instructions)

        if recent_blockhash is None:
            recent_blockhash = self._rpc.get_latest_blockhash().get("blockhash")

        if not recent_blockhash:
            raise TransactionError.send_failed("Failed to get recent blockhash")

        message = MessageV0.try_compile(
            Pubkey.from_string(payer or self.pubkey),
            all_instructions,
            [],  # Address lookup tables
            Hash.from_string(recent_blockhash),
        )

        # Signature slots must match num_required_signatures
        num_signers = message.header.num_required_signatures
        tx = VersionedTransaction.populate(message, [Signature.default()] * num_signers)

        return bytes(tx)

    def sign(
        self,
        unsigned_tx: bytes,
        additional_signers: Optional[List[Keypair]] = None,
    ) -> Tuple[bytes, str]:
        """
        Sign transaction

        Args:
            unsigned_tx: Unsigned transaction bytes
            additional_signers: Optional list of additional keypairs to sign with

        Returns:
            (signed_tx_bytes, wallet_signature_base58)

        Raises:
            TransactionError: If the wallet or a required signer is missing
        """
        if not additional_signers:
            return self._signer.sign_transaction(unsigned_tx)

        message = VersionedTransaction.from_bytes(unsigned_tx).message
        message_bytes = message_bytes_for_signing(message)

        account_keys = [str(k) for k in message.account_keys]
        num_required_signatures = message.header.num_required_signatures
        required = account_keys[:num_required_signatures]

        null_sig = Signature.default()
        signatures = [null_sig] * num_required_signatures

        if self._signer.pubkey not in required:
            raise TransactionError.send_failed(
                f"Wallet pubkey {self._signer.pubkey} not found in transaction signers. "
                f"Required signers: {required}"
            )
        wallet_index = required.index(self._signer.pubkey)
        wallet_signature = Signature.from_bytes(self._signer.sign(message_bytes))
        signatures[wallet_index] = wallet_signature

        for keypair in additional_signers:
            kp_pubkey = str(keypair.pubkey())
            if kp_pubkey not in required:
                logger.warning(f"Additional signer {kp_pubkey} not found in required signers")
                continue
            index = required.index(kp_pubkey)
            signatures[index] = keypair.sign_message(message_bytes)
            logger.debug(f"Additional signer {kp_pubkey[:16]}... signed at index {index}")

        missing = [required[i] for i, sig in enumerate(signatures) if sig == null_sig]
        if missing:
            raise TransactionError(f"Missing signatures for required signers: {', '.join(missing)}")

        signed_tx = VersionedTransaction.populate(message, signatures)
        return bytes(signed_tx), str(wallet_signature)

    def send(
        self,
        signed_tx: bytes,
        skip_preflight: Optional[bool] = None,
        wait_confirmation: bool = True,
    ) -> str:
        """
        Send signed transaction

        Args:
            signed_tx: Signed transaction bytes
            skip_preflight: Skip simulation (default from config)
            wait_confirmation: Wait for confirmation

        Returns:
            Transaction signature (base58)

        Raises:
            TransactionError: On send failure, on-chain failure or confirmation timeout
        """
        skip = skip_preflight if skip_preflight is not None else self._config.skip_preflight

        try:
            signature = self._rpc.send_transaction(signed_tx, skip_preflight=skip)
        except RpcError as e:
            raise TransactionError.send_failed(e.message, original_error=e)

        logger.info(f"Transaction sent: {signature}")

        if not wait_confirmation:
            return signature

        confirmed = self._rpc.confirm_transaction(
            signature,
            timeout_seconds=self._config.confirmation_timeout,
        )
        if confirmed:
            return signature
        raise TransactionError.confirmation_timeout(signature, self._config.confirmation_timeout)

    def build_and_send(
        self,
        instructions: List[Instruction],
        additional_signers: Optional[List[Keypair]] = None,
        compute_units: Optional[int] = None,
        compute_unit_price: Optional[int] = None,
        wait_confirmation: bool = True,
    ) -> str:
        """
        Build, sign, and send transaction in one call

        Returns:
            Transaction signature (base58)
        """
        unsigned_tx = self.build(
            instructions,
            compute_units=compute_units,
            compute_unit_price=compute_unit_price,
        )
        signed_tx, _ = self.sign(unsigned_tx, additional_signers)
        return self.send(signed_tx, wait_confirmation=wait_confirmation)
