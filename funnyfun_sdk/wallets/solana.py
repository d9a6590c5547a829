"""
Solana wallet adapter

Signs in with Sign-In with Solana messages, creates SPL tokens with on-chain
Metaplex metadata in a single transaction and deposits SOL or SPL tokens.
"""

import base64
import logging
from decimal import Decimal
from datetime import datetime, timedelta, timezone
from typing import Optional

from solders.keypair import Keypair
from solders.pubkey import Pubkey

from ..config import get_config
from ..constants import (
    DEFAULT_MESSAGE,
    LAMPORTS_PER_SOL,
    MINT_SIZE,
    SIWS_CHAIN_ID,
    SIWS_EXPIRATION_DAYS,
    SOLANA_CLUSTER_URLS,
)
from ..errors import ConfigurationError, RpcError, ValidationError
from ..infra import RpcClient, LocalSigner, TxBuilder
from ..types import NetworkType, SignatureRequest, TokenDeployment, WalletConfig
from ..utils import Number, to_raw_amount
from .base import WalletAdapter
from .sign_in import SignInMessage, iso_timestamp
from . import spl

logger = logging.getLogger(__name__)


def resolve_cluster_url(cluster: Optional[str], rpc_url: Optional[str] = None) -> str:
    """
    Pick the RPC endpoint: explicit rpc_url, else the public cluster endpoint

    Raises:
        ConfigurationError: If neither is given or the cluster is unknown
    """
    if rpc_url:
        return rpc_url
    if not cluster:
        raise ConfigurationError.missing("Rpc Url")
    try:
        return SOLANA_CLUSTER_URLS[cluster]
    except KeyError:
        raise ConfigurationError.invalid(
            "cluster",
            f"unknown cluster {cluster!r} (expected one of {', '.join(SOLANA_CLUSTER_URLS)})",
        )


class SolanaWallet(WalletAdapter):
    """
    Solana wallet backed by solders and the JSON-RPC client

    Usage:
        wallet = SolanaWallet(
            server_url="https://app.nusabyte.com",
            private_key=os.environ["SOLANA_PRIVATE_KEY"],
            chain_id=3,
            cluster="devnet",
        )
        signature = wallet.sign_message(request)
        deployment = wallet.create_token(fee_receiver, "Funny", "FUN", 10_000_000, uri)
    """

    network_type = NetworkType.SOLANA

    def __init__(
        self,
        server_url: Optional[str],
        private_key: Optional[str],
        chain_id: Optional[int],
        cluster: Optional[str] = None,
        rpc_url: Optional[str] = None,
        rpc: Optional[RpcClient] = None,
    ):
        """
        Initialize Solana wallet

        Args:
            server_url: Platform server URL (domain and origin of sign-in messages)
            private_key: Secret key or seed, base64, hex or base58 encoded
            chain_id: Platform chain id for the wallet
            cluster: "devnet", "testnet" or "mainnet-beta"
            rpc_url: Explicit RPC endpoint (overrides cluster)
            rpc: Pre-built RPC client

        Raises:
            ConfigurationError: If a required option is missing or the key is malformed
        """
        super().__init__(server_url, private_key)

        if not chain_id:
            raise ConfigurationError.missing("chain id")
        endpoint = rpc.endpoint if rpc is not None else resolve_cluster_url(cluster, rpc_url)

        self._chain_id = chain_id
        self._cluster = cluster
        self._signer = LocalSigner.from_private_key(private_key)
        self._owns_rpc = rpc is None
        self._rpc = rpc or RpcClient(endpoint)
        self._tx_builder = TxBuilder(self._rpc, self._signer)

        logger.debug(f"Solana wallet {self.address} on {cluster or endpoint}")

    @property
    def address(self) -> str:
        return self._signer.pubkey

    @property
    def pubkey(self) -> Pubkey:
        return self._signer.keypair.pubkey()

    @property
    def rpc(self) -> RpcClient:
        return self._rpc

    def config(self) -> WalletConfig:
        return WalletConfig(
            address=self.address,
            domain=self.domain,
            origin=self.origin,
            provider=self._rpc,
            signer=self._signer,
            network_type=self.network_type,
            rpc_url=self._rpc.endpoint,
            cluster=self._cluster,
            chain_id=self._chain_id,
        )

    # =========================================================================
    # Sign-in
    # =========================================================================

    def build_sign_in_message(self, request: SignatureRequest, now: Optional[datetime] = None) -> str:
        """
        Render the SIWS message for a sign-in request

        URI is the wallet origin; chain id is fixed and the message expires
        after 30 days.
        """
        now = now or datetime.now(timezone.utc)
        message = SignInMessage(
            domain=request.domain or "",
            address=self.address,
            statement=request.message or DEFAULT_MESSAGE[self.network_type.value],
            uri=self.origin,
            chain_id=SIWS_CHAIN_ID,
            nonce=str(request.nonce or ""),
            issued_at=iso_timestamp(now),
            expiration_time=iso_timestamp(now + timedelta(days=SIWS_EXPIRATION_DAYS)),
        )
        return message.prepare("Solana")

    def sign_message(self, request: SignatureRequest) -> str:
        """Sign the SIWS message, returning a base64 detached ed25519 signature"""
        return self._signer.sign_message_base64(self.build_sign_in_message(request))

    # =========================================================================
    # Transactions
    # =========================================================================

    @staticmethod
    def _pubkey(address: str, field: str) -> Pubkey:
        try:
            return Pubkey.from_string(address)
        except ValueError as e:
            raise ValidationError.invalid_field(field, f"{address!r} is not a Solana address ({e})")

    def create_token(
        self,
        factory_address: str,
        name: str,
        symbol: str,
        token_creation_fee: Optional[int] = None,
        metadata_url: str = "",
    ) -> TokenDeployment:
        """
        Create an SPL token in one transaction

        Creates and initializes a fresh mint, mints the full supply to the
        wallet, writes Metaplex metadata, revokes mint and freeze authority,
        pays the creation fee to factory_address and moves the whole supply
        to the factory's associated token account.

        Args:
            factory_address: Fee and supply receiver
            name: Token name
            symbol: Token symbol
            token_creation_fee: Creation fee in lamports
            metadata_url: Metadata URI stored in the metadata account

        Returns:
            TokenDeployment(signature, mint address)
        """
        if token_creation_fee is None:
            raise ValidationError.invalid_field("token_creation_fee", "is required")

        owner = self.pubkey
        receiver = self._pubkey(factory_address, "factory_address")
        mint_keypair = Keypair()
        mint = mint_keypair.pubkey()

        decimals = get_config().token.decimals
        supply = get_config().token.default_supply * 10 ** decimals
        rent = self._rpc.get_minimum_balance_for_rent_exemption(MINT_SIZE)

        owner_ata = spl.get_associated_token_address(owner, mint)
        receiver_ata = spl.get_associated_token_address(receiver, mint)

        instructions = [
            spl.build_create_account_instruction(owner, mint, rent, MINT_SIZE),
            spl.build_initialize_mint2_instruction(mint, decimals, owner, owner),
            spl.build_create_ata_idempotent_instruction(owner, owner, mint),
            spl.build_mint_to_instruction(mint, owner_ata, owner, supply),
            spl.build_create_metadata_v3_instruction(
                mint=mint,
                mint_authority=owner,
                payer=owner,
                update_authority=owner,
                name=name,
                symbol=symbol,
                uri=metadata_url or "",
            ),
            spl.build_set_authority_instruction(mint, owner, spl.AuthorityType.MINT_TOKENS),
            spl.build_set_authority_instruction(mint, owner, spl.AuthorityType.FREEZE_ACCOUNT),
            spl.build_transfer_lamports_instruction(owner, receiver, int(token_creation_fee)),
            spl.build_create_ata_idempotent_instruction(owner, receiver, mint),
            spl.build_transfer_checked_instruction(owner_ata, mint, receiver_ata, owner, supply, decimals),
        ]

        logger.info(f"Creating SPL token {symbol} (mint {mint})")
        signature = self._tx_builder.build_and_send(instructions, additional_signers=[mint_keypair])
        logger.info(f"SPL token {symbol} created: {mint} (tx {signature})")

        return TokenDeployment(tx_hash=signature, token_address=str(mint))

    def deposit(self, deposit_address: str, amount: Number) -> str:
        """Transfer floor(amount * 10^9) lamports to the deposit address"""
        receiver = self._pubkey(deposit_address, "deposit_address")
        lamports = int(Decimal(str(amount)) * LAMPORTS_PER_SOL)

        signature = self._tx_builder.build_and_send([
            spl.build_transfer_lamports_instruction(self.pubkey, receiver, lamports),
        ])
        logger.info(f"Deposited {lamports} lamports to {deposit_address}: {signature}")
        return signature

    def mint_decimals(self, token_address: str) -> int:
        """Read decimals from the mint account"""
        info = self._rpc.get_account_info(token_address, encoding="base64")
        if not info or not info.get("data"):
            raise RpcError(f"Mint account {token_address} not found", endpoint=self._rpc.endpoint)
        data = info["data"]
        raw = base64.b64decode(data[0] if isinstance(data, list) else data)
        try:
            return spl.parse_mint_decimals(raw)
        except ValueError as e:
            raise RpcError(f"Account {token_address} is not a mint: {e}", endpoint=self._rpc.endpoint)

    def deposit_token(
        self,
        deposit_address: str,
        amount: Number,
        token_address: str,
        token_decimals: Optional[int] = None,
    ) -> str:
        """
        Transfer SPL tokens to the deposit address

        Both associated token accounts are created idempotently first.
        """
        if not token_address:
            raise ValidationError.invalid_field("token_address", "is required")

        receiver = self._pubkey(deposit_address, "deposit_address")
        mint = self._pubkey(token_address, "token_address")
        decimals = token_decimals if token_decimals is not None else self.mint_decimals(token_address)
        raw_amount = to_raw_amount(amount, decimals)

        owner = self.pubkey
        source = spl.get_associated_token_address(owner, mint)
        destination = spl.get_associated_token_address(receiver, mint)

        signature = self._tx_builder.build_and_send([
            spl.build_create_ata_idempotent_instruction(owner, owner, mint),
            spl.build_create_ata_idempotent_instruction(owner, receiver, mint),
            spl.build_transfer_checked_instruction(source, mint, destination, owner, raw_amount, decimals),
        ])
        logger.info(f"Deposited {raw_amount} of {token_address} to {deposit_address}: {signature}")
        return signature

    # Owner-signed SPL transfers need no delegate approval
    def allowance(self, spender: str, token_address: str) -> int:
        return 0

    def approve(
        self,
        spender: str,
        amount: Number,
        token_address: str,
        token_decimals: Optional[int] = None,
    ) -> Optional[str]:
        return None

    def close(self):
        if self._owns_rpc:
            self._rpc.close()
