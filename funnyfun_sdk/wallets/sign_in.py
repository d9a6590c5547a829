"""
Sign-In with Solana message text (CAIP-122)

The layout mirrors EIP-4361 with a "Solana" account label. EVM wallets
render their messages with the siwe package instead.
"""

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional


def iso_timestamp(moment: Optional[datetime] = None) -> str:
    """UTC timestamp with millisecond precision and a Z suffix"""
    moment = moment or datetime.now(timezone.utc)
    return moment.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


@dataclass(frozen=True)
class SignInMessage:
    """
    Sign-in message fields

    Attributes:
        domain: Host requesting the sign-in
        address: Signing account
        statement: Human-readable statement
        uri: URI of the requesting service
        chain_id: Chain id written into the message
        nonce: Server issued nonce
        issued_at: ISO-8601 issue time
        expiration_time: Optional ISO-8601 expiry
        version: Message version
    """
    domain: str
    address: str
    statement: str
    uri: str
    chain_id: int
    nonce: str
    issued_at: str
    expiration_time: Optional[str] = None
    version: str = "1"

    def prepare(self, chain_label: str = "Solana") -> str:
        """Render the message text signed by the wallet"""
        lines = [
            f"{self.domain} wants you to sign in with your {chain_label} account:",
            self.address,
            "",
        ]
        if self.statement:
            lines.extend([self.statement, ""])
        lines.extend([
            f"URI: {self.uri}",
            f"Version: {self.version}",
            f"Chain ID: {self.chain_id}",
            f"Nonce: {self.nonce}",
            f"Issued At: {self.issued_at}",
        ])
        if self.expiration_time:
            lines.append(f"Expiration Time: {self.expiration_time}")
        return "\n".join(lines)
