"""
Solana program instruction builders

Builders for the SPL Token, Associated Token Account, System and Metaplex
Token Metadata instructions used by token creation and deposits.
"""

import struct
from typing import Optional

from solders.instruction import Instruction, AccountMeta
from solders.pubkey import Pubkey
from solders.system_program import (
    CreateAccountParams,
    TransferParams,
    create_account,
    transfer,
)

from ..constants import (
    SYSTEM_PROGRAM_ID,
    TOKEN_PROGRAM_ID,
    ASSOCIATED_TOKEN_PROGRAM_ID,
    METADATA_PROGRAM_ID,
    RENT_SYSVAR_ID,
)

# SPL Token instruction tags
_MINT_TO = 7
_SET_AUTHORITY = 6
_TRANSFER_CHECKED = 12
_INITIALIZE_MINT2 = 20

# Token Metadata instruction tags
_CREATE_METADATA_ACCOUNT_V3 = 33

# Mint account layout: COption<Pubkey> mint authority, u64 supply, u8 decimals
_MINT_DECIMALS_OFFSET = 44


class AuthorityType:
    """SPL Token SetAuthority authority types"""
    MINT_TOKENS = 0
    FREEZE_ACCOUNT = 1
    ACCOUNT_OWNER = 2
    CLOSE_ACCOUNT = 3


def _token_program(token_program: Optional[Pubkey]) -> Pubkey:
    return token_program or Pubkey.from_string(TOKEN_PROGRAM_ID)


def get_associated_token_address(
    owner: Pubkey,
    mint: Pubkey,
    token_program: Optional[Pubkey] = None,
) -> Pubkey:
    """
    Derive associated token account address.

    Seeds: [owner, token_program, mint]
    """
    ata_program = Pubkey.from_string(ASSOCIATED_TOKEN_PROGRAM_ID)
    address, _ = Pubkey.find_program_address(
        [bytes(owner), bytes(_token_program(token_program)), bytes(mint)],
        ata_program,
    )
    return address


def get_metadata_address(mint: Pubkey) -> Pubkey:
    """Derive the Metaplex metadata PDA: ["metadata", program, mint]"""
    program = Pubkey.from_string(METADATA_PROGRAM_ID)
    address, _ = Pubkey.find_program_address(
        [b"metadata", bytes(program), bytes(mint)],
        program,
    )
    return address


def parse_mint_decimals(data: bytes) -> int:
    """Read decimals from raw mint account data"""
    if len(data) <= _MINT_DECIMALS_OFFSET:
        raise ValueError(f"Mint account data too short: {len(data)} bytes")
    return data[_MINT_DECIMALS_OFFSET]


def build_create_account_instruction(
    payer: Pubkey,
    new_account: Pubkey,
    lamports: int,
    space: int,
    owner: Optional[Pubkey] = None,
) -> Instruction:
    """System program create_account, owned by the token program by default"""
    return create_account(
        CreateAccountParams(
            from_pubkey=payer,
            to_pubkey=new_account,
            lamports=lamports,
            space=space,
            owner=_token_program(owner),
        )
    )


def build_transfer_lamports_instruction(
    sender: Pubkey,
    recipient: Pubkey,
    lamports: int,
) -> Instruction:
    """System program transfer"""
    return transfer(TransferParams(from_pubkey=sender, to_pubkey=recipient, lamports=lamports))


def build_initialize_mint2_instruction(
    mint: Pubkey,
    decimals: int,
    mint_authority: Pubkey,
    freeze_authority: Optional[Pubkey] = None,
    token_program: Optional[Pubkey] = None,
) -> Instruction:
    """
    Build InitializeMint2 instruction.

    Data: [20, decimals, mint_authority(32), COption<freeze_authority>]
    """
    data = bytearray([_INITIALIZE_MINT2, decimals])
    data.extend(bytes(mint_authority))
    if freeze_authority is None:
        data.append(0)
    else:
        data.append(1)
        data.extend(bytes(freeze_authority))

    accounts = [AccountMeta(mint, is_signer=False, is_writable=True)]
    return Instruction(_token_program(token_program), bytes(data), accounts)


def build_mint_to_instruction(
    mint: Pubkey,
    destination: Pubkey,
    authority: Pubkey,
    amount: int,
    token_program: Optional[Pubkey] = None,
) -> Instruction:
    """Build MintTo instruction (raw amount)"""
    accounts = [
        AccountMeta(mint, is_signer=False, is_writable=True),
        AccountMeta(destination, is_signer=False, is_writable=True),
        AccountMeta(authority, is_signer=True, is_writable=False),
    ]
    data = bytes([_MINT_TO]) + struct.pack("<Q", amount)
    return Instruction(_token_program(token_program), data, accounts)


def build_set_authority_instruction(
    account: Pubkey,
    current_authority: Pubkey,
    authority_type: int,
    new_authority: Optional[Pubkey] = None,
    token_program: Optional[Pubkey] = None,
) -> Instruction:
    """
    Build SetAuthority instruction.

    A new_authority of None revokes the authority permanently.
    """
    data = bytearray([_SET_AUTHORITY, authority_type])
    if new_authority is None:
        data.append(0)
    else:
        data.append(1)
        data.extend(bytes(new_authority))

    accounts = [
        AccountMeta(account, is_signer=False, is_writable=True),
        AccountMeta(current_authority, is_signer=True, is_writable=False),
    ]
    return Instruction(_token_program(token_program), bytes(data), accounts)


def build_transfer_checked_instruction(
    source: Pubkey,
    mint: Pubkey,
    destination: Pubkey,
    owner: Pubkey,
    amount: int,
    decimals: int,
    token_program: Optional[Pubkey] = None,
) -> Instruction:
    """Build TransferChecked instruction (raw amount)"""
    accounts = [
        AccountMeta(source, is_signer=False, is_writable=True),
        AccountMeta(mint, is_signer=False, is_writable=False),
        AccountMeta(destination, is_signer=False, is_writable=True),
        AccountMeta(owner, is_signer=True, is_writable=False),
    ]
    data = bytes([_TRANSFER_CHECKED]) + struct.pack("<QB", amount, decimals)
    return Instruction(_token_program(token_program), data, accounts)


def build_create_ata_idempotent_instruction(
    payer: Pubkey,
    owner: Pubkey,
    mint: Pubkey,
    token_program: Optional[Pubkey] = None,
) -> Instruction:
    """
    Build create_associated_token_account_idempotent instruction.

    This creates the ATA if it doesn't exist, or does nothing if it does.

    Args:
        payer: Fee payer
        owner: Account owner
        mint: Token mint
        token_program: Token program (defaults to Tokenkeg)

    Returns:
        Instruction to create ATA
    """
    ata_program = Pubkey.from_string(ASSOCIATED_TOKEN_PROGRAM_ID)
    system_program = Pubkey.from_string(SYSTEM_PROGRAM_ID)
    token_program = _token_program(token_program)

    ata_address = get_associated_token_address(owner, mint, token_program)

    accounts = [
        AccountMeta(payer, is_signer=True, is_writable=True),
        AccountMeta(ata_address, is_signer=False, is_writable=True),
        AccountMeta(owner, is_signer=False, is_writable=False),
        AccountMeta(mint, is_signer=False, is_writable=False),
        AccountMeta(system_program, is_signer=False, is_writable=False),
        AccountMeta(token_program, is_signer=False, is_writable=False),
    ]

    # Instruction data: single byte 1 for idempotent create
    return Instruction(ata_program, bytes([1]), accounts)


def _borsh_string(value: str) -> bytes:
    raw = value.encode("utf-8")
    return struct.pack("<I", len(raw)) + raw


def build_create_metadata_v3_instruction(
    mint: Pubkey,
    mint_authority: Pubkey,
    payer: Pubkey,
    update_authority: Pubkey,
    name: str,
    symbol: str,
    uri: str,
    seller_fee_basis_points: int = 0,
    is_mutable: bool = True,
) -> Instruction:
    """
    Build Metaplex CreateMetadataAccountV3 instruction.

    Data: [33] + DataV2 {name, symbol, uri, seller_fee_basis_points,
    creators=None, collection=None, uses=None} + is_mutable + collection_details=None
    """
    data = bytearray([_CREATE_METADATA_ACCOUNT_V3])
    data.extend(_borsh_string(name))
    data.extend(_borsh_string(symbol))
    data.extend(_borsh_string(uri))
    data.extend(struct.pack("<H", seller_fee_basis_points))
    data.extend(b"\x00\x00\x00")  # creators, collection, uses
    data.append(1 if is_mutable else 0)
    data.append(0)  # collection_details

    accounts = [
        AccountMeta(get_metadata_address(mint), is_signer=False, is_writable=True),
        AccountMeta(mint, is_signer=False, is_writable=False),
        AccountMeta(mint_authority, is_signer=True, is_writable=False),
        AccountMeta(payer, is_signer=True, is_writable=True),
        AccountMeta(update_authority, is_signer=True, is_writable=False),
        AccountMeta(Pubkey.from_string(SYSTEM_PROGRAM_ID), is_signer=False, is_writable=False),
        AccountMeta(Pubkey.from_string(RENT_SYSVAR_ID), is_signer=False, is_writable=False),
    ]
    return Instruction(Pubkey.from_string(METADATA_PROGRAM_ID), bytes(data), accounts)
