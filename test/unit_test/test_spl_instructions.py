"""
Test Solana Instruction Builders

Checks instruction data layouts and account lists for the SPL Token,
Associated Token Account, System and Token Metadata builders.
"""

import sys
import struct
from pathlib import Path

from solders.keypair import Keypair
from solders.pubkey import Pubkey

# Add parent to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent.parent))

from funnyfun_sdk.constants import (
    ASSOCIATED_TOKEN_PROGRAM_ID,
    METADATA_PROGRAM_ID,
    SYSTEM_PROGRAM_ID,
    TOKEN_PROGRAM_ID,
)
from funnyfun_sdk.wallets import spl

TOKEN_PROGRAM = Pubkey.from_string(TOKEN_PROGRAM_ID)
SYSTEM_PROGRAM = Pubkey.from_string(SYSTEM_PROGRAM_ID)

# Wrapped SOL mint
WSOL_MINT = Pubkey.from_string("So11111111111111111111111111111111111111112")


def _keys():
    return Keypair().pubkey(), Keypair().pubkey(), Keypair().pubkey()


class TestDerivations:
    """Test PDA derivations"""

    def test_ata_is_deterministic_and_program_derived(self):
        owner = Keypair().pubkey()
        ata = spl.get_associated_token_address(owner, WSOL_MINT)
        assert ata == spl.get_associated_token_address(owner, WSOL_MINT)
        expected, _ = Pubkey.find_program_address(
            [bytes(owner), bytes(TOKEN_PROGRAM), bytes(WSOL_MINT)],
            Pubkey.from_string(ASSOCIATED_TOKEN_PROGRAM_ID),
        )
        assert ata == expected
        assert not ata.is_on_curve()

    def test_metadata_address(self):
        program = Pubkey.from_string(METADATA_PROGRAM_ID)
        expected, _ = Pubkey.find_program_address([b"metadata", bytes(program), bytes(WSOL_MINT)], program)
        assert spl.get_metadata_address(WSOL_MINT) == expected

    def test_parse_mint_decimals(self):
        data = bytearray(82)
        data[44] = 9
        assert spl.parse_mint_decimals(bytes(data)) == 9

    def test_parse_mint_decimals_short(self):
        try:
            spl.parse_mint_decimals(b"\x00" * 10)
            assert False, "Should raise for short data"
        except ValueError:
            pass


class TestSystemInstructions:
    """Test System program builders"""

    def test_create_account(self):
        payer, new_account, _ = _keys()
        ix = spl.build_create_account_instruction(payer, new_account, 1461600, 82)
        assert ix.program_id == SYSTEM_PROGRAM
        tag, lamports, space = struct.unpack("<IQQ", bytes(ix.data[:20]))
        assert (tag, lamports, space) == (0, 1461600, 82)
        assert bytes(ix.data[20:]) == bytes(TOKEN_PROGRAM)
        assert ix.accounts[0].pubkey == payer
        assert ix.accounts[1].is_signer

    def test_transfer_lamports(self):
        sender, recipient, _ = _keys()
        ix = spl.build_transfer_lamports_instruction(sender, recipient, 10_000_000)
        assert ix.program_id == SYSTEM_PROGRAM
        assert struct.unpack("<IQ", bytes(ix.data)) == (2, 10_000_000)
        assert ix.accounts[1].pubkey == recipient


class TestTokenInstructions:
    """Test SPL Token builders"""

    def test_initialize_mint2_with_freeze_authority(self):
        mint, authority, _ = _keys()
        ix = spl.build_initialize_mint2_instruction(mint, 6, authority, authority)
        data = bytes(ix.data)
        assert ix.program_id == TOKEN_PROGRAM
        assert data[:2] == bytes([20, 6])
        assert data[2:34] == bytes(authority)
        assert data[34] == 1
        assert data[35:67] == bytes(authority)
        assert len(ix.accounts) == 1

    def test_initialize_mint2_without_freeze_authority(self):
        mint, authority, _ = _keys()
        data = bytes(spl.build_initialize_mint2_instruction(mint, 9, authority).data)
        assert len(data) == 35
        assert data[34] == 0

    def test_mint_to(self):
        mint, destination, authority = _keys()
        ix = spl.build_mint_to_instruction(mint, destination, authority, 2_000_000_000 * 10 ** 6)
        assert bytes(ix.data) == bytes([7]) + struct.pack("<Q", 2_000_000_000 * 10 ** 6)
        assert ix.accounts[2].is_signer

    def test_set_authority_revoke(self):
        mint, authority, _ = _keys()
        ix = spl.build_set_authority_instruction(mint, authority, spl.AuthorityType.FREEZE_ACCOUNT)
        assert bytes(ix.data) == bytes([6, 1, 0])

    def test_set_authority_new(self):
        mint, authority, new_authority = _keys()
        ix = spl.build_set_authority_instruction(mint, authority, spl.AuthorityType.MINT_TOKENS, new_authority)
        assert bytes(ix.data) == bytes([6, 0, 1]) + bytes(new_authority)

    def test_transfer_checked(self):
        source, mint, destination = _keys()
        owner = Keypair().pubkey()
        ix = spl.build_transfer_checked_instruction(source, mint, destination, owner, 1_500_000, 6)
        assert bytes(ix.data) == bytes([12]) + struct.pack("<QB", 1_500_000, 6)
        assert [meta.pubkey for meta in ix.accounts] == [source, mint, destination, owner]
        assert ix.accounts[3].is_signer
        assert not ix.accounts[1].is_writable


class TestAssociatedTokenInstructions:
    """Test ATA builder"""

    def test_create_ata_idempotent(self):
        payer = Keypair().pubkey()
        owner = Keypair().pubkey()
        ix = spl.build_create_ata_idempotent_instruction(payer, owner, WSOL_MINT)
        assert ix.program_id == Pubkey.from_string(ASSOCIATED_TOKEN_PROGRAM_ID)
        assert bytes(ix.data) == bytes([1])
        assert ix.accounts[1].pubkey == spl.get_associated_token_address(owner, WSOL_MINT)
        assert ix.accounts[0].is_signer
        assert len(ix.accounts) == 6


class TestMetadataInstruction:
    """Test CreateMetadataAccountV3 builder"""

    def test_layout(self):
        mint, authority, _ = _keys()
        ix = spl.build_create_metadata_v3_instruction(
            mint=mint,
            mint_authority=authority,
            payer=authority,
            update_authority=authority,
            name="Funny",
            symbol="FUN",
            uri="https://meta/1.json",
        )
        expected = bytearray([33])
        for value in ("Funny", "FUN", "https://meta/1.json"):
            raw = value.encode()
            expected += struct.pack("<I", len(raw)) + raw
        expected += struct.pack("<H", 0)
        expected += bytes([0, 0, 0, 1, 0])

        assert ix.program_id == Pubkey.from_string(METADATA_PROGRAM_ID)
        assert bytes(ix.data) == bytes(expected)
        assert ix.accounts[0].pubkey == spl.get_metadata_address(mint)
        assert ix.accounts[0].is_writable
        assert len(ix.accounts) == 7

    def test_empty_uri(self):
        mint, authority, _ = _keys()
        ix = spl.build_create_metadata_v3_instruction(mint, authority, authority, authority, "A", "B", "")
        assert bytes(ix.data)[-11:-7] == struct.pack("<I", 0)
