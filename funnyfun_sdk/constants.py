"""
Static platform and chain constants
"""

from typing import Dict

# Platform defaults
DEFAULT_DOMAIN = "nusabyte.com"
DEFAULT_SUB_DOMAIN = "app"
DEFAULT_FEATURE = "/api"
DEFAULT_VERSION = "/v1"
DEFAULT_BASE_ORIGIN = "https://app.nusabyte.com"

# Token creation
MINT_SIZE = 82
DEFAULT_TOKEN_SUPPLY = 2_000_000_000
DEFAULT_TOKEN_DECIMALS = 6

# Sign-in statements per network type
DEFAULT_MESSAGE: Dict[str, str] = {
    "evm": "Sign in with Ethereum to the app",
    "solana": "Sign in with Solana to the app",
}

# SIWS messages always carry this chain id, independent of the cluster
SIWS_CHAIN_ID = 3
SIWS_EXPIRATION_DAYS = 30

# Public Solana cluster endpoints
SOLANA_CLUSTER_URLS: Dict[str, str] = {
    "devnet": "https://api.devnet.solana.com",
    "testnet": "https://api.testnet.solana.com",
    "mainnet-beta": "https://api.mainnet-beta.solana.com",
}

LAMPORTS_PER_SOL = 1_000_000_000

# Solana programs
SYSTEM_PROGRAM_ID = "11111111111111111111111111111111"
TOKEN_PROGRAM_ID = "TokenkegQfeZyiNwAJbNbGKPFXCWuBvf9Ss623VQ5DA"
ASSOCIATED_TOKEN_PROGRAM_ID = "ATokenGPvbdGVxr1b2hvZbsiqW5xWH25efTNsLJA8knL"
METADATA_PROGRAM_ID = "metaqbxxUerdq28cj1RbAWkYQm3ybzjb6a8bt518x1s"
RENT_SYSVAR_ID = "SysvarRent111111111111111111111111111111111"

# Token id namespaces (CAIP-19 style asset namespaces used by the platform)
NATIVE_TOKEN_NAMESPACE = "slip44"
EVM_TOKEN_NAMESPACE = "erc20"
SOLANA_TOKEN_NAMESPACE = "spl"

# Blockchain key namespaces
EVM_KEY_NAMESPACE = "eip155"
SOLANA_KEY_NAMESPACE = "solana"

# BSC mainnet and testnet need the PoA extra-data middleware
POA_CHAIN_IDS = (56, 97)
