"""
Contract ABIs used by the EVM wallet

FACTORY_ABI covers the platform token factory, ERC20_ABI the subset of
ERC-20 needed for deposits.
"""

from typing import Any, Dict, List

FACTORY_ABI: List[Dict[str, Any]] = [
    {
        "type": "event",
        "name": "TokenCreated",
        "anonymous": False,
        "inputs": [
            {"name": "creatorAddress", "type": "address", "indexed": True},
            {"name": "tokenAddress", "type": "address", "indexed": True},
            {"name": "name", "type": "string", "indexed": False},
            {"name": "symbol", "type": "string", "indexed": False},
            {"name": "decimals", "type": "uint8", "indexed": False},
            {"name": "initialSupply", "type": "uint256", "indexed": False},
        ],
    },
    {
        "type": "error",
        "name": "UnauthorizedError",
        "inputs": [
            {"name": "expected", "type": "address"},
            {"name": "actual", "type": "address"},
        ],
    },
    {
        "type": "error",
        "name": "InsufficientTokenCreationFeeError",
        "inputs": [
            {"name": "expected", "type": "uint256"},
            {"name": "actual", "type": "uint256"},
        ],
    },
    {
        "type": "error",
        "name": "InvalidPaymentManagerAddressError",
        "inputs": [
            {"name": "paymentManagerAddress", "type": "address"},
        ],
    },
    {
        "type": "function",
        "name": "getTokenCreationFee",
        "stateMutability": "view",
        "inputs": [],
        "outputs": [{"name": "", "type": "uint256"}],
    },
    {
        "type": "function",
        "name": "createToken",
        "stateMutability": "payable",
        "inputs": [
            {"name": "name", "type": "string"},
            {"name": "symbol", "type": "string"},
        ],
        "outputs": [{"name": "", "type": "address"}],
    },
]

ERC20_ABI: List[Dict[str, Any]] = [
    {
        "constant": True,
        "inputs": [],
        "name": "decimals",
        "outputs": [{"name": "", "type": "uint8"}],
        "type": "function",
    },
    {
        "constant": True,
        "inputs": [],
        "name": "symbol",
        "outputs": [{"name": "", "type": "string"}],
        "type": "function",
    },
    {
        "constant": True,
        "inputs": [{"name": "_owner", "type": "address"}],
        "name": "balanceOf",
        "outputs": [{"name": "balance", "type": "uint256"}],
        "type": "function",
    },
    {
        "constant": True,
        "inputs": [
            {"name": "_owner", "type": "address"},
            {"name": "_spender", "type": "address"},
        ],
        "name": "allowance",
        "outputs": [{"name": "", "type": "uint256"}],
        "type": "function",
    },
    {
        "constant": False,
        "inputs": [
            {"name": "_spender", "type": "address"},
            {"name": "_value", "type": "uint256"},
        ],
        "name": "approve",
        "outputs": [{"name": "", "type": "bool"}],
        "type": "function",
    },
    {
        "constant": False,
        "inputs": [
            {"name": "_to", "type": "address"},
            {"name": "_value", "type": "uint256"},
        ],
        "name": "transfer",
        "outputs": [{"name": "", "type": "bool"}],
        "type": "function",
    },
]
