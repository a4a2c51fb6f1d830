"""Typed binding of the RLC (ERC-20) contract on one chain."""

from __future__ import annotations

from hexbytes import HexBytes
from web3 import Web3

ERC20_ABI = [
    {
        "constant": True,
        "inputs": [{"name": "_owner", "type": "address"}],
        "name": "balanceOf",
        "outputs": [{"name": "balance", "type": "uint256"}],
        "stateMutability": "view",
        "type": "function",
    },
    {
        "constant": False,
        "inputs": [
            {"name": "_to", "type": "address"},
            {"name": "_value", "type": "uint256"},
        ],
        "name": "transfer",
        "outputs": [{"name": "success", "type": "bool"}],
        "stateMutability": "nonpayable",
        "type": "function",
    },
    {
        "constant": True,
        "inputs": [],
        "name": "decimals",
        "outputs": [{"name": "", "type": "uint8"}],
        "stateMutability": "view",
        "type": "function",
    },
]


class TokenContract:
    """``balanceOf`` / ``transfer`` bound once to a deployed address."""

    def __init__(self, w3: Web3, address: str) -> None:
        self.address = Web3.to_checksum_address(address)
        self._contract = w3.eth.contract(address=self.address, abi=ERC20_ABI)

    def balance_of(self, owner: str) -> int:
        """Balance of *owner* in the token's smallest unit (nRLC)."""
        checksum = Web3.to_checksum_address(owner)
        return int(self._contract.functions.balanceOf(checksum).call())

    def encode_transfer(self, to: str, amount: int) -> bytes:
        """ABI-encoded call data for ``transfer(to, amount)``."""
        if amount < 0:
            raise ValueError(f"Transfer amount must be positive, got {amount}")
        checksum = Web3.to_checksum_address(to)
        return bytes(HexBytes(self._contract.encode_abi("transfer", args=[checksum, int(amount)])))
