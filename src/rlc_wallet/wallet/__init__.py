"""Wallet core for RLC Wallet.

Key handling, per-chain Web3 access, transaction submission and receipt
polling, concurrent balance and faucet queries, and the sweep operation.
"""
