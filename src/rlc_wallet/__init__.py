"""RLC Wallet - a single-key wallet for ETH and RLC across Ethereum networks."""

__version__ = "0.1.0"
