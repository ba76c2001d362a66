"""In-memory NFT staking contract with score-weighted rewards, read-only views and a demo escrow."""

__version__ = "0.1.0"

__all__ = ["chain", "errors", "escrow", "rewards", "staking", "storage", "views"]