"""An in-memory ledger standing in for the chain the contracts run on."""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass, field
from typing import Iterable


@dataclass(frozen=True)
class Payment:
    """A transfer of `amount` units of the token `token_id` with `nonce`."""

    token_id: str
    nonce: int
    amount: int

    def __post_init__(self) -> None:
        if self.nonce < 0:
            raise ValueError("nonce must not be negative")
        if self.amount < 0:
            raise ValueError("amount must not be negative")


@dataclass
class Blockchain:
    """Block state, token balances and NFT attributes known to the contracts."""

    block_round: int = 0
    block_timestamp: int = 0
    balances: defaultdict[tuple[str, str, int], int] = field(
        default_factory=lambda: defaultdict(int)
    )
    nft_attributes: dict[tuple[str, int], bytes] = field(default_factory=dict)
    transfers: list[tuple[str, tuple[Payment, ...]]] = field(default_factory=list)

    def send(self, to: str, payments: Iterable[Payment]) -> None:
        """Credit every payment to the account `to`."""
        batch = tuple(payments)
        for payment in batch:
            self.balances[(to, payment.token_id, payment.nonce)] += payment.amount
        self.transfers.append((to, batch))

    def update_nft_attributes(self, token_id: str, nonce: int, attributes: bytes) -> None:
        """Replace the attributes of one NFT."""
        self.nft_attributes[(token_id, nonce)] = bytes(attributes)

    def balance(self, address: str, token_id: str, nonce: int = 0) -> int:
        """Return how much of a token an account holds."""
        return self.balances.get((address, token_id, nonce), 0)