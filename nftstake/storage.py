"""Persistent state of the staking contract."""

from __future__ import annotations

from collections import defaultdict
from collections.abc import MutableSet
from dataclasses import dataclass, field
from typing import Generic, Hashable, Iterable, Iterator, TypeVar

from .chain import Payment
from .errors import ERR_USER_HAS_NOT_ENOUGH_STAKED_BALANCE, ContractError

T = TypeVar("T", bound=Hashable)


class _OrderedSet(MutableSet, Generic[T]):
    """A set that iterates in insertion order."""

    def __init__(self, items: Iterable[T] = ()) -> None:
        self._items: dict[T, None] = dict.fromkeys(items)

    def __contains__(self, item: object) -> bool:
        return item in self._items

    def __iter__(self) -> Iterator[T]:
        return iter(list(self._items))

    def __len__(self) -> int:
        return len(self._items)

    def add(self, item: T) -> None:
        self._items.setdefault(item, None)

    def discard(self, item: T) -> None:
        self._items.pop(item, None)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({list(self._items)!r})"


StakedItem = tuple[str, int]
UnstakingEntry = tuple[int, tuple[Payment, ...]]


@dataclass
class StakingStorage:
    """Collections, scores and per-user stakes kept by the staking contract."""

    allowed_nft_collections: _OrderedSet[str] = field(default_factory=_OrderedSet)
    reward_token_ids: _OrderedSet[str] = field(default_factory=_OrderedSet)
    stake_quantities: dict[tuple[str, str, int], int] = field(default_factory=dict)
    staked_items: defaultdict[str, _OrderedSet[StakedItem]] = field(
        default_factory=lambda: defaultdict(_OrderedSet)
    )
    nft_collection_score: dict[str, int] = field(default_factory=dict)
    nft_collection_nonce_score: dict[tuple[str, int], int] = field(default_factory=dict)
    staking_disabled: bool = False
    unstaking_items: defaultdict[str, _OrderedSet[UnstakingEntry]] = field(
        default_factory=lambda: defaultdict(_OrderedSet)
    )
    unstaking_penalty: int = 0

    def quantity(self, user: str, token_id: str, nonce: int) -> int:
        """Return how many units of an NFT the user has staked."""
        return self.stake_quantities.get((user, token_id, nonce), 0)

    def add_stake(self, user: str, token_id: str, nonce: int, amount: int) -> None:
        """Record that the user staked `amount` more units of an NFT."""
        key = (user, token_id, nonce)
        self.stake_quantities[key] = self.stake_quantities.get(key, 0) + amount
        self.staked_items[user].add((token_id, nonce))

    def remove_stake(self, user: str, token_id: str, nonce: int, amount: int) -> None:
        """Take `amount` units of an NFT off the user's stake."""
        key = (user, token_id, nonce)
        current = self.stake_quantities.get(key, 0)
        if current < amount:
            raise ContractError(ERR_USER_HAS_NOT_ENOUGH_STAKED_BALANCE)
        remaining = current - amount
        if remaining:
            self.stake_quantities[key] = remaining
        else:
            self.stake_quantities.pop(key, None)
            self.staked_items[user].discard((token_id, nonce))