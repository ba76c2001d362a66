"""A demo escrow that holds NFTs of one collection until they may be claimed back."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Optional

from .chain import Blockchain, Payment
from .errors import ContractError
from .staking import ERR_ONLY_OWNER
from .storage import _OrderedSet

ERR_INVALID_TOKEN = "Invalid token"
ERR_NOT_AUTHORIZED = "Not authorized"
ERR_CANT_CLAIM_YET = "Can't claim yet"


@dataclass(frozen=True)
class UserStatus:
    """A user's locked NFT nonces, split by whether they can be claimed back."""

    ready_nonces: tuple[int, ...]
    user_address: str
    locked_nonces: tuple[int, ...]


@dataclass
class DemoEscrow:
    """Locks NFTs of the demo collection and returns them once they are claimable.

    `locked_nfts` maps a nonce to its owner and whether the escrow account has
    already updated it, which is what makes it claimable.
    """

    owner: str
    demo_collection: str
    chain: Blockchain = field(default_factory=Blockchain)
    locked_nfts: dict[int, tuple[str, bool]] = field(default_factory=dict)
    user_nonces: dict[str, _OrderedSet[int]] = field(default_factory=dict)

    def lock_nft(self, caller: str, payments: Iterable[Payment]) -> None:
        """Take the given NFTs into escrow on behalf of the caller."""
        batch = tuple(payments)
        if any(payment.token_id != self.demo_collection for payment in batch):
            raise ContractError(ERR_INVALID_TOKEN)
        for payment in batch:
            self.locked_nfts[payment.nonce] = (caller, False)
            self.user_nonces.setdefault(caller, _OrderedSet()).add(payment.nonce)

    def update(
        self,
        caller: str,
        nonce: int,
        name: bytes,
        royalties: int,
        new_attributes: bytes,
        artwork_uri: bytes,
    ) -> None:
        """Replace the attributes of an NFT in the demo collection (owner only).

        Only the attributes are changed; the other arguments are accepted but unused.
        """
        if caller != self.owner:
            raise ContractError(ERR_ONLY_OWNER)
        self.chain.update_nft_attributes(self.demo_collection, nonce, new_attributes)

    def unlock(self, caller: str, nonce: int) -> None:
        """Send a claimable NFT back to the user who locked it."""
        user: Optional[str]
        user, can_be_claimed = self.locked_nfts.get(nonce, (None, False))
        if user != caller:
            raise ContractError(ERR_NOT_AUTHORIZED)
        if not can_be_claimed:
            raise ContractError(ERR_CANT_CLAIM_YET)
        del self.locked_nfts[nonce]
        nonces = self.user_nonces.get(caller)
        if nonces is not None:
            nonces.discard(nonce)
        self.chain.send(caller, [Payment(self.demo_collection, nonce, 1)])

    def status(self, user: str) -> UserStatus:
        """Return which of the user's nonces are ready and which are still locked."""
        ready: list[int] = []
        locked: list[int] = []
        for nonce in self.user_nonces.get(user, ()):
            _, is_unlocked = self.locked_nfts.get(nonce, ("", False))
            (ready if is_unlocked else locked).append(nonce)
        return UserStatus(tuple(ready), user, tuple(locked))