"""The NFT staking contract: staking, unstaking, reward claims and administration."""

from __future__ import annotations

import copy
import functools
from typing import Callable, Iterable, Optional, TypeVar

from .chain import Blockchain, Payment
from .errors import (
    DEFAULT_NFT_SCORE,
    ERR_NEGATIVE_RESULT,
    ERR_NFT_COLLECTION_NOT_ALLOWED,
    ERR_NO_REWARDS_TO_CLAIM,
    ERR_NO_UNSTAKED_ITEMS,
    ERR_STAKING_DISABLED,
    UNSTAKE_PENALTY,
    ContractError,
)
from .rewards import DistributionPlan, RewardModule
from .storage import StakingStorage

ERR_ONLY_OWNER = "Endpoint can only be called by owner"

F = TypeVar("F", bound=Callable)


def _atomic(method: F) -> F:
    """Roll every state change back if the call raises a ContractError."""

    @functools.wraps(method)
    def wrapper(self: "NftStaking", *args, **kwargs):
        memo = {id(self.chain): self.chain}
        chain_state = copy.deepcopy(vars(self.chain))
        storage_state = copy.deepcopy(vars(self.storage), memo)
        rewards_state = copy.deepcopy(vars(self.rewards), memo)
        try:
            return method(self, *args, **kwargs)
        except ContractError:
            for obj, saved in (
                (self.chain, chain_state),
                (self.storage, storage_state),
                (self.rewards, rewards_state),
            ):
                state = vars(obj)
                state.clear()
                state.update(saved)
            raise

    return wrapper  # type: ignore[return-value]


class NftStaking:
    """Users stake NFTs for a score and earn reward tokens in proportion to it."""

    def __init__(self, owner: str, chain: Optional[Blockchain] = None) -> None:
        self.owner = owner
        self.chain = chain if chain is not None else Blockchain()
        self.storage = StakingStorage(unstaking_penalty=UNSTAKE_PENALTY)
        self.rewards = RewardModule(self.chain)

    # -- checks -------------------------------------------------------------

    def _require_owner(self, caller: str) -> None:
        if caller != self.owner:
            raise ContractError(ERR_ONLY_OWNER)

    def _require_staking_enabled(self) -> None:
        if self.storage.staking_disabled:
            raise ContractError(ERR_STAKING_DISABLED)

    def _require_can_stake(self, token_id: str) -> None:
        if token_id not in self.storage.allowed_nft_collections:
            raise ContractError(ERR_NFT_COLLECTION_NOT_ALLOWED)

    # -- scores -------------------------------------------------------------

    def payment_score(self, payment: Payment) -> int:
        """Return the score a payment of NFTs is worth."""
        return self.nft_score(payment.token_id, payment.nonce) * payment.amount

    def nft_score(self, token_id: str, nonce: int) -> int:
        """Return the score of one NFT: nonce score, else collection score, else default."""
        # a stored zero reads back as unset
        nonce_score = self.storage.nft_collection_nonce_score.get((token_id, nonce))
        if nonce_score:
            return nonce_score
        collection_score = self.storage.nft_collection_score.get(token_id)
        if collection_score:
            return collection_score
        return DEFAULT_NFT_SCORE

    # -- shared logic -------------------------------------------------------

    def _handle_state_change(self, user: str) -> None:
        self.rewards.distribute_as_planned()
        for token_id in self.storage.reward_token_ids:
            self.rewards.store_pending_rewards(user, token_id)

    # -- user endpoints -----------------------------------------------------

    @_atomic
    def stake(self, caller: str, payments: Iterable[Payment]) -> int:
        """Stake the given NFTs and return the score they add."""
        self._require_staking_enabled()
        self._handle_state_change(caller)
        total_score = 0
        for payment in payments:
            self._require_can_stake(payment.token_id)
            total_score += self.payment_score(payment)
            self.storage.add_stake(caller, payment.token_id, payment.nonce, payment.amount)
        self.rewards.increase_staked_score(caller, total_score)
        return total_score

    @_atomic
    def unstake(self, caller: str, payments: Iterable[Payment]) -> int:
        """Start unstaking the given NFTs and return the score they took away."""
        self._require_staking_enabled()
        batch = tuple(payments)
        self._handle_state_change(caller)
        total_score = 0
        for payment in batch:
            self.storage.remove_stake(caller, payment.token_id, payment.nonce, payment.amount)
            total_score += self.payment_score(payment)
        self.rewards.decrease_staked_score(caller, total_score)
        self.storage.unstaking_items[caller].add((self.chain.block_timestamp, batch))
        return total_score

    @_atomic
    def claim_unstaked(self, caller: str) -> None:
        """Send back every unstaked batch whose waiting period has passed."""
        self._require_staking_enabled()
        now = self.chain.block_timestamp
        penalty = self.storage.unstaking_penalty
        has_unstaked = False
        entries = self.storage.unstaking_items[caller]
        for entry in entries:
            unstake_timestamp, batch = entry
            if unstake_timestamp > now:
                raise ContractError(ERR_NEGATIVE_RESULT)
            if now - unstake_timestamp >= penalty:
                self.chain.send(caller, batch)
                entries.discard(entry)
                has_unstaked = True
        if not has_unstaked:
            raise ContractError(ERR_NO_UNSTAKED_ITEMS)

    @_atomic
    def claim_rewards(self, caller: str) -> None:
        """Send the caller every reward they have earned."""
        self._require_staking_enabled()
        self._handle_state_change(caller)
        reward_payments = []
        for token_id in self.storage.reward_token_ids:
            payment = self.rewards.claim_pending_rewards(caller, token_id)
            if payment is not None:
                reward_payments.append(payment)
        if not reward_payments:
            raise ContractError(ERR_NO_REWARDS_TO_CLAIM)
        self.chain.send(caller, reward_payments)

    # -- owner endpoints ----------------------------------------------------

    @_atomic
    def disable_staking(self, caller: str) -> None:
        self._require_owner(caller)
        self.storage.staking_disabled = True

    @_atomic
    def enable_staking(self, caller: str) -> None:
        self._require_owner(caller)
        self.storage.staking_disabled = False

    @_atomic
    def allow_collections(self, caller: str, collections: Iterable[str]) -> None:
        self._require_owner(caller)
        for collection in collections:
            self.storage.allowed_nft_collections.add(collection)

    @_atomic
    def disallow_collections(self, caller: str, collections: Iterable[str]) -> None:
        """Stop further staking from the collections; existing stakes stay as they are."""
        self._require_owner(caller)
        for collection in collections:
            self.storage.allowed_nft_collections.discard(collection)

    @_atomic
    def distribute_rewards(self, caller: str, payments: Iterable[Payment]) -> None:
        """Spread the given reward payments over all current stakers."""
        self._require_owner(caller)
        self._require_staking_enabled()
        self.rewards.distribute_as_planned()
        for payment in payments:
            self.storage.reward_token_ids.add(payment.token_id)
            self.rewards.increase_reward_rate(payment)

    @_atomic
    def set_unstaking_penalty(self, caller: str, penalty: int) -> None:
        """Set how many seconds unstaked NFTs wait before they can be claimed."""
        self._require_owner(caller)
        self.storage.unstaking_penalty = penalty

    @_atomic
    def set_collection_score(self, caller: str, collection: str, score: int) -> None:
        """Set the score of a whole collection and allow it; staked NFTs keep theirs."""
        self._require_owner(caller)
        self.storage.nft_collection_score[collection] = score
        self.storage.allowed_nft_collections.add(collection)

    @_atomic
    def set_collection_nonce_score(
        self, caller: str, collection: str, nonce: int, score: int
    ) -> None:
        """Set the score of one NFT and allow its collection; staked NFTs keep theirs."""
        self._require_owner(caller)
        self.storage.nft_collection_nonce_score[(collection, nonce)] = score
        self.storage.allowed_nft_collections.add(collection)

    @_atomic
    def create_distribution_plan(
        self, caller: str, payment: Payment, start_round: int, end_round: int
    ) -> DistributionPlan:
        """Plan to pay out `payment` evenly over the rounds from start to end."""
        self._require_owner(caller)
        self.storage.reward_token_ids.add(payment.token_id)
        return self.rewards.create_plan(
            payment.token_id, start_round, end_round, payment.amount
        )

    @_atomic
    def remove_distribution_plan(
        self,
        caller: str,
        reward_token_id: str,
        start_round: int,
        end_round: int,
        amount_per_round: int,
    ) -> None:
        """Remove the plan matching exactly the given configuration."""
        self._require_owner(caller)
        self.rewards.remove_plan(reward_token_id, start_round, end_round, amount_per_round)