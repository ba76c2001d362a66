"""Read-only queries on the staking contract."""

from __future__ import annotations

from dataclasses import dataclass

from .chain import Payment
from .staking import NftStaking


@dataclass(frozen=True)
class UnstakingBatch:
    """NFTs unstaked together at one timestamp."""

    unstake_timestamp: int
    unstake_items: tuple[Payment, ...]


@dataclass(frozen=True)
class StakingInfo:
    """Everything a user needs to know about their stake."""

    staked_items: list[Payment]
    staked_score: int
    aggregated_staked_score: int
    pending_rewards: list[Payment]
    unstaking_items: list[UnstakingBatch]


def staking_info(contract: NftStaking, address: str) -> StakingInfo:
    return StakingInfo(
        staked_items=staked_items(contract, address),
        staked_score=user_staking_score(contract, address),
        aggregated_staked_score=aggregated_staking_score(contract),
        pending_rewards=pending_rewards(contract, address),
        unstaking_items=unstaking_items(contract, address),
    )


def pending_rewards(contract: NftStaking, address: str) -> list[Payment]:
    """Return rewards earned so far plus the share of planned rewards not yet paid out."""
    token_ids = list(contract.storage.reward_token_ids)
    rewards = contract.rewards.pending_rewards(address, token_ids)
    rewards.extend(contract.rewards.user_undistributed_rewards_share(address))
    return rewards


def staked_items(contract: NftStaking, address: str) -> list[Payment]:
    items = contract.storage.staked_items.get(address, ())
    result = []
    for token_id, nonce in items:
        quantity = contract.storage.quantity(address, token_id, nonce)
        if quantity:
            result.append(Payment(token_id, nonce, quantity))
    return result


def unstaking_items(contract: NftStaking, address: str) -> list[UnstakingBatch]:
    entries = contract.storage.unstaking_items.get(address, ())
    return [UnstakingBatch(timestamp, batch) for timestamp, batch in entries]


def stake_quantity(contract: NftStaking, address: str, token_id: str, nonce: int) -> int:
    return contract.storage.quantity(address, token_id, nonce)


def user_staking_score(contract: NftStaking, address: str) -> int:
    return contract.rewards.user_staked_score.get(address, 0)


def aggregated_staking_score(contract: NftStaking) -> int:
    return contract.rewards.aggregated_staked_score


def last_distribution_round(contract: NftStaking) -> int:
    return contract.rewards.last_distribution_round or 0


def reward_rate(contract: NftStaking, token_id: str) -> int:
    return contract.rewards.current_reward_rate.get(token_id, 0)


def is_reward_token(contract: NftStaking, token_id: str) -> bool:
    return token_id in contract.storage.reward_token_ids


def pending_token_reward(contract: NftStaking, address: str, token_id: str) -> int:
    payment = contract.rewards.pending_rewards_for_token(address, token_id)
    return 0 if payment is None else payment.amount