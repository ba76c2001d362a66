"""Reward rates per staked score and planned reward distributions."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Optional

from .chain import Blockchain, Payment
from .errors import (
    ERR_DIVISION_BY_ZERO,
    ERR_NEGATIVE_RESULT,
    ERR_PLAN_NOT_FOUND,
    ContractError,
)
from .storage import _OrderedSet

REWARD_RATE_DENOMINATION = 1_000_000_000_000_000_000


def _sub(a: int, b: int) -> int:
    if b > a:
        raise ContractError(ERR_NEGATIVE_RESULT)
    return a - b


def _div(a: int, b: int) -> int:
    if b == 0:
        raise ContractError(ERR_DIVISION_BY_ZERO)
    return a // b


@dataclass(frozen=True)
class DistributionPlan:
    """Rewards of one token paid out every round from start to end.

    `amount_per_round` is denominated by REWARD_RATE_DENOMINATION.
    """

    token_id: str
    start_round: int
    end_round: int
    amount_per_round: int


def amount_per_round(start_round: int, end_round: int, total_distribution_amount: int) -> int:
    """Return the denominated amount a plan pays out each round."""
    rounds = _sub(end_round, start_round)
    return _div(total_distribution_amount * REWARD_RATE_DENOMINATION, rounds)


@dataclass
class RewardModule:
    """Tracks staked scores, reward rates, stored rewards and distribution plans."""

    chain: Blockchain
    user_staked_score: dict[str, int] = field(default_factory=dict)
    aggregated_staked_score: int = 0
    current_reward_rate: dict[str, int] = field(default_factory=dict)
    user_reward_rate: dict[tuple[str, str], int] = field(default_factory=dict)
    user_stored_rewards: dict[tuple[str, str], int] = field(default_factory=dict)
    last_distribution_round: Optional[int] = None
    distribution_plans: _OrderedSet[DistributionPlan] = field(default_factory=_OrderedSet)

    def increase_staked_score(self, user: str, amount: int) -> None:
        self.user_staked_score[user] = self.user_staked_score.get(user, 0) + amount
        self.aggregated_staked_score += amount

    def decrease_staked_score(self, user: str, amount: int) -> None:
        user_score = _sub(self.user_staked_score.get(user, 0), amount)
        aggregated = _sub(self.aggregated_staked_score, amount)
        self.user_staked_score[user] = user_score
        self.aggregated_staked_score = aggregated

    def increase_reward_rate(self, payment: Payment) -> None:
        """Spread a reward payment over the whole staked score."""
        self.increase_reward_rate_raw(
            payment.token_id, payment.amount * REWARD_RATE_DENOMINATION
        )

    def increase_reward_rate_raw(self, token_id: str, amount: int) -> None:
        """Spread an already denominated amount over the whole staked score."""
        if self.aggregated_staked_score == 0:
            return
        increase = amount // self.aggregated_staked_score
        self.current_reward_rate[token_id] = (
            self.current_reward_rate.get(token_id, 0) + increase
        )

    def store_pending_rewards(self, user: str, token_id: str) -> None:
        """Move the user's rewards accrued since the last update into storage."""
        rewards = self.unstored_rewards(user, token_id)
        if rewards == 0:
            return
        key = (user, token_id)
        self.user_stored_rewards[key] = self.user_stored_rewards.get(key, 0) + rewards
        self.user_reward_rate[key] = self.current_reward_rate.get(token_id, 0)

    def unstored_rewards(self, user: str, token_id: str) -> int:
        """Return what the user has accrued since their reward rate was last taken."""
        current_rate = self.current_reward_rate.get(token_id, 0)
        user_rate = self.user_reward_rate.get((user, token_id), 0)
        rate_diff = _sub(current_rate, user_rate)
        if rate_diff == 0:
            return 0
        return rate_diff * self.user_staked_score.get(user, 0) // REWARD_RATE_DENOMINATION

    def claim_pending_rewards(self, user: str, token_id: str) -> Optional[Payment]:
        """Clear the user's rewards in one token and return them, if any."""
        self.store_pending_rewards(user, token_id)
        rewards = self.user_stored_rewards.get((user, token_id), 0)
        if rewards == 0:
            return None
        del self.user_stored_rewards[(user, token_id)]
        return Payment(token_id, 0, rewards)

    def pending_rewards(self, user: str, token_ids: Iterable[str]) -> list[Payment]:
        rewards = (self.pending_rewards_for_token(user, token_id) for token_id in token_ids)
        return [reward for reward in rewards if reward is not None]

    def pending_rewards_for_token(self, user: str, token_id: str) -> Optional[Payment]:
        """Return stored plus unstored rewards in one token, or None if nothing."""
        total = self.user_stored_rewards.get((user, token_id), 0) + self.unstored_rewards(
            user, token_id
        )
        if total == 0:
            return None
        return Payment(token_id, 0, total)

    def create_plan(
        self, token_id: str, start_round: int, end_round: int, total_distribution_amount: int
    ) -> DistributionPlan:
        per_round = amount_per_round(start_round, end_round, total_distribution_amount)
        plan = DistributionPlan(token_id, start_round, end_round, per_round)
        self.distribution_plans.add(plan)
        return plan

    def remove_plan(
        self, token_id: str, start_round: int, end_round: int, amount_per_round: int
    ) -> None:
        """Pay out what the plan still owes up to now, then drop it."""
        plan = DistributionPlan(token_id, start_round, end_round, amount_per_round)
        if plan not in self.distribution_plans:
            raise ContractError(ERR_PLAN_NOT_FOUND)
        amount = self.amount_to_distribute(plan, self.chain.block_round)
        if amount is not None:
            self.increase_reward_rate_raw(plan.token_id, amount)
        self.distribution_plans.discard(plan)
        self.last_distribution_round = None

    def distribute_as_planned(self) -> None:
        """Pay out every active plan up to the current round; drop finished ones."""
        current_round = self.chain.block_round
        for plan in self.distribution_plans:
            amount = self.amount_to_distribute(plan, current_round)
            if amount is None:
                self.distribution_plans.discard(plan)
                continue
            self.increase_reward_rate_raw(plan.token_id, amount)
            # a stored zero reads back as unset
            self.last_distribution_round = current_round or None

    def amount_to_distribute(
        self, plan: DistributionPlan, current_round: int
    ) -> Optional[int]:
        """Return the undistributed amount, or None once the plan has ended."""
        if current_round > plan.end_round:
            return None
        if current_round < plan.start_round:
            return 0
        last_round = (
            plan.start_round
            if self.last_distribution_round is None
            else self.last_distribution_round
        )
        return plan.amount_per_round * _sub(current_round, last_round)

    def planned_undistributed_rewards(self) -> list[Payment]:
        current_round = self.chain.block_round
        rewards = []
        for plan in self.distribution_plans:
            amount = self.amount_to_distribute(plan, current_round)
            if amount is not None:
                rewards.append(Payment(plan.token_id, 0, amount))
        return rewards

    def user_undistributed_rewards_share(self, user: str) -> list[Payment]:
        undistributed = self.planned_undistributed_rewards()
        if not undistributed:
            return []
        total_score = self.user_staked_score.get(user, 0)
        user_score = self.user_staked_score.get(user, 0)
        shares = []
        for reward in undistributed:
            payment = self.pending_rewards_for_token(user, reward.token_id)
            if payment is not None:
                amount = _div(payment.amount * user_score, total_score)
                shares.append(Payment(payment.token_id, payment.nonce, amount))
        return shares