import pytest

from nftstake.chain import Payment
from nftstake.errors import DEFAULT_NFT_SCORE
from nftstake.rewards import REWARD_RATE_DENOMINATION
from nftstake.staking import NftStaking
from nftstake import views

OWNER = "owner"
ALICE = "alice"
BOB = "bob"
NFT = "NFT-abcdef"
REWARD = "REW-123456"


@pytest.fixture
def contract():
    staking = NftStaking(OWNER)
    staking.allow_collections(OWNER, [NFT])
    return staking


def test_staking_info_after_stake(contract):
    contract.stake(ALICE, [Payment(NFT, 1, 2)])
    contract.stake(BOB, [Payment(NFT, 2, 1)])
    info = views.staking_info(contract, ALICE)
    assert info.staked_items == [Payment(NFT, 1, 2)]
    assert info.staked_score == 2 * DEFAULT_NFT_SCORE
    assert info.aggregated_staked_score == 3 * DEFAULT_NFT_SCORE
    assert info.pending_rewards == []
    assert info.unstaking_items == []


def test_staked_items_drop_fully_unstaked(contract):
    contract.stake(ALICE, [Payment(NFT, 1, 1), Payment(NFT, 2, 1)])
    contract.unstake(ALICE, [Payment(NFT, 1, 1)])
    assert views.staked_items(contract, ALICE) == [Payment(NFT, 2, 1)]
    assert views.stake_quantity(contract, ALICE, NFT, 1) == 0
    assert views.stake_quantity(contract, ALICE, NFT, 2) == 1


def test_unstaking_items_keep_timestamp(contract):
    contract.stake(ALICE, [Payment(NFT, 1, 1)])
    contract.chain.block_timestamp = 42
    contract.unstake(ALICE, [Payment(NFT, 1, 1)])
    assert views.unstaking_items(contract, ALICE) == [
        views.UnstakingBatch(42, (Payment(NFT, 1, 1),))
    ]


def test_unknown_user_views_are_empty(contract):
    assert views.staked_items(contract, BOB) == []
    assert views.unstaking_items(contract, BOB) == []
    assert views.user_staking_score(contract, BOB) == 0
    assert views.pending_token_reward(contract, BOB, REWARD) == 0
    assert views.last_distribution_round(contract) == 0


def test_reward_views_after_distribution(contract):
    contract.stake(ALICE, [Payment(NFT, 1, 1)])
    assert not views.is_reward_token(contract, REWARD)
    contract.distribute_rewards(OWNER, [Payment(REWARD, 0, 1000)])
    assert views.is_reward_token(contract, REWARD)
    assert views.reward_rate(contract, REWARD) == 1000 * REWARD_RATE_DENOMINATION // DEFAULT_NFT_SCORE
    assert views.pending_token_reward(contract, ALICE, REWARD) == 1000
    assert views.pending_rewards(contract, ALICE) == [Payment(REWARD, 0, 1000)]


def test_pending_rewards_adds_planned_share(contract):
    contract.stake(ALICE, [Payment(NFT, 1, 1)])
    contract.distribute_rewards(OWNER, [Payment(REWARD, 0, 1000)])
    contract.create_distribution_plan(OWNER, Payment(REWARD, 0, 100), 0, 10)
    rewards = views.pending_rewards(contract, ALICE)
    assert len(rewards) == 2
    assert rewards[0] == rewards[1] == Payment(REWARD, 0, 1000)


def test_last_distribution_round_follows_plan(contract):
    contract.create_distribution_plan(OWNER, Payment(REWARD, 0, 100), 0, 10)
    contract.stake(ALICE, [Payment(NFT, 1, 1)])
    contract.chain.block_round = 4
    contract.stake(BOB, [Payment(NFT, 2, 1)])
    assert views.last_distribution_round(contract) == 4
    assert views.aggregated_staking_score(contract) == 2 * DEFAULT_NFT_SCORE