import pytest

from nftstake.errors import ERR_USER_HAS_NOT_ENOUGH_STAKED_BALANCE, ContractError
from nftstake.storage import StakingStorage


def test_quantity_defaults_to_zero():
    assert StakingStorage().quantity("alice", "NFT-1", 1) == 0


def test_add_stake_accumulates_and_registers_item():
    storage = StakingStorage()
    storage.add_stake("alice", "NFT-1", 1, 3)
    storage.add_stake("alice", "NFT-1", 1, 2)
    assert storage.quantity("alice", "NFT-1", 1) == 3 + 2
    assert list(storage.staked_items["alice"]) == [("NFT-1", 1)]


def test_staked_items_keep_insertion_order():
    storage = StakingStorage()
    storage.add_stake("alice", "NFT-2", 9, 1)
    storage.add_stake("alice", "NFT-1", 1, 1)
    storage.add_stake("alice", "NFT-2", 9, 1)
    assert list(storage.staked_items["alice"]) == [("NFT-2", 9), ("NFT-1", 1)]


def test_partial_remove_keeps_item():
    storage = StakingStorage()
    storage.add_stake("alice", "NFT-1", 1, 5)
    storage.remove_stake("alice", "NFT-1", 1, 2)
    assert storage.quantity("alice", "NFT-1", 1) == 5 - 2
    assert ("NFT-1", 1) in storage.staked_items["alice"]


def test_full_remove_drops_item():
    storage = StakingStorage()
    storage.add_stake("alice", "NFT-1", 1, 5)
    storage.remove_stake("alice", "NFT-1", 1, 5)
    assert storage.quantity("alice", "NFT-1", 1) == 0
    assert ("NFT-1", 1) not in storage.staked_items["alice"]


def test_remove_more_than_staked_fails():
    storage = StakingStorage()
    storage.add_stake("alice", "NFT-1", 1, 1)
    with pytest.raises(ContractError) as info:
        storage.remove_stake("alice", "NFT-1", 1, 2)
    assert info.value.message == ERR_USER_HAS_NOT_ENOUGH_STAKED_BALANCE
    assert storage.quantity("alice", "NFT-1", 1) == 1


def test_remove_with_nothing_staked_fails():
    with pytest.raises(ContractError, match=ERR_USER_HAS_NOT_ENOUGH_STAKED_BALANCE):
        StakingStorage().remove_stake("bob", "NFT-1", 1, 1)


def test_users_are_kept_apart():
    storage = StakingStorage()
    storage.add_stake("alice", "NFT-1", 1, 4)
    assert storage.quantity("bob", "NFT-1", 1) == 0
    assert list(storage.staked_items["bob"]) == []