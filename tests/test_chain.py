import pytest

from nftstake.chain import Blockchain, Payment


def test_send_credits_recipient():
    chain = Blockchain()
    chain.send("alice", [Payment("RWD-1", 0, 100)])
    assert chain.balance("alice", "RWD-1", 0) == 100


def test_send_accumulates():
    chain = Blockchain()
    chain.send("alice", [Payment("RWD-1", 0, 100)])
    chain.send("alice", [Payment("RWD-1", 0, 50)])
    assert chain.balance("alice", "RWD-1", 0) == 100 + 50


def test_send_keeps_nonces_apart():
    chain = Blockchain()
    chain.send("bob", [Payment("NFT-1", 3, 1), Payment("NFT-1", 4, 2)])
    assert chain.balance("bob", "NFT-1", 3) == 1
    assert chain.balance("bob", "NFT-1", 4) == 2


def test_unknown_balance_is_zero():
    assert Blockchain().balance("nobody", "RWD-1", 0) == 0


def test_transfers_are_recorded():
    chain = Blockchain()
    payments = [Payment("RWD-1", 0, 7)]
    chain.send("carol", payments)
    assert chain.transfers == [("carol", tuple(payments))]


def test_update_nft_attributes_replaces():
    chain = Blockchain()
    chain.update_nft_attributes("NFT-1", 5, b"first")
    chain.update_nft_attributes("NFT-1", 5, b"second")
    assert chain.nft_attributes[("NFT-1", 5)] == b"second"


@pytest.mark.parametrize("nonce, amount", [(-1, 1), (0, -1)])
def test_payment_rejects_negative_values(nonce, amount):
    with pytest.raises(ValueError):
        Payment("RWD-1", nonce, amount)


def test_payment_equality_and_hash():
    assert Payment("A", 1, 2) == Payment("A", 1, 2)
    assert len({Payment("A", 1, 2), Payment("A", 1, 2)}) == 1