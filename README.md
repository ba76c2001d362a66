# nftstake

`nftstake` is an in-memory model of an NFT staking contract, with a small demo
NFT escrow beside it. Everything runs in plain Python objects. You can use it to
work out reward arithmetic, to try distribution schedules, or to prototype
against predictable state.

## What it models

- **Staking** (`nftstake.staking.NftStaking`). Users stake NFTs from allowed
  collections.
  - Each staked payment adds `nft_score(token_id, nonce) * amount` to the user's
    score and to the aggregated score.
  - `nft_score` looks for a per-nonce score first, then a collection score, and
    otherwise uses 1,000,000. A score set to zero counts as unset.
- **Unstaking.** `unstake` takes the items off the user's stake.
  - The items are recorded as one batch, stamped with the block timestamp.
  - `claim_unstaked` sends back every batch whose age is at least the unstaking
    penalty. The penalty is 7 days (604,800 seconds) by default.
- **Rewards.** Rewards are tracked through a per-token reward rate per unit of
  staked score. Internally they are denominated by 10^18. There are two ways to
  add them:
  - `distribute_rewards` spreads ad-hoc payments over the current aggregated
    score. If nobody is staking, the payment adds nothing to the rate.
  - `create_distribution_plan` releases an equal amount each round from a start
    round to an end round. Plans are paid out whenever a user's state changes.
    A plan is dropped once the current round is past its end round.
  - `remove_distribution_plan` pays out what a plan still owes and then removes
    it. The plan must match exactly.
  - `claim_rewards` sends a user every reward they have earned.
- **Views** (`nftstake.views`). These are read-only functions that take the
  contract as their first argument:
  - `staking_info`, `pending_rewards`, `staked_items`, `unstaking_items`
  - `stake_quantity`, `user_staking_score`, `aggregated_staking_score`
  - `last_distribution_round`, which returns 0 when unset
  - `reward_rate`, `is_reward_token`, `pending_token_reward`

  Two return types belong to this module: `StakingInfo` and `UnstakingBatch`.
- **Demo escrow** (`nftstake.escrow.DemoEscrow`). The escrow works with one demo
  collection.
  - `lock_nft` takes NFTs from that collection only.
  - `update` lets the owner replace an NFT's attributes on the `Blockchain`.
  - `unlock` returns an NFT to the user who locked it, but only if the NFT is
    marked claimable in `locked_nfts`.
  - `status` reports a user's ready and locked nonces as a `UserStatus`.

### Errors and rollback

Any call the contract would reject raises `nftstake.errors.ContractError`, and
the message carries the contract's error text. `nftstake.errors` also defines
these error messages, plus `UNSTAKE_PENALTY` and `DEFAULT_NFT_SCORE`.

Every `NftStaking` endpoint is atomic. If it raises `ContractError`, the changes
it made to the chain, the storage and the reward state are rolled back.

Every endpoint takes the caller as its first argument. Owner-only endpoints
reject any other caller. These endpoints are owner-only:

- `disable_staking`, `enable_staking`
- `allow_collections`, `disallow_collections`
- `distribute_rewards`
- `set_unstaking_penalty`
- `set_collection_score`, `set_collection_nonce_score`
- `create_distribution_plan`, `remove_distribution_plan`

## Modules

| Module | Contents |
| --- | --- |
| `nftstake.errors` | `ContractError`, error messages, `UNSTAKE_PENALTY`, `DEFAULT_NFT_SCORE` |
| `nftstake.chain` | `Payment`, `Blockchain` (block round and timestamp, balances, transfer log, NFT attributes) |
| `nftstake.storage` | `StakingStorage` (allowed collections, reward tokens, stake quantities, staked and unstaking items, scores) |
| `nftstake.rewards` | `RewardModule`, `DistributionPlan`, `amount_per_round`, `REWARD_RATE_DENOMINATION` |
| `nftstake.staking` | `NftStaking` |
| `nftstake.views` | read-only query functions, `StakingInfo`, `UnstakingBatch` |
| `nftstake.escrow` | `DemoEscrow`, `UserStatus` |

## Example

```python
from nftstake.chain import Payment
from nftstake.staking import NftStaking
from nftstake import views

contract = NftStaking(owner="owner")
contract.allow_collections("owner", ["NFT-abc"])

contract.stake("alice", [Payment("NFT-abc", 1, 1)])          # returns 1_000_000
contract.distribute_rewards("owner", [Payment("REWARD", 0, 100)])
views.pending_token_reward(contract, "alice", "REWARD")       # 100

contract.claim_rewards("alice")
contract.chain.balance("alice", "REWARD")                     # 100

contract.unstake("alice", [Payment("NFT-abc", 1, 1)])
contract.chain.block_timestamp = 7 * 24 * 3600
contract.claim_unstaked("alice")
contract.chain.balance("alice", "NFT-abc", 1)                 # 1
```

Block rounds and timestamps do not advance on their own. Set
`contract.chain.block_round` and `contract.chain.block_timestamp` yourself.

## Behaviour worth knowing

- **Balances are only ever credited.** `Blockchain` credits an account when a
  contract sends it tokens. Payments made *to* a contract are not debited from
  anyone, because the model keeps no record of who holds what before staking.
- **Planned-reward share in views.** `views.pending_rewards` returns two things
  together:
  - the rewards the user has earned so far;
  - for each active plan, a share computed as
    `pending amount × user score ÷ user score`. That share is the user's pending
    amount in that token again. If the user's score is zero while they still
    have pending rewards, it raises `ContractError`.
- **Escrow NFTs never become claimable through the escrow's own methods.**
  `lock_nft` marks every NFT as not yet claimable. Nothing in `DemoEscrow`
  changes that mark, and `update` only replaces attributes. To let `unlock`
  succeed, set the entry in `locked_nfts` to `(user, True)`.

## What it does not do

- It has no command-line program, server or user interface. It is a library.
- It does not connect to any network or blockchain.
- It does not persist state. Everything lives in memory for the life of the
  objects.
- It has no way to mint NFTs.

## Installation

```
pip install .
```

To install with the test dependencies and run the tests:

```
pip install .[test]
pytest
```