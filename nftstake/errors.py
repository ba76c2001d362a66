"""Contract error type, error messages and default configuration values."""

ERR_NFT_COLLECTION_NOT_ALLOWED = "NFT collection not allowed"
ERR_USER_HAS_NOT_ENOUGH_STAKED_BALANCE = "User has not enough staked balance"
ERR_STAKING_DISABLED = "Staking is disabled"
ERR_NO_UNSTAKED_ITEMS = "No unstaked items"
ERR_NO_REWARDS_TO_CLAIM = "No rewards to claim"
ERR_PLAN_NOT_FOUND = "Plan not found"
ERR_NEGATIVE_RESULT = "cannot subtract because result would be negative"
ERR_DIVISION_BY_ZERO = "division by zero"

UNSTAKE_PENALTY = 7 * 24 * 3600  # 7 days, in seconds
DEFAULT_NFT_SCORE = 1_000_000


class ContractError(Exception):
    """Raised when a contract call is rejected; the message says why."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message