"""
Exception hierarchy for the oracle fee hook.

Configuration mistakes raise one of these and abort the call without touching
stored state. The swap-time fee path never raises them; it falls back to the
static fee instead (see ``ComputationFallback`` in ``hook.py``).
"""

from typing import Optional, Dict, Any


class FeeHookError(Exception):
    """Base exception for all fee hook related errors."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.details = details or {}


class ConfigurationError(FeeHookError):
    """Raised when a configuration call is rejected."""

    pass


class SenderNotAllowed(FeeHookError):
    """Raised when the caller is not authorized for a mutating action."""

    def __init__(self, caller: Any, action: str):
        super().__init__(
            f"Sender {caller!r} is not allowed to call {action}",
            {"caller": caller, "action": action},
        )
        self.caller = caller
        self.action = action


class PriceFeedError(FeeHookError):
    """Raised when the external price feed cannot answer a metadata query."""

    def __init__(self, message: str, pair_id: Optional[int] = None):
        super().__init__(message, {"pair_id": pair_id})
        self.pair_id = pair_id


class PoolNotInitialized(ConfigurationError):
    """Raised when a pool has no registered record."""

    def __init__(self, pool: str):
        super().__init__(f"Pool {pool} is not initialized", {"pool": pool})
        self.pool = pool


class InvalidTokenCount(ConfigurationError):
    """Raised when a pool is registered with an unsupported number of tokens."""

    def __init__(self, num_tokens: int, min_tokens: int, max_tokens: int):
        super().__init__(
            f"Token count {num_tokens} outside [{min_tokens}, {max_tokens}]",
            {"num_tokens": num_tokens},
        )
        self.num_tokens = num_tokens


class TokenIndexOutOfRange(ConfigurationError):
    """Raised when a token index is not below the pool's token count."""

    def __init__(self, token_index: int, num_tokens: int):
        super().__init__(
            f"Token index {token_index} out of range for {num_tokens} tokens",
            {"token_index": token_index, "num_tokens": num_tokens},
        )
        self.token_index = token_index
        self.num_tokens = num_tokens


class InvalidPairIndex(ConfigurationError):
    """Raised when a price-feed pair id is zero (the unconfigured sentinel)."""

    def __init__(self, pair_id: int):
        super().__init__(f"Invalid pair index {pair_id}", {"pair_id": pair_id})
        self.pair_id = pair_id


class InvalidDecimals(ConfigurationError):
    """Raised when the feed reports size decimals outside the supported range."""

    def __init__(self, pair_id: int, size_decimals: int):
        super().__init__(
            f"Pair {pair_id} reports unsupported size decimals {size_decimals}",
            {"pair_id": pair_id, "size_decimals": size_decimals},
        )
        self.pair_id = pair_id
        self.size_decimals = size_decimals


class InvalidArrayLengths(ConfigurationError):
    """Raised when batch arrays differ in length."""

    def __init__(self, indices_length: int, pair_ids_length: int):
        super().__init__(
            f"Array length mismatch: {indices_length} token indices, {pair_ids_length} pair ids",
            {"indices_length": indices_length, "pair_ids_length": pair_ids_length},
        )


class LaneParameterError(ConfigurationError):
    """Raised when a lane parameter update violates its bounds."""

    def __init__(
        self,
        message: str,
        value: int,
        limit: Optional[int] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message, details)
        self.value = value
        self.limit = limit


class InvalidPercentage(LaneParameterError):
    """Raised for negative percentages."""

    def __init__(self, value: int):
        super().__init__(f"Percentage {value} is negative", value, 0)


class PercentageAboveMax(LaneParameterError):
    """Raised when a percentage exceeds 100%."""

    def __init__(self, value: int, limit: int):
        super().__init__(f"Percentage {value} exceeds maximum {limit}", value, limit)


class ThresholdNotBelowCap(LaneParameterError):
    """Raised when a threshold would not stay strictly below the cap deviation."""

    def __init__(self, value: int, cap_deviation: int):
        super().__init__(
            f"Threshold {value} must be below cap deviation {cap_deviation}",
            value,
            cap_deviation,
        )


class CapNotAboveThreshold(LaneParameterError):
    """Raised when a cap deviation would not stay strictly above the threshold."""

    def __init__(self, value: int, threshold: int):
        super().__init__(
            f"Cap deviation {value} must be above threshold {threshold}",
            value,
            threshold,
        )
