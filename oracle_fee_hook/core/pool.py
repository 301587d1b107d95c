from typing import List, Optional, Sequence
from enum import Enum

from .fixed_point import ONE, mul_down, div_down


class SwapKind(Enum):
    """Which side of the swap the given amount refers to."""
    EXACT_IN = 0
    EXACT_OUT = 1


class PoolSwapParams:
    """
    Represents a proposed swap as handed to the fee hook by the host.
    """
    def __init__(self,
                 index_in: int,
                 index_out: int,
                 balances_scaled18: Sequence[int],
                 amount_given_scaled18: int = 0,
                 kind: SwapKind = SwapKind.EXACT_IN,
                 router: Optional[str] = None,
                 user_data: bytes = b""):
        """
        Initialize swap parameters.

        Args:
            index_in: Pool index of the token being swapped in
            index_out: Pool index of the token being swapped out
            balances_scaled18: Pool balances, pre-scaled to 18 decimals
            amount_given_scaled18: Amount of the given token, 18 decimals
            kind: Whether the given amount is the input or the output
            router: Address of the router that initiated the swap
            user_data: Opaque data forwarded by the router
        """
        self.index_in = index_in
        self.index_out = index_out
        self.balances_scaled18 = list(balances_scaled18)
        self.amount_given_scaled18 = amount_given_scaled18
        self.kind = kind
        self.router = router.lower() if router else None
        self.user_data = user_data

    def scaled(self, factor: int) -> 'PoolSwapParams':
        """
        Return a copy with balances and amount multiplied by the same factor.

        Args:
            factor: Positive integer multiplier

        Returns:
            New PoolSwapParams instance
        """
        return PoolSwapParams(
            index_in=self.index_in,
            index_out=self.index_out,
            balances_scaled18=[balance * factor for balance in self.balances_scaled18],
            amount_given_scaled18=self.amount_given_scaled18 * factor,
            kind=self.kind,
            router=self.router,
            user_data=self.user_data
        )


class WeightedPool:
    """
    Pool pricing collaborator: a constant-weight pool's address and weights.

    Balances are not held here; they travel with each swap request.
    """
    def __init__(self, pool_address: str, normalized_weights: Sequence[int]):
        """
        Initialize a weighted pool.

        Args:
            pool_address: Address of the pool
            normalized_weights: Token weights, 18-decimal fixed point, summing to ONE
        """
        self.pool_address = pool_address.lower()  # Normalize to lowercase
        self.normalized_weights = list(normalized_weights)

    @property
    def address(self) -> str:
        return self.pool_address

    @property
    def num_tokens(self) -> int:
        return len(self.normalized_weights)

    def get_normalized_weights(self) -> List[int]:
        return list(self.normalized_weights)

    @classmethod
    def with_equal_weights(cls, pool_address: str, num_tokens: int) -> 'WeightedPool':
        """
        Create a pool whose weights are all equal.

        The rounding remainder goes to the last token so the weights sum to ONE.
        """
        weight = ONE // num_tokens
        weights = [weight] * num_tokens
        weights[-1] += ONE - weight * num_tokens
        return cls(pool_address, weights)


def compute_pair_price(balances: Sequence[int],
                       weights: Sequence[int],
                       index_in: int,
                       index_out: int) -> int:
    """
    Marginal price of token_in in units of token_out for a weighted pool.

    pool_px = (balance[out] * weight[in]) / (balance[in] * weight[out])

    Args:
        balances: Balances scaled to 18 decimals
        weights: Normalized weights, 18-decimal fixed point
        index_in: Index of the token being swapped in
        index_out: Index of the token being swapped out

    Returns:
        Pair price in 18-decimal fixed point, rounded down at each step

    Raises:
        ZeroDivisionError: If the token_in side of the denominator is zero
    """
    numerator = mul_down(balances[index_out], weights[index_in])
    denominator = mul_down(balances[index_in], weights[index_out])
    return div_down(numerator, denominator)
