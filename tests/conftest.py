"""Shared fixtures for the oracle fee hook tests."""

import matplotlib

matplotlib.use("Agg")

import pytest

from oracle_fee_hook.core.auth import AllowListAuthorizer
from oracle_fee_hook.core.fixed_point import ONE
from oracle_fee_hook.core.hook import OracleFeeHook
from oracle_fee_hook.core.pool import PoolSwapParams, WeightedPool
from oracle_fee_hook.core.price_feed import InMemoryPriceFeed

ADMIN = "admin"
STRANGER = "stranger"

DEFAULT_MAX_FEE = 5 * 10**16  # 5%
DEFAULT_THRESHOLD = 10**14  # 0.01%
STATIC_FEE = 10**16  # 1%

POOL_ADDRESS = "0xPOOL"
BALANCE = 10**24
HALF = ONE // 2


def ramp_reference_fee(deviation, threshold, cap_deviation, max_fee, static_fee):
    """Closed-form ramp with floor rounding at every step."""
    if deviation <= threshold:
        return static_fee
    norm = min(ONE, (deviation - threshold) * ONE // (cap_deviation - threshold))
    return min(max_fee, static_fee + (max_fee - static_fee) * norm // ONE)


@pytest.fixture
def price_feed():
    feed = InMemoryPriceFeed()
    feed.set_pair(1, 1_000_000, 6)
    feed.set_pair(2, 1_000_000, 6)
    feed.set_pair(3, 2_500_000, 6)
    feed.set_pair(4, 3_000, 3)
    return feed


@pytest.fixture
def authorizer():
    return AllowListAuthorizer({AllowListAuthorizer.WILDCARD: [ADMIN]})


@pytest.fixture
def hook(price_feed, authorizer):
    return OracleFeeHook(
        price_feed=price_feed,
        authorizer=authorizer,
        default_max_fee_percentage=DEFAULT_MAX_FEE,
        default_threshold_percentage=DEFAULT_THRESHOLD,
    )


@pytest.fixture
def pool():
    return WeightedPool(POOL_ADDRESS, [HALF, HALF])


@pytest.fixture
def configured_hook(hook, pool):
    """Two-token equal-weight pool with token 0 on pair 1 and token 1 on pair 2."""
    hook.on_register(pool, 2)
    hook.set_token_price_config_batch(pool, [0, 1], [1, 2], ADMIN)
    return hook


@pytest.fixture
def balanced_swap():
    return PoolSwapParams(index_in=0, index_out=1, balances_scaled18=[BALANCE, BALANCE], amount_given_scaled18=10**18)
