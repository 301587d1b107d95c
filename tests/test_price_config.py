"""Tests for per-token price configuration on the hook."""

import pytest

from oracle_fee_hook.core.exceptions import (
    InvalidArrayLengths,
    InvalidDecimals,
    InvalidPairIndex,
    PoolNotInitialized,
    PriceFeedError,
    SenderNotAllowed,
    TokenIndexOutOfRange,
)
from oracle_fee_hook.core.models import FeeLane

from conftest import ADMIN, STRANGER


@pytest.fixture
def four_token_pool(hook):
    hook.on_register("0xFour", 4)
    return "0xFour"


def test_registration_yields_unset_slots(hook, four_token_pool):
    assert hook.get_all_token_price_configs(four_token_pool) == ([0, 0, 0, 0], [0, 0, 0, 0])
    for index in range(4):
        assert hook.get_token_price_config(four_token_pool, index) == (0, 0)


def test_set_token_price_config_derives_divisor(hook, four_token_pool):
    hook.set_token_price_config(four_token_pool, 0, 1, ADMIN)
    assert hook.get_token_price_config(four_token_pool, 0) == (1, 1)

    hook.set_token_price_config(four_token_pool, 3, 4, ADMIN)
    assert hook.get_token_price_config(four_token_pool, 3) == (4, 1_000)
    assert hook.get_all_token_price_configs(four_token_pool) == ([1, 0, 0, 4], [1, 0, 0, 1_000])


def test_pool_addresses_are_case_insensitive(hook, four_token_pool):
    hook.set_token_price_config("0XFOUR", 1, 2, ADMIN)
    assert hook.get_token_price_config("0xfour", 1) == (2, 1)


def test_reregistration_clears_everything(hook, four_token_pool):
    hook.set_token_price_config(four_token_pool, 0, 1, ADMIN)
    hook.set_cap_deviation_percentage(four_token_pool, 5 * 10**17, FeeLane.NOISE, ADMIN)
    hook.set_max_fee_percentage(four_token_pool, 10**17, FeeLane.ARBITRAGE, ADMIN)

    hook.on_register(four_token_pool, 4)

    assert hook.get_all_token_price_configs(four_token_pool) == ([0, 0, 0, 0], [0, 0, 0, 0])
    for lane in FeeLane:
        assert hook.get_max_fee_percentage(four_token_pool, lane) == hook.get_default_max_fee_percentage()
        assert hook.get_threshold_percentage(four_token_pool, lane) == hook.get_default_threshold_percentage()
        assert hook.get_cap_deviation_percentage(four_token_pool, lane) == hook.get_default_cap_deviation_percentage()


def test_reregistration_can_change_token_count(hook, four_token_pool):
    hook.on_register(four_token_pool, 2)
    assert hook.get_all_token_price_configs(four_token_pool) == ([0, 0], [0, 0])
    with pytest.raises(TokenIndexOutOfRange):
        hook.set_token_price_config(four_token_pool, 2, 1, ADMIN)


def test_set_token_price_config_errors(hook, four_token_pool):
    with pytest.raises(PoolNotInitialized):
        hook.set_token_price_config("0xUnknown", 0, 1, ADMIN)
    with pytest.raises(TokenIndexOutOfRange):
        hook.set_token_price_config(four_token_pool, 4, 1, ADMIN)
    with pytest.raises(InvalidPairIndex):
        hook.set_token_price_config(four_token_pool, 0, 0, ADMIN)
    with pytest.raises(PriceFeedError):
        hook.set_token_price_config(four_token_pool, 0, 99, ADMIN)


def test_set_token_price_config_rejects_bad_decimals(hook, price_feed, four_token_pool):
    price_feed.set_pair(9, 1_000_000, 7)
    with pytest.raises(InvalidDecimals):
        hook.set_token_price_config(four_token_pool, 0, 9, ADMIN)
    assert hook.get_token_price_config(four_token_pool, 0) == (0, 0)


def test_unauthorized_caller_changes_nothing(hook, four_token_pool):
    with pytest.raises(SenderNotAllowed):
        hook.set_token_price_config(four_token_pool, 0, 1, STRANGER)
    with pytest.raises(SenderNotAllowed):
        hook.set_token_price_config_batch(four_token_pool, [0], [1], STRANGER)
    assert hook.get_all_token_price_configs(four_token_pool) == ([0, 0, 0, 0], [0, 0, 0, 0])


def test_authorization_is_checked_before_pool_lookup(hook):
    with pytest.raises(SenderNotAllowed):
        hook.set_token_price_config("0xUnknown", 0, 1, STRANGER)


def test_batch_sets_all_rows(hook, four_token_pool):
    hook.set_token_price_config_batch(four_token_pool, [0, 1, 2, 3], [1, 2, 3, 4], ADMIN)
    assert hook.get_all_token_price_configs(four_token_pool) == ([1, 2, 3, 4], [1, 1, 1, 1_000])


def test_batch_last_write_wins(hook, four_token_pool):
    hook.set_token_price_config_batch(four_token_pool, [2, 2, 2], [1, 3, 2], ADMIN)
    assert hook.get_token_price_config(four_token_pool, 2) == (2, 1)


def test_empty_batch_is_noop(hook, four_token_pool):
    hook.set_token_price_config(four_token_pool, 1, 3, ADMIN)
    hook.set_token_price_config_batch(four_token_pool, [], [], ADMIN)
    assert hook.get_all_token_price_configs(four_token_pool) == ([0, 3, 0, 0], [0, 1, 0, 0])


def test_batch_length_mismatch(hook, four_token_pool):
    with pytest.raises(InvalidArrayLengths):
        hook.set_token_price_config_batch(four_token_pool, [0, 1], [1], ADMIN)


@pytest.mark.parametrize(
    "indices, pair_ids, error",
    [
        ([0, 1, 4], [1, 2, 3], TokenIndexOutOfRange),
        ([0, 1, 2], [1, 0, 3], InvalidPairIndex),
        ([0, 1, 2], [1, 2, 9], InvalidDecimals),
    ],
)
def test_batch_is_atomic(hook, price_feed, four_token_pool, indices, pair_ids, error):
    price_feed.set_pair(9, 1_000_000, 8)
    hook.set_token_price_config(four_token_pool, 3, 4, ADMIN)
    before = hook.get_all_token_price_configs(four_token_pool)

    with pytest.raises(error):
        hook.set_token_price_config_batch(four_token_pool, indices, pair_ids, ADMIN)

    assert hook.get_all_token_price_configs(four_token_pool) == before


def test_reads_require_registered_pool(hook):
    with pytest.raises(PoolNotInitialized):
        hook.get_token_price_config("0xUnknown", 0)
    with pytest.raises(PoolNotInitialized):
        hook.get_all_token_price_configs("0xUnknown")


def test_read_index_out_of_range(hook, four_token_pool):
    with pytest.raises(TokenIndexOutOfRange):
        hook.get_token_price_config(four_token_pool, 4)
