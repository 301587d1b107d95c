"""Tests for the linear ramp/clamp fee curve."""

import pytest

from oracle_fee_hook.core.fixed_point import ONE, to_fixed
from oracle_fee_hook.core.models import LaneParams, LinearRampFeeModel, PoolRecord, FeeLane, TokenPriceConfig

from conftest import ramp_reference_fee

THRESHOLD = to_fixed("0.0001")
CAP = to_fixed("0.5")
MAX_FEE = to_fixed("0.05")
STATIC = to_fixed("0.01")


@pytest.fixture
def model():
    return LinearRampFeeModel(LaneParams(threshold=THRESHOLD, cap_deviation=CAP, max_fee=MAX_FEE))


def test_below_threshold_is_static(model):
    assert model.calculate_fee(to_fixed("0.0000999"), STATIC) == STATIC
    assert model.calculate_fee(THRESHOLD, STATIC) == STATIC
    assert model.calculate_fee(0, STATIC) == STATIC


def test_mid_span_matches_closed_form(model):
    deviation = to_fixed("0.25")
    norm = (deviation - THRESHOLD) * ONE // (CAP - THRESHOLD)
    expected = STATIC + (MAX_FEE - STATIC) * norm // ONE

    fee = model.calculate_fee(deviation, STATIC)

    assert fee == expected
    assert STATIC < fee < MAX_FEE


def test_at_and_above_cap_is_max(model):
    assert model.calculate_fee(CAP, STATIC) == MAX_FEE
    assert model.calculate_fee(to_fixed("0.500001"), STATIC) == MAX_FEE
    assert model.calculate_fee(5 * ONE, STATIC) == MAX_FEE


def test_just_above_threshold(model):
    fee = model.calculate_fee(THRESHOLD + 1, STATIC)
    assert fee == ramp_reference_fee(THRESHOLD + 1, THRESHOLD, CAP, MAX_FEE, STATIC)
    assert fee >= STATIC


def test_ramp_is_bit_exact_across_grid(model):
    for step in range(0, 1_001):
        deviation = step * 6 * 10**14
        assert model.calculate_fee(deviation, STATIC) == ramp_reference_fee(
            deviation, THRESHOLD, CAP, MAX_FEE, STATIC
        )


def test_ramp_is_monotonic_and_bounded(model):
    deviations = [0, THRESHOLD, THRESHOLD + 7, 10**15, 123456789012345678, CAP - 1, CAP, ONE]
    fees = [model.calculate_fee(d, STATIC) for d in deviations]
    assert fees == sorted(fees)
    assert all(STATIC <= fee <= MAX_FEE for fee in fees)


def test_normalized_deviation(model):
    assert model.normalized_deviation(THRESHOLD) == 0
    assert model.normalized_deviation(CAP) == ONE
    assert model.normalized_deviation(2 * CAP) == ONE


def test_max_fee_not_above_static_returns_static():
    model = LinearRampFeeModel(LaneParams(threshold=0, cap_deviation=ONE, max_fee=STATIC // 2))
    assert model.calculate_fee(ONE, STATIC) == STATIC


def test_model_dict_round_trip(model):
    restored = LinearRampFeeModel.from_dict(model.to_dict())
    assert restored.params == model.params


def test_pool_record_fresh():
    lane = LaneParams(1, ONE, 2)
    record = PoolRecord.fresh(3, lane)
    assert record.token_price_configs == [TokenPriceConfig()] * 3
    assert record.lanes == {FeeLane.ARBITRAGE: lane, FeeLane.NOISE: lane}
    assert record.to_dict()['token_price_configs'] == [(0, 0)] * 3
