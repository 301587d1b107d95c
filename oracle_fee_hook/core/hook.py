"""
Oracle-deviation dynamic fee hook.

The hook owns one ``PoolRecord`` per registered pool. On each swap it compares
the pool's marginal pair price with the price implied by an external feed and
raises the swap fee along a linear ramp as the two drift apart. Configuration
calls fail loudly with exceptions; the swap-time path never raises for missing
data and falls back to the static fee instead.
"""

import logging
from enum import Enum
from typing import Any, Dict, List, NamedTuple, Optional, Sequence, Tuple, Union

from .auth import Authorizer
from .exceptions import (
    CapNotAboveThreshold,
    InvalidArrayLengths,
    InvalidPairIndex,
    InvalidPercentage,
    InvalidTokenCount,
    PercentageAboveMax,
    PoolNotInitialized,
    SenderNotAllowed,
    ThresholdNotBelowCap,
    TokenIndexOutOfRange,
)
from .fixed_point import ONE, div_down
from .models import FeeLane, LaneParams, LinearRampFeeModel, PoolRecord, TokenPriceConfig
from .pool import PoolSwapParams, WeightedPool, compute_pair_price
from .price_feed import PriceFeed, price_divisor_for, resolve_external_price

logger = logging.getLogger(__name__)

MIN_TOKENS = 2
MAX_TOKENS = 8
DEFAULT_CAP_DEVIATION_PERCENTAGE = ONE

PoolRef = Union[str, WeightedPool]


class ComputationFallback(Enum):
    """Why a swap was charged the static fee without evaluating the ramp."""
    POOL_NOT_REGISTERED = "pool_not_registered"
    SAME_TOKEN = "same_token"
    TOKEN_INDEX_OUT_OF_RANGE = "token_index_out_of_range"
    BALANCES_LENGTH_MISMATCH = "balances_length_mismatch"
    WEIGHTS_LENGTH_MISMATCH = "weights_length_mismatch"
    INVALID_POOL_PRICE = "invalid_pool_price"
    PRICE_NOT_CONFIGURED = "price_not_configured"
    PRICE_UNAVAILABLE = "price_unavailable"
    INVALID_EXTERNAL_PRICE = "invalid_external_price"


class DynamicFeeResult(NamedTuple):
    """
    Outcome of a fee computation.

    ``fallback`` is None when the fee came from the ramp; otherwise ``fee`` is
    the static fee and ``fallback`` says why.
    """
    success: bool
    fee: int
    fallback: Optional[ComputationFallback] = None
    pool_price: Optional[int] = None
    external_price: Optional[int] = None
    deviation: Optional[int] = None
    lane: Optional[FeeLane] = None

    @property
    def computed(self) -> bool:
        return self.fallback is None


def compute_deviation(pool_price: int, external_price: int) -> int:
    """
    Relative difference between the pool price and the external price.

    The larger price is measured against the smaller one:
    (pool - ext) / ext when the pool price is higher, else (ext - pool) / pool.

    Args:
        pool_price: Pool pair price, 18-decimal fixed point
        external_price: External pair price, 18-decimal fixed point

    Returns:
        Deviation, 18-decimal fixed point, rounded down
    """
    if pool_price > external_price:
        return div_down(pool_price - external_price, external_price)
    return div_down(external_price - pool_price, pool_price)


def select_lane(pool_price: int, external_price: int) -> FeeLane:
    """
    Choose the lane for a swap.

    A swap adds token_in and removes token_out, which lowers the pool price of
    token_in. When the pool price is above the external price that move closes
    the gap, so the swap is treated as arbitrage; every other swap is noise.
    """
    if pool_price > external_price:
        return FeeLane.ARBITRAGE
    return FeeLane.NOISE


class OracleFeeHook:
    """
    Dynamic fee engine keyed by pool address.

    Attributes:
        price_feed (PriceFeed): External price source
        authorizer (Authorizer): Permission policy for mutating calls
    """

    def __init__(self,
                 price_feed: PriceFeed,
                 authorizer: Authorizer,
                 default_max_fee_percentage: int,
                 default_threshold_percentage: int):
        """
        Initialize the hook.

        Args:
            price_feed: External price source
            authorizer: Permission policy consulted before each mutation
            default_max_fee_percentage: Max fee applied to both lanes at registration
            default_threshold_percentage: Threshold applied to both lanes at registration

        Raises:
            LaneParameterError: If a default is out of bounds
        """
        _check_percentage(default_max_fee_percentage)
        _check_percentage(default_threshold_percentage)
        if default_threshold_percentage >= DEFAULT_CAP_DEVIATION_PERCENTAGE:
            raise ThresholdNotBelowCap(default_threshold_percentage, DEFAULT_CAP_DEVIATION_PERCENTAGE)

        self.price_feed = price_feed
        self.authorizer = authorizer
        self._default_lane = LaneParams(
            threshold=default_threshold_percentage,
            cap_deviation=DEFAULT_CAP_DEVIATION_PERCENTAGE,
            max_fee=default_max_fee_percentage
        )
        self._pools: Dict[str, PoolRecord] = {}

    # ------------------------------------------------------------------
    # Registration
    # ------------------------------------------------------------------

    def on_register(self, pool: PoolRef, num_tokens: int) -> bool:
        """
        Create or overwrite the record for a pool.

        Lanes go back to the module defaults and every price config is cleared,
        even if the pool had been configured before.

        Args:
            pool: Pool address or WeightedPool
            num_tokens: Number of tokens in the pool

        Returns:
            True

        Raises:
            InvalidTokenCount: If num_tokens is outside [2, 8]
        """
        if num_tokens < MIN_TOKENS or num_tokens > MAX_TOKENS:
            raise InvalidTokenCount(num_tokens, MIN_TOKENS, MAX_TOKENS)

        key = _pool_key(pool)
        self._pools[key] = PoolRecord.fresh(num_tokens, self._default_lane)
        logger.info("Registered pool %s with %d tokens", key, num_tokens)
        return True

    def is_pool_registered(self, pool: PoolRef) -> bool:
        return _pool_key(pool) in self._pools

    def get_pool_record(self, pool: PoolRef) -> PoolRecord:
        """Return a copy of the pool's record."""
        return self._record(pool).copy()

    # ------------------------------------------------------------------
    # Price configuration
    # ------------------------------------------------------------------

    def set_token_price_config(self, pool: PoolRef, token_index: int, pair_id: int, caller: Any) -> None:
        """
        Point a token slot at an external price pair.

        Args:
            pool: Pool address
            token_index: Index of the token in the pool
            pair_id: Feed pair identifier (non-zero)
            caller: Identity checked against the authorizer

        Raises:
            SenderNotAllowed, PoolNotInitialized, TokenIndexOutOfRange,
            InvalidPairIndex, InvalidDecimals
        """
        self._authorize("set_token_price_config", caller)
        record = self._record(pool)
        config, size_decimals = self._build_price_config(record, token_index, pair_id)

        record.token_price_configs[token_index] = config
        logger.info("Price config set for pool %s index %d: pair %d (size decimals %d)",
                    _pool_key(pool), token_index, pair_id, size_decimals)

    def set_token_price_config_batch(self,
                                     pool: PoolRef,
                                     token_indices: Sequence[int],
                                     pair_ids: Sequence[int],
                                     caller: Any) -> None:
        """
        Configure several token slots at once.

        Every row is validated before anything is written, so a bad row leaves
        the stored configuration untouched. Duplicate indices are allowed and
        the last row wins.

        Args:
            pool: Pool address
            token_indices: Token indices to configure
            pair_ids: Pair identifiers, aligned with token_indices
            caller: Identity checked against the authorizer

        Raises:
            SenderNotAllowed, PoolNotInitialized, InvalidArrayLengths and any
            error raised by the single-index form
        """
        self._authorize("set_token_price_config_batch", caller)
        record = self._record(pool)
        if len(token_indices) != len(pair_ids):
            raise InvalidArrayLengths(len(token_indices), len(pair_ids))

        staged: List[Tuple[int, TokenPriceConfig, int]] = []
        for token_index, pair_id in zip(token_indices, pair_ids):
            config, size_decimals = self._build_price_config(record, token_index, pair_id)
            staged.append((token_index, config, size_decimals))

        for token_index, config, size_decimals in staged:
            record.token_price_configs[token_index] = config
            logger.info("Price config set for pool %s index %d: pair %d (size decimals %d)",
                        _pool_key(pool), token_index, config.pair_id, size_decimals)

    def get_token_price_config(self, pool: PoolRef, token_index: int) -> Tuple[int, int]:
        """
        Return ``(pair_id, price_divisor)`` for a token slot; unset slots read ``(0, 0)``.
        """
        record = self._record(pool)
        _check_token_index(record, token_index)
        return record.token_price_configs[token_index].as_tuple()

    def get_all_token_price_configs(self, pool: PoolRef) -> Tuple[List[int], List[int]]:
        """
        Return the pair ids and divisors of every token slot, aligned by index.
        """
        record = self._record(pool)
        pair_ids = [config.pair_id for config in record.token_price_configs]
        divisors = [config.price_divisor for config in record.token_price_configs]
        return pair_ids, divisors

    # ------------------------------------------------------------------
    # Lane configuration
    # ------------------------------------------------------------------

    def set_max_fee_percentage(self, pool: PoolRef, pct: int, lane: FeeLane, caller: Any) -> None:
        self._authorize("set_max_fee_percentage", caller)
        record = self._record(pool)
        _check_percentage(pct)

        record.lanes[lane] = record.with_lane(lane, max_fee=pct)
        logger.info("%s set max fee of pool %s lane %s to %d", caller, _pool_key(pool), lane.name, pct)

    def set_threshold_percentage(self, pool: PoolRef, pct: int, lane: FeeLane, caller: Any) -> None:
        """
        Set the deviation below which the static fee applies.

        The threshold must stay strictly below the lane's current cap deviation.
        """
        self._authorize("set_threshold_percentage", caller)
        record = self._record(pool)
        _check_percentage(pct)
        cap_deviation = record.lanes[lane].cap_deviation
        if pct >= cap_deviation:
            raise ThresholdNotBelowCap(pct, cap_deviation)

        record.lanes[lane] = record.with_lane(lane, threshold=pct)
        logger.info("%s set threshold of pool %s lane %s to %d", caller, _pool_key(pool), lane.name, pct)

    def set_cap_deviation_percentage(self, pool: PoolRef, pct: int, lane: FeeLane, caller: Any) -> None:
        """
        Set the deviation at which the max fee is reached.

        The cap must stay strictly above the lane's current threshold.
        """
        self._authorize("set_cap_deviation_percentage", caller)
        record = self._record(pool)
        _check_percentage(pct)
        threshold = record.lanes[lane].threshold
        if pct <= threshold:
            raise CapNotAboveThreshold(pct, threshold)

        record.lanes[lane] = record.with_lane(lane, cap_deviation=pct)
        logger.info("%s set cap deviation of pool %s lane %s to %d", caller, _pool_key(pool), lane.name, pct)

    def get_max_fee_percentage(self, pool: PoolRef, lane: FeeLane) -> int:
        return self._record(pool).lanes[lane].max_fee

    def get_threshold_percentage(self, pool: PoolRef, lane: FeeLane) -> int:
        return self._record(pool).lanes[lane].threshold

    def get_cap_deviation_percentage(self, pool: PoolRef, lane: FeeLane) -> int:
        return self._record(pool).lanes[lane].cap_deviation

    def get_lane_params(self, pool: PoolRef, lane: FeeLane) -> LaneParams:
        return self._record(pool).lanes[lane]

    def get_default_max_fee_percentage(self) -> int:
        return self._default_lane.max_fee

    def get_default_threshold_percentage(self) -> int:
        return self._default_lane.threshold

    def get_default_cap_deviation_percentage(self) -> int:
        return self._default_lane.cap_deviation

    # ------------------------------------------------------------------
    # Fee computation
    # ------------------------------------------------------------------

    def on_compute_dynamic_fee(self,
                               params: PoolSwapParams,
                               pool: WeightedPool,
                               static_fee: int) -> Tuple[bool, int]:
        """Host-facing form of ``compute_dynamic_fee``: returns ``(success, fee)``."""
        result = self.compute_dynamic_fee(params, pool, static_fee)
        return result.success, result.fee

    def compute_dynamic_fee(self,
                            params: PoolSwapParams,
                            pool: WeightedPool,
                            static_fee: int) -> DynamicFeeResult:
        """
        Compute the swap fee from the pool/external price deviation.

        Args:
            params: Proposed swap
            pool: Pool pricing collaborator (address and normalized weights)
            static_fee: The pool's static swap fee, 18-decimal fixed point

        Returns:
            DynamicFeeResult; ``fee`` is static_fee whenever ``fallback`` is set
        """
        record = self._pools.get(_pool_key(pool))
        if record is None:
            return self._fallback(pool, static_fee, ComputationFallback.POOL_NOT_REGISTERED)

        index_in, index_out = params.index_in, params.index_out
        if index_in == index_out:
            return self._fallback(pool, static_fee, ComputationFallback.SAME_TOKEN)
        if not (0 <= index_in < record.num_tokens and 0 <= index_out < record.num_tokens):
            return self._fallback(pool, static_fee, ComputationFallback.TOKEN_INDEX_OUT_OF_RANGE)
        if len(params.balances_scaled18) != record.num_tokens:
            return self._fallback(pool, static_fee, ComputationFallback.BALANCES_LENGTH_MISMATCH)

        weights = pool.get_normalized_weights()
        if len(weights) != record.num_tokens:
            return self._fallback(pool, static_fee, ComputationFallback.WEIGHTS_LENGTH_MISMATCH)

        try:
            pool_price = compute_pair_price(params.balances_scaled18, weights, index_in, index_out)
        except ZeroDivisionError:
            return self._fallback(pool, static_fee, ComputationFallback.INVALID_POOL_PRICE)
        if pool_price == 0:
            return self._fallback(pool, static_fee, ComputationFallback.INVALID_POOL_PRICE)

        config_in = record.token_price_configs[index_in]
        config_out = record.token_price_configs[index_out]
        if not (config_in.is_configured and config_out.is_configured):
            return self._fallback(pool, static_fee, ComputationFallback.PRICE_NOT_CONFIGURED)

        price_in = self._external_price(config_in)
        price_out = self._external_price(config_out)
        if price_in is None or price_out is None:
            return self._fallback(pool, static_fee, ComputationFallback.PRICE_UNAVAILABLE)

        external_price = div_down(price_out, price_in)
        if external_price == 0:
            return self._fallback(pool, static_fee, ComputationFallback.INVALID_EXTERNAL_PRICE)

        deviation = compute_deviation(pool_price, external_price)
        lane = select_lane(pool_price, external_price)
        fee = LinearRampFeeModel(record.lanes[lane]).calculate_fee(deviation, static_fee)

        return DynamicFeeResult(
            success=True,
            fee=fee,
            pool_price=pool_price,
            external_price=external_price,
            deviation=deviation,
            lane=lane
        )

    def compute_fee_for_deviation(self, pool: PoolRef, lane: FeeLane, deviation: int, static_fee: int) -> int:
        """
        Evaluate a pool's configured ramp at a given deviation.

        Args:
            pool: Pool address
            lane: Lane whose parameters to use
            deviation: Relative price deviation, 18-decimal fixed point
            static_fee: Static swap fee, 18-decimal fixed point

        Returns:
            The fee the ramp yields
        """
        return LinearRampFeeModel(self._record(pool).lanes[lane]).calculate_fee(deviation, static_fee)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _authorize(self, action: str, caller: Any) -> None:
        if not self.authorizer.can_perform(action, caller).allowed:
            raise SenderNotAllowed(caller, action)

    def _record(self, pool: PoolRef) -> PoolRecord:
        key = _pool_key(pool)
        record = self._pools.get(key)
        if record is None:
            raise PoolNotInitialized(key)
        return record

    def _build_price_config(self,
                            record: PoolRecord,
                            token_index: int,
                            pair_id: int) -> Tuple[TokenPriceConfig, int]:
        _check_token_index(record, token_index)
        if pair_id == 0:
            raise InvalidPairIndex(pair_id)

        size_decimals = self.price_feed.get_size_decimals(pair_id)
        divisor = price_divisor_for(pair_id, size_decimals)
        return TokenPriceConfig(pair_id=pair_id, price_divisor=divisor), size_decimals

    def _external_price(self, config: TokenPriceConfig) -> Optional[int]:
        raw_quote = self.price_feed.get_raw_price(config.pair_id)
        return resolve_external_price(raw_quote, config.price_divisor)

    @staticmethod
    def _fallback(pool: PoolRef, static_fee: int, reason: ComputationFallback) -> DynamicFeeResult:
        logger.debug("Static fee for pool %s: %s", _pool_key(pool), reason.value)
        return DynamicFeeResult(success=True, fee=static_fee, fallback=reason)


def _pool_key(pool: PoolRef) -> str:
    if isinstance(pool, WeightedPool):
        return pool.address
    return pool.lower()


def _check_token_index(record: PoolRecord, token_index: int) -> None:
    if token_index < 0 or token_index >= record.num_tokens:
        raise TokenIndexOutOfRange(token_index, record.num_tokens)


def _check_percentage(pct: int) -> None:
    if pct < 0:
        raise InvalidPercentage(pct)
    if pct > ONE:
        raise PercentageAboveMax(pct, ONE)
