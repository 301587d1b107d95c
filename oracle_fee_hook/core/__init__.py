from .auth import AllowListAuthorizer, AuthDecision, Authorizer
from .exceptions import (
    FeeHookError,
    ConfigurationError,
    SenderNotAllowed,
    PriceFeedError,
    PoolNotInitialized,
    InvalidTokenCount,
    TokenIndexOutOfRange,
    InvalidPairIndex,
    InvalidDecimals,
    InvalidArrayLengths,
    LaneParameterError,
    InvalidPercentage,
    PercentageAboveMax,
    ThresholdNotBelowCap,
    CapNotAboveThreshold
)
from .fixed_point import ONE, mul_down, div_down, to_fixed, from_fixed
from .hook import (
    OracleFeeHook,
    DynamicFeeResult,
    ComputationFallback,
    compute_deviation,
    select_lane
)
from .models import FeeLane, LaneParams, TokenPriceConfig, PoolRecord, LinearRampFeeModel
from .pool import PoolSwapParams, SwapKind, WeightedPool, compute_pair_price
from .price_feed import (
    PriceFeed,
    InMemoryPriceFeed,
    DataFramePriceFeed,
    price_divisor_for,
    resolve_external_price
)
from .utils import DataIO, JSONHandler, Visualizer

__all__ = [
    'AllowListAuthorizer',
    'AuthDecision',
    'Authorizer',
    'FeeHookError',
    'ConfigurationError',
    'SenderNotAllowed',
    'PriceFeedError',
    'PoolNotInitialized',
    'InvalidTokenCount',
    'TokenIndexOutOfRange',
    'InvalidPairIndex',
    'InvalidDecimals',
    'InvalidArrayLengths',
    'LaneParameterError',
    'InvalidPercentage',
    'PercentageAboveMax',
    'ThresholdNotBelowCap',
    'CapNotAboveThreshold',
    'ONE',
    'mul_down',
    'div_down',
    'to_fixed',
    'from_fixed',
    'OracleFeeHook',
    'DynamicFeeResult',
    'ComputationFallback',
    'compute_deviation',
    'select_lane',
    'FeeLane',
    'LaneParams',
    'TokenPriceConfig',
    'PoolRecord',
    'LinearRampFeeModel',
    'PoolSwapParams',
    'SwapKind',
    'WeightedPool',
    'compute_pair_price',
    'PriceFeed',
    'InMemoryPriceFeed',
    'DataFramePriceFeed',
    'price_divisor_for',
    'resolve_external_price',
    'DataIO',
    'JSONHandler',
    'Visualizer'
]
