from .core import (
    OracleFeeHook,
    DynamicFeeResult,
    ComputationFallback,
    FeeLane,
    LaneParams,
    PoolSwapParams,
    WeightedPool,
    InMemoryPriceFeed,
    AllowListAuthorizer,
    ONE
)

__version__ = "0.1.0"

__all__ = [
    'OracleFeeHook',
    'DynamicFeeResult',
    'ComputationFallback',
    'FeeLane',
    'LaneParams',
    'PoolSwapParams',
    'WeightedPool',
    'InMemoryPriceFeed',
    'AllowListAuthorizer',
    'ONE'
]
