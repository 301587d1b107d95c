from dataclasses import dataclass, replace
from enum import Enum
from typing import Dict, Any, List, Tuple

from .fixed_point import ONE, mul_down, div_down


class FeeLane(Enum):
    """Parameter set applied to a swap, chosen by its direction."""
    ARBITRAGE = 0
    NOISE = 1


@dataclass(frozen=True)
class LaneParams:
    """
    Ramp parameters for one lane, all 18-decimal fractions of 1.0.

    Attributes:
        threshold: Deviation at or below which the static fee applies
        cap_deviation: Deviation at or above which the max fee applies
        max_fee: Fee charged once the deviation reaches the cap
    """
    threshold: int
    cap_deviation: int
    max_fee: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            'threshold': self.threshold,
            'cap_deviation': self.cap_deviation,
            'max_fee': self.max_fee
        }


@dataclass(frozen=True)
class TokenPriceConfig:
    """
    External price source for one token slot.

    A ``pair_id`` of 0 marks the slot as unconfigured.
    """
    pair_id: int = 0
    price_divisor: int = 0

    @property
    def is_configured(self) -> bool:
        return self.pair_id != 0

    def as_tuple(self) -> Tuple[int, int]:
        return self.pair_id, self.price_divisor


@dataclass
class PoolRecord:
    """
    Per-pool state owned by the hook.

    Attributes:
        num_tokens: Number of tokens in the pool (2-8)
        token_price_configs: One price config per token index
        lanes: Ramp parameters keyed by lane
    """
    num_tokens: int
    token_price_configs: List[TokenPriceConfig]
    lanes: Dict[FeeLane, LaneParams]

    @classmethod
    def fresh(cls, num_tokens: int, default_lane: LaneParams) -> 'PoolRecord':
        """
        Create a record with unset price configs and both lanes at the defaults.

        Args:
            num_tokens: Number of tokens in the pool
            default_lane: Lane parameters applied to every lane

        Returns:
            New PoolRecord instance
        """
        return cls(
            num_tokens=num_tokens,
            token_price_configs=[TokenPriceConfig() for _ in range(num_tokens)],
            lanes={lane: default_lane for lane in FeeLane}
        )

    def copy(self) -> 'PoolRecord':
        return PoolRecord(
            num_tokens=self.num_tokens,
            token_price_configs=list(self.token_price_configs),
            lanes=dict(self.lanes)
        )

    def with_lane(self, lane: FeeLane, **changes: int) -> LaneParams:
        """Return the lane's parameters with the given fields replaced."""
        return replace(self.lanes[lane], **changes)

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert pool record to dictionary.

        Returns:
            Dictionary representation of the record
        """
        return {
            'num_tokens': self.num_tokens,
            'token_price_configs': [config.as_tuple() for config in self.token_price_configs],
            'lanes': {lane.name: params.to_dict() for lane, params in self.lanes.items()}
        }


class LinearRampFeeModel:
    """
    Linear ramp/clamp fee curve over the price deviation.

    The fee equals the static fee up to ``threshold``, rises linearly to
    ``max_fee`` at ``cap_deviation`` and stays there beyond it:

    norm = min(1, (deviation - threshold) / (cap_deviation - threshold))
    fee = min(max_fee, static_fee + (max_fee - static_fee) * norm)

    Every step rounds down so the curve is reproducible bit for bit.

    Attributes:
        params (LaneParams): Threshold, cap deviation and max fee of the lane
    """

    def __init__(self, params: LaneParams):
        """
        Initialize the ramp model.

        Args:
            params: Lane parameters (threshold < cap_deviation is assumed)
        """
        self.params = params

    def normalized_deviation(self, deviation: int) -> int:
        """
        Position of the deviation along the ramp, clamped to [0, ONE].

        Args:
            deviation: Relative price deviation, 18-decimal fixed point

        Returns:
            0 at or below the threshold, ONE at or above the cap
        """
        threshold = self.params.threshold
        if deviation <= threshold:
            return 0
        span = self.params.cap_deviation - threshold
        return min(ONE, div_down(deviation - threshold, span))

    def calculate_fee(self, deviation: int, static_fee: int) -> int:
        """
        Calculate the dynamic fee for a deviation.

        Args:
            deviation: Relative price deviation, 18-decimal fixed point
            static_fee: The pool's static swap fee, 18-decimal fixed point

        Returns:
            Fee between static_fee and max_fee (static_fee when max_fee does not exceed it)
        """
        max_fee = self.params.max_fee
        if deviation <= self.params.threshold or max_fee <= static_fee:
            return static_fee

        norm = self.normalized_deviation(deviation)
        fee = static_fee + mul_down(max_fee - static_fee, norm)

        # Apply maximum fee cap
        return min(fee, max_fee)

    def to_dict(self) -> Dict[str, Any]:
        return self.params.to_dict()

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'LinearRampFeeModel':
        """
        Create a model instance from dictionary.

        Args:
            data: Dictionary with threshold, cap_deviation and max_fee

        Returns:
            New LinearRampFeeModel instance
        """
        return cls(LaneParams(
            threshold=int(data['threshold']),
            cap_deviation=int(data.get('cap_deviation', ONE)),
            max_fee=int(data['max_fee'])
        ))
