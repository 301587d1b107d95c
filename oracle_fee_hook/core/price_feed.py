"""
External price resolution.

The feed quotes each pair as a raw integer scaled by 1e6 at the asset's size
decimals; a pair with ``size_decimals`` d is stored with a divisor of
``10 ** (6 - d)`` so that ``raw * 10**12 // divisor`` is an 18-decimal price.
"""

import logging
from abc import ABC, abstractmethod
from typing import Dict, Optional

import pandas as pd

from .exceptions import InvalidDecimals, PriceFeedError

logger = logging.getLogger(__name__)

# Raw quotes carry 6 decimals; canonical prices carry 18
QUOTE_DECIMALS = 6
PRICE_SCALE = 10 ** 12
MAX_SIZE_DECIMALS = QUOTE_DECIMALS


class PriceFeed(ABC):
    """Source of raw quotes and per-pair size decimals."""

    @abstractmethod
    def get_raw_price(self, pair_id: int) -> int:
        """Return the raw quote for a pair, or 0 when the feed has no data."""

    @abstractmethod
    def get_size_decimals(self, pair_id: int) -> int:
        """Return the pair's size decimals."""


class InMemoryPriceFeed(PriceFeed):
    """Dict-backed feed, used by tests and the scenario replay."""

    def __init__(self,
                 prices: Optional[Dict[int, int]] = None,
                 size_decimals: Optional[Dict[int, int]] = None):
        self._prices: Dict[int, int] = dict(prices or {})
        self._size_decimals: Dict[int, int] = dict(size_decimals or {})

    def set_price(self, pair_id: int, raw_price: int) -> None:
        self._prices[pair_id] = raw_price

    def set_size_decimals(self, pair_id: int, size_decimals: int) -> None:
        self._size_decimals[pair_id] = size_decimals

    def set_pair(self, pair_id: int, raw_price: int, size_decimals: int) -> None:
        self.set_price(pair_id, raw_price)
        self.set_size_decimals(pair_id, size_decimals)

    def get_raw_price(self, pair_id: int) -> int:
        return self._prices.get(pair_id, 0)

    def get_size_decimals(self, pair_id: int) -> int:
        if pair_id not in self._size_decimals:
            raise PriceFeedError(f"No metadata for pair {pair_id}", pair_id)
        return self._size_decimals[pair_id]


class DataFramePriceFeed(InMemoryPriceFeed):
    """
    Feed loaded from a table with ``pair_id``, ``raw_price`` and ``size_decimals`` columns.
    """

    REQUIRED_COLUMNS = ('pair_id', 'raw_price', 'size_decimals')

    def __init__(self, df: pd.DataFrame):
        """
        Initialize the feed from a DataFrame.

        Args:
            df: Price table, one row per pair

        Raises:
            PriceFeedError: If a required column is missing
        """
        missing = [col for col in self.REQUIRED_COLUMNS if col not in df.columns]
        if missing:
            raise PriceFeedError(f"Price table is missing columns: {missing}")

        super().__init__()
        for row in df.itertuples(index=False):
            self.set_pair(int(row.pair_id), int(row.raw_price), int(row.size_decimals))
        logger.info("Loaded %d price pairs", len(df))

    @classmethod
    def from_csv(cls, file_path: str) -> 'DataFramePriceFeed':
        return cls(pd.read_csv(file_path))


def price_divisor_for(pair_id: int, size_decimals: int) -> int:
    """
    Derive the quote divisor from the feed's size decimals.

    Args:
        pair_id: Pair the decimals belong to (for error reporting)
        size_decimals: Size decimals reported by the feed

    Returns:
        10 ** (6 - size_decimals)

    Raises:
        InvalidDecimals: If size_decimals is outside [0, 6]
    """
    if size_decimals < 0 or size_decimals > MAX_SIZE_DECIMALS:
        raise InvalidDecimals(pair_id, size_decimals)
    return 10 ** (QUOTE_DECIMALS - size_decimals)


def resolve_external_price(raw_quote: int, price_divisor: int) -> Optional[int]:
    """
    Convert a raw feed quote to an 18-decimal price.

    Args:
        raw_quote: Raw integer quote from the feed
        price_divisor: Divisor stored for the token slot

    Returns:
        The price, or None when the quote is missing or the slot is unconfigured
    """
    if raw_quote <= 0 or price_divisor <= 0:
        return None
    return raw_quote * PRICE_SCALE // price_divisor
