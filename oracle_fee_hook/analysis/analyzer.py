import logging
import pandas as pd
import numpy as np
from typing import Dict, List, Optional, Any, Sequence
from tqdm import tqdm

from ..core.fixed_point import to_fixed, from_fixed
from ..core.hook import OracleFeeHook
from ..core.models import FeeLane
from ..core.pool import PoolSwapParams, WeightedPool
from ..core.price_feed import InMemoryPriceFeed

logger = logging.getLogger(__name__)


class FeeCurveAnalyzer:
    """
    Evaluates a pool's configured fee ramps offline.
    """

    REPLAY_COLUMNS = ('index_in', 'index_out', 'balances')

    def __init__(self, hook: OracleFeeHook, pool: WeightedPool):
        """
        Initialize fee curve analyzer.

        Args:
            hook: Hook holding the pool's configuration
            pool: Registered pool to analyze
        """
        self.hook = hook
        self.pool = pool
        self.result_df: Optional[pd.DataFrame] = None

    def sweep_deviation(self,
                        lane: FeeLane,
                        static_fee: int,
                        deviations: Optional[Sequence[float]] = None,
                        points: int = 201) -> pd.DataFrame:
        """
        Evaluate the lane's ramp over a grid of deviations.

        Args:
            lane: Lane to evaluate
            static_fee: Static swap fee, 18-decimal fixed point
            deviations: Deviations as fractions of 1.0; defaults to an even grid
                from 0 to 1.5x the lane's cap deviation
            points: Grid size when deviations is not given

        Returns:
            DataFrame with deviation, fee and their float counterparts
        """
        if deviations is None:
            cap = from_fixed(self.hook.get_cap_deviation_percentage(self.pool, lane))
            deviations = np.linspace(0.0, 1.5 * cap, points)

        rows = []
        for deviation_pct in deviations:
            deviation = to_fixed(float(deviation_pct))
            fee = self.hook.compute_fee_for_deviation(self.pool, lane, deviation, static_fee)
            rows.append({
                'lane': lane.name,
                'deviation': deviation,
                'deviation_pct': from_fixed(deviation),
                'fee': fee,
                'fee_pct': from_fixed(fee)
            })

        return pd.DataFrame(rows)

    def sweep_all_lanes(self, static_fee: int, points: int = 201) -> Dict[str, pd.DataFrame]:
        return {lane.name: self.sweep_deviation(lane, static_fee, points=points) for lane in FeeLane}

    def replay_scenarios(self, scenarios_df: pd.DataFrame, static_fee: int) -> pd.DataFrame:
        """
        Run each scenario row through the hook's swap-time fee computation.

        Rows need ``index_in``, ``index_out`` and ``balances`` (list of scaled
        balances). An optional ``raw_prices`` list, aligned with token indices,
        updates the feed quote of each configured token before the row runs;
        an optional ``static_fee`` column overrides the default static fee.

        Args:
            scenarios_df: Scenario rows
            static_fee: Default static fee, 18-decimal fixed point

        Returns:
            Scenario rows with pool_price, external_price, deviation, lane,
            dynamic_fee and fallback columns added
        """
        missing = [col for col in self.REPLAY_COLUMNS if col not in scenarios_df.columns]
        if missing:
            raise ValueError(f"Scenario table is missing columns: {missing}")

        records: List[Dict[str, Any]] = []
        for _, row in tqdm(scenarios_df.iterrows(), total=len(scenarios_df), desc="Replaying swaps"):
            if 'raw_prices' in scenarios_df.columns and isinstance(row['raw_prices'], list):
                self._apply_raw_prices(row['raw_prices'])

            row_static_fee = static_fee
            if 'static_fee' in scenarios_df.columns and pd.notna(row['static_fee']):
                row_static_fee = int(row['static_fee'])

            params = PoolSwapParams(
                index_in=int(row['index_in']),
                index_out=int(row['index_out']),
                balances_scaled18=[int(b) for b in row['balances']],
                amount_given_scaled18=self._amount_given(row)
            )
            result = self.hook.compute_dynamic_fee(params, self.pool, row_static_fee)
            records.append({
                'static_fee': row_static_fee,
                'pool_price': result.pool_price,
                'external_price': result.external_price,
                'deviation': result.deviation,
                'lane': result.lane.name if result.lane else None,
                'dynamic_fee': result.fee,
                'dynamic_fee_pct': from_fixed(result.fee),
                'fallback': result.fallback.value if result.fallback else None
            })

        # Fixed-point values can exceed int64, keep them as Python ints
        extra = pd.DataFrame(records, index=scenarios_df.index, dtype=object)
        extra['dynamic_fee_pct'] = extra['dynamic_fee_pct'].astype(float)
        result_df = pd.concat([scenarios_df.drop(columns=['static_fee'], errors='ignore'), extra], axis=1)
        self.result_df = result_df
        return result_df

    def summarize(self, result_df: Optional[pd.DataFrame] = None) -> Dict[str, Any]:
        """
        Summary statistics of a replay.

        Args:
            result_df: Output of replay_scenarios; defaults to the last replay

        Returns:
            Dictionary with counts per lane, fallback count and fee statistics
        """
        df = result_df if result_df is not None else self.result_df
        if df is None or df.empty:
            logger.warning("No replay results to summarize")
            return {}

        fees = df['dynamic_fee_pct'].astype(float)
        above_static = df['dynamic_fee'] > df['static_fee']
        lane_counts = df['lane'].value_counts().to_dict()

        return {
            'swap_count': len(df),
            'fallback_count': int(df['fallback'].notna().sum()),
            'fallback_reasons': df['fallback'].value_counts().to_dict(),
            'lane_counts': {lane.name: int(lane_counts.get(lane.name, 0)) for lane in FeeLane},
            'fee_pct_mean': float(fees.mean()),
            'fee_pct_median': float(fees.median()),
            'fee_pct_max': float(fees.max()),
            'share_above_static': float(above_static.mean()),
            'max_fee_cap_pct': {
                lane.name: from_fixed(self.hook.get_max_fee_percentage(self.pool, lane)) for lane in FeeLane
            }
        }

    @staticmethod
    def _amount_given(row: pd.Series) -> int:
        value = row.get('amount_given')
        if value is None or pd.isna(value):
            return 0
        return int(value)

    def _apply_raw_prices(self, raw_prices: Sequence[int]) -> None:
        feed = self.hook.price_feed
        if not isinstance(feed, InMemoryPriceFeed):
            raise TypeError("Per-row prices need an InMemoryPriceFeed")

        pair_ids, _ = self.hook.get_all_token_price_configs(self.pool)
        for pair_id, raw_price in zip(pair_ids, raw_prices):
            if pair_id != 0:
                feed.set_price(pair_id, int(raw_price))


def fee_curve_frame(curves: Dict[str, pd.DataFrame]) -> pd.DataFrame:
    """Stack per-lane sweep frames into one table."""
    if not curves:
        return pd.DataFrame()
    return pd.concat(list(curves.values()), ignore_index=True)

