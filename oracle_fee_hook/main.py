import argparse
import logging
import os
import time
from typing import Any, List, Optional, Sequence

from . import logging_config
from .analysis.analyzer import FeeCurveAnalyzer, fee_curve_frame
from .analysis.visualizer import FeeCurveVisualizer
from .core.auth import AllowListAuthorizer
from .core.fixed_point import to_fixed
from .core.hook import OracleFeeHook
from .core.models import FeeLane
from .core.pool import WeightedPool
from .core.price_feed import DataFramePriceFeed, InMemoryPriceFeed
from .core.utils import DataIO, JSONHandler
from .config import (
    ANALYSIS_DIR,
    DATA_DIR,
    DEFAULT_MAX_FEE_PERCENTAGE,
    DEFAULT_STATIC_FEE_PERCENTAGE,
    DEFAULT_THRESHOLD_PERCENTAGE,
    FEE_CURVE_FILE,
    OPERATOR,
    PRICE_FEED_FILE,
    REPLAY_RESULTS_FILE,
    SCENARIOS_FILE,
    SUMMARY_FILE,
    SWEEP_POINTS
)

logger = logging.getLogger(__name__)


def configure_lane(hook: OracleFeeHook,
                   pool: WeightedPool,
                   lane: FeeLane,
                   threshold: int,
                   cap_deviation: int,
                   max_fee: int,
                   caller: Any) -> None:
    """
    Apply a full set of lane parameters in an order the hook accepts.

    Threshold and cap are validated against each other's current value, so a
    threshold at or above the current cap needs the cap raised first.
    """
    if threshold >= hook.get_cap_deviation_percentage(pool, lane):
        hook.set_cap_deviation_percentage(pool, cap_deviation, lane, caller)
        hook.set_threshold_percentage(pool, threshold, lane, caller)
    else:
        hook.set_threshold_percentage(pool, threshold, lane, caller)
        hook.set_cap_deviation_percentage(pool, cap_deviation, lane, caller)
    hook.set_max_fee_percentage(pool, max_fee, lane, caller)


def parse_weights(weights: Optional[str], num_tokens: int) -> Optional[List[int]]:
    if not weights:
        return None
    parsed = [to_fixed(w) for w in weights.split(',')]
    if len(parsed) != num_tokens:
        raise ValueError(f"Expected {num_tokens} weights, got {len(parsed)}")
    return parsed


def parse_ints(values: Optional[str]) -> List[int]:
    if not values:
        return []
    return [int(v) for v in values.split(',')]


def main(argv: Optional[Sequence[str]] = None) -> int:
    """
    Build a hook for one pool, sweep its fee ramps and optionally replay swaps.

    Args:
        argv: Command-line arguments (defaults to sys.argv)

    Returns:
        Process exit code
    """
    parser = argparse.ArgumentParser(
        description="Evaluate the oracle-deviation dynamic fee for a weighted pool."
    )
    parser.add_argument("--pool", default="0xpool", help="Pool address.")
    parser.add_argument("--num-tokens", type=int, default=2, help="Number of pool tokens (2-8).")
    parser.add_argument("--weights", default=None,
                        help="Comma-separated normalized weights, e.g. 0.8,0.2. Defaults to equal weights.")
    parser.add_argument("--pairs", default=None,
                        help="Comma-separated feed pair ids, one per token index.")
    parser.add_argument("--prices", default=os.path.join(DATA_DIR, PRICE_FEED_FILE),
                        help="CSV with pair_id, raw_price and size_decimals columns.")
    parser.add_argument("--scenarios", default=os.path.join(DATA_DIR, SCENARIOS_FILE),
                        help="CSV of swap scenarios to replay.")
    parser.add_argument("--threshold", default=DEFAULT_THRESHOLD_PERCENTAGE, help="Arbitrage lane threshold.")
    parser.add_argument("--cap", default="1", help="Arbitrage lane cap deviation.")
    parser.add_argument("--max-fee", default=DEFAULT_MAX_FEE_PERCENTAGE, help="Arbitrage lane max fee.")
    parser.add_argument("--noise-threshold", default=None, help="Noise lane threshold (defaults to --threshold).")
    parser.add_argument("--noise-cap", default=None, help="Noise lane cap deviation (defaults to --cap).")
    parser.add_argument("--noise-max-fee", default=None, help="Noise lane max fee (defaults to --max-fee).")
    parser.add_argument("--static-fee", default=DEFAULT_STATIC_FEE_PERCENTAGE, help="Static swap fee.")
    parser.add_argument("--output-dir", default=ANALYSIS_DIR, help="Directory for results.")
    parser.add_argument("--no-plots", action="store_true", help="Skip figure generation.")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging.")
    args = parser.parse_args(argv)

    if args.verbose:
        logging_config.setup_debug()
    else:
        logging_config.setup()

    start_time = time.time()

    if os.path.exists(args.prices):
        price_feed = DataFramePriceFeed.from_csv(args.prices)
    else:
        logger.warning("Price file %s not found, starting with an empty feed", args.prices)
        price_feed = InMemoryPriceFeed()

    weights = parse_weights(args.weights, args.num_tokens)
    if weights is None:
        pool = WeightedPool.with_equal_weights(args.pool, args.num_tokens)
    else:
        pool = WeightedPool(args.pool, weights)

    hook = OracleFeeHook(
        price_feed=price_feed,
        authorizer=AllowListAuthorizer({AllowListAuthorizer.WILDCARD: [OPERATOR]}),
        default_max_fee_percentage=to_fixed(DEFAULT_MAX_FEE_PERCENTAGE),
        default_threshold_percentage=to_fixed(DEFAULT_THRESHOLD_PERCENTAGE)
    )
    hook.on_register(pool, pool.num_tokens)

    pair_ids = parse_ints(args.pairs)
    if pair_ids:
        hook.set_token_price_config_batch(pool, list(range(len(pair_ids))), pair_ids, OPERATOR)

    configure_lane(hook, pool, FeeLane.ARBITRAGE,
                   to_fixed(args.threshold), to_fixed(args.cap), to_fixed(args.max_fee), OPERATOR)
    configure_lane(hook, pool, FeeLane.NOISE,
                   to_fixed(args.noise_threshold or args.threshold),
                   to_fixed(args.noise_cap or args.cap),
                   to_fixed(args.noise_max_fee or args.max_fee),
                   OPERATOR)

    static_fee = to_fixed(args.static_fee)
    analyzer = FeeCurveAnalyzer(hook, pool)
    visualizer = None if args.no_plots else FeeCurveVisualizer(args.output_dir)

    logger.info("Step 1: Sweeping fee ramps...")
    curves = analyzer.sweep_all_lanes(static_fee, points=SWEEP_POINTS)
    DataIO.save_dataframe(fee_curve_frame(curves), FEE_CURVE_FILE, args.output_dir)
    if visualizer:
        visualizer.plot_fee_curves(curves)

    summary = {'pool': hook.get_pool_record(pool).to_dict(), 'static_fee': static_fee}

    if os.path.exists(args.scenarios):
        logger.info("Step 2: Replaying swap scenarios from %s...", args.scenarios)
        scenarios_df = DataIO.load_dataframe(args.scenarios, list_columns=['balances', 'raw_prices'])
        result_df = analyzer.replay_scenarios(scenarios_df, static_fee)
        DataIO.save_dataframe(result_df, REPLAY_RESULTS_FILE, args.output_dir)
        summary['replay'] = analyzer.summarize(result_df)
        if visualizer:
            visualizer.plot_replay(result_df)
    else:
        logger.info("No scenario file at %s, skipping replay", args.scenarios)

    JSONHandler.save_json(summary, SUMMARY_FILE, args.output_dir)

    logger.info("Analysis complete in %.2f seconds. Results are in %s", time.time() - start_time, args.output_dir)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
