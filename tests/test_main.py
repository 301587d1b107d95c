"""End-to-end tests for the command-line entry point."""

import json

import pandas as pd
import pytest

from oracle_fee_hook.core.fixed_point import to_fixed
from oracle_fee_hook.core.models import FeeLane, LaneParams
from oracle_fee_hook.core.utils import DataIO
from oracle_fee_hook.main import configure_lane, main, parse_weights

from conftest import ADMIN


@pytest.fixture
def input_files(tmp_path):
    prices = tmp_path / "prices.csv"
    prices.write_text("pair_id,raw_price,size_decimals\n1,1000000,6\n2,1250000,6\n")

    balance = 10**24
    scenarios = tmp_path / "scenarios.csv"
    scenarios.write_text(
        "index_in,index_out,balances,raw_prices\n"
        f'0,1,"[{balance}, {balance}]","[1000000, 1250000]"\n'
        f'1,0,"[{balance}, {balance}]","[1000000, 1250000]"\n'
        f'0,1,"[{balance}, {balance}]","[1000000, 1000000]"\n'
    )
    return prices, scenarios


def test_main_writes_results(input_files, tmp_path):
    prices, scenarios = input_files
    output_dir = tmp_path / "out"

    exit_code = main([
        "--prices", str(prices),
        "--scenarios", str(scenarios),
        "--pairs", "1,2",
        "--threshold", "0.001",
        "--cap", "0.5",
        "--max-fee", "0.05",
        "--noise-max-fee", "0.02",
        "--static-fee", "0.003",
        "--output-dir", str(output_dir),
        "--no-plots",
    ])

    assert exit_code == 0
    assert (output_dir / "fee_curve.csv").exists()
    assert (output_dir / "replay_results.csv").exists()

    summary = json.loads((output_dir / "summary.json").read_text())
    assert summary["pool"]["token_price_configs"] == [[1, 1], [2, 1]]
    assert summary["pool"]["lanes"]["NOISE"]["max_fee"] == to_fixed("0.02")
    assert summary["replay"]["swap_count"] == 3
    assert summary["replay"]["lane_counts"] == {"ARBITRAGE": 1, "NOISE": 2}


@pytest.fixture
def partial_quotes(tmp_path):
    balance = 10**24
    scenarios = tmp_path / "partial.csv"
    scenarios.write_text(
        "index_in,index_out,balances,raw_prices\n"
        f'0,1,"[{balance}, {balance}]","[1000000, 800000]"\n'
        f'0,1,"[{balance}, {balance}]",\n'
    )
    return scenarios


def test_load_dataframe_keeps_empty_list_cells(partial_quotes):
    df = DataIO.load_dataframe(str(partial_quotes), list_columns=["balances", "raw_prices"])

    assert df["raw_prices"].iloc[0] == [1_000_000, 800_000]
    assert pd.isna(df["raw_prices"].iloc[1])
    assert df["balances"].iloc[1] == [10**24, 10**24]


def test_main_replays_rows_without_quotes(input_files, partial_quotes, tmp_path):
    prices, _ = input_files
    output_dir = tmp_path / "out"

    exit_code = main([
        "--prices", str(prices),
        "--scenarios", str(partial_quotes),
        "--pairs", "1,2",
        "--output-dir", str(output_dir),
        "--no-plots",
    ])

    assert exit_code == 0
    summary = json.loads((output_dir / "summary.json").read_text())
    # The second row reuses the quotes left by the first
    assert summary["replay"]["swap_count"] == 2
    assert summary["replay"]["fallback_count"] == 0
    assert summary["replay"]["lane_counts"] == {"ARBITRAGE": 2, "NOISE": 0}


def test_main_without_inputs(tmp_path):
    exit_code = main([
        "--prices", str(tmp_path / "missing.csv"),
        "--scenarios", str(tmp_path / "missing.csv"),
        "--output-dir", str(tmp_path),
        "--no-plots",
    ])
    assert exit_code == 0
    summary = json.loads((tmp_path / "summary.json").read_text())
    assert "replay" not in summary


def test_configure_lane_orders_updates(hook, pool):
    hook.on_register(pool, 2)
    configure_lane(hook, pool, FeeLane.NOISE, 6 * 10**17, 9 * 10**17, 10**17, ADMIN)
    assert hook.get_lane_params(pool, FeeLane.NOISE) == LaneParams(6 * 10**17, 9 * 10**17, 10**17)

    configure_lane(hook, pool, FeeLane.NOISE, 10**15, 2 * 10**17, 10**16, ADMIN)
    assert hook.get_lane_params(pool, FeeLane.NOISE) == LaneParams(10**15, 2 * 10**17, 10**16)

    # Threshold above the current cap: cap moves first
    configure_lane(hook, pool, FeeLane.NOISE, 3 * 10**17, 4 * 10**17, 10**16, ADMIN)
    assert hook.get_lane_params(pool, FeeLane.NOISE) == LaneParams(3 * 10**17, 4 * 10**17, 10**16)


def test_parse_weights():
    assert parse_weights(None, 2) is None
    assert parse_weights("0.8,0.2", 2) == [8 * 10**17, 2 * 10**17]
    with pytest.raises(ValueError):
        parse_weights("0.5,0.25,0.25", 2)
