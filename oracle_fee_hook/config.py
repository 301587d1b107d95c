import os
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

# Project root directory
PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))

# Data Path Settings
DATA_DIR = os.getenv("FEE_HOOK_DATA_DIR", os.path.join(PROJECT_ROOT, "data"))
RESULTS_DIR = os.getenv("FEE_HOOK_RESULTS_DIR", os.path.join(PROJECT_ROOT, "results"))
ANALYSIS_DIR = os.path.join(RESULTS_DIR, "analysis")

# Data File Name Settings
PRICE_FEED_FILE = os.getenv("FEE_HOOK_PRICE_FEED_FILE", "price_feed.csv")
SCENARIOS_FILE = os.getenv("FEE_HOOK_SCENARIOS_FILE", "swap_scenarios.csv")
FEE_CURVE_FILE = "fee_curve.csv"
REPLAY_RESULTS_FILE = "replay_results.csv"
SUMMARY_FILE = "summary.json"

# Module-wide fee defaults (fractions of 1.0, converted to fixed point by the caller)
DEFAULT_THRESHOLD_PERCENTAGE: str = os.getenv("FEE_HOOK_DEFAULT_THRESHOLD", "0.001")
DEFAULT_MAX_FEE_PERCENTAGE: str = os.getenv("FEE_HOOK_DEFAULT_MAX_FEE", "0.1")
DEFAULT_STATIC_FEE_PERCENTAGE: str = os.getenv("FEE_HOOK_DEFAULT_STATIC_FEE", "0.003")

# Identity used by the CLI when configuring the hook
OPERATOR = os.getenv("FEE_HOOK_OPERATOR", "operator")

# Sweep Settings
SWEEP_POINTS: int = 201

# Plot Settings
PLOT_DPI: int = 300
PLOT_FIGSIZE: tuple = (12, 8)
PLOT_STYLE: str = "seaborn-v0_8-darkgrid"
