import matplotlib.pyplot as plt
import pandas as pd
import seaborn as sns
from typing import Dict, List

from ..core.utils import Visualizer
from ..config import PLOT_DPI, PLOT_FIGSIZE, PLOT_STYLE


class FeeCurveVisualizer:
    """
    Generates visualizations for fee ramps and scenario replays.
    """

    def __init__(self, output_dir: str):
        """
        Initialize visualizer.

        Args:
            output_dir: Directory to save visualizations
        """
        self.output_dir = output_dir

        # Set plot style
        Visualizer.set_plot_style(PLOT_STYLE, PLOT_FIGSIZE, PLOT_DPI)

    def plot_fee_curves(self, curves: Dict[str, pd.DataFrame]) -> str:
        """
        Plot fee against deviation for each lane.

        Args:
            curves: Sweep frames keyed by lane name

        Returns:
            Path to the saved figure
        """
        fig = plt.figure(figsize=(10, 6))
        ax = fig.add_subplot(1, 1, 1)

        for lane_name, curve in curves.items():
            ax.plot(curve['deviation_pct'] * 100, curve['fee_pct'] * 100, label=lane_name)

        ax.set_xlabel('Price Deviation (%)')
        ax.set_ylabel('Fee (%)')
        ax.set_title('Dynamic Fee Ramp by Lane')
        ax.legend()
        ax.grid(True, alpha=0.3)

        return Visualizer.save_figure(fig, 'fee_curves.png', PLOT_DPI, self.output_dir)

    def plot_replay(self, result_df: pd.DataFrame) -> List[str]:
        """
        Scatter of deviation vs charged fee and a histogram of charged fees.

        Args:
            result_df: Output of FeeCurveAnalyzer.replay_scenarios

        Returns:
            Paths to the saved figures
        """
        computed = result_df[result_df['fallback'].isna()].copy()
        if computed.empty:
            return []

        computed['deviation_pct'] = computed['deviation'].astype(float) / 1e18 * 100
        computed['fee_pct'] = computed['dynamic_fee_pct'] * 100

        paths = []

        fig = plt.figure(figsize=(10, 6))
        ax = fig.add_subplot(1, 1, 1)
        sns.scatterplot(data=computed, x='deviation_pct', y='fee_pct', hue='lane', s=20, alpha=0.7, ax=ax)
        ax.set_xlabel('Price Deviation (%)')
        ax.set_ylabel('Charged Fee (%)')
        ax.set_title('Replayed Swaps: Deviation vs Fee')
        ax.grid(True, alpha=0.3)
        paths.append(Visualizer.save_figure(fig, 'replay_deviation_vs_fee.png', PLOT_DPI, self.output_dir))

        fig = plt.figure(figsize=(10, 5))
        ax = fig.add_subplot(1, 1, 1)
        sns.histplot(data=computed, x='fee_pct', hue='lane', bins=40, ax=ax)
        ax.set_xlabel('Charged Fee (%)')
        ax.set_ylabel('Frequency')
        ax.set_title('Charged Fee Distribution')
        paths.append(Visualizer.save_figure(fig, 'replay_fee_distribution.png', PLOT_DPI, self.output_dir))

        return paths
