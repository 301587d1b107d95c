import os
import json
import logging
import pandas as pd
import numpy as np
from enum import Enum
import matplotlib
import matplotlib.pyplot as plt
from typing import Any, Dict, Optional, List, Tuple

logger = logging.getLogger(__name__)


class DataIO:
    """
    Utility class for tabular input/output.
    """

    @staticmethod
    def ensure_directory_exists(directory_path: str) -> None:
        if not os.path.exists(directory_path):
            os.makedirs(directory_path)
            logger.info("Created directory: %s", directory_path)

    @staticmethod
    def save_dataframe(df: pd.DataFrame, filename: str, directory: str) -> str:
        """
        Save a DataFrame to a CSV file.

        Args:
            df: DataFrame to save
            filename: Filename for the CSV file
            directory: Directory to save to

        Returns:
            Path to the saved file
        """
        DataIO.ensure_directory_exists(directory)
        file_path = os.path.join(directory, filename)
        df.to_csv(file_path, index=False, encoding='utf-8')
        logger.info("File saved to: %s", file_path)
        return file_path

    @staticmethod
    def load_dataframe(file_path: str, list_columns: Optional[List[str]] = None) -> pd.DataFrame:
        """
        Load a DataFrame from a CSV file.

        Columns listed in ``list_columns`` hold JSON arrays (e.g. balances) and
        are decoded into Python lists of ints.

        Args:
            file_path: Path to the CSV file
            list_columns: Columns to decode as JSON integer lists

        Returns:
            Loaded DataFrame

        Raises:
            FileNotFoundError: If the file does not exist
        """
        if not os.path.exists(file_path):
            raise FileNotFoundError(f"File not found: {file_path}")

        # Raw quotes and 1e24 balances exceed int64, keep them as strings
        df = pd.read_csv(file_path, dtype=str)
        for col in list_columns or []:
            if col in df.columns:
                # Empty cells load as NaN and stay that way
                df[col] = df[col].apply(
                    lambda x: [int(v) for v in json.loads(x)] if isinstance(x, str) else x
                )
        return df


class JSONHandler:
    """
    Utility class for JSON serialization.
    """

    class CustomJSONEncoder(json.JSONEncoder):
        """
        JSON encoder for numpy/pandas values and enums.
        """
        def default(self, obj: Any) -> Any:
            if isinstance(obj, (pd.DataFrame, pd.Series)):
                return obj.to_dict()
            if isinstance(obj, np.ndarray):
                return obj.tolist()
            if isinstance(obj, np.integer):
                return int(obj)
            if isinstance(obj, np.floating):
                return float(obj)
            if isinstance(obj, Enum):
                return obj.name
            return super().default(obj)

    @classmethod
    def save_json(cls, data: Dict[str, Any], filename: str, directory: str) -> str:
        DataIO.ensure_directory_exists(directory)
        file_path = os.path.join(directory, filename)
        with open(file_path, 'w', encoding='utf-8') as f:
            json.dump(data, f, cls=cls.CustomJSONEncoder, indent=2, ensure_ascii=False)
        logger.info("JSON file saved to: %s", file_path)
        return file_path


class Visualizer:
    """
    Utility class for figure output.
    """

    @staticmethod
    def save_figure(fig: plt.Figure, filename: str, dpi: int, directory: str) -> str:
        """
        Save a Matplotlib figure to a file and close it.

        Args:
            fig: Figure to save
            filename: Filename for the figure
            dpi: DPI for the saved figure
            directory: Directory to save to

        Returns:
            Path to the saved figure
        """
        DataIO.ensure_directory_exists(directory)
        file_path = os.path.join(directory, filename)
        fig.savefig(file_path, dpi=dpi, bbox_inches='tight')
        plt.close(fig)
        logger.info("Figure saved to: %s", file_path)
        return file_path

    @staticmethod
    def set_plot_style(style: str, figsize: Tuple[int, int], dpi: int) -> None:
        if style in plt.style.available:
            plt.style.use(style)
        else:
            logger.warning("Plot style %s not available, using matplotlib defaults", style)
        matplotlib.rcParams['figure.figsize'] = figsize
        matplotlib.rcParams['figure.dpi'] = dpi
