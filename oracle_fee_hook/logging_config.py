"""
Logging configuration.

Usage:
    from oracle_fee_hook import logging_config
    logging_config.setup()
"""

import logging
import sys


def setup(level=logging.INFO):
    """
    Configure root logging with a compact console format.

    - Uses shorter timestamp format (HH:MM:SS instead of full datetime)
    - Keeps matplotlib's font manager quiet
    """
    root = logging.getLogger()
    root.setLevel(level)

    # Clear existing handlers
    root.handlers.clear()

    console = logging.StreamHandler(sys.stdout)
    console.setLevel(level)

    # Minimal format: time + level + message
    formatter = logging.Formatter(
        fmt="%(asctime)s | %(levelname)-7s | %(message)s", datefmt="%H:%M:%S"
    )
    console.setFormatter(formatter)
    root.addHandler(console)

    logging.getLogger("matplotlib").setLevel(logging.WARNING)
    logging.getLogger("oracle_fee_hook").setLevel(level)


def setup_debug():
    """
    Verbose logging, including every static-fee fallback on the swap path.
    """
    setup(level=logging.DEBUG)
