"""
Shared utility functions.

This module provides numba-compiled numeric helpers used on the hot path of
the information loss computation, and helpers for configuring logging.
"""

import logging
from typing import Optional

import numba
import numpy as np


@numba.jit(nopython=True)
def min_max(x: np.ndarray) -> tuple[float, float]:
    """
    Find the minimum and maximum values of an array, ignoring NaN values.

    Both values are computed in a single pass through the array.

    Parameters
    ----------
    x : np.ndarray
        Input array of numerical values.

    Returns
    -------
    Tuple[float, float]
        A tuple containing (minimum, maximum) values from the array.
        Returns (np.nan, np.nan) if the array is empty or contains only NaN values.

    Examples
    --------
    >>> min_max(np.array([1.0, 2.0, 3.0, 4.0, 5.0]))
    (1.0, 5.0)
    >>> min_max(np.array([1.0, 2.0, np.nan, 4.0, 5.0]))
    (1.0, 5.0)
    """
    x = x[~np.isnan(x)]
    if len(x) == 0:
        return (np.nan, np.nan)
    maximum = x[0]
    minimum = x[0]
    for i in x[1:]:
        if i > maximum:
            maximum = i
        elif i < minimum:
            minimum = i
    return (minimum, maximum)


@numba.jit(nopython=True)
def count_within(sorted_domain: np.ndarray, minimum: float, maximum: float) -> int:
    """
    Count the domain values in the closed interval [minimum, maximum].

    Parameters
    ----------
    sorted_domain : np.ndarray
        Distinct domain values in ascending order.
    minimum : float
        Lower end of the interval.
    maximum : float
        Upper end of the interval.

    Returns
    -------
    int
        Number of domain values v with minimum <= v <= maximum.
    """
    lower = np.searchsorted(sorted_domain, minimum, side="left")
    upper = np.searchsorted(sorted_domain, maximum, side="right")
    return int(upper - lower)


def debug_logging_enabled(logger: logging.Logger) -> bool:
    """Check whether the logger is configured for DEBUG level logging."""
    return logger.isEnabledFor(logging.DEBUG)


def configure_logging(level: int = logging.INFO, fmt: Optional[str] = None) -> logging.Logger:
    """
    Configure the root logger for scripts and notebooks using this package.

    Adds a stream handler if the root logger has none, sets the level and
    reduces numba logging noise.

    Parameters
    ----------
    level : int, optional
        Logging level for the root logger, by default logging.INFO
    fmt : str, optional
        Format string for the stream handler, by default a timestamped format

    Returns
    -------
    logging.Logger
        The root logger
    """
    root_logger = logging.getLogger()
    if not root_logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(
            logging.Formatter(fmt or "%(asctime)s %(levelname)s %(name)s: %(message)s")
        )
        root_logger.addHandler(handler)
    root_logger.setLevel(level)
    logging.getLogger("numba").setLevel(logging.ERROR)
    return root_logger
