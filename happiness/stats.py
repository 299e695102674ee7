"""
Statistics helpers.
"""

import logging
from typing import Sequence

import numpy as np

logger = logging.getLogger(__name__)


def compute_correlation_coefficient(
    values1: Sequence[float],
    values2: Sequence[float]
) -> float:
    """
    Compute Pearson's correlation coefficient for two sequences.

    Args:
        values1: First numeric sequence
        values2: Second numeric sequence, same length as values1

    Returns:
        Coefficient in [-1, 1], or nan when either sequence has zero variance

    Raises:
        ValueError: If the sequences differ in length
    """
    x = np.asarray(values1, dtype=float).ravel()
    y = np.asarray(values2, dtype=float).ravel()

    if x.shape[0] != y.shape[0]:
        raise ValueError("values must be the same length")

    if x.size == 0:
        logger.warning("Correlation of empty sequences is undefined")
        return float("nan")

    # Checked on the raw values: the mean of a constant float sequence can
    # carry rounding error, leaving tiny non-zero deviations
    if np.ptp(x) == 0 or np.ptp(y) == 0:
        logger.warning("Correlation undefined for a constant sequence")
        return float("nan")

    dx = x - x.mean()
    dy = y - y.mean()

    denominator = np.sqrt(np.sum(dx ** 2) * np.sum(dy ** 2))
    return float(np.sum(dx * dy) / denominator)
