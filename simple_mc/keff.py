"""
k-effective estimation.

Generation estimate:  k_g = |fission bank| / |source bank|
Batch estimate:       mean of k_g over the batch's generations
Running statistics over active batches: arithmetic mean and sample
standard deviation sqrt(sum (k_i - mean)^2 / (count - 1)).
"""
import math

import numpy as np


def calculate_keff(keff, n):
    """Mean and sample standard deviation of the first n entries of keff.

    Degenerate counts are not errors: n == 1 gives std = nan, n == 0 gives
    mean = std = nan.

    Returns:
        (mean, std)
    """
    if n <= 0:
        return math.nan, math.nan
    values = np.asarray(keff[:n], dtype=np.float64)
    mean = float(np.sum(values) / n)
    if n < 2:
        return mean, math.nan
    std = math.sqrt(float(np.sum((values - mean)**2)) / (n - 1))
    return mean, std


class KeffStatistics:
    """Per-active-batch k_eff series with running mean / std.

    The series has a fixed length n_active; entry i is set once, when
    active batch i completes.
    """

    def __init__(self, n_active):
        self.n_active = n_active
        self.keff = np.full(n_active, np.nan)
        self.count = 0
        self.mean = math.nan
        self.std = math.nan

    def record(self, i_active, k_batch):
        """Store batch estimate for active batch i_active and refresh stats."""
        if i_active != self.count:
            raise ValueError(
                f"active batch {i_active} recorded out of order (expected {self.count})"
            )
        self.keff[i_active] = k_batch
        self.count += 1
        self.mean, self.std = calculate_keff(self.keff, self.count)
        return self.mean, self.std

    @property
    def values(self):
        return self.keff[:self.count].copy()


class GenerationAccumulator:
    """Sums generation estimates within one batch."""

    def __init__(self):
        self.total = 0.0
        self.n_generations = 0

    def add(self, n_fission, n_source):
        k_gen = n_fission / n_source
        self.total += k_gen
        self.n_generations += 1
        return k_gen

    @property
    def k_batch(self):
        if self.n_generations == 0:
            return math.nan
        return self.total / self.n_generations
