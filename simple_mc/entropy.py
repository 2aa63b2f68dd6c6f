"""
Shannon entropy of the source distribution.

Used to monitor convergence of the source during inactive batches. The
entropy should plateau once the source has converged.

H = -sum_i p_i * log2(p_i)

where p_i = (sites in cell i) / (total sites), on a uniform n x n x n mesh
over the box. H = 0 when every site shares one cell and approaches
log2(n^3) for a uniform source.
"""
import logging

import numpy as np
from numba import njit

logger = logging.getLogger(__name__)


@njit(cache=True)
def _bin_counts(x, y, z, dx, dy, dz, n):
    """Occupancy counts on the flattened mesh, index ix*n*n + iy*n + iz.

    Axis indices are clamped to [0, n-1]; the number of clamped sites is
    returned alongside the counts.
    """
    counts = np.zeros(n * n * n, dtype=np.int64)
    n_clamped = 0
    for i in range(x.shape[0]):
        ix = int(np.floor(x[i] / dx))
        iy = int(np.floor(y[i] / dy))
        iz = int(np.floor(z[i] / dz))
        clamped = False
        if ix < 0:
            ix = 0
            clamped = True
        elif ix > n - 1:
            ix = n - 1
            clamped = True
        if iy < 0:
            iy = 0
            clamped = True
        elif iy > n - 1:
            iy = n - 1
            clamped = True
        if iz < 0:
            iz = 0
            clamped = True
        elif iz > n - 1:
            iz = n - 1
            clamped = True
        if clamped:
            n_clamped += 1
        counts[ix * n * n + iy * n + iz] += 1
    return counts, n_clamped


def source_counts(geometry, bank, n_bins):
    """Flattened n_bins^3 occupancy counts of the bank's live particles."""
    dx = geometry.x / n_bins
    dy = geometry.y / n_bins
    dz = geometry.z / n_bins
    x, y, z = bank.positions()
    counts, n_clamped = _bin_counts(
        np.ascontiguousarray(x), np.ascontiguousarray(y), np.ascontiguousarray(z),
        dx, dy, dz, n_bins,
    )
    if n_clamped:
        # Sites exactly on the upper faces land here too; only report real outliers
        n_out = int(np.sum(~geometry.contains(x, y, z)))
        if n_out:
            logger.warning("%d source sites outside the box were counted in edge cells",
                           n_out)
    return counts


def shannon_entropy(geometry, bank, n_bins):
    """Shannon entropy (bits) of the bank's spatial distribution.

    Args:
        geometry: Geometry (box extents define the mesh)
        bank: ParticleBank, normally the source bank
        n_bins: mesh cells per axis

    Returns:
        H: Shannon entropy value, 0.0 for an empty bank
    """
    if bank.n == 0:
        return 0.0

    counts = source_counts(geometry, bank, n_bins)
    probs = counts[counts > 0] / bank.n
    H = -np.sum(probs * np.log2(probs))
    return float(H)


class EntropyMonitor:
    """Shannon entropy history of the source, one value per generation."""

    def __init__(self, geometry, n_bins):
        self.geometry = geometry
        self.n_bins = n_bins
        self.history = []

    def compute(self, bank):
        H = shannon_entropy(self.geometry, bank, self.n_bins)
        self.history.append(H)
        return H
