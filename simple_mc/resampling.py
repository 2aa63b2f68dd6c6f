"""
Source/fission bank synchronization.

Converts the (merged) variable-size fission bank into a fixed-size source
bank for the next generation:

  n_f >= n_s : online reservoir sampling (Algorithm R). The first n_s
               fission sites fill the reservoir; site i >= n_s replaces
               slot j, drawn uniform on [0, i], when j < n_s. Every fission site
               ends up in the source with probability n_s / n_f.
  n_f <  n_s : the first n_s - n_f slots are fresh samples from the source
               distribution, the remaining n_f slots are the fission sites.

The fission bank is reset afterwards in both cases.
"""
import numpy as np
from numba import njit

from .particle import sample_source_records


@njit(cache=True)
def _reservoir_indices(n_s, n_f, xi):
    """Fission-bank index held by each of the n_s reservoir slots.

    xi[k] is the uniform draw used for fission site i = n_s + k;
    floor(xi * (i + 1)) is uniform on [0, i].
    """
    idx = np.arange(n_s)
    for i in range(n_s, n_f):
        j = int(xi[i - n_s] * (i + 1))
        if j < n_s:
            idx[j] = i
    return idx


def reservoir_indices(n_s, n_f, rng):
    """Draw the reservoir selection for n_s slots out of n_f sites."""
    xi = rng.random(max(n_f - n_s, 0))
    return _reservoir_indices(n_s, n_f, xi)


def synchronize_bank(source_bank, fission_bank, geometry, rng):
    """Resample fission_bank into source_bank, keeping source_bank.n fixed.

    Args:
        source_bank: ParticleBank; its live count n_s is the target size
        fission_bank: ParticleBank already merged across workers
        geometry: Geometry, for fresh source samples when n_f < n_s
        rng: numpy random Generator (driver stream)
    """
    n_s = source_bank.n
    n_f = fission_bank.n

    if n_f >= n_s:
        idx = reservoir_indices(n_s, n_f, rng)
        source_bank.p[:n_s] = fission_bank.p[idx]
    else:
        n_fresh = n_s - n_f
        source_bank.p[:n_fresh] = sample_source_records(n_fresh, geometry, rng)
        source_bank.p[n_fresh:n_s] = fission_bank.p[:n_f]

    fission_bank.reset()
