"""
Mesh flux tally for the box geometry.

Collision estimator on a uniform n x n x n mesh:
  flux[ix, iy, iz] += 1 / xs_t     at each collision inside the cell

Workers score into private partial tallies (fork) that the driver merges
at the end of each generation, so no locking is needed during transport.
Batch results are normalized by cell volume and source size and
accumulated for mean / standard deviation over active batches.
"""
import numpy as np


class Tally:
    """Flux tally on an n_bins^3 mesh over the box."""

    def __init__(self, geometry, n_bins):
        self.n = n_bins
        self.dx = geometry.x / n_bins
        self.dy = geometry.y / n_bins
        self.dz = geometry.z / n_bins
        self.tallies_on = False

        self.flux = np.zeros((n_bins, n_bins, n_bins))
        self.n_batches = 0
        self.flux_sum = np.zeros_like(self.flux)
        self.flux_sq_sum = np.zeros_like(self.flux)
        self.last_batch = np.zeros_like(self.flux)

    @property
    def cell_volume(self):
        return self.dx * self.dy * self.dz

    def cell_index(self, p):
        n = self.n
        ix = min(max(int(p.x / self.dx), 0), n - 1)
        iy = min(max(int(p.y / self.dy), 0), n - 1)
        iz = min(max(int(p.z / self.dz), 0), n - 1)
        return ix, iy, iz

    def score(self, p, xs_t):
        """Score one collision of particle *p* in a medium with total XS xs_t."""
        self.flux[self.cell_index(p)] += 1.0 / xs_t

    def fork(self):
        """Empty partial tally on the same mesh, for one worker."""
        part = Tally.__new__(Tally)
        part.n = self.n
        part.dx, part.dy, part.dz = self.dx, self.dy, self.dz
        part.tallies_on = self.tallies_on
        part.flux = np.zeros_like(self.flux)
        return part

    def merge(self, part):
        """Add a worker's partial flux into this tally."""
        self.flux += part.flux

    def batch_tally(self, n_particles):
        """Close a batch: normalize, accumulate statistics, reset flux."""
        self.last_batch = self.flux / (self.cell_volume * n_particles)
        self.flux_sum += self.last_batch
        self.flux_sq_sum += self.last_batch**2
        self.n_batches += 1
        self.flux[:] = 0.0

    def reset(self):
        self.flux[:] = 0.0

    @property
    def mean(self):
        if self.n_batches == 0:
            return np.zeros_like(self.flux_sum)
        return self.flux_sum / self.n_batches

    @property
    def std(self):
        """Sample standard deviation of the batch flux per cell."""
        if self.n_batches < 2:
            return np.full_like(self.flux_sum, np.nan)
        mean = self.mean
        var = (self.flux_sq_sum - self.n_batches * mean**2) / (self.n_batches - 1)
        var = np.maximum(var, 0)  # numerical safety
        return np.sqrt(var)
