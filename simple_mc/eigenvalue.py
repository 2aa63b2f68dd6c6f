"""
k-Eigenvalue Power Iteration Driver

Monte Carlo power iteration with batches of generations:
1. Sample n_particles source neutrons uniformly in the box
2. For each batch:
   a. If the batch is one of the last n_active: count it active and, when
      requested, switch tallies on (they stay on)
   b. For each generation:
      - transport the source bank -> merged fission bank
      - k_gen = |fission bank| / |source bank|
      - resample fission bank -> source bank (fixed size)
      - Shannon entropy of the new source
   c. k_batch = mean of k_gen over the batch
   d. Active batch: record k_batch, update running mean / std
3. Statistics from active batches

Any exception aborts the run; nothing is retried.
"""
import time
from dataclasses import dataclass
from typing import List, Optional

import numpy as np

from .backends import get_backend
from .config import Parameters
from .entropy import EntropyMonitor
from .errors import ParameterError
from .geometry import Geometry
from .keff import KeffStatistics, GenerationAccumulator
from .materials import Material, build_material
from .output import (
    init_output, write_entropy, write_keff, write_tally, write_bank,
    write_source, save_source, load_source,
)
from .particle import create_source_bank
from .resampling import synchronize_bank
from .rng import other_stream
from .tallies import Tally


@dataclass
class EigenvalueResult:
    """Complete results from a k-eigenvalue calculation."""
    keff: float
    keff_std: float
    keff_active: List[float]        # one entry per active batch
    keff_batches: List[float]       # one entry per batch
    entropy_history: List[float]    # one entry per generation
    flux_mean: Optional[np.ndarray]  # [n_bins, n_bins, n_bins], None without tallies
    flux_std: Optional[np.ndarray]
    total_time: float               # seconds
    backend_name: str
    n_particles: int
    n_batches: int
    n_generations: int
    n_active: int
    final_source_size: int

    @property
    def n_inactive(self):
        return self.n_batches - self.n_active

    def summary(self):
        """Print human-readable summary."""
        print("=" * 60)
        print(f"  k-Eigenvalue Result ({self.backend_name})")
        print("=" * 60)
        print(f"  k_eff = {self.keff:.5f} +/- {self.keff_std:.5f}")
        print(f"  Batches: {self.n_batches} ({self.n_inactive} inactive + {self.n_active} active)")
        print(f"  Generations/batch: {self.n_generations}")
        print(f"  Particles/generation: {self.n_particles:,}")
        histories = self.n_particles * self.n_batches * self.n_generations
        print(f"  Total histories: {histories:,}")
        print(f"  Wall time: {self.total_time:.1f} s")
        if self.total_time > 0:
            print(f"  Rate: {histories / self.total_time:,.0f} particles/s")
        print("=" * 60)

    def to_dict(self):
        """Convert to JSON-serializable dict (NaN becomes None)."""
        def _num(v):
            v = float(v)
            return None if np.isnan(v) else v

        return {
            'keff': _num(self.keff),
            'keff_std': _num(self.keff_std),
            'keff_active': [_num(k) for k in self.keff_active],
            'keff_batches': [_num(k) for k in self.keff_batches],
            'entropy_history': [float(h) for h in self.entropy_history],
            'total_time': float(self.total_time),
            'backend_name': self.backend_name,
            'n_particles': self.n_particles,
            'n_batches': self.n_batches,
            'n_generations': self.n_generations,
            'n_inactive': self.n_inactive,
            'n_active': self.n_active,
            'final_source_size': self.final_source_size,
        }


class PowerIteration:
    """k-eigenvalue power iteration driver.

    Uses any TransportBackend for the transport computation.
    """

    def __init__(
        self,
        params: Parameters,
        backend=None,                     # TransportBackend instance
        geometry: Geometry = None,
        material: Material = None,
    ):
        self.params = params
        self.backend = backend or get_backend('cpu', n_workers=params.n_workers)
        self.geometry = geometry or Geometry(params.gx, params.gy, params.gz, params.bc)
        self.material = material

    def _initial_source(self, rng):
        p = self.params
        if p.load_source:
            bank = load_source(p.source_file, p.n_particles)
            if bank.n != p.n_particles:
                raise ParameterError(
                    f"source file {p.source_file} holds {bank.n} particles, "
                    f"{p.n_particles} required"
                )
            return bank
        return create_source_bank(p.n_particles, self.geometry, rng)

    def solve(self, verbose=True) -> EigenvalueResult:
        """Run the full k-eigenvalue calculation.

        Returns:
            EigenvalueResult with all statistics
        """
        p = self.params.validate()
        rng = other_stream(p.seed)

        if self.material is None:
            self.material = build_material(p.n_nuclides, rng, xs_f=p.xs_f,
                                           xs_a=p.xs_a, xs_s=p.xs_s, nu=p.nu)
        geometry = self.geometry
        material = self.material

        # Read a saved source before init_output truncates the output files
        source_bank = self._initial_source(rng)
        init_output(p)

        tally = Tally(geometry, p.n_bins)
        stats = KeffStatistics(p.n_active)
        entropy_monitor = EntropyMonitor(geometry, p.n_bins)

        if verbose:
            print(f"Starting k-eigenvalue calculation")
            print(f"  Backend: {self.backend.get_name()}")
            print(f"  Particles/generation: {p.n_particles:,}")
            print(f"  Batches: {p.n_batches} ({p.n_inactive} inactive + {p.n_active} active)")
            print()
            print(f"  {'BATCH':<10} {'ENTROPY':<12} {'KEFF':<12} {'MEAN KEFF'}")

        t_start = time.time()
        batch_keff = []
        i_active = -1
        generation = 0
        H = 0.0

        for i_batch in range(p.n_batches):
            accumulator = GenerationAccumulator()

            if i_batch >= p.n_batches - p.n_active:
                i_active += 1
                if p.tally:
                    tally.tallies_on = True

            for _ in range(p.n_generations):
                fission_bank = self.backend.transport_generation(
                    source_bank, geometry, material, tally, p.seed, generation,
                )
                accumulator.add(fission_bank.n, source_bank.n)

                synchronize_bank(source_bank, fission_bank, geometry, rng)

                H = entropy_monitor.compute(source_bank)
                if p.write_entropy:
                    write_entropy(H, p.entropy_file)
                generation += 1

            k_batch = accumulator.k_batch
            batch_keff.append(k_batch)
            if i_active >= 0:
                stats.record(i_active, k_batch)

            if tally.tallies_on:
                tally.batch_tally(p.n_particles * p.n_generations)
                if p.write_tally:
                    write_tally(tally, p.tally_file)

            if p.write_bank:
                write_bank(source_bank, p.bank_file)
            if p.write_source:
                write_source(source_bank, p.source_file)

            if verbose:
                if i_active < 0:
                    print(f"  {i_batch + 1:<10d} {H:<12.6f} {k_batch:<12.6f}")
                else:
                    print(f"  {i_batch + 1:<10d} {H:<12.6f} {k_batch:<12.6f} "
                          f"{stats.mean:.6f} +/- {stats.std:.6f}")

        total_time = time.time() - t_start

        if p.write_keff:
            write_keff(stats.values, p.keff_file)
        if p.save_source:
            save_source(source_bank, p.source_file)

        result = EigenvalueResult(
            keff=stats.mean,
            keff_std=stats.std,
            keff_active=stats.values.tolist(),
            keff_batches=batch_keff,
            entropy_history=entropy_monitor.history,
            flux_mean=tally.mean if tally.n_batches else None,
            flux_std=tally.std if tally.n_batches else None,
            total_time=total_time,
            backend_name=self.backend.get_name(),
            n_particles=p.n_particles,
            n_batches=p.n_batches,
            n_generations=p.n_generations,
            n_active=p.n_active,
            final_source_size=source_bank.n,
        )

        if verbose:
            print()
            print(f"Simulation time: {total_time:f} secs")
            result.summary()

        return result


def quick_run(backend=None, n_particles=1000, n_batches=20, n_active=10, seed=1,
              verbose=True, **overrides):
    """Quick test run with default physics."""
    params = Parameters(n_particles=n_particles, n_batches=n_batches,
                        n_active=n_active, seed=seed, **overrides)
    solver = PowerIteration(params, backend=backend)
    return solver.solve(verbose=verbose)
