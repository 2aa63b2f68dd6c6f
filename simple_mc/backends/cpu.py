"""
CPU Backend: worker threads with private fission banks.

Parallelization strategy:
- Split the source bank into n_workers contiguous chunks
- Each worker stages its chunk in a private ParticleQueue and transports
  the particles in FIFO order with its own tracking stream, scoring into
  a private partial tally and banking progeny in a private fission bank
- pool.map returns once every worker is done (barrier)
- Merge fission banks and partial tallies in worker-index order

The merge order and the per-(generation, worker) streams are fixed, so a
run is reproducible for a given seed and worker count.
"""
from multiprocessing import cpu_count
from multiprocessing.pool import ThreadPool
from typing import Optional

from ..geometry import Geometry
from ..materials import Material
from ..particle import ParticleBank
from ..particle_queue import ParticleQueue
from ..physics import transport
from ..rng import track_streams
from ..tallies import Tally
from .base import TransportBackend


def _worker_transport(args):
    """Transport one chunk; returns (fission_bank, partial_tally)."""
    records, geometry, material, tally, rng = args

    queue = ParticleQueue(len(records) + 1)
    queue.enqueue_records(records)

    fission_bank = ParticleBank(2 * len(records))
    partial = tally.fork() if tally is not None else None

    while len(queue) > 0:
        p = queue.dequeue()
        transport(p, geometry, material, partial, fission_bank, rng)

    return fission_bank, partial


class CPUBackend(TransportBackend):
    """Thread-parallel transport backend.

    Parameters
    ----------
    n_workers : int or None
        Number of worker threads.  ``None`` -> ``os.cpu_count()``.
    """

    def __init__(self, n_workers: Optional[int] = None):
        if n_workers is None:
            n_workers = cpu_count() or 1
        self._n_workers = max(1, n_workers)

    @property
    def n_workers(self):
        return self._n_workers

    # ------------------------------------------------------------------
    # TransportBackend interface
    # ------------------------------------------------------------------

    def transport_generation(
        self,
        source_bank: ParticleBank,
        geometry: Geometry,
        material: Material,
        tally: Optional[Tally],
        seed: int,
        generation: int,
    ) -> ParticleBank:
        """Transport all particles in *source_bank* through one generation."""
        if source_bank.n == 0:
            return ParticleBank(1)

        streams = track_streams(seed, generation, self._n_workers)
        chunks = source_bank.split(self._n_workers)

        worker_args = [
            (chunk, geometry, material, tally, streams[i])
            for i, chunk in enumerate(chunks)
        ]

        if self._n_workers == 1:
            results = [_worker_transport(worker_args[0])]
        else:
            with ThreadPool(processes=self._n_workers) as pool:
                results = pool.map(_worker_transport, worker_args)

        return self._merge_results(results, tally)

    def get_name(self) -> str:
        n = self._n_workers
        return f"CPU ({n} thread{'s' if n > 1 else ''})"

    def is_available(self) -> bool:
        return True  # CPU is always available

    # ------------------------------------------------------------------
    # Merge worker results
    # ------------------------------------------------------------------

    def _merge_results(self, results, tally):
        """Concatenate fission banks and reduce partial tallies, in worker order."""
        fission_bank = ParticleBank.merge([bank for bank, _ in results])
        if tally is not None:
            for _, partial in results:
                tally.merge(partial)
        return fission_bank
