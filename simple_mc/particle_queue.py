"""
Circular FIFO of particle records.

Live elements occupy [head, head + n) mod sz. The queue grows before it
becomes full (n + 1 == sz), doubling capacity and re-linearizing the live
region so that a wrapped region keeps its order.
"""
import numpy as np

from .errors import AllocationFailure, EmptyQueueError
from .particle import PARTICLE_DTYPE, Particle


class ParticleQueue:
    """Auto-growing circular buffer of PARTICLE_DTYPE records."""

    def __init__(self, capacity):
        self.p = np.zeros(max(1, int(capacity)), dtype=PARTICLE_DTYPE)
        self.head = 0
        self.n = 0

    @property
    def sz(self):
        return self.p.shape[0]

    def __len__(self):
        return self.n

    def _live_indices(self):
        return (self.head + np.arange(self.n)) % self.sz

    def resize(self):
        """Double capacity; live records move to [0, n) in FIFO order."""
        new_size = 2 * self.sz
        try:
            p = np.zeros(new_size, dtype=PARTICLE_DTYPE)
        except MemoryError as exc:
            raise AllocationFailure(
                f"Could not resize particle queue to {new_size} particles."
            ) from exc
        p[:self.n] = self.p[self._live_indices()]
        self.p = p
        self.head = 0

    def enqueue(self, particle):
        if self.n + 1 >= self.sz:
            self.resize()
        rec = particle.as_record() if isinstance(particle, Particle) else particle
        self.p[(self.head + self.n) % self.sz] = rec
        self.n += 1

    def dequeue(self):
        """Remove and return the oldest particle.

        Raises:
            EmptyQueueError: if the queue is empty
        """
        if self.n == 0:
            raise EmptyQueueError("Can't dequeue particle from empty queue.")
        p = Particle.from_record(self.p[self.head])
        self.n -= 1
        self.head = (self.head + 1) % self.sz
        return p

    def enqueue_records(self, records):
        for rec in records:
            self.enqueue(rec)
