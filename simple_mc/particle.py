"""
Particle records and the particle bank.

A particle is stored as one record of the numpy structured dtype
PARTICLE_DTYPE. Banks own a structured array with an explicit capacity
``sz`` and live count ``n``; the live particles are ``p[:n]``.

Two banks exist per simulation: the source bank (this generation's
starting population, fixed size n_particles) and the fission bank
(progeny accumulated during transport, reset after each resampling).
"""
from dataclasses import dataclass

import numpy as np

from .errors import AllocationFailure


PARTICLE_DTYPE = np.dtype([
    ('x', np.float64),           # position (cm)
    ('y', np.float64),
    ('z', np.float64),
    ('u', np.float64),           # direction cosines
    ('v', np.float64),
    ('w', np.float64),
    ('mu', np.float64),          # polar cosine
    ('phi', np.float64),         # azimuthal angle
    ('energy', np.float64),
    ('last_energy', np.float64),
    ('alive', np.bool_),
])


@dataclass
class Particle:
    """Scalar particle state handed to the transport operation."""
    x: float = 0.0
    y: float = 0.0
    z: float = 0.0
    u: float = 1.0
    v: float = 0.0
    w: float = 0.0
    mu: float = 1.0
    phi: float = 0.0
    energy: float = 1.0
    last_energy: float = 0.0
    alive: bool = True

    @classmethod
    def from_record(cls, rec):
        return cls(
            x=float(rec['x']), y=float(rec['y']), z=float(rec['z']),
            u=float(rec['u']), v=float(rec['v']), w=float(rec['w']),
            mu=float(rec['mu']), phi=float(rec['phi']),
            energy=float(rec['energy']),
            last_energy=float(rec['last_energy']),
            alive=bool(rec['alive']),
        )

    def as_record(self):
        return (self.x, self.y, self.z, self.u, self.v, self.w, self.mu,
                self.phi, self.energy, self.last_energy, self.alive)

    def set_direction(self, mu, phi):
        """Set direction cosines from polar cosine and azimuth."""
        self.mu = mu
        self.phi = phi
        self.u, self.v, self.w = direction_cosines(mu, phi)

    def move(self, distance):
        self.x += distance * self.u
        self.y += distance * self.v
        self.z += distance * self.w


def direction_cosines(mu, phi):
    """(u, v, w) for polar cosine mu about the x axis and azimuth phi.

    Works with scalars or numpy arrays.
    """
    sin_theta = np.sqrt(np.maximum(0.0, 1.0 - mu * mu))
    return mu, sin_theta * np.cos(phi), sin_theta * np.sin(phi)


class ParticleBank:
    """Append-only, resizable array of particle records.

    Invariant: n <= sz. Growth doubles the capacity.
    """

    def __init__(self, capacity):
        capacity = max(1, int(capacity))
        self.p = np.zeros(capacity, dtype=PARTICLE_DTYPE)
        self.n = 0

    @property
    def sz(self):
        return self.p.shape[0]

    def __len__(self):
        return self.n

    def __getitem__(self, i):
        if not 0 <= i < self.n:
            raise IndexError(f"particle index {i} out of range for bank of {self.n}")
        return Particle.from_record(self.p[i])

    @property
    def particles(self):
        """View of the live records p[:n]."""
        return self.p[:self.n]

    def positions(self):
        """(x, y, z) arrays of the live particles."""
        live = self.particles
        return live['x'], live['y'], live['z']

    def resize(self, new_size=None):
        """Grow capacity (default: double). Existing records are kept."""
        if new_size is None:
            new_size = 2 * self.sz
        if new_size <= self.sz:
            return
        try:
            p = np.zeros(new_size, dtype=PARTICLE_DTYPE)
        except MemoryError as exc:
            raise AllocationFailure(
                f"Could not resize particle bank to {new_size} particles."
            ) from exc
        p[:self.n] = self.p[:self.n]
        self.p = p

    def append(self, particle):
        """Append one Particle (or raw record), growing if full."""
        if self.n == self.sz:
            self.resize()
        if isinstance(particle, Particle):
            self.p[self.n] = particle.as_record()
        else:
            self.p[self.n] = particle
        self.n += 1

    def extend(self, records):
        """Append a structured array of records in one copy."""
        k = len(records)
        if k == 0:
            return
        needed = self.n + k
        if needed > self.sz:
            new_size = self.sz
            while new_size < needed:
                new_size *= 2
            self.resize(new_size)
        self.p[self.n:needed] = records
        self.n = needed

    def reset(self):
        """Forget all particles, keeping the allocation."""
        self.n = 0

    def split(self, n_chunks):
        """Split live particles into n_chunks contiguous record arrays."""
        return np.array_split(self.particles, n_chunks)

    @classmethod
    def merge(cls, banks):
        """Concatenate banks, in the given order, into a new bank."""
        total = sum(b.n for b in banks)
        merged = cls(total)
        for b in banks:
            merged.extend(b.particles)
        return merged


# ===================================================================
# Samplers
# ===================================================================

def sample_source_particle(geometry, rng):
    """One particle uniform in the box with isotropic direction."""
    p = Particle(energy=1.0, last_energy=0.0, alive=True)
    p.set_direction(rng.random() * 2.0 - 1.0, rng.random() * 2.0 * np.pi)
    p.x = rng.random() * geometry.x
    p.y = rng.random() * geometry.y
    p.z = rng.random() * geometry.z
    return p


def sample_fission_particle(parent, rng):
    """Isotropic fission neutron born at the parent's position."""
    p = Particle(x=parent.x, y=parent.y, z=parent.z,
                 energy=1.0, last_energy=0.0, alive=True)
    p.set_direction(rng.random() * 2.0 - 1.0, rng.random() * 2.0 * np.pi)
    return p


def sample_source_records(n, geometry, rng):
    """Vectorized sample_source_particle: n records from the source distribution.

    Args:
        n: number of particles
        geometry: Geometry (box extents)
        rng: numpy random Generator

    Returns:
        structured array of n PARTICLE_DTYPE records
    """
    rec = np.zeros(n, dtype=PARTICLE_DTYPE)
    mu = rng.random(n) * 2.0 - 1.0
    phi = rng.random(n) * 2.0 * np.pi
    rec['mu'] = mu
    rec['phi'] = phi
    rec['u'], rec['v'], rec['w'] = direction_cosines(mu, phi)
    rec['x'] = rng.random(n) * geometry.x
    rec['y'] = rng.random(n) * geometry.y
    rec['z'] = rng.random(n) * geometry.z
    rec['energy'] = 1.0
    rec['last_energy'] = 0.0
    rec['alive'] = True
    return rec


def create_source_bank(n, geometry, rng):
    """Initial source bank of n particles."""
    bank = ParticleBank(n)
    bank.extend(sample_source_records(n, geometry, rng))
    return bank
