"""
Seeded random number streams.

All sampling draws from numpy Generators (PCG64) derived from one global
seed through SeedSequence spawn keys, so every stream is reproducible and
independent of thread scheduling:

  STREAM_OTHER                      -> driver-side sampling
  STREAM_TRACK, generation, worker  -> random walks of one worker in one
                                       generation
"""
import numpy as np

from .constants import STREAM_TRACK, STREAM_OTHER


def make_stream(seed, *key):
    """Return a Generator for the sub-stream identified by *key*."""
    ss = np.random.SeedSequence(entropy=seed, spawn_key=tuple(int(k) for k in key))
    return np.random.Generator(np.random.PCG64(ss))


def other_stream(seed):
    """Stream used for source sampling, resampling and material setup."""
    return make_stream(seed, STREAM_OTHER)


def track_streams(seed, generation, n_workers):
    """One private tracking stream per worker for a given generation.

    Args:
        seed: global run seed
        generation: global generation counter (batch * n_generations + g)
        n_workers: number of workers

    Returns:
        list of Generators, index = worker index
    """
    return [make_stream(seed, STREAM_TRACK, generation, w) for w in range(n_workers)]
